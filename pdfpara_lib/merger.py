# --- pdfpara_lib/merger.py ---
"""
pdfpara_lib/merger.py: Contains the LineMerger, which rebuilds logical lines
from the fragments of a single page.
"""
import logging
import math

from .errors import MalformedPosition
from .models import Line, RawTextItem

log_merge = logging.getLogger("pdfpara.merge")


class LineMerger:
    """
    Groups positioned fragments that share a vertical band into Lines.

    Fragments are consumed in arrival order. A fragment joins the line being
    built when its band overlaps the line's band in either direction, which
    keeps sub- and superscripts attached to their line.

    Args:
        precision (int | None): Decimal places x and y are rounded to before
            comparison. None keeps the raw coordinates.
    """

    def __init__(self, precision=1):
        self.precision = precision

    def merge_page(self, items):
        """Merges the fragments of one page into an ordered list of Lines."""
        lines, current, skipped = [], None, 0
        for raw in items:
            if not raw.text or not raw.text.strip():
                continue
            try:
                item = self._normalize_item(raw)
            except MalformedPosition as e:
                skipped += 1
                log_merge.debug("Skipping fragment: %s", e)
                continue

            if current is not None and self._same_band(current, item):
                current.text += " " + item.text
                current.width += item.width
                current.url = current.url or item.url
                current.height_samples.append(item.height)
            else:
                if current is not None:
                    lines.append(current.finalize())
                current = Line.from_item(item)

        if current is not None:
            lines.append(current.finalize())
        if skipped:
            log_merge.debug("Skipped %d malformed fragment(s).", skipped)
        return lines

    def _normalize_item(self, item):
        """Validates a fragment and returns a copy with positive width."""
        for field in ("x", "y", "width", "height"):
            value = getattr(item, field, None)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise MalformedPosition(item, field)
        if item.height <= 0:
            raise MalformedPosition(item, "height")

        x, width = item.x, item.width
        if width < 0:
            x, width = x + width, -width
        y = item.y
        if self.precision is not None:
            x, y = round(x, self.precision), round(y, self.precision)
        return RawTextItem(item.text, x, y, width, item.height, item.url)

    @staticmethod
    def _same_band(line, item):
        """True when either band starts inside the other, as [y, y + height)."""
        return (
            item.y == line.y
            or line.y <= item.y < line.y + line.height
            or item.y <= line.y < item.y + item.height
        )
