# --- pdfpara_lib/scanner.py ---
"""
pdfpara_lib/scanner.py: Contains the CrossPageDeduplicator for running
header, footer and page number removal.
"""
import logging
import re
from concurrent.futures import ThreadPoolExecutor

from .models import (
    CLEAN,
    Box,
    EdgeRepeatBackward,
    EdgeRepeatForward,
    InteriorRepeat,
)

log_dedup = logging.getLogger("pdfpara.dedup")

_CAPS_TOKEN = re.compile(r"^[A-Z]{1,3}$")
_SPACE_AND_DIGITS = re.compile(r"[\s\d]+")


def normalize_text(text):
    """Reduces a line's text to the part that stays constant across pages."""
    text = text.strip()
    # Short all-caps tokens are usually section abbreviations or roman numerals
    if _CAPS_TOKEN.match(text):
        return ""
    return _SPACE_AND_DIGITS.sub("", text)


class _PageView:
    """Read-only, precomputed comparison data for the lines of one page."""

    def __init__(self, lines, size):
        self.lines = lines
        self.texts = [normalize_text(line.text) for line in lines]
        self.boxes = [line.normalized_box(size) for line in lines]
        self.blank = [not line.text.strip() for line in lines]

    def __len__(self):
        return len(self.lines)

    def matches(self, i, other, j):
        """True if line i of this page repeats line j of the other page."""
        if self.blank[i] or other.blank[j]:
            return False
        return self.texts[i] == other.texts[j] and self.boxes[i].intersects(other.boxes[j])


class CrossPageDeduplicator:
    """
    Detects lines that repeat at consistent positions across pages.

    Two scans run for every ordered pair of pages. The edge-anchored scan
    walks both line sequences inward from the top and from the bottom and
    stops each direction at the first mismatch. The interior scan compares
    every line lying outside the protected central region against all the
    lines of the other page and counts the matches.

    The cost is O(pages^2 * lines^2). `max_pages` bounds the number of other
    pages each page is compared against (the nearest ones by index).

    Args:
        margin (float): Width of the unprotected border, as a page fraction.
        max_interior_repeats (int): Interior matches tolerated before removal.
        max_pages (int | None): Cap on compared pages per page.
        workers (int): Thread count for scanning pages concurrently.
    """

    def __init__(self, margin=0.2, max_interior_repeats=3, max_pages=None, workers=1):
        self.protected = Box(left=margin, right=1 - margin, top=1 - margin, bottom=margin)
        self.max_interior_repeats = max_interior_repeats
        self.max_pages = max_pages
        self.workers = max(1, workers)

    def deduplicate(self, page_lines, page_sizes):
        """
        Flags repeated lines on every page and returns the surviving ones.

        Args:
            page_lines (dict[int, list[Line]]): The document's PageLineSet.
            page_sizes (dict[int, PageSize]): Dimensions of every page.

        Returns:
            dict[int, list[Line]]: Surviving lines per page, same order.
        """
        log_dedup.info("--- Deduplicating repeated lines across %d pages ---", len(page_lines))
        views = {i: _PageView(lines, page_sizes[i]) for i, lines in page_lines.items()}
        order = sorted(views)

        if self.workers > 1 and len(order) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                all_states = list(pool.map(lambda i: self.scan_page(i, views), order))
        else:
            all_states = [self.scan_page(i, views) for i in order]

        survivors = {}
        for page_index, states in zip(order, all_states):
            lines = page_lines[page_index]
            for line, state in zip(lines, states):
                line.state = state
            survivors[page_index] = [line for line in lines if not line.is_removed]
            removed = len(lines) - len(survivors[page_index])
            if removed:
                log_dedup.debug("Page %d: removed %d repeated line(s).", page_index, removed)
        return survivors

    def scan_page(self, page_index, views):
        """Computes the dedup state of every line of one page."""
        view = views[page_index]
        n = len(view)
        forward, backward = [False] * n, [False] * n
        counts, links = [0] * n, [None] * n
        exposed = [i for i in range(n) if not view.boxes[i].intersects(self.protected)]

        for other_index in self._other_pages(page_index, views):
            other = views[other_index]
            self._scan_edges(view, other, forward, backward)
            for i in exposed:
                for j in range(len(other)):
                    if view.matches(i, other, j):
                        counts[i] += 1
                        links[i] = (other_index, j)

        states = []
        for i in range(n):
            if forward[i]:
                states.append(EdgeRepeatForward())
            elif backward[i]:
                states.append(EdgeRepeatBackward())
            elif counts[i]:
                states.append(
                    InteriorRepeat(counts[i], links[i], threshold=self.max_interior_repeats)
                )
            else:
                states.append(CLEAN)
        return states

    @staticmethod
    def _scan_edges(view, other, forward, backward):
        """Walks both pages inward from each end until the first mismatch."""
        n, m = len(view), len(other)
        fwd_open, bwd_open = True, True
        for offset in range(min(n, m)):
            if fwd_open:
                if view.matches(offset, other, offset):
                    forward[offset] = True
                else:
                    fwd_open = False
            if bwd_open:
                i, j = n - 1 - offset, m - 1 - offset
                if view.matches(i, other, j):
                    backward[i] = True
                else:
                    bwd_open = False
            if not (fwd_open or bwd_open):
                break

    def _other_pages(self, page_index, views):
        others = [i for i in sorted(views) if i != page_index]
        if self.max_pages is not None and len(others) > self.max_pages:
            log_dedup.debug(
                "Page %d: comparing against %d of %d pages.",
                page_index,
                self.max_pages,
                len(others),
            )
            nearest = sorted(others, key=lambda i: (abs(i - page_index), i))
            others = sorted(nearest[: self.max_pages])
        return others
