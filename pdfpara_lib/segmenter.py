# --- pdfpara_lib/segmenter.py ---
"""
pdfpara_lib/segmenter.py: Contains the ParagraphSegmenter, which groups the
surviving lines of a page into paragraphs.
"""
import logging
import re

from .models import Paragraph

log_segment = logging.getLogger("pdfpara.segment")


class ParagraphSegmenter:
    """
    Splits a page's lines into paragraphs using font, spacing and indentation
    cues. A paragraph is only ever closed once it holds `min_lines` lines.

    Args:
        min_lines (int): Lines a paragraph needs before it can be closed.
        gap_factor (float): Vertical gap, in current-line heights, that
            starts a new paragraph.
        keyword_pattern (str): Lines matching this start a new paragraph.
    """

    def __init__(self, min_lines=5, gap_factor=2.0, keyword_pattern=r"abstract"):
        self.min_lines = min_lines
        self.gap_factor = gap_factor
        self.keyword = re.compile(keyword_pattern, re.I)

    def segment_page(self, lines, page_index):
        """Groups lines into an ordered list of Paragraphs."""
        if not lines:
            return []
        paras = [Paragraph([lines[0]], page_index)]
        for i in range(1, len(lines)):
            current = paras[-1]
            line = lines[i]
            next_line = lines[i + 1] if i + 1 < len(lines) else None
            reason = self._break_reason(current, line, next_line)
            if reason:
                log_segment.debug(
                    "Page %d: new paragraph at line %d (%s).", page_index, i, reason
                )
                paras.append(Paragraph([line], page_index))
            else:
                current.lines.append(line)
        log_segment.debug("Page %d: %d paragraph(s).", page_index, len(paras))
        return paras

    def _break_reason(self, para, line, next_line):
        """Returns why a new paragraph starts at `line`, or None."""
        if len(para) < self.min_lines:
            return None
        prev = para.last_line
        if any(all(h > p for p in prev.height_samples) for h in line.height_samples):
            return "font size jump"
        if self.keyword.search(line.text):
            return "keyword"
        if abs(prev.y - line.y) > line.height * self.gap_factor:
            return "vertical gap"
        if line.x > prev.x and next_line is not None and next_line.x < line.x:
            return "first-line indent"
        return None
