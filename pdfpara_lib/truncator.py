# --- pdfpara_lib/truncator.py ---
"""
pdfpara_lib/truncator.py: Contains the ReferenceTruncator, which cuts the
bibliography and acknowledgement tail off a document.
"""
import logging
import re

log_truncate = logging.getLogger("pdfpara.truncate")

DEFAULT_HEADING_PATTERN = r"(r?eferences?|acknowledgements?|bibliography)$"


class ReferenceTruncator:
    """
    Finds the first bibliography-like heading on a page and drops everything
    from that line on.

    A heading found deep enough into the document (page depth at or above
    `min_depth`) marks the end of the content and stops the scan of the
    remaining pages. Earlier matches are treated as coincidental mentions
    and only shorten the page they were found on.
    """

    def __init__(self, pattern=DEFAULT_HEADING_PATTERN, min_depth=0.9):
        self.pattern = re.compile(pattern, re.I)
        self.min_depth = min_depth

    def find_heading(self, lines):
        """Returns the index of the first heading line, or -1."""
        for i, line in enumerate(lines):
            if self.pattern.search(line.text.strip()):
                return i
        return -1

    def truncate(self, lines, page_index, total_pages):
        """
        Truncates a page's lines at the first heading.

        Returns:
            tuple[list[Line], bool]: the kept lines and whether the caller
            should stop processing further pages.
        """
        index = self.find_heading(lines)
        if index == -1:
            return lines, False

        depth = page_index / total_pages if total_pages else 0
        stop = depth >= self.min_depth
        log_truncate.debug(
            "Page %d: heading '%s' at line %d (depth %.2f). %s",
            page_index,
            lines[index].text.strip(),
            index,
            depth,
            "End of content." if stop else "Truncating page only.",
        )
        return lines[:index], stop
