# --- pdfpara_lib/reconstructor.py ---
"""
pdfpara_lib/reconstructor.py: Contains the ParagraphAssembler and the output
emitter that turn paragraphs into TextBlocks.
"""
import logging
import re

from .models import TextBlock, compute_bbox

log_assemble = logging.getLogger("pdfpara.assemble")

HEADING_BREAK_MODES = ("append", "replace")

_WHITESPACE = re.compile(r"\s+")


class ParagraphAssembler:
    """
    Joins the lines of each paragraph into text and a bounding box.

    Whitespace inside a line collapses to one space. Lines are joined with a
    single space, except after a line ending in a hyphen (the hyphen is
    kept). When a line is taller than the one after it, a heading break is
    emitted. In "append" mode the break is a newline kept
    in the output; "replace" mode reproduces the historical behaviour of
    discarding the text accumulated so far.
    """

    def __init__(self, heading_break="append"):
        if heading_break not in HEADING_BREAK_MODES:
            raise ValueError(
                f"heading_break must be one of {HEADING_BREAK_MODES}, got {heading_break!r}"
            )
        self.heading_break = heading_break

    def assemble(self, paragraph, source_key=""):
        """Builds a TextBlock from a Paragraph, or None if it has no text."""
        lines = [line for line in paragraph.lines if line]
        if not lines:
            return None
        text = self.clean_text(self._join_lines(lines))
        if not text:
            log_assemble.debug("Page %d: dropping empty paragraph.", paragraph.page_num)
            return None
        return TextBlock(text, paragraph.page_num, compute_bbox(lines), source_key)

    def _join_lines(self, lines):
        text = ""
        last = len(lines) - 1
        for j, line in enumerate(lines):
            line_text = _WHITESPACE.sub(" ", line.text).strip()
            text += line_text
            next_line = lines[j + 1] if j < last else None
            if next_line is not None and line.height > next_line.height:
                if self.heading_break == "replace":
                    text = "\n"
                else:
                    text += "\n"
            elif j < last and not line_text.endswith("-"):
                text += " "
        return text

    def clean_text(self, text):
        """Collapses spaces and removes or normalizes newline runs."""
        text = re.sub(r"[^\S\n]+", " ", text)
        text = re.sub(r"^ *\n+", "", text)
        if self.heading_break == "replace":
            text = re.sub(r" *\n+", "", text)
        else:
            text = re.sub(r" *\n+ *", "\n", text)
        return text.strip()


def emit_blocks(paragraphs_by_page, assembler, source_key=""):
    """Assembles paragraphs page by page and returns the non-empty blocks."""
    blocks = []
    for page_index in sorted(paragraphs_by_page):
        for paragraph in paragraphs_by_page[page_index]:
            block = assembler.assemble(paragraph, source_key)
            if block is not None:
                blocks.append(block)
    log_assemble.info("Emitted %d text block(s).", len(blocks))
    return blocks
