# --- pdfpara_lib/providers.py ---
"""
pdfpara_lib/providers.py: Page providers that supply positioned text
fragments to the reconstruction pipeline.
"""
import asyncio
import logging
import os
import re

from pdfminer.high_level import extract_pages
from pdfminer.layout import LAParams, LTAnno, LTChar, LTTextLine
from pdfminer.pdfdocument import PDFDocument
from pdfminer.pdfpage import PDFPage
from pdfminer.pdfparser import PDFParser
from pdfminer.psparser import PSException

from .errors import ExtractionFailure, ProviderUnavailable
from .models import PageContent, PageSize, RawTextItem

log_provider = logging.getLogger("pdfpara.provider")


class PageProvider:
    """
    Interface of a page source. Pages are requested one at a time, in
    increasing index order, and may be loaded lazily.
    """

    async def page_count(self) -> int:
        raise NotImplementedError

    async def get_page(self, index) -> PageContent:
        raise NotImplementedError

    def close(self):
        """Releases any resources held between page requests."""


class MemoryProvider(PageProvider):
    """Serves pages that were already extracted by the caller."""

    def __init__(self, pages):
        self.pages: list[PageContent] = list(pages)

    async def page_count(self):
        return len(self.pages)

    async def get_page(self, index):
        if not 0 <= index < len(self.pages):
            raise ExtractionFailure(index, "page index out of range")
        return self.pages[index]


class PdfMinerProvider(PageProvider):
    """
    Reads text fragments from a PDF file with pdfminer.

    A fragment is a run of characters inside one pdfminer text line that
    share a font name and size. Parsing happens in a worker thread, one page
    per request, by advancing a single `extract_pages` generator.

    Args:
        pdf_path (str): The file path to the PDF.
        laparams (LAParams | None): Layout parameters handed to pdfminer.
    """

    def __init__(self, pdf_path, laparams=None):
        self.pdf_path = pdf_path
        self.laparams = laparams or LAParams()
        self._count = None
        self._pages = None
        self._next_index = 0

    async def page_count(self):
        if self._count is None:
            self._count = await asyncio.to_thread(self._count_pages)
        return self._count

    async def get_page(self, index):
        layout = await asyncio.to_thread(self._read_layout, index)
        return self.page_from_layout(index, layout)

    def _count_pages(self):
        if not os.path.exists(self.pdf_path):
            raise ProviderUnavailable(f"PDF file not found: {self.pdf_path}")
        try:
            with open(self.pdf_path, "rb") as fp:
                document = PDFDocument(PDFParser(fp))
                count = sum(1 for _ in PDFPage.create_pages(document))
        except (OSError, PSException) as e:
            raise ProviderUnavailable(f"Cannot open {self.pdf_path}: {e}") from e
        log_provider.info("Opened %s (%d pages).", self.pdf_path, count)
        return count

    def close(self):
        """Closes the layout generator and with it the PDF file."""
        if self._pages is not None:
            self._pages.close()
            self._pages = None

    def _read_layout(self, index):
        if self._pages is None or index != self._next_index:
            if index == 0:
                numbers = None
            else:
                if self._count is None:
                    self._count = self._count_pages()
                numbers = range(index, self._count)
            self.close()
            self._pages = extract_pages(
                self.pdf_path, page_numbers=numbers, laparams=self.laparams
            )
            self._next_index = index
        try:
            layout = next(self._pages)
        except StopIteration as e:
            self._pages = None
            raise ExtractionFailure(index, "no such page") from e
        except Exception as e:
            # A failing generator is finished, the next request reopens the file
            self._pages = None
            raise ExtractionFailure(index, str(e)) from e
        self._next_index = index + 1
        return layout

    @classmethod
    def page_from_layout(cls, index, layout):
        """Converts a pdfminer LTPage into a PageContent."""
        lines = sorted(
            cls._find_elements_by_type(layout, LTTextLine),
            key=lambda x: (-x.y1, x.x0),
        )
        items = []
        for line in lines:
            items.extend(cls._runs_from_line(line, layout.x0, layout.y0))
        log_provider.debug("Page %d: %d fragment(s).", index, len(items))
        return PageContent(index, items, PageSize(layout.width, layout.height))

    @staticmethod
    def _runs_from_line(line, origin_x, origin_y):
        """Splits a text line into runs of characters with the same font."""
        runs, chars, key = [], [], None

        def flush():
            glyphs = [c for c in chars if isinstance(c, LTChar)]
            if glyphs:
                x0 = min(c.x0 for c in glyphs)
                x1 = max(c.x1 for c in glyphs)
                runs.append(
                    RawTextItem(
                        text=re.sub(r"\s+", " ", "".join(c.get_text() for c in chars)).strip(),
                        x=round(x0 - origin_x, 2),
                        y=round(min(c.y0 for c in glyphs) - origin_y, 2),
                        width=round(x1 - x0, 2),
                        height=round(glyphs[0].size, 1),
                    )
                )

        for char in line:
            if isinstance(char, LTAnno):
                if chars:
                    chars.append(char)
                continue
            if not isinstance(char, LTChar):
                continue
            char_key = (char.fontname, round(char.size, 1))
            if key is not None and char_key != key:
                flush()
                chars = []
            key = char_key
            chars.append(char)
        flush()
        return runs

    @classmethod
    def _find_elements_by_type(cls, obj, t):
        """Recursively collects layout elements of a given type."""
        if isinstance(obj, t):
            return [obj]
        found = []
        if hasattr(obj, "_objs"):
            for child in obj:
                found.extend(cls._find_elements_by_type(child, t))
        return found
