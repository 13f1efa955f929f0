# --- pdfpara_lib/errors.py ---
"""
pdfpara_lib/errors.py: Exceptions raised by the reconstruction pipeline.
"""


class PdfParaError(Exception):
    """Base class for all pdfpara errors."""


class ProviderUnavailable(PdfParaError):
    """The page provider cannot be reached or opened at all."""


class ExtractionFailure(PdfParaError):
    """The provider could not supply the content of a single page."""

    def __init__(self, page_index, reason=""):
        self.page_index = page_index
        self.reason = reason
        super().__init__(f"Could not extract page {page_index}: {reason}")


class MalformedPosition(PdfParaError):
    """A text fragment has missing or non-finite coordinates."""

    def __init__(self, item, field):
        self.item = item
        self.field = field
        super().__init__(f"Fragment {item!r} has an invalid '{field}'")
