# --- pdfpara_lib/api.py ---
import hashlib
import logging
import os

from .pipeline import PipelineOptions, reconstruct_sync
from .providers import PdfMinerProvider

log = logging.getLogger("pdfpara.api")


def parse_page_selection(pages_str: str) -> set | None:
    """Parses a page selection string (e.g., '1,3,5-7') into a set of integers."""
    if pages_str.lower() == "all":
        return None
    pages = set()
    try:
        for p in pages_str.split(","):
            part = p.strip()
            if "-" in part:
                s, e = map(int, part.split("-"))
                pages.update(range(s, e + 1))
            else:
                pages.add(int(part))
        return pages
    except ValueError:
        log.error("Invalid page selection format: %s. Defaulting to 'all'.", pages_str)
        return None


def file_source_key(pdf_path: str) -> str:
    """Returns the MD5 hex digest of a file, used as a content-derived key."""
    digest = hashlib.md5()
    with open(pdf_path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 16), b""):
            digest.update(chunk)
    return digest.hexdigest()


def chunk_blocks(blocks, max_size: int):
    """
    Groups TextBlocks into chunks of at most `max_size` characters.
    A block larger than `max_size` becomes a chunk on its own.
    Yields each chunk as a string.
    """
    current_chunk_parts = []
    current_chunk_size = 0

    for block in blocks:
        size = len(block.content)
        # The +2 accounts for the blank line joiner.
        if current_chunk_parts and current_chunk_size + size + 2 > max_size:
            yield "\n\n".join(current_chunk_parts)
            current_chunk_parts = [block.content]
            current_chunk_size = size
        else:
            current_chunk_parts.append(block.content)
            current_chunk_size += size + 2

    if current_chunk_parts:
        yield "\n\n".join(current_chunk_parts)


def process_pdf_text(
    pdf_path: str,
    options: PipelineOptions | None = None,
    pages_str: str = "all",
    source_key: str | None = None,
    progress=None,
):
    """
    Reconstructs the paragraphs of a PDF file into a list of TextBlocks.
    """
    if not os.path.exists(pdf_path):
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")

    if source_key is None:
        source_key = file_source_key(pdf_path)
    selection = parse_page_selection(pages_str)
    page_indexes = {p - 1 for p in selection} if selection else None

    provider = PdfMinerProvider(pdf_path)
    try:
        blocks = reconstruct_sync(provider, source_key, options, page_indexes, progress)
    finally:
        provider.close()
    log.info("Reconstructed %d block(s) from %s.", len(blocks), pdf_path)
    return blocks
