# --- pdfpara_lib/pipeline.py ---
"""
pdfpara_lib/pipeline.py: Orchestrates the reconstruction of paragraphs from
the pages supplied by a PageProvider.

Stage 1 fetches pages strictly in order, merging fragments into lines and
truncating reference sections. Stage 2 removes lines repeated across pages.
Stage 3 segments each page into paragraphs and assembles the text blocks.
"""
import asyncio
import logging

from .errors import ExtractionFailure
from .merger import LineMerger
from .reconstructor import ParagraphAssembler, emit_blocks
from .scanner import CrossPageDeduplicator
from .segmenter import ParagraphSegmenter
from .truncator import DEFAULT_HEADING_PATTERN, ReferenceTruncator

log = logging.getLogger("pdfpara.pipeline")

_TRUE = {"1", "yes", "true", "on"}


class PipelineOptions:
    """Tunable parameters of every pipeline stage."""

    def __init__(
        self,
        precision=1,
        truncate=True,
        heading_pattern=DEFAULT_HEADING_PATTERN,
        min_depth=0.9,
        dedup=True,
        margin=0.2,
        max_interior_repeats=3,
        max_pages=None,
        workers=1,
        min_lines=5,
        gap_factor=2.0,
        keyword_pattern=r"abstract",
        heading_break="append",
    ):
        self.precision = precision
        self.truncate = truncate
        self.heading_pattern = heading_pattern
        self.min_depth = min_depth
        self.dedup = dedup
        self.margin = margin
        self.max_interior_repeats = max_interior_repeats
        self.max_pages = max_pages
        self.workers = workers
        self.min_lines = min_lines
        self.gap_factor = gap_factor
        self.keyword_pattern = keyword_pattern
        self.heading_break = heading_break

    @classmethod
    def from_settings(cls, settings: dict):
        """Builds options from the string settings of a ConfigService."""
        merge = settings.get("Merge", {})
        trunc = settings.get("Truncate", {})
        dedup = settings.get("Dedup", {})
        seg = settings.get("Segment", {})
        asm = settings.get("Assemble", {})
        defaults = cls()
        max_pages = dedup.get("max_pages", "")
        return cls(
            precision=int(merge.get("precision", defaults.precision)),
            truncate=str(trunc.get("enabled", "true")).lower() in _TRUE,
            heading_pattern=trunc.get("heading_pattern", defaults.heading_pattern),
            min_depth=float(trunc.get("min_depth", defaults.min_depth)),
            dedup=str(dedup.get("enabled", "true")).lower() in _TRUE,
            margin=float(dedup.get("margin", defaults.margin)),
            max_interior_repeats=int(
                dedup.get("max_interior_repeats", defaults.max_interior_repeats)
            ),
            max_pages=int(max_pages) if str(max_pages).strip() else None,
            workers=int(dedup.get("workers", defaults.workers)),
            min_lines=int(seg.get("min_lines", defaults.min_lines)),
            gap_factor=float(seg.get("gap_factor", defaults.gap_factor)),
            keyword_pattern=seg.get("keyword_pattern", defaults.keyword_pattern),
            heading_break=asm.get("heading_break", defaults.heading_break),
        )


def _notify(progress, page_index, total_pages):
    """Calls the progress observer, which must never affect the result."""
    if progress is None:
        return
    try:
        progress(page_index, total_pages)
    except Exception as e:
        log.warning("Progress callback failed on page %d: %s", page_index, e)


async def collect_page_lines(
    provider, merger, truncator=None, page_indexes=None, progress=None, cancel=None
):
    """
    [STAGE 1] Fetches pages in increasing order and builds the PageLineSet.

    Returns:
        tuple[dict, dict]: lines per page index and PageSize per page index.
    """
    total = await provider.page_count()
    page_lines, page_sizes = {}, {}
    if total == 0:
        log.info("Document has no pages.")
        return page_lines, page_sizes

    log.info("--- Stage 1: Reading %d page(s) ---", total)
    for index in range(total):
        if page_indexes is not None and index not in page_indexes:
            continue
        if cancel is not None and cancel.is_set():
            log.warning("Cancelled before page %d. Continuing with %d page(s).",
                        index, len(page_lines))
            break
        try:
            page = await provider.get_page(index)
        except ExtractionFailure as e:
            log.warning("%s. Skipping.", e)
            continue

        lines = merger.merge_page(page.items)
        stop = False
        if truncator is not None:
            lines, stop = truncator.truncate(lines, index, total)
        page_lines[index], page_sizes[index] = lines, page.size
        log.debug("Page %d: %d line(s).", index, len(lines))
        _notify(progress, index, total)
        if stop:
            log.info("Reference section found on page %d. Stopping.", index)
            break
    return page_lines, page_sizes


async def reconstruct(
    provider, source_key="", options=None, page_indexes=None, progress=None, cancel=None
):
    """
    Runs the full pipeline and returns the ordered list of TextBlocks.

    Args:
        provider (PageProvider): Source of the page fragments.
        source_key (str): Key copied into every TextBlock.
        options (PipelineOptions | None): Stage parameters.
        page_indexes (set[int] | None): 0-based pages to read, None for all.
        progress (callable | None): Called with (page_index, total_pages).
        cancel (asyncio.Event | None): Checked between pages.

    Raises:
        ProviderUnavailable: If the provider cannot be reached at all.
    """
    options = options or PipelineOptions()
    merger = LineMerger(precision=options.precision)
    truncator = (
        ReferenceTruncator(options.heading_pattern, options.min_depth)
        if options.truncate
        else None
    )
    page_lines, page_sizes = await collect_page_lines(
        provider, merger, truncator, page_indexes, progress, cancel
    )
    if not page_lines:
        return []

    if options.dedup:
        log.info("--- Stage 2: Removing lines repeated across pages ---")
        deduplicator = CrossPageDeduplicator(
            margin=options.margin,
            max_interior_repeats=options.max_interior_repeats,
            max_pages=options.max_pages,
            workers=options.workers,
        )
        page_lines = deduplicator.deduplicate(page_lines, page_sizes)

    log.info("--- Stage 3: Segmenting and assembling paragraphs ---")
    segmenter = ParagraphSegmenter(
        min_lines=options.min_lines,
        gap_factor=options.gap_factor,
        keyword_pattern=options.keyword_pattern,
    )
    paragraphs = {
        index: segmenter.segment_page(lines, index) for index, lines in page_lines.items()
    }
    assembler = ParagraphAssembler(options.heading_break)
    return emit_blocks(paragraphs, assembler, source_key)


def reconstruct_sync(provider, source_key="", options=None, page_indexes=None, progress=None):
    """Blocking wrapper around `reconstruct` for callers without a loop."""
    return asyncio.run(
        reconstruct(provider, source_key, options, page_indexes, progress)
    )
