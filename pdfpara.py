#!/usr/bin/env python3
"""
pdfpara: Reconstructs clean paragraphs from the text layout of a PDF file.

Fragments are merged into lines, running headers and footers repeated across
pages are removed, the reference section is cut off, and the remaining lines
are grouped into paragraphs with page and bounding-box provenance.
"""

import argparse
import json
import logging
import sys
import time

# --- Dependency Imports ---
try:
    from rich.console import Console
    from rich.panel import Panel
    from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
except ImportError as e:
    print(f"Error: Missing required library. -> {e}")
    print("Please install all core dependencies with:")
    print("pip install pdfminer.six rich")
    sys.exit(1)

# --- Local Application Imports ---
from core.config import ConfigService
from core.log_utils import setup_logging
from pdfpara_lib.api import chunk_blocks, process_pdf_text
from pdfpara_lib.errors import ProviderUnavailable
from pdfpara_lib.pipeline import PipelineOptions
from pdfpara_lib.reconstructor import HEADING_BREAK_MODES


# --- CUSTOM ARGPARSE FORMATTER ---
class CustomHelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawTextHelpFormatter
):
    """
    A custom argparse formatter that combines showing default values with
    preserving newline formatting in help text.
    """

    pass


class Application:
    """Runs the paragraph reconstruction based on command-line arguments."""

    def __init__(self, args, console=None):
        self.args = args
        self.console = console or Console()
        self.stats = {}

    def build_options(self):
        """Merges config file settings with command-line overrides."""
        if self.args.config:
            settings = ConfigService(self.args.config).get_settings()
            options = PipelineOptions.from_settings(settings)
        else:
            options = PipelineOptions()
        if self.args.heading_break:
            options.heading_break = self.args.heading_break
        if self.args.no_dedup:
            options.dedup = False
        if self.args.no_truncate:
            options.truncate = False
        if self.args.max_pages is not None:
            options.max_pages = self.args.max_pages
        return options

    def run(self):
        """Main entry point for the application logic."""
        setup_logging(
            project_name="pdfpara",
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
        )
        options = self.build_options()
        start = time.monotonic()

        progress = Progress(
            TextColumn("[bold sky_blue2]Reading PDF"),
            BarColumn(),
            MofNCompleteColumn(),
            console=self.console,
            transient=True,
        )
        with progress:
            task = progress.add_task("read", total=None)

            def on_page(page_index, total_pages):
                progress.update(task, completed=page_index + 1, total=total_pages)

            blocks = process_pdf_text(
                self.args.pdf_file,
                options,
                pages_str=self.args.pages,
                progress=on_page,
            )
        self.stats["duration"] = time.monotonic() - start
        self.stats["blocks"] = len(blocks)

        if not blocks:
            logging.getLogger("pdfpara").error("No content could be extracted.")
            return 1

        if self.args.output_file:
            with open(self.args.output_file, "w", encoding="utf-8") as f:
                json.dump([b.to_dict() for b in blocks], f, ensure_ascii=False, indent=2)
            logging.getLogger("pdfpara").info("Saved %d blocks to %s", len(blocks),
                                              self.args.output_file)
        if self.args.chunk_size:
            self._print_chunks(list(chunk_blocks(blocks, self.args.chunk_size)))
        elif self.args.format == "json":
            self.console.print_json(data=[b.to_dict() for b in blocks])
        else:
            self._print_blocks(blocks)
        logging.getLogger("pdfpara").info(
            "Done: %d blocks in %.2fs.", self.stats["blocks"], self.stats["duration"]
        )
        return 0

    def _print_chunks(self, chunks):
        if self.args.format == "json":
            self.console.print_json(data=chunks)
            return
        for i, chunk in enumerate(chunks, 1):
            self.console.print(
                Panel(
                    chunk,
                    title=f"Chunk {i}/{len(chunks)}",
                    title_align="left",
                    subtitle=f"{len(chunk)} chars",
                    subtitle_align="right",
                    border_style="grey50",
                )
            )

    def _print_blocks(self, blocks):
        for block in blocks:
            box = block.box
            subtitle = (
                f"l={box.left:.1f} r={box.right:.1f} "
                f"t={box.top:.1f} b={box.bottom:.1f}"
            )
            self.console.print(
                Panel(
                    block.content,
                    title=f"Page {block.page + 1}",
                    title_align="left",
                    subtitle=subtitle,
                    subtitle_align="right",
                    border_style="grey50",
                )
            )

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            "  python pdfpara.py paper.pdf",
            "  python pdfpara.py paper.pdf -p 1-4 --format json",
            "  python pdfpara.py paper.pdf -o blocks.json -d dedup,segment --color-logs",
        ]
        parser = argparse.ArgumentParser(
            description="Reconstructs paragraphs from the text layout of a PDF.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )

        g_opts = parser.add_argument_group("Main Options")
        g_opts.add_argument("pdf_file", help="Path to the input PDF file.")
        g_opts.add_argument(
            "-h",
            "--help",
            action="help",
            help="Show this help message and exit.",
        )
        g_opts.add_argument(
            "-c",
            "--config",
            metavar="FILE",
            default=None,
            help="INI file with pipeline settings (created with defaults if missing).",
        )

        g_proc = parser.add_argument_group("Processing Control")
        g_proc.add_argument(
            "-p",
            "--pages",
            default="all",
            metavar="PAGES",
            help="Pages to process (e.g., '1,3,5-7'). (default: %(default)s)",
        )
        g_proc.add_argument(
            "--heading-break",
            choices=HEADING_BREAK_MODES,
            default=None,
            help="How a taller line followed by a smaller one is joined.",
        )
        g_proc.add_argument(
            "--no-dedup",
            action="store_true",
            help="Disable repeated header/footer removal. (default: %(default)s)",
        )
        g_proc.add_argument(
            "--no-truncate",
            action="store_true",
            help="Keep the reference section. (default: %(default)s)",
        )
        g_proc.add_argument(
            "--max-pages",
            type=int,
            default=None,
            metavar="N",
            help="Compare each page against at most N other pages.",
        )

        g_out = parser.add_argument_group("Script Output")
        g_out.add_argument(
            "-o",
            "--output-file",
            default=None,
            metavar="FILE",
            help="Save the blocks as JSON.",
        )
        g_out.add_argument(
            "-f",
            "--format",
            choices=["text", "json"],
            default="text",
            help="Console output format. (default: %(default)s)",
        )
        g_out.add_argument(
            "--chunk-size",
            type=int,
            default=None,
            metavar="CHARS",
            help="Print the text grouped into chunks of at most CHARS characters,\n"
            "never splitting a paragraph.",
        )
        g_out.add_argument(
            "--log-file",
            metavar="FILE",
            default=None,
            help="Redirect all logging output to a specified file.",
        )
        g_out.add_argument(
            "--color-logs",
            action="store_true",
            help="Enable colored logging output. (default: %(default)s)",
        )
        g_out.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable INFO logging for detailed progress. (default: %(default)s)",
        )
        g_out.add_argument(
            "-d",
            "--debug",
            nargs="?",
            const="all",
            dest="debug_topics",
            metavar="TOPICS",
            help="Enable DEBUG logging (all,merge,truncate,dedup,segment,assemble,...).",
        )

        return parser.parse_args(args)


def main():
    """Main entry point for the script."""
    # Basic logging config for early errors before full setup
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        args = Application.parse_arguments(sys.argv[1:])
        sys.exit(Application(args).run())
    except (FileNotFoundError, ProviderUnavailable) as e:
        logging.getLogger("pdfpara").critical(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logging.getLogger("pdfpara").info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        logging.getLogger("pdfpara").critical(
            "\nAn unexpected error occurred: %s", e, exc_info=True
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
