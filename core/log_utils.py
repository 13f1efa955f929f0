#!/usr/bin/env python3
"""
core/log_utils.py: Logging setup shared by the pdfpara tools.

Loggers are named `<project>.<topic>` (e.g. `pdfpara.dedup`). The topic is
shown in a fixed-width column so output from different pipeline stages lines
up, and `-d TOPICS` on the command line turns on DEBUG for selected stages.
"""

import logging

PROJECT_TOPICS = {
    "pdfpara": {
        "merge",
        "truncate",
        "dedup",
        "segment",
        "assemble",
        "pipeline",
        "provider",
        "api",
        "config",
    },
}

# Third-party loggers capped at WARNING
QUIET_LIBRARIES = ("pdfminer",)

# 256-color ANSI palette per level
LEVEL_COLORS = {
    logging.DEBUG: "\033[38;5;245m",
    logging.INFO: "\033[38;5;117m",
    logging.WARNING: "\033[38;5;221m",
    logging.ERROR: "\033[38;5;203m",
    logging.CRITICAL: "\033[38;5;199m",
}
BOLD = "\033[1m"
RESET = "\033[0m"


def _make_handler(handler, use_color):
    handler.setFormatter(RichLogFormatter(use_color=use_color))
    return handler


def resolve_debug_topics(project_name: str, debug_topics: str) -> set:
    """
    Expands a comma-separated topic list into known topic names.
    Each entry may be a prefix ('ded' selects 'dedup'); 'all' selects all.
    """
    known = PROJECT_TOPICS.get(project_name, set())
    requested = [t.strip() for t in debug_topics.split(",") if t.strip()]
    if "all" in requested:
        return set(known)
    return {topic for topic in known for r in requested if topic.startswith(r)}


def setup_logging(
    project_name: str,
    level=logging.INFO,
    color_logs=False,
    debug_topics=None,
    log_file: str = None,
):
    """Installs console and optional file handlers on the root logger."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    root.addHandler(_make_handler(logging.StreamHandler(), color_logs))
    root.setLevel(level)

    log = logging.getLogger(f"{project_name}.config")
    if log_file:
        try:
            # Files always get plain text
            root.addHandler(_make_handler(logging.FileHandler(log_file, mode="w"), False))
            log.info("Writing log to %s", log_file)
        except OSError as e:
            log.error("Cannot write log file %s: %s", log_file, e)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    if debug_topics:
        topics = resolve_debug_topics(project_name, debug_topics)
        for topic in sorted(topics):
            logging.getLogger(f"{project_name}.{topic}").setLevel(logging.DEBUG)
        log.debug("DEBUG enabled for: %s", ", ".join(sorted(topics)) or "none")


class RichLogFormatter(logging.Formatter):
    """Formats records as `LEVEL:topic   : message`, one prefix per line.

    Args:
        use_color (bool): Wrap the level in its ANSI color and the topic in
            bold. Defaults to False.
    """

    TOPIC_WIDTH = 8

    def __init__(self, use_color=False):
        super().__init__()
        self.use_color = use_color

    def _topic(self, name):
        _, _, topic = name.partition(".")
        return (topic or name)[: self.TOPIC_WIDTH]

    def format(self, record):
        level = f"{record.levelname[:5]:<5}"
        topic = f"{self._topic(record.name):<{self.TOPIC_WIDTH}}"
        if self.use_color:
            level = f"{LEVEL_COLORS.get(record.levelno, '')}{level}{RESET}"
            topic = f"{BOLD}{topic}{RESET}"
        prefix = f"{level}:{topic}: "

        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return "\n".join(prefix + line for line in message.split("\n"))
