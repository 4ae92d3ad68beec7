"""Logging utilities for the recitation tracker."""

import logging
import sys
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(
    level: int = logging.WARNING,
    log_file: Path | None = None,
    format_string: str | None = None,
) -> None:
    """Configure logging for the tracker.

    Console output goes to stderr so it never mixes with the tables the
    CLI prints on stdout.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional path to a log file, always written at DEBUG
        format_string: Custom format string for log messages
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    root_level = level
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
        root_level = logging.DEBUG

    logging.basicConfig(level=root_level, handlers=handlers, force=True)


def level_for(verbose: bool) -> int:
    """Map the CLI verbosity flag to a logging level."""
    return logging.DEBUG if verbose else logging.WARNING


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
