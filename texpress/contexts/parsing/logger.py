"""
Parsing context logger.

Provides logging interface for parsing context with automatic [parse] prefix.
All parsing modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from texpress.utils.logger import setup_logger as _setup_logger
from texpress.utils.text_processing import truncate_display

CONTEXT_PREFIX = "[parse]"


def setup_parsing_logger(log_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Setup logger for parsing context.

    Args:
        log_dir: Directory for this parsing session (None = console only)

    Returns:
        Path to log file, or None
    """
    return _setup_logger(context_name="parse", log_dir=log_dir)


# Wrapper functions with automatic [parse] prefix


def _log_info(message: str) -> None:
    """Log info message with [parse] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [parse] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [parse] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level parsing-specific logging helpers


def log_parse_start(markup_length: int, has_document_env: bool) -> None:
    """Log the start of a parse."""
    env = "with" if has_document_env else "without"
    _log_debug(f"Parsing {markup_length} chars of markup ({env} document environment)")


def log_field_found(field_name: str, value: str, rule: str) -> None:
    """Log a resolved header field and the rule that produced it."""
    _log_debug(f"Found {field_name} via {rule}: {truncate_display(value, 60)}")


def log_field_missing(field_name: str) -> None:
    """Log a header field no rule could resolve."""
    _log_debug(f"No {field_name} found in header")


def log_marker_fallback(command: str, count: int) -> None:
    """Log that an alternative sectioning command was used."""
    _log_info(f"No \\section markers; using \\{command} ({count} found)")


def log_section_dropped(title: str, content_length: int) -> None:
    """Log a section discarded as noise."""
    _log_debug(f"Dropped section '{title}' ({content_length} chars of content)")


def log_parse_result(document) -> None:  # Document
    """Log a one-line summary of the parsed document."""
    titles = ", ".join(section.title for section in document.sections) or "none"
    _log_info(f"Parsed '{document.name or '(no name)'}' with {len(document.sections)} sections")
    _log_debug(f"  Sections: {titles}")
    if not document.sections:
        _log_warning("Document has no sections; only the header will render")
