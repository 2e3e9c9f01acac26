"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

from texpress.utils.timestamp import format_elapsed

CONTEXT_PREFIX = "[render]"


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(name: str, num_sections: int) -> None:
    """Log start of a layout render."""
    _log_info(f"Rendering '{name}' ({num_sections} sections)")


def log_page_break(page_number: int) -> None:
    _log_debug(f"  Page {page_number} full, continuing on page {page_number + 1}")


def log_render_result(num_pages: int, size_bytes: int, elapsed: float) -> None:
    """Log a finished render."""
    _log_success(f"Rendered {num_pages} page(s), {size_bytes} bytes ({format_elapsed(elapsed)})")


def log_render_failure(error: Exception) -> None:
    _log_error(f"Layout render failed: {error}")


def log_html_conversion(markup_length: int, html_length: int) -> None:
    _log_debug(f"Converted {markup_length} chars of markup to {html_length} chars of HTML")
