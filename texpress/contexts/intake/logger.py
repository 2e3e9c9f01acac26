"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from texpress.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this session (None = console only)

    Returns:
        Path to log file, or None
    """
    return _setup_logger(context_name="intake", log_dir=log_dir)


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_validation_start(markup_bytes: int, filename: Optional[str]) -> None:
    """Log the size and filename of the input under inspection."""
    _log_debug(f"Validating {markup_bytes} bytes of markup (filename: {filename or '-'})")


def log_validation_result(report) -> None:  # ValidationReport
    """Log the outcome of a validation pass, one line per violation."""
    if report.is_valid:
        _log_debug("Input accepted")
        return
    _log_warning(f"Input rejected with {len(report.violations)} violation(s)")
    for violation in report.violations:
        _log_warning(f"  {violation.kind}: {violation.message}")
