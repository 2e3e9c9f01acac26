"""
Generic logger setup utilities.

Provides reusable loguru configuration with provenance tracking.
Context-specific wrappers are defined in contexts/{context}/logger.py.
Library modules only emit records; sinks are configured by entry points
(scripts, services) through setup_logger().
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

# Default level colors for console output
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
    level_colors: Optional[Dict[str, str]] = None,
) -> Optional[Path]:
    """
    Configure loguru for a context with provenance tracking.

    Sets up console output and, when log_dir is given, a DEBUG-level file sink.
    Logs execution provenance (script, command, working directory, Python version).

    Args:
        context_name: Context identifier (e.g., "compile", "render", "parse")
        log_dir: Directory for this logging session (None = console only)
        extra_provenance: Additional key-value pairs for provenance header
        console_level: Minimum level shown on the console (default: INFO)
        level_colors: Override default level colors (e.g., {"INFO": "<cyan>"})

    Returns:
        Path to log file, or None when logging to the console only

    Example:
        from texpress.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="compile",
            log_dir=Path("outs/logs/compile_20251114_123456"),
            extra_provenance={"LaTeX compiler": "pdflatex"}
        )
    """
    # Remove default logger
    logger.remove()

    colors = {**LEVEL_COLORS, **(level_colors or {})}
    for level_name, color in colors.items():
        logger.level(level_name, color=color)

    log_file = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(exist_ok=True, parents=True)
        log_file = log_dir / f"{context_name}.log"
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG")

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[Dict[str, str]] = None) -> None:
    """
    Log execution provenance to current logger.

    Args:
        extra_context: Additional key-value pairs to log
    """
    logger.debug("=" * 80)
    logger.debug(f"Script: {sys.argv[0]}")
    logger.debug(f"Command: {' '.join(sys.argv)}")
    logger.debug(f"Working directory: {Path.cwd()}")
    logger.debug(f"Python: {sys.version.split()[0]}")

    if extra_context:
        for key, value in extra_context.items():
            logger.debug(f"{key}: {value}")

    logger.debug("=" * 80)
