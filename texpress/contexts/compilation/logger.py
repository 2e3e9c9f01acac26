"""
Compilation context logger.

Provides logging interface for compilation context with automatic [compile] prefix.
All compilation modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from texpress.utils.logger import setup_logger as _setup_logger
from texpress.utils.settings import get_settings
from texpress.utils.timestamp import format_elapsed

CONTEXT_PREFIX = "[compile]"


def setup_compilation_logger(log_dir: Optional[Path] = None, console_level: str = "INFO"):
    """
    Setup logger for compilation context.

    Configures loguru with provenance tracking and the configured backends.

    Args:
        log_dir: Directory for this compilation session (None = console only)
        console_level: Minimum console level (e.g., "DEBUG" for verbose runs)

    Returns:
        Path to log file, or None

    Example:
        from texpress.contexts.compilation.logger import setup_compilation_logger

        setup_compilation_logger(Path("outs/logs/compile_20251114_123456"))
    """
    compilation = get_settings().compilation
    return _setup_logger(
        context_name="compile",
        log_dir=log_dir,
        console_level=console_level,
        extra_provenance={
            "LaTeX compiler": compilation.latex_compiler,
            "Docker image": compilation.docker_image,
            "Remote endpoint": compilation.remote_url,
            "Fallback order": ", ".join(compilation.fallback_order),
        },
    )


# Wrapper functions with automatic [compile] prefix


def _log_info(message: str) -> None:
    """Log info message with [compile] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [compile] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [compile] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [compile] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [compile] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level compilation-specific logging helpers


def log_run_start(filename: str, order) -> None:
    """Log the strategy order chosen for one orchestrator run."""
    _log_info(f"Compiling '{filename}': trying {' -> '.join(order)}")


def log_unknown_method(method_id: str) -> None:
    _log_warning(f"Ignoring unknown preferred method '{method_id}'")


def log_attempt_start(method_id: str) -> None:
    _log_debug(f"Attempting {method_id}")


def log_attempt_result(result) -> None:  # StrategyResult
    """Log one strategy attempt with its identity and timing."""
    elapsed = format_elapsed(result.elapsed_s)
    if result.success:
        _log_success(
            f"{result.method_id} succeeded: {result.size_bytes} bytes, "
            f"tier {result.quality_tier.value} ({elapsed})"
        )
    elif result.skipped:
        _log_info(f"{result.method_id} unavailable ({elapsed}): {result.error}")
    else:
        _log_warning(f"{result.method_id} failed ({elapsed}): {result.error}")


def log_attempt_exception(method_id: str, error: Exception, elapsed: float) -> None:
    """Log an unexpected exception escaping a strategy."""
    _log_error(
        f"{method_id} raised {type(error).__name__} ({format_elapsed(elapsed)}): {error}"
    )


def log_all_failed(error) -> None:  # AllStrategiesFailed
    _log_error(f"No backend produced a PDF after {len(error.attempts)} attempts")


def log_backend_output(method_id: str, stdout: str, stderr: str) -> None:
    """Dump raw backend output at debug level, bypassing the line format."""
    # opt(raw=True) keeps multi-line tool output readable in the log file
    if stdout:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\n{method_id} STDOUT:\n{'=' * 80}\n{stdout}\n")
    if stderr:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\n{method_id} STDERR:\n{'=' * 80}\n{stderr}\n")


def log_cache_hit(digest: str) -> None:
    _log_debug(f"Preview cache hit ({digest[:12]})")


def log_cache_store(digest: str, size: int) -> None:
    _log_debug(f"Cached preview {digest[:12]} ({size} entries)")


def log_memory_sample(rss_mb: float, warning_mb: float) -> None:
    """Log process memory after a request, warning above the threshold."""
    if rss_mb > warning_mb:
        _log_warning(f"High memory usage: {rss_mb:.0f} MB (threshold {warning_mb:.0f} MB)")
    else:
        _log_debug(f"Memory usage: {rss_mb:.0f} MB")


def log_request_timeout(timeout_s: float) -> None:
    _log_error(f"Preview request exceeded {timeout_s:g}s; abandoning in-flight attempt")
