"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Compact timestamp for directory and file names (e.g., 20251114_123456)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def format_elapsed(seconds: float) -> str:
    """
    Format an elapsed duration for log lines.

    Examples:
        format_elapsed(0.0421)
        # "42ms"

        format_elapsed(3.5)
        # "3.50s"
    """
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"
