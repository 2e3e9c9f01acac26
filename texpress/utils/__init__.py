"""
Shared utilities for TeXpress.

Common functionality used across contexts:
- Text processing and balanced-brace extraction
- LaTeX command unwrapping and cleanup rules
- Settings, logging and PDF inspection helpers
"""

from texpress.utils.settings import get_settings
from texpress.utils.timestamp import format_elapsed, now

__all__ = ["format_elapsed", "get_settings", "now"]
