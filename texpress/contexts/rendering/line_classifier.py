"""
Positional line classification for formatted section content.

Rules, first match wins:
    "•" prefix                               -> BULLET
    separator ("—", "|") or a date           -> SECONDARY
    role keyword and no separator            -> SUBHEADING
    anything else                            -> BODY
"""

import re

from texpress.contexts.parsing.patterns import ROLE_KEYWORDS, YEAR_RANGE

MONTHS = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?"
DATE_PATTERN = re.compile(
    r"(?:" + YEAR_RANGE + r")|\b" + MONTHS + r"\s+(?:19|20)\d{2}\b|\b\w+\s+(?:19|20)\d{2}\b"
)
ROLE_PATTERN = re.compile(r"\b(?:" + "|".join(ROLE_KEYWORDS) + r")\b", re.IGNORECASE)
SEPARATORS = ("—", "|")


class LineKind:
    """Enum-like class for rendered line styles"""

    BULLET = "bullet"
    SECONDARY = "secondary"
    SUBHEADING = "subheading"
    BODY = "body"


def has_separator(line: str) -> bool:
    return any(separator in line for separator in SEPARATORS)


def classify_line(line: str) -> str:
    """
    Pick the LineKind for one line of section content.

    Examples:
        >>> classify_line("• Built a parser")
        'bullet'
        >>> classify_line("Aug 2020 – May 2022 | Austin, TX")
        'secondary'
        >>> classify_line("Senior Software Engineer")
        'subheading'
        >>> classify_line("Python, Go, SQL")
        'body'
    """
    stripped = line.strip()
    if stripped.startswith("•"):
        return LineKind.BULLET
    if has_separator(stripped) or DATE_PATTERN.search(stripped):
        return LineKind.SECONDARY
    if ROLE_PATTERN.search(stripped):
        return LineKind.SUBHEADING
    return LineKind.BODY
