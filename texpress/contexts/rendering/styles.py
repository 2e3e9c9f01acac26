"""
Layout style constants for the baseline PDF renderer.

Font tiers are fixed: name > section title > subheading > body > secondary.
Each TextStyle carries its own leading, which is how far the cursor moves per line.
"""

from dataclasses import dataclass

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, letter

PRIMARY_COLOR = colors.HexColor("#2c3e50")
SECONDARY_COLOR = colors.HexColor("#34495e")
ACCENT_COLOR = colors.HexColor("#3498db")
MUTED_COLOR = colors.HexColor("#7f8c8d")

PAGE_SIZES = {"A4": A4, "LETTER": letter}


@dataclass(frozen=True)
class TextStyle:
    """Font, size, leading, color and left indent for one line tier."""

    font_name: str
    font_size: float
    leading: float
    color: colors.Color
    indent: float = 0


@dataclass(frozen=True)
class PageLayout:
    """Page margins and fixed gaps, in points."""

    margin_left: float = 50
    margin_right: float = 50
    margin_top: float = 50
    margin_bottom: float = 50
    section_gap: float = 10
    rule_gap: float = 12
    underline_offset: float = 3
    bullet_text_offset: float = 10


NAME_STYLE = TextStyle("Helvetica-Bold", 24, 30, PRIMARY_COLOR)
SECTION_STYLE = TextStyle("Helvetica-Bold", 14, 20, PRIMARY_COLOR)
SUBHEADING_STYLE = TextStyle("Helvetica-Bold", 12, 16, SECONDARY_COLOR)
BODY_STYLE = TextStyle("Helvetica", 10.5, 14, SECONDARY_COLOR)
BULLET_STYLE = TextStyle("Helvetica", 10.5, 14, SECONDARY_COLOR, indent=12)
SECONDARY_STYLE = TextStyle("Helvetica-Oblique", 9.5, 13, MUTED_COLOR)
CONTACT_STYLE = TextStyle("Helvetica", 9.5, 14, MUTED_COLOR)

DEFAULT_LAYOUT = PageLayout()


def resolve_page_size(name: str):
    """
    Map a configured page size name to reportlab dimensions.

    Raises:
        ValueError: If the name is not a supported page size
    """
    try:
        return PAGE_SIZES[name.upper()]
    except KeyError:
        raise ValueError(f"Unsupported page size '{name}' (use one of {sorted(PAGE_SIZES)})")
