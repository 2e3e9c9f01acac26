"""
Resume Document Structure

Immutable structured representation of parsed resume markup. This structure is
the interface between the Parsing and Rendering contexts: parsing builds one
Document per request, rendering only reads it.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

UNTITLED_SECTION = "Untitled"


@dataclass(frozen=True)
class Contact:
    """
    Contact fields found in the resume header. Each field is optional.

    Attributes:
        email: Address from a mailto link
        phone: Phone number as written in the source
        linkedin: LinkedIn link text (or target when the text is empty)
        github: GitHub link text (or target when the text is empty)
    """

    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield (field, value) for resolved fields in display order."""
        for name in ("email", "phone", "linkedin", "github"):
            value = getattr(self, name)
            if value:
                yield name, value

    @property
    def is_empty(self) -> bool:
        return not any(True for _ in self.items())


@dataclass(frozen=True)
class Section:
    """
    Represents a single titled block of resume content.

    Attributes:
        title: Plaintext section title, never empty
        content: Normalized line-based text (bullets, entry headers, secondary lines)
        raw_source: Original markup between this marker and the next
    """

    title: str
    content: str
    raw_source: str = field(default="", repr=False)

    def __post_init__(self):
        if not self.title.strip():
            object.__setattr__(self, "title", UNTITLED_SECTION)

    @property
    def lines(self) -> List[str]:
        """Non-empty content lines in order."""
        return [line for line in self.content.split("\n") if line.strip()]


@dataclass(frozen=True)
class Document:
    """
    Parsed resume.

    Attributes:
        name: Candidate name, empty when none was found
        contact: Contact fields
        sections: Sections in source order
    """

    name: str = ""
    contact: Contact = field(default_factory=Contact)
    sections: Tuple[Section, ...] = ()

    def __post_init__(self):
        # Freeze lists handed in by callers
        object.__setattr__(self, "sections", tuple(self.sections))

    @property
    def is_empty(self) -> bool:
        """True when there is no name, no contact and no section."""
        return not self.name and self.contact.is_empty and not self.sections

    def get_section(self, title: str) -> Optional[Section]:
        """First section whose title matches case-insensitively, or None."""
        for section in self.sections:
            if section.title.lower() == title.lower():
                return section
        return None
