"""
Structural parser for resume markup.

Parses raw markup into an immutable Document:
- Header region (before the first section marker): name and contact fields
- Section spans: one Section per marker, running to the next marker

Field extraction uses explicit accessor chains. Each field has an ordered list
of (rule name, accessor) pairs; the first accessor returning a value wins and a
miss on one field never affects another.

The parser never raises on malformed markup. The worst case is an empty
Document, and deciding whether that is usable is left to the caller.
"""

import re
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from omegaconf import DictConfig

from texpress.contexts.parsing.document import Contact, Document, Section
from texpress.contexts.parsing.formatter import format_section_content
from texpress.contexts.parsing.logger import (
    log_field_found,
    log_field_missing,
    log_marker_fallback,
    log_parse_result,
    log_parse_start,
    log_section_dropped,
)
from texpress.contexts.parsing.patterns import DocumentPatterns, HeaderPatterns, SectionMarkers
from texpress.utils.latex_parsing_tools import (
    extract_command_arguments,
    first_command_argument,
    to_plaintext,
    unescape_specials,
)
from texpress.utils.settings import get_settings
from texpress.utils.text_processing import extract_balanced_delimiters

Accessor = Callable[[str], Optional[str]]


# =============================================================================
# Regions
# =============================================================================


def extract_body(markup: str) -> str:
    """Text after \\begin{document} when present, otherwise the whole markup."""
    start = markup.find(DocumentPatterns.BEGIN_DOCUMENT)
    if start == -1:
        return markup
    return markup[start + len(DocumentPatterns.BEGIN_DOCUMENT) :]


def find_section_markers(body: str, command: str) -> List[Tuple[int, int, str]]:
    """
    Locate every \\command{title} marker.

    Args:
        body: Document body
        command: Sectioning command name without backslash

    Returns:
        (marker_start, content_start, raw_title) per marker, in source order.
        A title whose braces never close runs to the end of its line.
    """
    pattern = re.compile(SectionMarkers.MARKER.format(command=command))
    markers = []
    for match in pattern.finditer(body):
        try:
            title, content_start = extract_balanced_delimiters(body, match.end())
        except ValueError:
            line_end = body.find("\n", match.end())
            content_start = len(body) if line_end == -1 else line_end
            title = body[match.end() : content_start]
        markers.append((match.start(), content_start, title))
    return markers


def split_sections(body: str) -> Tuple[str, List[Tuple[str, str]]]:
    """
    Split the body into header text and (raw_title, raw_source) spans.

    Tries \\section first, then each alternative sectioning command in order.
    Each span runs to the next marker, \\end{document}, or the end of input.

    Returns:
        (header, spans); header is the whole body when no markers are found
    """
    doc_end = body.find(DocumentPatterns.END_DOCUMENT)
    if doc_end == -1:
        doc_end = len(body)

    markers: List[Tuple[int, int, str]] = []
    for command in (SectionMarkers.PRIMARY,) + SectionMarkers.ALTERNATIVES:
        markers = [m for m in find_section_markers(body, command) if m[0] < doc_end]
        if markers:
            if command != SectionMarkers.PRIMARY:
                log_marker_fallback(command, len(markers))
            break

    if not markers:
        return body[:doc_end], []

    spans = []
    for index, (_, content_start, title) in enumerate(markers):
        span_end = markers[index + 1][0] if index + 1 < len(markers) else doc_end
        spans.append((title, body[content_start:span_end]))

    return body[: markers[0][0]], spans


# =============================================================================
# Header field accessors
# =============================================================================


def _plausible_name(candidate: Optional[str]) -> Optional[str]:
    if candidate and len(candidate) > 3 and re.search(r"[A-Za-z]", candidate):
        return candidate
    return None


def _iter_command_arguments(text: str, command: str, num_params: int) -> Iterator[List[str]]:
    pattern = re.compile(r"\\" + command + r"(?![A-Za-z])\*?")
    for match in pattern.finditer(text):
        params, _ = extract_command_arguments(text, match.end(), num_params)
        if len(params) == num_params:
            yield params


def iter_links(header: str) -> Iterator[Tuple[str, str]]:
    """Yield (target, display_text) for every \\href and \\url in header."""
    for target, label in _iter_command_arguments(header, "href", 2):
        yield target.strip(), to_plaintext(label)
    for (target,) in _iter_command_arguments(header, "url", 1):
        yield target.strip(), target.strip()


def name_from_centered_bold(header: str) -> Optional[str]:
    """Bold text inside a center environment."""
    for block in re.finditer(HeaderPatterns.CENTER_BLOCK, header, flags=re.DOTALL):
        bold = first_command_argument(block.group(1), "textbf")
        name = _plausible_name(to_plaintext(bold) if bold else None)
        if name:
            return name
    return None


def name_from_bold_words(header: str) -> Optional[str]:
    """First bold span made of two or more capitalized words."""
    for (bold,) in _iter_command_arguments(header, "textbf", 1):
        text = to_plaintext(bold)
        if re.fullmatch(HeaderPatterns.CAPITALIZED_WORDS, text):
            name = _plausible_name(text)
            if name:
                return name
    return None


def name_from_name_command(header: str) -> Optional[str]:
    """\\name{First}{Last} (moderncv style) or \\author{Full Name}."""
    for params in _iter_command_arguments(header, "name", 2):
        name = _plausible_name(" ".join(to_plaintext(part) for part in params).strip())
        if name:
            return name
    author = first_command_argument(header, "author")
    return _plausible_name(to_plaintext(author)) if author else None


def email_from_mailto(header: str) -> Optional[str]:
    """Address of the first mailto link."""
    for target, _ in iter_links(header):
        if target.lower().startswith("mailto:"):
            address = re.sub(HeaderPatterns.MAILTO, "", target, flags=re.IGNORECASE)
            address = unescape_specials(address).strip()
            if address:
                return address
    return None


def email_from_text(header: str) -> Optional[str]:
    """First bare e-mail address in the header text."""
    match = re.search(HeaderPatterns.EMAIL, to_plaintext(header))
    return match.group(0) if match else None


def phone_from_digit_run(header: str) -> Optional[str]:
    """First run of phone punctuation holding at least ten digits."""
    text = re.sub(r"\\href\s*\{[^{}]*\}", "", header)  # link targets may hold digits
    for match in re.finditer(HeaderPatterns.PHONE_CANDIDATE, to_plaintext(text)):
        candidate = match.group(0).strip()
        if sum(char.isdigit() for char in candidate) >= HeaderPatterns.MIN_PHONE_DIGITS:
            return candidate
    return None


def _link_by_domain(keyword: str) -> Accessor:
    def accessor(header: str) -> Optional[str]:
        for target, label in iter_links(header):
            if keyword in target.lower():
                return label or target
        return None

    accessor.__doc__ = f"Display text (or target) of the first link to {keyword}"
    return accessor


def _bare_link(keyword: str) -> Accessor:
    def accessor(header: str) -> Optional[str]:
        match = re.search(r"\S*" + keyword + r"\.com/\S+", to_plaintext(header))
        return match.group(0) if match else None

    accessor.__doc__ = f"Bare {keyword}.com address written as text"
    return accessor


# Ordered accessor chains: first non-empty result wins
NAME_RULES: List[Tuple[str, Accessor]] = [
    ("centered_bold", name_from_centered_bold),
    ("bold_capitalized_words", name_from_bold_words),
    ("name_command", name_from_name_command),
]

CONTACT_RULES: Dict[str, List[Tuple[str, Accessor]]] = {
    "email": [("mailto_link", email_from_mailto), ("bare_address", email_from_text)],
    "phone": [("digit_run", phone_from_digit_run)],
    "linkedin": [
        ("link_command", _link_by_domain("linkedin")),
        ("bare_url", _bare_link("linkedin")),
    ],
    "github": [
        ("link_command", _link_by_domain("github")),
        ("bare_url", _bare_link("github")),
    ],
}


def resolve_field(
    header: str, field_name: str, rules: List[Tuple[str, Accessor]]
) -> Optional[str]:
    """
    Run an accessor chain against the header.

    Args:
        header: Header region markup
        field_name: Field label for logging
        rules: Ordered (rule name, accessor) pairs

    Returns:
        First non-empty accessor result, or None
    """
    for rule_name, accessor in rules:
        value = accessor(header)
        if value:
            log_field_found(field_name, value, rule_name)
            return value
    log_field_missing(field_name)
    return None


def extract_name(header: str) -> str:
    return resolve_field(header, "name", NAME_RULES) or ""


def extract_contact(header: str) -> Contact:
    """Resolve each contact field independently."""
    fields = {
        field_name: resolve_field(header, field_name, rules)
        for field_name, rules in CONTACT_RULES.items()
    }
    return Contact(**fields)


# =============================================================================
# Entry point
# =============================================================================


def parse_document(markup: str, settings: Optional[DictConfig] = None) -> Document:
    """
    Parse resume markup into a Document.

    Args:
        markup: Resume markup (ideally already validated)
        settings: parsing settings node (default: get_settings().parsing)

    Returns:
        Document with sections in source order. Sections whose normalized
        content is shorter than parsing.min_section_chars are dropped.

    Example:
        >>> doc = parse_document("\\\\section{EDUCATION}\\\\resumeItem{BS in Physics}")
        >>> doc.sections[0].title, doc.sections[0].lines
        ('EDUCATION', ['• BS in Physics'])
    """
    settings = settings if settings is not None else get_settings().parsing
    log_parse_start(len(markup), DocumentPatterns.BEGIN_DOCUMENT in markup)

    body = extract_body(markup)
    header, spans = split_sections(body)

    sections = []
    for raw_title, raw_source in spans:
        title = to_plaintext(raw_title) or settings.untitled_section
        content = format_section_content(raw_source, title)
        if len(content) < settings.min_section_chars:
            log_section_dropped(title, len(content))
            continue
        sections.append(Section(title=title, content=content, raw_source=raw_source))

    document = Document(
        name=extract_name(header),
        contact=extract_contact(header),
        sections=tuple(sections),
    )
    log_parse_result(document)
    return document
