"""
Section content formatter.

Turns the raw markup of one section into line-based plain text the layout
renderer can style line by line. Line forms produced:

    "• item"                     bullet
    "Title — Organization"       entry header
    "Date | Location"            secondary line
    anything else                plain text

format_section_content() runs six normalization steps followed by an optional
section-type pass chosen from the section title. Comments and ties are only
read while the text still holds markup, and every step is idempotent, so
formatting already-normalized text returns it unchanged.
"""

import re
from typing import Callable, Dict, List, Optional

from texpress.contexts.parsing.patterns import (
    DEGREE_KEYWORDS,
    INLINE_STYLE_COMMANDS,
    LAYOUT_COMMANDS,
    LAYOUT_COMMANDS_WITH_ARGS,
    LIST_MACROS,
    ROLE_KEYWORDS,
    SECTION_TYPE_KEYWORDS,
    SKILL_LABELS,
    SYMBOL_COMMANDS,
    YEAR_RANGE,
    FormatterPatterns,
)
from texpress.utils.latex_parsing_tools import (
    LaTeXPatterns,
    replace_command,
    replace_command_with,
    strip_formatting,
    unescape_specials,
)
from texpress.utils.text_processing import collapse_blank_line_runs

BULLET = "• "
HEADER_SEPARATOR = " — "
SECONDARY_SEPARATOR = " | "
LITERAL_PERCENT = "\ue000"  # private-use char standing in for \% until step 5


def _join_nonempty(parts: List[str], separator: str) -> str:
    return separator.join(part.strip() for part in parts if part.strip())


def _subheading(params: List[str]) -> str:
    # \resumeSubheading{a}{b}{c}{d} -> "a — b" / "c | d"
    header = _join_nonempty(params[:2], HEADER_SEPARATOR)
    secondary = _join_nonempty(params[2:], SECONDARY_SEPARATOR)
    return "\n" + "\n".join(line for line in (header, secondary) if line) + "\n"


def _two_part_heading(params: List[str]) -> str:
    return "\n" + _join_nonempty(params, SECONDARY_SEPARATOR) + "\n"


# Structural primitive -> (argument count, renderer)
STRUCTURAL_PRIMITIVES = [
    ("resumeSubheading", 4, _subheading),
    ("resumeSubSubheading", 2, _two_part_heading),
    ("resumeProjectHeading", 2, _two_part_heading),
    ("resumeSubItem", 2, lambda params: f"\n{BULLET}{_join_nonempty(params, ': ')}\n"),
    ("resumeItem", 1, lambda params: f"\n{BULLET}{params[0].strip()}\n"),
]


def resolve_structural_primitives(text: str) -> str:
    """
    Step 1: turn resume entry macros, list items and line breaks into line forms.

    Example:
        >>> resolve_structural_primitives("\\\\resumeItem{Built a parser}").strip()
        '• Built a parser'
    """
    for command, num_params, render in STRUCTURAL_PRIMITIVES:
        text = replace_command_with(text, command, num_params, render)

    text = strip_formatting(text, LIST_MACROS)
    text = re.sub(FormatterPatterns.TABULAR_SPEC, "", text)
    text = re.sub(LaTeXPatterns.BEGIN_ANY_ENV, "", text)
    text = re.sub(LaTeXPatterns.END_ANY_ENV, "", text)
    text = re.sub(FormatterPatterns.ITEM, "\n" + BULLET, text)
    return re.sub(FormatterPatterns.LINE_BREAK, "\n", text)


def strip_inline_styling(text: str) -> str:
    """Step 2: unwrap emphasis commands and links, keeping their text."""
    text = replace_command_with(text, "href", 2, lambda params: params[1])
    for command in INLINE_STYLE_COMMANDS:
        text = replace_command(text, command)
    return text


def strip_layout_commands(text: str) -> str:
    """Step 3: drop spacing, sizing and alignment commands that carry no text."""
    for command, num_params in LAYOUT_COMMANDS_WITH_ARGS:
        text = replace_command_with(text, command, num_params, lambda params: " ")
    text = replace_command_with(text, "textcolor", 2, lambda params: params[1])
    text = strip_formatting(text, LAYOUT_COMMANDS, replacement=" ")
    text = re.sub(FormatterPatterns.MATH_SEPARATOR, SECONDARY_SEPARATOR, text)
    return re.sub(FormatterPatterns.MATH_SYMBOL, " · ", text)


def protect_literal_percents(text: str) -> str:
    """Swap escaped percents for a placeholder so step 4 cannot read them as comments."""
    return re.sub(FormatterPatterns.ESCAPED_PERCENT, r"\1" + LITERAL_PERCENT, text)


def resolve_ties(text: str) -> str:
    """
    Turn unescaped '~' ties into spaces.

    Runs before \\textasciitilde is resolved, so that symbol keeps its '~'.

    Example:
        >>> resolve_ties("Dr.~Smith")
        'Dr. Smith'
    """
    return re.sub(FormatterPatterns.TIE, " ", text)


def is_markup(text: str) -> bool:
    """
    True when text still holds markup syntax.

    Normalized content never contains a backslash or a brace, so a bare '%' in
    it is literal text and not a comment.
    """
    return any(char in text for char in "\\{}")


def strip_comments(text: str) -> str:
    """
    Step 4: remove unescaped '%' comments to end of line.

    Example:
        >>> strip_comments("Cut costs 30% % internal note")
        'Cut costs 30% '
    """
    return re.sub(FormatterPatterns.COMMENT, "", text, flags=re.MULTILINE)


def strip_remaining_commands(text: str) -> str:
    """
    Step 5: replace leftover command tokens and resolve escapes, braces and dashes.

    Example:
        >>> strip_remaining_commands("\\\\faGithub{} Jan 2020 -- Present \\\\& more")
        '  Jan 2020 – Present & more'
    """
    for command, replacement in SYMBOL_COMMANDS.items():
        text = re.sub(r"\\" + command + r"(?![A-Za-z])(?:\{\})?", replacement, text)

    text = re.sub(FormatterPatterns.REMAINING_COMMAND, " ", text)
    text = unescape_specials(text).replace(LITERAL_PERCENT, "%")
    text = text.replace("\\", "")
    text = text.replace("{", "").replace("}", "")
    return text.replace("---", "—").replace("--", "–")


def normalize_whitespace(text: str) -> str:
    """Step 6: collapse horizontal whitespace, strip lines, cap blank-line runs."""
    lines = [
        re.sub(FormatterPatterns.HORIZONTAL_WHITESPACE, " ", line).strip()
        for line in text.split("\n")
    ]
    return collapse_blank_line_runs("\n".join(lines)).strip()


def _break_before(pattern: str, text: str, after: str = r"[^\s|—–]") -> str:
    """Insert a line break in the whitespace before each match of pattern."""
    return re.sub(r"(?<=" + after + r")[ \t]+(?=" + pattern + r")", "\n", text)


def _experience_pass(text: str) -> str:
    # Role phrase starting a new sentence: "... shipped v2. Senior Software Engineer at ..."
    roles = "|".join(keyword.capitalize() for keyword in ROLE_KEYWORDS)
    role_phrase = r"(?:[A-Z][A-Za-z/&-]*\s+){0,3}(?:" + roles + r")\b"
    return _break_before(role_phrase, text, after=r"[.;]")


def _education_pass(text: str) -> str:
    text = _break_before(r"(?:" + "|".join(DEGREE_KEYWORDS) + r")\b", text)
    text = _break_before(YEAR_RANGE, text)
    return _break_before(r"(?:CGPA|GPA|Percentage):", text)


def _project_pass(text: str) -> str:
    return _break_before(r"(?:Tech Stack|Technologies|Built With):", text, after=r"[.;]")


def _skill_pass(text: str) -> str:
    labels = "|".join(re.escape(label) for label in SKILL_LABELS)
    return re.sub(r"(?<=[^\s|—–])(?<!Programming)[ \t]+(?=(?:" + labels + r"):)", "\n", text)


SECTION_TYPE_PASSES: Dict[str, Callable[[str], str]] = {
    "experience": _experience_pass,
    "education": _education_pass,
    "project": _project_pass,
    "skill": _skill_pass,
}


def detect_section_type(title: str) -> Optional[str]:
    """
    Pick the section type whose keywords appear in title, or None.

    Example:
        >>> detect_section_type("Work Experience")
        'experience'
        >>> detect_section_type("Hobbies") is None
        True
    """
    lowered = title.lower()
    for section_type, keywords in SECTION_TYPE_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return section_type
    return None


def format_section_content(raw_source: str, title: str = "") -> str:
    """
    Normalize one section's markup into line-based plain text.

    Args:
        raw_source: Markup between the section marker and the next one
        title: Section title, used only to pick the section-type pass

    Returns:
        Normalized content with no command tokens left

    Example:
        >>> format_section_content("\\\\resumeItem{BS in \\\\textbf{Physics}}", "EDUCATION")
        '• BS in Physics'
    """
    markup = is_markup(raw_source)
    text = resolve_ties(protect_literal_percents(raw_source)) if markup else raw_source
    text = resolve_structural_primitives(text)
    text = strip_inline_styling(text)
    text = strip_layout_commands(text)
    if markup:
        text = strip_comments(text)
    text = strip_remaining_commands(text)
    text = normalize_whitespace(text)

    section_type = detect_section_type(title) if title else None
    if section_type:
        text = SECTION_TYPE_PASSES[section_type](text)
    return text
