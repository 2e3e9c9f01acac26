"""
Parsing Pattern Constants

Regex patterns and keyword vocabularies used by the structural parser and the
content formatter. Grouped into frozen dataclasses by concern.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class DocumentPatterns:
    """Document boundary markers."""

    BEGIN_DOCUMENT: str = r"\begin{document}"
    END_DOCUMENT: str = r"\end{document}"


@dataclass(frozen=True)
class SectionMarkers:
    """
    Section-start commands, tried in order until one yields sections.

    MARKER matches the command (with optional star) up to its opening brace.
    """

    PRIMARY: str = "section"
    ALTERNATIVES: Tuple[str, ...] = ("subsection", "chapter", "part")
    MARKER: str = r"\\{command}(?![A-Za-z])\*?\s*\{{"  # use with .format(command=name)


@dataclass(frozen=True)
class HeaderPatterns:
    """Patterns for name and contact extraction from the header region."""

    CENTER_BLOCK: str = r"\\begin\{center\}(.*?)\\end\{center\}"
    MAILTO: str = r"^mailto:\s*"
    EMAIL: str = r"[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)+"
    PHONE_CANDIDATE: str = r"\+?\(?\d[\d \-().]*\d"  # digit run with phone punctuation
    CAPITALIZED_WORDS: str = r"[A-Z][A-Za-z'.\-]*(?:\s+[A-Z][A-Za-z'.\-]*)+"
    MIN_PHONE_DIGITS: int = 10


# Brace group with up to two levels of nesting, e.g. {l@{\extracolsep{\fill}}r}
_NESTED_GROUP = r"\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\}"


@dataclass(frozen=True)
class FormatterPatterns:
    """Patterns for content normalization."""

    ITEM: str = r"\\item(?![A-Za-z])(?:\s*\[[^\]]*\])?\s*"  # \item or \item[label]
    LINE_BREAK: str = r"\\\\\*?(?:\[[^\]]*\])?|\\newline(?![A-Za-z])"  # \\ or \\[2pt] or \newline
    # tabular* and tabularx take a width argument before the column spec
    TABULAR_SPEC: str = (
        r"\\begin\{tabular(?:\*|x)\}\s*\{[^{}]*\}\s*(?:\[[^\]]*\]\s*)?" + _NESTED_GROUP
        + r"|\\begin\{tabular\}\s*(?:\[[^\]]*\]\s*)?" + _NESTED_GROUP
    )
    COMMENT: str = r"(?:^|(?<=[\s}\]]))%.*$"  # "%" glued to text is literal
    ESCAPED_PERCENT: str = r"(?<!\\)((?:\\\\)*)\\%"  # \% not preceded by a line break \\
    TIE: str = r"(?<!\\)~"  # unescaped non-breaking space
    MATH_SEPARATOR: str = r"(?<!\\)\$\s*\|\s*(?<!\\)\$"  # $|$
    MATH_SYMBOL: str = r"(?<!\\)\$\s*\\(?:cdot|bullet|diamond|circ|ast)\s*(?<!\\)\$"
    REMAINING_COMMAND: str = r"\\[a-zA-Z]+\*?(?:\[[^\]]*\])?"
    HORIZONTAL_WHITESPACE: str = r"[ \t\f\v\u00a0]+"


# Commands whose single argument is kept as plain text
INLINE_STYLE_COMMANDS = [
    "textbf",
    "textit",
    "textsl",
    "underline",
    "emph",
    "texttt",
    "textsc",
    "textnormal",
    "textrm",
    "textsf",
    "mbox",
    "url",
]

# Argument-less layout commands removed outright
LAYOUT_COMMANDS = [
    "hfill",
    "vfill",
    "centering",
    "raggedright",
    "raggedleft",
    "noindent",
    "par",
    "smallskip",
    "medskip",
    "bigskip",
    "newpage",
    "clearpage",
    "pagebreak",
    "linebreak",
    "scshape",
    "bfseries",
    "itshape",
    "mdseries",
    "normalfont",
    "selectfont",
    "tiny",
    "scriptsize",
    "footnotesize",
    "small",
    "normalsize",
    "large",
    "Large",
    "LARGE",
    "huge",
    "Huge",
]

# Layout commands whose arguments carry no text: (command, number of arguments)
LAYOUT_COMMANDS_WITH_ARGS = [
    ("vspace", 1),
    ("hspace", 1),
    ("color", 1),
    ("fontsize", 2),
    ("setlength", 2),
    ("addtolength", 2),
    ("label", 1),
]

# Resume list start/end macros (Jake's-resume style templates)
LIST_MACROS = [
    "resumeItemListStart",
    "resumeItemListEnd",
    "resumeSubHeadingListStart",
    "resumeSubHeadingListEnd",
]

# Symbol commands with a text equivalent
SYMBOL_COMMANDS: Dict[str, str] = {
    "textbar": "|",
    "textbullet": "•",
    "textendash": "–",
    "textemdash": "—",
    "ldots": "...",
    "dots": "...",
    "textasciitilde": "~",
    "LaTeX": "LaTeX",
    "TeX": "TeX",
}

# Role/title keywords shared by the experience pass and the line classifier
ROLE_KEYWORDS = [
    "engineer",
    "developer",
    "intern",
    "manager",
    "analyst",
    "president",
    "lead",
    "consultant",
    "architect",
    "scientist",
    "researcher",
    "director",
]

# Section-type vocabularies for the secondary formatting pass
SECTION_TYPE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "experience": ("experience", "employment", "work history", "internship"),
    "education": ("education", "academic", "qualification"),
    "project": ("project",),
    "skill": ("skill", "technolog", "competenc"),
}

DEGREE_KEYWORDS = [
    r"B\.\s?Tech",
    r"M\.\s?Tech",
    r"B\.\s?Sc",
    r"M\.\s?Sc",
    r"Diploma",
    r"Bachelor",
    r"Master",
    r"Ph\.?\s?D",
]

SKILL_LABELS = [
    "Programming Languages",
    "Technologies",
    "Tools",
    "Frameworks",
    "Libraries",
    "Databases",
    "Platforms",
]

YEAR_RANGE = r"(?:19|20)\d{2}\s*(?:-{1,3}|–|—|to)\s*(?:(?:19|20)\d{2}|Present|Current|Now)\b"
