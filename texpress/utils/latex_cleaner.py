"""
LaTeX Markup Cleaner

Pure text-substitution rules that repair common malformations in generated
resume markup before it reaches a backend. Every rule is a plain str -> str
function. Backends tolerate different malformations differently, so each
compilation strategy picks its own subset and calls apply_rules() itself.
"""

import re
from typing import Callable, Dict, Iterable, List

# Preferred \usepackage order; hyperref must come late and geometry last
PACKAGE_ORDER = [
    "latexsym",
    "fullpage",
    "titlesec",
    "marvosym",
    "color",
    "xcolor",
    "verbatim",
    "enumitem",
    "fancyhdr",
    "babel",
    "tabularx",
    "fontawesome",
    "fontawesome5",
    "ragged2e",
    "amsmath",
    "amssymb",
    "hyperref",
    "geometry",
]

PACKAGE_PATTERN = re.compile(r"\\usepackage(?:\[[^\]]*\])?\{([^}]+)\}[ \t]*\n?")
DOCUMENTCLASS_PATTERN = re.compile(r"\\documentclass[^\n]*\n")

# Commands that generated markup often emits without their backslash
BACKSLASH_PRONE_COMMANDS = [
    "textbf",
    "textit",
    "emph",
    "href",
    "section",
    "begin",
    "end",
    "vspace",
    "hspace",
]


class CleanupRule:
    """Enum-like class naming the available cleanup rules"""

    FIX_TITLESPACING = "fix_titlespacing"
    ORDER_PACKAGES = "order_packages"
    NORMALIZE_DASHES = "normalize_dashes"
    UNICODE_DASHES = "unicode_dashes"
    REPAIR_BACKSLASHES = "repair_backslashes"
    COLLAPSE_BACKSLASH_RUNS = "collapse_backslash_runs"


def fix_titlespacing(markup: str) -> str:
    """
    Move the star of \\titlespacing{\\section*} onto the command itself.

    Example:
        >>> fix_titlespacing("\\\\titlespacing{\\\\section*}{0pt}{4pt}{2pt}")
        '\\\\titlespacing*{\\\\section}{0pt}{4pt}{2pt}'
    """
    return re.sub(r"\\titlespacing\{\\(sub)?section\*\}", r"\\titlespacing*{\\\1section}", markup)


def order_packages(markup: str) -> str:
    """
    Deduplicate \\usepackage declarations and reinsert them in a safe order.

    Packages are moved to just after the \\documentclass line. The first
    declaration of a package wins; unknown packages keep their relative order
    after the known ones. Markup without \\documentclass is returned unchanged.
    """
    documentclass = DOCUMENTCLASS_PATTERN.search(markup)
    if not documentclass:
        return markup

    declarations: Dict[str, str] = {}
    for match in PACKAGE_PATTERN.finditer(markup):
        name = match.group(1).strip()
        declarations.setdefault(name, match.group(0).strip())

    if not declarations:
        return markup

    ordered: List[str] = [declarations[name] for name in PACKAGE_ORDER if name in declarations]
    ordered.extend(decl for name, decl in declarations.items() if name not in PACKAGE_ORDER)

    stripped = PACKAGE_PATTERN.sub("", markup)
    documentclass = DOCUMENTCLASS_PATTERN.search(stripped)
    insert_at = documentclass.end()
    return stripped[:insert_at] + "\n".join(ordered) + "\n" + stripped[insert_at:]


def normalize_dashes(markup: str) -> str:
    """
    Replace Unicode dashes with LaTeX dash commands (pdflatex-safe).

    Example:
        >>> normalize_dashes("Acme — NYC, 2020–2021")
        'Acme \\\\textemdash{} NYC, 2020\\\\textendash{}2021'
    """
    return markup.replace("—", "\\textemdash{}").replace("–", "\\textendash{}")


def unicode_dashes(markup: str) -> str:
    """
    Replace TeX dash ligatures with Unicode dashes (HTML-safe).

    Example:
        >>> unicode_dashes("2020 -- 2021 --- now")
        '2020 – 2021 — now'
    """
    markup = markup.replace("\\textemdash{}", "—").replace("\\textendash{}", "–")
    return markup.replace("---", "—").replace("--", "–")


def repair_backslashes(markup: str) -> str:
    """
    Restore the backslash on common commands emitted without one.

    Only repairs a command name at line start, after whitespace or after a
    closing brace, and only when it is directly followed by its argument.

    Example:
        >>> repair_backslashes("Name textbf{Bold} end{itemize}")
        'Name \\\\textbf{Bold} \\\\end{itemize}'
    """
    for command in BACKSLASH_PRONE_COMMANDS:
        markup = re.sub(
            r"(^|[\s}])" + command + r"(\*?\{)",
            lambda match: match.group(1) + "\\" + command + match.group(2),
            markup,
            flags=re.MULTILINE,
        )
    return markup


def collapse_backslash_runs(markup: str) -> str:
    """
    Collapse a run of three or more backslashes into a single line break.

    A run directly followed by a letter keeps its last backslash for the
    command, so "\\\\\\textbf" is left alone.

    Example:
        >>> collapse_backslash_runs("a\\\\\\\\\\\\ b")
        'a\\\\\\\\ b'
    """
    return re.sub(r"\\{3,}(?![A-Za-z])", lambda _: "\\\\", markup)


CLEANUP_FUNCTIONS: Dict[str, Callable[[str], str]] = {
    CleanupRule.FIX_TITLESPACING: fix_titlespacing,
    CleanupRule.ORDER_PACKAGES: order_packages,
    CleanupRule.NORMALIZE_DASHES: normalize_dashes,
    CleanupRule.UNICODE_DASHES: unicode_dashes,
    CleanupRule.REPAIR_BACKSLASHES: repair_backslashes,
    CleanupRule.COLLAPSE_BACKSLASH_RUNS: collapse_backslash_runs,
}


def apply_rules(markup: str, rules: Iterable[str]) -> str:
    """
    Apply cleanup rules to markup in the given order.

    Args:
        markup: Raw markup
        rules: CleanupRule names

    Returns:
        Cleaned markup

    Raises:
        KeyError: If a rule name is unknown
    """
    for rule in rules:
        markup = CLEANUP_FUNCTIONS[rule](markup)
    return markup
