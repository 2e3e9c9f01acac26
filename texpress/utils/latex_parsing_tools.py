"""
LaTeX Parsing Tools

Fundamental parsing utilities for extracting and unwrapping LaTeX commands.

Self-contained module with no context dependencies - designed for reuse by the
parser, the content formatter and the HTML converter.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from texpress.utils.text_processing import extract_balanced_delimiters


@dataclass(frozen=True)
class LaTeXPatterns:
    """
    LaTeX pattern templates for parsing and manipulation.

    Templates accept command/environment names through .format().
    """

    # Command patterns (use with .format(command=name))
    COMMAND_WITH_WHITESPACE: str = r"\\{command}(?![A-Za-z])\*?\s*"  # \cmd plus trailing space

    # Environment patterns
    BEGIN_ANY_ENV: str = r"\\begin\{[^}]*\}(?:\[[^\]]*\])?"  # \begin{env}[opts]
    END_ANY_ENV: str = r"\\end\{[^}]*\}"  # \end{env}

    # Plaintext conversion patterns
    SPACING_COMMANDS: str = r"\\[vh]space\*?\{[^}]*\}"  # \vspace{...} or \hspace{...}
    ANY_COMMAND_NO_BRACES: str = r"\\[a-zA-Z]+\*?"  # bare \cmd
    COMMAND_TOKEN: str = r"\\[a-zA-Z]+"  # anything that still looks like a command


# Escaped special characters and their plain equivalents
ESCAPED_CHARACTERS = [
    (r"\%", "%"),
    (r"\$", "$"),
    (r"\&", "&"),
    (r"\#", "#"),
    (r"\_", "_"),
    (r"\{", ""),
    (r"\}", ""),
    (r"\ ", " "),
    (r"\;", " "),
    (r"\,", " "),
    (r"\:", " "),
    (r"\!", ""),
]


def extract_command_arguments(
    text: str, start_pos: int, num_params: int
) -> Tuple[List[str], int]:
    """
    Extract N consecutive brace arguments starting at start_pos.

    Only whitespace may separate the arguments; extraction stops early at the
    first missing or unbalanced argument.

    Args:
        text: LaTeX source
        start_pos: Position right after the command name
        num_params: Number of {...} arguments to extract

    Returns:
        (params, end_pos) where end_pos is the position after the last argument read

    Example:
        >>> latex = "\\\\resumeSubheading{Acme}{NYC}{Engineer {II}}{2020} rest"
        >>> extract_command_arguments(latex, 17, 4)
        (['Acme', 'NYC', 'Engineer {II}', '2020'], 49)
    """
    params = []
    pos = start_pos

    for _ in range(num_params):
        match = re.compile(r"\s*\{").match(text, pos)
        if not match:
            break
        try:
            content, end_pos = extract_balanced_delimiters(text, match.end())
        except ValueError:
            break
        params.append(content)
        pos = end_pos

    return params, pos


def replace_command_with(
    text: str,
    command: str,
    num_params: int,
    render: Callable[[List[str]], str],
) -> str:
    """
    Replace every \\command{..}...{..} occurrence with render(params).

    Occurrences with fewer than num_params readable arguments are left in place
    for later cleanup stages.

    Args:
        text: Text containing the command
        command: Command name without backslash (e.g., "resumeSubheading")
        num_params: Number of brace arguments the command takes
        render: Callable mapping the argument list to replacement text

    Returns:
        Text with all complete occurrences replaced

    Example:
        >>> replace_command_with("\\\\href{u}{Site}", "href", 2, lambda p: p[1])
        'Site'
    """
    pattern = re.compile(r"\\" + re.escape(command) + r"(?![A-Za-z])\*?")
    result = []
    pos = 0

    while True:
        match = pattern.search(text, pos)
        if not match:
            break
        params, end_pos = extract_command_arguments(text, match.end(), num_params)
        if len(params) < num_params:
            result.append(text[pos : match.end()])
            pos = match.end()
            continue
        result.append(text[pos : match.start()])
        result.append(render(params))
        pos = end_pos

    result.append(text[pos:])
    return "".join(result)


def replace_command(text: str, command: str, prefix: str = "", suffix: str = "") -> str:
    """
    Replace a one-argument LaTeX command with optional prefix/suffix around content.

    Handles nested braces correctly using balanced delimiter matching.

    Examples:
        >>> replace_command("\\\\textbf{bold text}", "textbf")
        'bold text'
        >>> replace_command("Normal \\\\textbf{bold} text", "textbf", "<b>", "</b>")
        'Normal <b>bold</b> text'
        >>> replace_command("\\\\textbf{text \\\\textit{nested} more}", "textbf")
        'text \\\\textit{nested} more'
    """
    return replace_command_with(text, command, 1, lambda params: prefix + params[0] + suffix)


def strip_formatting(text: str, commands: List[str], replacement: str = "") -> str:
    """
    Remove argument-less LaTeX commands (and trailing whitespace) from text.

    Pass replacement=" " where a command separates words, as \\hfill does.

    Example:
        >>> strip_formatting("\\\\centering Some text\\\\par", ["centering", "par"])
        'Some text'
    """
    result = text
    for command in commands:
        pattern = LaTeXPatterns.COMMAND_WITH_WHITESPACE.format(command=re.escape(command))
        result = re.sub(pattern, replacement, result)
    return result


def unescape_specials(text: str) -> str:
    """Turn escaped LaTeX specials (\\%, \\&, ...) into their literal characters."""
    for escaped, replacement in ESCAPED_CHARACTERS:
        text = text.replace(escaped, replacement)
    return text


def first_command_argument(text: str, command: str) -> Optional[str]:
    """
    Return the first argument of the first \\command{...} in text, or None.

    Example:
        >>> first_command_argument("\\\\section*{Skills} more", "section")
        'Skills'
    """
    pattern = re.compile(r"\\" + re.escape(command) + r"(?![A-Za-z])\*?")
    for match in pattern.finditer(text):
        params, _ = extract_command_arguments(text, match.end(), 1)
        if params:
            return params[0]
    return None


def to_plaintext(latex_str: str) -> str:
    """
    Strip ALL LaTeX commands from a short string, returning pure plaintext.

    Used for titles, names and link labels where layout does not matter.
    Content wrappers keep their text, everything else is dropped, and
    whitespace is collapsed to single spaces.

    Example:
        >>> to_plaintext("\\\\textbf{\\\\Huge \\\\scshape Jake Ryan}")
        'Jake Ryan'
        >>> to_plaintext("\\\\href{https://x.dev}{\\\\underline{x.dev}}")
        'x.dev'
    """
    if not latex_str:
        return ""

    result = replace_command_with(latex_str, "href", 2, lambda params: params[1])
    for wrapper in ["textbf", "textit", "emph", "underline", "texttt", "textsc", "url", "mbox"]:
        result = replace_command(result, wrapper)

    result = re.sub(LaTeXPatterns.SPACING_COMMANDS, " ", result)
    result = result.replace("\\\\", " ")
    result = unescape_specials(result)
    result = result.replace("$", "")

    result = re.sub(LaTeXPatterns.ANY_COMMAND_NO_BRACES, " ", result)
    result = result.replace("{", "").replace("}", "").replace("~", " ")

    return re.sub(r"\s+", " ", result).strip()
