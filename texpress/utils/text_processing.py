"""
Text processing utilities shared by the parsing and rendering contexts.
"""

import re
from typing import Tuple


def extract_balanced_delimiters(
    text: str,
    start_pos: int,
    open_char: str = "{",
    close_char: str = "}",
    escape_char: str = "\\",
) -> Tuple[str, int]:
    """
    Extract content between balanced delimiters, handling escaped characters.

    Assumes start_pos is just AFTER an opening delimiter. Counts nested delimiters
    to find the matching closing delimiter, skipping escaped characters.

    Args:
        text: Text containing delimited content
        start_pos: Position just after the opening delimiter
        open_char: Opening delimiter character (default: '{')
        close_char: Closing delimiter character (default: '}')
        escape_char: Character used for escaping (default: '\\')

    Returns:
        (content, end_pos) where content excludes the delimiters and
        end_pos is the position after the closing delimiter

    Raises:
        ValueError: If delimiters are unmatched

    Example:
        >>> text = "foo {bar {nested} baz} qux"
        >>> extract_balanced_delimiters(text, 5)
        ('bar {nested} baz', 22)
    """
    depth = 1
    pos = start_pos

    while pos < len(text) and depth > 0:
        if text[pos] == escape_char:
            pos += 2
            continue
        elif text[pos] == open_char:
            depth += 1
        elif text[pos] == close_char:
            depth -= 1
        pos += 1

    if depth != 0:
        raise ValueError(
            f"Unmatched {open_char}{close_char} delimiters starting at position {start_pos}"
        )

    return text[start_pos : pos - 1], pos


def count_unescaped(text: str, char: str, escape_char: str = "\\") -> int:
    """
    Count occurrences of char that are not escaped.

    A character is escaped when preceded by an odd number of escape characters,
    so a brace after an escaped backslash (a LaTeX line break) still counts.
    """
    count = 0
    backslashes = 0
    for current in text:
        if current == escape_char:
            backslashes += 1
            continue
        if current == char and backslashes % 2 == 0:
            count += 1
        backslashes = 0
    return count


def collapse_blank_line_runs(content: str, min_run: int = 3) -> str:
    """
    Collapse runs of min_run or more consecutive blank lines to a single blank line.

    Shorter runs are left untouched, so applying the function twice is a no-op.

    Args:
        content: Text to normalize
        min_run: Shortest run of blank lines that gets collapsed (default: 3)

    Example:
        >>> collapse_blank_line_runs("a\\n\\n\\n\\nb")
        'a\\n\\nb'
        >>> collapse_blank_line_runs("a\\n\\n\\nb")
        'a\\n\\n\\nb'
    """
    pattern = r"\n(?:[ \t]*\n){%d,}" % min_run
    return re.sub(pattern, "\n\n", content)


def truncate_display(text: str, max_len: int) -> str:
    """
    Truncate text for display with ellipsis if needed.

    Example:
        >>> truncate_display("this is a very long string", 10)
        'this is...'
    """
    return text if len(text) <= max_len else text[: max_len - 3] + "..."
