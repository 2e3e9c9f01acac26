"""
Unit tests for LaTeX parsing tools.

Tests core parsing utilities in texpress.utils.latex_parsing_tools and
texpress.utils.text_processing.
"""

import pytest

from texpress.utils.latex_parsing_tools import (
    extract_command_arguments,
    first_command_argument,
    replace_command,
    replace_command_with,
    strip_formatting,
    to_plaintext,
    unescape_specials,
)
from texpress.utils.text_processing import (
    collapse_blank_line_runs,
    count_unescaped,
    extract_balanced_delimiters,
    truncate_display,
)


class TestExtractBalancedDelimiters:
    """Tests for extract_balanced_delimiters function."""

    def test_nested(self):
        """Nested braces are returned intact."""
        assert extract_balanced_delimiters("{a {b} c} d", 1) == ("a {b} c", 9)

    def test_escaped_closing_brace(self):
        """An escaped brace does not close the group."""
        content, _ = extract_balanced_delimiters(r"{a \} b}", 1)
        assert content == r"a \} b"

    def test_unmatched(self):
        """Unclosed groups raise ValueError."""
        with pytest.raises(ValueError):
            extract_balanced_delimiters("{never closed", 1)

    def test_custom_delimiters(self):
        """Square brackets work as delimiters too."""
        assert extract_balanced_delimiters("[x[y]]", 1, "[", "]") == ("x[y]", 6)


class TestExtractCommandArguments:
    """Tests for extract_command_arguments function."""

    def test_whitespace_between_arguments(self):
        """Arguments may be separated by whitespace and newlines."""
        text = "\\cmd{a}\n   {b} {c}"
        params, _ = extract_command_arguments(text, 4, 3)
        assert params == ["a", "b", "c"]

    def test_stops_at_missing_argument(self):
        """Extraction stops at the first missing argument."""
        params, end = extract_command_arguments(r"\cmd{a} text {b}", 4, 2)

        assert params == ["a"]
        assert end == 7


class TestReplaceCommand:
    """Tests for replace_command and replace_command_with."""

    def test_simple(self):
        """A one-argument command is unwrapped."""
        assert replace_command(r"\textbf{bold text}", "textbf") == "bold text"

    def test_prefix_suffix(self):
        """Prefix and suffix surround the content."""
        assert replace_command(r"a \emph{b} c", "emph", "<", ">") == "a <b> c"

    def test_prefix_of_longer_command_untouched(self):
        """\\text does not match \\textbf."""
        assert replace_command(r"\textbf{x}", "text") == r"\textbf{x}"

    def test_incomplete_occurrence_left_in_place(self):
        """Occurrences with too few arguments are kept for later stages."""
        result = replace_command_with(r"\href{url} and \href{u}{t}", "href", 2, lambda p: p[1])
        assert result == r"\href{url} and t"

    def test_multi_argument_render(self):
        """The render callable receives every argument."""
        result = replace_command_with(r"\pair{a}{b}", "pair", 2, lambda p: "+".join(p))
        assert result == "a+b"


class TestStripFormatting:
    """Tests for strip_formatting function."""

    def test_removes_commands_and_trailing_space(self):
        """Commands are removed along with the whitespace after them."""
        assert strip_formatting(r"\small Text\par", ["small", "par"]) == "Text"

    def test_replacement(self):
        """A replacement keeps separated words apart."""
        assert strip_formatting(r"Left\hfill Right", ["hfill"], replacement=" ") == "Left Right"

    def test_longer_command_untouched(self):
        """\\small does not match \\smallskip."""
        assert strip_formatting(r"\smallskip", ["small"]) == r"\smallskip"


class TestPlaintext:
    """Tests for to_plaintext and friends."""

    @pytest.mark.parametrize(
        "latex,expected",
        [
            (r"\textbf{\Huge \scshape Jake Ryan}", "Jake Ryan"),
            (r"\href{https://x.dev}{\underline{x.dev}}", "x.dev"),
            (r"R\&D \vspace{2pt} team", "R&D team"),
            (r"$\sim$5 years", "5 years"),
            ("", ""),
        ],
    )
    def test_to_plaintext(self, latex, expected):
        """Commands are stripped and whitespace collapsed."""
        assert to_plaintext(latex) == expected

    def test_unescape_specials(self):
        """Escaped specials become literal characters."""
        assert unescape_specials(r"50\% \$ \# \_") == "50% $ # _"

    def test_first_command_argument(self):
        """The first complete occurrence wins."""
        assert first_command_argument(r"\author \author{A B}", "author") == "A B"
        assert first_command_argument("nothing", "author") is None


class TestTextProcessing:
    """Tests for small text helpers."""

    def test_count_unescaped(self):
        """Escaped characters are not counted."""
        assert count_unescaped(r"{a}\{b\}{", "{") == 2

    def test_collapse_blank_line_runs_idempotent(self):
        """Collapsing twice equals collapsing once."""
        once = collapse_blank_line_runs("a\n\n\n\n\nb\n\nc")
        assert once == "a\n\nb\n\nc"
        assert collapse_blank_line_runs(once) == once

    def test_truncate_display(self):
        """Long text is cut with an ellipsis."""
        assert truncate_display("abcdefghij", 6) == "abc..."
        assert truncate_display("short", 6) == "short"
