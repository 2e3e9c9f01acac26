"""
Unit tests for markup cleanup rules.

Tests each rule in texpress.utils.latex_cleaner and rule application order.
"""

import pytest

from texpress.utils.latex_cleaner import (
    CLEANUP_FUNCTIONS,
    CleanupRule,
    apply_rules,
    collapse_backslash_runs,
    fix_titlespacing,
    normalize_dashes,
    order_packages,
    repair_backslashes,
    unicode_dashes,
)


class TestOrderPackages:
    """Tests for package deduplication and ordering."""

    def test_hyperref_moves_after_other_packages(self):
        """hyperref is loaded after packages it must follow."""
        markup = (
            "\\documentclass{article}\n"
            "\\usepackage[hidelinks]{hyperref}\n"
            "\\usepackage{titlesec}\n"
            "\\begin{document}x\\end{document}"
        )
        cleaned = order_packages(markup)

        assert cleaned.index("{titlesec}") < cleaned.index("{hyperref}")
        assert "\\usepackage[hidelinks]{hyperref}" in cleaned

    def test_duplicates_removed(self):
        """The first declaration of a package wins."""
        markup = (
            "\\documentclass{article}\n"
            "\\usepackage[dvipsnames]{xcolor}\n"
            "\\usepackage{xcolor}\n"
        )
        cleaned = order_packages(markup)

        assert cleaned.count("{xcolor}") == 1
        assert "[dvipsnames]{xcolor}" in cleaned

    def test_unknown_packages_kept(self):
        """Packages outside the known order follow the known ones."""
        markup = "\\documentclass{article}\n\\usepackage{zzlocal}\n\\usepackage{geometry}\n"
        cleaned = order_packages(markup)

        assert cleaned.index("{geometry}") < cleaned.index("{zzlocal}")

    def test_fragment_unchanged(self):
        """Markup without \\documentclass is left alone."""
        assert order_packages("\\usepackage{b}\\usepackage{a}") == "\\usepackage{b}\\usepackage{a}"


class TestRules:
    """Tests for the single-purpose rules."""

    def test_fix_titlespacing(self):
        """The star moves from the section name to the command."""
        cleaned = fix_titlespacing(r"\titlespacing{\subsection*}{0pt}{1ex}{1ex}")
        assert cleaned == r"\titlespacing*{\subsection}{0pt}{1ex}{1ex}"

    def test_dash_round_trip_directions(self):
        """Unicode dashes become commands for TeX and back for HTML."""
        assert normalize_dashes("2019–2020") == r"2019\textendash{}2020"
        assert unicode_dashes(r"2019\textendash{}2020") == "2019–2020"

    def test_repair_backslashes(self):
        """Commands missing their backslash are repaired at word boundaries."""
        cleaned = repair_backslashes("textbf{Name}\n begin{itemize}")
        assert cleaned == "\\textbf{Name}\n \\begin{itemize}"

    def test_repair_leaves_words_alone(self):
        """Command names inside words or without an argument are untouched."""
        text = r"the subsection{x} and \textbf{ok} and endless"
        assert repair_backslashes(text) == text

    @pytest.mark.parametrize(
        "markup,expected",
        [
            ("a\\\\\\ b", "a\\\\ b"),
            ("a\\\\\\\\\\\\ b", "a\\\\ b"),
            ("a\\\\ b", "a\\\\ b"),
            ("a\\\\\\textbf{x}", "a\\\\\\textbf{x}"),
        ],
    )
    def test_collapse_backslash_runs(self, markup, expected):
        """Runs of backslashes become one line break, commands are preserved."""
        assert collapse_backslash_runs(markup) == expected


class TestApplyRules:
    """Tests for apply_rules()."""

    def test_rules_run_in_order(self):
        """unicode_dashes after normalize_dashes restores the original."""
        rules = [CleanupRule.NORMALIZE_DASHES, CleanupRule.UNICODE_DASHES]
        assert apply_rules("a—b", rules) == "a—b"

    def test_no_rules(self):
        """An empty rule list is the identity."""
        assert apply_rules("textbf{x}", []) == "textbf{x}"

    def test_unknown_rule(self):
        """Unknown rule names raise KeyError."""
        with pytest.raises(KeyError):
            apply_rules("x", ["make_it_pretty"])

    def test_every_rule_registered(self):
        """Each CleanupRule name maps to a function."""
        names = [value for key, value in vars(CleanupRule).items() if key.isupper()]
        assert set(names) == set(CLEANUP_FUNCTIONS)
