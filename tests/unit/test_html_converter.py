"""
Unit tests for markup to HTML conversion.

Tests texpress.contexts.rendering.html_converter.
"""

from texpress.contexts.rendering.html_converter import (
    get_html_template,
    markup_to_html,
    markup_to_html_body,
)


class TestMarkupToHtmlBody:
    """Tests for body fragment conversion."""

    def test_sections_and_inline_styles(self):
        """Sections become headings; emphasis becomes tags."""
        body = markup_to_html_body(r"\section{Skills}\textbf{Python} and \emph{Go}")

        assert "<h2>Skills</h2>" in body
        assert "<strong>Python</strong> and <em>Go</em>" in body

    def test_resume_items_become_list_items(self):
        """Resume list macros and items map to ul/li."""
        body = markup_to_html_body(r"\resumeItemListStart\resumeItem{Shipped v2}\resumeItemListEnd")
        assert body == "<ul><li>Shipped v2</li></ul>"

    def test_subheading_rows(self):
        """A four-argument subheading becomes two left/right rows."""
        body = markup_to_html_body(r"\resumeSubheading{Acme}{NYC}{Engineer}{2020}")

        assert '<span class="left"><strong>Acme</strong></span>' in body
        assert '<span class="right"><em>2020</em></span>' in body

    def test_links(self):
        """\\href keeps its target and text."""
        body = markup_to_html_body(r"\href{https://github.com/jd}{github.com/jd}")
        assert body == '<a href="https://github.com/jd">github.com/jd</a>'

    def test_text_is_escaped(self):
        """Markup text cannot inject HTML."""
        body = markup_to_html_body(r"<script>alert(1)</script> R\&D")

        assert "<script>" not in body
        assert "&lt;script&gt;" in body
        assert "R&amp;D" in body

    def test_comments_and_preamble_dropped(self, sample_markup):
        """Only the document body is converted; comments are removed."""
        body = markup_to_html_body(sample_markup.replace("Remote}", "Remote} % secret"))

        assert "usepackage" not in body
        assert "secret" not in body
        assert "Jane Doe" in body

    def test_dashes_and_percent(self):
        """Dash ligatures become entities and escaped percent a literal."""
        assert markup_to_html_body(r"2019 -- 2020, 40\%") == "2019 &ndash; 2020, 40%"

    def test_tie_and_literal_tilde(self):
        """A tie becomes a non-breaking space; \\textasciitilde keeps its tilde."""
        body = markup_to_html_body(r"Dr.~Smith at \textasciitilde/bin")
        assert body == "Dr.&nbsp;Smith at ~/bin"

    def test_no_backslashes_left(self, sample_markup):
        """No command text leaks into the HTML."""
        assert "\\" not in markup_to_html_body(sample_markup)


class TestMarkupToHtml:
    """Tests for the full page."""

    def test_page_wraps_body(self):
        """The template supplies the document shell and title."""
        page = markup_to_html(r"\section{About}Hello", title="jane_doe")

        assert page.lstrip().lower().startswith("<!doctype html>")
        assert "<title>jane_doe</title>" in page
        assert "<h2>About</h2>" in page

    def test_title_is_escaped(self):
        """The title passes through template autoescaping."""
        page = markup_to_html("x", title="<b>")
        assert "<title>&lt;b&gt;</title>" in page

    def test_template_cached(self):
        """The compiled template is loaded once."""
        assert get_html_template() is get_html_template()
