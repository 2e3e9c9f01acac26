"""
Markup to HTML conversion for browser-based PDF printing.

Converts the document body of resume markup into HTML fragments with ordered
regex/brace-aware substitutions, then wraps the fragment in the packaged
resume.html.j2 template. Text is HTML-escaped before any tag is inserted, so
markup content can never inject tags of its own.
"""

import html
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, select_autoescape

from texpress.contexts.parsing.parser import extract_body
from texpress.contexts.parsing.patterns import (
    LAYOUT_COMMANDS,
    LAYOUT_COMMANDS_WITH_ARGS,
    SYMBOL_COMMANDS,
    DocumentPatterns,
    FormatterPatterns,
)
from texpress.contexts.rendering.logger import log_html_conversion
from texpress.utils.latex_parsing_tools import (
    LaTeXPatterns,
    replace_command,
    replace_command_with,
    strip_formatting,
)

TEMPLATES_PATH = Path(__file__).resolve().parents[2] / "templates"
HTML_TEMPLATE_NAME = "resume.html.j2"

# Escaped specials after html.escape() has run
HTML_ESCAPED_SPECIALS = [
    (r"\&amp;", "&amp;"),
    (r"\%", "%"),
    (r"\$", "$"),
    (r"\#", "#"),
    (r"\_", "_"),
    (r"\{", "&#123;"),
    (r"\}", "&#125;"),
]

# One-argument commands and the tags that replace them
INLINE_TAGS = [
    ("textbf", "<strong>", "</strong>"),
    ("textit", "<em>", "</em>"),
    ("emph", "<em>", "</em>"),
    ("textsl", "<em>", "</em>"),
    ("underline", "<u>", "</u>"),
    ("texttt", "<code>", "</code>"),
    ("textsc", '<span class="smallcaps">', "</span>"),
    ("mbox", "", ""),
    ("textnormal", "", ""),
]

ENVIRONMENT_TAGS = [
    ("itemize", "<ul>", "</ul>"),
    ("enumerate", "<ol>", "</ol>"),
    ("center", '<div class="center">', "</div>"),
]

LIST_MACRO_TAGS = [
    ("resumeItemListStart", "<ul>"),
    ("resumeItemListEnd", "</ul>"),
    ("resumeSubHeadingListStart", '<div class="entries">'),
    ("resumeSubHeadingListEnd", "</div>"),
]


@lru_cache(maxsize=None)
def get_html_template() -> Template:
    """
    The compiled resume HTML template, loaded once per process.

    Raises:
        TemplateNotFound: If the packaged template is missing
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_PATH)),
        # Catches silent failures
        undefined=StrictUndefined,
        autoescape=select_autoescape(["html", "j2"]),
    )
    return env.get_template(HTML_TEMPLATE_NAME)


def _attribute(value: str) -> str:
    return value.strip().replace('"', "&quot;")


def _row(primary: str, secondary: str, css_class: str = "entry-row") -> str:
    return (
        f'<div class="{css_class}"><span class="left">{primary.strip()}</span>'
        f'<span class="right">{secondary.strip()}</span></div>'
    )


def _subheading(params: List[str]) -> str:
    return (
        '<div class="entry">'
        + _row(f"<strong>{params[0]}</strong>", params[1])
        + _row(f"<em>{params[2]}</em>", f"<em>{params[3]}</em>", "entry-row secondary")
        + "</div>"
    )


def _two_part_heading(params: List[str]) -> str:
    return '<div class="entry">' + _row(f"<strong>{params[0]}</strong>", params[1]) + "</div>"


def _convert_structure(text: str) -> str:
    text = replace_command_with(text, "section", 1, lambda p: f"\n<h2>{p[0].strip()}</h2>\n")
    text = replace_command_with(text, "subsection", 1, lambda p: f"\n<h3>{p[0].strip()}</h3>\n")
    text = replace_command_with(text, "resumeSubheading", 4, _subheading)
    text = replace_command_with(text, "resumeSubSubheading", 2, _two_part_heading)
    text = replace_command_with(text, "resumeProjectHeading", 2, _two_part_heading)
    text = replace_command_with(
        text, "resumeSubItem", 2, lambda p: f"<li><strong>{p[0]}</strong>: {p[1]}</li>"
    )
    text = replace_command_with(text, "resumeItem", 1, lambda p: f"<li>{p[0]}</li>")

    for macro, tag in LIST_MACRO_TAGS:
        text = re.sub(r"\\" + macro + r"(?![A-Za-z])", tag, text)

    text = re.sub(FormatterPatterns.TABULAR_SPEC, "", text)
    for environment, open_tag, close_tag in ENVIRONMENT_TAGS:
        text = re.sub(r"\\begin\{" + environment + r"\}(?:\[[^\]]*\])?", open_tag, text)
        text = re.sub(r"\\end\{" + environment + r"\}", close_tag, text)
    text = re.sub(LaTeXPatterns.BEGIN_ANY_ENV, "", text)
    text = re.sub(LaTeXPatterns.END_ANY_ENV, "", text)

    text = re.sub(FormatterPatterns.ITEM, "<li>", text)
    return re.sub(FormatterPatterns.LINE_BREAK, "<br>", text)


def _convert_inline(text: str) -> str:
    text = replace_command_with(
        text, "href", 2, lambda p: f'<a href="{_attribute(p[0])}">{p[1]}</a>'
    )
    text = replace_command_with(
        text, "url", 1, lambda p: f'<a href="{_attribute(p[0])}">{p[0]}</a>'
    )
    for command, open_tag, close_tag in INLINE_TAGS:
        text = replace_command(text, command, open_tag, close_tag)
    return text


def _strip_layout(text: str) -> str:
    for command, num_params in LAYOUT_COMMANDS_WITH_ARGS:
        text = replace_command_with(text, command, num_params, lambda params: " ")
    text = replace_command_with(text, "textcolor", 2, lambda params: params[1])
    text = strip_formatting(text, LAYOUT_COMMANDS, replacement=" ")
    text = re.sub(FormatterPatterns.MATH_SEPARATOR, " | ", text)
    return re.sub(FormatterPatterns.MATH_SYMBOL, " &middot; ", text)


def _strip_leftovers(text: str) -> str:
    text = re.sub(FormatterPatterns.TIE, "&nbsp;", text)
    for command, replacement in SYMBOL_COMMANDS.items():
        text = re.sub(r"\\" + command + r"(?![A-Za-z])(?:\{\})?", html.escape(replacement), text)
    text = re.sub(FormatterPatterns.REMAINING_COMMAND, " ", text)
    for escaped, replacement in HTML_ESCAPED_SPECIALS:
        text = text.replace(escaped, replacement)
    text = text.replace("\\", "").replace("{", "").replace("}", "")
    text = text.replace("---", "&mdash;").replace("--", "&ndash;")
    return re.sub(r"\n\s*\n+", "\n", text).strip()


def markup_to_html_body(markup: str) -> str:
    """
    Convert the document body of resume markup to an HTML fragment.

    Example:
        >>> markup_to_html_body("\\\\section{Skills}\\\\textbf{Python} \\\\& Go")
        '<h2>Skills</h2>\\n<strong>Python</strong> &amp; Go'
    """
    body = extract_body(markup)
    end = body.find(DocumentPatterns.END_DOCUMENT)
    if end != -1:
        body = body[:end]

    body = re.sub(FormatterPatterns.COMMENT, "", body, flags=re.MULTILINE)
    body = re.sub(r"(?<!\\)&", " ", body)  # tabular column separators
    text = html.escape(body, quote=False)

    text = _convert_structure(text)
    text = _convert_inline(text)
    text = _strip_layout(text)
    return _strip_leftovers(text)


def markup_to_html(markup: str, title: Optional[str] = None) -> str:
    """
    Convert resume markup to a standalone HTML page ready for printing.

    Args:
        markup: Resume markup
        title: Page title (default: "Resume")

    Returns:
        Complete HTML document
    """
    body = markup_to_html_body(markup)
    page = get_html_template().render(title=title or "Resume", body=body)
    log_html_conversion(len(markup), len(page))
    return page
