"""
Baseline PDF layout renderer.

Draws a parsed Document onto reportlab's canvas with a running vertical cursor:

    NAME (centered, largest tier)
    email | phone | linkedin | github      (omitted when no field resolved)
    ------------------------------------   (one rule under the header)
    SECTION TITLE                          (uppercased, underlined to text width)
    content lines, styled by classify_line()

Long lines wrap to the printable width. When the next line would cross the
bottom margin a new page starts; the header is not repeated.
"""

import io
import time
from typing import List, Optional

from omegaconf import DictConfig
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from texpress.contexts.parsing.document import Document, Section
from texpress.contexts.rendering.exceptions import RenderConstructionError
from texpress.contexts.rendering.line_classifier import LineKind, classify_line
from texpress.contexts.rendering.logger import (
    log_page_break,
    log_render_failure,
    log_render_result,
    log_render_start,
)
from texpress.contexts.rendering.styles import (
    ACCENT_COLOR,
    BODY_STYLE,
    BULLET_STYLE,
    CONTACT_STYLE,
    DEFAULT_LAYOUT,
    NAME_STYLE,
    SECONDARY_STYLE,
    SECTION_STYLE,
    SUBHEADING_STYLE,
    PageLayout,
    TextStyle,
    resolve_page_size,
)
from texpress.utils.settings import get_settings

CONTACT_SEPARATOR = " | "

LINE_STYLES = {
    LineKind.BULLET: BULLET_STYLE,
    LineKind.SECONDARY: SECONDARY_STYLE,
    LineKind.SUBHEADING: SUBHEADING_STYLE,
    LineKind.BODY: BODY_STYLE,
}


def pdf_safe_text(text: str) -> str:
    """Replace characters the standard Type 1 fonts cannot encode with '?'."""
    return text.encode("cp1252", errors="replace").decode("cp1252")


class LayoutRenderer:
    """
    Stateful drawing surface for one render: canvas, page size and cursor.

    Attributes:
        page_width: Page width in points
        page_height: Page height in points
        layout: Margins and gaps
        y: Baseline of the next line to draw
        page_number: 1-indexed number of the current page
    """

    def __init__(self, buffer: io.BytesIO, page_size, layout: PageLayout = DEFAULT_LAYOUT):
        self.canvas = canvas.Canvas(buffer, pagesize=page_size)
        self.page_width, self.page_height = page_size
        self.layout = layout
        self.page_number = 1
        self.y = self.top

    @property
    def top(self) -> float:
        return self.page_height - self.layout.margin_top

    @property
    def left(self) -> float:
        return self.layout.margin_left

    @property
    def right(self) -> float:
        return self.page_width - self.layout.margin_right

    @property
    def printable_width(self) -> float:
        return self.right - self.left

    def set_metadata(self, title: str, author: str, subject: str) -> None:
        self.canvas.setTitle(title)
        self.canvas.setAuthor(author)
        self.canvas.setSubject(subject)
        self.canvas.setCreator("TeXpress layout renderer")

    def ensure_space(self, height: float) -> None:
        """Start a new page when a line of this height would cross the bottom margin."""
        if self.y - height < self.layout.margin_bottom:
            log_page_break(self.page_number)
            self.canvas.showPage()
            self.page_number += 1
            self.y = self.top

    def _apply(self, style: TextStyle) -> None:
        self.canvas.setFont(style.font_name, style.font_size)
        self.canvas.setFillColor(style.color)

    def draw_centered(self, text: str, style: TextStyle) -> None:
        lines = simpleSplit(
            pdf_safe_text(text), style.font_name, style.font_size, self.printable_width
        )
        for line in lines:
            self.ensure_space(style.leading)
            self._apply(style)
            self.canvas.drawCentredString(self.page_width / 2, self.y - style.font_size, line)
            self.y -= style.leading

    def draw_wrapped(self, text: str, style: TextStyle, indent: float = 0) -> None:
        """Draw text wrapped to the printable width, starting at left + indent."""
        self._apply(style)
        width = self.printable_width - indent
        lines = simpleSplit(pdf_safe_text(text), style.font_name, style.font_size, width)
        for line in lines or [""]:
            self.ensure_space(style.leading)
            self._apply(style)
            self.canvas.drawString(self.left + indent, self.y - style.font_size, line)
            self.y -= style.leading

    def draw_bullet(self, text: str, style: TextStyle) -> None:
        """Draw a bullet marker with the item text wrapped under a hanging indent."""
        self.ensure_space(style.leading)
        self._apply(style)
        self.canvas.drawString(self.left + style.indent, self.y - style.font_size, "•")
        self.draw_wrapped(text, style, indent=style.indent + self.layout.bullet_text_offset)

    def draw_rule(self) -> None:
        self.ensure_space(self.layout.rule_gap)
        self.y -= self.layout.rule_gap / 2
        self.canvas.setStrokeColor(ACCENT_COLOR)
        self.canvas.setLineWidth(1)
        self.canvas.line(self.left, self.y, self.right, self.y)
        self.y -= self.layout.rule_gap / 2

    def draw_section_title(self, title: str) -> None:
        """Uppercased title with an underline as wide as the rendered text."""
        style = SECTION_STYLE
        text = pdf_safe_text(title.upper())
        self.y -= self.layout.section_gap
        self.ensure_space(style.leading + self.layout.underline_offset)
        self._apply(style)
        baseline = self.y - style.font_size
        self.canvas.drawString(self.left, baseline, text)

        underline_y = baseline - self.layout.underline_offset
        self.canvas.setStrokeColor(style.color)
        self.canvas.setLineWidth(0.8)
        title_width = self.canvas.stringWidth(text, style.font_name, style.font_size)
        self.canvas.line(self.left, underline_y, self.left + title_width, underline_y)
        self.y -= style.leading

    def draw_section(self, section: Section) -> None:
        self.draw_section_title(section.title)
        for line in section.lines:
            kind = classify_line(line)
            style = LINE_STYLES[kind]
            if kind == LineKind.BULLET:
                self.draw_bullet(line.lstrip("•").strip(), style)
            else:
                self.draw_wrapped(line.strip(), style, indent=style.indent)

    def finish(self) -> None:
        self.canvas.showPage()
        self.canvas.save()


def render_document(
    document: Document,
    title: Optional[str] = None,
    settings: Optional[DictConfig] = None,
) -> bytes:
    """
    Lay out a Document as a PDF.

    Args:
        document: Parsed resume
        title: PDF title metadata (default: the document name or placeholder)
        settings: rendering settings node (default: get_settings().rendering)

    Returns:
        Complete PDF bytes

    Raises:
        RenderConstructionError: When there is nothing at all to render or
            reportlab fails to build the stream
    """
    settings = settings if settings is not None else get_settings().rendering
    start = time.time()

    name = document.name or settings.placeholder_name
    if not name and not document.sections and document.contact.is_empty:
        raise RenderConstructionError("Nothing to render: no name, contact or sections")

    log_render_start(name, len(document.sections))
    buffer = io.BytesIO()

    try:
        renderer = LayoutRenderer(buffer, resolve_page_size(settings.page_size))
        renderer.set_metadata(title or name, settings.author, settings.subject)

        if name:
            renderer.draw_centered(name, NAME_STYLE)

        contact_values: List[str] = [value for _, value in document.contact.items()]
        if contact_values:
            renderer.draw_centered(CONTACT_SEPARATOR.join(contact_values), CONTACT_STYLE)

        if contact_values or document.sections:
            renderer.draw_rule()

        for section in document.sections:
            renderer.draw_section(section)

        renderer.finish()
    except Exception as e:
        log_render_failure(e)
        raise RenderConstructionError(
            "Failed to build PDF stream", document_name=name, original_error=e
        ) from e

    pdf_bytes = buffer.getvalue()
    log_render_result(renderer.page_number, len(pdf_bytes), time.time() - start)
    return pdf_bytes
