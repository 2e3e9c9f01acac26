"""
TeXpress - resume markup to PDF with graceful degradation

Turns LaTeX-flavoured resume markup into a PDF using the best backend that is
actually available, down to a pure-Python parser and layout renderer that
never needs a TeX installation.

Architecture:
- Intake Context: Input gatekeeping (size, balance, dangerous commands, filenames)
- Parsing Context: Markup to structured Document (name, contact, sections)
- Rendering Context: Document to PDF (reportlab) and markup to HTML (jinja2)
- Compilation Context: Strategies, fallback orchestration, preview caching
"""

__version__ = "0.1.0"
