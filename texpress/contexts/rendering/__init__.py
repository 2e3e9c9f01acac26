"""
Rendering Context

Responsibilities:
- Lays out a parsed Document as a paginated PDF (reportlab)
- Converts resume markup to standalone HTML for browser printing (jinja2)

Owns: Page layout, font tiers, line styling, HTML conversion
Never: Parses markup into sections or chooses a compilation backend
"""
