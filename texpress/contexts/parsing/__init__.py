"""
Parsing Context

Responsibilities:
- Parses raw resume markup into an immutable Document (name, contact, sections)
- Normalizes each section's markup into line-based plain text

Owns: Document data structure, section detection, content normalization
Never: Validates input or produces PDF bytes
"""
