"""
Intake Context

Responsibilities:
- Gatekeeps raw markup before any parsing or compilation
- Enforces size, brace balance, dangerous-command and filename rules
- Reports every violation with a distinct kind for user-facing messages

Owns: Input acceptance rules
Never: Parses structure or compiles markup
"""
