"""Custom exceptions for the intake context."""

from typing import List, Optional

from texpress.utils.text_processing import truncate_display


class InputValidationError(ValueError):
    """
    Exception raised when markup is rejected before any work starts.

    Attributes:
        violation: The first violation found (drives the reported reason)
        violations: Every violation found, in check order
    """

    def __init__(self, violations: List):  # List[Violation]
        if not violations:
            raise ValueError("InputValidationError requires at least one violation")

        self.violations = list(violations)
        self.violation = self.violations[0]

        # Build enhanced error message
        parts = [f"Input rejected ({self.violation.kind}): {self.violation.message}"]

        if self.violation.detail:
            parts.append(f"Detail: {truncate_display(self.violation.detail, 120)}")

        if len(self.violations) > 1:
            others = ", ".join(v.kind for v in self.violations[1:])
            parts.append(f"Also failed: {others}")

        super().__init__("\n".join(parts))

    @property
    def kind(self) -> str:
        return self.violation.kind

    @property
    def detail(self) -> Optional[str]:
        return self.violation.detail
