"""Custom exceptions for the compilation context."""

from typing import List, Optional

from texpress.utils.text_processing import truncate_display


class StrategyError(Exception):
    """
    Base class for errors raised by a single compilation strategy.

    Attributes:
        method_id: Strategy that raised the error
        reason: Human-readable cause
    """

    def __init__(self, method_id: str, reason: str):
        self.method_id = method_id
        self.reason = reason
        super().__init__(f"[{method_id}] {reason}")


class StrategyUnavailable(StrategyError):
    """Capability probe failed; the strategy is skipped without compiling."""


class StrategyCompilationFailed(StrategyError):
    """
    Probe passed but compilation failed or timed out.

    Attributes:
        details: Extracted backend diagnostics (log errors, HTTP body excerpts)
    """

    def __init__(self, method_id: str, reason: str, details: Optional[List[str]] = None):
        self.details = list(details or [])
        super().__init__(method_id, reason)

        if self.details:
            lines = [str(self.args[0])]
            lines.extend(f"  {truncate_display(detail, 200)}" for detail in self.details[:5])
            self.args = ("\n".join(lines),)


class AllStrategiesFailed(Exception):
    """
    Every strategy was attempted and none produced a PDF.

    Attributes:
        attempts: One failed StrategyResult per attempted strategy, in order
        last_result: The final failed attempt (surfaced for diagnostics)
    """

    def __init__(self, attempts: List):  # List[StrategyResult]
        self.attempts = list(attempts)
        self.last_result = self.attempts[-1] if self.attempts else None

        # Build enhanced error message
        parts = [f"All {len(self.attempts)} compilation strategies failed"]
        for attempt in self.attempts:
            status = "skipped" if attempt.skipped else "failed"
            error = truncate_display(attempt.error or "", 160)
            parts.append(f"  {attempt.method_id} ({status}): {error}")

        super().__init__("\n".join(parts))

    @property
    def last_method_id(self) -> Optional[str]:
        return self.last_result.method_id if self.last_result else None


class CompilationTimeout(Exception):
    """
    A preview request exceeded its wall-clock budget.

    The in-flight attempt is abandoned, not cancelled.

    Attributes:
        timeout_s: Budget that was exceeded
    """

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(f"Compilation did not finish within {timeout_s:g}s")
