"""
Compilation strategy interface and result type.

A strategy turns markup into PDF bytes with one backend. Subclasses provide
the backend-specific hooks (probe, _compile) and CompilationStrategy.compile()
wraps them into a timed StrategyResult, so callers never see the two
strategy-level exceptions.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from texpress.contexts.compilation.exceptions import (
    StrategyCompilationFailed,
    StrategyUnavailable,
)
from texpress.utils.latex_cleaner import apply_rules
from texpress.utils.pdf_processing import is_pdf

PDF_CONTENT_TYPE = "application/pdf"


class QualityTier(str, Enum):
    """Fidelity of a successful result relative to a full TeX toolchain."""

    TOOLCHAIN_EQUIVALENT = "toolchain-equivalent"
    NATIVE_TOOLCHAIN = "native-toolchain"
    HTML_RENDERED = "html-rendered"
    MANUAL_PARSED = "manual-parsed"
    REMOTE_API_DEPENDENT = "remote-api-dependent"


@dataclass(frozen=True)
class StrategyResult:
    """
    Outcome of one strategy attempt.

    Attributes:
        success: Whether the attempt produced a PDF
        method_id: Strategy that made the attempt
        quality_tier: Tier the strategy would achieve
        pdf_bytes: PDF document (success only)
        size_bytes: len(pdf_bytes) (success only)
        error: Failure reason (failure only)
        skipped: True when the capability probe failed and nothing was compiled
        elapsed_s: Wall-clock duration of the attempt
        content_type: MIME type of pdf_bytes
        page_count: Page count, attached by the orchestrator on success

    Raises:
        ValueError: On construction when success/failure fields are inconsistent
    """

    success: bool
    method_id: str
    quality_tier: QualityTier
    pdf_bytes: Optional[bytes] = field(default=None, repr=False)
    size_bytes: Optional[int] = None
    error: Optional[str] = None
    skipped: bool = False
    elapsed_s: float = 0.0
    content_type: str = PDF_CONTENT_TYPE
    page_count: Optional[int] = None

    def __post_init__(self):
        if self.success:
            if not self.pdf_bytes or not is_pdf(self.pdf_bytes):
                raise ValueError(f"{self.method_id}: successful result must carry PDF bytes")
            if self.size_bytes != len(self.pdf_bytes):
                raise ValueError(
                    f"{self.method_id}: size_bytes={self.size_bytes} but "
                    f"len(pdf_bytes)={len(self.pdf_bytes)}"
                )
            if self.skipped:
                raise ValueError(f"{self.method_id}: a skipped result cannot succeed")
        else:
            if not self.error:
                raise ValueError(f"{self.method_id}: failed result must carry an error")
            if self.pdf_bytes is not None or self.size_bytes is not None:
                raise ValueError(f"{self.method_id}: failed result must not carry bytes")

    @classmethod
    def succeeded(
        cls, method_id: str, quality_tier: QualityTier, pdf_bytes: bytes, elapsed_s: float = 0.0
    ) -> "StrategyResult":
        return cls(
            success=True,
            method_id=method_id,
            quality_tier=quality_tier,
            pdf_bytes=pdf_bytes,
            size_bytes=len(pdf_bytes),
            elapsed_s=elapsed_s,
        )

    @classmethod
    def failed(
        cls,
        method_id: str,
        quality_tier: QualityTier,
        error: str,
        elapsed_s: float = 0.0,
        skipped: bool = False,
    ) -> "StrategyResult":
        return cls(
            success=False,
            method_id=method_id,
            quality_tier=quality_tier,
            error=error,
            skipped=skipped,
            elapsed_s=elapsed_s,
        )


class CompilationStrategy(ABC):
    """
    One way of turning markup into a PDF.

    Subclasses set method_id, quality_tier and cleanup_rules, implement
    _compile(), and override probe() when the backend can be missing.

    Example:
        strategy = ManualParseStrategy()
        result = strategy.compile(markup, "resume")
        if result.success:
            Path("resume.pdf").write_bytes(result.pdf_bytes)
    """

    method_id: str = ""
    quality_tier: QualityTier = QualityTier.MANUAL_PARSED
    cleanup_rules: Tuple[str, ...] = ()

    def probe(self) -> None:
        """
        Check that the backend can run at all.

        Raises:
            StrategyUnavailable: Backend missing or not responding
        """

    def prepare(self, markup: str) -> str:
        """Apply this strategy's cleanup rules to the markup."""
        return apply_rules(markup, self.cleanup_rules)

    @abstractmethod
    def _compile(self, markup: str, filename: str) -> bytes:
        """
        Produce PDF bytes from prepared markup.

        Raises:
            StrategyCompilationFailed: Backend ran but produced no usable PDF
        """

    def is_available(self) -> Tuple[bool, Optional[str]]:
        """Run the probe and report (available, reason_if_not)."""
        try:
            self.probe()
        except StrategyUnavailable as e:
            return False, e.reason
        return True, None

    def compile(self, markup: str, filename: str = "resume") -> StrategyResult:
        """
        Probe, prepare and compile, returning a timed result.

        Strategy errors become failed results. Anything else propagates to
        the caller.
        """
        start = time.time()
        try:
            self.probe()
        except StrategyUnavailable as e:
            return StrategyResult.failed(
                self.method_id, self.quality_tier, e.reason, time.time() - start, skipped=True
            )

        try:
            pdf_bytes = self._compile(self.prepare(markup), filename)
        except StrategyCompilationFailed as e:
            return StrategyResult.failed(
                self.method_id, self.quality_tier, str(e), time.time() - start
            )

        if not pdf_bytes or not is_pdf(pdf_bytes):
            return StrategyResult.failed(
                self.method_id,
                self.quality_tier,
                "Backend returned data that is not a PDF",
                time.time() - start,
            )

        return StrategyResult.succeeded(
            self.method_id, self.quality_tier, pdf_bytes, time.time() - start
        )
