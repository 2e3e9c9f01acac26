"""
Preview layer: cached, time-bounded compilation for interactive callers.

PreviewService sits in front of the orchestrator. Identical requests within
the cache TTL are answered from the ResultCache. Uncached requests run the
orchestrator in a worker thread and wait at most preview.request_timeout_s;
on expiry the caller gets CompilationTimeout while the attempt keeps running
in the background until it finishes on its own.

error_payload() maps the three terminal failures to a uniform dict that an
outer surface (CLI, HTTP handler) can serialize.
"""

import resource
import sys
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from omegaconf import DictConfig

from texpress.contexts.compilation.exceptions import AllStrategiesFailed, CompilationTimeout
from texpress.contexts.compilation.logger import log_memory_sample, log_request_timeout
from texpress.contexts.compilation.orchestrator import CompilationOrchestrator
from texpress.contexts.compilation.result_cache import ResultCache, make_key
from texpress.contexts.compilation.strategies.base import StrategyResult
from texpress.contexts.intake.exceptions import InputValidationError
from texpress.utils.settings import get_settings


@dataclass(frozen=True)
class CompilationResponse:
    """Successful compilation as returned to callers."""

    pdf_bytes: bytes = field(repr=False)
    size_bytes: int
    content_type: str
    method_id: str
    quality_tier: str
    cached: bool = False
    page_count: Optional[int] = None

    @classmethod
    def from_result(cls, result: StrategyResult, cached: bool = False) -> "CompilationResponse":
        return cls(
            pdf_bytes=result.pdf_bytes,
            size_bytes=result.size_bytes,
            content_type=result.content_type,
            method_id=result.method_id,
            quality_tier=result.quality_tier.value,
            cached=cached,
            page_count=result.page_count,
        )


def current_rss_mb() -> float:
    """Peak resident set size of this process in MB."""
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS bytes
    return peak / (1024 * 1024) if sys.platform == "darwin" else peak / 1024


def error_payload(error: Exception) -> Dict[str, Any]:
    """
    Describe a terminal compilation failure as a serializable dict.

    Args:
        error: InputValidationError, AllStrategiesFailed or CompilationTimeout

    Returns:
        {"success": False, "error": <category>, "step": ..., "reason": ..., ...}

    Raises:
        TypeError: For any other exception type
    """
    if isinstance(error, InputValidationError):
        return {
            "success": False,
            "error": "input_rejected",
            "step": f"validation:{error.kind}",
            "reason": error.violation.message,
            "detail": error.detail,
            "violations": [violation.kind for violation in error.violations],
        }
    if isinstance(error, AllStrategiesFailed):
        last = error.last_result
        return {
            "success": False,
            "error": "no_backend_available",
            "step": error.last_method_id,
            "reason": last.error if last is not None else "No compilation strategies configured",
            "attempts": [
                {
                    "method_id": attempt.method_id,
                    "skipped": attempt.skipped,
                    "error": attempt.error,
                    "elapsed_s": round(attempt.elapsed_s, 3),
                }
                for attempt in error.attempts
            ],
        }
    if isinstance(error, CompilationTimeout):
        return {
            "success": False,
            "error": "timeout",
            "step": "compilation",
            "reason": str(error),
            "timeout_s": error.timeout_s,
        }
    raise TypeError(f"No error payload for {type(error).__name__}")


class PreviewService:
    """
    Cached, time-bounded front end to a CompilationOrchestrator.

    Args:
        orchestrator: Orchestrator that does the work
        cache: Result cache (default: built from the cache settings)
        settings: Full settings object (default: get_settings())
    """

    def __init__(
        self,
        orchestrator: CompilationOrchestrator,
        cache: Optional[ResultCache] = None,
        settings: Optional[DictConfig] = None,
    ):
        self.settings = settings if settings is not None else get_settings()
        self.orchestrator = orchestrator
        self.cache = cache or ResultCache(
            ttl_s=self.settings.cache.ttl_s, max_entries=self.settings.cache.max_entries
        )
        self.timeout_s = self.settings.preview.request_timeout_s
        self._executor = ThreadPoolExecutor(thread_name_prefix="texpress-preview")

    def compile_preview(
        self,
        markup: str,
        filename: str = "resume",
        preferred_method: Optional[str] = None,
    ) -> CompilationResponse:
        """
        Compile markup, answering from cache when possible.

        Raises:
            InputValidationError: Input rejected
            AllStrategiesFailed: No strategy produced a PDF
            CompilationTimeout: The request exceeded its time budget
        """
        key = make_key(markup, filename, preferred_method)
        cached = self.cache.get(key)
        if cached is not None:
            return CompilationResponse.from_result(cached, cached=True)

        future = self._executor.submit(
            self.orchestrator.compile_to_pdf, markup, filename, preferred_method
        )
        try:
            result = future.result(timeout=self.timeout_s)
        except FutureTimeoutError:
            log_request_timeout(self.timeout_s)
            raise CompilationTimeout(self.timeout_s)
        finally:
            log_memory_sample(current_rss_mb(), self.settings.preview.memory_warning_mb)

        self.cache.put(key, result)
        return CompilationResponse.from_result(result)

    def shutdown(self) -> None:
        """Stop accepting work; running attempts are not interrupted."""
        self._executor.shutdown(wait=False)
