"""
Fallback orchestrator.

Tries compilation strategies one at a time, in preference order, until one
produces a PDF. Validation runs once up front and is the only failure that
stops the run early. Every strategy attempt is isolated: a failed result or
any exception is logged and the next strategy is tried.

Example:
    from texpress.contexts.compilation.orchestrator import (
        CompilationOrchestrator,
        build_default_strategies,
    )

    orchestrator = CompilationOrchestrator(build_default_strategies())
    result = orchestrator.compile_to_pdf(markup, "jane_doe")
    print(result.method_id, result.quality_tier.value, result.size_bytes)
"""

import dataclasses
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from omegaconf import DictConfig

from texpress.contexts.compilation.exceptions import AllStrategiesFailed
from texpress.contexts.compilation.logger import (
    log_all_failed,
    log_attempt_exception,
    log_attempt_result,
    log_attempt_start,
    log_run_start,
    log_unknown_method,
)
from texpress.contexts.compilation.strategies.base import (
    CompilationStrategy,
    QualityTier,
    StrategyResult,
)
from texpress.contexts.compilation.strategies.browser import BrowserHtmlStrategy
from texpress.contexts.compilation.strategies.docker import DockerLatexStrategy
from texpress.contexts.compilation.strategies.manual import ManualParseStrategy
from texpress.contexts.compilation.strategies.native import NativeLatexStrategy
from texpress.contexts.compilation.strategies.remote_api import RemoteApiStrategy
from texpress.contexts.intake.validator import ensure_valid
from texpress.utils.pdf_processing import page_count
from texpress.utils.settings import get_settings
from texpress.utils.text_processing import truncate_display


@dataclass(frozen=True)
class MethodAvailability:
    """Probe outcome for one strategy."""

    method_id: str
    quality_tier: QualityTier
    available: bool
    reason: Optional[str] = None


def build_default_strategies(settings: Optional[DictConfig] = None) -> List[CompilationStrategy]:
    """
    Instantiate every strategy from configuration, in configured fallback order.

    Args:
        settings: Full settings object (default: get_settings())

    Returns:
        Strategies ordered by compilation.fallback_order

    Raises:
        KeyError: If fallback_order names an unknown method
    """
    settings = settings if settings is not None else get_settings()
    compilation = settings.compilation
    timeouts = compilation.timeouts

    available: Dict[str, CompilationStrategy] = {
        NativeLatexStrategy.method_id: NativeLatexStrategy(
            compiler=compilation.latex_compiler,
            timeout_s=timeouts.native_latex,
            probe_timeout_s=compilation.probe_timeout_s,
            passes=compilation.latex_passes,
        ),
        DockerLatexStrategy.method_id: DockerLatexStrategy(
            image=compilation.docker_image,
            executable=compilation.docker_executable,
            timeout_s=timeouts.docker_latex,
            probe_timeout_s=compilation.probe_timeout_s,
            passes=compilation.latex_passes,
        ),
        BrowserHtmlStrategy.method_id: BrowserHtmlStrategy(
            executable_path=compilation.chromium_executable or None,
            timeout_s=timeouts.browser_html,
        ),
        RemoteApiStrategy.method_id: RemoteApiStrategy(
            url=compilation.remote_url,
            engine=compilation.remote_engine,
            timeout_s=timeouts.remote_api,
        ),
        ManualParseStrategy.method_id: ManualParseStrategy(settings=settings),
    }

    unknown = [method for method in compilation.fallback_order if method not in available]
    if unknown:
        raise KeyError(f"Unknown methods in compilation.fallback_order: {', '.join(unknown)}")

    return [available[method] for method in compilation.fallback_order]


class CompilationOrchestrator:
    """
    Runs strategies in order until one succeeds.

    Args:
        strategies: Strategies in default fallback order (method ids must be unique)
        settings: Full settings object, used for validation (default: get_settings())

    Raises:
        ValueError: If two strategies share a method id
    """

    def __init__(
        self,
        strategies: Sequence[CompilationStrategy],
        settings: Optional[DictConfig] = None,
    ):
        self.strategies = list(strategies)
        self.settings = settings

        self._by_id: Dict[str, CompilationStrategy] = {}
        for strategy in self.strategies:
            if strategy.method_id in self._by_id:
                raise ValueError(f"Duplicate strategy method id: {strategy.method_id}")
            self._by_id[strategy.method_id] = strategy

    @property
    def method_ids(self) -> List[str]:
        return [strategy.method_id for strategy in self.strategies]

    def attempt_order(self, preferred_method: Optional[str] = None) -> List[CompilationStrategy]:
        """Preferred strategy first (when known), then the rest in default order."""
        if preferred_method is None:
            return list(self.strategies)

        if preferred_method not in self._by_id:
            log_unknown_method(preferred_method)
            return list(self.strategies)

        preferred = self._by_id[preferred_method]
        return [preferred] + [s for s in self.strategies if s is not preferred]

    def _attempt(self, strategy: CompilationStrategy, markup: str, filename: str) -> StrategyResult:
        log_attempt_start(strategy.method_id)
        start = time.time()
        try:
            result = strategy.compile(markup, filename)
        except Exception as e:
            elapsed = time.time() - start
            log_attempt_exception(strategy.method_id, e, elapsed)
            return StrategyResult.failed(
                strategy.method_id,
                strategy.quality_tier,
                f"Unexpected {type(e).__name__}: {truncate_display(str(e), 200)}",
                elapsed,
            )
        log_attempt_result(result)
        return result

    def compile_to_pdf(
        self,
        markup: str,
        filename: str = "resume",
        preferred_method: Optional[str] = None,
    ) -> StrategyResult:
        """
        Compile markup with the first strategy that succeeds.

        Args:
            markup: Resume markup
            filename: Output name without extension
            preferred_method: Method id to try first (unknown ids are ignored)

        Returns:
            The successful StrategyResult, with page_count attached

        Raises:
            InputValidationError: Input rejected; no strategy was attempted
            AllStrategiesFailed: Every strategy failed or was unavailable
        """
        settings = self.settings if self.settings is not None else get_settings()
        ensure_valid(markup, filename, settings.validation)

        order = self.attempt_order(preferred_method)
        log_run_start(filename, [strategy.method_id for strategy in order])

        failures: List[StrategyResult] = []
        for strategy in order:
            result = self._attempt(strategy, markup, filename)
            if result.success:
                return dataclasses.replace(result, page_count=page_count(result.pdf_bytes))
            failures.append(result)

        error = AllStrategiesFailed(failures)
        log_all_failed(error)
        raise error

    def available_methods(self) -> List[MethodAvailability]:
        """Probe every strategy and report which could run right now."""
        report = []
        for strategy in self.strategies:
            try:
                available, reason = strategy.is_available()
            except Exception as e:
                available, reason = False, f"{type(e).__name__}: {e}"
            report.append(
                MethodAvailability(strategy.method_id, strategy.quality_tier, available, reason)
            )
        return report
