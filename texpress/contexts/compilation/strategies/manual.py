"""
Baseline strategy: structural parse plus reportlab layout.

Needs no external tool and is always available. It reproduces content and
a clean layout but none of the document's own styling.
"""

from typing import Optional

from omegaconf import DictConfig

from texpress.contexts.compilation.exceptions import StrategyCompilationFailed
from texpress.contexts.compilation.strategies.base import CompilationStrategy, QualityTier
from texpress.contexts.parsing.parser import parse_document
from texpress.contexts.rendering.exceptions import RenderConstructionError
from texpress.contexts.rendering.layout_renderer import render_document
from texpress.utils.latex_cleaner import CleanupRule


class ManualParseStrategy(CompilationStrategy):
    """
    Parse the markup into a Document and lay it out directly.

    Args:
        settings: Full settings object (default: get_settings() at render time)
    """

    method_id = "manual_parse"
    quality_tier = QualityTier.MANUAL_PARSED
    cleanup_rules = (CleanupRule.REPAIR_BACKSLASHES, CleanupRule.COLLAPSE_BACKSLASH_RUNS)

    def __init__(self, settings: Optional[DictConfig] = None):
        self.settings = settings

    def _compile(self, markup: str, filename: str) -> bytes:
        parsing = self.settings.parsing if self.settings is not None else None
        rendering = self.settings.rendering if self.settings is not None else None

        document = parse_document(markup, settings=parsing)
        try:
            return render_document(document, title=filename, settings=rendering)
        except RenderConstructionError as e:
            raise StrategyCompilationFailed(self.method_id, str(e)) from e
