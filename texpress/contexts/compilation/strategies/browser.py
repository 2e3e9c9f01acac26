"""
Headless Chromium printing of an HTML rendition.

The markup is converted to HTML (rendering/html_converter.py) and printed to
an A4 PDF with playwright's synchronous API. Playwright's sync API cannot run
inside an asyncio event loop, so callers in async code must run the
orchestrator in a worker thread (PreviewService does).
"""

from pathlib import Path
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from texpress.contexts.compilation.exceptions import (
    StrategyCompilationFailed,
    StrategyUnavailable,
)
from texpress.contexts.compilation.strategies.base import CompilationStrategy, QualityTier
from texpress.contexts.rendering.html_converter import markup_to_html
from texpress.utils.latex_cleaner import CleanupRule

PAGE_MARGIN = {"top": "15mm", "bottom": "15mm", "left": "15mm", "right": "15mm"}


class BrowserHtmlStrategy(CompilationStrategy):
    """
    Print an HTML rendition of the markup with Chromium.

    Args:
        executable_path: Chromium binary to launch (default: playwright's bundled build)
        timeout_s: Limit for launching, loading and printing, each
    """

    method_id = "browser_html"
    quality_tier = QualityTier.HTML_RENDERED
    cleanup_rules = (
        CleanupRule.REPAIR_BACKSLASHES,
        CleanupRule.COLLAPSE_BACKSLASH_RUNS,
        CleanupRule.UNICODE_DASHES,
    )

    def __init__(self, executable_path: Optional[str] = None, timeout_s: float = 30):
        self.executable_path = executable_path or None
        self.timeout_s = timeout_s

    def probe(self) -> None:
        if self.executable_path:
            if not Path(self.executable_path).exists():
                raise StrategyUnavailable(
                    self.method_id, f"Browser executable not found: {self.executable_path}"
                )
            return

        try:
            with sync_playwright() as playwright:
                bundled = playwright.chromium.executable_path
        except PlaywrightError as e:
            raise StrategyUnavailable(self.method_id, f"Playwright unavailable: {e}") from e

        if not bundled or not Path(bundled).exists():
            raise StrategyUnavailable(
                self.method_id, "Chromium not installed (run `playwright install chromium`)"
            )

    def _compile(self, markup: str, filename: str) -> bytes:
        page_html = markup_to_html(markup, title=filename)
        timeout_ms = self.timeout_s * 1000

        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(
                    executable_path=self.executable_path,
                    args=["--no-sandbox", "--disable-dev-shm-usage"],
                    timeout=timeout_ms,
                )
                try:
                    page = browser.new_page()
                    page.set_default_timeout(timeout_ms)
                    page.set_content(page_html, wait_until="load")
                    return page.pdf(format="A4", print_background=True, margin=PAGE_MARGIN)
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise StrategyCompilationFailed(self.method_id, f"Browser printing failed: {e}") from e
