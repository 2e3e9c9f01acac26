"""
Compilation through the texlive.net latexcgi service.

The markup is posted as multipart form fields. A PDF response is the
success case; anything else is an HTML or text error page from which the
first few TeX error lines are extracted.
"""

import re
from typing import List, Optional

import httpx

from texpress.contexts.compilation.exceptions import StrategyCompilationFailed
from texpress.contexts.compilation.strategies.base import CompilationStrategy, QualityTier
from texpress.contexts.compilation.strategies.toolchain import TOOLCHAIN_CLEANUP_RULES
from texpress.utils.pdf_processing import is_pdf

DEFAULT_REMOTE_URL = "https://texlive.net/cgi-bin/latexcgi"
MAX_REPORTED_ERRORS = 3

REMOTE_ERROR_PATTERNS = [
    r"^! .+$",
    r"Error: .+",
    r"Fatal error: .+",
    r"Undefined control sequence.*",
]

GENERIC_REMOTE_ERRORS = {
    "Undefined control sequence": (
        "LaTeX compilation error: Undefined control sequence. Please check your LaTeX syntax."
    ),
    "Emergency stop": (
        "LaTeX compilation error: Emergency stop. Please check for syntax errors."
    ),
}
FALLBACK_REMOTE_ERROR = "LaTeX compilation failed. Please check your LaTeX syntax and try again."


def parse_remote_errors(body: str) -> List[str]:
    """
    Extract readable error lines from a service error page.

    Returns at most three messages. When no known error line is present, a
    single generic message is returned instead.

    Example:
        >>> parse_remote_errors("<pre>! Missing $ inserted.\\nl.12</pre>")
        ['! Missing $ inserted.']
    """
    text = re.sub(r"<[^>]+>", "\n", body)
    for pattern in REMOTE_ERROR_PATTERNS:
        matches = [m.group(0).strip() for m in re.finditer(pattern, text, re.MULTILINE)]
        if matches:
            return matches[:MAX_REPORTED_ERRORS]

    for marker, message in GENERIC_REMOTE_ERRORS.items():
        if marker in body:
            return [message]
    return [FALLBACK_REMOTE_ERROR]


class RemoteApiStrategy(CompilationStrategy):
    """
    Compile on a remote TeX service.

    Args:
        url: latexcgi endpoint
        engine: TeX engine name understood by the service
        timeout_s: Request timeout
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    method_id = "remote_api"
    quality_tier = QualityTier.REMOTE_API_DEPENDENT
    cleanup_rules = TOOLCHAIN_CLEANUP_RULES

    def __init__(
        self,
        url: str = DEFAULT_REMOTE_URL,
        engine: str = "pdflatex",
        timeout_s: float = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        self.engine = engine
        self.timeout_s = timeout_s
        self.transport = transport

    def _compile(self, markup: str, filename: str) -> bytes:
        # (None, value) parts are plain form fields, not file uploads
        form = [
            ("filecontents[]", (None, markup)),
            ("filename[]", (None, "document.tex")),
            ("engine", (None, self.engine)),
            ("return", (None, "pdf")),
        ]

        try:
            with httpx.Client(
                timeout=self.timeout_s, transport=self.transport, follow_redirects=True
            ) as client:
                response = client.post(self.url, files=form)
        except httpx.TimeoutException as e:
            raise StrategyCompilationFailed(
                self.method_id, f"Remote service timed out after {self.timeout_s:g}s"
            ) from e
        except httpx.HTTPError as e:
            raise StrategyCompilationFailed(self.method_id, f"Remote request failed: {e}") from e

        content_type = response.headers.get("content-type", "")
        if response.is_success and ("application/pdf" in content_type or is_pdf(response.content)):
            return response.content

        if response.is_error and not response.text.strip():
            raise StrategyCompilationFailed(
                self.method_id, f"Remote service returned HTTP {response.status_code}"
            )

        errors = parse_remote_errors(response.text)
        raise StrategyCompilationFailed(
            self.method_id,
            f"HTTP {response.status_code}: {errors[0]}",
            details=errors[1:],
        )
