"""
Integration tests for the TeX toolchain strategies - real pdflatex and docker runs.
"""

import shutil
import subprocess

import pytest

from texpress.contexts.compilation.strategies.docker import DockerLatexStrategy
from texpress.contexts.compilation.strategies.native import NativeLatexStrategy
from texpress.utils.pdf_processing import extract_text, page_count

PDFLATEX_AVAILABLE = shutil.which("pdflatex") is not None
skip_if_no_pdflatex = pytest.mark.skipif(
    not PDFLATEX_AVAILABLE,
    reason="pdflatex not installed - install TeX Live, MiKTeX, or MacTeX",
)


def _docker_running() -> bool:
    if shutil.which("docker") is None:
        return False
    try:
        return subprocess.run(["docker", "info"], capture_output=True, timeout=10).returncode == 0
    except (OSError, subprocess.TimeoutExpired):
        return False


skip_if_no_docker = pytest.mark.skipif(not _docker_running(), reason="docker daemon not available")

BROKEN_DOCUMENT = r"""
\documentclass{article}
\begin{document}
\undefinedcommand{This will fail}
\end{document}
"""


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_native_compiles_minimal(minimal_markup):
    """pdflatex turns a minimal document into a one-page PDF."""
    result = NativeLatexStrategy(timeout_s=60).compile(minimal_markup, "minimal")

    assert result.success, result.error
    assert page_count(result.pdf_bytes) == 1
    assert "BS in Physics" in extract_text(result.pdf_bytes)[0]


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_native_reports_errors():
    """A broken document fails with the error from the log."""
    result = NativeLatexStrategy(timeout_s=60).compile(BROKEN_DOCUMENT, "broken")

    assert not result.success
    assert not result.skipped
    assert "Undefined control sequence" in result.error


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_native_shell_escape_disabled(tmp_path):
    """\\write18 does not run commands even if markup reaches the compiler."""
    marker = tmp_path / "pwned"
    markup = (
        "\\documentclass{article}\\begin{document}"
        f"\\immediate\\write18{{touch {marker}}}ok\\end{{document}}"
    )

    NativeLatexStrategy(timeout_s=60).compile(markup, "escape")
    assert not marker.exists()


@pytest.mark.integration
@pytest.mark.docker
@skip_if_no_docker
def test_docker_compiles_minimal(minimal_markup):
    """The containerized toolchain compiles the same document."""
    result = DockerLatexStrategy(timeout_s=300).compile(minimal_markup, "minimal")

    assert result.success, result.error
    assert page_count(result.pdf_bytes) == 1
