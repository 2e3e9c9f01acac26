"""
Unit tests for compilation strategies.

Backends are replaced with fakes: subprocess.run for the toolchain
strategies and httpx.MockTransport for the remote API. The manual strategy
runs for real.
"""

import subprocess
from pathlib import Path

import httpx
import pytest
from omegaconf import OmegaConf

from texpress.contexts.compilation.exceptions import (
    StrategyCompilationFailed,
    StrategyUnavailable,
)
from texpress.contexts.compilation.strategies import toolchain
from texpress.contexts.compilation.strategies.base import (
    CompilationStrategy,
    QualityTier,
    StrategyResult,
)
from texpress.contexts.compilation.strategies.browser import BrowserHtmlStrategy
from texpress.contexts.compilation.strategies.docker import DockerLatexStrategy
from texpress.contexts.compilation.strategies.manual import ManualParseStrategy
from texpress.contexts.compilation.strategies.native import NativeLatexStrategy
from texpress.contexts.compilation.strategies.remote_api import (
    FALLBACK_REMOTE_ERROR,
    RemoteApiStrategy,
    parse_remote_errors,
)
from texpress.contexts.compilation.strategies.toolchain import parse_latex_log
from texpress.utils.latex_cleaner import CleanupRule
from texpress.utils.pdf_processing import extract_text

FAKE_PDF = b"%PDF-1.4\n% fake document\n"

ERROR_LOG = """This is pdfTeX, Version 3.141592653
(./resume.tex
! Undefined control sequence.
l.12 \\resumeItm
                {Built things}
LaTeX Warning: Reference `sec:x' on page 1 undefined on input line 3.
! Emergency stop.
"""


class FakeLatexRun:
    """Stands in for subprocess.run, writing the files pdflatex would."""

    def __init__(self, pdf=FAKE_PDF, log=None, returncode=0, timeout=False):
        self.pdf = pdf
        self.log = log
        self.returncode = returncode
        self.timeout = timeout
        self.commands = []
        self.sources = []

    def __call__(self, command, cwd=None, **kwargs):
        self.commands.append(list(command))
        if "--version" in command or command[1:2] == ["rm"]:
            return subprocess.CompletedProcess(command, 0, "version 1.0", "")
        if self.timeout:
            raise subprocess.TimeoutExpired(command, kwargs.get("timeout"))

        workdir = Path(cwd)
        stem = Path(command[-1]).stem
        self.sources.append((workdir / command[-1]).read_text(encoding="utf-8"))
        if self.log is not None:
            (workdir / f"{stem}.log").write_text(self.log, encoding="latin-1")
        if self.pdf is not None:
            (workdir / f"{stem}.pdf").write_bytes(self.pdf)
        return subprocess.CompletedProcess(command, self.returncode, "output", "")


@pytest.fixture
def fake_run(monkeypatch):
    """Install a successful fake toolchain; tests may reconfigure it."""
    fake = FakeLatexRun()
    monkeypatch.setattr(toolchain.subprocess, "run", fake)
    return fake


class StubStrategy(CompilationStrategy):
    """Configurable in-memory strategy."""

    method_id = "stub"
    quality_tier = QualityTier.MANUAL_PARSED
    cleanup_rules = (CleanupRule.REPAIR_BACKSLASHES,)

    def __init__(self, output=FAKE_PDF, unavailable=False, error=None):
        self.output = output
        self.unavailable = unavailable
        self.error = error
        self.received = None

    def probe(self):
        if self.unavailable:
            raise StrategyUnavailable(self.method_id, "not installed")

    def _compile(self, markup, filename):
        self.received = markup
        if self.error:
            raise StrategyCompilationFailed(self.method_id, self.error)
        return self.output


class TestStrategyResult:
    """Tests for StrategyResult invariants."""

    def test_success(self):
        """A success carries PDF bytes and their size."""
        result = StrategyResult.succeeded("m", QualityTier.HTML_RENDERED, FAKE_PDF, 0.5)

        assert result.size_bytes == len(FAKE_PDF)
        assert result.content_type == "application/pdf"
        assert result.error is None

    def test_failure(self):
        """A failure carries an error and no bytes."""
        result = StrategyResult.failed("m", QualityTier.HTML_RENDERED, "boom", skipped=True)

        assert result.pdf_bytes is None
        assert result.skipped

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"success": True},
            {"success": True, "pdf_bytes": b"not a pdf", "size_bytes": 9},
            {"success": True, "pdf_bytes": FAKE_PDF, "size_bytes": 1},
            {"success": False},
            {"success": False, "error": "x", "pdf_bytes": FAKE_PDF},
        ],
    )
    def test_inconsistent_results_rejected(self, kwargs):
        """Results that break the success/failure contract cannot be built."""
        with pytest.raises(ValueError):
            StrategyResult(method_id="m", quality_tier=QualityTier.MANUAL_PARSED, **kwargs)


class TestCompileTemplate:
    """Tests for CompilationStrategy.compile()."""

    def test_success(self):
        """A PDF from _compile becomes a timed success."""
        result = StubStrategy().compile("markup", "resume")

        assert result.success
        assert result.method_id == "stub"
        assert result.elapsed_s >= 0

    def test_probe_failure_is_skip(self):
        """An unavailable backend yields a skipped failure without compiling."""
        strategy = StubStrategy(unavailable=True)
        result = strategy.compile("markup")

        assert not result.success
        assert result.skipped
        assert result.error == "not installed"
        assert strategy.received is None

    def test_compile_failure(self):
        """StrategyCompilationFailed becomes a failed, non-skipped result."""
        result = StubStrategy(error="bad markup").compile("markup")

        assert not result.success
        assert not result.skipped
        assert "bad markup" in result.error

    def test_non_pdf_output(self):
        """Bytes without the PDF header are a failure."""
        result = StubStrategy(output=b"<html>").compile("markup")
        assert "not a PDF" in result.error

    def test_cleanup_rules_applied(self):
        """The strategy compiles its prepared markup."""
        strategy = StubStrategy()
        strategy.compile("textbf{x}")
        assert strategy.received == r"\textbf{x}"

    def test_is_available(self):
        """is_available reports the probe outcome."""
        assert StubStrategy().is_available() == (True, None)
        assert StubStrategy(unavailable=True).is_available() == (False, "not installed")


class TestNativeLatex:
    """Tests for NativeLatexStrategy with a fake toolchain."""

    def test_missing_compiler_is_skipped(self):
        """A compiler that is not installed makes the strategy unavailable."""
        result = NativeLatexStrategy(compiler="texpress-no-such-latex").compile("x")

        assert result.skipped
        assert "not found" in result.error

    def test_success(self, fake_run):
        """The PDF written by the toolchain is returned."""
        result = NativeLatexStrategy().compile("\\documentclass{article}", "jane")

        assert result.success
        assert result.pdf_bytes == FAKE_PDF
        assert result.quality_tier == QualityTier.NATIVE_TOOLCHAIN

    def test_safe_flags(self, fake_run):
        """The compiler runs non-interactively with shell escape disabled."""
        NativeLatexStrategy().compile("x", "jane")
        command = fake_run.commands[-1]

        assert "-no-shell-escape" in command
        assert "-interaction=nonstopmode" in command
        assert "-halt-on-error" in command
        assert command[-1] == "jane.tex"

    def test_markup_is_cleaned(self, fake_run):
        """Toolchain cleanup rules run before compiling."""
        NativeLatexStrategy().compile("2019–2020", "jane")
        assert fake_run.sources[-1] == r"2019\textendash{}2020"

    def test_passes(self, fake_run):
        """Each configured pass runs the compiler once."""
        NativeLatexStrategy(passes=2).compile("x")
        compile_commands = [c for c in fake_run.commands if "--version" not in c]
        assert len(compile_commands) == 2

    def test_log_errors_reported(self, fake_run):
        """Errors parsed from the .log explain a missing PDF."""
        fake_run.pdf = None
        fake_run.log = ERROR_LOG
        fake_run.returncode = 1

        result = NativeLatexStrategy().compile("x")

        assert not result.success
        assert not result.skipped
        assert "Undefined control sequence" in result.error

    def test_no_pdf_no_log(self, fake_run):
        """Without a PDF or log the exit status is reported."""
        fake_run.pdf = None
        fake_run.returncode = 3

        result = NativeLatexStrategy().compile("x")
        assert "PDF file was not generated (exit status 3)" in result.error

    def test_timeout(self, fake_run):
        """A run exceeding its timeout fails the attempt."""
        fake_run.timeout = True

        result = NativeLatexStrategy(timeout_s=0.5).compile("x")
        assert "timed out after 0.5s" in result.error


class TestDockerLatex:
    """Tests for DockerLatexStrategy with a fake docker CLI."""

    def test_isolated_container(self, fake_run):
        """The container has no network and mounts only the scratch directory."""
        result = DockerLatexStrategy(image="texlive/texlive:2024").compile("x", "jane")
        command = fake_run.commands[-1]

        assert result.success
        assert result.quality_tier == QualityTier.TOOLCHAIN_EQUIVALENT
        assert command[:3] == ["docker", "run", "--rm"]
        assert command[command.index("--network") + 1] == "none"
        assert "texlive/texlive:2024" in command
        assert "-no-shell-escape" in command

    def test_timeout_removes_container(self, fake_run):
        """A timed-out run force-removes its container."""
        fake_run.timeout = True
        strategy = DockerLatexStrategy()

        result = strategy.compile("x")
        name = fake_run.commands[-2][fake_run.commands[-2].index("--name") + 1]

        assert "timed out" in result.error
        assert fake_run.commands[-1] == ["docker", "rm", "-f", name]

    def test_timeout_removes_only_its_own_container(self, fake_run, tmp_path):
        """Interleaved passes on one strategy keep separate container names."""
        strategy = DockerLatexStrategy()
        first = strategy.build_command(tmp_path, "a.tex", "aaaa")
        second = strategy.build_command(tmp_path, "b.tex", "bbbb")

        strategy.on_timeout("aaaa")

        assert first[first.index("--name") + 1] == "texpress-aaaa"
        assert second[second.index("--name") + 1] == "texpress-bbbb"
        assert fake_run.commands[-1] == ["docker", "rm", "-f", "texpress-aaaa"]

    def test_missing_docker_is_skipped(self):
        """No docker CLI means the strategy is unavailable."""
        result = DockerLatexStrategy(executable="texpress-no-such-docker").compile("x")
        assert result.skipped


class TestParseLatexLog:
    """Tests for parse_latex_log."""

    def test_errors_and_warnings(self):
        """Errors keep log order; warnings are collected separately."""
        errors, warnings = parse_latex_log(ERROR_LOG)

        assert errors == ["Undefined control sequence.", "Emergency stop."]
        assert warnings == ["Reference `sec:x' on page 1 undefined on input line 3."]

    def test_file_line_errors(self):
        """file:line:error style messages are errors too."""
        errors, _ = parse_latex_log("./resume.tex:7: Missing } inserted.\n")
        assert errors == ["Missing } inserted."]

    def test_clean_log(self):
        """A clean log has no errors."""
        assert parse_latex_log("Output written on resume.pdf (1 page).") == ([], [])


class TestRemoteApi:
    """Tests for RemoteApiStrategy against httpx.MockTransport."""

    def test_success(self):
        """A PDF response is returned as is."""
        seen = {}

        def handler(request):
            seen["body"] = request.read().decode()
            headers = {"content-type": "application/pdf"}
            return httpx.Response(200, content=FAKE_PDF, headers=headers)

        strategy = RemoteApiStrategy(transport=httpx.MockTransport(handler))
        result = strategy.compile(r"\documentclass{article}", "jane")

        assert result.success
        assert result.quality_tier == QualityTier.REMOTE_API_DEPENDENT
        assert 'name="filecontents[]"' in seen["body"]
        assert 'name="engine"' in seen["body"]
        assert "document.tex" in seen["body"]
        assert r"\documentclass{article}" in seen["body"]

    def test_error_page(self):
        """Errors are extracted from an HTML error page."""

        def handler(request):
            body = "<html><pre>! LaTeX Error: File `nope.sty' not found.\nl.3</pre></html>"
            return httpx.Response(200, text=body, headers={"content-type": "text/html"})

        result = RemoteApiStrategy(transport=httpx.MockTransport(handler)).compile("x")

        assert not result.success
        assert "File `nope.sty' not found" in result.error

    def test_empty_http_error(self):
        """An HTTP error without a body reports the status."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        result = RemoteApiStrategy(transport=transport).compile("x")
        assert "HTTP 503" in result.error

    def test_timeout(self):
        """A request timeout fails the attempt."""

        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        result = RemoteApiStrategy(timeout_s=2, transport=httpx.MockTransport(handler)).compile("x")
        assert "timed out after 2s" in result.error

    def test_connection_error(self):
        """Network failures fail the attempt."""

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = RemoteApiStrategy(transport=httpx.MockTransport(handler)).compile("x")
        assert "Remote request failed" in result.error


class TestParseRemoteErrors:
    """Tests for parse_remote_errors."""

    def test_first_three(self):
        """At most three error lines are reported."""
        body = "\n".join(f"! Error number {i}" for i in range(5))
        assert parse_remote_errors(body) == [f"! Error number {i}" for i in range(3)]

    def test_generic_emergency_stop(self):
        """A bare marker falls back to a generic message."""
        (message,) = parse_remote_errors("<p>Emergency stop</p>")
        assert "Emergency stop" in message

    def test_unknown(self):
        """Unrecognized pages get the fallback message."""
        assert parse_remote_errors("<html>Service unavailable</html>") == [FALLBACK_REMOTE_ERROR]


class TestManualParse:
    """Tests for ManualParseStrategy."""

    def test_always_available(self):
        """The baseline strategy needs no external tool."""
        assert ManualParseStrategy().is_available() == (True, None)

    def test_renders_sample(self, sample_markup):
        """The sample resume renders with its content."""
        result = ManualParseStrategy().compile(sample_markup, "jane")

        assert result.success
        assert result.quality_tier == QualityTier.MANUAL_PARSED
        assert "Jane Doe" in extract_text(result.pdf_bytes)[0]

    def test_nothing_to_render(self, settings):
        """Render errors become a failed result."""
        settings = OmegaConf.merge(settings, {"rendering": {"placeholder_name": ""}})
        result = ManualParseStrategy(settings=settings).compile("", "empty")

        assert not result.success
        assert "Nothing to render" in result.error


class TestBrowserHtml:
    """Tests for BrowserHtmlStrategy that need no browser."""

    def test_missing_executable_is_skipped(self, tmp_path):
        """A configured executable that does not exist makes the strategy unavailable."""
        strategy = BrowserHtmlStrategy(executable_path=str(tmp_path / "chromium"))
        result = strategy.compile("x")

        assert result.skipped
        assert "not found" in result.error
