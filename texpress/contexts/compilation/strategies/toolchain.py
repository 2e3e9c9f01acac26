"""
Shared machinery for strategies that run a TeX toolchain as a subprocess.

Each run gets a private temporary directory holding <filename>.tex. The
toolchain is invoked in non-interactive, halt-on-error mode with shell escape
disabled, and its .log is parsed for errors when no PDF appears.
"""

import re
import subprocess
import tempfile
import uuid
from abc import abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from texpress.contexts.compilation.exceptions import (
    StrategyCompilationFailed,
    StrategyUnavailable,
)
from texpress.contexts.compilation.logger import _log_debug, log_backend_output
from texpress.contexts.compilation.strategies.base import CompilationStrategy
from texpress.utils.latex_cleaner import CleanupRule

# Flags shared by every pdflatex invocation
LATEX_FLAGS = [
    "-interaction=nonstopmode",
    "-halt-on-error",
    "-no-shell-escape",
    "-file-line-error",
]

TOOLCHAIN_CLEANUP_RULES = (
    CleanupRule.FIX_TITLESPACING,
    CleanupRule.ORDER_PACKAGES,
    CleanupRule.NORMALIZE_DASHES,
    CleanupRule.REPAIR_BACKSLASHES,
    CleanupRule.COLLAPSE_BACKSLASH_RUNS,
)


def parse_latex_log(log_content: str) -> Tuple[List[str], List[str]]:
    """
    Parse a LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # "! Error message" lines, plus file:line:error lines from -file-line-error
    for match in re.finditer(r"^! (.+)$", log_content, re.MULTILINE):
        errors.append(match.group(1).strip())
    for match in re.finditer(r"^[^\s:]+\.tex:\d+: (.+)$", log_content, re.MULTILINE):
        message = match.group(1).strip()
        if message not in errors:
            errors.append(message)

    # Errors reported without the "!" prefix
    for pattern in [
        r"Undefined control sequence",
        r"File ended while scanning use of",
        r"Emergency stop",
    ]:
        match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
        if match and match.group(1).strip() not in errors:
            errors.append(match.group(1).strip())

    for pattern in [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
    ]:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings


def probe_executable(method_id: str, command: List[str], timeout_s: float) -> None:
    """
    Run a cheap version command to confirm an executable responds.

    Raises:
        StrategyUnavailable: Executable missing, failing or not answering in time
    """
    try:
        result = subprocess.run(command, capture_output=True, text=True, timeout=timeout_s)
    except FileNotFoundError as e:
        raise StrategyUnavailable(method_id, f"'{command[0]}' not found on PATH") from e
    except subprocess.TimeoutExpired as e:
        raise StrategyUnavailable(
            method_id, f"'{' '.join(command)}' timed out after {timeout_s:g}s"
        ) from e
    except OSError as e:
        raise StrategyUnavailable(method_id, f"'{command[0]}' could not be started: {e}") from e

    if result.returncode != 0:
        raise StrategyUnavailable(
            method_id, f"'{' '.join(command)}' exited with status {result.returncode}"
        )


class LatexToolchainStrategy(CompilationStrategy):
    """
    Base for strategies that run pdflatex in a scratch directory.

    Subclasses provide the probe command and build the compile command for a
    given working directory.

    Attributes:
        timeout_s: Wall-clock limit per toolchain pass
        probe_timeout_s: Wall-clock limit for the version probe
        passes: Number of toolchain passes
    """

    cleanup_rules = TOOLCHAIN_CLEANUP_RULES

    def __init__(self, timeout_s: float = 30, probe_timeout_s: float = 5, passes: int = 1):
        self.timeout_s = timeout_s
        self.probe_timeout_s = probe_timeout_s
        self.passes = max(1, passes)

    @abstractmethod
    def probe_command(self) -> List[str]:
        """Command whose success shows the backend is installed."""

    @abstractmethod
    def build_command(self, workdir: Path, tex_name: str, run_id: str) -> List[str]:
        """Command compiling tex_name inside workdir for the pass identified by run_id."""

    def on_timeout(self, run_id: str) -> None:
        """Called with the run_id of a pass killed for exceeding timeout_s."""

    def probe(self) -> None:
        probe_executable(self.method_id, self.probe_command(), self.probe_timeout_s)

    def _run_pass(self, workdir: Path, tex_name: str) -> subprocess.CompletedProcess:
        run_id = uuid.uuid4().hex[:12]
        command = self.build_command(workdir, tex_name, run_id)
        _log_debug(f"{self.method_id}: {' '.join(command)}")
        try:
            # run() kills the child when the timeout expires
            return subprocess.run(
                command,
                cwd=workdir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_s,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired:
            self.on_timeout(run_id)
            raise StrategyCompilationFailed(
                self.method_id, f"Compilation timed out after {self.timeout_s:g}s"
            )
        except OSError as e:
            raise StrategyCompilationFailed(self.method_id, f"Could not start toolchain: {e}")

    def _compile(self, markup: str, filename: str) -> bytes:
        with tempfile.TemporaryDirectory(
            prefix=f"texpress_{self.method_id}_", ignore_cleanup_errors=True
        ) as tmp:
            workdir = Path(tmp)
            tex_path = workdir / f"{filename}.tex"
            tex_path.write_text(markup, encoding="utf-8")

            result: Optional[subprocess.CompletedProcess] = None
            for _ in range(self.passes):
                result = self._run_pass(workdir, tex_path.name)
                log_backend_output(self.method_id, result.stdout, result.stderr)
                if result.returncode != 0:
                    break

            errors: List[str] = []
            log_path = tex_path.with_suffix(".log")
            if log_path.exists():
                # pdflatex writes logs in latin-1 (font metadata is not UTF-8)
                errors, _ = parse_latex_log(log_path.read_text(encoding="latin-1"))

            pdf_path = tex_path.with_suffix(".pdf")
            # A PDF with no logged errors counts even if the exit status was non-zero
            if pdf_path.exists() and not errors:
                return pdf_path.read_bytes()

            if not errors:
                status = result.returncode if result is not None else "unknown"
                errors = [f"PDF file was not generated (exit status {status})"]
            raise StrategyCompilationFailed(self.method_id, errors[0], details=errors[1:])
