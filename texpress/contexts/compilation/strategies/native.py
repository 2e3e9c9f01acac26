"""pdflatex on the host machine."""

from pathlib import Path
from typing import List

from texpress.contexts.compilation.strategies.base import QualityTier
from texpress.contexts.compilation.strategies.toolchain import LATEX_FLAGS, LatexToolchainStrategy


class NativeLatexStrategy(LatexToolchainStrategy):
    """
    Compile with the TeX installation on PATH.

    Args:
        compiler: Executable name or path (default: pdflatex)
        timeout_s: Wall-clock limit per pass
        probe_timeout_s: Wall-clock limit for `<compiler> --version`
        passes: Number of compiler passes
    """

    method_id = "native_latex"
    quality_tier = QualityTier.NATIVE_TOOLCHAIN

    def __init__(
        self,
        compiler: str = "pdflatex",
        timeout_s: float = 30,
        probe_timeout_s: float = 5,
        passes: int = 1,
    ):
        super().__init__(timeout_s=timeout_s, probe_timeout_s=probe_timeout_s, passes=passes)
        self.compiler = compiler

    def probe_command(self) -> List[str]:
        return [self.compiler, "--version"]

    def build_command(self, workdir: Path, tex_name: str, run_id: str) -> List[str]:
        return [self.compiler, *LATEX_FLAGS, f"-output-directory={workdir}", tex_name]
