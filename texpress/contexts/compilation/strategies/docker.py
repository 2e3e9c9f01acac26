"""
pdflatex inside a TeX Live container.

The scratch directory is bind-mounted as the container's working directory.
Containers run without network access, as the invoking user (so the scratch
directory stays removable), and under a unique name so a timed-out run can be
force-removed. Killing the docker client alone would leave the container
running.
"""

import os
import subprocess
from pathlib import Path
from typing import List

from texpress.contexts.compilation.logger import _log_warning
from texpress.contexts.compilation.strategies.base import QualityTier
from texpress.contexts.compilation.strategies.toolchain import LATEX_FLAGS, LatexToolchainStrategy

CONTAINER_WORKDIR = "/workspace"


class DockerLatexStrategy(LatexToolchainStrategy):
    """
    Compile with a containerized TeX Live distribution.

    Args:
        image: TeX Live image to run
        executable: docker CLI name or path
        timeout_s: Wall-clock limit per pass
        probe_timeout_s: Wall-clock limit for `docker --version`
        passes: Number of compiler passes
    """

    method_id = "docker_latex"
    quality_tier = QualityTier.TOOLCHAIN_EQUIVALENT

    def __init__(
        self,
        image: str = "texlive/texlive:latest",
        executable: str = "docker",
        timeout_s: float = 60,
        probe_timeout_s: float = 5,
        passes: int = 1,
    ):
        super().__init__(timeout_s=timeout_s, probe_timeout_s=probe_timeout_s, passes=passes)
        self.image = image
        self.executable = executable

    def probe_command(self) -> List[str]:
        return [self.executable, "--version"]

    @staticmethod
    def container_name(run_id: str) -> str:
        """Container name for one compile pass."""
        return f"texpress-{run_id}"

    def build_command(self, workdir: Path, tex_name: str, run_id: str) -> List[str]:
        command = [
            self.executable,
            "run",
            "--rm",
            "--name",
            self.container_name(run_id),
            "--network",
            "none",
            "-v",
            f"{workdir}:{CONTAINER_WORKDIR}",
            "-w",
            CONTAINER_WORKDIR,
        ]
        if hasattr(os, "getuid"):
            command.extend(["--user", f"{os.getuid()}:{os.getgid()}"])
        command.extend([self.image, "pdflatex", *LATEX_FLAGS, tex_name])
        return command

    def on_timeout(self, run_id: str) -> None:
        name = self.container_name(run_id)
        try:
            subprocess.run(
                [self.executable, "rm", "-f", name],
                capture_output=True,
                timeout=self.probe_timeout_s,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            _log_warning(f"Could not remove timed-out container {name}: {e}")
