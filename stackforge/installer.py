"""Dependency installation for a freshly written project.

``npm install`` runs at the project root when there is a frontend or a Node
backend; a Python backend gets a virtualenv in ``server/.venv`` with
``requirements.txt`` and then ``requirements-dev.txt`` installed into it.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional

from .config import ProjectConfig
from .errors import InstallError
from .utils import format_duration, print_info, print_success, run_command

CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]

INSTALL_TIMEOUT = 900


@dataclass(frozen=True)
class InstallStep:
    """One command of the installation sequence."""

    name: str
    cmd: list[str]
    cwd: Path


def venv_bin(venv: Path, executable: str) -> Path:
    """Path of *executable* inside the virtualenv at *venv*."""
    if sys.platform == "win32":
        return venv / "Scripts" / f"{executable}.exe"
    return venv / "bin" / executable


class InstallRunner:
    """Runs the installation steps for a project through a CommandRunner.

    Args:
        project_root: Directory the project was written to.
        config: The configuration it was generated from.
        runner: Coroutine with the :func:`~stackforge.utils.run_command`
            signature; injected so tests can replace the subprocess layer.
    """

    def __init__(
        self,
        project_root: str | Path,
        config: ProjectConfig,
        runner: Optional[CommandRunner] = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.config = config
        self.runner = runner or run_command

    # -- Public API --------------------------------------------------------

    def steps(self) -> list[InstallStep]:
        root = self.project_root
        steps: list[InstallStep] = []
        # A Python-only project's package.json carries helper scripts and no packages.
        if self.config.has_frontend or self.config.is_node_backend:
            steps.append(InstallStep("npm install", ["npm", "install"], root))
        if self.config.is_python_backend:
            server = root / "server"
            pip = str(venv_bin(server / ".venv", "pip"))
            steps += [
                InstallStep("python venv", [sys.executable, "-m", "venv", ".venv"], server),
                InstallStep("pip install", [pip, "install", "-r", "requirements.txt"], server),
                InstallStep("pip install (dev)", [pip, "install", "-r", "requirements-dev.txt"], server),
            ]
        return steps

    async def run(self) -> float:
        """Run every step in order and return the elapsed seconds.

        Raises:
            InstallError: The first step that exits non-zero; later steps
                are not attempted.
        """
        started = time.monotonic()
        for step in self.steps():
            print_info(f"Running {step.name}...")
            returncode, _stdout, stderr = await self.runner(
                step.cmd, cwd=step.cwd, timeout=INSTALL_TIMEOUT
            )
            if returncode != 0:
                raise InstallError(step.name, returncode, stderr)
        elapsed = time.monotonic() - started
        print_success(f"Dependencies installed in {format_duration(elapsed)}")
        return elapsed
