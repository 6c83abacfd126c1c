"""Shared helpers: the subprocess runner used for installs, and console output.

All user-facing text goes through the ``print_*`` helpers so that tests can
patch a single :data:`console`.
"""

from __future__ import annotations

import asyncio
import os
import shlex
import shutil
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

console = Console()

# Shell convention for "command not found".
NOT_FOUND = 127


# ---------------------------------------------------------------------------
# Install commands
# ---------------------------------------------------------------------------


def _resolve_executable(program: str) -> str:
    # ``npm`` is ``npm.cmd`` on Windows; which() knows the PATHEXT rules.
    return shutil.which(program) or program


async def run_command(
    cmd: str | Sequence[str],
    cwd: str | Path | None = None,
    timeout: int = 600,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run *cmd* without a shell and collect its output.

    Args:
        cmd: Program and arguments, e.g. ``["npm", "install"]``.  A string
            is split with :func:`shlex.split`; no shell is involved.
        cwd: Working directory of the child process.
        timeout: Seconds before the process is killed.
        env: Extra variables layered over ``os.environ``.

    Returns:
        ``(returncode, stdout, stderr)`` with both streams decoded and
        stripped.  A missing program yields ``127`` and a timeout ``-1``;
        neither raises.
    """
    argv = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
    program, *args = argv
    child_env = {**os.environ, **env} if env else None
    try:
        process = await asyncio.create_subprocess_exec(
            _resolve_executable(program),
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=child_env,
        )
    except FileNotFoundError:
        return NOT_FOUND, "", f"{program}: command not found"

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return -1, "", f"{shlex.join(argv)} timed out after {timeout}s"

    return (
        process.returncode or 0,
        out.decode("utf-8", errors="replace").strip(),
        err.decode("utf-8", errors="replace").strip(),
    )


def format_duration(seconds: float) -> str:
    """Human-readable elapsed time.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


def print_banner(title: str, subtitle: str = "") -> None:
    """Welcome panel shown before the first prompt."""
    body = f"[bold cyan]{title}[/bold cyan]"
    if subtitle:
        body += f"\n[dim]{subtitle}[/dim]"
    console.print(Panel(body, expand=False, border_style="cyan"))


def print_header(name: str, color: str = "bright_blue") -> None:
    console.print()
    console.print(Rule(f"[bold {color}] {name} [/bold {color}]", style=color))
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Two-column table of the chosen stack, one row per axis label."""
    table = Table(title=title, header_style="bold cyan")
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Choice")
    for label, choice in data.items():
        table.add_row(label, str(choice))
    console.print(table)
    console.print()


def print_success(message: str) -> None:
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_info(message: str) -> None:
    console.print(f"[cyan]{escape(message)}[/cyan]")
