"""Command-line entry point.

Usage::

    stackforge                                  # interactive
    stackforge shop --quick --skip-install
    stackforge api --frontend skip --backend python --python-framework fastapi \\
        --database postgresql --deployment none --yes
    stackforge shop --config stack.yaml --dry-run

Exit codes: 0 on success (also when the user cancels or interrupts), 1 on
an invalid configuration, aborted generation, write failure, non-empty
target directory or failed installation.
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from . import __version__
from .config import ProjectConfig
from .errors import StackforgeError, WriteFailure
from .installer import InstallRunner
from .prompter import Prompter
from .scaffolder.fileset import GeneratedFileSet
from .scaffolder.generator import ProjectGenerator
from .schema import ConfigSchema
from .utils import (
    console,
    print_banner,
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)

# flag -> configuration axis
AXIS_FLAGS: dict[str, str] = {
    "frontend": "frontend_framework",
    "language": "language",
    "bundler": "bundler",
    "styling": "styling",
    "ui_library": "ui_library",
    "state": "state_management",
    "backend": "backend",
    "python_framework": "python_framework",
    "database": "database",
    "deployment": "deployment",
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackforge",
        description="Scaffold a full-stack project from a handful of stack choices.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  stackforge shop --quick\n"
            "  stackforge api --frontend skip --backend python --database postgresql --yes\n"
            "  stackforge shop --config stack.yaml --dry-run\n"
        ),
    )
    parser.add_argument("name", nargs="?", default=None, help="Project name (prompted when omitted)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--quick", action="store_true", help="Use the quick-setup preset")
    source.add_argument("--config", type=Path, default=None, help="Load choices from a JSON or YAML file")
    source.add_argument(
        "--from-env", action="store_true", help="Read choices from STACKFORGE_* environment variables"
    )

    axes = parser.add_argument_group("stack choices")
    for flag, axis in AXIS_FLAGS.items():
        axes.add_argument(
            f"--{flag.replace('_', '-')}",
            dest=flag,
            choices=ConfigSchema.keys_of(axis),
            default=None,
            help=ConfigSchema.title_of(axis),
        )

    parser.add_argument(
        "--output", "-o", type=Path, default=Path("."),
        help="Parent directory of the project folder (default: current directory)",
    )
    parser.add_argument("--dry-run", action="store_true", help="List the files without writing them")
    parser.add_argument("--skip-install", action="store_true", help="Do not install dependencies")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--save-config", type=Path, default=None, help="Also save the configuration here")
    parser.add_argument("--debug", action="store_true", help="Print tracebacks for errors")
    return parser


def _axis_choices(args: argparse.Namespace) -> dict[str, Any]:
    return {axis: getattr(args, flag) for flag, axis in AXIS_FLAGS.items() if getattr(args, flag)}


def resolve_config(args: argparse.Namespace, prompter: Optional[Prompter] = None) -> ProjectConfig:
    """Build the configuration from whichever source the flags select.

    Axis flags override the values of a config file or environment source.
    Without any source flag and without axis flags the user is prompted.
    """
    overrides = _axis_choices(args)
    if args.config is not None:
        base = ProjectConfig.load(args.config, name=args.name)
    elif args.from_env:
        base = ProjectConfig.from_env(name=args.name)
    elif args.quick:
        name = args.name or (prompter or Prompter()).ask_name()
        base = ProjectConfig.quick(name)
    elif overrides:
        name = args.name or (prompter or Prompter()).ask_name()
        return ProjectConfig.resolve(name, template="custom", **overrides)
    else:
        return (prompter or Prompter()).collect(args.name)

    if not overrides:
        return base
    values = base.model_dump(exclude={"name"})
    values.update(overrides)
    return ProjectConfig.resolve(base.name, **values)


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def _print_warnings(files: GeneratedFileSet) -> None:
    for warning in files.warnings:
        print_warning(f"Warning: {warning}")


def _print_file_list(files: GeneratedFileSet) -> None:
    for path in files:
        console.print(f"  [dim]-[/dim] {path}")
    console.print()
    print_info(f"{len(files)} files")


def print_next_steps(config: ProjectConfig, project_dir: Path, installed: bool) -> None:
    """Completion message tailored to the generated stack."""
    print_header("Project setup complete!", color="green")
    steps: list[str] = [f"cd {project_dir}"]
    if not installed:
        if config.has_frontend or config.is_node_backend:
            steps.append("npm install")
        if config.is_python_backend:
            steps.append("npm run install:python:venv")
    if config.is_python_backend:
        activate = "server\\.venv\\Scripts\\activate" if sys.platform == "win32" else "source server/.venv/bin/activate"
        steps.append(activate)
    steps.append("npm run dev")
    if config.deployment == "docker":
        steps.append("docker compose up --build")

    console.print("[bold]Next steps:[/bold]")
    for number, step in enumerate(steps, start=1):
        console.print(f"  {number}. [yellow]{step}[/yellow]")
    console.print()
    print_success("Happy coding!")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _raise_interrupt(signum: int, frame: Any) -> None:
    raise KeyboardInterrupt


def run(args: argparse.Namespace) -> int:
    print_banner("stackforge", "Full-stack project scaffolder")
    config = resolve_config(args)

    if not args.yes and not Prompter().confirm(config):
        print_warning("Setup cancelled. Goodbye!")
        return 0
    if args.save_config is not None:
        try:
            config.save(args.save_config)
        except OSError as exc:
            raise WriteFailure(args.save_config, exc) from exc
        print_info(f"Configuration saved to {args.save_config}")

    project_dir = Path(args.output) / config.name
    generator = ProjectGenerator()

    if args.dry_run:
        print_header(f"Dry run: {project_dir}")
        files = generator.build(config)
        _print_file_list(files)
        _print_warnings(files)
        return 0

    print_header(f"Creating {project_dir}")
    files = generator.run(config, project_dir)
    print_success(f"Wrote {len(files)} files")
    _print_warnings(files)

    installed = False
    if not args.skip_install:
        print_header("Installing dependencies")
        asyncio.run(InstallRunner(project_dir, config).run())
        installed = True

    print_next_steps(config, project_dir, installed)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for ``stackforge`` and ``python -m stackforge``."""
    args = build_parser().parse_args(argv)
    signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        return run(args)
    except KeyboardInterrupt:
        console.print()
        print_warning("Setup cancelled. Goodbye!")
        return 0
    except StackforgeError as exc:
        if args.debug:
            console.print_exception()
        print_error(f"Error: {exc}")
        return 1
