"""Interactive prompt loop that turns user answers into a ``ProjectConfig``.

Menus are built from :class:`~stackforge.schema.ConfigSchema`, so adding an
option to an axis needs no change here.  Every answer is a number from the
menu or the option key itself; an empty answer picks the axis default.
"""

from __future__ import annotations

from typing import Any, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .config import ProjectConfig, sanitize_project_name
from .schema import COMPONENT_FRAMEWORKS, ConfigSchema
from .utils import console as default_console
from .utils import print_summary_table, print_warning


class Prompter:
    """Collects a configuration by asking one question per relevant axis.

    Questions are skipped when an earlier answer makes them moot: no
    language, bundler or styling for a backend-only project, UI library and
    state management only for React and Vue, the Python framework only for
    a Python backend.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or default_console

    # -- Public API --------------------------------------------------------

    def collect(self, name: Optional[str] = None) -> ProjectConfig:
        project_name = name or self.ask_name()
        if self.ask_setup_type() == "quick":
            return ProjectConfig.quick(project_name)

        choices: dict[str, Any] = {"template": "custom"}
        choices["frontend_framework"] = self.choose("frontend_framework")
        if choices["frontend_framework"] != "skip":
            for axis in ("language", "bundler", "styling"):
                choices[axis] = self.choose(axis)
            if choices["frontend_framework"] in COMPONENT_FRAMEWORKS:
                choices["ui_library"] = self.choose("ui_library")
                choices["state_management"] = self.choose("state_management")
        choices["backend"] = self.choose("backend")
        if choices["backend"] == "python":
            choices["python_framework"] = self.choose("python_framework")
        choices["database"] = self.choose("database")
        choices["deployment"] = self.choose("deployment")
        return ProjectConfig.resolve(project_name, **choices)

    def ask_name(self) -> str:
        """Ask until the sanitized name is non-empty."""
        while True:
            raw = Prompt.ask("[yellow]Project name[/yellow]", console=self.console)
            if sanitize_project_name(raw or "").strip("-"):
                return sanitize_project_name(raw)
            print_warning("Project name cannot be empty!")

    def ask_setup_type(self) -> str:
        self.console.print()
        self.console.print("[bold]Choose setup type:[/bold]")
        self.console.print(
            "  [green]1. Quick Setup[/green] (React + TypeScript + Vite + Tailwind + Express + Docker)"
        )
        self.console.print("  [blue]2. Custom Setup[/blue] (choose every option)")
        answer = Prompt.ask("Enter your choice", choices=["1", "2"], default="1", console=self.console)
        return "quick" if answer == "1" else "custom"

    def choose(self, axis: str) -> str:
        """Show the numbered menu for *axis* and return the chosen key.

        An unrecognised answer falls back to the default with a warning.
        """
        options = ConfigSchema.list_axis(axis)
        default = ConfigSchema.default_of(axis)

        table = Table(title=ConfigSchema.title_of(axis), show_header=False, box=None)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Option")
        table.add_column("Description", style="dim")
        for index, option in enumerate(options, start=1):
            label = option.display_name
            if option.key == default:
                label = f"[green]{label} (default)[/green]"
            table.add_row(str(index), label, option.description)
        self.console.print()
        self.console.print(table)

        answer = Prompt.ask(
            f"Choose option (1-{len(options)})",
            default="",
            show_default=False,
            console=self.console,
        )
        return self._resolve_answer(axis, answer.strip(), default)

    def confirm(self, config: ProjectConfig) -> bool:
        """Print the summary table and ask whether to proceed."""
        self.console.print()
        print_summary_table(config.summary(), title="Project Configuration Summary")
        return Confirm.ask("Proceed with this configuration?", default=False, console=self.console)

    # -- Internal ----------------------------------------------------------

    @staticmethod
    def _resolve_answer(axis: str, answer: str, default: str) -> str:
        if not answer:
            return default
        options = ConfigSchema.list_axis(axis)
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1].key
        keys = ConfigSchema.keys_of(axis)
        if answer.lower() in keys:
            return answer.lower()
        print_warning(f"Invalid choice {answer!r}. Using default: {default}")
        return default
