"""Common plumbing for the template generator families."""

from __future__ import annotations

from typing import Any

from ...config import ProjectConfig
from ...errors import UnsupportedCombination
from .. import layout
from ..fileset import GeneratedFileSet
from ..templates import TemplateRenderer


def build_context(config: ProjectConfig) -> dict[str, Any]:
    """Template context shared by every generator.

    Every template sees the same keys, so a template can branch on any axis
    without its generator having to anticipate it.
    """
    return {
        "config": config,
        "name": config.name,
        "frontend": config.frontend_framework,
        "language": config.language,
        "ts": config.is_typescript,
        "ext": config.script_ext,
        "component_ext": config.component_ext,
        "bundler": config.bundler,
        "styling": config.styling,
        "ui_library": config.ui_library,
        "state_management": config.state_management,
        "backend": config.backend,
        "python_framework": config.python_framework,
        "database": config.database,
        "deployment": config.deployment,
        "has_frontend": config.has_frontend,
        "has_backend": config.has_backend,
        "is_node": config.is_node_backend,
        "is_python": config.is_python_backend,
        "has_database": config.has_database,
        "is_relational": config.is_relational,
        "frontend_port": config.ports.frontend,
        "backend_port": config.backend_port,
        "entry_file": layout.entry_file(config),
        "root_element_id": layout.root_element_id(config),
        "stylesheet": layout.stylesheet_path(config),
        "html_file": layout.html_file(config),
        "bundle_output": layout.BUNDLE_OUTPUT,
        "package_type": layout.package_type(config),
        "esm": layout.uses_esm(config),
        "server_ts": layout.server_is_typescript(config),
        "server_ext": layout.server_ext(config),
        # Relative imports in ES-module server code need an explicit extension.
        "import_suffix": ".js" if layout.uses_esm(config) else "",
        "server_entry": layout.node_server_entry(config) if config.is_node_backend else "",
        "server_runtime_entry": (
            layout.node_server_runtime_entry(config) if config.is_node_backend else ""
        ),
    }


class BaseGenerator:
    """A family of templates for one configuration axis.

    Subclasses set :attr:`name`, implement :meth:`applies` (the predicate
    the orchestrator evaluates while planning) and :meth:`generate`, which
    must be pure: no filesystem writes and no randomness in the output.
    """

    name: str = "base"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def applies(self, config: ProjectConfig) -> bool:
        raise NotImplementedError

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        raise NotImplementedError

    # -- Helpers for subclasses --------------------------------------------

    def context(self, config: ProjectConfig, **extra: Any) -> dict[str, Any]:
        return {**build_context(config), **extra}

    def unsupported(self, message: str) -> UnsupportedCombination:
        return UnsupportedCombination(self.name, message)
