"""Python backend layouts.

Each framework has its own template tree under ``backend_python/<framework>``
rendered into ``server/``.  The requirement files are assembled here rather
than templated so the driver packages follow the database choice exactly.
"""

from __future__ import annotations

import shlex

from ...config import ProjectConfig
from ...schema import ConfigSchema
from .. import layout
from ..fileset import GeneratedFileSet
from .base import BaseGenerator


FRAMEWORK_REQUIREMENTS: dict[str, list[str]] = {
    "fastapi": [
        "fastapi>=0.109.0",
        "uvicorn[standard]>=0.27.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
    ],
    "django": [
        "Django>=4.2.9",
        "djangorestframework>=3.14.0",
        "django-cors-headers>=4.3.1",
        "gunicorn>=21.2.0",
    ],
    "flask": [
        "Flask>=3.0.0",
        "Flask-Cors>=4.0.0",
        "gunicorn>=21.2.0",
    ],
    "quart": [
        "quart>=0.19.4",
        "quart-cors>=0.7.0",
        "hypercorn>=0.15.0",
    ],
}

DEV_REQUIREMENTS: list[str] = [
    "pytest>=7.4.0",
    "pytest-asyncio>=0.21.0",
    "black>=23.12.0",
    "flake8>=6.1.0",
    "mypy>=1.8.0",
    "isort>=5.12.0",
]

ASYNC_FRAMEWORKS = frozenset({"fastapi", "quart"})


def database_requirements(config: ProjectConfig) -> list[str]:
    """Driver packages for the selected database and framework."""
    db = config.database
    if db == "none":
        return []
    if db == "redis":
        return ["redis>=5.0.1"]
    if db == "mongodb":
        if config.python_framework in ASYNC_FRAMEWORKS:
            return ["pymongo>=4.6.1", "motor>=3.3.2"]
        return ["pymongo>=4.6.1"]
    if config.python_framework == "django":
        return {
            "postgresql": ["psycopg2-binary>=2.9.9"],
            "mysql": ["mysqlclient>=2.2.0"],
        }.get(db, [])
    drivers = ["SQLAlchemy>=2.0.25"]
    if db == "postgresql":
        drivers.append("psycopg2-binary>=2.9.9")
    elif db == "mysql":
        drivers.append("PyMySQL>=1.1.0")
    return drivers


class PythonBackendGenerator(BaseGenerator):
    """Server package, requirement files and helper script under ``server/``."""

    name = "backend-python"

    def applies(self, config: ProjectConfig) -> bool:
        return config.is_python_backend

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        framework = config.python_framework
        if framework not in FRAMEWORK_REQUIREMENTS:
            raise self.unsupported(f"no server templates for Python framework {framework!r}")

        files = GeneratedFileSet()
        serve = layout.python_serve_command(config, port="${PORT}")
        ctx = self.context(
            config,
            python_framework_title=ConfigSchema.display_name("python_framework", framework),
            serve_command_port_env=" ".join(
                part if "${PORT}" in part else shlex.quote(part) for part in serve
            ),
        )

        requirements = self.requirements(config)
        dev_requirements = ["-r requirements.txt", *DEV_REQUIREMENTS]
        files.add("server/requirements.txt", "\n".join(requirements) + "\n")
        files.add("server/requirements-dev.txt", "\n".join(dev_requirements) + "\n")

        for path, content in self.renderer.render_tree(
            f"backend_python/{framework}", ctx, dest_prefix="server"
        ).items():
            files.add(path, content)

        files.add("server/.gitignore", self.renderer.render("backend_python/shared/gitignore.j2", ctx))
        files.add("server/start_server.sh", self.renderer.render("backend_python/shared/start_server.sh.j2", ctx))
        return files

    @staticmethod
    def requirements(config: ProjectConfig) -> list[str]:
        """Runtime requirements: dotenv, the framework stack, then drivers."""
        return [
            "python-dotenv>=1.0.0",
            *FRAMEWORK_REQUIREMENTS[config.python_framework],
            *database_requirements(config),
        ]
