"""Database connection modules and connection environment variables."""

from __future__ import annotations

from ...config import ProjectConfig
from .. import layout
from ..env_merger import EnvVariable, render_env
from ..fileset import GeneratedFileSet
from ..templates import snake_case
from .backend_python import ASYNC_FRAMEWORKS
from .base import BaseGenerator


DEFAULT_DB_PORTS: dict[str, int] = {"postgresql": 5432, "mysql": 3306, "mongodb": 27017, "redis": 6379}

DEFAULT_DB_USERS: dict[str, str] = {"postgresql": "postgres", "mysql": "root"}

PLACEHOLDER_PASSWORD = "yoursecurepassword"


def database_name(config: ProjectConfig) -> str:
    return f"{snake_case(config.name)}_db"


def url_scheme(config: ProjectConfig) -> str:
    """Scheme of ``DATABASE_URL`` for the relational engines."""
    if config.database == "mysql" and config.is_python_backend and config.python_framework != "django":
        return "mysql+pymysql"
    return config.database


def env_variables(config: ProjectConfig) -> list[EnvVariable]:
    """Connection variables for the selected database, in file order.

    Examples::

        [v.key for v in env_variables(ProjectConfig.resolve("shop", database="postgresql"))]
        # ['DB_HOST', 'DB_PORT', 'DB_USER', 'DB_PASSWORD', 'DB_NAME', 'DATABASE_URL']
    """
    db = config.database
    if db == "sqlite":
        url = "sqlite:///database.db" if config.is_python_backend else "sqlite:./data/database.sqlite"
        return [EnvVariable("DATABASE_URL", url)]
    if db in ("postgresql", "mysql"):
        scheme = url_scheme(config)
        return [
            EnvVariable("DB_HOST", "localhost"),
            EnvVariable("DB_PORT", str(DEFAULT_DB_PORTS[db])),
            EnvVariable("DB_USER", DEFAULT_DB_USERS[db]),
            EnvVariable("DB_PASSWORD", PLACEHOLDER_PASSWORD),
            EnvVariable("DB_NAME", database_name(config)),
            EnvVariable(
                "DATABASE_URL",
                f"{scheme}://${{DB_USER}}:${{DB_PASSWORD}}@${{DB_HOST}}:${{DB_PORT}}/${{DB_NAME}}",
            ),
        ]
    if db == "mongodb":
        return [EnvVariable("MONGODB_URI", f"mongodb://localhost:27017/{database_name(config)}")]
    if db == "redis":
        return [EnvVariable("REDIS_URL", "redis://localhost:6379/0")]
    return []


def _default_url(config: ProjectConfig) -> str:
    db = config.database
    if db == "sqlite":
        return "sqlite:///database.db"
    if db == "postgresql":
        return f"postgresql://postgres@localhost:5432/{database_name(config)}"
    if db == "mysql":
        return f"mysql+pymysql://root@localhost:3306/{database_name(config)}"
    if db == "mongodb":
        return f"mongodb://localhost:27017/{database_name(config)}"
    return "redis://localhost:6379/0"


class DatabaseGenerator(BaseGenerator):
    """Connection module for the backend plus the database env entries."""

    name = "database"

    def applies(self, config: ProjectConfig) -> bool:
        return config.has_database

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        files = GeneratedFileSet()
        env = render_env(env_variables(config))
        files.add(".env", env)
        files.add(".env.example", env)

        module = layout.database_module(config)
        if config.is_node_backend:
            ctx = self.context(config, es=layout.server_is_typescript(config) or layout.uses_esm(config))
            files.add(module, self.renderer.render(f"database/node/{config.database}.j2", ctx))
            index = f"server/src/database/index.{layout.server_ext(config)}"
            files.add(index, self.renderer.render("database/node/index.j2", ctx))
        elif config.is_python_backend:
            if module is not None:
                ctx = self.context(
                    config,
                    is_async=config.python_framework in ASYNC_FRAMEWORKS,
                    default_url=_default_url(config),
                )
                files.add(module, self.renderer.render("database/python/database.py.j2", ctx))
        else:
            files.warnings.append(
                f"No backend selected: only the {config.database} connection settings "
                "were added to .env."
            )
        return files
