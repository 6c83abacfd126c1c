"""Deployment target assets.

Docker gets Dockerfiles, an nginx front for the static build and a Compose
file with the database service; the hosting platforms get their manifest
(``vercel.json``, ``netlify.toml``, ``Procfile`` / ``app.json``,
``.ebextensions``).  Every file takes its ports, entry points and database
variable names from :mod:`..layout` and :mod:`.database` so they agree with
what the backend and database generators wrote.
"""

from __future__ import annotations

import json
import shlex
from typing import Any

import yaml

from ...config import ProjectConfig
from .. import layout
from ..fileset import GeneratedFileSet
from ..templates import tojson_pretty
from .base import BaseGenerator
from .database import DEFAULT_DB_PORTS, PLACEHOLDER_PASSWORD, database_name, env_variables, url_scheme


# Compose service name the backend reaches the database under.
DATABASE_SERVICE = "database"

DATABASE_IMAGES: dict[str, str] = {
    "postgresql": "postgres:15-alpine",
    "mysql": "mysql:8.0",
    "mongodb": "mongo:6.0",
    "redis": "redis:7-alpine",
}

_DATA_PATHS: dict[str, str] = {
    "postgresql": "/var/lib/postgresql/data",
    "mysql": "/var/lib/mysql",
    "mongodb": "/data/db",
    "redis": "/data",
}

PYTHON_RUNTIME = "python-3.11.9"

HEROKU_ADDONS: dict[str, str] = {
    "postgresql": "heroku-postgresql:essential-0",
    "redis": "heroku-redis:mini",
}


def _shell_join(parts: list[str], keep: str = "$PORT") -> str:
    return " ".join(part if keep in part else shlex.quote(part) for part in parts)


class DeploymentGenerator(BaseGenerator):
    """Files for the selected deployment target."""

    name = "deployment"

    def applies(self, config: ProjectConfig) -> bool:
        return config.deployment != "none"

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        handler = getattr(self, f"_{config.deployment}", None)
        if handler is None:
            raise self.unsupported(f"no assets for deployment target {config.deployment!r}")
        files = GeneratedFileSet()
        ctx = self.context(
            config,
            build_dir=layout.frontend_build_dir(config),
            build_server=layout.server_is_typescript(config),
        )
        handler(config, ctx, files)
        return files

    # -- Docker ------------------------------------------------------------

    def _docker(self, config: ProjectConfig, ctx: dict[str, Any], files: GeneratedFileSet) -> None:
        files.add(".dockerignore", self.renderer.render("deployment/docker/dockerignore.j2", ctx))
        if config.has_frontend:
            files.add("Dockerfile.frontend", self.renderer.render("deployment/docker/Dockerfile.frontend.j2", ctx))
            files.add("nginx.conf", self.renderer.render("deployment/docker/nginx.conf.j2", ctx))
        if config.is_node_backend:
            files.add(
                "Dockerfile.backend.node",
                self.renderer.render("deployment/docker/Dockerfile.backend.node.j2", ctx),
            )
        elif config.is_python_backend:
            cmd = json.dumps(layout.python_serve_command(config))
            files.add(
                "Dockerfile.backend.python",
                self.renderer.render("deployment/docker/Dockerfile.backend.python.j2", {**ctx, "cmd": cmd}),
            )
        files.add("docker-compose.yml", self.compose_file(config))

    def compose_file(self, config: ProjectConfig) -> str:
        """Render ``docker-compose.yml`` for the configuration."""
        services: dict[str, Any] = {}
        volumes: dict[str, Any] = {}

        if config.has_frontend:
            frontend: dict[str, Any] = {
                "build": {"context": ".", "dockerfile": "Dockerfile.frontend"},
                "ports": [f"{config.ports.frontend}:80"],
                "networks": ["app-network"],
            }
            if config.has_backend:
                frontend["depends_on"] = ["backend"]
            frontend["restart"] = "unless-stopped"
            services["frontend"] = frontend

        if config.has_backend:
            port = config.backend_port
            dockerfile = "Dockerfile.backend.node" if config.is_node_backend else "Dockerfile.backend.python"
            if config.is_node_backend:
                environment = {"NODE_ENV": "production", "PORT": str(port)}
            else:
                environment = {"PYTHON_PORT": str(port)}
            environment.update(compose_database_env(config))
            backend: dict[str, Any] = {
                "build": {"context": ".", "dockerfile": dockerfile},
                "ports": [f"{port}:{port}"],
                "environment": environment,
                "networks": ["app-network"],
            }
            if config.database in DATABASE_IMAGES:
                backend["depends_on"] = [DATABASE_SERVICE]
            backend["restart"] = "unless-stopped"
            services["backend"] = backend

        if config.database in DATABASE_IMAGES:
            volume = f"{config.database}_data"
            services[DATABASE_SERVICE] = self._database_service(config, volume)
            volumes[volume] = None

        compose: dict[str, Any] = {
            "services": services,
            "networks": {"app-network": {"driver": "bridge"}},
        }
        if volumes:
            compose["volumes"] = volumes
        return yaml.safe_dump(compose, sort_keys=False, default_flow_style=False)

    def _database_service(self, config: ProjectConfig, volume: str) -> dict[str, Any]:
        db = config.database
        db_name = database_name(config)
        service: dict[str, Any] = {"image": DATABASE_IMAGES[db]}
        if db == "postgresql":
            service["environment"] = {
                "POSTGRES_DB": f"${{DB_NAME:-{db_name}}}",
                "POSTGRES_USER": "${DB_USER:-postgres}",
                "POSTGRES_PASSWORD": f"${{DB_PASSWORD:-{PLACEHOLDER_PASSWORD}}}",
            }
        elif db == "mysql":
            # The image creates root itself; DB_USER defaults to root.
            service["environment"] = {
                "MYSQL_ROOT_PASSWORD": f"${{DB_PASSWORD:-{PLACEHOLDER_PASSWORD}}}",
                "MYSQL_DATABASE": f"${{DB_NAME:-{db_name}}}",
            }
        elif db == "mongodb":
            service["environment"] = {
                "MONGO_INITDB_ROOT_USERNAME": "${MONGO_ROOT_USER:-admin}",
                "MONGO_INITDB_ROOT_PASSWORD": f"${{MONGO_ROOT_PASSWORD:-{PLACEHOLDER_PASSWORD}}}",
                "MONGO_INITDB_DATABASE": db_name,
            }
        port = DEFAULT_DB_PORTS[db]
        service.update(
            ports=[f"{port}:{port}"],
            volumes=[f"{volume}:{_DATA_PATHS[db]}"],
            networks=["app-network"],
            restart="unless-stopped",
        )
        return service

    # -- Hosting platforms -------------------------------------------------

    def _vercel(self, config: ProjectConfig, ctx: dict[str, Any], files: GeneratedFileSet) -> None:
        builds: list[dict[str, Any]] = []
        routes: list[dict[str, Any]] = []
        if config.has_backend:
            # Vercel compiles TypeScript functions itself, so point at the source.
            if config.is_python_backend:
                src, builder = "server/main.py", "@vercel/python"
            else:
                src, builder = layout.node_server_entry(config), "@vercel/node"
            build: dict[str, Any] = {"src": src, "use": builder}
            if config.is_python_backend:
                build["config"] = {"maxLambdaSize": "50mb"}
            builds.append(build)
            routes.append({"src": "/api/(.*)", "dest": src})
        if config.has_frontend:
            builds.append({
                "src": "package.json",
                "use": "@vercel/static-build",
                "config": {"distDir": ctx["build_dir"]},
            })
            routes.append({"handle": "filesystem"})
            routes.append({"src": "/.*", "dest": "/index.html"})

        vercel = {
            "version": 2,
            "name": config.name,
            "builds": builds,
            "routes": routes,
            "env": {"NODE_ENV": "production"},
        }
        files.add("vercel.json", tojson_pretty(vercel) + "\n")
        self._platform_env_warning(config, "the Vercel project settings", files)

    def _netlify(self, config: ProjectConfig, ctx: dict[str, Any], files: GeneratedFileSet) -> None:
        files.add("netlify.toml", self.renderer.render("deployment/netlify/netlify.toml.j2", ctx))
        if config.has_backend:
            ext = layout.server_ext(config) if config.is_node_backend else "js"
            files.add(
                f"netlify/functions/api.{ext}",
                self.renderer.render("deployment/netlify/api.j2", {**ctx, "function_ts": ext == "ts"}),
            )
            if config.is_python_backend:
                files.warnings.append(
                    "Netlify Functions run JavaScript only; the Python server needs separate "
                    "hosting and netlify/functions/api.js is a placeholder."
                )
        self._platform_env_warning(config, "the Netlify site settings", files)

    def _heroku(self, config: ProjectConfig, ctx: dict[str, Any], files: GeneratedFileSet) -> None:
        procfile = self._procfile(config, ctx)
        if procfile:
            files.add("Procfile", procfile)

        buildpacks: list[dict[str, str]] = []
        if config.has_frontend or config.is_node_backend:
            buildpacks.append({"url": "heroku/nodejs"})
        if config.is_python_backend:
            buildpacks.append({"url": "heroku/python"})
            files.add("runtime.txt", PYTHON_RUNTIME + "\n")
            # The Python buildpack only looks at the repository root.
            files.add("requirements.txt", "-r server/requirements.txt\n")

        keywords = [k for k in (config.frontend_framework, config.backend, config.language) if k not in ("skip", "none")]
        app = {
            "name": config.name,
            "description": f"A {config.template} full-stack application.",
            "keywords": keywords,
            "buildpacks": buildpacks,
            "env": {"NODE_ENV": {"value": "production"}},
            "addons": [HEROKU_ADDONS[config.database]] if config.database in HEROKU_ADDONS else [],
        }
        files.add("app.json", tojson_pretty(app) + "\n")
        if config.database in ("mysql", "mongodb"):
            files.warnings.append(
                f"Heroku has no first-party {config.database} add-on; set the connection "
                "variables from .env.example with `heroku config:set`."
            )

    def _aws(self, config: ProjectConfig, ctx: dict[str, Any], files: GeneratedFileSet) -> None:
        if config.is_node_backend:
            files.add(".ebextensions/options.config", self.renderer.render("deployment/aws/options.config.j2", ctx))
        elif config.is_python_backend:
            files.add(".ebextensions/python.config", self.renderer.render("deployment/aws/python.config.j2", ctx))
            # Elastic Beanstalk's Python platform starts the web process from a Procfile.
            files.add("Procfile", self._procfile(config, ctx))
        if config.has_frontend:
            files.add(
                "scripts/deploy_frontend_s3.sh",
                self.renderer.render("deployment/aws/deploy_frontend_s3.sh.j2", ctx),
            )
        self._platform_env_warning(config, "the Elastic Beanstalk environment properties", files)

    # -- Helpers -----------------------------------------------------------

    def _procfile(self, config: ProjectConfig, ctx: dict[str, Any]) -> str:
        if config.is_python_backend:
            port = "$PORT" if config.deployment == "heroku" else config.backend_port
            serve = layout.python_serve_command(config, port=port)
            return f"web: cd server && {_shell_join(serve)}\n"
        if config.is_node_backend:
            if ctx["build_server"]:
                return "web: npm run build:server && npm start\n"
            return "web: npm start\n"
        if config.has_frontend:
            return f"web: npx serve -s {ctx['build_dir']} -l $PORT\n"
        return ""

    def _platform_env_warning(self, config: ProjectConfig, where: str, files: GeneratedFileSet) -> None:
        keys = [v.key for v in env_variables(config)]
        if keys:
            files.warnings.append(f"Configure {', '.join(keys)} in {where} before deploying.")


def compose_database_env(config: ProjectConfig) -> dict[str, str]:
    """Database variables for the backend container.

    The keys match :func:`.database.env_variables`; hosts point at the
    Compose database service and credentials fall back to the defaults
    written to ``.env``.

    Examples::

        compose_database_env(ProjectConfig.resolve("shop", database="redis"))
        # {'REDIS_URL': 'redis://database:6379/0'}
    """
    db = config.database
    db_name = database_name(config)
    if db in ("postgresql", "mysql"):
        port = DEFAULT_DB_PORTS[db]
        user = "${DB_USER:-postgres}" if db == "postgresql" else "${DB_USER:-root}"
        password = f"${{DB_PASSWORD:-{PLACEHOLDER_PASSWORD}}}"
        name = f"${{DB_NAME:-{db_name}}}"
        return {
            "DB_HOST": DATABASE_SERVICE,
            "DB_PORT": str(port),
            "DB_USER": user,
            "DB_PASSWORD": password,
            "DB_NAME": name,
            "DATABASE_URL": f"{url_scheme(config)}://{user}:{password}@{DATABASE_SERVICE}:{port}/{name}",
        }
    if db == "mongodb":
        return {
            "MONGODB_URI": (
                f"mongodb://${{MONGO_ROOT_USER:-admin}}:${{MONGO_ROOT_PASSWORD:-{PLACEHOLDER_PASSWORD}}}"
                f"@{DATABASE_SERVICE}:27017/{db_name}?authSource=admin"
            ),
        }
    if db == "redis":
        return {"REDIS_URL": f"redis://{DATABASE_SERVICE}:6379/0"}
    # sqlite lives inside the backend container.
    return {v.key: v.value for v in env_variables(config)}
