"""Shared path and port facts that several generators must agree on.

The frontend generator writes the entry file, the bundler config points at
it, and the manifest's dev script passes it to esbuild; the backend writes
its server entry, and the manifest, Dockerfiles and Procfile start it.
Keeping these answers in one module is what keeps the generated project
internally consistent.
"""

from __future__ import annotations

from ..config import ProjectConfig


# Bundlers that serve a root-level index.html with a module script tag.
MODULE_HTML_BUNDLERS: frozenset[str] = frozenset({"vite", "parcel", "none"})

BUNDLE_OUTPUT = "public/build/bundle.js"


def package_type(config: ProjectConfig) -> str:
    """The ``type`` field of ``package.json``.

    Config files and JavaScript server sources are written as ES modules or
    CommonJS to match it.  Nest compiles to CommonJS and wins over the
    frontend's preference.
    """
    if config.backend == "nest":
        return "commonjs"
    if config.is_typescript or config.bundler == "vite" or config.frontend_framework == "angular":
        return "module"
    return "commonjs"


def uses_esm(config: ProjectConfig) -> bool:
    return package_type(config) == "module"


# ---------------------------------------------------------------------------
# Frontend
# ---------------------------------------------------------------------------


def entry_file(config: ProjectConfig) -> str:
    """Relative path of the frontend entry module."""
    fw = config.frontend_framework
    if fw == "angular":
        return "src/main.ts"
    if fw == "solid":
        return f"src/index.{config.component_ext}"
    if fw == "react":
        return f"src/main.{config.component_ext}"
    return f"src/main.{config.script_ext}"


def root_component(config: ProjectConfig) -> str | None:
    """Relative path of the root view, or ``None`` for vanilla projects."""
    fw = config.frontend_framework
    if fw in ("react", "solid"):
        return f"src/App.{config.component_ext}"
    if fw == "vue":
        return "src/App.vue"
    if fw == "svelte":
        return "src/App.svelte"
    if fw == "angular":
        return "src/app/app.component.ts"
    return None


def root_element_id(config: ProjectConfig) -> str:
    fw = config.frontend_framework
    if fw == "angular":
        return "app-root"
    if fw in ("vue", "svelte", "vanilla"):
        return "app"
    return "root"


def stylesheet_path(config: ProjectConfig) -> str | None:
    """The single global stylesheet for the styling choice, if it needs one.

    Tailwind, Sass and plain CSS get a dedicated file; Bootstrap and Bulma
    are imported from their packages and the CSS-in-JS options live in
    components, so they get none.
    """
    if not config.has_frontend:
        return None
    fw = config.frontend_framework
    styling = config.styling
    if fw == "angular":
        if styling == "sass":
            return "src/styles.scss"
        if styling in ("tailwind", "css"):
            return "src/styles.css"
        return None
    if styling == "tailwind":
        if fw == "svelte":
            return "src/app.css"
        if fw == "vue":
            return "src/style.css"
        return "src/index.css"
    if styling == "sass":
        return "src/style.scss"
    if styling == "css":
        return "src/style.css"
    return None


def html_file(config: ProjectConfig) -> str:
    """Where the HTML shell lives for the chosen bundler."""
    if config.frontend_framework == "angular":
        return "src/index.html"
    if config.bundler in MODULE_HTML_BUNDLERS:
        return "index.html"
    return "public/index.html"


def frontend_build_dir(config: ProjectConfig) -> str:
    """Directory holding the static site after ``npm run build``.

    Rollup and esbuild write their bundle into ``public/`` next to the HTML
    shell; without a bundler the project root is served as is.
    """
    if config.frontend_framework == "angular":
        return f"dist/{config.name}/browser"
    bundler = config.bundler
    if bundler in ("rollup", "esbuild"):
        return "public"
    if bundler == "none":
        return "."
    return "dist"


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


def server_is_typescript(config: ProjectConfig) -> bool:
    """Nest sources are always TypeScript, whatever the frontend language."""
    return config.is_node_backend and (config.is_typescript or config.backend == "nest")


def server_ext(config: ProjectConfig) -> str:
    return "ts" if server_is_typescript(config) else "js"


def node_server_entry(config: ProjectConfig) -> str:
    """Source entry of the Node backend (``server/src/server.ts`` and friends)."""
    stem = "main" if config.backend == "nest" else "server"
    return f"server/src/{stem}.{server_ext(config)}"


def node_server_runtime_entry(config: ProjectConfig) -> str:
    """File ``node`` executes in production: compiled output for TypeScript."""
    stem = "main" if config.backend == "nest" else "server"
    if server_is_typescript(config):
        return f"server/dist/{stem}.js"
    return f"server/src/{stem}.js"


def database_module(config: ProjectConfig) -> str | None:
    """Connection-lifecycle module for the selected database."""
    if not config.has_database:
        return None
    if config.is_python_backend:
        if config.python_framework == "django" and config.is_relational:
            # Django connects through DATABASES in config/settings.py.
            return None
        return "server/app/database.py"
    if config.is_node_backend:
        return f"server/src/database/{config.database}.{server_ext(config)}"
    return None


def python_asgi_target(config: ProjectConfig) -> str:
    """Import target used by the production server command."""
    if config.python_framework == "django":
        return "config.wsgi:application"
    return "main:app"


def python_serve_command(config: ProjectConfig, port: int | str | None = None) -> list[str]:
    """Production command for the Python backend, run from ``server/``."""
    bind_port = port if port is not None else config.ports.python_backend
    framework = config.python_framework
    if framework == "fastapi":
        return ["uvicorn", python_asgi_target(config), "--host", "0.0.0.0", "--port", str(bind_port)]
    if framework == "quart":
        return ["hypercorn", python_asgi_target(config), "--bind", f"0.0.0.0:{bind_port}"]
    return ["gunicorn", python_asgi_target(config), "--bind", f"0.0.0.0:{bind_port}"]


# ---------------------------------------------------------------------------
# Tooling
# ---------------------------------------------------------------------------


def needs_postcss_config(config: ProjectConfig) -> bool:
    """Tailwind outside Vite and Mantine everywhere are wired through PostCSS."""
    if not config.has_frontend:
        return False
    tailwind_plugin = config.bundler == "vite" and config.frontend_framework != "angular"
    return (config.styling == "tailwind" and not tailwind_plugin) or config.ui_library == "mantine"


def needs_babel_config(config: ProjectConfig) -> bool:
    if not config.has_frontend or config.frontend_framework == "angular":
        return False
    if config.bundler == "webpack":
        return True
    return config.bundler == "rollup" and config.frontend_framework in ("react", "solid")
