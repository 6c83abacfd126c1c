"""Derivation of ``package.json`` from a project configuration.

Each axis contributes scripts and dependency ranges independently; the
contributions are folded together in a fixed axis order.  A later axis may
overwrite a script or a version range set by an earlier one but never
removes anything.  When two axes disagree on the version of the same
package, the later one wins and a warning is recorded on the manifest.

Finally, when the project has both a frontend dev command and a backend dev
command, the two are combined into a single ``dev`` script run through
``concurrently``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import ProjectConfig
from . import layout


CONCURRENTLY_VERSION = "^8.2.2"

NODE_DATABASE_DRIVERS: dict[str, dict[str, str]] = {
    "sqlite": {"sqlite3": "^5.1.7", "sqlite": "^5.1.1"},
    "postgresql": {"pg": "^8.11.3"},
    "mysql": {"mysql2": "^3.7.0"},
    "mongodb": {"mongodb": "^6.3.0"},
    "redis": {"redis": "^4.6.12"},
}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Manifest(BaseModel):
    """The generated ``package.json`` plus the warnings raised building it."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str = "0.1.0"
    private: bool = True
    type: str = "commonjs"
    main: Optional[str] = None
    scripts: dict[str, str] = Field(default_factory=dict)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    warnings: list[str] = Field(default_factory=list, exclude=True)

    def to_json(self) -> str:
        """Render as 2-space indented JSON with a trailing newline.

        Field order is fixed and ``main`` is omitted when unset, so equal
        manifests always serialise to identical bytes.
        """
        data = self.model_dump(by_alias=True, exclude_none=True)
        return json.dumps(data, indent=2) + "\n"


@dataclass
class Contribution:
    """Scripts and dependencies added by one axis value."""

    axis: str
    scripts: dict[str, str] = field(default_factory=dict)
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    package_type: str | None = None


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class DependencyManifestBuilder:
    """Builds the package manifest purely from configuration.

    Examples::

        manifest = DependencyManifestBuilder().build(ProjectConfig.quick("shop"))
        manifest.scripts["dev"]
        # "concurrently 'nodemon --exec \"node --loader ts-node/esm ...\"' 'vite'"
    """

    # -- Public API --------------------------------------------------------

    def build(self, config: ProjectConfig) -> Manifest:
        manifest = Manifest(
            name=config.name,
            type=layout.package_type(config),
        )
        frontend_dev: str | None = None

        if config.has_frontend:
            self._apply(manifest, self._bundler(config))
            self._apply(manifest, self._frontend_framework(config))
            frontend_dev = manifest.scripts.get("dev")
            self._apply(manifest, self._language(config))
            self._apply(manifest, self._styling(config))
            self._apply(manifest, self._ui_library(config))
            self._apply(manifest, self._state_management(config))

        if config.is_node_backend:
            self._apply(manifest, self._node_backend(config))
            manifest.main = layout.node_server_runtime_entry(config)
        elif config.is_python_backend:
            self._apply(manifest, self._python_backend(config))

        if config.is_node_backend:
            self._apply(manifest, self._database(config))

        self._compose_dev(manifest, config, frontend_dev)
        return manifest

    # -- Folding -----------------------------------------------------------

    def _apply(self, manifest: Manifest, contribution: Contribution) -> None:
        manifest.scripts.update(contribution.scripts)
        for target, additions in (
            (manifest.dependencies, contribution.dependencies),
            (manifest.dev_dependencies, contribution.dev_dependencies),
        ):
            for package, version in additions.items():
                previous = target.get(package)
                if previous is not None and previous != version:
                    manifest.warnings.append(
                        f"{package}: version {previous} replaced by {version} "
                        f"from the {contribution.axis} choice"
                    )
                target[package] = version
        if contribution.package_type:
            manifest.type = contribution.package_type

    def _compose_dev(self, manifest: Manifest, config: ProjectConfig, frontend_dev: str | None) -> None:
        backend_dev = manifest.scripts.get("dev:server")
        if frontend_dev and backend_dev:
            manifest.scripts["dev"] = f"concurrently '{backend_dev}' '{frontend_dev}'"
            self._apply(
                manifest,
                Contribution("dev", dev_dependencies={"concurrently": CONCURRENTLY_VERSION}),
            )
        elif backend_dev:
            manifest.scripts["dev"] = backend_dev
        if config.has_frontend and not config.has_backend and "start" not in manifest.scripts:
            fallback = manifest.scripts.get("preview") or manifest.scripts.get("dev")
            if fallback:
                manifest.scripts["start"] = fallback

    # -- Frontend axes -----------------------------------------------------

    def _bundler(self, config: ProjectConfig) -> Contribution:
        c = Contribution("bundler")
        if config.frontend_framework == "angular":
            # The Angular CLI owns building and serving.
            return c
        bundler = config.bundler
        entry = layout.entry_file(config)
        if bundler == "vite":
            c.scripts.update(dev="vite", build="vite build", preview="vite preview")
            c.dev_dependencies["vite"] = "^5.2.0"
        elif bundler == "webpack":
            c.scripts.update(dev="webpack serve --mode development", build="webpack --mode production")
            c.dev_dependencies.update({
                "webpack": "^5.90.0",
                "webpack-cli": "^5.1.4",
                "webpack-dev-server": "^4.15.1",
                "html-webpack-plugin": "^5.6.0",
                "babel-loader": "^9.1.3",
                "@babel/core": "^7.23.9",
                "@babel/preset-env": "^7.23.9",
                "style-loader": "^3.3.4",
                "css-loader": "^6.10.0",
                "sass-loader": "^14.1.1",
                "sass": "^1.71.1",
            })
            if config.frontend_framework == "react":
                c.dev_dependencies["@babel/preset-react"] = "^7.23.3"
            elif config.frontend_framework == "solid":
                c.dev_dependencies["babel-preset-solid"] = "^1.8.12"
            elif config.frontend_framework == "vue":
                c.dev_dependencies.update({"vue-loader": "^17.4.2"})
            elif config.frontend_framework == "svelte":
                c.dev_dependencies["svelte-loader"] = "^3.1.9"
            if config.is_typescript:
                c.dev_dependencies["ts-loader"] = "^9.5.1"
        elif bundler == "rollup":
            c.scripts.update(dev="rollup -c -w", build="rollup -c")
            c.dev_dependencies.update({
                "rollup": "^4.9.0",
                "@rollup/plugin-node-resolve": "^15.2.3",
                "@rollup/plugin-commonjs": "^25.0.7",
                "rollup-plugin-postcss": "^4.0.2",
                "postcss": "^8.4.35",
                "sass": "^1.71.1",
                "@rollup/plugin-image": "^3.0.3",
            })
            if config.is_typescript:
                c.dev_dependencies["@rollup/plugin-typescript"] = "^11.1.6"
            if config.frontend_framework in ("react", "solid"):
                c.dev_dependencies.update({
                    "@rollup/plugin-babel": "^6.0.4",
                    "@babel/core": "^7.23.9",
                    "@babel/preset-env": "^7.23.9",
                })
                if config.frontend_framework == "react":
                    c.dev_dependencies["@babel/preset-react"] = "^7.23.3"
                else:
                    c.dev_dependencies["babel-preset-solid"] = "^1.8.12"
            elif config.frontend_framework == "svelte":
                c.dev_dependencies["rollup-plugin-svelte"] = "^7.1.6"
            elif config.frontend_framework == "vue":
                c.dev_dependencies["rollup-plugin-vue"] = "^6.0.0"
        elif bundler == "parcel":
            html = layout.html_file(config)
            c.scripts.update(dev=f"parcel {html} --port {config.ports.frontend}", build=f"parcel build {html}")
            c.dev_dependencies["parcel"] = "^2.11.0"
        elif bundler == "esbuild":
            out = layout.BUNDLE_OUTPUT
            c.scripts.update(
                dev=(
                    f"esbuild {entry} --bundle --outfile={out} --servedir=public "
                    f"--serve=localhost:{config.ports.frontend}"
                ),
                build=f"esbuild {entry} --bundle --outfile={out} --minify --sourcemap",
            )
            c.dev_dependencies["esbuild"] = "^0.20.0"
        else:
            c.scripts["dev"] = f"serve -l {config.ports.frontend} ."
            c.dev_dependencies["serve"] = "^14.2.1"
        return c

    def _frontend_framework(self, config: ProjectConfig) -> Contribution:
        c = Contribution("frontend framework")
        fw = config.frontend_framework
        ts = config.is_typescript
        vite = config.bundler == "vite"
        if fw == "react":
            c.dependencies.update({"react": "^18.2.0", "react-dom": "^18.2.0"})
            if vite:
                c.dev_dependencies["@vitejs/plugin-react"] = "^4.2.0"
            if ts:
                c.dev_dependencies.update({"@types/react": "^18.2.0", "@types/react-dom": "^18.2.0"})
        elif fw == "vue":
            c.dependencies["vue"] = "^3.4.0"
            if vite:
                c.dev_dependencies["@vitejs/plugin-vue"] = "^5.0.0"
            if ts:
                c.dev_dependencies["vue-tsc"] = "^1.8.27"
        elif fw == "angular":
            c.scripts.update({
                "ng": "ng",
                "dev": "ng serve --open",
                "start": "ng serve",
                "build": "ng build",
                "watch": "ng build --watch --configuration development",
                "test": "ng test",
            })
            for package in (
                "animations", "common", "compiler", "core", "forms",
                "platform-browser", "platform-browser-dynamic", "router",
            ):
                c.dependencies[f"@angular/{package}"] = "~17.1.0"
            c.dependencies.update({"rxjs": "~7.8.0", "tslib": "^2.6.2", "zone.js": "~0.14.3"})
            c.dev_dependencies.update({
                "@angular-devkit/build-angular": "~17.1.0",
                "@angular/cli": "~17.1.0",
                "@angular/compiler-cli": "~17.1.0",
                "typescript": "~5.3.0",
            })
            c.package_type = "module"
        elif fw == "svelte":
            c.dependencies["svelte"] = "^4.2.9"
            if vite:
                c.dev_dependencies["@sveltejs/vite-plugin-svelte"] = "^3.0.0"
            if ts:
                c.dev_dependencies.update({"@tsconfig/svelte": "^5.0.2", "svelte-check": "^3.6.2"})
        elif fw == "solid":
            c.dependencies["solid-js"] = "^1.8.11"
            if vite:
                c.dev_dependencies["vite-plugin-solid"] = "^2.8.2"
        return c

    def _language(self, config: ProjectConfig) -> Contribution:
        c = Contribution("language")
        if config.is_typescript and config.frontend_framework != "angular":
            c.dev_dependencies.update({"typescript": "^5.3.0", "@types/node": "^20.11.0"})
        return c

    def _styling(self, config: ProjectConfig) -> Contribution:
        c = Contribution("styling")
        styling = config.styling
        if styling == "tailwind":
            c.dev_dependencies.update({"tailwindcss": "^4.0.0-alpha.17", "postcss": "^8.4.33"})
            if config.bundler == "vite" and config.frontend_framework != "angular":
                c.dev_dependencies["@tailwindcss/vite"] = "^4.0.0-alpha.17"
            else:
                c.dev_dependencies["@tailwindcss/postcss"] = "^4.0.0-alpha.17"
        elif styling == "bootstrap":
            c.dependencies["bootstrap"] = "^5.3.2"
        elif styling == "bulma":
            c.dependencies["bulma"] = "^0.9.4"
        elif styling == "styled-components":
            c.dependencies["styled-components"] = "^6.1.8"
            c.dev_dependencies["babel-plugin-styled-components"] = "^2.1.4"
            if config.is_typescript:
                c.dev_dependencies["@types/styled-components"] = "^5.1.34"
        elif styling == "emotion":
            c.dependencies.update({"@emotion/react": "^11.11.3", "@emotion/styled": "^11.11.0"})
            c.dev_dependencies["@emotion/babel-plugin"] = "^11.11.0"
        elif styling == "sass":
            c.dev_dependencies["sass"] = "^1.70.0"
        if config.bundler == "webpack" and layout.needs_postcss_config(config):
            c.dev_dependencies["postcss-loader"] = "^8.1.0"
        return c

    def _ui_library(self, config: ProjectConfig) -> Contribution:
        c = Contribution("UI library")
        lib = config.ui_library
        if lib == "mui":
            c.dependencies.update({
                "@mui/material": "^5.15.4",
                "@mui/icons-material": "^5.15.4",
                "@emotion/react": "^11.11.3",
                "@emotion/styled": "^11.11.0",
            })
        elif lib == "antd":
            c.dependencies["antd"] = "^5.13.0"
        elif lib == "chakra":
            c.dependencies.update({
                "@chakra-ui/react": "^2.8.2",
                "@emotion/react": "^11.11.3",
                "@emotion/styled": "^11.11.0",
                "framer-motion": "^10.18.0",
            })
        elif lib == "mantine":
            c.dependencies.update({"@mantine/core": "^7.4.2", "@mantine/hooks": "^7.4.2"})
            c.dev_dependencies.update({"postcss-preset-mantine": "^1.12.3", "postcss-simple-vars": "^7.0.1"})
        elif lib == "shadcn":
            c.dependencies.update({
                "class-variance-authority": "^0.7.0",
                "clsx": "^2.1.0",
                "tailwind-merge": "^2.2.0",
                "lucide-react": "^0.309.0",
            })
        return c

    def _state_management(self, config: ProjectConfig) -> Contribution:
        c = Contribution("state management")
        state = config.state_management
        if state == "redux":
            c.dependencies.update({"@reduxjs/toolkit": "^2.0.1", "react-redux": "^9.1.0"})
        elif state == "zustand":
            c.dependencies["zustand"] = "^4.4.7"
        elif state == "jotai":
            c.dependencies["jotai"] = "^2.6.4"
        elif state == "recoil":
            c.dependencies["recoil"] = "^0.7.7"
        elif state == "mobx":
            c.dependencies.update({"mobx": "^6.12.0", "mobx-react-lite": "^4.0.5"})
        return c

    # -- Backend axes ------------------------------------------------------

    def _node_backend(self, config: ProjectConfig) -> Contribution:
        c = Contribution("backend")
        ts = layout.server_is_typescript(config)
        entry = layout.node_server_entry(config)
        if ts:
            c.scripts["dev:server"] = f'nodemon --exec "node --loader ts-node/esm {entry}"'
            c.scripts["build:server"] = "tsc -p tsconfig.server.json"
        else:
            c.scripts["dev:server"] = f"nodemon {entry}"
            c.scripts["build:server"] = 'echo "No build step needed for JavaScript backend"'
        c.scripts["start"] = f"node {layout.node_server_runtime_entry(config)}"

        backend = config.backend
        if backend == "express":
            c.dependencies.update({"express": "^4.18.2", "cors": "^2.8.5", "dotenv": "^16.3.1"})
            if ts:
                c.dev_dependencies.update({"@types/express": "^4.17.21", "@types/cors": "^2.8.17"})
        elif backend == "fastify":
            c.dependencies.update({
                "fastify": "^4.25.0",
                "@fastify/cors": "^9.0.1",
                "@fastify/sensible": "^5.5.0",
                "dotenv": "^16.3.1",
            })
        elif backend == "koa":
            c.dependencies.update({
                "koa": "^2.15.0",
                "@koa/cors": "^5.0.0",
                "koa-router": "^12.0.1",
                "koa-bodyparser": "^4.4.1",
                "dotenv": "^16.3.1",
            })
            if ts:
                c.dev_dependencies.update({
                    "@types/koa": "^2.14.0",
                    "@types/koa-router": "^7.4.8",
                    "@types/koa-bodyparser": "^4.3.12",
                    "@types/koa__cors": "^5.0.0",
                })
        elif backend == "nest":
            c.dependencies.update({
                "@nestjs/common": "^10.3.0",
                "@nestjs/core": "^10.3.0",
                "@nestjs/platform-express": "^10.3.0",
                "reflect-metadata": "^0.2.1",
                "rxjs": "^7.8.1",
                "dotenv": "^16.3.1",
            })
            c.dev_dependencies.update({
                "@nestjs/cli": "^10.3.0",
                "@nestjs/schematics": "^10.1.0",
                "@nestjs/testing": "^10.3.0",
                "typescript": "^5.3.0",
                "@types/node": "^20.11.0",
            })
            if ts:
                c.dev_dependencies.update({
                    "@types/express": "^4.17.21",
                    "ts-loader": "^9.5.1",
                    "tsconfig-paths": "^4.2.0",
                })
            c.scripts.update({
                "start": "nest start",
                "dev:server": "nest start --watch",
                "build:server": "nest build",
            })
            c.package_type = "commonjs"
        elif backend == "hapi":
            c.dependencies.update({"@hapi/hapi": "^21.3.3", "dotenv": "^16.3.1"})
            if ts:
                c.dev_dependencies["@types/hapi__hapi"] = "^20.0.16"

        c.dev_dependencies["nodemon"] = "^3.0.2"
        if ts:
            c.dev_dependencies["ts-node"] = "^10.9.2"
        return c

    def _python_backend(self, config: ProjectConfig) -> Contribution:
        """Helper scripts only; Python packages live in ``server/requirements.txt``."""
        venv_pip = "server/.venv/bin/pip"
        return Contribution(
            "backend",
            scripts={
                "dev:server": "python server/main.py",
                "install:python:venv": (
                    f"python3 -m venv server/.venv && {venv_pip} install -r server/requirements.txt "
                    f"&& {venv_pip} install -r server/requirements-dev.txt"
                ),
                "lint:python": "flake8 server && black server --check && mypy server",
                "format:python": "black server",
            },
        )

    def _database(self, config: ProjectConfig) -> Contribution:
        c = Contribution("database", dependencies=dict(NODE_DATABASE_DRIVERS.get(config.database, {})))
        if config.database == "postgresql" and layout.server_is_typescript(config):
            c.dev_dependencies["@types/pg"] = "^8.10.9"
        return c
