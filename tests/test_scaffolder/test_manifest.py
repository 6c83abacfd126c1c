"""Tests for DependencyManifestBuilder (stackforge.scaffolder.manifest)."""

from __future__ import annotations

import json

import pytest

from stackforge.scaffolder.manifest import (
    CONCURRENTLY_VERSION,
    DependencyManifestBuilder,
    Manifest,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def builder() -> DependencyManifestBuilder:
    return DependencyManifestBuilder()


# ---------------------------------------------------------------------------
# Composite dev script
# ---------------------------------------------------------------------------


class TestDevScript:
    def test_quick_preset_runs_both_servers(self, builder, quick_config):
        manifest = builder.build(quick_config)
        backend = 'nodemon --exec "node --loader ts-node/esm server/src/server.ts"'
        assert manifest.scripts["dev"] == f"concurrently '{backend}' 'vite'"
        assert manifest.dev_dependencies["concurrently"] == CONCURRENTLY_VERSION
        assert manifest.scripts["dev:server"] == backend

    def test_backend_only_dev_is_the_server_command(self, builder, make_config):
        manifest = builder.build(make_config(frontend_framework="skip", language="javascript"))
        assert manifest.scripts["dev"] == "nodemon server/src/server.js"
        assert "concurrently" not in manifest.dev_dependencies

    def test_frontend_only_keeps_bundler_dev(self, builder, make_config):
        manifest = builder.build(make_config(backend="none"))
        assert manifest.scripts["dev"] == "vite"
        assert manifest.scripts["start"] == "vite preview"

    def test_frontend_only_start_falls_back_to_dev(self, builder, frontend_only_config):
        manifest = builder.build(frontend_only_config)
        assert manifest.scripts["start"] == manifest.scripts["dev"]


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class TestBackends:
    def test_typescript_express_entry_points(self, builder, quick_config):
        manifest = builder.build(quick_config)
        assert manifest.main == "server/dist/server.js"
        assert manifest.scripts["start"] == "node server/dist/server.js"
        assert manifest.scripts["build:server"] == "tsc -p tsconfig.server.json"
        assert {"express", "cors", "dotenv"} <= set(manifest.dependencies)
        assert "@types/express" in manifest.dev_dependencies

    def test_javascript_backend_has_no_build_step(self, builder, make_config):
        manifest = builder.build(make_config(language="javascript", bundler="webpack", backend="koa"))
        assert manifest.scripts["build:server"].startswith("echo")
        assert manifest.scripts["start"] == "node server/src/server.js"
        assert "@types/koa" not in manifest.dev_dependencies

    def test_nest_forces_commonjs(self, builder, make_config):
        manifest = builder.build(make_config(backend="nest"))
        assert manifest.type == "commonjs"
        assert manifest.scripts["start"] == "nest start"
        assert manifest.scripts["dev:server"] == "nest start --watch"
        assert manifest.scripts["build:server"] == "nest build"
        assert manifest.main == "server/dist/main.js"

    def test_python_backend_contributes_scripts_only(self, builder, python_api_config):
        manifest = builder.build(python_api_config)
        assert manifest.dependencies == {}
        assert manifest.dev_dependencies == {}
        assert manifest.main is None
        assert manifest.scripts["dev"] == "python server/main.py"
        assert "install:python:venv" in manifest.scripts

    def test_python_backend_with_frontend(self, builder, make_config):
        manifest = builder.build(make_config(backend="python", python_framework="flask"))
        assert manifest.scripts["dev"] == "concurrently 'python server/main.py' 'vite'"
        assert "pg" not in manifest.dependencies

    @pytest.mark.parametrize(
        "database, driver",
        [("postgresql", "pg"), ("mysql", "mysql2"), ("mongodb", "mongodb"), ("redis", "redis"), ("sqlite", "sqlite3")],
    )
    def test_node_database_drivers(self, builder, make_config, database, driver):
        manifest = builder.build(make_config(database=database))
        assert driver in manifest.dependencies


# ---------------------------------------------------------------------------
# Frontend axes
# ---------------------------------------------------------------------------


class TestFrontendAxes:
    def test_module_type_for_typescript_or_vite(self, builder, make_config):
        assert builder.build(make_config()).type == "module"
        assert builder.build(make_config(language="javascript", bundler="webpack", backend="none")).type == "commonjs"
        assert builder.build(make_config(language="javascript", bundler="vite", backend="none")).type == "module"

    def test_angular_cli_owns_scripts(self, builder, make_config):
        manifest = builder.build(make_config(frontend_framework="angular", backend="none"))
        assert manifest.scripts["dev"] == "ng serve --open"
        assert manifest.scripts["build"] == "ng build"
        assert "vite" not in manifest.dev_dependencies
        assert manifest.type == "module"

    def test_ui_and_state_libraries(self, builder, make_config):
        manifest = builder.build(make_config(ui_library="mui", state_management="zustand"))
        assert "@mui/material" in manifest.dependencies
        assert "zustand" in manifest.dependencies

    def test_tailwind_uses_vite_plugin_under_vite(self, builder, make_config):
        vite = builder.build(make_config())
        webpack = builder.build(make_config(bundler="webpack"))
        assert "@tailwindcss/vite" in vite.dev_dependencies
        assert "@tailwindcss/postcss" in webpack.dev_dependencies
        assert "postcss-loader" in webpack.dev_dependencies

    def test_esbuild_scripts_use_frontend_port(self, builder, make_config):
        manifest = builder.build(make_config(bundler="esbuild", backend="none"))
        assert "--serve=localhost:3000" in manifest.scripts["dev"]
        assert "src/main.tsx" in manifest.scripts["build"]


# ---------------------------------------------------------------------------
# Conflicts and serialisation
# ---------------------------------------------------------------------------


class TestConflicts:
    def test_later_axis_wins_with_warning(self, builder, frontend_only_config):
        manifest = builder.build(frontend_only_config)
        assert manifest.dev_dependencies["sass"] == "^1.70.0"
        assert any(w.startswith("sass: version ^1.71.1 replaced by ^1.70.0") for w in manifest.warnings)

    def test_equal_ranges_do_not_warn(self, builder, make_config):
        manifest = builder.build(make_config(styling="emotion", ui_library="mui"))
        assert not any("@emotion" in w for w in manifest.warnings)


class TestManifestJson:
    def test_json_layout(self, builder, quick_config):
        text = builder.build(quick_config).to_json()
        data = json.loads(text)
        assert text.endswith("}\n")
        assert list(data)[:4] == ["name", "version", "private", "type"]
        assert "devDependencies" in data
        assert "warnings" not in data

    def test_main_omitted_when_unset(self):
        data = json.loads(Manifest(name="x").to_json())
        assert "main" not in data

    def test_build_is_deterministic(self, builder, quick_config):
        assert builder.build(quick_config).to_json() == builder.build(quick_config).to_json()
