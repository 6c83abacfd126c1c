"""Tests for the shared path facts (stackforge.scaffolder.layout)."""

from __future__ import annotations

import pytest

from stackforge.scaffolder import layout

pytestmark = pytest.mark.unit


class TestFrontendPaths:
    @pytest.mark.parametrize(
        "choices, entry",
        [
            ({"frontend_framework": "react"}, "src/main.tsx"),
            ({"frontend_framework": "react", "language": "javascript"}, "src/main.jsx"),
            ({"frontend_framework": "solid"}, "src/index.tsx"),
            ({"frontend_framework": "vue", "language": "javascript"}, "src/main.js"),
            ({"frontend_framework": "angular"}, "src/main.ts"),
            ({"frontend_framework": "vanilla"}, "src/main.ts"),
        ],
    )
    def test_entry_file(self, make_config, choices, entry):
        assert layout.entry_file(make_config(**choices)) == entry

    def test_root_component(self, make_config):
        assert layout.root_component(make_config()) == "src/App.tsx"
        assert layout.root_component(make_config(frontend_framework="vue")) == "src/App.vue"
        assert layout.root_component(make_config(frontend_framework="vanilla")) is None

    def test_html_file_by_bundler(self, make_config):
        assert layout.html_file(make_config(bundler="vite")) == "index.html"
        assert layout.html_file(make_config(bundler="webpack")) == "public/index.html"
        assert layout.html_file(make_config(frontend_framework="angular")) == "src/index.html"

    def test_stylesheet(self, make_config):
        assert layout.stylesheet_path(make_config()) == "src/index.css"
        assert layout.stylesheet_path(make_config(styling="sass")) == "src/style.scss"
        assert layout.stylesheet_path(make_config(styling="bootstrap")) is None
        assert layout.stylesheet_path(make_config(frontend_framework="skip")) is None

    @pytest.mark.parametrize(
        "bundler, build_dir",
        [("vite", "dist"), ("webpack", "dist"), ("parcel", "dist"), ("rollup", "public"), ("esbuild", "public"), ("none", ".")],
    )
    def test_frontend_build_dir(self, make_config, bundler, build_dir):
        assert layout.frontend_build_dir(make_config(bundler=bundler)) == build_dir

    def test_angular_build_dir_uses_project_name(self, make_config):
        config = make_config(name="shop", frontend_framework="angular")
        assert layout.frontend_build_dir(config) == "dist/shop/browser"


class TestBackendPaths:
    def test_typescript_server(self, quick_config):
        assert layout.node_server_entry(quick_config) == "server/src/server.ts"
        assert layout.node_server_runtime_entry(quick_config) == "server/dist/server.js"

    def test_javascript_server(self, make_config):
        config = make_config(language="javascript")
        assert layout.node_server_entry(config) == "server/src/server.js"
        assert layout.node_server_runtime_entry(config) == "server/src/server.js"

    def test_nest_is_always_typescript(self, make_config):
        config = make_config(language="javascript", backend="nest")
        assert layout.server_is_typescript(config)
        assert layout.node_server_entry(config) == "server/src/main.ts"
        assert layout.package_type(config) == "commonjs"

    def test_database_module(self, make_config, python_api_config):
        assert layout.database_module(python_api_config) == "server/app/database.py"
        assert layout.database_module(make_config(database="redis")) == "server/src/database/redis.ts"
        assert layout.database_module(make_config()) is None
        django = make_config(backend="python", python_framework="django", database="postgresql")
        assert layout.database_module(django) is None

    @pytest.mark.parametrize(
        "framework, command",
        [
            ("fastapi", ["uvicorn", "main:app", "--host", "0.0.0.0", "--port", "8000"]),
            ("flask", ["gunicorn", "main:app", "--bind", "0.0.0.0:8000"]),
            ("quart", ["hypercorn", "main:app", "--bind", "0.0.0.0:8000"]),
            ("django", ["gunicorn", "config.wsgi:application", "--bind", "0.0.0.0:8000"]),
        ],
    )
    def test_python_serve_command(self, make_config, framework, command):
        config = make_config(backend="python", python_framework=framework)
        assert layout.python_serve_command(config) == command

    def test_python_serve_command_port_override(self, python_api_config):
        assert layout.python_serve_command(python_api_config, "$PORT")[-1] == "$PORT"


class TestTooling:
    def test_postcss_only_outside_vite_plugin(self, make_config):
        assert not layout.needs_postcss_config(make_config())
        assert layout.needs_postcss_config(make_config(bundler="webpack"))
        assert layout.needs_postcss_config(make_config(styling="css", ui_library="mantine"))

    def test_babel_config(self, make_config):
        assert layout.needs_babel_config(make_config(bundler="webpack"))
        assert layout.needs_babel_config(make_config(bundler="rollup"))
        assert not layout.needs_babel_config(make_config(bundler="rollup", frontend_framework="vue"))
        assert not layout.needs_babel_config(make_config())
