"""Tests for the Node and Python backend generators."""

from __future__ import annotations

import pytest

from stackforge.scaffolder.generators.backend_node import NodeBackendGenerator
from stackforge.scaffolder.generators.backend_python import (
    DEV_REQUIREMENTS,
    PythonBackendGenerator,
    database_requirements,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------


class TestNodeBackendGenerator:
    def test_applies_only_to_node_backends(self, renderer, quick_config, python_api_config):
        gen = NodeBackendGenerator(renderer)
        assert gen.applies(quick_config)
        assert not gen.applies(python_api_config)

    def test_express_typescript(self, renderer, quick_config):
        files = NodeBackendGenerator(renderer).generate(quick_config)
        assert list(files) == ["server/src/server.ts"]
        server = files["server/src/server.ts"]
        assert "import express, { Express, Request, Response, NextFunction } from 'express';" in server
        assert "app.get('/api/health'" in server
        assert "|| 5000" in server

    def test_express_commonjs(self, renderer, make_config):
        config = make_config(language="javascript", bundler="webpack")
        server = NodeBackendGenerator(renderer).generate(config)["server/src/server.js"]
        assert "const express = require('express');" in server

    @pytest.mark.parametrize("backend", ["express", "fastify", "koa", "hapi"])
    def test_single_file_frameworks(self, renderer, make_config, backend):
        files = NodeBackendGenerator(renderer).generate(make_config(backend=backend, language="javascript"))
        assert list(files) == ["server/src/server.js"]
        assert "/api/todos" in files["server/src/server.js"]

    def test_nest_module_tree(self, renderer, make_config):
        files = NodeBackendGenerator(renderer).generate(make_config(backend="nest"))
        assert sorted(files) == [
            "nest-cli.json",
            "server/src/app.controller.ts",
            "server/src/app.module.ts",
            "server/src/app.service.ts",
            "server/src/dto/todo.dto.ts",
            "server/src/main.ts",
        ]
        assert not files.warnings

    def test_nest_with_javascript_frontend_warns(self, renderer, make_config):
        files = NodeBackendGenerator(renderer).generate(make_config(backend="nest", language="javascript"))
        assert "server/src/main.ts" in files
        assert files.warnings == ["NestJS servers are always generated in TypeScript."]


# ---------------------------------------------------------------------------
# Python
# ---------------------------------------------------------------------------


class TestPythonBackendGenerator:
    def test_fastapi_layout(self, renderer, python_api_config):
        files = PythonBackendGenerator(renderer).generate(python_api_config)
        for path in (
            "server/main.py",
            "server/app/__init__.py",
            "server/app/core/config.py",
            "server/app/models/todo.py",
            "server/app/routers/health.py",
            "server/app/routers/todos.py",
            "server/requirements.txt",
            "server/requirements-dev.txt",
            "server/.gitignore",
            "server/start_server.sh",
        ):
            assert path in files
        assert "from app.database import close_database, connect_database" in files["server/main.py"]

    def test_requirements(self, renderer, python_api_config):
        files = PythonBackendGenerator(renderer).generate(python_api_config)
        requirements = files["server/requirements.txt"].splitlines()
        assert requirements[0] == "python-dotenv>=1.0.0"
        assert "fastapi>=0.109.0" in requirements
        assert "SQLAlchemy>=2.0.25" in requirements
        assert "psycopg2-binary>=2.9.9" in requirements
        dev = files["server/requirements-dev.txt"].splitlines()
        assert dev == ["-r requirements.txt", *DEV_REQUIREMENTS]

    def test_start_script_uses_port_variable(self, renderer, python_api_config):
        script = PythonBackendGenerator(renderer).generate(python_api_config)["server/start_server.sh"]
        assert script.startswith("#!/usr/bin/env bash")
        assert "exec uvicorn main:app --host 0.0.0.0 --port ${PORT}" in script

    def test_django_layout(self, renderer, make_config):
        config = make_config(backend="python", python_framework="django", database="postgresql")
        files = PythonBackendGenerator(renderer).generate(config)
        assert "server/manage.py" in files
        assert "server/config/settings.py" in files
        assert "server/app/todos/views.py" in files
        assert "python manage.py migrate --noinput" in files["server/start_server.sh"]

    @pytest.mark.parametrize("framework", ["flask", "quart"])
    def test_blueprint_frameworks(self, renderer, make_config, framework):
        config = make_config(backend="python", python_framework=framework)
        files = PythonBackendGenerator(renderer).generate(config)
        assert "server/app/routes/todos.py" in files
        assert "server/main.py" in files


class TestDatabaseRequirements:
    def test_none(self, make_config):
        assert database_requirements(make_config(backend="python", python_framework="flask")) == []

    def test_django_uses_native_drivers(self, make_config):
        config = make_config(backend="python", python_framework="django", database="mysql")
        assert database_requirements(config) == ["mysqlclient>=2.2.0"]

    def test_sqlalchemy_mysql(self, make_config):
        config = make_config(backend="python", python_framework="flask", database="mysql")
        assert database_requirements(config) == ["SQLAlchemy>=2.0.25", "PyMySQL>=1.1.0"]

    def test_async_frameworks_get_motor(self, make_config):
        quart = make_config(backend="python", python_framework="quart", database="mongodb")
        flask = make_config(backend="python", python_framework="flask", database="mongodb")
        assert "motor>=3.3.2" in database_requirements(quart)
        assert database_requirements(flask) == ["pymongo>=4.6.1"]

    def test_sqlite_needs_only_sqlalchemy(self, make_config):
        config = make_config(backend="python", python_framework="fastapi", database="sqlite")
        assert database_requirements(config) == ["SQLAlchemy>=2.0.25"]
