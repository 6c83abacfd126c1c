"""Shared pytest fixtures for the stackforge test suite.

Provides reusable fixtures for:
- The real template renderer and orchestrator
- Representative configurations (quick preset, Python API, frontend-only)
- A mocked CommandRunner for the installer
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from stackforge.config import ProjectConfig
from stackforge.scaffolder.generator import ProjectGenerator
from stackforge.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def renderer() -> TemplateRenderer:
    """The packaged templates; rendering is pure so one instance is shared."""
    return TemplateRenderer()


@pytest.fixture
def project_generator(renderer: TemplateRenderer) -> ProjectGenerator:
    return ProjectGenerator(renderer)


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def quick_config() -> ProjectConfig:
    """React + TypeScript + Vite + Tailwind + Express + Docker."""
    return ProjectConfig.quick("test-project")


@pytest.fixture
def python_api_config() -> ProjectConfig:
    """Backend-only FastAPI project on PostgreSQL."""
    return ProjectConfig.resolve(
        "test-api",
        frontend_framework="skip",
        backend="python",
        python_framework="fastapi",
        database="postgresql",
        deployment="none",
    )


@pytest.fixture
def frontend_only_config() -> ProjectConfig:
    """Vue + JavaScript + Webpack + Sass, no backend."""
    return ProjectConfig.resolve(
        "test-site",
        frontend_framework="vue",
        language="javascript",
        bundler="webpack",
        styling="sass",
        backend="none",
        deployment="none",
    )


@pytest.fixture
def make_config():
    """Factory for configurations with a default project name."""

    def _make(**choices: Any) -> ProjectConfig:
        return ProjectConfig.resolve(choices.pop("name", "test-project"), **choices)

    return _make


# ---------------------------------------------------------------------------
# Subprocess mocking
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_runner() -> AsyncMock:
    """A CommandRunner stand-in that succeeds for every command."""
    return AsyncMock(return_value=(0, "", ""))


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Parent directory for generated projects (auto-cleanup)."""
    out = tmp_path / "output"
    out.mkdir()
    return out
