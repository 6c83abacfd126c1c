"""Project configuration for stackforge.

A ``ProjectConfig`` is the single, immutable description of the stack the
user asked for.  It is created once at the Prompter boundary (interactive
prompts, the quick preset, a config file, or environment variables) and then
passed read-only to every generator.  All settings use Pydantic v2 models so
they are validated at construction time and can be saved to or loaded from
JSON / YAML without boiler-plate.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .errors import InvalidConfiguration
from .schema import COMPONENT_FRAMEWORKS, NODE_BACKENDS, RELATIONAL_DATABASES, ConfigSchema


_NAME_RE = re.compile(r"^[a-z0-9-]+$")
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

ENV_PREFIX = "STACKFORGE_"


def sanitize_project_name(name: str) -> str:
    """Normalise a user-supplied project name.

    Trims, lowercases, and replaces every character outside ``[a-z0-9-]``
    with a hyphen.  Consecutive hyphens are kept so the mapping stays
    one-to-one with what the user typed.

    Examples::

        sanitize_project_name("  My App ") -> "my-app"
        sanitize_project_name("Shop_2.0")  -> "shop-2-0"
    """
    return re.sub(r"[^a-z0-9-]", "-", name.strip().lower())


class PortConfig(BaseModel):
    """Listening ports shared by the frontend dev server, backends and manifests."""

    model_config = ConfigDict(frozen=True)

    frontend: int = Field(default=3000, ge=1, le=65535)
    node_backend: int = Field(default=5000, ge=1, le=65535)
    python_backend: int = Field(default=8000, ge=1, le=65535)


class ProjectConfig(BaseModel):
    """Fully-resolved stack selection for one generated project.

    Construct through :meth:`resolve` (or :meth:`quick`, :meth:`load`,
    :meth:`from_env`), which fills defaults and applies the cross-axis
    normalisation rules before validation.  Direct construction validates
    but does not normalise.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Sanitized project name ([a-z0-9-])")
    template: str = Field(default="custom", description="Setup type: 'quick' or 'custom'")
    frontend_framework: str = Field(default="react")
    language: str = Field(default="typescript")
    bundler: str = Field(default="vite")
    styling: str = Field(default="tailwind")
    ui_library: str = Field(default="none")
    state_management: str = Field(default="none")
    backend: str = Field(default="express")
    python_framework: Optional[str] = Field(
        default=None, description="Only set when backend is 'python'"
    )
    database: str = Field(default="none")
    deployment: str = Field(default="docker")
    ports: PortConfig = Field(default_factory=PortConfig)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value:
            raise InvalidConfiguration("name", "project name cannot be empty")
        if not _NAME_RE.match(value):
            raise InvalidConfiguration(
                "name", f"{value!r} may only contain lowercase letters, digits and hyphens"
            )
        return value

    @field_validator("template")
    @classmethod
    def _check_template(cls, value: str) -> str:
        if value not in ("quick", "custom"):
            raise InvalidConfiguration("template", f"{value!r} is not one of quick, custom")
        return value

    @field_validator(
        "frontend_framework",
        "language",
        "bundler",
        "styling",
        "ui_library",
        "state_management",
        "backend",
        "python_framework",
        "database",
        "deployment",
    )
    @classmethod
    def _check_axis_value(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None and info.field_name == "python_framework":
            return value
        allowed = ConfigSchema.keys_of(info.field_name)
        if value not in allowed:
            raise InvalidConfiguration(
                info.field_name, f"{value!r} is not one of {', '.join(allowed)}"
            )
        return value

    @model_validator(mode="after")
    def _check_invariants(self) -> "ProjectConfig":
        if self.backend == "python" and self.python_framework is None:
            raise InvalidConfiguration("python_framework", "required when backend is 'python'")
        if self.backend != "python" and self.python_framework is not None:
            raise InvalidConfiguration(
                "python_framework", f"must be unset when backend is {self.backend!r}"
            )
        if self.frontend_framework not in COMPONENT_FRAMEWORKS:
            for field in ("ui_library", "state_management"):
                if getattr(self, field) != "none":
                    raise InvalidConfiguration(
                        field, f"only available for React or Vue, not {self.frontend_framework!r}"
                    )
        if self.frontend_framework == "skip":
            if self.bundler != "none":
                raise InvalidConfiguration("bundler", "must be 'none' when the frontend is skipped")
            if self.styling != "css":
                raise InvalidConfiguration("styling", "must be 'css' when the frontend is skipped")
        return self

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def resolve(cls, name: str, **choices: Any) -> "ProjectConfig":
        """Build a configuration from partial choices.

        Missing axes get their schema default, then the cross-axis rules are
        applied: a skipped frontend forces ``bundler='none'`` and
        ``styling='css'``; UI-library and state-management fall back to
        ``'none'`` outside React/Vue; ``python_framework`` is filled for a
        Python backend and dropped otherwise.

        Raises:
            InvalidConfiguration: For unknown keys, out-of-range values or an
                empty name.
        """
        passthrough = {"template", "ports"}
        unknown = sorted(set(choices) - set(ConfigSchema.axes()) - passthrough)
        if unknown:
            raise InvalidConfiguration(unknown[0], "not a known configuration axis")

        clean_name = sanitize_project_name(str(name or ""))
        values: dict[str, Any] = {
            key: choices[key] for key in passthrough if choices.get(key) is not None
        }
        for axis in ConfigSchema.axes():
            chosen = choices.get(axis)
            values[axis] = chosen if chosen not in (None, "") else ConfigSchema.default_of(axis)

        if values["frontend_framework"] == "skip":
            values["bundler"] = "none"
            values["styling"] = "css"
        if values["frontend_framework"] not in COMPONENT_FRAMEWORKS:
            values["ui_library"] = "none"
            values["state_management"] = "none"
        if values["backend"] != "python":
            values["python_framework"] = None

        return cls._validated(name=clean_name, **values)

    @classmethod
    def quick(cls, name: str) -> "ProjectConfig":
        """The quick-setup preset: React + TypeScript + Vite + Tailwind + Express + Docker."""
        return cls.resolve(
            name,
            template="quick",
            frontend_framework="react",
            language="typescript",
            bundler="vite",
            styling="tailwind",
            ui_library="none",
            state_management="none",
            backend="express",
            database="none",
            deployment="docker",
        )

    @classmethod
    def _validated(cls, **values: Any) -> "ProjectConfig":
        try:
            return cls(**values)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or "config"
            raise InvalidConfiguration(field, first.get("msg", str(exc))) from exc

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def has_frontend(self) -> bool:
        return self.frontend_framework != "skip"

    @property
    def has_backend(self) -> bool:
        return self.backend != "none"

    @property
    def is_node_backend(self) -> bool:
        return self.backend in NODE_BACKENDS

    @property
    def is_python_backend(self) -> bool:
        return self.backend == "python"

    @property
    def has_database(self) -> bool:
        return self.database != "none"

    @property
    def is_relational(self) -> bool:
        return self.database in RELATIONAL_DATABASES

    @property
    def is_typescript(self) -> bool:
        return self.language == "typescript"

    @property
    def script_ext(self) -> str:
        """``ts`` or ``js``."""
        return "ts" if self.is_typescript else "js"

    @property
    def component_ext(self) -> str:
        """Extension for JSX-bearing files: ``tsx``/``jsx`` for React and Solid."""
        if self.frontend_framework in ("react", "solid"):
            return "tsx" if self.is_typescript else "jsx"
        return self.script_ext

    @property
    def backend_port(self) -> int:
        """Port the generated backend listens on (0 when there is no backend)."""
        if self.is_python_backend:
            return self.ports.python_backend
        if self.is_node_backend:
            return self.ports.node_backend
        return 0

    @property
    def frontend_port(self) -> int:
        return self.ports.frontend

    def summary(self) -> dict[str, str]:
        """Ordered label -> value mapping used for the confirmation table."""
        rows: dict[str, str] = {"Project Name": self.name, "Template": self.template}
        if self.has_frontend:
            rows["Frontend"] = ConfigSchema.display_name("frontend_framework", self.frontend_framework)
            rows["Language"] = ConfigSchema.display_name("language", self.language)
            rows["Bundler"] = ConfigSchema.display_name("bundler", self.bundler)
            rows["Styling"] = ConfigSchema.display_name("styling", self.styling)
            if self.ui_library != "none":
                rows["UI Library"] = ConfigSchema.display_name("ui_library", self.ui_library)
            if self.state_management != "none":
                rows["State Mgmt"] = ConfigSchema.display_name("state_management", self.state_management)
        else:
            rows["Frontend"] = "None (backend only)"
        if self.has_backend:
            rows["Backend"] = ConfigSchema.display_name("backend", self.backend)
            if self.python_framework:
                rows["Python Framework"] = ConfigSchema.display_name(
                    "python_framework", self.python_framework
                )
        rows["Database"] = ConfigSchema.display_name("database", self.database)
        rows["Deployment"] = ConfigSchema.display_name("deployment", self.deployment)
        return rows

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration as JSON, or YAML for ``.yaml``/``.yml`` paths."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.suffix in (".yaml", ".yml"):
            target.write_text(
                yaml.safe_dump(self.model_dump(mode="json"), sort_keys=False), encoding="utf-8"
            )
        else:
            target.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path, name: Optional[str] = None) -> "ProjectConfig":
        """Load a configuration file (JSON or YAML by suffix).

        The file may be partial; missing axes are resolved like
        :meth:`resolve`.  *name* overrides the file's ``name`` entry.

        Raises:
            InvalidConfiguration: If the file is not a mapping or holds bad values.
        """
        try:
            raw = Path(path).read_text(encoding="utf-8")
            if Path(path).suffix in (".yaml", ".yml"):
                data = yaml.safe_load(raw)
            else:
                data = json.loads(raw)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise InvalidConfiguration("config", f"cannot read {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidConfiguration("config", f"{path} must contain a mapping")
        data = {_snake_key(str(key)): value for key, value in data.items()}
        file_name = data.pop("name", "")
        return cls.resolve(name or file_name, **data)

    @classmethod
    def from_env(cls, name: Optional[str] = None) -> "ProjectConfig":
        """Build a configuration from ``STACKFORGE_*`` environment variables.

        Recognised variables (all optional): STACKFORGE_NAME,
        STACKFORGE_TEMPLATE and one ``STACKFORGE_<AXIS>`` per schema axis,
        e.g. STACKFORGE_FRONTEND_FRAMEWORK, STACKFORGE_DATABASE.
        """
        choices: dict[str, Any] = {}
        for axis in ConfigSchema.axes():
            value = os.environ.get(f"{ENV_PREFIX}{axis.upper()}")
            if value:
                choices[axis] = value.strip().lower()
        if os.environ.get(f"{ENV_PREFIX}TEMPLATE"):
            choices["template"] = os.environ[f"{ENV_PREFIX}TEMPLATE"].strip().lower()
        return cls.resolve(name or os.environ.get(f"{ENV_PREFIX}NAME", ""), **choices)


def _snake_key(key: str) -> str:
    """``frontendFramework`` -> ``frontend_framework``; snake_case keys pass through."""
    return _CAMEL_RE.sub(r"_\1", key).lower()
