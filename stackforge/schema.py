"""Static registry of configuration axes.

Each axis lists its allowed values in display order together with a
human-readable name and description, plus the value selected when the user
accepts the default.  The registry is pure data: the Prompter reads it to
build menus and ``ProjectConfig`` reads it to validate choices.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownAxis


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class AxisOption(BaseModel):
    """One selectable value of an axis."""

    model_config = ConfigDict(frozen=True)

    key: str
    display_name: str
    description: str = ""


class Axis(BaseModel):
    """A configuration dimension with its ordered options and default."""

    model_config = ConfigDict(frozen=True)

    name: str
    title: str
    options: tuple[AxisOption, ...]
    default: str = Field(..., description="Key of the option used when nothing is chosen")

    def keys(self) -> tuple[str, ...]:
        return tuple(option.key for option in self.options)


def _axis(name: str, title: str, default: str, *options: tuple[str, str, str]) -> Axis:
    return Axis(
        name=name,
        title=title,
        default=default,
        options=tuple(
            AxisOption(key=key, display_name=display, description=desc)
            for key, display, desc in options
        ),
    )


# ---------------------------------------------------------------------------
# Axis definitions
# ---------------------------------------------------------------------------

AXES: dict[str, Axis] = {
    axis.name: axis
    for axis in (
        _axis(
            "frontend_framework", "JavaScript Frontend Framework", "react",
            ("react", "React", "Popular UI library by Meta"),
            ("vue", "Vue.js", "Progressive framework"),
            ("angular", "Angular", "Full-featured framework by Google"),
            ("svelte", "Svelte", "Compile-time framework"),
            ("solid", "SolidJS", "Fast reactive framework"),
            ("vanilla", "Vanilla JS", "No framework, pure JavaScript"),
            ("skip", "Skip Frontend", "Backend-only project"),
        ),
        _axis(
            "language", "Language Choice", "typescript",
            ("typescript", "TypeScript", "Type-safe JavaScript superset"),
            ("javascript", "JavaScript", "Standard JavaScript"),
        ),
        _axis(
            "bundler", "Build Tool / Bundler", "vite",
            ("vite", "Vite", "Fast build tool with HMR"),
            ("webpack", "Webpack", "Popular module bundler"),
            ("rollup", "Rollup", "Efficient ES module bundler"),
            ("parcel", "Parcel", "Zero-configuration bundler"),
            ("esbuild", "ESBuild", "Extremely fast bundler"),
            ("none", "None", "No bundler (for Node.js projects)"),
        ),
        _axis(
            "styling", "CSS Framework / Styling", "tailwind",
            ("tailwind", "Tailwind CSS", "Utility-first CSS framework"),
            ("bootstrap", "Bootstrap", "Popular CSS framework"),
            ("bulma", "Bulma", "Modern CSS framework"),
            ("styled-components", "Styled Components", "CSS-in-JS library"),
            ("emotion", "Emotion", "CSS-in-JS library"),
            ("sass", "Sass/SCSS", "CSS preprocessor"),
            ("css", "Plain CSS", "Vanilla CSS"),
        ),
        _axis(
            "ui_library", "UI Component Library (Optional)", "none",
            ("none", "None", "Build custom components"),
            ("mui", "Material-UI", "React Material Design components"),
            ("antd", "Ant Design", "Enterprise UI components"),
            ("chakra", "Chakra UI", "Simple, modular React components"),
            ("mantine", "Mantine", "Full-featured React components"),
            ("shadcn", "shadcn/ui", "Copy-paste React components"),
        ),
        _axis(
            "state_management", "State Management (Frontend)", "none",
            ("none", "Built-in State", "Use framework's built-in state"),
            ("redux", "Redux Toolkit", "Predictable state container"),
            ("zustand", "Zustand", "Lightweight state management"),
            ("jotai", "Jotai", "Atomic state management"),
            ("recoil", "Recoil", "Facebook's state management"),
            ("mobx", "MobX", "Reactive state management"),
        ),
        _axis(
            "backend", "Backend Framework", "express",
            ("none", "No Backend", "Frontend-only project"),
            ("express", "Express.js", "Minimal Node.js framework"),
            ("fastify", "Fastify", "Fast Node.js framework"),
            ("koa", "Koa.js", "Next-gen Node.js framework"),
            ("nest", "NestJS", "Enterprise Node.js framework"),
            ("hapi", "Hapi.js", "Rich Node.js framework"),
            ("python", "Python Backend", "Choose Python framework"),
        ),
        _axis(
            "python_framework", "Python Backend Framework", "fastapi",
            ("fastapi", "FastAPI", "Modern, fast Python API framework"),
            ("django", "Django", "Full-featured Python framework"),
            ("flask", "Flask", "Lightweight Python framework"),
            ("quart", "Quart", "Async Python framework"),
        ),
        _axis(
            "database", "Database", "none",
            ("none", "No Database", "Use mock data or external APIs"),
            ("sqlite", "SQLite", "Lightweight file database"),
            ("postgresql", "PostgreSQL", "Advanced relational database"),
            ("mysql", "MySQL", "Popular relational database"),
            ("mongodb", "MongoDB", "NoSQL document database"),
            ("redis", "Redis", "In-memory data store"),
        ),
        _axis(
            "deployment", "Deployment & DevOps", "docker",
            ("none", "No Deployment Setup", "Manual deployment"),
            ("docker", "Docker", "Containerization setup"),
            ("vercel", "Vercel", "Frontend deployment config"),
            ("netlify", "Netlify", "JAMstack deployment"),
            ("heroku", "Heroku", "Cloud platform deployment"),
            ("aws", "AWS", "Amazon Web Services setup"),
        ),
    )
}

# Frameworks for which the UI-library and state-management axes are offered.
COMPONENT_FRAMEWORKS: frozenset[str] = frozenset({"react", "vue"})

NODE_BACKENDS: frozenset[str] = frozenset({"express", "fastify", "koa", "nest", "hapi"})

RELATIONAL_DATABASES: frozenset[str] = frozenset({"sqlite", "postgresql", "mysql"})


# ---------------------------------------------------------------------------
# Lookup API
# ---------------------------------------------------------------------------


class ConfigSchema:
    """Read-only lookup over :data:`AXES`.

    Examples::

        ConfigSchema.default_of("bundler")          -> "vite"
        [o.key for o in ConfigSchema.list_axis("language")]
                                                    -> ["typescript", "javascript"]
        ConfigSchema.list_axis("colour")            -> raises UnknownAxis
    """

    @staticmethod
    def axis(axis_name: str) -> Axis:
        try:
            return AXES[axis_name]
        except KeyError:
            raise UnknownAxis(axis_name) from None

    @classmethod
    def list_axis(cls, axis_name: str) -> tuple[AxisOption, ...]:
        """Return the options of *axis_name* in display order."""
        return cls.axis(axis_name).options

    @classmethod
    def default_of(cls, axis_name: str) -> str:
        """Return the default option key of *axis_name*."""
        return cls.axis(axis_name).default

    @classmethod
    def title_of(cls, axis_name: str) -> str:
        return cls.axis(axis_name).title

    @classmethod
    def keys_of(cls, axis_name: str) -> tuple[str, ...]:
        return cls.axis(axis_name).keys()

    @classmethod
    def display_name(cls, axis_name: str, key: str) -> str:
        """Return the display name of *key*, or *key* itself if unknown."""
        for option in cls.list_axis(axis_name):
            if option.key == key:
                return option.display_name
        return key

    @staticmethod
    def axes() -> tuple[str, ...]:
        """Return every registered axis name in prompt order."""
        return tuple(AXES)
