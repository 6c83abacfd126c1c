"""stackforge -- interactive full-stack project scaffolder.

Asks for a stack (frontend framework, language, bundler, styling, backend,
database, deployment target), renders a consistent project tree from
Jinja2 templates and installs its dependencies.

Quick usage::

    from stackforge import ProjectConfig, ProjectGenerator

    config = ProjectConfig.resolve("shop", backend="python", database="postgresql")
    files = ProjectGenerator().run(config, "/tmp/shop")
"""

from stackforge.config import ProjectConfig
from stackforge.scaffolder.generator import ProjectGenerator

__version__ = "0.1.0"

__all__ = [
    "ProjectConfig",
    "ProjectGenerator",
    "__version__",
]
