"""stackforge scaffolder -- turns a ``ProjectConfig`` into project files.

Generator families under :mod:`.generators` each render one configuration
axis from the Jinja2 templates in ``templates/``; the orchestrator folds
their output (plus the ``package.json`` from :mod:`.manifest`) into a single
``GeneratedFileSet`` and hands it to the :class:`~.writer.FileWriter`.

Quick usage::

    from stackforge.scaffolder import ProjectGenerator

    files = ProjectGenerator().build(ProjectConfig.quick("shop"))
    sorted(files)[:3]
"""

from stackforge.scaffolder.fileset import GeneratedFileSet
from stackforge.scaffolder.generator import GeneratorInvocation, ProjectGenerator
from stackforge.scaffolder.manifest import DependencyManifestBuilder, Manifest
from stackforge.scaffolder.templates import TemplateRenderer
from stackforge.scaffolder.writer import FileWriter

__all__ = [
    "DependencyManifestBuilder",
    "FileWriter",
    "GeneratedFileSet",
    "GeneratorInvocation",
    "Manifest",
    "ProjectGenerator",
    "TemplateRenderer",
]
