"""Main scaffolding orchestrator.

Takes a validated ``ProjectConfig``, decides which generator families apply,
runs them in a fixed order and folds their output into one
``GeneratedFileSet``.  Generation is pure; only :meth:`ProjectGenerator.run`
touches the filesystem, through :class:`~.writer.FileWriter`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..config import ProjectConfig
from ..errors import GenerationAborted, TargetNotEmpty, UnsupportedCombination
from .fileset import GeneratedFileSet
from .generators.backend_node import NodeBackendGenerator
from .generators.backend_python import PythonBackendGenerator
from .generators.base import BaseGenerator
from .generators.common import CommonGenerator
from .generators.database import DatabaseGenerator
from .generators.deployment import DeploymentGenerator
from .generators.frontend import FrontendGenerator, StateManagementGenerator, UiLibraryGenerator
from .manifest import DependencyManifestBuilder
from .templates import TemplateRenderer
from .writer import FileWriter


# ---------------------------------------------------------------------------
# Plan entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GeneratorInvocation:
    """One planned generator call.

    ``mandatory`` marks generators that are the sole handler of the axis
    value that selected them: if such a generator cannot render the
    configuration the whole run is aborted instead of skipped.
    """

    name: str
    generator: BaseGenerator
    mandatory: bool = False


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Plans and executes the generator families for one configuration.

    Order: common files, frontend (then its UI-library and state-management
    helpers), the Node or Python backend, database, deployment.  Shared
    files such as ``.env`` accumulate contributions in that order.

    Examples::

        files = ProjectGenerator().build(ProjectConfig.quick("shop"))
        "server/src/server.ts" in files
        # True
    """

    def __init__(self, renderer: Optional[TemplateRenderer] = None) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.manifest_builder = DependencyManifestBuilder()
        # (generator, mandatory) in execution order.
        self._registry: list[tuple[BaseGenerator, bool]] = [
            (CommonGenerator(self.renderer), True),
            (FrontendGenerator(self.renderer), True),
            (UiLibraryGenerator(self.renderer), False),
            (StateManagementGenerator(self.renderer), False),
            (NodeBackendGenerator(self.renderer), True),
            (PythonBackendGenerator(self.renderer), True),
            (DatabaseGenerator(self.renderer), True),
            (DeploymentGenerator(self.renderer), True),
        ]

    # -- Public API --------------------------------------------------------

    def plan(self, config: ProjectConfig) -> list[GeneratorInvocation]:
        """Generators whose predicate holds for *config*, in execution order."""
        return [
            GeneratorInvocation(generator.name, generator, mandatory)
            for generator, mandatory in self._registry
            if generator.applies(config)
        ]

    def build(self, config: ProjectConfig) -> GeneratedFileSet:
        """Produce every output file in memory without writing anything.

        Raises:
            GenerationAborted: A generator failed, or a mandatory one could
                not render the configuration.
        """
        files = GeneratedFileSet()
        for step in self.plan(config):
            try:
                produced = step.generator.generate(config)
            except UnsupportedCombination as exc:
                if step.mandatory:
                    raise GenerationAborted(step.name, exc) from exc
                files.warnings.append(str(exc))
                continue
            except Exception as exc:
                raise GenerationAborted(step.name, exc) from exc
            files.update(produced)

            if step.name == "common":
                manifest = self.manifest_builder.build(config)
                files.add("package.json", manifest.to_json())
                files.warnings.extend(manifest.warnings)
        return files

    def run(
        self,
        config: ProjectConfig,
        output_dir: str | Path,
        on_file: Optional[Callable[[str], None]] = None,
    ) -> GeneratedFileSet:
        """Generate the project and write it to *output_dir*.

        Args:
            config: The validated configuration.
            output_dir: Project root.  It may be missing or empty.
            on_file: Called with each relative path after it is written.

        Returns:
            The written file set, warnings included.

        Raises:
            TargetNotEmpty: *output_dir* exists and has entries.
            GenerationAborted: See :meth:`build`.
            WriteFailure: A file could not be written.
        """
        root = Path(output_dir)
        if root.exists() and (not root.is_dir() or any(root.iterdir())):
            raise TargetNotEmpty(root)
        files = self.build(config)
        FileWriter(root).write(files, on_file=on_file)
        return files
