"""Template generator families, one per configuration axis."""

from stackforge.scaffolder.generators.backend_node import NodeBackendGenerator
from stackforge.scaffolder.generators.backend_python import PythonBackendGenerator
from stackforge.scaffolder.generators.base import BaseGenerator
from stackforge.scaffolder.generators.common import CommonGenerator
from stackforge.scaffolder.generators.database import DatabaseGenerator
from stackforge.scaffolder.generators.deployment import DeploymentGenerator
from stackforge.scaffolder.generators.frontend import (
    FrontendGenerator,
    StateManagementGenerator,
    UiLibraryGenerator,
)

__all__ = [
    "BaseGenerator",
    "CommonGenerator",
    "DatabaseGenerator",
    "DeploymentGenerator",
    "FrontendGenerator",
    "NodeBackendGenerator",
    "PythonBackendGenerator",
    "StateManagementGenerator",
    "UiLibraryGenerator",
]
