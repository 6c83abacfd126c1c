"""Node.js backend server stubs.

Every framework exposes the same surface: ``/api/health``, CRUD on
``/api/todos`` over an in-memory list, ``/api/greet``, a central error
handler and SIGINT/SIGTERM handlers that close the database connection.
"""

from __future__ import annotations

from ...config import ProjectConfig
from .. import layout
from ..fileset import GeneratedFileSet
from .base import BaseGenerator


# Template tree rendered for nest, relative to ``backend_node/nest``.
_NEST_FILES: tuple[str, ...] = (
    "main.ts",
    "app.module.ts",
    "app.controller.ts",
    "app.service.ts",
    "dto/todo.dto.ts",
)

_SINGLE_FILE_FRAMEWORKS = frozenset({"express", "fastify", "koa", "hapi"})


class NodeBackendGenerator(BaseGenerator):
    """Server entry (and nest module files) under ``server/src``."""

    name = "backend-node"

    def applies(self, config: ProjectConfig) -> bool:
        return config.is_node_backend

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        files = GeneratedFileSet()
        ctx = self.context(config)
        backend = config.backend

        if backend == "nest":
            for rel in _NEST_FILES:
                files.add(
                    f"server/src/{rel}",
                    self.renderer.render(f"backend_node/nest/{rel}.j2", ctx),
                )
            files.add("nest-cli.json", self.renderer.render("backend_node/nest/nest-cli.json.j2", ctx))
            if not config.is_typescript:
                files.warnings.append("NestJS servers are always generated in TypeScript.")
        elif backend in _SINGLE_FILE_FRAMEWORKS:
            files.add(
                layout.node_server_entry(config),
                self.renderer.render(f"backend_node/{backend}/server.j2", ctx),
            )
        else:
            raise self.unsupported(f"no server template for backend {backend!r}")
        return files
