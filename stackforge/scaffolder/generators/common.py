"""Project-wide files every configuration gets.

The ignore file, README and base env entries are always present; TypeScript
configs, bundler configs and the PostCSS/Babel configs are emitted when the
configuration calls for them.
"""

from __future__ import annotations

from typing import Any

from ...config import ProjectConfig
from ...schema import ConfigSchema
from .. import layout
from ..fileset import GeneratedFileSet
from ..manifest import DependencyManifestBuilder
from ..templates import tojson_pretty
from .base import BaseGenerator


class CommonGenerator(BaseGenerator):
    """Root-level configuration shared by the frontend and backend."""

    name = "common"

    def applies(self, config: ProjectConfig) -> bool:
        return True

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        files = GeneratedFileSet()
        manifest = DependencyManifestBuilder().build(config)
        ctx = self.context(
            config,
            summary=config.summary(),
            scripts=manifest.scripts,
            database_title=ConfigSchema.display_name("database", config.database),
            postcss=layout.needs_postcss_config(config),
        )

        files.add(".gitignore", self.renderer.render("common/gitignore.j2", ctx))
        files.add("README.md", self.renderer.render("common/README.md.j2", ctx))

        env = self.renderer.render("common/env.j2", ctx)
        files.add(".env", env)
        files.add(".env.example", env)

        if config.is_typescript or layout.server_is_typescript(config):
            files.add("tsconfig.json", tojson_pretty(self._tsconfig(config)) + "\n")
        if layout.server_is_typescript(config):
            files.add("tsconfig.server.json", tojson_pretty(self._tsconfig_server(config)) + "\n")

        if config.has_frontend and config.frontend_framework != "angular":
            self._bundler_config(config, ctx, files)
        if layout.needs_postcss_config(config):
            files.add("postcss.config.mjs", self.renderer.render("common/postcss.config.mjs.j2", ctx))
        if layout.needs_babel_config(config):
            files.add(".babelrc", self.renderer.render("common/babelrc.j2", ctx))
        return files

    # -- Bundlers ----------------------------------------------------------

    def _bundler_config(self, config: ProjectConfig, ctx: dict[str, Any], files: GeneratedFileSet) -> None:
        bundler = config.bundler
        if bundler == "vite":
            plugins = {
                "react": "react()",
                "vue": "vue()",
                "svelte": "svelte()",
                "solid": "solidPlugin()",
            }
            names = [plugins[config.frontend_framework]] if config.frontend_framework in plugins else []
            if config.styling == "tailwind":
                names.append("tailwindcss()")
            files.add(
                f"vite.config.{config.script_ext}",
                self.renderer.render("common/vite.config.j2", {**ctx, "plugins": names}),
            )
        elif bundler == "webpack":
            files.add("webpack.config.js", self.renderer.render("common/webpack.config.js.j2", ctx))
        elif bundler == "rollup":
            files.add("rollup.config.js", self.renderer.render("common/rollup.config.js.j2", ctx))
        elif bundler == "esbuild" and config.frontend_framework in ("vue", "svelte"):
            files.warnings.append(
                f"esbuild has no built-in {config.frontend_framework} support; "
                "add an esbuild plugin before running the dev script."
            )

    # -- TypeScript --------------------------------------------------------

    def _tsconfig(self, config: ProjectConfig) -> dict[str, Any]:
        fw = config.frontend_framework
        options: dict[str, Any] = {
            "target": "ES2020",
            "module": "ESNext",
            "moduleResolution": "bundler",
            "lib": ["ES2020", "DOM", "DOM.Iterable"],
            "baseUrl": ".",
            "paths": {"@/*": ["src/*"]},
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
            "allowSyntheticDefaultImports": True,
            "resolveJsonModule": True,
        }
        if fw == "react":
            options["jsx"] = "react-jsx"
        elif fw == "solid":
            options.update(jsx="preserve", jsxImportSource="solid-js")
        elif fw == "angular":
            options.update(
                target="ES2022",
                experimentalDecorators=True,
                useDefineForClassFields=False,
                lib=["ES2022", "DOM"],
            )
        if config.bundler == "vite" and fw != "angular":
            options.update(isolatedModules=True, noEmit=True)
        if not config.has_frontend:
            options.update(
                module="NodeNext" if layout.uses_esm(config) else "CommonJS",
                moduleResolution="NodeNext" if layout.uses_esm(config) else "node",
                lib=["ES2020"],
            )
            options.pop("paths")

        tsconfig: dict[str, Any] = {"compilerOptions": options}
        if config.has_frontend:
            tsconfig["include"] = ["src"]
        else:
            tsconfig["include"] = ["server/src"]
        tsconfig["exclude"] = ["node_modules", "dist", "build"]
        return tsconfig

    def _tsconfig_server(self, config: ProjectConfig) -> dict[str, Any]:
        if config.backend == "nest":
            options: dict[str, Any] = {
                "module": "CommonJS",
                "moduleResolution": "node",
                "target": "ES2021",
                "lib": ["ES2021"],
                "experimentalDecorators": True,
                "emitDecoratorMetadata": True,
            }
        else:
            options = {"module": "NodeNext", "moduleResolution": "NodeNext", "lib": ["ES2020"]}
        options.update(
            outDir="./server/dist",
            rootDir="./server/src",
            noEmit=False,
            isolatedModules=False,
            sourceMap=True,
        )
        return {
            "extends": "./tsconfig.json",
            "compilerOptions": options,
            "include": ["server/src/**/*.ts"],
            "exclude": ["node_modules", "dist", "build", "src"],
        }
