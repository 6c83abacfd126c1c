"""Frontend template families.

``FrontendGenerator`` renders the HTML shell, the entry module, the root
component and (when the styling choice needs one) exactly one global
stylesheet.  ``UiLibraryGenerator`` and ``StateManagementGenerator`` add the
provider/theme and store modules for the optional component-framework axes;
they raise ``UnsupportedCombination`` for frameworks they have no
integration for, which the orchestrator turns into a warning.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from ...config import ProjectConfig
from .. import layout
from ..fileset import GeneratedFileSet
from .base import BaseGenerator


_ENTRY_TEMPLATES: dict[str, str] = {
    "react": "frontend/react/main.j2",
    "vue": "frontend/vue/main.j2",
    "svelte": "frontend/svelte/main.j2",
    "solid": "frontend/solid/index.j2",
    "vanilla": "frontend/vanilla/main.j2",
    "angular": "frontend/angular/main.ts.j2",
}

_COMPONENT_TEMPLATES: dict[str, str] = {
    "react": "frontend/react/App.j2",
    "vue": "frontend/vue/App.vue.j2",
    "svelte": "frontend/svelte/App.svelte.j2",
    "solid": "frontend/solid/App.j2",
    "angular": "frontend/angular/app.component.ts.j2",
}

_STYLESHEET_TEMPLATES: dict[str, str] = {
    "tailwind": "frontend/styles/tailwind.css.j2",
    "sass": "frontend/styles/style.scss.j2",
    "css": "frontend/styles/style.css.j2",
}

# Frameworks whose source needs a compiler step (JSX, SFCs, TypeScript).
_COMPILED_FRAMEWORKS = frozenset({"react", "vue", "svelte", "solid"})


class FrontendGenerator(BaseGenerator):
    """Entry file, root component, HTML shell and global stylesheet."""

    name = "frontend"

    def applies(self, config: ProjectConfig) -> bool:
        return config.has_frontend

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        fw = config.frontend_framework
        if fw not in _ENTRY_TEMPLATES:
            raise self.unsupported(f"no templates for frontend framework {fw!r}")

        files = GeneratedFileSet()
        stylesheet = layout.stylesheet_path(config)
        ctx = self.context(
            config,
            stylesheet_import=self._relative_import(stylesheet),
            script_src=self._script_src(config),
            bundle_src=self._bundle_src(config),
        )

        files.add(layout.html_file(config), self.renderer.render("frontend/index.html.j2", ctx))
        files.add(layout.entry_file(config), self.renderer.render(_ENTRY_TEMPLATES[fw], ctx))

        component = layout.root_component(config)
        if component is not None:
            files.add(component, self.renderer.render(_COMPONENT_TEMPLATES[fw], ctx))

        if stylesheet is not None:
            files.add(stylesheet, self.renderer.render(_STYLESHEET_TEMPLATES[config.styling], ctx))
        else:
            files.warnings.append(
                f"No global stylesheet generated for styling '{config.styling}'; "
                "it is set up through package imports or components."
            )

        if fw == "angular":
            self._angular_extras(config, ctx, files)
        elif config.bundler == "none" and (fw in _COMPILED_FRAMEWORKS or config.is_typescript):
            files.warnings.append(
                f"Bundler 'none' serves files as-is; {fw} with {config.language} "
                "needs a build step before it runs in the browser."
            )
        return files

    # -- Internals ---------------------------------------------------------

    def _angular_extras(self, config: ProjectConfig, ctx: dict, files: GeneratedFileSet) -> None:
        files.add("angular.json", self.renderer.render("frontend/angular/angular.json.j2", ctx))
        files.add("tsconfig.app.json", self.renderer.render("frontend/angular/tsconfig.app.json.j2", ctx))
        if config.has_backend:
            files.add("proxy.conf.json", self.renderer.render("frontend/angular/proxy.conf.json.j2", ctx))
        if not config.is_typescript:
            files.warnings.append("Angular projects are always generated in TypeScript.")
        if config.bundler != "none":
            files.warnings.append(
                f"The Angular CLI builds the frontend; bundler '{config.bundler}' is not used."
            )

    @staticmethod
    def _relative_import(path: str | None) -> str | None:
        if path is None:
            return None
        return f"./{PurePosixPath(path).relative_to('src').as_posix()}"

    @staticmethod
    def _script_src(config: ProjectConfig) -> str | None:
        if config.frontend_framework == "angular":
            return None
        if config.bundler in layout.MODULE_HTML_BUNDLERS:
            return f"/{layout.entry_file(config)}"
        return None

    @staticmethod
    def _bundle_src(config: ProjectConfig) -> str | None:
        if config.frontend_framework == "angular":
            return None
        if config.bundler in ("rollup", "esbuild"):
            return PurePosixPath(layout.BUNDLE_OUTPUT).relative_to("public").as_posix()
        return None


class UiLibraryGenerator(BaseGenerator):
    """Theme and helper modules for the selected component library."""

    name = "ui-library"

    def applies(self, config: ProjectConfig) -> bool:
        return config.ui_library != "none"

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        if config.frontend_framework != "react":
            raise self.unsupported(
                f"'{config.ui_library}' integration is only generated for React, "
                f"not {config.frontend_framework}"
            )
        files = GeneratedFileSet()
        ctx = self.context(config)
        ext = config.script_ext
        lib = config.ui_library
        if lib == "mui":
            files.add(f"src/theme.{ext}", self.renderer.render("frontend/ui/mui-theme.j2", ctx))
        elif lib == "chakra":
            files.add(f"src/theme.{ext}", self.renderer.render("frontend/ui/chakra-theme.j2", ctx))
        elif lib == "shadcn":
            files.add("components.json", self.renderer.render("frontend/ui/components.json.j2", ctx))
            files.add(f"src/lib/utils.{ext}", self.renderer.render("frontend/ui/shadcn-utils.j2", ctx))
            if config.styling != "tailwind":
                files.warnings.append(
                    "shadcn/ui is designed to work with Tailwind CSS; select Tailwind for styling."
                )
        return files


class StateManagementGenerator(BaseGenerator):
    """A starter store module for the selected state library."""

    name = "state-management"

    # Libraries usable outside React through their framework-agnostic APIs.
    _FRAMEWORK_AGNOSTIC = frozenset({"zustand", "mobx"})

    def applies(self, config: ProjectConfig) -> bool:
        return config.state_management != "none"

    def generate(self, config: ProjectConfig) -> GeneratedFileSet:
        state = config.state_management
        if config.frontend_framework != "react" and state not in self._FRAMEWORK_AGNOSTIC:
            raise self.unsupported(
                f"'{state}' store setup is only generated for React, not {config.frontend_framework}"
            )
        files = GeneratedFileSet()
        files.add(
            f"src/store.{config.script_ext}",
            self.renderer.render(f"frontend/state/{state}.j2", self.context(config)),
        )
        return files
