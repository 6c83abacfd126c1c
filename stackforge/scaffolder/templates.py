"""Jinja2 rendering of the packaged project templates.

Templates live under ``stackforge/scaffolder/templates/`` grouped by family
(``common/``, ``frontend/``, ``backend_node/<framework>/`` ...).  Rendering
is pure: every call returns text, and the FileWriter is the only code that
touches the target directory.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Callable

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_ROOT = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".j2"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

_WORD_SPLIT_RE = re.compile(r"[-_\s]+")


def slugify(value: str) -> str:
    """``"My Shop"`` -> ``"my-shop"``."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def pascal_case(value: str) -> str:
    """``"my-shop_app"`` -> ``"MyShopApp"``."""
    return "".join(word[:1].upper() + word[1:].lower() for word in _WORD_SPLIT_RE.split(value) if word)


def snake_case(value: str) -> str:
    """``"MyShop"`` and ``"my-shop"`` -> ``"my_shop"``."""
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    return _WORD_SPLIT_RE.sub("_", value.strip()).lower()


def camel_case(value: str) -> str:
    """``"my-shop"`` -> ``"myShop"``, e.g. the global name of an IIFE bundle."""
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def tojson_pretty(value: Any) -> str:
    """Two-space indented JSON, as written to ``tsconfig.json`` and friends."""
    return json.dumps(value, indent=2)


FILTERS: dict[str, Callable[..., str]] = {
    "slugify": slugify,
    "snake_case": snake_case,
    "camel_case": camel_case,
    "tojson_pretty": tojson_pretty,
}


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders ``.j2`` templates from a template root.

    Undefined variables raise ``jinja2.UndefinedError``, so a template that
    needs a value its generator did not pass fails the generation instead
    of producing a half-empty file.  Output is never HTML-escaped: the
    templates produce source code, not markup for a browser.

    Examples::

        renderer = TemplateRenderer()
        renderer.render("common/gitignore.j2", ctx)            -> ".gitignore text"
        renderer.render_tree("backend_python/flask", ctx, dest_prefix="server")
            -> {"server/main.py": "...", ...}
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir is not None else TEMPLATE_ROOT
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(FILTERS)

    # -- Public API --------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render the template at *template_path* (relative to the root)."""
        return self.env.get_template(template_path).render(**context)

    def render_tree(self, prefix: str, context: dict[str, Any], *, dest_prefix: str = "") -> dict[str, str]:
        """Render every template below *prefix*, keeping the directory shape.

        ``backend_python/fastapi/app/main.py.j2`` rendered with
        ``prefix="backend_python/fastapi"`` and ``dest_prefix="server"``
        becomes ``server/app/main.py``.  Keys are sorted.
        """
        base = dest_prefix.strip("/")
        rendered: dict[str, str] = {}
        for template_path in self.list_templates(prefix):
            relative = template_path[len(prefix):].lstrip("/")[: -len(TEMPLATE_SUFFIX)]
            rendered[f"{base}/{relative}" if base else relative] = self.render(template_path, context)
        return rendered

    def has_template(self, template_path: str) -> bool:
        return (self.template_dir / template_path).is_file()

    def list_templates(self, prefix: str = "") -> list[str]:
        """Sorted POSIX paths of the ``.j2`` files below *prefix*; empty if it is missing."""
        directory = self.template_dir / prefix
        if not directory.is_dir():
            return []
        return sorted(
            path.relative_to(self.template_dir).as_posix()
            for path in directory.rglob(f"*{TEMPLATE_SUFFIX}")
        )
