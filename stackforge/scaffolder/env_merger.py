"""Idempotent merging of environment-variable files.

Several generators contribute to the same ``.env`` / ``.env.example``: the
base files set ``NODE_ENV`` and ``PORT``, the database generator adds its
connection variables, and so on.  ``EnvMerger`` folds each contribution into
the existing text without disturbing unrelated lines:

1. existing ``KEY=VALUE`` lines whose key is contributed get their value
   replaced in place;
2. exactly one marker comment separates script-managed keys from the rest:
   repeated markers collapse into the first, and a missing one is inserted
   after the last anchor key (``PORT``, ``PYTHON_PORT``, ``NODE_ENV``) or
   appended at the end;
3. new keys go into the marker's section in contribution order;
4. runs of blank lines collapse to one and the text ends with exactly one
   newline.

Merging the same contributions twice yields the same text as merging once.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import NamedTuple

from ..errors import MergeConflict


DEFAULT_MARKER = "# --- Managed by stackforge: generated configuration below ---"

ANCHOR_KEYS: tuple[str, ...] = ("PORT", "PYTHON_PORT", "NODE_ENV")

_ASSIGNMENT_RE = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=")


class EnvVariable(NamedTuple):
    """A ``KEY=VALUE`` pair contributed to an env file."""

    key: str
    value: str

    def render(self) -> str:
        return f"{self.key}={self.value}"


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _classify(line: str) -> str:
    stripped = line.strip()
    if not stripped:
        return "blank"
    if stripped.startswith("#"):
        return "comment"
    if _ASSIGNMENT_RE.match(line):
        return "assignment"
    return "malformed"


def parse_env(text: str) -> list[EnvVariable]:
    """Extract the ``KEY=VALUE`` assignments of *text* in file order.

    Blank lines, comments and malformed lines are ignored.
    """
    result: list[EnvVariable] = []
    for line in text.splitlines():
        match = _ASSIGNMENT_RE.match(line)
        if match:
            result.append(EnvVariable(match.group(1), line.split("=", 1)[1]))
    return result


def render_env(variables: Iterable[EnvVariable], header: str = "") -> str:
    """Render variables as env-file text with an optional header comment block."""
    lines = [f"# {row}" if row else "#" for row in header.splitlines()] if header else []
    lines.extend(var.render() for var in variables)
    return "\n".join(lines) + "\n"


def normalize_blank_lines(lines: list[str]) -> list[str]:
    """Collapse runs of blank lines to one and drop leading/trailing blanks."""
    result: list[str] = []
    for line in lines:
        if not line.strip():
            if not result or not result[-1].strip():
                continue
            result.append("")
        else:
            result.append(line)
    while result and not result[-1].strip():
        result.pop()
    return result


# ---------------------------------------------------------------------------
# EnvMerger
# ---------------------------------------------------------------------------


class EnvMerger:
    """Merges env-variable contributions into existing env-file text.

    Lines that are neither blank, comments nor ``KEY=VALUE`` assignments are
    left untouched and recorded in :attr:`warnings` as ``MergeConflict``
    entries; the merge itself never fails.
    """

    def __init__(self, marker: str = DEFAULT_MARKER, anchors: tuple[str, ...] = ANCHOR_KEYS) -> None:
        if not marker.startswith("#"):
            marker = f"# {marker}"
        self.marker = marker
        self.anchors = anchors
        self.warnings: list[MergeConflict] = []

    # -- Public API --------------------------------------------------------

    def merge(self, existing: str, contributions: Iterable[EnvVariable | tuple[str, str]]) -> str:
        """Return *existing* with *contributions* folded in.

        Args:
            existing: Current file text (may be empty).
            contributions: Ordered ``(key, value)`` pairs.  When a key repeats
                within one call the first occurrence wins.

        Returns:
            The merged text, ending with exactly one newline.  Whenever
            something was contributed the text holds exactly one marker
            line, even if every key replaced an existing assignment.
        """
        self.warnings = []
        pending = self._dedupe(contributions)
        lines: list[str] = []
        matched: set[str] = set()
        seen_marker = False

        for number, line in enumerate(existing.splitlines(), start=1):
            if line.strip() == self.marker:
                # Repeated markers collapse into the first one.
                if not seen_marker:
                    lines.append(line)
                seen_marker = True
                continue
            match = _ASSIGNMENT_RE.match(line)
            if match is None:
                if _classify(line) == "malformed":
                    self.warnings.append(MergeConflict(number, line))
            elif match.group(1) in pending:
                key = match.group(1)
                line = f"{line.split('=', 1)[0]}={pending[key]}"
                matched.add(key)
            lines.append(line)

        if pending:
            new_vars = [f"{key}={value}" for key, value in pending.items() if key not in matched]
            marker_index = self._find_marker(lines)
            if marker_index is None:
                insert_at = self._anchor_position(lines)
                block = ["", self.marker, *new_vars, ""]
                if insert_at is None:
                    lines.extend(block)
                else:
                    lines[insert_at:insert_at] = block
            else:
                end = marker_index + 1
                while end < len(lines) and _classify(lines[end]) == "assignment":
                    end += 1
                lines[end:end] = new_vars

        return "\n".join(normalize_blank_lines(lines)) + "\n"

    # -- Internals ---------------------------------------------------------

    @staticmethod
    def _dedupe(contributions: Iterable[EnvVariable | tuple[str, str]]) -> dict[str, str]:
        pending: dict[str, str] = {}
        for key, value in contributions:
            if key not in pending:
                pending[key] = value
        return pending

    def _find_marker(self, lines: list[str]) -> int | None:
        for index, line in enumerate(lines):
            if line.strip() == self.marker:
                return index
        return None

    def _anchor_position(self, lines: list[str]) -> int | None:
        """Index just after the last anchor-key assignment, or ``None``."""
        position: int | None = None
        for index, line in enumerate(lines):
            match = _ASSIGNMENT_RE.match(line)
            if match and match.group(1) in self.anchors:
                position = index + 1
        return position
