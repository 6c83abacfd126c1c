"""The in-memory result of generation: relative path -> file content.

Ordinary paths follow last-writer-wins.  Paths registered as mergeable
accumulate contributions instead: env files go through :class:`EnvMerger`
and ``.gitignore`` files take the ordered union of their lines.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import PurePosixPath

from ..errors import MergeConflict
from .env_merger import EnvMerger, normalize_blank_lines, parse_env


ENV_PATHS: frozenset[str] = frozenset({".env", ".env.example"})
LINE_UNION_PATHS: frozenset[str] = frozenset({".gitignore"})
MERGEABLE_PATHS: frozenset[str] = ENV_PATHS | LINE_UNION_PATHS


def _normalize_path(path: str) -> str:
    pure = PurePosixPath(path.replace("\\", "/"))
    if pure.is_absolute() or not pure.parts or ".." in pure.parts:
        raise ValueError(f"Generated paths must be relative and inside the project: {path!r}")
    return pure.as_posix()


def union_lines(existing: str, addition: str) -> str:
    """Append the lines of *addition* not already present in *existing*.

    Blank lines and comments of *addition* are kept only when they introduce
    at least one new entry, so repeated merges do not grow the file.
    """
    lines = existing.splitlines()
    seen = {line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")}
    block: list[str] = []
    pending_comments: list[str] = []
    for line in addition.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            pending_comments.append(line)
            continue
        if stripped in seen:
            pending_comments = []
            continue
        seen.add(stripped)
        block.extend(pending_comments)
        pending_comments = []
        block.append(line)
    if block:
        lines.extend(["", *block])
    return "\n".join(normalize_blank_lines(lines)) + "\n"


class GeneratedFileSet(Mapping[str, str]):
    """Ordered mapping of POSIX-style relative paths to text content.

    Insertion order is preserved so writing and listing are deterministic.
    Warnings raised while merging (malformed env lines) are collected in
    :attr:`warnings`.
    """

    def __init__(self, files: Mapping[str, str] | None = None, marker: str | None = None) -> None:
        self._files: dict[str, str] = {}
        self._merger = EnvMerger(marker) if marker else EnvMerger()
        self.warnings: list[str] = []
        if files:
            for path, content in files.items():
                self.add(path, content)

    # -- Mapping protocol --------------------------------------------------

    def __getitem__(self, path: str) -> str:
        return self._files[_normalize_path(path)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            return _normalize_path(path) in self._files
        except ValueError:
            return False

    def __repr__(self) -> str:
        return f"GeneratedFileSet({len(self._files)} files)"

    # -- Accumulation ------------------------------------------------------

    @staticmethod
    def is_mergeable(path: str) -> bool:
        return _normalize_path(path) in MERGEABLE_PATHS

    def add(self, path: str, content: str) -> None:
        """Add one file, merging when *path* is mergeable and already present."""
        key = _normalize_path(path)
        if key not in self._files or key not in MERGEABLE_PATHS:
            self._files[key] = content
            return
        if key in ENV_PATHS:
            self._files[key] = self._merger.merge(self._files[key], parse_env(content))
            self._record_conflicts(key, self._merger.warnings)
        else:
            self._files[key] = union_lines(self._files[key], content)

    def update(self, other: Mapping[str, str]) -> None:
        """Fold every entry of *other* in, in its iteration order."""
        for path, content in other.items():
            self.add(path, content)
        if isinstance(other, GeneratedFileSet):
            self.warnings.extend(other.warnings)

    def paths_under(self, prefix: str) -> list[str]:
        """Paths located below directory *prefix* (e.g. ``"src"``)."""
        base = prefix.rstrip("/") + "/"
        return [path for path in self._files if path.startswith(base)]

    def _record_conflicts(self, path: str, conflicts: list[MergeConflict]) -> None:
        for conflict in conflicts:
            self.warnings.append(f"{path}: {conflict}")
