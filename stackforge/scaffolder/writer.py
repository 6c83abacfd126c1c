"""The single place generated files reach the disk."""

from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable, Mapping, Optional

from ..errors import WriteFailure


# Suffixes written with the executable bit set.
EXECUTABLE_SUFFIXES: frozenset[str] = frozenset({".sh"})


class FileWriter:
    """Writes a path -> content mapping below a root directory.

    Parent directories are created as needed; content is written as UTF-8
    with ``\\n`` line endings on every platform.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def write(
        self,
        files: Mapping[str, str],
        on_file: Optional[Callable[[str], None]] = None,
    ) -> list[Path]:
        """Write every entry of *files* in iteration order.

        Raises:
            WriteFailure: Wrapping the first ``OSError``; files written
                before it stay on disk.
        """
        written: list[Path] = []
        for rel, content in files.items():
            out = self.root / rel
            try:
                _write_file(out, content)
                if out.suffix in EXECUTABLE_SUFFIXES:
                    _make_executable(out)
            except OSError as exc:
                raise WriteFailure(out, exc) from exc
            written.append(out)
            if on_file is not None:
                on_file(rel)
        return written


def _write_file(path: Path, content: str) -> None:
    """Create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as fh:
        fh.write(content)


def _make_executable(path: Path) -> None:
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
