"""Exception taxonomy for stackforge.

Every fatal condition raised by the generation core derives from
``StackforgeError`` so the CLI can report it uniformly and exit non-zero.
Recoverable conditions (``MergeConflict``) are plain records returned next
to the result rather than raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class StackforgeError(Exception):
    """Base class for every error raised by stackforge."""


class UnknownAxis(StackforgeError, KeyError):
    """Raised when a configuration axis is not registered in the schema."""

    def __init__(self, axis: str) -> None:
        self.axis = axis
        super().__init__(axis)

    def __str__(self) -> str:
        return f"Unknown configuration axis: {self.axis!r}"


class InvalidConfiguration(StackforgeError):
    """A required axis is unset or holds a value outside its enumeration."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"Invalid configuration for '{field}': {message}")


class UnsupportedCombination(StackforgeError):
    """A generator cannot render the requested configuration subset.

    The orchestrator downgrades this to a warning and skips the generator,
    unless the generator is the only handler for a mandatory axis value.
    """

    def __init__(self, generator: str, message: str) -> None:
        self.generator = generator
        self.message = message
        super().__init__(f"{generator}: {message}")


class GenerationAborted(StackforgeError):
    """A generator failed irrecoverably; nothing after it was produced."""

    def __init__(self, generator: str, original: BaseException) -> None:
        self.generator = generator
        self.original = original
        super().__init__(f"Generator '{generator}' failed: {original}")


class WriteFailure(StackforgeError):
    """The filesystem refused a write (permissions, disk full, ...)."""

    def __init__(self, path: str | Path, original: OSError) -> None:
        self.path = Path(path)
        self.original = original
        super().__init__(f"Could not write {self.path}: {original}")


class TargetNotEmpty(StackforgeError):
    """The output directory already exists and contains files."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Directory {self.path} already exists and is not empty")


class InstallError(StackforgeError):
    """A dependency-installation command exited non-zero."""

    def __init__(self, step: str, returncode: int, stderr: str = "") -> None:
        self.step = step
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"'{step}' exited with code {returncode}{detail}")


@dataclass(frozen=True)
class MergeConflict:
    """An env-file line that could not be classified during a merge.

    The line is kept verbatim in the output; the record only exists so the
    caller can surface a warning.
    """

    line_number: int
    line: str

    def __str__(self) -> str:
        return f"line {self.line_number} is not KEY=VALUE and was left untouched: {self.line!r}"
