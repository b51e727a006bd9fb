"""
Error taxonomy for build runs. Every failure aborts the run; nothing here is
retried. The CLI converts these into a non-zero exit status.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional


class BuildError(RuntimeError):
    """Base class for every failure surfaced by a build run."""


class DefinitionError(BuildError):
    """The build definition is malformed or violates a graph invariant."""


class UnknownTarget(BuildError):
    def __init__(self, name: str, required_by: Optional[str] = None) -> None:
        self.name = name
        self.required_by = required_by
        if required_by:
            message = f"No rule to make target '{name}', needed by '{required_by}'"
        else:
            message = f"No rule to make target '{name}'"
        super().__init__(message)


class CycleError(BuildError):
    def __init__(self, path: List[str]) -> None:
        self.path = list(path)
        super().__init__(f"Circular dependency: {' -> '.join(self.path)}")


class CommandFailed(BuildError):
    """An external command (or built-in action) failed while producing a target."""

    def __init__(self, target: str, cause: str, returncode: Optional[int] = None) -> None:
        self.target = target
        self.cause = cause
        self.returncode = returncode
        super().__init__(f"Command for '{target}' failed: {cause}")


class StageError(BuildError):
    """
    Staging failed at `step`. If the step is COPYING, the destination has
    already been cleared and may be empty; re-run the packaging target.
    """

    def __init__(self, step: str, artifact: Path, destination: Path, cause: str) -> None:
        self.step = step
        self.artifact = artifact
        self.destination = destination
        self.cause = cause
        super().__init__(f"Staging {artifact} -> {destination} failed during {step}: {cause}")


class CleanError(BuildError):
    def __init__(self, root: Path, cause: str) -> None:
        self.root = root
        self.cause = cause
        super().__init__(f"Could not remove {root}: {cause}")
