# /schemas/__init__.py

# Version of the build definition and result contracts.
__version__ = "1.0.0"

# Import the core models to the top level of the package.
# This allows callers to write `from schemas import RunSummary`
# instead of the longer `from core.schemas.contracts import RunSummary`.
from core.schemas.buildfile import (
    PrerequisiteKind,
    CommandKind,
    RunCommand,
    MkdirCommand,
    StageCommand,
    CleanCommand,
    HelpCommand,
    TargetSpec,
    BuildDefinition,
)
from core.schemas.contracts import (
    TaskStatus,
    TargetOutcome,
    CommandResult,
    TargetRecord,
    RunSummary,
    HelpEntry,
)

__all__ = [
    "__version__",
    "PrerequisiteKind",
    "CommandKind",
    "RunCommand",
    "MkdirCommand",
    "StageCommand",
    "CleanCommand",
    "HelpCommand",
    "TargetSpec",
    "BuildDefinition",
    "TaskStatus",
    "TargetOutcome",
    "CommandResult",
    "TargetRecord",
    "RunSummary",
    "HelpEntry",
]
