"""
Schema for the declarative build definition (build.yaml).

The definition is a rule table: each target names its prerequisites, how they
are ordered, and the command that produces it. The planner validates a parsed
YAML document against these models and turns it into an immutable graph.
"""

from __future__ import annotations

import shlex
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PrerequisiteKind(str, Enum):
    """How a prerequisite edge participates in freshness decisions."""

    TIMESTAMP = "TIMESTAMP"
    ORDER_ONLY = "ORDER_ONLY"


class CommandKind(str, Enum):
    RUN = "run"
    MKDIR = "mkdir"
    STAGE = "stage"
    CLEAN = "clean"
    HELP = "help"


class _CommandBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class RunCommand(_CommandBase):
    """An external process, e.g. the compiler or the staged binary itself."""

    kind: Literal["run"] = "run"
    argv: List[str] = Field(..., min_length=1, description="Program and arguments; no shell is involved.")
    cwd: Optional[str] = Field(None, description="Working directory relative to the workspace root.")
    env: Dict[str, str] = Field(default_factory=dict, description="Extra environment variables for the process.")

    def describe(self) -> str:
        line = " ".join(shlex.quote(arg) for arg in self.argv)
        return f"cd {self.cwd}; {line}" if self.cwd else line


class MkdirCommand(_CommandBase):
    kind: Literal["mkdir"] = "mkdir"
    path: Optional[str] = Field(None, description="Directory to create; defaults to the target name.")

    def describe(self) -> str:
        return f"mkdir -p {self.path}" if self.path else "mkdir -p $@"


class StageCommand(_CommandBase):
    """Clear `destination` and copy the freshly built `artifact` into it."""

    kind: Literal["stage"] = "stage"
    artifact: str
    destination: str

    def describe(self) -> str:
        return f"stage {self.artifact} -> {self.destination}/"


class CleanCommand(_CommandBase):
    kind: Literal["clean"] = "clean"
    root: str

    def describe(self) -> str:
        return f"clean {self.root}"


class HelpCommand(_CommandBase):
    kind: Literal["help"] = "help"
    source: Optional[str] = Field(None, description="File to scan for '##' lines; defaults to the definition itself.")

    def describe(self) -> str:
        return f"help {self.source}" if self.source else "help"


Command = Annotated[
    Union[RunCommand, MkdirCommand, StageCommand, CleanCommand, HelpCommand],
    Field(discriminator="kind"),
]


class TargetSpec(BaseModel):
    """One rule of the table, as written in the definition file."""

    model_config = ConfigDict(extra="forbid")

    phony: bool = Field(default=False, description="Phony targets always run and never map to a file.")
    prerequisites: List[str] = Field(default_factory=list, description="Timestamp-significant prerequisites.")
    order_only: List[str] = Field(default_factory=list, description="Prerequisites that must exist but never trigger a rebuild.")
    sources: List[str] = Field(
        default_factory=list,
        description="Files, directories or glob patterns expanded into source leaves (timestamp-significant).",
    )
    command: Optional[Command] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "TargetSpec":
        overlap = set(self.prerequisites) & set(self.order_only)
        if overlap:
            raise ValueError(f"prerequisites listed both as normal and order-only: {sorted(overlap)}")
        if self.phony and self.sources:
            raise ValueError("phony targets cannot declare sources")
        return self


class BuildDefinition(BaseModel):
    """Top-level document of build.yaml."""

    model_config = ConfigDict(extra="forbid")

    variables: Dict[str, str] = Field(default_factory=dict)
    default: Optional[str] = Field(None, description="Target built when none is requested; defaults to the first one.")
    targets: Dict[str, TargetSpec] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_default(self) -> "BuildDefinition":
        if self.default is not None and self.default not in self.targets:
            raise ValueError(f"default target '{self.default}' is not defined")
        return self

    def default_target(self) -> str:
        return self.default or next(iter(self.targets))
