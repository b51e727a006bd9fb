# contracts.py
# Description: Data contracts exchanged between the executor, the command
# worker and the CLI. Results are reported through these models; failures are
# raised as exceptions from core.runtime.errors.

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# --- Controlled Vocabularies (Enums) ---

class TaskStatus(Enum):
    """Outcome of a single external command."""
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

class TargetOutcome(Enum):
    """What the executor did with a node during one run."""
    BUILT = "BUILT"
    UP_TO_DATE = "UP_TO_DATE"
    NOTHING_TO_DO = "NOTHING_TO_DO"
    WOULD_BUILD = "WOULD_BUILD"


# --- Core Message Schemas ---

class CommandResult(BaseModel):
    """
    Outcome of an external process launched on behalf of a target. Output is
    streamed to the terminal and not captured here.
    """
    target: str = Field(..., description="Target the command was run for.")
    argv: List[str] = Field(..., description="Command line that was executed.")
    cwd: str = Field(..., description="Directory the process ran in.")
    status: TaskStatus
    returncode: Optional[int] = Field(None, description="Exit status; None when the process could not be started.")
    error: Optional[str] = Field(None, description="Why the command failed, when it did.")
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None


class TargetRecord(BaseModel):
    name: str
    outcome: TargetOutcome
    command: Optional[str] = Field(None, description="Human-readable form of the command that ran (or would run).")


class RunSummary(BaseModel):
    """Everything one executor run touched, in the order nodes were settled."""
    requested: List[str] = Field(default_factory=list)
    records: List[TargetRecord] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def built(self) -> List[str]:
        return [r.name for r in self.records if r.outcome is TargetOutcome.BUILT]

    @property
    def up_to_date(self) -> List[str]:
        return [r.name for r in self.records if r.outcome is TargetOutcome.UP_TO_DATE]

    def outcomes(self) -> Dict[str, TargetOutcome]:
        return {r.name: r.outcome for r in self.records}


class HelpEntry(BaseModel):
    """A documented target as listed by `help`."""
    name: str
    description: str
