"""
State machine for a single staging run:
    PENDING -> PREPARING -> CLEARING -> COPYING -> DONE
Any active state may move to FAILED. The state a transaction failed from tells
the caller how much of the destination was touched.
"""
from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


class StageState(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    CLEARING = "CLEARING"
    COPYING = "COPYING"
    DONE = "DONE"
    FAILED = "FAILED"


ALLOWED_TRANSITIONS = {
    StageState.PENDING: {StageState.PREPARING},
    StageState.PREPARING: {StageState.CLEARING, StageState.FAILED},
    StageState.CLEARING: {StageState.COPYING, StageState.FAILED},
    StageState.COPYING: {StageState.DONE, StageState.FAILED},
}


@dataclass
class StagingTransaction:
    artifact: Path
    destination: Path
    state: StageState = StageState.PENDING
    failed_in: Optional[StageState] = None
    removed: List[str] = field(default_factory=list)
    staged: Optional[Path] = None

    def transition(self, new_state: StageState) -> None:
        if new_state not in ALLOWED_TRANSITIONS.get(self.state, {}):
            raise ValueError(f"Illegal transition {self.state} -> {new_state}")
        if new_state is StageState.FAILED:
            self.failed_in = self.state
        self.state = new_state

    @property
    def destination_cleared(self) -> bool:
        """True once old contents may have been removed from the destination."""
        reached = self.failed_in if self.state is StageState.FAILED else self.state
        return reached in (StageState.CLEARING, StageState.COPYING, StageState.DONE)
