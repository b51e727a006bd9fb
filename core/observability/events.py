"""
Runtime event model shared by the executor, stager and command worker.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class Event(BaseModel):
    """A single structured observation emitted during a build run."""

    event_id: UUID = Field(default_factory=uuid4)
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    runtime: str = Field(..., description="Component that emitted the event (executor, stager, worker_command).")
    event_type: str = Field(..., description="What happened, e.g. target_built or stage_failed.")
    payload: Dict[str, Any] = Field(default_factory=dict)
