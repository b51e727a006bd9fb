"""
Helper to wire observability sinks from environment settings.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from adapters.observability.jsonl import JsonlEventSink
from core.observability.emitter import set_global_sinks
from core.runtime import settings


def configure_observability(events_log: Optional[Path] = None, run_name: Optional[str] = None) -> None:
    path = events_log or settings.events_log_path()
    if path is None:
        set_global_sinks([])
        return
    set_global_sinks([JsonlEventSink(path, run_name=run_name or settings.run_name())])
