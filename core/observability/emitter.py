"""
Process-wide event fan-out. Sinks are best-effort: a sink that raises is
skipped so observability can never fail a build.
"""
from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Optional, Protocol

from core.observability.events import Event


class EventSink(Protocol):
    def send(self, event: Event) -> None:
        ...


_lock = threading.Lock()
_sinks: List[EventSink] = []


def set_global_sinks(sinks: Iterable[EventSink]) -> None:
    global _sinks
    with _lock:
        _sinks = list(sinks)


def get_global_sinks() -> List[EventSink]:
    with _lock:
        return list(_sinks)


def emit_runtime_event(runtime: str, event_type: str, payload: Optional[Dict[str, Any]] = None) -> Event:
    event = Event(runtime=runtime, event_type=event_type, payload=payload or {})
    for sink in get_global_sinks():
        try:
            sink.send(event)
        except Exception:  # noqa: BLE001
            continue
    return event
