"""
JSONL sink for EventEmitter. Appends one JSON object per event so a build's
history can be inspected after the fact.
"""
from __future__ import annotations

import json
import threading
from pathlib import Path

from core.observability.events import Event


class JsonlEventSink:
    def __init__(self, path: Path, run_name: str = "build") -> None:
        self.path = path
        self.run_name = run_name
        self._lock = threading.Lock()

    def send(self, event: Event) -> None:
        entry = event.model_dump(mode="json")
        entry["run_name"] = self.run_name
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
