"""
Removal of the output root. Cleaning an already clean tree is not an error.
"""
from __future__ import annotations

import shutil
from pathlib import Path

from core.observability.emitter import emit_runtime_event
from core.runtime.errors import CleanError


def clean(root: Path) -> bool:
    """Remove `root` recursively. Returns False when there was nothing to remove."""
    if not root.exists() and not root.is_symlink():
        emit_runtime_event(runtime="cleaner", event_type="clean_skipped", payload={"root": str(root)})
        return False
    try:
        if root.is_dir() and not root.is_symlink():
            shutil.rmtree(root)
        else:
            root.unlink()
    except OSError as exc:
        raise CleanError(root, str(exc)) from exc
    emit_runtime_event(runtime="cleaner", event_type="clean_completed", payload={"root": str(root)})
    return True
