"""
Stager: replaces the contents of a per-variant output directory with a freshly
built artifact. The destination is never patched incrementally; old entries
are removed before the new artifact is copied in.
"""
from __future__ import annotations

import shutil
from pathlib import Path

from core.observability.emitter import emit_runtime_event
from core.runtime.errors import StageError
from orchestrator.state_machine import StageState, StagingTransaction


class Stager:
    def stage(self, artifact: Path, destination: Path) -> StagingTransaction:
        txn = StagingTransaction(artifact=artifact, destination=destination)
        try:
            txn.transition(StageState.PREPARING)
            self._prepare(txn)
            txn.transition(StageState.CLEARING)
            self._clear(txn)
            txn.transition(StageState.COPYING)
            self._copy(txn)
        except OSError as exc:
            step = txn.state.value
            txn.transition(StageState.FAILED)
            emit_runtime_event(
                runtime="stager",
                event_type="stage_failed",
                payload={
                    "artifact": str(artifact),
                    "destination": str(destination),
                    "step": step,
                    "destination_cleared": txn.destination_cleared,
                    "error": str(exc),
                },
            )
            raise StageError(step, artifact, destination, str(exc)) from exc
        txn.transition(StageState.DONE)
        emit_runtime_event(
            runtime="stager",
            event_type="stage_completed",
            payload={"artifact": str(artifact), "destination": str(destination), "removed": txn.removed},
        )
        return txn

    def _prepare(self, txn: StagingTransaction) -> None:
        # Checked before anything destructive happens to the destination.
        if not txn.artifact.exists():
            raise FileNotFoundError(f"Artifact missing: {txn.artifact}")
        txn.destination.mkdir(parents=True, exist_ok=True)

    def _clear(self, txn: StagingTransaction) -> None:
        for entry in sorted(txn.destination.iterdir()):
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            txn.removed.append(entry.name)

    def _copy(self, txn: StagingTransaction) -> None:
        target = txn.destination / txn.artifact.name
        if txn.artifact.is_dir():
            shutil.copytree(txn.artifact, target, symlinks=True)
        else:
            shutil.copy2(txn.artifact, target)
        txn.staged = target


def stage(artifact: Path, destination: Path) -> StagingTransaction:
    return Stager().stage(artifact, destination)
