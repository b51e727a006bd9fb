"""
Command worker. Runs an external process for a target and reports the outcome.
Output goes straight to the terminal; the worker blocks until the process
exits and imposes no timeout.
"""
from __future__ import annotations

import os
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from core.observability.emitter import emit_runtime_event
from core.schemas.buildfile import RunCommand
from core.schemas.contracts import CommandResult, TaskStatus


class CommandWorker:
    def __init__(self, base_env: Optional[Dict[str, str]] = None) -> None:
        self.base_env = dict(base_env) if base_env is not None else None

    def _env(self, command: RunCommand) -> Dict[str, str]:
        env = dict(self.base_env) if self.base_env is not None else os.environ.copy()
        env.update(command.env)
        return env

    def handle(self, target: str, command: RunCommand, root: Path) -> CommandResult:
        cwd = root / command.cwd if command.cwd else root
        result = CommandResult(
            target=target,
            argv=list(command.argv),
            cwd=str(cwd),
            status=TaskStatus.FAILURE,
        )
        emit_runtime_event(
            runtime="worker_command",
            event_type="command_started",
            payload={"target": target, "argv": result.argv, "cwd": result.cwd},
        )
        try:
            completed = subprocess.run(command.argv, cwd=cwd, env=self._env(command))
        except OSError as exc:
            result.error = f"{command.argv[0]}: {exc.strerror or exc}"
        else:
            result.returncode = completed.returncode
            if completed.returncode == 0:
                result.status = TaskStatus.SUCCESS
            else:
                result.error = f"{' '.join(command.argv)} exited with status {completed.returncode}"
        result.completed_at = datetime.now(timezone.utc)
        emit_runtime_event(
            runtime="worker_command",
            event_type="command_completed" if result.status is TaskStatus.SUCCESS else "command_failed",
            payload={"target": target, "returncode": result.returncode, "error": result.error},
        )
        return result
