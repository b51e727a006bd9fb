"""
Executor for the target graph. Walks from each requested target depth-first,
settles prerequisites before their dependents, skips file targets that are up
to date and runs commands for the rest. The first failure aborts the run.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Optional, Set

from core.observability.emitter import emit_runtime_event
from core.runtime.errors import BuildError, CommandFailed
from core.schemas.buildfile import (
    CleanCommand,
    Command,
    HelpCommand,
    MkdirCommand,
    RunCommand,
    StageCommand,
)
from core.schemas.contracts import RunSummary, TargetOutcome, TargetRecord, TaskStatus
from orchestrator.cleaner import clean
from orchestrator.freshness import FreshnessEvaluator
from orchestrator.graph import Node, TargetGraph
from orchestrator.help import format_help, read_help
from orchestrator.stager import Stager
from workers.command.worker import CommandWorker


class Executor:
    def __init__(
        self,
        graph: TargetGraph,
        root: Path,
        worker: Optional[CommandWorker] = None,
        stager: Optional[Stager] = None,
        dry_run: bool = False,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.graph = graph
        self.root = root
        self.evaluator = FreshnessEvaluator(graph, root)
        self.worker = worker or CommandWorker()
        self.stager = stager or Stager()
        self.dry_run = dry_run
        self.echo = echo

    def run(self, target: str) -> RunSummary:
        return self.run_many([target])

    def run_many(self, targets: Iterable[str]) -> RunSummary:
        requested = list(targets)
        summary = RunSummary(requested=requested, dry_run=self.dry_run)
        done: Set[str] = set()
        rebuilt: Set[str] = set()
        emit_runtime_event(runtime="executor", event_type="run_started", payload={"targets": requested, "dry_run": self.dry_run})
        try:
            for target in requested:
                first = len(summary.records)
                for node in self.graph.walk(target, done):
                    summary.records.append(self._settle(node, rebuilt))
                self._report(target, summary.records[first:])
        except BuildError as exc:
            emit_runtime_event(
                runtime="executor",
                event_type="run_failed",
                payload={"targets": requested, "error_type": type(exc).__name__, "error": str(exc)},
            )
            raise
        emit_runtime_event(
            runtime="executor",
            event_type="run_completed",
            payload={"targets": requested, "built": summary.built, "up_to_date": summary.up_to_date},
        )
        return summary

    def _report(self, target: str, records) -> None:
        if not records or records[-1].name != target:
            return
        if any(r.outcome in (TargetOutcome.BUILT, TargetOutcome.WOULD_BUILD) for r in records):
            return
        if records[-1].outcome is TargetOutcome.UP_TO_DATE:
            self.echo(f"'{target}' is up to date.")
        else:
            self.echo(f"Nothing to be done for '{target}'.")

    def _settle(self, node: Node, rebuilt: Set[str]) -> TargetRecord:
        command = self.graph.command_for(node)
        reason = self.evaluator.explain(node, rebuilt)
        if reason is None:
            emit_runtime_event(runtime="executor", event_type="target_up_to_date", payload={"target": node.name})
            return TargetRecord(name=node.name, outcome=TargetOutcome.UP_TO_DATE)
        if command is None:
            return TargetRecord(name=node.name, outcome=TargetOutcome.NOTHING_TO_DO)

        description = command.describe()
        # help output is the entries alone
        if self.dry_run or not isinstance(command, HelpCommand):
            self.echo(description)
        if self.dry_run:
            rebuilt.add(node.name)
            return TargetRecord(name=node.name, outcome=TargetOutcome.WOULD_BUILD, command=description)

        emit_runtime_event(
            runtime="executor",
            event_type="target_started",
            payload={"target": node.name, "reason": reason, "command": description},
        )
        self._execute(node, command)
        if not node.phony and not self.evaluator.exists(node.name):
            raise CommandFailed(node.name, "command succeeded but did not produce the target")
        rebuilt.add(node.name)
        emit_runtime_event(runtime="executor", event_type="target_built", payload={"target": node.name})
        return TargetRecord(name=node.name, outcome=TargetOutcome.BUILT, command=description)

    def _execute(self, node: Node, command: Command) -> None:
        if isinstance(command, RunCommand):
            result = self.worker.handle(node.name, command, self.root)
            if result.status is not TaskStatus.SUCCESS:
                raise CommandFailed(node.name, result.error or "command failed", result.returncode)
        elif isinstance(command, MkdirCommand):
            try:
                (self.root / (command.path or node.name)).mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise CommandFailed(node.name, f"mkdir failed: {exc}") from exc
        elif isinstance(command, StageCommand):
            self.stager.stage(self.root / command.artifact, self.root / command.destination)
        elif isinstance(command, CleanCommand):
            clean(self.root / command.root)
        elif isinstance(command, HelpCommand):
            try:
                entries = read_help(self.root / (command.source or ""))
            except OSError as exc:
                raise CommandFailed(node.name, f"could not read help source: {exc}") from exc
            self.echo(format_help(entries))
        else:
            raise CommandFailed(node.name, f"unsupported command kind: {command!r}")
