"""
Freshness decisions for graph nodes, driven by the prerequisite edge kind:

    phony                         -> always rebuild
    file artifact missing         -> rebuild
    TIMESTAMP prerequisite newer  -> rebuild (missing counts as infinitely new)
    ORDER_ONLY prerequisite       -> never considered
"""
from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Optional

from core.schemas.buildfile import PrerequisiteKind
from orchestrator.graph import Node, TargetGraph


class FreshnessEvaluator:
    def __init__(self, graph: TargetGraph, root: Path) -> None:
        self.graph = graph
        self.root = root

    def path_for(self, name: str) -> Path:
        return self.root / name

    def mtime(self, name: str) -> Optional[int]:
        try:
            return self.path_for(name).stat().st_mtime_ns
        except FileNotFoundError:
            return None

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def needs_rebuild(self, node: Node, rebuilt: AbstractSet[str] = frozenset()) -> bool:
        return self.explain(node, rebuilt) is not None

    def explain(self, node: Node, rebuilt: AbstractSet[str] = frozenset()) -> Optional[str]:
        """
        Return why `node` must be rebuilt, or None when it is up to date.
        `rebuilt` holds the names whose commands already ran in this run; they
        count as newer even when the file system's mtime resolution cannot
        tell them apart from the artifact.
        """
        if node.phony:
            return "phony target"
        artifact_time = self.mtime(node.name)
        if artifact_time is None:
            return f"'{node.name}' does not exist"
        for prereq in node.prerequisites:
            if prereq.kind is PrerequisiteKind.ORDER_ONLY:
                continue
            dep = self.graph.resolve(prereq.name, node.name)
            if dep.phony:
                continue
            if dep.name in rebuilt:
                return f"prerequisite '{dep.name}' was rebuilt"
            dep_time = self.mtime(dep.name)
            if dep_time is None:
                return f"prerequisite '{dep.name}' does not exist"
            if dep_time > artifact_time:
                return f"prerequisite '{dep.name}' is newer"
        return None
