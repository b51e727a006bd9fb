"""
In-memory target graph. Built once by the planner from the build definition and
never mutated afterwards; the executor only reads it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from core.runtime.errors import CycleError, DefinitionError, UnknownTarget
from core.schemas.buildfile import Command, PrerequisiteKind


@dataclass(frozen=True)
class Prerequisite:
    name: str
    kind: PrerequisiteKind = PrerequisiteKind.TIMESTAMP

    @property
    def order_only(self) -> bool:
        return self.kind is PrerequisiteKind.ORDER_ONLY


@dataclass(frozen=True)
class Node:
    name: str
    phony: bool = False
    command: Optional[Command] = None
    prerequisites: Tuple[Prerequisite, ...] = field(default_factory=tuple)

    @property
    def is_source(self) -> bool:
        """A file node nothing produces: it is only ever read."""
        return not self.phony and self.command is None and not self.prerequisites


class TargetGraph:
    def __init__(self, nodes: Iterable[Node]) -> None:
        self._nodes: Dict[str, Node] = {}
        for node in nodes:
            if node.name in self._nodes:
                raise DefinitionError(f"Target '{node.name}' is declared more than once")
            self._nodes[node.name] = node

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def names(self) -> List[str]:
        return list(self._nodes)

    def resolve(self, name: str, required_by: Optional[str] = None) -> Node:
        try:
            return self._nodes[name]
        except KeyError:
            raise UnknownTarget(name, required_by) from None

    def command_for(self, node: Node) -> Optional[Command]:
        return self.resolve(node.name).command

    def prerequisites_of(self, name: str) -> Tuple[Prerequisite, ...]:
        return self.resolve(name).prerequisites

    def walk(self, name: str, done: Optional[set] = None) -> Iterator[Node]:
        """
        Depth-first, post-order traversal from `name`: every node is yielded
        after all of its prerequisites and at most once per `done` set.
        Raises CycleError on a back edge and UnknownTarget on a dangling
        prerequisite.
        """
        if done is None:
            done = set()
        yield from self._walk(name, None, [], done)

    def _walk(self, name: str, parent: Optional[str], stack: List[str], done: set) -> Iterator[Node]:
        if name in done:
            return
        if name in stack:
            raise CycleError(stack[stack.index(name) :] + [name])
        node = self.resolve(name, parent)
        stack.append(name)
        for prereq in node.prerequisites:
            yield from self._walk(prereq.name, name, stack, done)
        stack.pop()
        done.add(name)
        yield node

