"""
Planner that consumes a build definition (build.yaml) and emits the immutable
target graph the executor walks.

Steps:
- parse YAML and substitute ${VAR} references from `variables` (plus overrides)
- validate against core.schemas.buildfile
- expand `sources` entries into source-leaf nodes
- check packaging invariants (stage artifacts are real prerequisites, one
  destination per stage target, outputs stay inside the workspace)
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from core.runtime.errors import DefinitionError
from core.schemas.buildfile import (
    BuildDefinition,
    CleanCommand,
    HelpCommand,
    MkdirCommand,
    PrerequisiteKind,
    StageCommand,
    TargetSpec,
)
from orchestrator.graph import Node, Prerequisite, TargetGraph

VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
GLOB_CHARS = ("*", "?", "[")


@dataclass(frozen=True)
class BuildPlan:
    graph: TargetGraph
    root: Path
    definition_path: Path
    default_target: str
    variables: Dict[str, str] = field(default_factory=dict)


def _substitute(value: Any, variables: Dict[str, str]) -> Any:
    if isinstance(value, str):
        def _lookup(match: "re.Match[str]") -> str:
            key = match.group(1)
            if key not in variables:
                raise DefinitionError(f"Undefined variable '{key}' in '{value}'")
            return variables[key]

        return VAR_PATTERN.sub(_lookup, value)
    if isinstance(value, dict):
        substituted: Dict[Any, Any] = {}
        for key, item in value.items():
            new_key = _substitute(key, variables)
            if new_key in substituted:
                raise DefinitionError(f"Duplicate key '{new_key}' (from '{key}') after variable substitution")
            substituted[new_key] = _substitute(item, variables)
        return substituted
    if isinstance(value, list):
        return [_substitute(v, variables) for v in value]
    return value


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects a mapping key appearing twice instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                key = self.construct_object(key_node, deep=deep)
                try:
                    duplicate = key in seen
                except TypeError:
                    continue
                if duplicate:
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        f"found duplicate key '{key}'",
                        key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _resolve_variables(raw: Any, overrides: Dict[str, str]) -> Dict[str, str]:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise DefinitionError("'variables' must be a mapping")
    # Overrides win, and declared variables may reference them.
    resolved: Dict[str, str] = dict(overrides)
    for key, value in raw.items():
        key = str(key)
        if key in overrides:
            continue
        # Later variables may reference earlier ones.
        resolved[key] = _substitute("" if value is None else str(value), resolved)
    return resolved


def load_definition(path: Path, overrides: Optional[Dict[str, str]] = None) -> BuildDefinition:
    if not path.exists():
        raise DefinitionError(f"Missing build definition: {path}")
    try:
        raw = yaml.load(path.read_text(encoding="utf-8"), Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise DefinitionError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise DefinitionError(f"{path} must contain a mapping with a 'targets' section")

    variables = _resolve_variables(raw.get("variables"), dict(overrides or {}))
    data = {k: v for k, v in raw.items() if k != "variables"}
    data = _substitute(data, variables)
    data["variables"] = variables
    targets = data.get("targets")
    if isinstance(targets, dict):
        data["targets"] = {name: (spec if spec is not None else {}) for name, spec in targets.items()}
    try:
        return BuildDefinition.model_validate(data)
    except ValidationError as exc:
        raise DefinitionError(f"Invalid build definition {path}:\n{exc}") from exc


def expand_sources(patterns: List[str], root: Path) -> List[str]:
    """
    Turn `sources` entries into workspace-relative file names: directories
    expand recursively to every file below them, glob patterns to their
    matching files, anything else is taken literally (even if missing).
    """
    names: List[str] = []
    for pattern in patterns:
        if any(ch in pattern for ch in GLOB_CHARS):
            matches = [p for p in root.glob(pattern) if p.is_file()]
        elif (root / pattern).is_dir():
            matches = [p for p in (root / pattern).rglob("*") if p.is_file()]
        else:
            names.append(Path(pattern).as_posix())
            continue
        names.extend(sorted(p.relative_to(root).as_posix() for p in matches))
    return list(dict.fromkeys(names))


def _with_defaults(name: str, spec: TargetSpec, definition_path: Path, root: Path):
    command = spec.command
    if isinstance(command, MkdirCommand) and command.path is None:
        return command.model_copy(update={"path": name})
    if isinstance(command, HelpCommand) and command.source is None:
        return command.model_copy(update={"source": definition_path.relative_to(root).as_posix()})
    return command


def _check_staging(graph: TargetGraph) -> None:
    destinations: Dict[str, str] = {}
    for name in graph.names():
        node = graph.resolve(name)
        command = node.command
        if not isinstance(command, StageCommand):
            continue
        timestamp_prereqs = {p.name for p in node.prerequisites if p.kind is PrerequisiteKind.TIMESTAMP}
        if command.artifact not in timestamp_prereqs:
            raise DefinitionError(
                f"Target '{name}' stages '{command.artifact}' but does not list it as a prerequisite"
            )
        dest = Path(command.destination).as_posix()
        if dest in destinations:
            raise DefinitionError(
                f"Targets '{destinations[dest]}' and '{name}' both stage into '{dest}'"
            )
        destinations[dest] = name


def _check_output_roots(graph: TargetGraph, root: Path) -> None:
    """Clean roots and stage destinations must be strictly inside the workspace."""
    for name in graph.names():
        command = graph.resolve(name).command
        if isinstance(command, CleanCommand):
            value = command.root
        elif isinstance(command, StageCommand):
            value = command.destination
        else:
            continue
        resolved = (root / value).resolve()
        if resolved == root or root not in resolved.parents:
            raise DefinitionError(
                f"Target '{name}' writes to '{value}', which is not a directory inside {root}"
            )


def build_graph(definition: BuildDefinition, root: Path, definition_path: Path) -> TargetGraph:
    nodes: List[Node] = []
    leaves: List[str] = []
    for name, spec in definition.targets.items():
        prerequisites = [Prerequisite(p, PrerequisiteKind.TIMESTAMP) for p in spec.prerequisites]
        for source in expand_sources(spec.sources, root):
            if source not in spec.prerequisites:
                prerequisites.append(Prerequisite(source, PrerequisiteKind.TIMESTAMP))
                leaves.append(source)
        prerequisites.extend(Prerequisite(p, PrerequisiteKind.ORDER_ONLY) for p in spec.order_only)
        nodes.append(
            Node(
                name=name,
                phony=spec.phony,
                command=_with_defaults(name, spec, definition_path, root),
                prerequisites=tuple(prerequisites),
            )
        )
    declared = set(definition.targets)
    for leaf in dict.fromkeys(leaves):
        if leaf not in declared:
            nodes.append(Node(name=leaf))
    graph = TargetGraph(nodes)
    _check_staging(graph)
    _check_output_roots(graph, root.resolve())
    return graph


def plan(definition_path: Path, overrides: Optional[Dict[str, str]] = None) -> BuildPlan:
    definition_path = definition_path.resolve()
    root = definition_path.parent
    definition = load_definition(definition_path, overrides)
    graph = build_graph(definition, root, definition_path)
    return BuildPlan(
        graph=graph,
        root=root,
        definition_path=definition_path,
        default_target=definition.default_target(),
        variables=dict(definition.variables),
    )
