"""
Command-line entry point: plan the build definition, then run the requested
targets (or the definition's default target) through the executor.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List

from core.observability.setup import configure_observability
from core.runtime import settings
from core.runtime.errors import BuildError
from core.schemas.contracts import RunSummary
from orchestrator import planner
from orchestrator.executor import Executor


def _parse_defines(values: List[str], parser: argparse.ArgumentParser) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            parser.error(f"invalid --define '{item}', expected KEY=VALUE")
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="buildorch", description="Declarative build-and-package orchestrator")
    parser.add_argument("targets", nargs="*", help="Targets to build (default: the definition's default target)")
    parser.add_argument("-f", "--file", help=f"Build definition (default: $BUILDFILE or {settings.DEFAULT_BUILDFILE})")
    parser.add_argument("-C", "--directory", help="Look for the build definition and .env in DIRECTORY")
    parser.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a variable from the definition (repeatable)",
    )
    parser.add_argument("-n", "--dry-run", action="store_true", help="Print commands without running them")
    parser.add_argument("--events-log", help="Append runtime events as JSON lines to this file")
    return parser


def run_build(args: argparse.Namespace, overrides: Dict[str, str]) -> RunSummary:
    directory = Path(args.directory) if args.directory else Path.cwd()
    settings.load_env_file(directory / ".env")
    definition = directory / (args.file or settings.buildfile_name())
    configure_observability(events_log=Path(args.events_log) if args.events_log else None)

    build_plan = planner.plan(definition, overrides)
    targets = args.targets or [build_plan.default_target]
    executor = Executor(build_plan.graph, build_plan.root, dry_run=args.dry_run)
    return executor.run_many(targets)


def main(argv: list[str] | None = None) -> None:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides = _parse_defines(args.define, parser)
    try:
        run_build(args, overrides)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)
    except BuildError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
