"""
Environment-driven defaults for the build CLI.

A `.env` file next to the build definition may set any of the variables below;
values already present in the environment always win.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Tuple

DEFAULT_BUILDFILE = "build.yaml"
DEFAULT_RUN_NAME = "build"


def parse_env_line(line: str) -> Optional[Tuple[str, str]]:
    """Return (key, value) for an assignment line, None for blanks and comments."""
    line = line.strip()
    if line.startswith("export "):
        line = line[len("export ") :].lstrip()
    key, sep, value = line.partition("=")
    key = key.strip()
    if line.startswith("#") or not sep or not key:
        return None
    value = value.strip()
    quoted = len(value) >= 2 and value[0] in ("'", '"') and value[-1] == value[0]
    return key, value[1:-1] if quoted else value.split(" #", 1)[0].rstrip()


def load_env_file(path: Path) -> Dict[str, str]:
    """Apply a .env file to os.environ and return the entries that were actually set."""
    applied: Dict[str, str] = {}
    if not path.is_file():
        return applied
    for line in path.read_text(encoding="utf-8").splitlines():
        entry = parse_env_line(line)
        if entry is None or entry[0] in os.environ:
            continue
        os.environ[entry[0]] = applied[entry[0]] = entry[1]
    return applied


def buildfile_name() -> str:
    return os.getenv("BUILDFILE") or DEFAULT_BUILDFILE


def events_log_path() -> Optional[Path]:
    value = os.getenv("BUILD_EVENTS_LOG")
    return Path(value) if value else None


def run_name() -> str:
    return os.getenv("BUILD_RUN_NAME") or DEFAULT_RUN_NAME
