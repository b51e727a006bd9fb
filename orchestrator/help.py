"""
Lift target documentation out of a build definition. Lines starting with the
marker `##` are help entries written as `name : description`.
"""
from __future__ import annotations

from pathlib import Path
from typing import List

from core.schemas.contracts import HelpEntry

HELP_MARKER = "##"


def list_help(source: str) -> List[HelpEntry]:
    entries: List[HelpEntry] = []
    for line in source.splitlines():
        if not line.startswith(HELP_MARKER):
            continue
        body = line[len(HELP_MARKER) :]
        name, sep, description = body.partition(":")
        if not sep:
            entries.append(HelpEntry(name=body.strip(), description=""))
            continue
        entries.append(HelpEntry(name=name.strip(), description=description.strip()))
    return entries


def read_help(path: Path) -> List[HelpEntry]:
    return list_help(path.read_text(encoding="utf-8"))


def format_help(entries: List[HelpEntry]) -> str:
    if not entries:
        return ""
    width = max(len(e.name) for e in entries)
    return "\n".join(f"{e.name.ljust(width)} : {e.description}".rstrip() for e in entries)
