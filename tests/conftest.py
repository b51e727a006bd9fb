"""
Global pytest configuration and shared fixtures for the build orchestrator.
"""
import os
import sys
from pathlib import Path

import pytest

from core.observability.emitter import set_global_sinks
from orchestrator import planner

# Stand-in for `cargo build`: writes target/<mode>/<project> as an executable
# script and appends the mode to compile.log so tests can count invocations.
FAKE_COMPILER = '''\
import sys
from pathlib import Path

mode, project = sys.argv[1], sys.argv[2]
if Path("FAIL").exists():
    print("error: could not compile `" + project + "`", file=sys.stderr)
    sys.exit(101)
out = Path("target") / mode / project
out.parent.mkdir(parents=True, exist_ok=True)
out.write_text(
    "#!" + sys.executable + "\\n"
    "from pathlib import Path\\n"
    "Path('ran.txt').write_text('" + mode + "')\\n"
)
out.chmod(0o755)
with open("compile.log", "a") as log:
    log.write(mode + "\\n")
'''

BUILD_YAML = """\
variables:
  PROJECT: app
  PYTHON: python3

##all     : Builds the project from scratch in release mode.
##debug   : Packages the game in debug mode.
##release : Packages the game in release mode.
##dev     : Starts the packaged game in debug mode.
##clean   : Removes the output root.
##help    : Lists documented targets.

targets:
  all:
    phony: true
    prerequisites: [clean, release]
  build:
    command: {kind: mkdir}
  build/debug:
    order_only: [build]
    command: {kind: mkdir}
  build/release:
    order_only: [build]
    command: {kind: mkdir}
  target/debug/${PROJECT}:
    sources: ["${PROJECT}/src"]
    command:
      kind: run
      argv: ["${PYTHON}", compile.py, debug, "${PROJECT}"]
  target/release/${PROJECT}:
    sources: ["${PROJECT}/src"]
    command:
      kind: run
      argv: ["${PYTHON}", compile.py, release, "${PROJECT}"]
  debug:
    phony: true
    prerequisites: ["target/debug/${PROJECT}"]
    order_only: [build/debug]
    command: {kind: stage, artifact: "target/debug/${PROJECT}", destination: build/debug}
  release:
    phony: true
    prerequisites: ["target/release/${PROJECT}"]
    order_only: [build/release]
    command: {kind: stage, artifact: "target/release/${PROJECT}", destination: build/release}
  dev:
    phony: true
    prerequisites: [debug]
    command:
      kind: run
      argv: ["./${PROJECT}"]
      cwd: build/debug
  clean:
    phony: true
    command: {kind: clean, root: build}
  help:
    phony: true
    command: {kind: help}
"""


class RecordingSink:
    def __init__(self):
        self.events = []

    def send(self, event):
        self.events.append(event)


@pytest.fixture
def events():
    sink = RecordingSink()
    set_global_sinks([sink])
    yield sink.events
    set_global_sinks([])


@pytest.fixture
def set_mtime():
    """Return a helper that pins a path's mtime to `seconds` since the epoch."""

    def _set(path: Path, seconds: float) -> None:
        ns = int(seconds * 1_000_000_000)
        os.utime(path, ns=(ns, ns))

    return _set


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    src = tmp_path / "app" / "src"
    src.mkdir(parents=True)
    (src / "main.rs").write_text("fn main() {}\n")
    (src / "world.rs").write_text("pub struct World;\n")
    (tmp_path / "compile.py").write_text(FAKE_COMPILER)
    (tmp_path / "build.yaml").write_text(BUILD_YAML)
    return tmp_path


@pytest.fixture
def build_plan(workspace: Path) -> planner.BuildPlan:
    return planner.plan(workspace / "build.yaml", {"PYTHON": sys.executable})


def compile_log(workspace: Path):
    log = workspace / "compile.log"
    return log.read_text().split() if log.exists() else []


@pytest.fixture
def compiles(workspace: Path):
    """Callable returning the modes the fake compiler has been invoked with so far."""
    return lambda: compile_log(workspace)
