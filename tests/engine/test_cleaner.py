import shutil
from pathlib import Path

import pytest

from core.runtime.errors import CleanError
from orchestrator.cleaner import clean


def test_clean_removes_output_root_recursively(tmp_path: Path):
    root = tmp_path / "build"
    (root / "release").mkdir(parents=True)
    (root / "release" / "app").write_text("bin")
    (root / "debug").mkdir()

    assert clean(root) is True
    assert not root.exists()


def test_clean_twice_is_not_an_error(tmp_path: Path, events):
    root = tmp_path / "build"
    root.mkdir()

    assert clean(root) is True
    assert clean(root) is False
    assert [e.event_type for e in events] == ["clean_completed", "clean_skipped"]


def test_clean_failure_is_reported(tmp_path: Path, monkeypatch):
    root = tmp_path / "build"
    root.mkdir()

    def _deny(path, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(shutil, "rmtree", _deny)
    with pytest.raises(CleanError) as exc_info:
        clean(root)
    assert exc_info.value.root == root
    assert "Permission denied" in str(exc_info.value)
