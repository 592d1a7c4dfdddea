"""Shared pytest fixtures for cached-struct tests."""

from pathlib import Path

import pytest

from cached_struct.lib.storage import file


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    """Path of a cache file that doesn't exist yet."""
    return tmp_path / "accounts.txt"


@pytest.fixture
def blocked_path(tmp_path: Path) -> Path:
    """Path under a regular file - stat and writes fail with an OS error."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return blocker / "accounts.txt"


@pytest.fixture
def read_calls(monkeypatch: pytest.MonkeyPatch) -> list[Path]:
    """Record every file read made by cache handles."""
    calls: list[Path] = []
    real_read_bytes = file.read_bytes

    def counting_read_bytes(path: Path):
        calls.append(path)
        return real_read_bytes(path)

    monkeypatch.setattr("cached_struct.cached.file.read_bytes", counting_read_bytes)
    return calls


