# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from storage import Storage
from tracker import TaskStore

from .samples import SCENARIO_FILE


@pytest.fixture()
def tasks_file(tmp_path: Path) -> Path:
    """Per-test task file path (not created)."""
    return tmp_path / "data" / "tasks.txt"


@pytest.fixture()
def storage(tasks_file: Path) -> Storage:
    return Storage(tasks_file)


@pytest.fixture()
def store(storage: Storage) -> TaskStore:
    """Empty store wired to a tmp file."""
    return TaskStore(storage)


@pytest.fixture()
def loaded_store(tasks_file: Path, store: TaskStore) -> TaskStore:
    """Store hydrated from the two-task sample file."""
    tasks_file.parent.mkdir(parents=True, exist_ok=True)
    tasks_file.write_text(SCENARIO_FILE, encoding="utf-8")
    store.load()
    return store
