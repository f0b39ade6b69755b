# tests/test_tracker.py

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pytest

from models import NotFound, Task
from storage import Storage
from tracker import TaskStore, is_completed, is_pending


class FakeStorage:
    """
    In-memory stand-in for Storage.

    Keeps store tests about business logic only; records every save call.
    """

    def __init__(self, tasks: list[Task] | None = None, next_id: int = 1, ok: bool = True) -> None:
        self.tasks = list(tasks or [])
        self.next_id = next_id
        self.ok = ok
        self.saved: list[tuple[list[str], int]] = []

    def load(self):
        return list(self.tasks), self.next_id

    def save(self, tasks, next_id: int) -> bool:
        self.saved.append(([t.to_record() for t in tasks], next_id))
        return self.ok


def test_add_on_empty_store() -> None:
    store = TaskStore(FakeStorage())
    task = store.add_task("Buy milk")
    assert task == Task(1, "Buy milk", False, date.today())
    assert store.next_id == 2
    assert store.list_all() == [task]


def test_ids_increase_by_one_despite_deletions() -> None:
    store = TaskStore(FakeStorage())
    ids = []
    for i in range(6):
        ids.append(store.add_task(f"t{i}").id)
        if i % 2:
            assert store.delete_task(ids[-1])
    assert ids == list(range(1, 7))
    assert store.next_id == 7
    assert store.add_task("after").id == 7


def test_ids_stay_unique() -> None:
    store = TaskStore(FakeStorage())
    for i in range(10):
        store.add_task(f"t{i}")
        if i % 3 == 0:
            store.delete_task(store.list_all()[0].id)
    ids = [t.id for t in store.list_all()]
    assert len(ids) == len(set(ids))


@pytest.mark.parametrize("description", ["", "   ", "two\nlines", "cr\rhere"])
def test_add_rejects_unstorable_descriptions(description: str) -> None:
    store = TaskStore(FakeStorage())
    with pytest.raises(ValueError):
        store.add_task(description)
    assert store.next_id == 1
    assert len(store) == 0


def test_find_returns_live_task(loaded_store: TaskStore) -> None:
    task = loaded_store.find(1)
    assert isinstance(task, Task)
    assert task is loaded_store.find(1)


def test_mark_completed_mutates_in_place(loaded_store: TaskStore) -> None:
    result = loaded_store.mark_completed(1)
    assert isinstance(result, Task)
    assert result.completed is True
    assert loaded_store.find(1).completed is True
    assert loaded_store.mark_completed(1).completed is True


def test_mark_completed_unknown_id_on_empty_store() -> None:
    store = TaskStore(FakeStorage())
    result = store.mark_completed(99)
    assert result == NotFound(99)
    assert "99" in str(result)


def test_delete_then_everything_is_not_found(loaded_store: TaskStore) -> None:
    removed = loaded_store.delete_task(1)
    assert isinstance(removed, Task)
    assert removed.id == 1
    assert loaded_store.find(1) == NotFound(1)
    assert loaded_store.mark_completed(1) == NotFound(1)
    assert loaded_store.delete_task(1) == NotFound(1)
    assert [t.id for t in loaded_store.list_all()] == [2]


def test_listing_returns_independent_copies(loaded_store: TaskStore) -> None:
    snapshot = loaded_store.list_all()
    snapshot[0].completed = True
    snapshot[0].description = "changed"
    snapshot.clear()
    assert len(loaded_store) == 2
    live = loaded_store.find(1)
    assert live.completed is False
    assert live.description == "Buy milk"

    filtered = loaded_store.list_filtered(is_completed)
    filtered[0].completed = False
    assert loaded_store.find(2).completed is True


def test_filter_completed(loaded_store: TaskStore) -> None:
    assert [t.id for t in loaded_store.list_filtered(lambda t: t.completed)] == [2]


def test_filter_partition_preserves_order() -> None:
    store = TaskStore(FakeStorage())
    for i in range(8):
        store.add_task(f"t{i}")
    for tid in (2, 3, 7):
        store.mark_completed(tid)
    store.delete_task(5)

    done = store.list_filtered(is_completed)
    pending = store.list_filtered(is_pending)
    everything = store.list_all()

    assert [t.id for t in done] == [2, 3, 7]
    assert [t.id for t in pending] == [1, 4, 6, 8]
    assert sorted(t.id for t in done + pending) == [t.id for t in everything]
    assert not {t.id for t in done} & {t.id for t in pending}


def test_load_replaces_state() -> None:
    fake = FakeStorage([Task(4, "a", False, date(2024, 1, 1))], next_id=9)
    store = TaskStore(fake)
    store.add_task("discarded")
    store.load()
    assert [t.id for t in store.list_all()] == [4]
    assert store.next_id == 9


def test_load_scenario_file(loaded_store: TaskStore) -> None:
    assert [(t.id, t.description, t.completed) for t in loaded_store.list_all()] == [
        (1, "Buy milk", False),
        (2, "Clean house", True),
    ]
    assert loaded_store.next_id == 3


def test_load_bumps_counter_behind_stored_ids(caplog: pytest.LogCaptureFixture) -> None:
    fake = FakeStorage(
        [Task(1, "a", False, date(2024, 1, 1)), Task(5, "b", False, date(2024, 1, 1))],
        next_id=1,
    )
    store = TaskStore(fake)
    with caplog.at_level(logging.WARNING, logger="tracker"):
        store.load()
    assert store.next_id == 6
    assert store.add_task("c").id == 6
    assert caplog.records


def test_load_drops_duplicate_ids() -> None:
    fake = FakeStorage(
        [Task(1, "first", False, date(2024, 1, 1)), Task(1, "second", True, date(2024, 1, 2))],
        next_id=2,
    )
    store = TaskStore(fake)
    store.load()
    assert [t.description for t in store.list_all()] == ["first"]


def test_save_passes_state_and_reports_result() -> None:
    fake = FakeStorage(ok=False)
    store = TaskStore(fake)
    store.add_task("x")
    assert store.save() is False
    assert fake.saved == [([f"1|x|false|{date.today().isoformat()}"], 2)]


def test_save_then_load_round_trip(tasks_file: Path) -> None:
    first = TaskStore(Storage(tasks_file))
    for i in range(4):
        first.add_task(f"task {i}")
    first.mark_completed(2)
    first.delete_task(3)
    assert first.save() is True

    second = TaskStore(Storage(tasks_file))
    second.load()
    assert second.list_all() == first.list_all()
    assert second.next_id == first.next_id == 5


def test_empty_round_trip(store: TaskStore, tasks_file: Path) -> None:
    assert store.save() is True
    other = TaskStore(Storage(tasks_file))
    other.load()
    assert other.list_all() == []
    assert other.next_id == 1


def test_str_summarises_counts(loaded_store: TaskStore) -> None:
    assert str(loaded_store) == "Pending: 1 tasks, Completed: 1 tasks"


@pytest.mark.parametrize("counter", ["0", "-4"])
def test_non_positive_counter_never_yields_non_positive_ids(
    storage: Storage, tasks_file: Path, counter: str
) -> None:
    tasks_file.parent.mkdir(parents=True, exist_ok=True)
    tasks_file.write_text(f"{counter}\n", encoding="utf-8")
    store = TaskStore(storage)
    store.load()
    assert store.add_task("x").id == 1
