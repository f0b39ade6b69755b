"""Task store: holds the ordered task list, id management and task mutation.

The store is the only writer of the task list and the id counter. Lookups
that miss return a NotFound value instead of raising. Listing returns copies;
only find/mark_completed hand out the live Task.
"""
import logging
from dataclasses import replace
from typing import Callable, List, Optional

from models import Lookup, NotFound, Task
from storage import Storage

logger = logging.getLogger(__name__)

Predicate = Callable[[Task], bool]


def is_completed(task: Task) -> bool:
    return task.completed


def is_pending(task: Task) -> bool:
    return not task.completed


class TaskStore:
    def __init__(self, storage: Optional[Storage] = None):
        self.storage: Storage = storage if storage is not None else Storage()
        self._tasks: List[Task] = []
        self._next_id: int = 1

    @property
    def next_id(self) -> int:
        return self._next_id

    # -------------------- lifecycle --------------------
    def load(self) -> None:
        """Replace in-memory state with what the storage holds."""
        tasks, next_id = self.storage.load()
        self._tasks = []
        seen = set()
        for task in tasks:
            if task.id in seen:
                logger.warning('Dropping duplicate task id %d (%r)', task.id, task.description)
                continue
            seen.add(task.id)
            self._tasks.append(task)
        if seen and next_id <= max(seen):
            logger.warning('Id counter %d collides with stored ids; using %d', next_id, max(seen) + 1)
            next_id = max(seen) + 1
        self._next_id = next_id

    def save(self) -> bool:
        return self.storage.save(self._tasks, self._next_id)

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # -------------------- task operations --------------------
    def add_task(self, description: str) -> Task:
        if not description or not description.strip():
            raise ValueError('description is required')
        if '\n' in description or '\r' in description:
            raise ValueError('description must be a single line')
        task = Task(self._allocate_id(), description)
        self._tasks.append(task)
        logger.debug('Task added id=%d', task.id)
        return task

    def find(self, task_id: int) -> Lookup:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return NotFound(task_id)

    def mark_completed(self, task_id: int) -> Lookup:
        found = self.find(task_id)
        if isinstance(found, Task):
            found.mark_completed()
            logger.debug('Task completed id=%d', task_id)
        return found

    def delete_task(self, task_id: int) -> Lookup:
        found = self.find(task_id)
        if isinstance(found, Task):
            self._tasks.remove(found)
            logger.debug('Task removed id=%d', task_id)
        return found

    # -------------------- queries --------------------
    def list_all(self) -> List[Task]:
        return [replace(task) for task in self._tasks]

    def list_filtered(self, predicate: Predicate) -> List[Task]:
        return [replace(task) for task in self._tasks if predicate(task)]

    def __len__(self) -> int:
        return len(self._tasks)

    def __str__(self) -> str:
        done = sum(1 for t in self._tasks if t.completed)
        return f'Pending: {len(self._tasks) - done} tasks, Completed: {done} tasks'
