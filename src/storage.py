"""Persistence helpers (load/save) for the task tracker.

The whole collection lives in one text file: the first line holds the next
id counter, each following line one task record (see models.Task.to_record).
Every problem with the file is logged and absorbed here; callers only ever
see the returned data or a False from save().
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from models import INTEGER_RE, Task

logger = logging.getLogger(__name__)

TASKS_FILE = Path(__file__).parent.parent / 'data' / 'tasks.txt'
ENCODING = 'utf-8'
DEFAULT_NEXT_ID = 1

LoadResult = Tuple[List[Task], int]


class Storage:
    def __init__(self, path: Union[str, Path] = TASKS_FILE):
        self.path = Path(path)

    def load(self) -> LoadResult:
        """Read tasks and the id counter from disk.

        Missing file -> empty list and counter 1 (first run).
        Unreadable file -> same defaults, with the failure logged.
        Malformed task lines are skipped one by one.
        """
        try:
            with open(self.path, 'r', encoding=ENCODING, newline='') as f:
                lines = f.read().split('\n')
        except FileNotFoundError:
            logger.info('No task file at %s; starting empty', self.path)
            return [], DEFAULT_NEXT_ID
        except (OSError, UnicodeDecodeError) as exc:
            logger.error('Could not read task file %s: %s', self.path, exc)
            return [], DEFAULT_NEXT_ID
        next_id = _parse_counter(lines[0].rstrip('\r') if lines else None)
        tasks: List[Task] = []
        for lineno, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue
            task = Task.from_record(line)
            if task is None:
                logger.warning('Skipping malformed record at %s:%d: %r', self.path, lineno, line)
                continue
            tasks.append(task)
        logger.info('Loaded %d tasks from %s (next id %d)', len(tasks), self.path, next_id)
        return tasks, next_id

    def save(self, tasks: Sequence[Task], next_id: int) -> bool:
        """Overwrite the task file; True when the write fully completed.

        Content goes to a temporary sibling first and is moved over the
        target with os.replace, so a failed write leaves the old file intact.
        """
        payload = ''.join(f'{line}\n' for line in _render(tasks, next_id))
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f'.{self.path.name}.', suffix='.tmp', dir=self.path.parent)
            with open(fd, 'w', encoding=ENCODING, newline='') as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.error('Could not save tasks to %s: %s', self.path, exc)
            return False
        finally:
            if tmp_name is not None:
                _discard(tmp_name)
        logger.info('Saved %d tasks to %s (next id %d)', len(tasks), self.path, next_id)
        return True


def _render(tasks: Sequence[Task], next_id: int) -> List[str]:
    return [str(next_id)] + [task.to_record() for task in tasks]


def _parse_counter(raw: Union[str, None]) -> int:
    """Return the counter on the first line, or 1 if missing/invalid.

    The counter must be a plain decimal integer of at least 1.
    """
    if raw is None or not raw.strip():
        logger.warning('Task file has no id counter; using %d', DEFAULT_NEXT_ID)
        return DEFAULT_NEXT_ID
    if not INTEGER_RE.fullmatch(raw) or int(raw) < DEFAULT_NEXT_ID:
        logger.warning('Invalid id counter %r; using %d', raw, DEFAULT_NEXT_ID)
        return DEFAULT_NEXT_ID
    return int(raw)


def _discard(name: str) -> None:
    try:
        os.unlink(name)
    except OSError as exc:
        logger.debug('Could not remove temporary file %s: %s', name, exc)
