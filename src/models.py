"""Data models for the task tracker.

Exposes the Task dataclass (with its pipe-delimited record format) and the
NotFound outcome returned by store lookups. The record layout is
``id|description|completed|createdDate``; descriptions may contain "|"
themselves since only the first and the last two pipes are structural.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

logger = logging.getLogger(__name__)

DELIMITER = '|'
RECORD_FIELDS = 4
DISPLAY_DATE_FORMAT = '%d/%m/%Y'

INTEGER_RE = re.compile(r'[+-]?[0-9]+')
_ISO_DATE_RE = re.compile(r'\d{4}-\d{2}-\d{2}')
_BOOL_LITERALS = {'true': True, 'false': False}


@dataclass
class Task:
    """A single tracked task.

    Fields:
        id: Positive integer assigned by the store, never reused.
        description: Free text; may contain "|" but not line breaks.
        completed: Only ever flips False -> True via mark_completed().
        created_date: Calendar date of creation, restored verbatim on load.

    ``Task(id, description)`` creates a fresh pending task dated today;
    passing all four fields reconstructs a stored one.
    """
    id: int
    description: str
    completed: bool = False
    created_date: date = field(default_factory=date.today)

    def mark_completed(self) -> None:
        self.completed = True

    # -------------------- record format --------------------
    def to_record(self) -> str:
        return DELIMITER.join((
            str(self.id),
            self.description,
            'true' if self.completed else 'false',
            self.created_date.isoformat(),
        ))

    @classmethod
    def from_record(cls, text: str) -> Optional[Task]:
        """Parse a line written by to_record(); None if it is malformed.

        The id is taken from the left and completed/date from the right, so
        any pipes in between stay in the description.
        """
        raw_id, _, rest = text.rstrip('\r\n').partition(DELIMITER)
        parts = [raw_id] + rest.rsplit(DELIMITER, RECORD_FIELDS - 2)
        if not rest or len(parts) < RECORD_FIELDS:
            logger.debug('Record has %d fields, expected %d', len(parts), RECORD_FIELDS)
            return None
        raw_id, description, raw_completed, raw_date = parts
        if not INTEGER_RE.fullmatch(raw_id):
            logger.debug('Record id is not an integer: %r', raw_id)
            return None
        completed = _BOOL_LITERALS.get(raw_completed.lower())
        if completed is None:
            logger.debug('Record completed flag is not a boolean: %r', raw_completed)
            return None
        if not _ISO_DATE_RE.fullmatch(raw_date):
            logger.debug('Record date is not YYYY-MM-DD: %r', raw_date)
            return None
        try:
            created = date.fromisoformat(raw_date)
        except ValueError:
            logger.debug('Record date is not a calendar date: %r', raw_date)
            return None
        return cls(int(raw_id), description, completed, created)

    # -------------------- display --------------------
    @property
    def status_label(self) -> str:
        return '[X] Completed' if self.completed else '[ ] Pending'

    def __str__(self) -> str:
        day = self.created_date.strftime(DISPLAY_DATE_FORMAT)
        return f'ID: {self.id:<3d} | {self.status_label:<13} | {day} | {self.description}'


@dataclass(frozen=True)
class NotFound:
    """Outcome of a lookup for an id the store does not hold."""
    task_id: int

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return f'Task id {self.task_id} not found.'


Lookup = Union[Task, NotFound]
