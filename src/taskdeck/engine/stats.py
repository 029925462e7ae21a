# src/taskdeck/engine/stats.py

"""
Derived statistics.

Everything here is recomputed from the task list on each call; "overdue"
is a point-in-time predicate, never a stored flag.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from .model import Task


class Granularity(str, Enum):
    """
    How due dates are compared with the current moment.

    TIMESTAMP compares exact instants (a date-only due date means midnight
    UTC of that day). DAY compares calendar dates in the local time zone,
    or in the zone of an explicitly passed aware `now`.
    """

    TIMESTAMP = "timestamp"
    DAY = "day"


@dataclass(frozen=True, slots=True)
class Stats:
    total: int
    completed: int
    pending: int
    overdue: int


def _localnow() -> datetime:
    return datetime.now().astimezone()


def due_instant(due: date) -> datetime:
    """
    Normalise a due date to an aware UTC datetime.
    """
    if isinstance(due, datetime):
        if due.tzinfo is None:
            return due.replace(tzinfo=timezone.utc)
        return due
    return datetime(due.year, due.month, due.day, tzinfo=timezone.utc)


def is_past_due(
    due: Optional[date],
    now: Optional[datetime] = None,
    granularity: Granularity = Granularity.TIMESTAMP,
) -> bool:
    if due is None:
        return False

    now = due_instant(now) if now is not None else _localnow()

    if granularity is Granularity.DAY:
        if isinstance(due, datetime):
            due = due_instant(due).astimezone(now.tzinfo).date()
        return due < now.date()
    return due_instant(due) < now


def is_overdue(
    task: Task,
    now: Optional[datetime] = None,
    granularity: Granularity = Granularity.TIMESTAMP,
) -> bool:
    """
    True for an incomplete task whose due date lies strictly in the past.
    """
    if task.completed or not task.has_due_date:
        return False
    return is_past_due(task.due_date, now, granularity)


def compute_stats(
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    granularity: Granularity = Granularity.TIMESTAMP,
) -> Stats:
    now = now or _localnow()

    total = 0
    completed = 0
    overdue = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
        elif is_overdue(task, now, granularity):
            overdue += 1

    return Stats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
    )
