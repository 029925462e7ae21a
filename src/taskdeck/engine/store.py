# src/taskdeck/engine/store.py

"""
Ordered task store.

This module contains *all* state-changing operations on the task list:
creation, deletion, completion toggling, replacement, and manual reordering.

Design principles:
- The store owns one ordered list; order changes only through reorder().
- Operations referencing an unknown id are silent no-ops.
- Every effective mutation notifies subscribers with the new snapshot.
- No storage access here (persistence subscribes from the outside).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

from .model import Category, Priority, Task

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[Task, ...]], None]


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _now_ms() -> int:
    """Return the current wall-clock time in milliseconds."""
    return time.time_ns() // 1_000_000


def _utcnow() -> datetime:
    """Return the current UTC timestamp, truncated to milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


# ---------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------

class TaskStore:
    """
    The ordered in-memory collection of tasks.

    `clock` returns milliseconds and drives id allocation; `now` returns
    the creation timestamp. Both are injectable for tests.
    """

    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        *,
        clock: Callable[[], int] = _now_ms,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._tasks: list[Task] = list(tasks or [])
        self._clock = clock
        self._now = now
        self._last_id: int = max((t.id for t in self._tasks), default=0)
        self._listeners: list[Listener] = []

    # -----------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __contains__(self, task_id: object) -> bool:
        return isinstance(task_id, int) and self._index_of(task_id) is not None

    def _index_of(self, task_id: int) -> Optional[int]:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    # -----------------------------------------------------------------
    # Subscriptions
    # -----------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.tasks
        for listener in list(self._listeners):
            listener(snapshot)

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def _allocate_id(self) -> int:
        nid = max(self._clock(), self._last_id + 1)
        self._last_id = nid
        return nid

    def create(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        category: Category = Category.PERSONAL,
        due_date: Optional[date] = None,
    ) -> Optional[Task]:
        """
        Append a new task at the end of the list.

        Whitespace-only titles are ignored; returns None in that case.
        """
        if not title or not title.strip():
            logger.debug("create ignored: empty title")
            return None

        task = Task(
            id=self._allocate_id(),
            title=title,
            description=description or "",
            completed=False,
            priority=priority,
            category=category,
            due_date=due_date,
            created_at=self._now(),
        )
        self._tasks.append(task)
        logger.debug("created task %s", task.id)
        self._notify()
        return task

    def delete(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False

        del self._tasks[idx]
        logger.debug("deleted task %s", task_id)
        self._notify()
        return True

    def toggle_complete(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False

        task = self._tasks[idx]
        self._tasks[idx] = replace(task, completed=not task.completed)
        logger.debug("toggled task %s -> completed=%s", task_id, not task.completed)
        self._notify()
        return True

    def update(self, task: Task) -> bool:
        """
        Replace the task with the same id, keeping its position.
        """
        idx = self._index_of(task.id)
        if idx is None:
            return False

        self._tasks[idx] = task
        logger.debug("updated task %s", task.id)
        self._notify()
        return True

    def reorder(self, dragged_id: int, target_id: int) -> bool:
        """
        Move the dragged task into the target's slot.

        The target index is taken before the dragged task is removed and
        then applied to the shrunken list: a task dragged downwards lands
        right after the target, a task dragged upwards right before it.
        """
        if dragged_id == target_id:
            return False

        dragged_idx = self._index_of(dragged_id)
        target_idx = self._index_of(target_id)
        if dragged_idx is None or target_idx is None:
            return False

        dragged = self._tasks.pop(dragged_idx)
        self._tasks.insert(target_idx, dragged)
        logger.debug("moved task %s to index %d", dragged_id, target_idx)
        self._notify()
        return True
