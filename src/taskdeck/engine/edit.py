# src/taskdeck/engine/edit.py

"""
Edit session: a single transient draft of one task's text fields.

The draft is a shallow copy taken when editing starts. Saving writes the
draft's title and description back through TaskStore.update(); every other
field keeps the value currently held by the store.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Final, Optional

from .model import Task
from .store import TaskStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS: Final[tuple[str, ...]] = ("title", "description")


class EditSession:
    def __init__(self, store: TaskStore) -> None:
        self._store = store
        self._draft: Optional[Task] = None

    @property
    def draft(self) -> Optional[Task]:
        return self._draft

    @property
    def active(self) -> bool:
        return self._draft is not None

    def start_edit(self, task_id: int) -> bool:
        """
        Begin editing `task_id`, discarding any unsaved draft.
        """
        task = self._store.get(task_id)
        if task is None:
            return False

        if self._draft is not None and self._draft.id != task_id:
            logger.debug("discarding draft for task %s", self._draft.id)
        self._draft = replace(task)
        return True

    def edit_field(self, field: str, value: str) -> None:
        if field not in EDITABLE_FIELDS:
            allowed = ", ".join(EDITABLE_FIELDS)
            raise ValueError(f"Field '{field}' is not editable (allowed: {allowed})")

        if self._draft is None:
            return

        self._draft = replace(self._draft, **{field: value})

    def save_edit(self) -> bool:
        draft = self._draft
        if draft is None:
            return False

        self._draft = None
        current = self._store.get(draft.id)
        if current is None:
            return False

        return self._store.update(
            replace(current, title=draft.title, description=draft.description)
        )

    def cancel_edit(self) -> None:
        self._draft = None
