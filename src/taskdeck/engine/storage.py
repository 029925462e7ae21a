# src/taskdeck/engine/storage.py

"""
Persistence adapter.

This module contains:
- the key/value blob storage protocol and its file-backed implementation,
- serialisation of the task list into a blob,
- loading a store from a blob (falling back to an empty store on errors),
- the subscriber that writes the full list after every store mutation.

Writes are whole-blob replacements; there is no versioning or migration.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Final, Iterable, Optional, Protocol

import yaml

from .model import Task
from .parse import ParseError, parse_tasks
from .store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_KEY: Final[str] = "tasks"
BLOB_SUFFIX: Final[str] = ".yml"


# ---------------------------------------------------------------------
# Blob storage
# ---------------------------------------------------------------------

class BlobStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, blob: str) -> None: ...


class FileStorage:
    """
    One file per key under `data_dir` (`<key>.yml`).

    Writes go through a temporary file and an atomic rename.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}{BLOB_SUFFIX}"

    def get_item(self, key: str) -> Optional[str]:
        p = self.path_for(key)
        if not p.is_file():
            return None
        return p.read_text(encoding="utf-8")

    def set_item(self, key: str, blob: str) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        target = self.path_for(key)

        fd, tmp = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.data_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


# ---------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------

def format_timestamp(dt: datetime) -> str:
    """
    Render an ISO UTC timestamp with millisecond precision and a Z suffix.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def format_due_date(due: Optional[date]) -> str:
    if due is None:
        return ""
    if isinstance(due, datetime):
        return format_timestamp(due)
    return due.isoformat()


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "completed": task.completed,
        "priority": task.priority.value,
        "category": task.category.value,
        "dueDate": format_due_date(task.due_date),
        "createdAt": format_timestamp(task.created_at) if task.created_at else "",
    }


def dump_tasks(tasks: Iterable[Task]) -> str:
    """
    Serialise the full task list into a blob.
    """
    data = [task_to_record(t) for t in tasks]
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LoadResult:
    tasks: list[Task]
    warning: Optional[str] = None


def load_tasks(storage: BlobStorage, key: str = DEFAULT_KEY) -> LoadResult:
    """
    Read the blob stored under `key`.

    Missing blob -> empty list. Unreadable or malformed blob -> empty list
    plus a warning; this function never raises for storage content.
    """
    try:
        blob = storage.get_item(key)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read stored tasks ({key}): {e}"
        logger.warning(msg)
        return LoadResult(tasks=[], warning=msg)

    if blob is None:
        return LoadResult(tasks=[])

    try:
        tasks = parse_tasks(blob, source=key)
    except ParseError as e:
        msg = f"Ignoring malformed stored tasks: {e}"
        logger.warning(msg)
        return LoadResult(tasks=[], warning=msg)

    logger.debug("loaded %d task(s) from %s", len(tasks), key)
    return LoadResult(tasks=tasks)


# ---------------------------------------------------------------------
# Store persistence
# ---------------------------------------------------------------------

class TaskPersistence:
    """
    Binds a TaskStore to a blob storage key.

    load() builds the store; attach() writes the whole list after every
    mutation. Write failures are logged and kept in `last_error`; the
    in-memory store stays authoritative.
    """

    def __init__(self, storage: BlobStorage, key: str = DEFAULT_KEY) -> None:
        self.storage = storage
        self.key = key
        self.last_error: Optional[str] = None
        self.load_warning: Optional[str] = None

    def load(self, **store_kwargs: Any) -> TaskStore:
        result = load_tasks(self.storage, self.key)
        self.load_warning = result.warning
        store = TaskStore(result.tasks, **store_kwargs)
        self.attach(store)
        return store

    def attach(self, store: TaskStore) -> None:
        store.subscribe(self.save)

    def detach(self, store: TaskStore) -> None:
        store.unsubscribe(self.save)

    def save(self, tasks: Iterable[Task]) -> bool:
        try:
            self.storage.set_item(self.key, dump_tasks(tasks))
        except (OSError, yaml.YAMLError) as e:
            self.last_error = f"Cannot save tasks ({self.key}): {e}"
            logger.warning(self.last_error)
            return False

        self.last_error = None
        return True
