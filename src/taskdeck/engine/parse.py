# src/taskdeck/engine/parse.py

"""
Task blob parser.

Decodes a serialized task sequence into in-memory Task models.

Blob layout: a YAML sequence (JSON is accepted as-is) of mappings with keys
- id          (required) : integer
- title       (required) : string
- description (optional) : string, defaults to ""
- completed   (optional) : boolean, defaults to false
- priority    (optional) : low|medium|high (or baja|media|alta)
- category    (optional) : personal|work|study|health (or trabajo|estudio|salud)
- dueDate     (optional) : ISO date/datetime string or ""
- createdAt   (optional) : ISO timestamp string

This module performs *structural* parsing only; repository-wide rules
(duplicate ids and the like) live in validate.py.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional

import yaml

from .model import Category, Priority, Task


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseError(Exception):
    """
    Raised when a blob is syntactically or structurally invalid.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def load_records(blob: str, *, source: str = "<blob>") -> list[dict[str, Any]]:
    """
    Decode a blob into a list of raw task mappings.
    """
    try:
        data = yaml.safe_load(blob)
    except (yaml.YAMLError, ValueError) as e:
        # PyYAML raises a bare ValueError for impossible dates (2024-02-30).
        raise ParseError(source, f"Invalid YAML/JSON: {e}") from e

    if data is None:
        return []

    if not isinstance(data, list):
        raise ParseError(source, "Blob root must be a sequence of tasks")

    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ParseError(f"{source}[{i}]", "Task entry must be a mapping")

    return data


def parse_tasks(blob: str, *, source: str = "<blob>") -> list[Task]:
    """
    Decode a blob into Task models, preserving order.
    """
    records = load_records(blob, source=source)
    return [parse_record(rec, path=f"{source}[{i}]") for i, rec in enumerate(records)]


def parse_record(data: dict[str, Any], *, path: str = "<task>") -> Task:
    task_id = _require_int_field(path, data, "id")
    title = _require_str_field(path, data, "title")
    description = _optional_str_field(path, data, "description")
    completed = _optional_bool_field(path, data, "completed")
    priority = _parse_enum(path, data, "priority", Priority, Priority.MEDIUM)
    category = _parse_enum(path, data, "category", Category, Category.PERSONAL)
    due_date = _parse_due_date(path, data)
    created_at = _parse_timestamp(path, data, "createdAt")

    return Task(
        id=task_id,
        title=title,
        description=description,
        completed=completed,
        priority=priority,
        category=category,
        due_date=due_date,
        created_at=created_at,
    )


# ---------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------

def _require_int_field(path: str, data: dict[str, Any], key: str) -> int:
    if key not in data:
        raise ParseError(path, f"Missing required key: {key}")

    value = data[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(path, f"Key '{key}' must be a number")
    if isinstance(value, float) and not value.is_integer():
        raise ParseError(path, f"Key '{key}' must be an integer")

    return int(value)


def _require_str_field(path: str, data: dict[str, Any], key: str) -> str:
    if key not in data:
        raise ParseError(path, f"Missing required key: {key}")

    value = data[key]
    if not isinstance(value, str):
        raise ParseError(path, f"Key '{key}' must be a string")

    return value


def _optional_str_field(path: str, data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(path, f"Key '{key}' must be a string")
    return value


def _optional_bool_field(path: str, data: dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ParseError(path, f"Key '{key}' must be a boolean")
    return value


def _parse_enum(path: str, data: dict[str, Any], key: str, enum_cls, default):
    raw = data.get(key)
    if raw is None or raw == "":
        return default
    if not isinstance(raw, str):
        raise ParseError(path, f"Key '{key}' must be a string")

    try:
        return enum_cls.parse(raw)
    except ValueError as e:
        raise ParseError(path, str(e)) from e


def _parse_due_date(path: str, data: dict[str, Any]) -> Optional[date]:
    value = data.get("dueDate")
    if value is None or value == "":
        return None

    # YAML may already have resolved unquoted dates
    if isinstance(value, date):
        return value

    if isinstance(value, str):
        s = value.strip()
        try:
            if "T" in s:
                return _parse_iso_datetime(s)
            return date.fromisoformat(s)
        except ValueError as e:
            raise ParseError(path, f"Invalid ISO date for 'dueDate': '{value}'") from e

    raise ParseError(path, "Key 'dueDate' must be an ISO date string")


def _parse_timestamp(path: str, data: dict[str, Any], key: str) -> Optional[datetime]:
    value = data.get(key)
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, str):
        try:
            return _parse_iso_datetime(value.strip())
        except ValueError as e:
            raise ParseError(path, f"Invalid ISO timestamp for '{key}': '{value}'") from e

    raise ParseError(path, f"Key '{key}' must be an ISO timestamp string")


def _parse_iso_datetime(s: str) -> datetime:
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def parse_due_input(raw: str) -> Optional[date]:
    """
    Parse a due date typed by the user ("" means no due date).
    """
    s = (raw or "").strip()
    if not s:
        return None
    if "T" in s:
        return _parse_iso_datetime(s)
    return date.fromisoformat(s)
