# src/taskdeck/engine/model.py

"""
Core domain models.

This module defines the in-memory representation of tasks, the enumerated
values a task may carry, and the criteria used to filter a task list.

No storage access should happen here.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------

class Priority(str, Enum):
    """
    Task priority.

    Stored values are English; the Spanish literals written by the
    original browser app are accepted on input.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str) -> "Priority":
        return cls(_lookup(raw, _PRIORITY_ALIASES, cls))


class Category(str, Enum):
    """
    Task category.
    """

    PERSONAL = "personal"
    WORK = "work"
    STUDY = "study"
    HEALTH = "health"

    @classmethod
    def parse(cls, raw: str) -> "Category":
        return cls(_lookup(raw, _CATEGORY_ALIASES, cls))


class StatusFilter(str, Enum):
    """
    Completion filter applied to the visible task list.
    """

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"

    @classmethod
    def parse(cls, raw: str) -> "StatusFilter":
        return cls(_lookup(raw, _STATUS_ALIASES, cls))


_PRIORITY_ALIASES = {"baja": "low", "media": "medium", "alta": "high"}
_CATEGORY_ALIASES = {"trabajo": "work", "estudio": "study", "salud": "health"}
_STATUS_ALIASES = {"todas": "all", "completadas": "completed", "pendientes": "pending"}

ALL = "all"


def _lookup(raw: str, aliases: dict[str, str], enum_cls: type[Enum]) -> str:
    s = (raw or "").strip().lower()
    s = aliases.get(s, s)
    if s not in {m.value for m in enum_cls}:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Invalid {enum_cls.__name__.lower()} '{raw}' (allowed: {allowed})")
    return s


# ---------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Task:
    """
    A single to-do item.

    Notes:
    - id is allocated by the store and never changes.
    - created_at is a timezone-aware UTC timestamp.
    - due_date is either a plain date (calendar day) or a datetime.
    """

    id: int
    title: str
    description: str = ""
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    category: Category = Category.PERSONAL
    due_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @property
    def has_due_date(self) -> bool:
        return self.due_date is not None


# ---------------------------------------------------------------------
# Filter criteria
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """
    Ephemeral list filter. `None` on priority/category means "all".
    """

    status: StatusFilter = StatusFilter.ALL
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    search: str = ""

    @classmethod
    def from_strings(
        cls,
        *,
        status: str = ALL,
        priority: str = ALL,
        category: str = ALL,
        search: str = "",
    ) -> "FilterCriteria":
        """
        Build criteria from user-facing strings ("all"/"todas" means no filter).
        """
        return cls(
            status=StatusFilter.parse(status),
            priority=None if _is_all(priority) else Priority.parse(priority),
            category=None if _is_all(category) else Category.parse(category),
            search=search or "",
        )


def _is_all(raw: Optional[str]) -> bool:
    s = (raw or "").strip().lower()
    return s in {"", ALL, "todas"}
