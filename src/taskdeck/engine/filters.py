# src/taskdeck/engine/filters.py

"""
Visible-set computation.

Pure predicates over tasks; filtering never reorders the input.
"""

from typing import Iterable

from .model import FilterCriteria, StatusFilter, Task


def matches_status(task: Task, status: StatusFilter) -> bool:
    if status is StatusFilter.COMPLETED:
        return task.completed
    if status is StatusFilter.PENDING:
        return not task.completed
    return True


def matches_search(task: Task, search: str) -> bool:
    """
    Case-insensitive substring match on title or description.
    """
    needle = (search or "").lower()
    return needle in task.title.lower() or needle in task.description.lower()


def matches(task: Task, criteria: FilterCriteria) -> bool:
    if not matches_status(task, criteria.status):
        return False
    if criteria.priority is not None and task.priority is not criteria.priority:
        return False
    if criteria.category is not None and task.category is not criteria.category:
        return False
    return matches_search(task, criteria.search)


def visible_tasks(tasks: Iterable[Task], criteria: FilterCriteria) -> list[Task]:
    """
    Return the tasks matching all criteria, in their original order.
    """
    return [t for t in tasks if matches(t, criteria)]
