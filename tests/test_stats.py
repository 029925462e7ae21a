# tests/test_stats.py

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from taskdeck.engine.model import Category, Priority, Task
from taskdeck.engine.stats import Granularity, Stats, compute_stats, is_overdue
from taskdeck.engine.store import TaskStore

from fakes import NOW

YESTERDAY = (NOW - timedelta(days=1)).date()
TODAY = NOW.date()
TOMORROW = (NOW + timedelta(days=1)).date()


def test_empty_store() -> None:
    assert compute_stats([], NOW) == Stats(total=0, completed=0, pending=0, overdue=0)


def test_completed_tasks_are_never_overdue() -> None:
    tasks = [
        Task(id=1, title="late", due_date=YESTERDAY),
        Task(id=2, title="late but done", due_date=YESTERDAY, completed=True),
    ]

    stats = compute_stats(tasks, NOW)
    assert stats == Stats(total=2, completed=1, pending=1, overdue=1)


def test_future_and_missing_due_dates_are_not_overdue() -> None:
    tasks = [
        Task(id=1, title="soon", due_date=TOMORROW),
        Task(id=2, title="whenever"),
    ]
    assert compute_stats(tasks, NOW).overdue == 0


def test_pay_rent_scenario(store: TaskStore) -> None:
    task = store.create("Pay rent", priority=Priority.HIGH, category=Category.PERSONAL, due_date=TODAY)
    store.toggle_complete(task.id)

    for granularity in Granularity:
        stats = compute_stats(store.tasks, NOW, granularity)
        assert stats.completed == 1
        assert stats.pending == 0
        assert stats.overdue == 0


def test_due_today_depends_on_granularity() -> None:
    task = Task(id=1, title="today", due_date=TODAY)

    # midnight UTC has already passed at noon
    assert is_overdue(task, NOW, Granularity.TIMESTAMP) is True
    assert is_overdue(task, NOW, Granularity.DAY) is False
    assert is_overdue(Task(id=2, title="y", due_date=YESTERDAY), NOW, Granularity.DAY) is True


def test_day_granularity_uses_the_local_calendar_day() -> None:
    # 21:00 on the 15th in UTC-5 is already the 16th in UTC
    evening = datetime(2026, 1, 15, 21, 0, tzinfo=timezone(timedelta(hours=-5)))
    task = Task(id=1, title="today", due_date=date(2026, 1, 15))

    assert is_overdue(task, evening, Granularity.TIMESTAMP) is True
    assert is_overdue(task, evening, Granularity.DAY) is False

    # 23:30 UTC on the 14th is 18:30 on the 14th locally
    late = Task(id=2, title="late", due_date=datetime(2026, 1, 14, 23, 30, tzinfo=timezone.utc))
    assert is_overdue(late, evening, Granularity.DAY) is True
    same_day = datetime(2026, 1, 14, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert is_overdue(late, same_day, Granularity.DAY) is False


def test_due_datetime_compares_exact_instant() -> None:
    soon = Task(id=1, title="soon", due_date=NOW + timedelta(minutes=1))
    past = Task(id=2, title="past", due_date=NOW - timedelta(minutes=1))
    exact = Task(id=3, title="exact", due_date=NOW)

    assert is_overdue(soon, NOW) is False
    assert is_overdue(past, NOW) is True
    assert is_overdue(exact, NOW) is False


def test_naive_datetimes_are_utc() -> None:
    naive_due = datetime(2026, 1, 15, 11, 0)
    task = Task(id=1, title="naive", due_date=naive_due)

    assert is_overdue(task, NOW) is True
    assert is_overdue(task, datetime(2026, 1, 15, 10, 0)) is False


def test_overdue_is_recomputed_on_each_call() -> None:
    task = Task(id=1, title="t", due_date=date(2026, 1, 16))

    assert compute_stats([task], NOW).overdue == 0
    later = datetime(2026, 1, 16, 0, 0, 1, tzinfo=timezone.utc)
    assert compute_stats([task], later).overdue == 1
