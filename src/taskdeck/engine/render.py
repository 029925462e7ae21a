# src/taskdeck/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- the task list view (list),
- the statistics line (list / stats),
- structured task detail view (show).

It is presentation-only: it should not mutate task state or write storage.
"""

from __future__ import annotations

import re
import shutil
import sys
import textwrap
from datetime import date, datetime
from typing import Iterable, Optional

from .model import Category, Priority, Task
from .stats import Granularity, Stats, is_overdue


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_RESET = "\033[0m"
_DIM = "\033[90m"
_STRIKE = "\033[9m"
_RED = "\033[31m"

_COLOR = {
    Priority.HIGH: "\033[31m",    # red
    Priority.MEDIUM: "\033[33m",  # yellow
    Priority.LOW: "\033[32m",     # green
}

_ICON = {
    Category.WORK: "💼",
    Category.PERSONAL: "👤",
    Category.STUDY: "📚",
    Category.HEALTH: "❤️",
}


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


def _visible_len(s: str) -> int:
    """Return string length without ANSI colour escapes."""
    return len(_ANSI_RE.sub("", s))


def format_date(d: date) -> str:
    """
    Render a date the way the es-ES locale does (d/m/yyyy).
    """
    if isinstance(d, datetime):
        d = d.date()
    return f"{d.day}/{d.month}/{d.year}"


# ---------------------------------------------------------------------
# Task list
# ---------------------------------------------------------------------

def format_task_line(
    task: Task,
    *,
    color: bool = True,
    now: Optional[datetime] = None,
    granularity: Granularity = Granularity.TIMESTAMP,
) -> str:
    """
    Format:
      [x] Title  (priority, icon category, due d/m/yyyy!) id: N
    """
    use_color = color and _supports_color()

    mark = "[x]" if task.completed else "[ ]"
    title = task.title
    if use_color and task.completed:
        title = f"{_STRIKE}{_DIM}{title}{_RESET}"

    prio = task.priority.value
    if use_color:
        prio = f"{_COLOR[task.priority]}{prio}{_RESET}"

    meta = [prio, f"{_ICON[task.category]} {task.category.value}"]

    if task.due_date is not None:
        due = f"due {format_date(task.due_date)}"
        if is_overdue(task, now, granularity):
            due += "!"
            if use_color:
                due = f"{_RED}{due}{_RESET}"
        meta.append(due)

    return f"{mark} {title} ({', '.join(meta)}) id: {task.id}"


def render_task_list(
    tasks: Iterable[Task],
    *,
    color: bool = True,
    now: Optional[datetime] = None,
    granularity: Granularity = Granularity.TIMESTAMP,
) -> None:
    tasks = list(tasks)
    if not tasks:
        print("No tasks found")
        return

    for task in tasks:
        print(format_task_line(task, color=color, now=now, granularity=granularity))
        if task.description.strip():
            first = task.description.strip().splitlines()[0]
            print(f"    {first}")


def format_stats(stats: Stats) -> str:
    return (
        f"Total: {stats.total}  Completed: {stats.completed}  "
        f"Pending: {stats.pending}  Overdue: {stats.overdue}"
    )


def render_stats(stats: Stats) -> None:
    print(format_stats(stats))


# ---------------------------------------------------------------------
# Task detail view (show)
# ---------------------------------------------------------------------

def render_task_detail(
    task: Task,
    *,
    color: bool = True,
    now: Optional[datetime] = None,
    granularity: Granularity = Granularity.TIMESTAMP,
) -> None:
    """
    Render a structured task detail view.

    Width is capped at 80 characters.
    """
    width = min(80, shutil.get_terminal_size(fallback=(80, 24)).columns)
    inner_w = max(20, width - 4)  # borders + padding
    use_color = color and _supports_color()

    def wrap_lines(s: str, *, indent: str = "") -> list[str]:
        out: list[str] = []
        for ln in s.rstrip().splitlines() or [""]:
            if not ln.strip():
                out.append(indent.rstrip())
                continue

            wrapped = textwrap.wrap(
                ln,
                width=inner_w - len(indent),
                break_long_words=False,
                break_on_hyphens=False,
            ) or [""]

            out.extend([indent + x for x in wrapped])

        return out

    def box_rule(ch: str = "-") -> None:
        print(f"+{ch * (width - 2)}+")

    def box_line(content: str = "") -> None:
        raw = content
        pad = inner_w - _visible_len(raw)
        if pad > 0:
            raw = raw + (" " * pad)
        print(f"| {raw} |")

    status = "completed" if task.completed else "pending"
    prio = task.priority.value
    if use_color:
        prio = f"{_COLOR[task.priority]}{prio}{_RESET}"

    print()
    box_rule("=")
    for ln in wrap_lines(f"{task.title} ({status})"):
        box_line(ln)
    box_rule("=")

    box_line(f"id: {task.id}")
    box_line(f"priority: {prio}")
    box_line(f"category: {task.category.value}")
    if task.created_at is not None:
        box_line(f"created: {format_date(task.created_at)}")
    if task.due_date is not None:
        due = format_date(task.due_date)
        if is_overdue(task, now, granularity):
            due = f"{due} (overdue)"
        box_line(f"due: {due}")

    if task.description.strip():
        box_rule()
        box_line("Description:")
        for ln in wrap_lines(task.description, indent="  "):
            box_line(ln)

    box_rule("=")
    print()
