# src/taskdeck/cli.py

"""
Command-line interface for taskdeck.

This module:
- defines argument parsing and subcommands,
- delegates task state and storage to engine modules,
- keeps user interaction (prompts, messages) here.

Every command opens the store from storage, runs one operation and lets the
attached persistence write the result back.
"""

import argparse
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from taskdeck.config import Settings, get_settings
from taskdeck.engine.edit import EditSession
from taskdeck.engine.filters import visible_tasks
from taskdeck.engine.model import Category, FilterCriteria, Priority, Task
from taskdeck.engine.parse import ParseError, load_records, parse_due_input
from taskdeck.engine.render import render_stats, render_task_detail, render_task_list
from taskdeck.engine.stats import Granularity, compute_stats
from taskdeck.engine.storage import FileStorage, TaskPersistence
from taskdeck.engine.store import TaskStore
from taskdeck.engine.validate import ValidationError, validate_records
from taskdeck.logging_setup import setup_logging

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding the task blob (default: $TASKDECK_DATA_DIR)",
    )
    p.add_argument(
        "--key",
        type=str,
        default=None,
        help="Storage key of the task blob (default: tasks)",
    )
    p.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskdeck")
    sub = parser.add_subparsers(dest="command")

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_list = sub.add_parser(
        "list",
        help="List tasks matching the given filters",
    )
    p_list.add_argument(
        "--status",
        type=str,
        default="all",
        help="all, completed or pending",
    )
    p_list.add_argument(
        "--priority",
        type=str,
        default="all",
        help="all, low, medium or high",
    )
    p_list.add_argument(
        "--category",
        type=str,
        default="all",
        help="all, personal, work, study or health",
    )
    p_list.add_argument(
        "-s",
        "--search",
        type=str,
        default="",
        help="Case-insensitive text to look for in title or description",
    )
    _add_common(p_list)
    p_list.set_defaults(func=cmd_list)

    p_show = sub.add_parser(
        "show",
        help="Show a single task (structured view)",
    )
    p_show.add_argument("task_id", type=int, help="Task id")
    _add_common(p_show)
    p_show.set_defaults(func=cmd_show)

    p_stats = sub.add_parser(
        "stats",
        help="Show task counts",
    )
    _add_common(p_stats)
    p_stats.set_defaults(func=cmd_stats)

    p_validate = sub.add_parser(
        "validate",
        help="Check the stored task blob",
    )
    _add_common(p_validate)
    p_validate.set_defaults(func=cmd_validate)

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    p_add = sub.add_parser(
        "add",
        help="Create a new task at the end of the list",
    )
    p_add.add_argument("title", nargs="*", help="Task title")
    p_add.add_argument("-d", "--description", type=str, default="", help="Task details")
    p_add.add_argument(
        "-p",
        "--priority",
        type=str,
        default=Priority.MEDIUM.value,
        help="low, medium or high (default: medium)",
    )
    p_add.add_argument(
        "-c",
        "--category",
        type=str,
        default=Category.PERSONAL.value,
        help="personal, work, study or health (default: personal)",
    )
    p_add.add_argument(
        "--due",
        type=str,
        default="",
        help="Due date (YYYY-MM-DD or ISO datetime)",
    )
    p_add.add_argument(
        "--non-interactive",
        action="store_true",
        help="Do not prompt for a missing title",
    )
    _add_common(p_add)
    p_add.set_defaults(func=cmd_add)

    p_toggle = sub.add_parser(
        "toggle",
        help="Flip a task between pending and completed",
    )
    p_toggle.add_argument("task_id", type=int, help="Task id")
    _add_common(p_toggle)
    p_toggle.set_defaults(func=cmd_toggle)

    p_done = sub.add_parser(
        "done",
        help="Mark task as completed",
    )
    p_done.add_argument("task_id", type=int, help="Task id")
    _add_common(p_done)
    p_done.set_defaults(func=cmd_done)

    p_rm = sub.add_parser(
        "rm",
        help="Delete a task",
    )
    p_rm.add_argument("task_id", type=int, help="Task id")
    _add_common(p_rm)
    p_rm.set_defaults(func=cmd_rm)

    p_edit = sub.add_parser(
        "edit",
        help="Edit title and description of a task",
    )
    p_edit.add_argument("task_id", type=int, help="Task id")
    p_edit.add_argument("--title", type=str, default=None, help="New title")
    p_edit.add_argument("--description", type=str, default=None, help="New description")
    _add_common(p_edit)
    p_edit.set_defaults(func=cmd_edit)

    p_move = sub.add_parser(
        "move",
        help="Move a task into another task's slot",
    )
    p_move.add_argument("task_id", type=int, help="Id of the task to move")
    p_move.add_argument("target_id", type=int, help="Id of the task whose slot it takes")
    _add_common(p_move)
    p_move.set_defaults(func=cmd_move)

    return parser


# ---------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Session:
    settings: Settings
    storage: FileStorage
    persistence: TaskPersistence
    store: TaskStore

    @property
    def color(self) -> bool:
        return self.settings.color

    @property
    def granularity(self) -> Granularity:
        return self.settings.overdue_granularity


def _open(args: argparse.Namespace) -> Session:
    settings = get_settings()
    data_dir = Path(args.data_dir).expanduser() if args.data_dir else settings.data_dir
    key = args.key or settings.storage_key

    if args.no_color:
        settings = replace(settings, color=False)

    storage = FileStorage(data_dir)
    persistence = TaskPersistence(storage, key)
    store = persistence.load()
    logger.debug("opened %s (%d task(s))", storage.path_for(key), len(store))

    return Session(settings=settings, storage=storage, persistence=persistence, store=store)


def _require_task(store: TaskStore, task_id: int) -> Task:
    task = store.get(task_id)
    if task is None:
        raise ValidationError(f"Task not found: {task_id}")
    return task


def _prompt(prompt: str, default: str) -> str:
    """
    Ask for a value; blank input keeps `default`.
    """
    try:
        value = input(f"{prompt} [{default}]: ")
    except EOFError as e:
        raise ValidationError(f"{prompt} is required") from e

    return value if value.strip() else default


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_list(args: argparse.Namespace) -> int:
    try:
        criteria = FilterCriteria.from_strings(
            status=args.status,
            priority=args.priority,
            category=args.category,
            search=args.search,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    s = _open(args)
    render_stats(compute_stats(s.store.tasks, granularity=s.granularity))
    print()
    render_task_list(
        visible_tasks(s.store.tasks, criteria),
        color=s.color,
        granularity=s.granularity,
    )
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    s = _open(args)
    task = _require_task(s.store, args.task_id)
    render_task_detail(task, color=s.color, granularity=s.granularity)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    s = _open(args)
    render_stats(compute_stats(s.store.tasks, granularity=s.granularity))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    settings = get_settings()
    data_dir = Path(args.data_dir).expanduser() if args.data_dir else settings.data_dir
    key = args.key or settings.storage_key
    storage = FileStorage(data_dir)

    path = storage.path_for(key)
    try:
        blob = storage.get_item(key)
        if blob is None:
            return 0
        records = load_records(blob, source=str(path))
    except (OSError, UnicodeDecodeError) as e:
        print(f"{path}: cannot read blob: {e}")
        return 1
    except ParseError as e:
        print(str(e))
        return 1

    res = validate_records(records, path=str(path))
    if not res.ok:
        print(f"{res.path}")
        for issue in res.issues:
            print(f"  - {issue.code}: {issue.message}")
        return 1

    return 0


def cmd_add(args: argparse.Namespace) -> int:
    title = " ".join(args.title or [])
    interactive = not bool(args.non_interactive)

    if not title.strip() and interactive:
        try:
            title = input("Title: ")
        except EOFError:
            title = ""

    if not title.strip():
        print("Error: title is required")
        return 1

    try:
        priority = Priority.parse(args.priority)
        category = Category.parse(args.category)
        due_date = parse_due_input(args.due)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    s = _open(args)
    task = s.store.create(
        title,
        description=args.description or "",
        priority=priority,
        category=category,
        due_date=due_date,
    )

    if task is not None:
        print(task.id)
    return 0


def cmd_toggle(args: argparse.Namespace) -> int:
    s = _open(args)
    _require_task(s.store, args.task_id)
    s.store.toggle_complete(args.task_id)
    return 0


def cmd_done(args: argparse.Namespace) -> int:
    s = _open(args)
    task = _require_task(s.store, args.task_id)
    if task.completed:
        print(f"Task {task.id} already completed.")
        return 0

    s.store.toggle_complete(task.id)
    return 0


def cmd_rm(args: argparse.Namespace) -> int:
    s = _open(args)
    _require_task(s.store, args.task_id)
    s.store.delete(args.task_id)
    print(f"Task {args.task_id} removed.")
    return 0


def cmd_edit(args: argparse.Namespace) -> int:
    s = _open(args)
    _require_task(s.store, args.task_id)

    session = EditSession(s.store)
    session.start_edit(args.task_id)
    draft = session.draft

    if args.title is None and args.description is None:
        session.edit_field("title", _prompt("Title", draft.title))
        session.edit_field("description", _prompt("Description", draft.description))
    else:
        if args.title is not None:
            session.edit_field("title", args.title)
        if args.description is not None:
            session.edit_field("description", args.description)

    session.save_edit()
    return 0


def cmd_move(args: argparse.Namespace) -> int:
    s = _open(args)
    _require_task(s.store, args.task_id)
    _require_task(s.store, args.target_id)
    s.store.reorder(args.task_id, args.target_id)
    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    settings = get_settings()
    setup_logging(
        console_level=logging.DEBUG if args.verbose else settings.log_level,
        log_file=settings.log_file,
    )

    try:
        return func(args)
    except ValidationError as e:
        print(e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
