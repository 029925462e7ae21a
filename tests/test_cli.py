# tests/test_cli.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskdeck.cli import main
from taskdeck.config import reset_settings
from taskdeck.engine.parse import parse_tasks


@pytest.fixture(autouse=True)
def isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """
    Point the CLI at a temporary data dir and restore logging afterwards
    (main() reconfigures the root logger).
    """
    monkeypatch.setenv("TASKDECK_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKDECK_STORAGE_KEY", raising=False)
    monkeypatch.delenv("TASKDECK_LOG_FILE", raising=False)
    monkeypatch.delenv("TASKDECK_LOG_LEVEL", raising=False)
    monkeypatch.setenv("TASKDECK_OVERDUE_GRANULARITY", "timestamp")
    reset_settings()

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    reset_settings()


def _stored(tmp_path: Path):
    return parse_tasks((tmp_path / "tasks.yml").read_text(encoding="utf-8"))


def _add(capsys: pytest.CaptureFixture[str], *argv: str) -> int:
    assert main(["add", *argv, "--non-interactive"]) == 0
    return int(capsys.readouterr().out.strip())


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 2
    assert "usage: taskdeck" in capsys.readouterr().out


def test_add_and_list(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    task_id = _add(capsys, "Buy", "milk", "-d", "2 litres", "-p", "alta", "-c", "work")

    (task,) = _stored(tmp_path)
    assert task.id == task_id
    assert task.title == "Buy milk"
    assert task.priority.value == "high"
    assert task.category.value == "work"

    assert main(["list", "-s", "MILK", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "Total: 1  Completed: 0  Pending: 1  Overdue: 0" in out
    assert f"[ ] Buy milk (high, 💼 work) id: {task_id}" in out
    assert "    2 litres" in out


def test_add_keeps_title_as_typed(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    task_id = _add(capsys, "  padded  ")

    (task,) = _stored(tmp_path)
    assert task.id == task_id
    assert task.title == "  padded  "


def test_add_blank_title_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["add", "   ", "--non-interactive"]) == 1
    assert "title is required" in capsys.readouterr().out
    assert not (tmp_path / "tasks.yml").exists()


def test_add_without_title_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["add", "--non-interactive"]) == 1
    assert "title is required" in capsys.readouterr().out
    assert not (tmp_path / "tasks.yml").exists()


def test_add_rejects_bad_priority(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["add", "x", "-p", "urgent", "--non-interactive"]) == 1
    assert "Invalid priority" in capsys.readouterr().out


def test_list_filters(capsys: pytest.CaptureFixture[str]) -> None:
    a = _add(capsys, "alpha", "-c", "study")
    b = _add(capsys, "beta", "-c", "health")
    main(["toggle", str(b)])
    capsys.readouterr()

    assert main(["list", "--status", "pending"]) == 0
    out = capsys.readouterr().out
    assert f"id: {a}" in out
    assert f"id: {b}" not in out

    assert main(["list", "--category", "salud"]) == 0
    out = capsys.readouterr().out
    assert f"id: {b}" in out
    assert f"id: {a}" not in out

    assert main(["list", "--search", "zzz"]) == 0
    assert "No tasks found" in capsys.readouterr().out

    assert main(["list", "--status", "archived"]) == 1


def test_toggle_done_and_stats(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    task_id = _add(capsys, "Pay", "rent", "--due", "2000-01-01")

    assert main(["stats"]) == 0
    assert capsys.readouterr().out.strip() == "Total: 1  Completed: 0  Pending: 1  Overdue: 1"

    assert main(["done", str(task_id)]) == 0
    assert main(["done", str(task_id)]) == 0
    assert "already completed" in capsys.readouterr().out
    assert _stored(tmp_path)[0].completed is True

    assert main(["stats"]) == 0
    assert capsys.readouterr().out.strip() == "Total: 1  Completed: 1  Pending: 0  Overdue: 0"

    assert main(["toggle", str(task_id)]) == 0
    assert _stored(tmp_path)[0].completed is False


def test_edit_with_flags(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    task_id = _add(capsys, "Old", "-p", "low")

    assert main(["edit", str(task_id), "--title", "New", "--description", "details"]) == 0

    (task,) = _stored(tmp_path)
    assert task.title == "New"
    assert task.description == "details"
    assert task.priority.value == "low"


def test_edit_interactive_keeps_blank_answers(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    task_id = _add(capsys, "Old", "-d", "keep me")
    answers = iter(["Renamed", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert main(["edit", str(task_id)]) == 0

    (task,) = _stored(tmp_path)
    assert task.title == "Renamed"
    assert task.description == "keep me"


def test_move(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    a = _add(capsys, "a")
    _add(capsys, "b")
    c = _add(capsys, "c")

    assert main(["move", str(c), str(a)]) == 0
    assert [t.title for t in _stored(tmp_path)] == ["c", "a", "b"]

    assert main(["move", str(c), str(c)]) == 0
    assert [t.title for t in _stored(tmp_path)] == ["c", "a", "b"]


def test_rm(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    a = _add(capsys, "a")
    b = _add(capsys, "b")

    assert main(["rm", str(a)]) == 0
    assert [t.id for t in _stored(tmp_path)] == [b]


@pytest.mark.parametrize("argv", [["rm", "1"], ["toggle", "1"], ["show", "1"], ["edit", "1", "--title", "x"]])
def test_unknown_id(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    assert main(argv) == 1
    assert "Task not found: 1" in capsys.readouterr().out


def test_show(capsys: pytest.CaptureFixture[str]) -> None:
    task_id = _add(capsys, "Dentist", "-c", "health", "-d", "bring the forms")

    assert main(["show", str(task_id), "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "Dentist (pending)" in out
    assert "bring the forms" in out


def test_malformed_blob_warns_and_starts_empty(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "tasks.yml").write_text("{broken", encoding="utf-8")

    assert main(["list"]) == 0
    captured = capsys.readouterr()
    assert captured.err.count("Ignoring malformed stored tasks") == 1
    assert "No tasks found" in captured.out


def test_validate(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["validate"]) == 0

    (tmp_path / "tasks.yml").write_text(
        "- id: 1\n  title: a\n- id: 1\n  title: ' '\n",
        encoding="utf-8",
    )
    assert main(["validate"]) == 1
    out = capsys.readouterr().out
    assert "id_duplicate" in out
    assert "title_empty" in out


@pytest.mark.parametrize(
    "content",
    [b"\xff\xfe", b"- id: 1\n  title: t\n  dueDate: 2024-02-30\n", b"{broken"],
)
def test_validate_reports_unreadable_blob(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    content: bytes,
) -> None:
    (tmp_path / "tasks.yml").write_bytes(content)

    assert main(["validate"]) == 1
    assert "tasks.yml" in capsys.readouterr().out


def test_undecodable_blob_warns_and_starts_empty(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "tasks.yml").write_bytes(b"\xff\xfe")

    assert main(["stats"]) == 0
    captured = capsys.readouterr()
    assert captured.out.strip() == "Total: 0  Completed: 0  Pending: 0  Overdue: 0"
    assert captured.err.count("Cannot read stored tasks") == 1


def test_custom_key_and_data_dir(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    other = tmp_path / "other"
    assert main(["add", "x", "--non-interactive", "--data-dir", str(other), "--key", "work"]) == 0

    assert (other / "work.yml").is_file()
    assert not (tmp_path / "tasks.yml").exists()
