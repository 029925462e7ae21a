# tests/test_edit.py

from __future__ import annotations

import pytest

from taskdeck.engine.edit import EditSession
from taskdeck.engine.model import Priority
from taskdeck.engine.store import TaskStore


@pytest.fixture()
def session(store: TaskStore) -> EditSession:
    return EditSession(store)


def test_start_edit_unknown_id_is_noop(session: EditSession) -> None:
    assert session.start_edit(99) is False
    assert session.draft is None
    assert not session.active


def test_draft_is_a_copy(store: TaskStore, session: EditSession) -> None:
    task = store.create("Old", "old desc")
    session.start_edit(task.id)

    session.edit_field("title", "New")
    session.edit_field("description", "new desc")

    assert session.draft.title == "New"
    assert store.get(task.id).title == "Old"
    assert store.get(task.id).description == "old desc"


def test_save_merges_text_fields(store: TaskStore, session: EditSession) -> None:
    a = store.create("a")
    task = store.create("Old", priority=Priority.HIGH)
    c = store.create("c")

    session.start_edit(task.id)
    session.edit_field("title", "New")
    assert session.save_edit() is True

    saved = store.get(task.id)
    assert saved.title == "New"
    assert saved.description == ""
    assert saved.priority is Priority.HIGH
    assert [t.id for t in store.tasks] == [a.id, task.id, c.id]
    assert session.draft is None


def test_save_keeps_changes_made_to_other_fields(store: TaskStore, session: EditSession) -> None:
    task = store.create("Old")
    session.start_edit(task.id)
    session.edit_field("title", "New")

    store.toggle_complete(task.id)
    session.save_edit()

    saved = store.get(task.id)
    assert saved.title == "New"
    assert saved.completed is True


def test_cancel_discards_draft(store: TaskStore, session: EditSession) -> None:
    task = store.create("Old")
    session.start_edit(task.id)
    session.edit_field("title", "New")

    session.cancel_edit()

    assert session.draft is None
    assert store.get(task.id).title == "Old"
    assert session.save_edit() is False


def test_new_edit_replaces_previous_draft(store: TaskStore, session: EditSession) -> None:
    first = store.create("first")
    second = store.create("second")

    session.start_edit(first.id)
    session.edit_field("title", "lost")
    session.start_edit(second.id)
    session.save_edit()

    assert store.get(first.id).title == "first"
    assert store.get(second.id).title == "second"


def test_restarting_edit_on_same_task_resets_draft(store: TaskStore, session: EditSession) -> None:
    task = store.create("first")

    session.start_edit(task.id)
    session.edit_field("title", "lost")
    session.start_edit(task.id)

    assert session.draft.title == "first"


def test_edit_field_without_draft_is_noop(store: TaskStore, session: EditSession) -> None:
    task = store.create("a")
    session.edit_field("title", "b")

    assert session.draft is None
    assert store.get(task.id).title == "a"


def test_edit_field_rejects_other_fields(store: TaskStore, session: EditSession) -> None:
    task = store.create("a")
    session.start_edit(task.id)

    with pytest.raises(ValueError):
        session.edit_field("completed", True)


def test_save_after_delete_is_noop(store: TaskStore, session: EditSession) -> None:
    task = store.create("a")
    keep = store.create("b")
    session.start_edit(task.id)
    store.delete(task.id)

    assert session.save_edit() is False
    assert [t.id for t in store.tasks] == [keep.id]
    assert session.draft is None
