# tests/test_task_store.py

from __future__ import annotations

import itertools
import sqlite3
from pathlib import Path

import pytest

from task_tracker.tasks.task_models import Role, Task, TaskFilters, TaskPriority, TaskStatus, User
from task_tracker.tasks.task_store import SQLiteStore, TaskStore
from task_tracker.tasks.user_store import UserStore


def _seed(store: TaskStore) -> list[Task]:
    rows = [
        Task(id=None, title="My Task 1", status=TaskStatus.TODO, priority=TaskPriority.LOW, author_id=1, assignee_id=2),
        Task(id=None, title="Write report", status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH, author_id=1, assignee_id=3),
        Task(id=None, title="task: review", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH, author_id=2),
        Task(id=None, title="Deploy", status=TaskStatus.TODO, priority=TaskPriority.MEDIUM, author_id=2, assignee_id=2),
        Task(id=None, title="100% coverage", status=TaskStatus.TODO, priority=TaskPriority.HIGH, author_id=3, assignee_id=3),
    ]
    return [store.save(t) for t in rows]


def test_save_assigns_id_and_roundtrips(task_store: TaskStore) -> None:
    task = task_store.save(Task(id=None, title="A", description="d", author_id=5))
    assert task.id is not None and task.id > 0

    loaded = task_store.find_by_id(task.id)
    assert loaded == task
    assert loaded.status is TaskStatus.TODO
    assert loaded.priority is TaskPriority.MEDIUM


def test_save_existing_updates_in_place(task_store: TaskStore) -> None:
    task = task_store.save(Task(id=None, title="A"))
    task.status = TaskStatus.COMPLETED
    task.assignee_id = 9
    task_store.save(task)

    assert task_store.count() == 1
    loaded = task_store.find_by_id(task.id)
    assert loaded.status is TaskStatus.COMPLETED
    assert loaded.assignee_id == 9


def test_exists_and_delete(task_store: TaskStore) -> None:
    task = task_store.save(Task(id=None, title="A"))
    assert task_store.exists_by_id(task.id)
    task_store.delete_by_id(task.id)
    assert not task_store.exists_by_id(task.id)
    assert task_store.find_by_id(task.id) is None


def test_find_all_is_ordered_by_id(task_store: TaskStore) -> None:
    saved = _seed(task_store)
    assert [t.id for t in task_store.find_all()] == [t.id for t in saved]


def test_title_filter_is_case_insensitive_substring(task_store: TaskStore) -> None:
    _seed(task_store)
    page = task_store.find_page(TaskFilters(title="task"), page=0, size=10)
    assert {t.title for t in page.items} == {"My Task 1", "task: review"}


def test_title_filter_treats_percent_literally(task_store: TaskStore) -> None:
    _seed(task_store)
    page = task_store.find_page(TaskFilters(title="100%"), page=0, size=10)
    assert [t.title for t in page.items] == ["100% coverage"]


def test_every_filter_combination_matches_conjunction(task_store: TaskStore) -> None:
    saved = _seed(task_store)
    options = {
        "title": [None, "task", "RE"],
        "status": [None, TaskStatus.TODO, TaskStatus.COMPLETED],
        "priority": [None, TaskPriority.HIGH],
        "author_id": [None, 1, 2],
        "assignee_id": [None, 2, 3],
    }
    keys = list(options)
    for combo in itertools.product(*options.values()):
        filters = TaskFilters(**dict(zip(keys, combo)))
        page = task_store.find_page(filters, page=0, size=50)
        expected = [t.id for t in saved if filters.matches(t)]
        assert [t.id for t in page.items] == expected, filters
        assert page.total == len(expected)


def test_pagination_reports_total(task_store: TaskStore) -> None:
    saved = _seed(task_store)

    first = task_store.find_page(TaskFilters(), page=0, size=2)
    last = task_store.find_page(TaskFilters(), page=2, size=2)
    beyond = task_store.find_page(TaskFilters(), page=5, size=2)

    assert [t.id for t in first.items] == [saved[0].id, saved[1].id]
    assert [t.id for t in last.items] == [saved[4].id]
    assert beyond.items == []
    assert first.total == last.total == beyond.total == 5
    assert first.total_pages == 3


def test_user_store_roundtrip_and_unique_email(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "users.sqlite3")
    u = store.save(User(id=None, email="a@example.com", role=Role.ADMIN))

    assert store.find_by_id(u.id) == u
    assert store.find_by_email("a@example.com") == u
    assert store.find_by_email("missing@example.com") is None

    with pytest.raises(sqlite3.IntegrityError):
        store.save(User(id=None, email="a@example.com"))

    store.delete_by_id(u.id)
    assert not store.exists_by_id(u.id)


def test_stores_share_one_database_file(tmp_path: Path) -> None:
    db = tmp_path / "shared.sqlite3"
    users = UserStore(db)
    tasks = TaskStore(db)
    users.save(User(id=None, email="x@example.com"))
    tasks.save(Task(id=None, title="t"))
    assert users.count() == 1
    assert tasks.count() == 1


def test_base_store_cannot_be_instantiated(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        SQLiteStore(tmp_path / "x.sqlite3")
