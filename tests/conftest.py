# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.identity import Caller
from task_tracker.core.state import AppState
from task_tracker.tasks.task_models import Role, User
from task_tracker.tasks.task_service import TaskService
from task_tracker.tasks.task_store import TaskStore
from task_tracker.tasks.user_store import UserStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="task-tracker-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        default_page_size=10,
        max_page_size=50,
        caller_email="",
    )


@pytest.fixture()
def task_store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def user_store(settings: SimpleNamespace) -> UserStore:
    return UserStore(settings.tasks_db_path)


@pytest.fixture()
def users(user_store: UserStore) -> SimpleNamespace:
    return SimpleNamespace(
        admin=user_store.save(User(id=None, email="admin@example.com", role=Role.ADMIN)),
        alice=user_store.save(User(id=None, email="alice@example.com", role=Role.USER)),
        bob=user_store.save(User(id=None, email="bob@example.com", role=Role.USER)),
    )


@pytest.fixture()
def callers(users: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(
        admin=Caller.for_user(users.admin),
        alice=Caller.for_user(users.alice),
        bob=Caller.for_user(users.bob),
        stranger=Caller.of("mallory@example.com", ["ROLE_GUEST"]),
    )


@pytest.fixture()
def service(task_store: TaskStore, user_store: UserStore, settings: SimpleNamespace) -> TaskService:
    """
    TaskService wired to real SQLite stores.

    Store correctness (filters, pagination, save/delete) is part of what we test.
    """
    return TaskService(task_store, user_store, max_page_size=settings.max_page_size)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    task_store: TaskStore,
    user_store: UserStore,
    service: TaskService,
) -> AppState:
    return AppState(
        settings=settings,
        task_store=task_store,
        user_store=user_store,
        service=service,
    )
