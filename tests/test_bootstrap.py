# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

from task_tracker.cli.bootstrap import create_initial_state
from task_tracker.config import Settings
from task_tracker.tasks.task_models import Role, User
from task_tracker.tasks.user_store import UserStore


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKTRACKER_MAX_PAGE_SIZE", "20")
    monkeypatch.setenv("TASKTRACKER_DEFAULT_PAGE_SIZE", "50")
    monkeypatch.setenv("TASKTRACKER_CALLER_EMAIL", " admin@example.com ")
    monkeypatch.delenv("TASKTRACKER_TASKS_DB_PATH", raising=False)

    s = Settings.from_env()

    assert s.data_dir == tmp_path
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.max_page_size == 20
    assert s.default_page_size == 20
    assert s.caller_email == "admin@example.com"


def test_settings_ignore_bad_ints(monkeypatch) -> None:
    monkeypatch.setenv("TASKTRACKER_MAX_PAGE_SIZE", "lots")
    assert Settings.from_env().max_page_size == 100


def test_bootstrap_wires_stores_and_caller(settings) -> None:
    UserStore(settings.tasks_db_path).save(User(id=None, email="admin@example.com", role=Role.ADMIN))
    settings.caller_email = "admin@example.com"

    state = create_initial_state(settings=settings)

    assert state.caller is not None
    assert state.caller.authorities == frozenset({"ROLE_ADMIN"})
    assert state.task_store.db_path == settings.tasks_db_path
    assert state.service.get_all_tasks() == []


def test_bootstrap_unknown_caller_starts_anonymous(settings) -> None:
    settings.caller_email = "ghost@example.com"
    assert create_initial_state(settings=settings).caller is None
