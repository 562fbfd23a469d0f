# src/task_tracker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite stores into TaskService and AppState,
- resolves the initial console identity.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.identity import Caller
from ..core.state import AppState
from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore
from ..tasks.user_store import UserStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.tasks_db_path)
    user_store = UserStore(settings.tasks_db_path)
    service = TaskService(task_store, user_store, max_page_size=settings.max_page_size)

    state = AppState(
        settings=settings,
        task_store=task_store,
        user_store=user_store,
        service=service,
    )

    email = getattr(settings, "caller_email", "")
    if email:
        user = user_store.find_by_email(email)
        if user is None:
            logger.warning("Configured caller %s is not a known user; console starts anonymous.", email)
        else:
            state.caller = Caller.for_user(user)
            logger.info("Console acting as %s (%s)", user.email, user.role.value)

    return state
