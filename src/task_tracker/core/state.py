# src/task_tracker/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_service import TaskService
from ..tasks.task_store import TaskStore
from ..tasks.user_store import UserStore
from .identity import Caller


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskStore
    user_store: UserStore
    service: TaskService

    # Identity the console is currently acting as (None = anonymous).
    caller: Caller | None = None
