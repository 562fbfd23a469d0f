# src/task_tracker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task service.

The service depends on Protocols instead of concrete stores.
SQLite stores implement them in production; tests may pass in-memory fakes.
"""

from typing import Protocol

from ..tasks.task_models import Page, Task, TaskFilters, User


class TaskRepo(Protocol):
    def find_by_id(self, task_id: int) -> Task | None: ...

    def find_page(self, filters: TaskFilters, *, page: int, size: int) -> Page[Task]: ...

    def find_all(self) -> list[Task]: ...

    def save(self, task: Task) -> Task: ...

    def exists_by_id(self, task_id: int) -> bool: ...

    def delete_by_id(self, task_id: int) -> None: ...

    def count(self) -> int: ...


class UserRepo(Protocol):
    def find_by_id(self, user_id: int) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def find_all(self) -> list[User]: ...

    def save(self, user: User) -> User: ...

    def exists_by_id(self, user_id: int) -> bool: ...

    def delete_by_id(self, user_id: int) -> None: ...

    def count(self) -> int: ...
