# tests/fakes.py

from __future__ import annotations

import threading
from dataclasses import replace

from task_tracker.tasks.task_models import Page, Task, TaskFilters, User


class InMemoryTaskRepo:
    """
    Dict-backed TaskRepo.

    Stores copies so callers can only change persisted state through save().
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[int, Task] = {}
        self.saves = 0
        self._next_id = 1
        for t in tasks or []:
            self.save(t)
        self.saves = 0

    def find_by_id(self, task_id: int) -> Task | None:
        t = self.tasks.get(task_id)
        return replace(t) if t is not None else None

    def find_page(self, filters: TaskFilters, *, page: int, size: int) -> Page[Task]:
        matched = [replace(t) for _, t in sorted(self.tasks.items()) if filters.matches(t)]
        start = page * size
        return Page(items=matched[start : start + size], total=len(matched), page=page, size=size)

    def find_all(self) -> list[Task]:
        return [replace(t) for _, t in sorted(self.tasks.items())]

    def save(self, task: Task) -> Task:
        if task.id is None:
            task.id = self._next_id
        self._next_id = max(self._next_id, task.id + 1)
        self.tasks[task.id] = replace(task)
        self.saves += 1
        return task

    def exists_by_id(self, task_id: int) -> bool:
        return task_id in self.tasks

    def delete_by_id(self, task_id: int) -> None:
        self.tasks.pop(task_id, None)

    def count(self) -> int:
        return len(self.tasks)


class InMemoryUserRepo:
    def __init__(self, users: list[User] | None = None) -> None:
        self.users: dict[int, User] = {}
        for i, u in enumerate(users or [], start=1):
            if u.id is None:
                u.id = i
            self.users[u.id] = u

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def find_all(self) -> list[User]:
        return list(self.users.values())

    def save(self, user: User) -> User:
        if user.id is None:
            user.id = max(self.users, default=0) + 1
        self.users[user.id] = user
        return user

    def exists_by_id(self, user_id: int) -> bool:
        return user_id in self.users

    def delete_by_id(self, user_id: int) -> None:
        self.users.pop(user_id, None)

    def count(self) -> int:
        return len(self.users)


class LockstepTaskRepo(InMemoryTaskRepo):
    """
    Makes N concurrent callers all load a task before any of them saves.

    Used to reproduce the load + save race of the update path.
    """

    def __init__(self, tasks: list[Task], parties: int) -> None:
        super().__init__(tasks)
        self._barrier = threading.Barrier(parties, timeout=5.0)

    def find_by_id(self, task_id: int) -> Task | None:
        task = super().find_by_id(task_id)
        self._barrier.wait()
        return task
