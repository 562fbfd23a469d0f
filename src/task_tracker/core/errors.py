# src/task_tracker/core/errors.py

"""
Failure taxonomy raised by the task service.

Every error is terminal for the call that raised it: nothing is retried and
nothing is persisted once one of these is raised.
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for all service-level failures."""


class NotFound(TaskTrackerError, LookupError):
    """A task or user lookup missed."""


class TaskNotFound(NotFound):
    pass


class UserNotFound(NotFound):
    pass


class Forbidden(TaskTrackerError):
    """Role or ownership check refused the mutation."""


class InvalidArgument(TaskTrackerError, ValueError):
    """A required field is missing/empty, or a value cannot be converted."""


class InvalidState(TaskTrackerError):
    """The task is in a state that does not allow the requested operation."""
