# src/task_tracker/core/identity.py

"""
Caller identity as seen by the task service.

Authentication lives outside this package; callers arrive as an email
(the username) plus the authority strings granted to them. The service turns
that into a CallerRole once per call and branches on it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

ROLE_ADMIN = "ROLE_ADMIN"
ROLE_USER = "ROLE_USER"


class CallerRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
    UNAUTHORIZED = "unauthorized"


@dataclass(slots=True, frozen=True)
class Caller:
    email: str
    authorities: frozenset[str]

    @classmethod
    def of(cls, email: str, authorities: Iterable[str]) -> Caller:
        return cls(email=email, authorities=frozenset(authorities))

    @classmethod
    def for_user(cls, user) -> Caller:
        """Identity for a stored user (email + the authority of its role)."""
        return cls(email=user.email, authorities=frozenset({user.role.authority}))

    @property
    def role(self) -> CallerRole:
        return resolve_role(self.authorities)


def resolve_role(authorities: Iterable[str]) -> CallerRole:
    """ADMIN wins over USER when both are granted; anything else is UNAUTHORIZED."""
    granted = set(authorities)
    if ROLE_ADMIN in granted:
        return CallerRole.ADMIN
    if ROLE_USER in granted:
        return CallerRole.USER
    return CallerRole.UNAUTHORIZED
