"""Who may see and change what.

Every decision here is a plain predicate over the caller's identity and the
minimal facts about the target. Nothing is cached and nothing is raised; the
routers turn a ``False`` into a rejection.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Caller(BaseModel):
    """The authenticated identity behind a request."""

    model_config = ConfigDict(frozen=True)

    id: int
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Target(BaseModel):
    """Ownership facts about an equipment record."""

    model_config = ConfigDict(frozen=True)

    owner_id: int | None = None


class UserRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int


class ListScope(BaseModel):
    """Ownership predicate a list query must apply (``None`` means all rows)."""

    model_config = ConfigDict(frozen=True)

    restrict_to_owner: int | None = None


def can_access(caller: Caller, target: Target) -> bool:
    if caller.is_admin:
        return True
    return target.owner_id == caller.id


def list_scope(caller: Caller) -> ListScope:
    if caller.is_admin:
        return ListScope(restrict_to_owner=None)
    return ListScope(restrict_to_owner=caller.id)


def can_manage_users(caller: Caller) -> bool:
    return caller.is_admin


def can_delete_user(caller: Caller, target: UserRef) -> bool:
    """Self-deletion is refused for everyone, admins included."""

    return caller.id != target.id


__all__ = [
    "Caller",
    "ListScope",
    "Role",
    "Target",
    "UserRef",
    "can_access",
    "can_delete_user",
    "can_manage_users",
    "list_scope",
]
