"""CRUD helpers for user accounts."""

from __future__ import annotations

import logging

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.orm import Session

from ..core.security import hash_password
from ..core.validation import DEFAULT_ROLE
from ..models.equipment import Equipment
from ..models.user import User
from ._common import commit_or_conflict, utcnow

logger = logging.getLogger("equipment_tracker.crud.users")


def _filtered(stmt, search: str | None):
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(or_(User.username.ilike(pattern), User.name.ilike(pattern)))
    return stmt


def list_users(db: Session, limit: int = 100, offset: int = 0, search: str | None = None) -> tuple[list[User], int]:
    stmt = _filtered(select(User), search).order_by(desc(User.created_at), desc(User.id)).limit(limit).offset(offset)
    total = db.execute(_filtered(select(func.count(User.id)), search)).scalar_one()
    return db.execute(stmt).scalars().all(), total


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.execute(select(User).where(User.username == username)).scalars().first()


def create_user(db: Session, payload: dict) -> User:
    """Persist a new account; ``payload["password"]`` is plaintext and gets hashed here."""

    user = User(
        username=payload["username"].strip(),
        password=hash_password(payload["password"]),
        name=payload["name"].strip(),
        role=payload.get("role") or DEFAULT_ROLE,
        created_at=utcnow(),
    )
    db.add(user)
    commit_or_conflict(db, "Username already exists", field="username")
    db.refresh(user)
    logger.info("user.created", extra={"extra_data": {"user_id": user.id, "role": user.role}})
    return user


def update_user(db: Session, user: User, payload: dict) -> User:
    """Apply name, role and password changes; keys that are absent stay untouched."""

    if payload.get("name") is not None:
        user.name = payload["name"].strip()
    if payload.get("role") is not None:
        user.role = payload["role"]
    if payload.get("password"):
        user.password = hash_password(payload["password"])
    commit_or_conflict(db, "Username already exists", field="username")
    db.refresh(user)
    logger.info("user.updated", extra={"extra_data": {"user_id": user.id, "fields": sorted(payload)}})
    return user


def delete_user(db: Session, user: User) -> None:
    """Delete an account; equipment it created stays, with no creator."""

    user_id = user.id
    db.execute(update(Equipment).where(Equipment.created_by == user_id).values(created_by=None))
    db.delete(user)
    db.commit()
    logger.info("user.deleted", extra={"extra_data": {"user_id": user_id}})
