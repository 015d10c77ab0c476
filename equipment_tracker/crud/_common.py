"""Helpers shared by the CRUD modules."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import ConflictError


def utcnow() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def clean_text(value: object) -> str | None:
    """Strip strings and turn blanks into ``None``."""

    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def commit_or_conflict(db: Session, message: str, field: str = "name") -> None:
    """Commit, translating unique-constraint violations into a conflict."""

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(message, field=field) from exc
