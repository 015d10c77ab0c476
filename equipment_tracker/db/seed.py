"""First-run data: a bootstrap admin and a starter set of departments."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..models.department import Department
from ..models.user import User
from ..crud.users import create_user
from ..crud.departments import create_department

logger = logging.getLogger("equipment_tracker.seed")

DEFAULT_DEPARTMENTS: tuple[tuple[str, str], ...] = (
    ("Sound", "Audio gear: speakers, microphones, mixers"),
    ("Band", "Instruments: guitars, keyboards, drums"),
    ("Lighting", "Stage lights, LED fixtures, controllers"),
    ("Office", "Printers, projectors, office equipment"),
    ("Other", "Everything else"),
)


def ensure_admin(db: Session) -> User | None:
    """Create the configured admin account when no admin exists yet."""

    existing = db.execute(select(User).where(User.role == "admin")).scalars().first()
    if existing:
        return None
    taken = db.execute(select(User).where(User.username == settings.ADMIN_USERNAME)).scalars().first()
    if taken:
        logger.warning(
            "seed.admin_username_taken",
            extra={"extra_data": {"username": settings.ADMIN_USERNAME}},
        )
        return None
    admin = create_user(
        db,
        {
            "username": settings.ADMIN_USERNAME,
            "password": settings.ADMIN_PASSWORD,
            "name": settings.ADMIN_NAME,
            "role": "admin",
        },
    )
    logger.warning(
        "seed.admin_created",
        extra={"extra_data": {"username": admin.username}},
    )
    return admin


def seed_default_departments(db: Session) -> int:
    count = db.execute(select(func.count()).select_from(Department)).scalar_one()
    if count:
        return 0
    for name, description in DEFAULT_DEPARTMENTS:
        create_department(db, {"name": name, "description": description})
    logger.info("seed.departments", extra={"extra_data": {"created": len(DEFAULT_DEPARTMENTS)}})
    return len(DEFAULT_DEPARTMENTS)


def seed(db: Session) -> None:
    ensure_admin(db)
    if settings.SEED_DEFAULT_DEPARTMENTS:
        seed_default_departments(db)
