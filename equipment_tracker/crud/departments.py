"""CRUD helpers for departments."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ..models.department import Department
from ..models.equipment import Equipment
from ._common import clean_text, commit_or_conflict, utcnow

logger = logging.getLogger("equipment_tracker.crud.departments")

DUPLICATE_MESSAGE = "Department name already exists"


def _filtered(stmt, search: str | None):
    if search and search.strip():
        stmt = stmt.where(Department.name.ilike(f"%{search.strip()}%"))
    return stmt


def list_departments(
    db: Session, limit: int = 100, offset: int = 0, search: str | None = None
) -> tuple[list[Department], int]:
    """Return one alphabetical page of departments and the total match count."""

    stmt = _filtered(select(Department), search).order_by(Department.name).limit(limit).offset(offset)
    total = db.execute(_filtered(select(func.count(Department.id)), search)).scalar_one()
    return db.execute(stmt).scalars().all(), total


def get_department(db: Session, department_id: int) -> Department | None:
    return db.get(Department, department_id)


def create_department(db: Session, payload: dict) -> Department:
    department = Department(
        name=payload["name"].strip(),
        description=clean_text(payload.get("description")),
        created_at=utcnow(),
    )
    db.add(department)
    commit_or_conflict(db, DUPLICATE_MESSAGE)
    db.refresh(department)
    logger.info("department.created", extra={"extra_data": {"department_id": department.id}})
    return department


def update_department(db: Session, department: Department, payload: dict) -> Department:
    if "name" in payload:
        department.name = payload["name"].strip()
    if "description" in payload:
        department.description = clean_text(payload.get("description"))
    commit_or_conflict(db, DUPLICATE_MESSAGE)
    db.refresh(department)
    return department


def delete_department(db: Session, department: Department) -> int:
    """Delete a department and detach its equipment. Returns how many rows were detached."""

    department_id = department.id
    detached = db.execute(
        update(Equipment).where(Equipment.department_id == department_id).values(department_id=None)
    ).rowcount
    db.delete(department)
    db.commit()
    logger.info(
        "department.deleted",
        extra={"extra_data": {"department_id": department_id, "detached": detached}},
    )
    return detached
