"""CRUD helpers for equipment records.

List queries take the :class:`~equipment_tracker.core.access.ListScope`
computed by the access policy, so ownership filtering lives in one place.
"""

from __future__ import annotations

import logging

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from ..core.access import ListScope
from ..core.errors import AppError, ErrorKind, rejection
from ..core.validation import ReasonCode, effective_status, validate_equipment_status
from ..models.brand import Brand
from ..models.department import Department
from ..models.equipment import Equipment
from ._common import clean_text, utcnow

logger = logging.getLogger("equipment_tracker.crud.equipment")

UPDATABLE_FIELDS = ("name", "status", "purchase_date", "department_id", "brand_id")


def _apply_filters(
    stmt,
    scope: ListScope,
    status: str | None = None,
    department_id: int | None = None,
    brand_id: int | None = None,
    search: str | None = None,
):
    if scope.restrict_to_owner is not None:
        stmt = stmt.where(Equipment.created_by == scope.restrict_to_owner)
    if status:
        stmt = stmt.where(Equipment.status == status)
    if department_id is not None:
        stmt = stmt.where(Equipment.department_id == department_id)
    if brand_id is not None:
        stmt = stmt.where(Equipment.brand_id == brand_id)
    if search and search.strip():
        stmt = stmt.where(Equipment.name.ilike(f"%{search.strip()}%"))
    return stmt


def list_equipment(
    db: Session,
    scope: ListScope,
    limit: int = 10,
    offset: int = 0,
    **filters,
) -> tuple[list[Equipment], int]:
    """Return one page of equipment (newest first) visible in ``scope`` plus the total."""

    stmt = (
        _apply_filters(select(Equipment), scope, **filters)
        .order_by(desc(Equipment.created_at), desc(Equipment.id))
        .limit(limit)
        .offset(offset)
    )
    total = db.execute(_apply_filters(select(func.count(Equipment.id)), scope, **filters)).scalar_one()
    return db.execute(stmt).unique().scalars().all(), total


def get_equipment(db: Session, equipment_id: int) -> Equipment | None:
    return db.get(Equipment, equipment_id)


def _check_references(db: Session, data: dict) -> None:
    for field, model in (("department_id", Department), ("brand_id", Brand)):
        ref = data.get(field)
        if ref is not None and db.get(model, ref) is None:
            raise AppError(
                ErrorKind.VALIDATION_FAILED,
                "Validation failed",
                reason=ReasonCode.UNKNOWN_REFERENCE.value,
                field=field,
            )


def _checked_status(value, current: str | None = None) -> str:
    result = validate_equipment_status(value)
    if not result:
        raise rejection(result)
    return effective_status(result, value, current)


def create_equipment(db: Session, payload: dict, owner_id: int | None) -> Equipment:
    """Persist a new item owned by ``owner_id``; a missing status becomes ``new``."""

    status = _checked_status(payload.get("status"))
    _check_references(db, payload)
    item = Equipment(
        name=payload["name"].strip(),
        status=status,
        purchase_date=clean_text(payload.get("purchase_date")),
        department_id=payload.get("department_id"),
        brand_id=payload.get("brand_id"),
        created_by=owner_id,
        created_at=utcnow(),
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info(
        "equipment.created",
        extra={"extra_data": {"equipment_id": item.id, "owner_id": owner_id, "status": item.status}},
    )
    return item


def update_equipment(db: Session, item: Equipment, payload: dict) -> Equipment:
    """Apply only the keys present in ``payload``.

    ``status`` set to ``None`` means "leave as is"; the relational ids may be
    set to ``None`` to detach the item from its department or brand.
    """

    data = {k: v for k, v in payload.items() if k in UPDATABLE_FIELDS}
    if not data:
        return item
    if "status" in data:
        data["status"] = _checked_status(data["status"], item.status)
    _check_references(db, data)
    if "name" in data:
        item.name = data["name"].strip()
    if "status" in data:
        item.status = data["status"]
    if "purchase_date" in data:
        item.purchase_date = clean_text(data["purchase_date"])
    if "department_id" in data:
        item.department_id = data["department_id"]
    if "brand_id" in data:
        item.brand_id = data["brand_id"]
    db.commit()
    db.refresh(item)
    logger.info(
        "equipment.updated",
        extra={"extra_data": {"equipment_id": item.id, "fields": sorted(data)}},
    )
    return item


def delete_equipment(db: Session, item: Equipment) -> None:
    equipment_id = item.id
    db.delete(item)
    db.commit()
    logger.info("equipment.deleted", extra={"extra_data": {"equipment_id": equipment_id}})
