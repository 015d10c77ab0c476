"""CRUD helpers for brands."""

from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from ..models.brand import Brand
from ..models.equipment import Equipment
from ._common import clean_text, commit_or_conflict, utcnow

logger = logging.getLogger("equipment_tracker.crud.brands")

DUPLICATE_MESSAGE = "Brand name already exists"


def _filtered(stmt, search: str | None):
    if search and search.strip():
        stmt = stmt.where(Brand.name.ilike(f"%{search.strip()}%"))
    return stmt


def list_brands(
    db: Session, limit: int = 100, offset: int = 0, search: str | None = None
) -> tuple[list[Brand], int]:
    """Return one alphabetical page of brands and the total match count."""

    stmt = _filtered(select(Brand), search).order_by(Brand.name).limit(limit).offset(offset)
    total = db.execute(_filtered(select(func.count(Brand.id)), search)).scalar_one()
    return db.execute(stmt).scalars().all(), total


def get_brand(db: Session, brand_id: int) -> Brand | None:
    return db.get(Brand, brand_id)


def create_brand(db: Session, payload: dict) -> Brand:
    brand = Brand(
        name=payload["name"].strip(),
        description=clean_text(payload.get("description")),
        created_at=utcnow(),
    )
    db.add(brand)
    commit_or_conflict(db, DUPLICATE_MESSAGE)
    db.refresh(brand)
    logger.info("brand.created", extra={"extra_data": {"brand_id": brand.id}})
    return brand


def update_brand(db: Session, brand: Brand, payload: dict) -> Brand:
    if "name" in payload:
        brand.name = payload["name"].strip()
    if "description" in payload:
        brand.description = clean_text(payload.get("description"))
    commit_or_conflict(db, DUPLICATE_MESSAGE)
    db.refresh(brand)
    return brand


def delete_brand(db: Session, brand: Brand) -> int:
    """Delete a brand; equipment of that brand keeps existing with no brand."""

    brand_id = brand.id
    detached = db.execute(
        update(Equipment).where(Equipment.brand_id == brand_id).values(brand_id=None)
    ).rowcount
    db.delete(brand)
    db.commit()
    logger.info(
        "brand.deleted",
        extra={"extra_data": {"brand_id": brand_id, "detached": detached}},
    )
    return detached
