"""Unauthenticated lookup used by the QR code landing page."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import not_found
from ..crud.equipment import get_equipment
from ..db.session import get_db
from ..schemas.equipment import PublicEquipmentOut, to_public_view

router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/equipment/{equipment_id}", response_model=PublicEquipmentOut)
def api_public_equipment(equipment_id: int, db: Session = Depends(get_db)):
    item = get_equipment(db, equipment_id)
    if item is None:
        raise not_found("Equipment")
    return to_public_view(item)
