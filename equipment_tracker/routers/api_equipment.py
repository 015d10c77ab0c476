"""Equipment routes.

Every single-item route goes through ``_visible_equipment``: an item the
caller may not access is reported exactly like a missing one, so ids owned
by other users are never confirmed to exist.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core import pagination
from ..core.access import Caller, Target, can_access, list_scope
from ..core.config import settings
from ..core.errors import not_found, rejection
from ..core.labels import equipment_qr_code
from ..core.validation import (
    check_equipment_create,
    check_equipment_update,
    effective_status,
    validate_equipment_status,
)
from ..crud.equipment import (
    create_equipment,
    delete_equipment,
    get_equipment,
    list_equipment,
    update_equipment,
)
from ..db.session import get_db
from ..deps.auth import require_caller
from ..models.equipment import Equipment
from ..schemas.common import MessageOut, Paginated
from ..schemas.equipment import EquipmentCreate, EquipmentOut, EquipmentUpdate, QRCodeOut

router = APIRouter(prefix="/api/equipment", tags=["equipment"])


def _visible_equipment(db: Session, caller: Caller, equipment_id: int) -> Equipment:
    item = get_equipment(db, equipment_id)
    if item is None or not can_access(caller, Target(owner_id=item.created_by)):
        raise not_found("Equipment")
    return item


@router.get("", response_model=Paginated[EquipmentOut])
def api_list_equipment(
    page: str | None = None,
    limit: str | None = None,
    status: str | None = None,
    department_id: int | None = Query(default=None),
    department_id_legacy: int | None = Query(default=None, alias="departmentId", include_in_schema=False),
    brand_id: int | None = Query(default=None),
    brand_id_legacy: int | None = Query(default=None, alias="brandId", include_in_schema=False),
    search: str | None = None,
    caller: Caller = Depends(require_caller),
    db: Session = Depends(get_db),
):
    if status:
        result = validate_equipment_status(status)
        if not result:
            raise rejection(result)
    req = pagination.normalize(page, limit, settings.PAGE_MAX_LIMIT, settings.PAGE_DEFAULT_LIMIT)
    rows, total = list_equipment(
        db,
        list_scope(caller),
        limit=req.limit,
        offset=pagination.offset(req.page, req.limit),
        status=status or None,
        department_id=department_id if department_id is not None else department_id_legacy,
        brand_id=brand_id if brand_id is not None else brand_id_legacy,
        search=search,
    )
    return Paginated[EquipmentOut](
        data=[EquipmentOut.model_validate(r) for r in rows],
        pagination=pagination.describe(total, req.page, req.limit),
    )


@router.get("/{equipment_id}", response_model=EquipmentOut)
def api_get_equipment(equipment_id: int, caller: Caller = Depends(require_caller), db: Session = Depends(get_db)):
    return _visible_equipment(db, caller, equipment_id)


@router.post("", response_model=EquipmentOut, status_code=201)
def api_create_equipment(
    payload: EquipmentCreate,
    caller: Caller = Depends(require_caller),
    db: Session = Depends(get_db),
):
    data = payload.model_dump(exclude_unset=True)
    result = check_equipment_create(data)
    if not result:
        raise rejection(result)
    data["status"] = effective_status(validate_equipment_status(data.get("status")), data.get("status"))
    return create_equipment(db, data, owner_id=caller.id)


@router.put("/{equipment_id}", response_model=EquipmentOut)
def api_update_equipment(
    equipment_id: int,
    payload: EquipmentUpdate,
    caller: Caller = Depends(require_caller),
    db: Session = Depends(get_db),
):
    item = _visible_equipment(db, caller, equipment_id)
    data = payload.model_dump(exclude_unset=True)
    result = check_equipment_update(data)
    if not result:
        raise rejection(result)
    if "status" in data:
        data["status"] = effective_status(validate_equipment_status(data["status"]), data["status"], item.status)
    return update_equipment(db, item, data)


@router.delete("/{equipment_id}", response_model=MessageOut)
def api_delete_equipment(equipment_id: int, caller: Caller = Depends(require_caller), db: Session = Depends(get_db)):
    item = _visible_equipment(db, caller, equipment_id)
    delete_equipment(db, item)
    return MessageOut(message="Equipment deleted")


@router.get("/{equipment_id}/qrcode", response_model=QRCodeOut)
def api_equipment_qrcode(equipment_id: int, caller: Caller = Depends(require_caller), db: Session = Depends(get_db)):
    item = _visible_equipment(db, caller, equipment_id)
    return QRCodeOut(qr_code=equipment_qr_code(item))
