from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core import pagination
from ..core.config import settings
from ..core.errors import not_found, rejection
from ..core.validation import check_named_create, check_named_update
from ..crud.departments import (
    create_department,
    delete_department,
    get_department,
    list_departments,
    update_department,
)
from ..db.session import get_db
from ..deps.auth import require_caller
from ..schemas.common import MessageOut, Paginated
from ..schemas.department import DepartmentCreate, DepartmentOut, DepartmentUpdate

router = APIRouter(prefix="/api/departments", tags=["departments"], dependencies=[Depends(require_caller)])


@router.get("", response_model=Paginated[DepartmentOut])
def api_list_departments(
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    req = pagination.normalize(page, limit, settings.PAGE_MAX_LIMIT, settings.PAGE_DEFAULT_LIMIT)
    rows, total = list_departments(db, limit=req.limit, offset=pagination.offset(req.page, req.limit), search=search)
    return Paginated[DepartmentOut](
        data=[DepartmentOut.model_validate(r) for r in rows],
        pagination=pagination.describe(total, req.page, req.limit),
    )


@router.get("/{department_id}", response_model=DepartmentOut)
def api_get_department(department_id: int, db: Session = Depends(get_db)):
    department = get_department(db, department_id)
    if not department:
        raise not_found("Department")
    return department


@router.post("", response_model=DepartmentOut, status_code=201)
def api_create_department(payload: DepartmentCreate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    result = check_named_create(data)
    if not result:
        raise rejection(result)
    return create_department(db, data)


@router.put("/{department_id}", response_model=DepartmentOut)
def api_update_department(department_id: int, payload: DepartmentUpdate, db: Session = Depends(get_db)):
    department = get_department(db, department_id)
    if not department:
        raise not_found("Department")
    data = payload.model_dump(exclude_unset=True)
    result = check_named_update(data)
    if not result:
        raise rejection(result)
    if not data:
        return department
    return update_department(db, department, data)


@router.delete("/{department_id}", response_model=MessageOut)
def api_delete_department(department_id: int, db: Session = Depends(get_db)):
    department = get_department(db, department_id)
    if not department:
        raise not_found("Department")
    delete_department(db, department)
    return MessageOut(message="Department deleted")
