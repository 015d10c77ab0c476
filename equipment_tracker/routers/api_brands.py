from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core import pagination
from ..core.config import settings
from ..core.errors import not_found, rejection
from ..core.validation import check_named_create, check_named_update
from ..crud.brands import create_brand, delete_brand, get_brand, list_brands, update_brand
from ..db.session import get_db
from ..deps.auth import require_caller
from ..schemas.brand import BrandCreate, BrandOut, BrandUpdate
from ..schemas.common import MessageOut, Paginated

router = APIRouter(prefix="/api/brands", tags=["brands"], dependencies=[Depends(require_caller)])


@router.get("", response_model=Paginated[BrandOut])
def api_list_brands(
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    req = pagination.normalize(page, limit, settings.PAGE_MAX_LIMIT, settings.PAGE_DEFAULT_LIMIT)
    rows, total = list_brands(db, limit=req.limit, offset=pagination.offset(req.page, req.limit), search=search)
    return Paginated[BrandOut](
        data=[BrandOut.model_validate(r) for r in rows],
        pagination=pagination.describe(total, req.page, req.limit),
    )


@router.get("/{brand_id}", response_model=BrandOut)
def api_get_brand(brand_id: int, db: Session = Depends(get_db)):
    brand = get_brand(db, brand_id)
    if not brand:
        raise not_found("Brand")
    return brand


@router.post("", response_model=BrandOut, status_code=201)
def api_create_brand(payload: BrandCreate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    result = check_named_create(data)
    if not result:
        raise rejection(result)
    return create_brand(db, data)


@router.put("/{brand_id}", response_model=BrandOut)
def api_update_brand(brand_id: int, payload: BrandUpdate, db: Session = Depends(get_db)):
    brand = get_brand(db, brand_id)
    if not brand:
        raise not_found("Brand")
    data = payload.model_dump(exclude_unset=True)
    result = check_named_update(data)
    if not result:
        raise rejection(result)
    return update_brand(db, brand, data) if data else brand


@router.delete("/{brand_id}", response_model=MessageOut)
def api_delete_brand(brand_id: int, db: Session = Depends(get_db)):
    brand = get_brand(db, brand_id)
    if not brand:
        raise not_found("Brand")
    delete_brand(db, brand)
    return MessageOut(message="Brand deleted")
