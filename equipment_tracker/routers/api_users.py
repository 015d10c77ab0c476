"""Account administration. Every route here requires an admin caller."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core import pagination
from ..core.access import Caller, UserRef, can_delete_user
from ..core.config import settings
from ..core.errors import forbidden, not_found, rejection
from ..core.validation import check_user_create, check_user_update
from ..crud.users import create_user, delete_user, get_user, list_users, update_user
from ..db.session import get_db
from ..deps.auth import require_admin
from ..schemas.common import MessageOut, Paginated
from ..schemas.user import UserCreate, UserOut, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=Paginated[UserOut])
def api_list_users(
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    req = pagination.normalize(page, limit, settings.PAGE_MAX_LIMIT, settings.PAGE_DEFAULT_LIMIT)
    users, total = list_users(db, limit=req.limit, offset=pagination.offset(req.page, req.limit), search=search)
    return Paginated[UserOut](
        data=[UserOut.model_validate(u) for u in users],
        pagination=pagination.describe(total, req.page, req.limit),
    )


@router.post("", response_model=UserOut, status_code=201)
def api_create_user(payload: UserCreate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    result = check_user_create(data)
    if not result:
        raise rejection(result)
    return create_user(db, data)


@router.put("/{user_id}", response_model=UserOut)
def api_update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    user = get_user(db, user_id)
    if not user:
        raise not_found("User")
    data = payload.model_dump(exclude_unset=True)
    result = check_user_update(data)
    if not result:
        raise rejection(result)
    if not data:
        return user
    return update_user(db, user, data)


@router.delete("/{user_id}", response_model=MessageOut)
def api_delete_user(user_id: int, caller: Caller = Depends(require_admin), db: Session = Depends(get_db)):
    if not can_delete_user(caller, UserRef(id=user_id)):
        raise forbidden("Cannot delete yourself", reason="SELF_DELETE")
    user = get_user(db, user_id)
    if not user:
        raise not_found("User")
    delete_user(db, user)
    return MessageOut(message="User deleted")
