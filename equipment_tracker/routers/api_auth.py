from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.access import Caller
from ..core.errors import AppError, ErrorKind, rejection
from ..core.security import decode_token, issue_token_pair, verify_password
from ..core.validation import validate_credential
from ..crud.users import get_user, get_user_by_username
from ..db.session import get_db
from ..deps.auth import require_caller
from ..schemas.auth import LoginRequest, LoginResponse, MeResponse, RefreshRequest
from ..schemas.user import UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("equipment_tracker.auth")


def _login_response(user) -> LoginResponse:
    pair = issue_token_pair(user.id, user.role, username=user.username, name=user.name)
    return LoginResponse(
        user=UserOut.model_validate(user),
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        token_type=pair.token_type,
        expires_in=pair.expires_in,
    )


@router.post("/login", response_model=LoginResponse, summary="Exchange username and password for tokens")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    result = validate_credential(payload.username, payload.password)
    if not result:
        raise rejection(result)
    user = get_user_by_username(db, payload.username)
    # Same answer for unknown user and wrong password.
    if user is None or not verify_password(payload.password, user.password):
        logger.info("auth.login_failed", extra={"extra_data": {"username": payload.username}})
        raise AppError(ErrorKind.UNAUTHORIZED, "Invalid credentials", reason="INVALID_CREDENTIALS")
    logger.info("auth.login", extra={"extra_data": {"user_id": user.id}})
    return _login_response(user)


@router.post("/refresh", response_model=LoginResponse, summary="Refresh access token")
def refresh(payload: RefreshRequest, db: Session = Depends(get_db)):
    try:
        claims = decode_token(payload.refresh_token, verify_type="refresh")
    except ValueError as exc:
        raise AppError(ErrorKind.UNAUTHORIZED, str(exc)) from exc
    user = get_user(db, int(claims.sub))
    if user is None:
        raise AppError(ErrorKind.UNAUTHORIZED, "Unknown user")
    return _login_response(user)


@router.get("/me", response_model=MeResponse)
def me(caller: Caller = Depends(require_caller), db: Session = Depends(get_db)):
    user = get_user(db, caller.id)
    if user is None:
        raise AppError(ErrorKind.UNAUTHORIZED, "Unknown user")
    return MeResponse(user=UserOut.model_validate(user))
