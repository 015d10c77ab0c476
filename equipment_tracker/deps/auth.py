from __future__ import annotations

from fastapi import Depends, Header, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from ..core.access import Caller, Role, can_manage_users
from ..core.errors import AppError, ErrorKind, forbidden
from ..core.security import decode_token
from ..crud.users import get_user
from ..db.session import get_db
from ..middlewares import principal_ctx_var


def _unauthorized(message: str = "Unauthorized") -> AppError:
    return AppError(ErrorKind.UNAUTHORIZED, message)


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


async def require_caller(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> Caller:
    """Resolve the bearer token into a :class:`Caller`.

    The role is read from the database on every request, so demoting or
    deleting an account takes effect before its token expires.
    """

    if not authorization:
        raise _unauthorized("No token provided")
    scheme, credentials = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not credentials:
        raise _unauthorized("No token provided")
    try:
        payload = decode_token(credentials, verify_type="access")
    except ValueError as exc:
        raise _unauthorized(str(exc)) from exc

    user = get_user(db, int(payload.sub))
    if user is None:
        raise _unauthorized("Unknown user")
    caller = Caller(id=user.id, role=Role(user.role))
    _set_principal(request, f"user:{caller.id}")
    request.state.caller = caller
    return caller


async def require_admin(caller: Caller = Depends(require_caller)) -> Caller:
    if not can_manage_users(caller):
        raise forbidden("Admin access required", reason="ADMIN_REQUIRED")
    return caller
