from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from .access import Caller, Role
from .config import settings

ALGORITHM = "HS256"
AUDIENCE = "equipment-tracker-clients"
ISSUER = "equipment-tracker"
BCRYPT_ROUNDS = 10


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    iat: datetime
    typ: str
    aud: str
    iss: str
    role: Role = Role.USER
    username: str | None = None
    name: str | None = None

    def to_caller(self) -> Caller:
        return Caller(id=int(self.sub), role=self.role)


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage.
        return False


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _encode_token(claims: dict[str, Any], expires_delta: timedelta, token_type: str) -> str:
    now = _now()
    payload: dict[str, Any] = {
        **claims,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "typ": token_type,
        "aud": AUDIENCE,
        "iss": ISSUER,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def issue_token_pair(user_id: int, role: str, username: str | None = None, name: str | None = None) -> TokenPair:
    claims: dict[str, Any] = {"sub": str(user_id), "role": role}
    if username:
        claims["username"] = username
    if name:
        claims["name"] = name
    access_delta = timedelta(minutes=settings.JWT_ACCESS_TTL_MIN)
    refresh_delta = timedelta(days=settings.JWT_REFRESH_TTL_DAYS)
    return TokenPair(
        access_token=_encode_token(claims, access_delta, token_type="access"),
        refresh_token=_encode_token({"sub": str(user_id), "role": role}, refresh_delta, token_type="refresh"),
        expires_in=int(access_delta.total_seconds()),
    )


def decode_token(token: str, *, verify_type: str | None = None) -> TokenPayload:
    try:
        decoded = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            issuer=ISSUER,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        payload = TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc
    if not payload.sub.isdigit():
        raise ValueError("Invalid token subject")
    if verify_type and payload.typ != verify_type:
        raise ValueError("Invalid token type")
    return payload
