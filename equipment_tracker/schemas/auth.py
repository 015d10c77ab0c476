from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .user import UserOut


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {"username": "admin", "password": "admin123"}
        },
    }


class LoginResponse(BaseModel):
    user: UserOut
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshRequest(BaseModel):
    refresh_token: str

    model_config = {
        "json_schema_extra": {
            "example": {"refresh_token": "<jwt>"}
        }
    }


class MeResponse(BaseModel):
    user: UserOut
