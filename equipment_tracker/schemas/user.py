from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class UserCreate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    username: str
    name: str
    role: str

    class Config:
        from_attributes = True


class UserOut(UserSummary):
    created_at: str
