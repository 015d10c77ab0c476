from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class BrandCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class BrandUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class BrandOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: str

    class Config:
        from_attributes = True
