from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

from ..core.pagination import PageMeta

T = TypeVar("T")


class Paginated(BaseModel, Generic[T]):
    data: list[T]
    pagination: PageMeta


class MessageOut(BaseModel):
    message: str
