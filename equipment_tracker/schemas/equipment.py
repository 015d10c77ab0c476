"""Equipment payloads.

Request bodies accept both the snake_case field names and the camelCase names
older web clients send (``brandId``, ``departmentId``, ``purchaseDate``).
Field values are checked by :mod:`equipment_tracker.core.validation`, not
here, so failures carry reason codes.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .brand import BrandOut
from .department import DepartmentOut
from .user import UserSummary


class EquipmentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    status: Optional[str] = None
    purchase_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("purchase_date", "purchaseDate")
    )
    department_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("department_id", "departmentId")
    )
    brand_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("brand_id", "brandId")
    )


class EquipmentUpdate(EquipmentCreate):
    pass


class EquipmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    status: str
    purchase_date: Optional[str] = None
    department_id: Optional[int] = None
    brand_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: str

    department: Optional[DepartmentOut] = None
    brand: Optional[BrandOut] = None
    creator: Optional[UserSummary] = None

    # Flat names kept for clients written against the first API.
    department_name: Optional[str] = None
    brand_name: Optional[str] = None
    created_by_name: Optional[str] = None


class PublicEquipmentOut(BaseModel):
    id: int
    name: str
    status: str
    brand_name: Optional[str] = None
    department_name: Optional[str] = None
    purchase_date: Optional[str] = None
    created_at: str


class QRCodeOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    qr_code: str = Field(alias="qrCode")


def to_public_view(item: Any) -> PublicEquipmentOut:
    """Reduce an equipment row to what the unauthenticated lookup page may show."""

    return PublicEquipmentOut(
        id=item.id,
        name=item.name,
        status=item.status,
        brand_name=item.brand.name if item.brand else None,
        department_name=item.department.name if item.department else None,
        purchase_date=item.purchase_date,
        created_at=item.created_at,
    )
