"""SQLAlchemy model for a tracked piece of equipment."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from ..core.validation import DEFAULT_STATUS, EQUIPMENT_STATUSES
from ..db.session import Base


class Equipment(Base):
    """A physical item, optionally filed under a department and brand.

    ``created_by`` records the owner. Every foreign key is detached (set to
    NULL) when the referenced row goes away; equipment is never deleted as a
    side effect.
    """

    __tablename__ = "equipment"
    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in EQUIPMENT_STATUSES) + ")",
            name="ck_equipment_status",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default=DEFAULT_STATUS)
    purchase_date = Column(Text, nullable=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(Text, nullable=False)

    department = relationship("Department", lazy="joined")
    brand = relationship("Brand", lazy="joined")
    creator = relationship("User", lazy="joined")

    @property
    def department_name(self) -> str | None:
        return self.department.name if self.department else None

    @property
    def brand_name(self) -> str | None:
        return self.brand.name if self.brand else None

    @property
    def created_by_name(self) -> str | None:
        return self.creator.name if self.creator else None


__all__ = ["Equipment"]
