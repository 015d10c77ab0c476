from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)


__all__ = ["Department"]
