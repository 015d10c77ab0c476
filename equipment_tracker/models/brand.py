from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(Text, nullable=False)


__all__ = ["Brand"]
