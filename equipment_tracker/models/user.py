"""SQLAlchemy model for people who can sign in."""

from __future__ import annotations

from sqlalchemy import Column, Integer, Text

from ..db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(Text, nullable=False, unique=True, index=True)
    password = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="user")
    created_at = Column(Text, nullable=False)


__all__ = ["User"]
