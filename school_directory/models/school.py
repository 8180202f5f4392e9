"""SQLAlchemy model representing a directory school record."""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, DateTime, Integer, Text, func

from school_directory.models.base import Base


class School(Base):
    __tablename__ = "schools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    contact = Column(BigInteger, nullable=False)
    image = Column(Text, nullable=True)
    email_id = Column(Text, nullable=False)
    created_at = Column(
        DateTime,
        nullable=False,
        server_default=func.current_timestamp(),
    )


__all__ = ["School"]
