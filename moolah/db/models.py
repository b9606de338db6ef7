"""Database models for the Moolah bot."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import BigInteger, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> dt.datetime:
    """Naive UTC timestamp used for the audit columns."""

    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base; every table records when its rows were created."""

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(), default=utcnow, nullable=False)


class UserRecord(Base):
    """A JSON document stored under ``key`` for a single user."""

    __tablename__ = "user_records"
    __table_args__ = (UniqueConstraint("user_id", "key", name="uq_user_records_user_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True, nullable=False)
    key: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(), default=utcnow, onupdate=utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return "UserRecord(user_id={user_id}, key={key})".format(
            user_id=self.user_id, key=self.key
        )
