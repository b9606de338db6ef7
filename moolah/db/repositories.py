"""Query helpers for the per-user record table."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from moolah.db.models import UserRecord


class UserRecordRepository:
    """Repository for working with :class:`UserRecord` documents."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, *, user_id: int, key: str) -> UserRecord | None:
        """Return the record stored under ``key`` for the user, if any."""

        statement = (
            select(UserRecord)
            .where(UserRecord.user_id == user_id)
            .where(UserRecord.key == key)
        )
        result = await self._session.execute(statement)
        return result.scalar_one_or_none()

    async def put(self, *, user_id: int, key: str, payload: str) -> UserRecord:
        """Create or overwrite the record and return it."""

        record = await self.get(user_id=user_id, key=key)
        if record is None:
            record = UserRecord(user_id=user_id, key=key, payload=payload)
        else:
            record.payload = payload
        self._session.add(record)
        await self._session.commit()
        await self._session.refresh(record)
        return record

    async def delete(self, *, user_id: int, key: str) -> None:
        """Remove the record if present."""

        statement = (
            delete(UserRecord)
            .where(UserRecord.user_id == user_id)
            .where(UserRecord.key == key)
        )
        await self._session.execute(statement)
        await self._session.commit()


__all__ = ["UserRecordRepository"]
