"""Per-user persistence of the expense log and bot settings.

Both records live in an external key-value store keyed by user id. A record
that cannot be decoded is discarded and replaced with defaults so a corrupt
row never breaks a session.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Final, Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from moolah.db.repositories import UserRecordRepository
from moolah.services.state import ChatbotSettings, ExpenseLog, MalformedStateError

logger = logging.getLogger(__name__)

EXPENSES_KEY: Final[str] = "expense-tracker-data"
SETTINGS_KEY: Final[str] = "chatbot-settings"


class KeyValueStore(Protocol):
    """Minimal asynchronous key-value storage scoped by user."""

    async def get(self, user_id: int, key: str) -> str | None: ...

    async def set(self, user_id: int, key: str, value: str) -> None: ...

    async def delete(self, user_id: int, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, useful for tests and ephemeral deployments."""

    def __init__(self) -> None:
        self._data: dict[tuple[int, str], str] = {}

    async def get(self, user_id: int, key: str) -> str | None:
        return self._data.get((user_id, key))

    async def set(self, user_id: int, key: str, value: str) -> None:
        self._data[(user_id, key)] = value

    async def delete(self, user_id: int, key: str) -> None:
        self._data.pop((user_id, key), None)


class SqlKeyValueStore:
    """Key-value store backed by the ``user_records`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, user_id: int, key: str) -> str | None:
        async with self._session_factory() as session:
            record = await UserRecordRepository(session).get(user_id=user_id, key=key)
        return record.payload if record is not None else None

    async def set(self, user_id: int, key: str, value: str) -> None:
        async with self._session_factory() as session:
            await UserRecordRepository(session).put(user_id=user_id, key=key, payload=value)

    async def delete(self, user_id: int, key: str) -> None:
        async with self._session_factory() as session:
            await UserRecordRepository(session).delete(user_id=user_id, key=key)


def _decode(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise MalformedStateError("Stored record is not valid JSON") from exc


class ExpenseStore:
    """Load and save the expense log and settings of each user."""

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend

    async def load_log(self, user_id: int) -> ExpenseLog:
        """Return the user's expense log, or an empty one if missing or corrupt."""

        raw = await self._backend.get(user_id, EXPENSES_KEY)
        if raw is None:
            return ExpenseLog()
        try:
            return ExpenseLog.from_dict(_decode(raw))
        except MalformedStateError as error:
            logger.warning("Discarding malformed expense log of user %s: %s", user_id, error)
            await self._backend.delete(user_id, EXPENSES_KEY)
            return ExpenseLog()

    async def save_log(self, user_id: int, log: ExpenseLog) -> None:
        payload = json.dumps(log.to_dict(), ensure_ascii=False)
        await self._backend.set(user_id, EXPENSES_KEY, payload)

    async def load_settings(self, user_id: int) -> ChatbotSettings:
        """Return the user's settings, or defaults if missing or corrupt."""

        raw = await self._backend.get(user_id, SETTINGS_KEY)
        if raw is None:
            return ChatbotSettings()
        try:
            return ChatbotSettings.from_dict(_decode(raw))
        except MalformedStateError as error:
            logger.warning("Discarding malformed settings of user %s: %s", user_id, error)
            await self._backend.delete(user_id, SETTINGS_KEY)
            return ChatbotSettings()

    async def save_settings(self, user_id: int, settings: ChatbotSettings) -> None:
        payload = json.dumps(settings.to_dict(), ensure_ascii=False)
        await self._backend.set(user_id, SETTINGS_KEY, payload)


__all__ = [
    "EXPENSES_KEY",
    "SETTINGS_KEY",
    "ExpenseStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqlKeyValueStore",
]
