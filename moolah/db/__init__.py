"""Database package with models and repository helpers."""

from .models import Base, UserRecord
from .repositories import UserRecordRepository
from .session import create_engine_from_url, create_session_factory, get_engine

__all__ = [
    "Base",
    "UserRecord",
    "UserRecordRepository",
    "create_engine_from_url",
    "create_session_factory",
    "get_engine",
]
