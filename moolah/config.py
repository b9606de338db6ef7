"""Environment driven configuration of the Moolah bot.

Values come from the process environment, optionally seeded from a ``.env``
file in the working directory. :func:`get_settings` builds the settings once
and caches them for the lifetime of the process.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_URL: Final[str] = "sqlite+aiosqlite:///./moolah.db"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_REPLY_DELAY: Final[float] = 1.0
DEFAULT_EDIT_REPLY_DELAY: Final[float] = 0.5


class ConfigurationError(RuntimeError):
    """A required environment variable is absent or cannot be interpreted."""


def _env_text(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_seconds(name: str, default: float) -> float:
    raw = _env_text(name)
    if raw is None:
        return default
    try:
        seconds = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if seconds < 0:
        raise ConfigurationError(f"{name} must not be negative")
    return seconds


@dataclass(slots=True)
class BotConfig:
    """Credentials of the Telegram bot."""

    token: str

    @classmethod
    def from_env(cls) -> "BotConfig":
        token = _env_text("BOT_TOKEN")
        if token is None:
            raise ConfigurationError("Set BOT_TOKEN to the token issued by @BotFather")
        return cls(token=token)


@dataclass(slots=True)
class DatabaseConfig:
    """Where per-user records are persisted."""

    url: str

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        return cls(url=_env_text("DATABASE_URL", DEFAULT_DB_URL))


@dataclass(slots=True)
class LoggingConfig:
    level: str

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(level=_env_text("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper())


@dataclass(slots=True)
class ChatConfig:
    """Pacing of the conversational replies, in seconds."""

    reply_delay: float
    edit_reply_delay: float

    @classmethod
    def from_env(cls) -> "ChatConfig":
        return cls(
            reply_delay=_env_seconds("REPLY_DELAY_SECONDS", DEFAULT_REPLY_DELAY),
            edit_reply_delay=_env_seconds("EDIT_REPLY_DELAY_SECONDS", DEFAULT_EDIT_REPLY_DELAY),
        )


@dataclass(slots=True)
class Settings:
    """Every section of the bot configuration."""

    bot: BotConfig
    database: DatabaseConfig
    logging: LoggingConfig
    chat: ChatConfig


@lru_cache
def get_settings() -> Settings:
    """Build the settings from the environment on first use and reuse them."""

    return Settings(
        bot=BotConfig.from_env(),
        database=DatabaseConfig.from_env(),
        logging=LoggingConfig.from_env(),
        chat=ChatConfig.from_env(),
    )


__all__ = [
    "BotConfig",
    "ChatConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "LoggingConfig",
    "Settings",
    "get_settings",
]
