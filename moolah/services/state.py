"""Domain records kept per user and their JSON-compatible representation."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Final

from moolah.services.categories import normalize_category
from moolah.services.currencies import CURRENCIES, DEFAULT_YEN_RATE
from moolah.services.expenses_parser import ExchangeContext
from moolah.services.tags import normalize_tags

PERSONALITIES: Final[tuple[str, ...]] = ("sarcastic", "encouraging", "neutral")
LANGUAGES: Final[tuple[str, ...]] = ("en", "ja", "zh", "bilingual")
SENDERS: Final[tuple[str, ...]] = ("user", "bot")

DEFAULT_BOT_NAME: Final[str] = "ExpenseBot"
DEFAULT_AVATAR: Final[str] = "/api/placeholder/40/40"
DEFAULT_USER_NAME: Final[str] = "Friend"


class MalformedStateError(ValueError):
    """Raised when a persisted record cannot be turned back into domain objects."""


@dataclass(slots=True)
class Expense:
    """A single logged expense; ``amount`` is always in the USD base."""

    id: str
    amount: Decimal
    description: str
    category: str
    date: str
    timestamp: int
    tags: list[str] = field(default_factory=list)

    @property
    def spent_on(self) -> dt.date:
        return dt.date.fromisoformat(self.date)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "amount": str(self.amount),
            "description": self.description,
            "category": self.category,
            "date": self.date,
            "timestamp": self.timestamp,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Expense":
        try:
            amount = Decimal(str(payload["amount"]))
            if not amount.is_finite() or amount <= 0:
                raise ValueError(f"Amount must be a positive number, got {amount}")
            description = str(payload.get("description") or "").strip()
            if not description:
                raise ValueError("Description must not be empty")
            date_value = str(payload["date"])
            dt.date.fromisoformat(date_value)
            return cls(
                id=str(payload["id"]),
                amount=amount,
                description=description,
                category=normalize_category(payload.get("category")),
                date=date_value,
                timestamp=int(payload.get("timestamp", 0)),
                tags=normalize_tags(payload.get("tags") or []),
            )
        except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise MalformedStateError(f"Invalid expense record: {payload!r}") from exc


@dataclass(slots=True)
class ChatMessage:
    """A conversation entry, optionally linked to the expense it produced."""

    id: str
    sender: str
    content: str
    timestamp: int
    expense: Expense | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.sender,
            "content": self.content,
            "timestamp": self.timestamp,
        }
        if self.expense is not None:
            payload["expense"] = self.expense.to_dict()
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ChatMessage":
        try:
            sender = str(payload["type"])
            if sender not in SENDERS:
                raise ValueError(f"Unknown sender {sender!r}")
            expense_payload = payload.get("expense")
            return cls(
                id=str(payload["id"]),
                sender=sender,
                content=str(payload["content"]),
                timestamp=int(payload.get("timestamp", 0)),
                expense=Expense.from_dict(expense_payload) if expense_payload else None,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedStateError(f"Invalid message record: {payload!r}") from exc


@dataclass(slots=True)
class ExpenseLog:
    """Expenses and chat history of one user, persisted as a single record."""

    expenses: list[Expense] = field(default_factory=list)
    messages: list[ChatMessage] = field(default_factory=list)

    def find_expense(self, expense_id: str) -> Expense | None:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None

    def last_timestamp(self) -> int:
        stamps = [item.timestamp for item in self.expenses]
        stamps.extend(item.timestamp for item in self.messages)
        return max(stamps, default=0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "expenses": [expense.to_dict() for expense in self.expenses],
            "messages": [message.to_dict() for message in self.messages],
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "ExpenseLog":
        if not isinstance(payload, dict):
            raise MalformedStateError("Expense log must be a JSON object")
        expenses = payload.get("expenses") or []
        messages = payload.get("messages") or []
        if not isinstance(expenses, list) or not isinstance(messages, list):
            raise MalformedStateError("Expense log collections must be lists")
        return cls(
            expenses=[Expense.from_dict(item) for item in expenses],
            messages=[ChatMessage.from_dict(item) for item in messages],
        )


@dataclass(slots=True)
class ChatbotSettings:
    """Per-user preferences for the bot persona and display."""

    name: str = DEFAULT_BOT_NAME
    avatar: str = DEFAULT_AVATAR
    personality: str = "sarcastic"
    custom_tags: list[str] = field(default_factory=list)
    user_name: str = DEFAULT_USER_NAME
    language: str = "en"
    currency: str = "USD"
    exchange_rate: Decimal = Decimal("1")

    @property
    def display_name(self) -> str:
        return self.user_name or DEFAULT_USER_NAME

    def exchange_context(self) -> ExchangeContext:
        """Return the yen conversion used for parsing.

        A user displaying yen may override the table rate; everyone else
        converts with the static JPY rate.
        """

        if self.currency == "JPY" and self.exchange_rate > 0:
            return ExchangeContext(yen_rate=self.exchange_rate)
        return ExchangeContext(yen_rate=DEFAULT_YEN_RATE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "avatar": self.avatar,
            "personality": self.personality,
            "customTags": list(self.custom_tags),
            "userName": self.user_name,
            "language": self.language,
            "currency": self.currency,
            "exchangeRate": str(self.exchange_rate),
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "ChatbotSettings":
        """Merge a stored payload over the defaults, rejecting invalid values."""

        if not isinstance(payload, dict):
            raise MalformedStateError("Settings must be a JSON object")
        defaults = cls()
        try:
            settings = replace(
                defaults,
                name=str(payload.get("name") or defaults.name),
                avatar=str(payload.get("avatar") or defaults.avatar),
                personality=str(payload.get("personality") or defaults.personality),
                custom_tags=normalize_tags(payload.get("customTags") or []),
                user_name=str(payload.get("userName") or defaults.user_name),
                language=str(payload.get("language") or defaults.language),
                currency=str(payload.get("currency") or defaults.currency).upper(),
                exchange_rate=Decimal(
                    str(payload.get("exchangeRate") or defaults.exchange_rate)
                ),
            )
        except (TypeError, ValueError, InvalidOperation) as exc:
            raise MalformedStateError(f"Invalid settings record: {payload!r}") from exc

        if settings.personality not in PERSONALITIES:
            raise MalformedStateError(f"Unknown personality {settings.personality!r}")
        if settings.language not in LANGUAGES:
            raise MalformedStateError(f"Unknown language {settings.language!r}")
        if settings.currency not in CURRENCIES:
            raise MalformedStateError(f"Unknown currency {settings.currency!r}")
        if not settings.exchange_rate.is_finite() or settings.exchange_rate <= 0:
            raise MalformedStateError(f"Invalid exchange rate {settings.exchange_rate}")
        return settings


__all__ = [
    "ChatMessage",
    "ChatbotSettings",
    "Expense",
    "ExpenseLog",
    "LANGUAGES",
    "MalformedStateError",
    "PERSONALITIES",
]
