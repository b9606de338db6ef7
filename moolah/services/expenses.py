"""Expense related business logic services."""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal

from moolah.services.categories import CATEGORIES, category_label
from moolah.services.currencies import format_currency, get_currency
from moolah.services.expenses_parser import ParsedExpense, parse_expense
from moolah.services.receipts import extract_expense_from_receipt
from moolah.services.replies import ReplyQueue
from moolah.services.reports import (
    ExpenseReport,
    build_report,
    render_report_message,
    title_for,
)
from moolah.services.responses import ResponseGenerator
from moolah.services.state import (
    DEFAULT_USER_NAME,
    LANGUAGES,
    PERSONALITIES,
    ChatbotSettings,
    ChatMessage,
    Expense,
    ExpenseLog,
)
from moolah.services.storage import ExpenseStore
from moolah.services.tags import normalize_tags

logger = logging.getLogger(__name__)

STALE_AFTER = dt.timedelta(hours=12)

ReplyListener = Callable[[int, ChatMessage], Awaitable[None]]
Clock = Callable[[], dt.datetime]


@dataclass(slots=True)
class SubmitResult:
    """Outcome of a free-text submission."""

    accepted: bool
    user_message: ChatMessage
    expense: Expense | None = None


def _epoch_millis(moment: dt.datetime) -> int:
    return int(moment.timestamp() * 1000)


def render_edited_message(expense: Expense) -> str:
    """Return the regenerated user message text for an edited expense."""

    amount = expense.amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    tags = "".join(f" #{tag}" for tag in expense.tags)
    return f"I spent ${amount} on {expense.description}{tags}"


class ExpenseService:
    """Business logic for the expense chat of each user.

    Every mutation of a user's expenses and messages happens under that
    user's lock and ends with a single write of the combined record, so a
    reader never sees one collection updated without the other.
    """

    def __init__(
        self,
        store: ExpenseStore,
        replies: ReplyQueue,
        *,
        responses: ResponseGenerator | None = None,
        clock: Clock | None = None,
        reply_delay: float = 1.0,
        edit_reply_delay: float = 0.5,
    ) -> None:
        self._store = store
        self._replies = replies
        self._responses = responses or ResponseGenerator()
        self._clock = clock or dt.datetime.now
        self._reply_delay = reply_delay
        self._edit_reply_delay = edit_reply_delay
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._listeners: list[ReplyListener] = []

    def add_reply_listener(self, listener: ReplyListener) -> None:
        """Register a callback invoked after each deferred bot reply is stored."""

        self._listeners.append(listener)

    async def start_session(self, user_id: int, *, user_name: str | None = None) -> ChatMessage | None:
        """Load the user's state and greet them if the conversation is empty.

        ``user_name`` seeds the preferred name while it is still the default.
        Returns the welcome message when one was added.
        """

        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)
            if user_name and settings.user_name == DEFAULT_USER_NAME:
                settings.user_name = user_name
                await self._store.save_settings(user_id, settings)

            log = await self._store.load_log(user_id)
            if log.messages:
                return None
            welcome = self._append_message(log, "bot", self._responses.welcome_message(settings))
            await self._store.save_log(user_id, log)
        return welcome

    async def submit_expense_text(self, user_id: int, text: str) -> SubmitResult:
        """Parse ``text``, store the outcome and queue the bot's reply.

        The user message is always recorded, even when no expense is found;
        the reply is an acknowledgment on success and a nudge otherwise.
        """

        text = (text or "").strip()
        if not text:
            raise ValueError("Message text is empty")

        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)
            log = await self._store.load_log(user_id)
            parsed = parse_expense(text, settings.exchange_context())
            if parsed is None:
                logger.debug("No expense found in message of user %s", user_id)
                user_message = self._append_message(log, "user", text)
                await self._store.save_log(user_id, log)
                result = SubmitResult(accepted=False, user_message=user_message)
                reply = self._responses.error_response(settings)
            else:
                expense = self._append_expense(log, parsed)
                user_message = self._append_message(
                    log, "user", text, expense=self._snapshot(expense)
                )
                await self._store.save_log(user_id, log)
                logger.info(
                    "Stored expense %s for user %s via rule %s",
                    expense.id,
                    user_id,
                    parsed.rule,
                )
                result = SubmitResult(accepted=True, user_message=user_message, expense=expense)
                reply = self._responses.expense_response(expense, settings)

        self._schedule_reply(user_id, reply, self._reply_delay)
        return result

    async def add_receipt_expense(self, user_id: int, receipt_text: str) -> SubmitResult | None:
        """Submit the total found in OCR text; ``None`` if no total was found."""

        settings = await self._store.load_settings(user_id)
        extracted = extract_expense_from_receipt(receipt_text, settings.language)
        if extracted is None:
            return None
        return await self.submit_expense_text(user_id, self._receipt_text(extracted, settings))

    async def get_report(
        self,
        user_id: int,
        period: str,
        anchor: dt.date | None = None,
    ) -> ExpenseReport:
        """Return the report of ``period`` around ``anchor`` (today by default)."""

        log = await self._store.load_log(user_id)
        return build_report(log.expenses, period, anchor or self._clock().date())

    async def render_report_message(
        self,
        user_id: int,
        period: str,
        anchor: dt.date | None = None,
    ) -> str:
        settings = await self._store.load_settings(user_id)
        report = await self.get_report(user_id, period, anchor)
        return render_report_message(report, settings)

    async def list_recent_expenses(self, user_id: int, limit: int = 10) -> list[Expense]:
        """Return the most recent expenses for the user, newest first."""

        log = await self._store.load_log(user_id)
        ordered = sorted(log.expenses, key=lambda item: item.timestamp, reverse=True)
        return ordered[:limit]

    async def render_recent_expenses_message(self, user_id: int, limit: int) -> str:
        """Return a formatted list of recent expenses."""

        settings = await self._store.load_settings(user_id)
        expenses = await self.list_recent_expenses(user_id, limit)
        if not expenses:
            return title_for("no_expenses", settings.language)

        lines = [f"{title_for('recent', settings.language)}:"]
        for expense in expenses:
            amount = format_currency(expense.amount, settings.currency, settings.exchange_rate)
            tags = "".join(f" #{tag}" for tag in expense.tags)
            lines.append(
                f"[{expense.id}] {expense.date} — "
                f"{category_label(expense.category, settings.language)}: "
                f"{amount} ({expense.description}){tags}"
            )
        return "\n".join(lines)

    async def is_logging_stale(self, user_id: int) -> bool:
        """Return ``True`` if nothing was logged in the last twelve hours."""

        log = await self._store.load_log(user_id)
        if not log.expenses:
            return True
        latest = max(expense.timestamp for expense in log.expenses)
        now = _epoch_millis(self._clock())
        return now - latest > STALE_AFTER.total_seconds() * 1000

    async def update_expense(
        self,
        user_id: int,
        expense_id: str,
        *,
        amount: Decimal | None = None,
        description: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> Expense:
        """Edit an expense together with the messages that display it."""

        if amount is not None and (not amount.is_finite() or amount <= 0):
            raise ValueError("Amount must be positive")
        if description is not None:
            description = description.strip()
            if not description:
                raise ValueError("Description must not be empty")
        if category is not None:
            category = category.strip().lower()
            if category not in CATEGORIES:
                raise ValueError(
                    f'Unknown category "{category}". Use one of: {", ".join(CATEGORIES)}'
                )

        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)
            log = await self._store.load_log(user_id)
            expense = log.find_expense(expense_id)
            if expense is None:
                raise ValueError(f'Expense "{expense_id}" not found')

            if amount is not None:
                expense.amount = amount
            if description is not None:
                expense.description = description
            if category is not None:
                expense.category = category
            if tags is not None:
                expense.tags = normalize_tags(tags)

            for message in log.messages:
                if message.expense is not None and message.expense.id == expense_id:
                    message.expense = self._snapshot(expense)
                    message.content = render_edited_message(expense)
            await self._store.save_log(user_id, log)

        logger.info("Updated expense %s of user %s", expense_id, user_id)
        self._schedule_reply(
            user_id,
            self._responses.notification("updated", settings),
            self._edit_reply_delay,
        )
        return expense

    async def delete_expense(self, user_id: int, expense_id: str) -> Expense:
        """Remove an expense and every message associated with it."""

        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)
            log = await self._store.load_log(user_id)
            expense = log.find_expense(expense_id)
            if expense is None:
                raise ValueError(f'Expense "{expense_id}" not found')

            log.expenses = [item for item in log.expenses if item.id != expense_id]
            log.messages = [
                message
                for message in log.messages
                if message.expense is None or message.expense.id != expense_id
            ]
            await self._store.save_log(user_id, log)

        logger.info("Deleted expense %s of user %s", expense_id, user_id)
        self._schedule_reply(
            user_id,
            self._responses.notification("deleted", settings),
            self._edit_reply_delay,
        )
        return expense

    async def clear_all_data(self, user_id: int) -> ChatMessage:
        """Drop all expenses and messages, leaving a single confirmation."""

        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)
            log = ExpenseLog()
            message = self._append_message(
                log, "bot", self._responses.notification("cleared", settings)
            )
            await self._store.save_log(user_id, log)
        logger.info("Cleared all data of user %s", user_id)
        return message

    async def list_messages(self, user_id: int) -> list[ChatMessage]:
        log = await self._store.load_log(user_id)
        return log.messages

    async def get_settings(self, user_id: int) -> ChatbotSettings:
        return await self._store.load_settings(user_id)

    async def update_settings(
        self,
        user_id: int,
        *,
        name: str | None = None,
        avatar: str | None = None,
        personality: str | None = None,
        user_name: str | None = None,
        language: str | None = None,
        currency: str | None = None,
        exchange_rate: Decimal | None = None,
    ) -> ChatbotSettings:
        """Validate and persist a partial settings update."""

        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)

            if name is not None:
                settings.name = self._require_text(name, "Bot name")
            if avatar is not None:
                settings.avatar = self._require_text(avatar, "Avatar")
            if user_name is not None:
                settings.user_name = self._require_text(user_name, "Name")
            if personality is not None:
                personality = personality.strip().lower()
                if personality not in PERSONALITIES:
                    raise ValueError(
                        f'Unknown personality "{personality}". '
                        f'Use one of: {", ".join(PERSONALITIES)}'
                    )
                settings.personality = personality
            if language is not None:
                language = language.strip().lower()
                if language not in LANGUAGES:
                    raise ValueError(
                        f'Unknown language "{language}". Use one of: {", ".join(LANGUAGES)}'
                    )
                settings.language = language
            if currency is not None:
                table_entry = get_currency(currency)
                settings.currency = table_entry.code
                settings.exchange_rate = table_entry.rate
            if exchange_rate is not None:
                if not exchange_rate.is_finite() or exchange_rate <= 0:
                    raise ValueError("Exchange rate must be positive")
                settings.exchange_rate = exchange_rate

            await self._store.save_settings(user_id, settings)
        return settings

    async def add_custom_tag(self, user_id: int, tag: str) -> ChatbotSettings:
        """Add a user-defined tag; existing tags are left untouched."""

        normalized = normalize_tags([tag])
        if not normalized:
            raise ValueError("Tag must not be empty")
        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)
            if normalized[0] not in settings.custom_tags:
                settings.custom_tags.append(normalized[0])
                await self._store.save_settings(user_id, settings)
        return settings

    async def remove_custom_tag(self, user_id: int, tag: str) -> ChatbotSettings:
        normalized = normalize_tags([tag])
        async with self._locks[user_id]:
            settings = await self._store.load_settings(user_id)
            if normalized and normalized[0] in settings.custom_tags:
                settings.custom_tags.remove(normalized[0])
                await self._store.save_settings(user_id, settings)
        return settings

    def _schedule_reply(self, user_id: int, content: str, delay: float) -> None:
        async def deliver() -> None:
            async with self._locks[user_id]:
                log = await self._store.load_log(user_id)
                message = self._append_message(log, "bot", content)
                await self._store.save_log(user_id, log)

            for listener in self._listeners:
                try:
                    await listener(user_id, message)
                except Exception as error:  # pragma: no cover
                    logger.warning("Failed to deliver reply to user %s: %s", user_id, error)

        self._replies.schedule(delay, deliver)

    def _next_timestamp(self, log: ExpenseLog) -> int:
        """Return a millisecond stamp later than anything already in ``log``."""

        return max(_epoch_millis(self._clock()), log.last_timestamp() + 1)

    def _append_expense(self, log: ExpenseLog, parsed: ParsedExpense) -> Expense:
        stamp = self._next_timestamp(log)
        expense = Expense(
            id=str(stamp),
            amount=parsed.amount,
            description=parsed.description,
            category=parsed.category,
            date=self._clock().date().isoformat(),
            timestamp=stamp,
            tags=normalize_tags(parsed.tags),
        )
        log.expenses.append(expense)
        return expense

    def _append_message(
        self,
        log: ExpenseLog,
        sender: str,
        content: str,
        *,
        expense: Expense | None = None,
    ) -> ChatMessage:
        stamp = self._next_timestamp(log)
        message = ChatMessage(
            id=str(stamp),
            sender=sender,
            content=content,
            timestamp=stamp,
            expense=expense,
        )
        log.messages.append(message)
        return message

    @staticmethod
    def _snapshot(expense: Expense) -> Expense:
        return replace(expense, tags=list(expense.tags))

    @staticmethod
    def _receipt_text(extracted: ParsedExpense, settings: ChatbotSettings) -> str:
        if settings.currency == "JPY":
            yen = extracted.amount * settings.exchange_context().yen_rate
            amount = f"¥{yen.quantize(Decimal('1'), rounding=ROUND_HALF_UP)}"
        else:
            amount = f"${extracted.amount}"
        return f"I spent {amount} on {extracted.description}"

    @staticmethod
    def _require_text(value: str, label: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{label} must not be empty")
        return value


__all__ = ["ExpenseService", "SubmitResult", "render_edited_message"]
