"""Common callback schemas, inline keyboards and helpers for handlers."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation

from aiogram.filters.callback_data import CallbackData
from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from moolah.services.reports import PERIODS
from moolah.services.state import Expense

UNKNOWN_USER_TEXT = "Could not identify the user."

PERIOD_BUTTONS = {
    "daily": "📅 Day",
    "weekly": "🗓 Week",
    "monthly": "📆 Month",
    "annual": "📈 Year",
}


class ReportAction(CallbackData, prefix="rep"):
    """Callback data schema for report period buttons."""

    period: str
    anchor: str | None = None


class ExpenseAction(CallbackData, prefix="exp"):
    """Callback data schema for per-expense buttons."""

    action: str
    expense_id: str


def build_period_keyboard(anchor: str | None = None) -> InlineKeyboardMarkup:
    """Return inline keyboard for switching between report periods."""

    builder = InlineKeyboardBuilder()
    for period in PERIODS:
        builder.button(
            text=PERIOD_BUTTONS[period],
            callback_data=ReportAction(period=period, anchor=anchor).pack(),
        )
    builder.adjust(4)
    return builder.as_markup()


def build_expense_actions_keyboard(expenses: Sequence[Expense]) -> InlineKeyboardMarkup:
    """Return inline keyboard with a delete button per listed expense."""

    builder = InlineKeyboardBuilder()
    for expense in expenses:
        builder.button(
            text=f"🗑 {expense.description[:24]}",
            callback_data=ExpenseAction(action="delete", expense_id=expense.id).pack(),
        )
    builder.adjust(1)
    return builder.as_markup()


def command_argument(text: str | None) -> str:
    """Return everything after the command word."""

    parts = (text or "").strip().split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


def parse_amount(value: str) -> Decimal:
    """Parse textual amount and return it as a positive Decimal."""

    normalized = value.strip().lstrip("$").replace(",", ".")
    if not normalized:
        raise ValueError("Amount must be a number")

    try:
        amount = Decimal(normalized)
    except InvalidOperation as exc:
        raise ValueError("Amount must be a number") from exc

    if not amount.is_finite() or amount <= 0:
        raise ValueError("Amount must be positive")

    return amount


__all__ = [
    "ExpenseAction",
    "ReportAction",
    "UNKNOWN_USER_TEXT",
    "build_expense_actions_keyboard",
    "build_period_keyboard",
    "command_argument",
    "parse_amount",
]
