"""Handlers for the /report command and its period buttons."""

from __future__ import annotations

import datetime as dt
from contextlib import suppress

from aiogram import Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from moolah.handlers.common import (
    UNKNOWN_USER_TEXT,
    ReportAction,
    build_period_keyboard,
    command_argument,
)
from moolah.services import PERIODS, ExpenseService

router = Router()

REPORT_USAGE = "Use: /report [daily|weekly|monthly|annual] [YYYY-MM-DD]"


def parse_report_arguments(payload: str) -> tuple[str, dt.date | None]:
    """Split ``/report`` arguments into a period and an optional anchor date."""

    period = "monthly"
    anchor: dt.date | None = None
    for part in payload.split():
        lowered = part.lower()
        if lowered in PERIODS:
            period = lowered
            continue
        try:
            anchor = dt.date.fromisoformat(part)
        except ValueError as exc:
            raise ValueError(REPORT_USAGE) from exc
    return period, anchor


@router.message(Command("report"))
async def cmd_report(message: Message, expense_service: ExpenseService) -> None:
    """Send the spending report for the requested period."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    try:
        period, anchor = parse_report_arguments(command_argument(message.text))
    except ValueError as error:
        await message.answer(str(error))
        return

    report = await expense_service.render_report_message(
        message.from_user.id, period, anchor
    )
    await message.answer(
        report,
        reply_markup=build_period_keyboard(anchor.isoformat() if anchor else None),
    )


@router.callback_query(ReportAction.filter())
async def report_period_chosen(
    callback: CallbackQuery,
    callback_data: ReportAction,
    expense_service: ExpenseService,
) -> None:
    """Re-render the report for the period picked with the inline buttons."""

    if callback.from_user is None or callback.message is None:
        await callback.answer()
        return

    try:
        anchor = dt.date.fromisoformat(callback_data.anchor) if callback_data.anchor else None
        report = await expense_service.render_report_message(
            callback.from_user.id, callback_data.period, anchor
        )
    except ValueError as error:
        await callback.answer(str(error), show_alert=True)
        return

    with suppress(TelegramBadRequest):
        await callback.message.edit_text(
            report, reply_markup=build_period_keyboard(callback_data.anchor)
        )
    await callback.answer()
