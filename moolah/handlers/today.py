"""Handler for the /today command."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from moolah.handlers.common import UNKNOWN_USER_TEXT, build_period_keyboard
from moolah.services import ExpenseService

router = Router()


@router.message(Command("today"))
async def cmd_today(message: Message, expense_service: ExpenseService) -> None:
    """Send today's report."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    report = await expense_service.render_report_message(message.from_user.id, "daily")
    await message.answer(report, reply_markup=build_period_keyboard())
