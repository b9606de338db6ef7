"""Handlers for logging expenses from chat text and receipts."""

from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message

from moolah.handlers.common import UNKNOWN_USER_TEXT, command_argument
from moolah.services import ExpenseService

logger = logging.getLogger(__name__)

router = Router()

RECEIPT_USAGE = "Paste the recognised receipt text after the command: /receipt <text>"
RECEIPT_NOT_FOUND = "I couldn't find a total on that receipt. Try entering it manually."


@router.message(Command("receipt"))
async def cmd_receipt(message: Message, expense_service: ExpenseService) -> None:
    """Log the total of a receipt whose text was recognised elsewhere."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    receipt_text = command_argument(message.text)
    if not receipt_text:
        await message.answer(RECEIPT_USAGE)
        return

    result = await expense_service.add_receipt_expense(message.from_user.id, receipt_text)
    if result is None:
        await message.answer(RECEIPT_NOT_FOUND)


@router.message(F.text)
async def smart_expense_input(message: Message, expense_service: ExpenseService) -> None:
    """Handle free-form expense input; the bot reply arrives asynchronously."""

    if message.from_user is None:
        return

    text = (message.text or "").strip()
    if not text or text.startswith("/"):
        return

    result = await expense_service.submit_expense_text(message.from_user.id, text)
    if not result.accepted:
        logger.debug("Message from user %s did not contain an expense", message.from_user.id)
