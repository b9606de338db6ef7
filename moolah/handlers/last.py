"""Handlers for listing, editing and deleting recent expenses."""

from __future__ import annotations

from contextlib import suppress

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from moolah.handlers.common import (
    UNKNOWN_USER_TEXT,
    ExpenseAction,
    build_expense_actions_keyboard,
    command_argument,
    parse_amount,
)
from moolah.services import ExpenseService, extract_tags

router = Router()

EDIT_USAGE = "Use: /edit <id> <amount> <description> [#tags]"
DELETE_USAGE = "Use: /delete <id>"
MAX_BUTTONS = 5


@router.message(Command("last"))
async def cmd_last(message: Message, expense_service: ExpenseService) -> None:
    """Send the list of recent expenses with an optional limit."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    limit = 10
    argument = command_argument(message.text)
    if argument:
        try:
            limit = int(argument)
        except ValueError:
            await message.answer("The number of expenses must be an integer. Example: /last 25")
            return
        if limit <= 0:
            await message.answer("The number of expenses must be positive.")
            return

    user_id = message.from_user.id
    report = await expense_service.render_recent_expenses_message(user_id, limit)
    expenses = await expense_service.list_recent_expenses(user_id, min(limit, MAX_BUTTONS))
    await message.answer(
        report,
        reply_markup=build_expense_actions_keyboard(expenses) if expenses else None,
    )


@router.message(Command("edit"))
async def cmd_edit(message: Message, expense_service: ExpenseService) -> None:
    """Replace the amount, description and tags of an expense."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    parts = command_argument(message.text).split(maxsplit=2)
    if len(parts) < 2:
        await message.answer(EDIT_USAGE)
        return

    expense_id, raw_amount = parts[0], parts[1]
    description = parts[2] if len(parts) == 3 else None
    tags = extract_tags(description) if description else None
    if description is not None:
        description = " ".join(
            word for word in description.split() if not word.startswith("#")
        ) or None

    try:
        await expense_service.update_expense(
            message.from_user.id,
            expense_id,
            amount=parse_amount(raw_amount),
            description=description,
            tags=tags,
        )
    except ValueError as error:
        await message.answer(str(error))


@router.message(Command("delete"))
async def cmd_delete(message: Message, expense_service: ExpenseService) -> None:
    """Delete an expense by identifier."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    expense_id = command_argument(message.text)
    if not expense_id:
        await message.answer(DELETE_USAGE)
        return

    try:
        await expense_service.delete_expense(message.from_user.id, expense_id)
    except ValueError as error:
        await message.answer(str(error))


@router.callback_query(ExpenseAction.filter(F.action == "delete"))
async def expense_delete_pressed(
    callback: CallbackQuery,
    callback_data: ExpenseAction,
    expense_service: ExpenseService,
) -> None:
    """Delete the expense attached to an inline button."""

    if callback.from_user is None:
        await callback.answer()
        return

    try:
        await expense_service.delete_expense(callback.from_user.id, callback_data.expense_id)
    except ValueError as error:
        await callback.answer(str(error), show_alert=True)
        return

    if callback.message is not None:
        with suppress(TelegramBadRequest):
            await callback.message.edit_reply_markup()
    await callback.answer()
