"""Handler for the /start and /help commands."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from moolah.handlers.common import UNKNOWN_USER_TEXT
from moolah.services import ExpenseService

router = Router()

HELP_TEXT = (
    "Tell me what you spent, e.g. \"I spent $15 on coffee #work\" or \"¥1500 on taxi\".\n"
    "/report [daily|weekly|monthly|annual] [YYYY-MM-DD] - Spending report\n"
    "/today - Today's report\n"
    "/last [n] - Recent expenses\n"
    "/edit <id> <amount> <description> - Fix an expense\n"
    "/delete <id> - Remove an expense\n"
    "/receipt <text> - Log the total of a scanned receipt\n"
    "/language, /personality, /currency, /name, /botname - Preferences\n"
    "/tags, /tag_add, /tag_remove - Custom tags\n"
    "/clear - Delete all data"
)

STALE_NUDGE = "It's been a while since your last entry. Anything to log today?"


@router.message(CommandStart())
async def cmd_start(message: Message, expense_service: ExpenseService) -> None:
    """Greet the user and explain how to log expenses."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    user_id = message.from_user.id
    welcome = await expense_service.start_session(
        user_id, user_name=message.from_user.first_name
    )
    if welcome is not None:
        await message.answer(welcome.content)
    elif await expense_service.is_logging_stale(user_id):
        await message.answer(STALE_NUDGE)
    await message.answer(HELP_TEXT)


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)
