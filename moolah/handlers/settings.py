"""Handlers for bot preferences, custom tags and data reset."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message

from moolah.handlers.common import UNKNOWN_USER_TEXT, command_argument
from moolah.services import CURRENCIES, LANGUAGES, PERSONALITIES, ExpenseService

router = Router()

SETTING_COMMANDS = {
    "language": ("language", f"Use: /language <{'|'.join(LANGUAGES)}>"),
    "personality": ("personality", f"Use: /personality <{'|'.join(PERSONALITIES)}>"),
    "currency": ("currency", f"Use: /currency <{'|'.join(CURRENCIES)}>"),
    "name": ("user_name", "Use: /name <what I should call you>"),
    "botname": ("name", "Use: /botname <my new name>"),
}


@router.message(Command(*SETTING_COMMANDS))
async def cmd_update_setting(message: Message, expense_service: ExpenseService) -> None:
    """Update a single preference named by the command."""

    if message.from_user is None or message.text is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    command = message.text.split(maxsplit=1)[0].lstrip("/").split("@", 1)[0].lower()
    field_name, usage = SETTING_COMMANDS[command]
    value = command_argument(message.text)
    if not value:
        await message.answer(usage)
        return

    try:
        settings = await expense_service.update_settings(
            message.from_user.id, **{field_name: value}
        )
    except ValueError as error:
        await message.answer(str(error))
        return

    await message.answer(f"Saved. {field_name.replace('_', ' ')}: {getattr(settings, field_name)}")


@router.message(Command("tags"))
async def cmd_tags(message: Message, expense_service: ExpenseService) -> None:
    """List the user's custom tags."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    settings = await expense_service.get_settings(message.from_user.id)
    if not settings.custom_tags:
        await message.answer("No custom tags yet. Add one with /tag_add <tag>")
        return
    await message.answer("Your tags: " + ", ".join(f"#{tag}" for tag in settings.custom_tags))


@router.message(Command("tag_add"))
async def cmd_tag_add(message: Message, expense_service: ExpenseService) -> None:
    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    try:
        settings = await expense_service.add_custom_tag(
            message.from_user.id, command_argument(message.text)
        )
    except ValueError as error:
        await message.answer(str(error))
        return
    await message.answer("Your tags: " + ", ".join(f"#{tag}" for tag in settings.custom_tags))


@router.message(Command("tag_remove"))
async def cmd_tag_remove(message: Message, expense_service: ExpenseService) -> None:
    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    settings = await expense_service.remove_custom_tag(
        message.from_user.id, command_argument(message.text)
    )
    tags = ", ".join(f"#{tag}" for tag in settings.custom_tags) or "none"
    await message.answer(f"Your tags: {tags}")


@router.message(Command("clear"))
async def cmd_clear(message: Message, expense_service: ExpenseService) -> None:
    """Delete every expense and message of the user."""

    if message.from_user is None:
        await message.answer(UNKNOWN_USER_TEXT)
        return

    confirmation = await expense_service.clear_all_data(message.from_user.id)
    await message.answer(confirmation.content)
