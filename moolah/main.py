"""Entry point: wires storage, the reply scheduler and the Telegram dispatcher."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy.ext.asyncio import AsyncEngine

from moolah.config import ConfigurationError, Settings, get_settings
from moolah.db import Base, create_session_factory, get_engine
from moolah.handlers import setup_routers
from moolah.services import (
    ChatMessage,
    ExpenseService,
    ExpenseStore,
    SchedulerReplyQueue,
    SqlKeyValueStore,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass(slots=True)
class Application:
    """Long-lived objects that must be shut down together."""

    dispatcher: Dispatcher
    bot: Bot
    scheduler: AsyncIOScheduler
    engine: AsyncEngine


def build_expense_service(
    settings: Settings,
    engine: AsyncEngine,
    scheduler: AsyncIOScheduler,
    bot: Bot,
) -> ExpenseService:
    """Create the chat service and forward its deferred replies to Telegram."""

    service = ExpenseService(
        ExpenseStore(SqlKeyValueStore(create_session_factory(engine))),
        SchedulerReplyQueue(scheduler),
        reply_delay=settings.chat.reply_delay,
        edit_reply_delay=settings.chat.edit_reply_delay,
    )

    async def forward_reply(user_id: int, message: ChatMessage) -> None:
        await bot.send_message(chat_id=user_id, text=message.content)

    service.add_reply_listener(forward_reply)
    return service


async def create_application() -> Application:
    settings = get_settings()
    logging.basicConfig(level=settings.logging.level, format=LOG_FORMAT)

    engine = get_engine(settings)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    bot = Bot(token=settings.bot.token)
    scheduler = AsyncIOScheduler()

    dispatcher = Dispatcher(storage=MemoryStorage())
    dispatcher.include_router(setup_routers())
    dispatcher["settings"] = settings
    dispatcher["expense_service"] = build_expense_service(settings, engine, scheduler, bot)

    scheduler.start()
    return Application(dispatcher=dispatcher, bot=bot, scheduler=scheduler, engine=engine)


async def main() -> None:
    """Poll Telegram until interrupted, then release every resource."""

    app = await create_application()
    try:
        logger.info("Moolah bot is polling for updates")
        await app.dispatcher.start_polling(app.bot)
    finally:
        app.scheduler.shutdown(wait=False)
        await app.dispatcher.storage.close()
        await app.bot.session.close()
        await app.engine.dispose()


def run() -> None:
    """Console script entry point."""

    try:
        asyncio.run(main())
    except ConfigurationError as error:
        logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
        logger.error("Cannot start: %s", error)
        raise SystemExit(1) from error


if __name__ == "__main__":
    run()
