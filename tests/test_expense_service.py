import asyncio
import datetime as dt
import random
from decimal import Decimal

import pytest

from moolah.services.expenses import ExpenseService, render_edited_message
from moolah.services.replies import ManualReplyQueue
from moolah.services.responses import ERROR_RESPONSES, NOTIFICATIONS, ResponseGenerator
from moolah.services.state import ChatbotSettings, ChatMessage, Expense
from moolah.services.storage import EXPENSES_KEY, ExpenseStore, MemoryKeyValueStore

NOW = dt.datetime(2024, 3, 15, 12, 0)
USER_ID = 42


def make_service(
    backend: MemoryKeyValueStore | None = None,
    clock=lambda: NOW,
) -> tuple[ExpenseService, ManualReplyQueue]:
    queue = ManualReplyQueue()
    service = ExpenseService(
        ExpenseStore(backend or MemoryKeyValueStore()),
        queue,
        responses=ResponseGenerator(random.Random(0)),
        clock=clock,
    )
    return service, queue


def rendered(pool: tuple[str, ...], user: str = "Friend") -> set[str]:
    return {template.format(user=user) for template in pool}


def test_expense_is_stored_with_message_and_reply_follows() -> None:
    async def scenario() -> None:
        service, queue = make_service()

        result = await service.submit_expense_text(USER_ID, "I spent $15 on coffee")

        assert result.accepted
        assert result.expense is not None
        assert result.expense.amount == Decimal("15")
        assert result.expense.description == "coffee"
        assert result.expense.category == "food"
        assert result.expense.date == "2024-03-15"

        messages = await service.list_messages(USER_ID)
        assert [message.sender for message in messages] == ["user"]
        assert messages[0].expense == result.expense
        assert queue.pending == 1

        await queue.run_pending()

        messages = await service.list_messages(USER_ID)
        assert [message.sender for message in messages] == ["user", "bot"]
        assert messages[1].timestamp > messages[0].timestamp
        assert messages[1].content in ResponseGenerator().expense_candidates(
            result.expense, ChatbotSettings()
        )

    asyncio.run(scenario())


def test_message_without_amount_gets_a_nudge() -> None:
    async def scenario() -> None:
        service, queue = make_service()

        result = await service.submit_expense_text(USER_ID, "just chatting")

        assert not result.accepted
        assert result.expense is None
        assert result.user_message.content == "just chatting"
        assert await service.list_recent_expenses(USER_ID) == []

        await queue.run_pending()

        messages = await service.list_messages(USER_ID)
        assert [message.sender for message in messages] == ["user", "bot"]
        assert messages[1].content in rendered(ERROR_RESPONSES["sarcastic"]["en"])

    asyncio.run(scenario())


def test_empty_message_is_rejected() -> None:
    service, queue = make_service()

    with pytest.raises(ValueError):
        asyncio.run(service.submit_expense_text(USER_ID, "   "))
    assert queue.pending == 0


def test_replies_follow_their_user_messages() -> None:
    async def scenario() -> None:
        service, queue = make_service()

        first = await service.submit_expense_text(USER_ID, "$5 on bus")
        second = await service.submit_expense_text(USER_ID, "hello there")
        await queue.run_pending()

        messages = await service.list_messages(USER_ID)
        assert [message.sender for message in messages] == ["user", "user", "bot", "bot"]
        assert messages[0].id == first.user_message.id
        assert messages[1].id == second.user_message.id
        stamps = [message.timestamp for message in messages]
        assert stamps == sorted(stamps)
        assert len(set(stamps)) == len(stamps)

    asyncio.run(scenario())


def test_yen_amount_is_converted_to_dollars() -> None:
    async def scenario() -> None:
        service, _ = make_service()

        result = await service.submit_expense_text(USER_ID, "¥1500 on taxi")

        assert result.expense is not None
        assert result.expense.amount == Decimal("10")
        assert result.expense.category == "transport"

    asyncio.run(scenario())


def test_yen_user_can_override_the_rate() -> None:
    async def scenario() -> None:
        service, _ = make_service()
        await service.update_settings(USER_ID, currency="JPY", exchange_rate=Decimal("100"))

        result = await service.submit_expense_text(USER_ID, "¥1500 on taxi")

        assert result.expense is not None
        assert result.expense.amount == Decimal("15")

    asyncio.run(scenario())


def test_duplicate_tags_are_collapsed_and_mentioned_in_reply() -> None:
    async def scenario() -> None:
        service, queue = make_service()

        result = await service.submit_expense_text(USER_ID, "$5 on coffee #Work #work")
        await queue.run_pending()

        assert result.expense is not None
        assert result.expense.tags == ["work"]
        messages = await service.list_messages(USER_ID)
        assert messages[-1].content.endswith(" Tagged with: #work")

    asyncio.run(scenario())


def test_update_keeps_expense_and_message_in_sync() -> None:
    async def scenario() -> None:
        service, queue = make_service()
        result = await service.submit_expense_text(USER_ID, "I spent $15 on coffee")
        await queue.run_pending()
        assert result.expense is not None

        updated = await service.update_expense(
            USER_ID,
            result.expense.id,
            amount=Decimal("20"),
            description="latte",
            tags=["#Morning"],
        )

        assert updated.amount == Decimal("20")
        assert updated.tags == ["morning"]
        messages = await service.list_messages(USER_ID)
        linked = [message for message in messages if message.expense is not None]
        assert len(linked) == 1
        assert linked[0].expense == updated
        assert linked[0].content == "I spent $20.00 on latte #morning"

        report = await service.get_report(USER_ID, "daily")
        assert report.total_amount == Decimal("20")

        await queue.run_pending()
        messages = await service.list_messages(USER_ID)
        assert messages[-1].content in rendered(NOTIFICATIONS["updated"]["en"])

    asyncio.run(scenario())


def test_update_validates_input() -> None:
    async def scenario() -> None:
        service, _ = make_service()
        result = await service.submit_expense_text(USER_ID, "$5 on bus")
        assert result.expense is not None
        expense_id = result.expense.id

        with pytest.raises(ValueError):
            await service.update_expense(USER_ID, "missing", amount=Decimal("1"))
        with pytest.raises(ValueError):
            await service.update_expense(USER_ID, expense_id, amount=Decimal("0"))
        with pytest.raises(ValueError):
            await service.update_expense(USER_ID, expense_id, description="  ")
        with pytest.raises(ValueError):
            await service.update_expense(USER_ID, expense_id, category="pets")

        expenses = await service.list_recent_expenses(USER_ID)
        assert expenses[0].amount == Decimal("5")

    asyncio.run(scenario())


def test_delete_removes_expense_and_its_messages() -> None:
    async def scenario() -> None:
        service, queue = make_service()
        kept = await service.submit_expense_text(USER_ID, "$8 on lunch")
        removed = await service.submit_expense_text(USER_ID, "$5 on bus")
        await queue.run_pending()
        assert kept.expense is not None and removed.expense is not None

        await service.delete_expense(USER_ID, removed.expense.id)

        expenses = await service.list_recent_expenses(USER_ID)
        assert [expense.id for expense in expenses] == [kept.expense.id]
        messages = await service.list_messages(USER_ID)
        assert all(
            message.expense is None or message.expense.id != removed.expense.id
            for message in messages
        )
        report = await service.get_report(USER_ID, "monthly")
        assert report.expense_count == 1
        assert report.total_amount == Decimal("8")

        await queue.run_pending()
        messages = await service.list_messages(USER_ID)
        assert messages[-1].content in rendered(NOTIFICATIONS["deleted"]["en"])

        with pytest.raises(ValueError):
            await service.delete_expense(USER_ID, removed.expense.id)

    asyncio.run(scenario())


def test_clear_leaves_single_confirmation() -> None:
    async def scenario() -> None:
        service, queue = make_service()
        await service.submit_expense_text(USER_ID, "$8 on lunch")
        await queue.run_pending()

        message = await service.clear_all_data(USER_ID)

        assert message.sender == "bot"
        assert message.content in rendered(NOTIFICATIONS["cleared"]["en"])
        assert await service.list_messages(USER_ID) == [message]
        assert await service.list_recent_expenses(USER_ID) == []

    asyncio.run(scenario())


def test_session_start_greets_only_empty_conversations() -> None:
    async def scenario() -> None:
        service, _ = make_service()

        welcome = await service.start_session(USER_ID, user_name="Ana")

        assert welcome is not None
        assert welcome.content.startswith("Hey there, Ana!")
        assert (await service.get_settings(USER_ID)).user_name == "Ana"
        assert await service.start_session(USER_ID, user_name="Ana") is None
        assert len(await service.list_messages(USER_ID)) == 1

    asyncio.run(scenario())


def test_session_start_keeps_chosen_name() -> None:
    async def scenario() -> None:
        service, _ = make_service()
        await service.update_settings(USER_ID, user_name="Boss")

        welcome = await service.start_session(USER_ID, user_name="Ana")

        assert welcome is not None
        assert "Boss" in welcome.content
        assert (await service.get_settings(USER_ID)).user_name == "Boss"

    asyncio.run(scenario())


def test_settings_updates_are_validated() -> None:
    async def scenario() -> None:
        service, _ = make_service()

        settings = await service.update_settings(USER_ID, currency="jpy", language="JA")
        assert settings.currency == "JPY"
        assert settings.exchange_rate == Decimal("150")
        assert settings.language == "ja"

        for kwargs in (
            {"language": "fr"},
            {"personality": "grumpy"},
            {"currency": "XYZ"},
            {"name": " "},
            {"exchange_rate": Decimal("0")},
        ):
            with pytest.raises(ValueError):
                await service.update_settings(USER_ID, **kwargs)

        assert await service.get_settings(USER_ID) == settings

    asyncio.run(scenario())


def test_custom_tags_are_normalized() -> None:
    async def scenario() -> None:
        service, _ = make_service()

        await service.add_custom_tag(USER_ID, "#Work")
        settings = await service.add_custom_tag(USER_ID, "work")
        assert settings.custom_tags == ["work"]

        settings = await service.remove_custom_tag(USER_ID, "WORK")
        assert settings.custom_tags == []

        with pytest.raises(ValueError):
            await service.add_custom_tag(USER_ID, "#")

    asyncio.run(scenario())


def test_receipt_total_is_submitted_as_expense() -> None:
    async def scenario() -> None:
        service, _ = make_service()

        result = await service.add_receipt_expense(
            USER_ID, "CITY COFFEE\nLatte $4.50\nTOTAL: $4.50"
        )

        assert result is not None and result.expense is not None
        assert result.expense.amount == Decimal("4.50")
        assert result.expense.description == "CITY COFFEE"
        assert result.expense.category == "food"
        assert result.user_message.content == "I spent $4.50 on CITY COFFEE"

        assert await service.add_receipt_expense(USER_ID, "no numbers here") is None

    asyncio.run(scenario())


def test_receipt_for_yen_user_round_trips_amount() -> None:
    async def scenario() -> None:
        service, _ = make_service()
        await service.update_settings(USER_ID, currency="JPY")

        result = await service.add_receipt_expense(USER_ID, "CITY COFFEE\nTOTAL: $4.50")

        assert result is not None and result.expense is not None
        assert result.user_message.content == "I spent ¥675 on CITY COFFEE"
        assert result.expense.amount == Decimal("4.5")

    asyncio.run(scenario())


def test_reply_listeners_receive_stored_bot_messages() -> None:
    async def scenario() -> None:
        service, queue = make_service()
        delivered: list[tuple[int, ChatMessage]] = []

        async def listener(user_id: int, message: ChatMessage) -> None:
            delivered.append((user_id, message))

        service.add_reply_listener(listener)
        await service.submit_expense_text(USER_ID, "$5 on bus")
        assert delivered == []

        await queue.run_pending()

        messages = await service.list_messages(USER_ID)
        assert delivered == [(USER_ID, messages[-1])]

    asyncio.run(scenario())


def test_recent_expenses_are_newest_first() -> None:
    async def scenario() -> None:
        service, _ = make_service()
        first = await service.submit_expense_text(USER_ID, "$5 on bus")
        second = await service.submit_expense_text(USER_ID, "$15 on coffee")
        assert first.expense is not None and second.expense is not None

        expenses = await service.list_recent_expenses(USER_ID)
        assert [expense.id for expense in expenses] == [second.expense.id, first.expense.id]
        assert await service.list_recent_expenses(USER_ID, limit=1) == [second.expense]

        text = await service.render_recent_expenses_message(USER_ID, 10)
        assert f"[{second.expense.id}] 2024-03-15 — Food & Dining: $15.00 (coffee)" in text

    asyncio.run(scenario())


def test_logging_goes_stale_after_twelve_hours() -> None:
    async def scenario() -> None:
        now = [NOW]
        service, _ = make_service(clock=lambda: now[0])

        assert await service.is_logging_stale(USER_ID)
        await service.submit_expense_text(USER_ID, "$5 on bus")
        assert not await service.is_logging_stale(USER_ID)

        now[0] = NOW + dt.timedelta(hours=13)
        assert await service.is_logging_stale(USER_ID)

    asyncio.run(scenario())


def test_corrupt_log_is_reset_for_the_session() -> None:
    async def scenario() -> None:
        backend = MemoryKeyValueStore()
        await backend.set(USER_ID, EXPENSES_KEY, "[1, 2")
        service, _ = make_service(backend)

        welcome = await service.start_session(USER_ID)

        assert welcome is not None
        assert await service.list_messages(USER_ID) == [welcome]

    asyncio.run(scenario())


def test_render_edited_message_always_shows_cents() -> None:
    expense = Expense(
        id="1",
        amount=Decimal("7"),
        description="snacks",
        category="food",
        date="2024-03-15",
        timestamp=1,
        tags=["treat", "late"],
    )

    assert render_edited_message(expense) == "I spent $7.00 on snacks #treat #late"


def test_receipt_with_fractional_cents_keeps_merchant_description() -> None:
    async def scenario() -> None:
        service, _ = make_service()

        result = await service.add_receipt_expense(USER_ID, "GROCERY STORE\nTotal: 12.345\n")

        assert result is not None and result.expense is not None
        assert result.user_message.content == "I spent $12.35 on GROCERY STORE"
        assert result.expense.amount == Decimal("12.35")
        assert result.expense.description == "GROCERY STORE"
        assert result.expense.category == "food"

    asyncio.run(scenario())


def test_recent_expenses_follow_user_language() -> None:
    async def scenario() -> None:
        service, _ = make_service()
        await service.update_settings(USER_ID, language="ja")

        assert await service.render_recent_expenses_message(USER_ID, 10) == "まだ支出がありません。"

        await service.submit_expense_text(USER_ID, "$15 on coffee")
        text = await service.render_recent_expenses_message(USER_ID, 10)
        assert text.startswith("最近の支出:\n")
        assert "食事・飲食: $15.00 (coffee)" in text

        await service.update_settings(USER_ID, language="en")
        text = await service.render_recent_expenses_message(USER_ID, 10)
        assert text.startswith("Recent expenses:\n")

    asyncio.run(scenario())
