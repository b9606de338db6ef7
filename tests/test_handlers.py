import asyncio
import datetime as dt
from decimal import Decimal
from types import SimpleNamespace

import pytest

from moolah.handlers import setup_routers
from moolah.handlers.common import ExpenseAction, ReportAction, command_argument, parse_amount
from moolah.handlers.stats import parse_report_arguments, report_period_chosen
from moolah.services.expenses import ExpenseService
from moolah.services.replies import ManualReplyQueue
from moolah.services.storage import ExpenseStore, MemoryKeyValueStore


def test_command_argument() -> None:
    assert command_argument("/last 25") == "25"
    assert command_argument("/edit 1 12.5 lunch #work") == "1 12.5 lunch #work"
    assert command_argument("/today") == ""
    assert command_argument(None) == ""


@pytest.mark.parametrize(
    ("value", "expected"),
    [("12", Decimal("12")), ("$4.50", Decimal("4.50")), ("3,75", Decimal("3.75"))],
)
def test_parse_amount(value: str, expected: Decimal) -> None:
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", ["", "abc", "0", "-5", "NaN", "Infinity"])
def test_parse_amount_rejects_invalid_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_amount(value)


def test_report_arguments_default_to_current_month() -> None:
    assert parse_report_arguments("") == ("monthly", None)


def test_report_arguments_accept_period_and_anchor_in_any_order() -> None:
    assert parse_report_arguments("2024-03-15 weekly") == ("weekly", dt.date(2024, 3, 15))
    assert parse_report_arguments("ANNUAL") == ("annual", None)


def test_report_arguments_reject_garbage() -> None:
    with pytest.raises(ValueError):
        parse_report_arguments("fortnightly")


def test_callback_data_round_trip() -> None:
    packed = ReportAction(period="weekly", anchor="2024-03-15").pack()
    assert ReportAction.unpack(packed) == ReportAction(period="weekly", anchor="2024-03-15")

    packed = ExpenseAction(action="delete", expense_id="1710504000000").pack()
    assert ExpenseAction.unpack(packed).expense_id == "1710504000000"


def test_routers_can_be_assembled() -> None:
    router = setup_routers()

    assert len(router.sub_routers) == 6


class RecordingCallback:
    def __init__(self, user_id: int) -> None:
        self.from_user = SimpleNamespace(id=user_id)
        self.message = SimpleNamespace(edit_text=self._edit_text)
        self.answers: list[tuple[str | None, bool]] = []
        self.edits: list[str] = []

    async def _edit_text(self, text: str, reply_markup=None) -> None:
        self.edits.append(text)

    async def answer(self, text: str | None = None, show_alert: bool = False) -> None:
        self.answers.append((text, show_alert))


def make_service() -> ExpenseService:
    return ExpenseService(
        ExpenseStore(MemoryKeyValueStore()),
        ManualReplyQueue(),
        clock=lambda: dt.datetime(2024, 3, 15, 12, 0),
    )


def test_unknown_report_period_button_shows_an_alert() -> None:
    callback = RecordingCallback(7)

    asyncio.run(
        report_period_chosen(callback, ReportAction(period="hourly"), make_service())
    )

    assert callback.edits == []
    assert len(callback.answers) == 1
    text, show_alert = callback.answers[0]
    assert show_alert
    assert "Unknown report period" in text


def test_malformed_anchor_button_shows_an_alert() -> None:
    callback = RecordingCallback(7)

    asyncio.run(
        report_period_chosen(
            callback, ReportAction(period="weekly", anchor="yesterday"), make_service()
        )
    )

    assert callback.edits == []
    assert callback.answers[0][1]


def test_report_period_button_rerenders_the_report() -> None:
    callback = RecordingCallback(7)

    asyncio.run(
        report_period_chosen(callback, ReportAction(period="weekly"), make_service())
    )

    assert len(callback.edits) == 1
    assert callback.answers == [(None, False)]
