"""Period based expense reports."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Final

from moolah.services.categories import category_label
from moolah.services.currencies import format_currency
from moolah.services.state import ChatbotSettings, Expense

PERIODS: Final[tuple[str, ...]] = ("daily", "weekly", "monthly", "annual")

HUNDRED = Decimal(100)


@dataclass(frozen=True, slots=True)
class BreakdownItem:
    """Amount spent on one category or tag and its share of the total."""

    key: str
    amount: Decimal
    percentage: Decimal


@dataclass(slots=True)
class ExpenseReport:
    """Aggregated data for the half-open period ``[start, end)``."""

    period: str
    start: dt.date
    end: dt.date
    total_amount: Decimal
    expense_count: int
    average_expense: Decimal
    category_breakdown: dict[str, Decimal] = field(default_factory=dict)
    top_categories: list[BreakdownItem] = field(default_factory=list)
    tag_breakdown: dict[str, Decimal] = field(default_factory=dict)
    top_tags: list[BreakdownItem] = field(default_factory=list)


def _first_of_next_month(day: dt.date) -> dt.date:
    if day.month == 12:
        return dt.date(day.year + 1, 1, 1)
    return dt.date(day.year, day.month + 1, 1)


def period_range(period: str, anchor: dt.date | dt.datetime) -> tuple[dt.date, dt.date]:
    """Return the ``[start, end)`` calendar range of ``period`` around ``anchor``.

    Weeks start on Sunday.
    """

    day = anchor.date() if isinstance(anchor, dt.datetime) else anchor
    if period == "daily":
        return day, day + dt.timedelta(days=1)
    if period == "weekly":
        # date.weekday() is Monday=0; shift so Sunday=0.
        start = day - dt.timedelta(days=(day.weekday() + 1) % 7)
        return start, start + dt.timedelta(days=7)
    if period == "monthly":
        start = day.replace(day=1)
        return start, _first_of_next_month(start)
    if period == "annual":
        return dt.date(day.year, 1, 1), dt.date(day.year + 1, 1, 1)
    raise ValueError(f'Unknown report period "{period}". Use one of: {", ".join(PERIODS)}')


def _breakdown(totals: dict[str, Decimal], total: Decimal) -> list[BreakdownItem]:
    items = [
        BreakdownItem(
            key=key,
            amount=amount,
            percentage=(amount / total * HUNDRED) if total > 0 else Decimal(0),
        )
        for key, amount in totals.items()
    ]
    # sorted() is stable, so equal amounts keep their first-seen order.
    return sorted(items, key=lambda item: item.amount, reverse=True)


def build_report(
    expenses: Iterable[Expense],
    period: str,
    anchor: dt.date | dt.datetime,
) -> ExpenseReport:
    """Aggregate ``expenses`` dated inside the period containing ``anchor``.

    The input collection is only read. Every tag of an expense receives the
    full expense amount, so tag totals may exceed the overall total.
    """

    start, end = period_range(period, anchor)
    selected = [expense for expense in expenses if start <= expense.spent_on < end]

    total = sum((expense.amount for expense in selected), Decimal(0))
    count = len(selected)
    average = total / count if count else Decimal(0)

    by_category: dict[str, Decimal] = {}
    by_tag: dict[str, Decimal] = {}
    for expense in selected:
        by_category[expense.category] = by_category.get(expense.category, Decimal(0)) + expense.amount
        for tag in expense.tags:
            by_tag[tag] = by_tag.get(tag, Decimal(0)) + expense.amount

    return ExpenseReport(
        period=period,
        start=start,
        end=end,
        total_amount=total,
        expense_count=count,
        average_expense=average,
        category_breakdown=by_category,
        top_categories=_breakdown(by_category, total),
        tag_breakdown=by_tag,
        top_tags=_breakdown(by_tag, total),
    )


REPORT_TITLES: Final[dict[str, dict[str, str]]] = {
    "en": {
        "daily": "Daily report",
        "weekly": "Weekly report",
        "monthly": "Monthly report",
        "annual": "Annual report",
        "total": "Total",
        "count": "Expenses",
        "average": "Average",
        "categories": "By category",
        "tags": "By tag",
        "empty": "No expenses in this period yet.",
        "recent": "Recent expenses",
        "no_expenses": "No expenses yet.",
    },
    "ja": {
        "daily": "日次レポート",
        "weekly": "週次レポート",
        "monthly": "月次レポート",
        "annual": "年次レポート",
        "total": "合計",
        "count": "件数",
        "average": "平均",
        "categories": "カテゴリ別",
        "tags": "タグ別",
        "empty": "この期間の支出はまだありません。",
        "recent": "最近の支出",
        "no_expenses": "まだ支出がありません。",
    },
    "zh": {
        "daily": "日报",
        "weekly": "周报",
        "monthly": "月报",
        "annual": "年报",
        "total": "总计",
        "count": "笔数",
        "average": "平均",
        "categories": "按类别",
        "tags": "按标签",
        "empty": "这段时间还没有支出。",
        "recent": "最近的支出",
        "no_expenses": "还没有支出。",
    },
}


def title_for(key: str, language: str) -> str:
    """Return the localized label ``key``; bilingual shows Japanese then English."""

    if language == "bilingual":
        return f"{REPORT_TITLES['ja'][key]} / {REPORT_TITLES['en'][key]}"
    return REPORT_TITLES.get(language, REPORT_TITLES["en"])[key]


def render_report_message(report: ExpenseReport, settings: ChatbotSettings) -> str:
    """Return a chat friendly text version of ``report`` in the user's currency."""

    language = settings.language
    last_day = report.end - dt.timedelta(days=1)
    if report.start == last_day:
        span = report.start.isoformat()
    else:
        span = f"{report.start.isoformat()} – {last_day.isoformat()}"

    def money(value: Decimal) -> str:
        return format_currency(value, settings.currency, settings.exchange_rate)

    lines = [f"{title_for(report.period, language)} ({span})"]
    if not report.expense_count:
        lines.append(title_for("empty", language))
        return "\n".join(lines)

    lines.append(f"{title_for('total', language)}: {money(report.total_amount)}")
    lines.append(f"{title_for('count', language)}: {report.expense_count}")
    lines.append(f"{title_for('average', language)}: {money(report.average_expense)}")

    lines.append("")
    lines.append(f"{title_for('categories', language)}:")
    for item in report.top_categories:
        lines.append(
            f"{category_label(item.key, language)}: {money(item.amount)} "
            f"({item.percentage:.1f}%)"
        )

    if report.top_tags:
        lines.append("")
        lines.append(f"{title_for('tags', language)}:")
        for item in report.top_tags:
            lines.append(f"#{item.key}: {money(item.amount)} ({item.percentage:.1f}%)")

    return "\n".join(lines)


__all__ = [
    "PERIODS",
    "BreakdownItem",
    "ExpenseReport",
    "build_report",
    "period_range",
    "render_report_message",
    "title_for",
]
