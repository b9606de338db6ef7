"""Business logic services for the Moolah bot."""

from .categories import CATEGORIES, classify
from .currencies import CURRENCIES, format_currency
from .expenses import ExpenseService, SubmitResult
from .expenses_parser import ExchangeContext, ParsedExpense, parse_expense
from .receipts import extract_expense_from_receipt
from .replies import ManualReplyQueue, ReplyQueue, SchedulerReplyQueue
from .reports import PERIODS, ExpenseReport, build_report, period_range
from .responses import ResponseGenerator
from .state import (
    LANGUAGES,
    PERSONALITIES,
    ChatbotSettings,
    ChatMessage,
    Expense,
    ExpenseLog,
    MalformedStateError,
)
from .storage import ExpenseStore, MemoryKeyValueStore, SqlKeyValueStore
from .tags import extract_tags

__all__ = [
    "CATEGORIES",
    "CURRENCIES",
    "LANGUAGES",
    "PERIODS",
    "PERSONALITIES",
    "ChatMessage",
    "ChatbotSettings",
    "ExchangeContext",
    "Expense",
    "ExpenseLog",
    "ExpenseReport",
    "ExpenseService",
    "ExpenseStore",
    "MalformedStateError",
    "ManualReplyQueue",
    "MemoryKeyValueStore",
    "ParsedExpense",
    "ReplyQueue",
    "ResponseGenerator",
    "SchedulerReplyQueue",
    "SqlKeyValueStore",
    "SubmitResult",
    "build_report",
    "classify",
    "extract_expense_from_receipt",
    "extract_tags",
    "format_currency",
    "parse_expense",
    "period_range",
]
