"""Utilities for parsing expense input messages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Final

from moolah.services.categories import classify
from moolah.services.currencies import DEFAULT_YEN_RATE
from moolah.services.tags import extract_tags

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION: Final[str] = "Misc expense"

YEN_MARKERS: Final[tuple[str, ...]] = ("¥", "円")

_NUMBER = r"(\d+(?:\.\d{1,2})?)"
_WHOLE_NUMBER = r"(\d+)"
_SPEND_VERB = r"(?:spent|paid|bought|cost|purchased?)"
_PREPOSITION = r"\s*(?:(?:on|for)\b)?\s*(.*)"
_ZH_VERB = r"(?:花了|花费|买了|花)"
_ZH_CURRENCY = r"(?:美元|元|块钱?|塊錢?|塊)"
_ZH_OBJECT = r"\s*(?:买|在)?\s*(.*)"
_CURRENCY_WORD = r"(?:dollars?|bucks?|yen|円|美元|元|塊)"


@dataclass(frozen=True, slots=True)
class ParseRule:
    """A named pattern capturing an amount and an optional description."""

    name: str
    pattern: re.Pattern[str]


# Verb-prefixed rules come before their bare counterparts so the verb is
# never swallowed into the description.
PARSE_RULES: Final[tuple[ParseRule, ...]] = (
    ParseRule(
        "verb_dollar",
        re.compile(rf"{_SPEND_VERB}\s*(?:.*?)?\${_NUMBER}{_PREPOSITION}", re.IGNORECASE),
    ),
    ParseRule("dollar", re.compile(rf"\${_NUMBER}{_PREPOSITION}", re.IGNORECASE)),
    ParseRule(
        "verb_yen",
        re.compile(rf"{_SPEND_VERB}\s*(?:.*?)?¥{_WHOLE_NUMBER}{_PREPOSITION}", re.IGNORECASE),
    ),
    ParseRule("yen", re.compile(rf"¥{_WHOLE_NUMBER}{_PREPOSITION}", re.IGNORECASE)),
    ParseRule("yen_word", re.compile(rf"{_WHOLE_NUMBER}\s*円{_PREPOSITION}", re.IGNORECASE)),
    ParseRule(
        "zh_verb",
        re.compile(rf"{_ZH_VERB}\s*{_NUMBER}\s*{_ZH_CURRENCY}{_ZH_OBJECT}", re.IGNORECASE),
    ),
    ParseRule(
        "zh_currency",
        re.compile(rf"{_NUMBER}\s*{_ZH_CURRENCY}{_ZH_OBJECT}", re.IGNORECASE),
    ),
    ParseRule(
        "currency_word",
        re.compile(rf"{_NUMBER}\s*{_CURRENCY_WORD}{_PREPOSITION}", re.IGNORECASE),
    ),
)


@dataclass(frozen=True, slots=True)
class ExchangeContext:
    """Conversion data applied while parsing; amounts are stored in USD."""

    yen_rate: Decimal = DEFAULT_YEN_RATE

    def to_base(self, amount: Decimal) -> Decimal:
        rate = self.yen_rate if self.yen_rate > 0 else DEFAULT_YEN_RATE
        return amount / rate


@dataclass(frozen=True, slots=True)
class ParsedExpense:
    """Structured fields extracted from a free-form message."""

    amount: Decimal
    description: str
    category: str
    tags: list[str] = field(default_factory=list)
    rule: str | None = None


def contains_yen_marker(text: str) -> bool:
    """Return ``True`` when the text mentions yen by symbol or character."""

    return any(marker in text for marker in YEN_MARKERS)


def parse_expense(
    text: str,
    exchange: ExchangeContext | None = None,
) -> ParsedExpense | None:
    """Parse free form expense text into structured components.

    Parameters
    ----------
    text:
        Raw message received from the user.
    exchange:
        Conversion context; yen amounts are divided by its ``yen_rate``.

    Returns
    -------
    ParsedExpense or None
        ``None`` when no rule matches or the captured amount is not a
        positive number. The description falls back to ``"Misc expense"``,
        the category is derived from the description and the tags from the
        whole message.
    """

    raw = text or ""
    exchange = exchange or ExchangeContext()

    for rule in PARSE_RULES:
        match = rule.pattern.search(raw)
        if match is None:
            continue

        try:
            amount = Decimal(match.group(1))
        except InvalidOperation:
            logger.debug("Rule %s captured a non-numeric amount", rule.name)
            return None

        if contains_yen_marker(raw):
            amount = exchange.to_base(amount)

        if amount <= 0:
            logger.debug("Rule %s captured a non-positive amount", rule.name)
            return None

        description = (match.group(2) or "").strip() or DEFAULT_DESCRIPTION
        return ParsedExpense(
            amount=amount,
            description=description,
            category=classify(description),
            tags=extract_tags(raw),
            rule=rule.name,
        )

    return None


__all__ = [
    "DEFAULT_DESCRIPTION",
    "PARSE_RULES",
    "ExchangeContext",
    "ParseRule",
    "ParsedExpense",
    "contains_yen_marker",
    "parse_expense",
]
