"""Extraction of a candidate expense from recognised receipt text.

Optical character recognition happens outside the bot; this module only
looks at the plain text blob it returns.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from moolah.services.categories import classify
from moolah.services.expenses_parser import ParsedExpense

TOTAL_PATTERNS = (
    re.compile(r"total[:\s]*\$?(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"amount[:\s]*\$?(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"\$(\d+\.?\d*)\s*total", re.IGNORECASE),
    re.compile(r"grand\s*total[:\s]*\$?(\d+\.?\d*)", re.IGNORECASE),
)
DOLLAR_PATTERN = re.compile(r"\$(\d+\.?\d*)")
MERCHANT_PATTERNS = (
    re.compile(r"^([A-Z][A-Z\s&]+)$"),
    re.compile(r"^([A-Z][a-zA-Z\s&]+)$"),
)
MERCHANT_SEARCH_LINES = 5
CENTS = Decimal("0.01")

FALLBACK_DESCRIPTIONS = {
    "ja": "レシート支出",
}
DEFAULT_FALLBACK_DESCRIPTION = "Receipt expense"


def _to_decimal(raw: str) -> Decimal | None:
    try:
        return Decimal(raw.rstrip("."))
    except InvalidOperation:
        return None


def _find_total(lines: list[str]) -> Decimal:
    amount = Decimal(0)
    for line in lines:
        for pattern in TOTAL_PATTERNS:
            match = pattern.search(line)
            if match is None:
                continue
            found = _to_decimal(match.group(1))
            if found is not None and found > amount:
                amount = found
    if amount > 0:
        return amount

    for line in lines:
        for match in DOLLAR_PATTERN.finditer(line):
            found = _to_decimal(match.group(1))
            if found is not None and found > amount:
                amount = found
    return amount


def _find_merchant(lines: list[str]) -> str | None:
    for line in lines[:MERCHANT_SEARCH_LINES]:
        for pattern in MERCHANT_PATTERNS:
            match = pattern.match(line)
            if match and 3 < len(match.group(1)) < 30:
                return match.group(1).strip()
    return None


def extract_expense_from_receipt(text: str, language: str = "en") -> ParsedExpense | None:
    """Return the receipt total and merchant as a parsed expense.

    The largest amount found on a total line wins; without one, the largest
    dollar amount anywhere on the receipt is used. The amount is rounded to
    cents, and ``None`` is returned when nothing positive remains.
    """

    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    amount = _find_total(lines).quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount <= 0:
        return None

    description = _find_merchant(lines) or FALLBACK_DESCRIPTIONS.get(
        language, DEFAULT_FALLBACK_DESCRIPTION
    )
    return ParsedExpense(
        amount=amount,
        description=description,
        category=classify(description),
        tags=[],
        rule="receipt",
    )


__all__ = ["extract_expense_from_receipt"]
