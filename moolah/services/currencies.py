"""Static currency table used for display formatting and yen conversion."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Final


@dataclass(frozen=True, slots=True)
class Currency:
    """A display currency with a fixed rate relative to the USD base."""

    code: str
    symbol: str
    name: str
    rate: Decimal


BASE_CURRENCY: Final[str] = "USD"

CURRENCIES: Final[dict[str, Currency]] = {
    "USD": Currency("USD", "$", "US Dollar", Decimal("1")),
    "JPY": Currency("JPY", "¥", "Japanese Yen", Decimal("150")),
    "EUR": Currency("EUR", "€", "Euro", Decimal("0.85")),
    "GBP": Currency("GBP", "£", "British Pound", Decimal("0.75")),
    "CAD": Currency("CAD", "C$", "Canadian Dollar", Decimal("1.35")),
    "AUD": Currency("AUD", "A$", "Australian Dollar", Decimal("1.45")),
}

DEFAULT_YEN_RATE: Final[Decimal] = CURRENCIES["JPY"].rate

TWO_PLACES = Decimal("0.01")


def get_currency(code: str) -> Currency:
    """Return the currency for ``code`` or raise :class:`ValueError`."""

    currency = CURRENCIES.get(code.strip().upper())
    if currency is None:
        supported = ", ".join(CURRENCIES)
        raise ValueError(f'Unknown currency "{code}". Supported: {supported}')
    return currency


def format_amount(value: Decimal) -> str:
    """Return a short representation: integers without cents, else two places."""

    normalized = value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    if normalized == normalized.to_integral():
        return f"{int(normalized)}"
    return f"{normalized}"


def format_currency(amount: Decimal, code: str, rate: Decimal | None = None) -> str:
    """Convert a base amount into ``code`` and render it with the symbol.

    Yen has no minor unit, so it is rounded to whole units and grouped by
    thousands; every other currency is shown with two decimals.
    """

    currency = get_currency(code)
    converted = amount * (currency.rate if rate is None else rate)
    if currency.code == "JPY":
        whole = int(converted.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return f"{currency.symbol}{whole:,}"
    return f"{currency.symbol}{converted.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)}"


__all__ = [
    "BASE_CURRENCY",
    "CURRENCIES",
    "DEFAULT_YEN_RATE",
    "Currency",
    "format_amount",
    "format_currency",
    "get_currency",
]
