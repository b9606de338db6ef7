from decimal import Decimal

from moolah.services.receipts import extract_expense_from_receipt

RECEIPT = """
CITY COFFEE
Latte $4.50
Muffin $3.00
Subtotal: $7.50
TOTAL: $8.10
Thank you!
"""


def test_largest_total_line_and_merchant_are_used() -> None:
    expense = extract_expense_from_receipt(RECEIPT)

    assert expense is not None
    assert expense.amount == Decimal("8.10")
    assert expense.description == "CITY COFFEE"
    assert expense.category == "food"
    assert expense.rule == "receipt"


def test_largest_dollar_amount_is_used_without_total_line() -> None:
    expense = extract_expense_from_receipt("corner shop\n$2.00 gum\n$5.25 chips", language="ja")

    assert expense is not None
    assert expense.amount == Decimal("5.25")
    assert expense.description == "レシート支出"
    assert expense.category == "other"


def test_english_fallback_description() -> None:
    expense = extract_expense_from_receipt("paid $3.20")

    assert expense is not None
    assert expense.description == "Receipt expense"


def test_receipt_without_amount() -> None:
    assert extract_expense_from_receipt("thank you for shopping") is None
    assert extract_expense_from_receipt("") is None


def test_total_is_rounded_to_cents() -> None:
    expense = extract_expense_from_receipt("GROCERY STORE\nTotal: 12.345\n")

    assert expense is not None
    assert expense.amount == Decimal("12.35")
    assert expense.description == "GROCERY STORE"


def test_total_that_rounds_to_zero_is_ignored() -> None:
    assert extract_expense_from_receipt("Total: 0.004") is None
