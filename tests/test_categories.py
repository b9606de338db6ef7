import pytest

from moolah.services.categories import (
    CATEGORIES,
    CATEGORY_KEYWORDS,
    category_label,
    classify,
    normalize_category,
)


@pytest.mark.parametrize(
    ("description", "category"),
    [
        ("Coffee", "food"),
        ("groceries", "food"),
        ("taxi", "transport"),
        ("電車", "transport"),
        ("new shoes", "shopping"),
        ("movie tickets", "entertainment"),
        ("ゲーム", "entertainment"),
        ("doctor visit", "health"),
        ("薬", "health"),
        ("electricity bill", "utilities"),
        ("monthly rent", "housing"),
        ("房租", "housing"),
        ("random thing", "other"),
    ],
)
def test_classify_matches_keywords_across_languages(description: str, category: str) -> None:
    assert classify(description) == category


def test_keyword_table_declaration_order_is_fixed() -> None:
    assert list(CATEGORY_KEYWORDS) == [
        "food",
        "transport",
        "shopping",
        "entertainment",
        "health",
        "utilities",
        "housing",
    ]
    assert CATEGORIES[-1] == "other"


@pytest.mark.parametrize(
    ("description", "category"),
    [
        ("coffee at the mall", "food"),
        ("gym membership bill", "health"),
        ("car for the home move", "transport"),
        ("streaming internet bundle", "entertainment"),
    ],
)
def test_first_declared_category_wins_on_collisions(description: str, category: str) -> None:
    assert classify(description) == category


def test_classify_is_deterministic() -> None:
    assert classify("Lunch with team") == classify("Lunch with team") == "food"


def test_normalize_category_falls_back_to_other() -> None:
    assert normalize_category("FOOD") == "food"
    assert normalize_category("pets") == "other"
    assert normalize_category(None) == "other"


def test_category_labels() -> None:
    assert category_label("food", "en") == "Food & Dining"
    assert category_label("housing", "zh") == "住房"
    assert category_label("other", "bilingual") == "その他 / Other"
