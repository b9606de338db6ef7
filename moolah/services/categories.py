"""Keyword based expense categorisation.

Descriptions are matched against a fixed keyword table covering English,
Japanese and Chinese synonyms. The first category in declaration order whose
keyword occurs in the description wins, so a description such as
``"coffee at the mall"`` is ``food`` rather than ``shopping``. Reordering
:data:`CATEGORY_KEYWORDS` therefore changes results for ambiguous input.
"""

from __future__ import annotations

from typing import Final

DEFAULT_CATEGORY: Final[str] = "other"

CATEGORY_KEYWORDS: Final[dict[str, tuple[str, ...]]] = {
    "food": (
        "food", "restaurant", "lunch", "dinner", "breakfast", "coffee",
        "groceries", "grocery", "snack", "meal",
        "コーヒー", "昼食", "夕食", "朝食", "食事",
        "咖啡", "午餐", "晚餐", "早餐", "食物",
    ),
    "transport": (
        "gas", "fuel", "uber", "taxi", "bus", "train", "parking", "car",
        "transport",
        "交通", "バス", "電車", "タクシー",
        "公交", "地铁", "出租车",
    ),
    "shopping": (
        "clothes", "clothing", "shoes", "shopping", "amazon", "store", "mall",
        "買い物", "服", "靴",
        "购物", "衣服", "鞋子",
    ),
    "entertainment": (
        "movie", "cinema", "game", "concert", "show", "entertainment",
        "streaming",
        "映画", "ゲーム", "娯楽",
        "电影", "游戏", "娱乐",
    ),
    "health": (
        "doctor", "medicine", "pharmacy", "hospital", "gym", "fitness",
        "health",
        "病院", "薬", "医者", "ジム",
        "医生", "药", "医院", "健身房",
    ),
    "utilities": (
        "electricity", "water", "internet", "phone", "cable", "utility",
        "bill",
        "電気", "水道", "インターネット",
        "电费", "水费", "网费",
    ),
    "housing": (
        "rent", "mortgage", "housing", "home", "apartment",
        "家賃", "住居", "アパート",
        "房租", "住房", "公寓",
    ),
}

CATEGORIES: Final[tuple[str, ...]] = (*CATEGORY_KEYWORDS, DEFAULT_CATEGORY)

CATEGORY_LABELS: Final[dict[str, dict[str, str]]] = {
    "en": {
        "food": "Food & Dining",
        "transport": "Transportation",
        "shopping": "Shopping",
        "entertainment": "Entertainment",
        "health": "Health & Fitness",
        "utilities": "Utilities",
        "housing": "Housing",
        "other": "Other",
    },
    "ja": {
        "food": "食事・飲食",
        "transport": "交通費",
        "shopping": "買い物",
        "entertainment": "娯楽",
        "health": "健康・医療",
        "utilities": "光熱費",
        "housing": "住居費",
        "other": "その他",
    },
    "zh": {
        "food": "餐饮",
        "transport": "交通",
        "shopping": "购物",
        "entertainment": "娱乐",
        "health": "健康健身",
        "utilities": "公用事业",
        "housing": "住房",
        "other": "其他",
    },
}


def classify(description: str) -> str:
    """Return the category for ``description`` using first-match keyword lookup."""

    text = (description or "").lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def normalize_category(value: str | None) -> str:
    """Return ``value`` if it is a known category, otherwise ``other``."""

    candidate = (value or "").strip().lower()
    return candidate if candidate in CATEGORIES else DEFAULT_CATEGORY


def category_label(category: str, language: str) -> str:
    """Return the display label of ``category`` for ``language``."""

    if language == "bilingual":
        return f"{category_label(category, 'ja')} / {category_label(category, 'en')}"
    labels = CATEGORY_LABELS.get(language, CATEGORY_LABELS["en"])
    return labels.get(category, labels[DEFAULT_CATEGORY])


__all__ = [
    "CATEGORIES",
    "CATEGORY_KEYWORDS",
    "CATEGORY_LABELS",
    "DEFAULT_CATEGORY",
    "category_label",
    "classify",
    "normalize_category",
]
