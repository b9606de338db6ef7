"""Hashtag extraction helpers."""

from __future__ import annotations

import re
from collections.abc import Iterable

TAG_PATTERN = re.compile(r"#(\w+)")


def extract_tags(text: str) -> list[str]:
    """Return lower-cased hashtags from ``text`` in order of appearance.

    Repeated hashtags are kept; use :func:`normalize_tags` to collapse them.
    """

    return [match.group(1).lower() for match in TAG_PATTERN.finditer(text or "")]


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Strip ``#`` prefixes, lower-case and de-duplicate preserving order."""

    seen: set[str] = set()
    result: list[str] = []
    for raw in tags:
        tag = raw.strip().lstrip("#").strip().lower()
        if not tag or tag in seen:
            continue
        seen.add(tag)
        result.append(tag)
    return result


__all__ = ["TAG_PATTERN", "extract_tags", "normalize_tags"]
