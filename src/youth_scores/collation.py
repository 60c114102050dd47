"""Locale-aware ordering for Arabic team and group names."""
from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from pyuca import Collator


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def collation_key(value: str) -> Tuple[int, ...]:
    """Return a sort key following the Unicode Collation Algorithm."""

    return _collator().sort_key(value or "")


def compare_names(left: str, right: str) -> int:
    left_key = collation_key(left)
    right_key = collation_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0
