"""Nearest-point lookup over a sorted sequence (chart hover support)."""

from __future__ import annotations

from bisect import bisect_left
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence, TypeVar

T = TypeVar("T")


def as_comparable(value: Any) -> Any:
    """Promote a plain date to midnight datetime; other values pass through."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    return value


def date_distance(left: Any, right: Any) -> float:
    """Absolute distance in seconds between two dates or datetimes."""
    left = as_comparable(left)
    right = as_comparable(right)
    if isinstance(left, datetime) and isinstance(right, datetime):
        return abs((left - right).total_seconds())
    return abs(left - right)


def nearest_in_sorted(
    items: Sequence[T],
    target: Any,
    *,
    key: Callable[[T], Any] = lambda item: item,
    distance: Callable[[Any, Any], float] = date_distance,
) -> Optional[T]:
    """Return the item whose key is closest to `target`.

    `items` must be sorted ascending by `key`. Dates and datetimes may be
    mixed between keys and target. On a tie the earlier item wins.
    Returns None for an empty sequence.
    """

    if not items:
        return None

    keys = [as_comparable(key(item)) for item in items]
    target = as_comparable(target)
    index = bisect_left(keys, target)
    if index <= 0:
        return items[0]
    if index >= len(items):
        return items[-1]

    before = items[index - 1]
    after = items[index]
    if distance(target, keys[index - 1]) > distance(keys[index], target):
        return after
    return before
