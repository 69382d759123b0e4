"""Combine payload variants for event sources."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any


def cross_merge_iter(
    items_left: Iterable[Mapping[str, Any]],
    items_right: Iterable[Mapping[str, Any]],
) -> Iterator[dict[str, Any]]:
    """Yield every shallow merge of a left item with a right item.

    Right items override left items on shared keys. Order is left-major.

    Example:
        >>> list(cross_merge_iter([{"a": 1}, {"a": 2}], [{"b": 1}, {"b": 2}]))
        [{'a': 1, 'b': 1}, {'a': 1, 'b': 2}, {'a': 2, 'b': 1}, {'a': 2, 'b': 2}]
    """
    right = list(items_right)
    for left in items_left:
        for item in right:
            yield {**left, **item}


def cross_merge(
    items_left: Iterable[Mapping[str, Any]],
    items_right: Iterable[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """Like ``cross_merge_iter``, collected into a list.

    Merges that come out equal are all kept, one per (left, right) pair.

    Example:
        >>> names = [{"name": ""}, {"name": "alice"}]
        >>> ages = [{"age": 0}, {"age": 30}]
        >>> source = EventSource({
        ...     "SUBMIT": [{"type": "SUBMIT", **payload} for payload in cross_merge(names, ages)],
        ... })
    """
    return list(cross_merge_iter(items_left, items_right))
