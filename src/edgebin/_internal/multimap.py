"""Pair folding for echo bodies.

``Headers``, ``QueryParams`` and ``FormData`` all store repeated keys.
Echo routes flatten them into JSON objects where a key seen once maps to
a string and a repeated key maps to a list, in observed order.
"""

from collections.abc import Iterable


def fold_pairs[V](pairs: Iterable[tuple[str, V]]) -> dict[str, V | list[V]]:
    """Fold ``(key, value)`` pairs into a flat dict.

    Keys keep first-seen order. A repeated key turns into a list holding
    every value in the order it was observed::

        >>> fold_pairs([("a", "1"), ("c", "5"), ("c", "3")])
        {'a': '1', 'c': ['5', '3']}
    """
    folded: dict[str, V | list[V]] = {}
    for key, value in pairs:
        if key not in folded:
            folded[key] = value
            continue
        existing = folded[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            folded[key] = [existing, value]
    return folded
