"""Fuzzy filtering of picker entries.

A query matches an item when every query character appears in the item's
key, in order, ignoring case. Matches are ranked so that hits at the start
of the key, after a separator, on a camelCase hump, or in a contiguous run
come first.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Optional, TypeVar

T = TypeVar("T")

FIRST_CHAR_BONUS = 10
SEPARATOR_BONUS = 20
CAMEL_CASE_BONUS = 20
ADJACENT_BONUS = 5
LEADING_PENALTY = -5
MAX_LEADING_PENALTY = -15
UNMATCHED_PENALTY = -1

_SEPARATORS = frozenset("/-_ .\\")


def _score_from(query: str, text: str, start: int) -> Optional[int]:
    """Score a greedy match of ``query`` in ``text`` anchored at ``start``."""
    lowered = text.lower()
    score = 0
    pos = start
    prev = -1
    for ch in query.lower():
        pos = lowered.find(ch, pos)
        if pos < 0:
            return None

        if pos == 0:
            score += FIRST_CHAR_BONUS
        elif text[pos - 1] in _SEPARATORS:
            score += SEPARATOR_BONUS
        elif text[pos - 1].islower() and text[pos].isupper():
            score += CAMEL_CASE_BONUS
        if prev >= 0 and pos == prev + 1:
            score += ADJACENT_BONUS

        prev = pos
        pos += 1

    score += max(LEADING_PENALTY * start, MAX_LEADING_PENALTY)
    score += UNMATCHED_PENALTY * (len(text) - len(query))
    return score


def score(query: str, text: str) -> Optional[int]:
    """Return the best match score of ``query`` in ``text``, or None."""
    if not query:
        return 0
    first = query[0].lower()
    lowered = text.lower()
    best = None
    start = lowered.find(first)
    while start >= 0:
        s = _score_from(query, text, start)
        if s is None:
            # a later anchor can't match either
            break
        if best is None or s > best:
            best = s
        start = lowered.find(first, start + 1)
    return best


def fuzzy_filter(query: str, items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Return the items whose key matches ``query``, best match first.

    An empty query returns every item in its original order. Equal scores
    keep their original relative order.
    """
    items = items if isinstance(items, Sequence) else list(items)
    if not query:
        return list(items)

    scored = []
    for index, item in enumerate(items):
        s = score(query, key(item))
        if s is not None:
            scored.append((-s, index, item))
    scored.sort(key=lambda entry: (entry[0], entry[1]))
    return [item for _, _, item in scored]
