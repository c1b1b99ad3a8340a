"""
Priority scheduler for selecting items to review.

Orders items by how likely they are to be forgotten right now, so the
most endangered items are reviewed first.

Two selection modes:
- Top N: sort the whole collection, take the N highest priorities
- Range: slice the collection by position first, then sort only the slice

The two modes intentionally give different review orders for the same items.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from loguru import logger

from core.memory import (
    DUE_THRESHOLD,
    coerce_cold_start,
    compute_forget_probability,
    days_since,
    forget_exponent,
)
from core.schemas import LexiconEntry, SortResultRow


@dataclass(frozen=True)
class SessionItem:
    """
    An item selected for a session, with its priority at selection time.

    Recomputed every session, never persisted.
    """
    item: LexiconEntry
    priority: float

    @property
    def word(self) -> str:
        return self.item.word


def compute_priority(item: LexiconEntry, now: Optional[datetime] = None) -> float:
    """
    Calculate the review priority of an item.

    Priority is the forget probability. Once the forgetting curve saturates
    to exactly 1.0 in floating point (exponent above ~37), a log-overdue
    term is used instead so that overdue items still keep their order.

    Non-positive strength or difficulty is read as a new item, the same way
    reviews treat it.

    Args:
        item: Item with memory fields
        now: Reference time (defaults to current UTC time)

    Returns:
        Priority, higher = review sooner
    """
    days = days_since(item.memory_last_reviewed, now)
    strength, difficulty, _ = coerce_cold_start(item.memory_strength, item.memory_difficulty)
    probability = compute_forget_probability(strength, difficulty, days)

    if probability >= 1.0:
        exponent = forget_exponent(strength, difficulty, days)
        return 1.0 + math.log1p(max(0.0, exponent))

    return probability


def sort_by_priority(
    items: Iterable[LexiconEntry],
    now: Optional[datetime] = None
) -> list[SessionItem]:
    """
    Sort items by priority, highest first.

    The sort is stable: items with equal priority keep their input order.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    scored = [SessionItem(item=item, priority=compute_priority(item, now)) for item in items]
    scored.sort(key=lambda s: s.priority, reverse=True)
    return scored


def select_top(
    items: Sequence[LexiconEntry],
    count: int,
    now: Optional[datetime] = None
) -> list[SessionItem]:
    """
    Select the `count` highest-priority items of the whole collection.
    """
    if count <= 0:
        return []

    selected = sort_by_priority(items, now)[:count]
    logger.debug(f"Selected top {len(selected)} of {len(items)} items")
    return selected


def select_range(
    items: Sequence[LexiconEntry],
    start: int,
    end: Optional[int] = None,
    now: Optional[datetime] = None
) -> list[SessionItem]:
    """
    Select items by position, then sort the selection by priority.

    Args:
        items: Collection in position order
        start: First position (1-based, inclusive)
        end: Last position (1-based, inclusive, None = last item)
        now: Reference time

    Returns:
        The slice, sorted by priority (empty if the range is empty)
    """
    first = max(1, start)
    last = len(items) if end is None else min(len(items), end)
    if first > last:
        return []

    window = items[first - 1:last]
    logger.debug(f"Selected positions {first}-{last} ({len(window)} items)")
    return sort_by_priority(window, now)


def due_items(
    items: Iterable[LexiconEntry],
    threshold: float = DUE_THRESHOLD,
    now: Optional[datetime] = None
) -> list[SessionItem]:
    """
    Get items whose priority reached the threshold, most urgent first.
    """
    return [s for s in sort_by_priority(items, now) if s.priority >= threshold]


def priority_report(session_items: Iterable[SessionItem]) -> list[SortResultRow]:
    """Word/priority rows in session order, for the session log."""
    return [SortResultRow(word=s.word, priority=s.priority) for s in session_items]
