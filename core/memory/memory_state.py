"""
Memory State - Per-Item Memory Variables and Forgetting Curve

Defines the memory state kept for every vocabulary item and the derived
forgetting probability.

Key concepts:
- Strength (S): How many days the item stays reliably recalled
- Difficulty (D): How hard the item is intrinsically (1-10 scale)
- Streak: Consecutive reviews recalled without hints
- Forget probability (P): Likelihood that the item is forgotten by now
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.memory.constants import (
    AnswerScore,
    DEFAULT_DIFFICULTY,
    DEFAULT_STRENGTH,
    DEFAULT_STREAK,
    EPSILON,
)


class InvalidReviewInput(ValueError):
    """
    Raised when a review cannot be computed from the given inputs.

    Fatal for the single review it belongs to; the memory state is left
    untouched.
    """

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}={value!r}: {reason}")


@dataclass(frozen=True)
class MemoryState:
    """
    Memory state for a single item.

    Always replaced as a whole after a review.
    """
    strength: float  # S, in days
    difficulty: float  # D, range 1-10
    streak: int
    last_reviewed: Optional[datetime]  # None = never reviewed


@dataclass(frozen=True)
class ReviewEvent:
    """One answer given by the operator."""
    answer_score: AnswerScore
    answer_time_ms: float
    item_length: int
    days_since_last_review: float


def initialize_new_state(now: Optional[datetime] = None) -> MemoryState:
    """
    Build the memory state of an item that was just added.

    Args:
        now: Creation time (defaults to current UTC time)

    Returns:
        MemoryState with default strength, difficulty and streak
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return MemoryState(
        strength=DEFAULT_STRENGTH,
        difficulty=DEFAULT_DIFFICULTY,
        streak=DEFAULT_STREAK,
        last_reviewed=now,
    )


def is_pristine(strength: float, difficulty: float, streak: int) -> bool:
    """True when the state is still exactly the default of a new item."""
    return (
        strength == DEFAULT_STRENGTH
        and difficulty == DEFAULT_DIFFICULTY
        and streak == DEFAULT_STREAK
    )


def safe_denom(value: float) -> float:
    """
    Return a denominator that is safe to divide by.

    Values closer to zero than EPSILON are replaced by EPSILON carrying the
    sign of the value (positive for exactly zero).
    """
    if abs(value) < EPSILON:
        return -EPSILON if value < 0 else EPSILON
    return value


def days_since(last_reviewed: Optional[datetime], now: Optional[datetime] = None) -> float:
    """
    Calculate days elapsed since the last review.

    Args:
        last_reviewed: Timestamp of the last review, or None if never reviewed
        now: Reference time (defaults to current UTC time)

    Returns:
        Elapsed days (0 if never reviewed or if the timestamp lies in the future)
    """
    if last_reviewed is None:
        return 0.0

    if now is None:
        now = datetime.now(timezone.utc)
    if last_reviewed.tzinfo is None:
        last_reviewed = last_reviewed.replace(tzinfo=timezone.utc)

    delta = now - last_reviewed
    return max(0.0, delta.total_seconds() / 86400.0)


def forget_exponent(strength: float, difficulty: float, days_since_last_review: float) -> float:
    """Exponent of the forgetting curve: (t * D) / S."""
    return (days_since_last_review * difficulty) / safe_denom(strength)


def compute_forget_probability(
    strength: float,
    difficulty: float,
    days_since_last_review: float
) -> float:
    """
    Calculate the probability that an item is forgotten.

    Formula: P = 1 - exp(-(t * D) / S)

    Interpretation:
    - Immediately after review: P = 0
    - As time passes: P rises towards 1
    - Difficult items are forgotten faster, strong items slower

    Args:
        strength: Current strength in days
        difficulty: Current difficulty
        days_since_last_review: Days since the last review

    Returns:
        Forget probability in [0, 1)
    """
    return 1.0 - math.exp(-forget_exponent(strength, difficulty, days_since_last_review))
