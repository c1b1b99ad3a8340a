"""
Review - Memory Model Entry Point

Turns one answer into a new memory state (no storage calls).

Main workflow:
1. Validate the review event
2. Normalize cold-start state
3. Apply the same-day repeat guard
4. Compute speed score, streak bonus and answer quality
5. Update difficulty, then strength
6. Return the new state together with every intermediate value

Persisting the result and forwarding the diagnostics to the session log is
the caller's responsibility.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Optional

from core.memory import updates
from core.memory.constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_STRENGTH,
    DEFAULT_WEIGHTS,
    MemoryWeights,
    SAME_DAY_THRESHOLD_DAYS,
    STREAK_BONUS_MIN_DAYS,
)
from core.memory.memory_state import (
    InvalidReviewInput,
    ReviewEvent,
    compute_forget_probability,
    is_pristine,
)


@dataclass(frozen=True)
class ReviewDiagnostics:
    """
    Every intermediate value of one review computation.

    This is the audit payload written to the session log.
    """
    answer_score: str
    days_since_last_review: float
    forget_probability: float
    expected_time_ms: Optional[float]
    answer_time_ms: float
    speed_score: float
    streak_bonus: float
    answer_quality: Optional[float]
    guarded: bool
    cold_start: bool
    strength_before: float
    difficulty_before: float
    streak_before: int
    strength_after: float
    difficulty_after: float
    streak_after: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ReviewOutcome:
    """New memory values plus the diagnostics that produced them."""
    new_strength: float
    new_difficulty: float
    new_streak: int
    diagnostics: ReviewDiagnostics


def coerce_cold_start(strength: float, difficulty: float) -> tuple[float, float, bool]:
    """
    Replace non-positive strength or difficulty with the values of a new item.

    Returns:
        (strength, difficulty, coerced)
    """
    coerced = strength <= 0 or difficulty <= 0
    return (
        strength if strength > 0 else DEFAULT_STRENGTH,
        difficulty if difficulty > 0 else DEFAULT_DIFFICULTY,
        coerced,
    )


def validate_event(event: ReviewEvent) -> None:
    """
    Reject review events that cannot be computed.

    Raises:
        InvalidReviewInput: On the first offending value
    """
    if event.item_length <= 0:
        raise InvalidReviewInput("item_length", event.item_length, "must be positive")
    if not math.isfinite(event.answer_time_ms) or event.answer_time_ms < 0:
        raise InvalidReviewInput("answer_time_ms", event.answer_time_ms, "must be a non-negative number")
    days = event.days_since_last_review
    if not math.isfinite(days) or days < 0:
        raise InvalidReviewInput("days_since_last_review", days, "must be a non-negative number")


def compute_new_state(
    event: ReviewEvent,
    current_strength: float,
    current_difficulty: float,
    current_streak: int,
    weights: MemoryWeights = DEFAULT_WEIGHTS
) -> ReviewOutcome:
    """
    Compute the memory state that results from a review.

    Rules:
    - Non-positive strength/difficulty are treated as a fresh item
    - Streak grows on hint-free recall and resets otherwise
    - A repeat within SAME_DAY_THRESHOLD_DAYS leaves a reviewed item
      unchanged; a pristine item still registers its first review
    - Speed only counts for hint-free recall
    - Streak bonus only counts for hint-free recall spaced at least a day

    Args:
        event: The answer to process
        current_strength: Strength before the review
        current_difficulty: Difficulty before the review
        current_streak: Streak before the review
        weights: Tunable weights

    Returns:
        ReviewOutcome with new strength, difficulty, streak and diagnostics

    Raises:
        InvalidReviewInput: If the event or streak is malformed
    """
    validate_event(event)
    if current_streak < 0:
        raise InvalidReviewInput("streak", current_streak, "must not be negative")

    strength, difficulty, cold_start = coerce_cold_start(current_strength, current_difficulty)

    score = event.answer_score
    days = event.days_since_last_review
    full_recall = score.is_full_recall

    new_streak = current_streak + 1 if full_recall else 0

    forget_probability = compute_forget_probability(strength, difficulty, days)
    expected_time = updates.expected_answer_time(
        event.item_length, weights.reaction_time_ms, weights.char_time_ms
    )

    def _diagnostics(**values) -> ReviewDiagnostics:
        return ReviewDiagnostics(
            answer_score=score.name,
            days_since_last_review=days,
            forget_probability=forget_probability,
            expected_time_ms=expected_time,
            answer_time_ms=event.answer_time_ms,
            strength_before=strength,
            difficulty_before=difficulty,
            streak_before=current_streak,
            cold_start=cold_start,
            **values
        )

    # Same-day repeat guard
    if days <= SAME_DAY_THRESHOLD_DAYS and not is_pristine(strength, difficulty, current_streak):
        return ReviewOutcome(
            new_strength=strength,
            new_difficulty=difficulty,
            new_streak=current_streak,
            diagnostics=_diagnostics(
                speed_score=0.0,
                streak_bonus=0.0,
                answer_quality=None,
                guarded=True,
                strength_after=strength,
                difficulty_after=difficulty,
                streak_after=current_streak,
            ),
        )

    speed_score = 0.0
    if full_recall:
        speed_score = updates.compute_speed_score(
            event.item_length,
            event.answer_time_ms,
            weights.reaction_time_ms,
            weights.char_time_ms,
            weights.speed_multiplier,
        )

    streak_bonus = 0.0
    if full_recall and days >= STREAK_BONUS_MIN_DAYS:
        streak_bonus = updates.compute_streak_bonus(current_streak, weights.streak_threshold)

    quality = updates.compute_answer_quality(
        score, speed_score, weights.speed_weight, streak_bonus, weights.bonus_weight
    )
    new_difficulty = updates.compute_difficulty(
        difficulty, quality, weights.difficulty_correction_weight
    )
    new_strength = updates.compute_strength(quality, strength, difficulty, days)

    return ReviewOutcome(
        new_strength=new_strength,
        new_difficulty=new_difficulty,
        new_streak=new_streak,
        diagnostics=_diagnostics(
            speed_score=speed_score,
            streak_bonus=streak_bonus,
            answer_quality=quality,
            guarded=False,
            strength_after=new_strength,
            difficulty_after=new_difficulty,
            streak_after=new_streak,
        ),
    )
