"""
Memory Updates

Implements the per-review update rules for strength, difficulty and the
signals that feed them (speed score, streak bonus, answer quality).

Key principles:
- Fast, hint-free recall is rewarded, but with a bounded bonus
- Well-spaced success produces the largest strength gains
- Difficulty moves towards the observed answer quality
"""

from __future__ import annotations

import math

from core.memory.constants import (
    AnswerScore,
    FORGET_PENALTY,
    MAX_DIFFICULTY,
    MAX_QUALITY,
    MIN_DIFFICULTY,
    MIN_QUALITY,
    MIN_STRENGTH,
    SPEED_SENSITIVITY,
    STREAK_SENSITIVITY,
)
from core.memory.memory_state import InvalidReviewInput


def clamp(value: float, lower: float, upper: float = math.inf) -> float:
    return max(lower, min(upper, value))


def saturate(value: float, sensitivity: float) -> float:
    """Map a non-negative value onto [0, 1) with a tanh curve."""
    return math.tanh(sensitivity * max(0.0, value))


def expected_answer_time(item_length: int, reaction_time: float, char_time: float) -> float:
    """Time a fluent answer is expected to take, in the unit of the inputs."""
    return reaction_time + char_time * item_length


def compute_speed_score(
    item_length: int,
    answer_time: float,
    reaction_time: float,
    char_time: float,
    speed_multiplier: float
) -> float:
    """
    Score how fast an answer was given.

    Formula:
        expected = reaction_time + char_time * item_length
        raw = max(0, speed_multiplier * expected / answer_time - 1)
        score = tanh(SPEED_SENSITIVITY * raw)

    Answers faster than the reaction time are treated as accidental input
    and score 0. The tanh curve keeps outlier-fast answers from producing
    an unbounded reward.

    Args:
        item_length: Number of characters of the item
        answer_time: Measured response latency
        reaction_time: Minimum plausible response latency
        char_time: Expected extra latency per character
        speed_multiplier: Slack factor applied to the expected time

    Returns:
        Speed score in [0, 1)
    """
    expected = expected_answer_time(item_length, reaction_time, char_time)
    if not math.isfinite(answer_time) or answer_time < 0:
        raise InvalidReviewInput("answer_time", answer_time, "must be a non-negative number")

    if answer_time <= 0 or answer_time < reaction_time:
        return 0.0

    raw_ratio = speed_multiplier * expected / answer_time - 1.0
    return saturate(raw_ratio, SPEED_SENSITIVITY)


def compute_streak_bonus(current_streak: int, threshold: int) -> float:
    """
    Bonus for a run of hint-free answers.

    Zero below the threshold; the excess over the threshold goes through
    the same saturating curve as the speed score.
    """
    if current_streak < 0:
        raise InvalidReviewInput("streak", current_streak, "must not be negative")
    if current_streak < threshold:
        return 0.0
    return saturate(current_streak - threshold, STREAK_SENSITIVITY)


def compute_answer_quality(
    answer_score: AnswerScore,
    speed_score: float,
    speed_weight: float,
    streak_bonus: float,
    bonus_weight: float
) -> float:
    """
    Combine correctness, speed and streak into one quality signal.

    Formula:
        Q = clip(score + speed_weight * speed + bonus_weight * bonus, 0, 2)
    """
    quality = answer_score.weight + speed_weight * speed_score + bonus_weight * streak_bonus
    return clamp(quality, MIN_QUALITY, MAX_QUALITY)


def compute_difficulty(
    current_difficulty: float,
    answer_quality: float,
    correction_weight: float
) -> float:
    """
    Update difficulty from answer quality.

    Formula:
        D_new = clip(D - w * (Q - 1), min=1, max=10)

    Quality above 1 lowers difficulty, quality below 1 raises it.
    """
    new_difficulty = current_difficulty - correction_weight * (answer_quality - 1.0)
    return clamp(new_difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)


def compute_strength(
    answer_quality: float,
    current_strength: float,
    current_difficulty: float,
    days_since_last_review: float
) -> float:
    """
    Update strength from answer quality and spacing.

    Formula:
        Q = 0:  S_new = max(1, S * FORGET_PENALTY)
        Q > 0:  S_new = max(1, S + Q * Δt / D)

    Longer spacing rewards growth; high difficulty dampens it.
    """
    if answer_quality == 0:
        return clamp(current_strength * FORGET_PENALTY, MIN_STRENGTH)

    growth = answer_quality * (days_since_last_review / current_difficulty)
    return clamp(current_strength + growth, MIN_STRENGTH)
