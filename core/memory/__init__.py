"""
Memory Model - Strength / Difficulty / Streak scheduling

Main API for the vocabulary review engine.

This module implements a small interpretable memory model with:
- Forgetting curve: P = 1 - exp(-(Δt * D) / S)
- Answer quality blending correctness, speed and streak
- Clamped strength and difficulty updates
- Cold-start and same-day repeat policies

Quick start:
    from core import memory

    event = memory.ReviewEvent(
        answer_score=memory.AnswerScore.KNOW,
        answer_time_ms=1800,
        item_length=len("verrekijker"),
        days_since_last_review=3.0,
    )
    outcome = memory.compute_new_state(event, strength, difficulty, streak)
"""

# Core entry point
from core.memory.review import (
    ReviewDiagnostics,
    ReviewOutcome,
    coerce_cold_start,
    compute_new_state,
    validate_event,
)

# Update rules
from core.memory.updates import (
    compute_answer_quality,
    compute_difficulty,
    compute_speed_score,
    compute_strength,
    compute_streak_bonus,
)

# Memory state
from core.memory.memory_state import (
    InvalidReviewInput,
    MemoryState,
    ReviewEvent,
    compute_forget_probability,
    days_since,
    forget_exponent,
    initialize_new_state,
    is_pristine,
    safe_denom,
)

# Constants and parameters
from core.memory.constants import (
    AnswerScore,
    DEFAULT_DIFFICULTY,
    DEFAULT_STREAK,
    DEFAULT_STRENGTH,
    DEFAULT_WEIGHTS,
    DUE_THRESHOLD,
    FORGET_PENALTY,
    InvalidWeight,
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    MIN_STRENGTH,
    MemoryWeights,
    SAME_DAY_THRESHOLD_DAYS,
)


__all__ = [
    # Core algorithm
    "compute_new_state",
    "coerce_cold_start",
    "validate_event",
    "ReviewOutcome",
    "ReviewDiagnostics",

    # Update rules
    "compute_speed_score",
    "compute_streak_bonus",
    "compute_answer_quality",
    "compute_difficulty",
    "compute_strength",

    # Memory state
    "MemoryState",
    "ReviewEvent",
    "InvalidReviewInput",
    "compute_forget_probability",
    "forget_exponent",
    "days_since",
    "initialize_new_state",
    "is_pristine",
    "safe_denom",

    # Enums
    "AnswerScore",

    # Parameters
    "MemoryWeights",
    "InvalidWeight",
    "DEFAULT_WEIGHTS",
    "DEFAULT_STRENGTH",
    "DEFAULT_DIFFICULTY",
    "DEFAULT_STREAK",
    "MIN_STRENGTH",
    "MIN_DIFFICULTY",
    "MAX_DIFFICULTY",
    "FORGET_PENALTY",
    "SAME_DAY_THRESHOLD_DAYS",
    "DUE_THRESHOLD",
]
