"""
Memory Model Constants and Parameters

All tunable parameters of the memory model in one place.
Weights can be overridden from the environment (see core.config).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


# ---- Answer Scores ----

class AnswerScore(Enum):
    """How well an item was recalled, from worst to best."""
    NO = "no"                 # Not recalled, answer revealed
    CLUES = "clues"           # Recalled after two hints
    CLUE = "clue"             # Recalled after one hint
    KNOW = "know"             # Recalled without hints
    VERY_KNOW = "very_know"   # Recalled instantly and perfectly

    @property
    def weight(self) -> float:
        """Numeric contribution of this score to answer quality."""
        return ANSWER_SCORE_WEIGHTS[self]

    @property
    def is_full_recall(self) -> bool:
        """True when the item was recalled without using any hint."""
        return self in (AnswerScore.KNOW, AnswerScore.VERY_KNOW)

    @property
    def is_failure(self) -> bool:
        return self is AnswerScore.NO


ANSWER_SCORE_WEIGHTS = {
    AnswerScore.NO: 0.0,
    AnswerScore.CLUES: 0.2,
    AnswerScore.CLUE: 0.5,
    AnswerScore.KNOW: 1.0,
    AnswerScore.VERY_KNOW: 1.5,
}


# ---- State Bounds and Defaults ----

MIN_STRENGTH = 1.0        # Strength floor (days)
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
MIN_QUALITY = 0.0
MAX_QUALITY = 2.0

DEFAULT_STRENGTH = 1.0
DEFAULT_DIFFICULTY = 2.0
DEFAULT_STREAK = 0


# ---- Update Rules ----

FORGET_PENALTY = 0.3              # Strength multiplier after a failed recall
SAME_DAY_THRESHOLD_DAYS = 0.11    # ~2.6 hours; repeats inside this window do not count
STREAK_BONUS_MIN_DAYS = 1.0       # Streak bonus only for reviews spaced at least a day
SPEED_SENSITIVITY = 1.0           # tanh steepness for the speed score
STREAK_SENSITIVITY = 0.35         # tanh steepness for the streak bonus
EPSILON = 1e-9                    # Substitute denominator for near-zero values


# ---- Scheduling ----

DUE_THRESHOLD = 0.3       # Forget probability from which an item counts as due


# ---- Tunable Weights ----

class InvalidWeight(ValueError):
    """Raised when a memory weight is outside its usable range."""

    def __init__(self, field: str, value: object, requirement: str):
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r} {requirement}")


@dataclass(frozen=True)
class MemoryWeights:
    """
    Weights used when turning a review into a new memory state.

    Times are in milliseconds.
    """
    reaction_time_ms: float = 800.0         # Minimum plausible response time
    char_time_ms: float = 120.0             # Expected extra time per character
    speed_multiplier: float = 1.5           # Answers faster than multiplier*expected earn speed credit
    speed_weight: float = 0.3
    streak_threshold: int = 2
    bonus_weight: float = 0.2
    difficulty_correction_weight: float = 0.5

    def __post_init__(self):
        checks = (
            ("reaction_time_ms", self.reaction_time_ms > 0, "must be positive"),
            ("char_time_ms", self.char_time_ms >= 0, "must not be negative"),
            ("speed_multiplier", self.speed_multiplier > 0, "must be positive"),
            ("streak_threshold", self.streak_threshold >= 0, "must not be negative"),
        )
        for field, ok, requirement in checks:
            if not ok:
                raise InvalidWeight(field, getattr(self, field), requirement)
        for field in ("speed_weight", "bonus_weight", "difficulty_correction_weight"):
            if not math.isfinite(getattr(self, field)):
                raise InvalidWeight(field, getattr(self, field), "must be finite")


DEFAULT_WEIGHTS = MemoryWeights()
