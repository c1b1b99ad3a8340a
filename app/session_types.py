"""
Session value types used by the study session controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from core.memory import AnswerScore
from core.scheduler import SessionItem
from core.schemas import SessionStatsRow


MAX_CLUE_LEVEL = 2


class AnswerChoice(str, Enum):
    """Tokens the operator can answer with."""
    PERFECT = "perfect"
    KNOW = "know"
    HINT = "hint"
    DONT_KNOW = "dont_know"
    QUIT = "quit"


class SessionState(str, Enum):
    SELECTING = "selecting"
    REVIEWING = "reviewing"
    COMPLETED = "completed"
    QUIT = "quit"
    ERROR = "error"


class SessionOutcome(str, Enum):
    """How a session ended."""
    COMPLETED = "completed"
    QUIT = "quit"
    EMPTY = "empty"   # Nothing matched the selection
    ERROR = "error"


def allowed_choices(clue_level: int) -> tuple[AnswerChoice, ...]:
    """
    Choices the operator may pick at a given clue level.

    PERFECT is only offered before any hint, HINT only while hints remain.
    """
    choices = []
    if clue_level == 0:
        choices.append(AnswerChoice.PERFECT)
    choices.append(AnswerChoice.KNOW)
    if clue_level < MAX_CLUE_LEVEL:
        choices.append(AnswerChoice.HINT)
    choices.append(AnswerChoice.DONT_KNOW)
    choices.append(AnswerChoice.QUIT)
    return tuple(choices)


KNOW_SCORE_BY_CLUE_LEVEL = {
    0: AnswerScore.KNOW,
    1: AnswerScore.CLUE,
    2: AnswerScore.CLUES,
}


def answer_score_for(choice: AnswerChoice, clue_level: int) -> AnswerScore:
    """
    Map an answer choice to its score.

    Raises:
        ValueError: For HINT/QUIT or a choice not valid at this clue level
    """
    if choice not in allowed_choices(clue_level):
        raise ValueError(f"{choice.value!r} is not allowed at clue level {clue_level}")
    if choice is AnswerChoice.PERFECT:
        return AnswerScore.VERY_KNOW
    if choice is AnswerChoice.KNOW:
        return KNOW_SCORE_BY_CLUE_LEVEL[clue_level]
    if choice is AnswerChoice.DONT_KNOW:
        return AnswerScore.NO
    raise ValueError(f"{choice.value!r} does not produce an answer score")


# Stats category per answer score
STATS_CATEGORY = {
    AnswerScore.VERY_KNOW: "perfect",
    AnswerScore.KNOW: "known",
    AnswerScore.CLUE: "one_hint",
    AnswerScore.CLUES: "two_hints",
    AnswerScore.NO: "unknown",
}


class StatsFrozenError(RuntimeError):
    """Raised when stats are modified after the session ended."""


@dataclass
class StudySessionStats:
    """
    Running counters for one session.

    Mutated once per reviewed item, read-only after freeze().
    """
    total: int = 0
    reviewed: int = 0
    perfect: int = 0
    known: int = 0
    one_hint: int = 0
    two_hints: int = 0
    unknown: int = 0
    persist_failures: int = 0
    invalid_reviews: int = 0
    _frozen: bool = field(default=False, repr=False, compare=False)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check(self) -> None:
        if self._frozen:
            raise StatsFrozenError("Session stats are read-only after the session ended")

    def record(self, score: AnswerScore) -> None:
        self._check()
        category = STATS_CATEGORY[score]
        setattr(self, category, getattr(self, category) + 1)
        self.reviewed += 1

    def record_persist_failure(self) -> None:
        self._check()
        self.persist_failures += 1

    def record_invalid_review(self) -> None:
        self._check()
        self.invalid_reviews += 1

    @property
    def recalled(self) -> int:
        """Reviews that ended with the item recalled (with or without hints)."""
        return self.perfect + self.known + self.one_hint + self.two_hints

    @property
    def accuracy(self) -> Optional[float]:
        if self.reviewed == 0:
            return None
        return self.recalled / self.reviewed

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.reviewed - self.invalid_reviews)

    def freeze(self) -> None:
        self._frozen = True

    def to_row(self) -> SessionStatsRow:
        return SessionStatsRow(
            total=self.total,
            reviewed=self.reviewed,
            perfect=self.perfect,
            known=self.known,
            one_hint=self.one_hint,
            two_hints=self.two_hints,
            unknown=self.unknown,
            persist_failures=self.persist_failures,
            invalid_reviews=self.invalid_reviews,
        )


@dataclass(frozen=True)
class SessionResult:
    """What a finished session hands back to its caller."""
    outcome: SessionOutcome
    stats: StudySessionStats
    log_path: Optional[Path] = None
    error: Optional[BaseException] = None


__all__ = [
    "SessionItem",
    "AnswerChoice",
    "SessionState",
    "SessionOutcome",
    "StudySessionStats",
    "SessionResult",
    "allowed_choices",
    "answer_score_for",
    "MAX_CLUE_LEVEL",
]
