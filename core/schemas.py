"""
Pydantic models for the vocabulary lexicon and the session log.

LexiconEntry is the item shape the review engine works on. The session log
models define the JSON document written for every study session.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from core.memory import (
    DEFAULT_DIFFICULTY,
    DEFAULT_STREAK,
    DEFAULT_STRENGTH,
    MemoryState,
)


# Bump whenever the session log layout changes
SESSION_LOG_SCHEMA_VERSION = 1


# ---- Lexicon ----

class LexiconEntry(BaseModel):
    """
    A single learnable item.

    Only `word` and the memory_* fields are interpreted by the engine;
    the display fields are passed through to the UI.
    """
    word: str = Field(..., min_length=1, description="The item itself, also its key")

    # Display fields
    translation: str = Field(default="", description="Answer shown when revealing the item")
    example: Optional[str] = Field(default=None, description="First hint: example sentence")
    related: list[str] = Field(default_factory=list, description="Second hint: related words")
    phrases: list[str] = Field(default_factory=list, description="Second hint: common phrases")

    # Memory state
    memory_strength: float = DEFAULT_STRENGTH
    memory_difficulty: float = DEFAULT_DIFFICULTY
    memory_streak: int = DEFAULT_STREAK
    memory_last_reviewed: Optional[datetime] = None

    @property
    def item_length(self) -> int:
        return len(self.word)

    def memory_state(self) -> MemoryState:
        return MemoryState(
            strength=self.memory_strength,
            difficulty=self.memory_difficulty,
            streak=self.memory_streak,
            last_reviewed=self.memory_last_reviewed,
        )

    def with_memory_state(self, state: MemoryState) -> "LexiconEntry":
        """Return a copy with all four memory fields replaced."""
        return self.model_copy(update={
            "memory_strength": state.strength,
            "memory_difficulty": state.difficulty,
            "memory_streak": state.streak,
            "memory_last_reviewed": state.last_reviewed,
        })


# ---- Session Log ----

class MemoryStateRow(BaseModel):
    """Memory state snapshot inside a log row."""
    strength: float
    difficulty: float
    streak: int
    last_reviewed: Optional[datetime] = None

    @classmethod
    def from_state(cls, state: MemoryState) -> "MemoryStateRow":
        return cls(
            strength=state.strength,
            difficulty=state.difficulty,
            streak=state.streak,
            last_reviewed=state.last_reviewed,
        )


class SelectionParams(BaseModel):
    """How the working set of a session was chosen."""
    mode: Literal["top", "range"]
    count: Optional[int] = None
    start: Optional[int] = None
    end: Optional[int] = None


class SortResultRow(BaseModel):
    word: str
    priority: float


class ReviewLogRow(BaseModel):
    """One reviewed item, before and after."""
    word: str
    priority: float
    timestamp: datetime
    position: int
    choice: str
    clue_level: int
    answer_time_ms: float
    before: MemoryStateRow
    after: Optional[MemoryStateRow] = None  # None when the review was rejected
    diagnostics: Optional[dict] = None
    persisted: bool = False
    error: Optional[str] = None


class SessionStatsRow(BaseModel):
    total: int = 0
    reviewed: int = 0
    perfect: int = 0
    known: int = 0
    one_hint: int = 0
    two_hints: int = 0
    unknown: int = 0
    persist_failures: int = 0
    invalid_reviews: int = 0


class SessionLogDocument(BaseModel):
    """
    Audit trail of one study session.

    Rows are appended while the session runs; the document is immutable
    once `finalized` is set.
    """
    schema_version: int = SESSION_LOG_SCHEMA_VERSION
    session_id: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    selection: Optional[SelectionParams] = None
    sort_result: list[SortResultRow] = Field(default_factory=list)
    reviews: list[ReviewLogRow] = Field(default_factory=list)
    stats: Optional[SessionStatsRow] = None
    outcome: Optional[str] = None
    error: Optional[str] = None
    finalized: bool = False
