"""UI contract for interactive study sessions"""

from __future__ import annotations

from typing import Protocol, Sequence

from app.session_types import AnswerChoice
from app.ui.flashcard import visible_hints
from app.ui.session_stats import format_session_summary
from core.schemas import LexiconEntry


class StudyUI(Protocol):
    """
    Interactive front end driven by the study session.

    All calls are synchronous; `ask_choice` blocks until the operator answers.
    """

    def present_item(self, item: LexiconEntry, hint_level: int) -> None:
        """Show the item with the hints unlocked at `hint_level`."""

    def ask_choice(self, allowed: Sequence[AnswerChoice]) -> AnswerChoice:
        """Wait for the operator to pick one of `allowed`."""

    def reveal_answer(self, item: LexiconEntry) -> None:
        """Show the full answer including all hints."""

    def notify(self, message: str, level: str = "info") -> None:
        """Show a one-line message ("info" or "warning")."""

    def show_summary(self, lines: Sequence[str]) -> None:
        """Show the end-of-session summary."""


__all__ = [
    "StudyUI",
    "visible_hints",
    "format_session_summary",
]
