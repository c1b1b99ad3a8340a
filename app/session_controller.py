"""
Study session lifecycle.

A session selects a working set through the scheduler, then reviews the
items one by one:

    SELECTING -> REVIEWING(item, clue level 0..2) -> next item | COMPLETED | QUIT

ERROR is reachable from any state and is terminal. Quitting is an answer
like any other and ends the session without undoing earlier updates.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger

from app.session_requests import SelectionRequest, resolve_selection
from app.session_types import (
    AnswerChoice,
    SessionOutcome,
    SessionResult,
    SessionState,
    StudySessionStats,
    allowed_choices,
    answer_score_for,
)
from app.ui import StudyUI, format_session_summary
from core import memory
from core.lexicon_repo import Repository, RepositoryError
from core.config import Settings, configure_logging, load_settings
from core.log_repo import JsonSessionLog, NullSessionLog, SessionLogger
from core.scheduler import SessionItem, priority_report
from core.schemas import MemoryStateRow, ReviewLogRow


class PersistenceAborted(RepositoryError):
    """Raised when a failed update must stop the session."""


class StudySession:
    """
    One interactive review session over a repository.

    Collaborators are passed in explicitly: the repository that owns the
    items, the UI that talks to the operator and the session log.
    """

    def __init__(
        self,
        repository: Repository,
        ui: StudyUI,
        session_log: Optional[SessionLogger] = None,
        weights: memory.MemoryWeights = memory.DEFAULT_WEIGHTS,
        abort_on_persist_failure: bool = False,
        clock: Callable[[], float] = time.monotonic,
        now: Optional[Callable[[], datetime]] = None
    ):
        self.repository = repository
        self.ui = ui
        self.session_log = session_log if session_log is not None else NullSessionLog()
        self.weights = weights
        self.abort_on_persist_failure = abort_on_persist_failure
        self.clock = clock
        self.now = now or (lambda: datetime.now(timezone.utc))
        self.session_id = self.session_log.session_id

        self.state = SessionState.SELECTING
        self.stats = StudySessionStats()
        self.items: list[SessionItem] = []
        self.position = 0
        self.clue_level = 0

    @classmethod
    def from_settings(
        cls,
        repository: Repository,
        ui: StudyUI,
        settings: Optional[Settings] = None,
        **kwargs
    ) -> "StudySession":
        """
        Build a session configured from the environment.

        Sets up logging, writes the session log to settings.log_dir and
        applies the memory weights and the persistence-failure policy.
        Extra keyword arguments (clock, now) are passed through.
        """
        settings = settings or load_settings()
        configure_logging(settings.log_level)
        now = kwargs.get("now")
        return cls(
            repository,
            ui,
            session_log=JsonSessionLog(settings.log_dir, started_at=now() if now else None),
            weights=settings.weights,
            abort_on_persist_failure=settings.abort_on_persist_failure,
            **kwargs,
        )

    @property
    def current_item(self) -> Optional[SessionItem]:
        if self.state is not SessionState.REVIEWING or self.position >= len(self.items):
            return None
        return self.items[self.position]

    # ---- Lifecycle ----

    def run(self, request: SelectionRequest) -> SessionResult:
        """
        Run the whole session.

        Returns:
            SessionResult with the outcome and the (frozen) statistics
        """
        try:
            self.items = self._select(request)
            if not self.items:
                self.ui.notify("No items match the selection, nothing to review.")
                self.stats.freeze()
                logger.info(f"Session {self.session_id}: empty selection")
                return SessionResult(outcome=SessionOutcome.EMPTY, stats=self.stats)

            self.stats.total = len(self.items)
            self.state = SessionState.REVIEWING
            logger.info(f"Session {self.session_id}: reviewing {len(self.items)} items")

            for position, session_item in enumerate(self.items):
                self.position = position
                choice = self._review_item(session_item)
                if choice is AnswerChoice.QUIT:
                    self.state = SessionState.QUIT
                    return self._finish(SessionOutcome.QUIT)

            self.state = SessionState.COMPLETED
            return self._finish(SessionOutcome.COMPLETED)

        except Exception as e:
            logger.exception(f"Session {self.session_id} failed: {e}")
            self.state = SessionState.ERROR
            self.ui.notify(f"Session aborted: {e}", "warning")
            return self._finish(SessionOutcome.ERROR, error=e)

    def _select(self, request: SelectionRequest) -> list[SessionItem]:
        """Resolve the working set and record it in the session log."""
        items = resolve_selection(request, self.repository.get_all(), self.now())
        if items:
            self.session_log.record_sort_result(priority_report(items), request.to_params())
        return items

    def _finish(
        self,
        outcome: SessionOutcome,
        error: Optional[BaseException] = None
    ) -> SessionResult:
        """Close the session log and show the summary."""
        self.stats.freeze()
        log_path = None
        try:
            log_path = self.session_log.finalize(
                self.stats.to_row(),
                outcome.value,
                error=repr(error) if error is not None else None,
            )
        except Exception as log_error:
            if error is None:
                error = log_error
                outcome = SessionOutcome.ERROR
                self.state = SessionState.ERROR
            logger.error(f"Failed to finalize session log: {log_error}")

        self.ui.show_summary(format_session_summary(self.stats, outcome))
        logger.info(
            f"Session {self.session_id} {outcome.value}: "
            f"{self.stats.reviewed}/{self.stats.total} reviewed"
        )
        return SessionResult(outcome=outcome, stats=self.stats, log_path=log_path, error=error)

    # ---- Reviewing ----

    def _review_item(self, session_item: SessionItem) -> AnswerChoice:
        """
        Review one item: show it, escalate hints on request, apply the answer.

        Returns:
            The final choice (QUIT ends the session)
        """
        item = session_item.item
        self.clue_level = 0
        self.ui.present_item(item, self.clue_level)
        started = self.clock()

        while True:
            allowed = allowed_choices(self.clue_level)
            choice = self.ui.ask_choice(allowed)

            if choice not in allowed:
                token = getattr(choice, "value", choice)
                self.ui.notify(f"'{token}' is not available here.", "warning")
                continue

            if choice is AnswerChoice.QUIT:
                return choice

            if choice is AnswerChoice.HINT:
                self.clue_level += 1
                self.ui.present_item(item, self.clue_level)
                continue

            break

        answer_time_ms = (self.clock() - started) * 1000.0
        if choice is AnswerChoice.DONT_KNOW:
            self.ui.reveal_answer(item)

        self._apply_answer(session_item, choice, answer_time_ms)
        return choice

    def _apply_answer(
        self,
        session_item: SessionItem,
        choice: AnswerChoice,
        answer_time_ms: float
    ) -> None:
        """Update memory state, persist it, log the review and count it."""
        item = session_item.item
        score = answer_score_for(choice, self.clue_level)
        reviewed_at = self.now()
        before = item.memory_state()

        row = ReviewLogRow(
            word=item.word,
            priority=session_item.priority,
            timestamp=reviewed_at,
            position=self.position,
            choice=choice.value,
            clue_level=self.clue_level,
            answer_time_ms=answer_time_ms,
            before=MemoryStateRow.from_state(before),
        )

        try:
            event = memory.ReviewEvent(
                answer_score=score,
                answer_time_ms=answer_time_ms,
                item_length=item.item_length,
                days_since_last_review=memory.days_since(before.last_reviewed, reviewed_at),
            )
            outcome = memory.compute_new_state(
                event, before.strength, before.difficulty, before.streak, self.weights
            )
        except memory.InvalidReviewInput as e:
            logger.warning(f"Rejected review of {item.word!r}: {e}")
            self.ui.notify(f"Review of '{item.word}' rejected: {e}", "warning")
            self.stats.record_invalid_review()
            row.error = str(e)
            self.session_log.record_review(row)
            return

        # Guarded repeats keep measuring spacing from the last counted review
        last_reviewed = before.last_reviewed if outcome.diagnostics.guarded else reviewed_at
        new_state = memory.MemoryState(
            strength=outcome.new_strength,
            difficulty=outcome.new_difficulty,
            streak=outcome.new_streak,
            last_reviewed=last_reviewed,
        )
        logger.debug(
            f"{item.word!r} {score.name}: S {before.strength:.2f}->{new_state.strength:.2f}, "
            f"D {before.difficulty:.2f}->{new_state.difficulty:.2f}, streak {new_state.streak}"
        )

        persisted, failure = self._persist(item.word, new_state)
        self.stats.record(score)

        row.after = MemoryStateRow.from_state(new_state)
        row.diagnostics = outcome.diagnostics.to_dict()
        row.persisted = persisted
        row.error = failure
        self.session_log.record_review(row)

        if not persisted and self.abort_on_persist_failure:
            raise PersistenceAborted(f"Could not save '{item.word}': {failure}")

    def _persist(self, word: str, state: memory.MemoryState) -> tuple[bool, Optional[str]]:
        """
        Store the new state of one item.

        Returns:
            (persisted, failure reason)
        """
        try:
            ok = self.repository.update(word, state)
            failure = None if ok else "update returned failure"
        except RepositoryError as e:
            ok = False
            failure = str(e)

        if not ok:
            self.stats.record_persist_failure()
            logger.warning(f"Failed to save {word!r}: {failure}")
            self.ui.notify(f"Could not save progress for '{word}': {failure}", "warning")
        return ok, failure
