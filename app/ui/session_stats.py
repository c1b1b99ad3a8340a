"""
Session Statistics

Builds the progress and summary text shown at the end of a session.
"""

from __future__ import annotations

from app.session_types import SessionOutcome, StudySessionStats


OUTCOME_HEADLINES = {
    SessionOutcome.COMPLETED: "Session complete!",
    SessionOutcome.QUIT: "Session stopped early.",
    SessionOutcome.EMPTY: "Nothing to review.",
    SessionOutcome.ERROR: "Session aborted by an error.",
}


def format_progress(stats: StudySessionStats) -> str:
    """Progress line, e.g. '3/20'."""
    return f"{stats.reviewed + stats.invalid_reviews}/{stats.total}"


def format_session_summary(stats: StudySessionStats, outcome: SessionOutcome) -> list[str]:
    """
    Render session statistics as text lines.

    Returns:
        Lines in display order
    """
    lines = [OUTCOME_HEADLINES[outcome]]
    lines.append(f"Reviewed: {format_progress(stats)}")

    if stats.reviewed > 0:
        lines.append(f"  Perfect:    {stats.perfect}")
        lines.append(f"  Known:      {stats.known}")
        lines.append(f"  One hint:   {stats.one_hint}")
        lines.append(f"  Two hints:  {stats.two_hints}")
        lines.append(f"  Unknown:    {stats.unknown}")
        lines.append(f"Accuracy: {stats.accuracy * 100:.0f}%")

    if outcome is SessionOutcome.QUIT and stats.remaining:
        lines.append(f"Not reviewed: {stats.remaining}")
    if stats.persist_failures:
        lines.append(f"Warning: {stats.persist_failures} update(s) could not be saved")
    if stats.invalid_reviews:
        lines.append(f"Warning: {stats.invalid_reviews} review(s) were rejected")
    return lines
