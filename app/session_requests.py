"""
Selection requests used to build a session's working set.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from core import scheduler
from core.config import DEFAULT_SESSION_SIZE
from core.scheduler import SessionItem
from core.schemas import LexiconEntry, SelectionParams


@dataclass(frozen=True)
class SelectionRequest:
    """
    Which items a session should review.

    Either `count` (top-N by priority) or `start`/`end` (a position range,
    1-based and inclusive) is set, never both.
    """
    count: Optional[int] = None
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def mode(self) -> str:
        return "range" if self.start is not None else "top"

    def to_params(self) -> SelectionParams:
        return SelectionParams(mode=self.mode, count=self.count, start=self.start, end=self.end)


def normalize_selection_request(
    count: Optional[int] = None,
    start: Optional[int] = None,
    end: Optional[int] = None,
    default_count: int = DEFAULT_SESSION_SIZE
) -> SelectionRequest:
    """
    Validate operator parameters and fill in defaults.

    - No parameters: top `default_count`
    - Only `start`: range from start to the end of the collection
    - Only `end`: range from the first position to end

    Raises:
        ValueError: If count and range are mixed or values are out of bounds
    """
    has_range = start is not None or end is not None
    if count is not None and has_range:
        raise ValueError("Use either a count or a start/end range, not both")

    if not has_range:
        count = default_count if count is None else count
        if count <= 0:
            raise ValueError(f"Count must be positive, got {count}")
        return SelectionRequest(count=count)

    start = 1 if start is None else start
    if start <= 0:
        raise ValueError(f"Start position must be positive, got {start}")
    if end is not None and end < start:
        raise ValueError(f"End position {end} is before start position {start}")

    return SelectionRequest(start=start, end=end)


def resolve_selection(
    request: SelectionRequest,
    items: Sequence[LexiconEntry],
    now: Optional[datetime] = None
) -> list[SessionItem]:
    """Resolve a request against the collection, highest priority first."""
    if request.mode == "range":
        return scheduler.select_range(items, request.start, request.end, now)
    return scheduler.select_top(items, request.count, now)
