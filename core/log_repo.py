"""
JSON repository for session logs.

Every study session leaves an append-only audit trail: how the working set
was selected, the sorted item/priority snapshot, one row per review and the
final statistics. The document is rewritten on every append and becomes
immutable once finalized.

Logs are stored as JSON files: <log_dir>/session-<YYYYmmdd-HHMMSS>-<id>.json
"""

from __future__ import annotations

import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, Sequence

from loguru import logger
from pydantic import ValidationError

from core.config import load_log_dir
from core.schemas import (
    SESSION_LOG_SCHEMA_VERSION,
    ReviewLogRow,
    SelectionParams,
    SessionLogDocument,
    SessionStatsRow,
    SortResultRow,
)


def new_session_id() -> str:
    return uuid.uuid4().hex[:12]


class SessionLogError(RuntimeError):
    """Raised when a session log cannot be written or read."""


class SessionLogFinalizedError(SessionLogError):
    """Raised when appending to a log that was already finalized."""


class UnsupportedSessionLogVersion(SessionLogError):
    """Raised when reading a log written with an unknown schema version."""

    def __init__(self, version: object, path: Path):
        self.version = version
        self.path = path
        super().__init__(
            f"{path}: schema_version {version!r} is not supported "
            f"(expected {SESSION_LOG_SCHEMA_VERSION})"
        )


class SessionLogger(Protocol):
    """Write contract for the session audit trail."""

    session_id: str

    def record_sort_result(
        self,
        rows: Sequence[SortResultRow],
        selection: Optional[SelectionParams] = None
    ) -> None:
        ...

    def record_review(self, row: ReviewLogRow) -> None:
        ...

    def finalize(
        self,
        stats: SessionStatsRow,
        outcome: str,
        error: Optional[str] = None
    ) -> Optional[Path]:
        ...


class JsonSessionLog:
    """
    Session log persisted as one JSON document.

    The file is created on the first append and rewritten atomically after
    every change.
    """

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        session_id: Optional[str] = None,
        started_at: Optional[datetime] = None
    ):
        self.log_dir = Path(log_dir) if log_dir is not None else load_log_dir()
        started_at = started_at or datetime.now(timezone.utc)
        self.document = SessionLogDocument(
            session_id=session_id or new_session_id(),
            started_at=started_at,
        )
        stamp = started_at.strftime("%Y%m%d-%H%M%S")
        self.path = self.log_dir / f"session-{stamp}-{self.document.session_id}.json"

    @property
    def session_id(self) -> str:
        return self.document.session_id

    @property
    def finalized(self) -> bool:
        return self.document.finalized

    def _ensure_open(self) -> None:
        if self.document.finalized:
            raise SessionLogFinalizedError(f"Session log {self.path} is already finalized")

    def _write(self) -> None:
        """Write the document to disk (temp file + rename)."""
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".json.tmp")
            tmp_path.write_text(self.document.model_dump_json(indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise SessionLogError(f"Failed to write session log {self.path}: {e}") from e

    def record_sort_result(
        self,
        rows: Sequence[SortResultRow],
        selection: Optional[SelectionParams] = None
    ) -> None:
        """Store the selection parameters and the sorted item/priority snapshot."""
        self._ensure_open()
        self.document.selection = selection
        self.document.sort_result = list(rows)
        self._write()

    def record_review(self, row: ReviewLogRow) -> None:
        """Append one review row."""
        self._ensure_open()
        self.document.reviews.append(row)
        self._write()

    def finalize(
        self,
        stats: SessionStatsRow,
        outcome: str,
        error: Optional[str] = None
    ) -> Path:
        """
        Store final statistics and outcome, then close the log.

        Returns:
            Path of the written log file
        """
        self._ensure_open()
        self.document.stats = stats
        self.document.outcome = outcome
        self.document.error = error
        self.document.finished_at = datetime.now(timezone.utc)
        self.document.finalized = True
        self._write()

        logger.info(f"Session log written to {self.path}")
        return self.path


class NullSessionLog:
    """Session logger that keeps nothing."""

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or new_session_id()

    def record_sort_result(
        self,
        rows: Sequence[SortResultRow],
        selection: Optional[SelectionParams] = None
    ) -> None:
        pass

    def record_review(self, row: ReviewLogRow) -> None:
        pass

    def finalize(
        self,
        stats: SessionStatsRow,
        outcome: str,
        error: Optional[str] = None
    ) -> Optional[Path]:
        return None


def load_session_log(path: Path) -> SessionLogDocument:
    """
    Read a session log back from disk.

    Raises:
        UnsupportedSessionLogVersion: If the schema version is unknown
        SessionLogError: If the file is missing or malformed
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SessionLogError(f"Failed to read session log {path}: {e}") from e

    try:
        document = SessionLogDocument.model_validate_json(raw)
    except ValidationError as e:
        raise SessionLogError(f"Malformed session log {path}: {e}") from e

    if document.schema_version != SESSION_LOG_SCHEMA_VERSION:
        raise UnsupportedSessionLogVersion(document.schema_version, path)
    return document


def list_session_logs(log_dir: Optional[Path] = None) -> list[Path]:
    """Get all session log files, newest first."""
    log_dir = Path(log_dir) if log_dir is not None else load_log_dir()
    if not log_dir.exists():
        return []
    return sorted(log_dir.glob("session-*.json"), reverse=True)
