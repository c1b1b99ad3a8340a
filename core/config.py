"""
Environment configuration for the review engine.

Values are read from the process environment (and a .env file, if present).
Every setting has a default, so an empty environment works.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv
from loguru import logger

from core.memory import DEFAULT_WEIGHTS, InvalidWeight, MemoryWeights

# Load environment
load_dotenv()


T = TypeVar("T")

DEFAULT_LOG_DIR = Path("logs/sessions")
DEFAULT_SESSION_SIZE = 20

# Environment variable -> MemoryWeights field
WEIGHT_ENV_VARS = {
    "SRS_REACTION_TIME_MS": ("reaction_time_ms", float),
    "SRS_CHAR_TIME_MS": ("char_time_ms", float),
    "SRS_SPEED_MULTIPLIER": ("speed_multiplier", float),
    "SRS_SPEED_WEIGHT": ("speed_weight", float),
    "SRS_STREAK_THRESHOLD": ("streak_threshold", int),
    "SRS_BONUS_WEIGHT": ("bonus_weight", float),
    "SRS_DIFFICULTY_CORRECTION": ("difficulty_correction_weight", float),
}


@dataclass(frozen=True)
class Settings:
    log_dir: Path = DEFAULT_LOG_DIR
    log_level: str = "INFO"
    session_size: int = DEFAULT_SESSION_SIZE
    abort_on_persist_failure: bool = False
    weights: MemoryWeights = field(default_factory=lambda: DEFAULT_WEIGHTS)


def _parse(name: str, cast: Callable[[str], T], default: T) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Environment variable {name} has an invalid value: {raw!r}") from None


def _parse_bool(raw: str) -> bool:
    value = raw.lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(raw)


def load_weights() -> MemoryWeights:
    """
    Build memory weights from SRS_* environment variables.

    Raises:
        ValueError: If a value cannot be parsed or is out of range
    """
    overrides = {}
    for env_name, (attr, cast) in WEIGHT_ENV_VARS.items():
        overrides[attr] = _parse(env_name, cast, getattr(DEFAULT_WEIGHTS, attr))
    try:
        return MemoryWeights(**overrides)
    except InvalidWeight as e:
        env_name = next(name for name, (attr, _) in WEIGHT_ENV_VARS.items() if attr == e.field)
        raise ValueError(f"Environment variable {env_name} has an invalid value: {e}") from None


def load_log_dir() -> Path:
    """Session log directory from SRS_LOG_DIR."""
    return Path(_parse("SRS_LOG_DIR", str, str(DEFAULT_LOG_DIR)))


def load_settings() -> Settings:
    """
    Read all settings from the environment.

    Raises:
        ValueError: If a variable is set but cannot be parsed
    """
    session_size = _parse("SRS_SESSION_SIZE", int, DEFAULT_SESSION_SIZE)
    if session_size <= 0:
        raise ValueError(f"Environment variable SRS_SESSION_SIZE must be positive, got {session_size}")

    return Settings(
        log_dir=load_log_dir(),
        log_level=_parse("SRS_LOG_LEVEL", str, "INFO").upper(),
        session_size=session_size,
        abort_on_persist_failure=_parse("SRS_ABORT_ON_PERSIST_FAILURE", _parse_bool, False),
        weights=load_weights(),
    )


def configure_logging(level: str = "INFO", sink: Optional[object] = None) -> None:
    """Route loguru output to stderr (or the given sink) at the given level."""
    logger.remove()
    logger.add(
        sink or sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}",
    )
