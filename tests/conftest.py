"""
Pytest configuration and shared fixtures.

Provides a deterministic clock, a scripted operator UI and a small
in-memory lexicon with known review history.
"""

from datetime import datetime, timedelta, timezone

import pytest
from loguru import logger

from app.session_types import AnswerChoice
from core.lexicon_repo import InMemoryLexicon
from core.schemas import LexiconEntry


NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def advance(self, seconds: float) -> None:
        self.value += seconds

    def __call__(self) -> float:
        return self.value


class ScriptedUI:
    """
    Operator stand-in that answers from a script.

    Each script step is (choice, seconds the operator takes to answer).
    """

    def __init__(self, script, clock: FakeClock):
        self.script = list(script)
        self.clock = clock
        self.presented = []
        self.asked = []
        self.revealed = []
        self.notices = []
        self.summary = None

    def present_item(self, item, hint_level):
        self.presented.append((item.word, hint_level))

    def ask_choice(self, allowed):
        self.asked.append(tuple(allowed))
        if not self.script:
            raise AssertionError("UI script exhausted")
        choice, seconds = self.script.pop(0)
        self.clock.advance(seconds)
        return AnswerChoice(choice)

    def reveal_answer(self, item):
        self.revealed.append(item.word)

    def notify(self, message, level="info"):
        self.notices.append((level, message))

    def show_summary(self, lines):
        self.summary = list(lines)


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep loguru output out of the test report."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_ui(clock):
    def _make(*steps):
        return ScriptedUI(steps, clock)
    return _make


def _entry(word, days_ago, strength=1.0, difficulty=2.0, streak=0, **display):
    """Build an entry last reviewed `days_ago` days before NOW."""
    return LexiconEntry(
        word=word,
        translation=display.pop("translation", word.upper()),
        memory_strength=strength,
        memory_difficulty=difficulty,
        memory_streak=streak,
        memory_last_reviewed=NOW - timedelta(days=days_ago),
        **display,
    )


@pytest.fixture
def lexicon():
    """
    Three items in position order: boom (fresh), huis (10 days), fiets (1 day).

    Priority order is huis, fiets, boom.
    """
    return InMemoryLexicon([
        _entry("boom", 0, translation="tree", example="De boom is groot.", related=["bos"]),
        _entry("huis", 10, translation="house", example="Het huis is oud.", phrases=["thuis zijn"]),
        _entry("fiets", 1, translation="bicycle"),
    ])


@pytest.fixture
def make_entry():
    return _entry


@pytest.fixture
def scripted_ui_cls():
    return ScriptedUI
