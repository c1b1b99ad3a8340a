"""
Unit tests for the in-memory lexicon.
"""

import pytest

from core import memory
from core.lexicon_repo import InMemoryLexicon, UnknownItemError
from core.schemas import LexiconEntry


class TestInMemoryLexicon:
    def test_add_uses_default_state(self, now):
        lexicon = InMemoryLexicon()
        entry = lexicon.add("verrekijker", "binoculars", now=now, example="Pak de verrekijker.")
        assert entry.memory_strength == 1.0
        assert entry.memory_difficulty == 2.0
        assert entry.memory_streak == 0
        assert entry.memory_last_reviewed == now
        assert entry.example == "Pak de verrekijker."
        assert lexicon.get("verrekijker") == entry

    def test_duplicate_words_are_rejected(self, now):
        lexicon = InMemoryLexicon()
        lexicon.add("huis", now=now)
        with pytest.raises(ValueError):
            lexicon.add("huis", now=now)
        with pytest.raises(ValueError):
            InMemoryLexicon([LexiconEntry(word="a"), LexiconEntry(word="a")])

    def test_get_all_keeps_insertion_order(self, lexicon):
        assert [e.word for e in lexicon.get_all()] == ["boom", "huis", "fiets"]
        assert len(lexicon) == 3
        assert "huis" in lexicon

    def test_update_replaces_all_memory_fields(self, lexicon, now):
        state = memory.MemoryState(strength=4.5, difficulty=3.25, streak=2, last_reviewed=now)
        assert lexicon.update("huis", state) is True

        updated = lexicon.get("huis")
        assert updated.memory_state() == state
        assert updated.translation == "house"
        assert [e.word for e in lexicon.get_all()] == ["boom", "huis", "fiets"]

    def test_update_unknown_word(self, lexicon, now):
        state = memory.initialize_new_state(now)
        with pytest.raises(UnknownItemError) as exc:
            lexicon.update("kat", state)
        assert exc.value.word == "kat"

    def test_get_all_returns_a_copy(self, lexicon):
        lexicon.get_all().clear()
        assert len(lexicon) == 3
