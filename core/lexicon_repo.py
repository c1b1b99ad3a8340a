"""
Lexicon repository for item access.

Defines the storage contract the review engine consumes and an in-memory
collection that implements it. The collection is owned by whoever creates
it and is passed explicitly into a study session; there is no module-level
state.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol

from loguru import logger

from core.memory import MemoryState, initialize_new_state
from core.schemas import LexiconEntry


class RepositoryError(RuntimeError):
    """Raised when an item update could not be stored."""


class UnknownItemError(RepositoryError):
    """Raised when updating a word that is not in the collection."""

    def __init__(self, word: str):
        self.word = word
        super().__init__(f"Unknown item: {word!r}")


class Repository(Protocol):
    """
    Storage contract consumed by the study session.

    `update` replaces all memory fields of one item at once and reports
    success with a bool (or raises RepositoryError).
    """

    def get_all(self) -> list[LexiconEntry]:
        ...

    def update(self, word: str, state: MemoryState) -> bool:
        ...


class InMemoryLexicon:
    """
    Ordered in-memory collection of lexicon entries keyed by word.

    Insertion order is the position order used by range selection.
    """

    def __init__(self, entries: Optional[Iterable[LexiconEntry]] = None):
        self._entries: dict[str, LexiconEntry] = {}
        for entry in entries or ():
            if entry.word in self._entries:
                raise ValueError(f"Duplicate item: {entry.word!r}")
            self._entries[entry.word] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, word: object) -> bool:
        return word in self._entries

    def add(
        self,
        word: str,
        translation: str = "",
        now: Optional[datetime] = None,
        **display_fields
    ) -> LexiconEntry:
        """
        Add a new item with the default memory state.

        Args:
            word: The item (also its key)
            translation: Answer text
            now: Creation time, stored as last review time
            **display_fields: example, related, phrases

        Returns:
            The stored entry
        """
        if word in self._entries:
            raise ValueError(f"Duplicate item: {word!r}")

        entry = LexiconEntry(word=word, translation=translation, **display_fields)
        entry = entry.with_memory_state(initialize_new_state(now))
        self._entries[word] = entry
        return entry

    def get(self, word: str) -> Optional[LexiconEntry]:
        return self._entries.get(word)

    def get_all(self) -> list[LexiconEntry]:
        """Get all entries in position order."""
        return list(self._entries.values())

    def update(self, word: str, state: MemoryState) -> bool:
        """
        Replace the memory state of one item.

        Raises:
            UnknownItemError: If the word is not in the collection
        """
        entry = self._entries.get(word)
        if entry is None:
            raise UnknownItemError(word)

        self._entries[word] = entry.with_memory_state(state)
        logger.debug(
            f"Updated {word!r}: S={state.strength:.2f} D={state.difficulty:.2f} streak={state.streak}"
        )
        return True
