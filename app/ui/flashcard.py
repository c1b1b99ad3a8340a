"""
Flashcard hint gating.

Decides which hints of an item are unlocked at each clue level.
"""

from __future__ import annotations

from core.schemas import LexiconEntry


def visible_hints(item: LexiconEntry, hint_level: int) -> list[str]:
    """
    Hints to show for an item.

    Level 0 shows nothing, level 1 the example sentence, level 2 adds
    related words and phrases.
    """
    hints: list[str] = []
    if hint_level >= 1 and item.example:
        hints.append(item.example)
    if hint_level >= 2:
        if item.related:
            hints.append(", ".join(item.related))
        hints.extend(item.phrases)
    return hints
