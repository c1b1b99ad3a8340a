"""
Unit tests for the priority scheduler.
"""

import math

import pytest

from core import scheduler
from core.schemas import LexiconEntry


class TestComputePriority:
    def test_equals_forget_probability(self, make_entry, now):
        item = make_entry("huis", 10, strength=10.0, difficulty=2.0)
        assert scheduler.compute_priority(item, now) == pytest.approx(1 - math.exp(-2))

    def test_just_reviewed_is_zero(self, make_entry, now):
        assert scheduler.compute_priority(make_entry("boom", 0), now) == 0.0

    def test_never_reviewed_is_zero(self, now):
        item = LexiconEntry(word="nieuw")
        assert scheduler.compute_priority(item, now) == 0.0

    def test_saturated_items_stay_ordered(self, make_entry, now):
        # exp(-60) and exp(-120) both round 1 - exp(-x) to exactly 1.0
        overdue = make_entry("a", 30)
        very_overdue = make_entry("b", 60)
        p_overdue = scheduler.compute_priority(overdue, now)
        p_very_overdue = scheduler.compute_priority(very_overdue, now)
        assert p_overdue == pytest.approx(1.0 + math.log1p(60.0))
        assert p_very_overdue > p_overdue > 1.0

    def test_corrupt_state_ranks_like_a_new_item(self, make_entry, now):
        negative = make_entry("kat", 400, strength=-1.0)
        assert scheduler.compute_priority(negative, now) == scheduler.compute_priority(make_entry("kat", 400), now)

        zero_difficulty = make_entry("huis", 10, strength=10.0, difficulty=0.0)
        assert scheduler.compute_priority(zero_difficulty, now) == pytest.approx(1 - math.exp(-2))

    def test_corrupt_state_does_not_break_sorting(self, lexicon, make_entry, now):
        items = lexicon.get_all() + [make_entry("kat", 400, strength=-1.0, difficulty=-3.0)]
        assert scheduler.sort_by_priority(items, now)[0].word == "kat"


class TestSortByPriority:
    def test_descending(self, lexicon, now):
        ordered = scheduler.sort_by_priority(lexicon.get_all(), now)
        assert [s.word for s in ordered] == ["huis", "fiets", "boom"]
        priorities = [s.priority for s in ordered]
        assert priorities == sorted(priorities, reverse=True)

    def test_overdue_item_comes_first(self, make_entry, now):
        fresh = make_entry("a", 0, strength=3.0, difficulty=4.0)
        old = make_entry("b", 30, strength=3.0, difficulty=4.0)
        top = scheduler.select_top([fresh, old], 1, now)
        assert [s.word for s in top] == ["b"]

    def test_ties_keep_input_order(self, make_entry, now):
        items = [make_entry(w, 2) for w in ("c", "a", "b")]
        assert [s.word for s in scheduler.sort_by_priority(items, now)] == ["c", "a", "b"]

    def test_empty(self, now):
        assert scheduler.sort_by_priority([], now) == []


class TestSelection:
    def test_top_n(self, lexicon, now):
        assert [s.word for s in scheduler.select_top(lexicon.get_all(), 2, now)] == ["huis", "fiets"]

    def test_top_n_larger_than_collection(self, lexicon, now):
        assert len(scheduler.select_top(lexicon.get_all(), 50, now)) == 3

    def test_top_zero(self, lexicon, now):
        assert scheduler.select_top(lexicon.get_all(), 0, now) == []

    def test_range_slices_before_sorting(self, lexicon, now):
        # Positions 1-2 are boom and huis; fiets is excluded even though it outranks boom
        selected = scheduler.select_range(lexicon.get_all(), 1, 2, now)
        assert [s.word for s in selected] == ["huis", "boom"]

    def test_modes_differ(self, lexicon, now):
        items = lexicon.get_all()
        top = [s.word for s in scheduler.select_top(items, 2, now)]
        ranged = [s.word for s in scheduler.select_range(items, 1, 2, now)]
        assert top != ranged

    def test_open_ended_range(self, lexicon, now):
        assert [s.word for s in scheduler.select_range(lexicon.get_all(), 2, None, now)] == ["huis", "fiets"]

    def test_range_clamped_to_collection(self, lexicon, now):
        assert len(scheduler.select_range(lexicon.get_all(), 0, 99, now)) == 3

    def test_range_past_the_end_is_empty(self, lexicon, now):
        assert scheduler.select_range(lexicon.get_all(), 5, 9, now) == []


class TestReports:
    def test_due_items(self, lexicon, now):
        assert [s.word for s in scheduler.due_items(lexicon.get_all(), 0.5, now)] == ["huis", "fiets"]

    def test_priority_report_rows(self, lexicon, now):
        rows = scheduler.priority_report(scheduler.sort_by_priority(lexicon.get_all(), now))
        assert [r.word for r in rows] == ["huis", "fiets", "boom"]
        assert rows[-1].priority == 0.0
