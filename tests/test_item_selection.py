#!/usr/bin/env python3
"""
Unit tests for filtering, sorting and limiting.
"""

import os
import sys
from datetime import date

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from course_items import CourseItem
from item_selection import FilterOptions, apply_limit, filter_items, select_items, sort_items

TODAY = date(2025, 9, 10)


def make(title, **kw):
    return CourseItem(title=title, link=f"https://site.example/{title}", **kw)


def titles(items):
    return [it.title for it in items]


class TestFilter:
    """Test the independent filter predicates."""

    def setup_method(self):
        self.items = [
            make("past", date_start="2025-09-09"),
            make("today", date_start="2025-09-10"),
            make("future", date_start="2026-01-01"),
            make("undated"),
            make("hidden", visible=False, date_start="2026-01-01"),
            make("full", complet=True),
        ]

    def test_no_predicates_keeps_everything(self):
        assert filter_items(self.items, FilterOptions(), today=TODAY) == self.items

    def test_only_visible(self):
        kept = filter_items(self.items, FilterOptions(only_visible=True), today=TODAY)
        assert "hidden" not in titles(kept)
        assert len(kept) == 5

    def test_only_upcoming_keeps_today_and_undated(self):
        kept = filter_items(self.items, FilterOptions(only_upcoming=True), today=TODAY)
        assert titles(kept) == ["today", "future", "undated", "hidden", "full"]

    def test_only_upcoming_never_returns_past_items(self):
        kept = filter_items(self.items, FilterOptions(only_upcoming=True), today=TODAY)
        assert all(it.date_start is None or it.date_start >= TODAY.isoformat() for it in kept)

    def test_only_upcoming_with_datetime_value(self):
        items = [make("a", date_start="2025-09-10T08:00:00Z"), make("b", date_start="2025-09-09T23:00:00Z")]
        assert titles(filter_items(items, FilterOptions(only_upcoming=True), today=TODAY)) == ["a"]

    def test_exclude_complete(self):
        kept = filter_items(self.items, FilterOptions(exclude_complete=True), today=TODAY)
        assert "full" not in titles(kept)

    def test_predicates_are_conjunctive(self):
        opts = FilterOptions(only_visible=True, only_upcoming=True, exclude_complete=True)
        assert titles(filter_items(self.items, opts, today=TODAY)) == ["today", "future", "undated"]

    def test_does_not_mutate_input(self):
        before = list(self.items)
        filter_items(self.items, FilterOptions(only_visible=True), today=TODAY)
        assert self.items == before


class TestSort:
    """Test explicit-order and date ordering."""

    def test_date_order_with_undated_last(self):
        items = [make("c"), make("b", date_start="2025-10-01"), make("a", date_start="2025-09-01")]
        assert titles(sort_items(items)) == ["a", "b", "c"]

    def test_explicit_order_takes_precedence(self):
        items = [
            make("dated", date_start="2020-01-01"),
            make("second", order=2),
            make("first", order=1),
        ]
        assert titles(sort_items(items)) == ["first", "second", "dated"]

    def test_explicit_order_ignored_when_not_preferred(self):
        items = [make("late", order=1, date_start="2026-01-01"), make("early", date_start="2025-01-01")]
        assert titles(sort_items(items, prefer_explicit_order=False)) == ["early", "late"]

    def test_ties_keep_input_order(self):
        items = [make("x", order=1), make("y", order=0), make("z", order=1), make("w", order=0)]
        assert titles(sort_items(items)) == ["y", "w", "x", "z"]

    def test_all_undated_keeps_input_order(self):
        items = [make("b"), make("a"), make("c")]
        assert titles(sort_items(items)) == ["b", "a", "c"]

    def test_idempotent(self):
        items = [
            make("a", date_start="2025-10-01"), make("b"), make("c", date_start="2025-01-01"),
            make("d", date_start="2025-10-01"),
        ]
        once = sort_items(items)
        assert sort_items(once) == once

    def test_returns_new_list(self):
        items = [make("b", order=2), make("a", order=1)]
        sort_items(items)
        assert titles(items) == ["b", "a"]


class TestLimit:

    @pytest.mark.parametrize("limit,expected", [(0, 3), (None, 3), (-1, 3), (2, 2), (10, 3)])
    def test_apply_limit(self, limit, expected):
        items = [make("a"), make("b"), make("c")]
        assert len(apply_limit(items, limit)) == expected

    def test_select_filters_sorts_then_limits(self):
        items = [
            make("hidden", visible=False, order=0),
            make("three", order=3),
            make("one", order=1),
            make("two", order=2),
        ]
        out = select_items(items, FilterOptions(only_visible=True), limit=2, today=TODAY)
        assert titles(out) == ["one", "two"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
