"""Unit tests for active_branches.limiter (ordering, filtering, limiting)."""

from __future__ import annotations

import pytest

from active_branches.filters import BranchFilter
from active_branches.limiter import apply_limit, filter_records, sort_records
from active_branches.models import BranchRecord, SortMode


def _records(times: dict[str, int]) -> list[BranchRecord]:
    return [BranchRecord(name=name, commit_timestamp=ts) for name, ts in times.items()]


def _names(records: list[BranchRecord]) -> list[str]:
    return [r.name for r in records]


class TestSortRecords:

    def test_recency_descending(self):
        records = _records({"old": 10, "new": 30, "mid": 20})
        assert _names(sort_records(records, SortMode.RECENCY)) == ["new", "mid", "old"]

    def test_recency_unknown_timestamps_last(self):
        records = [
            BranchRecord(name="unknown"),
            BranchRecord(name="zero", commit_timestamp=0),
            BranchRecord(name="known", commit_timestamp=5),
        ]
        assert _names(sort_records(records, SortMode.RECENCY)) == ["known", "unknown", "zero"]

    def test_recency_ties_broken_by_name(self):
        records = _records({"b": 5, "A": 5, "c": 5})
        assert _names(sort_records(records, SortMode.RECENCY)) == ["A", "b", "c"]

    def test_name_order_case_insensitive(self):
        records = [BranchRecord(name=n) for n in ["beta", "Alpha", "gamma", "alpha2"]]
        assert _names(sort_records(records, SortMode.NAME)) == ["Alpha", "alpha2", "beta", "gamma"]

    def test_sort_is_independent_of_input_order(self):
        records = _records({"a": 3, "b": 3, "c": 1, "d": 0})
        forward = sort_records(records, SortMode.RECENCY)
        backward = sort_records(list(reversed(records)), SortMode.RECENCY)
        assert forward == backward


class TestFilterRecords:

    def test_applies_retention(self, sink):
        f = BranchFilter("feature/.*", "main", sink=sink)
        records = _records({"main": 1, "feature/a": 2, "bugfix/b": 3})
        assert _names(filter_records(records, f)) == ["main", "feature/a"]

    def test_drops_duplicate_names(self, sink):
        f = BranchFilter(sink=sink)
        records = [BranchRecord(name="main", commit_timestamp=2), BranchRecord(name="main", commit_timestamp=1)]
        kept = filter_records(records, f)
        assert len(kept) == 1
        assert kept[0].commit_timestamp == 2


class TestApplyLimit:

    def test_under_limit_unchanged(self, sink):
        records = _records({"a": 3, "b": 2})
        assert apply_limit(records, 5, BranchFilter(sink=sink), SortMode.RECENCY) == records

    @pytest.mark.parametrize("max_count", [1, 2, 3, 4])
    def test_exact_size_without_mandatory(self, sink, max_count):
        records = sort_records(_records({"a": 5, "b": 4, "c": 3, "d": 2, "e": 1}), SortMode.RECENCY)
        limited = apply_limit(records, max_count, BranchFilter(sink=sink), SortMode.RECENCY)
        assert len(limited) == max_count
        assert _names(limited) == ["a", "b", "c", "d", "e"][:max_count]

    def test_mandatory_fill_all_slots(self, sink):
        records = sort_records(
            _records({"main": 100, "release/1": 50, "release/2": 40, "feature/x": 30}),
            SortMode.RECENCY,
        )
        f = BranchFilter(mandatory_pattern="release/.*", sink=sink)
        assert _names(apply_limit(records, 2, f, SortMode.RECENCY)) == ["release/1", "release/2"]

    def test_mandatory_exceeding_limit_all_kept(self, sink):
        records = sort_records(
            _records({"release/1": 5, "release/2": 4, "release/3": 3, "main": 9}),
            SortMode.RECENCY,
        )
        f = BranchFilter(mandatory_pattern="release/.*", sink=sink)
        limited = apply_limit(records, 2, f, SortMode.RECENCY)
        assert _names(limited) == ["release/1", "release/2", "release/3"]

    def test_mandatory_and_others_interleave_by_recency(self, sink):
        records = sort_records(
            _records({"feature/a": 100, "main": 10, "feature/b": 90, "feature/c": 80}),
            SortMode.RECENCY,
        )
        f = BranchFilter(mandatory_pattern="main", sink=sink)
        limited = apply_limit(records, 3, f, SortMode.RECENCY)
        assert _names(limited) == ["feature/a", "feature/b", "main"]

    def test_mandatory_interleave_by_name(self, sink):
        records = sort_records([BranchRecord(name=n) for n in ["a", "b", "c", "z-release"]], SortMode.NAME)
        f = BranchFilter(mandatory_pattern=".*release", sink=sink)
        limited = apply_limit(records, 2, f, SortMode.NAME)
        assert _names(limited) == ["a", "z-release"]
