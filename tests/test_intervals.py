"""Tests for range_pipeline.intervals."""
from __future__ import annotations

import numpy as np
import pytest

from range_pipeline import (
    INT64_MAX, INT64_MIN, Interval, IntervalOverflowError, as_int64_array, merge_intervals, total_length
)


class TestInterval:
    def test_basic_queries(self) -> None:
        iv = Interval(5, 10)
        assert iv.length == 5
        assert iv.contains(5) and iv.contains(9)
        assert not iv.contains(10) and not iv.contains(4)
        assert 7 in iv
        assert iv.contains_interval(Interval(5, 10))
        assert iv.contains_interval(Interval(6, 8))
        assert not iv.contains_interval(Interval(4, 8))

    def test_intersects_is_strict_for_half_open(self) -> None:
        assert Interval(0, 5).intersects(Interval(4, 8))
        assert not Interval(0, 5).intersects(Interval(5, 8))
        assert not Interval(5, 8).intersects(Interval(0, 5))

    def test_rejects_inverted_bounds(self) -> None:
        with pytest.raises(ValueError):
            Interval(5, 3)
        with pytest.raises(ValueError):
            Interval.from_length(5, -1)

    def test_empty_interval_allowed(self) -> None:
        assert Interval(3, 3).is_empty()
        assert Interval.from_length(3, 0) == Interval(3, 3)

    def test_numpy_scalars_are_stored_as_int(self) -> None:
        iv = Interval(np.int64(3), np.int64(7))
        assert type(iv.start) is int and type(iv.end) is int
        assert iv == Interval(3, 7)
        assert hash(iv) == hash(Interval(3, 7))

    def test_ordering_by_start(self) -> None:
        xs = sorted([Interval(9, 10), Interval(1, 4), Interval(1, 2), Interval(5, 6)])
        assert xs == [Interval(1, 2), Interval(1, 4), Interval(5, 6), Interval(9, 10)]

    def test_shift(self) -> None:
        assert Interval(5, 10).shift(-5) == Interval(0, 5)
        assert Interval(5, 10).shift(0) == Interval(5, 10)

    def test_merge(self) -> None:
        assert Interval(0, 5).merge(Interval(3, 9)) == Interval(0, 9)
        assert Interval(0, 5).merge(Interval(5, 9)) == Interval(0, 9)
        assert Interval(5, 9).merge(Interval(0, 5)) == Interval(0, 9)
        with pytest.raises(ValueError):
            Interval(0, 5).merge(Interval(6, 9))


class TestIntervalBounds:
    def test_construction_outside_int64_fails(self) -> None:
        with pytest.raises(IntervalOverflowError):
            Interval(0, INT64_MAX + 1)
        with pytest.raises(IntervalOverflowError):
            Interval(INT64_MIN - 1, 0)

    def test_shift_overflow_fails_instead_of_wrapping(self) -> None:
        with pytest.raises(IntervalOverflowError):
            Interval(INT64_MAX - 1, INT64_MAX).shift(5)

    def test_overflow_error_is_an_overflow_error(self) -> None:
        with pytest.raises(OverflowError):
            Interval.from_length(INT64_MAX, 1)

    def test_non_integer_bounds_rejected(self) -> None:
        with pytest.raises(TypeError):
            Interval(1.5, 3.9)
        with pytest.raises(TypeError):
            Interval("1", 3)
        with pytest.raises(TypeError):
            Interval.from_length(2, 1.0)

    def test_int64_array_rejects_floats_and_wrapping(self) -> None:
        assert as_int64_array([1, 2]).dtype == np.int64
        assert as_int64_array([]).dtype == np.int64
        with pytest.raises(TypeError):
            as_int64_array([1.5, 2.0])
        with pytest.raises(IntervalOverflowError):
            as_int64_array(np.array([INT64_MAX + 1], dtype=np.uint64))

    def test_large_values_inside_range(self) -> None:
        iv = Interval.from_length(3_000_000_000, 4_000_000_000)
        assert iv.length == 4_000_000_000


class TestSplit:
    by = Interval(5, 10)

    def test_fully_inside(self) -> None:
        assert Interval(6, 9).split(self.by) == (None, Interval(6, 9), None)
        assert Interval(5, 10).split(self.by) == (None, Interval(5, 10), None)

    def test_disjoint_left_and_right(self) -> None:
        assert Interval(0, 3).split(self.by) == (Interval(0, 3), None, None)
        assert Interval(12, 15).split(self.by) == (None, None, Interval(12, 15))

    def test_touching_is_disjoint(self) -> None:
        assert Interval(0, 5).split(self.by) == (Interval(0, 5), None, None)
        assert Interval(10, 15).split(self.by) == (None, None, Interval(10, 15))

    def test_partial_overlaps(self) -> None:
        assert Interval(0, 8).split(self.by) == (Interval(0, 5), Interval(5, 8), None)
        assert Interval(7, 15).split(self.by) == (None, Interval(7, 10), Interval(10, 15))

    def test_straddles_both_sides(self) -> None:
        assert Interval(0, 20).split(self.by) == (Interval(0, 5), Interval(5, 10), Interval(10, 20))

    def test_parts_reconstruct_input(self) -> None:
        for by_start in range(0, 12):
            for by_end in range(by_start + 1, 13):
                by = Interval(by_start, by_end)
                for start in range(0, 12):
                    for end in range(start + 1, 13):
                        iv = Interval(start, end)
                        parts = [p for p in iv.split(by) if p is not None]
                        assert all(not p.is_empty() for p in parts)
                        assert parts[0].start == iv.start
                        assert parts[-1].end == iv.end
                        for a, b in zip(parts, parts[1:]):
                            assert a.end == b.start
                        _, inside, _ = iv.split(by)
                        if inside is not None:
                            assert by.contains_interval(inside)


class TestMergeIntervals:
    def test_empty_input(self) -> None:
        assert merge_intervals([]) == []
        assert merge_intervals([Interval(4, 4)]) == []

    def test_merges_overlapping_and_adjacent(self) -> None:
        xs = [Interval(5, 8), Interval(0, 3), Interval(3, 4), Interval(7, 10), Interval(20, 20)]
        assert merge_intervals(xs) == [Interval(0, 4), Interval(5, 10)]

    def test_adjacent_kept_apart_when_disabled(self) -> None:
        xs = [Interval(5, 8), Interval(0, 3), Interval(3, 4), Interval(7, 10)]
        assert merge_intervals(xs, merge_adjacent=False) == [Interval(0, 3), Interval(3, 4), Interval(5, 10)]

    def test_contained_interval_absorbed(self) -> None:
        assert merge_intervals([Interval(0, 100), Interval(10, 20)]) == [Interval(0, 100)]

    def test_idempotent_sorted_disjoint(self) -> None:
        xs = [Interval(s, s + n) for s, n in [(30, 5), (1, 2), (33, 10), (3, 1), (50, 0), (60, 3), (2, 8)]]
        once = merge_intervals(xs)
        assert merge_intervals(once) == once
        for a, b in zip(once, once[1:]):
            assert a.end < b.start
        covered = set()
        for iv in xs:
            covered.update(range(iv.start, iv.end))
        assert total_length(once) == len(covered)
