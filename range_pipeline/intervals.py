from __future__ import annotations
from dataclasses import dataclass
from operator import index
from typing import Iterable, List, Optional, Tuple
import numpy as np

from .errors import IntervalOverflowError

INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)


def check_int64(value: int, what: str = "value") -> int:
    # rejects floats and strings, accepts python and numpy integers
    value = index(value)
    if value < INT64_MIN or value > INT64_MAX:
        raise IntervalOverflowError("%s %d is outside the signed 64-bit range" % (what, value))
    return value


@dataclass(frozen=True, order=True)
class Interval:
    """Half-open integer range [start, end).

    Ordered by start, then end. Empty intervals (start == end) are allowed
    but only appear as transient values; the reducer and map_range drop them.
    """
    start: int
    end: int

    def __post_init__(self):
        # accept numpy scalars, store plain ints
        object.__setattr__(self, "start", check_int64(self.start, "start"))
        object.__setattr__(self, "end", check_int64(self.end, "end"))
        if self.end < self.start:
            raise ValueError("Interval end %d is before start %d" % (self.end, self.start))

    @staticmethod
    def from_length(start: int, length: int) -> "Interval":
        if length < 0:
            raise ValueError("Interval length must be >= 0, got %d" % length)
        return Interval(start, index(start) + index(length))

    @property
    def length(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.end == self.start

    def __contains__(self, point) -> bool:
        return self.contains(point)

    def contains(self, point: int) -> bool:
        return self.start <= point < self.end

    def contains_interval(self, other: "Interval") -> bool:
        return self.start <= other.start and other.end <= self.end

    def intersects(self, other: "Interval") -> bool:
        return self.start < other.end and self.end > other.start

    def touches(self, other: "Interval") -> bool:
        """True when the two intervals intersect or sit end to start."""
        return self.intersects(other) or self.end == other.start or other.end == self.start

    def split(self, by: "Interval") -> Tuple[Optional["Interval"], Optional["Interval"], Optional["Interval"]]:
        """Partition self into the parts (left of, inside, right of) `by`.

        Missing parts are None. The non-None parts, read left to right,
        cover exactly the values of self.
        """
        if self.end <= by.start:
            return self, None, None
        if by.end <= self.start:
            return None, None, self
        if by.contains_interval(self):
            return None, self, None

        inside = Interval(max(self.start, by.start), min(self.end, by.end))
        left = Interval(self.start, by.start) if self.start < by.start else None
        right = Interval(by.end, self.end) if by.end < self.end else None
        return left, inside, right

    def shift(self, offset: int) -> "Interval":
        if offset == 0:
            return self
        return Interval(self.start + offset, self.end + offset)

    def merge(self, other: "Interval") -> "Interval":
        if not self.touches(other):
            raise ValueError("Cannot merge disjoint intervals %s and %s" % (self, other))
        return Interval(min(self.start, other.start), max(self.end, other.end))

    def as_pair(self) -> Tuple[int, int]:
        return self.start, self.end

    def __repr__(self) -> str:
        return "Interval(%d, %d)" % (self.start, self.end)


def merge_intervals(intervals: Iterable[Interval], merge_adjacent: bool = True) -> List[Interval]:
    """Sort and merge into a minimal list of disjoint intervals.

    Overlapping intervals always merge. Intervals that only touch
    (prev.end == cur.start) merge when merge_adjacent is set.
    Empty intervals are dropped.
    """
    xs = sorted(iv for iv in intervals if not iv.is_empty())
    if not xs:
        return []
    merged = []
    cs, ce = xs[0].start, xs[0].end
    for iv in xs[1:]:
        if iv.start < ce or (merge_adjacent and iv.start == ce):
            ce = max(ce, iv.end)
        else:
            merged.append(Interval(cs, ce))
            cs, ce = iv.start, iv.end
    merged.append(Interval(cs, ce))
    return merged


def total_length(intervals: Iterable[Interval]) -> int:
    return sum(iv.length for iv in intervals)


def as_int64_array(values) -> np.ndarray:
    """Coerce to an int64 array without truncating floats or wrapping large values."""
    xs = np.asarray(values)
    if xs.size == 0:
        return xs.astype(np.int64)
    if not np.issubdtype(xs.dtype, np.integer):
        raise TypeError("expected integer values, got dtype %s" % xs.dtype)
    if xs.dtype == np.uint64 and xs.max() > INT64_MAX:
        raise IntervalOverflowError("value %d is outside the signed 64-bit range" % xs.max())
    return xs.astype(np.int64)
