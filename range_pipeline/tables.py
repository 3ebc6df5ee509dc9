from __future__ import annotations
from bisect import bisect_right
from collections import deque
from dataclasses import dataclass
from operator import index
from typing import Iterable, List, Sequence, Tuple
import logging
import numpy as np

from .errors import ConfigurationError, IntervalOverflowError
from .intervals import Interval, INT64_MAX, INT64_MIN, as_int64_array, check_int64

logger = logging.getLogger(__name__)

RuleTriple = Tuple[int, int, int]  # (destination_start, source_start, length)


@dataclass(frozen=True)
class RewriteRule:
    """Maps every point p of `source` to p + offset."""
    source: Interval
    offset: int

    @staticmethod
    def from_triple(destination_start: int, source_start: int, length: int) -> "RewriteRule":
        if length < 0:
            raise ConfigurationError(
                "rule %d %d %d has a negative length" % (destination_start, source_start, length)
            )
        # destination must stay representable too
        Interval.from_length(destination_start, length)
        return RewriteRule(
            Interval.from_length(source_start, length),
            check_int64(index(destination_start) - index(source_start), "offset"),
        )

    @property
    def destination(self) -> Interval:
        return self.source.shift(self.offset)

    def map_interval(self, interval: Interval) -> Interval:
        if not self.source.contains_interval(interval):
            raise ValueError("%s is not inside rule source %s" % (interval, self.source))
        return interval.shift(self.offset)

    def as_triple(self) -> RuleTriple:
        return self.source.start + self.offset, self.source.start, self.source.length


class RewriteTable:
    """One pipeline stage: sorted, non-overlapping rules with identity fallback."""

    def __init__(self, rules: Iterable[RewriteRule], from_name: str = "", to_name: str = "",
                 validate: bool = True):
        self.from_name = from_name
        self.to_name = to_name
        kept = []
        for rule in rules:
            if rule.source.is_empty():
                logger.debug("%s: dropping zero-length rule at %d", self.name, rule.source.start)
                continue
            kept.append(rule)
        kept.sort(key=lambda r: (r.source.start, r.source.end))
        if validate:
            for prev, cur in zip(kept, kept[1:]):
                if prev.source.intersects(cur.source):
                    raise ConfigurationError(
                        "%s: rules overlap: %s and %s" % (self.name, prev.source, cur.source)
                    )
        self.rules: Tuple[RewriteRule, ...] = tuple(kept)
        self._starts = [r.source.start for r in self.rules]
        self._ends = [r.source.end for r in self.rules]

    @staticmethod
    def from_triples(triples: Iterable[Sequence[int]], from_name: str = "", to_name: str = "",
                     validate: bool = True) -> "RewriteTable":
        rules = [RewriteRule.from_triple(d, s, n) for (d, s, n) in triples]
        return RewriteTable(rules, from_name, to_name, validate=validate)

    @property
    def name(self) -> str:
        if self.from_name or self.to_name:
            return "%s-to-%s" % (self.from_name, self.to_name)
        return "table"

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return "RewriteTable(%s, %d rules)" % (self.name, len(self.rules))

    def map_point(self, value: int) -> int:
        value = check_int64(value)
        i = bisect_right(self._starts, value) - 1
        if i >= 0 and self.rules[i].source.contains(value):
            return check_int64(value + self.rules[i].offset)
        return value

    def map_points(self, values) -> np.ndarray:
        """Vectorized map_point over an array of int64 values."""
        xs = as_int64_array(values)
        if not self.rules or xs.size == 0:
            return xs.copy()
        starts = np.asarray(self._starts, dtype=np.int64)
        ends = np.asarray(self._ends, dtype=np.int64)
        offsets = np.asarray([r.offset for r in self.rules], dtype=object)
        idx = np.searchsorted(starts, xs, side="right") - 1
        safe = np.clip(idx, 0, None)
        hit = (idx >= 0) & (xs < ends[safe])
        # object arithmetic so an out-of-range result is detected, not wrapped
        shifted = xs.astype(object) + np.where(hit, offsets[safe], 0)
        if shifted.size and (shifted.min() < INT64_MIN or shifted.max() > INT64_MAX):
            raise IntervalOverflowError("%s: mapped value outside the signed 64-bit range" % self.name)
        return shifted.astype(np.int64)

    def map_range(self, interval: Interval) -> List[Interval]:
        """Map every value of `interval`, returning the image as a list of fragments.

        Rules are visited in ascending order with one pending fragment at a
        time. The part left of a rule can't meet any later rule and goes out
        unmapped; the part inside is shifted; the part to the right is
        pushed back for the next rule. Whatever is left after the last rule
        is unmapped.
        """
        out: List[Interval] = []
        if interval.is_empty():
            return out
        pending = deque([interval])
        # skip rules that end at or before the interval start
        first = bisect_right(self._ends, interval.start)
        for rule in self.rules[first:]:
            if not pending:
                break
            fragment = pending.popleft()
            left, inside, right = fragment.split(rule.source)
            if left is not None:
                out.append(left)
            if inside is not None:
                out.append(inside.shift(rule.offset))
            if right is not None:
                pending.appendleft(right)
        out.extend(pending)
        return out
