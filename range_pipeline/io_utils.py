from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Union
import json
import re
from pathlib import Path

from .errors import AlmanacParseError
from .intervals import Interval
from .tables import RuleTriple

_HEADER_RE = re.compile(r"^([A-Za-z]+)-to-([A-Za-z]+)\s+map:$")

@dataclass
class StageSpec:
    from_name: str
    to_name: str
    rules: List[RuleTriple] = field(default_factory=list)

@dataclass
class Almanac:
    """Parsed input: seed numbers plus the ordered stage rule tables."""
    seeds: List[int]
    stages: List[StageSpec]

    def seed_ranges(self) -> List[Interval]:
        """Pair up seeds as (start, length)."""
        if len(self.seeds) % 2:
            raise AlmanacParseError("seed list has an odd number of values (%d)" % len(self.seeds))
        return [Interval.from_length(s, n) for s, n in zip(self.seeds[0::2], self.seeds[1::2])]

def _parse_ints(parts: Sequence[str], line_no: int) -> List[int]:
    try:
        return [int(p) for p in parts]
    except ValueError:
        raise AlmanacParseError("expected integers, got %r" % " ".join(parts), line_no) from None

def parse_almanac(text: str) -> Almanac:
    """Parse the almanac text format.

    Blank lines are only separators: a map block may contain them, and the
    seed list may continue on following lines until the first map header.
    """
    seeds = None
    stages: List[StageSpec] = []
    current = None
    for line_no, ln in enumerate(text.splitlines(), start=1):
        ln = ln.strip()
        if not ln:
            continue
        if ln.startswith("seeds:"):
            if seeds is not None:
                raise AlmanacParseError("duplicate seeds line", line_no)
            seeds = _parse_ints(ln[len("seeds:"):].split(), line_no)
            continue
        m = _HEADER_RE.match(ln)
        if m:
            if seeds is None:
                raise AlmanacParseError("map block before the seeds line", line_no)
            current = StageSpec(m.group(1), m.group(2))
            stages.append(current)
            continue
        if seeds is None:
            raise AlmanacParseError("numbers before the seeds line: %r" % ln, line_no)
        nums = _parse_ints(ln.split(), line_no)
        if current is None:
            # seed list wrapped onto another line
            seeds.extend(nums)
            continue
        if len(nums) != 3:
            raise AlmanacParseError("rule needs 3 numbers, got %d" % len(nums), line_no)
        if nums[2] < 0:
            raise AlmanacParseError("rule length must be >= 0", line_no)
        current.rules.append((nums[0], nums[1], nums[2]))
    if seeds is None:
        raise AlmanacParseError("missing seeds line")
    return Almanac(seeds, stages)

def load_almanac(path: Union[str, Path]) -> Almanac:
    return parse_almanac(Path(path).read_text(encoding="utf-8"))

def save_intervals_json(spans: List[Interval], path: Union[str, Path]):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([[iv.start, iv.end] for iv in spans], f, ensure_ascii=False, indent=2)

def load_intervals_json(path: Union[str, Path]) -> List[Interval]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [Interval(int(a), int(b)) for (a, b) in data]

def save_stages_json(stage_sets: Dict[str, List[Interval]], path: Union[str, Path]):
    """Dump each stage's working set as {stage_name: [[start, end], ...]}."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    payload = {name: [[iv.start, iv.end] for iv in spans] for name, spans in stage_sets.items()}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
