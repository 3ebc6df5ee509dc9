from __future__ import annotations
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Dict, Iterable, List, Optional
import logging
import numpy as np

from .config import PipelineConfig
from .intervals import Interval, as_int64_array, merge_intervals, total_length
from .io_utils import Almanac
from .tables import RewriteTable

logger = logging.getLogger(__name__)

@dataclass
class PipelineResult:
    seeds: List[Interval]
    # working set after each stage, keyed by stage name, in stage order
    stage_intervals: Dict[str, List[Interval]]
    final: List[Interval]
    minimum: Optional[int]

def _apply_one(pipeline: "RangePipeline", seed: Interval) -> List[Interval]:
    # module level so process pools can pickle it
    return pipeline._run_stages([seed])

class RangePipeline:
    """Ordered chain of RewriteTables applied to a working set of intervals."""

    def __init__(self, stages: Iterable[RewriteTable], config: PipelineConfig | None = None):
        self.cfg = (config or PipelineConfig()).validate()
        self.stages: List[RewriteTable] = list(stages)
        for prev, cur in zip(self.stages, self.stages[1:]):
            if prev.to_name and cur.from_name and prev.to_name != cur.from_name:
                logger.warning("stage %s feeds %s: category names do not chain", prev.name, cur.name)

    @staticmethod
    def from_almanac(almanac: Almanac, config: PipelineConfig | None = None) -> "RangePipeline":
        cfg = config or PipelineConfig()
        stages = [
            RewriteTable.from_triples(st.rules, st.from_name, st.to_name, validate=cfg.validate_tables)
            for st in almanac.stages
        ]
        return RangePipeline(stages, cfg)

    def __len__(self) -> int:
        return len(self.stages)

    def stage_names(self) -> List[str]:
        names = []
        for i, st in enumerate(self.stages):
            name = st.name
            # keep dict keys unique when tables are unnamed
            names.append(name if name not in names else "%s#%d" % (name, i))
        return names

    def _reduce(self, intervals: List[Interval]) -> List[Interval]:
        return merge_intervals(intervals, merge_adjacent=self.cfg.reducer.merge_adjacent)

    def _run_stages(self, seeds: List[Interval], record: Dict[str, List[Interval]] | None = None) -> List[Interval]:
        current = [iv for iv in seeds if not iv.is_empty()]
        if self.cfg.reducer.enabled:
            current = self._reduce(current)
        for name, stage in zip(self.stage_names(), self.stages):
            mapped = []
            for iv in current:
                mapped.extend(stage.map_range(iv))
            current = self._reduce(mapped) if self.cfg.reducer.enabled else mapped
            logger.debug("%s: %d intervals, %d values", name, len(current), total_length(current))
            if record is not None:
                record[name] = current
        return self._reduce(current)

    def apply(self, seeds: Iterable[Interval]) -> List[Interval]:
        """Push seeds through every stage; returns the reduced final set."""
        seeds = list(seeds)
        workers = self.cfg.parallel.workers
        if workers <= 1 or len(seeds) <= 1:
            return self._run_stages(seeds)

        pool_cls = ProcessPoolExecutor if self.cfg.parallel.executor == "process" else ThreadPoolExecutor
        logger.debug("fanning %d seeds out over %d %s workers", len(seeds), workers, self.cfg.parallel.executor)
        results: List[Interval] = []
        with pool_cls(max_workers=workers) as ex:
            for part in ex.map(partial(_apply_one, self), seeds):
                results.extend(part)
        return self._reduce(results)

    def trace(self, seeds: Iterable[Interval]) -> PipelineResult:
        """Like apply, but keeps the working set after every stage."""
        seeds = list(seeds)
        record: Dict[str, List[Interval]] = {}
        final = self._run_stages(seeds, record)
        return PipelineResult(
            seeds=seeds,
            stage_intervals=record,
            final=final,
            minimum=final[0].start if final else None,
        )

    def minimum_reachable_value(self, seeds: Iterable[Interval]) -> int:
        final = self.apply(seeds)
        if not final:
            raise ValueError("no values reachable from the given seeds")
        return min(iv.start for iv in final)

    def map_point_through_all_stages(self, value: int) -> int:
        for stage in self.stages:
            value = stage.map_point(value)
        return value

    def map_points_through_all_stages(self, values) -> np.ndarray:
        xs = as_int64_array(values)
        for stage in self.stages:
            xs = stage.map_points(xs)
        return xs

    def minimum_point_value(self, values) -> int:
        xs = self.map_points_through_all_stages(values)
        if xs.size == 0:
            raise ValueError("no seed values given")
        return int(xs.min())
