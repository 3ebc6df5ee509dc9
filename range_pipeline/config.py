from dataclasses import dataclass, field, fields
from typing import Literal
import logging
import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

EXECUTORS = ("process", "thread")

@dataclass
class ReducerParams:
    enabled: bool = True          # merge the working set between stages
    merge_adjacent: bool = True   # [a, b) and [b, c) collapse into [a, c)

@dataclass
class ParallelParams:
    workers: int = 1              # >1 fans seed intervals out over an executor
    executor: Literal["process", "thread"] = "process"

@dataclass
class PipelineConfig:
    validate_tables: bool = True  # reject overlapping rules at construction
    reducer: ReducerParams = field(default_factory=ReducerParams)
    parallel: ParallelParams = field(default_factory=ParallelParams)

    def validate(self) -> "PipelineConfig":
        workers = self.parallel.workers
        if isinstance(workers, bool) or not isinstance(workers, int):
            raise ConfigurationError("parallel.workers must be an integer, got %r" % (workers,))
        if workers < 1:
            raise ConfigurationError("parallel.workers must be >= 1, got %r" % self.parallel.workers)
        if self.parallel.executor not in EXECUTORS:
            raise ConfigurationError(
                "parallel.executor must be one of %s, got %r" % (", ".join(EXECUTORS), self.parallel.executor)
            )
        return self

def _merge_dataclass(dc_cls, values, section: str):
    if values is not None and not isinstance(values, dict):
        raise ConfigurationError("config section %s must be a mapping" % section.rstrip("."))
    obj = dc_cls()
    known = {f.name for f in fields(dc_cls)}
    for k, v in (values or {}).items():
        if k in known:
            setattr(obj, k, v)
        else:
            logger.warning("ignoring unknown config key %s%s", section, k)
    return obj

def config_from_dict(data: dict) -> PipelineConfig:
    if not isinstance(data or {}, dict):
        raise ConfigurationError("config must be a mapping")
    data = dict(data or {})
    reducer_cfg = _merge_dataclass(ReducerParams, data.pop("reducer", None), "reducer.")
    parallel_cfg = _merge_dataclass(ParallelParams, data.pop("parallel", None), "parallel.")
    cfg = PipelineConfig(
        validate_tables=bool(data.pop("validate_tables", True)),
        reducer=reducer_cfg,
        parallel=parallel_cfg,
    )
    for k in data:
        logger.warning("ignoring unknown config key %s", k)
    return cfg.validate()

def load_config_yaml(path: str) -> PipelineConfig:
    """Load config from a YAML file into PipelineConfig dataclasses."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("%s: top level of the config must be a mapping" % path)
    return config_from_dict(data)
