from .errors import RangePipelineError, ConfigurationError, AlmanacParseError, IntervalOverflowError
from .config import ReducerParams, ParallelParams, PipelineConfig, config_from_dict, load_config_yaml
from .intervals import Interval, as_int64_array, merge_intervals, total_length, INT64_MIN, INT64_MAX
from .tables import RewriteRule, RewriteTable
from .io_utils import (
    Almanac, StageSpec, parse_almanac, load_almanac, save_intervals_json, load_intervals_json, save_stages_json
)
from .pipeline import RangePipeline, PipelineResult
from .plotting import plot_stage_intervals
