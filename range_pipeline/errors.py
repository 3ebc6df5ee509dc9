from __future__ import annotations


class RangePipelineError(Exception):
    """Base class for errors raised by range_pipeline."""


class ConfigurationError(RangePipelineError, ValueError):
    """Invalid rule tables or config values, raised at construction time."""


class AlmanacParseError(RangePipelineError, ValueError):
    def __init__(self, message: str, line_no: int | None = None):
        self.line_no = line_no
        if line_no is not None:
            message = "line %d: %s" % (line_no, message)
        super().__init__(message)


class IntervalOverflowError(RangePipelineError, OverflowError):
    """A value left the signed 64-bit range."""
