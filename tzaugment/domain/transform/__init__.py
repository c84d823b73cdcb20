from .fields import (
    format_local_timestamp,
    parse_geo_point,
    parse_timestamp,
    parse_utc_instant,
    split_line,
    to_local_time,
)
from .result import StepResult
from .row_transformer import RowObserver, RowTransformer

__all__ = [
    "RowObserver",
    "RowTransformer",
    "StepResult",
    "format_local_timestamp",
    "parse_geo_point",
    "parse_timestamp",
    "parse_utc_instant",
    "split_line",
    "to_local_time",
]
