"""Configuration helpers for data sources and scoring metrics."""

from .sources import (
    BASE_METRIC_FIELDS,
    DATA_DIR_ENV,
    DERIVED_METRIC_FIELDS,
    LOG_LEVEL_ENV,
    METRIC_FIELDS,
    SourceSpec,
    default_data_dir,
    get_source,
    iter_sources,
    log_level,
)

__all__ = [
    "BASE_METRIC_FIELDS",
    "DATA_DIR_ENV",
    "DERIVED_METRIC_FIELDS",
    "LOG_LEVEL_ENV",
    "METRIC_FIELDS",
    "SourceSpec",
    "default_data_dir",
    "get_source",
    "iter_sources",
    "log_level",
]
