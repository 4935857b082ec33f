"""
Profiling layer for dataset analysis.

This package computes local, deterministic summaries of a parsed
dataset. Column profiles feed the DATA PROFILE section of the analysis
prompt; chart aggregation turns rows into grouped points for the
visualizer endpoint.
"""

from dataclysm.profiling.column_profile import (
    ColumnProfile,
    ColumnProfileConfig,
    dataset_to_frame,
    profile_columns,
    build_profile_text,
)
from dataclysm.profiling.charts import AGGREGATIONS, aggregate_chart

__all__ = [
    "ColumnProfile",
    "ColumnProfileConfig",
    "dataset_to_frame",
    "profile_columns",
    "build_profile_text",
    "AGGREGATIONS",
    "aggregate_chart",
]
