"""
Schema-level model and checks for cleaned datasets.

This package holds the typed records that flow between pipeline stages
(rows, datasets, column descriptors, proposed actions) and the validator
that scores a dataset against the descriptors produced by analysis.

Descriptors are treated as read-only truth: they are only replaced
wholesale when a dataset is analyzed again.
"""

from dataclysm.schema.models import (
    ID_FIELD,
    FLAGS_FIELD,
    COLUMN_TYPES,
    ACTION_TYPES,
    Row,
    Dataset,
    ColumnStats,
    CleaningAction,
    DatasetAnalysis,
    ValidationError,
    ValidationResult,
    row_from_dict,
    conform_rows,
)
from dataclysm.schema.validation import validate_dataset, find_schema_mismatches

__all__ = [
    "ID_FIELD",
    "FLAGS_FIELD",
    "COLUMN_TYPES",
    "ACTION_TYPES",
    "Row",
    "Dataset",
    "ColumnStats",
    "CleaningAction",
    "DatasetAnalysis",
    "ValidationError",
    "ValidationResult",
    "row_from_dict",
    "conform_rows",
    "validate_dataset",
    "find_schema_mismatches",
]
