"""
CSV input/output for the cleaning pipeline.

This package owns the text boundary of the system:
- Splitting CSV lines with a quote-aware tokenizer
- Classifying raw fields into null, number, boolean or string cells
- Writing rows back to always-quoted CSV text

All functions here are pure: they allocate new rows and never touch
their inputs.
"""

from dataclysm.io.cells import (
    CellValue,
    infer_cell,
    parse_number,
    is_number_cell,
    is_missing_cell,
    cell_kind,
    stringify_cell,
)
from dataclysm.io.csv_codec import split_line, parse_csv, parse_dataset, export_csv

__all__ = [
    "CellValue",
    "infer_cell",
    "parse_number",
    "is_number_cell",
    "is_missing_cell",
    "cell_kind",
    "stringify_cell",
    "split_line",
    "parse_csv",
    "parse_dataset",
    "export_csv",
]
