from __future__ import annotations

import math
from typing import List, Sequence

from dataclysm.io.cells import is_missing_cell, is_number_cell, stringify_cell
from dataclysm.schema.models import ID_FIELD, ColumnStats, Row, ValidationError, ValidationResult

MAX_EXAMPLES = 3


def _cell_conforms(value, expected_type: str) -> bool:
    # absence is never a type error
    if is_missing_cell(value):
        return True
    if expected_type == "number":
        return is_number_cell(value)
    if expected_type == "boolean":
        return isinstance(value, bool)
    return True


def validate_dataset(rows: Sequence[Row], columns: Sequence[ColumnStats]) -> ValidationResult:
    """
    Check present cell values against the inferred column types.

    Columns typed `mixed` and the `id` column are not checked. Every other
    column is scanned across all rows; null and empty cells count as checked
    and valid. `number` columns require numeric cells, `boolean` columns
    require booleans, other types accept anything.

    The score is a cell-level percentage while `is_valid` is a column-level
    predicate, so a single bad cell in a large table gives `is_valid=False`
    with a score of 99 or 100.

    Args:
        rows (Sequence[Row]): Rows to check.
        columns (Sequence[ColumnStats]): Column descriptors from analysis.

    Returns:
        ValidationResult: Fresh result; inputs are not modified.
    """
    errors: List[ValidationError] = []
    valid_cells = 0
    total_cells = 0

    for col in columns:
        if col.type == "mixed" or col.name == ID_FIELD:
            continue

        issues = 0
        examples: List[str] = []

        for row in rows:
            value = row.get(col.name)
            total_cells += 1

            if _cell_conforms(value, col.type):
                valid_cells += 1
                continue

            issues += 1
            if len(examples) < MAX_EXAMPLES:
                examples.append(stringify_cell(value))

        if issues > 0:
            errors.append(
                ValidationError(
                    column=col.name,
                    expected_type=col.type,
                    issue_count=issues,
                    examples=examples,
                )
            )

    if total_cells == 0:
        score = 100
    else:
        # half-up rounding
        score = int(math.floor(valid_cells * 100 / total_cells + 0.5))

    return ValidationResult(
        is_valid=not errors,
        score=score,
        errors=errors,
        total_rows_checked=len(rows),
    )


def find_schema_mismatches(headers: Sequence[str], columns: Sequence[ColumnStats]) -> List[str]:
    """
    Describe disagreements between a dataset header and its descriptors.

    Args:
        headers (Sequence[str]): Column names of the dataset.
        columns (Sequence[ColumnStats]): Descriptors produced by analysis.

    Returns:
        List[str]: Human-readable problems, empty when both sides agree.
    """
    header_set = set(headers)
    described = {c.name for c in columns}

    problems = [
        f"column '{c.name}' is described but missing from the dataset"
        for c in columns
        if c.name not in header_set and c.name != ID_FIELD
    ]
    problems += [
        f"column '{h}' has no descriptor"
        for h in headers
        if h not in described
    ]
    return problems
