from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pandas as pd

from dataclysm.io.cells import is_number_cell, stringify_cell
from dataclysm.schema.models import Row

AGGREGATIONS = ("sum", "avg", "count", "first")
MAX_CHART_POINTS = 50


def aggregate_chart(
    rows: Sequence[Row],
    x_column: str,
    y_column: str,
    aggregation: str = "sum",
    *,
    limit: int = MAX_CHART_POINTS,
) -> List[Dict[str, Any]]:
    """
    Group rows by one column and aggregate the numeric values of another.

    Groups keep first-seen order. Null x values fall into an `Unknown`
    group. Only numeric y cells take part; booleans, strings and nulls are
    ignored, so `count` counts numeric cells, not rows.

    Args:
        rows (Sequence[Row]): Rows to chart.
        x_column (str): Grouping column.
        y_column (str): Value column.
        aggregation (str): One of sum, avg, count, first.
        limit (int): Maximum number of points returned.

    Returns:
        List[Dict[str, Any]]: `{"name": group, "value": number}` points.

    Raises:
        ValueError: If the aggregation is unknown.
    """
    if aggregation not in AGGREGATIONS:
        raise ValueError(f"Unknown aggregation '{aggregation}'. Expected one of {AGGREGATIONS}")
    if not rows or not x_column or not y_column:
        return []

    names = [
        "Unknown" if r.get(x_column) is None else stringify_cell(r.get(x_column))
        for r in rows
    ]
    values = [
        float(r.get(y_column)) if is_number_cell(r.get(y_column)) else None
        for r in rows
    ]
    df = pd.DataFrame({"name": names, "value": pd.Series(values, dtype=float)})
    grouped = df.groupby("name", sort=False)["value"]

    if aggregation == "count":
        agg = grouped.count()
    elif aggregation == "sum":
        agg = grouped.sum(min_count=0)
    elif aggregation == "avg":
        agg = grouped.mean().fillna(0.0)
    else:
        agg = grouped.first().fillna(0.0)

    points = []
    for name, value in agg.head(limit).items():
        points.append({
            "name": name,
            "value": int(value) if aggregation == "count" else float(value),
        })
    return points
