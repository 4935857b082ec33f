from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from dataclysm.io.cells import CellValue

ID_FIELD = "id"
FLAGS_FIELD = "_flags"

COLUMN_TYPES = ("string", "number", "boolean", "date", "mixed")
ACTION_TYPES = (
    "impute",
    "remove_duplicates",
    "standardize_format",
    "remove_outliers",
    "fix_typos",
    "apply_all",
)
ACTION_IMPACTS = ("high", "medium", "low")
ACTION_STATUSES = ("pending", "processing", "completed")


# ============================================================
# Rows and datasets
# ============================================================

@dataclass
class Row:
    """
    One record of a dataset.

    `cells` holds the user-visible columns in header order. `id` is assigned
    at parse time and survives every transformation. `flags` records, per
    column, why a cell could not be reconciled with its expected type; it is
    metadata and never exported as a column.
    """

    id: str
    cells: Dict[str, CellValue] = field(default_factory=dict)
    flags: Dict[str, str] = field(default_factory=dict)

    def get(self, column: str) -> CellValue:
        return self.cells.get(column)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {ID_FIELD: self.id}
        out.update(self.cells)
        if self.flags:
            out[FLAGS_FIELD] = dict(self.flags)
        return out


def row_from_dict(d: Dict[str, Any], fallback_id: str) -> Row:
    """
    Build a Row from the flat JSON shape exchanged with the LLM.

    Args:
        d (dict): Mapping with an optional `id`, optional `_flags` and one key
            per column.
        fallback_id (str): Identifier used when `d` carries none.

    Returns:
        Row: New row; `d` is left untouched.
    """
    rid = d.get(ID_FIELD)
    cells = {k: _coerce_json_cell(v) for k, v in d.items() if k not in (ID_FIELD, FLAGS_FIELD)}

    flags: Dict[str, str] = {}
    raw_flags = d.get(FLAGS_FIELD)
    if isinstance(raw_flags, dict):
        flags = {str(k): str(v) for k, v in raw_flags.items() if v}

    return Row(id=str(rid) if rid not in (None, "") else fallback_id, cells=cells, flags=flags)


def _coerce_json_cell(v: Any) -> CellValue:
    # nested JSON has no place in a flat table
    if isinstance(v, (dict, list)):
        return str(v)
    return v


def conform_rows(rows: Iterable[Row], headers: Sequence[str]) -> List[Row]:
    """
    Give every row exactly the columns in `headers`, in that order.

    Missing columns become None and unknown columns are dropped. Returns new
    Row objects.
    """
    out: List[Row] = []
    for r in rows:
        cells = {h: r.cells.get(h) for h in headers}
        flags = {k: v for k, v in r.flags.items() if k in cells}
        out.append(Row(id=r.id, cells=cells, flags=flags))
    return out


@dataclass
class Dataset:
    """Ordered rows sharing one header."""

    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def with_rows(self, rows: Sequence[Row]) -> "Dataset":
        headers = list(rows[0].cells.keys()) if rows else list(self.headers)
        return Dataset(headers=headers, rows=conform_rows(rows, headers))

    def to_records(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.rows]


# ============================================================
# Analysis output
# ============================================================

def _as_int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError, OverflowError):
        return default


def _as_str_list(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [str(x) for x in v if x is not None]


@dataclass
class ColumnStats:
    name: str
    type: str = "mixed"
    missing_count: int = 0
    unique_count: int = 0
    issues: List[str] = field(default_factory=list)
    sample_values: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ColumnStats":
        col_type = str(d.get("type") or "").strip().lower()
        if col_type not in COLUMN_TYPES:
            col_type = "mixed"
        return cls(
            name=str(d.get("name", "")),
            type=col_type,
            missing_count=_as_int(d.get("missingCount")),
            unique_count=_as_int(d.get("uniqueCount")),
            issues=_as_str_list(d.get("issues")),
            sample_values=_as_str_list(d.get("sampleValues")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "missingCount": self.missing_count,
            "uniqueCount": self.unique_count,
            "issues": list(self.issues),
            "sampleValues": list(self.sample_values),
        }


@dataclass
class CleaningAction:
    id: str
    type: str
    title: str
    description: str = ""
    impact: str = "medium"
    column_target: Optional[str] = None
    status: str = "pending"

    @classmethod
    def from_dict(cls, d: Dict[str, Any], fallback_id: str) -> Optional["CleaningAction"]:
        """
        Parse one proposed action; returns None for kinds outside the
        supported vocabulary. The status always starts as pending since
        it is tracked by the host, not the model.
        """
        kind = str(d.get("type") or "").strip().lower()
        if kind not in ACTION_TYPES:
            return None
        impact = str(d.get("impact") or "").strip().lower()
        if impact not in ACTION_IMPACTS:
            impact = "medium"
        target = d.get("columnTarget")
        return cls(
            id=str(d.get("id") or fallback_id),
            type=kind,
            title=str(d.get("title") or kind.replace("_", " ").title()),
            description=str(d.get("description") or ""),
            impact=impact,
            column_target=str(target) if target else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
            "columnTarget": self.column_target,
            "status": self.status,
        }


@dataclass
class DatasetAnalysis:
    row_count: int = 0
    column_count: int = 0
    columns: List[ColumnStats] = field(default_factory=list)
    overall_health_score: int = 0
    critical_issues: List[str] = field(default_factory=list)
    recommended_actions: List[CleaningAction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DatasetAnalysis":
        columns = [
            ColumnStats.from_dict(c)
            for c in (d.get("columns") or [])
            if isinstance(c, dict) and c.get("name")
        ]

        actions: List[CleaningAction] = []
        for i, a in enumerate(d.get("recommendedActions") or []):
            if not isinstance(a, dict):
                continue
            action = CleaningAction.from_dict(a, fallback_id=f"action-{i + 1}")
            if action is not None:
                actions.append(action)

        score = min(100, max(0, _as_int(d.get("overallHealthScore"))))
        return cls(
            row_count=_as_int(d.get("rowCount")),
            column_count=_as_int(d.get("columnCount"), default=len(columns)),
            columns=columns,
            overall_health_score=score,
            critical_issues=_as_str_list(d.get("criticalIssues")),
            recommended_actions=actions,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rowCount": self.row_count,
            "columnCount": self.column_count,
            "columns": [c.to_dict() for c in self.columns],
            "overallHealthScore": self.overall_health_score,
            "criticalIssues": list(self.critical_issues),
            "recommendedActions": [a.to_dict() for a in self.recommended_actions],
        }


# ============================================================
# Validation output
# ============================================================

@dataclass
class ValidationError:
    column: str
    expected_type: str
    issue_count: int
    examples: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column": self.column,
            "expectedType": self.expected_type,
            "issueCount": self.issue_count,
            "examples": list(self.examples),
        }


@dataclass
class ValidationResult:
    is_valid: bool
    score: int
    errors: List[ValidationError] = field(default_factory=list)
    total_rows_checked: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "score": self.score,
            "errors": [e.to_dict() for e in self.errors],
            "totalRowsChecked": self.total_rows_checked,
        }
