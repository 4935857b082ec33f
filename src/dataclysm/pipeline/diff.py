from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from dataclysm.io.cells import CellValue
from dataclysm.schema.models import Row


@dataclass
class CellChange:
    row_id: str
    column: str
    before: CellValue
    after: CellValue
    flag: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rowId": self.row_id,
            "column": self.column,
            "before": self.before,
            "after": self.after,
            "flag": self.flag,
        }


def _same(a: CellValue, b: CellValue) -> bool:
    # True == 1 in Python, the grid should still show that as a change
    return type(a) is type(b) and a == b


def diff_rows(before: Sequence[Row], after: Sequence[Row]) -> List[CellChange]:
    """
    List the cells that differ between two snapshots of a dataset.

    Rows are matched by id. Rows present on only one side are not reported.
    Columns are taken from the `after` rows; a column missing on the
    `before` side compares against None. Flagged cells are always reported,
    even when the value itself did not change.

    Args:
        before (Sequence[Row]): Earlier snapshot (usually the raw upload).
        after (Sequence[Row]): Later snapshot.

    Returns:
        List[CellChange]: Changes in `after` row order, then column order.
    """
    previous = {r.id: r for r in before}
    changes: List[CellChange] = []

    for row in after:
        old = previous.get(row.id)
        if old is None:
            continue
        for col, val in row.cells.items():
            old_val = old.cells.get(col)
            flag = row.flags.get(col)
            if flag is None and _same(old_val, val):
                continue
            changes.append(CellChange(row.id, col, old_val, val, flag))

    return changes
