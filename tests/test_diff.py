"""Tests for snapshot diffing."""

from dataclysm.pipeline.diff import diff_rows
from dataclysm.schema.models import Row


class TestDiffRows:

    def test_identical_snapshots(self):
        rows = [Row(id="row-1", cells={"a": 1, "b": "x"})]
        assert diff_rows(rows, rows) == []

    def test_changed_cells_matched_by_id(self):
        before = [Row(id="row-1", cells={"a": 1}), Row(id="row-2", cells={"a": 2})]
        after = [Row(id="row-2", cells={"a": 20}), Row(id="row-1", cells={"a": 1})]
        changes = diff_rows(before, after)
        assert [(c.row_id, c.column, c.before, c.after) for c in changes] == [("row-2", "a", 2, 20)]

    def test_type_change_is_a_change(self):
        before = [Row(id="row-1", cells={"a": 1})]
        after = [Row(id="row-1", cells={"a": True})]
        assert len(diff_rows(before, after)) == 1

    def test_unmatched_rows_are_ignored(self):
        before = [Row(id="row-1", cells={"a": 1})]
        after = [Row(id="row-9", cells={"a": 5})]
        assert diff_rows(before, after) == []

    def test_flagged_cell_is_reported(self):
        before = [Row(id="row-1", cells={"a": None})]
        after = [Row(id="row-1", cells={"a": None}, flags={"a": "could not parse"})]
        change = diff_rows(before, after)[0]
        assert change.flag == "could not parse"
        assert change.to_dict() == {
            "rowId": "row-1", "column": "a", "before": None, "after": None, "flag": "could not parse",
        }

    def test_new_column(self):
        before = [Row(id="row-1", cells={"a": 1})]
        after = [Row(id="row-1", cells={"a": 1, "b": 2})]
        changes = diff_rows(before, after)
        assert [(c.column, c.before, c.after) for c in changes] == [("b", None, 2)]
