"""Tests for local column profiling and chart aggregation."""

import pandas as pd
import pytest

from dataclysm.io.csv_codec import parse_dataset
from dataclysm.profiling import aggregate_chart, build_profile_text, dataset_to_frame, profile_columns
from dataclysm.schema.models import Dataset, Row


class TestProfileColumns:

    def test_counts(self, sample_csv):
        profiles = profile_columns(parse_dataset(sample_csv))

        age = profiles["Age"]
        assert age.count == 4
        assert age.missing == 1
        assert age.unique == 3
        assert age.kinds == {"number": 2, "string": 1}
        assert age.dominant_kind == "mixed"

        city = profiles["City"]
        assert city.missing == 1
        assert city.samples == ["Paris", "Lyon, FR", "Berlin"]
        assert city.dominant_kind == "string"

    def test_true_and_one_are_distinct(self):
        ds = Dataset(headers=["v"], rows=[Row(id="1", cells={"v": True}), Row(id="2", cells={"v": 1})])
        assert profile_columns(ds)["v"].unique == 2

    def test_empty_dataset(self):
        ds = Dataset(headers=["a"], rows=[])
        prof = profile_columns(ds)["a"]
        assert prof.count == 0
        assert prof.missing == 0
        assert prof.dominant_kind == "empty"

    def test_frame_keeps_python_types(self, sample_csv):
        df = dataset_to_frame(parse_dataset(sample_csv))
        assert list(df.index) == ["row-1", "row-2", "row-3", "row-4"]
        assert df.loc["row-2", "Active"] is False
        assert pd.isna(df.loc["row-2", "City"])

    def test_profile_text(self, sample_csv):
        text = build_profile_text(profile_columns(parse_dataset(sample_csv)))
        lines = text.splitlines()
        assert len(lines) == 4
        assert lines[1].startswith("- Age: observed=mixed missing=1/4")


class TestAggregateChart:

    @pytest.fixture
    def rows(self):
        return [
            Row(id="1", cells={"city": "Paris", "sales": 10}),
            Row(id="2", cells={"city": "Lyon", "sales": 4}),
            Row(id="3", cells={"city": "Paris", "sales": 6}),
            Row(id="4", cells={"city": None, "sales": 1}),
            Row(id="5", cells={"city": "Lyon", "sales": "n/a"}),
            Row(id="6", cells={"city": "Lyon", "sales": True}),
        ]

    def test_sum_keeps_first_seen_order(self, rows):
        assert aggregate_chart(rows, "city", "sales", "sum") == [
            {"name": "Paris", "value": 16.0},
            {"name": "Lyon", "value": 4.0},
            {"name": "Unknown", "value": 1.0},
        ]

    def test_avg(self, rows):
        points = {p["name"]: p["value"] for p in aggregate_chart(rows, "city", "sales", "avg")}
        assert points == {"Paris": 8.0, "Lyon": 4.0, "Unknown": 1.0}

    def test_count_only_numeric_cells(self, rows):
        points = {p["name"]: p["value"] for p in aggregate_chart(rows, "city", "sales", "count")}
        assert points == {"Paris": 2, "Lyon": 1, "Unknown": 1}

    def test_first(self, rows):
        points = {p["name"]: p["value"] for p in aggregate_chart(rows, "city", "sales", "first")}
        assert points["Paris"] == 10.0

    def test_group_without_numbers(self):
        rows = [Row(id="1", cells={"k": "a", "v": "x"})]
        assert aggregate_chart(rows, "k", "v", "sum") == [{"name": "a", "value": 0.0}]
        assert aggregate_chart(rows, "k", "v", "avg") == [{"name": "a", "value": 0.0}]

    def test_limit(self):
        rows = [Row(id=str(i), cells={"k": i, "v": i}) for i in range(80)]
        assert len(aggregate_chart(rows, "k", "v")) == 50

    def test_empty_inputs(self, rows):
        assert aggregate_chart([], "city", "sales") == []
        assert aggregate_chart(rows, "", "sales") == []

    def test_unknown_aggregation(self, rows):
        with pytest.raises(ValueError):
            aggregate_chart(rows, "city", "sales", "median")
