"""Tests for record normalization in datalens/data_formats/normalizer.py."""

from __future__ import annotations

import math

import pytest

from datalens.data_formats import (
    collect_columns,
    dataset_from_records,
    normalize_column_name,
    normalize_record,
    normalize_value,
)
from datalens.errors import DatasetLoadError


class TestNormalizeValue:
    """Tests for normalize_value()."""

    def test_null(self):
        assert normalize_value(None) is None

    def test_nan_becomes_null(self):
        assert normalize_value(math.nan) is None

    def test_numbers_pass_through(self):
        assert normalize_value(3) == 3
        assert normalize_value(2.5) == 2.5

    def test_booleans_become_text(self):
        assert normalize_value(True) == "true"
        assert normalize_value(False) == "false"

    def test_canonical_numeric_text_becomes_number(self):
        assert normalize_value("42") == 42
        assert normalize_value("-1.25") == -1.25

    def test_non_canonical_numeric_text_stays_text(self):
        assert normalize_value("12.0") == "12.0"
        assert normalize_value("0042") == "0042"

    def test_nested_values_become_compact_json(self):
        assert normalize_value([1, 2]) == "[1,2]"
        assert normalize_value({"a": "é"}) == '{"a":"é"}'

    def test_other_objects_go_through_str(self):
        class Thing:
            def __str__(self):
                return "17"

        assert normalize_value(Thing()) == 17


class TestNormalizeRecord:
    def test_keys_are_lower_cased(self):
        assert normalize_record({"ID": "1", "Name": "Ann"}) == {"id": 1, "name": "Ann"}

    def test_none_keys_are_dropped(self):
        assert normalize_record({"a": "1", None: ["stray"]}) == {"a": 1}

    def test_case_collision_keeps_later_value(self):
        assert normalize_record({"Name": "Ann", "NAME": "Bob"}) == {"name": "Bob"}

    def test_column_name(self):
        assert normalize_column_name("Region") == "region"
        assert normalize_column_name(3) == "3"


class TestDatasetFromRecords:
    """Tests for dataset_from_records()."""

    def test_columns_in_first_seen_order(self):
        columns = collect_columns([{"B": 1}, {"a": 2, "b": 3}])
        assert columns == ["b", "a"]

    def test_missing_keys_stay_absent(self):
        """A key missing from a record is null, not empty text."""
        dataset = dataset_from_records([{"a": 1}, {"a": 2, "b": 3}])
        assert dataset.columns == ("a", "b")
        assert "b" not in dataset.rows[0]
        assert dataset.indexed_rows[0].get("b") is None

    def test_explicit_columns(self):
        dataset = dataset_from_records([{"X": 1, "Y": 2}], columns=["Y", "X"])
        assert dataset.columns == ("y", "x")

    def test_metadata(self):
        dataset = dataset_from_records([{"a": 1}], source_name="rows.json", byte_size=12)
        assert dataset.source_name == "rows.json"
        assert dataset.metadata.byte_size == 12

    def test_no_records(self):
        with pytest.raises(DatasetLoadError, match="No data rows found in rows.json"):
            dataset_from_records([], source_name="rows.json")
