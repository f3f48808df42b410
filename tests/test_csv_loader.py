"""Tests for CSVLoader, TSVLoader and parse_csv_text()."""

from __future__ import annotations

import pytest

from datalens.data_formats import CSVLoader, TSVLoader, parse_csv_text
from datalens.errors import DatasetLoadError


class TestCSVLoaderProperties:
    def test_format_name(self):
        assert CSVLoader().format_name == "csv"
        assert TSVLoader().format_name == "tsv"

    def test_supported_extensions(self):
        assert ".csv" in CSVLoader().supported_extensions
        assert ".tsv" in TSVLoader().supported_extensions


class TestCSVLoaderLoad:
    """Tests for CSVLoader.load() and load_dataset()."""

    def test_load_records(self, tmp_path):
        filepath = tmp_path / "sales.csv"
        filepath.write_text("ID,Region\n1,North\n2,South\n")

        loaded = list(CSVLoader().load(str(filepath)))
        assert loaded == [
            {"ID": "1", "Region": "North"},
            {"ID": "2", "Region": "South"},
        ]

    def test_short_rows_are_padded_and_long_rows_trimmed(self, tmp_path):
        filepath = tmp_path / "ragged.csv"
        filepath.write_text("a,b,c\n1\n1,2,3,4\n")

        loaded = list(CSVLoader().load(str(filepath)))
        assert loaded[0] == {"a": "1", "b": "", "c": ""}
        assert loaded[1] == {"a": "1", "b": "2", "c": "3"}

    def test_byte_order_mark_is_dropped(self, tmp_path):
        filepath = tmp_path / "bom.csv"
        filepath.write_bytes("\ufeffid,name\n1,Ann\n".encode("utf-8"))

        dataset = CSVLoader().load_dataset(str(filepath))
        assert dataset.columns == ("id", "name")

    def test_load_dataset_normalizes(self, tmp_path):
        """Headers are lower-cased and canonical numbers inferred."""
        filepath = tmp_path / "sales.csv"
        filepath.write_text('ID,Price,Code\n1,12.0,007\n2,3.5,"a,b"\n')

        dataset = CSVLoader().load_dataset(str(filepath))
        assert dataset.columns == ("id", "price", "code")
        assert dataset.rows[0] == {"id": 1, "price": "12.0", "code": "007"}
        assert dataset.rows[1] == {"id": 2, "price": 3.5, "code": "a,b"}
        assert dataset.source_name == "sales.csv"
        assert dataset.metadata.byte_size == filepath.stat().st_size

    def test_header_only_file_has_no_rows(self, tmp_path):
        filepath = tmp_path / "header.csv"
        filepath.write_text("a,b\n")
        with pytest.raises(DatasetLoadError, match="No data rows found in header.csv"):
            CSVLoader().load_dataset(str(filepath))

    def test_load_tsv(self, tmp_path):
        filepath = tmp_path / "data.tsv"
        filepath.write_text("name\tscore\nAnn\t10\n")

        dataset = TSVLoader().load_dataset(str(filepath))
        assert dataset.rows[0] == {"name": "Ann", "score": 10}

    def test_record_count(self, tmp_path):
        filepath = tmp_path / "count.csv"
        filepath.write_text("a\n1\n2\n3\n")
        assert CSVLoader().get_record_count(str(filepath)) == 3

    def test_progress_callback_reports_final_count(self, tmp_path):
        filepath = tmp_path / "progress.csv"
        filepath.write_text("a\n1\n2\n")
        calls = []

        CSVLoader().load_all(str(filepath), progress_callback=lambda n, t: calls.append((n, t)))
        assert calls[-1] == (2, 2)

    def test_max_records(self, tmp_path):
        filepath = tmp_path / "limit.csv"
        filepath.write_text("a\n1\n2\n3\n")
        assert len(CSVLoader().load_all(str(filepath), max_records=2)) == 2


class TestParseCsvText:
    """Tests for parse_csv_text() (pasted CSV content)."""

    def test_parse(self):
        dataset = parse_csv_text("ID,Name\n1,Ann\n2,Bob\n")
        assert dataset.columns == ("id", "name")
        assert dataset.rows[1] == {"id": 2, "name": "Bob"}
        assert dataset.source_name == "pasted_data.csv"

    def test_default_byte_size_is_utf8_length(self):
        text = "a\né\n"
        assert parse_csv_text(text).metadata.byte_size == len(text.encode("utf-8"))

    def test_blank_text_is_rejected(self):
        with pytest.raises(DatasetLoadError, match="Please provide some CSV content"):
            parse_csv_text("  \n ")

    def test_header_only_text_is_rejected(self):
        with pytest.raises(DatasetLoadError, match="No data rows"):
            parse_csv_text("a,b\n")

    def test_custom_delimiter(self):
        dataset = parse_csv_text("a;b\n1;2\n", delimiter=";")
        assert dataset.rows[0] == {"a": 1, "b": 2}

    def test_duplicate_headers_differing_in_case_collapse(self):
        """"Name" and "name" become one column; the later value wins."""
        dataset = parse_csv_text("Name,name\nAnn,Bob\n")
        assert dataset.columns == ("name",)
        assert dataset.rows[0] == {"name": "Bob"}
