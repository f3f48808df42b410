"""Tests for CSV/XLSX export and export file naming."""

from __future__ import annotations

import csv
import zipfile
from datetime import datetime

import pytest

from datalens.engine import ComparisonView, ViewEngine
from datalens.engine.view import export_view
from datalens.errors import ExportError
from datalens.export import (
    comparison_export_name,
    edited_file_name,
    export_rows,
    rows_to_csv,
    write_csv,
    write_xlsx,
)

ROWS = [
    {"id": 1, "name": "Ann", "score": 12.0},
    {"id": 2, "name": "Bob, Jr.", "score": None},
    {"id": 3, "score": 0.5},
]
COLUMNS = ["id", "name", "score"]


class TestRowsToCsv:
    """Tests for rows_to_csv()."""

    def test_header_and_rows(self):
        text = rows_to_csv(ROWS, COLUMNS)
        assert text.splitlines() == [
            "id,name,score",
            "1,Ann,12",
            '2,"Bob, Jr.",',
            "3,,0.5",
        ]

    def test_column_order_is_respected(self):
        text = rows_to_csv([{"a": 1, "b": 2}], ["b", "a"])
        assert text.splitlines() == ["b,a", "2,1"]

    def test_empty_rows_rejected(self):
        with pytest.raises(ExportError, match="no rows to export"):
            rows_to_csv([], COLUMNS)


class TestWriteCsv:
    def test_write_and_read_back(self, tmp_path):
        path = write_csv(ROWS, COLUMNS, tmp_path / "out" / "rows.csv")

        with open(path, newline="", encoding="utf-8") as f:
            records = list(csv.DictReader(f))
        assert records[1] == {"id": "2", "name": "Bob, Jr.", "score": ""}

    def test_unwritable_path(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(ExportError, match="Could not write"):
            write_csv(ROWS, COLUMNS, blocker / "rows.csv")

    def test_exported_view_follows_visible_order(self, tmp_path, sales_dataset):
        view = ViewEngine(sales_dataset)
        view.sort_by("revenue")
        path = write_csv(export_view(view.visible_rows), view.columns, tmp_path / "v.csv")

        with open(path, newline="", encoding="utf-8") as f:
            ids = [record["id"] for record in csv.DictReader(f)]
        assert ids == ["5", "2", "1", "4", "3"]


class TestWriteXlsx:
    """Tests for write_xlsx()."""

    def test_workbook_is_written(self, tmp_path):
        path = write_xlsx(ROWS, COLUMNS, tmp_path / "rows.xlsx")

        assert zipfile.is_zipfile(path)
        with zipfile.ZipFile(path) as archive:
            names = archive.namelist()
            assert "xl/worksheets/sheet1.xml" in names
            strings = archive.read("xl/sharedStrings.xml").decode("utf-8")
            workbook = archive.read("xl/workbook.xml").decode("utf-8")
        assert "Bob, Jr." in strings
        assert 'name="Data"' in workbook

    def test_empty_rows_rejected(self, tmp_path):
        with pytest.raises(ExportError):
            write_xlsx([], COLUMNS, tmp_path / "rows.xlsx")
        assert not (tmp_path / "rows.xlsx").exists()


class TestExportRows:
    def test_dispatch_by_extension(self, tmp_path):
        csv_path = export_rows(ROWS, COLUMNS, str(tmp_path), "a.csv")
        xlsx_path = export_rows(ROWS, COLUMNS, str(tmp_path), "a.xlsx")
        assert csv_path.endswith("a.csv")
        assert zipfile.is_zipfile(xlsx_path)

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(ExportError, match="Unsupported export format: json"):
            export_rows(ROWS, COLUMNS, str(tmp_path), "a.json")


class TestFileNames:
    """Tests for export file naming."""

    def test_edited_name(self):
        assert edited_file_name("sales.csv") == "edited_sales.csv"
        assert edited_file_name("data/sales.parquet", "xlsx") == "edited_sales.xlsx"

    def test_edited_prefix_is_not_doubled(self):
        assert edited_file_name("edited_sales.csv") == "edited_sales.csv"

    def test_edited_name_without_source(self):
        assert edited_file_name("") == "edited_data.csv"

    def test_matches_name(self):
        now = datetime(2024, 5, 1, 9, 30)
        assert (
            comparison_export_name(ComparisonView.MATCHES, "a.csv", now=now)
            == "comparison_matches_202405010930.csv"
        )

    def test_unique_name_uses_source_stem(self):
        now = datetime(2024, 12, 31, 23, 59)
        assert (
            comparison_export_name(ComparisonView.UNIQUE1, "sales_2024.csv", "xlsx", now)
            == "unique_to_sales_2024_202412312359.xlsx"
        )
