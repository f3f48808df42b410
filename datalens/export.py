"""
Export of rows to CSV and XLSX files.

Columns are written in exactly the order given. Numbers are written as
numeric literals (a real number cell in XLSX), null/absent cells as empty
fields, and text as-is.

File naming:
    - an edited dataset:         edited_<source stem>.<ext>
    - comparison matches:        comparison_matches_<YYYYMMDDHHMM>.<ext>
    - rows unique to one side:   unique_to_<source stem>_<YYYYMMDDHHMM>.<ext>
"""

from __future__ import annotations

import csv
import io
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Sequence

import xlsxwriter
from xlsxwriter.exceptions import XlsxWriterException

from datalens.engine.comparison import ComparisonView
from datalens.engine.values import Row, is_number, stringify
from datalens.errors import ExportError

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "xlsx")

EDITED_PREFIX = "edited_"

# Excel limits sheet names to 31 characters
_MAX_SHEET_NAME = 31


def _require_rows(rows: Sequence[Row]) -> None:
    if not rows:
        raise ExportError("There are no rows to export")


def rows_to_csv(rows: Sequence[Row], columns: Sequence[str]) -> str:
    """Serialize rows as CSV text with a header line.

    Args:
        rows: Rows to write.
        columns: Column order; missing keys are written as empty fields.

    Returns:
        The CSV document.

    Raises:
        ExportError: If ``rows`` is empty.

    Examples:
        >>> rows_to_csv([{"id": 1, "name": "Ann"}], ["id", "name"])
        'id,name\\r\\n1,Ann\\r\\n'
    """
    _require_rows(rows)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(columns)
    for row in rows:
        writer.writerow([stringify(row.get(col)) for col in columns])
    return buffer.getvalue()


def write_csv(rows: Sequence[Row], columns: Sequence[str], path: str | Path) -> str:
    """Write rows to a CSV file, creating parent directories as needed.

    Returns:
        The path written to.

    Raises:
        ExportError: If there are no rows or the file cannot be written.
    """
    text = rows_to_csv(rows, columns)
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise ExportError(f"Could not write {path}: {e}") from e

    logger.info("Exported %d rows to %s", len(rows), path)
    return str(path)


def write_xlsx(
    rows: Sequence[Row],
    columns: Sequence[str],
    path: str | Path,
    sheet_name: str = "Data",
) -> str:
    """Write rows to a single-sheet XLSX workbook.

    The header row is bold. Numeric cells are written as numbers so that
    spreadsheet formulas work on them; null cells are left blank.

    Returns:
        The path written to.

    Raises:
        ExportError: If there are no rows or the file cannot be written.
    """
    _require_rows(rows)
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        workbook = xlsxwriter.Workbook(str(path))
        worksheet = workbook.add_worksheet(sheet_name[:_MAX_SHEET_NAME] or "Data")
        header_format = workbook.add_format({"bold": True})

        for col_idx, col_name in enumerate(columns):
            worksheet.write_string(0, col_idx, col_name, header_format)

        for row_idx, row in enumerate(rows, start=1):
            for col_idx, col_name in enumerate(columns):
                value = row.get(col_name)
                if value is None:
                    continue
                if is_number(value):
                    worksheet.write_number(row_idx, col_idx, value)
                else:
                    worksheet.write_string(row_idx, col_idx, stringify(value))

        worksheet.freeze_panes(1, 0)
        workbook.close()
    except (OSError, XlsxWriterException) as e:
        raise ExportError(f"Could not write {path}: {e}") from e

    logger.info("Exported %d rows to %s", len(rows), path)
    return str(path)


def export_rows(
    rows: Sequence[Row],
    columns: Sequence[str],
    output_dir: str,
    filename: str,
) -> str:
    """Write rows into ``output_dir`` using the writer for the file extension.

    Raises:
        ExportError: If there are no rows, the extension is not csv/xlsx, or
            the file cannot be written.
    """
    ext = Path(filename).suffix.lower().lstrip(".")
    path = os.path.join(output_dir, filename)
    if ext == "csv":
        return write_csv(rows, columns, path)
    if ext == "xlsx":
        return write_xlsx(rows, columns, path, sheet_name=Path(filename).stem)
    raise ExportError(
        f"Unsupported export format: {ext or filename}. "
        f"Use one of: {', '.join(EXPORT_FORMATS)}"
    )


def edited_file_name(source_name: str, ext: str = "csv") -> str:
    """Return the export name for an edited dataset.

    An existing ``edited_`` prefix is not doubled, so re-exporting an edited
    export keeps its name.

    Examples:
        >>> edited_file_name("sales.csv")
        'edited_sales.csv'
        >>> edited_file_name("edited_sales.csv", "xlsx")
        'edited_sales.xlsx'
    """
    stem = Path(source_name).stem or "data"
    if not stem.startswith(EDITED_PREFIX):
        stem = f"{EDITED_PREFIX}{stem}"
    return f"{stem}.{ext}"


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d%H%M")


def comparison_export_name(
    view: ComparisonView,
    source_name: str = "",
    ext: str = "csv",
    now: datetime | None = None,
) -> str:
    """Return the export name for one bucket of a comparison.

    Args:
        view: The bucket being exported.
        source_name: Name of the dataset the unique rows come from; ignored
            for matches.
        ext: File extension without the dot.
        now: Timestamp to embed; defaults to the current time.

    Examples:
        >>> from datetime import datetime
        >>> comparison_export_name(ComparisonView.MATCHES, now=datetime(2024, 5, 1, 9, 30))
        'comparison_matches_202405010930.csv'
        >>> comparison_export_name(
        ...     ComparisonView.UNIQUE2, "b.csv", "xlsx", datetime(2024, 5, 1, 9, 30)
        ... )
        'unique_to_b_202405010930.xlsx'
    """
    stamp = _timestamp(now)
    if view is ComparisonView.MATCHES:
        return f"comparison_matches_{stamp}.{ext}"
    stem = Path(source_name).stem or view.value
    return f"unique_to_{stem}_{stamp}.{ext}"

