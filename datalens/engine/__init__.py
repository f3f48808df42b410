"""
In-memory tabular data engine.

Usage:
    from datalens.engine import Dataset, ViewEngine, ComparisonEngine

    dataset = Dataset.create(rows, columns, source_name="sales.csv")
    view = ViewEngine(dataset, page_size=15, editable=True)
    view.set_search_term("north")
    view.sort_by("revenue")

    engine = ComparisonEngine(dataset, other)
    result = engine.result
    diffs = engine.diff(result.matches[0])
"""

from datalens.engine.comparison import (
    FILE1_PREFIX,
    FILE2_PREFIX,
    ComparisonEngine,
    ComparisonResult,
    ComparisonView,
    FieldDiff,
    common_columns,
    diff_merged_row,
    join_datasets,
    merged_columns,
    qualify,
)
from datalens.engine.dataset import Dataset, DatasetMetadata, IndexedRow
from datalens.engine.stats import SelectionStats, summarize
from datalens.engine.values import (
    CellValue,
    Row,
    coerce_number,
    format_number,
    infer_cell,
    is_number,
    parse_edit_text,
    parse_number,
    stringify,
)
from datalens.engine.view import (
    WHOLE_ROW,
    EditState,
    GridPoint,
    SelectionRange,
    SortDirection,
    SortSpec,
    ViewEngine,
    compare_values,
    filter_rows,
    page_count,
    sort_rows,
)

__all__ = [
    # Data model
    "CellValue",
    "Row",
    "Dataset",
    "DatasetMetadata",
    "IndexedRow",
    # Values
    "coerce_number",
    "format_number",
    "infer_cell",
    "is_number",
    "parse_edit_text",
    "parse_number",
    "stringify",
    # View engine
    "ViewEngine",
    "SortSpec",
    "SortDirection",
    "GridPoint",
    "SelectionRange",
    "EditState",
    "WHOLE_ROW",
    "compare_values",
    "filter_rows",
    "page_count",
    "sort_rows",
    # Statistics
    "SelectionStats",
    "summarize",
    # Comparison
    "ComparisonEngine",
    "ComparisonResult",
    "ComparisonView",
    "FieldDiff",
    "FILE1_PREFIX",
    "FILE2_PREFIX",
    "common_columns",
    "diff_merged_row",
    "join_datasets",
    "merged_columns",
    "qualify",
]
