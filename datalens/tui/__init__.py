"""
TUI for datalens.

A Textual-based terminal UI for searching, sorting, selecting, editing and
exporting a tabular dataset, and for comparing two datasets joined on a
shared column.

Usage:
    python -m datalens.tui.app sales.csv --compare sales_2024.csv

Components:
    - DatalensApp: Main application class
    - DatasetScreen: Grid view of one dataset
    - ComparisonScreen: Matches and unique rows of two datasets
    - RowDiffModal: Field-by-field analysis of a matched row
"""
