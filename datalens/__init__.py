"""
Datalens: interactive exploration and comparison of tabular datasets.

Load one delimited-text (or JSON/Parquet) dataset to search, sort, select,
edit and summarize it, or load two to join them on a shared key and inspect
matched, left-only and right-only rows side by side.

Usage:
    datalens sales.csv
    datalens sales_2023.csv --compare sales_2024.csv

Components:
    - datalens.engine: Dataset model, ViewEngine, ComparisonEngine
    - datalens.data_formats: format detection and loaders
    - datalens.export: CSV / XLSX serialization
    - datalens.tui: Textual application
"""

__version__ = "0.3.0"
