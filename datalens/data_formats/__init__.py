"""
Data formats module for multi-format dataset loading.

This module provides a unified interface for loading tabular datasets from
delimited text, JSON, JSONL and Parquet files.

Usage:
    from datalens.data_formats import get_loader

    loader = get_loader("sales.csv")
    dataset = loader.load_dataset("sales.csv")
    print(dataset.columns)

    # Or parse text directly (e.g. pasted from the clipboard)
    from datalens.data_formats import parse_csv_text
    dataset = parse_csv_text("id,name\\n1,Ann\\n")
"""

from datalens.data_formats.base import DataLoader
from datalens.data_formats.csv_loader import CSVLoader, TSVLoader, parse_csv_text
from datalens.data_formats.format_detector import (
    EXTENSION_MAP,
    SUPPORTED_FORMATS,
    detect_format,
    get_loader,
    get_loader_for_format,
)
from datalens.data_formats.json_loader import JSONLLoader, JSONLoader, ensure_record
from datalens.data_formats.normalizer import (
    collect_columns,
    dataset_from_records,
    normalize_column_name,
    normalize_record,
    normalize_value,
)
from datalens.data_formats.parquet_loader import ParquetLoader

__all__ = [
    # Base class
    "DataLoader",
    # Format detection
    "detect_format",
    "get_loader",
    "get_loader_for_format",
    "EXTENSION_MAP",
    "SUPPORTED_FORMATS",
    # Normalization
    "collect_columns",
    "dataset_from_records",
    "normalize_column_name",
    "normalize_record",
    "normalize_value",
    "parse_csv_text",
    "ensure_record",
    # Loaders
    "CSVLoader",
    "TSVLoader",
    "JSONLLoader",
    "JSONLoader",
    "ParquetLoader",
]
