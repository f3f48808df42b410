"""
Dataset loading utilities for the TUI.

This module turns a path into a Dataset using the format loaders, keeps a
per-path cache so that reopening a file (e.g. as the comparison side) does
not parse it twice, and normalizes every failure into DatasetLoadError so
screens only have one exception to catch.

Supported Formats:
    - CSV / TSV (.csv, .txt, .tsv, .tab)
    - JSONL (.jsonl, .ndjson): One JSON object per line
    - JSON (.json): Array of JSON objects or single object
    - Parquet (.parquet, .pq): Apache Parquet columnar format
"""

from __future__ import annotations

import csv
import json
import logging
import os
from typing import Callable

import pyarrow as pa

from datalens.config import LARGE_FILE_THRESHOLD
from datalens.data_formats import get_loader
from datalens.engine.dataset import Dataset
from datalens.errors import DatasetLoadError

logger = logging.getLogger(__name__)

# Global cache of loaded datasets keyed by absolute path
_dataset_cache: dict[str, Dataset] = {}


def _cache_key(filename: str) -> str:
    return os.path.abspath(filename)


def get_cached_dataset(filename: str) -> Dataset | None:
    """Get a dataset from cache if available."""
    return _dataset_cache.get(_cache_key(filename))


def set_cached_dataset(filename: str, dataset: Dataset) -> None:
    """Store a dataset in cache."""
    _dataset_cache[_cache_key(filename)] = dataset


def clear_cache(filename: str | None = None) -> None:
    """Clear the dataset cache.

    Args:
        filename: If provided, only clear cache for this file.
                  If None, clear all cached datasets.
    """
    if filename:
        _dataset_cache.pop(_cache_key(filename), None)
    else:
        _dataset_cache.clear()


def get_record_count(filename: str) -> int | None:
    """Get the number of records in a file, or None if it cannot be counted."""
    try:
        return get_loader(filename).get_record_count(filename)
    except (DatasetLoadError, OSError, ValueError, csv.Error, pa.ArrowException) as e:
        logger.warning("Could not count records in %s: %s", filename, e)
        return None


def load_dataset(
    filename: str,
    use_cache: bool = True,
    progress_callback: Callable[[int, int | None], None] | None = None,
) -> Dataset:
    """Load a file as a Dataset.

    Args:
        filename: Path to the data file (format detected from extension or
            content).
        use_cache: Return the cached dataset for this path if there is one,
            and cache the result otherwise.
        progress_callback: Optional callback(loaded_count, total_count).

    Returns:
        The loaded Dataset.

    Raises:
        DatasetLoadError: If the file is missing, unreadable, malformed, of
            an unsupported format, or holds no rows.

    Examples:
        >>> dataset = load_dataset("sales.csv")
        >>> dataset.columns
        ('region', 'revenue')
    """
    if use_cache:
        cached = get_cached_dataset(filename)
        if cached is not None:
            logger.debug("Using cached dataset for %s", filename)
            return cached

    if not os.path.exists(filename):
        raise DatasetLoadError(f"File not found: {filename}", source=filename)

    try:
        loader = get_loader(filename)
        dataset = loader.load_dataset(filename, progress_callback=progress_callback)
    except DatasetLoadError:
        raise
    except json.JSONDecodeError as e:
        raise DatasetLoadError(
            f"Invalid JSON in {os.path.basename(filename)}: {e}", source=filename
        ) from e
    except (OSError, ValueError, csv.Error, pa.ArrowException) as e:
        raise DatasetLoadError(
            f"Error loading {os.path.basename(filename)}: {e}", source=filename
        ) from e

    logger.info(
        "Loaded %s: %d rows, %d columns (%s)",
        filename,
        len(dataset),
        len(dataset.columns),
        loader.format_name,
    )

    if use_cache:
        set_cached_dataset(filename, dataset)
    return dataset


def should_load_async(filename: str, threshold: int | None = None) -> bool:
    """Check if a file is large enough to load in a background worker.

    Args:
        filename: Path to the file.
        threshold: Size threshold in bytes. Uses LARGE_FILE_THRESHOLD if None.

    Returns:
        True if the file is larger than the threshold.
    """
    if threshold is None:
        threshold = LARGE_FILE_THRESHOLD
    try:
        return os.path.getsize(filename) > threshold
    except OSError:
        return False
