"""Pytest configuration and shared fixtures for datalens tests."""

from __future__ import annotations

from typing import Any

import pytest

from datalens.engine import Dataset, ViewEngine
from datalens.tui import data_loader


@pytest.fixture(autouse=True)
def _clear_dataset_cache():
    """Keep the module-level dataset cache from leaking between tests."""
    data_loader.clear_cache()
    yield
    data_loader.clear_cache()


@pytest.fixture
def sales_rows() -> list[dict[str, Any]]:
    """Return a small mixed-type table."""
    return [
        {"id": 1, "region": "North", "revenue": 120, "note": "ok"},
        {"id": 2, "region": "South", "revenue": 80.5, "note": ""},
        {"id": 3, "region": "East", "revenue": None, "note": "missing"},
        {"id": 4, "region": "north", "revenue": 300, "note": "Seven"},
        {"id": 5, "region": "West", "revenue": 7, "note": "n/a"},
    ]


@pytest.fixture
def sales_dataset(sales_rows) -> Dataset:
    """Return the sales rows as a Dataset."""
    return Dataset.create(
        sales_rows, ["id", "region", "revenue", "note"], source_name="sales.csv"
    )


@pytest.fixture
def grid_dataset() -> Dataset:
    """Return a 2x3 numeric grid: a=[1, 2, 3], b=[4, 5, 6]."""
    return Dataset.create(
        [{"a": 1, "b": 4}, {"a": 2, "b": 5}, {"a": 3, "b": 6}], ["a", "b"]
    )


@pytest.fixture
def editable_view(sales_dataset) -> ViewEngine:
    """Return an editable, unpaginated view over the sales dataset."""
    return ViewEngine(sales_dataset, editable=True)


@pytest.fixture
def left_dataset() -> Dataset:
    return Dataset.create(
        [
            {"id": 1, "x": "a", "y": 10},
            {"id": 2, "x": "b", "y": 20},
            {"id": 3, "x": "c", "y": 30},
        ],
        ["id", "x", "y"],
        source_name="a.csv",
    )


@pytest.fixture
def right_dataset() -> Dataset:
    return Dataset.create(
        [
            {"id": 2, "x": "b", "y": 25, "z": "new"},
            {"id": 3, "x": "C", "y": 30, "z": "kept"},
            {"id": 4, "x": "d", "y": 40, "z": "extra"},
        ],
        ["id", "x", "y", "z"],
        source_name="b.csv",
    )

