"""
Exception hierarchy for datalens.

Bad cell data never raises: coercion failures, unmatched join keys and
out-of-range row lookups degrade to empty or partial results. The exceptions
below cover structural problems and protocol misuse only.
"""

from __future__ import annotations


class DatalensError(Exception):
    """Base class for all datalens errors."""


class DatasetError(DatalensError):
    """A Dataset was constructed with inconsistent structure."""


class DatasetLoadError(DatalensError):
    """A file could not be turned into a Dataset.

    Attributes:
        source: Path or name of the source that failed to load.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class UnsupportedFormatError(DatasetLoadError, ValueError):
    """The file format could not be determined or is not supported."""


class IncomparableDatasetsError(DatalensError):
    """Two datasets share no column names and cannot be joined."""

    def __init__(self, source1: str = "", source2: str = "") -> None:
        left = source1 or "dataset 1"
        right = source2 or "dataset 2"
        super().__init__(
            f"{left} and {right} do not share any column names, "
            "so they cannot be compared"
        )
        self.source1 = source1
        self.source2 = source2


class InvalidJoinKeyError(DatalensError, ValueError):
    """The requested join key is not a column of both datasets."""


class NotEditableError(DatalensError):
    """An edit was requested on a read-only view."""


class EditInProgressError(DatalensError):
    """A new edit was started while another one is still open."""


class ExportError(DatalensError):
    """Rows could not be exported."""
