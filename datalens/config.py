"""
Runtime settings for the datalens viewer.

Settings are a frozen dataclass built once from the command line and handed
to every screen. Defaults match the interactive table: 15 rows per page,
editing enabled, exports written to ./exports.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass

# Rows shown per page when pagination is enabled
DEFAULT_PAGE_SIZE = 15

# Files above this size are loaded in a background worker (100 MB)
LARGE_FILE_THRESHOLD = 100 * 1024 * 1024

DEFAULT_OUTPUT_DIR = "exports"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Settings:
    """Viewer configuration.

    Attributes:
        page_size: Rows per page when paginating.
        paginate: Whether the dataset grid is paginated. When False the full
            visible sequence is shown with the statistics footer.
        editable: Whether cells of the primary dataset can be edited.
        output_dir: Directory that export files are written to.
        large_file_threshold: Size in bytes above which files load in the
            background.
        log_level: Name of the logging level for the Textual log sink.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    paginate: bool = True
    editable: bool = True
    output_dir: str = DEFAULT_OUTPUT_DIR
    large_file_threshold: int = LARGE_FILE_THRESHOLD
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"page_size must be at least 1 (got {self.page_size})")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{self.log_level}'. "
                f"Use one of: {', '.join(LOG_LEVELS)}"
            )

    @property
    def effective_page_size(self) -> int | None:
        """Page size handed to view engines, or None when not paginating."""
        return self.page_size if self.paginate else None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Settings":
        """Build settings from parsed command line arguments.

        Missing attributes fall back to the dataclass defaults, so partial
        namespaces (e.g. in tests) are accepted.
        """
        return cls(
            page_size=getattr(args, "page_size", None) or DEFAULT_PAGE_SIZE,
            paginate=not getattr(args, "no_paginate", False),
            editable=not getattr(args, "read_only", False),
            output_dir=getattr(args, "output_dir", None) or DEFAULT_OUTPUT_DIR,
            log_level=(getattr(args, "log_level", None) or "WARNING").upper(),
        )
