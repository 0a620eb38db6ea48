"""Metadata handling for silver datasets.

Every time a dataset is rebuilt the CSV store records how the run went in a
JSON file under ``_meta/``. A failed stage leaves its dataset cleared; the
metadata makes that visible to whoever reads the silver directory next.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path


@dataclass
class StageMetadata:
    """Metadata for one dataset rebuild.

    Attributes:
        dataset: Silver dataset name, e.g. "dim_customers".
        rows: Number of rows written (0 when the stage failed).
        last_run: ISO timestamp of when the stage was run.
        status: "ok" or "failed".
        duration_seconds: Stage duration.
        error: Error message when status is "failed".
    """

    dataset: str
    rows: int
    last_run: str  # ISO timestamp
    status: str  # "ok" | "failed"
    duration_seconds: float = 0.0
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert metadata to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> StageMetadata:
        """Create metadata from dictionary."""
        return cls(**data)


def metadata_path(silver_dir: Path, dataset: str) -> Path:
    """Compute the metadata file path for a dataset."""
    return silver_dir / "_meta" / f"{dataset}.json"


def write_metadata(silver_dir: Path, metadata: StageMetadata) -> None:
    """Write metadata JSON to the _meta/ subdirectory.

    Examples:
        >>> meta = StageMetadata(
        ...     dataset="dim_products",
        ...     rows=42,
        ...     last_run="2025-01-15T12:00:00",
        ...     status="ok",
        ... )
        >>> write_metadata(Path("data/b_silver"), meta)
    """
    meta_path = metadata_path(silver_dir, metadata.dataset)
    meta_path.parent.mkdir(parents=True, exist_ok=True)

    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(metadata.to_dict(), f, indent=2, ensure_ascii=False)


def read_metadata(silver_dir: Path, dataset: str) -> StageMetadata | None:
    """Read metadata JSON if it exists.

    Returns:
        StageMetadata if the file exists and parses, None otherwise.
    """
    meta_path = metadata_path(silver_dir, dataset)

    if not meta_path.exists():
        return None

    try:
        with open(meta_path, encoding="utf-8") as f:
            data = json.load(f)
        return StageMetadata.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError):
        # If metadata file is corrupted, treat as missing
        return None
