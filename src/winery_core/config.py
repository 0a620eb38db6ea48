"""Unified configuration for the winery silver pipeline.

This module provides a single, simple configuration class describing where
bronze feeds are read from and where silver datasets are written.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class DataPaths:
    """All filesystem paths used by the silver pipeline.

    Attributes:
        data_root: Root directory for all data layers.

    Directory Structure:
        data_root/
        ├── a_raw/                      # Bronze: raw feed exports (CSV)
        │   ├── order_lines/            # POS order lines
        │   ├── bank_transactions/      # bank feed
        │   ├── facebook/
        │   ├── instagram/
        │   └── mailchimp/
        └── b_silver/                   # Silver: one CSV per dataset
            └── _meta/                  # per-dataset run metadata
    """

    data_root: Path

    @classmethod
    def from_root(cls, data_root: str | Path) -> DataPaths:
        """Create DataPaths from a root directory.

        Args:
            data_root: Root directory for pipeline data.

        Returns:
            DataPaths instance.

        Examples:
            >>> paths = DataPaths.from_root("data")
            >>> paths.raw_order_lines
            PosixPath('data/a_raw/order_lines')
        """
        if isinstance(data_root, str):
            data_root = Path(data_root)
        return cls(data_root=data_root)

    @property
    def raw_root(self) -> Path:
        """Bronze layer root."""
        return self.data_root / "a_raw"

    @property
    def raw_order_lines(self) -> Path:
        """Bronze layer: POS order-line exports."""
        return self.raw_root / "order_lines"

    @property
    def raw_bank_transactions(self) -> Path:
        """Bronze layer: bank feed exports."""
        return self.raw_root / "bank_transactions"

    @property
    def raw_facebook(self) -> Path:
        """Bronze layer: Facebook daily metrics."""
        return self.raw_root / "facebook"

    @property
    def raw_instagram(self) -> Path:
        """Bronze layer: Instagram daily metrics."""
        return self.raw_root / "instagram"

    @property
    def raw_mailchimp(self) -> Path:
        """Bronze layer: Mailchimp campaign exports."""
        return self.raw_root / "mailchimp"

    @property
    def silver(self) -> Path:
        """Silver layer: cleaned datasets."""
        return self.data_root / "b_silver"

    def ensure_dirs(self) -> None:
        """Create all directories in the data structure."""
        for path in [
            self.raw_order_lines,
            self.raw_bank_transactions,
            self.raw_facebook,
            self.raw_instagram,
            self.raw_mailchimp,
            self.silver,
        ]:
            path.mkdir(parents=True, exist_ok=True)
