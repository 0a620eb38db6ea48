"""Silver dataset stores.

A store is the write side of the load coordinator: it can clear a dataset,
write its replacement and record how the rebuild went. Two implementations
are provided: an in-memory dict (tests, notebooks) and a directory of CSVs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd

from winery_core.metadata import StageMetadata, write_metadata

logger = logging.getLogger(__name__)

# Identifier and code columns read back as text so leading zeros survive
TEXT_COLUMNS = frozenset(
    {
        "order_num",
        "cust_num",
        "prod_sku",
        "zip",
        "unique_id",
        "transaction_code",
        "description",
        "send_time",
    }
)


class SilverStore(ABC):
    """Abstract destination for silver datasets."""

    @abstractmethod
    def clear(self, name: str) -> None:
        """Remove all prior content of a dataset (no-op if absent)."""

    @abstractmethod
    def write(self, name: str, df: pd.DataFrame) -> None:
        """Write the full content of a dataset."""

    @abstractmethod
    def read(self, name: str) -> pd.DataFrame:
        """Read a dataset back.

        Raises:
            KeyError: If the dataset has not been written.
        """

    def record(self, metadata: StageMetadata) -> None:
        """Record the outcome of a rebuild. Default: do nothing."""


class MemorySilverStore(SilverStore):
    """Keeps datasets in a dict keyed by dataset name."""

    def __init__(self) -> None:
        self.datasets: dict[str, pd.DataFrame] = {}
        self.metadata: dict[str, StageMetadata] = {}

    def clear(self, name: str) -> None:
        self.datasets.pop(name, None)

    def write(self, name: str, df: pd.DataFrame) -> None:
        self.datasets[name] = df.copy()

    def read(self, name: str) -> pd.DataFrame:
        return self.datasets[name].copy()

    def record(self, metadata: StageMetadata) -> None:
        self.metadata[metadata.dataset] = metadata


class CsvSilverStore(SilverStore):
    """One CSV file per dataset, plus ``_meta/<dataset>.json``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path(self, name: str) -> Path:
        return self.directory / f"{name}.csv"

    def clear(self, name: str) -> None:
        path = self.path(name)
        if path.exists():
            logger.debug("Removing %s", path)
            path.unlink()

    def write(self, name: str, df: pd.DataFrame) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        df.to_csv(self.path(name), index=False, encoding="utf-8")

    def read(self, name: str) -> pd.DataFrame:
        path = self.path(name)
        if not path.exists():
            raise KeyError(name)
        header = pd.read_csv(path, nrows=0, encoding="utf-8").columns
        dtypes = {c: str for c in header if c in TEXT_COLUMNS}
        return pd.read_csv(path, dtype=dtypes, encoding="utf-8")

    def record(self, metadata: StageMetadata) -> None:
        write_metadata(self.directory, metadata)
