"""Bronze layer: read-only snapshot of the raw feeds.

Each feed is a directory of CSV exports under ``data_root/a_raw``. Files are
read with every column as text so identifiers keep their leading zeros, and
headers are normalized to snake_case. The snapshot is taken once at the start
of a run; transforms never read the filesystem themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from winery_core.config import DataPaths
from winery_core.utils import to_snake

logger = logging.getLogger(__name__)


def _empty() -> pd.DataFrame:
    return pd.DataFrame()


@dataclass(frozen=True)
class BronzeSnapshot:
    """Raw feeds for one pipeline run.

    Attributes:
        order_lines: POS order lines (RawOrderLine rows).
        bank_transactions: Bank feed rows.
        facebook: Facebook daily metrics export.
        instagram: Instagram daily metrics export.
        mailchimp: Mailchimp campaign export.
    """

    order_lines: pd.DataFrame = field(default_factory=_empty)
    bank_transactions: pd.DataFrame = field(default_factory=_empty)
    facebook: pd.DataFrame = field(default_factory=_empty)
    instagram: pd.DataFrame = field(default_factory=_empty)
    mailchimp: pd.DataFrame = field(default_factory=_empty)

    def feed(self, name: str) -> pd.DataFrame:
        """Return a copy of a feed so stages cannot mutate each other's input."""
        return getattr(self, name).copy()


def read_feed(directory: Path) -> pd.DataFrame:
    """Read and concatenate every CSV in a feed directory.

    Returns an empty DataFrame when the directory is missing or holds no
    CSVs; the stage consuming the feed reports that as a failure.
    """
    csv_files = sorted(directory.glob("*.csv")) if directory.exists() else []
    if not csv_files:
        logger.warning("No raw CSVs found in %s", directory)
        return pd.DataFrame()

    dfs = []
    for path in csv_files:
        logger.debug("Reading %s", path)
        df = pd.read_csv(path, dtype=str, keep_default_na=True, encoding="utf-8")
        df.columns = [to_snake(c) for c in df.columns]
        dfs.append(df)
    return pd.concat(dfs, ignore_index=True)


def load_bronze(paths: DataPaths) -> BronzeSnapshot:
    """Read all raw feeds into a BronzeSnapshot."""
    snapshot = BronzeSnapshot(
        order_lines=read_feed(paths.raw_order_lines),
        bank_transactions=read_feed(paths.raw_bank_transactions),
        facebook=read_feed(paths.raw_facebook),
        instagram=read_feed(paths.raw_instagram),
        mailchimp=read_feed(paths.raw_mailchimp),
    )
    logger.info(
        "Loaded bronze snapshot: %d order lines, %d bank rows, %d/%d social rows, %d campaigns",
        len(snapshot.order_lines),
        len(snapshot.bank_transactions),
        len(snapshot.facebook),
        len(snapshot.instagram),
        len(snapshot.mailchimp),
    )
    return snapshot
