"""Smoke tests for configuration, bronze reading and the silver load CLI.

The module also includes a live test that runs the CLI against a real data
root.
"""

import os
from pathlib import Path

import pandas as pd
import pytest

from winery_core import DataPaths
from winery_core.bronze import BronzeSnapshot, load_bronze, read_feed
from winery_core.etl import SILVER_STAGE_NAMES
from winery_core.etl.build_silver_dataset import main
from winery_core.metadata import read_metadata


def write_feed(directory: Path, name: str, df: pd.DataFrame) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    df.to_csv(directory / name, index=False)


@pytest.fixture
def data_root(tmp_path: Path, bronze_snapshot: BronzeSnapshot) -> Path:
    """A data root whose a_raw/ holds the shared bronze snapshot as CSVs."""
    paths = DataPaths.from_root(tmp_path)
    # Export headers are title-cased; the reader snake_cases them
    order_lines = bronze_snapshot.order_lines.rename(
        columns=lambda c: c.replace("_", " ").title()
    )
    write_feed(paths.raw_order_lines, "orders_2024.csv", order_lines)
    write_feed(paths.raw_bank_transactions, "bank.csv", bronze_snapshot.bank_transactions)
    write_feed(paths.raw_facebook, "facebook.csv", bronze_snapshot.facebook)
    write_feed(paths.raw_instagram, "instagram.csv", bronze_snapshot.instagram)
    write_feed(paths.raw_mailchimp, "campaigns.csv", bronze_snapshot.mailchimp)
    return tmp_path


def test_config_creation() -> None:
    """Test that DataPaths derives every layer directory from data_root."""
    paths = DataPaths.from_root("data")
    assert paths.data_root == Path("data")
    assert paths.raw_order_lines == Path("data/a_raw/order_lines")
    assert paths.raw_bank_transactions == Path("data/a_raw/bank_transactions")
    assert paths.raw_mailchimp == Path("data/a_raw/mailchimp")
    assert paths.silver == Path("data/b_silver")


def test_ensure_dirs(tmp_path: Path) -> None:
    paths = DataPaths.from_root(tmp_path)
    paths.ensure_dirs()
    assert paths.raw_facebook.is_dir()
    assert paths.silver.is_dir()


def test_read_feed_concatenates_sorted_files(tmp_path: Path) -> None:
    write_feed(tmp_path, "b.csv", pd.DataFrame({"Cust Zip": ["02134"], "Order Num": ["2"]}))
    write_feed(tmp_path, "a.csv", pd.DataFrame({"Cust Zip": ["00501"], "Order Num": ["1"]}))
    (tmp_path / "notes.txt").write_text("ignored")

    df = read_feed(tmp_path)

    assert list(df.columns) == ["cust_zip", "order_num"]
    # Text columns keep their leading zeros
    assert list(df["cust_zip"]) == ["00501", "02134"]


def test_read_feed_missing_directory(tmp_path: Path) -> None:
    assert read_feed(tmp_path / "nope").empty


def test_load_bronze(data_root: Path) -> None:
    snapshot = load_bronze(DataPaths.from_root(data_root))

    assert len(snapshot.order_lines) == 5
    assert "cust_first_name" in snapshot.order_lines.columns
    assert len(snapshot.bank_transactions) == 5
    assert len(snapshot.mailchimp) == 2


def test_cli_builds_silver_layer(
    data_root: Path, bronze_snapshot: BronzeSnapshot, capsys
) -> None:
    exit_code = main(["--data-root", str(data_root), "--seed", "7"])

    assert exit_code == 0
    silver = DataPaths.from_root(data_root).silver
    for name in SILVER_STAGE_NAMES:
        assert (silver / f"{name}.csv").exists()
        assert read_metadata(silver, name).status == "ok"

    customers = pd.read_csv(silver / "dim_customers.csv", dtype=str)
    assert list(customers["cust_num"]) == ["C100", "C200"]

    revenue = pd.read_csv(silver / "revenue.csv").set_index("description")
    assert len(revenue) == 3
    bank = bronze_snapshot.bank_transactions.set_index("description")
    original = bank.loc[revenue.index, "amount"].astype(float)
    # Each amount is inflated by 1.01x to 3.00x, then rounded to cents
    assert (revenue["amount"] >= original * 1.01 - 0.005).all()
    assert (revenue["amount"] <= original * 3.00 + 0.005).all()

    out = capsys.readouterr().out
    assert "dim_customers" in out
    assert "QA WARNING" not in out


def test_cli_stage_subset(data_root: Path) -> None:
    exit_code = main(["--data-root", str(data_root), "--stage", "dim_products", "--no-mask"])

    assert exit_code == 0
    silver = DataPaths.from_root(data_root).silver
    assert (silver / "dim_products.csv").exists()
    assert not (silver / "revenue.csv").exists()


def test_cli_reports_failed_stages(tmp_path: Path, capsys) -> None:
    exit_code = main(["--data-root", str(tmp_path)])

    assert exit_code == 1
    assert "STAGE_FAILURE" in capsys.readouterr().out
    meta = read_metadata(DataPaths.from_root(tmp_path).silver, "dim_customers")
    assert meta.status == "failed"
    assert meta.rows == 0


def test_cli_rejects_unknown_stage(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--data-root", str(tmp_path), "--stage", "gold_views"])


@pytest.mark.live
def test_cli_with_live_data() -> None:
    """Live test: rebuild the silver layer from a real bronze directory.

    Prerequisites:
        - WINERY_DATA_ROOT: data root whose a_raw/ holds real exports

    The test will be skipped if the variable is not set.
    """
    data_root = os.environ.get("WINERY_DATA_ROOT")
    if not data_root:
        pytest.skip("Live test skipped: WINERY_DATA_ROOT environment variable required")

    exit_code = main(["--data-root", data_root])

    assert exit_code == 0
    silver = DataPaths.from_root(data_root).silver
    for name in SILVER_STAGE_NAMES:
        meta = read_metadata(silver, name)
        assert meta is not None and meta.status == "ok", f"{name} did not load"
        print(f"[Silver] {name}: {meta.rows} rows in {meta.duration_seconds}s")
