"""Tests for the shared cleaning utilities."""

from datetime import date

import pandas as pd
import pytest

from winery_core.exceptions import DataQualityError, StageFailure
from winery_core.utils import (
    clean_text,
    format_duration,
    latest_per_key,
    normalize_code,
    require_columns,
    require_rows,
    strip_invisibles,
    to_date,
    to_float,
    to_int,
    to_snake,
    to_timestamp,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1,234.56", 1234.56),
        ("$ 12.00", 12.0),
        ("(45.10)", -45.1),
        ("-3", -3.0),
        ("40.54%", 40.54),
        (7, 7.0),
        ("n/a", None),
        ("", None),
        (None, None),
        (float("nan"), None),
    ],
)
def test_to_float(raw, expected) -> None:
    assert to_float(raw) == expected


def test_to_int_rounds() -> None:
    assert to_int("1,200") == 1200
    assert to_int("2.6") == 3
    assert to_int(None) is None


def test_text_cleaning() -> None:
    assert strip_invisibles("\u00a0ZELLE\u200b  INSTANT\tPMT ") == "ZELLE INSTANT PMT"
    assert clean_text("   ") is None
    assert clean_text(pd.NA) is None


def test_normalize_code_survives_float_round_trip() -> None:
    assert normalize_code(94558.0) == "94558"
    assert normalize_code("94558.0") == "94558"
    assert normalize_code(" 02134 ") == "02134"
    assert normalize_code("CAB-21") == "CAB-21"
    assert normalize_code(None) is None


@pytest.mark.parametrize(
    "raw",
    ["2024-03-14", "3/14/2024", "03/14/24", "03-14-2024", "2024-03-14 10:30:00"],
)
def test_date_formats(raw) -> None:
    assert to_date(raw) == date(2024, 3, 14)


def test_unparseable_dates() -> None:
    assert pd.isna(to_timestamp("not a date"))
    assert to_date("") is None
    assert to_date(None) is None


def test_to_snake() -> None:
    assert to_snake("Prod SKU") == "prod_sku"
    assert to_snake(" Instagram Link-Clicks ") == "instagram_link_clicks"


def test_format_duration() -> None:
    assert format_duration(5) == "5.0s"
    assert format_duration(90.5) == "1m 30.5s"
    assert format_duration(125) == "2m 05.0s"


class TestLatestPerKey:
    """Tests for last-writer-wins row selection."""

    def test_latest_date_wins(self) -> None:
        df = pd.DataFrame(
            {
                "key": ["a", "a", "b"],
                "day": [date(2024, 2, 1), date(2024, 1, 1), date(2024, 1, 1)],
                "order_num": ["1", "2", "3"],
                "value": ["new", "old", "only"],
            }
        )
        latest = latest_per_key(df, "key", "day", "order_num")

        assert dict(zip(latest["key"], latest["value"])) == {"a": "new", "b": "only"}
        assert list(latest.columns) == list(df.columns)

    def test_numeric_tie_break(self) -> None:
        df = pd.DataFrame(
            {
                "key": ["a", "a"],
                "day": [date(2024, 1, 1)] * 2,
                "order_num": ["10", "9"],
                "value": ["ten", "nine"],
            }
        )
        assert latest_per_key(df, "key", "day", "order_num")["value"].item() == "ten"

    def test_text_tie_break_and_position(self) -> None:
        df = pd.DataFrame(
            {
                "key": ["a", "a", "a"],
                "day": [date(2024, 1, 1)] * 3,
                "order_num": ["B-2", "B-1", "B-2"],
                "value": ["first", "lower", "second"],
            }
        )
        # Equal keys fall back to input position; the later row wins
        assert latest_per_key(df, "key", "day", "order_num")["value"].item() == "second"


def test_require_columns() -> None:
    df = pd.DataFrame({"a": [1]})
    require_columns(df, ["a"], "feed")
    with pytest.raises(DataQualityError, match="'b'"):
        require_columns(df, ["a", "b"], "feed")


def test_require_rows() -> None:
    with pytest.raises(StageFailure, match="feed"):
        require_rows(pd.DataFrame({"a": []}), "feed")
