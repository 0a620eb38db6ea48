"""Shared cleaning utilities for the silver transforms.

Bronze feeds arrive as strings straight from CSV exports (POS, bank, Meta,
Mailchimp). These helpers turn those strings into typed values without ever
raising, so a malformed record degrades to a null field instead of failing a
stage.

Key utilities:
- Text: strip invisible characters, blank-to-None, snake_case headers
- Numbers: currency-tolerant float parsing
- Codes: zip/SKU normalization that survives float round-trips
- Dates: ISO and US date parsing
- Selection: deterministic "latest row per key" for dimension resolution

Examples:
    >>> from winery_core.utils import to_float, to_snake
    >>> to_float("$1,234.56")
    1234.56
    >>> to_snake("Instagram Link Clicks")
    'instagram_link_clicks'
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

import pandas as pd

from winery_core.exceptions import DataQualityError, StageFailure

NBSP = "\u00a0"  # Non-breaking space
ZW = "".join(chr(c) for c in (0x200B, 0x200C, 0x200D, 0xFEFF))

_CURRENCY_RE = re.compile(r"[^\d.\-\(\)]")
_INTEGRAL_FLOAT_RE = re.compile(r"^(\d+)\.0+$")

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%m-%d-%Y")


def strip_invisibles(x: Any) -> Optional[str]:
    """Remove invisible whitespace and collapse runs of spaces.

    Args:
        x: Value to clean (string, number, or None).

    Returns:
        Cleaned string or None if input is None/NaN.

    Examples:
        >>> strip_invisibles("  ZELLE   INSTANT PMT  ")
        'ZELLE INSTANT PMT'
    """
    if x is None or (isinstance(x, float) and pd.isna(x)) or x is pd.NA:
        return None
    s = str(x)
    s = s.replace("\r", "").replace("\t", " ").replace(NBSP, " ")
    s = re.sub(r"[%s]" % re.escape(ZW), "", s)
    return re.sub(r"\s+", " ", s).strip()


def clean_text(x: Any) -> Optional[str]:
    """Like strip_invisibles, but blank strings become None."""
    s = strip_invisibles(x)
    return s or None


def is_present(x: Any) -> bool:
    """True when the value is neither null nor blank."""
    return clean_text(x) is not None


def to_float(x: Any) -> Optional[float]:
    """Parse a US-formatted number, tolerating currency symbols.

    Handles '1,234.56', '$ 12.00' and accounting negatives '(45.10)'.

    Returns:
        Parsed float or None if parsing fails.

    Examples:
        >>> to_float("(45.10)")
        -45.1
        >>> to_float("n/a") is None
        True
    """
    if x is None or x is pd.NA:
        return None
    if isinstance(x, (int, float)) and not isinstance(x, bool):
        f = float(x)
        return None if math.isnan(f) or math.isinf(f) else f
    s = strip_invisibles(x)
    if not s:
        return None

    neg = False
    if s.startswith("(") and s.endswith(")"):
        neg, s = True, s[1:-1]
    s = _CURRENCY_RE.sub("", s.replace(",", ""))
    if not s:
        return None
    try:
        v = float(s)
    except ValueError:
        return None
    if math.isnan(v) or math.isinf(v):
        return None
    return -v if neg else v


def to_int(x: Any) -> Optional[int]:
    """Parse a count; rounds fractional values and returns None on failure."""
    f = to_float(x)
    return None if f is None else int(round(f))


def normalize_code(x: Any) -> Optional[str]:
    """Normalize an identifier such as a zip code or SKU.

    CSV round-trips through spreadsheet tools often turn '12345' into
    '12345.0'; the trailing zero fraction is dropped.

    Examples:
        >>> normalize_code(12345.0)
        '12345'
        >>> normalize_code(" 02134 ")
        '02134'
    """
    if isinstance(x, float) and not pd.isna(x) and x.is_integer():
        return str(int(x))
    s = clean_text(x)
    if s is None:
        return None
    m = _INTEGRAL_FLOAT_RE.match(s)
    return m.group(1) if m else s


def to_timestamp(val: Any) -> pd.Timestamp:
    """Parse a date or timestamp from common export formats.

    Tries ISO (YYYY-MM-DD), then US (MM/DD/YYYY, MM/DD/YY, MM-DD-YYYY), then
    falls back to pandas inference (which also handles full timestamps).

    Returns:
        Parsed Timestamp or pd.NaT if parsing fails.

    Examples:
        >>> to_timestamp("3/14/2024")
        Timestamp('2024-03-14 00:00:00')
    """
    if val is None or val is pd.NA or (isinstance(val, float) and pd.isna(val)):
        return pd.NaT
    if isinstance(val, pd.Timestamp):
        return val
    s = strip_invisibles(val)
    if not s:
        return pd.NaT
    for fmt in DATE_FORMATS:
        try:
            return pd.to_datetime(s, format=fmt, errors="raise")
        except (ValueError, TypeError):
            pass
    return pd.to_datetime(s, errors="coerce")


def to_date(val: Any):
    """Parse a value to ``datetime.date``; None when unparseable."""
    ts = to_timestamp(val)
    return None if pd.isna(ts) else ts.date()


def to_snake(s: str) -> str:
    """Convert a CSV header to snake_case.

    Examples:
        >>> to_snake("Prod SKU")
        'prod_sku'
    """
    s0 = (strip_invisibles(s) or "").lower()
    s0 = re.sub(r"[^\w\s]", " ", s0)
    return re.sub(r"\s+", "_", s0).strip("_")


def format_duration(seconds: float) -> str:
    """Format a duration in seconds as a human-readable string.

    Examples:
        >>> format_duration(90.5)
        '1m 30.5s'
        >>> format_duration(0.25)
        '0.2s'
    """
    mins, secs = divmod(seconds, 60.0)
    if mins >= 1:
        return f"{int(mins)}m {secs:04.1f}s"
    return f"{secs:.1f}s"


def latest_per_key(
    df: pd.DataFrame,
    key: str,
    date_col: str,
    tiebreak_col: str,
) -> pd.DataFrame:
    """Keep the most recent row per key (last-writer-wins).

    Rows are ordered by ``date_col``, then by ``tiebreak_col`` (numerically
    when it parses as a number, else as text), then by input position. The
    last row of each key after that ordering wins. Null dates and null
    tie-break values sort lowest.

    Args:
        df: Frame with ``key`` already non-null.
        key: Grouping column.
        date_col: Primary ordering column.
        tiebreak_col: Secondary ordering column (a stable row identifier).

    Returns:
        One row per distinct key, indexed by the original row labels.
    """
    ranked = df.assign(
        _tb_num=pd.to_numeric(df[tiebreak_col].map(clean_text), errors="coerce"),
        _tb_str=df[tiebreak_col].map(clean_text),
        _pos=range(len(df)),
    )
    ranked = ranked.sort_values(
        [key, date_col, "_tb_num", "_tb_str", "_pos"],
        na_position="first",
        kind="mergesort",
    )
    latest = ranked.drop_duplicates(subset=key, keep="last")
    return latest.drop(columns=["_tb_num", "_tb_str", "_pos"])


def require_columns(df: pd.DataFrame, required: list[str], dataset: str) -> None:
    """Raise DataQualityError if any required column is missing."""
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise DataQualityError(
            f"Missing required columns in {dataset}: {missing}. Required: {required}"
        )


def require_rows(df: pd.DataFrame, dataset: str) -> None:
    """Raise StageFailure when a bronze feed has no records."""
    if df is None or df.empty:
        raise StageFailure(f"No raw records found for {dataset}")
