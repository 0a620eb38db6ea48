"""Quality checks for the silver datasets.

Each ``detect_*`` function takes one silver dataset and returns the offending
rows (an empty DataFrame when the check passes). The checks work on both
freshly built frames and frames read back from CSV, where dates and numbers
may be strings.
"""

from __future__ import annotations

import pandas as pd

from winery_core.customers import COMPLETE
from winery_core.revenue.classifier import RETAIL, REVENUE

SOCIAL_METRICS = ["follows", "interactions", "link_clicks", "reach", "visits"]


def _blank(series: pd.Series) -> pd.Series:
    return series.isna() | (series.astype(str).str.strip() == "")


def detect_revenue_missing_type(revenue: pd.DataFrame) -> pd.DataFrame:
    """Revenue rows whose description matched no revenue-type rule."""
    mask = (revenue["transaction_type"] == REVENUE) & _blank(revenue["revenue_type"])
    return revenue[mask]


def detect_retail_missing_source(revenue: pd.DataFrame) -> pd.DataFrame:
    """Retail rows without a revenue source."""
    mask = (revenue["revenue_type"] == RETAIL) & _blank(revenue["revenue_source"])
    return revenue[mask]


def detect_source_outside_retail(revenue: pd.DataFrame) -> pd.DataFrame:
    """Rows with a revenue source but a revenue type other than Retail."""
    mask = ~_blank(revenue["revenue_source"]) & (revenue["revenue_type"] != RETAIL)
    return revenue[mask]


def detect_null_order_numbers(order_details: pd.DataFrame) -> pd.DataFrame:
    return order_details[_blank(order_details["order_num"])]


def detect_duplicate_keys(df: pd.DataFrame, key: str) -> pd.DataFrame:
    """Key values appearing more than once, with their counts."""
    counts = df.groupby(key, dropna=False).size().rename("count").reset_index()
    return counts[counts["count"] > 1].reset_index(drop=True)


def detect_null_metrics(social: pd.DataFrame) -> pd.DataFrame:
    return social[social[SOCIAL_METRICS].isna().any(axis=1)]


def detect_blank_email_fields(email: pd.DataFrame) -> pd.DataFrame:
    """Campaign rows with a blank audience or send date."""
    return email[_blank(email["email_audience"]) | _blank(email["send_date"])]


def detect_quality_flag_mismatch(customers: pd.DataFrame) -> pd.DataFrame:
    """Customers whose quality_flag disagrees with the completeness rule.

    The full name is present exactly when a first or last name was present,
    so Complete must coincide with full_name, birth_date and zip all present.
    """
    expected = (
        ~_blank(customers["full_name"])
        & ~_blank(customers["birth_date"])
        & ~_blank(customers["zip"])
    )
    actual = customers["quality_flag"] == COMPLETE
    return customers[expected != actual]


def detect_negative_tenure(customers: pd.DataFrame) -> pd.DataFrame:
    """Customers with a negative tenure.

    A null tenure is allowed: customers without any dated order line have no
    tenure at all.
    """
    tenure = pd.to_numeric(customers["tenure_days"], errors="coerce").astype(float)
    return customers[tenure < 0]
