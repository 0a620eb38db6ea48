"""Silver layer: POS order lines to the customer dimension (dim_customers).

Customer attributes are denormalized onto every order line, so one customer
appears many times with values that drift over time. The resolver folds all
lines of a customer into one record:

- ``active_since`` is the first order date
- status, name, birth date and contact fields come from the latest line
  (latest order_date, then highest order_num, then last in input order)
- junk emails and zip codes are nulled
- ``tenure_days`` and ``quality_flag`` are derived from the result
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import pandas as pd

from winery_core.utils import (
    clean_text,
    is_present,
    latest_per_key,
    normalize_code,
    require_columns,
    require_rows,
    to_date,
)

logger = logging.getLogger(__name__)

VALID_EMAIL_SUFFIXES = (".com", ".net", ".org", ".edu")
ZIP_LENGTH = 5

FIRST_TIME_CUSTOMER = "1stTimeCustomer"
GUEST_FIRST_NAME = "guest"

COMPLETE = "Complete"
INCOMPLETE = "Incomplete"

REQUIRED_COLUMNS = [
    "order_num",
    "order_date",
    "cust_num",
    "cust_status",
    "cust_first_name",
    "cust_last_name",
    "cust_birth_date",
    "cust_email",
    "cust_city",
    "cust_state",
    "cust_zip",
]

CUSTOMER_COLUMNS = [
    "cust_num",
    "status",
    "full_name",
    "birth_date",
    "active_since",
    "email",
    "city",
    "state",
    "zip",
    "last_order_date",
    "tenure_days",
    "quality_flag",
]


def clean_email(value: Any) -> Optional[str]:
    """Keep an email only if it ends in an allowed top-level domain.

    Examples:
        >>> clean_email("ann@vineyard.COM")
        'ann@vineyard.COM'
        >>> clean_email("junk@xyz") is None
        True
    """
    email = clean_text(value)
    if email is None or not email.lower().endswith(VALID_EMAIL_SUFFIXES):
        return None
    return email


def clean_zip(value: Any) -> Optional[str]:
    """Keep a zip code only if it has exactly five characters."""
    code = normalize_code(value)
    if code is None or len(code) != ZIP_LENGTH:
        return None
    return code


def resolve_status(status: Any, first_name: Any) -> Optional[str]:
    """Default a missing status to first-time customer, except for guests.

    Lines without a first name keep their missing status.
    """
    current = clean_text(status)
    if current is not None:
        return current
    name = clean_text(first_name)
    if name is not None and name.casefold() != GUEST_FIRST_NAME:
        return FIRST_TIME_CUSTOMER
    return None


def full_name(first_name: Any, last_name: Any) -> Optional[str]:
    parts = [p for p in (clean_text(first_name), clean_text(last_name)) if p]
    return " ".join(parts) or None


def quality_flag(first_name: Any, last_name: Any, birth_date: Any, zip_code: Any) -> str:
    """Complete iff (first or last name) and birth date and a valid zip."""
    has_name = is_present(first_name) or is_present(last_name)
    if has_name and birth_date is not None and is_present(zip_code):
        return COMPLETE
    return INCOMPLETE


def resolve_customers(order_lines: pd.DataFrame) -> pd.DataFrame:
    """Fold raw order lines into one record per customer.

    Every distinct non-null cust_num yields exactly one record. Lines with an
    unparseable order_date still belong to their customer but rank below
    every dated line; a customer with no dated line at all is emitted with
    null ``active_since``, ``last_order_date`` and ``tenure_days``.

    Args:
        order_lines: Raw POS order lines (see REQUIRED_COLUMNS).

    Returns:
        DataFrame with CUSTOMER_COLUMNS, one row per distinct non-null
        cust_num, sorted by cust_num. ``tenure_days`` is a nullable integer.
        ``df.attrs["excluded_rows"]`` counts lines dropped for a missing
        customer number.

    Raises:
        StageFailure: If there are no order lines.
        DataQualityError: If required columns are missing.
    """
    require_rows(order_lines, "order_lines")
    require_columns(order_lines, REQUIRED_COLUMNS, "order_lines")

    df = order_lines[REQUIRED_COLUMNS].copy()
    df["cust_num"] = df["cust_num"].map(normalize_code)
    df["order_date"] = df["order_date"].map(to_date)

    usable = df["cust_num"].notna()
    excluded = int((~usable).sum())
    if excluded:
        logger.warning("Excluding %d order lines without cust_num", excluded)
    df = df[usable]

    undated = int(df["order_date"].isna().sum())
    if undated:
        logger.warning("%d order lines have no parseable order_date", undated)

    dated = df[df["order_date"].notna()]
    first_orders = dated.groupby("cust_num")["order_date"].min().rename("active_since")
    latest = latest_per_key(df, key="cust_num", date_col="order_date", tiebreak_col="order_num")
    latest = latest.join(first_orders, on="cust_num")

    records = []
    for row in latest.itertuples(index=False):
        zip_code = clean_zip(row.cust_zip)
        birth_date = to_date(row.cust_birth_date)
        active_since = None if pd.isna(row.active_since) else row.active_since
        last_order = None if pd.isna(row.order_date) else row.order_date
        tenure = None
        if active_since is not None and last_order is not None:
            tenure = (last_order - active_since).days
        records.append(
            {
                "cust_num": row.cust_num,
                "status": resolve_status(row.cust_status, row.cust_first_name),
                "full_name": full_name(row.cust_first_name, row.cust_last_name),
                "birth_date": birth_date,
                "active_since": active_since,
                "email": clean_email(row.cust_email),
                "city": clean_text(row.cust_city),
                "state": clean_text(row.cust_state),
                "zip": zip_code,
                "last_order_date": last_order,
                "tenure_days": tenure,
                "quality_flag": quality_flag(
                    row.cust_first_name, row.cust_last_name, birth_date, zip_code
                ),
            }
        )

    # object dtype keeps None for missing attributes
    customers = pd.DataFrame(records, columns=CUSTOMER_COLUMNS, dtype=object)
    customers = customers.sort_values("cust_num", kind="mergesort").reset_index(drop=True)
    customers["tenure_days"] = pd.array(customers["tenure_days"].tolist(), dtype="Int64")
    customers.attrs["excluded_rows"] = excluded

    logger.info(
        "Resolved %d customers from %d order lines (%d complete)",
        len(customers),
        len(order_lines),
        int((customers["quality_flag"] == COMPLETE).sum()),
    )
    return customers
