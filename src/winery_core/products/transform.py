"""Silver layer: POS order lines to the product dimension (dim_products).

One record per SKU holding the retail price of the most recent order line
that carried a positive price.
"""

from __future__ import annotations

import logging

import pandas as pd

from winery_core.utils import (
    latest_per_key,
    normalize_code,
    require_columns,
    require_rows,
    to_date,
    to_float,
)

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["order_num", "order_date", "prod_sku", "prod_retail_price"]

PRODUCT_COLUMNS = ["prod_sku", "retail_price"]


def resolve_products(order_lines: pd.DataFrame) -> pd.DataFrame:
    """Pick the latest positive retail price per SKU.

    Lines with no SKU or a missing/non-positive retail price do not qualify.
    Among qualifying lines of a SKU the latest order_date wins, then the
    highest order_num, then the last line in input order. Lines without a
    parseable order_date rank below every dated line. SKUs with no qualifying
    line are omitted.

    Args:
        order_lines: Raw POS order lines.

    Returns:
        DataFrame with PRODUCT_COLUMNS sorted by prod_sku.

    Raises:
        StageFailure: If there are no order lines.
        DataQualityError: If required columns are missing.
    """
    require_rows(order_lines, "order_lines")
    require_columns(order_lines, REQUIRED_COLUMNS, "order_lines")

    df = order_lines[REQUIRED_COLUMNS].copy()
    df["prod_sku"] = df["prod_sku"].map(normalize_code)
    df["order_date"] = df["order_date"].map(to_date)
    df["retail_price"] = pd.to_numeric(df["prod_retail_price"].map(to_float), errors="coerce")

    qualifying = (
        df["prod_sku"].notna()
        & df["retail_price"].notna()
        & (df["retail_price"] > 0)
    )
    excluded = int((~qualifying).sum())
    df = df[qualifying]

    latest = latest_per_key(df, key="prod_sku", date_col="order_date", tiebreak_col="order_num")
    products = latest[PRODUCT_COLUMNS].sort_values("prod_sku", kind="mergesort")
    products = products.reset_index(drop=True)
    products["retail_price"] = products["retail_price"].astype(float)
    products.attrs["excluded_rows"] = excluded

    logger.info("Resolved %d products (%d lines did not qualify)", len(products), excluded)
    return products
