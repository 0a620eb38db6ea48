"""Silver layer: POS order lines stripped of customer and product attributes.

The order-details dataset keeps one row per order line with the order
measures and the ``cust_num`` / ``prod_sku`` references; the duplicated
customer and product attributes live in the dimension datasets instead.
"""

from __future__ import annotations

import logging

import pandas as pd

from winery_core.utils import (
    normalize_code,
    require_columns,
    require_rows,
    to_date,
    to_float,
)

logger = logging.getLogger(__name__)

ORDER_DETAIL_COLUMNS = [
    "order_num",
    "order_date",
    "cust_num",
    "prod_sku",
    "quantity",
    "prod_sales_price",
    "prod_item_discount",
    "order_subtotal",
    "order_taxes",
    "order_total",
]

MONEY_COLUMNS = [
    "prod_sales_price",
    "prod_item_discount",
    "order_subtotal",
    "order_taxes",
    "order_total",
]


def build_order_details(order_lines: pd.DataFrame) -> pd.DataFrame:
    """Project raw order lines onto the order-details columns.

    Rows without an order number are excluded.

    Raises:
        StageFailure: If there are no order lines.
        DataQualityError: If required columns are missing.
    """
    require_rows(order_lines, "order_lines")
    require_columns(order_lines, ORDER_DETAIL_COLUMNS, "order_lines")

    df = order_lines[ORDER_DETAIL_COLUMNS].copy()
    for col in ("order_num", "cust_num", "prod_sku"):
        df[col] = df[col].map(normalize_code)
    df["order_date"] = df["order_date"].map(to_date)
    df["quantity"] = pd.to_numeric(df["quantity"].map(to_float), errors="coerce")
    for col in MONEY_COLUMNS:
        df[col] = pd.to_numeric(df[col].map(to_float), errors="coerce")

    missing = df["order_num"].isna()
    if missing.any():
        logger.warning("Excluding %d order lines without order_num", int(missing.sum()))
    details = df[~missing].reset_index(drop=True)
    details.attrs["excluded_rows"] = int(missing.sum())
    return details
