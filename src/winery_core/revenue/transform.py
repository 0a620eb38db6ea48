"""Silver layer: bank feed to the revenue dataset.

Classifies every bank-feed row, keeps the Revenue rows and masks their
amounts. CashInjection rows are financing transfers and are dropped.
"""

from __future__ import annotations

import logging

import pandas as pd

from winery_core.revenue.classifier import (
    REVENUE,
    classify_transactions,
    count_classification_gaps,
)
from winery_core.revenue.masking import AmountMasker, RandomAmountMasker
from winery_core.utils import clean_text, require_columns, require_rows, to_date, to_float

logger = logging.getLogger(__name__)

BANK_COLUMNS = ["date", "transaction_code", "description", "amount"]

REVENUE_COLUMNS = [
    "date",
    "transaction_code",
    "description",
    "amount",
    "transaction_type",
    "revenue_type",
    "revenue_source",
]


def prepare_bank_transactions(bank_df: pd.DataFrame) -> pd.DataFrame:
    """Type the bank feed and drop rows without a usable amount.

    Raises:
        StageFailure: If the feed is empty.
        DataQualityError: If required columns are missing.
    """
    require_rows(bank_df, "bank_transactions")
    require_columns(bank_df, BANK_COLUMNS, "bank_transactions")

    df = pd.DataFrame(
        {
            "date": bank_df["date"].map(to_date),
            "transaction_code": bank_df["transaction_code"].map(clean_text),
            "description": bank_df["description"].map(clean_text),
            "amount": bank_df["amount"].map(to_float),
        },
        index=bank_df.index,
    )
    missing_amount = df["amount"].isna()
    if missing_amount.any():
        logger.warning("Excluding %d bank rows with no amount", int(missing_amount.sum()))
    df = df[~missing_amount].copy()
    df["amount"] = df["amount"].astype(float)
    return df


def build_revenue(
    bank_df: pd.DataFrame,
    masker: AmountMasker | None = None,
) -> pd.DataFrame:
    """Build the silver revenue dataset from the raw bank feed.

    Args:
        bank_df: Raw bank transactions (date, transaction_code, description, amount).
        masker: Amount masking strategy. Defaults to an unseeded
            RandomAmountMasker.

    Returns:
        DataFrame with REVENUE_COLUMNS, one row per Revenue transaction.
        ``df.attrs`` carries ``excluded_rows`` and ``classification_gaps``.
    """
    if masker is None:
        masker = RandomAmountMasker()

    prepared = prepare_bank_transactions(bank_df)
    excluded = len(bank_df) - len(prepared)

    classified = classify_transactions(prepared)
    revenue = classified[classified["transaction_type"] == REVENUE].copy()
    dropped = len(classified) - len(revenue)

    gaps = count_classification_gaps(revenue)
    if gaps:
        logger.warning("%d revenue rows matched no revenue_type rule", gaps)

    revenue["amount"] = masker.mask(revenue["amount"])
    revenue = revenue[REVENUE_COLUMNS].reset_index(drop=True)
    revenue.attrs.update(
        {
            "excluded_rows": excluded,
            "cash_injections": dropped,
            "classification_gaps": gaps,
        }
    )

    logger.info(
        "Revenue: %d rows kept, %d cash injections dropped, %d excluded",
        len(revenue),
        dropped,
        excluded,
    )
    return revenue
