"""Revenue domain: bank-feed classification and the silver revenue dataset.

Example:
    >>> from winery_core.revenue import build_revenue, RandomAmountMasker
    >>> revenue = build_revenue(bank_df, masker=RandomAmountMasker(seed=7))
    >>> revenue["revenue_type"].value_counts()
"""

from winery_core.revenue.classifier import (
    Classification,
    classify_transaction,
    classify_transactions,
    count_classification_gaps,
)
from winery_core.revenue.masking import (
    AmountMasker,
    IdentityAmountMasker,
    RandomAmountMasker,
)
from winery_core.revenue.transform import REVENUE_COLUMNS, build_revenue

__all__ = [
    "AmountMasker",
    "Classification",
    "IdentityAmountMasker",
    "RandomAmountMasker",
    "REVENUE_COLUMNS",
    "build_revenue",
    "classify_transaction",
    "classify_transactions",
    "count_classification_gaps",
]
