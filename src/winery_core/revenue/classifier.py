"""Rule tables that classify bank-feed rows.

Every bank-feed row gets three labels:

- ``transaction_type``: ``Revenue`` or ``CashInjection`` (owner deposits,
  peer transfers, loan draws and reward redemptions are financing, not sales)
- ``revenue_type``: ``Hospitality``, ``Events``, ``Retail`` or None
- ``revenue_source``: the retail channel (``WD``, ``Square``, ``Zelle``) or None

Each table is an ordered tuple of ``(predicate, result)`` pairs evaluated top
to bottom; the first predicate that holds wins. Order matters: the Zelle
"FROM CUSTOMER" deposits are claimed by the cash-injection table, so the
retail rule has to exclude them explicitly.

Descriptions are matched case-insensitively after whitespace trimming.

Examples:
    >>> classify_transaction("CREDIT", "Zelle Instant Pmt ABC Corp")
    Classification(transaction_type='Revenue', revenue_type='Retail', revenue_source='Zelle')
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import NamedTuple, Optional

import pandas as pd

from winery_core.utils import strip_invisibles

logger = logging.getLogger(__name__)

CREDIT = "CREDIT"

REVENUE = "Revenue"
CASH_INJECTION = "CashInjection"

HOSPITALITY = "Hospitality"
EVENTS = "Events"
RETAIL = "Retail"

ZELLE_INSTANT = "ZELLE INSTANT PMT"
ZELLE_FROM_CUSTOMER = "ZELLE INSTANT PMT FROM CUSTOMER"
BANKCARD = "ELECTRONIC DEPOSIT BANKCARD"
SQUARE = "ELECTRONIC DEPOSIT SQUARE INC"

# (code, description) -> bool, both already upper-cased
Predicate = Callable[[str, str], bool]


class Classification(NamedTuple):
    """Result of classifying one bank-feed row."""

    transaction_type: str
    revenue_type: Optional[str]
    revenue_source: Optional[str]


def _equals(*names: str) -> Predicate:
    targets = frozenset(n.upper() for n in names)
    return lambda code, desc: desc in targets


def _contains(*fragments: str) -> Predicate:
    needles = tuple(f.upper() for f in fragments)
    return lambda code, desc: any(n in desc for n in needles)


def _credit(pred: Predicate) -> Predicate:
    return lambda code, desc: code == CREDIT and pred(code, desc)


def _any(*preds: Predicate) -> Predicate:
    return lambda code, desc: any(p(code, desc) for p in preds)


def _zelle_not_from_customer(code: str, desc: str) -> bool:
    return ZELLE_INSTANT in desc and ZELLE_FROM_CUSTOMER not in desc


CASH_INJECTION_RULES: tuple[tuple[Predicate, str], ...] = (
    (
        _credit(
            _any(
                _equals(
                    "MOBILE CHECK DEPOSIT",
                    "ELECTRONIC DEPOSIT CASHAPP",
                    "ELECTRONIC DEPOSIT CASH APP",
                    "ELECTRONIC DEPOSIT JPMORGAN CHASE",
                    "ELECTRONIC DEPOSIT POS PROVIDER",
                    "ELECTRONIC DEPOSIT VENMO",
                    "DEPOSIT",
                    "REAL TIME PAYMENT CREDIT",
                ),
                _contains(
                    ZELLE_FROM_CUSTOMER,
                    "ZELLE STANDARD PMT FROM",
                    "REAL TIME PAYMENT FROM CUSTOMER",
                    "INTERNET BANKING TRANSFER DEPOSIT",
                    "MOBILE BANKING TRANSFER DEPOSIT",
                    "LOAN/LINE DEPOSIT",
                    "CASH REWARDS REDEMPTION",
                ),
            )
        ),
        CASH_INJECTION,
    ),
)

REVENUE_TYPE_RULES: tuple[tuple[Predicate, str], ...] = (
    (_equals("ELECTRONIC DEPOSIT AIRBNB PAYMENTS", "ELECTRONIC DEPOSIT VRBO"), HOSPITALITY),
    (_any(_contains("EVENTBRITE"), _equals("ELECTRONIC DEPOSIT WWW.WINERYSITE")), EVENTS),
    (_credit(_any(_contains(BANKCARD, SQUARE), _zelle_not_from_customer)), RETAIL),
)

REVENUE_SOURCE_RULES: tuple[tuple[Predicate, str], ...] = (
    (_contains(BANKCARD), "WD"),
    (_contains(SQUARE), "Square"),
    (_contains(ZELLE_INSTANT), "Zelle"),
)


def _first_match(
    rules: tuple[tuple[Predicate, str], ...], code: str, desc: str
) -> Optional[str]:
    for predicate, result in rules:
        if predicate(code, desc):
            return result
    return None


def classify_transaction(transaction_code: object, description: object) -> Classification:
    """Classify a single bank-feed row.

    Never raises: missing code or description simply match nothing and fall
    through to ``Revenue`` with no revenue type.

    Args:
        transaction_code: Bank transaction code, e.g. "CREDIT" or "DEBIT".
        description: Free-text bank description.

    Returns:
        Classification triple.

    Examples:
        >>> classify_transaction("CREDIT", "ZELLE INSTANT PMT FROM CUSTOMER JOHN")
        Classification(transaction_type='CashInjection', revenue_type=None, revenue_source=None)
        >>> classify_transaction("CREDIT", "ELECTRONIC DEPOSIT AIRBNB PAYMENTS")
        Classification(transaction_type='Revenue', revenue_type='Hospitality', revenue_source=None)
    """
    code = (strip_invisibles(transaction_code) or "").upper()
    desc = (strip_invisibles(description) or "").upper()

    transaction_type = _first_match(CASH_INJECTION_RULES, code, desc) or REVENUE
    if transaction_type != REVENUE:
        return Classification(transaction_type, None, None)

    revenue_type = _first_match(REVENUE_TYPE_RULES, code, desc)
    revenue_source = None
    # Source attribution only applies to retail channels
    if revenue_type == RETAIL:
        revenue_source = _first_match(REVENUE_SOURCE_RULES, code, desc)
    return Classification(transaction_type, revenue_type, revenue_source)


def classify_transactions(
    df: pd.DataFrame,
    code_col: str = "transaction_code",
    description_col: str = "description",
) -> pd.DataFrame:
    """Return a copy of ``df`` with the three classification columns added."""
    labels = [
        classify_transaction(code, desc)
        for code, desc in zip(df[code_col], df[description_col])
    ]
    out = df.copy()
    # object dtype keeps None for unlabeled rows
    out["transaction_type"] = _label_column([c.transaction_type for c in labels], df.index)
    out["revenue_type"] = _label_column([c.revenue_type for c in labels], df.index)
    out["revenue_source"] = _label_column([c.revenue_source for c in labels], df.index)
    return out


def _label_column(values: list, index: pd.Index) -> pd.Series:
    return pd.Series(values, index=index, dtype=object)


def count_classification_gaps(df: pd.DataFrame) -> int:
    """Count Revenue rows that matched no revenue-type rule.

    A gap is not an error; it shows where the rule tables lack coverage.
    """
    if df.empty:
        return 0
    mask = (df["transaction_type"] == REVENUE) & df["revenue_type"].isna()
    return int(mask.sum())
