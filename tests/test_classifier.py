"""Tests for the bank-feed transaction classifier."""

import pandas as pd
import pytest

from winery_core.revenue import (
    Classification,
    classify_transaction,
    classify_transactions,
    count_classification_gaps,
)


def test_zelle_from_customer_is_cash_injection() -> None:
    """The "FROM CUSTOMER" Zelle variant is financing, not a sale."""
    result = classify_transaction("CREDIT", "ZELLE INSTANT PMT FROM CUSTOMER JOHN")
    assert result == Classification("CashInjection", None, None)


def test_zelle_without_from_customer_is_retail() -> None:
    result = classify_transaction("CREDIT", "ZELLE INSTANT PMT ABC CORP")
    assert result == Classification("Revenue", "Retail", "Zelle")


def test_airbnb_is_hospitality_without_source() -> None:
    result = classify_transaction("CREDIT", "ELECTRONIC DEPOSIT AIRBNB PAYMENTS")
    assert result == Classification("Revenue", "Hospitality", None)


def test_bankcard_is_retail_wd() -> None:
    result = classify_transaction("CREDIT", "ELECTRONIC DEPOSIT BANKCARD #1234")
    assert result == Classification("Revenue", "Retail", "WD")


def test_square_is_retail_square() -> None:
    result = classify_transaction("CREDIT", "ELECTRONIC DEPOSIT SQUARE INC 8891")
    assert result == Classification("Revenue", "Retail", "Square")


@pytest.mark.parametrize(
    "description",
    [
        "MOBILE CHECK DEPOSIT",
        "ELECTRONIC DEPOSIT VENMO",
        "ELECTRONIC DEPOSIT CASH APP",
        "DEPOSIT",
        "REAL TIME PAYMENT CREDIT",
        "ZELLE STANDARD PMT FROM SMITH",
        "REAL TIME PAYMENT FROM CUSTOMER 42",
        "ONLINE INTERNET BANKING TRANSFER DEPOSIT 0099",
        "LOAN/LINE DEPOSIT 7",
        "CASH REWARDS REDEMPTION",
    ],
)
def test_cash_injection_patterns(description: str) -> None:
    assert classify_transaction("CREDIT", description).transaction_type == "CashInjection"


def test_cash_injection_requires_credit_code() -> None:
    """Without the CREDIT code a check deposit stays Revenue."""
    result = classify_transaction("DEBIT", "MOBILE CHECK DEPOSIT")
    assert result.transaction_type == "Revenue"
    assert result.revenue_type is None
    assert result.revenue_source is None


def test_exact_patterns_do_not_match_substrings() -> None:
    """Exact patterns such as DEPOSIT do not match longer descriptions."""
    result = classify_transaction("CREDIT", "DEPOSIT REFUND FROM SUPPLIER")
    assert result.transaction_type == "Revenue"


def test_matching_is_case_insensitive() -> None:
    assert classify_transaction("credit", "  electronic deposit bankcard 55 ") == Classification(
        "Revenue", "Retail", "WD"
    )
    assert classify_transaction("CREDIT", "Electronic Deposit Vrbo").revenue_type == "Hospitality"


def test_events_patterns() -> None:
    assert classify_transaction("CREDIT", "EVENTBRITE PAYOUT 331").revenue_type == "Events"
    assert classify_transaction("DEBIT", "EVENTBRITE REFUND").revenue_type == "Events"
    assert (
        classify_transaction("CREDIT", "ELECTRONIC DEPOSIT WWW.WINERYSITE")
        == Classification("Revenue", "Events", None)
    )


def test_events_take_precedence_over_retail() -> None:
    """First match wins: an Eventbrite payout through the bankcard processor is Events."""
    result = classify_transaction("CREDIT", "ELECTRONIC DEPOSIT BANKCARD EVENTBRITE")
    assert result == Classification("Revenue", "Events", None)


def test_retail_requires_credit_code() -> None:
    result = classify_transaction("DEBIT", "ZELLE INSTANT PMT ABC CORP")
    assert result == Classification("Revenue", None, None)


def test_missing_values_fall_through_to_defaults() -> None:
    assert classify_transaction(None, None) == Classification("Revenue", None, None)
    assert classify_transaction(float("nan"), "") == Classification("Revenue", None, None)


def test_classify_transactions_adds_columns_and_counts_gaps() -> None:
    df = pd.DataFrame(
        {
            "transaction_code": ["CREDIT", "CREDIT", "CREDIT", "DEBIT"],
            "description": [
                "ELECTRONIC DEPOSIT BANKCARD 1",
                "MOBILE CHECK DEPOSIT",
                "ELECTRONIC DEPOSIT VRBO",
                "WIRE FROM SOMEWHERE",
            ],
        }
    )

    out = classify_transactions(df)

    assert list(out["transaction_type"]) == ["Revenue", "CashInjection", "Revenue", "Revenue"]
    assert out["revenue_type"].isna().tolist() == [False, True, False, True]
    assert out["revenue_type"].dropna().tolist() == ["Retail", "Hospitality"]
    assert out["revenue_source"].dropna().tolist() == ["WD"]
    assert out["revenue_source"].isna().sum() == 3
    assert "transaction_type" not in df.columns
    assert count_classification_gaps(out) == 1
