"""Shared fixtures: a small but complete bronze snapshot."""

import pandas as pd
import pytest

from winery_core.bronze import BronzeSnapshot


@pytest.fixture
def raw_order_lines() -> pd.DataFrame:
    """POS order lines with duplicated customer/product attributes."""
    return pd.DataFrame(
        {
            "order_num": ["5001", "5001", "5002", "5003", "5004"],
            "order_date": ["2024-01-10", "2024-01-10", "2024-02-20", "2024-03-01", "2024-03-05"],
            "cust_num": ["C100", "C100", "C100", "C200", None],
            "prod_sku": ["CAB-21", "ROSE-22", "CAB-21", "CAB-21", "ROSE-22"],
            "quantity": ["2", "1", "1", "6", "1"],
            "prod_sales_price": ["40", "22", "42", "38", "22"],
            "prod_item_discount": ["0", "0", "0", "12", "0"],
            "order_subtotal": ["102", "102", "42", "216", "22"],
            "order_taxes": ["8.16", "8.16", "3.36", "17.28", "1.76"],
            "order_total": ["110.16", "110.16", "45.36", "233.28", "23.76"],
            "cust_status": [None, None, "Club", None, None],
            "cust_first_name": ["Maria", "Maria", "Maria", "Guest", None],
            "cust_last_name": ["Lopez", "Lopez", "Lopez", None, None],
            "cust_birth_date": ["1975-07-04", "1975-07-04", "1975-07-04", None, None],
            "cust_email": ["maria@mail.com", "maria@mail.com", "maria@mail.com", "x@y", None],
            "cust_city": ["Napa", "Napa", "Napa", None, None],
            "cust_state": ["CA", "CA", "CA", None, None],
            "cust_zip": ["94558", "94558", "94558", None, None],
            "prod_retail_price": ["40.00", "22.00", "42.00", "42.00", "0"],
        }
    )


@pytest.fixture
def raw_bank_transactions() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": ["2024-01-10", "2024-01-11", "2024-01-12", "2024-01-13", "2024-01-14"],
            "transaction_code": ["CREDIT", "CREDIT", "CREDIT", "CREDIT", "DEBIT"],
            "description": [
                "ELECTRONIC DEPOSIT BANKCARD #1234",
                "ZELLE INSTANT PMT FROM CUSTOMER JOHN",
                "ELECTRONIC DEPOSIT AIRBNB PAYMENTS",
                "EVENTBRITE PAYOUT",
                "SUPPLIES STORE",
            ],
            "amount": ["110.16", "500.00", "320.00", "150.00", None],
        }
    )


@pytest.fixture
def raw_facebook() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "facebook_date": ["2024-01-01", "2024-01-02"],
            "facebook_follows": ["1", "0"],
            "facebook_interactions": ["25", "31"],
            "facebook_link_clicks": ["4", "6"],
            "facebook_reach": ["800", "950"],
            "facebook_visits": ["12", "15"],
        }
    )


@pytest.fixture
def raw_instagram() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "instagram_date": ["2024-01-01", "2024-01-02"],
            "instagram_follows": [None, "3"],
            "instagram_interaction": ["40", "38"],
            "instagram_link_clicks": ["2", "1"],
            "instagram_reach": ["1100", "990"],
            "instagram_visits": ["20", "17"],
        }
    )


@pytest.fixture
def raw_mailchimp() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "unique_id": ["c1", "c2"],
            "email_audience": ["Wine Club", "Newsletter"],
            "send_date": ["2024-01-05 09:00:00", "2024-01-19 17:45:00"],
            "send_weekday": ["Friday", "Friday"],
            "total_recipients": ["1200", "3400"],
            "successful_deliveries": ["1190", "3350"],
            "soft_bounces": ["6", "30"],
            "hard_bounces": ["4", "20"],
            "total_bounces": ["10", "50"],
            "times_forwarded": ["2", None],
            "forwarded_opens": ["1", None],
            "unique_opens": ["500", "1200"],
            "open_rate": ["42.0", "35.8"],
            "total_opens": ["800", "1700"],
            "unique_clicks": ["60", "90"],
            "click_rate": ["5.0", "2.7"],
            "total_clicks": ["85", "120"],
            "email_unsubscribes": ["2", "9"],
            "abuse_complaints": [None, "1"],
            "times_liked_on_facebook": [None, None],
        }
    )


@pytest.fixture
def bronze_snapshot(
    raw_order_lines: pd.DataFrame,
    raw_bank_transactions: pd.DataFrame,
    raw_facebook: pd.DataFrame,
    raw_instagram: pd.DataFrame,
    raw_mailchimp: pd.DataFrame,
) -> BronzeSnapshot:
    return BronzeSnapshot(
        order_lines=raw_order_lines,
        bank_transactions=raw_bank_transactions,
        facebook=raw_facebook,
        instagram=raw_instagram,
        mailchimp=raw_mailchimp,
    )
