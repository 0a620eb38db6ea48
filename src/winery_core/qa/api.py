"""Public API for silver-layer QA.

This module runs the silver quality checks in memory over a mapping of
dataset name to DataFrame, without reading or writing any files.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

import pandas as pd

from winery_core.qa.checks import (
    detect_blank_email_fields,
    detect_duplicate_keys,
    detect_negative_tenure,
    detect_null_metrics,
    detect_null_order_numbers,
    detect_quality_flag_mismatch,
    detect_retail_missing_source,
    detect_revenue_missing_type,
    detect_source_outside_retail,
)

logger = logging.getLogger(__name__)

Check = Callable[[pd.DataFrame], pd.DataFrame]

CHECKS: tuple[tuple[str, str, Check], ...] = (
    ("dim_customers", "duplicate_cust_num", lambda df: detect_duplicate_keys(df, "cust_num")),
    ("dim_customers", "quality_flag_mismatch", detect_quality_flag_mismatch),
    ("dim_customers", "negative_tenure", detect_negative_tenure),
    ("dim_products", "duplicate_prod_sku", lambda df: detect_duplicate_keys(df, "prod_sku")),
    ("order_details", "null_order_num", detect_null_order_numbers),
    ("revenue", "missing_revenue_type", detect_revenue_missing_type),
    ("revenue", "retail_missing_source", detect_retail_missing_source),
    ("revenue", "source_outside_retail", detect_source_outside_retail),
    ("facebook_data", "duplicate_dates", lambda df: detect_duplicate_keys(df, "date")),
    ("facebook_data", "null_metrics", detect_null_metrics),
    ("instagram_data", "duplicate_dates", lambda df: detect_duplicate_keys(df, "date")),
    ("instagram_data", "null_metrics", detect_null_metrics),
    (
        "mailchimp_email_marketing",
        "duplicate_unique_id",
        lambda df: detect_duplicate_keys(df, "unique_id"),
    ),
    ("mailchimp_email_marketing", "blank_fields", detect_blank_email_fields),
)


@dataclass
class SilverQAResult:
    """Result of the silver QA checks.

    Attributes:
        summary: Counts per check plus the datasets that were checked/skipped.
        issues: ``"<dataset>.<check>"`` -> offending rows, only for failed checks.
    """

    summary: dict
    issues: dict[str, pd.DataFrame]

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)


def run_silver_qa(datasets: Mapping[str, pd.DataFrame]) -> SilverQAResult:
    """Run every check whose dataset is present in ``datasets``.

    Args:
        datasets: Silver dataset name -> DataFrame. Missing datasets are skipped.

    Returns:
        SilverQAResult.
    """
    issues: dict[str, pd.DataFrame] = {}
    counts: dict[str, int] = {}
    checked: set[str] = set()

    for dataset, name, check in CHECKS:
        df = datasets.get(dataset)
        if df is None:
            continue
        checked.add(dataset)
        found = check(df)
        key = f"{dataset}.{name}"
        counts[key] = len(found)
        if not found.empty:
            issues[key] = found
            logger.warning("QA %s: %d rows", key, len(found))

    skipped = sorted({d for d, _, _ in CHECKS} - checked)
    summary = {
        "checked_datasets": sorted(checked),
        "skipped_datasets": skipped,
        "issue_counts": counts,
        "failed_checks": sorted(issues),
    }
    logger.info(
        "QA complete: %d checks run, %d with issues", len(counts), len(issues)
    )
    return SilverQAResult(summary=summary, issues=issues)
