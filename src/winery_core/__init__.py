"""Winery Core ETL - bronze to silver transformation for winery operations data.

This package turns raw, duplicated and inconsistently labeled feeds into a
clean silver layer ready for reporting:

- **Bronze (raw)**: POS order lines, bank feed, Facebook/Instagram/Mailchimp exports
- **Silver (clean)**: deduplicated dimensions, classified revenue, normalized metrics
- **Gold (reporting)**: built downstream, not part of this package

Module Structure:
    winery_core.revenue: Bank-feed classification and amount masking
    winery_core.customers: Customer dimension resolver
    winery_core.products: Product dimension resolver
    winery_core.orders: Order-details projection
    winery_core.marketing: Social and email metric normalization
    winery_core.etl: Load coordinator, silver stores, CLI
    winery_core.qa: Silver quality checks
    winery_core.bronze: Raw feed snapshot loading
    winery_core.config: DataPaths configuration

Quick Start:
    >>> from winery_core import DataPaths
    >>> from winery_core.bronze import load_bronze
    >>> from winery_core.etl import CsvSilverStore, run_silver_load
    >>> from winery_core.revenue import RandomAmountMasker
    >>>
    >>> paths = DataPaths.from_root("data")
    >>> result = run_silver_load(
    ...     load_bronze(paths),
    ...     CsvSilverStore(paths.silver),
    ...     masker=RandomAmountMasker(seed=42),
    ... )
    >>> print(result.to_frame())

Grain Reference:
    - order_details: one row per POS order line
    - dim_customers: one row per cust_num
    - dim_products: one row per prod_sku
    - revenue: one row per Revenue bank transaction
    - facebook_data / instagram_data: one row per date
    - mailchimp_email_marketing: one row per unique_id
"""

__version__ = "0.1.0"

from winery_core.config import DataPaths
from winery_core.exceptions import (
    ConfigError,
    DataQualityError,
    DuplicateKeyError,
    ETLError,
    InputError,
    StageFailure,
    WineryAPIError,
)

__all__ = [
    "ConfigError",
    "DataPaths",
    "DataQualityError",
    "DuplicateKeyError",
    "ETLError",
    "InputError",
    "StageFailure",
    "WineryAPIError",
    "__version__",
]
