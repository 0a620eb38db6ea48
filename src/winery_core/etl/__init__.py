"""Silver load orchestration.

Data Layers
===========

**Bronze** - ``winery_core.bronze``
    Raw CSV exports per feed, read once per run into a BronzeSnapshot.
    Data directory: ``data/a_raw/``

**Silver** - this package
    Datasets rebuilt from scratch on every run (clear, then write):
    - ``order_details``: one row per order line
    - ``dim_customers``: one row per customer (``cust_num``)
    - ``dim_products``: one row per SKU
    - ``revenue``: one row per Revenue bank transaction
    - ``facebook_data`` / ``instagram_data``: one row per date
    - ``mailchimp_email_marketing``: one row per campaign (``unique_id``)
    Data directory: ``data/b_silver/``

Gold aggregations are built downstream from these datasets.
"""

from winery_core.etl.coordinator import (
    SILVER_STAGE_NAMES,
    SILVER_STAGES,
    SilverLoadResult,
    Stage,
    StageError,
    StageResult,
    build_stages,
    run_silver_load,
    run_stage,
)
from winery_core.etl.stores import CsvSilverStore, MemorySilverStore, SilverStore

__all__ = [
    "CsvSilverStore",
    "MemorySilverStore",
    "SILVER_STAGE_NAMES",
    "SILVER_STAGES",
    "SilverLoadResult",
    "SilverStore",
    "Stage",
    "StageError",
    "StageResult",
    "build_stages",
    "run_silver_load",
    "run_stage",
]
