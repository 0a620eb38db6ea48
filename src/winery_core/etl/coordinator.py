"""Load coordinator: rebuild every silver dataset from a bronze snapshot.

Stages run one at a time, in a fixed order. For each stage the coordinator:

1. clears the destination dataset,
2. runs the stage transform on a private copy of its bronze feed,
3. writes the result and records the elapsed time.

A failing stage is captured as a StageError and the run moves on to the next
stage; the failure is never reported as success. Because the destination is
cleared first, a failed stage leaves its dataset empty until the next run.

Example:
    >>> from winery_core.bronze import load_bronze
    >>> from winery_core.etl import CsvSilverStore, run_silver_load
    >>> result = run_silver_load(load_bronze(paths), CsvSilverStore(paths.silver))
    >>> result.raise_for_failures()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Any

import pandas as pd

from winery_core.bronze import BronzeSnapshot
from winery_core.customers import resolve_customers
from winery_core.etl.stores import SilverStore
from winery_core.exceptions import ConfigError, ETLError, InputError, WineryAPIError
from winery_core.marketing import FACEBOOK, INSTAGRAM, normalize_email, normalize_social
from winery_core.metadata import StageMetadata
from winery_core.orders import build_order_details
from winery_core.products import resolve_products
from winery_core.revenue import AmountMasker, build_revenue
from winery_core.utils import format_duration

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "UNEXPECTED"


@dataclass(frozen=True)
class Stage:
    """One silver dataset rebuild.

    Attributes:
        name: Destination dataset name.
        feed: BronzeSnapshot attribute the stage reads.
        build: Pure transform from the bronze feed to the silver dataset.
    """

    name: str
    feed: str
    build: Callable[[pd.DataFrame], pd.DataFrame]


@dataclass(frozen=True)
class StageError:
    """Error captured from a failed stage.

    Attributes:
        message: Exception message.
        code: Exception ``code`` (e.g. "DUPLICATE_KEY") or "UNEXPECTED".
        state: Phase that failed: "clear", "transform" or "write".
    """

    message: str
    code: str
    state: str


@dataclass
class StageResult:
    """Outcome of one stage."""

    stage_name: str
    duration_seconds: float
    success: bool
    rows: int = 0
    error: StageError | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class SilverLoadResult:
    """Outcome of a full silver load."""

    stages: list[StageResult]
    duration_seconds: float

    @property
    def success(self) -> bool:
        return all(s.success for s in self.stages)

    @property
    def failed(self) -> list[StageResult]:
        return [s for s in self.stages if not s.success]

    def stage(self, name: str) -> StageResult:
        for s in self.stages:
            if s.stage_name == name:
                return s
        raise KeyError(name)

    def to_frame(self) -> pd.DataFrame:
        """One row per stage, for logging or display."""
        return pd.DataFrame(
            [
                {
                    "stage_name": s.stage_name,
                    "success": s.success,
                    "rows": s.rows,
                    "duration_seconds": s.duration_seconds,
                    "error_code": s.error.code if s.error else None,
                    "error_message": s.error.message if s.error else None,
                }
                for s in self.stages
            ]
        )

    def raise_for_failures(self) -> None:
        """Raise ETLError naming every failed stage, if any."""
        if self.failed:
            names = ", ".join(f"{s.stage_name} ({s.error.code})" for s in self.failed if s.error)
            raise ETLError(f"Silver load failed for: {names}")


def build_stages(masker: AmountMasker | None = None) -> tuple[Stage, ...]:
    """Return the silver stages in load order.

    Args:
        masker: Amount masking strategy for the revenue stage.
    """
    return (
        Stage("order_details", "order_lines", build_order_details),
        Stage("dim_customers", "order_lines", resolve_customers),
        Stage("dim_products", "order_lines", resolve_products),
        Stage("revenue", "bank_transactions", partial(build_revenue, masker=masker)),
        Stage("facebook_data", "facebook", partial(normalize_social, feed=FACEBOOK)),
        Stage("instagram_data", "instagram", partial(normalize_social, feed=INSTAGRAM)),
        Stage("mailchimp_email_marketing", "mailchimp", normalize_email),
    )


SILVER_STAGES = build_stages()
SILVER_STAGE_NAMES = tuple(s.name for s in SILVER_STAGES)


def stage_details(name: str, df: pd.DataFrame) -> dict[str, Any]:
    """Collect the per-stage statistics a transform left in ``df.attrs``.

    Records a transform excluded are also reported under ``InputError.code``
    (e.g. ``{"INPUT_ERROR": 3}``), so callers can tell exclusions from failures.
    """
    details = dict(df.attrs)
    excluded = int(details.get("excluded_rows", 0))
    if excluded:
        details[InputError.code] = excluded
        logger.warning("Stage %s excluded %d records [%s]", name, excluded, InputError.code)
    return details


def run_stage(stage: Stage, snapshot: BronzeSnapshot, store: SilverStore) -> StageResult:
    """Clear, rebuild and write one dataset; never raises."""
    start = time.perf_counter()
    state = "clear"
    try:
        logger.info(">> Truncating dataset: %s", stage.name)
        store.clear(stage.name)

        state = "transform"
        logger.info(">> Building dataset: %s", stage.name)
        df = stage.build(snapshot.feed(stage.feed))

        state = "write"
        store.write(stage.name, df)
    except WineryAPIError as e:
        error = StageError(message=str(e), code=e.code, state=state)
        logger.error("Stage %s failed during %s: %s", stage.name, state, e)
    except Exception as e:
        error = StageError(message=str(e), code=UNEXPECTED_ERROR, state=state)
        logger.exception("Stage %s failed unexpectedly during %s", stage.name, state)
    else:
        duration = time.perf_counter() - start
        logger.info(">> %s: %d rows in %s", stage.name, len(df), format_duration(duration))
        return StageResult(
            stage_name=stage.name,
            duration_seconds=duration,
            success=True,
            rows=len(df),
            details=stage_details(stage.name, df),
        )

    return StageResult(
        stage_name=stage.name,
        duration_seconds=time.perf_counter() - start,
        success=False,
        error=error,
    )


def run_silver_load(
    snapshot: BronzeSnapshot,
    store: SilverStore,
    masker: AmountMasker | None = None,
    stages: Sequence[str] | None = None,
) -> SilverLoadResult:
    """Rebuild silver datasets from a bronze snapshot.

    Args:
        snapshot: Raw feeds for this run.
        store: Destination for the silver datasets.
        masker: Amount masking strategy for revenue (default: unseeded random).
        stages: Optional subset of stage names; load order is preserved.

    Returns:
        SilverLoadResult with one StageResult per executed stage.

    Raises:
        ConfigError: If ``stages`` names an unknown stage.
    """
    selected = build_stages(masker)
    if stages is not None:
        unknown = sorted(set(stages) - set(SILVER_STAGE_NAMES))
        if unknown:
            raise ConfigError(f"Unknown stages: {unknown}. Known: {list(SILVER_STAGE_NAMES)}")
        selected = tuple(s for s in selected if s.name in set(stages))

    logger.info("Loading silver layer (%d stages)", len(selected))
    batch_start = time.perf_counter()

    results = []
    for stage in selected:
        result = run_stage(stage, snapshot, store)
        store.record(
            StageMetadata(
                dataset=stage.name,
                rows=result.rows,
                last_run=datetime.now().isoformat(),
                status="ok" if result.success else "failed",
                duration_seconds=round(result.duration_seconds, 3),
                error=result.error.message if result.error else None,
            )
        )
        results.append(result)

    load = SilverLoadResult(stages=results, duration_seconds=time.perf_counter() - batch_start)
    if load.success:
        logger.info("Silver load completed in %s", format_duration(load.duration_seconds))
    else:
        logger.error(
            "Silver load finished with %d failed stage(s) in %s",
            len(load.failed),
            format_duration(load.duration_seconds),
        )
    return load
