r"""CLI entry point for the silver load.

Examples:
    Command-line usage:
        # Rebuild every silver dataset under ./data
        python -m winery_core.etl.build_silver_dataset

        # Reproducible amount masking
        python -m winery_core.etl.build_silver_dataset --seed 42

        # Only the customer and product dimensions, amounts unmasked
        python -m winery_core.etl.build_silver_dataset \\
            --stage dim_customers --stage dim_products --no-mask

"""

from __future__ import annotations

import argparse
import logging
import sys

from winery_core.bronze import load_bronze
from winery_core.config import DataPaths
from winery_core.etl.coordinator import SILVER_STAGE_NAMES, run_silver_load
from winery_core.etl.stores import CsvSilverStore
from winery_core.exceptions import ConfigError
from winery_core.qa import run_silver_qa
from winery_core.revenue import IdentityAmountMasker, RandomAmountMasker
from winery_core.utils import format_duration


def main(argv: list[str] | None = None) -> int:
    """Execute the build_silver_dataset command-line tool.

    Command-line arguments:
        --data-root: Root directory for pipeline data (default: "data")
        --seed: Seed for revenue amount masking
        --no-mask: Keep real revenue amounts
        --stage: Stage to run (repeatable; default: all)
        --verbose: Enable verbose logging (DEBUG level)

    Returns:
        Process exit code: 0 when every stage succeeded, 1 otherwise.
    """
    parser = argparse.ArgumentParser(
        description="Rebuild the silver layer from the raw (bronze) feeds."
    )
    parser.add_argument(
        "--data-root",
        type=str,
        default="data",
        help="Root directory for pipeline data (default: ./data)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random revenue amount masking.",
    )
    parser.add_argument(
        "--no-mask",
        action="store_true",
        help="Do not mask revenue amounts.",
    )
    parser.add_argument(
        "--stage",
        action="append",
        choices=SILVER_STAGE_NAMES,
        help="Stage to run; repeat for several (default: all stages).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level).",
    )

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    paths = DataPaths.from_root(args.data_root)
    paths.ensure_dirs()
    masker = IdentityAmountMasker() if args.no_mask else RandomAmountMasker(seed=args.seed)

    print(f"Data root: {paths.data_root}")
    print(f"Output: {paths.silver}")
    print()

    snapshot = load_bronze(paths)
    store = CsvSilverStore(paths.silver)
    try:
        result = run_silver_load(snapshot, store, masker=masker, stages=args.stage)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    for stage in result.stages:
        status = "ok" if stage.success else f"FAILED [{stage.error.code}] {stage.error.message}"
        print(
            f"  {stage.stage_name:<28} {stage.rows:>8} rows "
            f"{format_duration(stage.duration_seconds):>8}  {status}"
        )
    print(f"\nTotal load duration: {format_duration(result.duration_seconds)}")

    written = {}
    for stage in result.stages:
        if stage.success:
            written[stage.stage_name] = store.read(stage.stage_name)
    qa = run_silver_qa(written)
    for key in qa.summary["failed_checks"]:
        print(f"QA WARNING: {key}: {qa.summary['issue_counts'][key]} rows")

    if not result.success:
        print(f"ERROR: {len(result.failed)} stage(s) failed", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
