"""Example: Full silver load from the raw winery exports

This example demonstrates how to rebuild the silver layer from Python instead
of the CLI:
1. Read every raw feed into a bronze snapshot (Bronze)
2. Rebuild each silver dataset, one stage at a time (Silver)
3. Run the silver QA checks on what was written

Prerequisites:
- Place the raw CSV exports under data/a_raw/<feed>/ (order_lines,
  bank_transactions, facebook, instagram, mailchimp)
"""

from pathlib import Path

from winery_core import DataPaths
from winery_core.bronze import load_bronze
from winery_core.etl import CsvSilverStore, run_silver_load
from winery_core.qa import run_silver_qa
from winery_core.revenue import RandomAmountMasker

paths = DataPaths.from_root(Path("data"))
paths.ensure_dirs()

snapshot = load_bronze(paths)
store = CsvSilverStore(paths.silver)

# Seeded masking makes two runs over the same exports identical
result = run_silver_load(snapshot, store, masker=RandomAmountMasker(seed=42))

print(result.to_frame())

for stage in result.failed:
    print(f"{stage.stage_name} failed during {stage.error.state}: {stage.error.message}")

revenue = result.stage("revenue")
if revenue.success:
    print(f"\nUnclassified revenue rows: {revenue.details['classification_gaps']}")

# Run QA checks on the datasets that were written
print("\nRunning QA checks...")
written = {s.stage_name: store.read(s.stage_name) for s in result.stages if s.success}
qa = run_silver_qa(written)

if qa.has_issues:
    for key in qa.summary["failed_checks"]:
        print(f"  {key}: {qa.summary['issue_counts'][key]} rows")
        print(qa.issues[key].head())
else:
    print("  No issues found")
