"""QA module for silver data quality.

Example:
    >>> from winery_core.etl import MemorySilverStore, run_silver_load
    >>> from winery_core.qa import run_silver_qa
    >>>
    >>> store = MemorySilverStore()
    >>> run_silver_load(snapshot, store)
    >>> result = run_silver_qa(store.datasets)
    >>> if result.has_issues:
    ...     print(result.summary["failed_checks"])

"""

from winery_core.qa.api import SilverQAResult, run_silver_qa

__all__ = ["SilverQAResult", "run_silver_qa"]
