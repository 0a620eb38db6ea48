"""Domain-specific exceptions for the winery silver pipeline.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from WineryAPIError for easy catching. Each class
carries a short ``code`` that the load coordinator reports when a stage fails.
"""

from __future__ import annotations

from collections.abc import Iterable


class WineryAPIError(Exception):
    """Base exception for all winery pipeline errors.

    Users can catch this exception to handle any domain error raised by
    the transformation core.
    """

    code = "WINERY_ERROR"


class ConfigError(WineryAPIError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - An unknown stage name is requested
    """

    code = "CONFIG_ERROR"


class DataQualityError(WineryAPIError):
    """Raised when data quality checks fail.

    This exception is raised when:
    - Required columns are missing from a bronze feed
    - Normalized output would violate a dataset invariant
    """

    code = "DATA_QUALITY"


class InputError(DataQualityError):
    """A single raw record is malformed or misses a required field.

    Transforms exclude such records instead of raising. The load coordinator
    reports the number of excluded records under this ``code`` in
    ``StageResult.details``.
    """

    code = "INPUT_ERROR"


class DuplicateKeyError(DataQualityError):
    """Raised when two normalized records would share a unique key.

    Attributes:
        dataset: Name of the dataset being normalized.
        keys: Sorted list of the duplicated key values.
    """

    code = "DUPLICATE_KEY"

    def __init__(self, dataset: str, keys: Iterable[object]):
        self.dataset = dataset
        self.keys = sorted(keys, key=str)
        preview = ", ".join(str(k) for k in self.keys[:10])
        more = "" if len(self.keys) <= 10 else f" (+{len(self.keys) - 10} more)"
        super().__init__(f"Duplicate keys in {dataset}: {preview}{more}")


class ETLError(WineryAPIError):
    """Raised when an ETL pipeline stage fails."""

    code = "ETL_ERROR"


class StageFailure(ETLError):
    """Raised when a stage cannot run at all.

    This exception is raised when:
    - The bronze feed for the stage has no records
    - The feed is structurally unreadable
    """

    code = "STAGE_FAILURE"
