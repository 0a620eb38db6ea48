"""Silver layer: social and email marketing metrics.

Marketing exports need only light cleansing: rename the platform-prefixed
bronze columns, coerce numbers, fill the metrics that are optional with zero
and split timestamps. The one hard rule is key uniqueness (one row per date
for a social platform, one row per ``unique_id`` for email campaigns).
Duplicate keys mean the upstream export is corrupt, so they raise
DuplicateKeyError instead of being merged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pandas as pd

from winery_core.exceptions import DuplicateKeyError
from winery_core.utils import (
    clean_text,
    require_columns,
    require_rows,
    to_date,
    to_float,
    to_int,
    to_timestamp,
)

logger = logging.getLogger(__name__)

SOCIAL_METRICS = ["follows", "interactions", "link_clicks", "reach", "visits"]
SOCIAL_COLUMNS = ["date"] + SOCIAL_METRICS


@dataclass(frozen=True)
class SocialFeed:
    """Column layout of one social platform's daily export.

    Attributes:
        platform: Dataset name, e.g. "facebook_data".
        columns: Bronze column name -> silver column name.
        optional: Silver metrics that default to zero when missing.
    """

    platform: str
    columns: dict[str, str]
    optional: tuple[str, ...] = field(default_factory=tuple)

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(m for m in SOCIAL_METRICS if m not in self.optional)


FACEBOOK = SocialFeed(
    platform="facebook_data",
    columns={
        "facebook_date": "date",
        "facebook_follows": "follows",
        "facebook_interactions": "interactions",
        "facebook_link_clicks": "link_clicks",
        "facebook_reach": "reach",
        "facebook_visits": "visits",
    },
)

INSTAGRAM = SocialFeed(
    platform="instagram_data",
    columns={
        "instagram_date": "date",
        "instagram_follows": "follows",
        "instagram_interaction": "interactions",
        "instagram_link_clicks": "link_clicks",
        "instagram_reach": "reach",
        "instagram_visits": "visits",
    },
    optional=("follows",),
)

EMAIL_COUNT_COLUMNS = [
    "total_recipients",
    "successful_deliveries",
    "soft_bounces",
    "hard_bounces",
    "total_bounces",
    "times_forwarded",
    "forwarded_opens",
    "unique_opens",
    "total_opens",
    "unique_clicks",
    "total_clicks",
    "email_unsubscribes",
    "abuse_complaints",
    "times_liked_on_facebook",
]
EMAIL_RATE_COLUMNS = ["open_rate", "click_rate"]
EMAIL_OPTIONAL_COUNTS = [
    "times_forwarded",
    "forwarded_opens",
    "abuse_complaints",
    "times_liked_on_facebook",
]
EMAIL_BRONZE_COLUMNS = [
    "unique_id",
    "email_audience",
    "send_date",
    "send_weekday",
    *EMAIL_COUNT_COLUMNS,
    *EMAIL_RATE_COLUMNS,
]
EMAIL_COLUMNS = [
    "unique_id",
    "email_audience",
    "send_date",
    "send_time",
    "send_weekday",
    "total_recipients",
    "successful_deliveries",
    "soft_bounces",
    "hard_bounces",
    "total_bounces",
    "times_forwarded",
    "forwarded_opens",
    "unique_opens",
    "open_rate",
    "total_opens",
    "unique_clicks",
    "click_rate",
    "total_clicks",
    "email_unsubscribes",
    "abuse_complaints",
    "times_liked_on_facebook",
]


def check_unique_keys(df: pd.DataFrame, key: str, dataset: str) -> None:
    """Raise DuplicateKeyError if any key value appears more than once."""
    dupes = df.loc[df[key].duplicated(keep=False), key]
    if not dupes.empty:
        raise DuplicateKeyError(dataset, set(dupes))


def normalize_social(df: pd.DataFrame, feed: SocialFeed) -> pd.DataFrame:
    """Normalize one social platform's daily metrics.

    Args:
        df: Raw platform export with the bronze column names of ``feed``.
        feed: Platform layout (FACEBOOK or INSTAGRAM).

    Returns:
        DataFrame with SOCIAL_COLUMNS sorted by date; metrics are int64.

    Raises:
        StageFailure: If the export is empty.
        DataQualityError: If bronze columns are missing.
        DuplicateKeyError: If a date appears more than once.
    """
    require_rows(df, feed.platform)
    require_columns(df, list(feed.columns), feed.platform)

    out = df[list(feed.columns)].rename(columns=feed.columns)
    out["date"] = out["date"].map(to_date)
    for metric in SOCIAL_METRICS:
        out[metric] = pd.to_numeric(out[metric].map(to_int), errors="coerce")
    for metric in feed.optional:
        out[metric] = out[metric].fillna(0)

    usable = out["date"].notna() & out[list(feed.required)].notna().all(axis=1)
    excluded = int((~usable).sum())
    if excluded:
        logger.warning(
            "%s: excluding %d rows with a missing date or metric", feed.platform, excluded
        )
    out = out[usable]

    check_unique_keys(out, "date", feed.platform)

    out = out[SOCIAL_COLUMNS].sort_values("date", kind="mergesort").reset_index(drop=True)
    out[SOCIAL_METRICS] = out[SOCIAL_METRICS].astype("int64")
    out.attrs["excluded_rows"] = excluded
    return out


def normalize_email(df: pd.DataFrame, dataset: str = "mailchimp_email_marketing") -> pd.DataFrame:
    """Normalize Mailchimp campaign exports.

    Splits the ``send_date`` timestamp into ``send_date`` (date) and
    ``send_time`` ("HH:MM:SS"), fills optional counts with zero and keeps the
    remaining counts as nullable integers.

    Rows without a unique_id, an email audience or a parseable send date are
    excluded.

    Raises:
        StageFailure: If the export is empty.
        DataQualityError: If bronze columns are missing.
        DuplicateKeyError: If a unique_id appears more than once.
    """
    require_rows(df, dataset)
    require_columns(df, EMAIL_BRONZE_COLUMNS, dataset)

    out = df[EMAIL_BRONZE_COLUMNS].copy()
    out["unique_id"] = out["unique_id"].map(clean_text)
    out["email_audience"] = out["email_audience"].map(clean_text)
    out["send_weekday"] = out["send_weekday"].map(clean_text)

    sent_at = out["send_date"].map(to_timestamp)
    out["send_date"] = sent_at.map(lambda ts: None if pd.isna(ts) else ts.date())
    out["send_time"] = sent_at.map(lambda ts: None if pd.isna(ts) else ts.strftime("%H:%M:%S"))

    for col in EMAIL_COUNT_COLUMNS:
        out[col] = pd.to_numeric(out[col].map(to_int), errors="coerce").astype("Int64")
    for col in EMAIL_OPTIONAL_COUNTS:
        out[col] = out[col].fillna(0)
    for col in EMAIL_RATE_COLUMNS:
        out[col] = pd.to_numeric(out[col].map(to_float), errors="coerce")

    usable = (
        out["unique_id"].notna() & out["email_audience"].notna() & out["send_date"].notna()
    )
    excluded = int((~usable).sum())
    if excluded:
        logger.warning("%s: excluding %d incomplete campaign rows", dataset, excluded)
    out = out[usable]

    check_unique_keys(out, "unique_id", dataset)

    out = out[EMAIL_COLUMNS].sort_values(["send_date", "unique_id"], kind="mergesort")
    out = out.reset_index(drop=True)
    out.attrs["excluded_rows"] = excluded
    return out
