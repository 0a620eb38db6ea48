"""Marketing domain: Facebook, Instagram and Mailchimp metrics.

Example:
    >>> from winery_core.marketing import FACEBOOK, normalize_social
    >>> facebook = normalize_social(raw_facebook_df, FACEBOOK)
"""

from winery_core.marketing.normalize import (
    EMAIL_COLUMNS,
    FACEBOOK,
    INSTAGRAM,
    SOCIAL_COLUMNS,
    SocialFeed,
    check_unique_keys,
    normalize_email,
    normalize_social,
)

__all__ = [
    "EMAIL_COLUMNS",
    "FACEBOOK",
    "INSTAGRAM",
    "SOCIAL_COLUMNS",
    "SocialFeed",
    "check_unique_keys",
    "normalize_email",
    "normalize_social",
]
