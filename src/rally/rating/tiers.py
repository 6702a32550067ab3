"""Rating tier labels (Bronze 3 up to Gold 1)."""

import bisect

from rally.rating.constants import TIER_THRESHOLDS, TOP_TIER

_BOUNDS = [bound for bound, _ in TIER_THRESHOLDS]
_LABELS = [label for _, label in TIER_THRESHOLDS] + [TOP_TIER]


def lookup_tier(rating: float) -> str:
    """
    Tier label for a rating.

    Each tier covers [previous bound, bound). Anything below the first bound
    is the lowest tier and anything at or above the last is the top tier,
    so every finite rating maps to a label.

    Examples:
        lookup_tier(1000)  # -> "Silver 3"
        lookup_tier(1549)  # -> "Gold 1"
    """
    return _LABELS[bisect.bisect_right(_BOUNDS, rating)]


def tier_labels() -> list[str]:
    """All tier labels, lowest first."""
    return list(_LABELS)
