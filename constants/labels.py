"""
Score label bands.

Each band list is ordered by upper bound; a score gets the label of the
first band whose upper bound it does not exceed.
"""
from typing import Sequence, Tuple

Bands = Sequence[Tuple[float, str]]

# Labels the oracle is asked to use (0-24, 25-44, 45-55, 56-74, 75-100)
FEAR_GREED_LABELS: Bands = (
    (24, "Extreme Fear"),
    (44, "Fear"),
    (55, "Neutral"),
    (74, "Greed"),
    (100, "Extreme Greed"),
)

ALTCOIN_SEASON_LABELS: Bands = (
    (24, "Bitcoin Season"),
    (44, "Mostly Bitcoin"),
    (55, "Neutral"),
    (74, "Mostly Altcoins"),
    (100, "Altcoin Season"),
)

# Labels for reference indices scraped from third-party pages
FEAR_GREED_REFERENCE_LABELS: Bands = (
    (25, "Extreme Fear"),
    (45, "Fear"),
    (55, "Neutral"),
    (75, "Greed"),
    (100, "Extreme Greed"),
)

ALTCOIN_SEASON_REFERENCE_LABELS: Bands = (
    (25, "Bitcoin Season"),
    (50, "Mostly Bitcoin"),
    (75, "Mostly Altcoins"),
    (100, "Altcoin Season"),
)


def label_for_score(score: float, bands: Bands) -> str:
    """Map a 0-100 score to its band label."""
    for upper, label in bands:
        if score <= upper:
            return label
    return bands[-1][1]
