"""
Constants module - shared enums and label bands.
"""
from .enums import (
    TaskName,
    RunState,
    SessionType,
    NewsCategory,
    PerformanceDirection,
)
from .labels import (
    FEAR_GREED_LABELS,
    ALTCOIN_SEASON_LABELS,
    FEAR_GREED_REFERENCE_LABELS,
    ALTCOIN_SEASON_REFERENCE_LABELS,
    label_for_score,
)

__all__ = [
    # Enums
    "TaskName",
    "RunState",
    "SessionType",
    "NewsCategory",
    "PerformanceDirection",
    # Labels
    "FEAR_GREED_LABELS",
    "ALTCOIN_SEASON_LABELS",
    "FEAR_GREED_REFERENCE_LABELS",
    "ALTCOIN_SEASON_REFERENCE_LABELS",
    "label_for_score",
]
