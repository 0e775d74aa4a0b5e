"""
SQLAlchemy Models

Usage:
    from database.models import FearGreedIndex, News
"""
from .base import Base, CreatedAtMixin
from .indices import FearGreedIndex, AltcoinSeasonScore
from .news import News
from .altcoin_season import AltcoinSeasonCoin

__all__ = [
    "Base",
    "CreatedAtMixin",
    "FearGreedIndex",
    "AltcoinSeasonScore",
    "News",
    "AltcoinSeasonCoin",
]
