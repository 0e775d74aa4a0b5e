"""
SQLAlchemy-based Repositories

Usage:
    from repositories import FearGreedRepository
    from database import get_session

    async with get_session() as session:
        repo = FearGreedRepository(session)
        latest = await repo.get_latest()
"""

from .base import BaseRepository
from .indices import FearGreedRepository, AltcoinSeasonScoreRepository
from .news import NewsRepository
from .altcoin_season import AltcoinSeasonRepository

__all__ = [
    "BaseRepository",
    "FearGreedRepository",
    "AltcoinSeasonScoreRepository",
    "NewsRepository",
    "AltcoinSeasonRepository",
]
