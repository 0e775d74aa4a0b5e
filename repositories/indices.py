"""
Index Repositories

Append-only storage of Fear & Greed and Altcoin Season Score runs.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from sqlalchemy import select, desc

from database.models import FearGreedIndex, AltcoinSeasonScore
from .base import BaseRepository


class _IndexRepository(BaseRepository):
    """Shared queries for index tables."""

    async def add_run(self, **columns) -> object:
        """Insert one run row."""
        return await self.add(self.model(**columns))

    async def get_latest(self) -> Optional[object]:
        """Most recent run."""
        stmt = (
            select(self.model)
            .order_by(desc(self.model.created_at), desc(self.model.id))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_history(self, days: int = 30, limit: int = 500) -> Sequence[object]:
        """Runs from the last N days, newest first."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        stmt = (
            select(self.model)
            .where(self.model.created_at >= cutoff)
            .order_by(desc(self.model.created_at), desc(self.model.id))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()


class FearGreedRepository(_IndexRepository):
    model = FearGreedIndex


class AltcoinSeasonScoreRepository(_IndexRepository):
    model = AltcoinSeasonScore
