"""
Altcoin Season Repository

The altcoin_season table is a snapshot: each scrape replaces every row.
"""
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select, delete

from database.models import AltcoinSeasonCoin
from .base import BaseRepository


class AltcoinSeasonRepository(BaseRepository[AltcoinSeasonCoin]):
    """Repository for the top-100 performance snapshot."""

    model = AltcoinSeasonCoin

    async def replace_all(
        self,
        coins: list[dict],
        index_score: Optional[int] = None,
        index_label: Optional[str] = None,
    ) -> int:
        """
        Delete the previous snapshot and insert the new rows.

        Args:
            coins: Rows with ticker, performance, direction, rank and
                optional name, logo_url, coingecko_id, price, price_change_24h
            index_score: Headline index score shown on the page
            index_label: Regime label shown on the page

        Returns:
            Number of rows inserted
        """
        await self.session.execute(delete(AltcoinSeasonCoin))

        scraped_at = datetime.now(timezone.utc)
        rows = [
            AltcoinSeasonCoin(
                ticker=coin["ticker"],
                name=coin.get("name"),
                logo_url=coin.get("logo_url"),
                coingecko_id=coin.get("coingecko_id"),
                performance=float(coin["performance"]),
                direction=coin.get("direction") or "outperform",
                rank=coin.get("rank") or i + 1,
                price=coin.get("price"),
                price_change_24h=coin.get("price_change_24h"),
                index_score=index_score,
                index_label=index_label,
                scraped_at=scraped_at,
            )
            for i, coin in enumerate(coins)
        ]
        await self.add_all(rows)
        return len(rows)

    async def list_coins(self, direction: Optional[str] = None) -> Sequence[AltcoinSeasonCoin]:
        """Snapshot rows in chart order."""
        stmt = select(AltcoinSeasonCoin).order_by(AltcoinSeasonCoin.rank)
        if direction:
            stmt = stmt.where(AltcoinSeasonCoin.direction == direction)
        result = await self.session.execute(stmt)
        return result.scalars().all()
