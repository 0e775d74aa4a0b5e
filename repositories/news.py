"""
News Repository

Tracks headlines the news monitor has already sent.
"""
from typing import Optional, Sequence

from sqlalchemy import select, desc

from database.models import News
from .base import BaseRepository


class NewsRepository(BaseRepository[News]):
    """Repository for the news table."""

    model = News

    async def link_exists(self, link: str) -> bool:
        stmt = select(News.id).where(News.link == link).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def add_news(self, site_name: str, category: str, title: str, link: str) -> Optional[News]:
        """
        Insert a headline.

        Returns:
            The new row, or None when the link is already stored
        """
        if await self.link_exists(link):
            return None
        return await self.add(News(site_name=site_name, category=category, title=title, link=link))

    async def get_recent(
        self,
        limit: int = 50,
        category: Optional[str] = None,
    ) -> Sequence[News]:
        stmt = select(News).order_by(desc(News.created_at), desc(News.id)).limit(limit)
        if category:
            stmt = stmt.where(News.category == category)
        result = await self.session.execute(stmt)
        return result.scalars().all()
