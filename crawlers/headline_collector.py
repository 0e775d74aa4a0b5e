"""
Headline Collector - one headline per site until a target count is reached.

The pool is shuffled and split into primary sites (the first `target`) and
backup sites (the rest). Primary sites are all tried; backups are drawn only
while fewer than `target` headlines were collected. A link collected earlier
in the run is never picked again.
"""
import asyncio
import random
from typing import Optional, Sequence

from loguru import logger

from .base_crawler import Headline, SiteRule
from .extractor import extract_headlines


class HeadlineCollector:
    """Scrape headlines from a pool of sites through a page renderer."""

    def __init__(
        self,
        renderer,
        sites: Sequence[SiteRule],
        target: int = 5,
        site_delay: float = 3.0,
        rng: Optional[random.Random] = None,
    ):
        self.renderer = renderer
        self.sites = list(sites)
        self.target = target
        self.site_delay = site_delay
        self.rng = rng or random.Random()

    async def candidates(self, site: SiteRule) -> list[Headline]:
        """All headline candidates on a site, newest first; [] on any failure."""
        try:
            html = await self.renderer.render(site.url, wait_for=site.wait_for)
            found = extract_headlines(html, site)
        except Exception as e:
            logger.warning(f"[{site.name}] Scrape failed: {type(e).__name__}: {e}")
            return []

        logger.debug(f"[{site.name}] {len(found)} candidates")
        return found

    async def pick(self, site: SiteRule, seen_links: set[str]) -> Optional[Headline]:
        """First candidate on a site whose link is not in seen_links."""
        for headline in await self.candidates(site):
            if headline.link not in seen_links:
                logger.info(f"[{site.name}] {headline.title[:55]}...")
                return headline
        logger.info(f"[{site.name}] No new headline found")
        return None

    def split_pool(self) -> tuple[list[SiteRule], list[SiteRule]]:
        shuffled = list(self.sites)
        self.rng.shuffle(shuffled)
        return shuffled[:self.target], shuffled[self.target:]

    async def collect(self) -> list[Headline]:
        """Collect up to `target` headlines with unique links."""
        primary, backup = self.split_pool()
        logger.info(f"Primary sites: {', '.join(s.name for s in primary)}")
        logger.info(f"Backup sites: {', '.join(s.name for s in backup) or '-'}")

        headlines: list[Headline] = []
        seen: set[str] = set()

        async def visit(site: SiteRule):
            headline = await self.pick(site, seen)
            if headline:
                headlines.append(headline)
                seen.add(headline.link)

        for i, site in enumerate(primary):
            if i:
                await asyncio.sleep(self.site_delay)
            await visit(site)

        if len(headlines) < self.target and backup:
            logger.warning(f"Only {len(headlines)}/{self.target} headlines, rotating to backup sites")
            for site in backup:
                if len(headlines) >= self.target:
                    break
                await asyncio.sleep(self.site_delay)
                await visit(site)

        logger.info(f"Headlines collected: {len(headlines)}/{self.target}")
        return headlines
