"""
News Monitor task - one new headline per site, stored and sent to Telegram.

Walks the fixed NEWS_SITES list in order with one browser session per site.
For each site the newest headline whose link is not yet in the news table is
saved and forwarded.

Usage:
    python -m tasks.news_monitor [--cron]
"""
import asyncio
import sys
from typing import Optional, Sequence

from browser import BrowserCashClient, BrowserSessionConfig, PageRenderer
from config import ConfigurationError, require_settings, settings
from crawlers import HeadlineCollector, NEWS_SITES, SiteRule
from database import get_session, try_init_database
from notify import TelegramNotifier
from repositories import NewsRepository
from utils import logger
from .cli import init_task_logging, parse_args, resolve_session_config

REQUIRED_SETTINGS = ("API_KEY",)


async def count_news() -> int:
    """Stored news count; 0 when the store cannot be read."""
    try:
        async with get_session() as session:
            return await NewsRepository(session).count()
    except Exception as e:
        logger.error(f"DB Error: {type(e).__name__}: {e}")
        return 0


async def process_site(
    collector: HeadlineCollector,
    site: SiteRule,
    notifier: TelegramNotifier,
) -> bool:
    """Store and send the first unsent headline of a site. True if one was sent."""
    candidates = await collector.candidates(site)
    logger.info(f"[{site.name}] Found {len(candidates)} headlines on page")
    if not candidates:
        logger.warning(f"[{site.name}] No headlines found")
        return False

    selected = None
    try:
        async with get_session() as session:
            repo = NewsRepository(session)
            for headline in candidates:
                if not await repo.link_exists(headline.link):
                    selected = headline
                    break
    except Exception as e:
        # Unknown history: the newest candidate counts as new
        logger.error(f"[{site.name}] DB Error: {type(e).__name__}: {e}")
        selected = candidates[0]

    if selected is None:
        logger.info(f"[{site.name}] All headlines already sent (skip)")
        return False

    logger.info(f"[{site.name}] {selected.title[:50]}...")

    try:
        async with get_session() as session:
            await NewsRepository(session).add_news(site.name, site.category, selected.title, selected.link)
        logger.info(f"[{site.name}] Saved to database")
    except Exception as e:
        logger.error(f"[{site.name}] DB Error: {type(e).__name__}: {e}")

    await notifier.send_news(site.name, selected.title, selected.link)
    return True


async def run(
    session_config: BrowserSessionConfig,
    renderer=None,
    notifier: Optional[TelegramNotifier] = None,
    sites: Sequence[SiteRule] = NEWS_SITES,
    site_delay: Optional[float] = None,
) -> int:
    """Run the monitor over every site. Returns the exit code."""
    try:
        require_settings(*REQUIRED_SETTINGS)
    except ConfigurationError as e:
        logger.error(f"{e}. Abort.")
        return 1

    renderer = renderer or PageRenderer(BrowserCashClient(settings.API_KEY), session_config)
    notifier = notifier or TelegramNotifier()
    site_delay = settings.SITE_DELAY if site_delay is None else site_delay
    collector = HeadlineCollector(renderer, sites, site_delay=site_delay)

    await try_init_database()
    total = len(sites)

    logger.info(">> News Monitor")
    logger.info(f">> Total sites: {total}")
    logger.info(f">> News in database: {await count_news()}")

    sent = 0
    for i, site in enumerate(sites):
        if i and site_delay:
            await asyncio.sleep(site_delay)
        logger.info(f"[{i + 1}/{total}] {site.name}")
        try:
            if await process_site(collector, site, notifier):
                sent += 1
        except Exception as e:
            logger.error(f"[{site.name}] Error: {type(e).__name__}: {e}")

    logger.info("=" * 50)
    logger.info(">> DONE")
    logger.info(f">> Sent: {sent}/{total}")
    logger.info(f">> Skipped/failed: {total - sent}/{total}")
    logger.info(f">> Total news in database: {await count_news()}")
    logger.info("=" * 50)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args("News Monitor", argv)
    init_task_logging(args, "news_monitor")

    try:
        require_settings(*REQUIRED_SETTINGS)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    session_config = resolve_session_config(args, include_network=True)
    return asyncio.run(run(session_config))


if __name__ == "__main__":
    sys.exit(main())
