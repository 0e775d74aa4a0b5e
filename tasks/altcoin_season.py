"""
Altcoin Season snapshot task - top-100 performance vs BTC from CoinMarketCap.

Replaces the altcoin_season table with the latest chart, enriched with
CoinGecko names, logos and prices.

Usage:
    python -m tasks.altcoin_season [--cron]
"""
import asyncio
import sys
from typing import Optional, Sequence

import httpx

from browser import BrowserCashClient, BrowserSessionConfig, PageRenderer
from config import ConfigurationError, require_settings, settings
from crawlers import AltcoinSeasonCrawler
from database import get_session, init_database_async
from factors import TopCoinsMarketFetcher
from repositories import AltcoinSeasonRepository
from utils import logger
from .cli import init_task_logging, parse_args, resolve_session_config

REQUIRED_SETTINGS = ("API_KEY",)


async def run(
    session_config: BrowserSessionConfig,
    renderer=None,
    http_client: Optional[httpx.AsyncClient] = None,
    save_raw: Optional[bool] = None,
) -> int:
    """Scrape and store the snapshot. Returns the exit code."""
    try:
        require_settings(*REQUIRED_SETTINGS)
    except ConfigurationError as e:
        logger.error(f"{e}. Abort.")
        return 1

    renderer = renderer or PageRenderer(BrowserCashClient(settings.API_KEY), session_config)

    logger.info("═" * 60)
    logger.info("  ALTCOIN SEASON INDEX SCRAPER")
    logger.info("  Source: CoinMarketCap + CoinGecko logos")
    logger.info("═" * 60)

    crawler = AltcoinSeasonCrawler(
        settings.DATA_DIR,
        renderer,
        markets=TopCoinsMarketFetcher(http_client),
        save_raw=settings.SAVE_RAW if save_raw is None else save_raw,
    )
    result = await crawler.run()
    if not result.success:
        logger.error(f"No chart data scraped: {result.error}")
        return 1

    index_score = result.meta.get("index_score")
    index_label = result.meta.get("index_label")
    outperform = sum(1 for c in result.data if c["direction"] == "outperform")
    logger.info(f"Index: {index_score if index_score is not None else '-'} ({index_label or '-'})")
    logger.info(f"Coins: {len(result.data)} ({outperform} outperforming BTC)")

    try:
        await init_database_async()
        async with get_session() as session:
            saved = await AltcoinSeasonRepository(session).replace_all(result.data, index_score, index_label)
        logger.info(f"Saved {saved} coins to database")
    except Exception as e:
        logger.error(f"DB Error: {type(e).__name__}: {e}")

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args("Altcoin Season Index Scraper", argv)
    init_task_logging(args, "altcoin_season")

    try:
        require_settings(*REQUIRED_SETTINGS)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    session_config = resolve_session_config(args)
    return asyncio.run(run(session_config))


if __name__ == "__main__":
    sys.exit(main())
