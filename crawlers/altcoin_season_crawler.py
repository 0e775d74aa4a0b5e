"""
Altcoin Season Crawler - top 100 coin performance vs BTC from CoinMarketCap

Reads the chart data labels ("12.3% SOL") from the rendered index page and
enriches each ticker with name, logo and price from CoinGecko markets.
"""
import re
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup
from loguru import logger

from constants import PerformanceDirection
from factors.coingecko import TopCoinsMarketFetcher
from factors.market_reference import (
    ALTCOIN_SEASON_PAGE,
    page_text,
    parse_index_score,
    parse_regime_label,
)
from .base_crawler import BaseCrawler, CrawlResult
from .extractor import clean_text

DATA_LABEL = re.compile(r"^(\d+\.?\d*)\s*%\s+([A-Za-z][A-Za-z0-9]*)")
TEXT_LABEL = re.compile(r"(\d+\.?\d*)\s*%\s+([A-Z][A-Za-z0-9]+)")
TOP_100_HEADING = "Top 100 Coins Performance"
TOP_100_WINDOW = 5000


def parse_top_coins(html: str) -> list[dict]:
    """
    Parse ticker performance from the chart.

    Falls back to the text following the "Top 100" heading when the chart
    labels are missing. The chart lists outperformers first, ordered down to
    the smallest value, then underperformers; the smallest value marks the
    boundary.
    """
    soup = BeautifulSoup(html, "html.parser")
    coins: list[dict] = []
    seen: set[str] = set()

    def add(pct: str, ticker: str):
        ticker = ticker.upper()
        if ticker in seen:
            return
        seen.add(ticker)
        coins.append({"ticker": ticker, "performance": float(pct)})

    for el in soup.select(".highcharts-data-label"):
        text = clean_text(el.get_text(" "))
        if len(text) < 3:
            continue
        match = DATA_LABEL.match(text)
        if match:
            add(match.group(1), match.group(2))

    if not coins:
        body = clean_text(soup.get_text(" "))
        start = body.find(TOP_100_HEADING)
        if start != -1:
            for match in TEXT_LABEL.finditer(body[start:start + TOP_100_WINDOW]):
                add(match.group(1), match.group(2))

    assign_directions(coins)
    return coins


def assign_directions(coins: list[dict]) -> None:
    """Mark coins up to the smallest value as outperforming, the rest under."""
    if len(coins) <= 2:
        for coin in coins:
            coin["direction"] = PerformanceDirection.OUTPERFORM.value
        return

    min_idx = min(range(len(coins)), key=lambda i: coins[i]["performance"])
    for i, coin in enumerate(coins):
        if i <= min_idx:
            coin["direction"] = PerformanceDirection.OUTPERFORM.value
        else:
            coin["direction"] = PerformanceDirection.UNDERPERFORM.value


MARKET_FIELDS = ("name", "logo_url", "coingecko_id", "price", "price_change_24h")


def enrich_rows(rows: list[dict], market: dict) -> list[str]:
    """
    Fill market fields on rows that have none yet.

    Returns:
        Tickers still without market data
    """
    missing = []
    for row in rows:
        if row.get("coingecko_id"):
            continue
        info = market.get(row["ticker"], {})
        for key in MARKET_FIELDS:
            row[key] = info.get(key)
        if not info:
            missing.append(row["ticker"])
    return missing


class AltcoinSeasonCrawler(BaseCrawler):
    """Crawler for the CoinMarketCap Altcoin Season top-100 chart."""

    def __init__(
        self,
        data_dir: Path,
        renderer,
        markets: Optional[TopCoinsMarketFetcher] = None,
        url: str = ALTCOIN_SEASON_PAGE,
        save_raw: bool = True,
    ):
        super().__init__("altcoin_season", data_dir, save_raw=save_raw)
        self.renderer = renderer
        self.markets = markets or TopCoinsMarketFetcher()
        self.url = url

    async def fetch(self) -> CrawlResult:
        market_result = await self.markets.run()
        market = market_result.record["coins"] if market_result.available else {}

        html = await self.renderer.render(
            self.url,
            render_wait_ms=5000,
            settle_ms=3000,
            scroll_steps=5,
            scroll_px=600,
            scroll_pause_ms=1500,
        )
        coins = parse_top_coins(html)
        text = page_text(html)
        index_score = parse_index_score(text)
        index_label = parse_regime_label(text)

        if not coins:
            return CrawlResult.failed(self.name, "No coin performance found on chart")

        rows = [
            {
                "ticker": coin["ticker"],
                "performance": coin["performance"],
                "direction": coin["direction"],
                "rank": rank,
            }
            for rank, coin in enumerate(coins, start=1)
        ]
        missing = enrich_rows(rows, market)
        logger.info(f"[{self.name}] Matched {len(rows) - len(missing)}/{len(rows)} coins with CoinGecko")

        # Refresh only on a partial match; no match at all means no market data
        if missing and len(missing) < len(rows):
            shown = ", ".join(missing[:5]) + ("..." if len(missing) > 5 else "")
            logger.warning(f"[{self.name}] Missing {len(missing)} coins: {shown}. Refreshing CoinGecko data")
            fresh = await self.markets.run()
            if fresh.available:
                missing = enrich_rows(rows, fresh.record["coins"])
                logger.info(f"[{self.name}] After refresh: {len(rows) - len(missing)}/{len(rows)} matched")

        return CrawlResult(
            source=self.name,
            success=True,
            data=rows,
            meta={"index_score": index_score, "index_label": index_label},
        )
