"""
CoinGecko factors - price history, momentum, dominance and market share.

API docs: https://docs.coingecko.com/v3.0.1/reference/introduction
An optional demo key raises the rate limit; calls are spaced by a fixed delay.
"""
import asyncio
from typing import Optional

import httpx

from config import settings
from .base import BaseFactorFetcher, FactorUnavailable
from .stats import (
    max_drawdown,
    percent_change,
    round2,
    share_excluding,
    volatility,
    volume_share,
)

COIN_PARAMS = {
    "localization": "false",
    "tickers": "false",
    "community_data": "false",
    "developer_data": "false",
}

# CoinGecko id -> ticker for per-token scoring
TOKEN_IDS = {
    "ethereum": "ETH",
    "solana": "SOL",
    "binancecoin": "BNB",
}


def market_snapshot(market_data: dict) -> dict:
    """Pick the fields every coin-level factor uses from /coins/{id}."""
    return {
        "current_price": market_data["current_price"]["usd"],
        "change_24h": round2(market_data.get("price_change_percentage_24h") or 0),
        "change_7d": round2(market_data.get("price_change_percentage_7d") or 0),
        "change_30d": round2(market_data.get("price_change_percentage_30d") or 0),
        "volume_24h": (market_data.get("total_volume") or {}).get("usd") or 0,
        "market_cap": (market_data.get("market_cap") or {}).get("usd") or 0,
    }


class CoinGeckoFetcher(BaseFactorFetcher):
    """Base for fetchers that talk to the CoinGecko public API."""

    source = "CoinGecko"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        delay: Optional[float] = None,
    ):
        super().__init__(http_client)
        self.api_key = settings.COINGECKO_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.COINGECKO_API_BASE).rstrip("/")
        self.delay = settings.API_CALL_DELAY if delay is None else delay

    async def cg_get(self, path: str, params: dict = None):
        headers = {"x-cg-demo-api-key": self.api_key} if self.api_key else {}
        return await self.get_json(f"{self.base_url}{path}", params=params, headers=headers)

    async def get_coin(self, coin_id: str) -> dict:
        data = await self.cg_get(f"/api/v3/coins/{coin_id}", params=COIN_PARAMS)
        return data["market_data"]

    async def get_global(self) -> dict:
        data = await self.cg_get("/api/v3/global")
        return data["data"]

    async def pause(self):
        if self.delay:
            await asyncio.sleep(self.delay)


class VolatilityFetcher(CoinGeckoFetcher):
    """30-day BTC volatility and drawdown from daily closes."""

    name = "volatility"

    async def fetch(self) -> dict:
        data = await self.cg_get(
            "/api/v3/coins/bitcoin/market_chart",
            params={"vs_currency": "usd", "days": 30, "interval": "daily"},
        )
        prices = [point[1] for point in data["prices"]]
        if len(prices) < 2:
            raise FactorUnavailable(f"need at least 2 prices, got {len(prices)}")

        return {
            "volatility": round2(volatility(prices)),
            "max_drawdown": round2(max_drawdown(prices)),
            "change_30d": round2(percent_change(prices[-1], prices[0])),
            "price_history": [round(p) for p in prices[-7:]],
        }


class MomentumFetcher(CoinGeckoFetcher):
    """BTC price momentum, volume and distance from ATH."""

    name = "momentum"

    async def fetch(self) -> dict:
        md = await self.get_coin("bitcoin")
        values = market_snapshot(md)
        values["ath"] = (md.get("ath") or {}).get("usd") or 0
        values["ath_change_percentage"] = round2((md.get("ath_change_percentage") or {}).get("usd") or 0)
        return values


class DominanceFetcher(CoinGeckoFetcher):
    """BTC dominance and total market size."""

    name = "dominance"

    async def fetch(self) -> dict:
        data = await self.get_global()
        return {
            "btc_dominance": round2(data["market_cap_percentage"]["btc"]),
            "total_market_cap": data["total_market_cap"]["usd"],
            "total_volume": data["total_volume"]["usd"],
            "market_cap_change_24h": round2(data["market_cap_change_percentage_24h_usd"]),
        }


class MultiTokenFetcher(CoinGeckoFetcher):
    """Market snapshots for the tokens scored individually (ETH, SOL, BNB)."""

    name = "multi_token"

    def __init__(self, *args, token_ids: dict = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.token_ids = token_ids or TOKEN_IDS

    async def fetch(self) -> dict:
        tokens = {}
        for i, (coin_id, symbol) in enumerate(self.token_ids.items()):
            if i:
                await self.pause()
            snapshot = market_snapshot(await self.get_coin(coin_id))
            snapshot.pop("change_30d")
            tokens[symbol] = snapshot
        return {"tokens": tokens}

    def describe(self, values: dict) -> str:
        return ", ".join(
            f"{sym}=${t['current_price']:,} ({t['change_24h']:+}%)"
            for sym, t in values["tokens"].items()
        )


class EthVsBtcFetcher(CoinGeckoFetcher):
    """ETH performance relative to BTC over 24h, 7d and 30d."""

    name = "eth_vs_btc"

    async def fetch(self) -> dict:
        eth = await self.get_coin("ethereum")
        await self.pause()
        btc = await self.get_coin("bitcoin")

        values = {
            "eth_price": eth["current_price"]["usd"],
            "btc_price": btc["current_price"]["usd"],
            "eth_market_cap": (eth.get("market_cap") or {}).get("usd") or 0,
            "btc_market_cap": (btc.get("market_cap") or {}).get("usd") or 0,
        }
        for period in ("24h", "7d", "30d"):
            key = f"price_change_percentage_{period}"
            eth_change = eth.get(key) or 0
            btc_change = btc.get(key) or 0
            values[f"eth_{period}"] = round2(eth_change)
            values[f"btc_{period}"] = round2(btc_change)
            values[f"outperform_{period}"] = round2(eth_change - btc_change)
        return values


class MarketCapShareFetcher(CoinGeckoFetcher):
    """Share of total market cap held outside BTC."""

    name = "market_cap_share"

    async def fetch(self) -> dict:
        data = await self.get_global()
        btc_dominance = round2(data["market_cap_percentage"]["btc"])
        return {
            "btc_dominance": btc_dominance,
            "eth_dominance": round2(data["market_cap_percentage"].get("eth") or 0),
            "altcoin_share": round2(share_excluding(btc_dominance)),
            "total_market_cap": data["total_market_cap"]["usd"],
            "market_cap_change_24h": round2(data["market_cap_change_percentage_24h_usd"]),
        }


class VolumeShareFetcher(CoinGeckoFetcher):
    """Share of 24h volume traded outside BTC."""

    name = "volume_share"

    async def fetch(self) -> dict:
        total_volume = (await self.get_global())["total_volume"]["usd"]
        await self.pause()
        btc_volume = ((await self.get_coin("bitcoin")).get("total_volume") or {}).get("usd") or 0

        if not total_volume:
            raise FactorUnavailable("total volume is zero")

        return {
            "total_volume": total_volume,
            "btc_volume": btc_volume,
            "altcoin_volume": total_volume - btc_volume,
            "altcoin_volume_share": round2(volume_share(total_volume, btc_volume)),
        }


class TopCoinsMarketFetcher(CoinGeckoFetcher):
    """Names, logos and prices of the top 500 coins, keyed by ticker."""

    name = "top_coins"

    def __init__(self, *args, pages: int = 2, **kwargs):
        super().__init__(*args, **kwargs)
        self.pages = pages

    async def fetch(self) -> dict:
        coins = {}
        for page in range(1, self.pages + 1):
            if page > 1:
                await self.pause()
            try:
                rows = await self.cg_get(
                    "/api/v3/coins/markets",
                    params={"vs_currency": "usd", "per_page": 250, "page": page},
                )
            except httpx.HTTPError:
                # Later pages are best-effort once page 1 is in
                if page == 1:
                    raise
                break
            for coin in rows:
                symbol = coin["symbol"].upper()
                # First hit wins: markets are ordered by market cap
                coins.setdefault(symbol, {
                    "coingecko_id": coin["id"],
                    "name": coin["name"],
                    "logo_url": coin.get("image"),
                    "price": coin.get("current_price"),
                    "price_change_24h": coin.get("price_change_percentage_24h"),
                })
        return {"coins": coins}

    def describe(self, values: dict) -> str:
        return f"{len(values['coins'])} coins"
