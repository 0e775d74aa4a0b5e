import asyncio

import httpx
import pytest

from factors import (
    AlternativeFearGreedFetcher,
    DefiTvlFetcher,
    EthVsBtcFetcher,
    MarketCapShareFetcher,
    MarketReferenceFetcher,
    MultiTokenFetcher,
    SocialFetcher,
    VolatilityFetcher,
)
from conftest import FakeRenderer, failing_handler, mock_client


def run(fetcher):
    return asyncio.run(fetcher.run())


def coin_market_data(price, change_24h=1.0, change_7d=2.0, change_30d=3.0):
    return {
        "market_data": {
            "current_price": {"usd": price},
            "price_change_percentage_24h": change_24h,
            "price_change_percentage_7d": change_7d,
            "price_change_percentage_30d": change_30d,
            "total_volume": {"usd": price * 1000},
            "market_cap": {"usd": price * 1_000_000},
            "ath": {"usd": price * 2},
            "ath_change_percentage": {"usd": -50.0},
        }
    }


GLOBAL = {
    "data": {
        "market_cap_percentage": {"btc": 58.456, "eth": 12.1},
        "total_market_cap": {"usd": 3_000_000_000_000},
        "total_volume": {"usd": 100_000_000_000},
        "market_cap_change_percentage_24h_usd": 1.234,
    }
}


def test_volatility_fetcher():
    prices = [100, 110, 99, 120, 90, 100, 105, 110]

    def handler(request):
        assert request.url.path == "/api/v3/coins/bitcoin/market_chart"
        assert request.url.params["days"] == "30"
        return httpx.Response(200, json={"prices": [[i, p] for i, p in enumerate(prices)]})

    result = run(VolatilityFetcher(mock_client(handler), delay=0))

    assert result.available
    values = result.record.values
    assert values["change_30d"] == pytest.approx(10.0)
    assert values["max_drawdown"] == pytest.approx(25.0)
    assert values["price_history"] == [110, 99, 120, 90, 100, 105, 110]
    assert values["volatility"] > 0


def test_volatility_needs_two_prices():
    def handler(request):
        return httpx.Response(200, json={"prices": [[0, 100]]})

    result = run(VolatilityFetcher(mock_client(handler), delay=0))

    assert not result.available
    assert "at least 2" in result.error


def test_http_failure_makes_factor_unavailable():
    result = run(VolatilityFetcher(mock_client(failing_handler), delay=0))

    assert not result.available
    assert "HTTPStatusError" in result.error


def test_market_cap_share():
    result = run(MarketCapShareFetcher(mock_client(lambda r: httpx.Response(200, json=GLOBAL)), delay=0))

    values = result.record.values
    assert values["btc_dominance"] == pytest.approx(58.46)
    assert values["altcoin_share"] == pytest.approx(41.54)
    assert values["market_cap_change_24h"] == pytest.approx(1.23)


def test_eth_vs_btc_outperformance():
    def handler(request):
        if request.url.path.endswith("/ethereum"):
            return httpx.Response(200, json=coin_market_data(3000, change_24h=4.0, change_7d=5.0, change_30d=-1.0))
        return httpx.Response(200, json=coin_market_data(60000, change_24h=1.0, change_7d=2.0, change_30d=3.0))

    values = run(EthVsBtcFetcher(mock_client(handler), delay=0)).record.values

    assert values["eth_price"] == 3000
    assert values["btc_price"] == 60000
    assert values["outperform_24h"] == pytest.approx(3.0)
    assert values["outperform_7d"] == pytest.approx(3.0)
    assert values["outperform_30d"] == pytest.approx(-4.0)


def test_multi_token_snapshots():
    def handler(request):
        return httpx.Response(200, json=coin_market_data(10))

    values = run(MultiTokenFetcher(mock_client(handler), delay=0)).record.values

    assert set(values["tokens"]) == {"ETH", "SOL", "BNB"}
    assert "change_30d" not in values["tokens"]["ETH"]


def test_defi_tvl_growth():
    points = [{"date": i, "tvl": 100 + i} for i in range(40)]

    def handler(request):
        return httpx.Response(200, json=points)

    values = run(DefiTvlFetcher(mock_client(handler))).record.values

    # Last 31 points: tvl 109..139
    assert values["current_tvl"] == 139
    assert values["tvl_30d_ago"] == 109
    assert values["tvl_7d_ago"] == 132
    assert values["growth_30d"] == pytest.approx(27.52)
    assert values["growth_7d"] == pytest.approx(5.3)


def test_alternative_fear_greed_api():
    def handler(request):
        return httpx.Response(200, json={"data": [
            {"value": "40", "value_classification": "Fear", "timestamp": "1700000000"},
            {"value": "50", "value_classification": "Neutral", "timestamp": "1699913600"},
        ]})

    values = run(AlternativeFearGreedFetcher(mock_client(handler))).record.values

    assert values["current_score"] == 40
    assert values["current_label"] == "Fear"
    assert values["average_7d"] == 45
    assert values["via"] == "api"
    assert values["history"][0]["date"] == "2023-11-14"


def test_alternative_fear_greed_falls_back_to_page():
    renderer = FakeRenderer(default='<div class="fng-circle"><div class="fng-score">72</div></div>')

    result = run(AlternativeFearGreedFetcher(mock_client(failing_handler), renderer=renderer))

    assert result.record["current_score"] == 72
    assert result.record["current_label"] == "Greed"
    assert result.record["via"] == "scrape"


def test_alternative_fear_greed_without_renderer_fails():
    result = run(AlternativeFearGreedFetcher(mock_client(failing_handler)))
    assert not result.available


def test_social_needs_api_key():
    result = run(SocialFetcher("bitcoin", "bitcoin BTC", api_key=""))

    assert not result.available
    assert "MEMBIT_API_KEY" in result.error


def test_social_reads_clusters_and_posts():
    seen = []

    def handler(request):
        seen.append(request)
        if "clusters" in request.url.path:
            return httpx.Response(200, text="Cluster: ETF inflows dominate the conversation")
        return httpx.Response(200, text="Post: BTC to the moon, everyone is buying")

    result = run(SocialFetcher("bitcoin", "bitcoin BTC", http_client=mock_client(handler), api_key="k"))

    assert result.record["cluster_text"].startswith("Cluster:")
    assert result.record["post_text"].startswith("Post:")
    assert seen[0].headers["X-Membit-Api-Key"] == "k"
    assert seen[0].url.params["format"] == "llm"


def test_social_with_empty_replies_is_unavailable():
    result = run(SocialFetcher("b", "b", http_client=mock_client(lambda r: httpx.Response(200, text="")), api_key="k"))
    assert not result.available


def test_market_reference_scrape():
    html = "<h1>Altcoin Season Index</h1><p>Altcoin Season Index: 37</p>"

    result = run(MarketReferenceFetcher(FakeRenderer(default=html)))

    assert result.record.values == {"source": "CoinMarketCap", "score": 37, "label": "Mostly Bitcoin"}


def test_market_reference_without_score():
    result = run(MarketReferenceFetcher(FakeRenderer(default="<p>nothing here</p>")))
    assert not result.available
