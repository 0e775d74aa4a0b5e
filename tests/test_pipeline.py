import asyncio

import httpx

import pytest

from browser import BrowserSessionConfig
from config import settings
from constants import RunState
from database import get_session
from processor import (
    FEAR_GREED,
    IndexPipeline,
    InvalidScoreError,
    OracleError,
    PLACEHOLDER,
    ScoreParser,
    ScoringOracle,
)
from repositories import FearGreedRepository
from tasks.index_task import run_index
from conftest import FakeLLM, FakeRenderer, StubFetcher, failing_handler, mock_client

MOMENTUM = {
    "current_price": 62000,
    "change_24h": 1.2,
    "change_7d": 3.4,
    "change_30d": 5.6,
    "volume_24h": 30e9,
    "market_cap": 1.2e12,
    "ath": 73000,
    "ath_change_percentage": -15.07,
}

GREED_REPLY = (
    'Analysis complete.\n```json\n{"score": 62, "label": "Greed", "reason": "Momentum is strong.", '
    '"factors": {"volatility": 55, "momentum": 70, "social": null, "dominance": 50, "trends": 60}}\n```'
)


def make_pipeline(reply, writer, fetchers=None, llm=None):
    llm = llm or FakeLLM(reply)
    oracle = ScoringOracle(llm, temperature=FEAR_GREED.temperature, parser=ScoreParser(FEAR_GREED.labels))
    fetchers = fetchers if fetchers is not None else [
        StubFetcher("volatility", None),
        StubFetcher("momentum", MOMENTUM),
    ]
    return IndexPipeline(FEAR_GREED, fetchers, oracle, writer=writer, fetch_delay=0)


class RecordingWriter:
    def __init__(self, error=None):
        self.rows = []
        self.error = error

    async def __call__(self, row):
        if self.error:
            raise self.error
        self.rows.append(row)


def test_out_of_range_score_aborts_before_writing():
    writer = RecordingWriter()
    pipeline = make_pipeline('{"score": 150, "label": "Extreme Greed"}', writer)

    with pytest.raises(InvalidScoreError):
        asyncio.run(pipeline.run())

    assert writer.rows == []
    assert pipeline.state == RunState.ABORTED


def test_transport_failure_is_oracle_error():
    writer = RecordingWriter()
    pipeline = make_pipeline("", writer, llm=FakeLLM(error=ConnectionError("reset")))

    with pytest.raises(OracleError):
        asyncio.run(pipeline.run())

    assert writer.rows == []


def test_successful_run_builds_row():
    writer = RecordingWriter()
    llm = FakeLLM(GREED_REPLY)
    pipeline = make_pipeline(GREED_REPLY, writer, llm=llm)

    result = asyncio.run(pipeline.run())

    assert result["status"] == "success"
    assert result["steps"]["factors"]["available"] == ["momentum"]
    assert result["steps"]["persist"] == {"saved": True}
    assert pipeline.state == RunState.DONE

    row = writer.rows[0]
    assert row["score"] == 62
    assert row["label"] == "Greed"
    assert row["btc_price"] == 62000
    assert row["btc_24h_change"] == 1.2
    assert row["factors"]["momentum"] == 70
    assert row["token_prices"]["BTC"]["current_price"] == 62000
    assert row["factor_snapshot"] == {"momentum": MOMENTUM}
    assert row["headlines"] == []

    assert llm.calls == [{"max_tokens": 500, "temperature": 0.5}]
    prompt = llm.prompts[0]
    assert "- Current BTC Price: $62,000" in prompt
    assert prompt.count(PLACEHOLDER) == 4


def test_failed_write_still_completes():
    pipeline = make_pipeline(GREED_REPLY, RecordingWriter(error=RuntimeError("db down")))

    result = asyncio.run(pipeline.run())

    assert result["status"] == "success"
    assert result["steps"]["persist"] == {"saved": False}


def test_fetchers_run_in_order():
    order = []

    class Tracking(StubFetcher):
        async def fetch(self):
            order.append(self.name)
            return await super().fetch()

    fetchers = [Tracking("volatility", None), Tracking("momentum", MOMENTUM), Tracking("dominance", None)]
    asyncio.run(make_pipeline(GREED_REPLY, RecordingWriter(), fetchers=fetchers).run())

    assert order == ["volatility", "momentum", "dominance"]


def test_run_index_missing_credentials(monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
    llm = FakeLLM(GREED_REPLY)

    code = asyncio.run(run_index(FEAR_GREED, BrowserSessionConfig.cron(), llm_client=llm))

    assert code == 1
    assert llm.prompts == []


def test_run_index_oracle_failure(credentials):
    writer = RecordingWriter()

    code = asyncio.run(run_index(
        FEAR_GREED,
        BrowserSessionConfig.cron(),
        llm_client=FakeLLM("no json here"),
        renderer=FakeRenderer(),
        http_client=mock_client(failing_handler),
        writer=writer,
        fetch_delay=0,
        site_delay=0,
    ))

    assert code == 1
    assert writer.rows == []


def test_run_index_end_to_end(credentials, monkeypatch, run_db):
    """Every source down, the oracle still answers: one row with its score is stored."""
    monkeypatch.setattr(settings, "MEMBIT_API_KEY", "")
    llm = FakeLLM(GREED_REPLY)
    renderer = FakeRenderer()

    async def scenario():
        code = await run_index(
            FEAR_GREED,
            BrowserSessionConfig.cron(),
            llm_client=llm,
            renderer=renderer,
            http_client=mock_client(failing_handler),
            fetch_delay=0,
            site_delay=0,
        )
        async with get_session() as session:
            repo = FearGreedRepository(session)
            return code, await repo.get_latest(), await repo.count()

    code, latest, count = run_db(scenario)

    assert code == 0
    assert count == 1
    assert latest.score == 62
    assert latest.label == "Greed"
    assert latest.btc_price is None
    assert latest.factors["momentum"] == 70
    assert llm.prompts[0].count(PLACEHOLDER) == 5


def sample_market_handler(request):
    """CoinGecko and Alternative.me replies with fixed sample values."""
    path = request.url.path
    if path == "/api/v3/coins/bitcoin/market_chart":
        return httpx.Response(200, json={"prices": [[i, 60000 + i * 100] for i in range(31)]})
    if path == "/api/v3/global":
        return httpx.Response(200, json={"data": {
            "market_cap_percentage": {"btc": 57.5, "eth": 12.0},
            "total_market_cap": {"usd": 2.5e12},
            "total_volume": {"usd": 9e10},
            "market_cap_change_percentage_24h_usd": -0.8,
        }})
    if path.startswith("/api/v3/coins/"):
        price = 63000 if path.endswith("/bitcoin") else 100
        return httpx.Response(200, json={"market_data": {
            "current_price": {"usd": price},
            "price_change_percentage_24h": 1.1,
            "price_change_percentage_7d": 2.2,
            "price_change_percentage_30d": 3.3,
            "total_volume": {"usd": 3e10},
            "market_cap": {"usd": 1.2e12},
            "ath": {"usd": 73000},
            "ath_change_percentage": {"usd": -13.7},
        }})
    if path == "/fng/":
        return httpx.Response(200, json={"data": [
            {"value": "58", "value_classification": "Greed", "timestamp": "1700000000"},
        ]})
    return httpx.Response(404)


def test_run_index_with_sample_factors(credentials, monkeypatch, run_db):
    monkeypatch.setattr(settings, "MEMBIT_API_KEY", "")
    llm = FakeLLM(GREED_REPLY)

    async def scenario():
        code = await run_index(
            FEAR_GREED,
            BrowserSessionConfig.cron(),
            llm_client=llm,
            renderer=FakeRenderer(),
            http_client=mock_client(sample_market_handler),
            fetch_delay=0,
            site_delay=0,
        )
        async with get_session() as session:
            return code, await FearGreedRepository(session).get_latest()

    code, latest = run_db(scenario)

    assert code == 0
    assert latest.score == 62
    assert latest.label == "Greed"
    assert latest.btc_price == 63000
    assert set(latest.token_prices) == {"ETH", "SOL", "BNB", "BTC"}
    assert set(latest.factor_snapshot) == {"volatility", "momentum", "multi_token", "dominance", "alt_fng"}

    prompt = llm.prompts[0]
    # Only the social factor is missing
    assert prompt.count(PLACEHOLDER) == 1
    assert "- Current Score: 58 (Greed)" in prompt
    assert "- BTC Dominance: 57.5%" in prompt


def test_run_index_scores_when_store_is_down(credentials, offline_db):
    llm = FakeLLM(GREED_REPLY)

    async def scenario():
        return await run_index(
            FEAR_GREED,
            BrowserSessionConfig.cron(),
            llm_client=llm,
            renderer=FakeRenderer(),
            http_client=mock_client(failing_handler),
            fetch_delay=0,
            site_delay=0,
        )

    code = offline_db(scenario)

    assert code == 0
    assert len(llm.prompts) == 1
