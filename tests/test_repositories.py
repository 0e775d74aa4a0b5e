from database import get_session, get_table_counts_async
from repositories import (
    AltcoinSeasonRepository,
    AltcoinSeasonScoreRepository,
    FearGreedRepository,
    NewsRepository,
)


def test_index_runs_are_append_only(run_db):
    async def scenario():
        async with get_session() as session:
            repo = FearGreedRepository(session)
            await repo.add_run(score=40, label="Fear", reason="first")
            await repo.add_run(score=62, label="Greed", reason="second", factors={"momentum": 70})

        async with get_session() as session:
            repo = FearGreedRepository(session)
            return await repo.get_latest(), await repo.get_history(days=30), await repo.count()

    latest, history, count = run_db(scenario)

    assert count == 2
    assert latest.reason == "second"
    assert latest.factors == {"momentum": 70}
    assert [r.reason for r in history] == ["second", "first"]


def test_latest_on_empty_table(run_db):
    async def scenario():
        async with get_session() as session:
            return await AltcoinSeasonScoreRepository(session).get_latest()

    assert run_db(scenario) is None


def test_altcoin_season_score_row(run_db):
    async def scenario():
        async with get_session() as session:
            await AltcoinSeasonScoreRepository(session).add_run(
                score=35,
                label="Mostly Bitcoin",
                total_market_cap=3e12,
                altcoin_market_cap=1.2e12,
                btc_dominance=60.0,
                headlines=[{"site": "CoinDesk", "title": "t", "link": "https://x"}],
            )
        async with get_session() as session:
            return await AltcoinSeasonScoreRepository(session).get_latest()

    row = run_db(scenario)

    assert row.label == "Mostly Bitcoin"
    assert row.headlines[0]["site"] == "CoinDesk"
    assert row.created_at is not None


def test_news_links_are_unique(run_db):
    async def scenario():
        async with get_session() as session:
            repo = NewsRepository(session)
            first = await repo.add_news("CNN", "global", "Story one", "https://cnn.com/a")
            again = await repo.add_news("CNN", "global", "Story one again", "https://cnn.com/a")
            await repo.add_news("ESPN", "sports", "Match report", "https://espn.com/b")
            exists = await repo.link_exists("https://cnn.com/a")
            missing = await repo.link_exists("https://cnn.com/zzz")

        async with get_session() as session:
            repo = NewsRepository(session)
            return first, again, exists, missing, await repo.count(), await repo.get_recent(category="sports")

    first, again, exists, missing, count, sports = run_db(scenario)

    assert first.id is not None
    assert again is None
    assert exists and not missing
    assert count == 2
    assert [n.site_name for n in sports] == ["ESPN"]


def test_altcoin_snapshot_is_replaced(run_db):
    coins = [
        {"ticker": "SOL", "performance": 45.2, "direction": "outperform", "rank": 1, "name": "Solana"},
        {"ticker": "ETH", "performance": 3.5, "direction": "outperform", "rank": 2},
        {"ticker": "ADA", "performance": 20.0, "direction": "underperform", "rank": 3},
    ]

    async def scenario():
        async with get_session() as session:
            await AltcoinSeasonRepository(session).replace_all(coins, index_score=30, index_label="Bitcoin Season")
        async with get_session() as session:
            saved = await AltcoinSeasonRepository(session).replace_all(coins[1:], index_score=45, index_label=None)
        async with get_session() as session:
            repo = AltcoinSeasonRepository(session)
            return saved, await repo.list_coins(), await repo.list_coins("underperform")

    saved, rows, under = run_db(scenario)

    assert saved == 2
    assert [r.ticker for r in rows] == ["ETH", "ADA"]
    assert all(r.index_score == 45 for r in rows)
    assert [r.ticker for r in under] == ["ADA"]


def test_table_counts(run_db):
    async def scenario():
        async with get_session() as session:
            await NewsRepository(session).add_news("CNN", "global", "Story", "https://cnn.com/a")
        return await get_table_counts_async()

    counts = run_db(scenario)

    assert counts["news"] == 1
    assert counts["fear_greed_index"] == 0
    assert set(counts) == {"fear_greed_index", "altcoin_season_score", "news", "altcoin_season"}
