from datetime import datetime, timezone

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from api.main import app
from config import settings
from database.models import AltcoinSeasonCoin, Base, FearGreedIndex, News


def seed(path):
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add(FearGreedIndex(score=62, label="Greed", reason="r", factors={"volatility": 30, "momentum": 70}))
        session.add(News(site_name="ESPN", category="sports", title="Match report", link="https://espn.com/a"))
        session.add(AltcoinSeasonCoin(
            ticker="SOL", performance=45.2, direction="outperform", rank=1,
            index_score=45, index_label="Bitcoin Season", scraped_at=datetime.now(timezone.utc),
        ))
        session.commit()
    engine.dispose()


def client_for(monkeypatch, tmp_path, seeded=True):
    db_path = tmp_path / "api.db"
    if seeded:
        seed(db_path)
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    return TestClient(app)


def test_health(monkeypatch, tmp_path):
    with client_for(monkeypatch, tmp_path, seeded=False) as client:
        response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_fear_greed_latest_with_breakdown(monkeypatch, tmp_path):
    with client_for(monkeypatch, tmp_path) as client:
        data = client.get("/api/fear-greed/latest").json()
        history = client.get("/api/fear-greed/history", params={"days": 7}).json()

    assert data["score"] == 62
    assert data["label"] == "Greed"
    assert data["breakdown"][0] == {"key": "volatility", "name": "Volatility", "score": 30}
    assert data["breakdown"][2]["score"] is None
    assert history["count"] == 1


def test_latest_without_runs_is_404(monkeypatch, tmp_path):
    with client_for(monkeypatch, tmp_path, seeded=False) as client:
        response = client.get("/api/altcoin-season-score/latest")
    assert response.status_code == 404


def test_coins_and_news(monkeypatch, tmp_path):
    with client_for(monkeypatch, tmp_path) as client:
        coins = client.get("/api/altcoin-season/coins").json()
        under = client.get("/api/altcoin-season/coins", params={"direction": "underperform"}).json()
        bad = client.get("/api/altcoin-season/coins", params={"direction": "sideways"})
        news = client.get("/api/news", params={"category": "sports"}).json()

    assert coins["index_score"] == 45
    assert coins["coins"][0]["ticker"] == "SOL"
    assert under["count"] == 0
    assert bad.status_code == 422
    assert news["news"][0]["link"] == "https://espn.com/a"
