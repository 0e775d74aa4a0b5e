"""
API Routes - read-only endpoints over stored runs

Endpoints organized by:
- Health Check
- Fear & Greed Index (latest and history)
- Altcoin Season Score (latest and history)
- Altcoin Season snapshot (top-100 coins)
- News (monitored headlines)
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from constants import PerformanceDirection
from database import get_session_dependency
from processor import ALTCOIN_SEASON_SCORE, FEAR_GREED, IndexDefinition
from repositories import (
    AltcoinSeasonRepository,
    AltcoinSeasonScoreRepository,
    FearGreedRepository,
    NewsRepository,
)

router = APIRouter()


def serialize_run(row, definition: IndexDefinition) -> dict:
    """Row dict plus the factor breakdown in display order."""
    data = row.to_dict()
    factors = data.get("factors") or {}
    data["breakdown"] = [
        {"key": key, "name": display, "score": factors.get(key)}
        for key, display in definition.breakdown
    ]
    return data


# ============================================================
# Health Check
# ============================================================
@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "database": "external" if settings.DATABASE_URL else str(settings.DATABASE_PATH)
    }


# ============================================================
# Fear & Greed Index
# ============================================================
@router.get("/fear-greed/latest")
async def get_fear_greed_latest(session: AsyncSession = Depends(get_session_dependency)):
    """Most recent Fear & Greed reading."""
    row = await FearGreedRepository(session).get_latest()
    if row is None:
        raise HTTPException(status_code=404, detail="No Fear & Greed runs yet")
    return serialize_run(row, FEAR_GREED)


@router.get("/fear-greed/history")
async def get_fear_greed_history(
    days: int = Query(default=30, ge=1, le=365, description="Number of days of history"),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Fear & Greed runs for charts, newest first."""
    rows = await FearGreedRepository(session).get_history(days=days)
    return {
        "history": [
            {"score": r.score, "label": r.label, "btc_price": r.btc_price, "created_at": r.created_at}
            for r in rows
        ],
        "count": len(rows)
    }


# ============================================================
# Altcoin Season Score
# ============================================================
@router.get("/altcoin-season-score/latest")
async def get_altcoin_season_score_latest(session: AsyncSession = Depends(get_session_dependency)):
    """Most recent Altcoin Season Score."""
    row = await AltcoinSeasonScoreRepository(session).get_latest()
    if row is None:
        raise HTTPException(status_code=404, detail="No Altcoin Season Score runs yet")
    return serialize_run(row, ALTCOIN_SEASON_SCORE)


@router.get("/altcoin-season-score/history")
async def get_altcoin_season_score_history(
    days: int = Query(default=30, ge=1, le=365, description="Number of days of history"),
    session: AsyncSession = Depends(get_session_dependency),
):
    rows = await AltcoinSeasonScoreRepository(session).get_history(days=days)
    return {
        "history": [
            {"score": r.score, "label": r.label, "btc_dominance": r.btc_dominance, "created_at": r.created_at}
            for r in rows
        ],
        "count": len(rows)
    }


# ============================================================
# Altcoin Season snapshot
# ============================================================
@router.get("/altcoin-season/coins")
async def list_altcoin_season_coins(
    direction: Optional[PerformanceDirection] = None,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Top-100 performance vs BTC, in chart order."""
    rows = await AltcoinSeasonRepository(session).list_coins(direction.value if direction else None)
    first = rows[0] if rows else None
    return {
        "index_score": first.index_score if first else None,
        "index_label": first.index_label if first else None,
        "scraped_at": first.scraped_at if first else None,
        "coins": [r.to_dict() for r in rows],
        "count": len(rows)
    }


# ============================================================
# News
# ============================================================
@router.get("/news")
async def list_news(
    limit: int = Query(default=50, ge=1, le=200),
    category: Optional[str] = None,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Headlines sent by the news monitor, newest first."""
    rows = await NewsRepository(session).get_recent(limit=limit, category=category)
    return {"news": [r.to_dict() for r in rows], "count": len(rows)}
