"""
Index Models

One row per scoring run; rows are never updated.
"""
from typing import Optional, List, Dict, Any

from sqlalchemy import Integer, Float, String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin


class FearGreedIndex(Base, CreatedAtMixin):
    """
    Crypto Fear & Greed Index run.

    headlines: [{"site": ..., "title": ..., "link": ...}]
    factors: sub-score per factor as returned by the oracle (nullable values)
    token_scores: {"BTC": {"score": ..., "label": ..., "summary": ...}, ...}
    token_prices: {"BTC": {"current_price": ..., "change_24h": ...}, ...}
    """
    __tablename__ = "fear_greed_index"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    score: Mapped[float] = mapped_column(Float, nullable=False)
    label: Mapped[str] = mapped_column(String(50), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # BTC snapshot at scoring time
    btc_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    btc_24h_change: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    btc_volume: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    headlines: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    factors: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    token_scores: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    token_prices: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # Raw factor values fed to the prompt, keyed by factor name
    factor_snapshot: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)


class AltcoinSeasonScore(Base, CreatedAtMixin):
    """Altcoin Season Score run."""
    __tablename__ = "altcoin_season_score"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    score: Mapped[float] = mapped_column(Float, nullable=False)
    label: Mapped[str] = mapped_column(String(50), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    total_market_cap: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    altcoin_market_cap: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    btc_dominance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    headlines: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    factors: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    factor_snapshot: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
