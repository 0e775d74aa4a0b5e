"""
Altcoin Season Model - latest top-100 performance snapshot.

The table holds only the most recent scrape; each run replaces all rows.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class AltcoinSeasonCoin(Base):
    """One coin's 90-day performance against BTC."""
    __tablename__ = "altcoin_season"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    ticker: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    coingecko_id: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Unsigned percentage; sign is carried by direction
    performance: Mapped[float] = mapped_column(Float, nullable=False)
    direction: Mapped[str] = mapped_column(String(20), nullable=False, default="outperform")
    rank: Mapped[int] = mapped_column(Integer, nullable=False)

    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_change_24h: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    index_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    index_label: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    scraped_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
