"""
Database Module - Crypto Market Index

Structure:
    database/
    ├── __init__.py      # This file - public API
    ├── session.py       # SQLAlchemy async session management
    ├── init.py          # Table creation and row counts
    └── models/          # SQLAlchemy ORM models

Usage:
    from database import get_session
    from database.models import FearGreedIndex

    async with get_session() as session:
        result = await session.execute(select(FearGreedIndex))
        rows = result.scalars().all()
"""

from .models import (
    Base,
    CreatedAtMixin,
    FearGreedIndex,
    AltcoinSeasonScore,
    News,
    AltcoinSeasonCoin,
)

from .session import (
    get_database_url,
    init_engine,
    close_engine,
    create_tables,
    get_session,
    get_session_dependency,
)

from .init import (
    init_database_async,
    get_table_counts_async,
    try_init_database,
)

__all__ = [
    # Models
    "Base",
    "CreatedAtMixin",
    "FearGreedIndex",
    "AltcoinSeasonScore",
    "News",
    "AltcoinSeasonCoin",
    # Session
    "get_database_url",
    "init_engine",
    "close_engine",
    "create_tables",
    "get_session",
    "get_session_dependency",
    # Init
    "init_database_async",
    "get_table_counts_async",
    "try_init_database",
]
