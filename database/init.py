"""
Database Initialization and Utilities
"""
from loguru import logger


async def init_database_async() -> None:
    """
    Create all tables defined in the models if they do not exist.

    Tasks call this before their first write so a fresh SQLite file works
    without running migrations.
    """
    from .session import create_tables
    await create_tables()


async def try_init_database() -> bool:
    """
    init_database_async for the tasks: an unreachable store is logged, not raised.

    Returns:
        True when the tables are ready
    """
    try:
        await init_database_async()
    except Exception as e:
        logger.error(f"DB Error: {type(e).__name__}: {e}. Continuing without storage")
        return False
    return True


async def get_table_counts_async() -> dict:
    """Row counts for every table."""
    from sqlalchemy import func, select
    from .models import Base
    from .session import get_session

    counts = {}
    async with get_session() as session:
        for table in Base.metadata.sorted_tables:
            result = await session.execute(select(func.count()).select_from(table))
            counts[table.name] = result.scalar() or 0
    return counts
