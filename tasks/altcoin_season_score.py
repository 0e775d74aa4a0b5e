"""
Altcoin Season Score task.

Usage:
    python -m tasks.altcoin_season_score [--cron]
"""
import asyncio
import sys
from typing import Optional, Sequence

from browser import BrowserSessionConfig
from config import ConfigurationError, require_settings
from processor import ALTCOIN_SEASON_SCORE
from utils import logger
from .cli import init_task_logging, parse_args, resolve_session_config
from .index_task import REQUIRED_SETTINGS, run_index


async def run(session_config: BrowserSessionConfig, **overrides) -> int:
    logger.info("═" * 55)
    logger.info("  ALTCOIN SEASON SCORE - AI-Powered")
    logger.info("  6 Factors: ETH/BTC | Market Cap | DeFi TVL | Volume | Social | Reference")
    logger.info("═" * 55)
    return await run_index(ALTCOIN_SEASON_SCORE, session_config, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args("Altcoin Season Score", argv)
    init_task_logging(args, "altcoin_season_score")

    try:
        require_settings(*REQUIRED_SETTINGS)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    session_config = resolve_session_config(args)
    return asyncio.run(run(session_config))


if __name__ == "__main__":
    sys.exit(main())
