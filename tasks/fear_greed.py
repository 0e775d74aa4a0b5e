"""
Crypto Fear & Greed Index task.

Usage:
    python -m tasks.fear_greed          # Ask for browser session options
    python -m tasks.fear_greed --cron   # Fixed options for unattended runs
"""
import asyncio
import sys
from typing import Optional, Sequence

from browser import BrowserSessionConfig
from config import ConfigurationError, require_settings
from processor import FEAR_GREED
from utils import logger
from .cli import init_task_logging, parse_args, resolve_session_config
from .index_task import REQUIRED_SETTINGS, run_index


async def run(session_config: BrowserSessionConfig, **overrides) -> int:
    """Score and store one Fear & Greed reading. Returns the exit code."""
    logger.info("═" * 55)
    logger.info("  CRYPTO FEAR & GREED INDEX - AI-Powered")
    logger.info("  5 Factors: Volatility | Momentum | Social | Dominance | Trends")
    logger.info("═" * 55)
    return await run_index(FEAR_GREED, session_config, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args("Crypto Fear & Greed Index", argv)
    init_task_logging(args, "fear_greed")

    try:
        require_settings(*REQUIRED_SETTINGS)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    session_config = resolve_session_config(args)
    return asyncio.run(run(session_config))


if __name__ == "__main__":
    sys.exit(main())
