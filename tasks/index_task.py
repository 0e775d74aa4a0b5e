"""
Index Task Runner - shared wiring for the scored index tasks.

Builds the remote renderer, HTTP client, oracle and headline collector for an
IndexDefinition, runs its pipeline and maps the outcome to an exit code.
"""
import random
from typing import Optional

import httpx
from loguru import logger

from browser import BrowserCashClient, BrowserSessionConfig, PageRenderer
from config import ConfigurationError, require_settings, settings
from crawlers import CRYPTO_SITES, HeadlineCollector
from database import try_init_database
from llm import LLMClient, get_client
from processor import IndexDefinition, IndexPipeline, OracleError, ScoreParser, ScoringOracle

REQUIRED_SETTINGS = ("API_KEY", "GEMINI_API_KEY")


async def run_index(
    definition: IndexDefinition,
    session_config: BrowserSessionConfig,
    llm_client: Optional[LLMClient] = None,
    renderer=None,
    http_client: Optional[httpx.AsyncClient] = None,
    writer=None,
    fetch_delay: Optional[float] = None,
    site_delay: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Run one index end to end.

    Returns:
        0 when the run completed (even if the row could not be saved),
        1 on missing credentials or an oracle failure
    """
    try:
        require_settings(*REQUIRED_SETTINGS)
    except ConfigurationError as e:
        logger.error(f"{e}. Abort.")
        return 1

    renderer = renderer or PageRenderer(BrowserCashClient(settings.API_KEY), session_config)
    llm_client = llm_client or get_client()

    own_client = http_client is None
    if own_client:
        http_client = httpx.AsyncClient(timeout=30.0)

    try:
        if writer is None:
            await try_init_database()

        collector = HeadlineCollector(
            renderer,
            CRYPTO_SITES,
            target=settings.HEADLINE_TARGET,
            site_delay=settings.SITE_DELAY if site_delay is None else site_delay,
            rng=rng,
        )
        oracle = ScoringOracle(
            llm_client,
            temperature=definition.temperature,
            max_tokens=settings.LLM_MAX_TOKENS,
            parser=ScoreParser(definition.labels),
        )
        pipeline = IndexPipeline(
            definition,
            definition.make_fetchers(http_client, renderer),
            oracle,
            collector=collector,
            writer=writer,
            fetch_delay=fetch_delay,
        )
        await pipeline.run()
    except OracleError as e:
        logger.error(f"Oracle could not score the {definition.title}: {e}. Abort.")
        return 1
    finally:
        if own_client:
            await http_client.aclose()

    return 0
