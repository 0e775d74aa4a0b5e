"""
Index Pipeline - one scoring run from factors to a stored row.

Pipeline Flow:
1. Fetch every factor (failures become unavailable results)
2. Collect news headlines for context
3. Build the prompt and score it with the oracle
4. Persist one row

A failed oracle call aborts the run before anything is written. A failed
write is logged and the run still counts as done.
"""
import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Optional, Sequence

from loguru import logger

from config import settings
from constants import RunState
from database import get_session
from factors import BaseFactorFetcher, FactorResult
from prompts import get_prompt
from .indices import IndexDefinition
from .output_parser import OracleError, ScoreResult
from .prompt_builder import build_data_section
from .scorer import ScoringOracle

RowWriter = Callable[[dict], Awaitable[None]]

BOX_WIDTH = 55


def repository_writer(repository_cls) -> RowWriter:
    """Writer that inserts the row through an index repository."""
    async def write(row: dict) -> None:
        async with get_session() as session:
            await repository_cls(session).add_run(**row)
    return write


class IndexPipeline:
    """
    Run orchestrator for one scored index.

    Coordinates fetchers, headline collection, the oracle and the writer.
    """

    def __init__(
        self,
        definition: IndexDefinition,
        fetchers: Sequence[BaseFactorFetcher],
        oracle: ScoringOracle,
        collector=None,
        writer: Optional[RowWriter] = None,
        fetch_delay: Optional[float] = None,
    ):
        self.definition = definition
        self.fetchers = list(fetchers)
        self.oracle = oracle
        self.collector = collector
        self.writer = writer or repository_writer(definition.repository)
        self.fetch_delay = settings.API_CALL_DELAY if fetch_delay is None else fetch_delay
        self.state = RunState.CONFIGURING

    def _enter(self, state: RunState) -> None:
        logger.debug(f"[{self.definition.name}] {self.state.value} -> {state.value}")
        self.state = state

    # ============================================
    # STEPS
    # ============================================

    async def fetch_factors(self) -> dict[str, FactorResult]:
        results: dict[str, FactorResult] = {}
        for i, fetcher in enumerate(self.fetchers):
            if i and self.fetch_delay:
                await asyncio.sleep(self.fetch_delay)
            results[fetcher.name] = await fetcher.run()
        return results

    async def collect_headlines(self) -> list:
        if self.collector is None:
            return []
        return await self.collector.collect()

    def build_prompt(self, results: dict[str, FactorResult], headlines: Sequence) -> str:
        data_section = build_data_section(
            self.definition.sections,
            results,
            headlines,
            headline_note=self.definition.headline_note,
            extra_blocks=self.definition.extra_blocks,
        )
        return get_prompt(self.definition.prompt_name, data_section=data_section)

    async def persist(self, row: dict) -> bool:
        try:
            await self.writer(row)
        except Exception as e:
            logger.error(f"DB Error: {type(e).__name__}: {e}")
            return False
        logger.info("Saved to database")
        return True

    # ============================================
    # RUN
    # ============================================

    async def run(self) -> dict:
        """
        Run the index end to end.

        Returns:
            Dict with run results and statistics

        Raises:
            OracleError: The oracle failed or returned an invalid score.
                Nothing is persisted in that case.
        """
        run_start = datetime.now()
        run_id = run_start.strftime("%Y%m%d_%H%M%S")

        logger.info(f"=== Starting {self.definition.title} run {run_id} ===")

        results = {
            "run_id": run_id,
            "index": self.definition.name,
            "status": "in_progress",
            "steps": {},
        }

        # ============================================
        # Step 1: Factors
        # ============================================
        self._enter(RunState.FETCHING_FACTORS)
        logger.info(f"Step 1: Fetching {len(self.fetchers)} factors...")

        factor_results = await self.fetch_factors()
        available = [k for k, r in factor_results.items() if r.available]
        results["steps"]["factors"] = {
            "available": available,
            "unavailable": {k: r.error for k, r in factor_results.items() if not r.available},
        }
        logger.info(f"Factors available: {len(available)}/{len(factor_results)}")

        # ============================================
        # Step 2: Headlines
        # ============================================
        self._enter(RunState.FETCHING_HEADLINES)
        logger.info("Step 2: Collecting news headlines...")

        headlines = await self.collect_headlines()
        results["steps"]["headlines"] = {"collected": len(headlines)}

        # ============================================
        # Step 3: Scoring
        # ============================================
        self._enter(RunState.SCORING)
        logger.info("Step 3: Scoring with oracle...")

        prompt = self.build_prompt(factor_results, headlines)
        try:
            score = await self.oracle.score(prompt)
        except OracleError as e:
            self._enter(RunState.ABORTED)
            results["status"] = "aborted"
            results["error"] = str(e)
            logger.error(f"Oracle failed, aborting run: {e}")
            raise

        self.log_result(score)
        results["score"] = score.to_dict()

        # ============================================
        # Step 4: Persist
        # ============================================
        self._enter(RunState.PERSISTING)
        logger.info("Step 4: Saving to database...")

        row = self.definition.build_row(score, factor_results, headlines)
        saved = await self.persist(row)
        results["steps"]["persist"] = {"saved": saved}

        self._enter(RunState.DONE)
        results["status"] = "success"
        results["duration_seconds"] = (datetime.now() - run_start).total_seconds()

        logger.info(
            f"=== {self.definition.title}: {score.score} ({score.label}) | "
            f"factors {len(available)}/{len(factor_results)} | headlines {len(headlines)} | "
            f"saved={saved} ==="
        )
        return results

    def log_result(self, score: ScoreResult) -> None:
        """Result box with the score, reason, factor breakdown and token scores."""
        inner = BOX_WIDTH - 4
        logger.info("═" * BOX_WIDTH)
        logger.info(f"  ┌{'─' * inner}┐")
        logger.info(f"  │ {f'{self.definition.title}: {score.score} / 100':<{inner - 1}}│")
        logger.info(f"  │ {f'Label: {score.label}':<{inner - 1}}│")
        logger.info(f"  └{'─' * inner}┘")
        logger.info(f"  Reason: {score.reason}")

        if score.factors:
            logger.info("  Factor Breakdown:")
            for key, display in self.definition.breakdown:
                value = score.factors.get(key)
                logger.info(f"    {display + ':':<18}{'N/A' if value is None else value}")

        if score.token_scores:
            logger.info("  Per-Token Scores:")
            for symbol, ts in score.token_scores.items():
                if isinstance(ts, dict):
                    logger.info(f"    {symbol}: {ts.get('score')} ({ts.get('label')}) - {ts.get('summary')}")
        logger.info("═" * BOX_WIDTH)
