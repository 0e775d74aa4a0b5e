"""
Scoring Oracle - send an index prompt to the LLM and validate the reply.
"""
import asyncio
from typing import Optional

from loguru import logger

from llm import LLMClient
from .output_parser import OracleError, ScoreParser, ScoreResult


class ScoringOracle:
    """One prompt in, one validated ScoreResult out."""

    def __init__(
        self,
        client: LLMClient,
        temperature: float,
        max_tokens: int = 500,
        parser: Optional[ScoreParser] = None,
    ):
        self.client = client
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.parser = parser or ScoreParser()

    async def score(self, prompt: str) -> ScoreResult:
        """
        Score a prompt.

        Raises:
            OracleError: Transport failure or no JSON object in the reply
            InvalidScoreError: Score missing or outside [0, 100]
        """
        logger.info(f"Sending prompt to {self.client.model} ({len(prompt)} chars)...")
        try:
            response = await asyncio.to_thread(
                self.client.generate,
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            raise OracleError(f"Oracle request failed: {type(e).__name__}: {e}") from e

        if response.latency_ms is not None:
            logger.debug(f"Oracle replied in {response.latency_ms}ms ({response.total_tokens} tokens)")

        return self.parser.parse(response.content or "")
