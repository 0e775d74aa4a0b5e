"""
Alternative.me factor - the industry Fear & Greed Index as a cross-reference.

Reads the public API first; if that fails and a page renderer is available,
scrapes the index page instead.
"""
import re
from datetime import datetime, timezone
from typing import Optional

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from config import settings
from constants import FEAR_GREED_REFERENCE_LABELS, label_for_score
from .base import BaseFactorFetcher, FactorUnavailable

INDEX_PAGE = "https://alternative.me/crypto/fear-and-greed-index/"
SCORE_SELECTORS = ".fng-circle .fng-score, .fng-value, [class*='fear'] [class*='score']"
SCORE_IN_TEXT = re.compile(r"Fear.*?Greed.*?(\d{1,2})", re.IGNORECASE | re.DOTALL)


def parse_index_page(html: str) -> Optional[int]:
    """Find the current index value on the rendered index page."""
    soup = BeautifulSoup(html, "html.parser")
    el = soup.select_one(SCORE_SELECTORS)
    if el is not None:
        text = el.get_text(strip=True)
        if text.isdigit():
            return int(text)
    match = SCORE_IN_TEXT.search(soup.get_text(" ", strip=True))
    return int(match.group(1)) if match else None


class AlternativeFearGreedFetcher(BaseFactorFetcher):
    """Current value and 7-day history of the Alternative.me index."""

    name = "alt_fng"
    source = "Alternative.me"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        renderer=None,
        base_url: Optional[str] = None,
        days: int = 7,
    ):
        super().__init__(http_client)
        self.renderer = renderer
        self.base_url = (base_url or settings.ALTERNATIVE_ME_API_BASE).rstrip("/")
        self.days = days

    async def fetch(self) -> dict:
        try:
            return await self.fetch_api()
        except Exception as e:
            if self.renderer is None:
                raise
            logger.warning(f"[{self.name}] API failed ({e}), trying page scrape")
        return await self.fetch_page()

    async def fetch_api(self) -> dict:
        data = await self.get_json(f"{self.base_url}/fng/", params={"limit": self.days})
        entries = data.get("data") or []
        if not entries:
            raise FactorUnavailable("no index data returned")

        history = [
            {
                "score": int(entry["value"]),
                "label": entry["value_classification"],
                "date": datetime.fromtimestamp(int(entry["timestamp"]), tz=timezone.utc).strftime("%Y-%m-%d"),
            }
            for entry in entries
        ]
        return self._values(history, via="api")

    async def fetch_page(self) -> dict:
        html = await self.renderer.render(INDEX_PAGE, settle_ms=3000, scroll_steps=0)
        score = parse_index_page(html)
        if score is None:
            raise FactorUnavailable("could not extract score from index page")

        history = [{
            "score": score,
            "label": label_for_score(score, FEAR_GREED_REFERENCE_LABELS),
            "date": datetime.now(timezone.utc).strftime("%Y-%m-%d"),
        }]
        return self._values(history, via="scrape")

    @staticmethod
    def _values(history: list[dict], via: str) -> dict:
        current = history[0]
        return {
            "current_score": current["score"],
            "current_label": current["label"],
            "history": history,
            "average_7d": round(sum(h["score"] for h in history) / len(history)),
            "via": via,
        }

    def describe(self, values: dict) -> str:
        scores = ", ".join(str(h["score"]) for h in values["history"])
        return f"{values['current_score']} ({values['current_label']}) via {values['via']} | history: {scores}"
