"""
Market reference factor - CoinMarketCap Altcoin Season Index, scraped.
"""
import re
from typing import Optional

from bs4 import BeautifulSoup

from constants import ALTCOIN_SEASON_REFERENCE_LABELS, label_for_score
from .base import BaseFactorFetcher, FactorUnavailable

ALTCOIN_SEASON_PAGE = "https://coinmarketcap.com/charts/altcoin-season-index/"
INDEX_IN_TEXT = re.compile(r"(?:altcoin\s+season\s+index|altcoin\s+month)[:\s]*(\d{1,3})", re.IGNORECASE)

# Headline wording CMC uses for the current regime, most specific first
REGIME_LABELS = ("Altcoin Month", "Altcoin Season", "Bitcoin Season", "Bitcoin Month")


def page_text(html: str) -> str:
    """Visible text of a page with whitespace collapsed."""
    return " ".join(BeautifulSoup(html, "html.parser").get_text(" ").split())


def parse_index_score(text: str) -> Optional[int]:
    match = INDEX_IN_TEXT.search(text)
    if not match:
        return None
    score = int(match.group(1))
    return score if 0 <= score <= 100 else None


def parse_regime_label(text: str) -> Optional[str]:
    # The page title itself reads "Altcoin Season Index"
    for label in REGIME_LABELS:
        if re.search(rf"{label}(?!\s+Index)", text):
            return label
    return None


class MarketReferenceFetcher(BaseFactorFetcher):
    """Altcoin Season Index published by CoinMarketCap."""

    name = "market_ref"
    source = "CoinMarketCap"

    def __init__(self, renderer, url: str = ALTCOIN_SEASON_PAGE):
        super().__init__()
        self.renderer = renderer
        self.url = url

    async def fetch(self) -> dict:
        html = await self.renderer.render(self.url, settle_ms=5000, scroll_steps=0)
        score = parse_index_score(page_text(html))
        if score is None:
            raise FactorUnavailable("could not extract score from CoinMarketCap")

        return {
            "source": self.source,
            "score": score,
            "label": label_for_score(score, ALTCOIN_SEASON_REFERENCE_LABELS),
        }

    def describe(self, values: dict) -> str:
        return f"{values['score']} ({values['label']})"
