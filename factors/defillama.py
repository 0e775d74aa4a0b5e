"""
DefiLlama factor - total DeFi TVL growth over 7 and 30 days.
"""
from typing import Optional

import httpx

from config import settings
from .base import BaseFactorFetcher, FactorUnavailable
from .stats import percent_change, round2

# 30 days of growth needs 31 daily points
WINDOW = 31


class DefiTvlFetcher(BaseFactorFetcher):
    """Growth of total value locked across all chains."""

    name = "defi_tvl"
    source = "DefiLlama"

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, base_url: Optional[str] = None):
        super().__init__(http_client)
        self.base_url = (base_url or settings.DEFILLAMA_API_BASE).rstrip("/")

    async def fetch(self) -> dict:
        data = await self.get_json(f"{self.base_url}/v2/historicalChainTvl")
        recent = data[-WINDOW:]
        if len(recent) < 2:
            raise FactorUnavailable(f"only {len(recent)} TVL points returned")

        current_tvl = recent[-1]["tvl"]
        tvl_30d_ago = recent[0]["tvl"]
        tvl_7d_ago = recent[-8]["tvl"] if len(recent) >= 8 else tvl_30d_ago

        return {
            "current_tvl": current_tvl,
            "tvl_30d_ago": tvl_30d_ago,
            "tvl_7d_ago": tvl_7d_ago,
            "growth_7d": round2(percent_change(current_tvl, tvl_7d_ago)),
            "growth_30d": round2(percent_change(current_tvl, tvl_30d_ago)),
        }
