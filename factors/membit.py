"""
Membit factor - Twitter/X clusters and posts in LLM-ready text format.

Needs MEMBIT_API_KEY; without it the factor is reported unavailable.
"""
from typing import Optional

import httpx
from loguru import logger

from config import settings
from .base import BaseFactorFetcher, FactorUnavailable

CLUSTER_LIMIT = 5
POST_LIMIT = 10
CLUSTER_TEXT_MAX = 1500
POST_TEXT_MAX = 2000
# Replies shorter than this carry no posts
MIN_TEXT_LEN = 10


class SocialFetcher(BaseFactorFetcher):
    """Trending clusters and recent posts for one topic."""

    name = "social"
    source = "Membit"

    def __init__(
        self,
        cluster_query: str,
        post_query: str,
        http_client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        super().__init__(http_client)
        self.cluster_query = cluster_query
        self.post_query = post_query
        self.api_key = settings.MEMBIT_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.MEMBIT_API_BASE).rstrip("/")

    async def _search(self, kind: str, query: str, limit: int) -> str:
        url = f"{self.base_url}/{kind}/search"
        params = {"q": query, "limit": limit, "format": "llm"}
        headers = {"X-Membit-Api-Key": self.api_key}

        if self.http_client is not None:
            response = await self.http_client.get(url, params=params, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.text

    async def fetch(self) -> dict:
        if not self.api_key:
            raise FactorUnavailable("MEMBIT_API_KEY not set")

        cluster_text = ""
        try:
            cluster_text = await self._search("clusters", self.cluster_query, CLUSTER_LIMIT)
        except httpx.HTTPError as e:
            logger.warning(f"[{self.name}] Cluster search failed: {e}")

        post_text = ""
        try:
            post_text = await self._search("posts", self.post_query, POST_LIMIT)
        except httpx.HTTPError as e:
            logger.warning(f"[{self.name}] Post search failed: {e}")

        logger.debug(f"[{self.name}] clusters={len(cluster_text)} chars, posts={len(post_text)} chars")
        if len(cluster_text) <= MIN_TEXT_LEN and len(post_text) <= MIN_TEXT_LEN:
            raise FactorUnavailable("no social data returned")

        return {
            "cluster_text": cluster_text[:CLUSTER_TEXT_MAX],
            "post_text": post_text[:POST_TEXT_MAX],
        }

    def describe(self, values: dict) -> str:
        return f"clusters={len(values['cluster_text'])} chars, posts={len(values['post_text'])} chars"
