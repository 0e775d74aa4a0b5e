"""
Base Factor Fetcher - Abstract base class for all scoring factors.

A fetcher never raises past run(): any failure becomes an unavailable
FactorResult so the prompt can fall back to its "redistribute weight" line.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import httpx
from loguru import logger


@dataclass(frozen=True)
class FactorRecord:
    """Normalized output of one factor fetch."""
    name: str
    values: dict
    source: str
    fetched_at: datetime = field(default_factory=datetime.utcnow)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "values": self.values,
            "source": self.source,
            "fetched_at": self.fetched_at.isoformat(),
        }


@dataclass(frozen=True)
class FactorResult:
    """Either a FactorRecord or the reason it could not be fetched."""
    factor: str
    record: Optional[FactorRecord] = None
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.record is not None

    @classmethod
    def ok(cls, record: FactorRecord) -> "FactorResult":
        return cls(factor=record.name, record=record)

    @classmethod
    def unavailable(cls, factor: str, error: str) -> "FactorResult":
        return cls(factor=factor, error=error)

    def to_dict(self) -> dict:
        return {
            "factor": self.factor,
            "available": self.available,
            "values": self.record.values if self.record else None,
            "error": self.error,
        }


class FactorUnavailable(Exception):
    """Raised inside fetch() when a source answered but has nothing usable."""


class BaseFactorFetcher(ABC):
    """Abstract base class for factor fetchers."""

    name: str = "factor"
    source: str = "unknown"

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self.http_client = http_client
        self.timeout = timeout

    @abstractmethod
    async def fetch(self) -> dict:
        """
        Fetch and normalize the factor values.
        Must be implemented by subclasses.
        """
        pass

    async def get_json(self, url: str, params: dict = None, headers: dict = None) -> Any:
        """GET a URL and decode its JSON body, raising on non-2xx."""
        if self.http_client is not None:
            response = await self.http_client.get(url, params=params, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json()

    async def run(self) -> FactorResult:
        """Run the fetcher with error handling."""
        logger.info(f"[{self.name}] Fetching from {self.source}...")

        try:
            values = await self.fetch()
        except FactorUnavailable as e:
            logger.warning(f"[{self.name}] Unavailable: {e}")
            return FactorResult.unavailable(self.name, str(e))
        except Exception as e:
            logger.error(f"[{self.name}] Fetch failed: {type(e).__name__}: {e}")
            return FactorResult.unavailable(self.name, f"{type(e).__name__}: {e}")

        record = FactorRecord(name=self.name, values=values, source=self.source)
        logger.info(f"[{self.name}] OK: {self.describe(values)}")
        return FactorResult.ok(record)

    def describe(self, values: dict) -> str:
        """One-line progress summary of fetched values."""
        return ", ".join(f"{k}={v}" for k, v in values.items() if isinstance(v, (int, float)))
