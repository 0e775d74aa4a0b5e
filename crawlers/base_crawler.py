"""
Base Crawler - shared records for the page crawlers and the run wrapper.

A crawl never raises past BaseCrawler.run(): failures come back as a
CrawlResult with success=False.
"""
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger


@dataclass
class CrawlResult:
    """Rows scraped by one crawl plus page-level values in meta."""
    source: str
    success: bool
    data: list[dict] = field(default_factory=list)
    error: Optional[str] = None
    meta: dict = field(default_factory=dict)
    crawled_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def failed(cls, source: str, error: str) -> "CrawlResult":
        return cls(source=source, success=False, error=error)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "crawled_at": self.crawled_at.isoformat(),
            "count": len(self.data),
            "meta": self.meta,
            "data": self.data,
        }


@dataclass(frozen=True)
class Headline:
    """One news headline picked from a site."""
    site: str
    title: str
    link: str
    published_at: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"site": self.site, "title": self.title, "link": self.link}
        if self.published_at:
            data["published_at"] = self.published_at
        return data


@dataclass(frozen=True)
class SiteRule:
    """
    Declarative extraction rule for one news site.

    Sites without a strategy are read by the generic link extractor using
    link_selector and the length/exclusion bounds. Sites with a strategy name
    are read by the named strategy in crawlers.extractor.
    """
    name: str
    category: str
    url: str
    base_url: str = ""
    wait_for: Optional[str] = None
    link_selector: Optional[str] = None
    title_selector: Optional[str] = None
    min_len: int = 30
    max_len: int = 200
    excludes: tuple[str, ...] = ()
    strategy: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return self.strategy is not None


class BaseCrawler(ABC):
    """
    Crawl wrapper: logs, keeps a raw JSON snapshot of successful crawls under
    data_dir/raw and turns any exception into a failed result.
    """

    def __init__(self, name: str, data_dir: Path, save_raw: bool = True):
        self.name = name
        self.raw_dir = data_dir / "raw"
        self.keep_raw = save_raw

    @abstractmethod
    async def fetch(self) -> CrawlResult:
        ...

    def save_raw(self, result: CrawlResult) -> Path:
        self.raw_dir.mkdir(parents=True, exist_ok=True)
        path = self.raw_dir / f"{self.name}_{result.crawled_at:%Y%m%d_%H%M%S}.json"
        path.write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info(f"[{self.name}] Raw snapshot: {path}")
        return path

    async def run(self) -> CrawlResult:
        logger.info(f"[{self.name}] Crawling...")
        try:
            result = await self.fetch()
        except Exception as e:
            logger.exception(f"[{self.name}] Crawl crashed")
            return CrawlResult.failed(self.name, f"{type(e).__name__}: {e}")

        if not result.success:
            logger.error(f"[{self.name}] Crawl failed: {result.error}")
            return result

        logger.info(f"[{self.name}] Crawled {len(result.data)} rows")
        if self.keep_raw:
            self.save_raw(result)
        return result
