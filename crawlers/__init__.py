"""
Crawlers Module - headline and chart scraping over remote browser sessions.
"""
from .base_crawler import BaseCrawler, CrawlResult, Headline, SiteRule
from .extractor import STRATEGIES, extract_headlines, extract_links
from .headline_collector import HeadlineCollector
from .altcoin_season_crawler import AltcoinSeasonCrawler, parse_top_coins
from .sites import CRYPTO_SITES, NEWS_SITES

__all__ = [
    "BaseCrawler",
    "CrawlResult",
    "Headline",
    "SiteRule",
    "STRATEGIES",
    "extract_headlines",
    "extract_links",
    "HeadlineCollector",
    "AltcoinSeasonCrawler",
    "parse_top_coins",
    "CRYPTO_SITES",
    "NEWS_SITES",
]
