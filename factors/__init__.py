"""
Factors Module - one fetcher per weighted scoring input.

Every fetcher's run() returns a FactorResult: either a FactorRecord or the
error that made the factor unavailable.
"""
from .base import BaseFactorFetcher, FactorRecord, FactorResult, FactorUnavailable
from .coingecko import (
    DominanceFetcher,
    EthVsBtcFetcher,
    MarketCapShareFetcher,
    MomentumFetcher,
    MultiTokenFetcher,
    TopCoinsMarketFetcher,
    VolatilityFetcher,
    VolumeShareFetcher,
)
from .defillama import DefiTvlFetcher
from .alternative_me import AlternativeFearGreedFetcher
from .membit import SocialFetcher
from .market_reference import MarketReferenceFetcher

__all__ = [
    "BaseFactorFetcher",
    "FactorRecord",
    "FactorResult",
    "FactorUnavailable",
    "VolatilityFetcher",
    "MomentumFetcher",
    "DominanceFetcher",
    "MultiTokenFetcher",
    "EthVsBtcFetcher",
    "MarketCapShareFetcher",
    "VolumeShareFetcher",
    "TopCoinsMarketFetcher",
    "DefiTvlFetcher",
    "AlternativeFearGreedFetcher",
    "SocialFetcher",
    "MarketReferenceFetcher",
]
