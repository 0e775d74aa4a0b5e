"""
Index Definitions - what each scored index fetches, shows the model and stores.

An IndexDefinition ties together the factor fetchers, the prompt sections
with their weights, the oracle temperature and the row written per run.
"""
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

import httpx

from constants import ALTCOIN_SEASON_LABELS, FEAR_GREED_LABELS, TaskName
from factors import (
    AlternativeFearGreedFetcher,
    BaseFactorFetcher,
    DefiTvlFetcher,
    DominanceFetcher,
    EthVsBtcFetcher,
    FactorRecord,
    FactorResult,
    MarketCapShareFetcher,
    MarketReferenceFetcher,
    MomentumFetcher,
    MultiTokenFetcher,
    SocialFetcher,
    VolatilityFetcher,
    VolumeShareFetcher,
)
from repositories import AltcoinSeasonScoreRepository, FearGreedRepository
from .output_parser import ScoreResult
from .prompt_builder import (
    BlockRenderer,
    FactorSection,
    billions,
    signed_pct,
    trillions,
    usd,
)

FetcherFactory = Callable[[Optional[httpx.AsyncClient], object], list[BaseFactorFetcher]]
RowBuilder = Callable[[ScoreResult, Mapping[str, FactorResult], Sequence], dict]


@dataclass(frozen=True)
class IndexDefinition:
    """Everything that differs between the scored indices."""
    name: str
    title: str
    prompt_name: str
    temperature: float
    labels: Sequence[tuple[int, str]]
    sections: Sequence[FactorSection]
    make_fetchers: FetcherFactory
    build_row: RowBuilder
    repository: type
    # (factor key in the oracle reply, display name) for the result box
    breakdown: Sequence[tuple[str, str]] = ()
    headline_note: Optional[str] = None
    extra_blocks: Sequence[BlockRenderer] = field(default_factory=tuple)


# ============================================
# SHARED HELPERS
# ============================================

def values_of(results: Mapping[str, FactorResult], key: str) -> dict:
    """Values of an available factor, or {}."""
    result = results.get(key)
    if result is None or not result.available:
        return {}
    return result.record.values


def factor_snapshot(results: Mapping[str, FactorResult]) -> dict:
    return {key: result.record.values for key, result in results.items() if result.available}


def headline_rows(headlines: Sequence) -> list[dict]:
    return [h.to_dict() for h in headlines]


def render_social(record: FactorRecord) -> list[str]:
    lines = ["- Source: Twitter/X data via Membit API"]
    if record.get("cluster_text"):
        lines.append(f"- Trending Clusters:\n{record['cluster_text']}")
    if record.get("post_text"):
        lines.append(f"- Recent Posts:\n{record['post_text']}")
    return lines


# ============================================
# FEAR & GREED
# ============================================

def render_volatility(r: FactorRecord) -> list[str]:
    return [
        f"- 30-day Volatility (Std Dev of daily returns): {r['volatility']}%",
        f"- Max Drawdown in last 30 days: {r['max_drawdown']}%",
        f"- 30-day Price Change: {signed_pct(r['change_30d'])}",
        f"- Recent 7-day prices: {' → '.join(usd(p) for p in r['price_history'])}",
    ]


def render_momentum(r: FactorRecord) -> list[str]:
    return [
        f"- Current BTC Price: {usd(r['current_price'])}",
        f"- 24h Change: {signed_pct(r['change_24h'])}",
        f"- 7d Change: {signed_pct(r['change_7d'])}",
        f"- 30d Change: {signed_pct(r['change_30d'])}",
        f"- 24h Volume: {billions(r['volume_24h'])}",
        f"- Market Cap: {trillions(r['market_cap'], 3)}",
        f"- ATH (All-Time High): {usd(r['ath'])} ({r['ath_change_percentage']}% from ATH)",
    ]


def render_dominance(r: FactorRecord) -> list[str]:
    return [
        f"- BTC Dominance: {r['btc_dominance']}%",
        f"- Total Crypto Market Cap: {trillions(r['total_market_cap'])}",
        f"- Total 24h Volume: {billions(r['total_volume'])}",
        f"- Market Cap Change 24h: {signed_pct(r['market_cap_change_24h'])}",
    ]


def render_alt_fng(r: FactorRecord) -> list[str]:
    history = ", ".join(f"{h['date']}: {h['score']} ({h['label']})" for h in r["history"])
    return [
        "- Alternative.me Fear & Greed Index (industry standard):",
        f"- Current Score: {r['current_score']} ({r['current_label']})",
        f"- 7-day History: {history}",
        f"- 7-day Average: {r['average_7d']}",
    ]


def token_prices(results: Mapping[str, FactorResult]) -> dict:
    """Per-token market snapshots: ETH/SOL/BNB plus BTC from momentum."""
    tokens = dict(values_of(results, "multi_token").get("tokens") or {})
    momentum = values_of(results, "momentum")
    if momentum:
        tokens["BTC"] = {
            "current_price": momentum["current_price"],
            "change_24h": momentum["change_24h"],
            "change_7d": momentum["change_7d"],
            "volume_24h": momentum["volume_24h"],
            "market_cap": momentum["market_cap"],
        }
    return tokens


def render_token_block(results: Mapping[str, FactorResult]) -> Optional[str]:
    tokens = token_prices(results)
    if not tokens:
        return None
    lines = ["== MULTI-TOKEN MARKET DATA (for per-token scoring) =="]
    for symbol, t in tokens.items():
        lines.extend([
            f"--- {symbol} ---",
            f"- Price: {usd(t['current_price'])}",
            f"- 24h: {signed_pct(t['change_24h'])}",
            f"- 7d: {signed_pct(t['change_7d'])}",
            f"- Volume: {billions(t['volume_24h'])}",
            f"- Market Cap: {billions(t['market_cap'])}",
        ])
    return "\n".join(lines)


def fear_greed_fetchers(http_client: Optional[httpx.AsyncClient], renderer) -> list[BaseFactorFetcher]:
    return [
        VolatilityFetcher(http_client),
        MomentumFetcher(http_client),
        MultiTokenFetcher(http_client),
        DominanceFetcher(http_client),
        SocialFetcher("bitcoin", "bitcoin BTC crypto", http_client=http_client),
        AlternativeFearGreedFetcher(http_client, renderer=renderer),
    ]


def fear_greed_row(score: ScoreResult, results: Mapping[str, FactorResult], headlines: Sequence) -> dict:
    momentum = values_of(results, "momentum")
    return {
        "score": score.score,
        "label": score.label,
        "reason": score.reason,
        "btc_price": momentum.get("current_price"),
        "btc_24h_change": momentum.get("change_24h"),
        "btc_volume": momentum.get("volume_24h"),
        "headlines": headline_rows(headlines),
        "factors": score.factors or None,
        "token_scores": score.token_scores,
        "token_prices": token_prices(results) or None,
        "factor_snapshot": factor_snapshot(results),
    }


FEAR_GREED = IndexDefinition(
    name=TaskName.FEAR_GREED.value,
    title="CRYPTO FEAR & GREED INDEX",
    prompt_name="fear_greed",
    temperature=0.5,
    labels=FEAR_GREED_LABELS,
    sections=(
        FactorSection(
            "volatility", "VOLATILITY", 25, render_volatility,
            "High volatility = Fear. Unusual spikes in volatility = Extreme Fear.",
        ),
        FactorSection(
            "momentum", "MOMENTUM & VOLUME", 25, render_momentum,
            "High buying volume in positive market = Greed. Near ATH = Extreme Greed.",
        ),
        FactorSection(
            "social", "SOCIAL MEDIA", 17.5, render_social,
            "Analyze the sentiment of these posts. Positive/FOMO = Greed. Panic/negative = Fear.",
        ),
        FactorSection(
            "dominance", "BTC DOMINANCE", 15, render_dominance,
            "Rising BTC dominance = Fear (flight to safety). Falling dominance = Greed (altcoin speculation).",
        ),
        FactorSection(
            "alt_fng", "INDUSTRY SENTIMENT REFERENCE", 17.5, render_alt_fng,
            "Use this as a cross-reference. If your analysis aligns with this index, it confirms the "
            "sentiment. If it diverges significantly, explain why based on the data.",
        ),
    ),
    make_fetchers=fear_greed_fetchers,
    build_row=fear_greed_row,
    repository=FearGreedRepository,
    breakdown=(
        ("volatility", "Volatility"),
        ("momentum", "Momentum"),
        ("social", "Social Media"),
        ("dominance", "BTC Dominance"),
        ("trends", "Search Trends"),
    ),
    extra_blocks=(render_token_block,),
)


# ============================================
# ALTCOIN SEASON SCORE
# ============================================

def render_eth_vs_btc(r: FactorRecord) -> list[str]:
    return [
        f"- ETH Price: {usd(r['eth_price'])} | BTC Price: {usd(r['btc_price'])}",
        f"- ETH 24h: {signed_pct(r['eth_24h'])} | BTC 24h: {signed_pct(r['btc_24h'])}",
        f"- ETH 7d: {signed_pct(r['eth_7d'])} | BTC 7d: {signed_pct(r['btc_7d'])}",
        f"- ETH 30d: {signed_pct(r['eth_30d'])} | BTC 30d: {signed_pct(r['btc_30d'])}",
        f"- ETH Outperformance vs BTC: 24h {signed_pct(r['outperform_24h'])} | "
        f"7d {signed_pct(r['outperform_7d'])} | 30d {signed_pct(r['outperform_30d'])}",
    ]


def render_market_cap_share(r: FactorRecord) -> list[str]:
    return [
        f"- BTC Dominance: {r['btc_dominance']}%",
        f"- ETH Dominance: {r['eth_dominance']}%",
        f"- Altcoin Share (100% - BTC): {r['altcoin_share']}%",
        f"- Total Crypto Market Cap: {trillions(r['total_market_cap'])}",
        f"- Market Cap 24h Change: {signed_pct(r['market_cap_change_24h'])}",
    ]


def render_defi_tvl(r: FactorRecord) -> list[str]:
    return [
        f"- Current Total DeFi TVL: {billions(r['current_tvl'])}",
        f"- 7-day Growth: {signed_pct(r['growth_7d'])}",
        f"- 30-day Growth: {signed_pct(r['growth_30d'])}",
    ]


def render_volume_share(r: FactorRecord) -> list[str]:
    return [
        f"- Total 24h Volume: {billions(r['total_volume'])}",
        f"- BTC Volume: {billions(r['btc_volume'])}",
        f"- Altcoin Volume: {billions(r['altcoin_volume'])}",
        f"- Altcoin Volume Share: {r['altcoin_volume_share']}%",
    ]


def render_market_ref(r: FactorRecord) -> list[str]:
    return [
        f"- Source: {r['source']}",
        f"- Altcoin Season Index Score: {r['score']} ({r['label']})",
    ]


def altcoin_season_fetchers(http_client: Optional[httpx.AsyncClient], renderer) -> list[BaseFactorFetcher]:
    return [
        EthVsBtcFetcher(http_client),
        MarketCapShareFetcher(http_client),
        DefiTvlFetcher(http_client),
        VolumeShareFetcher(http_client),
        SocialFetcher(
            "altcoin season ethereum defi",
            "altcoin season ethereum solana DeFi altcoins",
            http_client=http_client,
        ),
        MarketReferenceFetcher(renderer),
    ]


def altcoin_season_row(score: ScoreResult, results: Mapping[str, FactorResult], headlines: Sequence) -> dict:
    share = values_of(results, "market_cap_share")
    total = share.get("total_market_cap")
    altcoin_cap = total * share["altcoin_share"] / 100 if total else None
    return {
        "score": score.score,
        "label": score.label,
        "reason": score.reason,
        "total_market_cap": total,
        "altcoin_market_cap": altcoin_cap,
        "btc_dominance": share.get("btc_dominance"),
        "headlines": headline_rows(headlines),
        "factors": score.factors or None,
        "factor_snapshot": factor_snapshot(results),
    }


ALTCOIN_SEASON_SCORE = IndexDefinition(
    name=TaskName.ALTCOIN_SEASON_SCORE.value,
    title="ALTCOIN SEASON SCORE",
    prompt_name="altcoin_season_score",
    temperature=0.2,
    labels=ALTCOIN_SEASON_LABELS,
    sections=(
        FactorSection(
            "eth_vs_btc", "ETH vs BTC PERFORMANCE", 20, render_eth_vs_btc,
            "ETH outperforming BTC = Altcoin Season signal. Consistent outperformance across "
            "timeframes = strong signal.",
        ),
        FactorSection(
            "market_cap_share", "ALTCOIN MARKET CAP SHARE", 20, render_market_cap_share,
            "BTC dominance < 50% = Altcoin Season territory. Falling BTC dominance = money flowing to altcoins.",
        ),
        FactorSection(
            "defi_tvl", "DEFI TVL GROWTH", 20, render_defi_tvl,
            "Growing TVL = capital flowing into DeFi (altcoins). Rapid TVL growth = strong Altcoin Season signal.",
        ),
        FactorSection(
            "volume_share", "ALTCOIN VOLUME SHARE", 10, render_volume_share,
            "Altcoin volume share > 60% = lots of altcoin trading activity = Altcoin Season signal.",
        ),
        FactorSection(
            "social", "SOCIAL MEDIA", 20, render_social,
            "Analyze sentiment about altcoins. Positive/FOMO about altcoins = Altcoin Season signal. "
            "Focus on BTC only = Bitcoin Season.",
        ),
        FactorSection(
            "market_ref", "MARKET REFERENCE", 10, render_market_ref,
            "Use this as a cross-reference. Your analysis should roughly align with this, but explain "
            "any divergence.",
        ),
    ),
    make_fetchers=altcoin_season_fetchers,
    build_row=altcoin_season_row,
    repository=AltcoinSeasonScoreRepository,
    breakdown=(
        ("ethVsBtc", "ETH vs BTC"),
        ("marketCapShare", "Market Cap Share"),
        ("defiTvl", "DeFi TVL"),
        ("volumeShare", "Volume Share"),
        ("social", "Social Media"),
        ("marketRef", "Market Reference"),
    ),
    headline_note="(These are for context only, not scored as a factor)",
)


INDICES = {
    FEAR_GREED.name: FEAR_GREED,
    ALTCOIN_SEASON_SCORE.name: ALTCOIN_SEASON_SCORE,
}
