import pytest

from crawlers import Headline
from factors import FactorRecord, FactorResult
from processor import ALTCOIN_SEASON_SCORE, FEAR_GREED, PLACEHOLDER, build_data_section
from processor.prompt_builder import HEADLINES_HEADER, signed_pct, trillions, usd
from prompts import get_prompt, list_prompts
from prompts._loader import PromptLoader

VOLATILITY = {
    "volatility": 3.2,
    "max_drawdown": 12.5,
    "change_30d": -4.1,
    "price_history": [60000, 61000, 62000],
}


def ok(name, values):
    return FactorResult.ok(FactorRecord(name=name, values=values, source="test"))


def test_number_formatting():
    assert signed_pct(1.5) == "+1.5%"
    assert signed_pct(-2.3) == "-2.3%"
    assert signed_pct(0) == "+0%"
    assert usd(62000) == "$62,000"
    assert trillions(2_500_000_000_000) == "$2.50T"


def test_zero_factors_renders_every_placeholder():
    section = build_data_section(FEAR_GREED.sections, {})

    assert section.count(PLACEHOLDER) == 5
    assert "== FACTOR 1: VOLATILITY (Weight: 25%) ==" in section
    assert "== FACTOR 3: SOCIAL MEDIA (Weight: 17.5%) ==" in section
    assert "== FACTOR 5: INDUSTRY SENTIMENT REFERENCE (Weight: 17.5%) ==" in section
    assert HEADLINES_HEADER not in section


def test_available_factor_renders_lines_and_hint():
    section = build_data_section(FEAR_GREED.sections, {"volatility": ok("volatility", VOLATILITY)})

    assert "- 30-day Volatility (Std Dev of daily returns): 3.2%" in section
    assert "- 30-day Price Change: -4.1%" in section
    assert "- Recent 7-day prices: $60,000 → $61,000 → $62,000" in section
    assert "NOTE: High volatility = Fear." in section
    assert section.count(PLACEHOLDER) == 4


def test_unavailable_result_renders_placeholder():
    results = {"volatility": FactorResult.unavailable("volatility", "timeout")}
    section = build_data_section(FEAR_GREED.sections, results)
    assert section.count(PLACEHOLDER) == 5


def test_render_failure_falls_back_to_placeholder():
    section = build_data_section(FEAR_GREED.sections, {"volatility": ok("volatility", {})})
    assert section.count(PLACEHOLDER) == 5


def test_headlines_listed_with_note():
    headlines = [
        Headline(site="CoinDesk", title="Bitcoin tops $70k", link="https://coindesk.com/a"),
        Headline(site="Decrypt", title="Ether ETF approved", link="https://decrypt.co/b"),
    ]

    section = build_data_section(
        ALTCOIN_SEASON_SCORE.sections,
        {},
        headlines,
        headline_note=ALTCOIN_SEASON_SCORE.headline_note,
    )

    assert HEADLINES_HEADER in section
    assert "(These are for context only, not scored as a factor)" in section
    assert '1. [CoinDesk] "Bitcoin tops $70k"' in section
    assert '2. [Decrypt] "Ether ETF approved"' in section
    assert section.index("FACTOR 6") < section.index(HEADLINES_HEADER)


def test_failing_extra_block_is_skipped():
    section = build_data_section(
        FEAR_GREED.sections,
        {},
        extra_blocks=(lambda results: 1 / 0, lambda results: "== EXTRA =="),
    )
    assert section.endswith("== EXTRA ==")


def test_token_block_follows_headlines():
    momentum = {
        "current_price": 62000, "change_24h": 1.2, "change_7d": 3.4, "change_30d": 5.6,
        "volume_24h": 30e9, "market_cap": 1.2e12, "ath": 73000, "ath_change_percentage": -15.0,
    }
    headlines = [Headline(site="CoinDesk", title="Bitcoin tops $70k", link="https://coindesk.com/a")]

    section = build_data_section(
        FEAR_GREED.sections,
        {"momentum": ok("momentum", momentum)},
        headlines,
        extra_blocks=FEAR_GREED.extra_blocks,
    )

    assert "== MULTI-TOKEN MARKET DATA (for per-token scoring) ==" in section
    assert "--- BTC ---" in section
    assert section.index(HEADLINES_HEADER) < section.index("MULTI-TOKEN")


def test_prompt_template_substitution():
    prompt = get_prompt("fear_greed", data_section="DATA GOES HERE")

    assert "DATA GOES HERE" in prompt
    assert "{data_section}" not in prompt
    assert '{"score": <number 0-100>' in prompt


def test_prompt_templates_available():
    assert set(list_prompts()) >= {"fear_greed", "altcoin_season_score"}


def test_unknown_prompt_lists_available():
    with pytest.raises(FileNotFoundError, match="fear_greed"):
        PromptLoader().get("no_such_prompt")


def test_prompt_missing_variable():
    with pytest.raises(ValueError, match="data_section"):
        PromptLoader().format("fear_greed")
