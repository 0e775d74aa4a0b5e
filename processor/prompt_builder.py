"""
Prompt Builder - render factor results and headlines into the prompt data section.

Every section of an index is always rendered: a present factor shows its
fields followed by a NOTE hint, an absent one shows the placeholder line so
the model redistributes its weight. Building never raises.
"""
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence

from loguru import logger

from factors.base import FactorRecord, FactorResult

PLACEHOLDER = "(Data not available — skip this factor and redistribute weight)"
HEADLINES_HEADER = "== ADDITIONAL CONTEXT: LATEST NEWS HEADLINES =="

# A block renderer gets all results and returns a section, or None to skip it
BlockRenderer = Callable[[Mapping[str, FactorResult]], Optional[str]]


# ============================================
# NUMBER FORMATTING
# ============================================

def signed_pct(value: float) -> str:
    """+1.5% / -2.3% / +0%"""
    return f"{'+' if value >= 0 else ''}{value}%"


def usd(value: float) -> str:
    return f"${value:,}"


def billions(value: float) -> str:
    return f"${value / 1e9:.2f}B"


def trillions(value: float, digits: int = 2) -> str:
    return f"${value / 1e12:.{digits}f}T"


# ============================================
# SECTIONS
# ============================================

@dataclass(frozen=True)
class FactorSection:
    """How one weighted factor appears in the prompt."""
    key: str
    title: str
    weight: float
    render: Callable[[FactorRecord], list[str]]
    hint: str

    def header(self, number: int) -> str:
        return f"== FACTOR {number}: {self.title} (Weight: {self.weight:g}%) =="


def render_section(number: int, section: FactorSection, result: Optional[FactorResult]) -> str:
    header = section.header(number)
    if result is None or not result.available:
        return f"{header}\n{PLACEHOLDER}"

    try:
        lines = section.render(result.record)
    except Exception as e:
        logger.warning(f"[{section.key}] Could not render factor: {type(e).__name__}: {e}")
        return f"{header}\n{PLACEHOLDER}"

    if not lines:
        return f"{header}\n{PLACEHOLDER}"
    return "\n".join([header, *lines, f"NOTE: {section.hint}"])


def render_headlines(headlines: Sequence, note: Optional[str] = None) -> Optional[str]:
    if not headlines:
        return None
    lines = [HEADLINES_HEADER]
    if note:
        lines.append(note)
    for i, h in enumerate(headlines, start=1):
        lines.append(f'{i}. [{h.site}] "{h.title}"')
    return "\n".join(lines)


def build_data_section(
    sections: Sequence[FactorSection],
    results: Mapping[str, FactorResult],
    headlines: Sequence = (),
    headline_note: Optional[str] = None,
    extra_blocks: Sequence[BlockRenderer] = (),
) -> str:
    """
    Build the data section of a scoring prompt.

    Args:
        sections: Weighted factor sections, in prompt order
        results: FactorResult per factor key; missing keys render as absent
        headlines: Headline objects (site, title), listed as unscored context
        headline_note: Optional line under the headlines header
        extra_blocks: Renderers for unscored blocks appended after headlines

    Returns:
        Data section text
    """
    blocks = [
        render_section(number, section, results.get(section.key))
        for number, section in enumerate(sections, start=1)
    ]

    headline_block = render_headlines(headlines, headline_note)
    if headline_block:
        blocks.append(headline_block)

    for render_block in extra_blocks:
        try:
            block = render_block(results)
        except Exception as e:
            logger.warning(f"Skipping prompt block: {type(e).__name__}: {e}")
            continue
        if block:
            blocks.append(block)

    return "\n\n".join(blocks)
