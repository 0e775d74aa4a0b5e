"""
Prompts Module - index scoring prompt templates.

Prompt Files:
- fear_greed.md: Crypto Fear & Greed Index
- altcoin_season_score.md: Altcoin Season Score
"""

from ._loader import PromptLoader, get_prompt, list_prompts

__all__ = [
    "PromptLoader",
    "get_prompt",
    "list_prompts",
]
