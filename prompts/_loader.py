"""
Prompt Loader - index scoring templates stored as markdown next to this module.

Each index has one template (fear_greed.md, altcoin_season_score.md) with a
single {data_section} placeholder. Literal JSON braces in a template are
written doubled ({{ and }}) so str.format leaves them intact.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

PROMPTS_DIR = Path(__file__).parent


class PromptLoader:
    """Read templates once per process and fill in their variables."""

    def __init__(self, prompts_dir: Path = PROMPTS_DIR):
        self.prompts_dir = prompts_dir
        self._cache: Dict[str, str] = {}

    def list_prompts(self) -> list[str]:
        return sorted(f.stem for f in self.prompts_dir.glob("*.md"))

    def get(self, prompt_name: str) -> str:
        """
        Raw template text.

        Raises:
            FileNotFoundError: no <prompt_name>.md in prompts_dir
        """
        if prompt_name not in self._cache:
            path = self.prompts_dir / f"{prompt_name}.md"
            if not path.exists():
                raise FileNotFoundError(
                    f"Prompt file not found: {path} (available: {', '.join(self.list_prompts())})"
                )
            self._cache[prompt_name] = path.read_text(encoding="utf-8")
            logger.debug(f"Loaded prompt: {prompt_name} ({len(self._cache[prompt_name])} chars)")
        return self._cache[prompt_name]

    def format(self, prompt_name: str, **variables: Any) -> str:
        try:
            return self.get(prompt_name).format(**variables)
        except KeyError as e:
            raise ValueError(f"Prompt '{prompt_name}' needs variable {e}") from e


_loader: Optional[PromptLoader] = None


def get_prompt(prompt_name: str, **variables: Any) -> str:
    """
    Template with its variables filled in.

    Example:
        prompt = get_prompt("altcoin_season_score", data_section=section)
    """
    global _loader
    if _loader is None:
        _loader = PromptLoader()
    return _loader.format(prompt_name, **variables)


def list_prompts() -> list[str]:
    return PromptLoader().list_prompts()
