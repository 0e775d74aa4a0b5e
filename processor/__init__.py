"""
Processor package - prompt assembly, oracle scoring and the run pipeline.

Main entry point: IndexPipeline with an IndexDefinition (FEAR_GREED or
ALTCOIN_SEASON_SCORE).
"""

from .prompt_builder import FactorSection, PLACEHOLDER, build_data_section
from .output_parser import (
    OracleError,
    InvalidScoreError,
    ScoreParser,
    ScoreResult,
    extract_json_object,
)
from .scorer import ScoringOracle
from .indices import ALTCOIN_SEASON_SCORE, FEAR_GREED, INDICES, IndexDefinition
from .pipeline import IndexPipeline, repository_writer

__all__ = [
    # Pipeline
    "IndexPipeline",
    "repository_writer",
    "IndexDefinition",
    "FEAR_GREED",
    "ALTCOIN_SEASON_SCORE",
    "INDICES",
    # Prompt
    "FactorSection",
    "PLACEHOLDER",
    "build_data_section",
    # Oracle
    "ScoringOracle",
    "ScoreParser",
    "ScoreResult",
    "OracleError",
    "InvalidScoreError",
    "extract_json_object",
]
