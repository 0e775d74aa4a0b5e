"""
Output Parser - extract and validate the score object from an oracle reply.
"""
import json
import math
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from loguru import logger

from constants import label_for_score

CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


class OracleError(Exception):
    """The scoring oracle failed or answered outside its contract."""


class InvalidScoreError(OracleError):
    """The reply parsed, but its score is missing, non-numeric or outside [0, 100]."""


@dataclass
class ScoreResult:
    """Validated oracle answer."""
    score: float
    label: str
    reason: str = ""
    factors: dict = field(default_factory=dict)
    token_scores: Optional[dict] = None
    raw: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "label": self.label,
            "reason": self.reason,
            "factors": self.factors,
            "token_scores": self.token_scores,
        }


def _closing_brace(text: str, start: int) -> Optional[int]:
    """Index of the brace closing text[start], skipping braces inside strings."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json_object(text: str) -> dict:
    """
    Return the first balanced JSON object in text.

    Markdown code fences are unwrapped first; prose around the object is
    ignored.

    Raises:
        OracleError: If no parseable object is found
    """
    fenced = CODE_FENCE.findall(text)
    candidates = fenced + [text] if fenced else [text]

    for body in candidates:
        start = body.find("{")
        while start != -1:
            end = _closing_brace(body, start)
            if end is None:
                break
            try:
                data = json.loads(body[start:end + 1])
            except json.JSONDecodeError:
                start = body.find("{", start + 1)
                continue
            if isinstance(data, dict):
                return data
            start = body.find("{", end + 1)

    raise OracleError("No JSON object found in oracle response")


class ScoreParser:
    """Parse oracle replies into ScoreResult, labeling by bands when needed."""

    def __init__(self, labels: Optional[Sequence[tuple[int, str]]] = None):
        self.labels = labels

    def validate_score(self, value) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidScoreError(f"Invalid score: {value!r}")
        if not math.isfinite(value) or not 0 <= value <= 100:
            raise InvalidScoreError(f"Invalid score: {value!r}")
        return value

    def parse(self, text: str) -> ScoreResult:
        data = extract_json_object(text or "")
        score = self.validate_score(data.get("score"))

        label = data.get("label")
        if not isinstance(label, str) or not label.strip():
            if not self.labels:
                raise OracleError("Oracle response has no label")
            label = label_for_score(score, self.labels)
            logger.warning(f"No label in oracle response, using band label: {label}")

        factors = data.get("factors")
        token_scores = data.get("token_scores")
        return ScoreResult(
            score=score,
            label=label.strip(),
            reason=str(data.get("reason") or ""),
            factors=factors if isinstance(factors, dict) else {},
            token_scores=token_scores if isinstance(token_scores, dict) else None,
            raw=data,
        )
