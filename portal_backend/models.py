"""
Records passed between the submission handler and the evaluation pipeline.
"""
import json
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

FEEDBACK_KEYS = ('summary', 'score', 'grammar', 'relevance', 'originality', 'suggestions')
SCORE_KEYS = ('score', 'grammar', 'relevance', 'originality')


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def _coerce_score(key: str, value: Any) -> int:
    # bool is an int subclass; a true/false score is a malformed response
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be a number, got {value!r}")
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number, got {value!r}")
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"'{key}' must be finite, got {value!r}")
    return clamp_score(number)


@dataclass(frozen=True)
class UploadedFile:
    """A stored upload as handed over by the upload handler."""
    path: str
    mimetype: str
    size: int
    original_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UploadedFile":
        return cls(
            path=str(data['path']),
            mimetype=data.get('mimetype') or '',
            size=int(data.get('size') or 0),
            original_name=data.get('originalname') or data.get('original_name') or '',
        )


@dataclass(frozen=True)
class Feedback:
    """
    Structured evaluation result.

    mode is "heuristic" for the local scorer and "gemini" for remote scoring.
    """
    summary: str
    score: int
    grammar: int
    relevance: int
    originality: int
    suggestions: Tuple[str, str, str]
    mode: str = field(default='heuristic')

    @classmethod
    def from_remote(cls, payload: Any) -> "Feedback":
        """
        Build feedback from a parsed Gemini response.

        Raises ValueError when a key is missing or has an unusable value.
        """
        if not isinstance(payload, dict):
            raise ValueError("Evaluation response is not a JSON object")

        missing = [key for key in FEEDBACK_KEYS if key not in payload]
        if missing:
            raise ValueError(f"Evaluation response missing keys: {', '.join(missing)}")

        summary = payload['summary']
        if not isinstance(summary, str):
            raise ValueError("'summary' must be a string")

        suggestions = payload['suggestions']
        if not isinstance(suggestions, list) or len(suggestions) < 3:
            raise ValueError("'suggestions' must be a list of 3 strings")
        if not all(isinstance(s, str) and s.strip() for s in suggestions[:3]):
            raise ValueError("'suggestions' entries must be non-empty strings")

        scores = {key: _coerce_score(key, payload[key]) for key in SCORE_KEYS}

        return cls(
            summary=summary,
            suggestions=tuple(suggestions[:3]),
            mode='gemini',
            **scores,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "score": self.score,
            "grammar": self.grammar,
            "relevance": self.relevance,
            "originality": self.originality,
            "suggestions": list(self.suggestions),
            "mode": self.mode,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_submission_record(self) -> Dict[str, Any]:
        """Columns a submission row stores next to the uploaded file."""
        return {
            "score": self.score,
            "feedback_json": self.to_json(),
            "evaluation_mode": self.mode,
        }
