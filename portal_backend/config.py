"""
Configuration management for the assignment evaluation pipeline.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Evaluation modes
MODE_HEURISTIC = "heuristic"
MODE_GEMINI = "gemini"
MODE_AUTO = "auto"
EVALUATION_MODES = (MODE_HEURISTIC, MODE_GEMINI, MODE_AUTO)

# Text extraction
MAX_FILE_SIZE_FOR_TEXT = 5 * 1024 * 1024  # 5 MB

# Remote evaluation
DEFAULT_GEMINI_MODELS = ['gemini-2.0-flash', 'gemini-2.0-flash-lite']
DEFAULT_GEMINI_RETRIES = 2
RATE_LIMIT_BACKOFF_SECONDS = 20
MAX_PROMPT_CHARS = 3500
MIN_REMOTE_TEXT_CHARS = 30


def normalize_mode(value) -> str:
    """Map a configured mode string onto heuristic / gemini / auto."""
    mode = (value or MODE_AUTO).strip().lower()
    if mode in EVALUATION_MODES:
        return mode
    return MODE_AUTO


def _parse_models(value):
    models = [m.strip() for m in (value or "").split(',') if m.strip()]
    return models or list(DEFAULT_GEMINI_MODELS)


def _parse_retries(value):
    try:
        retries = int(value)
    except (TypeError, ValueError):
        return DEFAULT_GEMINI_RETRIES
    return retries if retries >= 0 else DEFAULT_GEMINI_RETRIES


class EvaluationConfig:
    """Evaluation pipeline configuration."""

    def __init__(self):
        self.evaluation_mode = os.getenv("AI_EVALUATION_MODE", MODE_AUTO)
        self.gemini_api_key = os.getenv("GEMINI_API_KEY", "")
        self.gemini_models = _parse_models(os.getenv("GEMINI_MODELS", ""))
        self.gemini_retries = _parse_retries(os.getenv("GEMINI_RETRIES", DEFAULT_GEMINI_RETRIES))

    @property
    def mode(self) -> str:
        return normalize_mode(self.evaluation_mode)

    def to_dict(self):
        return {
            "evaluation_mode": self.mode,
            "gemini_api_key": "***" if self.gemini_api_key else "",
            "gemini_models": list(self.gemini_models),
            "gemini_retries": self.gemini_retries,
        }

    def update(self, data: dict):
        for key, value in data.items():
            if key == "gemini_models" and isinstance(value, str):
                value = _parse_models(value)
            elif key == "gemini_retries":
                value = _parse_retries(value)
            if hasattr(self, key):
                setattr(self, key, value)


# Global config instance
config = EvaluationConfig()
