"""
Gemini Evaluator
================

Scores assignment text with Google Gemini.

Models are tried in order (primary, then a lighter fallback). Each model gets
up to retries + 1 attempts:
- 404 / model not found: move on to the next model
- zero daily quota: trip the quota circuit and move on; later calls in this
  process skip Gemini entirely
- 429 rate limit: wait 20s, then 40s, and retry the same model
- unparseable or incomplete JSON: move on to the next model; response text
  is never read as a rate-limit or quota signal
- any other error: move on to the next model

Returns Feedback on the first parseable response, otherwise None.
"""
import re
import json
import time
import logging
import threading
from dataclasses import dataclass

from portal_backend.config import (
    DEFAULT_GEMINI_MODELS, DEFAULT_GEMINI_RETRIES, MAX_PROMPT_CHARS,
    MIN_REMOTE_TEXT_CHARS, RATE_LIMIT_BACKOFF_SECONDS,
)
from portal_backend.models import Feedback

logger = logging.getLogger(__name__)

NEXT_MODEL = 'next_model'
RETRY = 'retry'
TRIP_BREAKER = 'trip_breaker'

ZERO_QUOTA_MARKERS = ('limit: 0', 'PerDayPerProjectPerModel-FreeTier')

_FENCE_START = re.compile(r'^```(?:json)?\s*', re.IGNORECASE)
_FENCE_END = re.compile(r'\s*```$', re.IGNORECASE)

EVALUATION_PROMPT = """You are a university professor evaluating a student assignment file named "{name}".
Analyze the following extracted text and provide a JSON evaluation with these keys:
- summary (string): 2-3 sentence overview of the submission quality
- score (integer 0-100): overall score
- grammar (integer 0-100): grammar and writing quality score
- relevance (integer 0-100): relevance and depth of content score
- originality (integer 0-100): originality and critical thinking score
- suggestions (array of 3 strings): specific actionable improvement suggestions

Return ONLY valid JSON, no markdown or extra text.

Student submission text:
{text}"""


class QuotaCircuit:
    """One-way flag set once Gemini reports a zero quota. Never resets."""

    def __init__(self):
        self._tripped = threading.Event()

    @property
    def tripped(self) -> bool:
        return self._tripped.is_set()

    def trip(self):
        self._tripped.set()


# Shared by every evaluator in this process unless one is injected
QUOTA_CIRCUIT = QuotaCircuit()


@dataclass(frozen=True)
class RetryDecision:
    action: str
    delay: float = 0


def classify_error(message: str, attempt: int, retries: int,
                   backoff: float = RATE_LIMIT_BACKOFF_SECONDS) -> RetryDecision:
    """Decide what to do after a failed attempt (attempt is 0-based)."""
    message = message or ''
    if '404' in message or 'not found' in message:
        return RetryDecision(NEXT_MODEL)
    if any(marker in message for marker in ZERO_QUOTA_MARKERS):
        return RetryDecision(TRIP_BREAKER)
    if '429' in message and attempt < retries:
        return RetryDecision(RETRY, delay=(attempt + 1) * backoff)
    return RetryDecision(NEXT_MODEL)


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` block from a model response."""
    cleaned = _FENCE_START.sub('', content.strip())
    return _FENCE_END.sub('', cleaned)


def build_evaluation_prompt(text: str, original_name: str) -> str:
    return EVALUATION_PROMPT.format(name=original_name, text=text[:MAX_PROMPT_CHARS])


def _generate_with_gemini(api_key: str, model_name: str, prompt: str) -> str:
    """Single Gemini call, returns the raw response text."""
    import google.generativeai as genai
    genai.configure(api_key=api_key)
    gen_model = genai.GenerativeModel(model_name)
    response = gen_model.generate_content(prompt)
    return response.text.strip()


class GeminiEvaluator:
    """Gemini scoring client with model fallback and rate-limit backoff."""

    def __init__(self, api_key: str = '', models=None, retries: int = DEFAULT_GEMINI_RETRIES,
                 circuit: QuotaCircuit = None, generate=None, sleep=time.sleep,
                 backoff: float = RATE_LIMIT_BACKOFF_SECONDS):
        self.api_key = api_key or ''
        self.models = list(models or DEFAULT_GEMINI_MODELS)
        self.retries = retries
        self.circuit = circuit if circuit is not None else QUOTA_CIRCUIT
        self.backoff = backoff
        self._generate = generate or (lambda model_name, prompt: _generate_with_gemini(self.api_key, model_name, prompt))
        self._sleep = sleep

    def can_evaluate(self, text: str) -> bool:
        if self.circuit.tripped:
            return False
        if not self.api_key or not text:
            return False
        return len(text.strip()) >= MIN_REMOTE_TEXT_CHARS

    def evaluate(self, text: str, original_name: str):
        """Return Feedback (mode "gemini") or None if Gemini could not score the text."""
        if not self.can_evaluate(text):
            return None

        prompt = build_evaluation_prompt(text, original_name)

        for model_name in self.models:
            for attempt in range(self.retries + 1):
                try:
                    logger.info("Trying %s (attempt %d)", model_name, attempt + 1)
                    content = self._generate(model_name, prompt)
                except Exception as e:
                    message = str(e)
                    logger.error("%s error: %s", model_name, message)
                    decision = classify_error(message, attempt, self.retries, self.backoff)

                    if decision.action == RETRY:
                        logger.warning("Rate limited, waiting %ss before retry...", decision.delay)
                        self._sleep(decision.delay)
                        continue

                    if decision.action == TRIP_BREAKER:
                        logger.warning("%s has zero available quota on this project; skipping retries.", model_name)
                        self.circuit.trip()
                        logger.warning("Gemini marked unavailable for this process; "
                                       "using heuristic fallback for new submissions.")
                    break

                # Response text is never classified as a service error
                try:
                    return Feedback.from_remote(json.loads(strip_code_fences(content)))
                except (json.JSONDecodeError, ValueError) as e:
                    logger.error("Error parsing %s response: %s", model_name, e)
                    break

        return None
