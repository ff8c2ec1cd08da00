"""
Evaluation Service
==================

Entry point used by the submission handler. Extracts the text of an upload,
scores it with Gemini when the configured mode allows, and falls back to the
heuristic scorer otherwise. Always returns Feedback.

AI_EVALUATION_MODE:
- heuristic: never call Gemini
- gemini: prefer Gemini, heuristic fallback when it fails
- auto (default): try Gemini when available, heuristic otherwise
"""
import logging
import threading

from portal_backend.config import config as default_config, MODE_HEURISTIC, MODE_GEMINI
from portal_backend.models import Feedback, UploadedFile
from portal_backend.services.text_extractor import extract_text
from portal_backend.services.heuristic_scorer import build_heuristic_feedback
from portal_backend.services.gemini_evaluator import GeminiEvaluator, QUOTA_CIRCUIT

logger = logging.getLogger(__name__)


class EvaluationService:
    """Scores an upload with Gemini or the heuristic scorer, per the configured mode."""

    def __init__(self, config=None, extractor=None, scorer=None, remote=None):
        self.config = config or default_config
        self.extractor = extractor or extract_text
        self.scorer = scorer or build_heuristic_feedback
        self._remote = remote
        self._remote_key = None

    @property
    def remote(self) -> GeminiEvaluator:
        """Injected client, or one rebuilt whenever the Gemini settings change."""
        if self._remote is not None and self._remote_key is None:
            return self._remote

        key = (self.config.gemini_api_key, tuple(self.config.gemini_models), self.config.gemini_retries)
        if self._remote is None or key != self._remote_key:
            self._remote = GeminiEvaluator(
                api_key=self.config.gemini_api_key,
                models=self.config.gemini_models,
                retries=self.config.gemini_retries,
                circuit=QUOTA_CIRCUIT,
            )
            self._remote_key = key
        return self._remote

    def evaluate(self, file: UploadedFile) -> Feedback:
        mode = self.config.mode
        text = self.extractor(file.path, file.mimetype, file.size)
        logger.info("Extracted %d chars from %s (%s)", len(text), file.original_name, file.mimetype)

        if mode == MODE_HEURISTIC:
            logger.info("AI_EVALUATION_MODE=heuristic, skipping Gemini and using heuristic evaluation")
            return self.scorer(text, file.original_name)

        feedback = self.remote.evaluate(text, file.original_name)
        if feedback is not None:
            logger.info("Gemini evaluation successful")
            return feedback

        if mode == MODE_GEMINI:
            logger.warning("AI_EVALUATION_MODE=gemini but Gemini evaluation failed; "
                           "using heuristic fallback to keep submission flow available")

        logger.info("Falling back to heuristic evaluation")
        return self.scorer(text, file.original_name)


_service = None
_service_lock = threading.Lock()


def get_evaluation_service() -> EvaluationService:
    """Process-wide service bound to the global config."""
    global _service
    with _service_lock:
        if _service is None:
            _service = EvaluationService()
        return _service


def evaluate_assignment(file) -> Feedback:
    """
    Evaluate an uploaded assignment.

    Args:
        file: UploadedFile, or an upload descriptor dict with
              path / mimetype / size / originalname keys.
    """
    if isinstance(file, dict):
        file = UploadedFile.from_dict(file)
    return get_evaluation_service().evaluate(file)
