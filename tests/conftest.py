"""
Shared test fixtures for the evaluation pipeline.
Zero network calls — Gemini and sleep are replaced by fakes.
"""
import pytest

from portal_backend.config import EvaluationConfig
from portal_backend.models import UploadedFile


class FakeGemini:
    """Scripted stand-in for the Gemini call.

    Each outcome is either a response string or an Exception to raise.
    """

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def __call__(self, model_name, prompt):
        self.calls.append((model_name, prompt))
        if not self.outcomes:
            raise RuntimeError("no scripted response left")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def models_called(self):
        return [model for model, _ in self.calls]


VALID_RESPONSE = """```json
{
  "summary": "A well organised essay with clear arguments.",
  "score": 88,
  "grammar": 90,
  "relevance": 85,
  "originality": 87,
  "suggestions": ["Add a counterargument.", "Tighten the conclusion.", "Cite primary sources."]
}
```"""

LONG_TEXT = (
    "Photosynthesis converts light energy into chemical energy stored in glucose. "
    "Chlorophyll absorbs red and blue light while reflecting green light. "
) * 5


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def sleeps():
    """Backoff delays requested by the evaluator, in order."""
    return []


@pytest.fixture
def eval_config(monkeypatch):
    """Config built from a clean environment."""
    for name in ("AI_EVALUATION_MODE", "GEMINI_API_KEY", "GEMINI_MODELS", "GEMINI_RETRIES"):
        monkeypatch.delenv(name, raising=False)
    return EvaluationConfig()


@pytest.fixture
def make_upload(tmp_path):
    """Write content to a temp file and describe it as an upload."""

    def _make(name, content, mimetype="text/plain", size=None):
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        actual_size = path.stat().st_size if size is None else size
        return UploadedFile(path=str(path), mimetype=mimetype, size=actual_size, original_name=name)

    return _make


@pytest.fixture
def make_pdf(tmp_path):
    """Create a one-page PDF containing the given text."""
    import fitz

    def _make(name, text):
        path = tmp_path / name
        doc = fitz.open()
        page = doc.new_page()
        page.insert_text((72, 72), text)
        doc.save(str(path))
        doc.close()
        return path

    return _make


@pytest.fixture
def valid_response():
    return VALID_RESPONSE


@pytest.fixture
def long_text():
    return LONG_TEXT
