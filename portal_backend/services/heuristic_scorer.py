"""
Deterministic assignment scoring used when Gemini is unavailable or disabled.
"""
import re

from portal_backend.models import Feedback, clamp_score, round_half_up

BASE_GRAMMAR = 75
BASE_RELEVANCE = 78
BASE_ORIGINALITY = 82

SENTENCE_BREAK = re.compile(r'[.!?]+')

SUGGEST_EXPAND = 'Expand your explanation with more evidence and examples.'
SUGGEST_LENGTH_OK = 'Your response length is adequate for a strong submission.'
SUGGEST_SHORTER_SENTENCES = 'Break long sentences into shorter, clearer statements.'
SUGGEST_SENTENCES_OK = 'Sentence structure is mostly clear and easy to follow.'
SUGGEST_CITATIONS = 'Add citations or references where applicable to improve academic strength.'


def text_statistics(text: str) -> dict:
    """Word count, sentence count and rounded average sentence length."""
    text = text or ''
    word_count = len(text.split())
    # Whitespace-only segments count, e.g. "One. " is two segments
    sentence_count = len([s for s in SENTENCE_BREAK.split(text) if s])
    average = round_half_up(word_count / sentence_count) if sentence_count else 0
    return {
        "word_count": word_count,
        "sentence_count": sentence_count,
        "average_sentence_length": average,
    }


def build_heuristic_feedback(text: str, original_name: str) -> Feedback:
    stats = text_statistics(text)
    word_count = stats["word_count"]
    average = stats["average_sentence_length"]

    grammar = BASE_GRAMMAR
    relevance = BASE_RELEVANCE
    originality = BASE_ORIGINALITY

    if word_count > 600:
        relevance += 8
    if word_count < 120:
        relevance -= 10
    if average > 30:
        grammar -= 10
    if 12 <= average <= 24:
        grammar += 6

    grammar = clamp_score(grammar)
    relevance = clamp_score(relevance)
    originality = clamp_score(originality)

    return Feedback(
        summary=f"Automated evaluation completed for {original_name}.",
        score=round_half_up((grammar + relevance + originality) / 3),
        grammar=grammar,
        relevance=relevance,
        originality=originality,
        suggestions=(
            SUGGEST_EXPAND if word_count < 200 else SUGGEST_LENGTH_OK,
            SUGGEST_SHORTER_SENTENCES if average > 28 else SUGGEST_SENTENCES_OK,
            SUGGEST_CITATIONS,
        ),
        mode='heuristic',
    )
