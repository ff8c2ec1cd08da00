"""
Test: Heuristic scoring — statistics, score adjustments, suggestions.
"""
import pytest

from portal_backend.services.heuristic_scorer import (
    build_heuristic_feedback, text_statistics,
    SUGGEST_EXPAND, SUGGEST_LENGTH_OK, SUGGEST_SHORTER_SENTENCES,
    SUGGEST_SENTENCES_OK, SUGGEST_CITATIONS,
)


def _sentences(count, words_per_sentence):
    sentence = " ".join(["word"] * words_per_sentence) + "."
    return " ".join([sentence] * count)


class TestTextStatistics:
    def test_empty(self):
        assert text_statistics("") == {
            "word_count": 0, "sentence_count": 0, "average_sentence_length": 0,
        }

    def test_none(self):
        assert text_statistics(None)["word_count"] == 0

    def test_counts_whitespace_tokens(self):
        assert text_statistics("  one\ttwo\nthree   four ")["word_count"] == 4

    def test_punctuation_runs_split_once(self):
        assert text_statistics("Really?! Yes... Fine")["sentence_count"] == 3

    def test_trailing_whitespace_segment_counts(self):
        assert text_statistics("One two. ")["sentence_count"] == 2

    def test_average_rounds_half_up(self):
        # 5 words over 2 sentences -> 2.5 -> 3
        assert text_statistics("a b c. d e.")["average_sentence_length"] == 3


class TestScores:
    def test_empty_text(self):
        feedback = build_heuristic_feedback("", "empty.txt")
        assert feedback.grammar == 75
        assert feedback.relevance == 68
        assert feedback.originality == 82
        assert feedback.score == 75
        assert feedback.suggestions[0] == SUGGEST_EXPAND
        assert feedback.mode == "heuristic"

    def test_long_well_formed_essay(self):
        feedback = build_heuristic_feedback(_sentences(50, 13), "essay.pdf")
        assert feedback.relevance == 86
        assert feedback.grammar == 81
        assert feedback.originality == 82
        assert feedback.score == 83
        assert feedback.suggestions == (SUGGEST_LENGTH_OK, SUGGEST_SENTENCES_OK, SUGGEST_CITATIONS)

    def test_long_run_on_text(self):
        feedback = build_heuristic_feedback(" ".join(["word"] * 700), "runon.txt")
        assert feedback.grammar == 65
        assert feedback.relevance == 86
        assert feedback.score == 78
        assert feedback.suggestions[1] == SUGGEST_SHORTER_SENTENCES

    def test_short_clear_answer(self):
        feedback = build_heuristic_feedback(_sentences(10, 15), "answer.txt")
        assert feedback.relevance == 78
        assert feedback.grammar == 81
        assert feedback.score == 80
        assert feedback.suggestions[0] == SUGGEST_EXPAND

    def test_average_between_thresholds(self):
        feedback = build_heuristic_feedback(_sentences(10, 29), "mid.txt")
        assert feedback.grammar == 75
        assert feedback.suggestions[1] == SUGGEST_SHORTER_SENTENCES

    def test_summary_mentions_file(self):
        feedback = build_heuristic_feedback("Some text.", "Lab Report 3.pdf")
        assert feedback.summary == "Automated evaluation completed for Lab Report 3.pdf."


class TestProperties:
    @pytest.mark.parametrize("text", [
        "",
        "Short.",
        _sentences(3, 40),
        _sentences(80, 10),
        "!!! ??? ...",
        "no punctuation " * 400,
    ])
    def test_bounds_and_suggestion_count(self, text):
        feedback = build_heuristic_feedback(text, "any.txt")
        for value in (feedback.score, feedback.grammar, feedback.relevance, feedback.originality):
            assert 0 <= value <= 100
        assert len(feedback.suggestions) == 3

    def test_deterministic(self):
        text = _sentences(20, 17)
        first = build_heuristic_feedback(text, "same.txt")
        second = build_heuristic_feedback(text, "same.txt")
        assert first == second
        assert first.to_json() == second.to_json()
