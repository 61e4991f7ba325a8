"""
Tests for keyword-overlap similarity of doubt titles.
"""

import pytest

from peerconnect.services.similarity import (
    SimilarityChecker,
    extract_keywords,
    tokenize,
)


CORPUS = [
    ("dt_newton01", "Newton-Raphson Convergence"),
    ("dt_asympt01", "Asymptotic Notation Query"),
    ("dt_merge001", "Merge Sort upper bound"),
]


# =============================================================================
# Tokenization
# =============================================================================

def test_tokenize_splits_on_punctuation():
    assert tokenize("Newton-Raphson Convergence?") == ["newton", "raphson", "convergence"]


def test_tokenize_empty_title():
    assert tokenize("") == []
    assert tokenize(None) == []


def test_extract_keywords_drops_stop_words_and_short_tokens():
    keywords = extract_keywords("How to explain the Big O of Merge Sort in DAA")
    assert keywords == ["big", "merge", "sort", "daa"]


def test_extract_keywords_distinct_in_order():
    assert extract_keywords("sort sort merge SORT") == ["sort", "merge"]


# =============================================================================
# SimilarityChecker
# =============================================================================

class TestFindSimilar:

    def test_near_duplicate_title_conflicts(self):
        matches = SimilarityChecker().find_similar("Newton-Raphson Convergence Proof", CORPUS)

        assert [m.doubt_id for m in matches] == ["dt_newton01"]
        assert matches[0].score == 3
        assert matches[0].shared == ("newton", "raphson", "convergence")

    def test_single_shared_keyword_is_not_similar(self):
        assert SimilarityChecker().find_similar("Convergence of series", CORPUS) == []

    def test_case_insensitive(self):
        matches = SimilarityChecker().find_similar("ASYMPTOTIC NOTATION basics", CORPUS)
        assert [m.doubt_id for m in matches] == ["dt_asympt01"]

    def test_title_with_only_stop_words_never_conflicts(self):
        assert SimilarityChecker().find_similar("How to do it?", CORPUS) == []

    def test_empty_corpus(self):
        assert SimilarityChecker().find_similar("Newton-Raphson Convergence", []) == []

    def test_highest_score_first(self):
        corpus = [
            ("dt_a", "merge sort"),
            ("dt_b", "merge sort stability proof"),
        ]
        matches = SimilarityChecker().find_similar("Merge sort stability", corpus)
        assert [m.doubt_id for m in matches] == ["dt_b", "dt_a"]
        assert [m.score for m in matches] == [3, 2]

    def test_custom_threshold(self):
        checker = SimilarityChecker(threshold=3)
        assert checker.find_similar("Newton-Raphson method", CORPUS) == []
        assert checker.is_similar("Newton-Raphson Convergence Proof", "Newton-Raphson Convergence")

    def test_threshold_must_be_positive(self):
        with pytest.raises(ValueError):
            SimilarityChecker(threshold=0)

    def test_repeated_word_counts_once(self):
        checker = SimilarityChecker()
        assert checker.find_similar("matrix matrix", [("dt_matrix1", "matrix inverse")]) == []
        assert checker.is_similar("matrix matrix inverse", "matrix inverse")
