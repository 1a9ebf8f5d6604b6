"""
Tests for SimilarityCalculator metrics.
"""
from __future__ import annotations

import pytest

from signal_dedup.services.similarity_svc import SimilarityCalculator


@pytest.fixture
def calculator() -> SimilarityCalculator:
    return SimilarityCalculator()


class TestCosineSimilarity:
    def test_identical_texts(self, calculator):
        text = "The quick brown fox jumps over the lazy dog"
        assert calculator.cosine_similarity(text, text) == pytest.approx(1.0)

    def test_one_word_changed_stays_high(self, calculator):
        similarity = calculator.cosine_similarity(
            "The quick brown fox jumps over the lazy dog",
            "The quick brown fox leaps over the lazy dog",
        )
        assert similarity > 0.6

    def test_unrelated_texts_score_low(self, calculator):
        similarity = calculator.cosine_similarity(
            "The quick brown fox jumps over the lazy dog",
            "Artificial intelligence is transforming modern software development",
        )
        assert similarity < 0.3

    def test_no_common_words(self, calculator):
        assert calculator.cosine_similarity("abc def ghi", "xyz uvw rst") == 0.0

    def test_empty_strings(self, calculator):
        assert calculator.cosine_similarity("", "") == 0.0

    def test_one_empty_string(self, calculator):
        assert calculator.cosine_similarity("hello world", "") == 0.0

    def test_punctuation_only(self, calculator):
        assert calculator.cosine_similarity("!!!", "???") == 0.0

    def test_case_and_punctuation_are_ignored(self, calculator):
        similarity = calculator.cosine_similarity("The new API is great", "the new api, is GREAT!")
        assert similarity == pytest.approx(1.0)


class TestJaccardSimilarity:
    def test_identical_texts(self, calculator):
        assert calculator.jaccard_similarity("hello world test", "hello world test") == 1.0

    def test_partial_overlap(self, calculator):
        # {cat, dog} shared out of {cat, dog, bird, fish}
        assert calculator.jaccard_similarity("cat dog bird", "cat dog fish") == pytest.approx(0.5)

    def test_disjoint(self, calculator):
        assert calculator.jaccard_similarity("apple orange banana", "car bike train") == 0.0

    def test_empty_strings(self, calculator):
        assert calculator.jaccard_similarity("", "") == 1.0

    def test_whitespace_only_counts_as_empty(self, calculator):
        assert calculator.jaccard_similarity("   ", "\n\t") == 1.0

    def test_case_insensitive(self, calculator):
        assert calculator.jaccard_similarity("HELLO WORLD", "hello world") == 1.0


class TestLevenshteinSimilarity:
    def test_identical(self, calculator):
        assert calculator.levenshtein_similarity("hello", "hello") == 1.0

    def test_kitten_sitting(self, calculator):
        assert calculator.levenshtein_distance("kitten", "sitting") == 3
        assert calculator.levenshtein_similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)

    @pytest.mark.parametrize(
        ("text1", "text2", "expected"),
        [
            ("", "abc", 3),
            ("abc", "", 3),
            ("abc", "xabcx", 2),
            ("flaw", "lawn", 2),
            ("intention", "execution", 5),
            ("🔥 api", "api", 2),
        ],
    )
    def test_distance(self, calculator, text1, text2, expected):
        assert calculator.levenshtein_distance(text1, text2) == expected

    def test_completely_different_same_length(self, calculator):
        assert calculator.levenshtein_similarity("aaaa", "bbbb") == 0.0

    def test_empty_strings(self, calculator):
        assert calculator.levenshtein_similarity("", "") == 1.0

    def test_one_empty_string(self, calculator):
        assert calculator.levenshtein_similarity("hello", "") == 0.0

    def test_reordering_is_penalised_harder_than_combined_metric(self, calculator):
        text1 = "release notes for the new api"
        text2 = "the new api release notes for"
        assert calculator.levenshtein_similarity(text1, text2) < calculator.similarity(text1, text2)


class TestCombinedSimilarity:
    def test_identical_texts(self, calculator):
        text = "The quick brown fox jumps over the lazy dog"
        assert calculator.similarity(text, text) == pytest.approx(1.0)

    @pytest.mark.parametrize("text", ["a", "!!!", "🔥🔥", ":) :)", "Ship it 🚀"])
    def test_self_similarity_is_one(self, calculator, text):
        assert calculator.similarity(text, text) == pytest.approx(1.0)

    def test_symbol_only_texts_compare_by_whitespace_tokens(self, calculator):
        assert calculator.cosine_similarity("🔥🔥 !!!", "!!! 🔥🔥") == pytest.approx(1.0)
        assert calculator.similarity("🔥🔥", "👀") == 0.0

    def test_near_duplicates(self, calculator):
        similarity = calculator.similarity(
            "This is a great product for developers",
            "This is an excellent product for developers",
        )
        assert similarity > 0.4

    def test_different_texts(self, calculator):
        similarity = calculator.similarity(
            "Machine learning models require training data",
            "Cooking pasta requires boiling water",
        )
        assert similarity < 0.3

    def test_weighting(self, calculator):
        text1, text2 = "apple banana cherry", "apple banana date"
        expected = 0.7 * calculator.cosine_similarity(text1, text2) + 0.3 * calculator.jaccard_similarity(text1, text2)
        assert calculator.similarity(text1, text2) == pytest.approx(expected)

    def test_empty_strings_resolve_to_jaccard_share(self, calculator):
        # cosine has no vocabulary (0), Jaccard of two empty sets is 1
        assert calculator.similarity("", "") == pytest.approx(0.3)

    @pytest.mark.parametrize(
        ("text1", "text2"),
        [
            ("The new API is great", "Honestly the new API is really great"),
            ("database scaling is hard", "The new API is great"),
            ("", "something"),
            ("repeat repeat repeat", "repeat"),
            ("Rust 1.80 released today!", "rust 1.80 released"),
        ],
    )
    def test_symmetric_and_bounded(self, calculator, text1, text2):
        forward = calculator.similarity(text1, text2)
        backward = calculator.similarity(text2, text1)
        assert forward == pytest.approx(backward)
        assert 0.0 <= forward <= 1.0
