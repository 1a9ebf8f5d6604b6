from __future__ import annotations

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine

from signal_dedup.utils import tokenize_words


class SimilarityCalculator:
    """Text similarity metrics used to detect paraphrased duplicates.

    Every metric returns a value in [0, 1] and is total over degenerate input
    such as empty strings or disjoint vocabularies.
    """

    COSINE_WEIGHT = 0.7
    JACCARD_WEIGHT = 0.3
    # Single-character tokens count; the default pattern drops words like "a" or "C".
    TOKEN_PATTERN = r"(?u)\b\w+\b"

    def cosine_similarity(self, text1: str, text2: str) -> float:
        """Cosine of TF-IDF vectors built from the two texts as their own corpus.

        IDF is computed over this pair only, so terms shared by both texts are
        down-weighted relative to terms that distinguish them. Texts with no
        word characters (emoji, punctuation) fall back to whitespace tokens.
        """
        pair = [text1, text2]
        try:
            matrix = TfidfVectorizer(lowercase=True, token_pattern=self.TOKEN_PATTERN).fit_transform(pair)
        except ValueError:
            if not (tokenize_words(text1) or tokenize_words(text2)):
                return 0.0
            matrix = TfidfVectorizer(lowercase=True, tokenizer=str.split, token_pattern=None).fit_transform(pair)
        value = float(pairwise_cosine(matrix[0], matrix[1])[0, 0])
        return _clamp(value)

    def jaccard_similarity(self, text1: str, text2: str) -> float:
        """Intersection over union of the lower-cased word sets."""
        words1 = set(tokenize_words(text1))
        words2 = set(tokenize_words(text2))
        if not words1 and not words2:
            return 1.0
        union = words1 | words2
        return len(words1 & words2) / len(union)

    def levenshtein_similarity(self, text1: str, text2: str) -> float:
        """Edit distance normalised as ``1 - distance / max_length``.

        Not part of :meth:`similarity`: edit distance punishes reordered or
        reworded text far harder than the token metrics do.
        """
        max_length = max(len(text1), len(text2))
        if max_length == 0:
            return 1.0
        return 1.0 - self.levenshtein_distance(text1, text2) / max_length

    def levenshtein_distance(self, text1: str, text2: str) -> int:
        """Minimum single-character insertions, deletions and substitutions."""
        codes = np.fromiter((ord(char) for char in text2), dtype=np.int64, count=len(text2))
        offsets = np.arange(len(text2) + 1, dtype=np.int64)
        previous = offsets.copy()

        for i, char in enumerate(text1, start=1):
            current = np.empty_like(previous)
            current[0] = i
            # Deletions and substitutions come from the row above.
            current[1:] = np.minimum(previous[1:] + 1, previous[:-1] + (codes != ord(char)))
            # Insertions chain left to right: current[j] = min_k (current[k] + j - k).
            current = np.minimum.accumulate(current - offsets) + offsets
            previous = current
        return int(previous[-1])

    def similarity(self, text1: str, text2: str) -> float:
        """Production metric: weighted blend of cosine and Jaccard similarity."""
        cosine = self.cosine_similarity(text1, text2)
        jaccard = self.jaccard_similarity(text1, text2)
        return _clamp(self.COSINE_WEIGHT * cosine + self.JACCARD_WEIGHT * jaccard)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))
