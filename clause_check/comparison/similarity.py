"""
Character-sequence similarity between clause texts.

Implements the Ratcliff/Obershelp ratio: find the longest common
run of characters, then repeat on the unmatched text to its left and
to its right. The ratio rewards long verbatim spans shared by both
texts, which is what amended contract wording looks like when only a
few words were inserted or deleted.
"""

import logging
from typing import Optional

import numpy as np


logger = logging.getLogger(__name__)


def _codes(text: str) -> np.ndarray:
    """Code points of text as an integer array."""
    return np.fromiter((ord(ch) for ch in text), dtype=np.int64, count=len(text))


class SimilarityScorer:
    """
    Ratcliff/Obershelp similarity scorer.

    Gives the same ratio as ``difflib.SequenceMatcher(None, a, b,
    autojunk=False).ratio()``; ties between equally long matches go to
    the earliest position in ``a``, then the earliest in ``b``.
    """

    def __init__(self, max_length: Optional[int] = 20000):
        """
        Initialize the scorer.

        Args:
            max_length: Inputs longer than this are truncated before
                scoring. Scoring is quadratic in text length. None
                disables the limit.
        """
        self.max_length = max_length

    def ratio(self, a: str, b: str) -> float:
        """
        Similarity of two strings in [0, 1].

        Args:
            a: First text
            b: Second text

        Returns:
            2 * matched / (len(a) + len(b)); 1.0 when both are empty
        """
        a = self._limit(a or "")
        b = self._limit(b or "")

        if not a and not b:
            return 1.0

        return 2.0 * self.matching_characters(a, b) / (len(a) + len(b))

    def matching_characters(self, a: str, b: str) -> int:
        """Total length of the Ratcliff/Obershelp matching blocks of a and b."""
        if not a or not b:
            return 0

        codes_a = _codes(a)
        codes_b = _codes(b)
        total = 0

        # Ranges still to be matched: (a_lo, a_hi, b_lo, b_hi)
        pending = [(0, len(a), 0, len(b))]
        while pending:
            a_lo, a_hi, b_lo, b_hi = pending.pop()
            if a_lo >= a_hi or b_lo >= b_hi:
                continue

            size, a_end = self._longest_match(codes_a[a_lo:a_hi], codes_b[b_lo:b_hi])
            if size == 0:
                continue

            a_start = a_lo + a_end - size
            b_start = b.find(a[a_start:a_start + size], b_lo, b_hi)
            total += size

            pending.append((a_start + size, a_hi, b_start + size, b_hi))
            pending.append((a_lo, a_start, b_lo, b_start))

        return total

    def _longest_match(self, a: np.ndarray, b: np.ndarray) -> tuple[int, int]:
        """
        Longest common contiguous run of two code arrays.

        Returns:
            (length, end index in a) of the first longest run, scanning a
            from the left; (0, 0) if the arrays share no element
        """
        best_size = 0
        best_end = 0
        previous = np.zeros(len(b) + 1, dtype=np.int64)

        for i in range(len(a)):
            current = np.zeros(len(b) + 1, dtype=np.int64)
            current[1:] = np.where(b == a[i], previous[:-1] + 1, 0)

            row_best = int(current.max())
            if row_best > best_size:
                best_size = row_best
                best_end = i + 1

            previous = current

        return best_size, best_end

    def _limit(self, text: str) -> str:
        if self.max_length is not None and len(text) > self.max_length:
            logger.warning(
                "Truncating %d-character text to %d characters for similarity scoring",
                len(text), self.max_length
            )
            return text[:self.max_length]
        return text


_default_scorer = SimilarityScorer()


def similarity_ratio(a: str, b: str) -> float:
    """Ratcliff/Obershelp ratio of two strings with the default scorer."""
    return _default_scorer.ratio(a, b)
