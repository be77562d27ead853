"""
Clause-by-clause comparison of a reference contract with a candidate.

Each clause of the reference is looked up by its number in the
candidate:
- absent                          -> MISSING
- present, similarity < threshold -> CHANGED
- present, similar enough         -> no discrepancy
Candidate clauses the reference does not have are EXTRA.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence

from ..ingestion.normalizer import TextNormalizer
from ..parsing.clause_ref import clause_ref_key
from .similarity import SimilarityScorer


logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.985


class DiffType(Enum):
    """Kinds of clause discrepancies."""
    CHANGED = "CHANGED"
    EXTRA = "EXTRA"
    MISSING = "MISSING"


@dataclass(frozen=True)
class Discrepancy:
    """A clause that differs between the reference and a candidate."""

    clause_ref: str
    diff_type: DiffType
    similarity: Optional[float] = None
    reference_text: Optional[str] = None
    candidate_text: Optional[str] = None

    def sort_key(self) -> tuple:
        return (clause_ref_key(self.clause_ref), self.diff_type.name)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'clause_ref': self.clause_ref,
            'diff_type': self.diff_type.value,
            'similarity': self.similarity,
            'reference_text': self.reference_text,
            'candidate_text': self.candidate_text
        }


class DiffEngine:
    """
    Compares two clause maps.

    Similarity is computed on normalized text (ignore patterns removed,
    whitespace collapsed, lowercased); discrepancies carry the original
    clause bodies.
    """

    def __init__(
        self,
        normalizer: Optional[TextNormalizer] = None,
        scorer: Optional[SimilarityScorer] = None,
        gap_similarity: Optional[float] = 0.0
    ):
        """
        Initialize DiffEngine.

        Args:
            normalizer: Text normalizer used before scoring
            scorer: Similarity scorer
            gap_similarity: Similarity recorded on MISSING and EXTRA
                discrepancies. None leaves it unset.
        """
        self.normalizer = normalizer or TextNormalizer()
        self.scorer = scorer or SimilarityScorer()
        self.gap_similarity = gap_similarity

    def compare(
        self,
        reference: Mapping[str, str],
        candidate: Mapping[str, str],
        ignore_patterns: Sequence[re.Pattern] = (),
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    ) -> list[Discrepancy]:
        """
        Compare candidate clauses against the reference.

        Args:
            reference: Clause map of the reference document
            candidate: Clause map of the candidate document
            ignore_patterns: Patterns removed from both texts before scoring
            threshold: Minimum similarity for two clauses to count as equal

        Returns:
            Discrepancies sorted by clause number, then by type name
        """
        diffs = []

        for ref, reference_text in reference.items():
            if ref not in candidate:
                diffs.append(Discrepancy(
                    clause_ref=ref,
                    diff_type=DiffType.MISSING,
                    similarity=self.gap_similarity,
                    reference_text=reference_text
                ))
                continue

            candidate_text = candidate[ref]
            similarity = self.similarity(reference_text, candidate_text, ignore_patterns)
            if similarity < threshold:
                diffs.append(Discrepancy(
                    clause_ref=ref,
                    diff_type=DiffType.CHANGED,
                    similarity=similarity,
                    reference_text=reference_text,
                    candidate_text=candidate_text
                ))

        for ref, candidate_text in candidate.items():
            if ref not in reference:
                diffs.append(Discrepancy(
                    clause_ref=ref,
                    diff_type=DiffType.EXTRA,
                    similarity=self.gap_similarity,
                    candidate_text=candidate_text
                ))

        diffs.sort(key=Discrepancy.sort_key)
        logger.debug(
            "Compared %d reference clauses with %d candidate clauses: %d discrepancies",
            len(reference), len(candidate), len(diffs)
        )
        return diffs

    def similarity(
        self,
        reference_text: str,
        candidate_text: str,
        ignore_patterns: Sequence[re.Pattern] = ()
    ) -> float:
        """Similarity of two clause bodies after normalization."""
        return self.scorer.ratio(
            self.normalizer.normalize(reference_text, ignore_patterns),
            self.normalizer.normalize(candidate_text, ignore_patterns)
        )


_default_engine = DiffEngine()


def compare(
    reference: Mapping[str, str],
    candidate: Mapping[str, str],
    ignore_patterns: Sequence[re.Pattern] = (),
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD
) -> list[Discrepancy]:
    """Compare two clause maps with the default engine."""
    return _default_engine.compare(reference, candidate, ignore_patterns, threshold)
