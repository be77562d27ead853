"""
Per-document status from a list of clause discrepancies.

Critical clauses escalate: a critical clause that is missing, or whose
wording drifted below the critical similarity floor, means the
required changes were not applied at all.
"""

from enum import Enum
from typing import Collection, Iterable, Optional

from .diff_engine import Discrepancy, DiffType


DEFAULT_CRITICAL_MIN_SIMILARITY = 0.97


class DocumentStatus(Enum):
    """Overall outcome for one candidate document."""
    OK = "OK"
    DIFFS = "DIFFS"
    NOT_APPLIED = "NOT_APPLIED"
    NEEDS_REVIEW = "NEEDS_REVIEW"  # assigned when a document could not be parsed


class StatusClassifier:
    """Reduces discrepancies and a critical clause set to a DocumentStatus."""

    def __init__(self, critical_min_similarity: float = DEFAULT_CRITICAL_MIN_SIMILARITY):
        self.critical_min_similarity = critical_min_similarity

    def classify(
        self,
        diffs: Iterable[Discrepancy],
        critical_clauses: Collection[str] = frozenset(),
        critical_min_similarity: Optional[float] = None
    ) -> DocumentStatus:
        """
        Classify a candidate document.

        Args:
            diffs: Discrepancies found for the document
            critical_clauses: Clause references with escalated semantics
            critical_min_similarity: Floor below which a changed critical
                clause counts as not applied; defaults to the instance value

        Returns:
            OK, DIFFS or NOT_APPLIED
        """
        if critical_min_similarity is None:
            critical_min_similarity = self.critical_min_similarity

        diffs = list(diffs)
        if not diffs:
            return DocumentStatus.OK

        if any(self.is_critical_failure(d, critical_clauses, critical_min_similarity) for d in diffs):
            return DocumentStatus.NOT_APPLIED

        return DocumentStatus.DIFFS

    @staticmethod
    def is_critical_failure(
        diff: Discrepancy,
        critical_clauses: Collection[str],
        critical_min_similarity: float
    ) -> bool:
        """Whether a discrepancy on its own makes the document NOT_APPLIED."""
        if diff.clause_ref not in critical_clauses:
            return False
        if diff.diff_type == DiffType.MISSING:
            return True
        if diff.diff_type == DiffType.CHANGED:
            return (diff.similarity or 0.0) < critical_min_similarity
        return False


_default_classifier = StatusClassifier()


def classify(
    diffs: Iterable[Discrepancy],
    critical_clauses: Collection[str] = frozenset(),
    critical_min_similarity: float = DEFAULT_CRITICAL_MIN_SIMILARITY
) -> DocumentStatus:
    """Classify a document with the default classifier."""
    return _default_classifier.classify(diffs, critical_clauses, critical_min_similarity)
