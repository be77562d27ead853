"""Comparison module for clause similarity, clause diffs and document status."""

from .similarity import SimilarityScorer, similarity_ratio
from .diff_engine import DiffEngine, Discrepancy, DiffType, compare
from .status import DocumentStatus, StatusClassifier, classify

__all__ = [
    "SimilarityScorer",
    "similarity_ratio",
    "DiffEngine",
    "Discrepancy",
    "DiffType",
    "compare",
    "DocumentStatus",
    "StatusClassifier",
    "classify",
]
