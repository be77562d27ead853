"""
Batch comparison of counterparty documents against a reference contract.

Each candidate is loaded, segmented, compared and classified on its
own. A candidate that cannot be read or yields no clause structure is
reported as NEEDS_REVIEW; it never stops the other candidates.
"""

import concurrent.futures
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Sequence, Union

from .comparison.diff_engine import DiffEngine, Discrepancy, DiffType
from .comparison.similarity import SimilarityScorer
from .comparison.status import DocumentStatus, StatusClassifier
from .config import ComparisonConfig
from .ingestion.loaders import ParseError, UniversalLoader, display_name
from .parsing.clause_segmenter import ClauseMap, ClauseSegmenter


logger = logging.getLogger(__name__)


@dataclass
class ComparisonResult:
    """Outcome of comparing one candidate document with the reference."""

    name: str
    status: DocumentStatus
    diffs: list[Discrepancy] = field(default_factory=list)
    source_file: Optional[str] = None
    error: Optional[str] = None
    clause_count: int = 0
    text_length: int = 0

    def count_by_type(self) -> dict[str, int]:
        """Number of discrepancies of each type."""
        counts = {diff_type.value: 0 for diff_type in DiffType}
        for diff in self.diffs:
            counts[diff.diff_type.value] += 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data = {
            'name': self.name,
            'status': self.status.value,
            'diffs': [d.to_dict() for d in self.diffs],
            'source_file': self.source_file,
            'clause_count': self.clause_count,
            'text_length': self.text_length
        }
        if self.error is not None:
            data['error'] = self.error
        return data


@dataclass(frozen=True)
class CandidateDocument:
    """A counterparty document waiting to be compared."""

    name: str
    source_file: str
    load_text: Callable[[], str]


class BatchComparator:
    """
    Compares many candidate documents against one reference clause map.

    Comparisons share only read-only state (the reference map and the
    config), so with ``max_workers > 1`` they run on a thread pool.
    Results always come back in input order.
    """

    def __init__(
        self,
        config: Optional[ComparisonConfig] = None,
        segmenter: Optional[ClauseSegmenter] = None,
        loader: Optional[UniversalLoader] = None
    ):
        self.config = config or ComparisonConfig()
        self.segmenter = segmenter or ClauseSegmenter()
        self.loader = loader or UniversalLoader()
        self.engine = DiffEngine(
            scorer=SimilarityScorer(max_length=self.config.max_clause_length),
            gap_similarity=self.config.gap_similarity
        )
        self.classifier = StatusClassifier(self.config.critical_min_similarity)

    def load_reference(self, path: Union[str, os.PathLike]) -> ClauseMap:
        """
        Load and segment the reference document.

        Raises:
            FileNotFoundError: If the file does not exist
            ParseError: If the file cannot be read
        """
        document = self.loader.load(path)
        clauses = self.segmenter.segment(document.text)
        if not clauses:
            logger.warning("Reference document %s has no numbered clauses", path)
        logger.info(
            "Reference %s: %d characters, %d clauses",
            path, len(document.text), len(clauses)
        )
        return clauses

    def candidate_from_path(self, path: Union[str, os.PathLike]) -> CandidateDocument:
        """Wrap a file path as a lazily loaded candidate."""
        path = str(path)
        return CandidateDocument(
            name=display_name(path),
            source_file=Path(path).name,
            load_text=lambda: self.loader.load(path).text
        )

    def compare_text(
        self,
        reference: Mapping[str, str],
        text: str,
        name: str,
        source_file: Optional[str] = None
    ) -> ComparisonResult:
        """
        Compare already extracted candidate text with the reference.

        Args:
            reference: Reference clause map
            text: Extracted candidate text
            name: Display name of the candidate
            source_file: Original file name

        Returns:
            ComparisonResult
        """
        text = text or ""
        clauses = self.segmenter.segment(text)

        if len(text) < self.config.min_text_length or not clauses:
            logger.info(
                "%s needs review: %d characters, %d clauses",
                name, len(text), len(clauses)
            )
            return ComparisonResult(
                name=name,
                status=DocumentStatus.NEEDS_REVIEW,
                source_file=source_file,
                clause_count=len(clauses),
                text_length=len(text)
            )

        diffs = self.engine.compare(
            reference,
            clauses,
            ignore_patterns=self.config.ignore_patterns,
            threshold=self.config.similarity_threshold
        )
        status = self.classifier.classify(diffs, self.config.critical_clauses)

        logger.info("%s: %s (%d discrepancies)", name, status.value, len(diffs))
        return ComparisonResult(
            name=name,
            status=status,
            diffs=diffs,
            source_file=source_file,
            clause_count=len(clauses),
            text_length=len(text)
        )

    def compare_document(
        self,
        reference: Mapping[str, str],
        document: CandidateDocument
    ) -> ComparisonResult:
        """Load one candidate and compare it, isolating load failures."""
        try:
            text = document.load_text()
        except (ParseError, OSError) as e:
            logger.warning("Failed to load %s: %s", document.source_file, e)
            return self._failed(document, e)
        except Exception as e:
            logger.exception("Unexpected error loading %s", document.source_file)
            return self._failed(document, e)

        return self.compare_text(reference, text, document.name, document.source_file)

    def run(
        self,
        reference: Mapping[str, str],
        documents: Iterable[CandidateDocument]
    ) -> list[ComparisonResult]:
        """
        Compare every candidate against the reference.

        Args:
            reference: Reference clause map
            documents: Candidates to compare

        Returns:
            One ComparisonResult per candidate, in input order
        """
        documents = list(documents)
        logger.info("Comparing %d documents against %d reference clauses", len(documents), len(reference))

        if self.config.max_workers == 1 or len(documents) < 2:
            return [self.compare_document(reference, doc) for doc in documents]

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = [executor.submit(self.compare_document, reference, doc) for doc in documents]
            return [future.result() for future in futures]

    def compare_files(
        self,
        reference_path: Union[str, os.PathLike],
        candidate_paths: Sequence[Union[str, os.PathLike]]
    ) -> list[ComparisonResult]:
        """Load the reference and compare every candidate file with it."""
        reference = self.load_reference(reference_path)
        return self.run(reference, [self.candidate_from_path(p) for p in candidate_paths])

    @staticmethod
    def _failed(document: CandidateDocument, error: Exception) -> ComparisonResult:
        return ComparisonResult(
            name=document.name,
            status=DocumentStatus.NEEDS_REVIEW,
            source_file=document.source_file,
            error=str(error)
        )
