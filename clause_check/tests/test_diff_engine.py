"""
Tests for clause-by-clause comparison.
"""

import pytest
from clause_check.comparison.diff_engine import DiffEngine, DiffType, Discrepancy, compare
from clause_check.ingestion.normalizer import compile_ignore_patterns


class TestDiffEngine:
    """Test suite for DiffEngine."""

    @pytest.fixture
    def engine(self):
        return DiffEngine()

    @pytest.fixture
    def reference(self):
        return {"1": "Pay within 10 days.", "2": "Confidential."}

    @pytest.fixture
    def candidate(self):
        return {"1": "Pay within 30 days.", "3": "New clause."}

    def test_changed_missing_extra(self, engine, reference, candidate):
        """Test the three kinds of discrepancy, sorted by clause number."""
        diffs = engine.compare(reference, candidate)

        assert [(d.clause_ref, d.diff_type) for d in diffs] == [
            ("1", DiffType.CHANGED),
            ("2", DiffType.MISSING),
            ("3", DiffType.EXTRA),
        ]

    def test_changed_carries_similarity_and_both_texts(self, engine, reference, candidate):
        changed = engine.compare(reference, candidate)[0]

        assert changed.similarity == pytest.approx(36 / 38)
        assert changed.reference_text == "Pay within 10 days."
        assert changed.candidate_text == "Pay within 30 days."

    def test_gap_discrepancies(self, engine, reference, candidate):
        """Test that MISSING keeps the reference text and EXTRA the candidate text."""
        diffs = {d.diff_type: d for d in engine.compare(reference, candidate)}

        missing = diffs[DiffType.MISSING]
        assert missing.reference_text == "Confidential."
        assert missing.candidate_text is None
        assert missing.similarity == 0.0

        extra = diffs[DiffType.EXTRA]
        assert extra.reference_text is None
        assert extra.candidate_text == "New clause."
        assert extra.similarity == 0.0

    def test_gap_similarity_can_be_unset(self, reference, candidate):
        engine = DiffEngine(gap_similarity=None)
        diffs = engine.compare(reference, candidate)

        assert [d.similarity for d in diffs if d.diff_type != DiffType.CHANGED] == [None, None]

    def test_identical_maps(self, engine, reference):
        assert engine.compare(reference, dict(reference)) == []

    def test_both_empty(self, engine):
        assert engine.compare({}, {}) == []

    def test_empty_candidate_all_missing(self, engine, reference):
        diffs = engine.compare(reference, {})

        assert [d.diff_type for d in diffs] == [DiffType.MISSING, DiffType.MISSING]

    def test_whitespace_and_case_ignored(self, engine):
        """Test that formatting-only differences are not discrepancies."""
        reference = {"4.1": "The Supplier shall\ndeliver the Goods."}
        candidate = {"4.1": "the  supplier SHALL deliver   the goods."}

        assert engine.compare(reference, candidate) == []

    def test_ignore_patterns(self, engine):
        """Test that ignored fragments do not count as changes."""
        reference = {"1": "Agreement No. 17 shall apply to all deliveries."}
        candidate = {"1": "Agreement No. 18-B shall apply to all deliveries."}
        patterns = compile_ignore_patterns([r"No\. \S+"])

        assert len(engine.compare(reference, candidate)) == 1
        assert engine.compare(reference, candidate, ignore_patterns=patterns) == []

    def test_threshold(self, engine, reference, candidate):
        """Test that a lower threshold accepts the edited clause."""
        diffs = engine.compare(reference, candidate, threshold=0.9)

        assert DiffType.CHANGED not in [d.diff_type for d in diffs]

    def test_threshold_one_flags_any_change(self, engine):
        diffs = engine.compare({"1": "abcdefghij"}, {"1": "abcdefghiJ."}, threshold=1.0)

        assert [d.diff_type for d in diffs] == [DiffType.CHANGED]

    def test_numeric_sort_order(self, engine):
        reference = {"10": "ten", "2": "two", "2.1": "two one"}

        diffs = engine.compare(reference, {})

        assert [d.clause_ref for d in diffs] == ["2", "2.1", "10"]

    def test_similarity_uses_normalized_text(self, engine):
        assert engine.similarity("A  B", "a b") == 1.0

    def test_module_level_compare(self, reference):
        assert compare(reference, reference) == []


class TestDiscrepancy:
    """Tests for the Discrepancy record."""

    def test_to_dict(self):
        diff = Discrepancy(
            clause_ref="2.1",
            diff_type=DiffType.CHANGED,
            similarity=0.5,
            reference_text="a",
            candidate_text="b"
        )

        assert diff.to_dict() == {
            'clause_ref': "2.1",
            'diff_type': "CHANGED",
            'similarity': 0.5,
            'reference_text': "a",
            'candidate_text': "b"
        }

    def test_same_clause_sorted_by_type_name(self):
        diffs = [
            Discrepancy("1", DiffType.MISSING),
            Discrepancy("1", DiffType.CHANGED),
            Discrepancy("1", DiffType.EXTRA),
        ]

        assert [d.diff_type for d in sorted(diffs, key=Discrepancy.sort_key)] == [
            DiffType.CHANGED, DiffType.EXTRA, DiffType.MISSING
        ]
