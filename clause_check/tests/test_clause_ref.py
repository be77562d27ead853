"""
Tests for clause references and their ordering.
"""

import pytest
from clause_check.parsing.clause_ref import (
    ClauseRef,
    clause_ref_key,
    sort_clause_refs,
)


class TestClauseRefOrdering:
    """Test suite for clause reference ordering."""

    def test_parent_sorts_before_children(self):
        """Test that numeric ordering puts 2 before 2.1 and 10 last."""
        assert sort_clause_refs(["2", "2.1", "10", "2.2"]) == ["2", "2.1", "2.2", "10"]

    def test_numeric_not_lexicographic(self):
        """Test that components compare as numbers."""
        assert sort_clause_refs(["1.10", "1.9", "1.2"]) == ["1.2", "1.9", "1.10"]

    def test_deep_references(self):
        refs = ["3", "2.4.1", "2.4", "2.10.1", "2.4.1.1"]
        assert sort_clause_refs(refs) == ["2.4", "2.4.1", "2.4.1.1", "2.10.1", "3"]

    def test_leading_zero_tie_broken_by_string(self):
        """Test that equal numeric values fall back to the raw string."""
        assert sort_clause_refs(["2.1", "2.01"]) == ["2.01", "2.1"]

    def test_non_numeric_component_sorts_last(self):
        assert sort_clause_refs(["2.x", "2.5", "3"]) == ["2.5", "2.x", "3"]

    def test_sort_is_total_and_stable(self):
        """Test that sorting any permutation gives the same order."""
        refs = ["10", "2.2", "2", "1.1", "2.1"]
        expected = ["1.1", "2", "2.1", "2.2", "10"]
        assert sort_clause_refs(refs) == expected
        assert sort_clause_refs(reversed(refs)) == expected
        assert sorted(refs, key=clause_ref_key) == expected


class TestClauseRef:
    """Tests for the ClauseRef value type."""

    def test_parses_components(self):
        ref = ClauseRef("2.4.1")
        assert ref.parts == (2, 4, 1)
        assert str(ref) == "2.4.1"

    def test_equality_is_string_equality(self):
        """Test that leading zeros make a different reference."""
        assert ClauseRef("2.1") == ClauseRef("2.1")
        assert ClauseRef("02.1") != ClauseRef("2.1")
        assert len({ClauseRef("3"), ClauseRef("3")}) == 1

    @pytest.mark.parametrize("text", ["", "abc", "2.", ".1", "1..2", "1.2.3.4.5.6.7.8"])
    def test_invalid_references(self, text):
        """Test that malformed references are rejected."""
        with pytest.raises(ValueError):
            ClauseRef(text)

    def test_seven_components_allowed(self):
        assert ClauseRef("1.2.3.4.5.6.7").parts == (1, 2, 3, 4, 5, 6, 7)
