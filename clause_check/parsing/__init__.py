"""Parsing module for clause references and clause segmentation."""

from .clause_ref import ClauseRef, clause_ref_key, sort_clause_refs
from .clause_segmenter import (
    ClauseMap,
    ClauseSegmenter,
    HeadingMatch,
    HeadingMatcher,
    RegexHeadingMatcher,
    segment,
)

__all__ = [
    "ClauseRef",
    "clause_ref_key",
    "sort_clause_refs",
    "ClauseMap",
    "ClauseSegmenter",
    "HeadingMatch",
    "HeadingMatcher",
    "RegexHeadingMatcher",
    "segment",
]
