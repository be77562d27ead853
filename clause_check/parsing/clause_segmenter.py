"""
Clause segmentation of contract documents.

Splits extracted document text into numbered clauses:

    2.1 The Supplier shall deliver...      -> "2.1": "The Supplier shall deliver..."
    п. 2.2. Оплата производится...          -> "2.2": "Оплата производится..."

Lines before the first numbered heading (title, parties, preamble)
are not captured.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .clause_ref import ClauseRef, sort_clause_refs


logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = ""

_WS_RE = re.compile(r'\s+')
_LINE_SPLIT_RE = re.compile(r'\r?\n')


@dataclass(frozen=True)
class HeadingMatch:
    """A detected clause heading: the clause number and the rest of the line."""

    ref: str
    rest: str


HeadingMatcher = Callable[[str], Optional[HeadingMatch]]


class RegexHeadingMatcher:
    """
    Detects clause headings with a regular expression.

    The pattern must define the named groups ``num`` (the dotted clause
    number) and ``rest`` (the remainder of the line).
    """

    # Lead-in markers: Russian "пункт"/"подпункт" and their abbreviations,
    # plus the English equivalents.
    LEAD_IN = r'(?:п\.?|пп\.?|пункт|подпункт|cl\.|clause|sub-item|subclause|item)'

    # Up to 7 numeric components, then ") . - – :" plus whitespace, or whitespace.
    DEFAULT_PATTERN = (
        r'^\s*(?:' + LEAD_IN + r'\s*)?'
        r'(?P<num>\d+(?:\.\d+){0,6})'
        r'\s*(?:[).\-–:]\s+|\s+)(?P<rest>.*)$'
    )

    def __init__(self, pattern: Optional[str] = None):
        self.pattern = re.compile(pattern or self.DEFAULT_PATTERN, re.IGNORECASE)

    def __call__(self, line: str) -> Optional[HeadingMatch]:
        match = self.pattern.match(line)
        if not match or not match.group('num'):
            return None
        return HeadingMatch(ref=match.group('num'), rest=match.group('rest') or "")


class ClauseMap(Mapping):
    """
    Read-only mapping of clause reference -> clause body.

    Iteration follows document order (first occurrence of each
    reference); use ``sorted_refs`` for clause order.
    """

    def __init__(self, clauses: Optional[dict[str, str]] = None, source_length: int = 0):
        self._clauses = dict(clauses or {})
        self.source_length = source_length

    def __getitem__(self, ref: str) -> str:
        return self._clauses[ref]

    def __iter__(self) -> Iterator[str]:
        return iter(self._clauses)

    def __len__(self) -> int:
        return len(self._clauses)

    def __repr__(self) -> str:
        return f"ClauseMap({self._clauses!r})"

    def sorted_refs(self) -> list[str]:
        return sort_clause_refs(self._clauses)

    def to_dict(self) -> dict[str, str]:
        return dict(self._clauses)


class ClauseSegmenter:
    """
    Splits raw document text into a ClauseMap.

    A heading line opens (or re-opens) the clause it names; every
    following non-blank line belongs to that clause until the next
    heading.
    """

    def __init__(
        self,
        heading_matcher: Optional[HeadingMatcher] = None,
        keep_paragraph_breaks: bool = True,
        strict: bool = True
    ):
        """
        Initialize the segmenter.

        Args:
            heading_matcher: Callable returning a HeadingMatch for heading
                lines and None otherwise. Defaults to RegexHeadingMatcher.
            keep_paragraph_breaks: If True, a blank line inside a clause is
                kept as an empty line in its body. If False, blank lines
                are dropped.
            strict: If True, whitespace runs inside each line of a clause
                body are collapsed to single spaces.
        """
        self.heading_matcher = heading_matcher or RegexHeadingMatcher()
        self.keep_paragraph_breaks = keep_paragraph_breaks
        self.strict = strict

    def segment(self, text: str) -> ClauseMap:
        """
        Segment document text into clauses.

        Args:
            text: Line-oriented text as returned by a document loader

        Returns:
            ClauseMap in document order; empty if no heading was found
        """
        text = text or ""
        fragments: dict[str, list[str]] = {}
        current: Optional[str] = None

        for line in _LINE_SPLIT_RE.split(text):
            line = line.rstrip()

            if not line.strip():
                if self.keep_paragraph_breaks and current is not None:
                    parts = fragments[current]
                    if parts and parts[-1] != PARAGRAPH_BREAK:
                        parts.append(PARAGRAPH_BREAK)
                continue

            heading = self.heading_matcher(line)
            ref = self._clause_ref(heading, line) if heading is not None else None
            if ref is not None:
                current = ref.text
                parts = fragments.setdefault(current, [])
                rest = heading.rest.strip()
                if rest:
                    parts.append(rest)
                continue

            if current is None:
                continue
            fragments[current].append(line.strip())

        clauses = {ref: self._finalize(parts) for ref, parts in fragments.items()}
        logger.debug("Segmented %d characters into %d clauses", len(text), len(clauses))
        return ClauseMap(clauses, source_length=len(text))

    @staticmethod
    def _clause_ref(heading: HeadingMatch, line: str) -> Optional[ClauseRef]:
        """Validated reference of a heading; None makes the line ordinary text."""
        try:
            return ClauseRef(heading.ref)
        except ValueError:
            logger.warning("Ignoring heading with invalid clause reference %r: %r", heading.ref, line)
            return None

    def _finalize(self, parts: list[str]) -> str:
        """Join clause fragments into the stored clause body."""
        joined = "\n".join(parts)
        if self.strict:
            joined = "\n".join(_WS_RE.sub(" ", ln).strip() for ln in joined.split("\n"))
        return joined.strip()


_default_segmenter = ClauseSegmenter()


def segment(text: str) -> ClauseMap:
    """Segment text with the default heading pattern."""
    return _default_segmenter.segment(text)
