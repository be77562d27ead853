"""
Text normalization for clause comparison.

Normalized text is only ever fed to the similarity scorer; clause
bodies keep their original formatting for display and export.
"""

import logging
import re
import unicodedata
from typing import Iterable, Optional, Sequence


logger = logging.getLogger(__name__)

_WS_RE = re.compile(r'\s+')


def compile_ignore_patterns(lines: Iterable[str]) -> list[re.Pattern]:
    """
    Compile operator-supplied ignore patterns.

    Each non-blank line is one regular expression, matched case-insensitively.
    Malformed patterns are skipped so one bad line does not abort a run.

    Args:
        lines: Raw pattern strings, e.g. the lines of an ignore file

    Returns:
        Compiled patterns in input order
    """
    patterns = []
    for line in lines:
        source = (line or "").strip()
        if not source:
            continue
        try:
            patterns.append(re.compile(source, re.IGNORECASE))
        except re.error as e:
            logger.warning("Dropping invalid ignore pattern %r: %s", source, e)
    return patterns


class TextNormalizer:
    """
    Normalizes clause text before similarity scoring.

    Handles:
    - Removal of ignorable fragments (operator patterns)
    - Whitespace collapsing, including newlines
    - Lowercasing
    """

    def __init__(self, unicode_form: Optional[str] = None):
        """Initialize the TextNormalizer.

        Args:
            unicode_form: Optional Unicode normalization form ("NFKC", "NFC", ...)
                applied before everything else. None leaves text as is.
        """
        self.unicode_form = unicode_form

    def normalize(self, text: str, ignore_patterns: Sequence[re.Pattern] = ()) -> str:
        """
        Normalize text for comparison.

        Patterns are applied in order, each on the output of the previous
        one, and every match is removed.

        Args:
            text: Clause body
            ignore_patterns: Compiled patterns whose matches are removed

        Returns:
            Single-line, lowercased text
        """
        normalized = text or ""

        if self.unicode_form:
            normalized = unicodedata.normalize(self.unicode_form, normalized)

        for pattern in ignore_patterns:
            normalized = pattern.sub("", normalized)

        return _WS_RE.sub(" ", normalized).strip().lower()


_default_normalizer = TextNormalizer()


def normalize(text: str, ignore_patterns: Sequence[re.Pattern] = ()) -> str:
    """Normalize text with the default normalizer."""
    return _default_normalizer.normalize(text, ignore_patterns)
