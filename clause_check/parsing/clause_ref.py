"""
Clause references and their ordering.

A clause reference is the dotted number that opens a contract clause
("2", "2.4", "2.4.1"). References compare by their string; ordering
for display is numeric, component by component.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable


MAX_COMPONENTS = 7

# Components that fail to parse sort after every real number.
_UNPARSED = float('inf')

_REF_RE = re.compile(r'^\d+(?:\.\d+){0,%d}$' % (MAX_COMPONENTS - 1))


@dataclass(frozen=True)
class ClauseRef:
    """A parsed dotted clause reference."""

    text: str
    parts: tuple[int, ...] = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        if not _REF_RE.match(self.text or ''):
            raise ValueError(f"Invalid clause reference: {self.text!r}")
        object.__setattr__(self, 'parts', tuple(int(p) for p in self.text.split('.')))

    def __str__(self) -> str:
        return self.text


def clause_ref_key(ref: str) -> tuple:
    """
    Sort key for a clause reference string.

    Numeric components compare as numbers, so "2" < "2.1" < "2.2" < "10".
    The raw string breaks ties between spellings like "2.01" and "2.1".
    """
    components = []
    for part in str(ref).split('.'):
        try:
            components.append(int(part))
        except ValueError:
            components.append(_UNPARSED)
    return (tuple(components), str(ref))


def sort_clause_refs(refs: Iterable[str]) -> list[str]:
    """Return references in clause order."""
    return sorted(refs, key=clause_ref_key)
