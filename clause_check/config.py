"""
Run configuration for clause comparison.

All settings for one comparison run live in a single read-only
ComparisonConfig shared by every per-document comparison. Values are
validated on construction; invalid input raises pydantic's
ValidationError, which is a ValueError.
"""

import re
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .comparison.diff_engine import DEFAULT_SIMILARITY_THRESHOLD
from .comparison.status import DEFAULT_CRITICAL_MIN_SIMILARITY
from .ingestion.normalizer import compile_ignore_patterns


def parse_critical_clauses(value: Union[str, Iterable[str], None]) -> frozenset[str]:
    """Parse a comma-separated clause list ("2.1, 3.4") into a set of references."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(str(item).strip() for item in value if item and str(item).strip())


class ComparisonConfig(BaseModel):
    """Settings for a comparison run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    similarity_threshold: float = Field(DEFAULT_SIMILARITY_THRESHOLD, ge=0.0, le=1.0)
    critical_min_similarity: float = Field(DEFAULT_CRITICAL_MIN_SIMILARITY, ge=0.0, le=1.0)
    critical_clauses: frozenset[str] = frozenset()
    ignore_patterns: tuple[re.Pattern, ...] = ()
    min_text_length: int = Field(50, ge=0)
    max_diffs: int = Field(25, ge=1)
    gap_similarity: Optional[float] = Field(0.0, ge=0.0, le=1.0)
    max_workers: int = Field(1, ge=1)
    max_clause_length: Optional[int] = Field(20000, ge=1)

    @field_validator("critical_clauses", mode="before")
    @classmethod
    def validate_critical_clauses(cls, value: Any) -> frozenset[str]:
        if value is not None and not isinstance(value, (str, list, tuple, set, frozenset)):
            raise ValueError("critical_clauses must be a comma-separated string or a list")
        return parse_critical_clauses(value)

    @field_validator("ignore_patterns", mode="before")
    @classmethod
    def validate_ignore_patterns(cls, value: Any) -> tuple[re.Pattern, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.splitlines()
        if not isinstance(value, (list, tuple)):
            raise ValueError("ignore_patterns must be a string or a list of patterns")

        patterns = []
        for item in value:
            if isinstance(item, re.Pattern):
                patterns.append(item)
            elif isinstance(item, str):
                patterns.extend(compile_ignore_patterns([item]))
            else:
                raise ValueError(f"ignore pattern must be a string, got {type(item).__name__}")
        return tuple(patterns)

    @classmethod
    def from_inputs(
        cls,
        critical: Union[str, Iterable[str], None] = None,
        ignore: Union[str, Iterable[str], None] = None,
        **kwargs
    ) -> "ComparisonConfig":
        """
        Build a config from operator-style inputs.

        Args:
            critical: Comma-separated clause references, or an iterable of them
            ignore: Ignore patterns, one per line, or an iterable of lines.
                Invalid patterns are dropped.
            **kwargs: Any other ComparisonConfig field

        Returns:
            ComparisonConfig
        """
        if ignore is not None and not isinstance(ignore, str):
            ignore = list(ignore)
        if critical is not None and not isinstance(critical, str):
            critical = list(critical)
        return cls(critical_clauses=critical, ignore_patterns=ignore, **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComparisonConfig":
        """
        Build a config from a plain dictionary (e.g. parsed JSON).

        ``critical_clauses`` may be a list or a comma-separated string;
        ``ignore_patterns`` a list of pattern strings. Unknown keys are
        rejected.
        """
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ComparisonConfig":
        """Load a config from a JSON file holding an object with the field names as keys."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))

    def with_overrides(self, **overrides) -> "ComparisonConfig":
        """Return a validated copy with the given non-None fields replaced."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return type(self).model_validate(data)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "similarity_threshold": self.similarity_threshold,
            "critical_min_similarity": self.critical_min_similarity,
            "critical_clauses": sorted(self.critical_clauses),
            "ignore_patterns": [p.pattern for p in self.ignore_patterns],
            "min_text_length": self.min_text_length,
            "max_diffs": self.max_diffs,
            "gap_similarity": self.gap_similarity,
            "max_workers": self.max_workers,
            "max_clause_length": self.max_clause_length
        }
