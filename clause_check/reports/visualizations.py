"""
Terminal views of comparison results.

- Status table: one row per document with discrepancy counts
- Details view: per-document list of the first discrepancies with
  reference and document excerpts
"""

from dataclasses import dataclass
from typing import Collection, Sequence

from ..batch import ComparisonResult
from ..comparison.diff_engine import DiffType
from ..comparison.status import DocumentStatus
from .summaries import diff_excerpts, status_label


@dataclass
class StatusRow:
    """One row of the status table."""

    name: str
    status: DocumentStatus
    missing: int
    changed: int
    extra: int


class Visualizer:
    """Renders comparison results for terminal display."""

    STATUS_SYMBOLS = {
        DocumentStatus.OK: '✔',
        DocumentStatus.DIFFS: '△',
        DocumentStatus.NOT_APPLIED: '✘',
        DocumentStatus.NEEDS_REVIEW: '?',
    }

    def status_rows(self, results: Sequence[ComparisonResult]) -> list[StatusRow]:
        rows = []
        for result in results:
            counts = result.count_by_type()
            rows.append(StatusRow(
                name=result.name,
                status=result.status,
                missing=counts[DiffType.MISSING.value],
                changed=counts[DiffType.CHANGED.value],
                extra=counts[DiffType.EXTRA.value]
            ))
        return rows

    def generate_status_table(self, results: Sequence[ComparisonResult]) -> str:
        """
        Generate an ASCII table of document statuses.

        Args:
            results: Comparison results

        Returns:
            ASCII string representation
        """
        if not results:
            return "No documents compared"

        rows = self.status_rows(results)
        name_width = max(8, max(len(r.name) for r in rows))
        status_width = max(len(label) for label in map(status_label, DocumentStatus))

        lines = []
        header = (
            f"{'Document'.ljust(name_width)} │ {'Status'.ljust(status_width + 2)} │"
            f" {'MISSING':>7} {'CHANGED':>7} {'EXTRA':>7}"
        )
        lines.append(header)
        lines.append("─" * len(header))

        for row in rows:
            status = f"{self.STATUS_SYMBOLS[row.status]} {status_label(row.status)}"
            lines.append(
                f"{row.name.ljust(name_width)} │ {status.ljust(status_width + 2)} │"
                f" {row.missing:>7} {row.changed:>7} {row.extra:>7}"
            )

        return "\n".join(lines)

    def generate_details(
        self,
        results: Sequence[ComparisonResult],
        critical_clauses: Collection[str] = frozenset(),
        top_n: int = 12
    ) -> str:
        """
        Generate the per-document details view.

        Args:
            results: Comparison results
            critical_clauses: Clauses flagged as (CRITICAL)
            top_n: Discrepancies shown per document

        Returns:
            ASCII string representation
        """
        blocks = []

        for result in results:
            lines = [f"{result.name} [{status_label(result.status)}]"]
            lines.append(f"  File: {result.source_file or '-'} • Discrepancies: {len(result.diffs)}")
            if result.error:
                lines.append(f"  Error: {result.error}")

            for diff in result.diffs[:top_n]:
                title = f"cl. {diff.clause_ref}"
                if diff.clause_ref in critical_clauses:
                    title += " (CRITICAL)"
                line = f"  {title}: {diff.diff_type.value}"
                if diff.diff_type == DiffType.CHANGED:
                    line += f" (sim={diff.similarity or 0.0:.3f})"
                lines.append(line)

                reference_excerpt, document_excerpt = diff_excerpts(diff)
                lines.append(f"    Reference: {reference_excerpt}")
                lines.append(f"    Document: {document_excerpt}")

            if len(result.diffs) > top_n:
                lines.append(f"  …{len(result.diffs) - top_n} more (full list in results.json)")

            blocks.append("\n".join(lines))

        return "\n\n".join(blocks)
