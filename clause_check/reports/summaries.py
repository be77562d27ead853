"""
Report generation for clause comparison runs.

Produces:
- summary.txt: one numbered entry per counterparty document
- results.json: full discrepancy list with clause excerpts
- a markdown report combining both
"""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Collection, Optional, Sequence

from ..batch import ComparisonResult
from ..comparison.diff_engine import Discrepancy, DiffType
from ..comparison.status import DocumentStatus


EXCERPT_LIMIT = 260

ABSENT_IN_DOCUMENT = "(absent)"
ABSENT_IN_REFERENCE = "(not in reference)"

STATUS_LABELS = {
    DocumentStatus.OK: "OK",
    DocumentStatus.NOT_APPLIED: "changes not applied",
    DocumentStatus.NEEDS_REVIEW: "manual review required",
    DocumentStatus.DIFFS: "discrepancies found",
}


def excerpt(text: Optional[str], limit: int = EXCERPT_LIMIT) -> str:
    """Shorten text for display, marking the cut with an ellipsis."""
    t = (text or "").strip()
    if len(t) <= limit:
        return t
    return t[:limit].rstrip() + "…"


def status_label(status: DocumentStatus) -> str:
    return STATUS_LABELS[status]


def diff_excerpts(diff: Discrepancy, limit: int = EXCERPT_LIMIT) -> tuple[str, str]:
    """Reference and document excerpts of a discrepancy, with absence markers."""
    if diff.diff_type == DiffType.MISSING:
        return excerpt(diff.reference_text, limit), ABSENT_IN_DOCUMENT
    if diff.diff_type == DiffType.EXTRA:
        return ABSENT_IN_REFERENCE, excerpt(diff.candidate_text, limit)
    return excerpt(diff.reference_text, limit), excerpt(diff.candidate_text, limit)


def prioritize(diffs: Sequence[Discrepancy], critical_clauses: Collection[str]) -> list[Discrepancy]:
    """
    Order discrepancies for a summary: critical clauses first, then
    missing clauses, then the least similar.
    """
    return sorted(diffs, key=lambda d: (
        0 if d.clause_ref in critical_clauses else 1,
        0 if d.diff_type == DiffType.MISSING else 1,
        d.similarity or 0.0
    ))


def describe(diff: Discrepancy) -> str:
    """One-line description of a discrepancy."""
    if diff.diff_type == DiffType.MISSING:
        return f"cl. {diff.clause_ref}: clause from the reference is missing"
    if diff.diff_type == DiffType.CHANGED:
        return f"cl. {diff.clause_ref}: wording differs (similarity={diff.similarity or 0.0:.3f})"
    return f"cl. {diff.clause_ref}: present in the document, absent from the reference"


@dataclass
class ComparisonReport:
    """A complete comparison run, ready for export."""

    report_id: str
    generated_at: datetime
    reference: str
    settings: dict
    results: list[ComparisonResult]

    def status_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in DocumentStatus}
        for result in self.results:
            counts[result.status.value] += 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'report_id': self.report_id,
            'generated_at': self.generated_at.isoformat(),
            'reference': self.reference,
            'settings': self.settings,
            'status_counts': self.status_counts(),
            'results': [result_to_dict(r) for r in self.results]
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False, default=str)


def result_to_dict(result: ComparisonResult, limit: int = EXCERPT_LIMIT) -> dict:
    """Serialize a result with excerpted clause texts."""
    data = result.to_dict()
    data['diffs'] = []
    for diff in result.diffs:
        reference_excerpt, document_excerpt = diff_excerpts(diff, limit)
        data['diffs'].append({
            'clause_ref': diff.clause_ref,
            'diff_type': diff.diff_type.value,
            'similarity': diff.similarity,
            'reference_excerpt': reference_excerpt,
            'document_excerpt': document_excerpt
        })
    return data


class ReportGenerator:
    """Generates summaries and exports from comparison results."""

    def __init__(self, report_prefix: str = "CLAUSE-CHECK"):
        self.report_prefix = report_prefix
        self._report_counter = 0

    def generate_report(
        self,
        results: list[ComparisonResult],
        reference: str = "",
        settings: Optional[dict] = None
    ) -> ComparisonReport:
        """Bundle the results of one run."""
        self._report_counter += 1
        return ComparisonReport(
            report_id=f"{self.report_prefix}-{self._report_counter:05d}",
            generated_at=datetime.now(),
            reference=reference,
            settings=settings or {},
            results=results
        )

    def generate_summary(
        self,
        results: Sequence[ComparisonResult],
        critical_clauses: Collection[str] = frozenset(),
        max_diffs: int = 25
    ) -> str:
        """
        Generate the plain-text summary (summary.txt).

        Args:
            results: Per-document results in display order
            critical_clauses: Clauses whose excerpts are always shown
            max_diffs: Maximum number of discrepancies listed per document

        Returns:
            Summary text ending with a newline
        """
        lines = []

        for i, result in enumerate(results, 1):
            title = f'{i}. Counterparty "{result.name}"'

            if result.status == DocumentStatus.OK:
                lines.append(f"{title}: no discrepancies found, all changes applied")
                lines.append("")
                continue
            if result.status == DocumentStatus.NEEDS_REVIEW:
                lines.append(f"{title}: manual review required (could not extract text/structure)")
                lines.append("")
                continue
            if result.status == DocumentStatus.NOT_APPLIED:
                lines.append(f"{title}: changes not applied")
            else:
                lines.append(f"{title}: the following discrepancies were found:")

            diffs = prioritize(result.diffs, critical_clauses)
            shown = diffs[:max_diffs]
            for diff in shown:
                lines.append(f"- {describe(diff)}")
                if diff.clause_ref in critical_clauses:
                    reference_excerpt, document_excerpt = diff_excerpts(diff)
                    lines.append(f"  - Reference: {reference_excerpt}")
                    lines.append(f"  - Document: {document_excerpt}")

            if len(diffs) > len(shown):
                lines.append(
                    f"  …and {len(diffs) - len(shown)} more discrepancies "
                    "(full list in results.json)"
                )
            lines.append("")

        return "\n".join(lines).strip() + "\n"

    def generate_markdown_report(
        self,
        report: ComparisonReport,
        critical_clauses: Collection[str] = frozenset(),
        max_diffs: int = 25
    ) -> str:
        """
        Generate a markdown-formatted report.

        Args:
            report: ComparisonReport to format
            critical_clauses: Clauses marked as critical
            max_diffs: Maximum number of discrepancies listed per document

        Returns:
            Markdown string
        """
        lines = []

        # Header
        lines.append("# Clause Comparison Report")
        lines.append(f"**Report ID:** {report.report_id}")
        lines.append(f"**Generated:** {report.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        if report.reference:
            lines.append(f"**Reference:** {report.reference}")
        lines.append("")

        # Overview
        lines.append("## Overview")
        lines.append(f"- **Documents Compared:** {len(report.results)}")
        for status, count in report.status_counts().items():
            lines.append(f"- **{status_label(DocumentStatus(status))}:** {count}")
        if critical_clauses:
            lines.append(f"- **Critical Clauses:** {', '.join(sorted(critical_clauses))}")
        lines.append("")

        # Per-document sections
        for result in report.results:
            lines.append(f"## {result.name}: {status_label(result.status)}")
            if result.source_file:
                lines.append(f"*File: {result.source_file}*")
            if result.error:
                lines.append(f"> Error: {result.error}")
            lines.append("")

            if not result.diffs:
                continue

            diffs = prioritize(result.diffs, critical_clauses)
            lines.append("| Clause | Type | Similarity | Reference | Document |")
            lines.append("|---|---|---|---|---|")
            for diff in diffs[:max_diffs]:
                marker = " **(critical)**" if diff.clause_ref in critical_clauses else ""
                similarity = f"{diff.similarity:.3f}" if diff.similarity is not None else ""
                reference_excerpt, document_excerpt = diff_excerpts(diff, 120)
                lines.append(
                    f"| {diff.clause_ref}{marker} | {diff.diff_type.value} | {similarity} | "
                    f"{_md_cell(reference_excerpt)} | {_md_cell(document_excerpt)} |"
                )
            if len(diffs) > max_diffs:
                lines.append("")
                lines.append(f"*…and {len(diffs) - max_diffs} more (see results.json)*")
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")
