#!/usr/bin/env python3
"""
ClauseCheck CLI

Command-line interface for clause-by-clause contract comparison.

Usage:
    python -m clause_check.cli compare <reference> <document>... --critical 2.1,3.4
    python -m clause_check.cli segment <document>
    python -m clause_check.cli demo
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .batch import BatchComparator, CandidateDocument, ComparisonResult
from .config import ComparisonConfig
from .ingestion import ParseError, UniversalLoader
from .parsing import ClauseSegmenter
from .reports import ReportGenerator, Visualizer


logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="clause-check",
        description="ClauseCheck - verify contract amendments clause by clause",
        epilog=(
            "Similarity is character based. Discrepancies flag clauses for "
            "review; they do not interpret the contract."
        )
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Compare command
    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare counterparty documents against a reference contract"
    )
    compare_parser.add_argument(
        "reference",
        type=str,
        help="Path to the reference (etalon) document"
    )
    compare_parser.add_argument(
        "documents",
        nargs="+",
        type=str,
        help="Paths to counterparty documents"
    )
    compare_parser.add_argument(
        "--critical", "-c",
        type=str,
        help="Comma-separated critical clauses (e.g. 2.1,3.4)"
    )
    compare_parser.add_argument(
        "--threshold", "-t",
        type=float,
        help="Similarity below which a clause counts as changed (default: 0.985)"
    )
    compare_parser.add_argument(
        "--critical-min-similarity",
        type=float,
        help="Similarity below which a changed critical clause means not applied (default: 0.97)"
    )
    compare_parser.add_argument(
        "--ignore", "-i",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Regular expression removed before comparison (repeatable)"
    )
    compare_parser.add_argument(
        "--ignore-file",
        type=str,
        help="File with one ignore pattern per line"
    )
    compare_parser.add_argument(
        "--max-diffs",
        type=int,
        help="Discrepancies listed per document in the summary (default: 25)"
    )
    compare_parser.add_argument(
        "--min-text-length",
        type=int,
        help="Documents with less extracted text need manual review (default: 50)"
    )
    compare_parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of documents compared in parallel (default: 1)"
    )
    compare_parser.add_argument(
        "--config",
        type=str,
        help="JSON configuration file; command-line options take precedence"
    )
    compare_parser.add_argument(
        "--output-dir", "-o",
        type=str,
        help="Directory for summary.txt and results.json"
    )
    compare_parser.add_argument(
        "--format", "-f",
        choices=["text", "json", "markdown"],
        default="text",
        help="Output format"
    )

    # Segment command
    segment_parser = subparsers.add_parser(
        "segment",
        help="Show the numbered clauses found in a document"
    )
    segment_parser.add_argument(
        "document",
        type=str,
        help="Path to the document"
    )
    segment_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format"
    )

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run a demo comparison with synthetic contracts"
    )
    demo_parser.add_argument(
        "--output-dir", "-o",
        type=str,
        help="Directory for summary.txt and results.json"
    )

    return parser


def build_config(args) -> ComparisonConfig:
    """Build the run configuration from a config file and command-line flags."""
    config = ComparisonConfig.from_file(args.config) if args.config else ComparisonConfig()

    ignore_lines = list(args.ignore)
    if args.ignore_file:
        ignore_lines.extend(Path(args.ignore_file).read_text(encoding="utf-8").splitlines())

    overrides = {
        "similarity_threshold": args.threshold,
        "critical_min_similarity": args.critical_min_similarity,
        "max_diffs": args.max_diffs,
        "min_text_length": args.min_text_length,
        "max_workers": args.workers,
    }
    if args.critical is not None:
        overrides["critical_clauses"] = args.critical
    if ignore_lines:
        extra = ComparisonConfig.from_inputs(ignore=ignore_lines).ignore_patterns
        overrides["ignore_patterns"] = config.ignore_patterns + extra

    return config.with_overrides(**overrides)


def compare_documents(args) -> int:
    """Compare counterparty documents against the reference."""
    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    comparator = BatchComparator(config)

    print(f"Reference: {args.reference}")
    try:
        reference = comparator.load_reference(args.reference)
    except FileNotFoundError:
        print(f"Error: File not found: {args.reference}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Error reading reference: {e}", file=sys.stderr)
        return 1

    print(f"  {reference.source_length} characters, {len(reference)} clauses")
    print(f"Comparing {len(args.documents)} documents...")
    print("-" * 50)

    results = comparator.run(
        reference,
        [comparator.candidate_from_path(p) for p in args.documents]
    )

    return emit_results(results, config, args.reference, args.format, args.output_dir)


def emit_results(
    results: list[ComparisonResult],
    config: ComparisonConfig,
    reference_name: str,
    format_type: str = "text",
    output_dir: Optional[str] = None
) -> int:
    """Print results and optionally write summary.txt / results.json."""
    generator = ReportGenerator()
    report = generator.generate_report(results, reference=reference_name, settings=config.to_dict())
    summary = generator.generate_summary(results, config.critical_clauses, config.max_diffs)

    if format_type == "json":
        print(report.to_json())
    elif format_type == "markdown":
        print(generator.generate_markdown_report(report, config.critical_clauses, config.max_diffs))
    else:
        visualizer = Visualizer()
        print(visualizer.generate_status_table(results))
        print()
        print(summary)
        print(visualizer.generate_details(results, config.critical_clauses))

    if output_dir:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        (out / "summary.txt").write_text(summary, encoding="utf-8")
        (out / "results.json").write_text(report.to_json(), encoding="utf-8")
        print(f"\nResults written to: {out}")

    return 0


def segment_document(args) -> int:
    """Show the clauses found in a single document."""
    loader = UniversalLoader()
    try:
        document = loader.load(args.document)
    except FileNotFoundError:
        print(f"Error: File not found: {args.document}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    clauses = ClauseSegmenter().segment(document.text)

    if args.format == "json":
        data = {
            "document": document.name,
            "source": document.source_path,
            "text_length": len(document.text),
            "clause_count": len(clauses),
            "clauses": {ref: clauses[ref] for ref in clauses.sorted_refs()}
        }
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return 0

    print(f"Document: {document.name} ({document.source_path})")
    print(f"Text: {len(document.text)} characters, clauses: {len(clauses)}")
    print("-" * 50)
    for ref in clauses.sorted_refs():
        body = clauses[ref].replace("\n", "\n    ")
        print(f"{ref}  {body}")
    return 0


DEMO_REFERENCE = """
SUPPLY AGREEMENT No. 17
Moscow, 1 March 2024

1. Subject of the Agreement
1.1. The Supplier undertakes to deliver the Goods and the Buyer undertakes to accept and pay for them.
1.2. The range and quantity of the Goods are set out in the Specification.

2. Price and Payment
2.1. The Buyer shall pay for the Goods within 10 (ten) business days of delivery.
2.2. Payment is made by bank transfer to the Supplier's account.

3. Liability
3.1. For late payment the Buyer shall pay a penalty of 0.1% of the unpaid amount per day.
3.2. Neither party is liable for failure caused by force majeure.
"""

DEMO_APPLIED = DEMO_REFERENCE.replace("No. 17", "No. 17-B").replace("1 March 2024", "4 March 2024")

DEMO_DRIFTED = DEMO_REFERENCE.replace(
    "within 10 (ten) business days", "within 30 (thirty) calendar days"
).replace(
    "3.2. Neither party is liable for failure caused by force majeure.\n",
    "3.3. Disputes are settled by the Arbitration Court of Moscow.\n"
)

DEMO_MISSING = DEMO_REFERENCE.replace(
    "2.2. Payment is made by bank transfer to the Supplier's account.\n", ""
).replace(
    "0.1% of the unpaid amount", "0.1 % of the  unpaid amount"
)


def run_demo(args) -> int:
    """Run a demo with synthetic supply agreements."""
    print("Running ClauseCheck Demo")
    print("=" * 50)

    config = ComparisonConfig.from_inputs(critical="2.1, 2.2", ignore=[r"No\. \S+"])
    comparator = BatchComparator(config)
    reference = comparator.segmenter.segment(DEMO_REFERENCE)
    print(f"Reference: {len(reference)} clauses, critical: {', '.join(sorted(config.critical_clauses))}")
    print()

    documents = [
        CandidateDocument("Applied", "applied.txt", lambda: DEMO_APPLIED),
        CandidateDocument("Drifted", "drifted.txt", lambda: DEMO_DRIFTED),
        CandidateDocument("Missing payment clause", "missing.txt", lambda: DEMO_MISSING),
        CandidateDocument("Scanned copy", "scan.txt", lambda: "signature page"),
    ]
    results = comparator.run(reference, documents)

    return emit_results(results, config, "demo reference", "text", args.output_dir)


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "compare":
        return compare_documents(args)
    elif args.command == "segment":
        return segment_document(args)
    elif args.command == "demo":
        return run_demo(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
