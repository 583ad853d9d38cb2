#!/usr/bin/env python3
"""
reg-catalog CLI

Command-line interface for the compliance catalog.

Usage:
    reg-catalog load ./examples/minimal
    reg-catalog list -dir ./examples/minimal -type regulations
    reg-catalog query -dir ./examples/minimal -solution cloud-provider-a
    reg-catalog validate ./examples/minimal
    reg-catalog coverage -dir ./examples/minimal
    reg-catalog import-research -input research.json -output mappings-new.json

Options are accepted with one or two leading dashes.
"""

import argparse
import logging
import sys
from typing import Optional

from . import __version__
from .catalog import check_integrity
from .ingestion import LoadError, load_framework, load_research_input, write_json
from .research import FindingValidator, MappingReconciler, analyze_research
from .reports import CoverageAnalyzer, LISTINGS, ReportGenerator, Visualizer, to_json

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--verbose", "-verbose",
        action="store_true",
        help="Log debug output to stderr"
    )

    parser = argparse.ArgumentParser(
        prog="reg-catalog",
        description="Compliance regulations framework catalog"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Load command
    load_parser = subparsers.add_parser(
        "load",
        parents=[common],
        help="Load and display a compliance framework from a directory"
    )
    load_parser.add_argument(
        "directory",
        nargs="?",
        help="Framework directory"
    )

    # List command
    list_parser = subparsers.add_parser(
        "list",
        parents=[common],
        help="List items of a specific type"
    )
    list_parser.add_argument(
        "--type", "-type",
        dest="item_type",
        default="",
        help=f"Type to list ({', '.join(LISTINGS)})"
    )
    list_parser.add_argument(
        "--dir", "-dir",
        default=".",
        help="Directory containing JSON files"
    )
    list_parser.add_argument(
        "--format", "-format",
        choices=["table", "json", "markdown"],
        default="table",
        help="Output format"
    )

    # Query command
    query_parser = subparsers.add_parser(
        "query",
        parents=[common],
        help="Query mappings for a solution or requirement"
    )
    query_parser.add_argument(
        "--solution", "-solution",
        default="",
        help="Solution ID to query"
    )
    query_parser.add_argument(
        "--requirement", "-requirement",
        default="",
        help="Requirement ID to query"
    )
    query_parser.add_argument(
        "--jurisdiction", "-jurisdiction",
        default="",
        help="Filter by jurisdiction ID"
    )
    query_parser.add_argument(
        "--dir", "-dir",
        default=".",
        help="Directory containing JSON files"
    )
    query_parser.add_argument(
        "--format", "-format",
        choices=["table", "json"],
        default="table",
        help="Output format"
    )

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Check references between the JSON files in a directory"
    )
    validate_parser.add_argument(
        "directory",
        nargs="?",
        help="Framework directory"
    )

    # Coverage command
    coverage_parser = subparsers.add_parser(
        "coverage",
        parents=[common],
        help="Analyze mapping coverage and data completeness"
    )
    coverage_parser.add_argument(
        "--dir", "-dir",
        default=".",
        help="Directory containing JSON files"
    )
    coverage_parser.add_argument(
        "--format", "-format",
        choices=["table", "json", "markdown"],
        default="table",
        help="Output format"
    )
    coverage_parser.add_argument(
        "--jurisdictions", "-jurisdictions",
        nargs="+",
        help="Jurisdictions to analyse (default: "
             f"{' '.join(CoverageAnalyzer.DEFAULT_JURISDICTIONS)})"
    )
    coverage_parser.add_argument(
        "--heatmap", "-heatmap",
        action="store_true",
        help="Include a solution coverage heatmap"
    )

    # Import-research command
    import_parser = subparsers.add_parser(
        "import-research",
        parents=[common],
        help="Convert research findings JSON to mappings format"
    )
    import_parser.add_argument(
        "--input", "-input",
        default="",
        help="Input research JSON file"
    )
    import_parser.add_argument(
        "--output", "-output",
        default="",
        help="Output mappings JSON file (default: stdout)"
    )
    import_parser.add_argument(
        "--dir", "-dir",
        default="",
        help="Framework directory for validation or merge"
    )
    import_parser.add_argument(
        "--analyze", "-analyze",
        action="store_true",
        help="Print analysis report instead of mappings"
    )
    import_parser.add_argument(
        "--validate", "-validate",
        action="store_true",
        help="Validate research against framework (requires -dir)"
    )
    import_parser.add_argument(
        "--merge", "-merge",
        action="store_true",
        help="Merge with existing mappings (requires -dir)"
    )
    import_parser.add_argument(
        "--format", "-format",
        choices=["table", "json"],
        default="table",
        help="Output format"
    )

    return parser


def _load(directory: str, prefix: str = "Error loading framework"):
    """Load a framework, reporting failures on stderr. Returns None on failure."""
    try:
        return load_framework(directory)
    except (FileNotFoundError, LoadError) as e:
        print(f"{prefix}: {e}", file=sys.stderr)
        return None


def load_command(args) -> int:
    """Load a framework and print its statistics."""
    if not args.directory:
        print("Error: directory path required", file=sys.stderr)
        return 1

    framework = _load(args.directory)
    if framework is None:
        return 1

    print(ReportGenerator().framework_summary(framework))
    return 0


def list_command(args) -> int:
    """List the records of one kind."""
    if not args.item_type:
        print("Error: -type is required", file=sys.stderr)
        return 1
    if args.item_type not in LISTINGS:
        print(f"Unknown type: {args.item_type}", file=sys.stderr)
        return 1

    framework = _load(args.dir)
    if framework is None:
        return 1

    records = getattr(framework, LISTINGS[args.item_type].attribute)
    generator = ReportGenerator()

    if args.format == "json":
        print(to_json(records))
    elif args.format == "markdown":
        print(generator.listing_markdown(records, args.item_type))
    else:
        print(generator.listing_table(records, args.item_type))
    return 0


def query_command(args) -> int:
    """Show the mappings for a solution or a requirement."""
    if not args.solution and not args.requirement:
        print("Error: -solution or -requirement is required", file=sys.stderr)
        return 1

    framework = _load(args.dir)
    if framework is None:
        return 1

    if args.solution:
        mappings = framework.get_mappings_for_solution(args.solution)
    else:
        mappings = framework.get_mappings_for_requirement(args.requirement)

    if args.jurisdiction:
        mappings = [m for m in mappings if m.applies_to(args.jurisdiction)]

    if args.format == "json":
        print(to_json(mappings))
    else:
        print(ReportGenerator().mapping_query_report(mappings))
    return 0


def validate_command(args) -> int:
    """Check referential integrity of a framework directory."""
    if not args.directory:
        print("Error: directory path required", file=sys.stderr)
        return 1

    framework = _load(args.directory, prefix="Validation failed")
    if framework is None:
        return 1

    issues = check_integrity(framework)
    print(ReportGenerator().integrity_report(issues))
    return 1 if issues else 0


def coverage_command(args) -> int:
    """Report mapping coverage per jurisdiction."""
    framework = _load(args.dir)
    if framework is None:
        return 1

    analyzer = CoverageAnalyzer(args.jurisdictions)
    stats = analyzer.analyze(framework.mappings, framework.solutions, framework.requirements)

    heatmap = None
    if args.heatmap:
        heatmap = Visualizer().generate_coverage_heatmap(stats.matrices)

    generator = ReportGenerator()
    if args.format == "json":
        data = stats.to_dict()
        if heatmap is not None:
            data['heatmap'] = heatmap.to_dict()
        print(to_json(data))
        return 0

    if args.format == "markdown":
        print(generator.coverage_markdown(stats))
    else:
        print(generator.coverage_report(stats))

    if heatmap is not None:
        print(Visualizer().generate_ascii_heatmap(heatmap))
    return 0


def _write_mappings(mappings: list, path: str) -> bool:
    try:
        write_json(path, [m.to_dict() for m in mappings])
    except OSError as e:
        print(f"Error writing output file: {e}", file=sys.stderr)
        return False
    return True


def import_research_command(args) -> int:
    """
    Convert, analyze, validate or merge a research submission.

    The modes are exclusive and checked in the order analyze, validate,
    merge; with none of them the findings are converted to mappings.
    """
    if not args.input:
        print("Error: -input is required", file=sys.stderr)
        return 1

    try:
        research = load_research_input(args.input)
    except (FileNotFoundError, LoadError) as e:
        print(f"Error loading research file: {e}", file=sys.stderr)
        return 1

    generator = ReportGenerator()

    if args.analyze:
        analysis = analyze_research(research)
        if args.format == "json":
            print(to_json(analysis))
        else:
            print(generator.research_analysis_report(analysis))
        return 0

    framework = None
    if args.dir:
        framework = _load(args.dir)
        if framework is None:
            return 1

    if args.validate:
        if framework is None:
            print("Error: -dir is required for validation", file=sys.stderr)
            return 1
        result = FindingValidator().validate(research.findings, framework)
        if args.format == "json":
            print(to_json(result))
        else:
            print(generator.validation_report(result))
        return 0 if result.valid else 1

    if args.merge:
        if framework is None:
            print("Error: -dir is required for merge", file=sys.stderr)
            return 1
        result = MappingReconciler().merge(
            research.findings,
            framework.mappings,
            research.metadata.research_date
        )
        print(generator.merge_summary(result), file=sys.stderr)

        combined = result.combined()
        if args.output:
            if not _write_mappings(combined, args.output):
                return 1
            print(f"Wrote {len(combined)} mappings to {args.output}", file=sys.stderr)
        elif args.format == "json":
            print(to_json(combined))
        return 0

    mappings = research.to_mappings()
    if args.output:
        if not _write_mappings(mappings, args.output):
            return 1
        print(f"Wrote {len(mappings)} mappings to {args.output}")
    elif args.format == "json":
        print(to_json(mappings))
    else:
        print(generator.import_summary(research))
    return 0


COMMANDS = {
    "load": load_command,
    "list": list_command,
    "query": query_command,
    "validate": validate_command,
    "coverage": coverage_command,
    "import-research": import_research_command,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT
    )
    logger.debug("Running command: %s", args.command)

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
