"""
Report rendering for the compliance catalog.

Turns framework listings, query results and the outputs of validation,
merge, research analysis and coverage analysis into plain-text tables
or markdown. The analysis code returns plain data structures and knows
nothing about presentation.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable

from ..catalog.entities import enum_value
from ..catalog.framework import ComplianceFramework
from ..catalog.integrity import IntegrityIssue
from ..research.analysis import ResearchAnalysis
from ..research.findings import ResearchInput
from ..research.reconciler import MergeResult
from ..research.validator import ValidationResult
from .coverage import CoverageStats


def _cell(value: Any) -> str:
    value = enum_value(value)
    return "" if value is None else str(value)


@dataclass
class Column:
    """One column of a listing table."""

    header: str
    width: int
    getter: Callable[[Any], Any]


@dataclass
class Listing:
    """How one kind of record is listed."""

    attribute: str  # ComplianceFramework collection
    columns: list[Column]
    rule_width: int = 70


LISTINGS = {
    'jurisdictions': Listing('jurisdictions', [
        Column("ID", 10, lambda j: j.id),
        Column("NAME", 30, lambda j: j.name),
        Column("TYPE", 15, lambda j: j.type),
        Column("PARENT", 0, lambda j: j.parent_id),
    ]),
    'regulations': Listing('regulations', [
        Column("ID", 20, lambda r: r.id),
        Column("SHORT NAME", 15, lambda r: r.short_name),
        Column("STATUS", 15, lambda r: r.status),
        Column("JURISDICTION", 0, lambda r: r.jurisdiction_id),
    ]),
    'requirements': Listing('requirements', [
        Column("ID", 30, lambda r: r.id),
        Column("REGULATION", 20, lambda r: r.regulation_id),
        Column("SEVERITY", 10, lambda r: r.severity),
        Column("CATEGORY", 0, lambda r: r.category),
    ], rule_width=80),
    'solutions': Listing('solutions', [
        Column("ID", 25, lambda s: s.id),
        Column("PROVIDER", 15, lambda s: s.provider),
        Column("TYPE", 15, lambda s: s.type),
        Column("NAME", 0, lambda s: s.name),
    ], rule_width=80),
    'mappings': Listing('mappings', [
        Column("REQUIREMENT", 35, lambda m: m.requirement_id),
        Column("SOLUTION", 25, lambda m: m.solution_id),
        Column("COMPLIANCE", 15, lambda m: m.compliance_level),
        Column("ZONE", 0, lambda m: m.zone),
    ], rule_width=90),
    'zones': Listing('zone_assignments', [
        Column("SOLUTION", 25, lambda z: z.solution_id),
        Column("JURISDICTION", 15, lambda z: z.jurisdiction_id),
        Column("ZONE", 10, lambda z: z.zone),
        Column("DATA CATEGORY", 0, lambda z: z.data_category),
    ]),
    'enforcement': Listing('enforcement_assessments', [
        Column("JURISDICTION", 15, lambda e: e.jurisdiction_id),
        Column("REGULATION", 20, lambda e: e.regulation_id),
        Column("LIKELIHOOD", 12, lambda e: e.likelihood),
        Column("DATE", 0, lambda e: e.assessment_date),
    ]),
}


def to_json(data: Any) -> str:
    """Serialize a record, a list of records or plain data as indented JSON."""
    if isinstance(data, list):
        data = [item.to_dict() if hasattr(item, 'to_dict') else item for item in data]
    elif hasattr(data, 'to_dict'):
        data = data.to_dict()
    return json.dumps(data, indent=2, ensure_ascii=False)


class ReportGenerator:
    """
    Renders catalog listings and analysis results.

    Text output is aligned for terminals; markdown output is meant for
    pasting into review documents.
    """

    def framework_summary(self, framework: ComplianceFramework) -> str:
        """Name, version and record counts of a loaded framework."""
        stats = framework.statistics()
        lines = [f"Compliance Framework: {framework.name} (v{framework.version})"]
        if framework.description:
            lines.append(f"Description: {framework.description}")
        lines.append("")
        lines.append("Statistics:")
        lines.append(f"  Jurisdictions:    {stats['jurisdictions']}")
        lines.append(f"  Regulations:      {stats['regulations']}")
        lines.append(f"  Requirements:     {stats['requirements']}")
        lines.append(f"  Entities:         {stats['regulated_entities']}")
        lines.append(f"  Solutions:        {stats['solutions']}")
        lines.append(f"  Zone Assignments: {stats['zone_assignments']}")
        lines.append(f"  Mappings:         {stats['mappings']}")
        lines.append(f"  Enforcement:      {stats['enforcement_assessments']}")
        return "\n".join(lines)

    def listing_table(self, records: list, kind: str) -> str:
        """
        Render records of one kind as a fixed-width table.

        Args:
            records: Records to list
            kind: Key of LISTINGS

        Returns:
            Table string
        """
        listing = LISTINGS[kind]

        def row(values: list[str]) -> str:
            parts = []
            for column, value in zip(listing.columns, values):
                parts.append(value.ljust(column.width) if column.width else value)
            return " ".join(parts).rstrip()

        lines = [row([c.header for c in listing.columns]), "-" * listing.rule_width]
        for record in records:
            lines.append(row([_cell(c.getter(record)) for c in listing.columns]))
        return "\n".join(lines)

    def listing_markdown(self, records: list, kind: str) -> str:
        """Render records of one kind as a markdown table."""
        columns = LISTINGS[kind].columns
        lines = [
            "| " + " | ".join(c.header.title() for c in columns) + " |",
            "|" + "---|" * len(columns),
        ]
        for record in records:
            lines.append("| " + " | ".join(_cell(c.getter(record)) for c in columns) + " |")
        return "\n".join(lines)

    def mapping_query_report(self, mappings: list) -> str:
        """Detail view of the mappings returned by a query."""
        lines = [f"Found {len(mappings)} mappings", ""]
        for mapping in mappings:
            lines.append(f"ID: {mapping.id}")
            lines.append(f"  Requirement: {mapping.requirement_id}")
            lines.append(f"  Solution:    {mapping.solution_id}")
            lines.append(f"  Compliance:  {_cell(mapping.compliance_level)}")
            if mapping.zone:
                lines.append(f"  Zone:        {_cell(mapping.zone)}")
            if mapping.jurisdiction_ids:
                lines.append(f"  Jurisdictions: {', '.join(mapping.jurisdiction_ids)}")
            if mapping.notes:
                lines.append(f"  Notes:       {mapping.notes}")
            lines.append("")
        return "\n".join(lines)

    def integrity_report(self, issues: list[IntegrityIssue]) -> str:
        if not issues:
            return "Validation passed!"
        lines = ["Validation errors found:"]
        lines.extend(f"  - {issue.message}" for issue in issues)
        return "\n".join(lines)

    def validation_report(self, result: ValidationResult) -> str:
        """
        Render a research validation result.

        Errors are listed individually; warnings are grouped by field and
        message with a repeat count.
        """
        lines = ["Validation PASSED" if result.valid else "Validation FAILED"]
        lines.append(f"Checked: {result.total_checked} findings")
        lines.append("")

        if result.errors:
            lines.append(f"Errors ({len(result.errors)}):")
            for error in result.errors:
                line = f"  [{error.index}] {error.field}: {error.message}"
                if error.value:
                    line += f" (value: {error.value})"
                lines.append(line)
            lines.append("")

        if result.warnings:
            lines.append(f"Warnings ({len(result.warnings)}):")
            for field_name, message, count in result.grouped_warnings():
                lines.append(f"  {field_name}: {message} (x{count})")

        return "\n".join(lines)

    def merge_summary(self, result: MergeResult) -> str:
        counts = result.summary()
        return "\n".join([
            "Merge Summary:",
            f"  New mappings:       {counts['new']}",
            f"  Updated mappings:   {counts['updated']}",
            f"  Unchanged mappings: {counts['unchanged']}",
        ])

    def import_summary(self, research: ResearchInput) -> str:
        title = "Research Import Summary"
        return "\n".join([
            title,
            "=" * len(title),
            f"Research Date: {research.metadata.research_date}",
            f"Researcher:    {research.metadata.researcher}",
            f"Findings:      {len(research.findings)}",
            "",
            "Use -format json to output mappings JSON, or -output to write to file",
        ])

    def research_analysis_report(self, analysis: ResearchAnalysis) -> str:
        """Render breakdowns of a research batch with shares of the total."""
        title = "Research Analysis Report"
        lines = [title, "=" * len(title), ""]
        lines.append(f"Total Findings: {analysis.total_findings}")
        lines.append(f"Unique Controls: {analysis.unique_controls}")
        lines.append(f"Unique Solutions: {analysis.unique_solutions}")
        lines.append(f"Jurisdictions: {', '.join(analysis.jurisdiction_ids)}")
        lines.append("")

        lines.append("Status Breakdown:")
        for status, count in analysis.status_breakdown.items():
            lines.append(f"  {status:<15} {count} ({analysis.percent(count):.1f}%)")
        lines.append("")

        lines.append("Zone Breakdown:")
        for zone, count in analysis.zone_breakdown.items():
            lines.append(f"  {zone:<10} {count} ({analysis.percent(count):.1f}%)")
        lines.append("")

        lines.append("Confidence Breakdown:")
        for confidence, count in analysis.confidence_breakdown.items():
            lines.append(f"  {confidence:<12} {count} ({analysis.percent(count):.1f}%)")
        lines.append("")

        lines.append("Evidence Coverage:")
        lines.append(f"  With Evidence:    {analysis.with_evidence} "
                     f"({analysis.percent(analysis.with_evidence):.1f}%)")
        lines.append(f"  Missing Evidence: {analysis.missing_evidence} "
                     f"({analysis.percent(analysis.missing_evidence):.1f}%)")
        lines.append("")

        lines.append("Findings by Solution:")
        for solution_id, count in analysis.findings_by_solution.items():
            lines.append(f"  {solution_id:<25} {count}")
        lines.append("")

        lines.append(f"Control IDs ({len(analysis.control_ids)}):")
        lines.extend(f"  {control_id}" for control_id in analysis.control_ids)

        return "\n".join(lines)

    def coverage_report(self, stats: CoverageStats) -> str:
        """
        Render coverage statistics as a terminal report.

        Args:
            stats: Output of CoverageAnalyzer.analyze

        Returns:
            Report string with summary, per-jurisdiction table and gap analysis
        """
        lines = ["=== Compliance Framework Coverage Report ===", ""]
        lines.append("Summary:")
        lines.append(f"  Requirements:        {stats.total_requirements}")
        lines.append(f"  Solutions:           {stats.total_solutions}")
        lines.append(f"  Total Mappings:      {stats.total_mappings}")
        lines.append(f"  With Evidence:       {stats.mappings_with_evidence} "
                     f"({stats.evidence_percent:.1f}%)")
        lines.append("")

        lines.append("Coverage by Jurisdiction:")
        lines.append("")
        lines.append(f"{'JUR':<8} {'SOLS':>8} {'MAX':>8} {'COVERED':>8} "
                     f"{'COVERAGE%':>10} {'EVIDENCE':>10} {'EVIDENCE%':>10}")
        lines.append("-" * 72)
        for jc in stats.by_jurisdiction.values():
            lines.append(
                f"{jc.jurisdiction_id:<8} {jc.solution_count:>8} {jc.max_cells:>8} "
                f"{jc.covered_cells:>8} {jc.coverage_percent:>9.1f}% "
                f"{jc.with_evidence:>10} {jc.evidence_percent:>9.1f}%"
            )
        lines.append("-" * 72)

        summary = stats.summary
        lines.append(
            f"{'TOTAL':<8} {'-':>8} {summary.total_max:>8} {summary.total_covered:>8} "
            f"{summary.coverage_percent:>9.1f}% {summary.total_evidence:>10} "
            f"{summary.evidence_percent:>9.1f}%"
        )
        lines.append("")

        lines.append("Gap Analysis:")
        for jc in stats.by_jurisdiction.values():
            lines.append(f"  {jc.jurisdiction_id}: {jc.missing_cells} cells missing "
                         f"({jc.gap_percent:.1f}% gap)")

        return "\n".join(lines)

    def coverage_markdown(self, stats: CoverageStats) -> str:
        """Render coverage statistics as a markdown document."""
        lines = ["# Compliance Framework Coverage Report", ""]

        lines.append("## Summary")
        lines.append(f"- **Requirements:** {stats.total_requirements}")
        lines.append(f"- **Solutions:** {stats.total_solutions}")
        lines.append(f"- **Total Mappings:** {stats.total_mappings}")
        lines.append(f"- **With Evidence:** {stats.mappings_with_evidence} "
                     f"({stats.evidence_percent:.1f}%)")
        lines.append("")

        lines.append("## Coverage by Jurisdiction")
        lines.append("| Jurisdiction | Solutions | Max | Covered | Coverage % | Evidence | Evidence % |")
        lines.append("|---|---:|---:|---:|---:|---:|---:|")
        for jc in stats.by_jurisdiction.values():
            lines.append(
                f"| {jc.jurisdiction_id} | {jc.solution_count} | {jc.max_cells} | "
                f"{jc.covered_cells} | {jc.coverage_percent:.1f} | {jc.with_evidence} | "
                f"{jc.evidence_percent:.1f} |"
            )
        summary = stats.summary
        lines.append(
            f"| **Total** | - | {summary.total_max} | {summary.total_covered} | "
            f"{summary.coverage_percent:.1f} | {summary.total_evidence} | "
            f"{summary.evidence_percent:.1f} |"
        )
        lines.append("")

        lines.append("## Gap Analysis")
        for jurisdiction_id, jc in stats.by_jurisdiction.items():
            lines.append(f"### {jurisdiction_id}")
            lines.append(f"- {jc.missing_cells} cells missing ({jc.gap_percent:.1f}% gap)")
            matrix = stats.matrices.get(jurisdiction_id)
            if matrix is not None:
                for requirement_id, solution_id in matrix.missing():
                    lines.append(f"  - `{requirement_id}` × `{solution_id}`")
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"
