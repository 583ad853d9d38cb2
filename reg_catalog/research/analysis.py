"""
Summary statistics over a research submission.
"""

from dataclasses import dataclass, field

from ..catalog.entities import enum_value
from .findings import ResearchInput


@dataclass
class ResearchAnalysis:
    """Breakdown of a batch of research findings."""

    total_findings: int = 0
    status_breakdown: dict[str, int] = field(default_factory=dict)
    zone_breakdown: dict[str, int] = field(default_factory=dict)
    confidence_breakdown: dict[str, int] = field(default_factory=dict)
    control_ids: list[str] = field(default_factory=list)
    solution_ids: list[str] = field(default_factory=list)
    jurisdiction_ids: list[str] = field(default_factory=list)
    findings_by_solution: dict[str, int] = field(default_factory=dict)
    findings_by_control: dict[str, int] = field(default_factory=dict)
    with_evidence: int = 0
    missing_evidence: int = 0

    @property
    def unique_controls(self) -> int:
        return len(self.control_ids)

    @property
    def unique_solutions(self) -> int:
        return len(self.solution_ids)

    def percent(self, count: int) -> float:
        """Share of all findings, 0 for an empty batch."""
        if not self.total_findings:
            return 0.0
        return count / self.total_findings * 100

    def to_dict(self) -> dict:
        return {
            'totalFindings': self.total_findings,
            'uniqueControls': self.unique_controls,
            'uniqueSolutions': self.unique_solutions,
            'statusBreakdown': self.status_breakdown,
            'zoneBreakdown': self.zone_breakdown,
            'confidenceBreakdown': self.confidence_breakdown,
            'controlIds': self.control_ids,
            'solutionIds': self.solution_ids,
            'jurisdictionIds': self.jurisdiction_ids,
            'findingsBySolution': self.findings_by_solution,
            'findingsByControl': self.findings_by_control,
            'missingEvidence': self.missing_evidence,
            'withEvidence': self.with_evidence,
        }


def _count(counts: dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


def analyze_research(research: ResearchInput) -> ResearchAnalysis:
    """
    Analyze a research submission.

    Identifier lists are sorted alphabetically and breakdowns are keyed in
    sorted order so reports are reproducible.

    Args:
        research: Loaded research submission

    Returns:
        ResearchAnalysis for the batch
    """
    status, zones, confidence = {}, {}, {}
    by_solution, by_control = {}, {}
    controls, solutions, jurisdictions = set(), set(), set()
    with_evidence = 0

    for finding in research.findings:
        _count(status, finding.status)
        if finding.zone:
            _count(zones, str(enum_value(finding.zone)))
        _count(confidence, str(enum_value(finding.confidence)) if finding.confidence else "unspecified")

        controls.add(finding.control_id)
        solutions.add(finding.solution_id)
        jurisdictions.update(finding.jurisdiction_ids)

        _count(by_solution, finding.solution_id)
        _count(by_control, finding.control_id)

        if finding.evidence:
            with_evidence += 1

    total = len(research.findings)
    return ResearchAnalysis(
        total_findings=total,
        status_breakdown=dict(sorted(status.items())),
        zone_breakdown=dict(sorted(zones.items())),
        confidence_breakdown=dict(sorted(confidence.items())),
        control_ids=sorted(controls),
        solution_ids=sorted(solutions),
        jurisdiction_ids=sorted(jurisdictions),
        findings_by_solution=dict(sorted(by_solution.items())),
        findings_by_control=dict(sorted(by_control.items())),
        with_evidence=with_evidence,
        missing_evidence=total - with_evidence,
    )
