"""
Coverage analysis of requirement mappings.

For each jurisdiction of interest, the grid of cells is every requirement
crossed with every solution available in that jurisdiction. A mapping covers
a cell when its requirement and solution match the cell and its scope is
empty (applies everywhere) or includes the jurisdiction. Multiple mappings
for the same cell count once.

The overall summary is computed from summed cell counts rather than by
averaging per-jurisdiction percentages.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from ..catalog.entities import Requirement, RequirementMapping, Solution


def percent(part: int, whole: int) -> float:
    """part / whole as a percentage rounded to 1 decimal, 0 when whole is 0."""
    if whole == 0:
        return 0.0
    return round(part / whole * 100, 1)


@dataclass
class CoverageMatrix:
    """Covered and evidenced cells for one jurisdiction."""

    jurisdiction_id: str
    requirement_ids: list[str]
    solution_ids: list[str]
    covered: np.ndarray  # bool, requirements x solutions
    evidence: np.ndarray  # bool, requirements x solutions

    @property
    def covered_cells(self) -> int:
        return int(self.covered.sum())

    @property
    def evidenced_cells(self) -> int:
        return int(self.evidence.sum())

    def solution_coverage(self) -> dict[str, float]:
        """Share of requirements covered per solution, as a percentage."""
        if not self.requirement_ids:
            return {solution_id: 0.0 for solution_id in self.solution_ids}
        shares = self.covered.mean(axis=0) * 100
        return {
            solution_id: round(float(share), 1)
            for solution_id, share in zip(self.solution_ids, shares)
        }

    def missing(self) -> list[tuple[str, str]]:
        """Uncovered (requirement, solution) cells, in grid order."""
        rows, cols = np.nonzero(~self.covered)
        return [(self.requirement_ids[i], self.solution_ids[j]) for i, j in zip(rows, cols)]


@dataclass
class JurisdictionCoverage:
    """Coverage statistics for one jurisdiction."""

    jurisdiction_id: str
    solution_count: int
    max_cells: int
    covered_cells: int
    with_evidence: int

    @property
    def missing_cells(self) -> int:
        return self.max_cells - self.covered_cells

    @property
    def coverage_percent(self) -> float:
        return percent(self.covered_cells, self.max_cells)

    @property
    def evidence_percent(self) -> float:
        return percent(self.with_evidence, self.covered_cells)

    @property
    def gap_percent(self) -> float:
        return round(100 - self.coverage_percent, 1)

    def to_dict(self) -> dict:
        return {
            'jurisdictionId': self.jurisdiction_id,
            'solutionCount': self.solution_count,
            'maxCells': self.max_cells,
            'coveredCells': self.covered_cells,
            'coveragePercent': self.coverage_percent,
            'withEvidence': self.with_evidence,
            'evidencePercent': self.evidence_percent,
            'missingCells': self.missing_cells,
        }


@dataclass
class CoverageSummary:
    """Totals across all analysed jurisdictions."""

    total_max: int = 0
    total_covered: int = 0
    total_evidence: int = 0

    @property
    def coverage_percent(self) -> float:
        return percent(self.total_covered, self.total_max)

    @property
    def evidence_percent(self) -> float:
        return percent(self.total_evidence, self.total_covered)

    def to_dict(self) -> dict:
        return {
            'totalMax': self.total_max,
            'totalCovered': self.total_covered,
            'totalEvidence': self.total_evidence,
            'coveragePercent': self.coverage_percent,
            'evidencePercent': self.evidence_percent,
        }


@dataclass
class CoverageStats:
    """Coverage statistics for a set of mappings."""

    total_requirements: int
    total_solutions: int
    total_mappings: int
    mappings_with_evidence: int
    by_jurisdiction: dict[str, JurisdictionCoverage] = field(default_factory=dict)
    summary: CoverageSummary = field(default_factory=CoverageSummary)
    matrices: dict[str, CoverageMatrix] = field(default_factory=dict, repr=False, compare=False)

    @property
    def evidence_percent(self) -> float:
        return percent(self.mappings_with_evidence, self.total_mappings)

    def to_dict(self) -> dict:
        return {
            'totalRequirements': self.total_requirements,
            'totalSolutions': self.total_solutions,
            'totalMappings': self.total_mappings,
            'mappingsWithEvidence': self.mappings_with_evidence,
            'evidencePercent': self.evidence_percent,
            'byJurisdiction': {
                jurisdiction_id: jc.to_dict()
                for jurisdiction_id, jc in self.by_jurisdiction.items()
            },
            'summary': self.summary.to_dict(),
        }


class CoverageAnalyzer:
    """
    Cross-tabulates mappings against requirements and solutions per jurisdiction.

    The analysis is scoped to a curated list of jurisdictions rather than
    every jurisdiction in the catalog.
    """

    DEFAULT_JURISDICTIONS = ("EU", "FR", "DE", "UK", "KSA")

    def __init__(self, jurisdictions: Optional[Iterable[str]] = None):
        """
        Initialize analyzer.

        Args:
            jurisdictions: Jurisdiction ids to analyse, in report order. None
                selects DEFAULT_JURISDICTIONS; an empty list analyses nothing.
        """
        if jurisdictions is None:
            jurisdictions = self.DEFAULT_JURISDICTIONS
        self.jurisdictions = list(jurisdictions)

    def build_matrix(
        self,
        jurisdiction_id: str,
        mappings: list[RequirementMapping],
        solutions: list[Solution],
        requirements: list[Requirement]
    ) -> CoverageMatrix:
        """
        Build the covered/evidenced cell grid for one jurisdiction.

        Args:
            jurisdiction_id: Jurisdiction to analyse
            mappings: Mappings to cross-tabulate
            solutions: All solutions; only those available in the jurisdiction form columns
            requirements: All requirements; each forms a row

        Returns:
            CoverageMatrix for the jurisdiction
        """
        requirement_ids = list(dict.fromkeys(r.id for r in requirements))
        solution_ids = list(dict.fromkeys(
            s.id for s in solutions if jurisdiction_id in s.jurisdiction_ids
        ))
        rows = {rid: i for i, rid in enumerate(requirement_ids)}
        cols = {sid: j for j, sid in enumerate(solution_ids)}

        covered = np.zeros((len(rows), len(cols)), dtype=bool)
        evidence = np.zeros((len(rows), len(cols)), dtype=bool)

        for mapping in mappings:
            if not mapping.applies_to(jurisdiction_id):
                continue
            i = rows.get(mapping.requirement_id)
            j = cols.get(mapping.solution_id)
            if i is None or j is None:
                continue
            covered[i, j] = True
            if mapping.evidence:
                evidence[i, j] = True

        return CoverageMatrix(
            jurisdiction_id=jurisdiction_id,
            requirement_ids=requirement_ids,
            solution_ids=solution_ids,
            covered=covered,
            evidence=evidence,
        )

    def analyze(
        self,
        mappings: list[RequirementMapping],
        solutions: list[Solution],
        requirements: list[Requirement]
    ) -> CoverageStats:
        """
        Compute coverage statistics.

        Args:
            mappings: Mappings to analyse
            solutions: Catalogued solutions
            requirements: Catalogued requirements

        Returns:
            CoverageStats with per-jurisdiction and overall figures
        """
        stats = CoverageStats(
            total_requirements=len(requirements),
            total_solutions=len(solutions),
            total_mappings=len(mappings),
            mappings_with_evidence=sum(1 for m in mappings if m.evidence),
        )

        for jurisdiction_id in self.jurisdictions:
            solution_count = sum(
                1 for s in solutions if jurisdiction_id in s.jurisdiction_ids
            )
            matrix = self.build_matrix(jurisdiction_id, mappings, solutions, requirements)

            coverage = JurisdictionCoverage(
                jurisdiction_id=jurisdiction_id,
                solution_count=solution_count,
                max_cells=len(requirements) * solution_count,
                covered_cells=matrix.covered_cells,
                with_evidence=matrix.evidenced_cells,
            )

            stats.by_jurisdiction[jurisdiction_id] = coverage
            stats.matrices[jurisdiction_id] = matrix
            stats.summary.total_max += coverage.max_cells
            stats.summary.total_covered += coverage.covered_cells
            stats.summary.total_evidence += coverage.with_evidence

        return stats
