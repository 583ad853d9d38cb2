"""
The compliance framework: the loaded catalog of typed records.

Lookups are linear scans over the collections in load order. A missing
record is reported as None (single lookups) or an empty list (relationship
queries), never as an error.
"""

from dataclasses import dataclass, field
from typing import Optional

from .entities import (
    Jurisdiction,
    Regulation,
    Requirement,
    RegulatedEntity,
    Solution,
    ZoneAssignment,
    RequirementMapping,
    EnforcementAssessment,
)


@dataclass
class ComplianceFramework:
    """Top-level container for all compliance data."""

    name: str = ""
    version: str = ""
    description: str = ""
    last_updated: str = ""
    jurisdictions: list[Jurisdiction] = field(default_factory=list)
    regulations: list[Regulation] = field(default_factory=list)
    requirements: list[Requirement] = field(default_factory=list)
    regulated_entities: list[RegulatedEntity] = field(default_factory=list)
    solutions: list[Solution] = field(default_factory=list)
    zone_assignments: list[ZoneAssignment] = field(default_factory=list)
    mappings: list[RequirementMapping] = field(default_factory=list)
    enforcement_assessments: list[EnforcementAssessment] = field(default_factory=list)

    @classmethod
    def new(cls, name: str, version: str) -> "ComplianceFramework":
        """Create an empty framework."""
        return cls(name=name, version=version)

    def metadata(self) -> dict:
        """Framework metadata as stored in framework.json."""
        meta = {'name': self.name, 'version': self.version}
        if self.description:
            meta['description'] = self.description
        if self.last_updated:
            meta['lastUpdated'] = self.last_updated
        return meta

    def statistics(self) -> dict:
        """Record counts per kind."""
        return {
            'jurisdictions': len(self.jurisdictions),
            'regulations': len(self.regulations),
            'requirements': len(self.requirements),
            'regulated_entities': len(self.regulated_entities),
            'solutions': len(self.solutions),
            'zone_assignments': len(self.zone_assignments),
            'mappings': len(self.mappings),
            'enforcement_assessments': len(self.enforcement_assessments),
        }

    def get_jurisdiction(self, jurisdiction_id: str) -> Optional[Jurisdiction]:
        for jurisdiction in self.jurisdictions:
            if jurisdiction.id == jurisdiction_id:
                return jurisdiction
        return None

    def get_regulation(self, regulation_id: str) -> Optional[Regulation]:
        for regulation in self.regulations:
            if regulation.id == regulation_id:
                return regulation
        return None

    def get_requirement(self, requirement_id: str) -> Optional[Requirement]:
        for requirement in self.requirements:
            if requirement.id == requirement_id:
                return requirement
        return None

    def get_solution(self, solution_id: str) -> Optional[Solution]:
        for solution in self.solutions:
            if solution.id == solution_id:
                return solution
        return None

    def get_mappings_for_requirement(self, requirement_id: str) -> list[RequirementMapping]:
        """All mappings for a requirement, in load order."""
        return [m for m in self.mappings if m.requirement_id == requirement_id]

    def get_mappings_for_solution(self, solution_id: str) -> list[RequirementMapping]:
        """All mappings for a solution, in load order."""
        return [m for m in self.mappings if m.solution_id == solution_id]

    def get_zone_assignments_for_solution(self, solution_id: str) -> list[ZoneAssignment]:
        return [za for za in self.zone_assignments if za.solution_id == solution_id]

    def get_zone_assignments_for_jurisdiction(self, jurisdiction_id: str) -> list[ZoneAssignment]:
        return [za for za in self.zone_assignments if za.jurisdiction_id == jurisdiction_id]

    def get_requirements_by_regulation(self, regulation_id: str) -> list[Requirement]:
        return [r for r in self.requirements if r.regulation_id == regulation_id]

    def get_enforcement_assessments_for_jurisdiction(
        self,
        jurisdiction_id: str
    ) -> list[EnforcementAssessment]:
        return [
            ea for ea in self.enforcement_assessments
            if ea.jurisdiction_id == jurisdiction_id
        ]
