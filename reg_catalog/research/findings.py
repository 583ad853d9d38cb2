"""
Research findings and their conversion to canonical mappings.

A finding is a researcher-submitted candidate mapping. Its status is a
free-form string: the known statuses are mapped to a ComplianceLevel and
anything else is carried through verbatim so no information is lost before
validation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ..catalog.entities import (
    ComplianceLevel,
    ComplianceZone,
    Level,
    RequirementMapping,
    Zone,
    enum_value,
    get_enum,
    get_record,
    get_records,
    get_string,
    get_strings,
)


class ConfidenceLevel(Enum):
    """Researcher confidence in a finding."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Finding status -> canonical compliance level
STATUS_LEVELS = {
    "compliant": ComplianceLevel.COMPLIANT,
    "partial": ComplianceLevel.PARTIAL,
    "conditional": ComplianceLevel.CONDITIONAL,
    "non-compliant": ComplianceLevel.NON_COMPLIANT,
    "banned": ComplianceLevel.BANNED,
}

RESEARCH_ID_FORMAT = "MAP-RESEARCH-{:04d}"


def canonical_compliance_level(status: str) -> Level:
    """Map a finding status to a ComplianceLevel, passing unknown statuses through."""
    return STATUS_LEVELS.get(status, status)


@dataclass
class ResearchMetadata:
    """Metadata about a research submission."""

    research_date: str = ""
    researcher: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ResearchMetadata":
        return cls(
            research_date=get_string(data, "researchDate"),
            researcher=get_string(data, "researcher"),
            version=get_string(data, "version"),
        )

    def to_dict(self) -> dict:
        result = {'researchDate': self.research_date}
        if self.researcher:
            result['researcher'] = self.researcher
        if self.version:
            result['version'] = self.version
        return result


@dataclass
class ResearchFinding:
    """A single compliance finding from research."""

    control_id: str = ""
    solution_id: str = ""
    jurisdiction_ids: list[str] = field(default_factory=list)
    status: str = ""
    zone: Optional[Zone] = None
    notes: str = ""
    evidence: list[str] = field(default_factory=list)
    eta: str = ""
    confidence: Optional[Union[ConfidenceLevel, str]] = None
    regulation_id: str = ""
    control_name: str = ""

    @property
    def compliance_level(self) -> Level:
        return canonical_compliance_level(self.status)

    def to_mapping(self, sequence_index: int, assessment_date: str) -> RequirementMapping:
        """
        Convert this finding to a canonical mapping.

        Args:
            sequence_index: 1-based position of the finding in its batch
            assessment_date: Research date of the batch

        Returns:
            RequirementMapping with a sequence-based identifier
        """
        return RequirementMapping(
            id=RESEARCH_ID_FORMAT.format(sequence_index),
            requirement_id=self.control_id,
            solution_id=self.solution_id,
            jurisdiction_ids=list(self.jurisdiction_ids),
            compliance_level=self.compliance_level,
            zone=self.zone,
            notes=self.notes,
            evidence=list(self.evidence),
            eta=self.eta,
            assessment_date=assessment_date,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "ResearchFinding":
        return cls(
            control_id=get_string(data, "controlId"),
            solution_id=get_string(data, "solutionId"),
            jurisdiction_ids=get_strings(data, "jurisdictionIds"),
            status=get_string(data, "status"),
            zone=get_enum(data, "zone", ComplianceZone),
            notes=get_string(data, "notes"),
            evidence=get_strings(data, "evidence"),
            eta=get_string(data, "eta"),
            confidence=get_enum(data, "confidence", ConfidenceLevel),
            regulation_id=get_string(data, "regulationId"),
            control_name=get_string(data, "controlName"),
        )

    def to_dict(self) -> dict:
        result = {
            'controlId': self.control_id,
            'solutionId': self.solution_id,
            'jurisdictionIds': self.jurisdiction_ids,
            'status': self.status,
            'notes': self.notes,
        }
        optional = {
            'regulationId': self.regulation_id,
            'controlName': self.control_name,
            'zone': enum_value(self.zone),
            'evidence': self.evidence,
            'eta': self.eta,
            'confidence': enum_value(self.confidence),
        }
        result.update({k: v for k, v in optional.items() if v})
        return result


@dataclass
class ResearchInput:
    """A research submission: metadata plus findings."""

    metadata: ResearchMetadata = field(default_factory=ResearchMetadata)
    findings: list[ResearchFinding] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ResearchInput":
        return cls(
            metadata=get_record(data, "metadata", ResearchMetadata) or ResearchMetadata(),
            findings=get_records(data, "findings", ResearchFinding),
        )

    def to_dict(self) -> dict:
        return {
            'metadata': self.metadata.to_dict(),
            'findings': [f.to_dict() for f in self.findings],
        }

    def to_mappings(self) -> list[RequirementMapping]:
        """Convert every finding, numbering identifiers from 1 in list order."""
        return [
            finding.to_mapping(index, self.metadata.research_date)
            for index, finding in enumerate(self.findings, 1)
        ]
