"""
Referential-integrity checks over a loaded framework.

Dangling references never prevent a framework from loading; they are
collected here and reported so the caller can decide whether to block on
them.
"""

from dataclasses import dataclass

from .framework import ComplianceFramework


@dataclass
class IntegrityIssue:
    """A record that references an entity missing from the framework."""

    record_kind: str
    record_id: str
    reference_kind: str
    reference_id: str

    @property
    def message(self) -> str:
        return (
            f"{self.record_kind} {self.record_id} references unknown "
            f"{self.reference_kind}: {self.reference_id}"
        )

    def to_dict(self) -> dict:
        return {
            'recordKind': self.record_kind,
            'recordId': self.record_id,
            'referenceKind': self.reference_kind,
            'referenceId': self.reference_id,
            'message': self.message,
        }


def check_integrity(framework: ComplianceFramework) -> list[IntegrityIssue]:
    """
    Check every foreign-key-like field of the framework.

    Empty reference fields are optional and are not reported.

    Args:
        framework: Loaded framework to check

    Returns:
        Issues in record order, grouped by record kind
    """
    jurisdiction_ids = {j.id for j in framework.jurisdictions}
    regulation_ids = {r.id for r in framework.regulations}
    requirement_ids = {r.id for r in framework.requirements}
    solution_ids = {s.id for s in framework.solutions}

    issues = []

    def check(record_kind, record_id, reference_kind, reference_id, known):
        if reference_id and reference_id not in known:
            issues.append(IntegrityIssue(record_kind, record_id, reference_kind, reference_id))

    for jurisdiction in framework.jurisdictions:
        check("Jurisdiction", jurisdiction.id, "parent jurisdiction",
              jurisdiction.parent_id, jurisdiction_ids)

    for regulation in framework.regulations:
        check("Regulation", regulation.id, "jurisdiction",
              regulation.jurisdiction_id, jurisdiction_ids)

    for requirement in framework.requirements:
        check("Requirement", requirement.id, "regulation",
              requirement.regulation_id, regulation_ids)

    for mapping in framework.mappings:
        # Mappings must always name both sides of the pair.
        if mapping.solution_id not in solution_ids:
            issues.append(IntegrityIssue("Mapping", mapping.id, "solution", mapping.solution_id))
        if mapping.requirement_id not in requirement_ids:
            issues.append(
                IntegrityIssue("Mapping", mapping.id, "requirement", mapping.requirement_id)
            )

    for assignment in framework.zone_assignments:
        if assignment.solution_id not in solution_ids:
            issues.append(IntegrityIssue(
                "Zone assignment", assignment.id, "solution", assignment.solution_id
            ))
        if assignment.jurisdiction_id not in jurisdiction_ids:
            issues.append(IntegrityIssue(
                "Zone assignment", assignment.id, "jurisdiction", assignment.jurisdiction_id
            ))

    for assessment in framework.enforcement_assessments:
        check("Enforcement assessment", assessment.id, "jurisdiction",
              assessment.jurisdiction_id, jurisdiction_ids)
        check("Enforcement assessment", assessment.id, "regulation",
              assessment.regulation_id, regulation_ids)

    return issues
