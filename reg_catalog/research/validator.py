"""
Validation of research findings against a loaded framework.

Structural problems (missing identifiers, unknown status or zone values) are
errors. References the framework does not know about are only warnings, since
a finding may introduce a solution or control that has not been catalogued
yet.
"""

import logging
from dataclasses import dataclass, field

from ..catalog.entities import ComplianceZone, enum_value
from ..catalog.framework import ComplianceFramework
from .findings import ResearchFinding

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    """An error or warning for one finding."""

    index: int
    field: str
    message: str
    value: str = ""

    def to_dict(self) -> dict:
        result = {'index': self.index, 'field': self.field, 'message': self.message}
        if self.value:
            result['value'] = self.value
        return result


@dataclass
class ValidationResult:
    """Outcome of validating a batch of findings."""

    total_checked: int
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def grouped_warnings(self) -> list[tuple[str, str, int]]:
        """Warnings counted by (field, message), in order of first appearance."""
        counts: dict[tuple[str, str], int] = {}
        for warning in self.warnings:
            key = (warning.field, warning.message)
            counts[key] = counts.get(key, 0) + 1
        return [(f, m, count) for (f, m), count in counts.items()]

    def to_dict(self) -> dict:
        return {
            'valid': self.valid,
            'errors': [e.to_dict() for e in self.errors],
            'warnings': [w.to_dict() for w in self.warnings],
            'totalChecked': self.total_checked,
        }


class FindingValidator:
    """
    Checks findings for completeness and consistency with a framework.

    Every finding is checked; validation never stops at the first error.
    """

    VALID_STATUSES = frozenset({
        "compliant", "partial", "conditional", "non-compliant", "banned", "unknown",
    })

    VALID_ZONES = frozenset(zone.value for zone in ComplianceZone)

    def validate(
        self,
        findings: list[ResearchFinding],
        framework: ComplianceFramework
    ) -> ValidationResult:
        """
        Validate findings against a framework.

        Args:
            findings: Findings to check
            framework: Loaded framework providing known identifiers

        Returns:
            ValidationResult with per-finding errors and warnings
        """
        solution_ids = {s.id for s in framework.solutions}
        requirement_ids = {r.id for r in framework.requirements}
        jurisdiction_ids = {j.id for j in framework.jurisdictions}

        result = ValidationResult(total_checked=len(findings))

        for index, finding in enumerate(findings):
            self._check_required(index, finding, result)

            if finding.solution_id and finding.solution_id not in solution_ids:
                result.warnings.append(ValidationIssue(
                    index, "solutionId",
                    "solution not found in framework (may need to add it)",
                    finding.solution_id,
                ))

            if finding.control_id and finding.control_id not in requirement_ids:
                result.warnings.append(ValidationIssue(
                    index, "controlId",
                    "control not found in requirements (may need to add it)",
                    finding.control_id,
                ))

            for jurisdiction_id in finding.jurisdiction_ids:
                if jurisdiction_id not in jurisdiction_ids:
                    result.warnings.append(ValidationIssue(
                        index, "jurisdictionIds",
                        "jurisdiction not found in framework",
                        jurisdiction_id,
                    ))

            self._check_values(index, finding, result)

            if not finding.evidence:
                result.warnings.append(ValidationIssue(
                    index, "evidence", "no evidence URLs provided"
                ))

        logger.debug(
            "Validated %d findings: %d errors, %d warnings",
            result.total_checked, len(result.errors), len(result.warnings)
        )
        return result

    def _check_required(
        self,
        index: int,
        finding: ResearchFinding,
        result: ValidationResult
    ) -> None:
        if not finding.control_id:
            result.errors.append(ValidationIssue(index, "controlId", "controlId is required"))
        if not finding.solution_id:
            result.errors.append(ValidationIssue(index, "solutionId", "solutionId is required"))
        if not finding.jurisdiction_ids:
            result.errors.append(ValidationIssue(
                index, "jurisdictionIds", "at least one jurisdictionId is required"
            ))

    def _check_values(
        self,
        index: int,
        finding: ResearchFinding,
        result: ValidationResult
    ) -> None:
        if finding.status not in self.VALID_STATUSES:
            result.errors.append(ValidationIssue(
                index, "status", "invalid status value", finding.status
            ))

        zone = enum_value(finding.zone)
        if zone and zone not in self.VALID_ZONES:
            result.errors.append(ValidationIssue(
                index, "zone", "invalid zone value", str(zone)
            ))


def validate_findings(
    findings: list[ResearchFinding],
    framework: ComplianceFramework
) -> ValidationResult:
    """Validate findings with the default validator."""
    return FindingValidator().validate(findings, framework)
