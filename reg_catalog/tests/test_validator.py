"""
Tests for research finding validation.
"""

import copy

import pytest
from reg_catalog.catalog.entities import Jurisdiction, Requirement, Solution
from reg_catalog.catalog.framework import ComplianceFramework
from reg_catalog.research.findings import ResearchFinding
from reg_catalog.research.validator import FindingValidator, validate_findings


def make_finding(**overrides) -> ResearchFinding:
    values = dict(
        control_id="NIS2-21",
        solution_id="aws-commercial",
        jurisdiction_ids=["EU"],
        status="compliant",
        zone="green",
        evidence=["https://example.com/evidence"],
    )
    values.update(overrides)
    return ResearchFinding(**values)


class TestFindingValidator:
    """Test suite for FindingValidator."""

    @pytest.fixture
    def validator(self):
        return FindingValidator()

    @pytest.fixture
    def framework(self):
        framework = ComplianceFramework.new("Test", "1.0")
        framework.jurisdictions = [Jurisdiction(id="EU"), Jurisdiction(id="DE")]
        framework.requirements = [Requirement(id="NIS2-21")]
        framework.solutions = [Solution(id="aws-commercial")]
        return framework

    def test_valid_finding(self, validator, framework):
        result = validator.validate([make_finding()], framework)

        assert result.valid
        assert result.errors == []
        assert result.warnings == []
        assert result.total_checked == 1

    def test_empty_jurisdictions_is_error(self, validator, framework):
        """Missing jurisdictions are an error even for an otherwise valid finding."""
        result = validator.validate([make_finding(jurisdiction_ids=[])], framework)

        assert not result.valid
        assert [e.field for e in result.errors] == ["jurisdictionIds"]

    def test_empty_jurisdictions_with_other_errors(self, validator, framework):
        finding = make_finding(control_id="", solution_id="", jurisdiction_ids=[], status="maybe")
        result = validator.validate([finding], framework)

        fields = [e.field for e in result.errors]
        assert fields == ["controlId", "solutionId", "jurisdictionIds", "status"]

    def test_invalid_status_and_zone(self, validator, framework):
        result = validator.validate([make_finding(status="mostly", zone="purple")], framework)

        assert {(e.field, e.value) for e in result.errors} == {
            ("status", "mostly"),
            ("zone", "purple"),
        }

    def test_unknown_status_is_accepted(self, validator, framework):
        result = validator.validate([make_finding(status="unknown")], framework)
        assert result.valid

    def test_missing_zone_is_accepted(self, validator, framework):
        result = validator.validate([make_finding(zone=None)], framework)
        assert result.valid

    def test_unknown_references_are_warnings(self, validator, framework):
        finding = make_finding(
            control_id="DORA-28",
            solution_id="s3ns",
            jurisdiction_ids=["EU", "UK", "KSA"],
        )
        result = validator.validate([finding], framework)

        assert result.valid
        assert [(w.field, w.value) for w in result.warnings] == [
            ("solutionId", "s3ns"),
            ("controlId", "DORA-28"),
            ("jurisdictionIds", "UK"),
            ("jurisdictionIds", "KSA"),
        ]

    def test_missing_ids_are_not_also_warned(self, validator, framework):
        result = validator.validate([make_finding(control_id="", solution_id="")], framework)
        assert not any(w.field in ("controlId", "solutionId") for w in result.warnings)

    def test_missing_evidence_warning(self, validator, framework):
        result = validator.validate([make_finding(evidence=[])], framework)

        assert result.valid
        assert [w.field for w in result.warnings] == ["evidence"]

    def test_every_finding_is_checked(self, validator, framework):
        findings = [
            make_finding(control_id=""),
            make_finding(),
            make_finding(solution_id=""),
        ]
        result = validator.validate(findings, framework)

        assert result.total_checked == 3
        assert [e.index for e in result.errors] == [0, 2]

    def test_grouped_warnings(self, validator, framework):
        findings = [make_finding(evidence=[]) for _ in range(3)]
        findings.append(make_finding(jurisdiction_ids=["UK"]))
        result = validator.validate(findings, framework)

        assert result.grouped_warnings() == [
            ("evidence", "no evidence URLs provided", 3),
            ("jurisdictionIds", "jurisdiction not found in framework", 1),
        ]

    def test_inputs_are_not_modified(self, validator, framework):
        finding = make_finding(jurisdiction_ids=["UK"], evidence=[])
        before = copy.deepcopy(finding)

        validator.validate([finding], framework)

        assert finding == before
        assert len(framework.jurisdictions) == 2

    def test_result_to_dict(self, framework):
        result = validate_findings([make_finding(status="")], framework)
        data = result.to_dict()

        assert data['valid'] is False
        assert data['totalChecked'] == 1
        assert data['errors'] == [{'index': 0, 'field': "status", 'message': "invalid status value"}]
