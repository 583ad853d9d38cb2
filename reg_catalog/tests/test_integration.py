"""
End-to-end tests over the minimal example framework.
"""

from pathlib import Path

import pytest
from reg_catalog.catalog import check_integrity
from reg_catalog.catalog.entities import ComplianceLevel, ComplianceZone
from reg_catalog.ingestion import load_framework, load_research_input, save_framework
from reg_catalog.reports import CoverageAnalyzer
from reg_catalog.research import FindingValidator, MappingReconciler

DATA_DIR = Path(__file__).parent / "data"


class TestResearchImportWorkflow:
    """Load, validate, merge, persist and re-analyse a framework."""

    @pytest.fixture
    def framework(self):
        return load_framework(DATA_DIR / "minimal")

    @pytest.fixture
    def research(self):
        return load_research_input(DATA_DIR / "research.json")

    def test_minimal_framework_is_consistent(self, framework):
        assert check_integrity(framework) == []

    def test_zone_assignment_lookup(self, framework):
        assignments = framework.get_zone_assignments_for_solution("cloud-provider-a")

        assert len(assignments) == 1
        assert assignments[0].zone == ComplianceZone.YELLOW

    def test_full_workflow(self, framework, research, tmp_path):
        validation = FindingValidator().validate(research.findings, framework)
        assert validation.valid

        result = MappingReconciler().merge(
            research.findings, framework.mappings, research.metadata.research_date
        )
        assert result.summary() == {'new': 1, 'updated': 1, 'unchanged': 1, 'total': 3}

        framework.mappings = result.combined()
        save_framework(framework, tmp_path)
        reloaded = load_framework(tmp_path)

        assert [m.id for m in reloaded.mappings] == [
            "MAP-002",
            "MAP-001",
            "MAP-NEW-EXAMPLE-REG-REQ-2-cloud-provider-a",
        ]
        new_mapping = reloaded.mappings[2]
        assert new_mapping.compliance_level == ComplianceLevel.PARTIAL
        assert new_mapping.jurisdiction_ids == ["FR"]
        assert new_mapping.eta == "Q4 2026"
        assert check_integrity(reloaded) == []

        stats = CoverageAnalyzer(["EU", "FR"]).analyze(
            reloaded.mappings, reloaded.solutions, reloaded.requirements
        )
        # The new FR mapping is for a solution not offered in FR.
        assert stats.by_jurisdiction["FR"].covered_cells == 0
        assert stats.by_jurisdiction["EU"].covered_cells == 2

    def test_merge_leaves_loaded_mappings_untouched(self, framework, research):
        before = [m.to_dict() for m in framework.mappings]

        MappingReconciler().merge(research.findings, framework.mappings, "2025-02-01")

        assert [m.to_dict() for m in framework.mappings] == before
