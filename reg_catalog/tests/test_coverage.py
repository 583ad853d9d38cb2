"""
Tests for mapping coverage analysis and the coverage heatmap.
"""

import pytest
from reg_catalog.catalog.entities import Requirement, RequirementMapping, Solution
from reg_catalog.reports.coverage import CoverageAnalyzer, percent
from reg_catalog.reports.visualizations import HeatmapData, Visualizer


def mapping(mapping_id, requirement_id, solution_id, jurisdiction_ids=(), evidence=()):
    return RequirementMapping(
        id=mapping_id,
        requirement_id=requirement_id,
        solution_id=solution_id,
        jurisdiction_ids=list(jurisdiction_ids),
        evidence=list(evidence),
    )


class TestCoverageAnalyzer:
    """Test suite for CoverageAnalyzer."""

    @pytest.fixture
    def requirements(self):
        return [Requirement(id="R1"), Requirement(id="R2"), Requirement(id="R3")]

    @pytest.fixture
    def solutions(self):
        return [
            Solution(id="sol-a", jurisdiction_ids=["EU", "FR"]),
            Solution(id="sol-b", jurisdiction_ids=["EU"]),
            Solution(id="sol-c", jurisdiction_ids=["UK"]),
        ]

    def test_eu_coverage(self, requirements, solutions):
        """Two EU solutions and three requirements with four covered cells."""
        mappings = [
            mapping("M1", "R1", "sol-a", ["EU"], ["https://example.com/1"]),
            mapping("M2", "R2", "sol-a", ["EU"]),
            mapping("M3", "R1", "sol-b", ["EU"]),
            mapping("M4", "R3", "sol-b", ["EU"], ["https://example.com/4"]),
        ]

        stats = CoverageAnalyzer(["EU"]).analyze(mappings, solutions, requirements)
        eu = stats.by_jurisdiction["EU"]

        assert eu.solution_count == 2
        assert eu.max_cells == 6
        assert eu.covered_cells == 4
        assert eu.coverage_percent == 66.7
        assert eu.with_evidence == 2
        assert eu.evidence_percent == 50.0
        assert eu.missing_cells == 2

    def test_duplicate_mappings_count_once(self, requirements, solutions):
        mappings = [
            mapping("M1", "R1", "sol-a", ["EU"]),
            mapping("M2", "R1", "sol-a", ["EU", "FR"], ["https://example.com/2"]),
        ]

        eu = CoverageAnalyzer(["EU"]).analyze(mappings, solutions, requirements).by_jurisdiction["EU"]

        assert eu.covered_cells == 1
        assert eu.with_evidence == 1

    def test_empty_scope_covers_every_jurisdiction(self, requirements, solutions):
        mappings = [mapping("M1", "R1", "sol-a")]

        stats = CoverageAnalyzer(["EU", "FR", "UK"]).analyze(mappings, solutions, requirements)

        assert stats.by_jurisdiction["EU"].covered_cells == 1
        assert stats.by_jurisdiction["FR"].covered_cells == 1
        assert stats.by_jurisdiction["UK"].covered_cells == 0

    def test_cells_outside_grid_are_ignored(self, requirements, solutions):
        """Mappings for solutions unavailable in the jurisdiction do not count."""
        mappings = [
            mapping("M1", "R1", "sol-b", ["FR"]),
            mapping("M2", "R9", "sol-a", ["FR"]),
            mapping("M3", "R1", "sol-x", ["FR"]),
        ]

        fr = CoverageAnalyzer(["FR"]).analyze(mappings, solutions, requirements).by_jurisdiction["FR"]

        assert fr.max_cells == 3
        assert fr.covered_cells == 0
        assert fr.missing_cells == 3

    def test_jurisdiction_without_solutions(self, requirements, solutions):
        ksa = CoverageAnalyzer(["KSA"]).analyze([], solutions, requirements).by_jurisdiction["KSA"]

        assert ksa.max_cells == 0
        assert ksa.coverage_percent == 0.0
        assert ksa.evidence_percent == 0.0

    def test_default_jurisdictions(self, requirements, solutions):
        stats = CoverageAnalyzer().analyze([], solutions, requirements)
        assert list(stats.by_jurisdiction) == ["EU", "FR", "DE", "UK", "KSA"]

    def test_empty_jurisdiction_list_analyses_nothing(self, requirements, solutions):
        mappings = [mapping("M1", "R1", "sol-a")]

        stats = CoverageAnalyzer([]).analyze(mappings, solutions, requirements)

        assert stats.by_jurisdiction == {}
        assert stats.summary.total_max == 0
        assert stats.summary.coverage_percent == 0.0
        assert stats.total_mappings == 1

    def test_summary_recomputed_from_sums(self, requirements, solutions):
        mappings = [
            mapping("M1", "R1", "sol-a", ["EU"], ["https://example.com/1"]),
            mapping("M2", "R1", "sol-c", ["UK"]),
        ]

        stats = CoverageAnalyzer(["EU", "UK"]).analyze(mappings, solutions, requirements)

        assert stats.summary.total_max == 9
        assert stats.summary.total_covered == 2
        assert stats.summary.total_evidence == 1
        assert stats.summary.coverage_percent == 22.2
        assert stats.summary.evidence_percent == 50.0

    def test_totals(self, requirements, solutions):
        mappings = [
            mapping("M1", "R1", "sol-a", ["EU"], ["https://example.com/1"]),
            mapping("M2", "R2", "sol-a", ["EU"]),
            mapping("M3", "R3", "sol-a", ["EU"]),
        ]

        stats = CoverageAnalyzer().analyze(mappings, solutions, requirements)

        assert stats.total_requirements == 3
        assert stats.total_solutions == 3
        assert stats.total_mappings == 3
        assert stats.mappings_with_evidence == 1
        assert stats.evidence_percent == 33.3

    def test_to_dict(self, requirements, solutions):
        stats = CoverageAnalyzer(["EU"]).analyze([], solutions, requirements)
        data = stats.to_dict()

        assert data['byJurisdiction']['EU']['maxCells'] == 6
        assert data['summary']['coveragePercent'] == 0.0
        assert 'matrices' not in data

    def test_matrix_missing_cells(self, requirements, solutions):
        mappings = [mapping("M1", "R1", "sol-a"), mapping("M2", "R2", "sol-b")]

        matrix = CoverageAnalyzer(["EU"]).build_matrix("EU", mappings, solutions, requirements)

        assert matrix.covered.shape == (3, 2)
        assert matrix.missing() == [
            ("R1", "sol-b"),
            ("R2", "sol-a"),
            ("R3", "sol-a"),
            ("R3", "sol-b"),
        ]
        assert matrix.solution_coverage() == {"sol-a": 33.3, "sol-b": 33.3}


class TestPercent:

    @pytest.mark.parametrize("part,whole,expected", [
        (4, 6, 66.7),
        (1, 3, 33.3),
        (0, 5, 0.0),
        (3, 0, 0.0),
        (5, 5, 100.0),
    ])
    def test_percent(self, part, whole, expected):
        assert percent(part, whole) == expected


class TestCoverageHeatmap:
    """Test suite for coverage heatmap generation."""

    @pytest.fixture
    def visualizer(self):
        return Visualizer()

    def test_generate_coverage_heatmap(self, visualizer):
        requirements = [Requirement(id="R1"), Requirement(id="R2")]
        solutions = [
            Solution(id="sol-a", jurisdiction_ids=["EU", "FR"]),
            Solution(id="sol-b", jurisdiction_ids=["EU"]),
        ]
        mappings = [
            mapping("M1", "R1", "sol-a"),
            mapping("M2", "R2", "sol-a", ["EU"]),
        ]
        stats = CoverageAnalyzer(["EU", "FR"]).analyze(mappings, solutions, requirements)

        heatmap = visualizer.generate_coverage_heatmap(stats.matrices)

        assert heatmap.rows == ["EU", "FR"]
        assert heatmap.columns == ["sol-a", "sol-b"]
        assert heatmap.values == [[100.0, 0.0], [50.0, 0.0]]

    def test_ascii_heatmap(self, visualizer):
        heatmap = HeatmapData(rows=["EU"], columns=["sol-a", "sol-b"], values=[[100.0, 0.0]])

        output = visualizer.generate_ascii_heatmap(heatmap)

        assert "Mapping Coverage Heatmap" in output
        assert "█" in output
        assert "Legend: Coverage %" in output

    def test_ascii_heatmap_empty(self, visualizer):
        heatmap = HeatmapData(rows=[], columns=[], values=[])
        assert visualizer.generate_ascii_heatmap(heatmap) == "No data to display"
