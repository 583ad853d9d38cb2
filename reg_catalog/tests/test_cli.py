"""
Tests for the command-line interface.
"""

import json
from pathlib import Path

import pytest
from reg_catalog.cli import main

DATA_DIR = Path(__file__).parent / "data"
MINIMAL_DIR = str(DATA_DIR / "minimal")
RESEARCH_FILE = str(DATA_DIR / "research.json")


class TestLoadAndList:
    """Tests for the load and list commands."""

    def test_load(self, capsys):
        assert main(["load", MINIMAL_DIR]) == 0

        out = capsys.readouterr().out
        assert "Compliance Framework: Minimal Example Framework (v1.0.0)" in out
        assert "Mappings:         2" in out

    def test_load_requires_directory(self, capsys):
        assert main(["load"]) == 1
        assert "directory path required" in capsys.readouterr().err

    def test_load_missing_directory(self, tmp_path, capsys):
        assert main(["load", str(tmp_path / "missing")]) == 1
        assert "Error loading framework" in capsys.readouterr().err

    def test_list_table(self, capsys):
        assert main(["list", "-dir", MINIMAL_DIR, "-type", "solutions"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("ID")
        assert any(line.startswith("cloud-provider-a ") for line in lines)

    def test_list_json(self, capsys):
        assert main(["list", "--dir", MINIMAL_DIR, "--type", "zones", "--format", "json"]) == 0

        records = json.loads(capsys.readouterr().out)
        assert [r['zone'] for r in records] == ["yellow", "green"]

    def test_list_markdown(self, capsys):
        assert main(["list", "-dir", MINIMAL_DIR, "-type", "regulations", "-format", "markdown"]) == 0
        assert "| EXAMPLE-REG | EXREG | enforceable | EU |" in capsys.readouterr().out

    def test_list_requires_type(self, capsys):
        assert main(["list", "-dir", MINIMAL_DIR]) == 1
        assert "-type is required" in capsys.readouterr().err

    def test_list_unknown_type(self, capsys):
        assert main(["list", "-dir", MINIMAL_DIR, "-type", "widgets"]) == 1
        assert "Unknown type: widgets" in capsys.readouterr().err


class TestQuery:
    """Tests for the query command."""

    def test_query_solution(self, capsys):
        assert main(["query", "-dir", MINIMAL_DIR, "-solution", "cloud-provider-a"]) == 0

        out = capsys.readouterr().out
        assert "Found 1 mappings" in out
        assert "ID: MAP-002" in out

    def test_query_requirement_filtered_by_jurisdiction(self, capsys):
        args = ["query", "-dir", MINIMAL_DIR, "-requirement", "EXAMPLE-REG-REQ-1",
                "-jurisdiction", "FR", "-format", "json"]
        assert main(args) == 0

        mappings = json.loads(capsys.readouterr().out)
        assert [m['id'] for m in mappings] == ["MAP-002"]

    def test_query_requires_target(self, capsys):
        assert main(["query", "-dir", MINIMAL_DIR]) == 1
        assert "-solution or -requirement is required" in capsys.readouterr().err


class TestValidate:
    """Tests for the validate command."""

    def test_validate_passes(self, capsys):
        assert main(["validate", MINIMAL_DIR]) == 0
        assert "Validation passed!" in capsys.readouterr().out

    def test_validate_reports_dangling_references(self, tmp_path, capsys):
        (tmp_path / "mappings.json").write_text(json.dumps([
            {"id": "M1", "requirementId": "R1", "solutionId": "S1", "complianceLevel": "partial"},
        ]), encoding='utf-8')

        assert main(["validate", str(tmp_path)]) == 1

        out = capsys.readouterr().out
        assert "Validation errors found:" in out
        assert "Mapping M1 references unknown solution: S1" in out

    def test_validate_malformed_file(self, tmp_path, capsys):
        (tmp_path / "solutions.json").write_text("{", encoding='utf-8')
        assert main(["validate", str(tmp_path)]) == 1
        assert "Validation failed" in capsys.readouterr().err


class TestCoverage:
    """Tests for the coverage command."""

    def test_coverage_table(self, capsys):
        assert main(["coverage", "-dir", MINIMAL_DIR]) == 0

        out = capsys.readouterr().out
        assert "=== Compliance Framework Coverage Report ===" in out
        assert "Gap Analysis:" in out
        assert "EU: 2 cells missing (50.0% gap)" in out

    def test_coverage_json(self, capsys):
        assert main(["coverage", "-dir", MINIMAL_DIR, "-format", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data['byJurisdiction']['EU']['coveragePercent'] == 50.0
        assert data['byJurisdiction']['FR']['coveredCells'] == 0
        assert data['summary']['totalMax'] == 6
        assert data['summary']['coveragePercent'] == 33.3

    def test_coverage_selected_jurisdictions(self, capsys):
        args = ["coverage", "-dir", MINIMAL_DIR, "-format", "json", "-jurisdictions", "EU", "DE"]
        assert main(args) == 0

        data = json.loads(capsys.readouterr().out)
        assert list(data['byJurisdiction']) == ["EU", "DE"]

    def test_coverage_markdown_with_heatmap(self, capsys):
        assert main(["coverage", "-dir", MINIMAL_DIR, "-format", "markdown", "-heatmap"]) == 0

        out = capsys.readouterr().out
        assert "# Compliance Framework Coverage Report" in out
        assert "`EXAMPLE-REG-REQ-2` × `cloud-provider-a`" in out
        assert "Mapping Coverage Heatmap" in out


class TestImportResearch:
    """Tests for the import-research command."""

    def test_requires_input(self, capsys):
        assert main(["import-research"]) == 1
        assert "-input is required" in capsys.readouterr().err

    def test_missing_input_file(self, tmp_path, capsys):
        assert main(["import-research", "-input", str(tmp_path / "none.json")]) == 1
        assert "Error loading research file" in capsys.readouterr().err

    @pytest.mark.parametrize("document", [
        {"metadata": ["x"], "findings": []},
        {"metadata": {"researchDate": "2025-02-01"}, "findings": {}},
        {"findings": [{"controlId": "R", "solutionId": "S", "jurisdictionIds": "EU"}]},
    ])
    def test_malformed_research_file(self, tmp_path, capsys, document):
        research = tmp_path / "research.json"
        research.write_text(json.dumps(document), encoding='utf-8')

        assert main(["import-research", "-input", str(research)]) == 1
        assert "Error loading research file" in capsys.readouterr().err

    def test_summary(self, capsys):
        assert main(["import-research", "-input", RESEARCH_FILE]) == 0

        out = capsys.readouterr().out
        assert "Research Date: 2025-02-01" in out
        assert "Findings:      2" in out

    def test_convert_to_json(self, capsys):
        assert main(["import-research", "-input", RESEARCH_FILE, "-format", "json"]) == 0

        mappings = json.loads(capsys.readouterr().out)
        assert [m['id'] for m in mappings] == ["MAP-RESEARCH-0001", "MAP-RESEARCH-0002"]
        assert mappings[1]['complianceLevel'] == "partial"
        assert mappings[1]['assessmentDate'] == "2025-02-01"

    def test_convert_to_file(self, tmp_path, capsys):
        output = tmp_path / "mappings-new.json"
        assert main(["import-research", "-input", RESEARCH_FILE, "-output", str(output)]) == 0

        assert len(json.loads(output.read_text(encoding='utf-8'))) == 2
        assert "Wrote 2 mappings" in capsys.readouterr().out

    def test_analyze(self, capsys):
        assert main(["import-research", "-input", RESEARCH_FILE, "-analyze"]) == 0

        out = capsys.readouterr().out
        assert "Research Analysis Report" in out
        assert "Unique Controls: 2" in out

    def test_validate_requires_dir(self, capsys):
        assert main(["import-research", "-input", RESEARCH_FILE, "-validate"]) == 1
        assert "-dir is required for validation" in capsys.readouterr().err

    def test_validate(self, capsys):
        args = ["import-research", "-input", RESEARCH_FILE, "-dir", MINIMAL_DIR, "-validate"]
        assert main(args) == 0

        out = capsys.readouterr().out
        assert "Validation PASSED" in out
        assert "evidence: no evidence URLs provided (x1)" in out

    def test_validate_failure_exit_code(self, tmp_path, capsys):
        research = tmp_path / "research.json"
        research.write_text(json.dumps({
            "metadata": {"researchDate": "2025-02-01"},
            "findings": [{"controlId": "EXAMPLE-REG-REQ-1", "solutionId": "cloud-provider-a",
                          "jurisdictionIds": [], "status": "compliant"}],
        }), encoding='utf-8')

        args = ["import-research", "-input", str(research), "-dir", MINIMAL_DIR,
                "-validate", "-format", "json"]
        assert main(args) == 1

        result = json.loads(capsys.readouterr().out)
        assert result['valid'] is False
        assert result['errors'][0]['field'] == "jurisdictionIds"

    def test_merge_requires_dir(self, capsys):
        assert main(["import-research", "-input", RESEARCH_FILE, "-merge"]) == 1
        assert "-dir is required for merge" in capsys.readouterr().err

    def test_merge_to_file(self, tmp_path, capsys):
        output = tmp_path / "merged.json"
        args = ["import-research", "-input", RESEARCH_FILE, "-dir", MINIMAL_DIR,
                "-merge", "-output", str(output)]
        assert main(args) == 0

        merged = json.loads(output.read_text(encoding='utf-8'))
        assert [m['id'] for m in merged] == [
            "MAP-002",
            "MAP-001",
            "MAP-NEW-EXAMPLE-REG-REQ-2-cloud-provider-a",
        ]
        assert merged[1]['evidence'] == ["https://example.com/sovereign/terms"]
        assert merged[1]['assessmentDate'] == "2025-02-01"

        err = capsys.readouterr().err
        assert "New mappings:       1" in err
        assert "Updated mappings:   1" in err
        assert "Unchanged mappings: 1" in err


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_invalid_format_is_rejected():
    with pytest.raises(SystemExit):
        main(["list", "-type", "solutions", "-format", "xml"])
