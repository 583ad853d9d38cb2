"""
Document loaders for the JSON files a compliance framework is stored in.

A framework lives in a directory with one file per record kind plus a
framework.json metadata file. Research submissions are single documents
holding metadata and a list of findings.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Union

from ..catalog.entities import (
    Jurisdiction,
    Regulation,
    Requirement,
    RegulatedEntity,
    Solution,
    ZoneAssignment,
    RequirementMapping,
    EnforcementAssessment,
)
from ..catalog.framework import ComplianceFramework
from ..research.findings import ResearchInput

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# File name -> (framework attribute, record type)
FRAMEWORK_FILES = {
    "jurisdictions.json": ("jurisdictions", Jurisdiction),
    "regulations.json": ("regulations", Regulation),
    "requirements.json": ("requirements", Requirement),
    "entities.json": ("regulated_entities", RegulatedEntity),
    "solutions.json": ("solutions", Solution),
    "zone-assignments.json": ("zone_assignments", ZoneAssignment),
    "mappings.json": ("mappings", RequirementMapping),
    "enforcement.json": ("enforcement_assessments", EnforcementAssessment),
}

METADATA_FILE = "framework.json"


class LoadError(ValueError):
    """A document could not be read or does not have the expected shape."""

    def __init__(self, path: PathLike, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to load {self.path}: {reason}")


def read_json(path: PathLike) -> Any:
    """
    Read and parse a JSON document.

    Args:
        path: Path to the JSON file

    Returns:
        The parsed document

    Raises:
        FileNotFoundError: If the file does not exist
        LoadError: If the file cannot be read or is not valid JSON
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"JSON file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise LoadError(path, f"invalid JSON ({e})") from e
    except OSError as e:
        raise LoadError(path, str(e)) from e


def write_json(path: PathLike, data: Any, indent: bool = True) -> None:
    """Serialize data to a JSON file, terminated by a newline."""
    text = json.dumps(data, indent=2 if indent else None, ensure_ascii=False)
    Path(path).write_text(text + "\n", encoding='utf-8')


class FrameworkLoader:
    """Loads and saves a framework as a directory of JSON files."""

    def load(self, directory: PathLike) -> ComplianceFramework:
        """
        Load a framework from a directory.

        A missing collection file means zero records of that kind. A
        malformed collection file is fatal. framework.json metadata is
        best-effort: when it cannot be parsed it is skipped with a warning.

        Args:
            directory: Directory containing the JSON files

        Returns:
            ComplianceFramework holding every record in file order

        Raises:
            FileNotFoundError: If the directory does not exist
            LoadError: If a collection file is malformed
        """
        path = Path(directory)
        if not path.is_dir():
            raise FileNotFoundError(f"Framework directory not found: {directory}")

        framework = ComplianceFramework()

        for filename, (attribute, record_type) in FRAMEWORK_FILES.items():
            file_path = path / filename
            if not file_path.exists():
                logger.debug("Skipping missing %s", file_path)
                continue
            records = self._load_records(file_path, record_type)
            setattr(framework, attribute, records)
            logger.debug("Loaded %d records from %s", len(records), file_path)

        meta_path = path / METADATA_FILE
        if meta_path.exists():
            try:
                meta = read_json(meta_path)
            except LoadError as e:
                logger.warning("Ignoring framework metadata: %s", e)
            else:
                if isinstance(meta, dict):
                    framework.name = meta.get("name", "")
                    framework.version = meta.get("version", "")
                    framework.description = meta.get("description", "")
                    framework.last_updated = meta.get("lastUpdated", "")
                else:
                    logger.warning("Ignoring framework metadata in %s: not an object", meta_path)

        return framework

    def save(self, framework: ComplianceFramework, directory: PathLike) -> None:
        """
        Save a framework to a directory, creating it if needed.

        Every collection file is written, including empty ones.
        """
        path = Path(directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LoadError(path, f"cannot create directory ({e})") from e

        for filename, (attribute, _) in FRAMEWORK_FILES.items():
            records = getattr(framework, attribute)
            write_json(path / filename, [r.to_dict() for r in records])

        write_json(path / METADATA_FILE, framework.metadata())
        logger.debug("Saved framework to %s", path)

    def _load_records(self, file_path: Path, record_type: type) -> list:
        """Parse a collection file into typed records."""
        data = read_json(file_path)
        if not isinstance(data, list):
            raise LoadError(file_path, "expected a JSON array of records")

        records = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise LoadError(file_path, f"record {index} is not an object")
            try:
                records.append(record_type.from_dict(item))
            except ValueError as e:
                raise LoadError(file_path, f"record {index}: {e}") from e
        return records


def load_framework(directory: PathLike) -> ComplianceFramework:
    """Load a framework from a directory of JSON files."""
    return FrameworkLoader().load(directory)


def save_framework(framework: ComplianceFramework, directory: PathLike) -> None:
    """Save a framework to a directory of JSON files."""
    FrameworkLoader().save(framework, directory)


def load_research_input(path: PathLike) -> ResearchInput:
    """
    Load a research submission.

    Args:
        path: Path to the research JSON document

    Returns:
        ResearchInput with metadata and findings

    Raises:
        FileNotFoundError: If the file does not exist
        LoadError: If the document is malformed
    """
    data = read_json(path)
    if not isinstance(data, dict):
        raise LoadError(path, "expected a JSON object with metadata and findings")

    try:
        research = ResearchInput.from_dict(data)
    except ValueError as e:
        raise LoadError(path, str(e)) from e
    logger.debug("Loaded %d findings from %s", len(research.findings), path)
    return research
