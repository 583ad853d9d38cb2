"""Catalog module for typed compliance records and the in-memory framework."""

from .entities import (
    ComplianceLevel,
    ComplianceZone,
    EnforcementLikelihood,
    Jurisdiction,
    JurisdictionType,
    Regulation,
    RegulationStatus,
    Requirement,
    RequirementMapping,
    RequirementSeverity,
    Solution,
    SolutionType,
    ZoneAssignment,
    EnforcementAssessment,
)
from .framework import ComplianceFramework
from .integrity import IntegrityIssue, check_integrity

__all__ = [
    "ComplianceFramework",
    "ComplianceLevel",
    "ComplianceZone",
    "EnforcementAssessment",
    "EnforcementLikelihood",
    "IntegrityIssue",
    "Jurisdiction",
    "JurisdictionType",
    "Regulation",
    "RegulationStatus",
    "Requirement",
    "RequirementMapping",
    "RequirementSeverity",
    "Solution",
    "SolutionType",
    "ZoneAssignment",
    "check_integrity",
]
