"""Research module for importing, validating and merging compliance findings."""

from .findings import ResearchFinding, ResearchInput, ResearchMetadata, ConfidenceLevel
from .validator import FindingValidator, ValidationResult, ValidationIssue
from .reconciler import MappingReconciler, MergeResult
from .analysis import ResearchAnalysis, analyze_research

__all__ = [
    "ConfidenceLevel",
    "FindingValidator",
    "MappingReconciler",
    "MergeResult",
    "ResearchAnalysis",
    "ResearchFinding",
    "ResearchInput",
    "ResearchMetadata",
    "ValidationIssue",
    "ValidationResult",
    "analyze_research",
]
