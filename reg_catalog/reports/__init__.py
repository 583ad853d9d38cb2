"""Reports module for coverage analysis, summaries and visualizations."""

from .coverage import CoverageAnalyzer, CoverageStats, JurisdictionCoverage, CoverageMatrix
from .summaries import ReportGenerator, LISTINGS, to_json
from .visualizations import Visualizer, HeatmapData

__all__ = [
    "CoverageAnalyzer",
    "CoverageMatrix",
    "CoverageStats",
    "HeatmapData",
    "JurisdictionCoverage",
    "LISTINGS",
    "ReportGenerator",
    "Visualizer",
    "to_json",
]
