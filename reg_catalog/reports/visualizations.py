"""
Visualization generation for mapping coverage.

Creates heatmap data structures that can be serialized for external
plotting libraries, and an ASCII rendering for terminal display.
"""

import json
from dataclasses import dataclass

import numpy as np

from .coverage import CoverageMatrix


@dataclass
class HeatmapData:
    """Data structure for heatmap visualization."""

    rows: list[str]  # jurisdictions
    columns: list[str]  # solutions
    values: list[list[float]]  # 2D matrix of values
    title: str = "Mapping Coverage Heatmap"
    value_label: str = "Coverage %"
    min_value: float = 0.0
    max_value: float = 100.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'rows': self.rows,
            'columns': self.columns,
            'values': self.values,
            'title': self.title,
            'valueLabel': self.value_label,
            'minValue': self.min_value,
            'maxValue': self.max_value
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


class Visualizer:
    """
    Generates visualization data for coverage analysis.

    Outputs structured data that can be rendered by various
    visualization libraries (matplotlib, plotly, etc.)
    """

    SYMBOLS = [' ', '░', '▒', '▓', '█']

    def generate_coverage_heatmap(self, matrices: dict[str, CoverageMatrix]) -> HeatmapData:
        """
        Generate heatmap of requirement coverage by jurisdiction and solution.

        A cell holds the share of requirements the solution covers in the
        jurisdiction. Solutions not available in a jurisdiction show 0.

        Args:
            matrices: Coverage matrices keyed by jurisdiction, in report order

        Returns:
            HeatmapData for visualization
        """
        rows = list(matrices)
        columns = sorted({sid for matrix in matrices.values() for sid in matrix.solution_ids})

        values = []
        for jurisdiction_id in rows:
            shares = matrices[jurisdiction_id].solution_coverage()
            values.append([shares.get(solution_id, 0.0) for solution_id in columns])

        return HeatmapData(rows=rows, columns=columns, values=values)

    def generate_ascii_heatmap(self, heatmap: HeatmapData) -> str:
        """
        Render a heatmap as shaded cells for terminal display.

        Each cell shows a shade block followed by its value, so the figure
        stays readable when the terminal cannot show the shades.

        Args:
            heatmap: HeatmapData to render

        Returns:
            Multi-line string
        """
        if not heatmap.rows or not heatmap.columns:
            return "No data to display"

        values = np.asarray(heatmap.values, dtype=float)
        span = heatmap.max_value - heatmap.min_value
        if span:
            shades = np.clip(((values - heatmap.min_value) / span * 5).astype(int), 0, 4)
        else:
            shades = np.full(values.shape, 2)

        label_width = max(len(r) for r in heatmap.rows)
        cell_width = max(10, max(len(c) for c in heatmap.columns) + 2)

        lines = [f"\n{heatmap.title}", "=" * len(heatmap.title)]
        lines.append(" " * (label_width + 2) + "".join(c.center(cell_width) for c in heatmap.columns))

        for i, row_name in enumerate(heatmap.rows):
            cells = []
            for j in range(len(heatmap.columns)):
                block = self.SYMBOLS[shades[i, j]] * 2
                cells.append(f"{block} {values[i, j]:5.1f}".center(cell_width))
            lines.append(row_name.ljust(label_width) + " │" + "".join(cells))

        lines.append("")
        lines.append(f"Legend: {heatmap.value_label}")
        lines.append("  " + "  ".join(
            f"'{symbol}' >= {heatmap.min_value + span * k / 5:.0f}"
            for k, symbol in enumerate(self.SYMBOLS)
        ))

        return "\n".join(lines)
