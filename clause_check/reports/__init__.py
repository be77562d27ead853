"""Reports module for summaries, exports and terminal views."""

from .summaries import ReportGenerator, ComparisonReport, excerpt
from .visualizations import Visualizer, StatusRow

__all__ = [
    "ReportGenerator",
    "ComparisonReport",
    "excerpt",
    "Visualizer",
    "StatusRow",
]
