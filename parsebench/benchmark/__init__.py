"""
Benchmark Package

Timing, ranking and reporting for the parser backend comparison.
"""

from .models import (
    ComparisonResult,
    Headline,
    Measurement,
    Mode,
    RowRecord,
    RunSummary,
    SampleDocument,
)
from .timing import time_once, time_iterated
from .comparator import rank
from .reporting import ReportGenerator, TableLayout, TableRenderer
from .runner import BenchmarkRunner, build_modes, run_all

__all__ = [
    "ComparisonResult",
    "Headline",
    "Measurement",
    "Mode",
    "RowRecord",
    "RunSummary",
    "SampleDocument",
    "time_once",
    "time_iterated",
    "rank",
    "ReportGenerator",
    "TableLayout",
    "TableRenderer",
    "BenchmarkRunner",
    "build_modes",
    "run_all",
]
