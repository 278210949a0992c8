"""
Actigraphy regularization and circadian rhythm metrics.

The public entry point is :func:`run_analysis`; the individual stages are
importable from their modules for use in isolation.
"""

from .errors import (
    ActogramError,
    ConfigurationError,
    DataQualityError,
    InsufficientDataError,
    ParseError,
    SamplingError,
)
from .models import (
    AnalysisConfig,
    AnalysisResult,
    DailyMatrix,
    DoublePlot,
    RegularGrid,
    RhythmStats,
    TimeSeries,
)
from .pipeline import metrics_table, run_analysis, summary_table

__all__ = [
    "ActogramError",
    "AnalysisConfig",
    "AnalysisResult",
    "ConfigurationError",
    "DailyMatrix",
    "DataQualityError",
    "DoublePlot",
    "InsufficientDataError",
    "ParseError",
    "RegularGrid",
    "RhythmStats",
    "SamplingError",
    "TimeSeries",
    "metrics_table",
    "run_analysis",
    "summary_table",
]
