"""
Data structures passed between the actogram pipeline stages.

- TimeSeries: normalized, time-sorted raw samples
- RegularGrid: samples averaged onto a fixed epoch grid
- DailyMatrix: the grid reshaped to one row per calendar day
- RhythmStats: Interdaily Stability / Intradaily Variability
- DoublePlot: 48 h rows and complete-day coverage
- AnalysisConfig / AnalysisResult: run settings and the full run context

All containers are frozen. Stages build new arrays instead of mutating the
arrays of a previous stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .errors import ConfigurationError


SECONDS_PER_DAY: int = 86400
DEFAULT_LIGHT_THRESHOLD: float = 10.0
MIN_VALID_TIMESTAMPS: int = 10
MIN_WINDOW_COVERAGE: float = 0.90
COMPLETE_DAY_FRACTION: float = 0.95


def bins_per_day(epoch: int) -> int:
    """Number of epochs in one calendar day."""
    return SECONDS_PER_DAY // int(epoch)


@dataclass(frozen=True, eq=False)
class TimeSeries:
    """Raw samples after timestamp normalization, sorted by time."""
    timestamp: pd.DatetimeIndex
    activity: np.ndarray
    light: np.ndarray
    temperature: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self.timestamp)

    @property
    def has_temperature(self) -> bool:
        return self.temperature is not None


@dataclass(frozen=True, eq=False)
class RegularGrid:
    """Channels averaged onto a contiguous fixed-step time axis."""
    time: pd.DatetimeIndex
    activity: np.ndarray
    light: np.ndarray
    temperature: np.ndarray  # all NaN when the recording has no temperature
    epoch: int
    has_temperature: bool = True

    def __len__(self) -> int:
        return len(self.time)

    @property
    def day0(self) -> pd.Timestamp:
        return self.time[0]


@dataclass(frozen=True, eq=False)
class DailyMatrix:
    """Per-channel ``[day][bin]`` matrices covering complete calendar days."""
    activity: np.ndarray
    light: np.ndarray
    temperature: np.ndarray
    day_starts: pd.DatetimeIndex
    epoch: int
    has_temperature: bool = True

    @property
    def total_days(self) -> int:
        return self.activity.shape[0]

    @property
    def bins_per_day(self) -> int:
        return self.activity.shape[1]


@dataclass(frozen=True)
class RhythmStats:
    """Whole-recording rhythm statistics; NaN when undefined."""
    interdaily_stability: float
    intradaily_variability: float
    valid_hours: int = 0


@dataclass(frozen=True, eq=False)
class DoublePlot:
    """Two-day rows for double-plotted views plus complete-day coverage."""
    activity: np.ndarray
    light: np.ndarray
    temperature: np.ndarray
    hours: np.ndarray
    complete_day_mask: np.ndarray
    valid_counts: np.ndarray

    @property
    def complete_days(self) -> int:
        return int(np.count_nonzero(self.complete_day_mask))


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings for one pipeline run."""
    light_threshold: float = DEFAULT_LIGHT_THRESHOLD
    min_window_coverage: float = MIN_WINDOW_COVERAGE
    complete_day_fraction: float = COMPLETE_DAY_FRACTION
    timezone: Optional[str] = None  # display labels only
    min_valid_timestamps: int = MIN_VALID_TIMESTAMPS

    def __post_init__(self):
        if not np.isfinite(self.light_threshold):
            raise ConfigurationError(
                f"Light threshold must be a finite number, got {self.light_threshold}"
            )
        for name in ("min_window_coverage", "complete_day_fraction"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ConfigurationError(f"{name} must be in (0, 1], got {value}")
        if self.min_valid_timestamps < 2:
            raise ConfigurationError(
                f"min_valid_timestamps must be at least 2, got {self.min_valid_timestamps}"
            )


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """Everything one run produces, handed to presentation and export layers."""
    config: AnalysisConfig
    series: TimeSeries
    epoch: int
    grid: RegularGrid
    daily: DailyMatrix
    metrics: pd.DataFrame
    rhythm: RhythmStats
    double_plot: DoublePlot
    labels: pd.DataFrame

    @property
    def total_days(self) -> int:
        return self.daily.total_days

    @property
    def day_start_dates(self) -> pd.DatetimeIndex:
        return self.daily.day_starts

    @property
    def complete_day_mask(self) -> np.ndarray:
        return self.double_plot.complete_day_mask
