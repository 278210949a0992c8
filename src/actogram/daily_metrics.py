"""
Per-day summary metrics computed from the daily matrices.

L5 and M10 are the least active 5 hours and the most active 10 hours of each
day, found with a NaN-aware sliding mean. Windows whose valid-bin coverage
falls below ``min_coverage`` do not take part in the search.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
import pandas as pd
from scipy import signal

from .models import MIN_WINDOW_COVERAGE, DailyMatrix


L5_HOURS: float = 5.0
M10_HOURS: float = 10.0

METRIC_COLUMNS: Tuple[str, ...] = (
    "date",
    "total_activity",
    "hours_in_light",
    "min_temperature",
    "max_temperature",
    "l5_start",
    "l5_mean",
    "m10_start",
    "m10_mean",
)


def compute_daily_metrics(
    daily: DailyMatrix,
    light_threshold: float,
    min_coverage: float = MIN_WINDOW_COVERAGE,
) -> pd.DataFrame:
    """
    Compute one metrics row per day.

    Parameters
    ----------
    daily:
        Output of :func:`actogram.binning.bin_days`.
    light_threshold:
        Lux level a bin must exceed to count towards ``hours_in_light``.
    min_coverage:
        Minimum fraction of valid bins a sliding window needs to be eligible
        for the L5/M10 search.

    Returns
    -------
    pandas.DataFrame
        Columns listed in :data:`METRIC_COLUMNS`, rows in calendar order.
        ``total_activity`` of a day without any data is 0; every other metric
        of such a day is NaN (or NaT for the start times).
    """

    epoch = daily.epoch
    activity = daily.activity

    total_activity = np.nansum(activity, axis=1)

    lit = (daily.light > light_threshold) & ~np.isnan(daily.light)
    hours_in_light = lit.sum(axis=1) * (epoch / 3600.0)

    if daily.has_temperature:
        min_temp, max_temp = _row_extrema(daily.temperature)
    else:
        min_temp = np.full(daily.total_days, np.nan)
        max_temp = np.full(daily.total_days, np.nan)

    l5_bins = window_bins(L5_HOURS, epoch)
    m10_bins = window_bins(M10_HOURS, epoch)
    step = pd.Timedelta(seconds=epoch)

    l5_start, l5_mean, m10_start, m10_mean = [], [], [], []
    for day_start, row in zip(daily.day_starts, activity):
        start, mean = _window_extremum(
            sliding_mean_nan(row, l5_bins, min_coverage), day_start, step, np.nanargmin
        )
        l5_start.append(start)
        l5_mean.append(mean)

        start, mean = _window_extremum(
            sliding_mean_nan(row, m10_bins, min_coverage), day_start, step, np.nanargmax
        )
        m10_start.append(start)
        m10_mean.append(mean)

    return pd.DataFrame(
        {
            "date": daily.day_starts,
            "total_activity": total_activity,
            "hours_in_light": hours_in_light,
            "min_temperature": min_temp,
            "max_temperature": max_temp,
            "l5_start": pd.DatetimeIndex(l5_start),
            "l5_mean": np.asarray(l5_mean, dtype=float),
            "m10_start": pd.DatetimeIndex(m10_start),
            "m10_mean": np.asarray(m10_mean, dtype=float),
        },
        columns=list(METRIC_COLUMNS),
    )


def window_bins(hours: float, epoch: int) -> int:
    """Length in bins of an ``hours``-long window, at least one bin."""
    return max(1, int(np.floor(hours * 3600.0 / epoch + 0.5)))


def sliding_mean_nan(x, window: int, min_coverage: float = MIN_WINDOW_COVERAGE) -> np.ndarray:
    """
    Mean of each full-length window, ignoring NaN bins.

    Returns ``len(x) - window + 1`` values. A window whose count of valid bins
    is below ``min_coverage * window`` is NaN. When ``window`` exceeds the
    length of ``x`` a single NaN is returned.
    """

    x = np.asarray(x, dtype=float).ravel()
    if window > x.size:
        return np.full(1, np.nan)

    valid = ~np.isnan(x)
    filled = np.where(valid, x, 0.0)
    kernel = np.ones(window)

    # Direct summation keeps equal windows exactly equal for the tie-break.
    sums = signal.convolve(filled, kernel, mode="valid", method="direct")
    counts = signal.convolve(valid.astype(float), kernel, mode="valid", method="direct")

    means = np.full(sums.shape, np.nan)
    eligible = counts >= min_coverage * window
    means[eligible] = sums[eligible] / counts[eligible]
    return means


def _window_extremum(means: np.ndarray, day_start: pd.Timestamp, step: pd.Timedelta, pick):
    if np.all(np.isnan(means)):
        return pd.NaT, np.nan
    # nanargmin/nanargmax return the first occurrence on ties.
    idx = int(pick(means))
    return day_start + idx * step, float(means[idx])


def _row_extrema(values: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    valid = ~np.isnan(values)
    has_any = valid.any(axis=1)
    row_min = np.where(valid, values, np.inf).min(axis=1)
    row_max = np.where(valid, values, -np.inf).max(axis=1)
    return np.where(has_any, row_min, np.nan), np.where(has_any, row_max, np.nan)
