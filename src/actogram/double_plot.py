"""
48-hour (double-plotted) views and complete-day coverage.

Row ``d`` of a double plot shows day ``d`` followed by day ``d + 1``; the
second half of the final row has no following day and is left NaN.
"""

from __future__ import annotations

import numpy as np

from .models import COMPLETE_DAY_FRACTION, DailyMatrix, DoublePlot


def double_rows(matrix: np.ndarray) -> np.ndarray:
    """Build ``[day][2 * bins]`` rows from a ``[day][bins]`` matrix."""
    matrix = np.asarray(matrix, dtype=float)
    total_days, n_bins = matrix.shape
    doubled = np.full((total_days, 2 * n_bins), np.nan)
    doubled[:, :n_bins] = matrix
    doubled[:-1, n_bins:] = matrix[1:]
    return doubled


def valid_counts(activity: np.ndarray) -> np.ndarray:
    """Number of non-missing bins in each day."""
    return np.count_nonzero(~np.isnan(activity), axis=1)


def complete_day_mask(activity: np.ndarray, fraction: float = COMPLETE_DAY_FRACTION) -> np.ndarray:
    """
    Flag days whose activity coverage reaches ``fraction`` of the bins.

    The threshold is ``ceil(fraction * bins_per_day)`` valid bins.
    """

    activity = np.asarray(activity, dtype=float)
    # round() first so 0.95 * 1440 does not ceil up from float noise
    min_valid = int(np.ceil(round(fraction * activity.shape[1], 9)))
    return valid_counts(activity) >= min_valid


def build_double_plot(daily: DailyMatrix, complete_day_fraction: float = COMPLETE_DAY_FRACTION) -> DoublePlot:
    """
    Build the 48 h matrices for every channel and the complete-day mask.

    Callers that want a fallback when too few days are complete (for example
    treating every day as complete) apply it themselves from
    ``complete_day_mask`` and ``valid_counts``.
    """

    n_bins = daily.bins_per_day
    return DoublePlot(
        activity=double_rows(daily.activity),
        light=double_rows(daily.light),
        temperature=double_rows(daily.temperature),
        hours=np.arange(2 * n_bins) * (daily.epoch / 3600.0),
        complete_day_mask=complete_day_mask(daily.activity, complete_day_fraction),
        valid_counts=valid_counts(daily.activity),
    )
