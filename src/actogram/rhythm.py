"""
Interdaily Stability (IS) and Intradaily Variability (IV).

Both statistics work on hourly means: every day of the activity matrix is
collapsed into 24 hour-of-day values and the resulting ``[day][hour]`` matrix
is read day by day as a single hourly series. The last hour of one day and the
first hour of the next are therefore neighbours for IV, and a day with no data
simply removes the transitions it would have contributed.

References: Witting et al. (1990), Biol. Psychiatry 27(6):563-572.
"""

from __future__ import annotations

import logging

import numpy as np

from .models import DailyMatrix, RhythmStats


HOURS_PER_DAY: int = 24
MIN_HOURLY_VALUES: int = 48
MIN_VALID_PAIRS: int = 24


def hour_of_bin(n_bins: int, epoch: int) -> np.ndarray:
    """Hour of day, 0-23, that each bin of a day starts in."""
    minutes = np.arange(n_bins) * (epoch / 60.0)
    return np.clip(np.floor(minutes / 60.0).astype(int), 0, HOURS_PER_DAY - 1)


def hourly_means(activity: np.ndarray, epoch: int) -> np.ndarray:
    """
    Collapse a ``[day][bin]`` matrix into ``[day][hour]`` means.

    NaN bins are ignored; an hour with no valid bin is NaN.
    """

    activity = np.atleast_2d(np.asarray(activity, dtype=float))
    hours = hour_of_bin(activity.shape[1], epoch)
    valid = ~np.isnan(activity)
    filled = np.where(valid, activity, 0.0)

    result = np.full((activity.shape[0], HOURS_PER_DAY), np.nan)
    for h in range(HOURS_PER_DAY):
        cols = hours == h
        if not cols.any():
            continue
        counts = valid[:, cols].sum(axis=1)
        sums = filled[:, cols].sum(axis=1)
        has_data = counts > 0
        result[has_data, h] = sums[has_data] / counts[has_data]
    return result


def interdaily_stability(hourly: np.ndarray) -> float:
    """
    IS of an hourly ``[day][hour]`` matrix; NaN when undefined.

    ``IS = 24 * sum_h (profile_h - mean)^2 / sum_i (x_i - mean)^2`` where
    ``profile`` holds the 24 hour-of-day means and ``x`` every valid hourly
    value. The 24 is not divided by the number of days, so a profile that
    repeats exactly over ``D`` full days gives ``24 / D``; hourly noise
    without a daily pattern tends to 0.
    """

    x = np.asarray(hourly, dtype=float).ravel()
    valid = ~np.isnan(x)
    if valid.sum() < MIN_HOURLY_VALUES:
        return np.nan

    x_valid = x[valid]
    grand_mean = x_valid.mean()
    profile = _column_means(np.asarray(hourly, dtype=float))
    profile = profile[~np.isnan(profile)]

    denominator = np.sum((x_valid - grand_mean) ** 2)
    if not denominator > 0:
        return np.nan
    numerator = HOURS_PER_DAY * np.sum((profile - grand_mean) ** 2)
    return float(numerator / denominator)


def intradaily_variability(hourly: np.ndarray) -> float:
    """IV of an hourly ``[day][hour]`` matrix; NaN when undefined."""
    x = np.asarray(hourly, dtype=float).ravel()
    valid = ~np.isnan(x)
    if valid.sum() < MIN_HOURLY_VALUES:
        return np.nan

    pairs = valid[:-1] & valid[1:]
    if pairs.sum() < MIN_VALID_PAIRS:
        return np.nan

    x_valid = x[valid]
    variance = np.mean((x_valid - x_valid.mean()) ** 2)
    if not variance > 0:
        return np.nan

    mssd = np.mean(np.diff(x)[pairs] ** 2)
    return float(mssd / variance)


def compute_rhythm_stats(daily: DailyMatrix) -> RhythmStats:
    """IS and IV of the activity channel over the whole recording."""
    hourly = hourly_means(daily.activity, daily.epoch)
    valid_hours = int(np.count_nonzero(~np.isnan(hourly)))

    stats = RhythmStats(
        interdaily_stability=interdaily_stability(hourly),
        intradaily_variability=intradaily_variability(hourly),
        valid_hours=valid_hours,
    )
    if valid_hours < MIN_HOURLY_VALUES:
        logging.warning(
            f"Only {valid_hours} valid hourly means (need {MIN_HOURLY_VALUES}); IS and IV are undefined."
        )
    return stats


def _column_means(matrix: np.ndarray) -> np.ndarray:
    valid = ~np.isnan(matrix)
    counts = valid.sum(axis=0)
    sums = np.where(valid, matrix, 0.0).sum(axis=0)
    means = np.full(matrix.shape[1], np.nan)
    means[counts > 0] = sums[counts > 0] / counts[counts > 0]
    return means
