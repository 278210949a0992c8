"""Reshape a regular grid into one row per calendar day."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .errors import InsufficientDataError
from .models import DailyMatrix, RegularGrid, bins_per_day


def bin_days(grid: RegularGrid) -> DailyMatrix:
    """
    Split the grid into ``[day][bin]`` matrices.

    Only complete days are kept: samples past ``floor(N / bins_per_day)``
    whole days are discarded. Row ``r`` is the calendar day ``day0 + r``.
    """

    n_bins = bins_per_day(grid.epoch)
    total_days = len(grid) // n_bins
    if total_days < 1:
        raise InsufficientDataError("No complete day grid could be formed from the recording.")

    n_use = total_days * n_bins

    def _reshape(values: np.ndarray) -> np.ndarray:
        return np.array(values[:n_use], dtype=float).reshape(total_days, n_bins)

    day_starts = grid.day0 + pd.to_timedelta(np.arange(total_days), unit="D")

    return DailyMatrix(
        activity=_reshape(grid.activity),
        light=_reshape(grid.light),
        temperature=_reshape(grid.temperature),
        day_starts=pd.DatetimeIndex(day_starts),
        epoch=grid.epoch,
        has_temperature=grid.has_temperature,
    )
