"""
Resampling of raw samples onto a fixed epoch grid.

The grid starts at midnight of the first sample and ends with the last epoch
of the day holding the final sample. Every raw sample is assigned to the slot
whose half-open interval ``[t, t + epoch)`` contains it and each slot takes the
mean of its samples. Slots without samples stay NaN; nothing is interpolated.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from .errors import InsufficientDataError
from .models import RegularGrid, TimeSeries


def regularize(series: TimeSeries, epoch: int) -> RegularGrid:
    """
    Average a sorted time series onto a contiguous ``epoch``-second grid.

    Parameters
    ----------
    series:
        Normalized samples as produced by
        :func:`actogram.timestamps.normalize_series`.
    epoch:
        Slot width in seconds; must divide a day.

    Returns
    -------
    RegularGrid
        Channels aligned to the grid. When the series has no temperature the
        grid's temperature channel is all NaN and ``has_temperature`` is false.
    """

    if len(series) == 0:
        raise InsufficientDataError("Cannot build a grid from an empty recording.")

    step = pd.Timedelta(seconds=int(epoch))
    time_axis = grid_axis(series.timestamp[0], series.timestamp[-1], step)
    slots = _slot_indices(series.timestamp, time_axis[0], step)

    temperature = series.temperature
    if temperature is None:
        temperature = np.full(len(series), np.nan)

    frame = pd.DataFrame(
        {
            "activity": series.activity,
            "light": series.light,
            "temperature": temperature,
        }
    )
    # groupby().mean() skips NaN samples; empty slots come back as NaN on reindex.
    slot_means = frame.groupby(slots, sort=True).mean().reindex(np.arange(len(time_axis)))

    return RegularGrid(
        time=time_axis,
        activity=slot_means["activity"].to_numpy(dtype=float),
        light=slot_means["light"].to_numpy(dtype=float),
        temperature=slot_means["temperature"].to_numpy(dtype=float),
        epoch=int(epoch),
        has_temperature=series.has_temperature,
    )


def grid_axis(first: pd.Timestamp, last: pd.Timestamp, step: pd.Timedelta) -> pd.DatetimeIndex:
    """Slot starts from midnight of ``first`` to the last slot of ``last``'s day."""
    day0 = first.normalize()
    day_end = last.normalize() + pd.Timedelta(days=1) - step
    return pd.date_range(day0, day_end, freq=step)


def _slot_indices(timestamps: pd.DatetimeIndex, day0: pd.Timestamp, step: pd.Timedelta) -> np.ndarray:
    return np.asarray((timestamps - day0) // step, dtype=np.int64)
