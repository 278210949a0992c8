"""
Sampling epoch inference.

The epoch is the median spacing of the raw timestamps, snapped to a candidate
that divides a day evenly so every day holds a whole number of bins.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import pandas as pd

from .errors import SamplingError
from .models import SECONDS_PER_DAY


EPOCH_CANDIDATES: Tuple[int, ...] = (60, 90, 120, 180, 300, 360, 600, 720, 900, 1200, 1800, 3600)
MIN_EPOCH_SECONDS: int = 60
FALLBACK_EPOCH_SECONDS: int = 60


def infer_epoch(timestamps) -> int:
    """
    Infer the sampling epoch, in seconds, from sorted timestamps.

    Non-positive and non-finite spacings (duplicates, residual disorder) are
    ignored. The median of the remaining spacings is rounded to whole seconds,
    floored at one minute and snapped with :func:`snap_epoch`.

    Raises
    ------
    SamplingError
        If no positive spacing remains.
    """

    deltas = _positive_deltas(timestamps)
    if deltas.size == 0:
        raise SamplingError("Could not infer sampling interval from timestamps.")

    raw_seconds = _round_half_up(float(np.median(deltas)))
    epoch = snap_epoch(max(MIN_EPOCH_SECONDS, raw_seconds))
    logging.info(f"Median sample spacing {raw_seconds}s; using epoch {epoch}s.")
    return epoch


def snap_epoch(seconds: float) -> int:
    """Return the candidate epoch nearest ``seconds``; ties go to the smaller."""
    candidates = np.asarray(EPOCH_CANDIDATES)
    # argmin returns the first minimum, i.e. the smaller candidate on ties.
    epoch = int(candidates[np.argmin(np.abs(candidates - seconds))])
    if SECONDS_PER_DAY % epoch != 0:
        return FALLBACK_EPOCH_SECONDS
    return epoch


def _positive_deltas(timestamps) -> np.ndarray:
    ts = pd.DatetimeIndex(timestamps)
    if len(ts) < 2:
        return np.empty(0)
    deltas = (ts[1:] - ts[:-1]).total_seconds().to_numpy(dtype=float)
    return deltas[np.isfinite(deltas) & (deltas > 0)]


def _round_half_up(value: float) -> int:
    return int(np.floor(value + 0.5))
