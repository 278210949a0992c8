"""
Low-activity call-outs.

This is a reporting policy layered on top of the core outputs: the threshold
is the mean minus one standard deviation of daily total activity over complete
days. When fewer than ``min_complete_days`` days are complete, every day is
used to set the threshold instead. Only complete days can be called out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd


MIN_COMPLETE_DAYS: int = 3


@dataclass(frozen=True, eq=False)
class LowActivityResult:
    """Threshold and per-day flags of a low-activity call-out."""
    threshold: float
    low_mask: np.ndarray
    used_all_days: bool

    @property
    def low_days(self) -> np.ndarray:
        """0-based indices of the flagged days."""
        return np.flatnonzero(self.low_mask)


def low_activity_days(
    total_activity,
    complete_mask,
    min_complete_days: int = MIN_COMPLETE_DAYS,
) -> LowActivityResult:
    """Flag complete days whose total activity falls below mean - SD."""
    totals = pd.Series(np.asarray(total_activity, dtype=float))
    complete = np.asarray(complete_mask, dtype=bool)
    if len(totals) != len(complete):
        raise ValueError(
            f"total_activity has {len(totals)} days but complete_mask has {len(complete)}"
        )

    n_complete = int(complete.sum())
    used_all_days = n_complete < min_complete_days
    if used_all_days:
        logging.warning(
            f"Only {n_complete} complete day(s); low-activity threshold uses all days."
        )
        reference = totals
    else:
        reference = totals[complete]

    # pandas mean/std skip NaN; std is the sample SD (ddof=1).
    threshold = float(reference.mean() - reference.std())
    low_mask = complete & (totals.to_numpy() < threshold)
    return LowActivityResult(threshold=threshold, low_mask=low_mask, used_all_days=used_all_days)
