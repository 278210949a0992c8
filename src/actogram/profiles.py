"""Hour-of-day profiles (mean and SD) used by light distribution outputs."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .rhythm import HOURS_PER_DAY, hour_of_bin


def hourly_profile(matrix, epoch: int) -> pd.DataFrame:
    """
    Pool every bin of each hour of day across all rows of ``matrix``.

    Parameters
    ----------
    matrix:
        ``[day][bin]`` matrix, or a single day as a 1-D row.
    epoch:
        Bin width in seconds.

    Returns
    -------
    pandas.DataFrame
        24 rows with columns ``hour``, ``mean`` and ``sd`` (sample standard
        deviation). Hours without any valid bin report 0 for both, as do
        SDs of hours holding a single value.
    """

    block = np.atleast_2d(np.asarray(matrix, dtype=float))
    hours = np.broadcast_to(hour_of_bin(block.shape[1], epoch), block.shape)

    long = pd.DataFrame({'hour': hours.ravel(), 'value': block.ravel()}).dropna()
    stats = long.groupby('hour')['value'].agg(['mean', 'std'])
    stats = stats.reindex(range(HOURS_PER_DAY)).fillna(0.0)

    return pd.DataFrame({
        'hour': np.arange(HOURS_PER_DAY),
        'mean': stats['mean'].to_numpy(),
        'sd': stats['std'].to_numpy(),
    })
