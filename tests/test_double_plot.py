import sys
from pathlib import Path

import numpy as np
import pandas as pd


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from actogram.double_plot import build_double_plot, complete_day_mask, double_rows  # noqa: E402
from actogram.models import DailyMatrix  # noqa: E402


def _daily(activity, epoch: int = 60) -> DailyMatrix:
    activity = np.asarray(activity, dtype=float)
    days, bins = activity.shape
    return DailyMatrix(
        activity=activity,
        light=activity * 10,
        temperature=np.full((days, bins), np.nan),
        day_starts=pd.date_range("2024-04-01", periods=days, freq="D"),
        epoch=epoch,
        has_temperature=False,
    )


def test_rows_pair_each_day_with_the_next():
    matrix = np.repeat(np.array([[1.0], [2.0], [3.0]]), 4, axis=1)
    doubled = double_rows(matrix)
    assert doubled.shape == (3, 8)
    np.testing.assert_array_equal(doubled[0], [1, 1, 1, 1, 2, 2, 2, 2])
    np.testing.assert_array_equal(doubled[1], [2, 2, 2, 2, 3, 3, 3, 3])
    np.testing.assert_array_equal(doubled[2, :4], [3, 3, 3, 3])
    assert np.isnan(doubled[2, 4:]).all()


def test_missing_bins_stay_missing_in_both_halves():
    activity = np.ones((2, 1440))
    activity[1, 100:200] = np.nan
    plot = build_double_plot(_daily(activity))
    assert np.isnan(plot.activity[0, 1440 + 100:1440 + 200]).all()
    assert np.isnan(plot.activity[1, 100:200]).all()
    assert np.isnan(plot.light[1, 100:200]).all()
    assert plot.temperature.shape == (2, 2880)


def test_hours_axis():
    plot = build_double_plot(_daily(np.ones((2, 96)), epoch=900))
    assert plot.hours.shape == (192,)
    assert plot.hours[0] == 0.0
    assert plot.hours[-1] == 47.75


def test_complete_day_threshold_is_ceil_of_fraction():
    activity = np.ones((3, 1440))
    activity[1, :72] = np.nan    # 1368 valid, exactly 95%
    activity[2, :73] = np.nan    # 1367 valid
    mask = complete_day_mask(activity, 0.95)
    np.testing.assert_array_equal(mask, [True, True, False])


def test_plot_exposes_counts_without_applying_fallback():
    activity = np.full((4, 1440), np.nan)
    activity[0] = 1.0
    plot = build_double_plot(_daily(activity))
    np.testing.assert_array_equal(plot.valid_counts, [1440, 0, 0, 0])
    np.testing.assert_array_equal(plot.complete_day_mask, [True, False, False, False])
    assert plot.complete_days == 1
