import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from actogram.binning import bin_days  # noqa: E402
from actogram.errors import InsufficientDataError  # noqa: E402
from actogram.models import RegularGrid, TimeSeries  # noqa: E402
from actogram.regularize import regularize  # noqa: E402


def _series(times, activity, light=None, temperature=None) -> TimeSeries:
    times = pd.DatetimeIndex(pd.to_datetime(times))
    activity = np.asarray(activity, dtype=float)
    light = np.zeros(len(times)) if light is None else np.asarray(light, dtype=float)
    return TimeSeries(timestamp=times, activity=activity, light=light, temperature=temperature)


def test_grid_spans_whole_days():
    series = _series(["2024-01-01 08:00:00", "2024-01-02 10:00:00"], [1.0, 2.0])
    grid = regularize(series, 60)
    assert len(grid) == 2 * 1440
    assert grid.time[0] == pd.Timestamp("2024-01-01 00:00")
    assert grid.time[-1] == pd.Timestamp("2024-01-02 23:59")
    assert grid.activity[8 * 60] == 1.0
    assert grid.activity[1440 + 10 * 60] == 2.0


def test_jittered_samples_in_one_slot_are_averaged():
    series = _series(
        ["2024-01-01 00:00:10", "2024-01-01 00:00:50", "2024-01-01 00:01:00"],
        [2.0, 4.0, 7.0],
        light=[10.0, 30.0, 1.0],
    )
    grid = regularize(series, 60)
    assert grid.activity[0] == pytest.approx(3.0)
    assert grid.light[0] == pytest.approx(20.0)
    # 00:01:00 belongs to the second slot (half-open intervals)
    assert grid.activity[1] == 7.0


def test_empty_slots_are_missing_not_zero():
    series = _series(["2024-01-01 00:00", "2024-01-01 00:05"], [5.0, 5.0])
    grid = regularize(series, 60)
    assert np.isnan(grid.activity[1:5]).all()
    assert np.count_nonzero(~np.isnan(grid.activity)) == 2


def test_missing_raw_values_are_skipped_in_slot_mean():
    series = _series(
        ["2024-01-01 00:00:00", "2024-01-01 00:00:30", "2024-01-01 00:01:00"],
        [np.nan, 6.0, np.nan],
    )
    grid = regularize(series, 60)
    assert grid.activity[0] == 6.0
    assert np.isnan(grid.activity[1])


def test_absent_temperature_is_all_missing():
    series = _series(["2024-01-01 00:00", "2024-01-01 00:01"], [1.0, 1.0])
    grid = regularize(series, 60)
    assert not grid.has_temperature
    assert np.isnan(grid.temperature).all()


def test_regularizing_a_grid_reproduces_it():
    rng = np.random.default_rng(1)
    times = pd.date_range("2024-01-01 03:17", periods=500, freq="5min")
    activity = rng.gamma(2.0, 10.0, size=len(times))
    activity[100:140] = np.nan
    series = _series(times, activity, light=rng.uniform(0, 500, len(times)),
                     temperature=rng.normal(32, 1, len(times)))

    grid = regularize(series, 300)
    again = regularize(
        TimeSeries(grid.time, grid.activity, grid.light, grid.temperature), 300
    )

    assert again.time.equals(grid.time)
    np.testing.assert_array_equal(again.activity, grid.activity)
    np.testing.assert_array_equal(again.light, grid.light)
    np.testing.assert_array_equal(again.temperature, grid.temperature)


def test_inputs_are_not_mutated():
    activity = np.array([1.0, np.nan, 3.0])
    series = _series(["2024-01-01 00:00", "2024-01-01 00:01", "2024-01-01 00:02"], activity)
    before = series.activity.copy()
    bin_days(regularize(series, 60))
    np.testing.assert_array_equal(series.activity, before)


def test_bin_days_rows_follow_calendar_days():
    series = _series(
        ["2024-01-01 00:00", "2024-01-02 12:00", "2024-01-03 23:59"], [1.0, 2.0, 3.0]
    )
    daily = bin_days(regularize(series, 60))
    assert daily.activity.shape == (3, 1440)
    assert daily.total_days == 3
    assert list(daily.day_starts) == list(pd.date_range("2024-01-01", periods=3, freq="D"))
    assert daily.activity[1, 12 * 60] == 2.0
    assert daily.activity[2, 1439] == 3.0


def test_bin_days_floors_partial_trailing_day():
    n = 2 * 1440 + 100
    grid = RegularGrid(
        time=pd.date_range("2024-01-01", periods=n, freq="min"),
        activity=np.arange(n, dtype=float),
        light=np.zeros(n),
        temperature=np.full(n, np.nan),
        epoch=60,
    )
    daily = bin_days(grid)
    assert daily.total_days == 2
    assert daily.activity[1, -1] == 2 * 1440 - 1


def test_bin_days_requires_a_complete_day():
    grid = RegularGrid(
        time=pd.date_range("2024-01-01", periods=100, freq="min"),
        activity=np.ones(100),
        light=np.zeros(100),
        temperature=np.full(100, np.nan),
        epoch=60,
    )
    with pytest.raises(InsufficientDataError, match="No complete day"):
        bin_days(grid)
