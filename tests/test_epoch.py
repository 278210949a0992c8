import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from actogram.epoch import EPOCH_CANDIDATES, infer_epoch, snap_epoch  # noqa: E402
from actogram.errors import SamplingError  # noqa: E402


def _spaced(seconds, n: int = 50, jitter: float = 0.0, seed: int = 0) -> pd.DatetimeIndex:
    rng = np.random.default_rng(seed)
    offsets = np.arange(n) * seconds + rng.uniform(-jitter, jitter, n)
    return pd.Timestamp("2024-01-01 08:00") + pd.to_timedelta(np.sort(offsets), unit="s")


def test_jittered_minute_data_gives_minute_epoch():
    assert infer_epoch(_spaced(60, jitter=2.0)) == 60


def test_five_minute_data():
    assert infer_epoch(_spaced(300)) == 300


def test_sub_minute_sampling_is_floored_to_one_minute():
    assert infer_epoch(_spaced(15)) == 60


def test_duplicates_are_ignored():
    ts = _spaced(120, n=20)
    doubled = ts.append(ts).sort_values()
    assert infer_epoch(doubled) == 120


def test_identical_timestamps_raise():
    ts = pd.DatetimeIndex([pd.Timestamp("2024-01-01 08:00")] * 12)
    with pytest.raises(SamplingError, match="sampling interval"):
        infer_epoch(ts)


def test_snap_ties_go_to_smaller_candidate():
    assert snap_epoch(75) == 60
    assert snap_epoch(150) == 120
    assert snap_epoch(3000) == 3600
    assert snap_epoch(100) == 90


@pytest.mark.parametrize("raw", list(range(0, 5001, 7)))
def test_snapped_epoch_divides_day_and_is_nearest(raw):
    target = max(60, raw)
    epoch = snap_epoch(target)
    assert 86400 % epoch == 0
    best = min(abs(c - target) for c in EPOCH_CANDIDATES)
    assert abs(epoch - target) == best
    assert epoch == min(c for c in EPOCH_CANDIDATES if abs(c - target) == best)
