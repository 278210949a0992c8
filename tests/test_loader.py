import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from actogram.errors import ConfigurationError  # noqa: E402
from actogram.loader import (  # noqa: E402
    ACTIVITY_CANDIDATES,
    find_column,
    load_recording,
)
from actogram.timestamps import normalize_series  # noqa: E402


FIXTURE = PROJECT_ROOT / "tests" / "data" / "sample_export.csv"


def test_loads_fixture_with_loose_column_names():
    recording = load_recording(FIXTURE)
    assert recording.columns['timestamp'] == 'Time stamp'
    assert recording.columns['activity'] == ' Sum of vector (SVMg) '
    assert recording.columns['light'] == 'light level (lux)'
    assert recording.columns['temperature'] == 'Temperature'
    assert len(recording.timestamps) == 13
    assert np.isnan(recording.activity[11])
    assert np.isnan(recording.temperature[11])
    assert recording.sheet is None


def test_fixture_feeds_the_normalizer():
    recording = load_recording(FIXTURE)
    series = normalize_series(
        recording.timestamps, recording.activity, recording.light, recording.temperature
    )
    assert len(series) == 12
    assert series.timestamp[0] == pd.Timestamp('2024-03-01 00:00')
    assert 99.0 not in series.activity


def test_first_candidate_wins():
    assert find_column(['Activity', 'SVMg'], ACTIVITY_CANDIDATES) == 'SVMg'
    assert find_column(['ACTIVITY'], ACTIVITY_CANDIDATES) == 'ACTIVITY'
    assert find_column(['Steps'], ACTIVITY_CANDIDATES) is None


def test_missing_temperature_is_optional(tmp_path):
    path = tmp_path / 'no_temp.csv'
    pd.DataFrame({
        'Timestamp': ['2024-01-01 00:00:00', '2024-01-01 00:01:00'],
        'Activity': [1, 2],
        'Lux': [0, 3],
    }).to_csv(path, index=False)
    recording = load_recording(path)
    assert recording.temperature is None
    np.testing.assert_array_equal(recording.light, [0.0, 3.0])


def test_missing_required_column_lists_candidates(tmp_path):
    path = tmp_path / 'no_light.csv'
    pd.DataFrame({'Timestamp': ['2024-01-01 00:00:00'], 'Activity': [1]}).to_csv(path, index=False)
    with pytest.raises(ConfigurationError, match='Missing required column'):
        load_recording(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_recording(tmp_path / 'absent.csv')


def test_empty_file(tmp_path):
    path = tmp_path / 'empty.csv'
    path.write_text('')
    with pytest.raises(ConfigurationError, match='Empty input file'):
        load_recording(path)


def test_not_a_workbook(tmp_path):
    path = tmp_path / 'export.xlsx'
    path.write_text('Timestamp,Activity,Lux\n2024-01-01 00:00:00,1,0\n')
    with pytest.raises(ConfigurationError, match='export.xlsx'):
        load_recording(path)


def test_excel_sheet_selection(tmp_path):
    pytest.importorskip('openpyxl')
    path = tmp_path / 'export.xlsx'
    frame = pd.DataFrame({
        'Timestamp': ['2024-01-01 00:00:00', '2024-01-01 00:01:00'],
        'Activity': [1.0, 2.0],
        'Lux': [0.0, 3.0],
    })
    with pd.ExcelWriter(path, engine='openpyxl') as writer:
        frame.iloc[:0].to_excel(writer, sheet_name='Summary', index=False)
        frame.to_excel(writer, sheet_name='RawData', index=False)

    recording = load_recording(path)
    assert recording.sheet == 'RawData'
    np.testing.assert_array_equal(recording.activity, [1.0, 2.0])

    with pytest.raises(ConfigurationError, match='NoSuchSheet'):
        load_recording(path, sheet='NoSuchSheet')
