"""
Timestamp normalization for raw actigraphy exports.

Devices and spreadsheet tools hand over timestamps as native date-times,
spreadsheet serial day counts, or text in one of several layouts. This module
turns any of them into timezone-naive ``datetime64`` values, drops the rows it
cannot read and sorts the remaining channels jointly by time.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import ConfigurationError, ParseError
from .models import MIN_VALID_TIMESTAMPS, TimeSeries


# Tried in order; the first format that reads a value wins for that value.
TIMESTAMP_FORMATS: Tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S:%f",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
)
SERIAL_DATE_ORIGIN = pd.Timestamp("1899-12-30")
MAX_SERIAL_DAY: float = 2958466.0  # 9999-12-31 in spreadsheet serial days


def parse_timestamps(raw) -> pd.Series:
    """
    Convert raw timestamp values into timezone-naive datetimes.

    Parameters
    ----------
    raw:
        Sequence of native date-times, spreadsheet serial day counts (days
        since 1899-12-30), or strings. Object sequences may mix the three.

    Returns
    -------
    pandas.Series
        ``datetime64[ns]`` values of the same length as ``raw`` with ``NaT``
        wherever a value could not be read.
    """

    values = pd.Series(raw).reset_index(drop=True)

    if pd.api.types.is_datetime64_any_dtype(values):
        return _strip_timezone(values)
    if pd.api.types.is_numeric_dtype(values) and not pd.api.types.is_bool_dtype(values):
        return _from_serial_days(values.astype(float))

    parsed = pd.Series(pd.NaT, index=values.index, dtype="datetime64[ns]")

    is_native = values.map(lambda v: isinstance(v, (datetime, np.datetime64))).to_numpy(dtype=bool)
    is_number = values.map(_is_number).to_numpy(dtype=bool)
    is_text = values.map(lambda v: isinstance(v, str)).to_numpy(dtype=bool)

    if is_native.any():
        parsed.loc[is_native] = [_native_to_naive(v) for v in values[is_native]]
    if is_number.any():
        parsed.loc[is_number] = _from_serial_days(values[is_number].astype(float)).to_numpy()
    if is_text.any():
        parsed.loc[is_text] = _parse_text(values[is_text].astype(str)).to_numpy()
    return parsed


def normalize_series(
    timestamps,
    activity: Sequence[float],
    light: Sequence[float],
    temperature: Optional[Sequence[float]] = None,
    *,
    min_valid: int = MIN_VALID_TIMESTAMPS,
) -> TimeSeries:
    """
    Parse timestamps, drop unreadable rows and sort all channels by time.

    Rows are dropped before sorting. The sort is stable, so samples sharing a
    timestamp keep their input order.
    """

    parsed = parse_timestamps(timestamps)
    n_rows = len(parsed)

    activity_arr = _as_channel(activity, n_rows, "activity")
    light_arr = _as_channel(light, n_rows, "light")
    temperature_arr = None
    if temperature is not None:
        temperature_arr = _as_channel(temperature, n_rows, "temperature")

    valid = parsed.notna().to_numpy()
    n_valid = int(valid.sum())
    if n_valid < min_valid:
        raise ParseError(
            f"Too few valid timestamps after parsing: {n_valid} of {n_rows} rows "
            f"(at least {min_valid} required). Check the timestamp column."
        )

    dropped = n_rows - n_valid
    if dropped:
        logging.warning(f"Dropped {dropped} row(s) with unparseable timestamps.")

    ts_values = parsed.to_numpy()[valid]
    order = np.argsort(ts_values, kind="stable")

    return TimeSeries(
        timestamp=pd.DatetimeIndex(ts_values[order]),
        activity=activity_arr[valid][order],
        light=light_arr[valid][order],
        temperature=None if temperature_arr is None else temperature_arr[valid][order],
    )


def _as_channel(values, expected_len: int, name: str) -> np.ndarray:
    arr = pd.to_numeric(pd.Series(values).reset_index(drop=True), errors="coerce").to_numpy(dtype=float)
    if len(arr) != expected_len:
        raise ConfigurationError(
            f"Channel '{name}' has {len(arr)} values but there are {expected_len} timestamps."
        )
    return arr


def _is_number(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def _strip_timezone(values: pd.Series) -> pd.Series:
    if getattr(values.dt, "tz", None) is not None:
        values = values.dt.tz_localize(None)
    return values.astype("datetime64[ns]")


def _native_to_naive(value) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        return ts
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def _from_serial_days(serial: pd.Series) -> pd.Series:
    # Serial days carry float noise; snap to the millisecond so samples
    # recorded on the minute do not land a hair before a slot boundary.
    in_range = np.isfinite(serial) & (serial >= 0) & (serial < MAX_SERIAL_DAY)
    result = pd.Series(pd.NaT, index=serial.index, dtype="datetime64[ns]")
    if in_range.any():
        offsets = pd.to_timedelta(serial[in_range], unit="D")
        result.loc[in_range] = (SERIAL_DATE_ORIGIN + offsets).dt.round("ms").to_numpy()
    return result


def _parse_text(text: pd.Series) -> pd.Series:
    text = text.str.strip()
    result = pd.Series(pd.NaT, index=text.index, dtype="datetime64[ns]")
    for fmt in TIMESTAMP_FORMATS:
        pending = result.isna()
        if not pending.any():
            break
        attempt = pd.to_datetime(text[pending], format=fmt, errors="coerce")
        hit = attempt.notna()
        if hit.any():
            result.loc[hit[hit].index] = attempt[hit].to_numpy()
    return result
