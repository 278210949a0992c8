"""
Loading of raw actigraphy exports.

Reads a CSV or Excel export and locates the timestamp, activity, light and
(optional) temperature columns by loose name matching: case and repeated
whitespace are ignored and the first matching candidate wins.
"""

from __future__ import annotations

import logging
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import ConfigurationError


TIME_CANDIDATES = ['Time stamp', 'Timestamp', 'Time Stamp', 'Time']
ACTIVITY_CANDIDATES = ['Sum of vector (SVMg)', 'SVMg', 'SVM', 'Activity', 'Activity (SVMg)']
LIGHT_CANDIDATES = ['Light level (LUX)', 'Light level (Lux)', 'Light (LUX)', 'Lux', 'Light']
TEMPERATURE_CANDIDATES = ['Temperature', 'Temp', 'Temperature (C)', 'Temperature (°C)']

PREFERRED_SHEET = 'RawData'
EXCEL_SUFFIXES = {'.xlsx', '.xlsm', '.xls'}
NA_VALUES = ['', 'NA', 'NaN', 'null', 'None']


@dataclass(frozen=True, eq=False)
class RawRecording:
    """Columns pulled out of an export, still in file order."""
    timestamps: pd.Series
    activity: np.ndarray
    light: np.ndarray
    temperature: Optional[np.ndarray]
    columns: Dict[str, str]
    sheet: Optional[str] = None


def load_recording(path, sheet: Optional[str] = None) -> RawRecording:
    """
    Read an export and return its timestamp and channel columns.

    Parameters
    ----------
    path:
        CSV or Excel file.
    sheet:
        Excel sheet to read. Defaults to a sheet named ``RawData`` when
        present, otherwise the first sheet. Ignored for CSV files.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ConfigurationError
        If the file cannot be read or a required column is missing.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    used_sheet = None
    try:
        if path.suffix.lower() in EXCEL_SUFFIXES:
            used_sheet = sheet or _pick_sheet(path)
            df = pd.read_excel(path, sheet_name=used_sheet, na_values=NA_VALUES)
        else:
            df = pd.read_csv(path, na_values=NA_VALUES)
    except pd.errors.EmptyDataError as exc:
        raise ConfigurationError(f"Empty input file: {path.name}") from exc
    except pd.errors.ParserError as exc:
        raise ConfigurationError(f"Could not parse {path.name}: {exc}") from exc
    except zipfile.BadZipFile as exc:
        raise ConfigurationError(f"{path.name} is not a valid Excel workbook: {exc}") from exc
    except ValueError as exc:
        # pandas reports an unknown sheet name or an unreadable workbook as ValueError
        raise ConfigurationError(f"Could not read {path.name}: {exc}") from exc

    columns = {
        'timestamp': require_column(df.columns, TIME_CANDIDATES),
        'activity': require_column(df.columns, ACTIVITY_CANDIDATES),
        'light': require_column(df.columns, LIGHT_CANDIDATES),
    }
    temp_col = find_column(df.columns, TEMPERATURE_CANDIDATES)
    if temp_col is not None:
        columns['temperature'] = temp_col
    else:
        logging.warning(f"{path.name}: temperature column not found; temperature outputs will be empty.")

    logging.info(f"Loaded {len(df)} rows from {path.name} using columns {columns}")
    return RawRecording(
        timestamps=df[columns['timestamp']],
        activity=pd.to_numeric(df[columns['activity']], errors='coerce').to_numpy(dtype=float),
        light=pd.to_numeric(df[columns['light']], errors='coerce').to_numpy(dtype=float),
        temperature=(
            pd.to_numeric(df[temp_col], errors='coerce').to_numpy(dtype=float)
            if temp_col is not None else None
        ),
        columns=columns,
        sheet=used_sheet,
    )


def find_column(columns: Sequence, candidates: Sequence[str]) -> Optional[str]:
    """Return the first column matching a candidate, or None."""
    normalized = {_normalise_name(c): c for c in reversed(list(columns))}
    for candidate in candidates:
        hit = normalized.get(_normalise_name(candidate))
        if hit is not None:
            return hit
    return None


def require_column(columns: Sequence, candidates: Sequence[str]) -> str:
    column = find_column(columns, candidates)
    if column is None:
        raise ConfigurationError(
            f"Missing required column. Tried: {', '.join(candidates)}. "
            f"Found columns: {', '.join(str(c) for c in columns)}"
        )
    return column


def _normalise_name(name) -> str:
    return re.sub(r'\s+', ' ', str(name).strip().lower())


def _pick_sheet(path: Path) -> str:
    with pd.ExcelFile(path) as workbook:
        sheets: List[str] = [str(s) for s in workbook.sheet_names]
    for name in sheets:
        if name.lower() == PREFERRED_SHEET.lower():
            return name
    return sheets[0]
