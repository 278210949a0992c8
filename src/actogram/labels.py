"""
Display labels for analysed days.

A timezone only changes how days are labelled. Binning and every metric use
the timezone-naive wall-clock timestamps of the recording.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
import pytz

from .errors import ConfigurationError


TIMEZONE_ALIASES = {
    'us_east': 'America/New_York',
    'us_eastern': 'America/New_York',
    'eastern': 'America/New_York',
    'us_central': 'America/Chicago',
    'central': 'America/Chicago',
    'us_mountain': 'America/Denver',
    'mountain': 'America/Denver',
    'us_pacific': 'America/Los_Angeles',
    'pacific': 'America/Los_Angeles',
    'uk': 'Europe/London',
    'british': 'Europe/London',
    'utc': 'UTC',
}


def resolve_timezone(tz_str: Optional[str]) -> Optional[str]:
    """Map simple aliases to IANA timezone names and validate the result.

    Examples: 'us_east' -> 'America/New_York', 'Europe/Paris' -> 'Europe/Paris'
    """
    if tz_str is None or not tz_str.strip():
        return None
    normalized = tz_str.strip().lower().replace('-', '_').replace(' ', '_')
    name = TIMEZONE_ALIASES.get(normalized, tz_str.strip())
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError as exc:
        raise ConfigurationError(
            f'Timezone "{tz_str}" not recognised. Use IANA format like "Europe/London".'
        ) from exc
    return name


def day_labels(day_starts, timezone: Optional[str] = None) -> pd.DataFrame:
    """
    Label each analysed day.

    Returns a frame with columns ``day`` (1-based), ``date`` (midnight, tagged
    with ``timezone`` when given), ``weekday`` (e.g. 'Monday'), ``label``
    ('dd/mm') and ``iso`` ('yyyy-mm-dd').
    """

    dates = pd.DatetimeIndex(day_starts)
    resolved = resolve_timezone(timezone)
    if resolved is not None:
        # midnight can be ambiguous or skipped in zones that switch DST at 00:00
        standard_time = np.zeros(len(dates), dtype=bool)
        dates = dates.tz_localize(pytz.timezone(resolved), ambiguous=standard_time, nonexistent='shift_forward')

    return pd.DataFrame({
        'day': range(1, len(dates) + 1),
        'date': dates,
        'weekday': dates.day_name(),
        'label': dates.strftime('%d/%m'),
        'iso': dates.strftime('%Y-%m-%d'),
    })
