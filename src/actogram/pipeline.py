"""
End-to-end analysis of one actigraphy recording.

raw columns -> normalized series -> epoch -> regular grid -> daily matrices
-> (daily metrics, rhythm statistics, 48 h views)

:func:`run_analysis` returns an :class:`~actogram.models.AnalysisResult`;
:func:`summary_table` and :func:`metrics_table` flatten it into the per-day
and per-run tables consumed by export layers.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .binning import bin_days
from .daily_metrics import compute_daily_metrics
from .double_plot import build_double_plot
from .epoch import infer_epoch
from .labels import day_labels, resolve_timezone
from .models import AnalysisConfig, AnalysisResult
from .regularize import regularize
from .rhythm import compute_rhythm_stats
from .timestamps import normalize_series


def run_analysis(
    timestamps,
    activity: Sequence[float],
    light: Sequence[float],
    temperature: Optional[Sequence[float]] = None,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """
    Run the full regularization and metrics pipeline.

    Parameters
    ----------
    timestamps:
        Raw timestamps (date-times, spreadsheet serial days or text).
    activity, light:
        Channel values, one per timestamp.
    temperature:
        Optional temperature channel.
    config:
        Run settings; defaults to :class:`AnalysisConfig()`.

    Raises
    ------
    ParseError
        Fewer than ``config.min_valid_timestamps`` readable timestamps.
    SamplingError
        No positive sampling interval.
    InsufficientDataError
        The grid holds no complete day.
    ConfigurationError
        Mismatched channel lengths or an unknown timezone.
    """

    config = config or AnalysisConfig()
    # Fail on a bad timezone before doing any work.
    resolve_timezone(config.timezone)

    logging.info("Parsing timestamps...")
    series = normalize_series(
        timestamps, activity, light, temperature, min_valid=config.min_valid_timestamps
    )
    if not series.has_temperature:
        logging.warning("Temperature channel not provided; temperature metrics will be NaN.")

    logging.info("Inferring sampling epoch...")
    epoch = infer_epoch(series.timestamp)

    logging.info(f"Regularising {len(series)} samples to a {epoch}s grid...")
    grid = regularize(series, epoch)
    daily = bin_days(grid)
    logging.info(
        f"{daily.total_days} day(s) of {daily.bins_per_day} bins from "
        f"{daily.day_starts[0].date()} to {daily.day_starts[-1].date()}"
    )

    logging.info("Computing daily summary metrics...")
    metrics = compute_daily_metrics(daily, config.light_threshold, config.min_window_coverage)

    logging.info("Computing IS and IV (hourly)...")
    rhythm = compute_rhythm_stats(daily)

    logging.info("Preparing 0-48 h matrices...")
    double_plot = build_double_plot(daily, config.complete_day_fraction)

    return AnalysisResult(
        config=config,
        series=series,
        epoch=epoch,
        grid=grid,
        daily=daily,
        metrics=metrics,
        rhythm=rhythm,
        double_plot=double_plot,
        labels=day_labels(daily.day_starts, config.timezone),
    )


def summary_table(result: AnalysisResult) -> pd.DataFrame:
    """Per-day table: labels, totals, light exposure, L5/M10 and temperature."""
    metrics = result.metrics
    labels = result.labels
    return pd.DataFrame({
        'Date': labels['date'],
        'Weekday': labels['weekday'],
        'Day': labels['day'],
        'TotalActivity': metrics['total_activity'],
        'HoursInLight': metrics['hours_in_light'],
        'L5_StartTime': _clock_strings(metrics['l5_start']),
        'L5_Mean': metrics['l5_mean'],
        'M10_StartTime': _clock_strings(metrics['m10_start']),
        'M10_Mean': metrics['m10_mean'],
        'MinTemperature': metrics['min_temperature'],
        'MaxTemperature': metrics['max_temperature'],
    })


def metrics_table(result: AnalysisResult) -> pd.DataFrame:
    """Single-row table of run settings and whole-recording statistics."""
    config = result.config
    temperature_available = bool(
        result.daily.has_temperature and np.isfinite(result.daily.temperature).any()
    )
    return pd.DataFrame([{
        'SamplingInterval_Minutes': result.epoch / 60.0,
        'EpochSeconds_RegularGrid': result.epoch,
        'LightThreshold_Lux': config.light_threshold,
        'TimeZone_LabelsOnly': resolve_timezone(config.timezone) or '(none)',
        'InterdailyStability_Hourly': result.rhythm.interdaily_stability,
        'IntradailyVariability_Hourly': result.rhythm.intradaily_variability,
        'TotalDaysAnalysed': result.total_days,
        'CompleteDays': result.double_plot.complete_days,
        'TemperatureAvailable': temperature_available,
    }])


def daily_matrix_frame(result: AnalysisResult, channel: str = 'activity') -> pd.DataFrame:
    """One channel's ``[day][bin]`` matrix with ISO dates and HH:MM bin labels."""
    matrix = getattr(result.daily, channel)
    offsets = pd.to_timedelta(np.arange(result.daily.bins_per_day) * result.epoch, unit='s')
    bin_labels = (pd.Timestamp(0) + offsets).strftime('%H:%M:%S')
    return pd.DataFrame(matrix, index=pd.Index(result.labels['iso'], name='date'), columns=bin_labels)


def _clock_strings(starts: pd.Series) -> pd.Series:
    return starts.dt.strftime('%H:%M:%S').fillna('')
