"""
Command-line entry point.

Example: actogram participant.xlsx --threshold 10 --timezone Europe/London --output-dir results/
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .callouts import low_activity_days
from .errors import ActogramError
from .loader import load_recording
from .models import DEFAULT_LIGHT_THRESHOLD, AnalysisConfig
from .pipeline import daily_matrix_frame, metrics_table, run_analysis, summary_table
from .profiles import hourly_profile


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog='actogram',
        description='Regularise wrist actigraphy onto daily bins and compute rhythm metrics.',
    )
    parser.add_argument('input', help='CSV or Excel export with timestamp, activity and light columns')
    parser.add_argument('--threshold', type=float, default=DEFAULT_LIGHT_THRESHOLD,
                        help='light threshold in lux for hours-in-light (default: %(default)s)')
    parser.add_argument('--timezone', default=None,
                        help='IANA timezone or alias used for day labels only, e.g. Europe/London')
    parser.add_argument('--sheet', default=None, help='Excel sheet to read (default: RawData or first sheet)')
    parser.add_argument('--output-dir', default=None,
                        help='write summary, metrics, daily activity and light profile CSVs to this folder')
    parser.add_argument('-v', '--verbose', action='store_true', help='log progress messages')
    return parser


def main(argv=None) -> int:
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )

    try:
        recording = load_recording(args.input, sheet=args.sheet)
        config = AnalysisConfig(light_threshold=args.threshold, timezone=args.timezone)
        result = run_analysis(
            recording.timestamps,
            recording.activity,
            recording.light,
            recording.temperature,
            config=config,
        )
    except (ActogramError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    summary = summary_table(result)
    metrics = metrics_table(result)

    print("=" * 70)
    print(f"Epoch: {result.epoch}s | Days analysed: {result.total_days} | "
          f"Complete days: {result.double_plot.complete_days}")
    print(f"Interdaily stability (IS):   {result.rhythm.interdaily_stability:.3f}")
    print(f"Intradaily variability (IV): {result.rhythm.intradaily_variability:.3f}")
    print("=" * 70)
    print(summary.to_string(index=False))

    low = low_activity_days(result.metrics['total_activity'], result.complete_day_mask)
    if low.low_days.size:
        flagged = ', '.join(result.labels['label'].iloc[low.low_days])
        print(f"\nLow-activity days (< {low.threshold:.1f}): {flagged}")

    if args.output_dir:
        out_dir = Path(args.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        summary.to_csv(out_dir / 'summary.csv', index=False)
        metrics.to_csv(out_dir / 'metrics.csv', index=False)
        daily_matrix_frame(result, 'activity').to_csv(out_dir / 'daily_activity.csv')
        hourly_profile(result.daily.light, result.epoch).to_csv(out_dir / 'light_profile.csv', index=False)
        print(f"\nSaved tables to {out_dir}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
