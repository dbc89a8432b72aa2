"""
Performance metrics over time.

Splits one gain series into periods and computes metrics per period:

    hop.year     disjoint calendar years
    hop.month    disjoint calendar months
    hop.N        disjoint blocks of N observations
    roll.N       trailing windows of N observations
    date(s)      break-point dates; periods run between consecutive breaks

Output is one row per period:
    Period | Start date | End date | <metric label> ...
"""

import datetime
import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from stocks.config import get as get_config
from stocks.lagged import InvalidArgument, _as_series
from stocks.metrics import calc_metric, check_metrics, metric_label, needs_benchmark, rolling_metric

logger = logging.getLogger(__name__)

_TYPE_ERROR = (
    "type must be one of the following: 'roll.n' where n is a positive integer, "
    "'hop.n' where n is a positive integer, 'hop.month', 'hop.year', "
    "or a date or sequence of date break-points"
)


def infer_units_year(dates) -> int:
    """
    Observations per year from the spacing of the first few dates.

    Smallest gap of 1 day → daily (252), up to 30 days → monthly (12),
    otherwise yearly (1).
    """
    dates = pd.DatetimeIndex(pd.to_datetime(dates))
    sample = dates[:get_config('overtime.date_sample', 10)]
    if len(sample) < 2:
        return get_config('units_year.day', 252)

    gap = int(np.min(np.diff(sample.values).astype('timedelta64[D]').astype(np.int64)))
    if gap <= get_config('overtime.daily_max_gap_days', 1):
        unit = 'day'
    elif gap <= get_config('overtime.monthly_max_gap_days', 30):
        unit = 'month'
    else:
        unit = 'year'
    logger.debug(f"Inferred time unit '{unit}' from minimum gap of {gap} day(s)")
    return get_config(f'units_year.{unit}')


def _parse_width(type_: str, prefix: str) -> int:
    try:
        width = int(type_[len(prefix):])
    except ValueError:
        raise InvalidArgument(_TYPE_ERROR) from None
    if width < 1:
        raise InvalidArgument(_TYPE_ERROR)
    return width


def _hop_periods(type_: str, dates: pd.DatetimeIndex) -> np.ndarray:
    if type_ == 'hop.year':
        return np.asarray(dates.year)
    if type_ == 'hop.month':
        return np.asarray(dates.strftime('%Y-%b'))
    width = _parse_width(type_, 'hop.')
    return np.arange(len(dates)) // width + 1


def _as_breaks(type_) -> pd.DatetimeIndex:
    if isinstance(type_, (str, datetime.date, np.datetime64)):
        type_ = [type_]
    try:
        breaks = pd.to_datetime(list(type_))
    except (ValueError, TypeError):
        raise InvalidArgument(_TYPE_ERROR) from None
    if breaks.hasnans:
        raise InvalidArgument(_TYPE_ERROR)
    return breaks


def _breakpoint_periods(breaks: pd.DatetimeIndex, dates: pd.DatetimeIndex) -> np.ndarray:
    start, end = dates.min(), dates.max()
    # Breaks on or outside the date range would give empty or unordered periods.
    inner = sorted(set(b for b in breaks if start < b < end))
    dropped = len(breaks) - len(inner)
    if dropped:
        logger.debug(f"Ignoring {dropped} duplicate or out-of-range break(s)")

    edges = [start, *inner, end]
    labels = [
        f"{edges[i].strftime('%m/%d/%y')}-{edges[i + 1].strftime('%m/%d/%y')}"
        for i in range(len(edges) - 1)
    ]
    # Right-closed intervals; the first one also includes its lower edge.
    idx = np.searchsorted(pd.DatetimeIndex(edges[1:]).values, dates.values, side='left')
    idx = np.minimum(idx, len(labels) - 1)
    return np.asarray(labels, dtype=object)[idx]


def _grouped_rows(
    periods: np.ndarray,
    gains: np.ndarray,
    dates: pd.DatetimeIndex,
    metrics: List[str],
    minimum_n: int,
    units_year: float,
    benchmark: Optional[np.ndarray],
) -> List[Dict[str, Any]]:
    rows = []
    # Periods appear in date order; keep that order rather than sorting labels.
    _, first = np.unique(periods, return_index=True)
    for period in periods[np.sort(first)]:
        mask = periods == period
        n = int(mask.sum())
        if n < minimum_n:
            logger.debug(f"Dropping period {period!r}: {n} < minimum_n={minimum_n}")
            continue
        period_dates = dates[mask]
        row = {
            'Period': period.item() if hasattr(period, 'item') else period,
            'Start date': period_dates[0],
            'End date': period_dates[-1],
        }
        for metric in metrics:
            row[metric_label(metric)] = calc_metric(
                gains[mask], metric, units_year=units_year,
                benchmark_gains=None if benchmark is None else benchmark[mask],
            )
        rows.append(row)
    return rows


def _rolling_rows(
    width: int,
    gains: np.ndarray,
    dates: pd.DatetimeIndex,
    metrics: List[str],
    units_year: float,
    benchmark: Optional[np.ndarray],
) -> List[Dict[str, Any]]:
    n = len(gains)
    if width > n:
        logger.debug(f"roll.{width} longer than series ({n}); no windows")
        return []
    values = {
        metric_label(m): rolling_metric(gains, m, width, units_year=units_year,
                                        benchmark_gains=benchmark)
        for m in metrics
    }
    rows = []
    for i in range(n - width + 1):
        row = {
            'Period': i + 1,
            'Start date': dates[i],
            'End date': dates[i + width - 1],
        }
        for label, series in values.items():
            row[label] = float(series[i])
        rows.append(row)
    return rows


def _align(gains, dates, benchmark_gains) -> Tuple[np.ndarray, pd.DatetimeIndex, Optional[np.ndarray]]:
    gains = _as_series(gains)
    dates = pd.DatetimeIndex(pd.to_datetime(dates))
    if len(dates) != len(gains):
        raise InvalidArgument(f"dates has length {len(dates)}, gains has length {len(gains)}")

    keep = ~np.isnan(gains)
    if benchmark_gains is not None:
        benchmark_gains = _as_series(benchmark_gains)
        if len(benchmark_gains) != len(gains):
            raise InvalidArgument(
                f"benchmark_gains has length {len(benchmark_gains)}, "
                f"gains has length {len(gains)}"
            )
        keep &= ~np.isnan(benchmark_gains)
        benchmark_gains = benchmark_gains[keep]

    dropped = int((~keep).sum())
    if dropped:
        logger.debug(f"Dropped {dropped} incomplete observation(s)")
    return gains[keep], dates[keep], benchmark_gains


def metrics_overtime(
    gains,
    dates,
    metrics=('cagr',),
    type=None,
    minimum_n: Optional[int] = None,
    benchmark_gains=None,
    units_year: Optional[float] = None,
) -> pd.DataFrame:
    """
    Compute performance metrics per period for one gain series.

    Parameters
    ----------
    gains : array-like
        1D proportional gains.
    dates : array-like
        Date of each gain, same length, ascending.
    metrics : str or sequence of str
        Metric names (see stocks.metrics.metric_choices()).
    type : str, date or sequence of dates
        'hop.year', 'hop.month', 'hop.N', 'roll.N', one break-point date
        (string or datetime) or a sequence of them.
        Defaults to config overtime.default_type.
    minimum_n : int
        Hop/break-point periods with fewer observations are dropped.
    benchmark_gains : array-like, optional
        Needed for benchmark metrics (alpha, beta, ...).
    units_year : float, optional
        Observations per year. Inferred from dates when None.

    Returns
    -------
    pd.DataFrame with Period, Start date, End date and one column per
    metric, named by metric_label().
    """
    metrics = check_metrics(metrics)
    if type is None:
        type = get_config('overtime.default_type', 'hop.year')
    if minimum_n is None:
        minimum_n = get_config('overtime.minimum_n', 3)

    missing = [m for m in metrics if needs_benchmark(m) and benchmark_gains is None]
    if missing:
        raise InvalidArgument(f"metric(s) {', '.join(missing)} require benchmark_gains")

    gains, dates, benchmark = _align(gains, dates, benchmark_gains)
    if units_year is None:
        units_year = infer_units_year(dates)

    if isinstance(type, str) and type.startswith('hop'):
        periods = _hop_periods(type, dates)
        rows = _grouped_rows(periods, gains, dates, metrics, minimum_n, units_year, benchmark)
    elif isinstance(type, str) and type.startswith('roll.'):
        width = _parse_width(type, 'roll.')
        rows = _rolling_rows(width, gains, dates, metrics, units_year, benchmark)
    else:
        breaks = _as_breaks(type)
        rows = []
        if len(dates) > 0:
            periods = _breakpoint_periods(breaks, dates)
            rows = _grouped_rows(periods, gains, dates, metrics, minimum_n, units_year, benchmark)

    columns = ['Period', 'Start date', 'End date'] + [metric_label(m) for m in metrics]
    return pd.DataFrame(rows, columns=columns)
