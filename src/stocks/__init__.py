"""
stocks — Lagged Transforms and Performance Metrics
==================================================

Four lagged transforms over one numeric series:

    stocks.diffs(x, lag=1)      x[i+lag] - x[i]
    stocks.pdiffs(x, lag=1)     (x[i+lag] - x[i]) / x[i]
    stocks.pchanges(x, lag=1)   100 * (x[i+lag] - x[i]) / x[i]
    stocks.ratios(x)            x[i+1] / x[i]

Each returns a new float64 array of length len(x) - lag and raises
stocks.InvalidArgument when lag < 1 or lag >= len(x).

Built on top:

    stocks.prices_to_gains / gains_to_prices / gains_rate
    stocks.calc_metric(gains, 'cagr')              one metric, one series
    stocks.rolling_metric(gains, 'beta', 50, benchmark_gains=b)
    stocks.metrics_overtime(gains, dates, 'cagr', type='hop.year')

Plotting lives in stocks.plotting (imports matplotlib).
"""

__version__ = '0.1.0'

from stocks.lagged import InvalidArgument, diffs, pdiffs, pchanges, ratios
from stocks.gains import prices_to_gains, gains_to_prices, gains_rate
from stocks.metrics import calc_metric, rolling_metric, metric_choices
from stocks.overtime import metrics_overtime, infer_units_year

__all__ = [
    'InvalidArgument',
    'diffs',
    'pdiffs',
    'pchanges',
    'ratios',
    'prices_to_gains',
    'gains_to_prices',
    'gains_rate',
    'calc_metric',
    'rolling_metric',
    'metric_choices',
    'metrics_overtime',
    'infer_units_year',
]
