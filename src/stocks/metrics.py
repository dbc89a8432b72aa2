"""
Performance metrics for a single series of proportional gains.

    calc_metric(gains, 'cagr', units_year=252)
    calc_metric(gains, 'beta', benchmark_gains=spy_gains)
    rolling_metric(gains, 'sharpe', width=50)

Percent-valued metrics (mean, sd, growth, cagr, mdd, alpha,
alpha.annualized) are returned in percent. Benchmark metrics need a
benchmark series of the same length.
"""

import numpy as np
from typing import Callable, Dict, List, Optional

from scipy.stats import spearmanr

from stocks.config import CONFIG, get as get_config
from stocks.gains import gains_to_prices
from stocks.lagged import InvalidArgument, _as_series


# ---------------------------------------------------------------------------
# Single-series metrics
# ---------------------------------------------------------------------------

def _mean(g, units_year, b):
    return float(np.mean(g)) * 100


def _sd(g, units_year, b):
    if len(g) < 2:
        return np.nan
    return float(np.std(g, ddof=1)) * 100


def _growth(g, units_year, b):
    return (float(np.prod(1 + g)) - 1) * 100


def _cagr(g, units_year, b):
    return (float(np.prod(1 + g)) ** (units_year / len(g)) - 1) * 100


def _mdd(g, units_year, b):
    prices = gains_to_prices(g)
    peaks = np.maximum.accumulate(prices)
    drawdowns = (peaks - prices) / peaks
    return float(np.max(drawdowns)) * 100


def _sharpe(g, units_year, b):
    if len(g) < 2:
        return np.nan
    sd = np.std(g, ddof=1)
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.mean(g) / sd)


def _sortino(g, units_year, b):
    downside = np.sqrt(np.mean(np.minimum(g, 0) ** 2))
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(np.mean(g) / downside)


def _autocorrelation(g, method):
    if len(g) < 3:
        return np.nan
    return _correlation(g[1:], g[:-1], method)


# ---------------------------------------------------------------------------
# Benchmark metrics
# ---------------------------------------------------------------------------

def _correlation(x, y, method='pearson'):
    if method == 'spearman':
        # Ranks of a constant side are undefined.
        if np.ptp(x) == 0 or np.ptp(y) == 0:
            return np.nan
        rho = spearmanr(x, y)[0]
        return float(rho)
    xc = x - np.mean(x)
    yc = y - np.mean(y)
    denom = np.linalg.norm(xc) * np.linalg.norm(yc)
    if denom < 1e-15:
        return np.nan
    return float(np.dot(xc, yc) / denom)


def _beta(g, units_year, b):
    if len(g) < 2:
        return np.nan
    var_b = np.var(b, ddof=1)
    if var_b < 1e-30:
        return np.nan
    return float(np.cov(g, b, ddof=1)[0, 1] / var_b)


def _alpha(g, units_year, b):
    beta = _beta(g, units_year, b)
    return (float(np.mean(g)) - beta * float(np.mean(b))) * 100


def _alpha_annualized(g, units_year, b):
    alpha = _alpha(g, units_year, b) / 100
    return ((1 + alpha) ** units_year - 1) * 100


METRICS: Dict[str, Callable] = {
    'mean': _mean,
    'sd': _sd,
    'growth': _growth,
    'cagr': _cagr,
    'mdd': _mdd,
    'sharpe': _sharpe,
    'sortino': _sortino,
    'alpha': _alpha,
    'alpha.annualized': _alpha_annualized,
    'beta': _beta,
    'r.squared': lambda g, u, b: _correlation(g, b) ** 2,
    'pearson': lambda g, u, b: _correlation(g, b),
    'spearman': lambda g, u, b: _correlation(g, b, 'spearman'),
    'auto.pearson': lambda g, u, b: _autocorrelation(g, 'pearson'),
    'auto.spearman': lambda g, u, b: _autocorrelation(g, 'spearman'),
}


def metric_choices() -> List[str]:
    """All supported metric names."""
    return list(METRICS)


def needs_benchmark(metric: str) -> bool:
    return bool(get_config(f'metrics.{metric}.benchmark', False))


def check_metrics(metrics) -> List[str]:
    """Validate metric names; raise InvalidArgument naming the bad ones."""
    if isinstance(metrics, str):
        metrics = [metrics]
    invalid = [m for m in metrics if m not in METRICS]
    if invalid:
        raise InvalidArgument(
            f"The following metrics are not allowed: {', '.join(invalid)}. "
            f"Choices are: {', '.join(METRICS)}"
        )
    return list(metrics)


def _prepare(gains, metric, benchmark_gains):
    check_metrics(metric)
    gains = _as_series(gains)
    if needs_benchmark(metric):
        if benchmark_gains is None:
            raise InvalidArgument(f"metric '{metric}' requires benchmark_gains")
        benchmark_gains = _as_series(benchmark_gains)
        if len(benchmark_gains) != len(gains):
            raise InvalidArgument(
                f"benchmark_gains has length {len(benchmark_gains)}, "
                f"gains has length {len(gains)}"
            )
    return gains, benchmark_gains


def calc_metric(
    gains,
    metric: str,
    units_year: float = 252,
    benchmark_gains=None,
) -> float:
    """
    Compute one performance metric.

    Parameters
    ----------
    gains : array-like
        1D series of proportional gains (0.01 = 1%).
    metric : str
        One of metric_choices().
    units_year : float
        Observations per year (252 daily, 12 monthly, 1 yearly). Used by
        cagr and alpha.annualized.
    benchmark_gains : array-like, optional
        Required for alpha, alpha.annualized, beta, r.squared, pearson,
        spearman.

    Returns
    -------
    float — nan for an empty series.
    """
    gains, benchmark_gains = _prepare(gains, metric, benchmark_gains)
    if len(gains) == 0:
        return np.nan
    return METRICS[metric](gains, units_year, benchmark_gains)


def rolling_metric(
    gains,
    metric: str,
    width: int,
    units_year: float = 252,
    benchmark_gains=None,
) -> np.ndarray:
    """
    Metric over each trailing window of `width` gains.

    Returns
    -------
    np.ndarray of length len(gains) - width + 1; element i covers
    gains[i:i + width].
    """
    gains, benchmark_gains = _prepare(gains, metric, benchmark_gains)
    n = len(gains)
    if width < 1 or width > n:
        raise InvalidArgument(f"width {width} out of range for series of length {n}")

    func = METRICS[metric]
    out = np.empty(n - width + 1, dtype=np.float64)
    for start in range(n - width + 1):
        b = None if benchmark_gains is None else benchmark_gains[start:start + width]
        out[start] = func(gains[start:start + width], units_year, b)
    return out


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

def _info(metric: Optional[str], field: str, default):
    if metric is None:
        return None
    info = CONFIG['metrics'].get(metric)
    if info is None:
        return default
    return info.get(field, default)


def metric_title(metric: Optional[str]) -> Optional[str]:
    return _info(metric, 'title', metric)


def metric_label(metric: Optional[str]) -> Optional[str]:
    return _info(metric, 'label', metric)


def metric_units(metric: Optional[str]) -> Optional[str]:
    return _info(metric, 'units', '')


def metric_decimals(metric: Optional[str]) -> Optional[int]:
    return _info(metric, 'decimals', 2)
