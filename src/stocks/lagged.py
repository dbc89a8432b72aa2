"""
Lagged transforms over a single numeric series.

Each transform compares x[i + lag] with x[i]:

    diffs     y[i] = x[i+lag] - x[i]
    pdiffs    y[i] = (x[i+lag] - x[i]) / x[i]
    pchanges  y[i] = 100 * (x[i+lag] - x[i]) / x[i]
    ratios    y[i] = x[i+1] / x[i]

Output length is always len(x) - lag. Division by zero follows IEEE-754
(inf / nan), it is not an error.
"""

import numbers

import numpy as np

from stocks.config import get as get_config


class InvalidArgument(ValueError):
    """Argument outside the domain of the operation (bad lag, bad shape, bad name)."""


def _as_series(x) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise InvalidArgument(f"x must be one-dimensional, got shape {x.shape}")
    return x


def _check_lag(lag, n: int) -> int:
    if isinstance(lag, bool) or not isinstance(lag, numbers.Integral):
        raise InvalidArgument(f"lag must be an integer, got {lag!r}")
    lag = int(lag)
    if lag < 1:
        raise InvalidArgument(f"lag must be positive, got {lag}")
    if lag >= n:
        raise InvalidArgument(f"lag {lag} out of range for series of length {n}")
    return lag


def _default_lag(lag):
    return get_config('lag.default', 1) if lag is None else lag


def diffs(x, lag: int = None) -> np.ndarray:
    """
    Lagged differences.

    Parameters
    ----------
    x : array-like
        1D series of numbers.
    lag : int
        Offset between compared elements (default from config, normally 1).

    Returns
    -------
    np.ndarray of length len(x) - lag.

    Raises
    ------
    InvalidArgument
        If lag < 1 or lag >= len(x).
    """
    x = _as_series(x)
    lag = _check_lag(_default_lag(lag), len(x))
    return x[lag:] - x[:-lag]


def pdiffs(x, lag: int = None) -> np.ndarray:
    """Proportional differences, (x[i+lag] - x[i]) / x[i]."""
    x = _as_series(x)
    lag = _check_lag(_default_lag(lag), len(x))
    with np.errstate(divide='ignore', invalid='ignore'):
        return (x[lag:] - x[:-lag]) / x[:-lag]


def pchanges(x, lag: int = None) -> np.ndarray:
    """Percent changes, 100 * pdiffs(x, lag)."""
    x = _as_series(x)
    lag = _check_lag(_default_lag(lag), len(x))
    with np.errstate(divide='ignore', invalid='ignore'):
        return 100.0 * ((x[lag:] - x[:-lag]) / x[:-lag])


def ratios(x) -> np.ndarray:
    """Ratio of each element to its predecessor (lag fixed at 1)."""
    x = _as_series(x)
    _check_lag(1, len(x))
    with np.errstate(divide='ignore', invalid='ignore'):
        return x[1:] / x[:-1]
