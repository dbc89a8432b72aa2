"""Conversions between price series and proportional gains."""

import numpy as np

from stocks.lagged import InvalidArgument, _as_series, pdiffs


def prices_to_gains(prices) -> np.ndarray:
    """Proportional gain from each price to the next (length n - 1)."""
    return pdiffs(prices, 1)


def gains_to_prices(gains, initial: float = 1.0) -> np.ndarray:
    """
    Rebuild a price path from proportional gains.

    p[0] = initial, p[i+1] = p[i] * (1 + gains[i]). Length len(gains) + 1.
    A NaN gain makes every later price NaN.
    """
    gains = _as_series(gains)
    prices = np.empty(len(gains) + 1, dtype=np.float64)
    prices[0] = initial
    np.cumprod(1.0 + gains, out=prices[1:])
    prices[1:] *= initial
    return prices


def gains_rate(gains, units_in: float = 1, units_out: float = 252):
    """
    Convert a compounded gain over `units_in` periods to `units_out` periods.

    e.g. gains_rate(0.001, 1, 252) turns a daily gain into an annual one.
    Works elementwise on arrays.
    """
    if units_in <= 0 or units_out <= 0:
        raise InvalidArgument(
            f"units must be positive, got units_in={units_in}, units_out={units_out}"
        )
    return (1.0 + np.asarray(gains, dtype=np.float64)) ** (units_out / units_in) - 1.0
