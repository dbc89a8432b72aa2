"""
Stocks Configuration
====================
Defaults for lag handling, time units, windowed metrics and plotting.
Single source of truth. Every module reads from here at call time.

Usage:
    from stocks.config import CONFIG, get
    units = get('units_year.day')   → 252

    # Override from YAML at start-up
    from stocks.config import load
    load('~/stocks.yaml')
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


def _metric(title, label, units='', decimals=2, benchmark=False):
    return {
        'title': title,
        'label': label,
        'units': units,
        'decimals': decimals,
        'benchmark': benchmark,
    }


CONFIG = {

    # =================================================================
    # Lagged transforms
    # =================================================================
    'lag': {
        'default': 1,
    },

    # =================================================================
    # Observations per year, by sampling unit
    # =================================================================
    'units_year': {
        'day': 252,
        'month': 12,
        'year': 1,
    },

    # =================================================================
    # Metrics over time
    # =================================================================
    'overtime': {
        'minimum_n': 3,
        'default_type': 'hop.year',
        'date_sample': 10,             # dates inspected to infer time units
        'daily_max_gap_days': 1,
        'monthly_max_gap_days': 30,
    },

    # =================================================================
    # Performance metrics (presentation + benchmark requirement)
    # =================================================================
    'metrics': {
        'mean': _metric('Mean of gains', 'Mean (%)', units='%'),
        'sd': _metric('SD of gains', 'SD (%)', units='%'),
        'growth': _metric('Growth', 'Growth (%)', units='%', decimals=1),
        'cagr': _metric('CAGR', 'CAGR (%)', units='%', decimals=1),
        'mdd': _metric('Max drawdown', 'MDD (%)', units='%', decimals=1),
        'sharpe': _metric('Sharpe ratio', 'Sharpe ratio', decimals=3),
        'sortino': _metric('Sortino ratio', 'Sortino ratio', decimals=3),
        'alpha': _metric('Alpha', 'Alpha (%)', units='%', decimals=3, benchmark=True),
        'alpha.annualized': _metric('Annualized alpha', 'Annualized alpha (%)',
                                    units='%', decimals=1, benchmark=True),
        'beta': _metric('Beta', 'Beta', decimals=3, benchmark=True),
        'r.squared': _metric('R-squared', 'R-squared', decimals=3, benchmark=True),
        'pearson': _metric('Pearson correlation', 'Pearson cor.', decimals=3, benchmark=True),
        'spearman': _metric('Spearman correlation', 'Spearman cor.', decimals=3, benchmark=True),
        'auto.pearson': _metric('Autocorrelation', 'Pearson autocorrelation', decimals=3),
        'auto.spearman': _metric('Autocorrelation', 'Spearman autocorrelation', decimals=3),
    },

    # =================================================================
    # Plotting
    # =================================================================
    'plot': {
        'base_size': 16,
        'figsize': (9, 6),
    },
}


def get(path: str, default=None):
    """
    Get a config value by dot-separated path.

    Metric names contain dots themselves, so once the walk reaches a dict
    that holds the remaining path as a single key, that key wins.

    Usage:
        get('units_year.month')               → 12
        get('metrics.alpha.annualized.label') → 'Annualized alpha (%)'
    """
    keys = path.split('.')
    val = CONFIG
    i = 0
    while i < len(keys):
        if not isinstance(val, dict):
            return default
        for j in range(len(keys), i, -1):
            key = '.'.join(keys[i:j])
            if key in val:
                val = val[key]
                i = j
                break
        else:
            return default
    return val


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


def load(path) -> Dict[str, Any]:
    """
    Merge a YAML file of overrides into CONFIG.

    Only existing top-level sections may be overridden. Returns CONFIG.
    """
    from stocks.lagged import InvalidArgument

    path = Path(path).expanduser()
    with open(path) as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise InvalidArgument(f"config file {path} must contain a mapping")

    unknown = sorted(set(overrides) - set(CONFIG))
    if unknown:
        raise InvalidArgument(
            f"unknown config section(s) in {path}: {', '.join(unknown)}"
        )

    _merge(CONFIG, overrides)
    logger.info(f"Loaded config overrides from {path}: {sorted(overrides)}")
    return CONFIG
