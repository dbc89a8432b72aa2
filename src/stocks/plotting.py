"""
Plot metrics over time with matplotlib.

Draws what metrics_overtime() produced. No calculations here.
"""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from stocks.config import get as get_config
from stocks.lagged import InvalidArgument
from stocks.metrics import metric_label, metric_title


def _zero_anchored(values: pd.Series):
    """Axis limits spanning 0 and the finite values, padded 1%. None if nothing to span."""
    values = values[np.isfinite(values.astype(float))]
    if len(values) == 0:
        return None
    lo = min(0.0, float(values.min())) * 1.01
    hi = max(0.0, float(values.max())) * 1.01
    if lo == hi:
        return None
    return lo, hi


def _column(df: pd.DataFrame, metric: str) -> str:
    label = metric_label(metric)
    if label in df.columns:
        return label
    if metric in df.columns:
        return metric
    raise InvalidArgument(
        f"metric '{metric}' not found in data (columns: {', '.join(map(str, df.columns))})"
    )


def plot_metrics_overtime(
    df: pd.DataFrame,
    y_metric: str,
    x_metric: Optional[str] = None,
    title: Optional[str] = None,
    base_size: Optional[float] = None,
    ax=None,
):
    """
    Plot one metric over time, or one metric against another over time.

    With only y_metric the metric is drawn against each period's End date.
    With x_metric too, periods are joined in time order as a path in the
    (x, y) plane and the first period is marked. Metric axes always span 0.

    Returns the matplotlib Axes.
    """
    if base_size is None:
        base_size = get_config('plot.base_size', 16)

    y_col = _column(df, y_metric)
    x_col = _column(df, x_metric) if x_metric is not None else None
    df = df.sort_values('End date')

    if ax is None:
        _, ax = plt.subplots(figsize=get_config('plot.figsize', (9, 6)))

    if x_col is None:
        ax.plot(df['End date'], df[y_col], marker='o')
        ax.set_xlabel('End date', fontsize=base_size * 0.8)
        default_title = f"{metric_title(y_metric)} over Time"
    else:
        ax.plot(df[x_col], df[y_col], marker='o')
        if len(df) > 0:
            ax.scatter(df[x_col].iloc[:1], df[y_col].iloc[:1], s=120,
                       facecolors='none', edgecolors='black', label='Start')
        ax.set_xlabel(x_col, fontsize=base_size * 0.8)
        default_title = f"{metric_title(y_metric)} vs. {metric_title(x_metric)}"

    ylim = _zero_anchored(df[y_col])
    if ylim is not None:
        ax.set_ylim(*ylim)
    if x_col is not None:
        xlim = _zero_anchored(df[x_col])
        if xlim is not None:
            ax.set_xlim(*xlim)

    ax.set_ylabel(y_col, fontsize=base_size * 0.8)
    ax.set_title(title if title is not None else default_title, fontsize=base_size)
    ax.grid(True, alpha=0.3)
    return ax
