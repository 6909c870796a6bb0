"""Simple linear regression and correlation.

Provides:
- ordinary least-squares fits of ``y = slope·x + intercept`` with error
  metrics and per-point residuals,
- Pearson (and rank-based Spearman) correlation of two samples, and
- a correlation matrix with two-tailed p-values and a plain-language
  reading of each pair.
"""

import math
from typing import Dict, List, Optional

import numpy as np
from scipy.stats import rankdata
from scipy.stats import t as student_t

from solver.errors import DegenerateInput, MalformedSample
from solver.formatting import format_regression_line
from solver.stats import validate_sample

CORRELATION_METHODS = ("pearson", "spearman")

# Upper bounds (exclusive) of |r| for each strength label.
WEAK_LIMIT = 0.3
MODERATE_LIMIT = 0.7


def _split_points(points):
    """Accept ``[{"x": .., "y": ..}, ...]`` or ``[(x, y), ...]``."""
    xs, ys = [], []
    for i, point in enumerate(points):
        try:
            if isinstance(point, dict):
                x, y = point["x"], point["y"]
            else:
                x, y = point
        except (KeyError, TypeError, ValueError):
            raise MalformedSample(
                f"Data point {i} must provide both an x and a y value.") from None
        xs.append(x)
        ys.append(y)
    return xs, ys


def _paired_arrays(x, y):
    x_arr = validate_sample(x, min_size=2, name="x sample")
    y_arr = validate_sample(y, min_size=2, name="y sample")
    if len(x_arr) != len(y_arr):
        raise MalformedSample(
            f"Samples must have the same length ({len(x_arr)} != {len(y_arr)}).")
    return x_arr, y_arr


def correlation(x, y, method: str = "pearson") -> float:
    """Correlation coefficient of two equal-length samples.

    ``method="pearson"`` is the product-moment coefficient;
    ``method="spearman"`` is Pearson applied to average ranks.  A sample
    with zero variance raises :class:`DegenerateInput` instead of
    producing NaN.
    """
    if method not in CORRELATION_METHODS:
        raise ValueError(
            f"Unknown correlation method '{method}'. "
            f"Available: {', '.join(CORRELATION_METHODS)}")
    x_arr, y_arr = _paired_arrays(x, y)
    if method == "spearman":
        x_arr, y_arr = rankdata(x_arr), rankdata(y_arr)

    # A constant float sample leaves rounding residue in sxx and syy.
    if np.ptp(x_arr) == 0 or np.ptp(y_arr) == 0:
        raise DegenerateInput("Correlation is undefined when a sample has zero variance.")

    dx = x_arr - np.mean(x_arr)
    dy = y_arr - np.mean(y_arr)
    sxx = float(np.sum(dx ** 2))
    syy = float(np.sum(dy ** 2))

    r = float(np.sum(dx * dy)) / math.sqrt(sxx * syy)
    # Rounding can push |r| a hair past 1 for perfectly linear data.
    return max(-1.0, min(1.0, r))


def p_value(r: float, n: int) -> Optional[float]:
    """Two-tailed p-value for a correlation ``r`` over ``n`` pairs.

    Uses ``t = r·√((n−2)/(1−r²))`` against Student's t with ``n − 2``
    degrees of freedom.  Returns ``None`` when ``n <= 2`` (no degrees of
    freedom) and ``0.0`` for a perfect correlation.
    """
    dof = n - 2
    if dof <= 0:
        return None
    if abs(r) >= 1.0:
        return 0.0
    t_stat = r * math.sqrt(dof / (1.0 - r * r))
    return float(2.0 * student_t.sf(abs(t_stat), dof))


def interpret_correlation(r: float) -> Dict[str, str]:
    """Label ``r`` as weak / moderate / strong and positive / negative."""
    magnitude = abs(r)
    if magnitude < WEAK_LIMIT:
        strength = "weak"
    elif magnitude < MODERATE_LIMIT:
        strength = "moderate"
    else:
        strength = "strong"
    direction = "positive" if r > 0 else "negative"
    return {"strength": strength, "direction": direction}


def correlation_matrix(named_samples: Dict[str, List[float]],
                       method: str = "pearson") -> dict:
    """Pairwise correlations between named, equal-length samples.

    Returns ``correlation_matrix`` and ``p_values`` as nested dicts keyed
    by variable name, an ``interpretation`` per unordered pair (key
    ``"<a>_<b>"``), plus ``variables``, ``sample_size`` and ``method``.
    Diagonal entries are fixed at 1.0 (p-value 0.0) and never computed.
    """
    if not isinstance(named_samples, dict) or len(named_samples) < 2:
        raise MalformedSample("At least two variables are required.")

    variables = list(named_samples)
    arrays = {
        name: validate_sample(named_samples[name], min_size=2, name=f"variable '{name}'")
        for name in variables
    }
    lengths = {len(arr) for arr in arrays.values()}
    if len(lengths) != 1:
        raise MalformedSample("All variables must have the same number of observations.")
    n = lengths.pop()

    matrix = {name: {} for name in variables}
    p_values = {name: {} for name in variables}
    interpretation = {}

    for i, var1 in enumerate(variables):
        matrix[var1][var1] = 1.0
        p_values[var1][var1] = 0.0
        for var2 in variables[i + 1:]:
            r = correlation(arrays[var1], arrays[var2], method=method)
            p = p_value(r, n)
            matrix[var1][var2] = matrix[var2][var1] = r
            p_values[var1][var2] = p_values[var2][var1] = p

            label = interpret_correlation(r)
            interpretation[f"{var1}_{var2}"] = {
                "correlation": r,
                "strength": label["strength"],
                "direction": label["direction"],
                "description": (
                    f"{label['strength'].capitalize()} {label['direction']} "
                    f"correlation between {var1} and {var2}"
                ),
            }

    return {
        "correlation_matrix": matrix,
        "p_values": p_values,
        "interpretation": interpretation,
        "variables": variables,
        "sample_size": n,
        "method": method,
    }


def linear_regression(points) -> dict:
    """Fit ``y = slope·x + intercept`` by ordinary least squares.

    *points* is a sequence of ``{"x", "y"}`` mappings or ``(x, y)`` pairs
    (at least two).  Raises :class:`DegenerateInput` when every x is the
    same, since the slope denominator ``Σ(x−x̄)²`` is then zero.

    Returns ``equation``, ``coefficients`` (slope, intercept), ``metrics``
    (correlation, r_squared, mse, rmse, mae), per-point ``predictions``
    and a ``summary`` (data_points, mean_x, mean_y).
    """
    xs, ys = _split_points(points)
    x_arr, y_arr = _paired_arrays(xs, ys)

    if np.ptp(x_arr) == 0:
        raise DegenerateInput("Cannot fit a regression line: all x values are identical.")

    mean_x = float(np.mean(x_arr))
    mean_y = float(np.mean(y_arr))
    dx = x_arr - mean_x
    denominator = float(np.sum(dx ** 2))

    slope = float(np.sum(dx * (y_arr - mean_y))) / denominator
    intercept = mean_y - slope * mean_x

    predicted = slope * x_arr + intercept
    residuals = y_arr - predicted
    mse = float(np.mean(residuals ** 2))

    r = correlation(x_arr, y_arr)
    equation = format_regression_line(slope, intercept)

    predictions = [
        {
            "x": float(xv),
            "y_actual": float(yv),
            "y_predicted": float(pv),
            "residual": float(rv),
        }
        for xv, yv, pv, rv in zip(x_arr, y_arr, predicted, residuals)
    ]

    return {
        "equation": equation,
        "coefficients": {"slope": slope, "intercept": intercept},
        "metrics": {
            "correlation": r,
            "r_squared": r * r,
            "mse": mse,
            "rmse": math.sqrt(mse),
            "mae": float(np.mean(np.abs(residuals))),
        },
        "predictions": predictions,
        "summary": {
            "data_points": len(x_arr),
            "mean_x": mean_x,
            "mean_y": mean_y,
        },
    }
