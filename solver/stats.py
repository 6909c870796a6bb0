"""Descriptive statistics over a single numeric sample.

Variance and standard deviation are population statistics (no Bessel
correction).  Quartiles are index-based, ``sorted[floor(n·p)]`` with no
interpolation, and the IQR outlier fence and robust normalisation are
built on them.
"""

import math
import numbers
from collections import Counter

import numpy as np

from solver.errors import DegenerateInput, MalformedSample


def validate_sample(sample, min_size: int = 1, name: str = "sample") -> np.ndarray:
    """Check *sample* before any arithmetic and return it as a float array.

    Raises :class:`MalformedSample` when the sample is shorter than
    *min_size* or holds anything that is not a finite real number
    (booleans and numeric strings included).
    """
    if sample is None or isinstance(sample, (str, bytes)):
        raise MalformedSample(f"The {name} must be a list of numbers.")
    values = list(sample)
    if len(values) < min_size:
        raise MalformedSample(
            f"The {name} needs at least {min_size} value(s), got {len(values)}.")
    for i, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise MalformedSample(
                f"Value at position {i} of the {name} is not a number: {value!r}")
        if not math.isfinite(value):
            raise MalformedSample(
                f"Value at position {i} of the {name} is not finite: {value!r}")
    return np.asarray(values, dtype=float)


def _mode(values) -> float:
    """Most frequent value; ties go to the smallest one."""
    counts = Counter(values)
    top = max(counts.values())
    return min(v for v, count in counts.items() if count == top)


def quartiles(sorted_sample) -> dict:
    """Index-based quartiles of an ascending sample.

    ``q1 = s[floor(n·0.25)]``, ``q2 = s[floor(n·0.5)]``,
    ``q3 = s[floor(n·0.75)]``.  The caller is responsible for sorting.
    """
    n = len(sorted_sample)
    if n == 0:
        raise MalformedSample("Quartiles need at least one value.")
    q1 = float(sorted_sample[math.floor(n * 0.25)])
    q2 = float(sorted_sample[math.floor(n * 0.5)])
    q3 = float(sorted_sample[math.floor(n * 0.75)])
    return {"q1": q1, "q2": q2, "q3": q3, "iqr": q3 - q1}


def outliers(sorted_sample) -> list:
    """Values outside ``[q1 − 1.5·IQR, q3 + 1.5·IQR]``, in ascending order."""
    q = quartiles(sorted_sample)
    lower = q["q1"] - 1.5 * q["iqr"]
    upper = q["q3"] + 1.5 * q["iqr"]
    return [float(v) for v in sorted_sample if v < lower or v > upper]


def _moment_inputs(sample, mean, std, min_size: int, what: str):
    arr = validate_sample(sample, name=what)
    n = len(arr)
    if n < min_size:
        raise MalformedSample(
            f"{what.capitalize()} needs more than {min_size - 1} values, got {n}.")
    # A constant float sample still gets a rounding-sized std from its mean.
    if np.ptp(arr) == 0:
        raise DegenerateInput(f"{what.capitalize()} is undefined when all values are equal.")
    if mean is None:
        mean = float(np.mean(arr))
    if std is None:
        std = float(np.std(arr))
    if std <= 0:
        raise DegenerateInput(f"{what.capitalize()} is undefined when all values are equal.")
    return arr, n, (arr - mean) / std


def skewness(sample, mean=None, std=None) -> float:
    """Bias-corrected sample skewness ``n/((n−1)(n−2)) · Σz³``.

    *mean* and *std* default to the sample's own (population) values.
    Requires n > 2 and a non-zero standard deviation.
    """
    _, n, z = _moment_inputs(sample, mean, std, 3, "skewness")
    return float(n / ((n - 1) * (n - 2)) * np.sum(z ** 3))


def kurtosis(sample, mean=None, std=None) -> float:
    """Bias-corrected excess kurtosis.

    ``n(n+1)/((n−1)(n−2)(n−3)) · Σz⁴ − 3(n−1)²/((n−2)(n−3))``.
    Requires n > 3 and a non-zero standard deviation.
    """
    _, n, z = _moment_inputs(sample, mean, std, 4, "kurtosis")
    lead = (n * (n + 1)) / ((n - 1) * (n - 2) * (n - 3))
    tail = (3 * (n - 1) ** 2) / ((n - 2) * (n - 3))
    return float(lead * np.sum(z ** 4) - tail)


def summarize(sample) -> dict:
    """Compact ``{mean, std, min, max}`` block of a validated sample."""
    arr = np.asarray(sample, dtype=float)
    return {
        "mean": float(np.mean(arr)),
        "std": float(np.std(arr)),
        "min": float(np.min(arr)),
        "max": float(np.max(arr)),
    }


def describe(sample) -> dict:
    """Full descriptive summary of *sample*.

    Returns count, mean, median, mode, min, max, range, variance,
    standard_deviation, quartiles, outliers and a ``distribution`` block
    with skewness and kurtosis.  Those two are ``None`` when the sample
    is too small for them or has zero spread; the rest is always filled.
    """
    arr = validate_sample(sample)
    ordered = np.sort(arr)
    n = len(arr)
    spread = ordered[-1] > ordered[0]
    mean = float(np.mean(arr))
    # Constant samples get exact zeros, not mean-rounding residue.
    variance = float(np.var(arr)) if spread else 0.0
    std = float(np.std(arr)) if spread else 0.0

    skew = skewness(arr, mean, std) if n > 2 and spread else None
    kurt = kurtosis(arr, mean, std) if n > 3 and spread else None

    return {
        "count": n,
        "mean": mean,
        "median": float(np.median(arr)),
        "mode": float(_mode(arr.tolist())),
        "min": float(ordered[0]),
        "max": float(ordered[-1]),
        "range": float(ordered[-1] - ordered[0]),
        "variance": variance,
        "standard_deviation": std,
        "quartiles": quartiles(ordered),
        "outliers": outliers(ordered),
        "distribution": {"skewness": skew, "kurtosis": kurt},
    }
