"""Rescaling of a numeric sample (z-score, min-max, robust/IQR)."""

import numpy as np

from solver.errors import DegenerateInput
from solver.stats import quartiles, summarize, validate_sample

NORMALIZATION_METHODS = ("zscore", "minmax", "robust")


def _zscore(arr):
    # A constant float sample has a tiny non-zero std from mean rounding.
    if np.ptp(arr) == 0:
        raise DegenerateInput("Z-score normalization needs a non-zero standard deviation.")
    mean = float(np.mean(arr))
    std = float(np.std(arr))
    return (arr - mean) / std, {"mean": mean, "std": std}


def _minmax(arr):
    lo = float(np.min(arr))
    hi = float(np.max(arr))
    span = hi - lo
    if span == 0:
        raise DegenerateInput("Min-max normalization needs max > min.")
    return (arr - lo) / span, {"min": lo, "max": hi, "range": span}


def _robust(arr):
    median = float(np.median(arr))
    q = quartiles(np.sort(arr))
    if q["iqr"] == 0:
        raise DegenerateInput("Robust normalization needs a non-zero interquartile range.")
    params = {"median": median, "q1": q["q1"], "q3": q["q3"], "iqr": q["iqr"]}
    return (arr - median) / q["iqr"], params


_SCALERS = {
    "zscore": _zscore,
    "minmax": _minmax,
    "robust": _robust,
}


def normalize(sample, method: str = "zscore") -> dict:
    """Rescale *sample* with ``zscore``, ``minmax`` or ``robust``.

    Returns the ``normalized`` values (input order preserved), the
    ``method``, the ``parameters`` needed to undo the transform (see
    :func:`denormalize`) and before/after ``statistics``.  A sample without
    the spread a method needs raises :class:`DegenerateInput`.
    """
    if method not in _SCALERS:
        raise ValueError(
            f"Invalid normalization method '{method}'. "
            f"Available methods: {', '.join(NORMALIZATION_METHODS)}")
    arr = validate_sample(sample)
    scaled, parameters = _SCALERS[method](arr)
    return {
        "normalized": [float(v) for v in scaled],
        "method": method,
        "parameters": parameters,
        "statistics": {
            "original": summarize(arr),
            "normalized": summarize(scaled),
        },
    }


def denormalize(values, method: str, parameters: dict) -> list:
    """Map normalized *values* back to the original scale."""
    arr = validate_sample(values)
    if method == "zscore":
        restored = arr * parameters["std"] + parameters["mean"]
    elif method == "minmax":
        restored = arr * parameters["range"] + parameters["min"]
    elif method == "robust":
        restored = arr * parameters["iqr"] + parameters["median"]
    else:
        raise ValueError(
            f"Invalid normalization method '{method}'. "
            f"Available methods: {', '.join(NORMALIZATION_METHODS)}")
    return [float(v) for v in restored]
