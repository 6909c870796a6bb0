"""
SymSolver math engine.

Pure functions for equation solving, equation parsing, descriptive
statistics, regression/correlation and normalisation.  Each call is
independent; nothing is kept between calls.
"""

from solver.engine import solve_linear, solve_quadratic, solve_system_2x2
from solver.errors import (
    DegenerateInput,
    InvalidCoefficient,
    MalformedSample,
    MathEngineError,
    SingularSystem,
)
from solver.formatting import (
    format_complex,
    format_linear,
    format_number,
    format_quadratic,
    format_regression_line,
    format_system_row,
)
from solver.normalize import NORMALIZATION_METHODS, denormalize, normalize
from solver.parser import parse_equation
from solver.regression import (
    correlation,
    correlation_matrix,
    interpret_correlation,
    linear_regression,
    p_value,
)
from solver.stats import (
    describe,
    kurtosis,
    outliers,
    quartiles,
    skewness,
    summarize,
    validate_sample,
)

__version__ = "2.0.0"

__all__ = [
    # Equations
    "solve_linear",
    "solve_quadratic",
    "solve_system_2x2",
    "parse_equation",
    # Formatting
    "format_number",
    "format_linear",
    "format_quadratic",
    "format_system_row",
    "format_regression_line",
    "format_complex",
    # Statistics
    "validate_sample",
    "describe",
    "summarize",
    "quartiles",
    "outliers",
    "skewness",
    "kurtosis",
    "linear_regression",
    "correlation",
    "correlation_matrix",
    "interpret_correlation",
    "p_value",
    "normalize",
    "denormalize",
    "NORMALIZATION_METHODS",
    # Errors
    "MathEngineError",
    "InvalidCoefficient",
    "SingularSystem",
    "DegenerateInput",
    "MalformedSample",
]
