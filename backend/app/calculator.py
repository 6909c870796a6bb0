"""
Scientific expression calculator backed by SymPy.

Evaluates strings such as ``"sin(pi/2) + cos(0)"`` or ``"sqrt(16) + log(100, 10)"``
to a real number.  This is the API's external evaluator: it only ever
sees arithmetic over a fixed set of functions and constants.
"""

import math
import re

import sympy
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor
)

TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)


def _round_half_away(value):
    return sympy.sign(value) * sympy.floor(sympy.Abs(value) + sympy.Rational(1, 2))


FUNCTIONS = {
    "sqrt": sympy.sqrt,
    "abs": sympy.Abs,
    "ceil": sympy.ceiling,
    "floor": sympy.floor,
    "round": _round_half_away,
    "pow": sympy.Pow,
    "sin": sympy.sin,
    "cos": sympy.cos,
    "tan": sympy.tan,
    "asin": sympy.asin,
    "acos": sympy.acos,
    "atan": sympy.atan,
    "log": sympy.log,
    "ln": sympy.log,
    "log10": lambda value: sympy.log(value, 10),
    "exp": sympy.exp,
}

CONSTANTS = {
    "pi": sympy.pi,
    "e": sympy.E,
}

FUNCTION_CATALOG = {
    "basic": [
        "sqrt(x) - Square root",
        "abs(x) - Absolute value",
        "ceil(x) - Round up",
        "floor(x) - Round down",
        "round(x) - Round to nearest integer",
        "pow(x, y) - Power",
    ],
    "trigonometric": [
        "sin(x) - Sine",
        "cos(x) - Cosine",
        "tan(x) - Tangent",
        "asin(x) - Arc sine",
        "acos(x) - Arc cosine",
        "atan(x) - Arc tangent",
    ],
    "logarithmic": [
        "log(x) - Natural logarithm",
        "log10(x) - Base-10 logarithm",
        "log(x, base) - Logarithm with base",
        "exp(x) - Exponential",
    ],
    "constants": [
        "pi - π (3.14159...)",
        "e - Euler's number (2.71828...)",
    ],
    "examples": [
        "sin(pi/2) = 1",
        "sqrt(16) = 4",
        "log10(100) = 2",
        "pow(2, 3) = 8",
    ],
}

_ALLOWED_CHARS = set("abcdefghijklmnopqrstuvwxyz0123456789 \t+-*/^().,!%")
_NUMBER = re.compile(r"(?<![a-z0-9])(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?")
_NAME = re.compile(r"[a-z][a-z0-9]*")


def _prepare(expression: str) -> str:
    """Fold display operators into parser syntax and lower-case."""
    s = expression.strip().lower()
    s = s.replace("×", "*").replace("÷", "/")
    # √16 → sqrt(16); a bare √ before "(" just becomes sqrt
    s = re.sub(r"√(\d+(?:\.\d+)?)", r"sqrt(\1)", s)
    return s.replace("√", "sqrt")


def _validate(s: str) -> None:
    """Reject characters and names outside the calculator's vocabulary."""
    bad = {ch for ch in s if ch not in _ALLOWED_CHARS}
    if bad:
        raise ValueError(f"Invalid character(s): {' '.join(sorted(bad))}")
    for name in _NAME.findall(_NUMBER.sub(" ", s)):
        if name not in FUNCTIONS and name not in CONSTANTS:
            raise ValueError(f"Unknown function or constant: '{name}'")


def _to_real(value) -> float:
    if value.free_symbols:
        raise ValueError("Expression contains unknown symbols.")
    if value.has(sympy.zoo, sympy.oo, -sympy.oo, sympy.nan):
        raise ValueError("The result is infinite or undefined.")
    number = complex(value)
    if abs(number.imag) > 1e-12:
        raise ValueError("The result is not a real number.")
    if not math.isfinite(number.real):
        raise ValueError("The result is infinite or undefined.")
    return number.real


def _evaluate(expression: str) -> float:
    s = _prepare(expression)
    if not s:
        raise ValueError("Expression is required.")
    _validate(s)
    local = dict(FUNCTIONS)
    local.update(CONSTANTS)
    try:
        expr = parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS)
        value = sympy.N(expr, 15)
    except Exception as e:
        raise ValueError(f"Could not parse expression: '{expression}'. Error: {e}")
    return _to_real(value)


def _format_result(value: float, precision: int = 10) -> str:
    formatted = f"{value:.{precision}g}"
    return "0" if formatted == "-0" else formatted


def evaluate_expression(expression: str) -> dict:
    """Evaluate *expression* to a real number.

    Returns ``{result, expression, formatted, type}``.  Raises
    ``ValueError`` for invalid characters, unknown names, syntax errors,
    and non-real or non-finite results.
    """
    result = _evaluate(expression)
    return {
        "result": result,
        "expression": expression,
        "formatted": _format_result(result),
        "type": "number",
    }


def validate_expression(expression: str) -> dict:
    """Check *expression* without raising; invalid input yields suggestions."""
    try:
        result = _evaluate(expression)
    except ValueError as e:
        message = str(e)
        suggestions = []
        if "parse" in message or "Invalid character" in message:
            suggestions.append("Check parentheses and operators")
        if "Unknown function" in message:
            suggestions.append("Unrecognised function, see /api/calculate/functions")
        return {
            "valid": False,
            "message": "Invalid expression",
            "error": message,
            "suggestions": suggestions,
        }
    return {
        "valid": True,
        "message": "Valid expression",
        "preview": _format_result(result, precision=4),
        "suggestions": [],
    }
