"""Free-text equation parser.

Reads strings such as ``"x² - 5x + 6 = 0"`` or ``"2x + 3 = 7"`` and
extracts the coefficients of the canonical form ``ax² + bx + c = 0`` /
``ax + b = 0``.

Parsing is a fixed, ordered list of matchers rather than a grammar.  Each
matcher is a pure function ``text -> (type, coefficients) | None`` and the
first one that returns something wins.  Quadratic shapes come before the
linear ones; new shapes are supported by appending a matcher to
``MATCHERS``.
"""

import logging
import re

from solver.formatting import format_linear, format_quadratic

logger = logging.getLogger(__name__)

SUGGESTIONS = (
    "x² + 5x + 6 = 0",
    "2x² - 3x + 1 = 0",
    "x² - 4 = 0",
    "3x + 6 = 0",
)

# Both spellings of the squared term.
_SQUARES = (r"x\^2", "x²")

_COEFF = r"([+-]?\d*)\*?"
_LINEAR_COEFF = r"([+-]\d*)\*?"
_CONST = r"([+-]\d+)"


def _parse_coeff(token) -> int:
    """Map a coefficient token to an int: absent/``+`` → 1, ``-`` → -1."""
    if not token or token == "+":
        return 1
    if token == "-":
        return -1
    return int(token)


def _normalize(text: str) -> str:
    """Strip all whitespace, lower-case, and fold Unicode operators."""
    text = re.sub(r"\s+", "", text).lower()
    text = text.replace("−", "-")
    return text.replace("×", "*").replace("·", "*")


# ── Matcher factories ──────────────────────────────────────────────────

def _quadratic_matcher(square: str, linear: bool, const: bool):
    pattern = _COEFF + square
    if linear:
        pattern += _LINEAR_COEFF + "x"
    if const:
        pattern += _CONST
    regex = re.compile(pattern + "=0")

    def _match(text: str):
        m = regex.fullmatch(text)
        if m is None:
            return None
        groups = iter(m.groups())
        a = _parse_coeff(next(groups))
        b = _parse_coeff(next(groups)) if linear else 0
        c = int(next(groups)) if const else 0
        if a == 0:
            return None
        return "quadratic", {"a": a, "b": b, "c": c}

    return _match


def _linear_matcher(const: bool):
    regex = re.compile(_COEFF + "x" + (_CONST if const else "") + "=0")

    def _match(text: str):
        m = regex.fullmatch(text)
        if m is None:
            return None
        a = _parse_coeff(m.group(1))
        if a == 0:
            return None
        b = int(m.group(2)) if const else 0
        return "linear", {"a": a, "b": b}

    return _match


_LINEAR_WITH_RHS = re.compile(_COEFF + "x" + _CONST + "?=([+-]?\\d+)")


def _match_linear_with_rhs(text: str):
    """``ax + b = c`` → ``ax + (b - c) = 0``."""
    m = _LINEAR_WITH_RHS.fullmatch(text)
    if m is None:
        return None
    a = _parse_coeff(m.group(1))
    if a == 0:
        return None
    b = int(m.group(2)) if m.group(2) else 0
    return "linear", {"a": a, "b": b - int(m.group(3))}


MATCHERS = (
    # ax² + bx + c = 0
    *(_quadratic_matcher(sq, linear=True, const=True) for sq in _SQUARES),
    # ax² + c = 0
    *(_quadratic_matcher(sq, linear=False, const=True) for sq in _SQUARES),
    # ax² + bx = 0
    *(_quadratic_matcher(sq, linear=True, const=False) for sq in _SQUARES),
    # ax² = 0
    *(_quadratic_matcher(sq, linear=False, const=False) for sq in _SQUARES),
    # ax + b = 0
    _linear_matcher(const=True),
    # ax = 0
    _linear_matcher(const=False),
    # ax + b = c
    _match_linear_with_rhs,
)


# ── Public entry point ─────────────────────────────────────────────────

def parse_equation(equation_str: str) -> dict:
    """Extract coefficients from a free-text equation.

    Returns ``{"success": True, "type", "coefficients", "formatted",
    "original"}`` on the first matching shape.  When nothing matches the
    result is ``{"success": False, "error", "suggestions", "original"}``;
    an unrecognised equation is an expected outcome, not an exception.
    """
    text = _normalize(equation_str)

    for matcher in MATCHERS:
        found = matcher(text)
        if found is None:
            continue
        eq_type, coefficients = found
        if eq_type == "quadratic":
            formatted = format_quadratic(
                coefficients["a"], coefficients["b"], coefficients["c"])
        else:
            formatted = format_linear(coefficients["a"], coefficients["b"])
        return {
            "success": True,
            "type": eq_type,
            "coefficients": coefficients,
            "formatted": formatted,
            "original": equation_str,
        }

    logger.debug("No equation pattern matched %r", text)
    return {
        "success": False,
        "error": "Unrecognized equation format",
        "suggestions": list(SUGGESTIONS),
        "original": equation_str,
    }
