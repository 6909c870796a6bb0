"""Numeric solver for linear, quadratic and 2×2 linear-system equations.

Every entry point takes plain coefficients and returns a result dict with
the solution(s), a re-substitution check and human-readable steps in the
same ``{description, expression, step_number}`` trail format used across
SymSolver.  Nothing is cached between calls.
"""

import logging
import math

from solver.errors import InvalidCoefficient, SingularSystem
from solver.formatting import (
    format_complex,
    format_linear,
    format_number,
    format_quadratic,
    format_system_row,
)

logger = logging.getLogger(__name__)

# Residuals smaller than this are floating-point noise and reported as 0.
NOISE_TOLERANCE = 1e-10
# Looser bound used to flag a substituted root as valid.
VALID_TOLERANCE = 1e-6
# Determinants below this magnitude are treated as singular.
SINGULAR_TOLERANCE = 1e-10


def _clamp_noise(value: float) -> float:
    return 0.0 if abs(value) < NOISE_TOLERANCE else value


def _number_steps(steps: list) -> list:
    for i, step in enumerate(steps, start=1):
        step["step_number"] = i
    return steps


# ── ax + b = 0 ──────────────────────────────────────────────────────────

def solve_linear(a: float, b: float) -> dict:
    """Solve ``a·x + b = 0``.

    Returns ``x`` and ``verification`` (the residual ``a·x + b``, clamped
    to exactly 0 below 1e-10).  Raises :class:`InvalidCoefficient` when
    ``a`` is zero.
    """
    if a == 0:
        raise InvalidCoefficient('Coefficient "a" cannot be zero in a linear equation.')

    equation = format_linear(a, b)
    x = -b / a
    verification = _clamp_noise(a * x + b)

    steps = [
        {"description": "Starting with the equation", "expression": equation},
        {"description": "Isolate x", "expression": "x = -b / a"},
        {
            "description": "Substitute the coefficients",
            "expression": f"x = -({format_number(b)}) / ({format_number(a)})",
        },
        {"description": "Compute the solution", "expression": f"x = {format_number(x)}"},
    ]

    return {
        "equation": equation,
        "coefficients": {"a": a, "b": b},
        "x": x,
        "verification": verification,
        "steps": _number_steps(steps),
    }


# ── ax² + bx + c = 0 ────────────────────────────────────────────────────

def _verify_roots(a: float, b: float, c: float, roots: list) -> list:
    """Substitute each real root back into ``a·x² + b·x + c``."""
    checks = []
    for x in roots:
        result = a * x * x + b * x + c
        checks.append({
            "x": x,
            "verification": _clamp_noise(result),
            "is_valid": abs(result) < VALID_TOLERANCE,
        })
    return checks


def solve_quadratic(a: float, b: float, c: float) -> dict:
    """Solve ``a·x² + b·x + c = 0`` with the discriminant ``Δ = b² − 4ac``.

    - Δ > 0 → ``type "two_real"``, two roots sorted ascending.
    - Δ = 0 → ``type "one_real"``, a single-element list (a double root
      is never repeated).
    - Δ < 0 → ``type "complex"``, the conjugate pair as
      ``{"real", "imag"}`` mappings and ``verification`` set to ``None``.

    Raises :class:`InvalidCoefficient` when ``a`` is zero.
    """
    if a == 0:
        raise InvalidCoefficient(
            'Coefficient "a" cannot be zero (the equation would not be quadratic).')

    equation = format_quadratic(a, b, c)
    discriminant = b * b - 4 * a * c

    steps = [
        {"description": "Starting with the equation", "expression": equation},
        {"description": "Discriminant formula", "expression": "Δ = b² - 4ac"},
        {
            "description": "Substitute the coefficients",
            "expression": (
                f"Δ = ({format_number(b)})² - 4({format_number(a)})({format_number(c)})"
            ),
        },
        {
            "description": "Evaluate the discriminant",
            "expression": (
                f"Δ = {format_number(b * b)} - {format_number(4 * a * c)}"
                f" = {format_number(discriminant)}"
            ),
        },
    ]

    if discriminant > 0:
        sqrt_d = math.sqrt(discriminant)
        x1 = (-b + sqrt_d) / (2 * a)
        x2 = (-b - sqrt_d) / (2 * a)
        solutions = sorted([x1, x2])
        eq_type = "two_real"
        steps.append({
            "description": "Δ > 0: two distinct real roots",
            "expression": f"x₁ = ({format_number(-b)} + √{format_number(discriminant)}) / "
                          f"{format_number(2 * a)} = {x1:.4f}",
        })
        steps.append({
            "description": "Second root",
            "expression": f"x₂ = ({format_number(-b)} - √{format_number(discriminant)}) / "
                          f"{format_number(2 * a)} = {x2:.4f}",
        })
    elif discriminant == 0:
        x = -b / (2 * a)
        solutions = [x]
        eq_type = "one_real"
        steps.append({
            "description": "Δ = 0: one repeated real root",
            "expression": f"x = {format_number(-b)} / {format_number(2 * a)} = {x:.4f}",
        })
    else:
        real = -b / (2 * a)
        imag = math.sqrt(-discriminant) / (2 * a)
        solutions = [
            {"real": real, "imag": imag},
            {"real": real, "imag": -imag},
        ]
        eq_type = "complex"
        steps.append({
            "description": "Δ < 0: complex conjugate roots",
            "expression": f"x₁ = {format_complex(real, imag)}",
        })
        steps.append({
            "description": "Conjugate root",
            "expression": f"x₂ = {format_complex(real, -imag)}",
        })

    verification = None if eq_type == "complex" else _verify_roots(a, b, c, solutions)

    return {
        "equation": equation,
        "coefficients": {"a": a, "b": b, "c": c},
        "discriminant": discriminant,
        "solutions": solutions,
        "type": eq_type,
        "verification": verification,
        "steps": _number_steps(steps),
    }


# ── 2×2 linear system ───────────────────────────────────────────────────

def solve_system_2x2(eq1, eq2) -> dict:
    """Solve ``a1·x + b1·y = c1``, ``a2·x + b2·y = c2`` by Cramer's rule.

    *eq1* and *eq2* are ``(a, b, c)`` triples.  A determinant with
    magnitude below 1e-10 raises :class:`SingularSystem`; whether the
    system has no solution or infinitely many is not distinguished.
    """
    a1, b1, c1 = eq1
    a2, b2, c2 = eq2

    det = a1 * b2 - a2 * b1
    if abs(det) < SINGULAR_TOLERANCE:
        logger.debug("Singular 2x2 system: D=%r for %r, %r", det, eq1, eq2)
        raise SingularSystem(
            "The system has no unique solution (determinant is zero).")

    x = (c1 * b2 - c2 * b1) / det
    y = (a1 * c2 - a2 * c1) / det

    equations = [format_system_row(a1, b1, c1), format_system_row(a2, b2, c2)]
    fa1, fb1, fc1 = (format_number(v) for v in (a1, b1, c1))
    fa2, fb2, fc2 = (format_number(v) for v in (a2, b2, c2))

    steps = [
        {"description": "Starting with the system", "expression": ", ".join(equations)},
        {
            "description": "Compute the determinant",
            "expression": f"D = {fa1}×{fb2} - {fa2}×{fb1} = {format_number(det)}",
        },
        {
            "description": "Solve for x (Cramer's rule)",
            "expression": f"x = ({fc1}×{fb2} - {fc2}×{fb1}) / {format_number(det)} = {x:.4f}",
        },
        {
            "description": "Solve for y (Cramer's rule)",
            "expression": f"y = ({fa1}×{fc2} - {fa2}×{fc1}) / {format_number(det)} = {y:.4f}",
        },
    ]

    return {
        "equations": equations,
        "x": x,
        "y": y,
        "determinant": det,
        "verification": {
            "eq1": a1 * x + b1 * y,
            "eq2": a2 * x + b2 * y,
        },
        "steps": _number_steps(steps),
    }
