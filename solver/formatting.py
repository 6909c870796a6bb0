"""Human-readable rendering of coefficient tuples.

Turns ``(a, b, c)`` into strings such as ``x² - 5x + 6 = 0``.  The output
of :func:`format_quadratic` and :func:`format_linear` is exactly what
:mod:`solver.parser` reads back, so the two must stay in step.
"""


def format_number(value, max_decimals: int = 10) -> str:
    """Format a number into a clean decimal string.

    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    """
    value = float(value)
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    return f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")


def _leading_term(coeff, var: str) -> str:
    if coeff == 1:
        return var
    if coeff == -1:
        return f"-{var}"
    return f"{format_number(coeff)}{var}"


def _signed_term(coeff, var: str = "") -> str:
    """Render `` + 3x`` / `` - x`` / `` + 6``; zero yields an empty string."""
    if coeff == 0:
        return ""
    sign = "+" if coeff > 0 else "-"
    magnitude = abs(coeff)
    if var and magnitude == 1:
        return f" {sign} {var}"
    return f" {sign} {format_number(magnitude)}{var}"


def format_quadratic(a, b, c) -> str:
    """Render ``a·x² + b·x + c = 0``."""
    return _leading_term(a, "x²") + _signed_term(b, "x") + _signed_term(c) + " = 0"


def format_linear(a, b) -> str:
    """Render ``a·x + b = 0``."""
    return _leading_term(a, "x") + _signed_term(b) + " = 0"


def format_system_row(a, b, c) -> str:
    """Render one row ``a·x + b·y = c`` of a 2×2 system."""
    if a == 0:
        lhs = _leading_term(b, "y") if b != 0 else "0"
    else:
        lhs = _leading_term(a, "x") + _signed_term(b, "y")
    return f"{lhs} = {format_number(c)}"


def format_regression_line(slope, intercept) -> str:
    """Render a fitted line as ``y = 2.0000x + 0.0000``."""
    sign = "+" if intercept >= 0 else "-"
    return f"y = {slope:.4f}x {sign} {abs(intercept):.4f}"


def format_complex(real, imag) -> str:
    """Render a complex root as ``-1 + 2i`` / ``-1 - 2i``."""
    sign = "+" if imag >= 0 else "-"
    return f"{format_number(real)} {sign} {format_number(abs(imag))}i"
