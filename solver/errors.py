"""Error types raised by the SymSolver math engine.

All of them derive from ``ValueError`` so callers that already guard
solver calls with ``except ValueError`` keep working.
"""


class MathEngineError(ValueError):
    """Base class for every input problem the engine reports."""


class InvalidCoefficient(MathEngineError):
    """A zero leading coefficient would reduce the equation's degree."""


class SingularSystem(MathEngineError):
    """The system determinant is (numerically) zero, so there is no unique solution."""


class DegenerateInput(MathEngineError):
    """The data lacks the variance, range or IQR the operation needs."""


class MalformedSample(MathEngineError):
    """A sample is too short, mismatched, or holds a non-finite / non-numeric value."""
