"""Error types raised by the jax_robomath library.

All errors derive from ``ValueError`` so callers that already guard shape
problems with ``except ValueError`` keep working.
"""


class RoboMathError(ValueError):
    """Base class for all jax_robomath errors."""


class DimensionMismatchError(RoboMathError):
    """Operand shapes are incompatible for the requested operation."""


class NotSquareError(RoboMathError):
    """A square matrix was required (determinant, inverse)."""


class SingularMatrixError(RoboMathError):
    """The matrix has no inverse under the library's singular tolerance."""
