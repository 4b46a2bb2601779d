"""Dense small-matrix algebra in JAX.

Matrices are 2-D float64 ``jax.Array`` values addressed ``m[row, col]``.
Every function accepts any array-like (nested lists, NumPy or JAX arrays)
and returns a new array; inputs are never mutated.

The determinant uses closed forms up to 3x3 and recursive Laplace (cofactor)
expansion along the first row beyond that. Laplace expansion is O(n!), which
is acceptable for the 1x1 to 4x4 matrices this library is meant for but
not for large inputs.
"""

import logging
from typing import Tuple

import jax
import jax.numpy as jnp
import numpy as np
from jax.typing import ArrayLike

from ..config import DEFAULT_EPSILON, DEFAULT_PRECISION, SINGULAR_TOLERANCE
from ..errors import DimensionMismatchError, NotSquareError, SingularMatrixError

Array = jax.Array

_LOG: logging.Logger = logging.getLogger(__name__)


def _as_matrix(m: ArrayLike) -> Array:
    return jnp.asarray(m, dtype=jnp.float64)


def _shape_str(rows: int, cols: int) -> str:
    return f"({rows}×{cols})"


# Constructors
def zeros(rows: int, cols: int) -> Array:
    """Create a rows x cols matrix filled with zeros."""
    return jnp.zeros((rows, cols), dtype=jnp.float64)


def identity(size: int) -> Array:
    """Create a size x size identity matrix."""
    return jnp.eye(size, dtype=jnp.float64)


def create(data: ArrayLike) -> Array:
    """
    Create a matrix from a 2D array.

    The data is always copied, so later changes to *data* (for example a
    mutable list or NumPy buffer) never reach the returned matrix.

    Args:
        data: Nested sequence or array of numbers, one inner sequence per row

    Returns:
        (rows, cols) float64 matrix
    """
    matrix = jnp.array(data, dtype=jnp.float64, copy=True)
    if matrix.ndim != 2:
        raise DimensionMismatchError(f"Matrix data must be 2D, got shape {matrix.shape}")
    return matrix


def copy(m: ArrayLike) -> Array:
    """Create a copy of a matrix."""
    return jnp.array(m, dtype=jnp.float64, copy=True)


def dimensions(m: ArrayLike) -> Tuple[int, int]:
    """Return (rows, cols)."""
    shape = np.shape(m)
    rows = shape[0]
    cols = shape[1] if len(shape) > 1 else 0
    return rows, cols


# Arithmetic
def multiply(a: ArrayLike, b: ArrayLike) -> Array:
    """
    Matrix product C = A @ B.

    Args:
        a: (m, n) matrix
        b: (n, p) matrix

    Returns:
        (m, p) product matrix
    """
    a, b = _as_matrix(a), _as_matrix(b)
    a_rows, a_cols = dimensions(a)
    b_rows, b_cols = dimensions(b)
    if a_cols != b_rows:
        raise DimensionMismatchError(
            "Matrix dimensions incompatible for multiplication: "
            f"{_shape_str(a_rows, a_cols)} × {_shape_str(b_rows, b_cols)}"
        )
    return jnp.matmul(a, b)


def transpose(m: ArrayLike) -> Array:
    """Matrix transpose A^T."""
    return jnp.swapaxes(_as_matrix(m), -1, -2)


def _check_same_shape(a: Array, b: Array, operation: str) -> None:
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Matrix dimensions must match for {operation}: "
            f"{_shape_str(*dimensions(a))} vs {_shape_str(*dimensions(b))}"
        )


def add(a: ArrayLike, b: ArrayLike) -> Array:
    """Elementwise sum A + B."""
    a, b = _as_matrix(a), _as_matrix(b)
    _check_same_shape(a, b, "addition")
    return a + b


def subtract(a: ArrayLike, b: ArrayLike) -> Array:
    """Elementwise difference A - B."""
    a, b = _as_matrix(a), _as_matrix(b)
    _check_same_shape(a, b, "subtraction")
    return a - b


def scale(m: ArrayLike, scalar: float) -> Array:
    """Scalar multiple s * A."""
    return _as_matrix(m) * scalar


def apply_to_vector(m: ArrayLike, v: ArrayLike) -> Array:
    """
    Matrix-vector product.

    Args:
        m: (rows, cols) matrix
        v: (cols,) vector

    Returns:
        (rows,) result vector
    """
    m = _as_matrix(m)
    v = jnp.asarray(v, dtype=jnp.float64)
    rows, cols = dimensions(m)
    if v.ndim != 1 or cols != v.shape[0]:
        raise DimensionMismatchError(
            f"Matrix-vector dimensions incompatible: {_shape_str(rows, cols)} × ({v.size})"
        )
    return jnp.matmul(m, v)


# Determinant and inverse
def _check_square(m: Array, operation: str) -> int:
    rows, cols = dimensions(m)
    if rows != cols:
        raise NotSquareError(f"{operation} requires a square matrix, got {rows}×{cols}")
    return rows


def minor(m: ArrayLike, row: int, col: int) -> Array:
    """Submatrix of *m* with *row* and *col* removed."""
    m = _as_matrix(m)
    return jnp.delete(jnp.delete(m, row, axis=0), col, axis=1)


def determinant(m: ArrayLike) -> Array:
    """
    Determinant of a square matrix.

    Closed forms are used for 1x1, 2x2 and 3x3. Larger matrices use
    recursive cofactor expansion along the first row:
    det = sum_j (-1)^j * m[0, j] * det(minor(m, 0, j)).

    Raises:
        NotSquareError: if *m* is not square
    """
    m = _as_matrix(m)
    size = _check_square(m, "Determinant")

    if size == 1:
        return m[0, 0]

    if size == 2:
        return m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0]

    if size == 3:
        return (
            m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
            - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
            + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
        )

    det = jnp.zeros((), dtype=m.dtype)
    for j in range(size):
        sign = 1.0 if j % 2 == 0 else -1.0
        det = det + sign * m[0, j] * determinant(minor(m, 0, j))
    return det


def inverse(m: ArrayLike) -> Array:
    """
    Matrix inverse A^-1.

    A matrix is singular when |det(A)| < 1e-10. This is an absolute
    threshold and does not adapt to the scale of the entries.

    1x1, 2x2 and 3x3 use the closed-form adjugate divided by the
    determinant. Larger matrices use Gauss-Jordan elimination on [A | I]
    with partial pivoting.

    This function inspects concrete values and cannot be traced by jax.jit.

    Raises:
        NotSquareError: if *m* is not square
        SingularMatrixError: if *m* is singular
    """
    m = _as_matrix(m)
    size = _check_square(m, "Inverse")
    det = determinant(m)

    if abs(float(det)) < SINGULAR_TOLERANCE:
        _LOG.debug("Rejecting singular %dx%d matrix, det=%g", size, size, float(det))
        raise SingularMatrixError("Matrix is singular and cannot be inverted")

    if size == 1:
        return jnp.array([[1.0 / m[0, 0]]], dtype=m.dtype)

    if size == 2:
        return jnp.array([
            [m[1, 1], -m[0, 1]],
            [-m[1, 0], m[0, 0]],
        ]) / det

    if size == 3:
        (a, b, c), (d, e, f), (g, h, i) = m
        return jnp.array([
            [e * i - f * h, c * h - b * i, b * f - c * e],
            [f * g - d * i, a * i - c * g, c * d - a * f],
            [d * h - e * g, b * g - a * h, a * e - b * d],
        ]) / det

    return _gauss_jordan_inverse(m)


def _gauss_jordan_inverse(m: Array) -> Array:
    size = m.shape[0]
    augmented = jnp.concatenate([m, identity(size)], axis=1)

    for col in range(size):
        # Partial pivoting: largest magnitude entry in this column among remaining rows
        pivot_row = col + int(jnp.argmax(jnp.abs(augmented[col:, col])))
        if pivot_row != col:
            _LOG.debug("Swapping rows %d and %d for pivot in column %d", col, pivot_row, col)
            augmented = augmented.at[jnp.array([col, pivot_row])].set(
                augmented[jnp.array([pivot_row, col])]
            )

        pivot = augmented[col, col]
        if abs(float(pivot)) < SINGULAR_TOLERANCE:
            _LOG.debug("Vanishing pivot %g in column %d", float(pivot), col)
            raise SingularMatrixError("Matrix is singular and cannot be inverted")

        augmented = augmented.at[col].set(augmented[col] / pivot)

        # Eliminate this column from every other row
        factors = augmented[:, col].at[col].set(0.0)
        augmented = augmented - factors[:, None] * augmented[col][None, :]

    return augmented[:, size:]


# Comparison and formatting
def equals(a: ArrayLike, b: ArrayLike, epsilon: float = DEFAULT_EPSILON) -> bool:
    """True iff *a* and *b* have the same shape and every entry is within *epsilon*."""
    a, b = _as_matrix(a), _as_matrix(b)
    if a.shape != b.shape:
        return False
    return bool(jnp.all(jnp.abs(a - b) <= epsilon))


def to_string(m: ArrayLike, precision: int = DEFAULT_PRECISION) -> str:
    """
    Format a matrix one row per line.

    >>> to_string([[1, 2], [3, 4]], precision=1)
    '[1.0, 2.0]\\n[3.0, 4.0]'
    """
    rows = np.asarray(m, dtype=np.float64)
    return "\n".join(
        "[" + ", ".join(f"{val:.{precision}f}" for val in row) + "]"
        for row in rows
    )
