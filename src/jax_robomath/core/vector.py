"""2D and 3D vector algebra on immutable JAX pytrees.

Vectors are ``flax.struct.dataclass`` records, so every function here can be
traced by ``jax.jit`` and differentiated by ``jax.grad``. Degenerate inputs
(zero vectors, cosine overshoot past +/-1) are handled with ``jnp.where``
guards rather than Python branches, and never raise.
"""

from typing import Sequence, Tuple, Union

import jax
import jax.numpy as jnp
from flax import struct

from ..config import DEFAULT_EPSILON
from ..errors import DimensionMismatchError

# Type aliases
Array = jax.Array
Scalar = Union[float, Array]


@struct.dataclass
class Vector2:
    """Immutable 2D vector (x, y)."""
    x: Scalar
    y: Scalar


@struct.dataclass
class Vector3:
    """Immutable 3D vector (x, y, z)."""
    x: Scalar
    y: Scalar
    z: Scalar


Vector = Union[Vector2, Vector3]


def is_vector3(v: Vector) -> bool:
    """Check if a vector is 3D."""
    return isinstance(v, Vector3)


def _dimension(v: Vector) -> int:
    return 3 if is_vector3(v) else 2


def _components(v: Vector) -> Tuple[Scalar, ...]:
    if is_vector3(v):
        return (v.x, v.y, v.z)
    return (v.x, v.y)


def _like(v: Vector, components: Sequence[Scalar]) -> Vector:
    """Build a vector of the same dimension as *v*."""
    if is_vector3(v):
        return Vector3(x=components[0], y=components[1], z=components[2])
    return Vector2(x=components[0], y=components[1])


def _check_same_dimension(a: Vector, b: Vector, operation: str) -> None:
    if type(a) is not type(b):
        raise DimensionMismatchError(
            f"Vector dimensions must match for {operation}: {_dimension(a)}D vs {_dimension(b)}D"
        )


def add(a: Vector, b: Vector) -> Vector:
    """Add two vectors: a + b."""
    _check_same_dimension(a, b, "addition")
    return _like(a, [p + q for p, q in zip(_components(a), _components(b))])


def subtract(a: Vector, b: Vector) -> Vector:
    """Subtract two vectors: a - b."""
    _check_same_dimension(a, b, "subtraction")
    return _like(a, [p - q for p, q in zip(_components(a), _components(b))])


def scale(v: Vector, s: Scalar) -> Vector:
    """Scale a vector by a scalar: s * v."""
    return _like(v, [c * s for c in _components(v)])


def dot(a: Vector, b: Vector) -> Scalar:
    """Dot product a · b."""
    _check_same_dimension(a, b, "dot product")
    return sum(p * q for p, q in zip(_components(a), _components(b)))


def magnitude(v: Vector) -> Array:
    """Euclidean length ||v||. Zero for the zero vector."""
    return jnp.sqrt(sum(c * c for c in _components(v)))


def normalize(v: Vector) -> Vector:
    """
    Normalize a vector to unit length.

    Args:
        v: Input vector

    Returns:
        Unit vector in the same direction, or the zero vector of the same
        dimension if *v* has zero length
    """
    mag = magnitude(v)
    is_zero = mag == 0.0
    # Inner where keeps the division finite so gradients stay NaN-free
    inv_mag = jnp.where(is_zero, 0.0, 1.0 / jnp.where(is_zero, 1.0, mag))
    return scale(v, inv_mag)


def cross(a: Vector3, b: Vector3) -> Vector3:
    """
    Cross product of two 3D vectors.

    The result is perpendicular to both inputs, has length |a||b|sin(theta)
    and follows the right-hand rule.
    """
    if not (is_vector3(a) and is_vector3(b)):
        raise DimensionMismatchError(
            f"Cross product requires 3D vectors, got {_dimension(a)}D and {_dimension(b)}D"
        )
    return Vector3(
        x=a.y * b.z - a.z * b.y,
        y=a.z * b.x - a.x * b.z,
        z=a.x * b.y - a.y * b.x,
    )


def angle_between(a: Vector, b: Vector) -> Array:
    """
    Angle between two vectors in radians, in [0, pi].

    Returns 0 when either vector has zero length. The cosine is clamped to
    [-1, 1] to absorb floating point overshoot.
    """
    _check_same_dimension(a, b, "angle")
    denom = magnitude(a) * magnitude(b)
    degenerate = denom == 0.0
    cos_theta = dot(a, b) / jnp.where(degenerate, 1.0, denom)
    return jnp.where(degenerate, 0.0, jnp.arccos(jnp.clip(cos_theta, -1.0, 1.0)))


def project(a: Vector, b: Vector) -> Vector:
    """Orthogonal projection of *a* onto *b*. Zero vector when *b* is zero."""
    _check_same_dimension(a, b, "projection")
    b_sq = dot(b, b)
    degenerate = b_sq == 0.0
    coeff = jnp.where(degenerate, 0.0, dot(a, b) / jnp.where(degenerate, 1.0, b_sq))
    return scale(b, coeff)


def distance(a: Vector, b: Vector) -> Array:
    """Distance ||a - b|| between two points."""
    return magnitude(subtract(a, b))


def lerp(a: Vector, b: Vector, t: Scalar) -> Vector:
    """Linear interpolation a + t * (b - a). *t* outside [0, 1] extrapolates."""
    return add(a, scale(subtract(b, a), t))


def equals(a: Vector, b: Vector, epsilon: float = DEFAULT_EPSILON) -> bool:
    """True iff *a* and *b* share a dimension and every component is within *epsilon*."""
    if type(a) is not type(b):
        return False
    return bool(jnp.all(jnp.abs(to_array(a) - to_array(b)) <= epsilon))


# Constructors and conversions
def zero_2d() -> Vector2:
    return Vector2(x=0.0, y=0.0)


def zero_3d() -> Vector3:
    return Vector3(x=0.0, y=0.0, z=0.0)


def from_array_2d(arr: Sequence[Scalar]) -> Vector2:
    if len(arr) != 2:
        raise DimensionMismatchError(f"Expected 2 components, got {len(arr)}")
    return Vector2(x=arr[0], y=arr[1])


def from_array_3d(arr: Sequence[Scalar]) -> Vector3:
    if len(arr) != 3:
        raise DimensionMismatchError(f"Expected 3 components, got {len(arr)}")
    return Vector3(x=arr[0], y=arr[1], z=arr[2])


def to_array(v: Vector) -> Array:
    """Convert a vector to a 1-D float64 array [x, y] or [x, y, z]."""
    return jnp.asarray(_components(v), dtype=jnp.float64)
