"""Homogeneous (rotation + translation) transforms in 2D and 3D.

A 2D transform is a (3, 3) matrix and a 3D transform a (4, 4) matrix of the
form

    [[R, t],
     [0, 1]]

with R a proper rotation and t a translation column. They are plain
matrices; this module builds them, applies them to points and inverts them
using the rigid-body block structure.
"""

from typing import Optional, Union

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from ..core.vector import Vector2, Vector3
from ..errors import DimensionMismatchError
from .rotation import rotation_matrix_x, rotation_matrix_y, rotation_matrix_z

# Type aliases
Array = jax.Array
Scalar = Union[float, Array]


def _as_transform(T: ArrayLike, size: int, name: str) -> Array:
    T = jnp.asarray(T, dtype=jnp.float64)
    if T.shape != (size, size):
        raise DimensionMismatchError(
            f"{name} requires a ({size}×{size}) homogeneous transform, got {T.shape}"
        )
    return T


def _as_any_transform(T: ArrayLike) -> Array:
    T = jnp.asarray(T, dtype=jnp.float64)
    if T.shape not in ((3, 3), (4, 4)):
        raise DimensionMismatchError(
            f"Expected a (3×3) or (4×4) homogeneous transform, got {T.shape}"
        )
    return T


# Constructors
def homogeneous_transform_2d(theta: Scalar, tx: Scalar, ty: Scalar) -> Array:
    """
    2D homogeneous transform: rotate by *theta*, then translate by (tx, ty).

    Returns:
        (3, 3) matrix
    """
    c, s = jnp.cos(theta), jnp.sin(theta)
    return jnp.array([
        [c, -s, tx],
        [s, c, ty],
        [0.0, 0.0, 1.0],
    ], dtype=jnp.float64)


def homogeneous_transform_3d(R: ArrayLike, t: ArrayLike) -> Array:
    """
    Construct a 3D homogeneous transform from rotation and translation.

    Args:
        R: (3, 3) rotation matrix
        t: (3,) translation

    Returns:
        (4, 4) matrix [R | t; 0 | 1]
    """
    R = jnp.asarray(R, dtype=jnp.float64)
    t = jnp.asarray(t, dtype=jnp.float64)
    if R.shape != (3, 3) or t.shape != (3,):
        raise DimensionMismatchError(
            f"Expected (3×3) rotation and (3) translation, got {R.shape} and {t.shape}"
        )

    T = jnp.eye(4, dtype=jnp.float64)
    T = T.at[:3, :3].set(R)
    T = T.at[:3, 3].set(t)
    return T


def translation_matrix(tx: Scalar, ty: Scalar, tz: Scalar) -> Array:
    """(4, 4) pure translation."""
    return jnp.eye(4, dtype=jnp.float64).at[:3, 3].set(jnp.array([tx, ty, tz], dtype=jnp.float64))


def homogeneous_rotation_x(theta: Scalar) -> Array:
    """(4, 4) pure rotation about X."""
    return homogeneous_transform_3d(rotation_matrix_x(theta), jnp.zeros(3))


def homogeneous_rotation_y(theta: Scalar) -> Array:
    """(4, 4) pure rotation about Y."""
    return homogeneous_transform_3d(rotation_matrix_y(theta), jnp.zeros(3))


def homogeneous_rotation_z(theta: Scalar) -> Array:
    """(4, 4) pure rotation about Z."""
    return homogeneous_transform_3d(rotation_matrix_z(theta), jnp.zeros(3))


def scaling_matrix(sx: Scalar, sy: Scalar, sz: Optional[Scalar] = None) -> Array:
    """
    Homogeneous scaling matrix.

    Returns a (3, 3) 2D scaling when *sz* is omitted and a (4, 4) 3D scaling
    otherwise.
    """
    if sz is None:
        return jnp.diag(jnp.array([sx, sy, 1.0], dtype=jnp.float64))
    return jnp.diag(jnp.array([sx, sy, sz, 1.0], dtype=jnp.float64))


def dh_transform(a: Scalar, alpha: Scalar, d: Scalar, theta: Scalar) -> Array:
    """
    Denavit-Hartenberg link transform (standard convention).

    Equivalent to Rz(theta) @ Tz(d) @ Tx(a) @ Rx(alpha).

    Args:
        a: Link length
        alpha: Link twist (radians)
        d: Link offset
        theta: Joint angle (radians)

    Returns:
        (4, 4) transform from link frame i-1 to link frame i
    """
    ct, st = jnp.cos(theta), jnp.sin(theta)
    ca, sa = jnp.cos(alpha), jnp.sin(alpha)
    return jnp.array([
        [ct, -st * ca, st * sa, a * ct],
        [st, ct * ca, -ct * sa, a * st],
        [0.0, sa, ca, d],
        [0.0, 0.0, 0.0, 1.0],
    ], dtype=jnp.float64)


# Readback
def extract_rotation(T: ArrayLike) -> Array:
    """Rotation block of a (3, 3) or (4, 4) homogeneous transform."""
    T = _as_any_transform(T)
    n = T.shape[0] - 1
    return T[:n, :n]


def extract_translation(T: ArrayLike) -> Array:
    """Translation column of a (3, 3) or (4, 4) homogeneous transform."""
    T = _as_any_transform(T)
    n = T.shape[0] - 1
    return T[:n, n]


# Application
def _check_point(point, expected: type, operation: str) -> None:
    if not isinstance(point, expected):
        got = 3 if isinstance(point, Vector3) else 2
        want = 3 if expected is Vector3 else 2
        raise DimensionMismatchError(
            f"Point dimension must match the transform for {operation}: {want}D vs {got}D"
        )


def transform_point_2d(T: ArrayLike, point: Vector2) -> Vector2:
    """Apply a (3, 3) transform to a 2D point: p' = R p + t."""
    T = _as_transform(T, 3, "transform_point_2d")
    _check_point(point, Vector2, "transform_point_2d")
    x = T[0, 0] * point.x + T[0, 1] * point.y + T[0, 2]
    y = T[1, 0] * point.x + T[1, 1] * point.y + T[1, 2]
    return Vector2(x=x, y=y)


def transform_point_3d(T: ArrayLike, point: Vector3) -> Vector3:
    """Apply a (4, 4) transform to a 3D point: p' = R p + t."""
    T = _as_transform(T, 4, "transform_point_3d")
    _check_point(point, Vector3, "transform_point_3d")
    x = T[0, 0] * point.x + T[0, 1] * point.y + T[0, 2] * point.z + T[0, 3]
    y = T[1, 0] * point.x + T[1, 1] * point.y + T[1, 2] * point.z + T[1, 3]
    z = T[2, 0] * point.x + T[2, 1] * point.y + T[2, 2] * point.z + T[2, 3]
    return Vector3(x=x, y=y, z=z)


# Inversion
def _rigid_inverse(T: Array) -> Array:
    n = T.shape[0] - 1
    R_inv = jnp.swapaxes(T[:n, :n], -1, -2)
    t_inv = -jnp.matmul(R_inv, T[:n, n])

    T_inv = jnp.eye(n + 1, dtype=T.dtype)
    T_inv = T_inv.at[:n, :n].set(R_inv)
    T_inv = T_inv.at[:n, n].set(t_inv)
    return T_inv


def inverse_transform_2d(T: ArrayLike) -> Array:
    """
    Inverse of a 2D rigid transform.

    Uses the block structure T^-1 = [[R^T, -R^T t], [0, 1]], which is exact
    for a proper rotation block and never goes through general inversion.
    """
    return _rigid_inverse(_as_transform(T, 3, "inverse_transform_2d"))


def inverse_transform_3d(T: ArrayLike) -> Array:
    """Inverse of a 3D rigid transform, see inverse_transform_2d."""
    return _rigid_inverse(_as_transform(T, 4, "inverse_transform_3d"))
