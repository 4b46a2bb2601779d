"""Rotation matrices, Euler angles and quaternions in JAX.

Conventions:
- Right-handed axes, counter-clockwise positive angles, radians.
- Euler angles are intrinsic ZYX: R = Rz(yaw) @ Ry(pitch) @ Rx(roll).
- Quaternions are (w, x, y, z) with the scalar part first.

Everything here is built from jax.numpy primitives and can be traced by
jax.jit, except is_valid_rotation_matrix, which returns a Python bool.
"""

from typing import Tuple, Union

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from ..config import GIMBAL_LOCK_THRESHOLD, ROTATION_EPSILON
from ..core import matrix
from ..core import vector
from ..core.vector import Vector3
from ..errors import DimensionMismatchError

# Type aliases
Array = jax.Array
Scalar = Union[float, Array]


# Elementary rotations
def rotation_matrix_2d(theta: Scalar) -> Array:
    """
    2D rotation matrix.

    Args:
        theta: Rotation angle in radians (counter-clockwise)

    Returns:
        (2, 2) rotation matrix [[cos, -sin], [sin, cos]]
    """
    c, s = jnp.cos(theta), jnp.sin(theta)
    return jnp.array([
        [c, -s],
        [s, c],
    ], dtype=jnp.float64)


def rotation_matrix_x(theta: Scalar) -> Array:
    """(3, 3) rotation about the X axis."""
    c, s = jnp.cos(theta), jnp.sin(theta)
    return jnp.array([
        [1.0, 0.0, 0.0],
        [0.0, c, -s],
        [0.0, s, c],
    ], dtype=jnp.float64)


def rotation_matrix_y(theta: Scalar) -> Array:
    """(3, 3) rotation about the Y axis."""
    c, s = jnp.cos(theta), jnp.sin(theta)
    return jnp.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ], dtype=jnp.float64)


def rotation_matrix_z(theta: Scalar) -> Array:
    """(3, 3) rotation about the Z axis."""
    c, s = jnp.cos(theta), jnp.sin(theta)
    return jnp.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ], dtype=jnp.float64)


# Euler angles
def rotation_matrix_from_euler(roll: Scalar, pitch: Scalar, yaw: Scalar) -> Array:
    """
    Rotation matrix from ZYX Euler angles.

    Args:
        roll: Rotation about X (radians)
        pitch: Rotation about Y (radians)
        yaw: Rotation about Z (radians)

    Returns:
        (3, 3) rotation matrix Rz(yaw) @ Ry(pitch) @ Rx(roll)
    """
    Rx = rotation_matrix_x(roll)
    Ry = rotation_matrix_y(pitch)
    Rz = rotation_matrix_z(yaw)
    return matrix.multiply(matrix.multiply(Rz, Ry), Rx)


def euler_from_rotation_matrix(R: ArrayLike) -> Tuple[Array, Array, Array]:
    """
    Extract ZYX Euler angles from a rotation matrix.

    When pitch is at +/-90 degrees (gimbal lock) roll and yaw rotate about
    the same axis and only their difference is observable. In that case yaw
    is fixed to exactly 0 and the whole rotation about that axis is reported
    as roll. The returned angles then reproduce the same matrix, but not
    necessarily the original angle triple.

    Args:
        R: (3, 3) rotation matrix

    Returns:
        (roll, pitch, yaw) in radians
    """
    R = jnp.asarray(R, dtype=jnp.float64)
    if R.shape != (3, 3):
        raise DimensionMismatchError(f"Euler extraction requires a (3×3) matrix, got {R.shape}")

    sy = jnp.sqrt(R[0, 0] * R[0, 0] + R[1, 0] * R[1, 0])
    gimbal_lock = sy < GIMBAL_LOCK_THRESHOLD

    roll = jnp.where(
        gimbal_lock,
        jnp.arctan2(-R[1, 2], R[1, 1]),
        jnp.arctan2(R[2, 1], R[2, 2]),
    )
    pitch = jnp.arctan2(-R[2, 0], sy)
    yaw = jnp.where(gimbal_lock, 0.0, jnp.arctan2(R[1, 0], R[0, 0]))

    return roll, pitch, yaw


def is_valid_rotation_matrix(R: ArrayLike, epsilon: float = ROTATION_EPSILON) -> bool:
    """
    Check that R is a proper rotation: square 2x2 or 3x3, R^T R = I and det(R) = 1.

    Reflections (det = -1), scalings and non-square inputs are rejected.
    """
    R = jnp.asarray(R, dtype=jnp.float64)
    if R.ndim != 2 or R.shape[0] != R.shape[1] or R.shape[0] not in (2, 3):
        return False

    size = R.shape[0]
    RtR = matrix.multiply(matrix.transpose(R), R)
    if not matrix.equals(RtR, matrix.identity(size), epsilon):
        return False

    return abs(float(matrix.determinant(R)) - 1.0) <= epsilon


# Quaternions
def normalize_quaternion(q: ArrayLike) -> Array:
    """Normalize quaternion(s) to unit length."""
    q = jnp.asarray(q, dtype=jnp.float64)
    return q / jnp.linalg.norm(q, axis=-1, keepdims=True)


def quaternion_to_matrix(q: ArrayLike) -> Array:
    """
    Convert quaternion(s) to rotation matrices.

    Args:
        q: (..., 4) quaternions in (w, x, y, z) order, normalized internally

    Returns:
        (..., 3, 3) rotation matrices
    """
    w, x, y, z = jnp.moveaxis(normalize_quaternion(q), -1, 0)

    row0 = jnp.stack([1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)], axis=-1)
    row1 = jnp.stack([2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)], axis=-1)
    row2 = jnp.stack([2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)], axis=-1)

    return jnp.stack([row0, row1, row2], axis=-2)


def matrix_to_quaternion(R: ArrayLike) -> Array:
    """
    Convert rotation matrices to quaternions (w, x, y, z).

    Uses Shepperd's method: of the four algebraically equivalent formulas,
    pick the one built around the largest quaternion component, so the
    normalization never divides by a small number. The result has w >= 0.

    Args:
        R: (..., 3, 3) rotation matrices

    Returns:
        (..., 4) unit quaternions
    """
    R = jnp.asarray(R, dtype=jnp.float64)
    r00, r01, r02 = R[..., 0, 0], R[..., 0, 1], R[..., 0, 2]
    r10, r11, r12 = R[..., 1, 0], R[..., 1, 1], R[..., 1, 2]
    r20, r21, r22 = R[..., 2, 0], R[..., 2, 1], R[..., 2, 2]
    trace = r00 + r11 + r22

    # Row k equals 4 * q_k * (w, x, y, z)
    candidates = jnp.stack([
        jnp.stack([1.0 + trace, r21 - r12, r02 - r20, r10 - r01], axis=-1),
        jnp.stack([r21 - r12, 1.0 + r00 - r11 - r22, r01 + r10, r02 + r20], axis=-1),
        jnp.stack([r02 - r20, r01 + r10, 1.0 - r00 + r11 - r22, r12 + r21], axis=-1),
        jnp.stack([r10 - r01, r02 + r20, r12 + r21, 1.0 - r00 - r11 + r22], axis=-1),
    ], axis=-2)

    largest = jnp.argmax(jnp.stack([trace, r00, r11, r22], axis=-1), axis=-1)
    q = jnp.take_along_axis(candidates, largest[..., None, None], axis=-2)[..., 0, :]
    q = normalize_quaternion(q)

    return jnp.where(q[..., :1] < 0.0, -q, q)


def axis_angle_to_quaternion(axis: Vector3, angle: Scalar) -> Array:
    """
    Quaternion for a rotation of *angle* radians about *axis*.

    The axis need not be unit length. A zero axis yields the identity
    quaternion.
    """
    u = vector.normalize(axis)
    half = 0.5 * jnp.asarray(angle, dtype=jnp.float64)
    c, s = jnp.cos(half), jnp.sin(half)
    q = jnp.stack([c, s * u.x, s * u.y, s * u.z])
    identity_q = jnp.array([1.0, 0.0, 0.0, 0.0], dtype=jnp.float64)
    return jnp.where(vector.magnitude(axis) == 0.0, identity_q, q)


def quaternion_to_axis_angle(q: ArrayLike) -> Tuple[Vector3, Array]:
    """
    Axis and angle (radians, in [0, 2*pi]) of a quaternion.

    Near the identity rotation the axis is undefined; the Z axis and a zero
    angle are returned instead.
    """
    w, x, y, z = normalize_quaternion(q)
    angle = 2.0 * jnp.arccos(jnp.clip(w, -1.0, 1.0))
    sin_half = jnp.sin(0.5 * angle)
    degenerate = sin_half < 1e-6
    safe = jnp.where(degenerate, 1.0, sin_half)

    axis = Vector3(
        x=jnp.where(degenerate, 0.0, x / safe),
        y=jnp.where(degenerate, 0.0, y / safe),
        z=jnp.where(degenerate, 1.0, z / safe),
    )
    return axis, jnp.where(degenerate, 0.0, angle)


def quaternion_slerp(q0: ArrayLike, q1: ArrayLike, t: Scalar) -> Array:
    """
    Spherical linear interpolation between two rotations.

    Takes the shorter arc (flips *q1* when the quaternions point into
    opposite hemispheres) and falls back to normalized linear interpolation
    when they are nearly parallel.
    """
    q0 = normalize_quaternion(q0)
    q1 = normalize_quaternion(q1)
    cos_omega = jnp.dot(q0, q1)
    q1 = jnp.where(cos_omega < 0.0, -q1, q1)
    cos_omega = jnp.clip(jnp.abs(cos_omega), -1.0, 1.0)

    omega = jnp.arccos(cos_omega)
    sin_omega = jnp.sin(omega)
    nearly_parallel = sin_omega < 1e-6
    safe = jnp.where(nearly_parallel, 1.0, sin_omega)

    w0 = jnp.where(nearly_parallel, 1.0 - t, jnp.sin((1.0 - t) * omega) / safe)
    w1 = jnp.where(nearly_parallel, t, jnp.sin(t * omega) / safe)
    return normalize_quaternion(w0 * q0 + w1 * q1)
