"""Object-style wrapper around 3D homogeneous transforms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import jax
from jax.tree_util import register_pytree_node_class
from jax.typing import ArrayLike

from ..config import DEFAULT_EPSILON
from ..core import matrix
from ..core.vector import Vector3
from ..errors import DimensionMismatchError
from . import homogeneous
from .rotation import (
    euler_from_rotation_matrix,
    matrix_to_quaternion,
    rotation_matrix_from_euler,
)

Array = jax.Array


@register_pytree_node_class  # usable as an argument to jit / grad / vmap
@dataclass(frozen=True)
class Transform3d:
    """Immutable rigid-body pose backed by a single (4, 4) matrix."""
    matrix: Array

    # Constructors
    @classmethod
    def from_matrix(cls, m: ArrayLike) -> "Transform3d":
        m = matrix.create(m)
        if m.shape != (4, 4):
            raise DimensionMismatchError(f"matrix must have shape (4×4), got {m.shape}")
        return cls(m)

    @classmethod
    def from_rotation_translation(cls, R: ArrayLike, t: ArrayLike) -> "Transform3d":
        return cls(homogeneous.homogeneous_transform_3d(R, t))

    @classmethod
    def from_euler(cls, roll, pitch, yaw, translation: ArrayLike = (0.0, 0.0, 0.0)) -> "Transform3d":
        R = rotation_matrix_from_euler(roll, pitch, yaw)
        return cls(homogeneous.homogeneous_transform_3d(R, translation))

    @classmethod
    def from_dh(cls, a, alpha, d, theta) -> "Transform3d":
        return cls(homogeneous.dh_transform(a, alpha, d, theta))

    @classmethod
    def identity(cls) -> "Transform3d":
        return cls(matrix.identity(4))

    # PyTree boiler-plate
    def tree_flatten(self):
        return (self.matrix,), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        (m,) = children
        return cls(m)

    # Basic operations
    def compose(self, other: "Transform3d") -> "Transform3d":
        """Self ∘ other (apply *other* first, then self)."""
        return Transform3d(matrix.multiply(self.matrix, other.matrix))

    def inverse(self) -> "Transform3d":
        """Rigid-body inverse using the block structure."""
        return Transform3d(homogeneous.inverse_transform_3d(self.matrix))

    def transform_point(self, point: Vector3) -> Vector3:
        return homogeneous.transform_point_3d(self.matrix, point)

    # Convenience helpers
    def get_position(self) -> Vector3:
        t = homogeneous.extract_translation(self.matrix)
        return Vector3(x=t[0], y=t[1], z=t[2])

    def get_rotation_matrix(self) -> Array:
        return homogeneous.extract_rotation(self.matrix)

    def get_euler(self) -> Tuple[Array, Array, Array]:
        """(roll, pitch, yaw) of the rotation block, ZYX convention."""
        return euler_from_rotation_matrix(self.get_rotation_matrix())

    def get_quaternion(self) -> Array:
        return matrix_to_quaternion(self.get_rotation_matrix())

    def allclose(self, other: "Transform3d", epsilon: float = DEFAULT_EPSILON) -> bool:
        return matrix.equals(self.matrix, other.matrix, epsilon)

    def __matmul__(self, other: "Transform3d") -> "Transform3d":
        return self.compose(other)
