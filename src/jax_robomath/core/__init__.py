"""Core value types and algebra for jax_robomath.

This module provides the leaf components: 2D/3D vectors, dense small
matrices, and the DH description of a serial linkage.
"""

from . import matrix
from . import vector
from .dh_model import DHChain, DHLink
from .vector import Vector, Vector2, Vector3

__all__ = ["matrix", "vector", "DHChain", "DHLink", "Vector", "Vector2", "Vector3"]
