"""
jax_robomath: small-matrix, vector and rigid-transform math for robotics.

This library provides pure, immutable implementations of 2D/3D vector
algebra, dense small-matrix arithmetic (determinant, inverse), homogeneous
transforms, Euler and quaternion conversions, and Denavit-Hartenberg
forward kinematics, all built on JAX arrays.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import errors
from . import core
from . import transforms
from . import chain

__version__ = "0.1.0"
__all__ = ["errors", "core", "transforms", "chain"]
