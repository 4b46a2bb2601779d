"""
Rigid-body transforms for robotics.

This module provides:
- Rotation matrices, Euler angles and quaternions (rotation module)
- 2D/3D homogeneous transforms and DH link transforms (homogeneous module)
- Transform3d, an object-style pose wrapper (transform module)

All functions are pure and stateless.
"""

from . import rotation
from . import homogeneous
from .transform import Transform3d

__all__ = [
    "rotation",
    "homogeneous",
    "Transform3d",
]
