"""Numeric tolerances shared across jax_robomath.

These are absolute thresholds. They do not scale with the magnitude of the
matrices involved.
"""

from typing import Final

# |det| (or a Gauss-Jordan pivot) below this is treated as singular
SINGULAR_TOLERANCE: Final[float] = 1e-10

# Default tolerance for matrix and vector equality
DEFAULT_EPSILON: Final[float] = 1e-10

# Default tolerance for rotation matrix validation
ROTATION_EPSILON: Final[float] = 1e-6

# sqrt(R00^2 + R10^2) below this means pitch is at +/-90 degrees
GIMBAL_LOCK_THRESHOLD: Final[float] = 1e-6

# Decimal places used by matrix.to_string
DEFAULT_PRECISION: Final[int] = 3
