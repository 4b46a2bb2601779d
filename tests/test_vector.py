"""Tests for the vector module."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_robomath.core import vector as vec
from jax_robomath.core.vector import Vector2, Vector3
from jax_robomath.errors import DimensionMismatchError


def _random_vector3(key):
    x, y, z = jax.random.uniform(key, (3,), minval=-10.0, maxval=10.0)
    return Vector3(x=x, y=y, z=z)


# Creation
def test_zero_vectors():
    """Test zero vector constructors."""
    assert vec.equals(vec.zero_2d(), Vector2(x=0.0, y=0.0))
    assert vec.equals(vec.zero_3d(), Vector3(x=0.0, y=0.0, z=0.0))


def test_from_and_to_array():
    """Test conversion between arrays and vectors."""
    v2 = vec.from_array_2d([1.0, 2.0])
    v3 = vec.from_array_3d([1.0, 2.0, 3.0])

    assert isinstance(v2, Vector2)
    assert isinstance(v3, Vector3)
    np.testing.assert_allclose(vec.to_array(v2), jnp.array([1.0, 2.0]))
    np.testing.assert_allclose(vec.to_array(v3), jnp.array([1.0, 2.0, 3.0]))


def test_from_array_wrong_length():
    """Test that from_array rejects the wrong number of components."""
    with pytest.raises(DimensionMismatchError):
        vec.from_array_2d([1.0, 2.0, 3.0])
    with pytest.raises(DimensionMismatchError):
        vec.from_array_3d([1.0, 2.0])


def test_is_vector3():
    """Test dimension detection."""
    assert vec.is_vector3(Vector3(x=1.0, y=2.0, z=3.0))
    assert not vec.is_vector3(Vector2(x=1.0, y=2.0))


# Basic arithmetic
def test_add_subtract():
    """Test componentwise addition and subtraction."""
    a = Vector3(x=1.0, y=2.0, z=3.0)
    b = Vector3(x=4.0, y=5.0, z=6.0)

    assert vec.equals(vec.add(a, b), Vector3(x=5.0, y=7.0, z=9.0))
    assert vec.equals(vec.subtract(b, a), Vector3(x=3.0, y=3.0, z=3.0))

    a2 = Vector2(x=1.0, y=2.0)
    b2 = Vector2(x=3.0, y=-4.0)
    assert vec.equals(vec.add(a2, b2), Vector2(x=4.0, y=-2.0))


def test_mismatched_dimensions_rejected():
    """Test that mixing 2D and 3D vectors raises DimensionMismatchError."""
    a = Vector2(x=1.0, y=2.0)
    b = Vector3(x=1.0, y=2.0, z=3.0)

    with pytest.raises(DimensionMismatchError, match="2D vs 3D"):
        vec.add(a, b)
    with pytest.raises(DimensionMismatchError):
        vec.subtract(a, b)
    with pytest.raises(DimensionMismatchError):
        vec.dot(a, b)
    with pytest.raises(DimensionMismatchError):
        vec.project(a, b)


def test_scale():
    """Test scaling, including zero and negative factors."""
    v = Vector2(x=3.0, y=-4.0)

    assert vec.equals(vec.scale(v, 2.0), Vector2(x=6.0, y=-8.0))
    assert vec.equals(vec.scale(v, 0.0), vec.zero_2d())
    assert vec.equals(vec.scale(v, -1.0), Vector2(x=-3.0, y=4.0))


# Norms
def test_magnitude():
    """Test Euclidean length."""
    np.testing.assert_allclose(vec.magnitude(Vector2(x=3.0, y=4.0)), 5.0)
    np.testing.assert_allclose(vec.magnitude(Vector3(x=2.0, y=3.0, z=6.0)), 7.0)
    assert vec.magnitude(vec.zero_3d()) == 0.0


def test_normalize():
    """Test normalization to unit length."""
    n = vec.normalize(Vector3(x=0.0, y=3.0, z=4.0))
    np.testing.assert_allclose(vec.magnitude(n), 1.0, rtol=1e-12)
    assert vec.equals(n, Vector3(x=0.0, y=0.6, z=0.8))


def test_normalize_zero_vector():
    """Test that normalizing a zero vector returns a zero vector, not NaN."""
    n2 = vec.normalize(vec.zero_2d())
    n3 = vec.normalize(vec.zero_3d())

    assert isinstance(n2, Vector2)
    assert isinstance(n3, Vector3)
    assert vec.equals(n2, vec.zero_2d())
    assert vec.equals(n3, vec.zero_3d())
    assert jnp.isfinite(vec.to_array(n3)).all()


# Products
def test_dot():
    """Test dot product."""
    assert vec.dot(Vector2(x=1.0, y=2.0), Vector2(x=3.0, y=4.0)) == 11.0
    assert vec.dot(Vector3(x=1.0, y=0.0, z=0.0), Vector3(x=0.0, y=1.0, z=0.0)) == 0.0


def test_cross_basis_vectors():
    """Test cross product follows the right-hand rule."""
    x = Vector3(x=1.0, y=0.0, z=0.0)
    y = Vector3(x=0.0, y=1.0, z=0.0)
    z = Vector3(x=0.0, y=0.0, z=1.0)

    assert vec.equals(vec.cross(x, y), z)
    assert vec.equals(vec.cross(y, z), x)
    assert vec.equals(vec.cross(z, x), y)


def test_cross_requires_3d():
    """Test that cross product rejects 2D vectors."""
    with pytest.raises(DimensionMismatchError):
        vec.cross(Vector2(x=1.0, y=0.0), Vector2(x=0.0, y=1.0))


def test_cross_parallel_is_zero():
    """Test cross product of parallel vectors is zero."""
    a = Vector3(x=1.0, y=2.0, z=3.0)
    assert vec.equals(vec.cross(a, vec.scale(a, 2.5)), vec.zero_3d())


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_cross_product_properties(seed):
    """Property test: cross product is anti-commutative and orthogonal to its operands."""
    key_a, key_b = jax.random.split(jax.random.PRNGKey(seed))
    a = _random_vector3(key_a)
    b = _random_vector3(key_b)

    c = vec.cross(a, b)

    assert vec.equals(c, vec.scale(vec.cross(b, a), -1.0), 1e-10)
    np.testing.assert_allclose(vec.dot(a, c), 0.0, atol=1e-9)
    np.testing.assert_allclose(vec.dot(b, c), 0.0, atol=1e-9)

    # |a x b| = |a||b| sin(theta)
    expected = vec.magnitude(a) * vec.magnitude(b) * jnp.sin(vec.angle_between(a, b))
    np.testing.assert_allclose(vec.magnitude(c), expected, rtol=1e-6, atol=1e-9)


# Angles and projections
def test_angle_between():
    """Test angle between vectors."""
    x = Vector2(x=1.0, y=0.0)
    y = Vector2(x=0.0, y=1.0)

    np.testing.assert_allclose(vec.angle_between(x, y), jnp.pi / 2)
    np.testing.assert_allclose(vec.angle_between(x, vec.scale(x, -3.0)), jnp.pi)
    np.testing.assert_allclose(vec.angle_between(x, x), 0.0, atol=1e-7)


def test_angle_between_zero_vector():
    """Test angle with a zero vector is defined as 0."""
    assert vec.angle_between(Vector3(x=1.0, y=2.0, z=3.0), vec.zero_3d()) == 0.0
    assert vec.angle_between(vec.zero_2d(), vec.zero_2d()) == 0.0


def test_angle_between_clamps_cosine_overshoot():
    """Test that nearly identical vectors never produce NaN."""
    a = Vector3(x=0.1, y=0.2, z=0.3)
    b = vec.scale(a, 1.0 + 1e-16)
    angle = vec.angle_between(a, b)
    assert jnp.isfinite(angle)
    np.testing.assert_allclose(angle, 0.0, atol=1e-7)


def test_project():
    """Test orthogonal projection."""
    a = Vector2(x=3.0, y=4.0)
    b = Vector2(x=2.0, y=0.0)

    assert vec.equals(vec.project(a, b), Vector2(x=3.0, y=0.0))


def test_project_onto_zero_vector():
    """Test projection onto a zero vector yields the zero vector."""
    p = vec.project(Vector3(x=1.0, y=2.0, z=3.0), vec.zero_3d())
    assert vec.equals(p, vec.zero_3d())


def test_distance():
    """Test point distance."""
    np.testing.assert_allclose(
        vec.distance(Vector3(x=1.0, y=1.0, z=1.0), Vector3(x=4.0, y=5.0, z=1.0)), 5.0
    )


def test_lerp():
    """Test linear interpolation and extrapolation."""
    a = Vector2(x=0.0, y=0.0)
    b = Vector2(x=10.0, y=-10.0)

    assert vec.equals(vec.lerp(a, b, 0.0), a)
    assert vec.equals(vec.lerp(a, b, 1.0), b)
    assert vec.equals(vec.lerp(a, b, 0.25), Vector2(x=2.5, y=-2.5))
    # t outside [0, 1] is not clamped
    assert vec.equals(vec.lerp(a, b, 1.5), Vector2(x=15.0, y=-15.0))
    assert vec.equals(vec.lerp(a, b, -0.5), Vector2(x=-5.0, y=5.0))


# Equality
def test_equals():
    """Test approximate equality."""
    a = Vector3(x=1.0, y=2.0, z=3.0)

    assert vec.equals(a, Vector3(x=1.0, y=2.0, z=3.0 + 1e-12))
    assert not vec.equals(a, Vector3(x=1.0, y=2.0, z=3.1))
    assert vec.equals(a, Vector3(x=1.0, y=2.0, z=3.1), epsilon=0.2)
    # Different dimensions are never equal
    assert not vec.equals(Vector2(x=1.0, y=2.0), a)


# JAX integration
def test_vector_ops_jit_compatibility():
    """Test that guarded vector operations can be JIT compiled."""

    @jax.jit
    def unit_and_angle(a, b):
        return vec.normalize(a), vec.angle_between(a, b)

    n, angle = unit_and_angle(vec.zero_3d(), Vector3(x=1.0, y=0.0, z=0.0))
    assert vec.equals(n, vec.zero_3d())
    assert angle == 0.0

    n, angle = unit_and_angle(Vector3(x=0.0, y=2.0, z=0.0), Vector3(x=1.0, y=0.0, z=0.0))
    assert vec.equals(n, Vector3(x=0.0, y=1.0, z=0.0))
    np.testing.assert_allclose(angle, jnp.pi / 2)


def test_vector_is_pytree():
    """Test that vectors flatten into their components."""
    leaves = jax.tree_util.tree_leaves(Vector3(x=1.0, y=2.0, z=3.0))
    assert len(leaves) == 3
