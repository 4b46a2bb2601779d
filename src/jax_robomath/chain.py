"""Forward kinematics and Jacobians for DH chains.

Link poses are obtained by chaining DH transforms, T_0i = T_01 @ T_12 @ ...
@ T_(i-1)i. The end-effector Jacobian comes from JAX automatic
differentiation of the forward kinematics.
"""

import logging
from typing import Dict, List

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from .core import matrix
from .core.dh_model import DHChain
from .core.vector import Vector3
from .errors import DimensionMismatchError
from .transforms.homogeneous import dh_transform
from .transforms.transform import Transform3d

Array = jax.Array

_LOG: logging.Logger = logging.getLogger(__name__)


def _joint_vector(chain: DHChain, q: ArrayLike) -> Array:
    q = jnp.asarray(q, dtype=jnp.float64)
    if q.shape != (chain.num_dof,):
        raise DimensionMismatchError(
            f"Expected {chain.num_dof} joint values, got shape {q.shape}"
        )
    return q


def forward_kinematics_world(chain: DHChain, q: ArrayLike) -> Array:
    """Internal FK function returning the stacked world transforms.

    Args:
        chain: DHChain describing the linkage
        q: Joint angles array of shape (num_dof,)

    Returns:
        Array of shape (num_dof + 1, 4, 4); index 0 is the base frame
    """
    q = _joint_vector(chain, q)
    _LOG.debug("Evaluating forward kinematics for a %d-DOF chain", chain.num_dof)

    base = matrix.identity(4)
    if chain.num_dof == 0:
        return base[None]

    params = jnp.array(
        [[link.a, link.alpha, link.d, link.theta_offset] for link in chain.links],
        dtype=jnp.float64,
    )

    def scan_body(T_world_to_parent, inputs):
        """Appends link i using its parent's world pose from the carry."""
        (a, alpha, d, theta_offset), q_i = inputs
        T_world_to_child = matrix.multiply(
            T_world_to_parent, dh_transform(a, alpha, d, theta_offset + q_i)
        )
        return T_world_to_child, T_world_to_child

    _, link_poses = jax.lax.scan(scan_body, base, (params, q))

    return jnp.concatenate([base[None], link_poses], axis=0)


def forward_kinematics(chain: DHChain, q: ArrayLike) -> Dict[str, Array]:
    """Compute forward kinematics for all frames of the chain.

    Args:
        chain: DHChain describing the linkage
        q: Joint angles array of shape (num_dof,)

    Returns:
        Dictionary mapping frame names (base first) to their 4x4 world poses
    """
    world_transforms = forward_kinematics_world(chain, q)
    return {name: world_transforms[i] for i, name in enumerate(chain.link_names)}


def end_effector_pose(chain: DHChain, q: ArrayLike) -> Transform3d:
    """World pose of the last frame."""
    return Transform3d(forward_kinematics_world(chain, q)[-1])


def joint_positions(chain: DHChain, q: ArrayLike) -> List[Vector3]:
    """World position of every frame origin, base first."""
    world_transforms = forward_kinematics_world(chain, q)
    return [Vector3(x=T[0, 3], y=T[1, 3], z=T[2, 3]) for T in world_transforms]


def jacobian(chain: DHChain, q: ArrayLike) -> Array:
    """Positional Jacobian of the end effector w.r.t. the joint angles.

    Args:
        chain: DHChain describing the linkage
        q: Joint angles array of shape (num_dof,)

    Returns:
        3x(num_dof) matrix mapping joint velocities to end-effector linear
        velocity
    """
    q = _joint_vector(chain, q)

    def end_effector_position(joint_angles: Array) -> Array:
        return forward_kinematics_world(chain, joint_angles)[-1, :3, 3]

    return jax.jacrev(end_effector_position)(q)
