"""Denavit-Hartenberg description of a serial revolute linkage.

Both records are immutable ``flax.struct`` dataclasses, so a chain can be
closed over or passed straight into jit-compiled kinematics functions.
"""

from typing import Optional, Sequence, Tuple

from flax import struct


@struct.dataclass
class DHLink:
    """Standard DH parameters of one revolute link.

    Attributes:
        a: Link length, along x_i
        alpha: Link twist about x_i (radians)
        d: Link offset along z_{i-1}
        theta_offset: Constant added to the joint variable (radians)
        name: Frame name of the link. Static field, not traced.
    """
    a: float
    alpha: float
    d: float
    theta_offset: float = 0.0
    name: str = struct.field(pytree_node=False, default="")


@struct.dataclass
class DHChain:
    """Ordered links from the base outwards. Joint i drives links[i]."""
    links: Tuple[DHLink, ...]

    @classmethod
    def from_parameters(
        cls,
        parameters: Sequence[Sequence[float]],
        names: Optional[Sequence[str]] = None,
    ) -> "DHChain":
        """Build a chain from rows of (a, alpha, d[, theta_offset])."""
        if names is None:
            names = [f"link{i + 1}" for i in range(len(parameters))]
        if len(names) != len(parameters):
            raise ValueError(f"Got {len(names)} names for {len(parameters)} links")

        links = []
        for row, name in zip(parameters, names):
            if len(row) not in (3, 4):
                raise ValueError(f"DH row must be (a, alpha, d[, theta_offset]), got {row}")
            links.append(DHLink(*row, name=name))

        chain = cls(links=tuple(links))
        frame_names = chain.link_names
        if "base" in frame_names[1:]:
            raise ValueError("Link name 'base' is reserved for the base frame")
        if len(set(frame_names)) != len(frame_names):
            raise ValueError(f"Link names must be unique, got {list(frame_names[1:])}")
        return chain

    @property
    def num_dof(self) -> int:
        return len(self.links)

    @property
    def link_names(self) -> Tuple[str, ...]:
        """Frame names, base first."""
        return ("base",) + tuple(
            link.name or f"link{i + 1}" for i, link in enumerate(self.links)
        )
