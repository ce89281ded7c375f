"""Trajectory dataclass."""

import torch
from typing_extensions import Self

from mracq.data.Dataclass import Dataclass
from mracq.data.enums import TrajectoryKind
from mracq.data.exceptions import ShapeMismatchError
from mracq.utils.summarize_values import summarize_values


class Trajectory(Dataclass):
    """K-space trajectory.

    Contains the k-space nodes visited during the acquisition and their readout times,
    i.e. describes where and when in k-space each data point was acquired.

    `nodes` has shape `(dim, nodes)` with `dim` being 2 or 3 and the rows ordered `x, y[, z]`.
    For a fully sampled grid, the coordinates are normalized to `[-0.5, 0.5)` along each axis.
    `times` has shape `(nodes,)`.

    The geometry (Cartesian, EPI, radial, spiral, ...) is calculated outside of this class;
    `kind` only records which calculator produced the nodes.

    Example for a 2D radial trajectory with 8 spokes of 64 samples:

        - `nodes` has shape `(2, 512)`, the sample index changes fastest,
        - `n_profiles` is 8 and `n_samples_per_profile` is 64.
    """

    nodes: torch.Tensor
    """K-space nodes. Shape `(dim, nodes)`"""

    times: torch.Tensor | None = None
    """Readout times of the nodes. Shape `(nodes,)`. Zeros if not given."""

    n_profiles: int = 1
    """Number of profiles (readout lines)."""

    n_samples_per_profile: int | None = None
    """Number of samples per profile. Defaults to the number of nodes divided by the number of profiles."""

    n_slices: int = 1
    """Number of partitions of a 3D trajectory, `1` for 2D trajectories."""

    kind: TrajectoryKind = TrajectoryKind.CUSTOM
    """Kind of the trajectory."""

    is_regular_grid: bool = False
    """Whether the nodes still lie on the regular grid of the original design."""

    def __post_init__(self) -> None:
        """Fill in default times and samples per profile, check shapes."""
        if self.nodes.ndim != 2 or self.nodes.shape[0] not in (2, 3):
            raise ShapeMismatchError(
                f'Trajectory nodes must have shape (2 or 3, nodes), got {tuple(self.nodes.shape)}.'
            )
        if self.times is None:
            self.times = torch.zeros(self.n_nodes, dtype=self.nodes.dtype, device=self.nodes.device)
        if self.times.shape != (self.n_nodes,):
            raise ShapeMismatchError(
                f'Expected one readout time per node ({self.n_nodes}), got shape {tuple(self.times.shape)}.'
            )
        if self.n_profiles < 1 or self.n_slices < 1:
            raise ShapeMismatchError('The number of profiles and slices of a trajectory must be positive.')
        if self.n_samples_per_profile is None:
            self.n_samples_per_profile = self.n_nodes // (self.n_profiles * self.n_slices)

    @classmethod
    def from_tensor(
        cls,
        tensor: torch.Tensor,
        stack_dim: int = -1,
        times: torch.Tensor | None = None,
        n_profiles: int = 1,
        kind: TrajectoryKind = TrajectoryKind.CUSTOM,
        is_regular_grid: bool = False,
    ) -> Self:
        """Create a Trajectory from a tensor of nodes.

        Parameters
        ----------
        tensor
            The node coordinates, a 2D tensor with the `x, y[, z]` components along `stack_dim`.
        stack_dim
            The dimension in the tensor along which the components are stacked.
        times
            Readout times of the nodes. Zeros if `None`.
        n_profiles
            Number of profiles.
        kind
            Kind of the trajectory.
        is_regular_grid
            Whether the nodes lie on a regular grid.
        """
        if tensor.ndim != 2:
            raise ShapeMismatchError(f'Expected a 2D tensor of nodes, got {tensor.ndim} dimensions.')
        nodes = tensor.movedim(stack_dim, 0)
        return cls(nodes=nodes, times=times, n_profiles=n_profiles, kind=kind, is_regular_grid=is_regular_grid)

    @property
    def dims(self) -> int:
        """Dimensionality of the trajectory, 2 or 3."""
        return self.nodes.shape[0]

    @property
    def n_nodes(self) -> int:
        """Number of nodes."""
        return self.nodes.shape[1]

    def __repr__(self):
        """Representation method for Trajectory class."""
        out = (
            f'{type(self).__name__} ({self.kind.value}, {self.dims}D) with {self.n_nodes} nodes, '
            f'{self.n_profiles} profiles x {self.n_samples_per_profile} samples, {self.n_slices} slices, '
            f'regular grid: {self.is_regular_grid}\n'
            f'x: {summarize_values(self.nodes[0])}'
        )
        return out
