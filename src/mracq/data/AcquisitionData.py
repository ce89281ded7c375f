"""Acquired k-space data with trajectories (AcquisitionData) class."""

import dataclasses
from collections.abc import Sequence
from typing import Any

import torch
from einops import rearrange
from typing_extensions import Self

from mracq.data.Dataclass import Dataclass, InconsistentDeviceError
from mracq.data.exceptions import ShapeMismatchError
from mracq.data.Trajectory import Trajectory
from mracq.utils.summarize_values import summarize_values

PIXEL_SPACING_MM = (1.0, 1.0, 1.0)
"""Pixel spacing reported for all acquisitions, in mm."""


def _check_index(name: str, index: int, size: int) -> None:
    """Raise an IndexError if index is not in `0..size-1`."""
    if not 0 <= index < size:
        raise IndexError(f'{name} index {index} out of range, must be in [0, {size}).')


class AcquisitionData(Dataclass):
    """Acquired k-space data with the trajectories that produced it.

    The data are stored per echo, as echoes can be sampled with a different number of nodes.
    For each echo, `kdata[echo]` has shape `(slices repetitions samples coils)`,
    i.e. `kdata[echo][slice, rep]` is the `(samples coils)` matrix of one measurement.

    The samples of an echo are the nodes of the echo's trajectory selected by
    `subsample_indices[echo]`. All coils, slices and repetitions of an echo share
    the same trajectory and the same sampling pattern.
    """

    trajectories: list[Trajectory]
    """One trajectory per echo."""

    kdata: list[torch.Tensor]
    """K-space data, one tensor per echo. Shape `(slices repetitions samples coils)`"""

    n_echoes: int
    """Number of echoes."""

    n_coils: int
    """Number of receiver coils."""

    n_slices: int
    """Number of slices."""

    n_reps: int
    """Number of repetitions."""

    subsample_indices: list[torch.Tensor]
    """Indices of the acquired nodes in the trajectory of each echo. Shape `(samples,)`"""

    encoding_size: tuple[int, int, int] = (0, 0, 0)
    """Encoding matrix size along x, y and z."""

    fov: tuple[float, float, float] = (0.0, 0.0, 0.0)
    """Field of view along x, y and z in mm."""

    sequence_info: dict[str, Any] = dataclasses.field(default_factory=dict)
    """Sequence parameters. Not interpreted by this package."""

    def __post_init__(self) -> None:
        """Check the consistency of the counts, data and indices, give each echo its own trajectory."""
        if min(self.n_echoes, self.n_coils, self.n_slices, self.n_reps) < 1:
            raise ShapeMismatchError(
                f'The numbers of echoes ({self.n_echoes}), coils ({self.n_coils}), slices ({self.n_slices}) '
                f'and repetitions ({self.n_reps}) must be positive.'
            )
        if not len(self.trajectories) == len(self.kdata) == len(self.subsample_indices) == self.n_echoes:
            raise ShapeMismatchError(
                f'Expected {self.n_echoes} echoes, got {len(self.trajectories)} trajectories, '
                f'{len(self.kdata)} data tensors and {len(self.subsample_indices)} index sets.'
            )
        if len(self.encoding_size) != 3 or len(self.fov) != 3:
            raise ShapeMismatchError('encoding_size and fov must have exactly 3 components.')

        # transforms modify trajectories in-place, so echoes must not share one
        owned: list[Trajectory] = []
        for traj in self.trajectories:
            owned.append(traj.clone() if any(traj is other for other in owned) else traj)
        self.trajectories = owned

        for echo, (traj, data, idx) in enumerate(
            zip(self.trajectories, self.kdata, self.subsample_indices, strict=True)
        ):
            expected_shape = (self.n_slices, self.n_reps, idx.numel(), self.n_coils)
            if tuple(data.shape) != expected_shape:
                raise ShapeMismatchError(
                    f'Data of echo {echo} has shape {tuple(data.shape)}, expected {expected_shape} '
                    '(slices repetitions samples coils).'
                )
            if idx.ndim != 1:
                raise ShapeMismatchError(f'Subsample indices of echo {echo} must be one-dimensional.')
            if idx.numel() and (idx.min() < 0 or idx.max() >= traj.n_nodes):
                raise ShapeMismatchError(
                    f'Subsample indices of echo {echo} must be in [0, {traj.n_nodes}) for a trajectory '
                    f'with {traj.n_nodes} nodes.'
                )
            if torch.unique(idx).numel() != idx.numel():
                raise ShapeMismatchError(f'Subsample indices of echo {echo} are not unique.')

    @classmethod
    def from_trajectories(
        cls,
        trajectory: Trajectory | Sequence[Trajectory],
        kdata: torch.Tensor | Sequence[torch.Tensor],
        *,
        n_coils: int | None = None,
        n_echoes: int | None = None,
        n_slices: int | None = None,
        n_reps: int | None = None,
        subsample_indices: Sequence[torch.Tensor] | None = None,
        encoding_size: Sequence[int] = (0, 0, 0),
        fov: Sequence[float] = (0.0, 0.0, 0.0),
        sequence_info: dict[str, Any] | None = None,
    ) -> Self:
        """Create AcquisitionData from trajectories and a data cube.

        Parameters
        ----------
        trajectory
            One trajectory per echo, or a single trajectory used for all echoes.
        kdata
            K-space data. Either one tensor per echo with shape `(slices repetitions samples coils)`,
            or a single tensor with shape `(echoes slices repetitions samples coils)`.
        n_coils
            Number of coils. Taken from the data if `None`.
        n_echoes
            Number of echoes. Taken from the data if `None`.
        n_slices
            Number of slices. Taken from the data if `None`.
        n_reps
            Number of repetitions. Taken from the data if `None`.
        subsample_indices
            Indices of the acquired nodes for each echo.
            If `None`, all nodes of the trajectory are considered acquired.
        encoding_size
            Encoding matrix size along x, y and z.
        fov
            Field of view along x, y and z in mm.
        sequence_info
            Additional sequence parameters.
        """
        data = list(kdata.unbind(0)) if isinstance(kdata, torch.Tensor) else list(kdata)
        if not data:
            raise ShapeMismatchError('At least one echo of k-space data is required.')
        if any(d.ndim != 4 for d in data):
            raise ShapeMismatchError('K-space data of each echo must have shape (slices repetitions samples coils).')
        n_slices_data, n_reps_data, _, n_coils_data = data[0].shape
        n_echoes = len(data) if n_echoes is None else n_echoes

        trajectories = [trajectory] * n_echoes if isinstance(trajectory, Trajectory) else list(trajectory)

        if subsample_indices is None:
            indices = [torch.arange(traj.n_nodes, device=traj.nodes.device) for traj in trajectories]
        else:
            indices = [torch.as_tensor(idx, dtype=torch.int64) for idx in subsample_indices]

        return cls(
            trajectories=trajectories,
            kdata=data,
            n_echoes=n_echoes,
            n_coils=n_coils_data if n_coils is None else n_coils,
            n_slices=n_slices_data if n_slices is None else n_slices,
            n_reps=n_reps_data if n_reps is None else n_reps,
            subsample_indices=indices,
            encoding_size=tuple(int(size) for size in encoding_size),  # type: ignore[arg-type]
            fov=tuple(float(length) for length in fov),  # type: ignore[arg-type]
            sequence_info={} if sequence_info is None else sequence_info,
        )

    @property
    def pixel_spacing(self) -> tuple[float, float, float]:
        """Pixel spacing in mm.

        Physical scaling is not tracked, the spacing is always 1 mm.
        """
        return PIXEL_SPACING_MM

    def n_samples(self, echo: int = 0) -> int:
        """Number of acquired samples of an echo."""
        _check_index('Echo', echo, self.n_echoes)
        return self.subsample_indices[echo].numel()

    def trajectory(self, echo: int = 0) -> Trajectory:
        """Get the trajectory of an echo.

        Parameters
        ----------
        echo
            index of the echo

        Raises
        ------
        IndexError
            if the echo index is out of range
        """
        _check_index('Echo', echo, self.n_echoes)
        return self.trajectories[echo]

    def _measurement(self, echo: int, slice: int, rep: int) -> torch.Tensor:  # noqa: A002
        """Return the `(samples coils)` data of one echo, slice and repetition."""
        _check_index('Echo', echo, self.n_echoes)
        _check_index('Slice', slice, self.n_slices)
        _check_index('Repetition', rep, self.n_reps)
        return self.kdata[echo][slice, rep]

    def k_data(self, echo: int = 0, coil: int = 0, slice: int = 0, rep: int = 0) -> torch.Tensor:  # noqa: A002
        """Get the k-space data of a single echo, coil, slice and repetition.

        Returns
        -------
            k-space samples with shape `(samples,)`
        """
        _check_index('Coil', coil, self.n_coils)
        return self._measurement(echo, slice, rep)[:, coil]

    def multi_echo_data(self, coil: int, slice: int, rep: int = 0) -> torch.Tensor:  # noqa: A002
        """Get the k-space data of all echoes for a coil, slice and repetition.

        The echoes are concatenated in increasing order.
        """
        return torch.cat([self.k_data(echo, coil, slice, rep) for echo in range(self.n_echoes)])

    def multi_coil_data(self, echo: int, slice: int, rep: int = 0) -> torch.Tensor:  # noqa: A002
        """Get the k-space data of all coils for an echo, slice and repetition.

        The data are flattened coil by coil, i.e. all samples of the first coil,
        followed by all samples of the second coil and so on.
        """
        return rearrange(self._measurement(echo, slice, rep), 'samples coils -> (coils samples)')

    def multi_coil_multi_echo_data(self, slice: int, rep: int = 0) -> torch.Tensor:  # noqa: A002
        """Get the k-space data of all coils and echoes for a slice and repetition.

        The data are grouped by coil. Within each coil, the echoes follow in increasing order.
        """
        return torch.cat(
            [self.k_data(echo, coil, slice, rep) for coil in range(self.n_coils) for echo in range(self.n_echoes)]
        )

    def profile_data(self, echo: int, slice: int, rep: int, profile: int) -> torch.Tensor:  # noqa: A002
        """Get the k-space data of a single profile.

        For 2D trajectories or trajectories with a single partition, the data of the slice
        are split into profiles. For 3D trajectories, the data of the first slice contain
        all partitions, and `slice` selects the partition.

        Parameters
        ----------
        echo
            index of the echo
        slice
            index of the slice, or of the partition for 3D trajectories
        rep
            index of the repetition
        profile
            index of the profile

        Returns
        -------
            k-space data with shape `(samples_per_profile coils)`

        Raises
        ------
        IndexError
            if any index is out of range
        ShapeMismatchError
            if the number of samples does not match the profile layout of the trajectory
        """
        traj = self.trajectory(echo)
        n_profiles, n_samples, n_partitions = traj.n_profiles, traj.n_samples_per_profile, traj.n_slices
        _check_index('Profile', profile, n_profiles)
        if traj.dims == 2 or n_partitions == 1:
            data = self.multi_coil_data(echo, slice, rep)
            expected = n_samples * n_profiles * self.n_coils
        else:
            _check_index('Slice', slice, n_partitions)
            data = self.multi_coil_data(echo, 0, rep)
            expected = n_samples * n_profiles * n_partitions * self.n_coils
        if data.numel() != expected:
            raise ShapeMismatchError(
                f'Echo {echo} has {data.numel()} samples over all coils, but the trajectory layout '
                f'requires {expected}.'
            )
        if traj.dims == 2 or n_partitions == 1:
            profiles = rearrange(
                data, '(coils profiles samples) -> samples profiles coils', coils=self.n_coils, samples=n_samples
            )
            return profiles[:, profile, :]
        profiles = rearrange(
            data,
            '(coils slices profiles samples) -> samples profiles slices coils',
            coils=self.n_coils,
            slices=n_partitions,
            samples=n_samples,
        )
        return profiles[:, profile, slice, :]

    def __repr__(self):
        """Representation method for AcquisitionData class."""
        samples = [idx.numel() for idx in self.subsample_indices]
        try:
            device = str(self.device)
        except InconsistentDeviceError:
            device = 'mixed'
        out = (
            f'{type(self).__name__} on device "{device}" with {self.n_echoes} echoes, {self.n_coils} coils, '
            f'{self.n_slices} slices, {self.n_reps} repetitions\n'
            f'samples per echo: {summarize_values(samples)}\n'
            f'encoding size: {self.encoding_size}, fov: {self.fov} mm'
        )
        return out
