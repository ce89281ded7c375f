"""Change the encoding size (resolution) of 2D acquisition data."""

import math
import warnings
from collections.abc import Sequence

import torch

from mracq.data.AcquisitionData import AcquisitionData
from mracq.data.exceptions import DegenerateInputError, ShapeMismatchError


def _nodes_in_unit_interval(coordinates: torch.Tensor) -> torch.Tensor:
    """Indices of the coordinates inside `[-0.5, 0.5)`, in ascending order."""
    return torch.nonzero((coordinates >= -0.5) & (coordinates < 0.5)).squeeze(-1)


def change_encoding_size_2d(acq_data: AcquisitionData, new_encoding_size: Sequence[int]) -> AcquisitionData:
    """Change the encoding size of 2D acquisition data.

    Returns a copy, the input is not modified. See `change_encoding_size_2d_` for details.

    Parameters
    ----------
    acq_data
        acquisition data with a 2D encoding
    new_encoding_size
        new encoding size along x and y, optionally followed by z

    Returns
    -------
        acquisition data with the new encoding size
    """
    return change_encoding_size_2d_(acq_data.clone(), new_encoding_size)


def change_encoding_size_2d_(acq_data: AcquisitionData, new_encoding_size: Sequence[int]) -> AcquisitionData:
    """Change the encoding size of 2D acquisition data in-place.

    The k-space nodes are rescaled by `fac = old_encoding_size / new_encoding_size` along x and y.
    Nodes that end up outside of `[-0.5, 0.5)` along x or y are removed from the trajectory,
    together with their readout times and the corresponding k-space samples.
    The remaining samples are scaled by `1 / prod(fac)` to account for the changed k-space density.
    The z axis is not changed.
    The profile layout of the trajectories (`n_profiles`, `n_samples_per_profile`, `n_slices`) is kept
    unchanged, so after nodes are removed it no longer matches the number of nodes.

    All echoes are checked before the data is modified, so the data is left unchanged if an error is raised.
    The caller has to make sure that no one else uses the data during the modification.

    Parameters
    ----------
    acq_data
        acquisition data with a 2D encoding. Modified in-place.
    new_encoding_size
        new encoding size along x and y, optionally followed by z.
        If only x and y are given, the encoding size along z is kept.

    Returns
    -------
        the modified acquisition data

    Raises
    ------
    ShapeMismatchError
        if the new encoding size does not have 2 or 3 components with positive x and y,
        or if the current encoding size is zero along x or y
    DegenerateInputError
        if no sample remains for an echo
    """
    if len(new_encoding_size) not in (2, 3) or min(new_encoding_size[:2]) <= 0:
        raise ShapeMismatchError(
            f'The new encoding size must have positive x and y components, got {tuple(new_encoding_size)}.'
        )
    if min(acq_data.encoding_size[:2]) <= 0:
        raise ShapeMismatchError(
            f'The current encoding size {acq_data.encoding_size} must be positive along x and y.'
        )
    fac = [old / new for old, new in zip(acq_data.encoding_size[:2], new_encoding_size[:2], strict=True)]
    if min(fac) < 1:
        warnings.warn(
            f'New encoding size {tuple(new_encoding_size)} exceeds {acq_data.encoding_size}. '
            'The k-space coverage is not extended.',
            stacklevel=2,
        )
    scale = 1.0 / math.prod(fac)

    # first pass: find the surviving nodes of all echoes without modifying anything
    surviving = []
    for echo in range(acq_data.n_echoes):
        traj = acq_data.trajectory(echo)
        nodes = traj.nodes.clone() if traj.nodes.is_floating_point() else traj.nodes.to(torch.get_default_dtype())
        nodes[0] *= fac[0]
        nodes[1] *= fac[1]
        idx_x = _nodes_in_unit_interval(nodes[0])
        idx_y = _nodes_in_unit_interval(nodes[1])
        keep = torch.zeros(traj.n_nodes, dtype=torch.bool, device=nodes.device)
        keep[idx_x[torch.isin(idx_x, idx_y)]] = True

        # samples survive if their node does, indices are renumbered to the remaining nodes
        samples = keep[acq_data.subsample_indices[echo]]
        new_position = torch.cumsum(keep, dim=0) - 1
        new_idx = new_position[acq_data.subsample_indices[echo][samples]]
        if not keep.any() or not samples.any():
            raise DegenerateInputError(
                f'No samples of echo {echo} remain for encoding size {tuple(new_encoding_size)}.'
            )
        surviving.append((nodes, keep, samples, new_idx))

    # second pass: modify trajectories and data
    for echo, (nodes, keep, samples, new_idx) in enumerate(surviving):
        traj = acq_data.trajectory(echo)
        traj.nodes = nodes[:, keep]
        traj.times = traj.times[keep] if traj.times is not None else None
        acq_data.kdata[echo] = acq_data.kdata[echo][:, :, samples, :] * scale
        acq_data.subsample_indices[echo] = new_idx

    if len(new_encoding_size) == 3:
        acq_data.encoding_size = (int(new_encoding_size[0]), int(new_encoding_size[1]), int(new_encoding_size[2]))
    else:
        acq_data.encoding_size = (int(new_encoding_size[0]), int(new_encoding_size[1]), acq_data.encoding_size[2])
    return acq_data
