"""Convert undersampled acquisition data to trajectories holding only the acquired nodes."""

import warnings

import torch

from mracq.data.AcquisitionData import AcquisitionData


def convert_undersampled_data(acq_data: AcquisitionData) -> AcquisitionData:
    """Restrict the trajectories to the acquired nodes.

    In undersampled acquisition data, the trajectories describe all candidate nodes and
    `subsample_indices` selects the acquired ones. This returns a copy in which the trajectory
    of each echo contains only the acquired nodes (and their readout times), in the order of
    `subsample_indices`, and the indices are reset to `0..n_samples-1`.

    The pruned trajectories are no longer regular grids. Their `n_profiles`, `n_samples_per_profile`
    and `n_slices` still describe the original layout and no longer add up to the number of nodes,
    so `AcquisitionData.profile_data` raises a `ShapeMismatchError` for a pruned echo. All coils, slices and repetitions
    of an echo are assumed to share the sampling pattern.

    Parameters
    ----------
    acq_data
        undersampled acquisition data. Not modified.

    Returns
    -------
        acquisition data with trajectories restricted to the acquired nodes
    """
    converted = acq_data.clone()

    for echo in range(converted.n_echoes):
        idx = converted.subsample_indices[echo]
        traj = converted.trajectory(echo)
        if idx.numel() == traj.n_nodes and torch.equal(idx, torch.arange(traj.n_nodes, device=idx.device)):
            warnings.warn(
                f'Echo {echo} is fully sampled. Only the regular grid flag of its trajectory is changed.',
                stacklevel=2,
            )
        traj.nodes = traj.nodes[:, idx]
        traj.times = traj.times[idx] if traj.times is not None else None
        traj.is_regular_grid = False
        converted.subsample_indices[echo] = torch.arange(idx.numel(), device=idx.device)

    return converted
