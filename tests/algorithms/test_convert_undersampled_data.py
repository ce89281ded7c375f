"""Tests for the conversion of undersampled acquisition data."""

import pytest
import torch
from mracq.algorithms import convert_undersampled_data
from mracq.data import AcquisitionData, ShapeMismatchError, Trajectory, TrajectoryKind


def test_convert_undersampled_data_reindexes(undersampled_acq_data):
    """Indices are reset and the trajectories contain only the acquired nodes."""
    converted = convert_undersampled_data(undersampled_acq_data)
    for echo in range(undersampled_acq_data.n_echoes):
        old_idx = undersampled_acq_data.subsample_indices[echo]
        old_traj = undersampled_acq_data.trajectory(echo)
        new_traj = converted.trajectory(echo)
        torch.testing.assert_close(converted.subsample_indices[echo], torch.arange(old_idx.numel()))
        assert new_traj.n_nodes == old_idx.numel()
        torch.testing.assert_close(new_traj.nodes, old_traj.nodes[:, old_idx])
        torch.testing.assert_close(new_traj.times, old_traj.times[old_idx])
        assert not new_traj.is_regular_grid
        torch.testing.assert_close(converted.kdata[echo], undersampled_acq_data.kdata[echo])


def test_convert_undersampled_data_does_not_modify_input(undersampled_acq_data):
    """The input is unchanged and shares no tensors with the result."""
    n_nodes = [traj.n_nodes for traj in undersampled_acq_data.trajectories]
    indices = [idx.clone() for idx in undersampled_acq_data.subsample_indices]
    converted = convert_undersampled_data(undersampled_acq_data)
    converted.kdata[0][0, 0, 0, 0] = 100.0
    assert [traj.n_nodes for traj in undersampled_acq_data.trajectories] == n_nodes
    for idx, expected in zip(undersampled_acq_data.subsample_indices, indices, strict=True):
        torch.testing.assert_close(idx, expected)
    assert undersampled_acq_data.kdata[0][0, 0, 0, 0] != 100.0


def test_convert_undersampled_data_scenario():
    """One echo, 2 coils, 4 nodes of which the first and third are acquired."""
    nodes = torch.tensor([[-0.5, -0.25, 0.0, 0.25], [0.1, 0.2, 0.3, 0.4]])
    trajectory = Trajectory(nodes=nodes, kind=TrajectoryKind.CARTESIAN, is_regular_grid=True)
    kdata = torch.arange(4.0).to(torch.complex64).reshape(1, 1, 1, 2, 2)
    acq_data = AcquisitionData.from_trajectories(trajectory, kdata, subsample_indices=[torch.tensor([0, 2])])
    converted = convert_undersampled_data(acq_data)
    torch.testing.assert_close(converted.trajectory(0).nodes, nodes[:, [0, 2]])
    torch.testing.assert_close(converted.subsample_indices[0], torch.tensor([0, 1]))
    assert not converted.trajectory(0).is_regular_grid
    assert acq_data.trajectory(0).is_regular_grid


def test_convert_undersampled_data_fully_sampled_warns(acq_data):
    """Converting fully sampled data only drops the regular grid flag."""
    with pytest.warns(UserWarning, match='fully sampled'):
        converted = convert_undersampled_data(acq_data)
    torch.testing.assert_close(converted.trajectory(0).nodes, acq_data.trajectory(0).nodes)


def test_convert_undersampled_data_shared_trajectory():
    """Echoes constructed from one trajectory object are pruned with their own indices."""
    nodes = torch.tensor([[0.0, 0.1, 0.2, 0.3], [0.0, 0.1, 0.2, 0.3]])
    trajectory = Trajectory(nodes=nodes)
    acq_data = AcquisitionData(
        trajectories=[trajectory, trajectory],
        kdata=[torch.zeros(1, 1, 2, 1, dtype=torch.complex64) for _ in range(2)],
        n_echoes=2,
        n_coils=1,
        n_slices=1,
        n_reps=1,
        subsample_indices=[torch.tensor([2, 3]), torch.tensor([0, 1])],
    )
    converted = convert_undersampled_data(acq_data)
    torch.testing.assert_close(converted.trajectory(0).nodes, nodes[:, [2, 3]])
    torch.testing.assert_close(converted.trajectory(1).nodes, nodes[:, [0, 1]])


def test_convert_undersampled_data_keeps_profile_layout(undersampled_acq_data):
    """The profile layout of the full trajectory is kept, so profiles cannot be extracted."""
    converted = convert_undersampled_data(undersampled_acq_data)
    trajectory = converted.trajectory(0)
    assert trajectory.n_samples_per_profile == undersampled_acq_data.trajectory(0).n_samples_per_profile
    assert trajectory.n_nodes != trajectory.n_profiles * trajectory.n_samples_per_profile
    with pytest.raises(ShapeMismatchError):
        converted.profile_data(echo=0, slice=0, rep=0, profile=0)
