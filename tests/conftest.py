"""PyTest fixtures for the mracq package."""

import pytest
import torch
from einops import repeat
from mracq.data import AcquisitionData, Trajectory, TrajectoryKind

from tests import RandomGenerator


def generate_radial_trajectory(n_profiles: int, n_samples: int) -> Trajectory:
    """2D radial trajectory with nodes in [-0.5, 0.5) and the sample index changing fastest."""
    radius = torch.linspace(-0.5, 0.5, n_samples + 1)[:-1]
    angle = torch.arange(n_profiles) * torch.pi / n_profiles
    kx = repeat(radius, 'samples -> (profiles samples)', profiles=n_profiles) * repeat(
        torch.cos(angle), 'profiles -> (profiles samples)', samples=n_samples
    )
    ky = repeat(radius, 'samples -> (profiles samples)', profiles=n_profiles) * repeat(
        torch.sin(angle), 'profiles -> (profiles samples)', samples=n_samples
    )
    times = repeat(torch.arange(n_samples) * 1e-5, 'samples -> (profiles samples)', profiles=n_profiles)
    return Trajectory(
        nodes=torch.stack([kx, ky]), times=times, n_profiles=n_profiles, kind=TrajectoryKind.RADIAL
    )


def generate_random_trajectory(generator: RandomGenerator, n_nodes: int, dim: int = 2) -> Trajectory:
    """Trajectory with uniformly distributed random nodes in [-0.5, 0.5)."""
    nodes = generator.float32_tensor((dim, n_nodes), low=-0.5, high=0.5)
    times = generator.float32_tensor((n_nodes,), low=0, high=1e-2)
    return Trajectory(nodes=nodes, times=times)


def create_acq_data(
    n_echoes: int = 2,
    n_coils: int = 3,
    n_slices: int = 2,
    n_reps: int = 2,
    n_profiles: int = 4,
    n_samples: int = 8,
    seed: int = 0,
    encoding_size: tuple[int, int, int] = (8, 8, 1),
) -> AcquisitionData:
    """Fully sampled acquisition data with radial trajectories and random data."""
    generator = RandomGenerator(seed)
    trajectories = [generate_radial_trajectory(n_profiles, n_samples) for _ in range(n_echoes)]
    kdata = [
        generator.complex64_tensor((n_slices, n_reps, n_profiles * n_samples, n_coils)) for _ in range(n_echoes)
    ]
    return AcquisitionData.from_trajectories(trajectories, kdata, encoding_size=encoding_size, fov=(200, 200, 5))


@pytest.fixture(params=({'seed': 0},))
def acq_data(request) -> AcquisitionData:
    """Fully sampled acquisition data with 2 echoes, 3 coils, 2 slices and 2 repetitions."""
    return create_acq_data(seed=request.param['seed'])


@pytest.fixture(params=({'seed': 1, 'n_acquired': (10, 20)},))
def undersampled_acq_data(request) -> AcquisitionData:
    """Acquisition data with random subsets of the nodes acquired in each echo."""
    generator = RandomGenerator(request.param['seed'])
    n_nodes, n_coils, n_slices, n_reps = 32, 2, 1, 3
    trajectories = [generate_random_trajectory(generator, n_nodes) for _ in request.param['n_acquired']]
    indices = [generator.subset_indices(n_nodes, n, sort=False) for n in request.param['n_acquired']]
    kdata = [generator.complex64_tensor((n_slices, n_reps, n, n_coils)) for n in request.param['n_acquired']]
    return AcquisitionData.from_trajectories(
        trajectories, kdata, subsample_indices=indices, encoding_size=(16, 16, 1)
    )
