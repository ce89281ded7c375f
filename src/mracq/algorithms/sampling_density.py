"""Sampling density compensation weights using an iterative NUFFT-based estimate."""

import math
from collections.abc import Sequence

import torch
import torchkbnufft as tkbn

from mracq.data.AcquisitionData import AcquisitionData
from mracq.data.exceptions import DegenerateInputError, ShapeMismatchError

NUFFT_OVERSAMPLING = 1.25
"""Oversampling of the NUFFT grid."""

NUFFT_KERNEL_SUPPORT = 3
"""Half width of the interpolation kernel in grid points."""

NUFFT_DENSITY_ITERATIONS = 10
"""Number of iterations of the density estimate."""


def echo_sampling_density(nodes: torch.Tensor, shape: Sequence[int]) -> torch.Tensor:
    """Calculate the density compensation weights of a set of k-space nodes.

    The density is estimated iteratively [PIP1999]_ using the interpolation of a
    Kaiser-Bessel NUFFT with an oversampling of `NUFFT_OVERSAMPLING`
    and `2 * NUFFT_KERNEL_SUPPORT` neighbors.

    Parameters
    ----------
    nodes
        k-space nodes normalized to `[-0.5, 0.5)`, shape `(dim, nodes)`
    shape
        image size, one entry per row of `nodes`

    Returns
    -------
        square root of the density compensation, shape `(nodes,)`

    References
    ----------
    .. [PIP1999] Pipe JG, Menon P (1999) Sampling density compensation in MRI: Rationale and an iterative numerical
       solution. MRM 41(1) https://doi.org/10.1002/(SICI)1522-2594(199901)41:1<179::AID-MRM25>3.0.CO;2-V
    """
    if len(shape) != nodes.shape[0]:
        raise ShapeMismatchError(f'Image shape {tuple(shape)} does not match the {nodes.shape[0]}D nodes.')
    if nodes.shape[1] == 0:
        raise DegenerateInputError('Cannot estimate the sampling density of an empty set of nodes.')
    im_size = tuple(int(size) for size in shape)
    grid_size = tuple(math.ceil(NUFFT_OVERSAMPLING * size) for size in im_size)
    # torchkbnufft expects the nodes in radians
    omega = 2 * torch.pi * nodes.to(torch.get_default_dtype())
    density = tkbn.calc_density_compensation_function(
        ktraj=omega,
        im_size=im_size,
        grid_size=grid_size,
        numpoints=2 * NUFFT_KERNEL_SUPPORT,
        num_iterations=NUFFT_DENSITY_ITERATIONS,
    )
    return density.abs().reshape(-1).sqrt()


def sampling_density(acq_data: AcquisitionData, shape: Sequence[int]) -> list[torch.Tensor]:
    """Calculate the sampling density weights of each echo.

    The weights are the square root of the density compensation, so they can be applied
    to both the forward and the adjoint NUFFT.
    Only the acquired nodes, i.e. those selected by `subsample_indices`, are considered.

    Parameters
    ----------
    acq_data
        acquisition data
    shape
        image size, one entry per trajectory dimension

    Returns
    -------
        one weight vector per echo, with shape `(samples,)`
    """
    weights = []
    for echo in range(acq_data.n_echoes):
        nodes = acq_data.trajectory(echo).nodes[:, acq_data.subsample_indices[echo]]
        weights.append(echo_sampling_density(nodes, shape))
    return weights
