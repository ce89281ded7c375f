"""Apply and remove sampling density weights on k-space data."""

from collections.abc import Sequence

import torch

from mracq.algorithms.sampling_density import sampling_density
from mracq.data.AcquisitionData import AcquisitionData
from mracq.data.exceptions import ShapeMismatchError


def weight_data_(acq_data: AcquisitionData, weights: Sequence[torch.Tensor]) -> AcquisitionData:
    """Multiply the k-space data of each echo by its weights in-place.

    Parameters
    ----------
    acq_data
        acquisition data. Modified in-place.
    weights
        one weight vector per echo, with shape `(samples,)`.
        Cast to the real dtype of the data, so the precision of the data is kept.

    Returns
    -------
        the modified acquisition data
    """
    if len(weights) != acq_data.n_echoes:
        raise ShapeMismatchError(f'Expected {acq_data.n_echoes} weight vectors, got {len(weights)}.')
    for echo, weight in enumerate(weights):
        if weight.shape != (acq_data.n_samples(echo),):
            raise ShapeMismatchError(
                f'Weights of echo {echo} have shape {tuple(weight.shape)}, expected ({acq_data.n_samples(echo)},).'
            )
    for echo, weight in enumerate(weights):
        data = acq_data.kdata[echo]
        # real weights in the precision of the data, broadcast along (slices repetitions samples coils)
        acq_data.kdata[echo] = data * weight[:, None].to(device=data.device, dtype=data.real.dtype)
    return acq_data


def weighted_data(acq_data: AcquisitionData, shape: Sequence[int]) -> AcquisitionData:
    """Return a copy of the data weighted by the sampling density.

    Parameters
    ----------
    acq_data
        acquisition data. Not modified.
    shape
        image size used for the density estimate
    """
    return weight_data_(acq_data.clone(), sampling_density(acq_data, shape))


def unweight_data_(acq_data: AcquisitionData, shape: Sequence[int]) -> AcquisitionData:
    """Divide the k-space data by the sampling density weights in-place.

    Parameters
    ----------
    acq_data
        acquisition data. Modified in-place.
    shape
        image size used for the density estimate
    """
    return weight_data_(acq_data, [1 / weight for weight in sampling_density(acq_data, shape)])


def unweight_data_squared_(acq_data: AcquisitionData, shape: Sequence[int]) -> AcquisitionData:
    """Divide the k-space data by the squared sampling density weights in-place.

    Parameters
    ----------
    acq_data
        acquisition data. Modified in-place.
    shape
        image size used for the density estimate
    """
    return weight_data_(acq_data, [1 / weight.square() for weight in sampling_density(acq_data, shape)])
