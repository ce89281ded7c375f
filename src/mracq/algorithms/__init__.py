"""Transforms of acquisition data and density compensation."""

from mracq.algorithms.change_encoding_size import change_encoding_size_2d, change_encoding_size_2d_
from mracq.algorithms.convert_undersampled_data import convert_undersampled_data
from mracq.algorithms.sampling_density import echo_sampling_density, sampling_density
from mracq.algorithms.weight_data import unweight_data_, unweight_data_squared_, weight_data_, weighted_data

__all__ = [
    "change_encoding_size_2d",
    "change_encoding_size_2d_",
    "convert_undersampled_data",
    "echo_sampling_density",
    "sampling_density",
    "unweight_data_",
    "unweight_data_squared_",
    "weight_data_",
    "weighted_data"
]
