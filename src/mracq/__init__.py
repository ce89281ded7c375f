from mracq._version import __version__
from mracq import algorithms, data, utils
from mracq.data import AcquisitionData, Trajectory

__all__ = [
    "AcquisitionData",
    "Trajectory",
    "__version__",
    "algorithms",
    "data",
    "utils"
]
