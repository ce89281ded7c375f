"""Data containers for acquired k-space data and trajectories."""

from mracq.data import enums
from mracq.data.AcquisitionData import AcquisitionData
from mracq.data.Dataclass import Dataclass, InconsistentDeviceError
from mracq.data.enums import TrajectoryKind
from mracq.data.exceptions import DegenerateInputError, ShapeMismatchError
from mracq.data.Trajectory import Trajectory

__all__ = [
    "AcquisitionData",
    "Dataclass",
    "DegenerateInputError",
    "InconsistentDeviceError",
    "ShapeMismatchError",
    "Trajectory",
    "TrajectoryKind",
    "enums"
]
