"""All trajectory enums."""

import enum


class TrajectoryKind(enum.Enum):
    """Kind of k-space trajectory.

    The geometry of each kind is calculated outside of this package.
    The kind is informative only, all trajectories share the same capabilities.
    """

    CARTESIAN = 'cartesian'
    EPI = 'epi'
    RADIAL = 'radial'
    SPIRAL = 'spiral'
    CUSTOM = 'custom'
