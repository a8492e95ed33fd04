"""Animated galaxy backdrop with orbiting planets."""

from .errors import InvalidArgument
from .orbits import OrbitalAnimator, OrbitingBody, RotationMode, orbit_path
from .particles import PointCloud, generate_point_cloud

__all__ = [
    "InvalidArgument",
    "OrbitalAnimator",
    "OrbitingBody",
    "PointCloud",
    "RotationMode",
    "generate_point_cloud",
    "orbit_path",
]

__version__ = "0.1.0"
