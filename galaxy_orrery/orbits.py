"""Circular orbits and self-rotation for the planets.

Positions are recomputed from the absolute elapsed time on every frame, so
they never drift. Self-rotation is an accumulator: each ``advance`` adds a
spin step scaled down by the body's distance from the star.
"""

import logging
import math
import numbers
from typing import Iterator, List, NamedTuple

import numpy as np
from pyrr import Vector3

from .errors import InvalidArgument
from .settings import ORBIT_SEGMENTS, REFERENCE_FPS, SPIN_RATE, RotationMode

logger = logging.getLogger(__name__)


class Transform:
    def __init__(self, position=None, rotation=0.0):
        self.position = Vector3(position if position is not None else [0.0, 0.0, 0.0])
        self.rotation = rotation

    def __repr__(self):
        return f"Transform(position={list(self.position)}, rotation={self.rotation})"


class OrbitingBody:
    """A body on a circular path in the XZ plane. ``orbit_radius == 0`` keeps it at the origin."""

    def __init__(self, angular_speed=0.0, orbit_radius=0.0, spin_rate=SPIN_RATE, name=""):
        self.name = name
        self.angular_speed = angular_speed
        self.orbit_radius = orbit_radius
        self.spin_rate = spin_rate
        self.transform = Transform(orbit_position(orbit_radius, angular_speed, 0.0))

    @classmethod
    def from_spec(cls, spec, spin_rate=SPIN_RATE):
        return cls(spec.angular_speed, spec.orbit_radius, spin_rate, name=spec.name)

    def __repr__(self):
        return (f"OrbitingBody({self.name!r}, angular_speed={self.angular_speed}, "
                f"orbit_radius={self.orbit_radius})")


class BodyHandle(NamedTuple):
    index: int
    name: str = ""


def orbit_position(radius, angular_speed, elapsed):
    if radius == 0:
        return [0.0, 0.0, 0.0]
    angle = elapsed * angular_speed
    return [math.cos(angle) * radius, 0.0, math.sin(angle) * radius]


class OrbitalAnimator:
    """Owns the registered bodies and updates their transforms once per frame.

    The host calls :meth:`advance` with seconds elapsed since the scene
    started. NaN inputs are not checked and come back out as NaN transforms.
    """

    def __init__(self, rotation_mode=RotationMode.LEGACY, reference_fps=REFERENCE_FPS):
        self.rotation_mode = RotationMode(rotation_mode)
        self.reference_fps = reference_fps
        self._bodies: List[OrbitingBody] = []
        self._last_elapsed = 0.0

    def register(self, body) -> BodyHandle:
        if not isinstance(body, OrbitingBody):
            body = OrbitingBody.from_spec(body)
        self._bodies.append(body)
        handle = BodyHandle(len(self._bodies) - 1, body.name)
        logger.debug("Registered %r as body %d", body, handle.index)
        return handle

    def advance(self, elapsed_seconds: float) -> None:
        if self.rotation_mode is RotationMode.SCALED:
            # repeated or backwards timestamps add no spin
            step = max(elapsed_seconds - self._last_elapsed, 0.0) * self.reference_fps
        else:
            step = 1.0
        self._last_elapsed = elapsed_seconds

        for body in self._bodies:
            position = body.transform.position
            position[:] = orbit_position(body.orbit_radius, body.angular_speed, elapsed_seconds)
            distance = float(np.linalg.norm(position))
            body.transform.rotation += body.spin_rate * step / max(distance, 1.0)

    @property
    def elapsed(self) -> float:
        return self._last_elapsed

    @property
    def bodies(self) -> List[OrbitingBody]:
        return list(self._bodies)

    def body(self, handle: BodyHandle) -> OrbitingBody:
        return self._bodies[handle.index]

    def transform(self, handle: BodyHandle) -> Transform:
        return self._bodies[handle.index].transform

    def __iter__(self) -> Iterator[OrbitingBody]:
        return iter(self._bodies)

    def __len__(self):
        return len(self._bodies)


def orbit_path(radius, segments=ORBIT_SEGMENTS) -> np.ndarray:
    """Sample a closed orbit ring: ``segments + 1`` points, the last one back at angle 2*pi."""
    if isinstance(segments, bool) or not isinstance(segments, numbers.Integral) or segments <= 0:
        raise InvalidArgument(f"orbit segments must be a positive integer, got {segments!r}")
    angles = np.arange(segments + 1) * (2.0 * np.pi / segments)
    data = np.zeros((segments + 1, 3), dtype='f4')
    data[:, 0] = np.cos(angles) * radius
    data[:, 2] = np.sin(angles) * radius
    return data
