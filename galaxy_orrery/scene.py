"""Composition of the galaxy, the planets and the camera into one scene object.

The generator and the animator only return data. This module is the one
place that calls both and keeps the results together for the render loop.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .camera import OrbitCamera
from .orbits import BodyHandle, OrbitalAnimator, OrbitingBody, orbit_path
from .particles import PointCloud, generate_point_cloud
from .settings import ORBIT_SEGMENTS, SPIN_RATE, AppConfig, PlanetSpec

logger = logging.getLogger(__name__)


@dataclass
class Scene:
    galaxy: PointCloud
    animator: OrbitalAnimator
    camera: OrbitCamera
    planets: List[Tuple[PlanetSpec, BodyHandle]] = field(default_factory=list)
    orbit_paths: List[np.ndarray] = field(default_factory=list)

    def tick(self, elapsed_seconds: float) -> None:
        self.animator.advance(elapsed_seconds)
        self.camera.update()

    def resize(self, width: int, height: int) -> None:
        self.camera.resize(width, height)


def build_scene(config: AppConfig, rng=None, camera: Optional[OrbitCamera] = None) -> Scene:
    """Generate the galaxy once and register every planet of ``config.planets``.

    ``rng`` defaults to ``config.seed``. When the seed is missing a fresh one is
    drawn and logged so the run can be reproduced. A negative seed raises
    :class:`~galaxy_orrery.errors.InvalidArgument`.
    """
    if rng is None:
        seed = config.seed
        if seed is None:
            seed = int(np.random.SeedSequence().entropy % (2 ** 32))
        logger.info("Galaxy seed: %s", seed)
        rng = seed

    galaxy = generate_point_cloud(config.particles, rng, config.galaxy)
    animator = OrbitalAnimator(config.rotation_mode)
    if camera is None:
        camera = OrbitCamera(aspect=config.width / config.height)

    scene = Scene(galaxy=galaxy, animator=animator, camera=camera)
    for spec in config.planets:
        handle = animator.register(OrbitingBody.from_spec(spec, SPIN_RATE))
        scene.planets.append((spec, handle))
        if spec.orbit_radius != 0:
            scene.orbit_paths.append(orbit_path(spec.orbit_radius, ORBIT_SEGMENTS))

    logger.info("Scene ready: %d galaxy points, %d bodies, %s rotation",
                galaxy.count, len(animator), animator.rotation_mode.value)
    return scene
