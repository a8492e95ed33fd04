import logging
import math

from pyrr import Matrix44, Vector3

from .errors import InvalidArgument
from .settings import (CAMERA_DISTANCE, CAMERA_FAR, CAMERA_FOV, CAMERA_NEAR,
                       DAMPING_FACTOR, WINDOW_HEIGHT, WINDOW_WIDTH)

logger = logging.getLogger(__name__)

_EPS = 1e-6


class OrbitCamera:
    """Perspective camera orbiting a target point with damped rotate, zoom and pan.

    Input methods only queue motion. :meth:`update` must run once per frame;
    it applies ``damping_factor`` of the queued motion and keeps the rest
    for later frames so the camera glides to a stop.

    Angles follow the usual spherical convention: ``phi`` is measured from
    +Y, ``theta`` around Y starting at +Z. The default camera sits at
    ``(0, 0, distance)`` looking at the origin.
    """

    def __init__(self, target=(0.0, 0.0, 0.0), distance=CAMERA_DISTANCE, fov=CAMERA_FOV,
                 near=CAMERA_NEAR, far=CAMERA_FAR, aspect=WINDOW_WIDTH / WINDOW_HEIGHT,
                 damping_factor=DAMPING_FACTOR, min_distance=1.0, max_distance=500.0):
        if not 0.0 < damping_factor <= 1.0:
            raise InvalidArgument(f"damping factor must be in (0, 1], got {damping_factor}")
        if not distance > 0:
            raise InvalidArgument(f"camera distance must be positive, got {distance}")
        self.target = Vector3(list(target))
        self.distance = float(distance)
        self.theta = 0.0
        self.phi = math.pi / 2.0
        self.fov = fov
        self.near = near
        self.far = far
        self.aspect = aspect
        self.damping_factor = damping_factor
        self.min_distance = min_distance
        self.max_distance = max_distance

        self._d_theta = 0.0
        self._d_phi = 0.0
        self._d_zoom = 0.0
        self._d_pan = Vector3([0.0, 0.0, 0.0])

    # --- input ---
    def rotate(self, d_theta, d_phi):
        self._d_theta -= d_theta
        self._d_phi -= d_phi

    def zoom(self, steps):
        """Positive steps move towards the target."""
        self._d_zoom += steps

    def pan(self, dx, dy):
        right, up = self._basis()
        self._d_pan += (right * -dx + up * dy) * self.distance

    # --- per frame ---
    def update(self):
        k = self.damping_factor
        self.theta += self._d_theta * k
        self.phi = min(max(self.phi + self._d_phi * k, _EPS), math.pi - _EPS)
        self.distance = min(max(self.distance * math.exp(-self._d_zoom * k),
                                self.min_distance), self.max_distance)
        self.target += self._d_pan * k

        self._d_theta *= 1.0 - k
        self._d_phi *= 1.0 - k
        self._d_zoom *= 1.0 - k
        self._d_pan *= 1.0 - k

    def resize(self, width, height):
        if height <= 0 or width <= 0:
            logger.debug("Ignoring resize to %dx%d", width, height)
            return
        self.aspect = width / height

    # --- matrices ---
    @property
    def position(self) -> Vector3:
        sin_phi = math.sin(self.phi)
        offset = Vector3([
            self.distance * sin_phi * math.sin(self.theta),
            self.distance * math.cos(self.phi),
            self.distance * sin_phi * math.cos(self.theta),
        ])
        return self.target + offset

    def _basis(self):
        forward = (self.target - self.position).normalized
        right = Vector3(forward.cross(Vector3([0.0, 1.0, 0.0]))).normalized
        up = Vector3(right.cross(forward)).normalized
        return right, up

    def view_matrix(self) -> Matrix44:
        return Matrix44.look_at(self.position, self.target, Vector3([0.0, 1.0, 0.0]))

    def projection_matrix(self) -> Matrix44:
        return Matrix44.perspective_projection(self.fov, self.aspect, self.near, self.far)
