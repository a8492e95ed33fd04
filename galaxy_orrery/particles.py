"""Procedural point cloud for the galaxy backdrop.

Points are sampled uniformly by volume inside a sphere, tinted inside a
narrow hue band and given a random sprite size. Generation is vectorised
with numpy and depends only on the randomness source passed in, so a fixed
seed always reproduces the same cloud.
"""

import logging
import numbers

import numpy as np

from .errors import InvalidArgument
from .settings import DEFAULT_GALAXY, GalaxyStyle

logger = logging.getLogger(__name__)


class PointCloud:
    """Parallel, read-only position/colour/size buffers for one point field."""

    __slots__ = ("positions", "colors", "sizes")

    def __init__(self, positions, colors, sizes):
        positions = np.array(positions, dtype='f8')
        colors = np.array(colors, dtype='f8')
        sizes = np.array(sizes, dtype='f8')
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise InvalidArgument(f"positions must be (n, 3), got {positions.shape}")
        if colors.shape != positions.shape or sizes.shape != (positions.shape[0],):
            raise InvalidArgument("positions, colors and sizes must have the same length")
        for arr in (positions, colors, sizes):
            arr.flags.writeable = False
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "colors", colors)
        object.__setattr__(self, "sizes", sizes)

    def __setattr__(self, name, value):
        raise AttributeError("PointCloud is immutable")

    @property
    def count(self) -> int:
        return self.positions.shape[0]

    def __len__(self):
        return self.count

    def interleaved(self) -> np.ndarray:
        """Return a flat float32 buffer laid out as ``3f 3f 1f`` per point."""
        data = np.empty((self.count, 7), dtype='f4')
        data[:, 0:3] = self.positions
        data[:, 3:6] = self.colors
        data[:, 6] = self.sizes
        return data.ravel()


def _hue_to_rgb(p, q, t):
    t = np.mod(t, 1.0)
    return np.select(
        [t < 1.0 / 6.0, t < 0.5, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * 6.0 * (2.0 / 3.0 - t)],
        default=p,
    )


def hsl_to_rgb(h, s, l):
    """Convert HSL (all in [0, 1]) to RGB. Returns an array with a trailing axis of 3."""
    h, s, l = np.broadcast_arrays(np.asarray(h, dtype='f8'),
                                  np.asarray(s, dtype='f8'),
                                  np.asarray(l, dtype='f8'))
    q = np.where(l <= 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q
    rgb = np.stack([
        _hue_to_rgb(p, q, h + 1.0 / 3.0),
        _hue_to_rgb(p, q, h),
        _hue_to_rgb(p, q, h - 1.0 / 3.0),
    ], axis=-1)
    return np.clip(rgb, 0.0, 1.0)


def _as_generator(rng) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    # bool is an Integral but never a meaningful seed
    if isinstance(rng, numbers.Integral) and not isinstance(rng, bool):
        if rng < 0:
            raise InvalidArgument(f"seed must be non-negative, got {rng}")
        return np.random.default_rng(int(rng))
    raise InvalidArgument(
        f"randomness source must be a numpy Generator or an integer seed, got {type(rng).__name__}")


def generate_point_cloud(count, rng, style: GalaxyStyle = DEFAULT_GALAXY) -> PointCloud:
    """Sample ``count`` points uniformly by volume inside a sphere of ``style.radius``.

    Args:
        count: Number of points, a positive integer.
        rng: ``numpy.random.Generator`` or integer seed.
        style: Radius, colour band and size range to sample from.

    Raises:
        InvalidArgument: ``count`` is not a positive integer, ``rng`` is not a
            usable randomness source or ``style`` is out of range.
    """
    if isinstance(count, bool) or not isinstance(count, numbers.Integral) or count <= 0:
        raise InvalidArgument(f"point count must be a positive integer, got {count!r}")
    style.validate()
    gen = _as_generator(rng)
    count = int(count)

    u = gen.random((count, 6))

    radius = style.radius * np.cbrt(u[:, 0])
    theta = u[:, 1] * 2.0 * np.pi
    phi = np.arccos(2.0 * u[:, 2] - 1.0)
    sin_phi = np.sin(phi)
    positions = np.column_stack([
        radius * sin_phi * np.cos(theta),
        radius * sin_phi * np.sin(theta),
        radius * np.cos(phi),
    ])

    hue = style.hue + u[:, 3] * style.hue_span
    lightness = style.lightness_min + u[:, 4] * style.lightness_span
    colors = hsl_to_rgb(hue, style.saturation, lightness)

    sizes = style.size_min + u[:, 5] * style.size_span

    logger.debug("Generated %d galaxy points (radius %.1f)", count, style.radius)
    return PointCloud(positions, colors, sizes)
