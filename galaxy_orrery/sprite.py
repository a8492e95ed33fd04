"""Soft round sprite used as the colour and alpha map of every galaxy point."""

import numbers

import numpy as np

from .errors import InvalidArgument
from .settings import SPRITE_SIZE

# (offset from centre as a fraction of the radius, alpha)
GRADIENT_STOPS = ((0.0, 1.0), (0.2, 0.8), (0.4, 0.4), (1.0, 0.0))


def star_sprite(size: int = SPRITE_SIZE) -> np.ndarray:
    """Return a ``(size, size, 4)`` uint8 RGBA image: white, opaque centre, clear edge."""
    if isinstance(size, bool) or not isinstance(size, numbers.Integral) or size <= 0:
        raise InvalidArgument(f"sprite size must be a positive integer, got {size!r}")
    half = size / 2.0
    # sample at pixel centres so the gradient is symmetric
    coords = (np.arange(size) + 0.5 - half) / half
    dist = np.hypot(*np.meshgrid(coords, coords, indexing='ij'))
    offsets, alphas = zip(*GRADIENT_STOPS)
    alpha = np.interp(dist, offsets, alphas, right=0.0)

    image = np.full((size, size, 4), 255, dtype=np.uint8)
    image[..., 3] = np.round(alpha * 255.0).astype(np.uint8)
    return image
