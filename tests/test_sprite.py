"""Tests for the soft round star sprite."""

from __future__ import annotations

import numpy as np
import pytest

from galaxy_orrery.errors import InvalidArgument
from galaxy_orrery.sprite import star_sprite


def test_shape_and_white_colour() -> None:
    """The sprite is an RGBA image with white colour channels."""

    image = star_sprite(32)

    assert image.shape == (32, 32, 4)
    assert image.dtype == np.uint8
    assert np.all(image[..., :3] == 255)


def test_centre_opaque_and_edges_clear() -> None:
    """Alpha is full at the centre and zero in the corners and on the rim."""

    image = star_sprite(33)
    alpha = image[..., 3]

    assert alpha[16, 16] == 255
    assert alpha[0, 0] == alpha[0, -1] == alpha[-1, 0] == alpha[-1, -1] == 0
    assert alpha[16, 0] < 10


def test_alpha_falls_off_radially() -> None:
    """Alpha never increases moving outwards from the centre and is symmetric."""

    alpha = star_sprite(32)[..., 3].astype(int)
    row = alpha[16, 16:]

    assert np.all(np.diff(row) <= 0)
    assert np.array_equal(alpha, alpha.T)
    assert np.array_equal(alpha, alpha[::-1, ::-1])


@pytest.mark.parametrize('size', [0, -4, 8.0, True])
def test_bad_size_raises(size: object) -> None:
    """Sprite size must be a positive integer."""

    with pytest.raises(InvalidArgument):
        star_sprite(size)
