"""Tests for the galaxy point cloud generator."""

from __future__ import annotations

import colorsys

import numpy as np
import pytest

from galaxy_orrery.errors import InvalidArgument
from galaxy_orrery.particles import PointCloud, generate_point_cloud, hsl_to_rgb
from galaxy_orrery.settings import DEFAULT_GALAXY, GalaxyStyle

SEED = 20240611


@pytest.fixture(scope='module')
def cloud() -> PointCloud:
    return generate_point_cloud(15000, SEED)


@pytest.mark.parametrize('count', [1, 2, 17, 1000])
def test_buffers_have_count_entries(count: int) -> None:
    """Positions, colours and sizes are parallel arrays of length count."""

    result = generate_point_cloud(count, np.random.default_rng(1))

    assert result.count == count
    assert len(result) == count
    assert result.positions.shape == (count, 3)
    assert result.colors.shape == (count, 3)
    assert result.sizes.shape == (count,)


def test_points_lie_inside_radius(cloud: PointCloud) -> None:
    """No point is further from the origin than the configured radius."""

    distances = np.linalg.norm(cloud.positions, axis=1)

    assert distances.max() <= DEFAULT_GALAXY.radius + 1e-9


def test_shell_counts_grow_with_radius(cloud: PointCloud) -> None:
    """Equal-width shells hold more points further out (volume-uniform sampling)."""

    distances = np.linalg.norm(cloud.positions, axis=1)
    counts, _ = np.histogram(distances, bins=10, range=(0.0, DEFAULT_GALAXY.radius))
    peak = int(np.argmax(counts))

    assert peak == len(counts) - 1
    assert all(a <= b for a, b in zip(counts[:peak], counts[1:peak + 1]))
    # a radius-uniform sampler would put about a tenth of the points in the inner shell
    assert counts[0] < 0.01 * cloud.count


def test_colors_stay_in_hue_band(cloud: PointCloud) -> None:
    """Every colour converts back to a hue inside the configured band."""

    low, high = DEFAULT_GALAXY.hue_band

    assert cloud.colors.min() >= 0.0
    assert cloud.colors.max() <= 1.0
    for r, g, b in cloud.colors:
        if max(r, g, b) - min(r, g, b) < 1e-9:
            continue  # lightness of ~1.0 leaves no recoverable hue
        hue, _, _ = colorsys.rgb_to_hls(r, g, b)
        assert low - 1e-6 <= hue <= high + 1e-6


def test_sizes_in_range(cloud: PointCloud) -> None:
    """Point sizes come from [size_min, size_min + size_span)."""

    assert cloud.sizes.min() >= DEFAULT_GALAXY.size_min
    assert cloud.sizes.max() <= DEFAULT_GALAXY.size_min + DEFAULT_GALAXY.size_span


def test_same_seed_is_bit_identical() -> None:
    """Two generations from the same seed produce identical buffers."""

    first = generate_point_cloud(15000, SEED)
    second = generate_point_cloud(15000, np.random.default_rng(SEED))

    assert first.positions.tobytes() == second.positions.tobytes()
    assert first.colors.tobytes() == second.colors.tobytes()
    assert first.sizes.tobytes() == second.sizes.tobytes()


def test_different_seeds_differ() -> None:
    """Different seeds give different clouds."""

    first = generate_point_cloud(100, 1)
    second = generate_point_cloud(100, 2)

    assert not np.array_equal(first.positions, second.positions)


def test_custom_style_radius_and_band() -> None:
    """A custom style moves the bounding radius and hue band."""

    style = GalaxyStyle(radius=5.0, hue=0.0, hue_span=0.1)
    result = generate_point_cloud(2000, 7, style)

    assert np.linalg.norm(result.positions, axis=1).max() <= 5.0 + 1e-9
    for r, g, b in result.colors:
        if max(r, g, b) - min(r, g, b) < 1e-9:
            continue
        hue, _, _ = colorsys.rgb_to_hls(r, g, b)
        assert hue <= 0.1 + 1e-6


@pytest.mark.parametrize('count', [0, -5, 2.5, '10', None, True])
def test_bad_count_raises(count: object) -> None:
    """Non-positive or non-integer counts are rejected."""

    with pytest.raises(InvalidArgument):
        generate_point_cloud(count, 1)


@pytest.mark.parametrize('rng', [None, 'seed', 1.5, False, -1, object()])
def test_bad_randomness_source_raises(rng: object) -> None:
    """Only numpy Generators and non-negative integer seeds are accepted."""

    with pytest.raises(InvalidArgument):
        generate_point_cloud(10, rng)


def test_bad_count_does_not_consume_randomness() -> None:
    """Rejected calls leave the injected generator untouched."""

    rng = np.random.default_rng(3)
    reference = np.random.default_rng(3)

    with pytest.raises(InvalidArgument):
        generate_point_cloud(0, rng)

    assert rng.random() == reference.random()


@pytest.mark.parametrize('style', [
    GalaxyStyle(radius=0.0),
    GalaxyStyle(hue=0.9, hue_span=0.2),
    GalaxyStyle(saturation=1.5),
    GalaxyStyle(lightness_min=0.6, lightness_span=0.6),
    GalaxyStyle(size_min=0.0),
])
def test_bad_style_raises(style: GalaxyStyle) -> None:
    """Out-of-range styles are rejected before sampling."""

    with pytest.raises(InvalidArgument):
        generate_point_cloud(10, 1, style)


def test_point_cloud_is_read_only(cloud: PointCloud) -> None:
    """Buffers and attributes of a generated cloud cannot be changed."""

    with pytest.raises(ValueError):
        cloud.positions[0, 0] = 1.0
    with pytest.raises(AttributeError):
        cloud.sizes = np.ones(cloud.count)


def test_point_cloud_rejects_mismatched_lengths() -> None:
    """Parallel buffers must share one length."""

    with pytest.raises(InvalidArgument):
        PointCloud(np.zeros((3, 3)), np.zeros((2, 3)), np.ones(3))


def test_interleaved_layout() -> None:
    """GPU buffer packs position, colour and size per point as float32."""

    result = PointCloud([[1, 2, 3], [4, 5, 6]], [[0.1, 0.2, 0.3], [0.4, 0.5, 0.6]], [7, 8])
    data = result.interleaved()

    assert data.dtype == np.float32
    np.testing.assert_allclose(data[:7], [1, 2, 3, 0.1, 0.2, 0.3, 7], rtol=1e-6)
    np.testing.assert_allclose(data[7:], [4, 5, 6, 0.4, 0.5, 0.6, 8], rtol=1e-6)


@pytest.mark.parametrize('h,s,l,expected', [
    (0.0, 1.0, 0.5, (1.0, 0.0, 0.0)),
    (1.0 / 3.0, 1.0, 0.5, (0.0, 1.0, 0.0)),
    (2.0 / 3.0, 1.0, 0.5, (0.0, 0.0, 1.0)),
    (0.5, 0.0, 0.25, (0.25, 0.25, 0.25)),
    (0.6, 0.7, 1.0, (1.0, 1.0, 1.0)),
])
def test_hsl_to_rgb_reference_values(h: float, s: float, l: float, expected: tuple) -> None:
    """Primary hues and greys convert to their known RGB values."""

    np.testing.assert_allclose(hsl_to_rgb(h, s, l), expected, atol=1e-12)


def test_hsl_to_rgb_matches_colorsys() -> None:
    """Vectorised conversion agrees with the stdlib HLS implementation."""

    rng = np.random.default_rng(11)
    h, s, l = rng.random((3, 200))
    rgb = hsl_to_rgb(h, s, l)

    for i in range(200):
        np.testing.assert_allclose(rgb[i], colorsys.hls_to_rgb(h[i], l[i], s[i]), atol=1e-12)
