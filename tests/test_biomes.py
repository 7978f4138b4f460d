import itertools

import numpy as np
import pytest

from planet_generator.biomes import Biome, adjusted_temperature, calculate_biome_map, classify
from planet_generator.color_maps import ColorGradient, color_for, create_biome_color_lut, float_to_rgb8

WATER = 0.4


# --- Decision Tree ---

@pytest.mark.parametrize("elevation, temperature, moisture, expected", [
    (0.2, 0.3, 0.2, Biome.OCEAN),
    (0.4, 0.9, 0.9, Biome.OCEAN),
    (0.405, 0.9, 0.9, Biome.BEACH),
    (0.42, 0.8, 0.1, Biome.DESERT),
    (0.42, 0.8, 0.5, Biome.SAVANNA),
    (0.42, 0.8, 0.8, Biome.RAINFOREST),
    (0.42, 0.6, 0.1, Biome.GRASSLAND),
    (0.42, 0.6, 0.5, Biome.FOREST),
    (0.42, 0.6, 0.9, Biome.SWAMP),
    (0.42, 0.3, 0.2, Biome.GRASSLAND),
    (0.42, 0.3, 0.6, Biome.FOREST),
    (0.8, 0.1, 0.5, Biome.SNOW),
    (0.5, 0.1, 0.2, Biome.TUNDRA),
    (0.5, 0.1, 0.6, Biome.MOUNTAINS),
])
def test_classify_branches(elevation, temperature, moisture, expected):
    assert classify(elevation, temperature, moisture, WATER) is expected


def test_height_cools_temperature():
    # Hot at sea level, but 0.5 above the water drops it by 0.35.
    assert classify(0.42, 0.8, 0.1, WATER) is Biome.DESERT
    assert classify(0.9, 0.8, 0.1, WATER) is Biome.GRASSLAND
    assert adjusted_temperature(0.9, 0.8, WATER) == pytest.approx(0.45)
    assert adjusted_temperature(0.1, 0.8, WATER) == 0.8


def test_beach_wins_over_climate():
    assert classify(WATER + 0.009, 0.0, 0.0, WATER) is Biome.BEACH
    assert classify(WATER + 0.009, 1.0, 1.0, WATER) is Biome.BEACH


def test_threshold_overrides():
    thresholds = {
        "beach_band": 0.01, "cooling_rate": 0.7,
        "hot_min_temp": 0.95, "warm_min_temp": 0.4, "cool_min_temp": 0.2,
        "desert_max_moisture": 0.3, "savanna_max_moisture": 0.6,
        "warm_grassland_max_moisture": 0.3, "forest_max_moisture": 0.7,
        "cool_grassland_max_moisture": 0.5, "tundra_max_moisture": 0.4,
        "snow_min_elevation": 0.7,
    }
    assert classify(0.42, 0.8, 0.1, WATER) is Biome.DESERT
    assert classify(0.42, 0.8, 0.1, WATER, thresholds) is Biome.GRASSLAND


def test_partial_threshold_overrides_keep_the_other_defaults():
    partial = {"hot_min_temp": 0.95}
    assert classify(0.42, 0.8, 0.1, WATER, partial) is Biome.GRASSLAND
    assert classify(0.405, 0.8, 0.1, WATER, partial) is Biome.BEACH
    assert adjusted_temperature(0.9, 0.8, WATER, {"cooling_rate": 0.2}) == pytest.approx(0.7)
    biome_map = calculate_biome_map(np.array([0.42, 0.1]), np.array([0.8, 0.8]), np.array([0.1, 0.1]), WATER, partial)
    assert biome_map.tolist() == [Biome.GRASSLAND, Biome.OCEAN]


def test_classification_is_total_over_a_dense_grid():
    axis = np.linspace(0.0, 1.0, 21)
    for e, t, m in itertools.product(axis, axis, axis):
        assert isinstance(classify(e, t, m, WATER), Biome)


def test_vectorized_map_matches_scalar_classifier():
    axis = np.linspace(0.0, 1.0, 17)
    e, t, m = (a.ravel() for a in np.meshgrid(axis, axis, axis, indexing="ij"))
    biome_map = calculate_biome_map(e, t, m, WATER)
    assert biome_map.dtype == np.uint8
    expected = [classify(*sample, water_level=WATER) for sample in zip(e, t, m)]
    np.testing.assert_array_equal(biome_map, np.array(expected, dtype=np.uint8))


def test_vectorized_map_keeps_shape():
    shape = (4, 5)
    biome_map = calculate_biome_map(np.full(shape, 0.1), np.full(shape, 0.5), np.full(shape, 0.5))
    assert biome_map.shape == shape
    assert (biome_map == Biome.OCEAN).all()


# --- Colours ---

def test_color_for_every_biome_is_in_range_and_deterministic(engine):
    for biome in Biome:
        first = color_for(biome, 0.6, 0.5, 0.5, engine)
        second = color_for(biome, 0.6, 0.5, 0.5, engine)
        assert first == second
        assert len(first) == 3
        assert all(0.0 <= c <= 1.0 for c in first)


def test_ocean_is_darkened_water(engine):
    palette = {"water": (200, 100, 0)}
    r, g, b = color_for(Biome.OCEAN, 0.0, 0.0, 0.0, engine, palette)
    # Zero climate samples the noise at the origin, so there is no dither.
    assert (r, g, b) == pytest.approx((200 / 255 * 0.7, 100 / 255 * 0.7, 0.0))


def test_climate_shifts_biome_color(engine):
    dry = color_for(Biome.FOREST, 0.5, 0.5, 0.0, engine)
    wet = color_for(Biome.FOREST, 0.5, 0.5, 1.0, engine)
    assert dry != wet


def test_biome_color_lut_uses_palette():
    lut = create_biome_color_lut({"water": (1, 2, 3)})
    assert lut.shape == (len(Biome), 3)
    assert tuple(lut[Biome.OCEAN]) == (1, 2, 3)


def test_color_gradient_interpolates_and_clamps():
    gradient = ColorGradient([(1.0, (255, 255, 255)), (0.0, (0, 0, 0))])
    assert gradient.get(-1.0) == (0.0, 0.0, 0.0)
    assert gradient.get(2.0) == (1.0, 1.0, 1.0)
    assert gradient.get(0.5) == pytest.approx((0.5, 0.5, 0.5))

    gradient.add_stop(0.5, (255, 0, 0))
    assert gradient.get(0.5) == pytest.approx((1.0, 0.0, 0.0))
    assert gradient.get(0.25) == pytest.approx((0.5, 0.0, 0.0))


def test_empty_gradient_is_black():
    assert ColorGradient().get(0.3) == (0.0, 0.0, 0.0)


def test_gradient_lut():
    lut = ColorGradient([(0.0, (0, 0, 0)), (1.0, (255, 255, 255))]).create_lut(256)
    assert lut.shape == (256, 3)
    assert lut.dtype == np.uint8
    assert tuple(lut[0]) == (0, 0, 0)
    assert tuple(lut[-1]) == (255, 255, 255)
    assert float_to_rgb8((1.5, -0.2, 0.5)) == (255, 0, 128)
