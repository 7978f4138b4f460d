import numpy as np
import pytest

from planet_generator import config as DEFAULTS
from planet_generator.biomes import Biome
from planet_generator.errors import ConfigurationError
from planet_generator.planet import PlanetGenerator, SurfaceSample, VegetationInstance


@pytest.fixture(scope="module")
def grid():
    return PlanetGenerator.get_direction_grid(24, 12)


@pytest.fixture(scope="module")
def grid_samples(planet, grid):
    return planet.sample_many(grid)


# --- Direction Grid ---

def test_direction_grid_is_unit_and_shaped(grid):
    assert grid.shape == (12, 24, 3)
    np.testing.assert_allclose(np.linalg.norm(grid, axis=-1), 1.0)
    # Row 0 is the northern edge, the last row the southern edge.
    assert (grid[0, :, 1] > 0.9).all()
    assert (grid[-1, :, 1] < -0.9).all()


def test_direction_grid_rejects_empty_dimensions():
    with pytest.raises(ConfigurationError):
        PlanetGenerator.get_direction_grid(0, 10)


# --- Single Samples ---

def test_sample_fields(planet):
    sample = planet.sample((0.0, 1.0, 0.0))
    assert isinstance(sample, SurfaceSample)
    assert isinstance(sample.biome, Biome)
    assert 0.0 <= sample.moisture <= 1.0
    assert 0.0 <= sample.river <= 1.0
    assert all(0.0 <= c <= 1.0 for c in sample.color)


def test_sample_is_deterministic():
    a = PlanetGenerator({"seed": 42}).sample((0.3, -0.2, 0.9))
    b = PlanetGenerator({"seed": 42}).sample((0.3, -0.2, 0.9))
    assert a == b


def test_sample_normalises_direction(planet):
    assert planet.sample((0.0, 2.0, 0.0)) == planet.sample((0.0, 1.0, 0.0))


def test_ocean_floor_stays_close_to_water_level(planet, grid):
    water = planet.water_level
    for direction in grid.reshape(-1, 3):
        elevation = planet.get_elevation(direction)
        assert elevation >= water - DEFAULTS.OCEAN_DEPTH_FACTOR
        assert elevation <= 1.0 + DEFAULTS.DETAIL_WEIGHT + 1e-9


def test_biome_data_agrees_with_sample(planet):
    direction = np.array([0.6, 0.0, 0.8])
    sample = planet.sample(direction)
    biome, temperature, moisture = planet.get_biome_data(direction, sample.elevation)
    assert (biome, temperature, moisture) == (sample.biome, sample.temperature, sample.moisture)


# --- Batches ---

def test_sample_many_shapes(grid_samples):
    assert grid_samples["elevation"].shape == (12, 24)
    assert grid_samples["biome"].shape == (12, 24)
    assert grid_samples["biome"].dtype == np.uint8
    assert grid_samples["color"].shape == (12, 24, 3)


def test_sample_many_agrees_with_sample(planet, grid, grid_samples):
    for row, col in [(0, 0), (3, 7), (6, 12), (11, 23)]:
        sample = planet.sample(grid[row, col])
        assert grid_samples["elevation"][row, col] == sample.elevation
        assert grid_samples["biome"][row, col] == sample.biome
        assert grid_samples["temperature"][row, col] == pytest.approx(sample.temperature)
        assert grid_samples["moisture"][row, col] == sample.moisture
        np.testing.assert_allclose(grid_samples["color"][row, col], sample.color)


def test_sample_many_rejects_bad_shape(planet):
    with pytest.raises(ValueError):
        planet.sample_many(np.zeros((4, 2)))


# --- Vegetation ---

def test_vegetation_lies_inside_the_octree(planet, grid, grid_samples):
    octree = planet.place_vegetation(grid, grid_samples)
    trees = octree.query_box((0.0, 0.0, 0.0), octree.root.size)
    assert len(trees) == len(octree)

    elevation = grid_samples["elevation"].reshape(-1)
    moisture = grid_samples["moisture"].reshape(-1)
    water = planet.water_level
    for tree in trees:
        instance = tree.payload
        assert isinstance(instance, VegetationInstance)
        assert instance.biome not in (Biome.OCEAN, Biome.BEACH, Biome.SNOW)
        assert water < elevation[instance.index] < water + DEFAULTS.VEGETATION_MAX_ELEVATION_ABOVE_WATER
        assert moisture[instance.index] > DEFAULTS.VEGETATION_MIN_MOISTURE
        assert DEFAULTS.MIN_TREE_HEIGHT <= instance.height <= DEFAULTS.MAX_TREE_HEIGHT
        assert np.linalg.norm(tree.position) == pytest.approx(planet.radius * (1.0 + elevation[instance.index]))


def test_vegetation_is_reproducible(planet, grid, grid_samples):
    first = planet.place_vegetation(grid, grid_samples)
    second = planet.place_vegetation(grid)
    key = lambda p: p.payload.index  # noqa: E731
    a = sorted(first.query_box((0, 0, 0), first.root.size), key=key)
    b = sorted(second.query_box((0, 0, 0), second.root.size), key=key)
    assert a == b


def test_vegetation_octree_grows_with_raised_terrain():
    planet = PlanetGenerator({"water_level": 2.0, "continent": {"weight": 3.0}, "vegetation_density": 1.0})
    grid = PlanetGenerator.get_direction_grid(12, 6)
    octree = planet.place_vegetation(grid)

    assert len(octree) > 0
    assert octree.root.size > planet.radius * DEFAULTS.VEGETATION_OCTREE_SIZE_FACTOR
    trees = octree.query_box((0.0, 0.0, 0.0), octree.root.size)
    assert len(trees) == len(octree)
    assert all(np.linalg.norm(t.position) > 3.0 * planet.radius for t in trees)


def test_vegetation_can_be_disabled(grid):
    planet = PlanetGenerator({"has_vegetation": False})
    assert len(planet.place_vegetation(grid)) == 0


def test_zero_density_places_nothing(grid):
    planet = PlanetGenerator({"vegetation_density": 0.0})
    assert len(planet.place_vegetation(grid)) == 0


# --- Configuration ---

@pytest.mark.parametrize("override", [
    {"radius": 0.0},
    {"radius": -2.0},
    {"vegetation_density": 1.5},
    {"vegetation_density": -0.1},
    {"min_tree_height": 0.9, "max_tree_height": 0.5},
    {"resolution": -1},
    {"water_color": (0, 0)},
    {"octaves": 0},
])
def test_invalid_planet_configuration(override):
    with pytest.raises(ConfigurationError):
        PlanetGenerator(override)


def test_settings_pick_up_overrides():
    planet = PlanetGenerator({"seed": 7, "radius": 3.0, "water_level": 0.5, "snow_color": [250, 250, 250]})
    assert planet.seed == 7
    assert planet.radius == 3.0
    assert planet.water_level == 0.5
    assert planet.palette["snow"] == (250, 250, 250)
    assert planet.engine.seed == 7
