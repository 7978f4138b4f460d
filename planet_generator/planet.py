# planet_generator/planet.py

"""
================================================================================
PLANET GENERATOR
================================================================================
This module contains the PlanetGenerator class, which combines the noise
engine, the biome classifier, the colour rules and the sparse octree into the
per-vertex surface data of a single planet.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Parameters which can override the internal defaults.
      Planet keys: 'seed', 'radius', 'resolution', 'water_level',
      'water_color', 'land_color', 'mountain_color', 'snow_color',
      'has_vegetation', 'vegetation_density', 'min_tree_height',
      'max_tree_height', 'biome_thresholds'. Any NoiseEngine key
      ('octaves', 'continent', ...) is forwarded to the engine.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - SurfaceSample tuples for single directions, dicts of NumPy arrays for
      batches, and a SparseOctree of VegetationInstance payloads.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same configuration, every output is deterministic.
  Directions are unit vectors; the mesh topology that supplies them lives
  outside this package.
================================================================================
"""

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

from . import config as DEFAULTS
from .biomes import Biome, adjusted_temperature, calculate_biome_map, classify
from .color_maps import RGB, color_for
from .errors import ConfigurationError
from .generator import NoiseEngine
from .octree import Point, SparseOctree
from .prng import SeededPRNG


class SurfaceSample(NamedTuple):
    elevation: float
    biome: Biome
    temperature: float
    moisture: float
    color: RGB
    river: float


@dataclass(frozen=True)
class VegetationInstance:
    """A single tree: the index of the direction it grew from, its biome and height."""
    index: int
    biome: Biome
    height: float


class PlanetGenerator:
    """
    Generates elevation, climate, biome and colour data for one planet.
    This class is backend-only and does not build meshes or materials.
    """

    def __init__(self, config: Optional[dict] = None, logger: Optional[logging.Logger] = None):
        """
        Initializes the planet generator.

        Args:
            config (dict, optional): User-defined parameters to override defaults.
            logger (logging.Logger, optional): The logger instance for all output.

        Raises:
            ConfigurationError: If a planet, vegetation or noise parameter is invalid.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}
        self.logger.info("PlanetGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'radius': self.user_config.get('radius', DEFAULTS.DEFAULT_RADIUS),
            'resolution': self.user_config.get('resolution', DEFAULTS.DEFAULT_RESOLUTION),
            'water_level': self.user_config.get('water_level', DEFAULTS.DEFAULT_WATER_LEVEL),

            'water_color': tuple(self.user_config.get('water_color', DEFAULTS.DEFAULT_PALETTE['water'])),
            'land_color': tuple(self.user_config.get('land_color', DEFAULTS.DEFAULT_PALETTE['land'])),
            'mountain_color': tuple(self.user_config.get('mountain_color', DEFAULTS.DEFAULT_PALETTE['mountain'])),
            'snow_color': tuple(self.user_config.get('snow_color', DEFAULTS.DEFAULT_PALETTE['snow'])),
            'biome_thresholds': {**DEFAULTS.BIOME_THRESHOLDS, **self.user_config.get('biome_thresholds', {})},

            'has_vegetation': self.user_config.get('has_vegetation', DEFAULTS.HAS_VEGETATION),
            'vegetation_density': self.user_config.get('vegetation_density', DEFAULTS.VEGETATION_DENSITY),
            'min_tree_height': self.user_config.get('min_tree_height', DEFAULTS.MIN_TREE_HEIGHT),
            'max_tree_height': self.user_config.get('max_tree_height', DEFAULTS.MAX_TREE_HEIGHT),
        }
        self._validate()

        # --- Public Properties for easy access ---
        self.radius = float(self.settings['radius'])
        self.water_level = float(self.settings['water_level'])
        self.palette = {
            'water': self.settings['water_color'],
            'land': self.settings['land_color'],
            'mountain': self.settings['mountain_color'],
            'snow': self.settings['snow_color'],
        }
        self._terrain_bands = {
            'continent': {'scale': DEFAULTS.PLANET_CONTINENT_SCALE},
            'mountain': {'scale': DEFAULTS.PLANET_MOUNTAIN_SCALE},
            'hill': {'scale': DEFAULTS.PLANET_HILL_SCALE},
        }

        # --- Initialize Noise ---
        self.engine = NoiseEngine(seed=self.settings['seed'], config=self.user_config, logger=self.logger)
        self.seed = self.engine.seed

        self.logger.info(
            f"Planet: radius={self.radius}, resolution={self.settings['resolution']}, "
            f"water_level={self.water_level}, vegetation={self.settings['has_vegetation']}"
        )

    def _validate(self):
        s = self.settings
        if not s['radius'] > 0:
            raise ConfigurationError(f"radius must be > 0, got {s['radius']!r}")
        if isinstance(s['resolution'], bool) or not isinstance(s['resolution'], int) or s['resolution'] < 0:
            raise ConfigurationError(f"resolution must be a non-negative integer, got {s['resolution']!r}")
        if not 0.0 <= s['vegetation_density'] <= 1.0:
            raise ConfigurationError(f"vegetation_density must be in [0, 1], got {s['vegetation_density']!r}")
        if s['min_tree_height'] > s['max_tree_height']:
            raise ConfigurationError(
                f"min_tree_height ({s['min_tree_height']}) must not exceed max_tree_height ({s['max_tree_height']})"
            )
        for key in ('water_color', 'land_color', 'mountain_color', 'snow_color'):
            if len(s[key]) != 3:
                raise ConfigurationError(f"{key} must be an (r, g, b) triple, got {s[key]!r}")

    # --- Per-Direction Sampling ---

    def get_elevation(self, direction: Sequence[float]) -> float:
        """
        Terrain elevation for a unit direction. Roughly [0, 1.05] on land;
        below the water level the sea floor is pushed down so coasts drop off.
        """
        elevation = self.engine.terrain_elevation(direction, self._terrain_bands)

        water = self.water_level
        if elevation < water:
            elevation = water - (water - elevation) ** DEFAULTS.OCEAN_DEPTH_EXPONENT * DEFAULTS.OCEAN_DEPTH_FACTOR

        detail = self.engine.band_noise(direction, DEFAULTS.DETAIL_BAND)
        return elevation + detail * DEFAULTS.DETAIL_WEIGHT

    def get_biome_data(self, direction: Sequence[float], elevation: float) -> Tuple[Biome, float, float]:
        """Returns (biome, elevation-adjusted temperature, moisture)."""
        climate = self.engine.biome_climate(direction)
        thresholds = self.settings['biome_thresholds']
        biome = classify(elevation, climate.temperature, climate.moisture, self.water_level, thresholds)
        temperature = adjusted_temperature(elevation, climate.temperature, self.water_level, thresholds)
        return biome, temperature, climate.moisture

    def sample(self, direction: Sequence[float]) -> SurfaceSample:
        direction = _as_unit(direction)
        elevation = self.get_elevation(direction)
        biome, temperature, moisture = self.get_biome_data(direction, elevation)
        color = color_for(biome, elevation, temperature, moisture, self.engine, self.palette, self.water_level)
        river = self.engine.river_factor(direction, elevation)
        return SurfaceSample(elevation, biome, temperature, moisture, color, river)

    def sample_many(self, directions: np.ndarray) -> dict:
        """
        Samples an array of directions with shape (..., 3).

        Returns:
            dict: 'elevation', 'temperature', 'moisture' and 'river' float
            arrays and a uint8 'biome' array, all shaped like the leading axes
            of 'directions', plus a float 'color' array with a trailing axis of 3.
        """
        directions = np.asarray(directions, dtype=float)
        if directions.shape[-1] != 3:
            raise ValueError(f"directions must have a trailing axis of 3, got shape {directions.shape}")
        shape = directions.shape[:-1]
        flat = directions.reshape(-1, 3)
        count = len(flat)

        elevation = np.empty(count)
        raw_temperature = np.empty(count)
        moisture = np.empty(count)
        river = np.empty(count)
        for i, direction in enumerate(flat):
            direction = _as_unit(direction)
            elevation[i] = self.get_elevation(direction)
            climate = self.engine.biome_climate(direction)
            raw_temperature[i] = climate.temperature
            moisture[i] = climate.moisture
            river[i] = self.engine.river_factor(direction, elevation[i])

        thresholds = self.settings['biome_thresholds']
        biome = calculate_biome_map(elevation, raw_temperature, moisture, self.water_level, thresholds)
        temperature = raw_temperature - np.maximum(0.0, (elevation - self.water_level) * thresholds['cooling_rate'])

        colors = np.empty((count, 3))
        for i in range(count):
            colors[i] = color_for(
                int(biome[i]), elevation[i], temperature[i], moisture[i], self.engine, self.palette, self.water_level
            )

        return {
            'elevation': elevation.reshape(shape),
            'biome': biome.reshape(shape),
            'temperature': temperature.reshape(shape),
            'moisture': moisture.reshape(shape),
            'river': river.reshape(shape),
            'color': colors.reshape(shape + (3,)),
        }

    # --- Vegetation ---

    def vegetation_octree(self, max_distance: float = 0.0) -> SparseOctree:
        """
        An empty octree centred on the planet. Its edge is the larger of
        radius * VEGETATION_OCTREE_SIZE_FACTOR and twice max_distance (plus a
        small margin), so any point within max_distance of the centre fits.
        """
        size = max(self.radius * DEFAULTS.VEGETATION_OCTREE_SIZE_FACTOR, 2.0 * max_distance * 1.01)
        return SparseOctree(
            center=(0.0, 0.0, 0.0),
            size=size,
            logger=self.logger,
        )

    def place_vegetation(self, directions: np.ndarray, samples: Optional[dict] = None) -> SparseOctree:
        """
        Scatters trees over low, moist land and indexes them in an octree.

        A direction is a candidate when it is land other than beach or snow,
        lies less than VEGETATION_MAX_ELEVATION_ABOVE_WATER above the water
        and is wetter than VEGETATION_MIN_MOISTURE. Each candidate then keeps
        a tree with probability density * moisture. Draws come from a PRNG
        seeded from the planet seed, so placements are reproducible.

        Args:
            directions (np.ndarray): Unit directions with shape (..., 3).
            samples (dict, optional): The output of sample_many() for the same
                directions. Computed when omitted.

        Returns:
            SparseOctree: Points at direction * radius * (1 + elevation), each
            carrying a VegetationInstance payload.
        """
        if not self.settings['has_vegetation']:
            self.logger.debug("Vegetation disabled; returning an empty octree.")
            return self.vegetation_octree()

        if samples is None:
            samples = self.sample_many(directions)

        flat = np.asarray(directions, dtype=float).reshape(-1, 3)
        elevation = np.asarray(samples['elevation']).reshape(-1)
        biome = np.asarray(samples['biome']).reshape(-1)
        moisture = np.asarray(samples['moisture']).reshape(-1)

        density = self.settings['vegetation_density']
        min_height = self.settings['min_tree_height']
        height_range = self.settings['max_tree_height'] - min_height
        water = self.water_level

        candidates = (
            (elevation > water) &
            (elevation < water + DEFAULTS.VEGETATION_MAX_ELEVATION_ABOVE_WATER) &
            (moisture > DEFAULTS.VEGETATION_MIN_MOISTURE) &
            (biome != Biome.BEACH) &
            (biome != Biome.SNOW)
        )

        # Strong band weights or a high water level can lift the surface past
        # the default octree bound.
        max_distance = 0.0
        if candidates.any():
            max_distance = self.radius * float(np.abs(1.0 + elevation[candidates]).max())
        octree = self.vegetation_octree(max_distance)

        prng = SeededPRNG(self.seed + DEFAULTS.VEGETATION_SEED_OFFSET)
        positions = []
        for i in np.flatnonzero(candidates):
            if prng.next() >= density * moisture[i]:
                continue
            height = min_height + prng.next() * height_range
            position = _as_unit(flat[i]) * self.radius * (1.0 + elevation[i])
            octree.insert(Point(tuple(position), VegetationInstance(int(i), Biome(int(biome[i])), height)))
            positions.append(position)

        self.logger.info(f"Placed {len(octree)} trees from {int(candidates.sum())} candidate sites.")
        if len(positions) > 1:
            distances, _ = cKDTree(np.array(positions)).query(positions, k=2)
            self.logger.debug(f"Mean nearest-tree spacing: {distances[:, 1].mean():.4f}")
        return octree

    # --- Grids ---

    @staticmethod
    def get_direction_grid(width: int, height: int) -> np.ndarray:
        """
        Unit directions at the pixel centres of an equirectangular image,
        shaped (height, width, 3). Y is up; row 0 is the north pole side and
        column 0 starts at longitude -pi.
        """
        if width < 1 or height < 1:
            raise ConfigurationError(f"Grid dimensions must be >= 1, got {width}x{height}")
        lon = (np.arange(width) + 0.5) / width * 2.0 * math.pi - math.pi
        lat = math.pi / 2.0 - (np.arange(height) + 0.5) / height * math.pi
        lon_grid, lat_grid = np.meshgrid(lon, lat)
        cos_lat = np.cos(lat_grid)
        return np.stack([cos_lat * np.cos(lon_grid), np.sin(lat_grid), cos_lat * np.sin(lon_grid)], axis=-1)


def _as_unit(direction: Sequence[float]) -> np.ndarray:
    """Normalises a direction; the zero vector is returned unchanged."""
    vector = np.asarray(direction, dtype=float)
    length = np.linalg.norm(vector)
    if length == 0.0:
        return vector
    return vector / length
