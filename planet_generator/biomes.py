# planet_generator/biomes.py

"""
================================================================================
BIOME CLASSIFICATION
================================================================================
Maps (elevation, temperature, moisture) to a closed set of biome tags. The
decision tree is evaluated in a fixed order and the first matching branch
wins, so ties resolve deterministically.

Two equivalent entry points are provided: classify() for a single sample and
calculate_biome_map() for whole NumPy arrays.
================================================================================
"""

from enum import IntEnum

import numpy as np

from . import config as DEFAULTS


class Biome(IntEnum):
    """Biome IDs. The integer value doubles as an index into colour LUTs."""
    OCEAN = 0
    BEACH = 1
    DESERT = 2
    SAVANNA = 3
    RAINFOREST = 4
    GRASSLAND = 5
    FOREST = 6
    SWAMP = 7
    MOUNTAINS = 8
    SNOW = 9
    TUNDRA = 10


def merge_thresholds(thresholds: dict = None) -> dict:
    """DEFAULTS.BIOME_THRESHOLDS with any overridden keys replaced."""
    return {**DEFAULTS.BIOME_THRESHOLDS, **(thresholds or {})}


def adjusted_temperature(elevation: float, temperature: float, water_level: float, thresholds: dict = None) -> float:
    """Land above the water level gets colder with height."""
    th = merge_thresholds(thresholds)
    return temperature - max(0.0, (elevation - water_level) * th["cooling_rate"])


def classify(elevation: float, temperature: float, moisture: float, water_level: float = DEFAULTS.DEFAULT_WATER_LEVEL, thresholds: dict = None) -> Biome:
    """
    Classifies a single surface sample.

    Args:
        elevation: Terrain elevation in the same units as water_level.
        temperature: Raw (sea-level) temperature in [0, 1].
        moisture: Moisture in [0, 1].
        water_level: Elevation at or below which the surface is ocean.
        thresholds (dict, optional): Overrides for DEFAULTS.BIOME_THRESHOLDS.
    """
    th = merge_thresholds(thresholds)

    if elevation <= water_level:
        return Biome.OCEAN
    if elevation < water_level + th["beach_band"]:
        return Biome.BEACH

    temp = adjusted_temperature(elevation, temperature, water_level, th)

    if temp > th["hot_min_temp"]:
        if moisture < th["desert_max_moisture"]:
            return Biome.DESERT
        if moisture < th["savanna_max_moisture"]:
            return Biome.SAVANNA
        return Biome.RAINFOREST

    if temp > th["warm_min_temp"]:
        if moisture < th["warm_grassland_max_moisture"]:
            return Biome.GRASSLAND
        if moisture < th["forest_max_moisture"]:
            return Biome.FOREST
        return Biome.SWAMP

    if temp > th["cool_min_temp"]:
        if moisture < th["cool_grassland_max_moisture"]:
            return Biome.GRASSLAND
        return Biome.FOREST

    if elevation > th["snow_min_elevation"]:
        return Biome.SNOW
    if moisture < th["tundra_max_moisture"]:
        return Biome.TUNDRA
    return Biome.MOUNTAINS


def calculate_biome_map(elevation_values: np.ndarray, temperature_values: np.ndarray, moisture_values: np.ndarray, water_level: float = DEFAULTS.DEFAULT_WATER_LEVEL, thresholds: dict = None) -> np.ndarray:
    """
    Vectorised form of classify(). Returns a uint8 array of Biome IDs with
    the same shape as the inputs.
    """
    th = merge_thresholds(thresholds)
    elevation = np.asarray(elevation_values, dtype=float)
    temperature = np.asarray(temperature_values, dtype=float)
    moisture = np.asarray(moisture_values, dtype=float)

    temp = temperature - np.maximum(0.0, (elevation - water_level) * th["cooling_rate"])

    hot = temp > th["hot_min_temp"]
    warm = temp > th["warm_min_temp"]
    cool = temp > th["cool_min_temp"]

    # np.select takes the first true condition, mirroring the branch order above.
    conditions = [
        elevation <= water_level,
        elevation < water_level + th["beach_band"],
        hot & (moisture < th["desert_max_moisture"]),
        hot & (moisture < th["savanna_max_moisture"]),
        hot,
        warm & (moisture < th["warm_grassland_max_moisture"]),
        warm & (moisture < th["forest_max_moisture"]),
        warm,
        cool & (moisture < th["cool_grassland_max_moisture"]),
        cool,
        elevation > th["snow_min_elevation"],
        moisture < th["tundra_max_moisture"],
    ]
    choices = [
        Biome.OCEAN, Biome.BEACH,
        Biome.DESERT, Biome.SAVANNA, Biome.RAINFOREST,
        Biome.GRASSLAND, Biome.FOREST, Biome.SWAMP,
        Biome.GRASSLAND, Biome.FOREST,
        Biome.SNOW, Biome.TUNDRA,
    ]
    return np.select(conditions, [int(c) for c in choices], default=int(Biome.MOUNTAINS)).astype(np.uint8)
