# planet_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the planet
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC PLANET.
Instead, pass a configuration dictionary to the NoiseEngine or
PlanetGenerator instance.
================================================================================
"""

# --- Seeding ---
DEFAULT_SEED = 12345
# Offsets used to derive independent random streams from the master seed.
VEGETATION_SEED_OFFSET = 54321

# --- Base Noise Configuration ---
# Used by NoiseEngine.fractal() and NoiseEngine.sample() when no explicit
# parameters are given.
NOISE_SCALE = 1.0
NOISE_OCTAVES = 6
NOISE_PERSISTENCE = 0.5
NOISE_LACUNARITY = 2.0
# Exponent applied as |n|^p * sign(n). 1.0 leaves the noise untouched.
NOISE_REDISTRIBUTION = 1.0

# --- Terrain Bands ---
# Three fractal bands are sampled from the same direction vector and summed
# with asymmetric weights. Mountains use ridged noise.
CONTINENT_BAND = {"scale": 0.2, "octaves": 2, "persistence": 0.5, "lacunarity": 2.0, "weight": 0.5}
MOUNTAIN_BAND = {"scale": 0.8, "octaves": 4, "persistence": 0.5, "lacunarity": 2.0, "weight": 0.35}
HILL_BAND = {"scale": 2.0, "octaves": 3, "persistence": 0.5, "lacunarity": 2.0, "weight": 0.15}

# --- Climate Bands ---
TEMPERATURE_BAND = {"scale": 0.2, "octaves": 3, "persistence": 0.5, "lacunarity": 2.0}
MOISTURE_BAND = {"scale": 0.3, "octaves": 4, "persistence": 0.5, "lacunarity": 2.0}
# Moisture samples the direction shifted by this amount on every axis so it
# is decorrelated from temperature.
MOISTURE_OFFSET = 1000.0

# --- Rivers ---
RIVER_OFFSET = 2000.0
RIVER_SCALE = 3.0
RIVER_NOISE_WEIGHT = 0.7
RIVER_SHARPNESS = 8.0

# --- Biome Classification Thresholds ---
# Thresholds are evaluated in order; the first matching branch wins.
BIOME_THRESHOLDS = {
    "beach_band": 0.01,
    "cooling_rate": 0.7,
    # Adjusted temperature bands
    "hot_min_temp": 0.7,
    "warm_min_temp": 0.4,
    "cool_min_temp": 0.2,
    # Moisture bands per temperature band
    "desert_max_moisture": 0.3,
    "savanna_max_moisture": 0.6,
    "warm_grassland_max_moisture": 0.3,
    "forest_max_moisture": 0.7,
    "cool_grassland_max_moisture": 0.5,
    "tundra_max_moisture": 0.4,
    # Cold land above this elevation is snow.
    "snow_min_elevation": 0.7,
}

# --- Colours ---
# Colours are 8-bit RGB tuples; they are converted to [0, 1] floats when
# blended.
DEFAULT_PALETTE = {
    "water": (51, 153, 255),
    "land": (77, 154, 77),
    "mountain": (140, 120, 83),
    "snow": (255, 255, 255),
}

# Base and secondary colour for every biome whose colour is not taken from
# the palette. The lerp factor is documented in color_maps.color_for().
BIOME_COLORS = {
    "beach": ((224, 216, 168), (224, 216, 168)),
    "desert": ((230, 193, 120), (178, 130, 77)),
    "savanna": ((204, 200, 128), (157, 168, 85)),
    "rainforest": ((46, 110, 65), (18, 65, 36)),
    "grassland": ((191, 208, 100), (130, 168, 84)),
    "forest": ((74, 135, 61), (30, 86, 49)),
    "swamp": ((77, 107, 80), (45, 64, 48)),
    "mountains": ((140, 120, 83), (107, 107, 107)),
    "snow": ((255, 255, 255), (213, 240, 255)),
    "tundra": ((160, 154, 128), (150, 150, 130)),
}

OCEAN_COLOR_DARKENING = 0.7
# Amplitude of the per-sample colour dither and the frequency of the noise
# call that drives it.
COLOR_DITHER_AMPLITUDE = 0.1
COLOR_DITHER_FREQUENCY = 100.0

# --- Planet ---
DEFAULT_RADIUS = 1.0
DEFAULT_RESOLUTION = 64
DEFAULT_WATER_LEVEL = 0.4

# Terrain band scales used by the planet surface (broader continents than
# the engine defaults).
PLANET_CONTINENT_SCALE = 0.5
PLANET_MOUNTAIN_SCALE = 1.0
PLANET_HILL_SCALE = 2.0

# Ocean floors are pushed down: water - (water - e)^exponent * factor.
OCEAN_DEPTH_EXPONENT = 1.2
OCEAN_DEPTH_FACTOR = 0.1

# Small high-frequency detail added on top of the terrain bands.
DETAIL_BAND = {"scale": 8.0, "octaves": 2, "persistence": 0.5, "lacunarity": 2.0}
DETAIL_WEIGHT = 0.05

# --- Vegetation ---
HAS_VEGETATION = True
VEGETATION_DENSITY = 0.5
MIN_TREE_HEIGHT = 0.5
MAX_TREE_HEIGHT = 0.8
VEGETATION_MIN_MOISTURE = 0.4
# Vegetation only grows up to this height above the water level.
VEGETATION_MAX_ELEVATION_ABOVE_WATER = 0.3
# Edge of the vegetation octree's root cube as a multiple of the radius.
# Displaced surface points reach roughly radius * 2.05.
VEGETATION_OCTREE_SIZE_FACTOR = 5.0

# --- Octree ---
OCTREE_CAPACITY = 8
OCTREE_MIN_SIZE = 0.01
# findNearest starts probing at this fraction of the root edge length.
OCTREE_NEAREST_START_FRACTION = 0.1

# --- Baking / Preview ---
PREVIEW_WIDTH = 256
PREVIEW_HEIGHT = 128
