# planet_generator/__init__.py

# Public API of the planet generator package.

from .biomes import Biome, calculate_biome_map, classify
from .color_maps import ColorGradient, color_for
from .errors import ConfigurationError, OctreeBoundsError
from .generator import NoiseEngine
from .octree import Point, SparseOctree
from .planet import PlanetGenerator, SurfaceSample, VegetationInstance
from .prng import SeededPRNG, build_permutation_table

__all__ = [
    "Biome", "calculate_biome_map", "classify",
    "ColorGradient", "color_for",
    "ConfigurationError", "OctreeBoundsError",
    "NoiseEngine",
    "Point", "SparseOctree",
    "PlanetGenerator", "SurfaceSample", "VegetationInstance",
    "SeededPRNG", "build_permutation_table",
]
