# planet_generator/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the colour constants and functions for converting
surface samples (biome, elevation, temperature, moisture) into RGB colours.

Colours are handled as floats in [0, 1] while blending and converted to
8-bit only at the edges (palette constants, preview images).
================================================================================
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from . import config as DEFAULTS
from .biomes import Biome

RGB = Tuple[float, float, float]


def rgb8_to_float(color: Sequence[int]) -> RGB:
    """(255, 128, 0) -> (1.0, 0.50196..., 0.0)"""
    return tuple(c / 255.0 for c in color)


def float_to_rgb8(color: Sequence[float]) -> Tuple[int, int, int]:
    return tuple(int(round(min(1.0, max(0.0, c)) * 255)) for c in color)


def lerp_color(a: RGB, b: RGB, t: float) -> RGB:
    "Linear interpolation between two colours."
    return tuple(ca + (cb - ca) * t for ca, cb in zip(a, b))


def _clamp01(t: float) -> float:
    return min(1.0, max(0.0, t))


class ColorGradient:
    """
    A list of colour stops kept sorted by position. Lookups interpolate
    linearly between the two surrounding stops and clamp outside the range.
    """

    def __init__(self, stops: Sequence[Tuple[float, Sequence[int]]] = ()):
        self._stops = []
        for position, color in stops:
            self.add_stop(position, color)

    def add_stop(self, position: float, color: Sequence[int]):
        self._stops.append((float(position), rgb8_to_float(color)))
        self._stops.sort(key=lambda stop: stop[0])

    def get(self, position: float) -> RGB:
        if not self._stops:
            return (0.0, 0.0, 0.0)
        if len(self._stops) == 1 or position <= self._stops[0][0]:
            return self._stops[0][1]
        if position >= self._stops[-1][0]:
            return self._stops[-1][1]

        for (lo_pos, lo_color), (hi_pos, hi_color) in zip(self._stops, self._stops[1:]):
            if lo_pos <= position <= hi_pos:
                if hi_pos == lo_pos:
                    return hi_color
                return lerp_color(lo_color, hi_color, (position - lo_pos) / (hi_pos - lo_pos))
        return self._stops[-1][1]

    def create_lut(self, size: int = 256) -> np.ndarray:
        """Samples the gradient at 'size' evenly spaced positions in [0, 1]."""
        positions = np.linspace(0.0, 1.0, size)
        return np.array([float_to_rgb8(self.get(p)) for p in positions], dtype=np.uint8)


# --- Preview Gradients ---
ELEVATION_GRADIENT = ColorGradient([
    (0.0, (0, 0, 50)),
    (0.4, (26, 102, 255)),
    (0.41, (224, 216, 168)),
    (0.6, (77, 154, 77)),
    (0.8, (140, 120, 83)),
    (1.0, (255, 255, 255)),
])

TEMPERATURE_GRADIENT = ColorGradient([
    (0.0, (0, 0, 100)),
    (0.25, (0, 0, 255)),
    (0.75, (255, 255, 0)),
    (0.95, (255, 0, 0)),
    (1.0, (150, 0, 0)),
])

MOISTURE_GRADIENT = ColorGradient([
    (0.0, (210, 180, 140)),
    (1.0, (70, 130, 180)),
])


def get_scalar_color_array(values: np.ndarray, lut: np.ndarray) -> np.ndarray:
    """Converts values in [0, 1] into an RGB array using a 256-entry LUT."""
    indices = (np.clip(values, 0.0, 1.0) * (len(lut) - 1)).astype(np.intp)
    return lut[indices]


def create_biome_color_lut(palette: Optional[dict] = None) -> np.ndarray:
    """Creates a LUT where the index is the Biome ID and the value is the base colour."""
    palette = {**DEFAULTS.DEFAULT_PALETTE, **(palette or {})}
    lut = np.zeros((len(Biome), 3), dtype=np.uint8)
    for biome in Biome:
        if biome is Biome.OCEAN:
            lut[biome] = palette["water"]
        elif biome is Biome.MOUNTAINS:
            lut[biome] = palette["mountain"]
        elif biome is Biome.SNOW:
            lut[biome] = palette["snow"]
        else:
            lut[biome] = DEFAULTS.BIOME_COLORS[biome.name.lower()][0]
    return lut


def color_for(biome: Biome, elevation: float, temperature: float, moisture: float, engine, palette: Optional[dict] = None, water_level: float = DEFAULTS.DEFAULT_WATER_LEVEL) -> RGB:
    """
    Deterministic colour for one surface sample.

    Each biome has a base colour blended toward a secondary colour by a
    climate value (moisture for most biomes, heat for deserts, height above
    water for mountains). A low-amplitude dither from a dedicated noise call
    keeps neighbouring samples with identical climate slightly different.

    Args:
        biome: The classified biome.
        elevation, temperature, moisture: The sample the biome came from;
            temperature is the elevation-adjusted value.
        engine: The NoiseEngine supplying the dither noise.
        palette (dict, optional): Overrides for DEFAULTS.DEFAULT_PALETTE.
        water_level: Used to scale the mountain blend.
    """
    palette = {**DEFAULTS.DEFAULT_PALETTE, **(palette or {})}
    biome = Biome(biome)

    if biome is Biome.OCEAN:
        color = tuple(c * DEFAULTS.OCEAN_COLOR_DARKENING for c in rgb8_to_float(palette["water"]))
    elif biome is Biome.MOUNTAINS:
        secondary = rgb8_to_float(DEFAULTS.BIOME_COLORS["mountains"][1])
        mountain_height = engine.normalize(elevation, water_level, 1.0)
        color = lerp_color(rgb8_to_float(palette["mountain"]), secondary, _clamp01(mountain_height))
    elif biome is Biome.SNOW:
        secondary = rgb8_to_float(DEFAULTS.BIOME_COLORS["snow"][1])
        color = lerp_color(rgb8_to_float(palette["snow"]), secondary, _clamp01(moisture))
    else:
        land = palette["land"]
        base, secondary = DEFAULTS.BIOME_COLORS.get(biome.name.lower(), (land, land))
        if biome is Biome.DESERT:
            t = temperature - DEFAULTS.BIOME_THRESHOLDS["hot_min_temp"]
        else:
            t = moisture
        color = lerp_color(rgb8_to_float(base), rgb8_to_float(secondary), _clamp01(t))

    freq = DEFAULTS.COLOR_DITHER_FREQUENCY
    variation = engine.noise3(temperature * freq, moisture * freq, elevation * freq) * DEFAULTS.COLOR_DITHER_AMPLITUDE

    return tuple(_clamp01(c + variation) for c in color)
