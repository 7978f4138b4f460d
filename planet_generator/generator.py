# planet_generator/generator.py

"""
================================================================================
NOISE ENGINE
================================================================================
This module contains the NoiseEngine class, responsible for turning a seed and
a noise configuration into deterministic scalar fields sampled on the unit
sphere: terrain elevation, climate (temperature/moisture) and river factor.

Data Contract:
---------------
- Inputs (on initialization):
    - seed (int): A 32-bit unsigned seed.
    - config (dict): Parameters which can override the internal defaults.
      Expected keys include 'scale', 'octaves', 'persistence', 'lacunarity',
      'redistribution' and the band dictionaries 'continent', 'mountain',
      'hill', 'temperature', 'moisture'.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - Floats; see each method for its range.
- Side Effects: Logs messages using the provided logger on construction only.
- Invariants: Given the same seed and configuration, the output is
  deterministic. The permutation table is built once and never mutated.
================================================================================
"""

import logging
from typing import NamedTuple, Optional, Sequence

import numpy as np

from . import config as DEFAULTS
from . import noise
from .errors import ConfigurationError
from .prng import SeededPRNG, build_permutation_table


class ClimateSample(NamedTuple):
    temperature: float
    moisture: float


BAND_KEYS = ("scale", "octaves", "persistence", "lacunarity")


def validate_noise_parameters(name: str, scale: float, octaves: int, persistence: float, lacunarity: float):
    """Fails fast on parameters that would silently produce degenerate noise."""
    if isinstance(octaves, bool) or not isinstance(octaves, (int, np.integer)) or octaves < 1:
        raise ConfigurationError(f"{name}: 'octaves' must be an integer >= 1, got {octaves!r}")
    if not persistence > 0:
        raise ConfigurationError(f"{name}: 'persistence' must be > 0, got {persistence!r}")
    if not lacunarity > 0:
        raise ConfigurationError(f"{name}: 'lacunarity' must be > 0, got {lacunarity!r}")
    if not scale > 0:
        raise ConfigurationError(f"{name}: 'scale' must be > 0, got {scale!r}")


def merge_band(defaults: dict, overrides: Optional[dict]) -> dict:
    """Returns a copy of a band dictionary with user overrides applied."""
    band = dict(defaults)
    if overrides:
        band.update(overrides)
    return band


class NoiseEngine:
    """
    Generates deterministic noise fields for a single seed.
    All sampling methods are read-only, so one engine can be shared by any
    number of threads.
    """

    def __init__(self, seed: int = DEFAULTS.DEFAULT_SEED, config: Optional[dict] = None, logger: Optional[logging.Logger] = None):
        """
        Initializes the noise engine.

        Args:
            seed (int): The 32-bit seed identifying this universe.
            config (dict, optional): User-defined parameters to override defaults.
            logger (logging.Logger, optional): The logger instance for all output.

        Raises:
            ConfigurationError: If any noise or band parameter is invalid.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}

        # --- Consolidate Configuration ---
        self.settings = {
            'scale': self.user_config.get('scale', DEFAULTS.NOISE_SCALE),
            'octaves': self.user_config.get('octaves', DEFAULTS.NOISE_OCTAVES),
            'persistence': self.user_config.get('persistence', DEFAULTS.NOISE_PERSISTENCE),
            'lacunarity': self.user_config.get('lacunarity', DEFAULTS.NOISE_LACUNARITY),
            'redistribution': self.user_config.get('redistribution', DEFAULTS.NOISE_REDISTRIBUTION),

            'continent': merge_band(DEFAULTS.CONTINENT_BAND, self.user_config.get('continent')),
            'mountain': merge_band(DEFAULTS.MOUNTAIN_BAND, self.user_config.get('mountain')),
            'hill': merge_band(DEFAULTS.HILL_BAND, self.user_config.get('hill')),
            'temperature': merge_band(DEFAULTS.TEMPERATURE_BAND, self.user_config.get('temperature')),
            'moisture': merge_band(DEFAULTS.MOISTURE_BAND, self.user_config.get('moisture')),
            'moisture_offset': self.user_config.get('moisture_offset', DEFAULTS.MOISTURE_OFFSET),

            'river_offset': self.user_config.get('river_offset', DEFAULTS.RIVER_OFFSET),
            'river_scale': self.user_config.get('river_scale', DEFAULTS.RIVER_SCALE),
        }
        self._validate()

        # --- Initialize Noise ---
        self.seed = int(seed) & 0xFFFFFFFF
        self._p = build_permutation_table(SeededPRNG(self.seed))
        # Exposed read-only for callers that drive the kernels directly.
        self.permutation_table = self._p

        self.logger.info(f"NoiseEngine initialized with seed: {self.seed}")
        self.logger.debug(
            f"Base noise: scale={self.settings['scale']}, octaves={self.settings['octaves']}, "
            f"persistence={self.settings['persistence']}, lacunarity={self.settings['lacunarity']}, "
            f"redistribution={self.settings['redistribution']}"
        )

    def _validate(self):
        s = self.settings
        validate_noise_parameters("noise", s['scale'], s['octaves'], s['persistence'], s['lacunarity'])
        for name in ('continent', 'mountain', 'hill', 'temperature', 'moisture'):
            band = s[name]
            validate_noise_parameters(name, *(band[key] for key in BAND_KEYS))
        if not s['redistribution'] > 0:
            raise ConfigurationError(f"redistribution must be > 0, got {s['redistribution']!r}")
        if not s['river_scale'] > 0:
            raise ConfigurationError(f"river_scale must be > 0, got {s['river_scale']!r}")

    # --- Kernels ---

    def noise2(self, x: float, y: float) -> float:
        return noise.simplex_noise_2d(self._p, float(x), float(y))

    def noise3(self, x: float, y: float, z: float) -> float:
        return noise.simplex_noise_3d(self._p, float(x), float(y), float(z))

    def noise4(self, x: float, y: float, z: float, w: float) -> float:
        return noise.simplex_noise_4d(self._p, float(x), float(y), float(z), float(w))

    # --- Fractal Composites ---

    def fractal(self, x: float, y: float, z: float, octaves: int = None, persistence: float = None, lacunarity: float = None, scale: float = None) -> float:
        """
        Multi-octave noise normalised to roughly [-1, 1]. Parameters default
        to the engine configuration; 'scale' is the starting frequency.
        """
        return noise.fractal_noise_3d(
            self._p, float(x), float(y), float(z),
            int(self.settings['octaves'] if octaves is None else octaves),
            float(self.settings['persistence'] if persistence is None else persistence),
            float(self.settings['lacunarity'] if lacunarity is None else lacunarity),
            float(self.settings['scale'] if scale is None else scale),
        )

    def ridged(self, x: float, y: float, z: float) -> float:
        "1 - |noise3|, in [0, 1]."
        return 1.0 - abs(self.noise3(x, y, z))

    def ridged_fractal(self, x: float, y: float, z: float, octaves: int = None, persistence: float = None, lacunarity: float = None, scale: float = None) -> float:
        """Multi-octave ridged noise normalised to [0, 1]."""
        return noise.ridged_fractal_noise_3d(
            self._p, float(x), float(y), float(z),
            int(self.settings['octaves'] if octaves is None else octaves),
            float(self.settings['persistence'] if persistence is None else persistence),
            float(self.settings['lacunarity'] if lacunarity is None else lacunarity),
            float(self.settings['scale'] if scale is None else scale),
        )

    def sample(self, x: float, y: float, z: float) -> float:
        """
        The engine's default noise: fractal noise with the configured
        parameters, reshaped by |n|^redistribution * sign(n).
        """
        value = self.fractal(x, y, z)
        return redistribute(value, self.settings['redistribution'])

    @staticmethod
    def normalize(value: float, lo: float, hi: float, new_lo: float = 0.0, new_hi: float = 1.0) -> float:
        """
        Maps value from [lo, hi] to [new_lo, new_hi]. A degenerate source range
        maps to the middle of the target range.
        """
        if hi == lo:
            return (new_lo + new_hi) / 2.0
        return new_lo + (new_hi - new_lo) * (value - lo) / (hi - lo)

    def band_noise(self, direction: Sequence[float], band: dict) -> float:
        """Fractal noise configured by a band dictionary, mapped to [0, 1]."""
        x, y, z = direction
        value = self.fractal(x, y, z, band['octaves'], band['persistence'], band['lacunarity'], band['scale'])
        return self.normalize(value, -1.0, 1.0)

    # --- Domain Composites ---

    def terrain_elevation(self, direction: Sequence[float], bands: Optional[dict] = None) -> float:
        """
        Weighted sum of the continent, mountain (ridged) and hill bands, each
        in [0, 1], sampled from the same direction vector.

        Args:
            direction: A unit vector on the planet's surface.
            bands (dict, optional): Per-call overrides keyed by band name,
                e.g. {'continent': {'scale': 0.5}}.
        """
        bands = bands or {}
        continent = merge_band(self.settings['continent'], bands.get('continent'))
        mountain = merge_band(self.settings['mountain'], bands.get('mountain'))
        hill = merge_band(self.settings['hill'], bands.get('hill'))

        x, y, z = direction
        continent_noise = self.band_noise(direction, continent)
        mountain_noise = self.ridged_fractal(
            x, y, z, mountain['octaves'], mountain['persistence'], mountain['lacunarity'], mountain['scale']
        )
        hill_noise = self.band_noise(direction, hill)

        return (
            continent_noise * continent['weight'] +
            mountain_noise * mountain['weight'] +
            hill_noise * hill['weight']
        )

    def biome_climate(self, direction: Sequence[float]) -> ClimateSample:
        """
        Temperature and moisture in [0, 1]. Moisture samples the direction
        shifted by a large offset so the two fields are uncorrelated.
        """
        x, y, z = direction
        offset = self.settings['moisture_offset']
        temperature = self.band_noise((x, y, z), self.settings['temperature'])
        moisture = self.band_noise((x + offset, y + offset, z + offset), self.settings['moisture'])
        return ClimateSample(temperature, moisture)

    def river_factor(self, direction: Sequence[float], elevation_normalized: float) -> float:
        """
        River likelihood in [0, 1]. Low ground favours rivers; the high power
        sharpens the result into thin channels.
        """
        x, y, z = direction
        offset = self.settings['river_offset']
        scale = self.settings['river_scale']
        value = self.noise3((x + offset) * scale, (y + offset) * scale, (z + offset) * scale)
        value = self.normalize(value, -1.0, 1.0)

        elevation_factor = 1.0 - min(1.0, max(0.0, elevation_normalized))
        weight = DEFAULTS.RIVER_NOISE_WEIGHT
        value = value * weight + elevation_factor * (1.0 - weight)
        value = 1.0 - value ** DEFAULTS.RIVER_SHARPNESS
        return max(0.0, min(1.0, value))


def redistribute(value: float, exponent: float) -> float:
    """Applies |value|^exponent while preserving the sign of value."""
    if exponent == 1.0:
        return value
    return float(np.sign(value)) * abs(value) ** exponent
