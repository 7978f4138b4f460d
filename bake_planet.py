# bake_planet.py

"""
================================================================================
OFFLINE PLANET PREVIEW BAKER
================================================================================
This script is a command-line tool for sampling a planet over an
equirectangular grid and saving the result ("baking") as a preview image plus
a manifest describing what was generated. It is a slow, one-time process
useful for inspecting a seed and configuration without a renderer.

Usage:
    python bake_planet.py --config path/to/your/config.json --view biome

The configuration file is JSON; planet and noise overrides live under the
'planet_parameters' key.
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import collections
import numpy as np
from PIL import Image
from tqdm import tqdm

from planet_generator.planet import PlanetGenerator
from planet_generator.biomes import Biome
from planet_generator import color_maps
from planet_generator import config as DEFAULTS

VIEW_MODES = ("biome", "elevation", "temperature", "moisture")


def render_view(samples: dict, view: str) -> np.ndarray:
    """Converts sampled data into an (height, width, 3) uint8 image array."""
    if view == "biome":
        return (np.clip(samples['color'], 0.0, 1.0) * 255).round().astype(np.uint8)
    if view == "elevation":
        lut = color_maps.ELEVATION_GRADIENT.create_lut()
    elif view == "temperature":
        lut = color_maps.TEMPERATURE_GRADIENT.create_lut()
    elif view == "moisture":
        lut = color_maps.MOISTURE_GRADIENT.create_lut()
    else:
        raise ValueError(f"Unknown view '{view}', expected one of {VIEW_MODES}")
    return color_maps.get_scalar_color_array(samples[view], lut)


def biome_histogram(biome_ids: np.ndarray) -> dict:
    counts = collections.Counter(int(b) for b in np.asarray(biome_ids).ravel())
    return {biome.name.lower(): counts.get(int(biome), 0) for biome in Biome}


# --- Main Baking Function ---
def bake_planet(config: dict, width: int = DEFAULTS.PREVIEW_WIDTH, height: int = DEFAULTS.PREVIEW_HEIGHT, view: str = "biome", output_dir: str = None, logger: logging.Logger = None) -> dict:
    """
    Samples a planet on a width x height grid, writes preview_<view>.png and
    manifest.json to output_dir and returns the manifest.

    Args:
        config (dict): The loaded configuration file contents.
        width, height (int): Preview dimensions in pixels.
        view (str): One of VIEW_MODES.
        output_dir (str, optional): Defaults to baked_planets/seed_<seed>.
        logger (logging.Logger, optional): The logger instance for all output.
    """
    logger = logger or logging.getLogger("Baker")
    if view not in VIEW_MODES:
        raise ValueError(f"Unknown view '{view}', expected one of {VIEW_MODES}")

    planet_params = config.get('planet_parameters', {})
    generator = PlanetGenerator(config=planet_params, logger=logger)
    seed = generator.seed

    output_dir = output_dir or os.path.join("baked_planets", f"seed_{seed}")
    os.makedirs(output_dir, exist_ok=True)

    # --- Sampling Loop ---
    directions = PlanetGenerator.get_direction_grid(width, height)
    logger.info(f"Sampling a {width}x{height} grid ({width * height} directions)...")
    start_time = time.perf_counter()

    rows = []
    for row in tqdm(range(height), desc="Sampling Rows"):
        rows.append(generator.sample_many(directions[row]))
    samples = {key: np.stack([r[key] for r in rows]) for key in rows[0]}

    vegetation = generator.place_vegetation(directions, samples)

    # --- Finalization ---
    image_name = f"preview_{view}.png"
    image = Image.fromarray(render_view(samples, view))
    image.save(os.path.join(output_dir, image_name), 'PNG')

    manifest = {
        'seed': seed,
        'width': width,
        'height': height,
        'view': view,
        'image': image_name,
        'radius': generator.radius,
        'water_level': generator.water_level,
        'biome_histogram': biome_histogram(samples['biome']),
        'vegetation_count': len(vegetation),
    }
    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(f"Placed {manifest['vegetation_count']} trees.")
    logger.info(f"Preview and manifest.json saved to: {output_dir}")
    return manifest


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline preview baker for the procedural planet generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the planet to be baked."
    )
    parser.add_argument("--width", type=int, default=DEFAULTS.PREVIEW_WIDTH, help="Preview width in pixels.")
    parser.add_argument("--height", type=int, default=DEFAULTS.PREVIEW_HEIGHT, help="Preview height in pixels.")
    parser.add_argument("--view", choices=VIEW_MODES, default="biome", help="Which layer to render.")
    parser.add_argument("--output", type=str, default=None, help="Output directory.")
    args = parser.parse_args(argv)

    # --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")

    # --- Load Configuration ---
    logger.info(f"Loading configuration from: {args.config}")
    try:
        with open(args.config, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load or parse config file: {e}")
        return 1

    bake_planet(config, args.width, args.height, args.view, args.output, logger)
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
