import json

import numpy as np
import pytest
from PIL import Image

import bake_planet
from planet_generator.biomes import Biome


@pytest.mark.parametrize("view", bake_planet.VIEW_MODES)
def test_bake_writes_preview_and_manifest(tmp_path, view):
    config = {"planet_parameters": {"seed": 3, "has_vegetation": True}}
    manifest = bake_planet.bake_planet(config, width=16, height=8, view=view, output_dir=str(tmp_path))

    image = Image.open(tmp_path / f"preview_{view}.png")
    assert image.size == (16, 8)
    assert image.mode == "RGB"

    on_disk = json.loads((tmp_path / "manifest.json").read_text())
    assert on_disk == manifest
    assert on_disk["seed"] == 3
    assert (on_disk["width"], on_disk["height"]) == (16, 8)
    assert sum(on_disk["biome_histogram"].values()) == 16 * 8
    assert set(on_disk["biome_histogram"]) == {b.name.lower() for b in Biome}
    assert on_disk["vegetation_count"] >= 0


def test_unknown_view_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        bake_planet.bake_planet({}, width=4, height=2, view="rivers", output_dir=str(tmp_path))


def test_main_reports_missing_config(tmp_path):
    assert bake_planet.main(["--config", str(tmp_path / "missing.json")]) == 1


def test_main_bakes_from_a_config_file(tmp_path):
    config_path = tmp_path / "planet.json"
    config_path.write_text(json.dumps({"planet_parameters": {"seed": 11}}))
    out = tmp_path / "out"
    code = bake_planet.main([
        "--config", str(config_path), "--width", "8", "--height", "4",
        "--view", "elevation", "--output", str(out),
    ])
    assert code == 0
    assert (out / "preview_elevation.png").exists()
    assert json.loads((out / "manifest.json").read_text())["seed"] == 11


def test_render_view_biome_uses_sample_colors():
    samples = {"color": np.array([[[0.0, 0.5, 1.0]]])}
    assert bake_planet.render_view(samples, "biome").tolist() == [[[0, 128, 255]]]


def test_biome_histogram_counts_every_biome():
    histogram = bake_planet.biome_histogram(np.array([0, 0, 4], dtype=np.uint8))
    assert histogram["ocean"] == 2
    assert histogram["rainforest"] == 1
    assert histogram["snow"] == 0
