# Make the repository root importable so tests can reach bake_planet.py
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planet_generator.generator import NoiseEngine  # noqa: E402
from planet_generator.octree import SparseOctree  # noqa: E402
from planet_generator.planet import PlanetGenerator  # noqa: E402

GOLDEN_SEED = 12345


@pytest.fixture(scope="session")
def engine():
    return NoiseEngine(seed=GOLDEN_SEED)


@pytest.fixture(scope="session")
def planet():
    return PlanetGenerator({"seed": GOLDEN_SEED})


@pytest.fixture
def octree():
    return SparseOctree(center=(0.0, 0.0, 0.0), size=2.0, capacity=8, min_size=0.01)
