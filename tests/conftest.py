"""Shared fixtures: a fresh registry of placeholder assets and a small canvas."""

import pytest

from frameloom.animation.compositor import LayerCompositor
from frameloom.animation.scene_spec import Canvas
from frameloom.registry import AssetRegistry, load_assets
from frameloom.schemas import ComposedScene


@pytest.fixture
def canvas():
    # 1/10 of the reference size keeps full-frame renders fast
    return Canvas(width=192, height=108)


@pytest.fixture
def registry():
    reg = load_assets(AssetRegistry(), strict=True)
    yield reg
    reg.clear()


@pytest.fixture
def compositor(registry, canvas):
    return LayerCompositor(registry, canvas=canvas)


@pytest.fixture
def scene():
    return ComposedScene.model_validate({
        "sky": {"asset": "sky_test"},
        "terrain": {"asset": "terrain_test"},
        "water": {"asset": "water_test"},
        "structures": [{"asset": "structure_test", "preset": "left_back"}],
        "vegetation": [{"asset": "tree_test", "preset": "far_right_mid"}],
        "characters": [{"asset": "character_test", "preset": "center_front"}],
        "props": [{"asset": "prop_test", "x": 120, "y": 80}],
        "foreground": [{"asset": "foreground_test"}],
        "atmosphere": [{"asset": "atmosphere_rain_test", "opacity": 0.6}],
        "lighting": {"asset": "lighting_test", "intensity": 0.8},
        "horizon": {},
    })
