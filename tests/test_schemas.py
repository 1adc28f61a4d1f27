import pytest
from pydantic import ValidationError

from frameloom.schemas import SLOT_ORDER, ComposedScene, Placement

BASE = {
    "sky": {"asset": "sky_test"},
    "terrain": {"asset": "terrain_test"},
    "lighting": {"asset": "lighting_test"},
}


@pytest.mark.unit
class TestComposedScene:
    def test_minimal_scene(self):
        scene = ComposedScene.model_validate(BASE)
        assert scene.water is None
        assert scene.structures == []
        assert scene.props is None
        assert scene.horizon is None
        assert scene.lighting.intensity == 1.0

    def test_opacity_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({**BASE, "props": [{"asset": "prop_test", "opacity": 2}]})

    def test_lighting_intensity_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({**BASE, "lighting": {"asset": "lighting_test", "intensity": -0.1}})

    def test_required_slots(self):
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({"terrain": {"asset": "terrain_test"}, "lighting": {"asset": "lighting_test"}})

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({**BASE, "characters": "character_test"})

    def test_slot_entries(self):
        scene = ComposedScene.model_validate({
            **BASE,
            "water": {"asset": "water_test"},
            "vegetation": [{"asset": "tree_test"}, {"asset": "tree_test", "mirror": True}],
        })
        assert [e.asset for e in scene.slot_entries("water")] == ["water_test"]
        assert len(scene.slot_entries("vegetation")) == 2
        assert scene.slot_entries("props") == []

    def test_iter_assets_in_stacking_order(self):
        scene = ComposedScene.model_validate({
            **BASE,
            "atmosphere": [{"asset": "atmosphere_rain_test"}],
            "characters": [{"asset": "character_test"}],
        })
        assert list(scene.iter_assets()) == [
            ("sky", "sky_test"),
            ("terrain", "terrain_test"),
            ("characters", "character_test"),
            ("atmosphere", "atmosphere_rain_test"),
            ("lighting", "lighting_test"),
        ]

    def test_slot_order(self):
        assert SLOT_ORDER[0] == "sky" and SLOT_ORDER[-1] == "lighting"
        assert len(SLOT_ORDER) == 10


@pytest.mark.unit
class TestPlacement:
    def test_full_canvas_without_position(self):
        assert Placement(asset="foreground_test").full_canvas
        assert not Placement(asset="tree_test", preset="left_mid").full_canvas
        assert not Placement(asset="tree_test", x=10).full_canvas

    def test_negative_scale_allowed(self):
        assert Placement(asset="character_test", scale=-1.0).scale == -1.0

    @pytest.mark.parametrize("field", ["x", "y", "scale"])
    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_rejected(self, field, bad):
        with pytest.raises(ValidationError):
            Placement(asset="tree_test", **{field: bad})


@pytest.mark.unit
class TestNonFiniteScene:
    def test_horizon_line_must_be_finite(self):
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({**BASE, "horizon": {"horizon_y": float("nan")}})
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({**BASE, "horizon": {"intensity": float("inf")}})

    def test_lighting_intensity_must_be_finite(self):
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({**BASE, "lighting": {"asset": "lighting_test", "intensity": float("nan")}})

    def test_nested_placement_rejected(self):
        with pytest.raises(ValidationError):
            ComposedScene.model_validate({**BASE, "props": [{"asset": "prop_test", "x": float("inf"), "y": 0}]})
