import pytest

from frameloom.animation.scene_spec import AssetStyle
from frameloom.assets.placeholders import ASSETS

FULL_CANVAS = {
    "sky_test",
    "sky_night_test",
    "terrain_test",
    "water_test",
    "foreground_test",
    "atmosphere_rain_test",
    "lighting_test",
}


@pytest.mark.unit
class TestPlaceholderAssets:
    @pytest.mark.parametrize("asset_id", sorted(ASSETS))
    def test_render_contract(self, canvas, asset_id):
        style = AssetStyle(canvas=canvas)
        img = ASSETS[asset_id](25, style)
        assert img.mode == "RGBA"
        assert img.getchannel("A").getbbox() is not None
        if asset_id in FULL_CANVAS:
            assert img.size == canvas.size

    @pytest.mark.parametrize("asset_id", sorted(ASSETS))
    def test_deterministic_per_frame(self, canvas, asset_id):
        style = AssetStyle(canvas=canvas)
        a = ASSETS[asset_id](321, style)
        b = ASSETS[asset_id](321, style)
        assert a.tobytes() == b.tobytes()

    def test_color_shift_is_applied(self, canvas):
        plain = ASSETS["sky_test"](0, AssetStyle(canvas=canvas))
        warm = ASSETS["sky_test"](0, AssetStyle(canvas=canvas, color_shift="warm"))
        assert plain.tobytes() != warm.tobytes()
        assert plain.getchannel("A").tobytes() == warm.getchannel("A").tobytes()

    def test_positioned_assets_scale_with_canvas(self, canvas):
        small = ASSETS["tree_test"](0, AssetStyle(canvas=canvas)).size
        big = ASSETS["tree_test"](0, AssetStyle()).size
        assert big == (160, 260)
        assert small == (16, 26)

    def test_day_and_night_skies_differ(self, canvas):
        day = ASSETS["sky_test"](0, AssetStyle(canvas=canvas))
        night = ASSETS["sky_night_test"](0, AssetStyle(canvas=canvas))
        assert sum(day.convert("L").getdata()) > sum(night.convert("L").getdata())
