import pytest

from frameloom.animation.layout import (
    FALLBACK_PRESET,
    POSITION_PRESETS,
    preset_manifest,
    resolve_position,
)
from frameloom.animation.scene_spec import Canvas


@pytest.mark.unit
class TestPresets:
    def test_grid_and_specials(self):
        assert len(POSITION_PRESETS) == 18
        for name in ("far_left_back", "center_mid", "right_front", "podium", "duo_left", "duo_right"):
            assert name in POSITION_PRESETS

    def test_center_mid_on_reference_canvas(self):
        pos = resolve_position("center_mid", Canvas())
        assert (pos.x, pos.y, pos.scale) == (960.0, 540.0, 1.0)

    def test_scales_with_canvas(self):
        pos = resolve_position("left_front", Canvas(width=192, height=108))
        assert pos.x == pytest.approx(48.0)
        assert pos.y == pytest.approx(70.2)
        assert pos.scale == 1.5

    def test_rows_grow_towards_the_viewer(self):
        c = Canvas()
        back, mid, front = (resolve_position(f"center_{row}", c) for row in ("back", "mid", "front"))
        assert back.scale < mid.scale < front.scale
        assert back.y < mid.y < front.y

    def test_unknown_name_falls_back(self):
        assert resolve_position("on_the_moon", Canvas()) == resolve_position(FALLBACK_PRESET, Canvas())

    def test_jitter_is_deterministic_and_small(self):
        c = Canvas()
        base = resolve_position("podium", c)
        a = resolve_position("podium", c, jitter=True, seed=3)
        b = resolve_position("podium", c, jitter=True, seed=3)
        assert a == b
        assert a != base
        assert abs(a.x - base.x) <= 30
        assert abs(a.y - base.y) <= 15
        assert base.scale * 0.95 <= a.scale <= base.scale * 1.05

    def test_jitter_seed_changes_offset(self):
        c = Canvas()
        assert resolve_position("duo_left", c, jitter=True, seed=1) != resolve_position("duo_left", c, jitter=True, seed=2)

    def test_manifest_lists_every_preset(self):
        manifest = preset_manifest()
        assert [m["name"] for m in manifest] == list(POSITION_PRESETS)
        assert all(m["description"] for m in manifest)
