"""
Placeholder assets, one or two per slot.

Simple shapes built from the shared primitives so a scene can be composed end
to end before production art exists. Positioned assets return their natural
box (reference size scaled to the canvas); full-canvas assets return a
canvas-sized layer.
"""
from __future__ import annotations

import math

from PIL import Image, ImageChops, ImageDraw, ImageFilter

from ..animation.noise import long_cycle_noise
from ..animation.primitives import (
    Hill,
    apply_color_shift,
    draw_cloud_layer,
    draw_ground_mist,
    draw_hills,
    draw_particles,
    draw_star_field,
    draw_surface_scatter,
    glow_circle,
    vertical_gradient,
)
from ..animation.scatter import (
    Bounds,
    ParticleEnvelope,
    generate_clouds,
    generate_hill_path,
    generate_mist_wisps,
    generate_particles,
    generate_stars,
    generate_surface_elements,
)
from ..animation.scene_spec import AssetStyle

STAR_SEED = 401
GRASS_PALETTE = ((60, 140, 70), (45, 120, 60), (80, 160, 85))
RAIN = ParticleEnvelope(count=150, seed=999, color=(200, 220, 255), opacity=0.45, speed_y=18, speed_x=-3)


def _box(style: AssetStyle, ref_w: float, ref_h: float):
    c = style.canvas
    k = min(c.sx, c.sy)
    img = Image.new("RGBA", (max(1, int(round(ref_w * k))), max(1, int(round(ref_h * k)))), (0, 0, 0, 0))
    return img, k


def _finish(img: Image.Image, style: AssetStyle) -> Image.Image:
    return apply_color_shift(img, style.color_shift)


# -----------------------------
# Sky
# -----------------------------
def sky_test(frame: int, style: AssetStyle) -> Image.Image:
    c = style.canvas
    img = vertical_gradient(c.size, [(0.0, (85, 170, 255), 1.0), (1.0, (200, 235, 255), 1.0)])
    sun_y = c.y(260 + long_cycle_noise(frame * 0.2, 5) * 6)
    img = glow_circle(img, c.x(480), sun_y, 70 * c.sy, (255, 220, 140), glow=52 * c.sy)
    img = draw_cloud_layer(img, c, generate_clouds(5, 42), frame)
    return _finish(img, style)


def sky_night_test(frame: int, style: AssetStyle) -> Image.Image:
    c = style.canvas
    img = vertical_gradient(c.size, [(0.0, (10, 16, 40), 1.0), (1.0, (30, 40, 70), 1.0)])
    img = draw_star_field(img, c, generate_stars(50, STAR_SEED), frame)
    moon_y = c.y(230 + long_cycle_noise(frame * 0.1, 9) * 4)
    img = glow_circle(img, c.x(1440), moon_y, 55 * c.sy, (220, 230, 255), glow=36 * c.sy, alpha=90)
    return _finish(img, style)


# -----------------------------
# Ground
# -----------------------------
def terrain_test(frame: int, style: AssetStyle) -> Image.Image:
    c = style.canvas
    hills = (
        Hill(generate_hill_path(560, 40, 6, 11), (70, 140, 90), drift=0.05),
        Hill(generate_hill_path(640, 50, 5, 12), (40, 120, 60), drift=0.1),
        Hill(generate_hill_path(760, 30, 4, 13), (30, 105, 50), drift=0.2),
    )
    img = draw_hills(c.blank(), c, hills, frame)
    grass = generate_surface_elements(120, 21, Bounds(0, 800, 1920, 260), GRASS_PALETTE)
    img = draw_surface_scatter(img, c, grass, frame)

    # Soften the top edge so the horizon spill reads through it
    fade = vertical_gradient(
        c.size,
        [(0.0, (255, 255, 255), 0.55), (1.0, (255, 255, 255), 1.0)],
        int(c.y(480)),
        int(c.y(720)),
    ).getchannel("A")
    fade.paste(255, (0, int(c.y(720)), c.width, c.height))
    img.putalpha(ImageChops.multiply(img.getchannel("A"), fade))
    return _finish(img, style)


def water_test(frame: int, style: AssetStyle) -> Image.Image:
    c = style.canvas
    img = c.blank()
    top, bottom = int(c.y(720)), int(c.y(830))
    ImageDraw.Draw(img).rectangle([0, top, c.width, bottom], fill=(60, 150, 220, 230))

    waves = c.blank()
    d = ImageDraw.Draw(waves)
    for i in range(5):
        yy = c.y(735 + i * 18 + long_cycle_noise(frame * 0.8, i * 3.1) * 3)
        d.arc([c.x(190), yy, c.x(1730), yy + c.y(22)], start=10, end=170, fill=(255, 255, 255, 80), width=max(1, int(3 * c.sy)))
    img = Image.alpha_composite(img, waves.filter(ImageFilter.GaussianBlur(1)))
    return _finish(img, style)


# -----------------------------
# Positioned
# -----------------------------
def structure_test(frame: int, style: AssetStyle) -> Image.Image:
    img, k = _box(style, 240, 220)
    d = ImageDraw.Draw(img)
    d.polygon([(0, 100 * k), (120 * k, 0), (240 * k, 100 * k)], fill=(150, 60, 50, 255))
    d.rectangle([20 * k, 100 * k, 220 * k, 220 * k], fill=(225, 205, 170, 255))
    d.rectangle([100 * k, 150 * k, 140 * k, 220 * k], fill=(90, 60, 40, 255))
    # lit window flickers a little
    glow = int(200 + 40 * long_cycle_noise(frame, 61))
    d.rectangle([40 * k, 125 * k, 75 * k, 160 * k], fill=(255, 230, 140, glow))
    return _finish(img, style)


def tree_test(frame: int, style: AssetStyle) -> Image.Image:
    img, k = _box(style, 160, 260)
    d = ImageDraw.Draw(img)
    sway = long_cycle_noise(frame * 0.5, 23) * 6 * k
    cx = 80 * k
    d.rectangle([cx - 7 * k, 140 * k, cx + 7 * k, 260 * k], fill=(90, 60, 40, 255))
    rr = 55 * k
    d.ellipse([cx - rr + sway, 90 * k - rr, cx + rr + sway, 90 * k + rr], fill=(40, 140, 70, 235))
    d.ellipse([cx - rr - 18 * k + sway, 100 * k - rr, cx + rr - 18 * k + sway, 100 * k + rr], fill=(30, 120, 60, 210))
    return _finish(img, style)


def character_test(frame: int, style: AssetStyle) -> Image.Image:
    """Stick figure with one raised arm on its right, so flips are visible."""
    img, k = _box(style, 120, 240)
    d = ImageDraw.Draw(img)
    bob = long_cycle_noise(frame, 31) * 2 * k
    w = max(1, int(6 * k))
    head_r = 22 * k
    d.ellipse([60 * k - head_r, 10 * k + bob, 60 * k + head_r, 10 * k + 2 * head_r + bob], fill=(250, 215, 180, 255))
    d.rectangle([45 * k, 55 * k + bob, 75 * k, 150 * k + bob], fill=(70, 110, 200, 255))
    d.line([(45 * k, 70 * k + bob), (20 * k, 130 * k + bob)], fill=(250, 215, 180, 255), width=w)
    d.line([(75 * k, 70 * k + bob), (115 * k, 30 * k + bob)], fill=(250, 215, 180, 255), width=w)
    d.line([(52 * k, 150 * k + bob), (45 * k, 240 * k)], fill=(40, 40, 60, 255), width=w)
    d.line([(68 * k, 150 * k + bob), (75 * k, 240 * k)], fill=(40, 40, 60, 255), width=w)
    return _finish(img, style)


def prop_test(frame: int, style: AssetStyle) -> Image.Image:
    img, k = _box(style, 80, 60)
    d = ImageDraw.Draw(img)
    d.rectangle([0, 0, 80 * k, 60 * k], fill=(170, 120, 70, 255), outline=(110, 75, 40, 255), width=max(1, int(3 * k)))
    d.line([(0, 0), (80 * k, 60 * k)], fill=(110, 75, 40, 255), width=max(1, int(3 * k)))
    return _finish(img, style)


# -----------------------------
# Overlays
# -----------------------------
def foreground_test(frame: int, style: AssetStyle) -> Image.Image:
    c = style.canvas
    img = c.blank()
    d = ImageDraw.Draw(img)
    d.ellipse([c.x(-200), c.y(940), c.x(420), c.y(1240)], fill=(20, 70, 35, 255))
    d.ellipse([c.x(1560), c.y(960), c.x(2120), c.y(1240)], fill=(25, 80, 40, 255))
    blades = generate_surface_elements(60, 33, Bounds(0, 1000, 1920, 80), GRASS_PALETTE)
    img = draw_surface_scatter(img, c, blades, frame)
    img = draw_ground_mist(img, c, generate_mist_wisps(4, 7, 1000), (230, 235, 240), 0.35, frame)
    return _finish(img, style)


def atmosphere_rain_test(frame: int, style: AssetStyle) -> Image.Image:
    c = style.canvas
    img = draw_particles(c.blank(), c, RAIN, generate_particles(RAIN), frame)
    return _finish(img, style)


def lighting_test(frame: int, style: AssetStyle) -> Image.Image:
    """Warm wash from the upper left with a slowly breathing strength."""
    c = style.canvas
    breathe = 0.5 + 0.5 * math.fabs(long_cycle_noise(frame * 0.05, 88))
    wash = vertical_gradient(
        c.size,
        [(0.0, (255, 210, 150), 0.30 * breathe), (0.6, (255, 190, 120), 0.08 * breathe), (1.0, (255, 190, 120), 0.0)],
    )
    return _finish(wash, style)


ASSETS = {
    "sky_test": sky_test,
    "sky_night_test": sky_night_test,
    "terrain_test": terrain_test,
    "water_test": water_test,
    "structure_test": structure_test,
    "tree_test": tree_test,
    "character_test": character_test,
    "prop_test": prop_test,
    "foreground_test": foreground_test,
    "atmosphere_rain_test": atmosphere_rain_test,
    "lighting_test": lighting_test,
}


def register_assets(registry) -> None:
    for asset_id, render in ASSETS.items():
        registry.register(asset_id, render)
