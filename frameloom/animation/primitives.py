"""
Shared drawing primitives for asset modules.

Element sets come from scatter.py (generated once); these functions evaluate
them for one frame onto Pillow RGBA layers. Coordinates are in the 1920x1080
reference space and scaled through the Canvas.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageEnhance, ImageFilter

from .noise import clamp01, lerp, long_cycle_noise, seeded_random
from .scatter import Cloud, HillPath, MistWisp, Particle, ParticleEnvelope, RGB, Star, SurfaceElement
from .scene_spec import Canvas

logger = logging.getLogger(__name__)

# (offset 0-1, color, alpha 0-1)
GradientStop = Tuple[float, RGB, float]

COLOR_SHIFTS = {
    "warm": (1.08, 1.0, 0.88),
    "cool": (0.9, 0.97, 1.1),
    "sepia": (1.07, 0.95, 0.78),
    "night": (0.55, 0.65, 0.9),
    "dusk": (1.05, 0.82, 0.8),
}


@dataclass(frozen=True)
class Hill:
    path: HillPath
    fill: RGB
    opacity: float = 1.0
    drift: float = 0.1  # parallax strength, farther = smaller


# -----------------------------
# Helpers
# -----------------------------
def lerp_rgb(c1, c2, t: float):
    t = clamp01(t)
    return (
        int(lerp(c1[0], c2[0], t)),
        int(lerp(c1[1], c2[1], t)),
        int(lerp(c1[2], c2[2], t)),
    )


def _alpha(a: float) -> int:
    return int(round(255 * clamp01(a)))


def _sample_stops(stops: Sequence[GradientStop], t: float):
    if t <= stops[0][0]:
        return stops[0][1], stops[0][2]
    for (o1, c1, a1), (o2, c2, a2) in zip(stops, stops[1:]):
        if t <= o2:
            k = (t - o1) / max(1e-9, o2 - o1)
            return lerp_rgb(c1, c2, k), lerp(a1, a2, k)
    return stops[-1][1], stops[-1][2]


def vertical_gradient(
    size: Tuple[int, int],
    stops: Sequence[GradientStop],
    top: int = 0,
    bottom: Optional[int] = None,
) -> Image.Image:
    """RGBA gradient between rows `top` and `bottom`; transparent elsewhere."""
    w, h = size
    img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    bottom = h if bottom is None else bottom
    if bottom <= top or not stops:
        return img
    d = ImageDraw.Draw(img)
    span = max(1, bottom - top - 1)
    for y in range(max(0, top), min(h, bottom)):
        color, a = _sample_stops(stops, (y - top) / span)
        d.line([(0, y), (w, y)], fill=tuple(color) + (_alpha(a),))
    return img


def set_opacity(img: Image.Image, opacity: float) -> Image.Image:
    if opacity >= 1:
        return img
    img = img.convert("RGBA")
    alpha = img.getchannel("A").point(lambda v: int(v * clamp01(opacity)))
    img.putalpha(alpha)
    return img


def composite_at(base: Image.Image, overlay: Image.Image, left: int, top: int) -> None:
    """Alpha-composite `overlay` onto `base` in place; off-canvas parts are clipped."""
    bw, bh = base.size
    ow, oh = overlay.size
    x0, y0 = max(0, left), max(0, top)
    x1, y1 = min(bw, left + ow), min(bh, top + oh)
    if x1 <= x0 or y1 <= y0:
        return
    src = (x0 - left, y0 - top, x1 - left, y1 - top)
    base.alpha_composite(overlay.convert("RGBA"), dest=(x0, y0), source=src)


def apply_color_shift(img: Image.Image, tag: Optional[str]) -> Image.Image:
    if not tag:
        return img
    key = tag.lower()
    if key == "muted":
        rgb = ImageEnhance.Color(img.convert("RGB")).enhance(0.6)
        rgb.putalpha(img.convert("RGBA").getchannel("A"))
        return rgb
    factors = COLOR_SHIFTS.get(key)
    if factors is None:
        logger.warning("Unknown color shift %r, leaving layer unchanged", tag)
        return img
    img = img.convert("RGBA")
    r, g, b, a = img.split()
    r, g, b = (
        ch.point(lambda v, f=f: min(255, int(v * f)))
        for ch, f in zip((r, g, b), factors)
    )
    return Image.merge("RGBA", (r, g, b, a))


# -----------------------------
# Element renderers
# -----------------------------
def glow_circle(layer: Image.Image, cx: float, cy: float, r: float, color, glow: float = 45, alpha: int = 120) -> Image.Image:
    halo = Image.new("RGBA", layer.size, (0, 0, 0, 0))
    d = ImageDraw.Draw(halo)
    d.ellipse([cx - r - glow, cy - r - glow, cx + r + glow, cy + r + glow], fill=tuple(color) + (alpha,))
    halo = halo.filter(ImageFilter.GaussianBlur(max(1, int(0.7 * glow))))
    d = ImageDraw.Draw(halo)
    d.ellipse([cx - r, cy - r, cx + r, cy + r], fill=tuple(color) + (255,))
    return Image.alpha_composite(layer, halo)


def draw_star_field(layer: Image.Image, canvas: Canvas, stars: Sequence[Star], frame: int, twinkle_speed: float = 0.06) -> Image.Image:
    """Each star pulses between 40% and 100% of its brightness at its own phase."""
    d = ImageDraw.Draw(layer)
    for s in stars:
        twinkle = 0.4 + 0.6 * abs(math.sin(frame * twinkle_speed + s.phase * math.pi * 2))
        a = s.brightness * twinkle
        cx, cy = canvas.x(s.x), canvas.y(s.y)
        r = max(0.5, s.r * canvas.sy)
        d.ellipse([cx - r * 3, cy - r * 3, cx + r * 3, cy + r * 3], fill=(255, 255, 255, _alpha(a * 0.12)))
        d.ellipse([cx - r, cy - r, cx + r, cy + r], fill=(255, 255, 255, _alpha(a)))
        if s.r > 1.5:
            arm = r * 2.5
            d.line([(cx - arm, cy), (cx + arm, cy)], fill=(255, 255, 255, _alpha(a * 0.5)))
            d.line([(cx, cy - arm), (cx, cy + arm)], fill=(255, 255, 255, _alpha(a * 0.5)))
    return layer


def draw_cloud_layer(layer: Image.Image, canvas: Canvas, clouds: Sequence[Cloud], frame: int, blob_seed: int = 42) -> Image.Image:
    """
    Puffy clouds: a main ellipse plus seeded sub-blobs, wrapping around the
    screen as they drift.
    """
    total = 2400
    rng = seeded_random(blob_seed)
    puffs = Image.new("RGBA", layer.size, (0, 0, 0, 0))
    d = ImageDraw.Draw(puffs)
    for c in clouds:
        offset = ((frame * c.drift) % total + total) % total - 240
        cx = c.x + offset
        fill = tuple(c.fill) + (_alpha(c.opacity),)
        parts = [(cx, c.y, c.rx, c.ry)]
        for b in range(c.blobs):
            angle = (b / max(1, c.blobs)) * math.pi + rng() * 0.5
            dist = c.rx * (0.4 + rng() * 0.4)
            parts.append((
                cx + math.cos(angle) * dist,
                c.y + math.sin(angle) * dist * 0.4,
                c.rx * (0.3 + rng() * 0.35),
                c.ry * (0.4 + rng() * 0.4),
            ))
        for px, py, rx, ry in parts:
            x, y = canvas.x(px), canvas.y(py)
            sx, sy = canvas.x(rx), canvas.y(ry)
            d.ellipse([x - sx, y - sy, x + sx, y + sy], fill=fill)
    puffs = puffs.filter(ImageFilter.GaussianBlur(max(1, int(6 * canvas.sy))))
    return Image.alpha_composite(layer, puffs)


def draw_hills(layer: Image.Image, canvas: Canvas, hills: Sequence[Hill], frame: int) -> Image.Image:
    """Layered silhouettes; each one sways sideways by its own noise channel."""
    for i, h in enumerate(hills):
        x_off = long_cycle_noise(frame * 0.3, i * 31.7 + 100) * h.drift * 80
        shape = Image.new("RGBA", layer.size, (0, 0, 0, 0))
        pts = [(canvas.x(x + x_off), canvas.y(y)) for x, y in h.path.points]
        ImageDraw.Draw(shape).polygon(pts, fill=tuple(h.fill) + (_alpha(h.opacity),))
        layer = Image.alpha_composite(layer, shape)
    return layer


def draw_surface_scatter(layer: Image.Image, canvas: Canvas, elements: Sequence[SurfaceElement], frame: int) -> Image.Image:
    """Grass blades swaying in the wind."""
    d = ImageDraw.Draw(layer)
    for el in elements:
        sway = long_cycle_noise(frame * 0.6, el.seed) * 8
        height = 8 + el.size * 12
        d.line(
            [(canvas.x(el.x), canvas.y(el.y)), (canvas.x(el.x + sway), canvas.y(el.y - height))],
            fill=tuple(el.color) + (_alpha(el.opacity),),
            width=max(1, int((1 + el.size * 0.5) * canvas.sy)),
        )
    return layer


def draw_ground_mist(layer: Image.Image, canvas: Canvas, wisps: Sequence[MistWisp], color, opacity: float, frame: int) -> Image.Image:
    mist = Image.new("RGBA", layer.size, (0, 0, 0, 0))
    d = ImageDraw.Draw(mist)
    for i, w in enumerate(wisps):
        drift = long_cycle_noise(frame * 0.4, w.phase + i * 13) * 60
        pulse = 1 + long_cycle_noise(frame * 0.15, w.phase + i * 7) * 0.15
        cx, cy = canvas.x(w.x + drift), canvas.y(w.y)
        rx, ry = canvas.x(w.rx * pulse), canvas.y(w.ry * pulse)
        d.ellipse([cx - rx, cy - ry, cx + rx, cy + ry], fill=tuple(color) + (_alpha(opacity * 0.5),))
    mist = mist.filter(ImageFilter.GaussianBlur(max(1, int(20 * canvas.sy))))
    return Image.alpha_composite(layer, mist)


def draw_particles(layer: Image.Image, canvas: Canvas, env: ParticleEnvelope, particles: Sequence[Particle], frame: int) -> Image.Image:
    """Rain/snow/sand streaks wrapping around both axes."""
    d = ImageDraw.Draw(layer)
    for p in particles:
        y = (p.y + frame * env.speed_y * p.speed_mult) % 1300 - 110
        x = (p.x + frame * env.speed_x * p.speed_mult + 140) % 2200 - 140
        rad = math.radians(p.angle)
        x2, y2 = x + math.sin(rad) * p.h, y + math.cos(rad) * p.h
        d.line(
            [(canvas.x(x), canvas.y(y)), (canvas.x(x2), canvas.y(y2))],
            fill=tuple(env.color) + (_alpha(env.opacity * p.opacity_mult),),
            width=max(1, int(p.w * canvas.sy)),
        )
    return layer
