"""
Procedural scatter generators.

Every generator opens one seeded_random stream, pulls a fixed sequence of
values per element and stops. The pull order is part of each generator's
contract: inserting or removing a pull reshuffles every later element, so any
change to it is a content change that needs a new seed.

Element sets are immutable tuples of frozen records, generated once and shared
by every frame (and every thread) of a render. Results are memoised per
process.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from ..config import settings
from .noise import _finite, _finite_int, seeded_random

RGB = Tuple[int, int, int]
Range = Tuple[float, float]

# Reference canvas the generators lay elements out in
REFERENCE_WIDTH = 1920
REFERENCE_HEIGHT = 1080

NEUTRAL_GREY: RGB = (128, 128, 128)

_memoized = functools.lru_cache(maxsize=settings.scatter_cache_size)


# -----------------------------
# Records
# -----------------------------
@dataclass(frozen=True)
class Star:
    x: float
    y: float
    r: float
    brightness: float
    phase: float  # twinkle offset, 0-1


@dataclass(frozen=True)
class Cloud:
    x: float
    y: float
    rx: float
    ry: float
    fill: RGB
    opacity: float
    drift: float  # px per frame, negative = left
    blobs: int


@dataclass(frozen=True)
class HillPath:
    points: Tuple[Tuple[float, float], ...]  # closed polygon


@dataclass(frozen=True)
class SurfaceElement:
    x: float
    y: float
    angle: float  # degrees
    size: float
    color: RGB
    opacity: float
    seed: float  # per-element animation seed


@dataclass(frozen=True)
class MistWisp:
    x: float
    y: float
    rx: float
    ry: float
    drift: float
    phase: float


@dataclass(frozen=True)
class Particle:
    x: float
    y: float
    w: float
    h: float
    speed_mult: float
    opacity_mult: float
    angle: float


@dataclass(frozen=True)
class DustMote:
    x: float
    y: float
    size: float
    opacity: float


# -----------------------------
# Envelopes
# -----------------------------
@dataclass(frozen=True)
class CloudEnvelope:
    y_range: Range = (60.0, 320.0)
    rx_range: Range = (120.0, 260.0)
    ry_range: Range = (35.0, 70.0)
    fill: RGB = (255, 255, 255)
    opacity_range: Range = (0.5, 0.85)
    drift_range: Range = (0.08, 0.25)
    blob_range: Range = (2.0, 5.0)


@dataclass(frozen=True)
class ParticleEnvelope:
    count: int = 120
    seed: int = 0
    color: RGB = (200, 220, 255)
    opacity: float = 0.35
    size_range: Range = (1.0, 2.0)
    height_range: Range = (14.0, 26.0)
    speed_y: float = 14.0
    speed_x: float = -2.0


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float


# -----------------------------
# Sanitising
# -----------------------------
def _count(n) -> int:
    return max(0, _finite_int(n))


def _span(r: Iterable[float]) -> Range:
    lo, hi = (_finite(v) for v in r)
    return (lo, hi) if lo <= hi else (hi, lo)


def _pick(rng, r: Range) -> float:
    return r[0] + rng() * (r[1] - r[0])


def _palette(colors: Sequence[Sequence[int]]) -> Tuple[RGB, ...]:
    out = tuple(tuple(int(c) for c in rgb[:3]) for rgb in colors)
    return out or (NEUTRAL_GREY,)


def _sanitize_clouds(env: CloudEnvelope) -> CloudEnvelope:
    return CloudEnvelope(
        y_range=_span(env.y_range),
        rx_range=_span(env.rx_range),
        ry_range=_span(env.ry_range),
        fill=tuple(env.fill[:3]),
        opacity_range=_span(env.opacity_range),
        drift_range=_span(env.drift_range),
        blob_range=_span(env.blob_range),
    )


def _sanitize_particles(env: ParticleEnvelope) -> ParticleEnvelope:
    return ParticleEnvelope(
        count=_count(env.count),
        seed=_finite_int(env.seed),
        color=tuple(env.color[:3]),
        opacity=max(0.0, min(1.0, _finite(env.opacity))),
        size_range=_span(env.size_range),
        height_range=_span(env.height_range),
        speed_y=_finite(env.speed_y),
        speed_x=_finite(env.speed_x),
    )


# -----------------------------
# Generators
# -----------------------------
def generate_stars(count: int, seed: int, max_y: float = 700, bright_chance: float = 0.08) -> Tuple[Star, ...]:
    """
    Star field above the horizon.

    Pull order per star: bright check, x, y, radius, brightness, phase.
    """
    return _stars(_count(count), _finite_int(seed), _finite(max_y), _finite(bright_chance))


@_memoized
def _stars(count: int, seed: int, max_y: float, bright_chance: float) -> Tuple[Star, ...]:
    rng = seeded_random(seed)
    out = []
    for _ in range(count):
        bright = rng() < bright_chance
        x = rng() * REFERENCE_WIDTH
        y = rng() * max_y
        r = 1.2 + rng() * 1.5 if bright else 0.4 + rng() * 0.8
        brightness = 0.7 + rng() * 0.3 if bright else 0.3 + rng() * 0.4
        out.append(Star(x=x, y=y, r=r, brightness=brightness, phase=rng()))
    return tuple(out)


def generate_clouds(count: int, seed: int, envelope: CloudEnvelope = CloudEnvelope()) -> Tuple[Cloud, ...]:
    """
    Cloud clusters with parallax drift.

    Pull order per cloud: x, y, rx, ry, opacity, drift, blob count.
    """
    return _clouds(_count(count), _finite_int(seed), _sanitize_clouds(envelope))


@_memoized
def _clouds(count: int, seed: int, env: CloudEnvelope) -> Tuple[Cloud, ...]:
    rng = seeded_random(seed)
    out = []
    for _ in range(count):
        x = rng() * 2200 - 140
        y = _pick(rng, env.y_range)
        rx = _pick(rng, env.rx_range)
        ry = _pick(rng, env.ry_range)
        opacity = _pick(rng, env.opacity_range)
        drift = _pick(rng, env.drift_range)
        blobs = int(_pick(rng, env.blob_range))
        out.append(Cloud(x=x, y=y, rx=rx, ry=ry, fill=env.fill, opacity=opacity, drift=drift, blobs=blobs))
    return tuple(out)


def generate_hill_path(
    base_y: float,
    amplitude: float,
    segments: int,
    seed: int,
    bottom_y: float = REFERENCE_HEIGHT,
) -> HillPath:
    """
    Organic hill silhouette spanning the reference width.

    Pull order: one height variation per control point (segments + 1 pulls),
    then one crest lift per curve segment (segments pulls). Curves are
    quadratic, flattened into a closed polygon.
    """
    return _hill_path(_finite(base_y), abs(_finite(amplitude)), max(1, _finite_int(segments)), _finite_int(seed), _finite(bottom_y))


@_memoized
def _hill_path(base_y: float, amplitude: float, segments: int, seed: int, bottom_y: float) -> HillPath:
    rng = seeded_random(seed)
    seg_w = REFERENCE_WIDTH / segments

    ctrl = []
    for i in range(segments + 1):
        variation = (rng() - 0.5) * amplitude * 2
        ctrl.append((i * seg_w, base_y - abs(variation)))

    steps = 8
    pts = [(0.0, bottom_y), (0.0, ctrl[0][1])]
    pen = (0.0, ctrl[0][1])
    for i in range(1, len(ctrl)):
        prev, curr = ctrl[i - 1], ctrl[i]
        cp = (prev[0] + seg_w * 0.5, prev[1] - rng() * amplitude * 0.5)
        end = ((prev[0] + curr[0]) / 2, (prev[1] + curr[1]) / 2)
        for s in range(1, steps + 1):
            t = s / steps
            u = 1 - t
            pts.append((
                u * u * pen[0] + 2 * u * t * cp[0] + t * t * end[0],
                u * u * pen[1] + 2 * u * t * cp[1] + t * t * end[1],
            ))
        pen = end
    pts.append((float(REFERENCE_WIDTH), ctrl[-1][1]))
    pts.append((float(REFERENCE_WIDTH), bottom_y))
    return HillPath(points=tuple(pts))


def generate_surface_elements(
    count: int,
    seed: int,
    bounds: Bounds,
    palette: Sequence[Sequence[int]],
) -> Tuple[SurfaceElement, ...]:
    """
    Ground clutter (grass blades, pebbles) scattered inside `bounds`.

    Pull order per element: x, y, angle, size, palette index, opacity, seed.
    """
    b = Bounds(_finite(bounds.x), _finite(bounds.y), abs(_finite(bounds.width)), abs(_finite(bounds.height)))
    return _surface_elements(_count(count), _finite_int(seed), b, _palette(palette))


@_memoized
def _surface_elements(count: int, seed: int, b: Bounds, palette: Tuple[RGB, ...]) -> Tuple[SurfaceElement, ...]:
    rng = seeded_random(seed)
    out = []
    for _ in range(count):
        x = b.x + rng() * b.width
        y = b.y + rng() * b.height
        angle = (rng() - 0.5) * 30
        size = 0.5 + rng() * 1.0
        color = palette[min(len(palette) - 1, int(rng() * len(palette)))]
        opacity = 0.4 + rng() * 0.5
        out.append(SurfaceElement(x=x, y=y, angle=angle, size=size, color=color, opacity=opacity, seed=rng() * 1000))
    return tuple(out)


def generate_mist_wisps(count: int, seed: int, y: float) -> Tuple[MistWisp, ...]:
    """
    Low ground-mist wisps around `y`.

    Pull order per wisp: x, y offset, rx, ry, drift, phase.
    """
    return _mist_wisps(_count(count), _finite_int(seed), _finite(y))


@_memoized
def _mist_wisps(count: int, seed: int, y: float) -> Tuple[MistWisp, ...]:
    rng = seeded_random(seed)
    out = []
    for _ in range(count):
        out.append(MistWisp(
            x=rng() * 2400 - 240,
            y=y + (rng() - 0.5) * 80,
            rx=200 + rng() * 400,
            ry=20 + rng() * 40,
            drift=0.03 + rng() * 0.06,
            phase=rng() * 100,
        ))
    return tuple(out)


def generate_particles(envelope: ParticleEnvelope) -> Tuple[Particle, ...]:
    """
    Falling particles (rain, snow, sand).

    Pull order per particle: x, y, width, height, speed multiplier, opacity
    multiplier, angle.
    """
    return _particles(_sanitize_particles(envelope))


@_memoized
def _particles(env: ParticleEnvelope) -> Tuple[Particle, ...]:
    rng = seeded_random(env.seed)
    out = []
    for _ in range(env.count):
        out.append(Particle(
            x=rng() * 2200 - 140,
            y=rng() * 1200,
            w=_pick(rng, env.size_range),
            h=_pick(rng, env.height_range),
            speed_mult=0.7 + rng() * 0.6,
            opacity_mult=0.5 + rng() * 0.5,
            angle=-5 + rng() * 10,
        ))
    return tuple(out)


def generate_dust(count: int, seed: int, horizon_y: float, haze_height: float) -> Tuple[DustMote, ...]:
    """
    Dust motes inside the central half of a horizon haze band.

    Pull order per mote: x, y, size, opacity.
    """
    return _dust(_count(count), _finite_int(seed), _finite(horizon_y), abs(_finite(haze_height)))


@_memoized
def _dust(count: int, seed: int, horizon_y: float, haze_height: float) -> Tuple[DustMote, ...]:
    rng = seeded_random(seed)
    out = []
    for _ in range(count):
        x = rng() * REFERENCE_WIDTH
        y = horizon_y - haze_height * 0.5 + rng() * haze_height
        size = 1.5 + rng() * 3
        opacity = 0.3 + rng() * 0.5
        out.append(DustMote(x=x, y=y, size=size, opacity=opacity))
    return tuple(out)
