"""
Deterministic noise core.

Two grains of randomness, both pure functions of their inputs:

- seeded_random(seed): a discrete Park-Miller stream in [0, 1) used once per
  scene to generate scattered element sets.
- long_cycle_noise(t, seed): a continuous signal in [-1, 1] used per frame for
  organic motion. It sums sines at mutually irrational frequency ratios under a
  slow envelope, so no period shows up over a 10-15 minute render.
"""
from __future__ import annotations

import math
from typing import Callable

# Park-Miller "minimal standard" generator
LCG_MULTIPLIER = 16807
LCG_MODULUS = 2147483647

_MASK32 = 0xFFFFFFFF

_PHI = (1 + math.sqrt(5)) / 2
_SQRT2 = math.sqrt(2)
_SQRT3 = math.sqrt(3)

# (weight, angular frequency per unit t, seed phase multiplier)
_COMPONENTS = (
    (0.40, 0.0173, 1.0),
    (0.27, 0.0173 * _PHI, _SQRT2),
    (0.18, 0.0173 * _SQRT2 * 0.61, _PHI),
    (0.15, 0.0173 * math.e * 1.37, _SQRT3),
)

_DRIFT_COMPONENTS = (
    (0.6, 0.00091, 0.7071),
    (0.4, 0.00091 * _PHI * 1.31, 1.3247),
)


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x


def clamp01(x: float) -> float:
    return 0.0 if x < 0 else 1.0 if x > 1 else x


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _finite(x: float) -> float:
    try:
        x = float(x)
    except (TypeError, ValueError):
        return 0.0
    return x if math.isfinite(x) else 0.0


def _finite_int(n) -> int:
    """Integers pass through untouched; anything else is truncated, non-finite as 0."""
    if isinstance(n, int):
        return n
    return int(_finite(n))


def _scramble_seed(seed: int) -> int:
    """Fold any integer into a valid recurrence state in [1, M - 1]."""
    s = seed % (1 << 64)
    h = ((s & _MASK32) + 0x9E3779B9 * (s >> 32)) & _MASK32
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK32
    h ^= h >> 16
    return h % (LCG_MODULUS - 1) + 1


def seeded_random(seed: int) -> Callable[[], float]:
    """
    Return a fresh generator of uniform values in [0, 1).

    Each call builds its own closure over a local state, so two generators with
    the same seed always yield the same sequence and unrelated generators never
    disturb each other.
    """
    state = _scramble_seed(_finite_int(seed))

    def next_value() -> float:
        nonlocal state
        state = (state * LCG_MULTIPLIER) % LCG_MODULUS
        return (state - 1) / (LCG_MODULUS - 1)

    return next_value


def slow_drift(t: float, seed: float = 0.0) -> float:
    """Very low-frequency component in [-1, 1] (periods of minutes at 30 fps)."""
    t = _finite(t)
    seed = _finite(seed)
    v = 0.0
    for weight, freq, k in _DRIFT_COMPONENTS:
        v += weight * math.sin(t * freq + seed * k)
    return clamp(v, -1.0, 1.0)


def long_cycle_noise(t: float, seed: float = 0.0) -> float:
    """
    Smooth, bounded, non-repeating noise in [-1, 1].

    `t` is usually frame * rate; `seed` is a phase offset so different elements
    move independently.
    """
    t = _finite(t)
    seed = _finite(seed)
    v = 0.0
    for weight, freq, k in _COMPONENTS:
        v += weight * math.sin(t * freq + seed * k)
    # envelope stays within [0.6, 1.0] so amplitude breathes without flattening
    envelope = 0.8 + 0.2 * slow_drift(t, seed + 17.0)
    return clamp(v * envelope, -1.0, 1.0)
