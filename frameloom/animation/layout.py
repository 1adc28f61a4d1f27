"""
Named placement presets.

Scene authors pick a preset ("center_front") instead of raw coordinates. Three
depth rows (back, mid, front) times five columns, plus a few special spots.
Positions are fractions of the canvas so they hold at any resolution.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .noise import seeded_random
from .scene_spec import Canvas

logger = logging.getLogger(__name__)

FALLBACK_PRESET = "center_mid"


@dataclass(frozen=True)
class PositionPreset:
    fx: float
    fy: float
    scale: float
    description: str


@dataclass(frozen=True)
class ResolvedPosition:
    x: float
    y: float
    scale: float


_COLUMNS = {
    "far_left": 0.1,
    "left": 0.25,
    "center": 0.5,
    "right": 0.75,
    "far_right": 0.9,
}

# row -> (fy, scale, description)
_ROWS = {
    "back": (0.35, 0.6, "background, small and distant"),
    "mid": (0.5, 1.0, "middle ground, normal size"),
    "front": (0.65, 1.5, "foreground, large and close up"),
}


def _build_presets() -> Dict[str, PositionPreset]:
    presets = {}
    for row, (fy, scale, row_desc) in _ROWS.items():
        for col, fx in _COLUMNS.items():
            label = col.replace("_", " ").capitalize()
            presets[f"{col}_{row}"] = PositionPreset(fx, fy, scale, f"{label}, {row_desc}")
    presets["podium"] = PositionPreset(0.5, 0.55, 1.8, "Center podium, extra large, for a solo presenter")
    presets["duo_left"] = PositionPreset(0.35, 0.55, 1.3, "Left side of a two-person conversation")
    presets["duo_right"] = PositionPreset(0.65, 0.55, 1.3, "Right side of a two-person conversation")
    return presets


POSITION_PRESETS: Dict[str, PositionPreset] = _build_presets()


def resolve_position(
    name: str,
    canvas: Optional[Canvas] = None,
    jitter: bool = False,
    seed: int = 0,
) -> ResolvedPosition:
    """
    Preset name -> canvas coordinates and scale.

    With jitter, adds a deterministic ±30px x, ±15px y, ±5% scale offset
    (reference-size pixels) drawn from `seed`.
    """
    canvas = canvas or Canvas.from_settings()
    preset = POSITION_PRESETS.get(name)
    if preset is None:
        logger.warning("Unknown position preset %r, using %s", name, FALLBACK_PRESET)
        preset = POSITION_PRESETS[FALLBACK_PRESET]

    x = preset.fx * canvas.width
    y = preset.fy * canvas.height
    scale = preset.scale
    if jitter:
        rng = seeded_random(seed)
        x += canvas.x((rng() - 0.5) * 60)
        y += canvas.y((rng() - 0.5) * 30)
        scale *= 1 + (rng() - 0.5) * 0.1
    return ResolvedPosition(x=x, y=y, scale=scale)


def preset_manifest() -> List[Dict[str, str]]:
    """All preset names with descriptions, e.g. for scene-authoring prompts."""
    return [{"name": name, "description": p.description} for name, p in POSITION_PRESETS.items()]
