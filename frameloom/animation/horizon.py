"""
Horizon / atmosphere blending between the sky and terrain layers.

Sky and terrain are authored independently; stacked as-is they read like two
cutouts pasted together. The blender draws a layer between them made of:

1. a haze band centred on the horizon line,
2. a light spill tinting the top of the terrain with sky-derived colour,
3. a few dust motes drifting inside the band.

Parameters come from a closed set of moods. A scene can name its mood or let
the blender pick one from the sky asset id.
"""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageChops, ImageDraw

from ..config import settings
from .noise import _finite, clamp01, long_cycle_noise
from .primitives import vertical_gradient
from .scatter import RGB, generate_dust
from .scene_spec import Canvas

logger = logging.getLogger(__name__)

DUST_SEED = 12345


class HorizonMood(str, enum.Enum):
    DAY_WARM = "day_warm"        # clear/cloudy day, warm golden haze
    DAY_COOL = "day_cool"        # hazy/overcast, cool blue-grey
    DAWN = "dawn"                # golden hour
    SUNSET_WARM = "sunset_warm"  # orange/pink bleed
    SUNSET_COLD = "sunset_cold"  # purple/blue bleed
    DUSK = "dusk"                # deep warm haze
    NIGHT = "night"              # dark blue, minimal haze
    STORM = "storm"              # heavy grey-green haze
    SAND = "sand"                # desert ochre haze
    INDOOR = "indoor"            # no horizon effect


@dataclass(frozen=True)
class MoodConfig:
    haze_color: RGB
    haze_tint: RGB
    spill_color: RGB
    haze_opacity: float
    spill_opacity: float
    haze_height: float   # px above and below the horizon (reference space)
    spill_height: float  # px below the horizon
    dust_amount: int
    dust_color: RGB
    dust_alpha: float


HORIZON_CONFIGS: Dict[HorizonMood, MoodConfig] = {
    HorizonMood.DAY_WARM: MoodConfig(
        haze_color=(200, 210, 230), haze_tint=(240, 235, 220), spill_color=(255, 248, 230),
        haze_opacity=0.4, spill_opacity=0.12, haze_height=120, spill_height=180,
        dust_amount=8, dust_color=(255, 250, 240), dust_alpha=0.08,
    ),
    HorizonMood.DAY_COOL: MoodConfig(
        haze_color=(180, 195, 215), haze_tint=(200, 210, 225), spill_color=(210, 220, 235),
        haze_opacity=0.45, spill_opacity=0.10, haze_height=140, spill_height=160,
        dust_amount=4, dust_color=(200, 210, 225), dust_alpha=0.06,
    ),
    HorizonMood.DAWN: MoodConfig(
        haze_color=(255, 220, 160), haze_tint=(255, 200, 140), spill_color=(255, 230, 180),
        haze_opacity=0.5, spill_opacity=0.18, haze_height=150, spill_height=220,
        dust_amount=12, dust_color=(255, 240, 200), dust_alpha=0.1,
    ),
    HorizonMood.SUNSET_WARM: MoodConfig(
        haze_color=(255, 180, 120), haze_tint=(255, 160, 100), spill_color=(255, 200, 140),
        haze_opacity=0.55, spill_opacity=0.2, haze_height=160, spill_height=250,
        dust_amount=15, dust_color=(255, 200, 150), dust_alpha=0.12,
    ),
    HorizonMood.SUNSET_COLD: MoodConfig(
        haze_color=(180, 140, 200), haze_tint=(160, 130, 190), spill_color=(200, 170, 220),
        haze_opacity=0.5, spill_opacity=0.15, haze_height=140, spill_height=200,
        dust_amount=10, dust_color=(200, 180, 220), dust_alpha=0.08,
    ),
    HorizonMood.DUSK: MoodConfig(
        haze_color=(200, 120, 100), haze_tint=(180, 100, 80), spill_color=(220, 150, 120),
        haze_opacity=0.5, spill_opacity=0.18, haze_height=130, spill_height=200,
        dust_amount=10, dust_color=(200, 140, 120), dust_alpha=0.1,
    ),
    HorizonMood.NIGHT: MoodConfig(
        haze_color=(40, 50, 80), haze_tint=(30, 40, 70), spill_color=(60, 70, 100),
        haze_opacity=0.25, spill_opacity=0.08, haze_height=80, spill_height=120,
        dust_amount=0, dust_color=(0, 0, 0), dust_alpha=0.0,
    ),
    HorizonMood.STORM: MoodConfig(
        haze_color=(100, 110, 100), haze_tint=(80, 90, 85), spill_color=(120, 130, 120),
        haze_opacity=0.6, spill_opacity=0.12, haze_height=180, spill_height=250,
        dust_amount=6, dust_color=(120, 130, 120), dust_alpha=0.08,
    ),
    HorizonMood.SAND: MoodConfig(
        haze_color=(220, 190, 140), haze_tint=(210, 180, 130), spill_color=(230, 210, 170),
        haze_opacity=0.55, spill_opacity=0.18, haze_height=170, spill_height=230,
        dust_amount=20, dust_color=(220, 200, 160), dust_alpha=0.15,
    ),
    HorizonMood.INDOOR: MoodConfig(
        haze_color=(0, 0, 0), haze_tint=(0, 0, 0), spill_color=(0, 0, 0),
        haze_opacity=0.0, spill_opacity=0.0, haze_height=0, spill_height=0,
        dust_amount=0, dust_color=(0, 0, 0), dust_alpha=0.0,
    ),
}

# Known sky asset ids -> mood, so a scene can leave the mood implicit
SKY_MOOD_MAP: Dict[str, HorizonMood] = {
    "sky_day_clear": HorizonMood.DAY_WARM,
    "sky_day_cloudy": HorizonMood.DAY_COOL,
    "sky_day_hazy": HorizonMood.DAY_COOL,
    "sky_day_tropical": HorizonMood.DAY_WARM,
    "sky_dawn_golden": HorizonMood.DAWN,
    "sky_sunset_warm": HorizonMood.SUNSET_WARM,
    "sky_sunset_cold": HorizonMood.SUNSET_COLD,
    "sky_dusk_red": HorizonMood.DUSK,
    "sky_night_stars": HorizonMood.NIGHT,
    "sky_night_moon": HorizonMood.NIGHT,
    "sky_night_aurora": HorizonMood.NIGHT,
    "sky_storm_dark": HorizonMood.STORM,
    "sky_storm_rain": HorizonMood.STORM,
    "sky_sandstorm": HorizonMood.SAND,
    "sky_indoor_ceiling": HorizonMood.INDOOR,
    "sky_test": HorizonMood.DAY_WARM,
    "sky_night_test": HorizonMood.NIGHT,
}


@dataclass(frozen=True)
class SkyTerrainCombo:
    sky_id: str
    terrain_id: str
    label: str
    mood: HorizonMood


# Hand-picked pairs that read as one environment
CURATED_COMBOS: Tuple[SkyTerrainCombo, ...] = (
    SkyTerrainCombo("sky_day_clear", "terrain_grass_plain", "Summer Meadow", HorizonMood.DAY_WARM),
    SkyTerrainCombo("sky_day_cloudy", "terrain_grass_hill", "English Countryside", HorizonMood.DAY_COOL),
    SkyTerrainCombo("sky_dawn_golden", "terrain_river_bank", "Golden River Dawn", HorizonMood.DAWN),
    SkyTerrainCombo("sky_sunset_warm", "terrain_sea_shore", "Beach Sunset", HorizonMood.SUNSET_WARM),
    SkyTerrainCombo("sky_sunset_cold", "terrain_rocky_mountain", "Mountain Twilight", HorizonMood.SUNSET_COLD),
    SkyTerrainCombo("sky_dusk_red", "terrain_camp_ground", "Camp at Dusk", HorizonMood.DUSK),
    SkyTerrainCombo("sky_night_stars", "terrain_sand_dunes", "Desert Night", HorizonMood.NIGHT),
    SkyTerrainCombo("sky_night_moon", "terrain_snow_field", "Moonlit Snow", HorizonMood.NIGHT),
    SkyTerrainCombo("sky_storm_dark", "terrain_cliff_edge", "Storm Cliff", HorizonMood.STORM),
    SkyTerrainCombo("sky_storm_rain", "terrain_cobblestone", "Rain on Cobbles", HorizonMood.STORM),
    SkyTerrainCombo("sky_sandstorm", "terrain_sand_flat", "Sahara Sandstorm", HorizonMood.SAND),
    SkyTerrainCombo("sky_day_tropical", "terrain_jungle_floor", "Tropical Jungle", HorizonMood.DAY_WARM),
    SkyTerrainCombo("sky_day_hazy", "terrain_dirt_plain", "Dusty Plains", HorizonMood.DAY_COOL),
    SkyTerrainCombo("sky_night_aurora", "terrain_snow_field", "Aurora Snow", HorizonMood.NIGHT),
    SkyTerrainCombo("sky_indoor_ceiling", "terrain_indoor_floor", "Indoor Scene", HorizonMood.INDOOR),
    SkyTerrainCombo("sky_test", "terrain_test", "Placeholder Day", HorizonMood.DAY_WARM),
)


# -----------------------------
# Lookups
# -----------------------------
def mood_for_sky(sky_id: Optional[str]) -> Optional[HorizonMood]:
    if not sky_id:
        return None
    return SKY_MOOD_MAP.get(sky_id)


def resolve_mood(mood=None, sky_id: Optional[str] = None) -> Optional[HorizonMood]:
    """Explicit mood first, else the sky's default. Unknown keys give None."""
    if mood is not None:
        try:
            return HorizonMood(mood)
        except ValueError:
            logger.warning("Unknown horizon mood %r, treating as indoor", mood)
            return None
    found = mood_for_sky(sky_id)
    if found is None and sky_id:
        logger.debug("No default mood for sky %r", sky_id)
    return found


def mood_config(mood) -> Optional[MoodConfig]:
    resolved = resolve_mood(mood)
    return HORIZON_CONFIGS.get(resolved) if resolved is not None else None


def blend_extent(cfg: MoodConfig, horizon_y: float) -> Tuple[float, float]:
    """Top and bottom (reference space) of everything the blender may touch."""
    return horizon_y - cfg.haze_height, horizon_y + max(cfg.haze_height, cfg.spill_height)


def validate_mood_tables(registry=None) -> List[str]:
    """
    Cross-check the hand-authored tables.

    Every curated combo must use a sky present in SKY_MOOD_MAP with the same
    mood, and every mood must have a config. With a registry, every registered
    sky_* asset must have a default mood.
    """
    problems = []
    for mood in HorizonMood:
        if mood not in HORIZON_CONFIGS:
            problems.append(f"mood {mood.value!r} has no config")
    for combo in CURATED_COMBOS:
        mapped = SKY_MOOD_MAP.get(combo.sky_id)
        if mapped is None:
            problems.append(f"combo {combo.label!r} uses sky {combo.sky_id!r} missing from SKY_MOOD_MAP")
        elif mapped is not combo.mood:
            problems.append(
                f"combo {combo.label!r} pairs {combo.sky_id!r} with {combo.mood.value!r}, "
                f"SKY_MOOD_MAP says {mapped.value!r}"
            )
    if registry is not None:
        for asset_id in registry.ids():
            if asset_id.startswith("sky_") and asset_id not in SKY_MOOD_MAP:
                problems.append(f"registered sky {asset_id!r} has no default mood")
    return problems


# -----------------------------
# Blender
# -----------------------------
class HorizonBlender:
    def __init__(self, canvas: Optional[Canvas] = None, default_horizon_y: Optional[float] = None):
        self.canvas = canvas or Canvas.from_settings()
        self.default_horizon_y = settings.horizon_y if default_horizon_y is None else default_horizon_y

    def render(
        self,
        frame: int,
        mood=None,
        sky_id: Optional[str] = None,
        horizon_y: Optional[float] = None,
        intensity: float = 1.0,
    ) -> Optional[Image.Image]:
        """
        Blend layer for one frame, or None when the mood has nothing to draw
        (indoor, zero haze opacity, unknown mood, zero intensity).
        """
        intensity = _finite(intensity)
        resolved = resolve_mood(mood, sky_id)
        cfg = HORIZON_CONFIGS.get(resolved) if resolved is not None else None
        if cfg is None or resolved is HorizonMood.INDOOR or cfg.haze_opacity <= 0 or intensity <= 0:
            return None

        c = self.canvas
        if horizon_y is None or not math.isfinite(float(horizon_y)):
            horizon_y = self.default_horizon_y
        horizon_y = float(horizon_y)

        # Gentle life: the haze pattern slides sideways and breathes
        drift = long_cycle_noise(frame, 42) * 8
        pulse = 1 + long_cycle_noise(frame, 77) * 0.05

        top, bottom = blend_extent(cfg, horizon_y)
        top_px = int(math.floor(c.y(top)))
        bottom_px = int(math.ceil(c.y(bottom)))
        haze_bottom_px = int(math.ceil(c.y(horizon_y + cfg.haze_height)))
        horizon_px = int(round(c.y(horizon_y)))
        spill_px = int(math.ceil(c.y(horizon_y + cfg.spill_height)))

        layer = c.blank()
        layer = Image.alpha_composite(layer, self._haze(cfg, frame, drift, pulse, intensity, top_px, haze_bottom_px))
        layer = Image.alpha_composite(layer, self._spill(cfg, pulse, intensity, horizon_px, spill_px))
        if cfg.dust_amount > 0:
            layer = Image.alpha_composite(layer, self._dust(cfg, frame, pulse, intensity, horizon_y))

        # Never touch anything outside the band
        w, h = c.size
        if top_px > 0:
            layer.paste((0, 0, 0, 0), (0, 0, w, min(h, top_px)))
        if bottom_px < h:
            layer.paste((0, 0, 0, 0), (0, max(0, bottom_px), w, h))
        return layer

    def _haze(self, cfg: MoodConfig, frame: int, drift: float, pulse: float, intensity: float, top_px: int, bottom_px: int) -> Image.Image:
        a = cfg.haze_opacity * intensity * pulse
        stops = [
            (0.0, cfg.haze_tint, 0.0),
            (0.3, cfg.haze_color, a * 0.85),
            (0.5, cfg.haze_color, a),
            (0.7, cfg.haze_tint, a * 0.5),
            (1.0, cfg.haze_tint, 0.0),
        ]
        haze = vertical_gradient(self.canvas.size, stops, top_px, bottom_px)

        # Low-contrast density variation along x, shifted by the drift
        w, h = self.canvas.size
        row = Image.new("L", (w, 1))
        row.putdata([
            int(255 * (0.85 + 0.15 * (0.5 + 0.5 * long_cycle_noise((x / self.canvas.sx + drift) * 0.35, 313))))
            for x in range(w)
        ])
        density = row.resize((w, h), Image.NEAREST)
        haze.putalpha(ImageChops.multiply(haze.getchannel("A"), density))
        return haze

    def _spill(self, cfg: MoodConfig, pulse: float, intensity: float, horizon_px: int, spill_px: int) -> Image.Image:
        a = cfg.spill_opacity * intensity * pulse
        return vertical_gradient(
            self.canvas.size,
            [(0.0, cfg.spill_color, a), (1.0, cfg.spill_color, 0.0)],
            horizon_px,
            spill_px,
        )

    def _dust(self, cfg: MoodConfig, frame: int, pulse: float, intensity: float, horizon_y: float) -> Image.Image:
        c = self.canvas
        motes = c.blank()
        d = ImageDraw.Draw(motes)
        for i, mote in enumerate(generate_dust(cfg.dust_amount, DUST_SEED, horizon_y, cfg.haze_height)):
            dx = long_cycle_noise(frame, i * 13 + 100) * 30
            dy = long_cycle_noise(frame, i * 17 + 200) * 10
            cx, cy = c.x(mote.x + dx), c.y(mote.y + dy)
            r = max(0.5, mote.size * c.sy)
            alpha = int(255 * clamp01(cfg.dust_alpha * mote.opacity * intensity * pulse))
            d.ellipse([cx - r, cy - r, cx + r, cy + r], fill=tuple(cfg.dust_color) + (alpha,))
        return motes
