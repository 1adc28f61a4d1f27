"""
Layer compositor.

Stacks a ComposedScene for one frame in the fixed order

    sky -> [horizon blend] -> terrain -> water -> structures -> vegetation
        -> characters -> props -> foreground -> atmosphere -> lighting

Each entry names an asset that is looked up in the registry at draw time. A
missing asset costs that one entry, never the frame.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional

from PIL import Image, ImageOps

from ..config import settings
from ..errors import AssetRenderError
from ..registry import AssetRegistry, registry as default_registry
from ..schemas import SLOT_ORDER, ComposedScene, FullCanvasSlot, LightingSlot, Placement
from .horizon import HorizonBlender, mood_for_sky
from .layout import ResolvedPosition, resolve_position
from .primitives import composite_at, set_opacity
from .scene_spec import AssetStyle, Canvas

logger = logging.getLogger(__name__)

HORIZON_LAYER = "horizon"
FULL_CANVAS_SLOTS = ("sky", "terrain", "lighting")

PresetResolver = Callable[..., ResolvedPosition]


@dataclass(frozen=True)
class LayerRecord:
    slot: str
    asset_id: str
    index: int = 0


@dataclass
class ComposedFrame:
    frame: int
    image: Image.Image
    layers: List[LayerRecord] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    fps: int = 30

    @property
    def seconds(self) -> float:
        """Timestamp of this frame in the finished video."""
        return self.frame / self.fps

    @property
    def slots(self) -> List[str]:
        """Distinct layers drawn, in stacking order."""
        out: List[str] = []
        for rec in self.layers:
            if not out or out[-1] != rec.slot:
                out.append(rec.slot)
        return out


class LayerCompositor:
    def __init__(
        self,
        registry: Optional[AssetRegistry] = None,
        canvas: Optional[Canvas] = None,
        preset_resolver: PresetResolver = resolve_position,
        blender: Optional[HorizonBlender] = None,
        strict: bool = False,
        fps: Optional[int] = None,
    ):
        self.registry = default_registry if registry is None else registry
        self.canvas = canvas or Canvas.from_settings()
        self.preset_resolver = preset_resolver
        self.blender = blender or HorizonBlender(self.canvas)
        self.strict = strict
        self.fps = max(1, int(settings.fps if fps is None else fps))

    # -----------------------------
    # Public
    # -----------------------------
    def missing_assets(self, scene: ComposedScene) -> List[str]:
        """Referenced ids the registry cannot resolve, first occurrence order."""
        missing: List[str] = []
        for _, asset_id in scene.iter_assets():
            if asset_id not in self.registry and asset_id not in missing:
                missing.append(asset_id)
        return missing

    def render_frame(self, frame: int, scene: ComposedScene) -> ComposedFrame:
        frame = int(frame)
        out = Image.new("RGBA", self.canvas.size, (0, 0, 0, 255))
        result = ComposedFrame(frame=frame, image=out, fps=self.fps)

        for slot in SLOT_ORDER:
            if slot == "terrain" and scene.horizon is not None:
                self._blend_horizon(out, frame, scene, result)
            for index, entry in enumerate(scene.slot_entries(slot)):
                if self._draw_entry(out, frame, slot, index, entry, result):
                    result.layers.append(LayerRecord(slot, entry.asset, index))

        logger.debug("Frame %d composed: %d layers, %d missing", frame, len(result.layers), len(result.missing))
        return result

    def render_frames(self, scene: ComposedScene, frames: Iterable[int]) -> Iterator[ComposedFrame]:
        """Frames are independent; any order (or repeats) gives the same images."""
        for frame in frames:
            yield self.render_frame(frame, scene)

    # -----------------------------
    # Drawing
    # -----------------------------
    def _resolve(self, slot: str, asset_id: str, result: ComposedFrame):
        render = self.registry.resolve(asset_id)
        if render is None:
            logger.warning("Asset not found: %r (slot %s, frame %d)", asset_id, slot, result.frame)
            result.missing.append(asset_id)
        return render

    def _draw_entry(self, out: Image.Image, frame: int, slot: str, index: int, entry, result: ComposedFrame) -> bool:
        render = self._resolve(slot, entry.asset, result)
        if render is None:
            return False

        if isinstance(entry, LightingSlot):
            style = AssetStyle(canvas=self.canvas, opacity=entry.intensity)
        elif isinstance(entry, FullCanvasSlot):
            style = AssetStyle(canvas=self.canvas, color_shift=entry.color_shift)
        else:
            style = self._placement_style(entry)

        try:
            img = render(frame, style).convert("RGBA")
        except Exception as e:
            if self.strict:
                raise AssetRenderError(slot, entry.asset, e) from e
            logger.exception("Asset %r failed in slot %s at frame %d", entry.asset, slot, frame)
            result.missing.append(entry.asset)
            return False

        if slot in FULL_CANVAS_SLOTS:
            if img.size != self.canvas.size:
                img = img.resize(self.canvas.size, Image.BILINEAR)
            composite_at(out, set_opacity(img, style.opacity), 0, 0)
        else:
            self._place(out, img, style)
        return True

    def _placement_style(self, p: Placement) -> AssetStyle:
        if p.full_canvas:
            x, y, scale = 0.0, 0.0, p.scale
        elif p.x is None and p.y is None:
            pos = self.preset_resolver(p.preset, self.canvas, p.jitter, p.seed)
            x, y, scale = pos.x, pos.y, p.scale * pos.scale
        else:
            x, y, scale = p.x or 0.0, p.y or 0.0, p.scale
        return AssetStyle(
            canvas=self.canvas,
            x=x,
            y=y,
            scale=scale,
            opacity=p.opacity,
            mirror=p.mirror,
            color_shift=p.color_shift,
        )

    def _place(self, out: Image.Image, img: Image.Image, style: AssetStyle) -> None:
        """
        Scale around the asset's top-centre anchor. Mirroring negates only the
        horizontal factor, so mirror=True at scale s equals scale -s.
        """
        sx = -style.scale if style.mirror else style.scale
        sy = abs(style.scale)
        w, h = img.size
        fw, fh = w * abs(sx), h * sy
        if not all(math.isfinite(v) for v in (fw, fh, style.x, style.y)):
            logger.warning("Skipping placement with non-finite transform (x=%r, y=%r, scale=%r)", style.x, style.y, style.scale)
            return
        tw, th = int(round(fw)), int(round(fh))
        if tw <= 0 or th <= 0 or style.opacity <= 0:
            return
        if (tw, th) != (w, h):
            img = img.resize((tw, th), Image.BILINEAR)
        if sx < 0:
            img = ImageOps.mirror(img)
        left = style.x + (w - tw) / 2
        composite_at(out, set_opacity(img, style.opacity), int(round(left)), int(round(style.y)))

    def _blend_horizon(self, out: Image.Image, frame: int, scene: ComposedScene, result: ComposedFrame) -> None:
        h = scene.horizon
        layer = self.blender.render(
            frame,
            mood=h.mood,
            sky_id=scene.sky.asset,
            horizon_y=h.horizon_y,
            intensity=h.intensity,
        )
        if layer is None:
            return
        out.alpha_composite(layer)
        default = mood_for_sky(scene.sky.asset)
        result.layers.append(LayerRecord(HORIZON_LAYER, h.mood or (default.value if default else "")))
