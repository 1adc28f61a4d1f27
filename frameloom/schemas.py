from pydantic import BaseModel, ConfigDict, Field
from typing import Iterator, Optional, List, Tuple


# Fixed z-order, back to front. Never data-dependent.
SLOT_ORDER: Tuple[str, ...] = (
    "sky",
    "terrain",
    "water",
    "structures",
    "vegetation",
    "characters",
    "props",
    "foreground",
    "atmosphere",
    "lighting",
)


class FullCanvasSlot(BaseModel):
    asset: str
    color_shift: Optional[str] = None


class SkySlot(FullCanvasSlot):
    pass


class TerrainSlot(FullCanvasSlot):
    pass


class Placement(BaseModel):
    """
    One positioned asset. Give explicit x/y (top-left of the asset box, canvas
    pixels) or a preset name; with neither the asset covers the canvas from
    the origin. A negative scale flips horizontally, same as mirror=True.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    asset: str
    x: Optional[float] = None
    y: Optional[float] = None
    preset: Optional[str] = None
    jitter: bool = False
    seed: int = 0
    scale: float = 1.0
    mirror: bool = False
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    color_shift: Optional[str] = None

    @property
    def full_canvas(self) -> bool:
        return self.x is None and self.y is None and self.preset is None


class LightingSlot(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    asset: str
    intensity: float = Field(default=1.0, ge=0.0, le=1.0)


class HorizonSlot(BaseModel):
    """Requests the horizon blend between sky and terrain."""

    model_config = ConfigDict(allow_inf_nan=False)

    mood: Optional[str] = None  # default: looked up from the sky asset
    horizon_y: Optional[float] = None  # reference 1080-line space
    intensity: float = Field(default=1.0, ge=0.0)


class ComposedScene(BaseModel):
    sky: SkySlot
    terrain: TerrainSlot
    water: Optional[Placement] = None
    structures: List[Placement] = []
    vegetation: List[Placement] = []
    characters: List[Placement] = []
    props: Optional[List[Placement]] = None
    foreground: Optional[List[Placement]] = None
    atmosphere: Optional[List[Placement]] = None
    lighting: LightingSlot
    horizon: Optional[HorizonSlot] = None

    def slot_entries(self, slot: str) -> list:
        """Entries of one slot as a list (empty when the slot is unset)."""
        value = getattr(self, slot)
        if value is None:
            return []
        return list(value) if isinstance(value, list) else [value]

    def iter_assets(self) -> Iterator[Tuple[str, str]]:
        """(slot, asset id) for every reference, in stacking order."""
        for slot in SLOT_ORDER:
            for entry in self.slot_entries(slot):
                yield slot, entry.asset
