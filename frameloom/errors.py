class FrameloomError(Exception):
    """Base class for errors raised by frameloom."""


class MoodTableError(FrameloomError):
    """The sky/mood lookup tables are inconsistent (strict load phase only)."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "mood tables inconsistent")


class AssetRenderError(FrameloomError):
    """A render callable raised while drawing one placement."""

    def __init__(self, slot: str, asset_id: str, cause: Exception):
        self.slot = slot
        self.asset_id = asset_id
        self.cause = cause
        super().__init__(f"asset {asset_id!r} in slot {slot!r} failed: {cause}")
