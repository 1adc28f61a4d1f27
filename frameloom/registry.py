from __future__ import annotations

import importlib
import logging
from typing import Dict, Iterable, Iterator, Optional

from .animation.scene_spec import RenderCallable
from .config import settings
from .errors import MoodTableError

logger = logging.getLogger(__name__)

DEFAULT_ASSET_MODULES = (
    "frameloom.assets.placeholders",
)


class AssetRegistry:
    """
    Maps asset identifiers to render callables.

    Written during the load phase, read-only while frames render. Registering an
    id twice keeps the last binding.
    """

    def __init__(self):
        self._assets: Dict[str, RenderCallable] = {}

    def register(self, asset_id: str, render: RenderCallable) -> RenderCallable:
        if asset_id in self._assets and self._assets[asset_id] is not render:
            logger.warning("Asset %r re-registered; previous binding replaced", asset_id)
        self._assets[asset_id] = render
        return render

    def asset(self, asset_id: str):
        """Decorator form of register()."""
        def wrap(render: RenderCallable) -> RenderCallable:
            return self.register(asset_id, render)
        return wrap

    def resolve(self, asset_id: str) -> Optional[RenderCallable]:
        return self._assets.get(asset_id)

    def unregister(self, asset_id: str) -> None:
        self._assets.pop(asset_id, None)

    def clear(self) -> None:
        self._assets.clear()

    def ids(self) -> list[str]:
        return sorted(self._assets)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._assets

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())


# Process-wide default
registry = AssetRegistry()


def load_assets(
    target: Optional[AssetRegistry] = None,
    modules: Iterable[str] = DEFAULT_ASSET_MODULES,
    strict: Optional[bool] = None,
) -> AssetRegistry:
    """
    Load phase: import each asset module and let it register its assets.

    Each module exposes register_assets(registry). Afterwards the sky/mood
    tables are checked against what got registered; problems are logged, or
    raised as MoodTableError when strict (default: settings.strict_mood_tables).
    """
    from .animation.horizon import validate_mood_tables

    target = registry if target is None else target
    for name in modules:
        module = importlib.import_module(name)
        module.register_assets(target)
        logger.info("Loaded asset module %s", name)

    problems = validate_mood_tables(target)
    strict = settings.strict_mood_tables if strict is None else strict
    if problems and strict:
        raise MoodTableError(problems)
    for p in problems:
        logger.warning("Mood tables: %s", p)

    logger.info("Asset registry ready with %d assets", len(target))
    return target
