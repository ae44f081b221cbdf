"""
Extrusion settings: defaults for PrismMeshBuilder.

Settings can be stored as JSON (for example project_settings/extrusion.json).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Union

from polyprism import log
from polyprism.triangulation import TriangulationStrategy


def _flag(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"Setting '{key}' must be true or false, got {value!r}")
    return value


@dataclass
class ExtrusionSettings:
    """
    Parameters of polygon extrusion.

    - depth: extrusion distance along Z (negative extrudes along -Z)
    - strategy: cap triangulation, "ear_clipping" or "centroid_fan"
    - check_simple: reject self-intersecting polygons before triangulation
    - auto_orient: reverse clockwise polygons instead of failing
    - merge_duplicates: drop duplicate consecutive points instead of failing
    - duplicate_tolerance: max coordinate difference of coincident points
    - flip_winding: reverse every triangle (outward normals in a right-handed frame)
    """

    depth: float = 1.0
    strategy: str = TriangulationStrategy.EAR_CLIPPING.value
    check_simple: bool = True
    auto_orient: bool = False
    merge_duplicates: bool = False
    duplicate_tolerance: float = 1e-9
    flip_winding: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.strategy, TriangulationStrategy):
            self.strategy = self.strategy.value

    def triangulation_strategy(self) -> TriangulationStrategy:
        return TriangulationStrategy(self.strategy)

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> "ExtrusionSettings":
        """Deserialize from dictionary."""
        defaults = ExtrusionSettings()
        strategy = data.get("strategy", defaults.strategy)
        # validates the name
        TriangulationStrategy(strategy)
        return ExtrusionSettings(
            depth=float(data.get("depth", defaults.depth)),
            strategy=strategy,
            check_simple=_flag(data, "check_simple", defaults.check_simple),
            auto_orient=_flag(data, "auto_orient", defaults.auto_orient),
            merge_duplicates=_flag(data, "merge_duplicates", defaults.merge_duplicates),
            duplicate_tolerance=float(data.get("duplicate_tolerance", defaults.duplicate_tolerance)),
            flip_winding=_flag(data, "flip_winding", defaults.flip_winding),
        )

    def save(self, path: Union[str, Path]) -> bool:
        """Save settings to file."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            log.info(f"[ExtrusionSettings] Saved to {path}")
            return True
        except OSError as e:
            log.error(f"[ExtrusionSettings] Failed to save settings: {e}")
            return False

    @staticmethod
    def load(path: Union[str, Path]) -> "ExtrusionSettings":
        """Load settings from file, defaults if it is missing or unreadable."""
        path = Path(path)
        if not path.exists():
            return ExtrusionSettings()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            settings = ExtrusionSettings.from_dict(data)
            log.info(f"[ExtrusionSettings] Loaded from {path}")
            return settings
        except (OSError, ValueError, TypeError, AttributeError) as e:
            log.error(f"[ExtrusionSettings] Failed to load settings: {e}")
            return ExtrusionSettings()
