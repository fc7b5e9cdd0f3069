"""Danger thresholds for rotation-rate alerts."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Thresholds:
    """
    Per-axis rotation-rate limits in rad/s.

    A reading is dangerous when any axis magnitude is strictly above its
    limit, or, when ``xy`` is set, when ``|x| + |y|`` is strictly above it.
    """

    x: float = 4.0
    y: float = 4.0
    z: float = 2.0
    xy: Optional[float] = 6.0

    def exceeded(self, x: float, y: float, z: float) -> bool:
        ax, ay, az = abs(x), abs(y), abs(z)
        if ax > self.x or ay > self.y or az > self.z:
            return True
        return self.xy is not None and (ax + ay) > self.xy

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any] | None,
        *,
        default_preset: str = "combined",
    ) -> "Thresholds":
        """
        Build thresholds from a config block.

        Supported shape::

            thresholds:
              preset: axis_only
              z: 3.0        # overrides the preset value
              xy: null      # disables the combined test

        Invalid or non-positive values keep the preset value.
        """
        payload: Mapping[str, Any] = mapping if isinstance(mapping, Mapping) else {}

        preset_key = str(payload.get("preset") or default_preset).strip().lower().replace("-", "_")
        base = THRESHOLD_PRESETS.get(preset_key, THRESHOLD_PRESETS[default_preset])

        values: Dict[str, Optional[float]] = {
            "x": base.x,
            "y": base.y,
            "z": base.z,
            "xy": base.xy,
        }
        for key in ("x", "y", "z"):
            if key in payload:
                values[key] = _positive_or(payload[key], values[key])
        if "xy" in payload:
            raw_xy = payload["xy"]
            values["xy"] = None if raw_xy is None else _positive_or(raw_xy, base.xy)

        return cls(**values)

    def to_mapping(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z, "xy": self.xy}


def _positive_or(value: Any, fallback: Optional[float]) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number) or number <= 0.0:
        return fallback
    return number


THRESHOLD_PRESETS: Dict[str, Thresholds] = {
    "combined": Thresholds(x=4.0, y=4.0, z=2.0, xy=6.0),
    "axis_only": Thresholds(x=3.5, y=3.5, z=2.5, xy=None),
}
