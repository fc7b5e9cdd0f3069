"""Runtime configuration for a collection session."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

import yaml

from .app_config import AppPaths
from .thresholds import Thresholds

MIN_INTERVAL_S = 0.01
MAX_INTERVAL_S = 60.0


def _clamp_interval(value: Any, fallback: float) -> float:
    try:
        interval = float(value)
    except (TypeError, ValueError):
        return fallback
    if interval != interval:  # NaN
        return fallback
    return max(MIN_INTERVAL_S, min(MAX_INTERVAL_S, interval))


def _optional_path(value: Any) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(str(value)).expanduser()


@dataclass(slots=True)
class GyroSteerConfig:
    """
    Tuning knobs for sampling, alerting and logging.

    ``monitor_interval_s`` left at ``None`` evaluates the threshold in the
    same tick that takes the sample; a value runs the monitor on its own
    timer instead.
    """

    sample_interval_s: float = 0.5
    monitor_interval_s: Optional[float] = None
    thresholds: Thresholds = field(default_factory=Thresholds)

    log_path: Optional[Path] = None
    export_path: Optional[Path] = None
    fsync_each_write: bool = False

    sensor: str = "simulated"
    sensor_options: Dict[str, Any] = field(default_factory=dict)

    def sanitized(self) -> GyroSteerConfig:
        """Return a copy with limits and types applied."""
        monitor = self.monitor_interval_s
        if monitor is not None:
            monitor = _clamp_interval(monitor, 0.5)
        thresholds = self.thresholds
        if not isinstance(thresholds, Thresholds):
            thresholds = Thresholds.from_mapping(thresholds)
        return GyroSteerConfig(
            sample_interval_s=_clamp_interval(self.sample_interval_s, 0.5),
            monitor_interval_s=monitor,
            thresholds=thresholds,
            log_path=_optional_path(self.log_path),
            export_path=_optional_path(self.export_path),
            fsync_each_write=bool(self.fsync_each_write),
            sensor=str(self.sensor or "simulated").strip().lower(),
            sensor_options=dict(self.sensor_options or {}),
        )

    def resolved_log_path(self) -> Path:
        """Return ``log_path`` or the default documents location."""
        if self.log_path is not None:
            return Path(self.log_path)
        return AppPaths().default_log_path


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`GyroSteerConfig`."""
    return {f.name for f in fields(GyroSteerConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten an optional top-level ``gyrosteer`` block."""
    if "gyrosteer" in data and isinstance(data["gyrosteer"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "gyrosteer":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> GyroSteerConfig:
    """Build :class:`GyroSteerConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return GyroSteerConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    payload["thresholds"] = Thresholds.from_mapping(normalized.get("thresholds"))
    options = payload.get("sensor_options")
    if options is not None and not isinstance(options, Mapping):
        raise ValueError(f"sensor_options must be a mapping, got {type(options).__name__}")
    return GyroSteerConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> GyroSteerConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`GyroSteerConfig`.
    """
    if path is None:
        return GyroSteerConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return GyroSteerConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["GyroSteerConfig", "config_from_mapping", "load_config"]
