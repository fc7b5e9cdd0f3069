"""Configuration objects and helpers for GyroSteer.

This package loads the YAML file that describes a collection run:
- sampling and monitor intervals
- danger :mod:`thresholds` (presets plus per-axis overrides)
- log/export locations (see :mod:`app_config` for the defaults)
The resulting typed dataclasses (see :mod:`runtime`) configure the sensor,
the CSV logger and the threshold monitor consistently.
"""

from .runtime import GyroSteerConfig, config_from_mapping, load_config
from .thresholds import THRESHOLD_PRESETS, Thresholds

__all__ = [
    "GyroSteerConfig",
    "THRESHOLD_PRESETS",
    "Thresholds",
    "config_from_mapping",
    "load_config",
]
