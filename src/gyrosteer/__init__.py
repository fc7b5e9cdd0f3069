"""GyroSteer: gyroscope sampling, CSV logging and rotation danger alerts."""

from .config import GyroSteerConfig, Thresholds, load_config
from .core.collector import CollectionController
from .core.models import AlertState, DisplayState, GyroSample, SessionState

__all__ = [
    "AlertState",
    "CollectionController",
    "DisplayState",
    "GyroSample",
    "GyroSteerConfig",
    "SessionState",
    "Thresholds",
    "load_config",
]
