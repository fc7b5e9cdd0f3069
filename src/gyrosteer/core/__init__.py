"""Core collection loop: sampling, alerting and session lifecycle.

This package sits between the sensor drivers and any UI by scheduling
sample delivery on the event loop, evaluating danger thresholds, and
coordinating the CSV log for each collection session.
"""

from .models import AlertState, DisplayState, GyroSample, SessionState
from .monitor import ThresholdMonitor
from .sample_source import SampleSource
from .timer import PeriodicTimer

__all__ = [
    "AlertState",
    "DisplayState",
    "GyroSample",
    "PeriodicTimer",
    "SampleSource",
    "SessionState",
    "ThresholdMonitor",
]
