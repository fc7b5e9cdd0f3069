"""Threshold monitor: transient danger flag plus a running event counter."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Tuple

from ..config.thresholds import Thresholds
from .models import AlertState, GyroSample
from .timer import PeriodicTimer

logger = logging.getLogger(__name__)

LatestSample = Callable[[], Optional[GyroSample]]
TickListener = Callable[[AlertState], None]


def _checked_interval(interval_s: Optional[float]) -> Optional[float]:
    if interval_s is not None and interval_s <= 0.0:
        raise ValueError(f"monitor interval_s must be positive or None, got {interval_s}")
    return interval_s


class ThresholdMonitor:
    """
    Evaluate samples against :class:`Thresholds`.

    ``is_dangerous`` reflects only the latest tick. ``danger_event_count``
    grows by one per dangerous tick and is never reset for the lifetime of
    the monitor, across collection sessions.
    """

    def __init__(self, thresholds: Thresholds | None = None, interval_s: Optional[float] = None) -> None:
        self.thresholds = thresholds or Thresholds()
        self.interval_s = _checked_interval(interval_s)
        self._state = AlertState()
        self._timer: Optional[PeriodicTimer] = None
        self._timer_args: Optional[Tuple[LatestSample, Optional[TickListener]]] = None

    def configure(self, interval_s: Optional[float], thresholds: Thresholds) -> None:
        """
        Replace interval and thresholds.

        A running timer is restarted with the new period, or stopped when
        ``interval_s`` is ``None``.
        """
        self.interval_s = _checked_interval(interval_s)
        self.thresholds = thresholds
        if self.running and self._timer_args is not None:
            latest, on_tick = self._timer_args
            if self.interval_s is None:
                self.stop()
            else:
                self.start(latest, on_tick)

    @property
    def state(self) -> AlertState:
        return replace(self._state)

    @property
    def is_dangerous(self) -> bool:
        return self._state.is_dangerous

    @property
    def danger_event_count(self) -> int:
        return self._state.danger_event_count

    def tick(self, sample: GyroSample | None) -> AlertState:
        """Re-evaluate the alert for ``sample`` (``None`` reads as all zeros)."""
        self._state.is_dangerous = False
        if sample is not None and self.thresholds.exceeded(sample.x, sample.y, sample.z):
            self._state.is_dangerous = True
            self._state.danger_event_count += 1
            logger.info(
                "Danger: rotation (%.2f, %.2f, %.2f) rad/s, event #%d",
                sample.x,
                sample.y,
                sample.z,
                self._state.danger_event_count,
            )
        return self.state

    def clear_alert(self) -> None:
        self._state.is_dangerous = False

    # ------------------------------------------------------------------
    # Independent timer mode
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.running

    def start(self, latest: LatestSample, on_tick: Optional[TickListener] = None) -> None:
        """Tick every ``interval_s`` against whatever ``latest()`` returns."""
        if self.interval_s is None:
            raise ValueError("monitor interval_s is not configured")

        def _tick() -> None:
            state = self.tick(latest())
            if on_tick is not None:
                on_tick(state)

        self.stop()
        self._timer = PeriodicTimer(self.interval_s, _tick, name="gyrosteer-monitor")
        self._timer.start()
        self._timer_args = (latest, on_tick)

    def stop(self) -> None:
        timer, self._timer = self._timer, None
        self._timer_args = None
        if timer is not None:
            timer.stop()
