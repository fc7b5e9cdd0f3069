"""Periodic delivery of gyroscope samples from a rotation-rate sensor."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..sensors.base import (
    RotationRateSensor,
    SensorDeliveryError,
    SensorError,
    SensorUnavailableError,
)
from .models import GyroSample
from .timer import PeriodicTimer

logger = logging.getLogger(__name__)

SampleHandler = Callable[[Optional[GyroSample], Optional[SensorError]], None]


class SampleSource:
    """
    Wrap a :class:`RotationRateSensor` and deliver one sample per tick.

    The handler receives ``(sample, None)`` on success or
    ``(None, error)`` when a read fails. Delivery happens on the event loop
    that called :meth:`start`, so handlers never overlap.
    """

    def __init__(self, sensor: RotationRateSensor) -> None:
        self.sensor = sensor
        self._timer: Optional[PeriodicTimer] = None
        self._handler: Optional[SampleHandler] = None

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.running

    def poll(self) -> GyroSample:
        """
        Take a single reading now.

        Raises :class:`SensorUnavailableError` if the sensor is absent and
        :class:`SensorDeliveryError` if the read fails.
        """
        if not self.sensor.is_available():
            raise SensorUnavailableError(f"{type(self.sensor).__name__} is not available")
        return self._read()

    def _read(self) -> GyroSample:
        # Any driver failure is one lost tick, never a dead sampler.
        try:
            x, y, z = self.sensor.read_rotation_rate()
        except SensorDeliveryError:
            raise
        except Exception as exc:
            raise SensorDeliveryError(f"sensor read failed: {exc!r}") from exc
        return GyroSample.now(x, y, z)

    def start(self, interval_s: float, handler: SampleHandler) -> bool:
        """
        Begin delivering samples every ``interval_s`` seconds.

        Returns ``False`` without scheduling anything when the sensor is
        unavailable; no error is raised in that case.
        """
        self.stop()
        if not self.sensor.is_available():
            logger.info(
                "Rotation-rate sensor %s unavailable; no samples will be delivered",
                type(self.sensor).__name__,
            )
            return False
        self._handler = handler
        self._timer = PeriodicTimer(interval_s, self._tick, name="gyrosteer-sampler")
        self._timer.start()
        logger.debug("Sampling every %.3f s", interval_s)
        return True

    def stop(self) -> None:
        timer, self._timer = self._timer, None
        self._handler = None
        if timer is not None:
            timer.stop()

    def _tick(self) -> None:
        handler = self._handler
        if handler is None:
            return
        try:
            sample = self._read()
        except SensorDeliveryError as exc:
            logger.warning("Error receiving gyro data: %s", exc)
            handler(None, exc)
            return
        handler(sample, None)
