"""Rotation-rate sensor interface and errors."""

from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable

RotationRate = Tuple[float, float, float]


class SensorError(RuntimeError):
    """Base class for sensor failures."""


class SensorUnavailableError(SensorError):
    """The sensor hardware is not present or cannot be opened."""


class SensorDeliveryError(SensorError):
    """A single read failed; the next tick may succeed."""


@runtime_checkable
class RotationRateSensor(Protocol):
    """What :class:`~gyrosteer.core.sample_source.SampleSource` needs from a driver."""

    def is_available(self) -> bool:  # pragma: no cover - protocol
        ...

    def read_rotation_rate(self) -> RotationRate:  # pragma: no cover - protocol
        """Return ``(x, y, z)`` in rad/s or raise on a failed read."""
        ...

    def close(self) -> None:  # pragma: no cover - protocol
        ...
