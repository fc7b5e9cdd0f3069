"""Rotation-rate sensor drivers.

Every driver implements :class:`~gyrosteer.sensors.base.RotationRateSensor`
and returns rates in rad/s. :func:`build_sensor` maps the ``sensor`` name
from the config file onto a driver instance.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Mapping

from .base import (
    RotationRate,
    RotationRateSensor,
    SensorDeliveryError,
    SensorError,
    SensorUnavailableError,
)
from .mpu6050 import Mpu6050Gyro
from .replay import ReplayGyro
from .simulated import SimulatedGyro


def _build_replay(options: Mapping[str, Any]) -> ReplayGyro:
    loop = bool(options.get("loop", False))
    if options.get("path"):
        return ReplayGyro.from_log(Path(str(options["path"])).expanduser(), loop=loop)
    return ReplayGyro(options.get("readings") or [], loop=loop)


def _build_mpu6050(options: Mapping[str, Any]) -> Mpu6050Gyro:
    address = options.get("address", 0x68)
    if isinstance(address, str):
        address = int(address, 16) if address.lower().startswith("0x") else int(address)
    return Mpu6050Gyro(
        bus=int(options.get("bus", 1)),
        address=int(address),
        dlpf=int(options.get("dlpf", 3)),
        rate_hz=float(options.get("rate_hz", 100.0)),
    )


SENSOR_BUILDERS: Dict[str, Callable[[Mapping[str, Any]], RotationRateSensor]] = {
    "simulated": lambda options: SimulatedGyro(**dict(options)),
    "replay": _build_replay,
    "mpu6050": _build_mpu6050,
}


def build_sensor(name: str, options: Mapping[str, Any] | None = None) -> RotationRateSensor:
    """Instantiate the driver registered under ``name``."""
    key = str(name or "").strip().lower()
    builder = SENSOR_BUILDERS.get(key)
    if builder is None:
        known = ", ".join(sorted(SENSOR_BUILDERS))
        raise ValueError(f"Unknown sensor {name!r}; expected one of: {known}")
    return builder(options or {})


__all__ = [
    "Mpu6050Gyro",
    "ReplayGyro",
    "RotationRate",
    "RotationRateSensor",
    "SENSOR_BUILDERS",
    "SensorDeliveryError",
    "SensorError",
    "SensorUnavailableError",
    "SimulatedGyro",
    "build_sensor",
]
