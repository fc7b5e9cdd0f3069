"""
MPU-6050 gyroscope over I2C.

Only the gyro registers are used. The chip is configured for the
+/-250 deg/s range (131 LSB per deg/s) with the digital low-pass filter
enabled; readings are converted to rad/s before they leave this module.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Optional

from smbus2 import SMBus

from .base import RotationRate, SensorDeliveryError

logger = logging.getLogger(__name__)

WHO_AM_I = 0x75
PWR_MGMT_1 = 0x6B
SMPLRT_DIV = 0x19
CONFIG = 0x1A
GYRO_CONFIG = 0x1B

GYRO_XOUT_H = 0x43
GYRO_YOUT_H = 0x45
GYRO_ZOUT_H = 0x47

GYR_SF = 131.0  # LSB/(deg/s)
INTERNAL_RATE_HZ = 1000.0
DLPF_DEFAULT = 3


def _to_i16(hi: int, lo: int) -> int:
    v = (hi << 8) | lo
    if v & 0x8000:
        v = -((~v & 0xFFFF) + 1)
    return v


class Mpu6050Gyro:
    """Minimal MPU-6050 gyro driver using smbus2 (no DMP)."""

    def __init__(
        self,
        *,
        bus: int = 1,
        address: int = 0x68,
        dlpf: int = DLPF_DEFAULT,
        rate_hz: float = 100.0,
    ) -> None:
        self.bus_id = int(bus)
        self.address = int(address)
        self.dlpf = int(dlpf) & 0x07
        self.rate_hz = float(rate_hz)
        self._bus: Optional[SMBus] = None

    def _open(self) -> SMBus:
        if self._bus is None:
            bus = SMBus(self.bus_id)
            try:
                self._initialize(bus)
            except OSError:
                bus.close()
                raise
            self._bus = bus
        return self._bus

    def _initialize(self, bus: SMBus) -> None:
        # Wake up with the X gyro PLL as clock source.
        bus.write_byte_data(self.address, PWR_MGMT_1, 0x01)
        time.sleep(0.05)
        bus.write_byte_data(self.address, CONFIG, self.dlpf)
        bus.write_byte_data(self.address, GYRO_CONFIG, 0x00)
        div = int(round(INTERNAL_RATE_HZ / max(1.0, self.rate_hz)) - 1)
        bus.write_byte_data(self.address, SMPLRT_DIV, max(0, min(255, div)))

    def is_available(self) -> bool:
        try:
            bus = self._open()
            who = bus.read_byte_data(self.address, WHO_AM_I)
        except OSError as exc:
            logger.info(
                "MPU6050 not reachable on bus %d addr 0x%02X: %s",
                self.bus_id,
                self.address,
                exc,
            )
            self.close()
            return False
        logger.debug("MPU6050 WHO_AM_I=0x%02X", who)
        return True

    def read_rotation_rate(self) -> RotationRate:
        try:
            bus = self._open()
            raw = bus.read_i2c_block_data(self.address, GYRO_XOUT_H, 6)
        except OSError as exc:
            raise SensorDeliveryError(f"I2C read failed: {exc}") from exc
        gx = _to_i16(raw[0], raw[1])
        gy = _to_i16(raw[2], raw[3])
        gz = _to_i16(raw[4], raw[5])
        return (
            math.radians(gx / GYR_SF),
            math.radians(gy / GYR_SF),
            math.radians(gz / GYR_SF),
        )

    def close(self) -> None:
        bus, self._bus = self._bus, None
        if bus is not None:
            bus.close()
