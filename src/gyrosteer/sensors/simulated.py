"""Synthetic gyroscope for headless runs and demos."""

from __future__ import annotations

import numpy as np

from .base import RotationRate, SensorDeliveryError


class SimulatedGyro:
    """
    Gaussian rotation-rate noise with occasional "turn" bursts.

    A burst adds a large rate on one randomly chosen axis for a single
    reading, which is usually enough to cross the default thresholds.
    ``dropout_prob`` makes individual reads fail with
    :class:`SensorDeliveryError`.
    """

    def __init__(
        self,
        *,
        seed: int | None = None,
        noise_std: float = 0.3,
        burst_prob: float = 0.05,
        burst_scale: float = 5.0,
        dropout_prob: float = 0.0,
        available: bool = True,
    ) -> None:
        if noise_std < 0:
            raise ValueError(f"noise_std must be >= 0, got {noise_std}")
        for name, prob in (("burst_prob", burst_prob), ("dropout_prob", dropout_prob)):
            if not 0.0 <= prob <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {prob}")
        self._rng = np.random.default_rng(seed)
        self.noise_std = float(noise_std)
        self.burst_prob = float(burst_prob)
        self.burst_scale = float(burst_scale)
        self.dropout_prob = float(dropout_prob)
        self._available = bool(available)
        self.reads = 0

    def is_available(self) -> bool:
        return self._available

    def read_rotation_rate(self) -> RotationRate:
        self.reads += 1
        if self.dropout_prob and self._rng.random() < self.dropout_prob:
            raise SensorDeliveryError("simulated gyro dropped a reading")
        values = self._rng.normal(0.0, self.noise_std, size=3)
        if self.burst_prob and self._rng.random() < self.burst_prob:
            axis = int(self._rng.integers(0, 3))
            sign = 1.0 if self._rng.random() < 0.5 else -1.0
            values[axis] += sign * self.burst_scale
        return float(values[0]), float(values[1]), float(values[2])

    def close(self) -> None:
        return
