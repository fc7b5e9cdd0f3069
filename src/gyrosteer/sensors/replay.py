"""Replay recorded rotation rates as if they came from a live sensor."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import numpy as np

from ..dataio.log_loader import load_log
from .base import RotationRate, SensorDeliveryError


class ReplayGyro:
    """
    Feed back a fixed sequence of ``(x, y, z)`` readings, one per read.

    Once the sequence is exhausted every read raises
    :class:`SensorDeliveryError` unless ``loop`` is set.
    """

    def __init__(self, readings: Iterable[Iterable[float]], *, loop: bool = False) -> None:
        values = np.asarray([tuple(r) for r in readings], dtype=np.float64)
        if values.size and (values.ndim != 2 or values.shape[1] != 3):
            raise ValueError(f"readings must be (x, y, z) triples, got shape {values.shape}")
        self._values = values.reshape(-1, 3)
        self.loop = loop
        self._index = 0

    @classmethod
    def from_log(cls, path: Path, *, loop: bool = False) -> "ReplayGyro":
        return cls(load_log(path).values, loop=loop)

    @property
    def remaining(self) -> int:
        return max(0, len(self._values) - self._index)

    def is_available(self) -> bool:
        return len(self._values) > 0

    def read_rotation_rate(self) -> RotationRate:
        if self._index >= len(self._values):
            if not self.loop or len(self._values) == 0:
                raise SensorDeliveryError("replay exhausted")
            self._index = 0
        row: List[float] = self._values[self._index].tolist()
        self._index += 1
        return row[0], row[1], row[2]

    def close(self) -> None:
        return
