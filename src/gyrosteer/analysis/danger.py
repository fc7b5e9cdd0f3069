"""Vectorised danger checks and summaries over recorded logs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from ..config.thresholds import Thresholds
from ..dataio.log_loader import GyroLog, load_log


def danger_mask(values: np.ndarray, thresholds: Thresholds) -> np.ndarray:
    """
    Boolean mask of rows that satisfy the danger predicate.

    ``values`` is an ``(N, 3)`` array of x, y, z rates. Matches
    :meth:`Thresholds.exceeded` row by row.
    """
    arr = np.abs(np.asarray(values, dtype=np.float64).reshape(-1, 3))
    mask = (arr[:, 0] > thresholds.x) | (arr[:, 1] > thresholds.y) | (arr[:, 2] > thresholds.z)
    if thresholds.xy is not None:
        mask |= (arr[:, 0] + arr[:, 1]) > thresholds.xy
    return mask


@dataclass
class LogSummary:
    rows: int
    danger_rows: int
    peak_abs: Tuple[float, float, float]
    mean_interval_s: Optional[float]

    def lines(self) -> list[str]:
        px, py, pz = self.peak_abs
        interval = "n/a" if self.mean_interval_s is None else f"{self.mean_interval_s:.3f} s"
        return [
            f"rows: {self.rows}",
            f"danger rows: {self.danger_rows}",
            f"peak |rate| x/y/z: {px:.3f} / {py:.3f} / {pz:.3f} rad/s",
            f"mean sample interval: {interval}",
        ]


def _mean_interval(log: GyroLog) -> Optional[float]:
    stamps = [t.timestamp() for t in log.timestamps if t is not None]
    if len(stamps) < 2:
        return None
    diffs = np.diff(np.asarray(stamps, dtype=np.float64))
    return float(diffs.mean())


def summarize(log: GyroLog, thresholds: Thresholds) -> LogSummary:
    """
    Summarise a loaded log.

    When the monitor ran in the same tick as sampling, ``danger_rows``
    equals the live danger counter for that session.
    """
    if len(log) == 0:
        return LogSummary(rows=0, danger_rows=0, peak_abs=(0.0, 0.0, 0.0), mean_interval_s=None)
    peaks = np.abs(log.values).max(axis=0)
    return LogSummary(
        rows=len(log),
        danger_rows=int(danger_mask(log.values, thresholds).sum()),
        peak_abs=(float(peaks[0]), float(peaks[1]), float(peaks[2])),
        mean_interval_s=_mean_interval(log),
    )


def summarize_log(path: Path, thresholds: Thresholds) -> LogSummary:
    return summarize(load_log(path), thresholds)
