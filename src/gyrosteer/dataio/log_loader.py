"""Utilities for loading recorded gyroscope logs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .csv_writer import HEADER

logger = logging.getLogger(__name__)

Row = Tuple[Optional[datetime], float, float, float]


@dataclass
class GyroLog:
    timestamps: List[Optional[datetime]]
    values: np.ndarray  # shape (N, 3): x, y, z in rad/s

    def __len__(self) -> int:
        return int(self.values.shape[0])


def _looks_like_header(line: str) -> bool:
    first = line.split(",", 1)[0].strip()
    return first.lower() == HEADER[0].lower()


def _parse_timestamp(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_row(line: str) -> Row | None:
    """
    Parse ``"<timestamp>, <x>, <y>, <z>"`` into a tuple.

    Unparseable timestamps become ``None``; rows with a bad or missing
    numeric field return ``None`` so callers can skip them.
    """
    parts = [p.strip() for p in line.strip().split(",")]
    if len(parts) < 4:
        return None
    try:
        x, y, z = (float(p) for p in parts[1:4])
    except ValueError:
        return None
    return _parse_timestamp(parts[0]), x, y, z


def iter_rows(lines: Iterable[str]) -> Iterator[Row]:
    """Yield parsed data rows, skipping the header, blanks and bad rows."""
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        if lineno == 1 and _looks_like_header(line):
            continue
        row = parse_row(line)
        if row is None:
            logger.warning("Skipping malformed log row %d: %r", lineno, line.rstrip("\n"))
            continue
        yield row


def load_log(path: Path) -> GyroLog:
    """
    Load a CSV log written by :mod:`gyrosteer.dataio.csv_writer`.

    The header row is optional.
    """
    with Path(path).open("r", encoding="utf-8") as f:
        rows = list(iter_rows(f))

    if not rows:
        return GyroLog(timestamps=[], values=np.empty((0, 3), dtype=np.float64))

    timestamps = [r[0] for r in rows]
    values = np.asarray([r[1:] for r in rows], dtype=np.float64)
    return GyroLog(timestamps=timestamps, values=values)


def count_data_rows(path: Path) -> int:
    """Number of data rows currently in ``path``."""
    with Path(path).open("r", encoding="utf-8") as f:
        return sum(1 for _ in iter_rows(f))
