"""Append-only CSV log for gyroscope sessions.

The file layout is a comma-space separated header followed by one row per
sample::

    Timestamp, gyroX, gyroY, gyroZ
    2024-10-19 18:03:12.123+00:00, 0.0123, -0.5, 1.25

A session keeps one file handle open for its whole lifetime and flushes
after every row, so a crash loses at most the row being written.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from ..core.models import GyroSample

logger = logging.getLogger(__name__)

HEADER = ("Timestamp", "gyroX", "gyroY", "gyroZ")
SEPARATOR = ", "
HEADER_LINE = SEPARATOR.join(HEADER) + "\n"


class LogFileError(OSError):
    """Base class for log file failures."""


class LogCreateError(LogFileError):
    """The log file could not be created; the session is unusable."""


class LogWriteError(LogFileError):
    """A single row could not be written; that sample is dropped."""


def format_timestamp(ts: datetime) -> str:
    return ts.isoformat(sep=" ", timespec="milliseconds")


def format_row(sample: GyroSample) -> str:
    """Return one CSV row; floats keep their full ``repr`` precision."""
    fields = (
        format_timestamp(sample.captured_at),
        repr(float(sample.x)),
        repr(float(sample.y)),
        repr(float(sample.z)),
    )
    return SEPARATOR.join(fields) + "\n"


class LogSession:
    """One start-to-stop log file. Use :func:`begin_session` to create it."""

    def __init__(self, path: Path, fh: TextIO, *, fsync_each_write: bool = False) -> None:
        self.path = path
        self.header_written = True
        self.rows_written = 0
        self.rows_dropped = 0
        self.fsync_each_write = fsync_each_write
        self._fh: Optional[TextIO] = fh

    @property
    def closed(self) -> bool:
        return self._fh is None

    def append(self, sample: GyroSample) -> None:
        """Write one row; raises :class:`LogWriteError` if it cannot."""
        if self._fh is None:
            self.rows_dropped += 1
            raise LogWriteError(f"log session for {self.path} is closed")
        row = format_row(sample)
        try:
            self._fh.write(row)
            self._fh.flush()
            if self.fsync_each_write:
                os.fsync(self._fh.fileno())
        except OSError as exc:
            self.rows_dropped += 1
            raise LogWriteError(f"could not append to {self.path}: {exc}") from exc
        self.rows_written += 1

    def close(self) -> None:
        """Flush, fsync and release the handle. Safe to call twice."""
        fh, self._fh = self._fh, None
        if fh is None:
            return
        try:
            fh.flush()
            os.fsync(fh.fileno())
        except OSError as exc:
            logger.warning("Final flush of %s failed: %s", self.path, exc)
        finally:
            fh.close()

    def __enter__(self) -> "LogSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"LogSession({str(self.path)!r}, rows={self.rows_written}, {state})"


def begin_session(path: Path, *, fsync_each_write: bool = False) -> LogSession:
    """
    Truncate/recreate ``path`` and write the header line.

    Directories are created as needed. Raises :class:`LogCreateError`.
    """
    path = Path(path)
    fh: Optional[TextIO] = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = path.open("w", newline="", encoding="utf-8")
        fh.write(HEADER_LINE)
        fh.flush()
    except OSError as exc:
        if fh is not None:
            fh.close()
        raise LogCreateError(f"could not create log file {path}: {exc}") from exc
    logger.info("Started log session at %s", path)
    return LogSession(path, fh, fsync_each_write=fsync_each_write)


def append(session: LogSession, sample: GyroSample) -> None:
    """Module-level alias for :meth:`LogSession.append`."""
    session.append(sample)
