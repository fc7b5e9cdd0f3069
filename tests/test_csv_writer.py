from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from gyrosteer.core.models import GyroSample
from gyrosteer.dataio import csv_writer
from gyrosteer.dataio.csv_writer import (
    HEADER_LINE,
    LogCreateError,
    LogWriteError,
    begin_session,
    format_row,
)

T0 = datetime(2024, 10, 19, 18, 3, 12, 123000, tzinfo=timezone.utc)


def _sample(x: float, y: float = 0.0, z: float = 0.0) -> GyroSample:
    return GyroSample(x, y, z, T0)


class _FlakyHandle:
    """Wraps a real file handle and fails the n-th write."""

    def __init__(self, fh, fail_on: int) -> None:
        self._fh = fh
        self._fail_on = fail_on
        self._writes = 0

    def write(self, text: str) -> int:
        self._writes += 1
        if self._writes == self._fail_on:
            raise OSError("disk full")
        return self._fh.write(text)

    def __getattr__(self, name):
        return getattr(self._fh, name)


def test_begin_session_writes_only_header(tmp_path: Path) -> None:
    path = tmp_path / "rotrakData.csv"
    with begin_session(path):
        pass
    assert path.read_text(encoding="utf-8") == "Timestamp, gyroX, gyroY, gyroZ\n"
    assert HEADER_LINE == "Timestamp, gyroX, gyroY, gyroZ\n"


def test_begin_session_truncates_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("old junk\nmore junk\n", encoding="utf-8")
    session = begin_session(path)
    session.close()
    assert path.read_text(encoding="utf-8") == HEADER_LINE


def test_begin_session_creates_parent_directories(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "log.csv"
    begin_session(path).close()
    assert path.exists()


def test_begin_session_failure_raises_create_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(LogCreateError):
        begin_session(blocker / "log.csv")


def test_appends_are_ordered_and_counted(tmp_path: Path) -> None:
    path = tmp_path / "log.csv"
    with begin_session(path) as session:
        for i in range(5):
            csv_writer.append(session, _sample(float(i)))
        assert session.rows_written == 5

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1 + 5
    assert [float(line.split(", ")[1]) for line in lines[1:]] == [0.0, 1.0, 2.0, 3.0, 4.0]


def test_rows_are_flushed_while_session_is_open(tmp_path: Path) -> None:
    path = tmp_path / "log.csv"
    session = begin_session(path)
    session.append(_sample(1.5))
    assert len(path.read_text(encoding="utf-8").splitlines()) == 2
    session.close()


def test_format_row_keeps_full_precision() -> None:
    row = format_row(GyroSample(0.123456789012345, -1e-9, 2.0, T0))
    assert row == "2024-10-19 18:03:12.123+00:00, 0.123456789012345, -1e-09, 2.0\n"


def test_write_error_drops_only_that_row(tmp_path: Path) -> None:
    path = tmp_path / "log.csv"
    session = begin_session(path)
    session.append(_sample(1.0))
    session._fh = _FlakyHandle(session._fh, fail_on=1)

    with pytest.raises(LogWriteError):
        session.append(_sample(2.0))
    session.append(_sample(3.0))
    session.close()

    assert session.rows_written == 2
    assert session.rows_dropped == 1
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == HEADER_LINE.strip()
    assert [float(line.split(", ")[1]) for line in lines[1:]] == [1.0, 3.0]


def test_append_after_close_raises(tmp_path: Path) -> None:
    session = begin_session(tmp_path / "log.csv")
    session.close()
    session.close()  # idempotent
    assert session.closed
    with pytest.raises(LogWriteError):
        session.append(_sample(1.0))
    assert session.rows_dropped == 1


def test_log_errors_are_os_errors() -> None:
    assert issubclass(LogCreateError, OSError)
    assert issubclass(LogWriteError, OSError)
