"""Collection session controller: sensor -> CSV log -> threshold alert."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from ..config.runtime import GyroSteerConfig
from ..config.thresholds import Thresholds
from ..dataio import file_paths
from ..dataio.csv_writer import LogSession, LogWriteError, begin_session
from ..sensors import build_sensor
from ..sensors.base import RotationRateSensor, SensorError
from ..tools.debug import time_block
from .models import AlertState, DisplayState, GyroSample, SessionState
from .monitor import ThresholdMonitor
from .sample_source import SampleSource

logger = logging.getLogger(__name__)

UpdateListener = Callable[[DisplayState], None]


class CollectionController:
    """
    Own the ``IDLE -> COLLECTING -> STOPPED`` lifecycle of a recording.

    UI code only calls :meth:`start_collection` / :meth:`stop_collection`
    and renders :attr:`display`; it never holds the state itself.

    With ``monitor_interval_s=None`` every sample is logged and then
    evaluated in the same tick. With an interval the monitor runs on its
    own timer and reads whatever sample arrived last.
    """

    def __init__(
        self,
        sensor: RotationRateSensor,
        *,
        log_path: Path,
        thresholds: Thresholds | None = None,
        sample_interval_s: float = 0.5,
        monitor_interval_s: Optional[float] = None,
        export_path: Optional[Path] = None,
        fsync_each_write: bool = False,
        on_update: Optional[UpdateListener] = None,
    ) -> None:
        if sample_interval_s <= 0.0:
            raise ValueError(f"sample_interval_s must be positive, got {sample_interval_s}")
        if monitor_interval_s is not None and monitor_interval_s <= 0.0:
            raise ValueError(f"monitor_interval_s must be positive or None, got {monitor_interval_s}")
        self.source = SampleSource(sensor)
        self.monitor = ThresholdMonitor(thresholds, monitor_interval_s)
        self.log_path = Path(log_path)
        self.sample_interval_s = float(sample_interval_s)
        self.export_path = export_path
        self.fsync_each_write = fsync_each_write
        self.on_update = on_update

        self._state = SessionState.IDLE
        self._session: Optional[LogSession] = None
        self._latest: Optional[GyroSample] = None
        self._sensor_available = True
        self._sensor_errors = 0
        self._last_exported_path: Optional[Path] = None

    @classmethod
    def from_config(
        cls,
        config: GyroSteerConfig,
        sensor: RotationRateSensor | None = None,
        **kwargs,
    ) -> "CollectionController":
        cfg = config.sanitized()
        if sensor is None:
            sensor = build_sensor(cfg.sensor, cfg.sensor_options)
        return cls(
            sensor,
            log_path=cfg.resolved_log_path(),
            thresholds=cfg.thresholds,
            sample_interval_s=cfg.sample_interval_s,
            monitor_interval_s=cfg.monitor_interval_s,
            export_path=cfg.export_path,
            fsync_each_write=cfg.fsync_each_write,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_collecting(self) -> bool:
        return self._state is SessionState.COLLECTING

    @property
    def session(self) -> Optional[LogSession]:
        return self._session

    @property
    def latest_sample(self) -> Optional[GyroSample]:
        return self._latest

    @property
    def alert(self) -> AlertState:
        return self.monitor.state

    @property
    def last_exported_path(self) -> Optional[Path]:
        return self._last_exported_path

    @property
    def display(self) -> DisplayState:
        latest = self._latest
        session = self._session
        return DisplayState(
            gyro_x=latest.x if latest else 0.0,
            gyro_y=latest.y if latest else 0.0,
            gyro_z=latest.z if latest else 0.0,
            is_dangerous=self.monitor.is_dangerous,
            danger_event_count=self.monitor.danger_event_count,
            is_collecting=self.is_collecting,
            last_exported_path=self._last_exported_path,
            sensor_available=self._sensor_available,
            samples_logged=session.rows_written if session else 0,
            samples_dropped=session.rows_dropped if session else 0,
            sensor_errors=self._sensor_errors,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start_collection(self) -> LogSession:
        """
        Begin a fresh session: recreate the log file and start the timers.

        Must be called from inside a running event loop. Raises
        :class:`~gyrosteer.dataio.csv_writer.LogCreateError` if the log file
        cannot be created. If the timers fail to start, the new session is
        closed again and the previous state is restored before re-raising.
        """
        if self._state is SessionState.COLLECTING and self._session is not None:
            logger.warning("Collection already running; ignoring start request")
            return self._session

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError("start_collection() must be called from a running event loop") from None
        session = begin_session(self.log_path, fsync_each_write=self.fsync_each_write)

        previous_state, previous_session = self._state, self._session
        self._session = session
        self._latest = None
        self._sensor_errors = 0
        self._state = SessionState.COLLECTING
        self.monitor.clear_alert()

        try:
            self._sensor_available = self.source.start(self.sample_interval_s, self.handle_sample)
            if self.monitor.interval_s is not None:
                self.monitor.start(lambda: self._latest, on_tick=lambda _state: self._notify())
        except Exception:
            logger.exception("Could not start collection timers; rolling back")
            self.source.stop()
            self.monitor.stop()
            session.close()
            self._state, self._session = previous_state, previous_session
            raise
        logger.info(
            "Collecting every %.3f s into %s (monitor: %s)",
            self.sample_interval_s,
            self.log_path,
            "per sample" if self.monitor.interval_s is None else f"every {self.monitor.interval_s:.3f} s",
        )
        return session

    def stop_collection(self) -> None:
        """
        End the session. Axis values read as zero and the alert clears, but
        the danger counter keeps its value. No-op unless collecting.
        """
        if self._state is not SessionState.COLLECTING:
            return
        self.source.stop()
        self.monitor.stop()
        self._state = SessionState.STOPPED

        session = self._session
        if session is not None:
            session.close()
            logger.info(
                "Stopped collection: %d rows logged, %d dropped, %d danger events so far",
                session.rows_written,
                session.rows_dropped,
                self.monitor.danger_event_count,
            )
        self._latest = None
        self.monitor.clear_alert()

        if self.export_path is not None:
            self.export_log(self.export_path)

    def handle_sample(self, sample: GyroSample | None, error: SensorError | None) -> None:
        """Sample-source callback: log the reading and, in fused mode, check it."""
        if self._state is not SessionState.COLLECTING or self._session is None:
            logger.debug("Discarding sample delivered outside a collection session")
            return
        if error is not None:
            self._sensor_errors += 1
            return
        if sample is None:
            return

        self._latest = sample
        try:
            with time_block("log append"):
                self._session.append(sample)
        except LogWriteError as exc:
            logger.warning("File not available for writing: %s", exc)

        if self.monitor.interval_s is None:
            self.monitor.tick(sample)
        self._notify()

    def monitor_tick(self) -> AlertState:
        """Evaluate the most recent sample (what the monitor timer calls)."""
        state = self.monitor.tick(self._latest)
        self._notify()
        return state

    def export_log(self, destination: str | Path) -> Optional[Path]:
        """Copy the log file to ``destination``; ``None`` if that failed."""
        if not self.log_path.exists():
            logger.warning("Nothing to export: %s does not exist", self.log_path)
            return None
        try:
            target = file_paths.export_log(self.log_path, destination)
        except OSError as exc:
            logger.error("Export of %s to %s failed: %s", self.log_path, destination, exc)
            return None
        self._last_exported_path = target
        return target

    async def run(
        self,
        duration_s: Optional[float] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> DisplayState:
        """Collect until ``duration_s`` elapses or ``stop_event`` is set."""
        self.start_collection()
        try:
            event = stop_event or asyncio.Event()
            try:
                await asyncio.wait_for(event.wait(), timeout=duration_s)
            except asyncio.TimeoutError:
                pass
        finally:
            self.stop_collection()
        return self.display

    def close(self) -> None:
        """Stop collecting and release the sensor."""
        self.stop_collection()
        self.sensor.close()

    @property
    def sensor(self) -> RotationRateSensor:
        return self.source.sensor

    def _notify(self) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(self.display)
        except Exception:
            logger.exception("Display update listener failed")
