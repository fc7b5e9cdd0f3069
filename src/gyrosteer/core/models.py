"""Shared dataclasses for GyroSteer sessions, samples and alerts."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class GyroSample:
    x: float  # rotation rate about x (rad/s)
    y: float
    z: float
    captured_at: datetime

    @classmethod
    def now(cls, x: float, y: float, z: float) -> "GyroSample":
        return cls(float(x), float(y), float(z), datetime.now(timezone.utc))


@dataclass
class AlertState:
    is_dangerous: bool = False
    danger_event_count: int = 0


class SessionState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    STOPPED = "stopped"


def _two_decimals(value: float) -> str:
    return f"{value:.2f}"


@dataclass(frozen=True)
class DisplayState:
    """Read-only snapshot handed to UI collaborators."""

    gyro_x: float = 0.0
    gyro_y: float = 0.0
    gyro_z: float = 0.0
    is_dangerous: bool = False
    danger_event_count: int = 0
    is_collecting: bool = False
    last_exported_path: Optional[Path] = None
    sensor_available: bool = True
    samples_logged: int = 0
    samples_dropped: int = 0
    sensor_errors: int = 0

    def display_lines(self) -> List[str]:
        """Render the on-screen status text (axis values at two decimals)."""
        lines = [
            "Gyroscope Data",
            f"Rotation Rate X: {_two_decimals(self.gyro_x)}",
            f"Rotation Rate Y: {_two_decimals(self.gyro_y)}",
            f"Rotation Rate Z: {_two_decimals(self.gyro_z)}",
        ]
        if self.is_collecting:
            lines.append("Writing to file...")
        if self.last_exported_path is not None:
            lines.append(f"File sent! ({self.last_exported_path})")
        if self.is_dangerous:
            lines.append("DANGER")
        lines.append(f"Danger Counter: {self.danger_event_count}")
        return lines
