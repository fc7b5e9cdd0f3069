"""Default application paths."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_LOG_FILENAME = "rotrakData.csv"


@dataclass
class AppPaths:
    """
    Commonly used paths for the collector.

    ``GYROSTEER_DATA_ROOT`` overrides the default documents folder
    (``~/Documents/GyroSteer``) so tests and alternate installs can keep
    their logs elsewhere.
    """

    documents: Path = field(init=False)
    exports: Path = field(init=False)

    def __post_init__(self) -> None:
        env_root = os.environ.get("GYROSTEER_DATA_ROOT")
        if env_root:
            self.documents = Path(env_root).expanduser()
        else:
            self.documents = Path.home() / "Documents" / "GyroSteer"
        self.exports = self.documents / "exports"

    @property
    def default_log_path(self) -> Path:
        return self.documents / DEFAULT_LOG_FILENAME

    def ensure(self) -> None:
        """Create directories if they do not yet exist."""
        for path in (self.documents, self.exports):
            path.mkdir(parents=True, exist_ok=True)
