"""Helpers for constructing log and export file paths."""

import logging
import re
import shutil
from datetime import datetime
from pathlib import Path

from ..config.app_config import AppPaths

logger = logging.getLogger(__name__)

# Allow only alphanumerics, underscore, dot, and dash.
_STEM_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def _sanitize_stem(name: str) -> str:
    cleaned = _STEM_RE.sub("_", name).strip("_")
    return cleaned or "gyro_log"


def default_log_path(paths: AppPaths | None = None) -> Path:
    """Return the app-private log location (``rotrakData.csv``)."""
    return (paths or AppPaths()).default_log_path


def timestamped_export_name(source: Path, when: datetime | None = None) -> str:
    """
    Build an export file name such as ``rotrakData_20241019_153045.csv``.
    """
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    suffix = source.suffix or ".csv"
    return f"{_sanitize_stem(source.stem)}_{stamp}{suffix}"


def is_directory_target(destination: str | Path) -> bool:
    """
    True when an export destination names a folder rather than a file.

    That is an existing directory, a string ending in a separator, or a
    path without a file suffix (``exports/`` loses its slash once it
    becomes a :class:`Path`).
    """
    if isinstance(destination, str) and destination.endswith(("/", "\\")):
        return True
    path = Path(destination).expanduser()
    return path.is_dir() or not path.suffix


def export_log(source: Path, destination: str | Path, when: datetime | None = None) -> Path:
    """
    Copy ``source`` to ``destination`` and return the written path.

    A directory target (see :func:`is_directory_target`) receives a
    timestamped copy and is created if needed; anything else is treated as
    the target file name. Raises :class:`OSError` on failure.
    """
    source = Path(source)
    as_directory = is_directory_target(destination)
    destination = Path(destination).expanduser()
    if as_directory:
        destination.mkdir(parents=True, exist_ok=True)
        target = destination / timestamped_export_name(source, when)
    else:
        destination.parent.mkdir(parents=True, exist_ok=True)
        target = destination
    shutil.copy2(source, target)
    logger.info("Exported %s to %s", source, target)
    return target
