"""Data input/output helpers (CSV logs and file paths).

Utility modules here keep disk-level concerns isolated from the rest of the
application:
- :mod:`csv_writer` owns the append-only session log.
- :mod:`log_loader` parses recorded logs for offline review and replay.
- :mod:`file_paths` centralises the default log location and exports.
"""
