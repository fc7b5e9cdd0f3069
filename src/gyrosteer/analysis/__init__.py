"""Offline analysis of recorded gyroscope logs."""

from .danger import LogSummary, danger_mask, summarize, summarize_log

__all__ = ["LogSummary", "danger_mask", "summarize", "summarize_log"]
