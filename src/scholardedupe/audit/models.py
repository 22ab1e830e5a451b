"""Data models for audit logging.

This module defines the structured event written by the scholardedupe
audit logger.
"""

from dataclasses import dataclass
from typing import Any

__all__ = ["LOG_LEVELS", "LogEvent"]

# Ordered from most to least verbose
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARN", "ERROR")


@dataclass
class LogEvent:
    """Structured log event.

    Attributes
    ----------
    ts : str
        ISO8601 timestamp with microseconds (UTC).
    run_id : str
        Unique run identifier.
    level : str
        Log level ("DEBUG", "INFO", "WARN", "ERROR").
    event : str
        Event type identifier.
    data : dict[str, Any]
        Event-specific data payload.
    stage : str | None
        Current stage identifier.
    index : int | None
        Input position if the event concerns a single record.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    index: int | None = None
