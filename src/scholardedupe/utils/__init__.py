"""Common utility functions for scholardedupe.

This module consolidates the hashing and timestamp helpers used by the
audit log and the JSONL writers.
"""

from scholardedupe.utils.hashing import calculate_file_sha256, format_sha256
from scholardedupe.utils.timestamps import get_iso_timestamp

__all__ = [
    "get_iso_timestamp",
    "calculate_file_sha256",
    "format_sha256",
]
