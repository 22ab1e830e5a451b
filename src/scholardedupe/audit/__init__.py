"""Audit logging subsystem for scholardedupe.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: structured event written per line
"""

from scholardedupe.audit.helpers import generate_run_id, get_package_version
from scholardedupe.audit.logger import AuditLogger
from scholardedupe.audit.models import LOG_LEVELS, LogEvent

__all__ = [
    "AuditLogger",
    "LOG_LEVELS",
    "LogEvent",
    "generate_run_id",
    "get_package_version",
]
