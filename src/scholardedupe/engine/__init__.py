"""Engine facade and run orchestration.

This package provides the options type, the engine object binding options
to every operation, and the batch deduplication entry point.
"""

from scholardedupe.engine.config import (
    ConfigurationError,
    DeduplicationResult,
    DuplicateDetectionOptions,
)
from scholardedupe.engine.runner import DuplicateDetectionEngine, run_deduplication

__all__ = [
    "ConfigurationError",
    "DeduplicationResult",
    "DuplicateDetectionEngine",
    "DuplicateDetectionOptions",
    "run_deduplication",
]
