"""Shared data types for scholardedupe.

This package contains the record dataclasses consumed across the engine.

Domain-specific types live closer to their consumers:
- Group types → scholardedupe.clustering.models
- Decision types → scholardedupe.decision.models
- Conflict types → scholardedupe.merge.models
"""

from scholardedupe.models.records import (
    CandidateRecord,
    MergedRecord,
    record_from_dict,
)

__all__ = [
    "CandidateRecord",
    "MergedRecord",
    "record_from_dict",
]
