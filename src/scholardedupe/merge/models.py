"""Data models for merging duplicate groups."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class MergeStrategy(StrEnum):
    """Policy for choosing scalar field values when merging a group.

    Attributes
    ----------
    KEEP_HIGHEST_QUALITY : str
        Prefer members with the highest (confidence, relevance_score).
    KEEP_MOST_RECENT : str
        Prefer members with the latest publication year.
    KEEP_MOST_CITATIONS : str
        Prefer members with the highest citation count.
    """

    KEEP_HIGHEST_QUALITY = "keep_highest_quality"
    KEEP_MOST_RECENT = "keep_most_recent"
    KEEP_MOST_CITATIONS = "keep_most_citations"


class ResolutionRule(StrEnum):
    """How a suggested conflict resolution was derived."""

    MAX = "max"
    UNION = "union"
    HIGHEST_CONFIDENCE = "highest_confidence"


@dataclass(frozen=True)
class ConflictValue:
    """One distinct value observed for a conflicting field.

    Attributes
    ----------
    value : Any
        The value as carried by the source record.
    source_index : int
        Input position of the record supplying the value.
    confidence : float
        Upstream confidence of that record.
    """

    value: Any
    source_index: int
    confidence: float


@dataclass(frozen=True)
class FieldConflict:
    """A field whose values disagree across a duplicate group.

    Attributes
    ----------
    field : str
        Record field name.
    values : tuple[ConflictValue, ...]
        Distinct values in first-seen order, each from its most confident
        source.
    suggested_resolution : Any
        Value a reviewer would most likely keep.
    resolution_rule : ResolutionRule
        Rule that produced ``suggested_resolution``.
    """

    field: str
    values: tuple[ConflictValue, ...]
    suggested_resolution: Any
    resolution_rule: ResolutionRule

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        resolution = self.suggested_resolution
        if isinstance(resolution, tuple):
            resolution = list(resolution)
        return {
            "field": self.field,
            "values": [
                {
                    "value": list(v.value) if isinstance(v.value, tuple) else v.value,
                    "source_index": v.source_index,
                    "confidence": v.confidence,
                }
                for v in self.values
            ],
            "suggested_resolution": resolution,
            "resolution_rule": self.resolution_rule.value,
        }
