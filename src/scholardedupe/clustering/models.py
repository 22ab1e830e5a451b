"""Data models for duplicate groups."""

from dataclasses import dataclass
from typing import Any

from scholardedupe.decision.models import DuplicateEdge, MatchStrategy
from scholardedupe.models.records import CandidateRecord


@dataclass(frozen=True)
class DuplicateGroup:
    """Records identified as the same publication.

    Attributes
    ----------
    primary : CandidateRecord
        Member with the lowest input position.
    duplicates : tuple[CandidateRecord, ...]
        Remaining members in input order; never contains the primary.
    confidence : float
        Confidence of the weakest link joining the group (0.0-1.0).
    merge_strategy : MatchStrategy
        Rule of that weakest link.
    member_indices : tuple[int, ...]
        Input positions of the primary followed by the duplicates.
    links : tuple[DuplicateEdge, ...]
        Edges that joined each duplicate, in join order.
    """

    primary: CandidateRecord
    duplicates: tuple[CandidateRecord, ...]
    confidence: float
    merge_strategy: MatchStrategy
    member_indices: tuple[int, ...] = ()
    links: tuple[DuplicateEdge, ...] = ()

    @property
    def members(self) -> tuple[CandidateRecord, ...]:
        """Primary followed by the duplicates."""
        return (self.primary, *self.duplicates)

    @property
    def size(self) -> int:
        """Number of records in the group."""
        return 1 + len(self.duplicates)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Group summary with member positions and titles.
        """
        return {
            "primary_index": self.member_indices[0] if self.member_indices else None,
            "duplicate_indices": list(self.member_indices[1:]),
            "confidence": self.confidence,
            "merge_strategy": self.merge_strategy.value,
            "primary_title": self.primary.title,
            "duplicate_titles": [d.title for d in self.duplicates],
            "links": [
                {
                    "index_a": link.index_a,
                    "index_b": link.index_b,
                    "strategy": link.strategy.value,
                    "confidence": link.confidence,
                }
                for link in self.links
            ],
        }
