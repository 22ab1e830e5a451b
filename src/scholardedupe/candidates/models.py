"""Data models for candidate pair representation.

This module defines the schema for candidate pairs produced by the
blocking stage.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CandidateSource:
    """Provenance information for a candidate pair.

    Attributes
    ----------
    blocker : str
        Name of the blocker that generated this pair.
    block_key : str
        The exact value used for blocking (e.g., DOI string).
    match_key : str
        Field name used for matching (e.g., 'doi', 'title_norm').
    """

    blocker: str
    block_key: str
    match_key: str


@dataclass
class CandidatePair:
    """A candidate duplicate pair with provenance.

    Attributes
    ----------
    index_a : int
        Lower input position.
    index_b : int
        Higher input position.
    sources : list[CandidateSource]
        Blockers that generated this pair.

    Notes
    -----
    index_a < index_b always holds, so a pair has exactly one
    representation.
    """

    index_a: int
    index_b: int
    sources: list[CandidateSource] = field(default_factory=list)

    @property
    def pair_id(self) -> str:
        """Deterministic pair identifier (format: "a|b")."""
        return f"{self.index_a}|{self.index_b}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict
            Dictionary representation with sources as list of dicts.
        """
        return {
            "pair_id": self.pair_id,
            "index_a": self.index_a,
            "index_b": self.index_b,
            "sources": [
                {
                    "blocker": s.blocker,
                    "block_key": s.block_key,
                    "match_key": s.match_key,
                }
                for s in self.sources
            ],
        }
