"""Candidate pair generation via blocking strategies."""

from scholardedupe.candidates.blockers import (
    FUZZY_CUTOFF_SLACK,
    Blocker,
    BlockerStats,
    DOIExactBlocker,
    FuzzyTitleSweep,
    TitleExactBlocker,
    URLExactBlocker,
    default_blockers,
)
from scholardedupe.candidates.generator import generate_candidates
from scholardedupe.candidates.models import CandidatePair, CandidateSource

__all__ = [
    # Protocol
    "Blocker",
    "BlockerStats",
    # Exact blockers
    "DOIExactBlocker",
    "URLExactBlocker",
    "TitleExactBlocker",
    "default_blockers",
    # Similarity sweep
    "FuzzyTitleSweep",
    "FUZZY_CUTOFF_SLACK",
    # Models
    "CandidatePair",
    "CandidateSource",
    # Generator
    "generate_candidates",
]
