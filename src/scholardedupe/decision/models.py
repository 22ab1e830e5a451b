"""Data models for pairwise duplicate decisions."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class MatchStrategy(StrEnum):
    """Rule that established a duplicate relationship.

    Attributes
    ----------
    DOI : str
        Canonical DOIs are equal.
    URL : str
        Canonical URLs are equal.
    TITLE_AUTHOR : str
        Titles are equal and the author lists agree fully.
    FUZZY_MATCH : str
        Title and author similarity both reach their thresholds.
    """

    DOI = "doi"
    URL = "url"
    TITLE_AUTHOR = "title_author"
    FUZZY_MATCH = "fuzzy_match"


# Confidence assigned by the exact rules
DOI_MATCH_CONFIDENCE = 1.0
URL_MATCH_CONFIDENCE = 0.95
TITLE_AUTHOR_MATCH_CONFIDENCE = 1.0

# Weights of the fuzzy confidence blend
FUZZY_TITLE_WEIGHT = 0.6
FUZZY_AUTHOR_WEIGHT = 0.4


@dataclass(frozen=True, slots=True)
class PairDecision:
    """Outcome of classifying one record pair as duplicates.

    Attributes
    ----------
    is_duplicate : bool
        Always True for decisions returned by the classifier.
    confidence : float
        Confidence of the match (0.0-1.0).
    strategy : MatchStrategy
        Rule that fired.
    title_score : float | None
        Title similarity when it was computed.
    author_score : float | None
        Author-list similarity when it was computed.
    """

    is_duplicate: bool
    confidence: float
    strategy: MatchStrategy
    title_score: float | None = None
    author_score: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "is_duplicate": self.is_duplicate,
            "confidence": self.confidence,
            "strategy": self.strategy.value,
            "title_score": self.title_score,
            "author_score": self.author_score,
        }


@dataclass(frozen=True, slots=True)
class DuplicateEdge:
    """Accepted duplicate relation between two batch positions.

    Attributes
    ----------
    index_a : int
        Lower input index.
    index_b : int
        Higher input index.
    decision : PairDecision
        Classifier outcome for the pair.
    """

    index_a: int
    index_b: int
    decision: PairDecision

    @property
    def confidence(self) -> float:
        """Confidence of the underlying decision."""
        return self.decision.confidence

    @property
    def strategy(self) -> MatchStrategy:
        """Strategy of the underlying decision."""
        return self.decision.strategy
