"""Pairwise duplicate classification.

This module implements the decision layer that turns a record pair into a
duplicate decision with a confidence and the rule that produced it.
"""

from scholardedupe.decision.classifier import classify_pair, classify_prepared
from scholardedupe.decision.models import DuplicateEdge, MatchStrategy, PairDecision

__all__ = [
    "DuplicateEdge",
    "MatchStrategy",
    "PairDecision",
    "classify_pair",
    "classify_prepared",
]
