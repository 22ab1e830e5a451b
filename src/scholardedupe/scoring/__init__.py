"""Similarity scoring for pairwise duplicate classification."""

from scholardedupe.scoring.author_index import SCORE_SLACK, AuthorSimilarityIndex
from scholardedupe.scoring.similarity import (
    author_keys_similarity,
    author_list_similarity,
    author_name_similarity,
    jaro_winkler,
    name_tokens_similarity,
    string_similarity,
)

__all__ = [
    "jaro_winkler",
    "string_similarity",
    "author_name_similarity",
    "name_tokens_similarity",
    "author_keys_similarity",
    "author_list_similarity",
    # Batch screening
    "AuthorSimilarityIndex",
    "SCORE_SLACK",
]
