"""Merging of duplicate groups into single records."""

from scholardedupe.merge.conflicts import find_conflicts
from scholardedupe.merge.field_merge import merge_authors, merge_keywords
from scholardedupe.merge.models import (
    ConflictValue,
    FieldConflict,
    MergeStrategy,
    ResolutionRule,
)
from scholardedupe.merge.processor import collapse_groups, merge_duplicates, remove_duplicates
from scholardedupe.merge.ranking import rank_members

__all__ = [
    "ConflictValue",
    "FieldConflict",
    "MergeStrategy",
    "ResolutionRule",
    "collapse_groups",
    "find_conflicts",
    "merge_authors",
    "merge_duplicates",
    "merge_keywords",
    "rank_members",
    "remove_duplicates",
]
