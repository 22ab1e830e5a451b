"""Transitive grouping of duplicate records.

This module transforms pairwise duplicate decisions into duplicate groups
using Union-Find (DSU).
"""

from scholardedupe.clustering.cluster_builder import build_groups, detect_duplicates
from scholardedupe.clustering.models import DuplicateGroup
from scholardedupe.clustering.union_find import UnionFind

__all__ = [
    "DuplicateGroup",
    "UnionFind",
    "build_groups",
    "detect_duplicates",
]
