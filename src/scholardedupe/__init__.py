"""Duplicate detection and merging for academic search results.

This package provides:
- Data models (scholardedupe.models): candidate and merged records
- Normalization (scholardedupe.normalize): DOI, URL, name and title keys
- Scoring (scholardedupe.scoring): string and author-list similarity
- Decision (scholardedupe.decision): layered pair classification
- Candidates (scholardedupe.candidates): blocking and candidate pairs
- Clustering (scholardedupe.clustering): transitive duplicate groups
- Merge (scholardedupe.merge): group merging and conflict detection
- Engine (scholardedupe.engine): options, facade and batch runs
- Audit (scholardedupe.audit): structured JSONL event logging
- CLI (scholardedupe.cli): command-line interface
- Public API (scholardedupe.api): JSONL file helpers
"""

__version__ = "0.1.0"
__license__ = "MIT"

from scholardedupe.api import RecordParseError, dedupe_file, read_jsonl, write_jsonl
from scholardedupe.clustering import DuplicateGroup, detect_duplicates
from scholardedupe.decision import MatchStrategy, PairDecision, classify_pair
from scholardedupe.engine import (
    ConfigurationError,
    DeduplicationResult,
    DuplicateDetectionEngine,
    DuplicateDetectionOptions,
    run_deduplication,
)
from scholardedupe.merge import (
    FieldConflict,
    MergeStrategy,
    find_conflicts,
    merge_duplicates,
    remove_duplicates,
)
from scholardedupe.models import CandidateRecord, MergedRecord
from scholardedupe.normalize import normalize_author_name, normalize_doi, normalize_url
from scholardedupe.scoring import author_list_similarity, string_similarity

__all__ = [
    "__version__",
    "__license__",
    # Models
    "CandidateRecord",
    "MergedRecord",
    "DuplicateGroup",
    "PairDecision",
    "FieldConflict",
    "MatchStrategy",
    "MergeStrategy",
    # Options and engine
    "ConfigurationError",
    "DeduplicationResult",
    "DuplicateDetectionEngine",
    "DuplicateDetectionOptions",
    "run_deduplication",
    # Operations
    "normalize_doi",
    "normalize_url",
    "normalize_author_name",
    "string_similarity",
    "author_list_similarity",
    "classify_pair",
    "detect_duplicates",
    "merge_duplicates",
    "remove_duplicates",
    "find_conflicts",
    # File helpers
    "RecordParseError",
    "read_jsonl",
    "write_jsonl",
    "dedupe_file",
]
