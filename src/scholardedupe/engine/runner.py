"""Deduplication entry points.

``DuplicateDetectionEngine`` binds one validated options value to every
engine operation; ``run_deduplication`` runs detection and merging over a
batch and reports summary counters.
"""

import time
import traceback
from collections import Counter
from collections.abc import Sequence

from scholardedupe.audit.logger import AuditLogger
from scholardedupe.clustering.cluster_builder import detect_duplicates
from scholardedupe.clustering.models import DuplicateGroup
from scholardedupe.decision.classifier import classify_pair
from scholardedupe.decision.models import PairDecision
from scholardedupe.engine.config import DeduplicationResult, DuplicateDetectionOptions
from scholardedupe.merge.conflicts import find_conflicts
from scholardedupe.merge.processor import collapse_groups, merge_duplicates, remove_duplicates
from scholardedupe.models.records import CandidateRecord, MergedRecord
from scholardedupe.normalize.identifiers import normalize_doi, normalize_url
from scholardedupe.normalize.text import normalize_author_name
from scholardedupe.scoring.similarity import author_list_similarity, string_similarity

RUN_STAGE = "deduplication"


class DuplicateDetectionEngine:
    """Duplicate detection and merging over one set of options.

    Parameters
    ----------
    options : DuplicateDetectionOptions | None, optional
        Validated options; defaults are used when omitted.

    Examples
    --------
    >>> engine = DuplicateDetectionEngine()
    >>> engine.remove_duplicates([])
    []
    """

    normalize_doi = staticmethod(normalize_doi)
    normalize_url = staticmethod(normalize_url)
    normalize_author_name = staticmethod(normalize_author_name)
    string_similarity = staticmethod(string_similarity)
    author_list_similarity = staticmethod(author_list_similarity)
    find_conflicts = staticmethod(find_conflicts)

    def __init__(self, options: DuplicateDetectionOptions | None = None) -> None:
        self.options = options if options is not None else DuplicateDetectionOptions()

    def classify_pair(
        self,
        record_a: CandidateRecord,
        record_b: CandidateRecord,
    ) -> PairDecision | None:
        """Classify one record pair."""
        return classify_pair(record_a, record_b, self.options)

    def detect_duplicates(
        self,
        records: Sequence[CandidateRecord],
        logger: AuditLogger | None = None,
    ) -> list[DuplicateGroup]:
        """Group duplicate records."""
        return detect_duplicates(records, self.options, logger=logger)

    def merge_duplicates(self, group: DuplicateGroup) -> MergedRecord:
        """Merge one duplicate group."""
        return merge_duplicates(group, self.options)

    def remove_duplicates(
        self,
        records: Sequence[CandidateRecord],
        logger: AuditLogger | None = None,
    ) -> list[CandidateRecord]:
        """Replace duplicate groups by merged records."""
        return remove_duplicates(records, self.options, logger=logger)

    def run(
        self,
        records: Sequence[CandidateRecord],
        logger: AuditLogger | None = None,
    ) -> DeduplicationResult:
        """Deduplicate *records* and report counters."""
        return run_deduplication(records, self.options, logger=logger)


def run_deduplication(
    records: Sequence[CandidateRecord],
    options: DuplicateDetectionOptions | None = None,
    logger: AuditLogger | None = None,
) -> DeduplicationResult:
    """Detect and merge duplicates in *records*.

    Parameters
    ----------
    records : Sequence[CandidateRecord]
        Input batch; never mutated.
    options : DuplicateDetectionOptions | None, optional
        Options; defaults are used when omitted.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DeduplicationResult
        Deduplicated records and summary counters. Unexpected failures
        are logged and reported through ``success``/``error_message``
        with the input returned unchanged.
    """
    options = options if options is not None else DuplicateDetectionOptions()
    records = list(records)
    start = time.perf_counter()

    groups: list[DuplicateGroup] = []
    try:
        groups = detect_duplicates(records, options, logger=logger)
        current = collapse_groups(records, groups, options, logger=logger) if groups else records
        deduplicated = remove_duplicates(current, options, logger=logger)
    except Exception as e:
        error_msg = f"{type(e).__name__}: {e}"
        if logger:
            logger.error(
                exception_class=type(e).__name__,
                message=str(e),
                stage=RUN_STAGE,
                traceback=traceback.format_exc(),
            )
        return DeduplicationResult(
            success=False,
            records=records,
            groups=groups,
            total_records=len(records),
            total_groups=len(groups),
            duplicates_removed=0,
            dedup_rate=0.0,
            error_message=error_msg,
        )

    removed = len(records) - len(deduplicated)
    result = DeduplicationResult(
        success=True,
        records=deduplicated,
        groups=groups,
        total_records=len(records),
        total_groups=len(groups),
        duplicates_removed=removed,
        dedup_rate=removed / len(records) if records else 0.0,
        strategy_counts=dict(Counter(g.merge_strategy.value for g in groups)),
    )

    if logger:
        logger.event(
            "deduplication_summary",
            data={**result.summary(), "duration_seconds": time.perf_counter() - start},
            stage=RUN_STAGE,
        )

    return result
