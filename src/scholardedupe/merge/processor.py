"""Merge workflow: duplicate groups to a deduplicated record list."""

import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from scholardedupe.audit.logger import AuditLogger
from scholardedupe.clustering.cluster_builder import detect_duplicates
from scholardedupe.clustering.models import DuplicateGroup
from scholardedupe.merge.conflicts import find_conflicts
from scholardedupe.merge.field_merge import (
    RANKED_FIELDS,
    mean,
    merge_authors,
    merge_keywords,
    pick_identifier,
    pick_ranked_value,
)
from scholardedupe.merge.ranking import rank_members
from scholardedupe.models.records import CandidateRecord, MergedRecord
from scholardedupe.normalize.identifiers import normalize_doi, normalize_url

if TYPE_CHECKING:
    from scholardedupe.engine.config import DuplicateDetectionOptions

STAGE_NAME = "merge"


def merge_duplicates(
    group: DuplicateGroup,
    options: "DuplicateDetectionOptions",
) -> MergedRecord:
    """Collapse a duplicate group into one record.

    Parameters
    ----------
    group : DuplicateGroup
        Group to merge; its records are not modified.
    options : DuplicateDetectionOptions
        Supplies the merge strategy.

    Returns
    -------
    MergedRecord
        Merged record.

    Notes
    -----
    Field rules:

    - title comes from the primary;
    - authors and keywords are unions without duplicates;
    - DOI and URL are the first values that normalize validly;
    - citations, year, journal, abstract and publication date come from
      the best-ranked member that has them under the merge strategy;
    - confidence and relevance score are member means.
    """
    members = group.members
    ranked = rank_members(members, options.merge_strategy)
    ranked_values = {name: pick_ranked_value(ranked, name) for name in RANKED_FIELDS}
    conflicts = find_conflicts(group)

    return MergedRecord(
        title=group.primary.title,
        authors=merge_authors(r.authors for r in members),
        doi=pick_identifier((r.doi for r in members), normalize_doi),
        url=pick_identifier((r.url for r in members), normalize_url),
        keywords=merge_keywords(r.keywords for r in members),
        confidence=mean([r.confidence for r in members]),
        relevance_score=mean([r.relevance_score for r in members]),
        merged_from=sum(getattr(r, "merged_from", 1) for r in members),
        merge_confidence=group.confidence,
        conflicting_fields=tuple(c.field for c in conflicts),
        **ranked_values,
    )


def remove_duplicates(
    records: Sequence[CandidateRecord],
    options: "DuplicateDetectionOptions",
    *,
    logger: AuditLogger | None = None,
) -> list[CandidateRecord]:
    """Replace every duplicate group by its merged record.

    Parameters
    ----------
    records : Sequence[CandidateRecord]
        Input batch; never mutated.
    options : DuplicateDetectionOptions
        Detection and merge options.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    list[CandidateRecord]
        Ungrouped records in input order, with each merged record at its
        primary's position. Equal to the input when nothing is merged.

    Notes
    -----
    A merged record can match records its members did not (e.g. through
    the author union), so passes repeat until no group remains. Running
    the function on its own output is therefore a no-op.
    """
    current = list(records)
    while True:
        groups = detect_duplicates(current, options, logger=logger)
        if not groups:
            return current
        current = collapse_groups(current, groups, options, logger=logger)


def collapse_groups(
    records: Sequence[CandidateRecord],
    groups: Sequence[DuplicateGroup],
    options: "DuplicateDetectionOptions",
    *,
    logger: AuditLogger | None = None,
) -> list[CandidateRecord]:
    """Run one merge pass: replace each group by its merged record.

    Parameters
    ----------
    records : Sequence[CandidateRecord]
        Batch the groups were detected on.
    groups : Sequence[DuplicateGroup]
        Groups from ``detect_duplicates`` over *records*.
    options : DuplicateDetectionOptions
        Supplies the merge strategy.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    list[CandidateRecord]
        Records after the pass.
    """
    start = time.perf_counter()
    if logger:
        logger.stage_started(STAGE_NAME, record_count=len(records))

    replacements: dict[int, CandidateRecord] = {}
    removed: set[int] = set()

    for group in groups:
        merged = merge_duplicates(group, options)
        primary_index = group.member_indices[0]
        replacements[primary_index] = merged
        removed.update(group.member_indices[1:])

        if logger:
            logger.group_merged(
                primary_index=primary_index,
                merged_from=merged.merged_from,
                confidence=group.confidence,
                strategy=group.merge_strategy.value,
                conflicting_fields=list(merged.conflicting_fields),
                stage=STAGE_NAME,
            )

    output = [
        replacements.get(i, record) for i, record in enumerate(records) if i not in removed
    ]

    if logger:
        logger.stage_finished(
            STAGE_NAME,
            duration_seconds=time.perf_counter() - start,
            counters={
                "records_in": len(records),
                "groups_merged": len(groups),
                "records_out": len(output),
            },
        )

    return output
