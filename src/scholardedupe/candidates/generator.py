"""Candidate pair generation orchestrator.

Coordinates the exact-key blockers and the fuzzy title sweep to produce a
single, deduplicated list of candidate pairs in deterministic order.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from itertools import combinations
from typing import TYPE_CHECKING, Any

from scholardedupe.candidates.blockers import (
    FUZZY_CUTOFF_SLACK,
    Blocker,
    BlockerStats,
    FuzzyTitleSweep,
    default_blockers,
)
from scholardedupe.candidates.models import CandidatePair, CandidateSource
from scholardedupe.normalize.keys import PreparedRecord
from scholardedupe.scoring.author_index import AuthorSimilarityIndex

if TYPE_CHECKING:
    from scholardedupe.engine.config import DuplicateDetectionOptions

PairKey = tuple[int, int]


def generate_candidates(
    records: Sequence[PreparedRecord],
    options: DuplicateDetectionOptions,
    *,
    blockers: list[Blocker] | None = None,
) -> tuple[list[CandidatePair], dict[str, Any]]:
    """Generate candidate pairs for *records*.

    Parameters
    ----------
    records : Sequence[PreparedRecord]
        Prepared batch in input order.
    options : DuplicateDetectionOptions
        Detection options; the fuzzy sweep runs only when fuzzy matching
        is enabled, uses the title threshold as its cutoff and drops pairs
        whose author lists cannot reach the author threshold.
    blockers : list[Blocker] | None, optional
        Exact-key blockers. Defaults to DOI, URL and exact title.

    Returns
    -------
    tuple[list[CandidatePair], dict[str, Any]]
        Pairs sorted by ``(index_a, index_b)`` and
        ``{"blockers": {name: stats}, "global": {…}}``.
    """
    if blockers is None:
        blockers = default_blockers()

    # Sort blockers for deterministic provenance order
    sorted_blockers = sorted(blockers, key=lambda b: b.name)

    stats: dict[str, BlockerStats] = {}
    pair_sources: dict[PairKey, list[CandidateSource]] = defaultdict(list)

    for blocker in sorted_blockers:
        blocker_stats, blocker_pairs = _run_blocker(blocker, records)
        stats[blocker.name] = blocker_stats
        for pair_key, source in blocker_pairs.items():
            pair_sources[pair_key].append(source)

    if options.enable_fuzzy_matching:
        sweep = FuzzyTitleSweep(
            options.title_similarity_threshold - FUZZY_CUTOFF_SLACK,
            authors=AuthorSimilarityIndex(records),
            min_author_score=options.author_similarity_threshold,
        )
        stats[sweep.name] = _run_sweep(sweep, records, pair_sources)

    pairs = [
        CandidatePair(index_a=a, index_b=b, sources=pair_sources[(a, b)])
        for a, b in sorted(pair_sources)
    ]

    global_stats = {
        "records": len(records),
        "pairs_total_unique": len(pairs),
        "pairs_with_multiple_sources": sum(1 for p in pairs if len(p.sources) > 1),
    }

    return pairs, {
        "blockers": {name: s.to_dict() for name, s in stats.items()},
        "global": global_stats,
    }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _run_blocker(
    blocker: Blocker,
    records: Sequence[PreparedRecord],
) -> tuple[BlockerStats, dict[PairKey, CandidateSource]]:
    """Index records by blocker keys, then emit pairs from each block."""
    stats = BlockerStats()

    # Phase 1: build inverted index: key → [index, …]
    index: dict[str, list[int]] = defaultdict(list)

    for record in records:
        stats.records_seen += 1
        keys = list(blocker.block_keys(record))
        if not keys:
            continue
        stats.records_keyed += 1
        for key in keys:
            index[key].append(record.index)

    stats.unique_keys = len(index)

    # Phase 2: emit candidate pairs from blocks with ≥ 2 records
    unique_pairs: dict[PairKey, CandidateSource] = {}

    for block_key in sorted(index):
        members = sorted(set(index[block_key]))
        block_size = len(members)

        if block_size < 2:
            continue

        stats.blocks_gt1 += 1
        stats.max_block = max(stats.max_block, block_size)

        source = CandidateSource(
            blocker=blocker.name,
            block_key=block_key,
            match_key=blocker.match_key,
        )

        for pair_key in combinations(members, 2):
            stats.pairs_raw += 1
            if pair_key not in unique_pairs:
                unique_pairs[pair_key] = source

    stats.pairs_unique = len(unique_pairs)
    return stats, unique_pairs


def _run_sweep(
    sweep: FuzzyTitleSweep,
    records: Sequence[PreparedRecord],
    pair_sources: dict[PairKey, list[CandidateSource]],
) -> BlockerStats:
    """Add fuzzy title pairs to *pair_sources* in place."""
    stats = BlockerStats(records_seen=len(records))
    stats.records_keyed = sum(1 for r in records if r.title_norm)

    for a, b, score in sweep.pairs(records, stats):
        stats.pairs_unique += 1
        source = CandidateSource(
            blocker=sweep.name,
            block_key=f"{score:.4f}",
            match_key=sweep.match_key,
        )
        pair_sources[(records[a].index, records[b].index)].append(source)

    return stats
