"""Build duplicate groups from pairwise classifier decisions."""

import heapq
import time
from collections import defaultdict
from collections.abc import Sequence
from typing import TYPE_CHECKING

from scholardedupe.audit.logger import AuditLogger
from scholardedupe.candidates.generator import generate_candidates
from scholardedupe.clustering.models import DuplicateGroup
from scholardedupe.clustering.union_find import UnionFind
from scholardedupe.decision.classifier import classify_prepared
from scholardedupe.decision.models import DuplicateEdge
from scholardedupe.models.records import CandidateRecord
from scholardedupe.normalize.keys import PreparedRecord, prepare_records

if TYPE_CHECKING:
    from scholardedupe.engine.config import DuplicateDetectionOptions

STAGE_NAME = "duplicate_detection"


def detect_duplicates(
    records: Sequence[CandidateRecord],
    options: "DuplicateDetectionOptions",
    *,
    logger: AuditLogger | None = None,
) -> list[DuplicateGroup]:
    """Group records that describe the same publication.

    Parameters
    ----------
    records : Sequence[CandidateRecord]
        Input batch; never mutated.
    options : DuplicateDetectionOptions
        Detection options.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    list[DuplicateGroup]
        Groups with at least one duplicate, ordered by primary position.

    Notes
    -----
    Duplicate relations are closed transitively: if A matches B and B
    matches C, all three form one group even when A and C do not match.
    The result equals classifying every unordered pair; blocking only
    skips pairs no rule could accept.
    """
    start = time.perf_counter()

    if logger:
        logger.stage_started(STAGE_NAME, record_count=len(records))

    if not records:
        if logger:
            logger.stage_finished(STAGE_NAME, time.perf_counter() - start, {"records": 0})
        return []

    prepared = prepare_records(records)
    pairs, candidate_stats = generate_candidates(prepared, options)

    edges: list[DuplicateEdge] = []
    for pair in pairs:
        decision = classify_prepared(prepared[pair.index_a], prepared[pair.index_b], options)
        if decision is None:
            continue
        edge = DuplicateEdge(pair.index_a, pair.index_b, decision)
        edges.append(edge)
        if logger:
            logger.event(
                "duplicate_pair",
                data={
                    "index_a": edge.index_a,
                    "index_b": edge.index_b,
                    "strategy": edge.strategy.value,
                    "confidence": edge.confidence,
                },
                level="DEBUG",
                stage=STAGE_NAME,
            )

    groups = build_groups(prepared, edges)

    if logger:
        logger.stage_finished(
            STAGE_NAME,
            duration_seconds=time.perf_counter() - start,
            counters={
                "records": len(records),
                "candidate_pairs": candidate_stats["global"]["pairs_total_unique"],
                "duplicate_edges": len(edges),
                "groups": len(groups),
                "records_in_groups": sum(g.size for g in groups),
            },
        )

    return groups


def build_groups(
    prepared: Sequence[PreparedRecord],
    edges: Sequence[DuplicateEdge],
) -> list[DuplicateGroup]:
    """Turn accepted duplicate edges into groups.

    Parameters
    ----------
    prepared : Sequence[PreparedRecord]
        Prepared batch in input order.
    edges : Sequence[DuplicateEdge]
        Accepted duplicate edges.

    Returns
    -------
    list[DuplicateGroup]
        Groups ordered by primary position.
    """
    uf: UnionFind[int] = UnionFind()
    adjacency: dict[int, list[DuplicateEdge]] = defaultdict(list)

    for edge in edges:
        uf.union(edge.index_a, edge.index_b)
        adjacency[edge.index_a].append(edge)
        adjacency[edge.index_b].append(edge)

    groups: list[DuplicateGroup] = []
    for component in uf.get_components():
        if len(component) < 2:
            continue
        members = sorted(component)
        links = _spanning_links(members[0], adjacency)
        groups.append(_make_group(prepared, members, links))

    groups.sort(key=lambda g: g.member_indices[0])
    return groups


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _spanning_links(
    primary: int,
    adjacency: dict[int, list[DuplicateEdge]],
) -> list[DuplicateEdge]:
    """Maximum-confidence spanning tree grown from *primary* (Prim).

    Ties prefer the lower-positioned record, then the lower anchor, so
    the tree is deterministic.
    """
    joined = {primary}
    links: list[DuplicateEdge] = []
    heap: list[tuple[float, int, int]] = []
    edge_at: dict[tuple[int, int], DuplicateEdge] = {}

    def push_from(node: int) -> None:
        for edge in adjacency[node]:
            other = edge.index_b if edge.index_a == node else edge.index_a
            if other not in joined:
                edge_at[(node, other)] = edge
                heapq.heappush(heap, (-edge.confidence, other, node))

    push_from(primary)
    while heap:
        _neg_conf, node, anchor = heapq.heappop(heap)
        if node in joined:
            continue
        joined.add(node)
        links.append(edge_at[(anchor, node)])
        push_from(node)

    return links


def _make_group(
    prepared: Sequence[PreparedRecord],
    members: list[int],
    links: list[DuplicateEdge],
) -> DuplicateGroup:
    weakest = links[0]
    for link in links[1:]:
        if link.confidence < weakest.confidence:
            weakest = link

    return DuplicateGroup(
        primary=prepared[members[0]].record,
        duplicates=tuple(prepared[i].record for i in members[1:]),
        confidence=weakest.confidence,
        merge_strategy=weakest.strategy,
        member_indices=tuple(members),
        links=tuple(links),
    )
