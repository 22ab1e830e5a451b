"""Member ranking for scalar field selection during merge."""

from collections.abc import Callable, Sequence

from scholardedupe.merge.models import MergeStrategy
from scholardedupe.models.records import CandidateRecord

RankKey = tuple[bool, float, float]


def _citations_key(record: CandidateRecord) -> RankKey:
    if record.citations is None:
        return (True, 0.0, 0.0)
    return (False, -float(record.citations), 0.0)


def _recency_key(record: CandidateRecord) -> RankKey:
    if record.year is None:
        return (True, 0.0, 0.0)
    return (False, -float(record.year), 0.0)


def _quality_key(record: CandidateRecord) -> RankKey:
    return (False, -record.confidence, -record.relevance_score)


RANKING_KEYS: dict[MergeStrategy, Callable[[CandidateRecord], RankKey]] = {
    MergeStrategy.KEEP_MOST_CITATIONS: _citations_key,
    MergeStrategy.KEEP_MOST_RECENT: _recency_key,
    MergeStrategy.KEEP_HIGHEST_QUALITY: _quality_key,
}


def rank_members(
    records: Sequence[CandidateRecord],
    strategy: MergeStrategy,
) -> list[CandidateRecord]:
    """Order group members by preference under *strategy*.

    Ranking is a lexicographic tuple, sorted ascending:

    1. missing ranking key (records without it go last)
    2. ranking value, descending
    3. tie-breaker: original member order (stable sort)

    Parameters
    ----------
    records : Sequence[CandidateRecord]
        Group members, primary first.
    strategy : MergeStrategy
        Active merge strategy.

    Returns
    -------
    list[CandidateRecord]
        Members from most to least preferred.
    """
    return sorted(records, key=RANKING_KEYS[MergeStrategy(strategy)])
