"""Blocker plug-ins for candidate generation.

Each blocker maps records to block keys. Records sharing a key become
candidate pairs. Blocking must never lose a pair the classifier could
accept: every classifier rule is covered by a blocker whose keys are a
necessary condition of that rule.

Architecture
------------
* ``Blocker``: structural protocol (two attributes + one method).
* ``FuzzyTitleSweep``: similarity-based pass for the fuzzy rule, which
  has no exact key. Title-near pairs are screened by author lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import asdict, dataclass
from typing import Protocol, runtime_checkable

import numpy as np
from rapidfuzz import process
from rapidfuzz.distance import JaroWinkler

from scholardedupe.normalize.keys import PreparedRecord
from scholardedupe.scoring.author_index import SCORE_SLACK, AuthorSimilarityIndex

# Absorbs scorer rounding between argument orders
FUZZY_CUTOFF_SLACK = 0.02

# Query titles scored per cdist call
SWEEP_ROW_CHUNK = 256


# ============================================================================
# Statistics
# ============================================================================


@dataclass
class BlockerStats:
    """Counters collected while running a single blocker.

    Attributes
    ----------
    records_seen : int
        Total records processed.
    records_keyed : int
        Records that produced at least one blocking key.
    unique_keys : int
        Distinct blocking keys generated.
    blocks_gt1 : int
        Blocks containing two or more records.
    pairs_raw : int
        Total candidate pairs before cross-blocker dedup.
    pairs_unique : int
        Unique pairs emitted by this blocker.
    max_block : int
        Largest block size encountered.
    """

    records_seen: int = 0
    records_keyed: int = 0
    unique_keys: int = 0
    blocks_gt1: int = 0
    pairs_raw: int = 0
    pairs_unique: int = 0
    max_block: int = 0

    def to_dict(self) -> dict[str, int]:
        """Serialise to a plain dict."""
        return asdict(self)


# ============================================================================
# Protocol
# ============================================================================


@runtime_checkable
class Blocker(Protocol):
    """Structural protocol every blocker must satisfy.

    Attributes
    ----------
    name : str
        Stable identifier used in audit logs and pair provenance.
    match_key : str
        Semantic label for the field(s) this blocker relies on.
    """

    name: str
    match_key: str

    def block_keys(self, record: PreparedRecord) -> Iterable[str]:
        """Yield zero or more blocking keys for *record*.

        Returns an empty iterable when the record lacks the data
        this blocker needs.
        """
        ...


# ============================================================================
# Exact-match blockers
# ============================================================================


class DOIExactBlocker:
    """Block by canonical DOI."""

    name: str = "doi_exact"
    match_key: str = "doi"

    def block_keys(self, record: PreparedRecord) -> Iterable[str]:
        """Yield the canonical DOI if present."""
        if record.doi_key:
            yield record.doi_key


class URLExactBlocker:
    """Block by canonical URL."""

    name: str = "url_exact"
    match_key: str = "url"

    def block_keys(self, record: PreparedRecord) -> Iterable[str]:
        """Yield the canonical URL if present."""
        if record.url_key:
            yield record.url_key


class TitleExactBlocker:
    """Block by casefolded title and shared author name.

    The title+author rule needs every author of the shorter list to have an
    exact counterpart, and a name only scores 1.0 against a name with the
    same token set. Records sharing the title therefore also share one
    ``title|name`` key. Author-less records are keyed by the title alone.
    """

    name: str = "title_exact"
    match_key: str = "title_key"

    def block_keys(self, record: PreparedRecord) -> Iterable[str]:
        """Yield title keys, one per distinct author token set."""
        if not record.title_key:
            return
        if not record.author_keys:
            yield record.title_key
            return
        for name in sorted({" ".join(sorted(set(key))) for key in record.author_keys}):
            yield f"{record.title_key}|{name}"


# ============================================================================
# Similarity sweep
# ============================================================================


class FuzzyTitleSweep:
    """Pair records whose normalized titles are within fuzzy reach.

    Every record is scored against all later records with the Jaro-Winkler
    scorer, keeping pairs at or above ``cutoff``. Records with an empty
    normalized title are never paired since the fuzzy rule skips them.
    When an author index is given, title-near pairs whose author lists
    cannot reach ``min_author_score`` are dropped as well.

    Parameters
    ----------
    cutoff : float
        Minimum title similarity. Callers pass the title threshold minus
        ``FUZZY_CUTOFF_SLACK``.
    authors : AuthorSimilarityIndex | None, optional
        Author index of the same batch, by position.
    min_author_score : float, optional
        Author threshold of the fuzzy rule.
    """

    name: str = "fuzzy_title"
    match_key: str = "title_norm"

    def __init__(
        self,
        cutoff: float,
        authors: AuthorSimilarityIndex | None = None,
        min_author_score: float = 0.0,
    ) -> None:
        self.cutoff = max(0.0, cutoff)
        self.authors = authors
        self.min_author_score = min_author_score

    def pairs(
        self,
        records: Sequence[PreparedRecord],
        stats: BlockerStats | None = None,
    ) -> Iterator[tuple[int, int, float]]:
        """Yield ``(position_a, position_b, score)`` with ``position_a < position_b``.

        Parameters
        ----------
        records : Sequence[PreparedRecord]
            Prepared batch in input order.
        stats : BlockerStats | None, optional
            Receives the number of title-near pairs in ``pairs_raw``.

        Yields
        ------
        tuple[int, int, float]
            Candidate positions and their title similarity.
        """
        title_ids, titles = _title_table(records)
        n = len(records)

        for start in range(0, n, SWEEP_ROW_CHUNK):
            chunk_ids = title_ids[start : start + SWEEP_ROW_CHUNK].tolist()
            queries = list(dict.fromkeys(t for t in chunk_ids if t >= 0))
            if not queries:
                continue
            rows = process.cdist(
                [titles[t] for t in queries],
                titles,
                scorer=JaroWinkler.normalized_similarity,
                score_cutoff=self.cutoff,
                dtype=np.float64,
                workers=-1,
            )
            row_of = dict(zip(queries, rows, strict=True))

            for i in range(start, min(n, start + SWEEP_ROW_CHUNK)):
                tid = int(title_ids[i])
                if tid < 0 or i + 1 >= n:
                    continue
                row = row_of[tid]
                later = title_ids[i + 1 :]
                scores = np.where(later >= 0, row[later], -1.0)
                near = np.flatnonzero(scores >= self.cutoff) + i + 1
                if stats is not None:
                    stats.pairs_raw += len(near)
                if self.authors is not None and len(near):
                    author_scores = self.authors.scores(i, near)
                    near = near[author_scores >= self.min_author_score - SCORE_SLACK]
                for j in near.tolist():
                    yield i, j, float(row[title_ids[j]])


def _title_table(records: Sequence[PreparedRecord]) -> tuple[np.ndarray, list[str]]:
    """Distinct normalized titles and each record's title id (-1 if empty)."""
    ids: dict[str, int] = {}
    title_ids = np.full(len(records), -1, dtype=np.int64)
    for i, record in enumerate(records):
        if record.title_norm:
            title_ids[i] = ids.setdefault(record.title_norm, len(ids))
    return title_ids, list(ids)


def default_blockers() -> list[Blocker]:
    """Exact-key blockers covering the DOI, URL and title+author rules."""
    return [DOIExactBlocker(), URLExactBlocker(), TitleExactBlocker()]
