"""Vectorized author-list scoring for candidate screening.

``AuthorSimilarityIndex`` lays out the author keys of a prepared batch as
integer arrays so one record's author list can be scored against many
partners in a single pass. The arithmetic mirrors ``author_keys_similarity``
and token scores come from the same rapidfuzz scorer. Each batch score is
never below the pairwise score by more than ``SCORE_SLACK``, so a pair
rejected here can never pass the classifier's author checks.
"""

from collections.abc import Sequence

import numpy as np
from rapidfuzz import process
from rapidfuzz.distance import JaroWinkler

from scholardedupe.normalize.keys import PreparedRecord

from .similarity import INITIAL_MATCH_SCORE, TOKEN_AGREEMENT_FLOOR

__all__ = ["AuthorSimilarityIndex", "SCORE_SLACK"]

# Summation order differs from the pairwise scorer
SCORE_SLACK = 1e-9

# Max (name, name, token, token) cells gathered at once
MAX_CHUNK_CELLS = 1_000_000


def _pad(rows: Sequence[Sequence[int]]) -> np.ndarray:
    """Stack ragged id lists into a matrix padded with -1."""
    width = max((len(row) for row in rows), default=0)
    out = np.full((len(rows), max(width, 1)), -1, dtype=np.int64)
    for i, row in enumerate(rows):
        out[i, : len(row)] = row
    return out


class AuthorSimilarityIndex:
    """Author keys of a prepared batch, indexed by batch position.

    Parameters
    ----------
    records : Sequence[PreparedRecord]
        Prepared batch. Row ``i`` of the index holds
        ``records[i].author_keys``.

    Attributes
    ----------
    author_counts : np.ndarray
        Number of non-blank authors per record.
    """

    def __init__(self, records: Sequence[PreparedRecord]) -> None:
        token_ids: dict[str, int] = {}
        name_ids: dict[tuple[str, ...], int] = {}
        record_names: list[list[int]] = []

        for record in records:
            ids = []
            for key in record.author_keys:
                if key not in name_ids:
                    name_ids[key] = len(name_ids)
                    for token in key:
                        token_ids.setdefault(token, len(token_ids))
                ids.append(name_ids[key])
            record_names.append(ids)

        tokens = list(token_ids)
        self._tokens = np.array(tokens, dtype=object)
        self._token_len = np.array([len(t) for t in tokens], dtype=np.int64)
        self._token_digit = np.array([t.isdigit() for t in tokens], dtype=bool)
        self._token_first = np.array([ord(t[0]) for t in tokens], dtype=np.int64)

        self._name_tokens = _pad([[token_ids[t] for t in key] for key in name_ids])
        self._record_names = _pad(record_names)
        self.author_counts = np.array([len(ids) for ids in record_names], dtype=np.int64)

    def scores(self, query: int, partners: np.ndarray) -> np.ndarray:
        """Author-list similarity of one record against many.

        Parameters
        ----------
        query : int
            Batch position of the query record.
        partners : np.ndarray
            Batch positions to score against.

        Returns
        -------
        np.ndarray
            Float scores aligned with *partners*; 0.0 where either side has
            no authors.
        """
        partners = np.asarray(partners, dtype=np.int64)
        out = np.zeros(len(partners), dtype=np.float64)
        m = int(self.author_counts[query])
        if m == 0 or len(partners) == 0:
            return out

        counts = self.author_counts[partners]
        has_authors = counts > 0
        if not has_authors.any():
            return out

        lens = counts[has_authors]
        partner_names = self._record_names[partners[has_authors], : int(lens.max())]
        name_mask = partner_names >= 0
        used = np.unique(partner_names[name_mask])

        name_scores = self._name_scores(self._record_names[query, :m], used)
        gathered = name_scores[:, np.searchsorted(used, partner_names)]  # (m, P, L)

        query_to_partner = np.where(name_mask, gathered, -1.0).max(axis=2).mean(axis=0)
        partner_best = np.where(name_mask, gathered.max(axis=0), 0.0)
        partner_to_query = partner_best.sum(axis=1) / lens

        out[has_authors] = np.where(
            m < lens,
            query_to_partner,
            np.where(lens < m, partner_to_query, (query_to_partner + partner_to_query) / 2),
        )
        return out

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _name_scores(self, query_names: np.ndarray, names: np.ndarray) -> np.ndarray:
        """Name similarity matrix of shape ``(len(query_names), len(names))``."""
        query_tokens = self._name_tokens[query_names]
        width = self._name_tokens.shape[1]
        step = max(1, MAX_CHUNK_CELLS // (len(query_names) * width * width))

        out = np.empty((len(query_names), len(names)), dtype=np.float64)
        for start in range(0, len(names), step):
            chunk = self._name_tokens[names[start : start + step]]
            out[:, start : start + step] = self._name_chunk(query_tokens, chunk)
        return out

    def _name_chunk(self, query_tokens: np.ndarray, other_tokens: np.ndarray) -> np.ndarray:
        q_mask = query_tokens >= 0
        o_mask = other_tokens >= 0
        q_ids = np.unique(query_tokens[q_mask])
        o_ids = np.unique(other_tokens[o_mask])
        table = self._token_scores(q_ids, o_ids)

        q_pos = np.searchsorted(q_ids, query_tokens)
        o_pos = np.searchsorted(o_ids, other_tokens)
        cells = table[q_pos[:, None, :, None], o_pos[None, :, None, :]]
        valid = q_mask[:, None, :, None] & o_mask[None, :, None, :]
        cells = np.where(valid, cells, -1.0)

        forward = np.where(q_mask[:, None, :], cells.max(axis=3), 0.0).sum(axis=2)
        forward /= q_mask.sum(axis=1)[:, None]
        backward = np.where(o_mask[None, :, :], cells.max(axis=2), 0.0).sum(axis=2)
        backward /= o_mask.sum(axis=1)[None, :]
        return (forward + backward) / 2

    def _token_scores(self, a_ids: np.ndarray, b_ids: np.ndarray) -> np.ndarray:
        """Token agreement scores with the initial, digit and floor rules."""
        raw = process.cdist(
            self._tokens[a_ids].tolist(),
            self._tokens[b_ids].tolist(),
            scorer=JaroWinkler.normalized_similarity,
            dtype=np.float64,
        )
        fuzzy = np.where(raw >= TOKEN_AGREEMENT_FLOOR - SCORE_SLACK, raw, 0.0)

        initial = np.where(
            self._token_first[a_ids][:, None] == self._token_first[b_ids][None, :],
            INITIAL_MATCH_SCORE,
            0.0,
        )
        short = (self._token_len[a_ids][:, None] == 1) | (self._token_len[b_ids][None, :] == 1)
        digit = self._token_digit[a_ids][:, None] | self._token_digit[b_ids][None, :]

        scores = np.where(digit, 0.0, np.where(short, initial, fuzzy))
        return np.where(a_ids[:, None] == b_ids[None, :], 1.0, scores)
