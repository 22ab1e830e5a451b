"""Matching keys computed once per record.

Every engine operation prepares its input batch up front so the pairwise
stages never re-normalize the same field twice.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from scholardedupe.models.records import CandidateRecord

from .identifiers import normalize_doi, normalize_url
from .text import author_name_key, normalize_title, title_key


@dataclass(frozen=True, slots=True)
class PreparedRecord:
    """A record paired with its normalized matching keys.

    Attributes
    ----------
    index : int
        Position of the record in the input batch.
    record : CandidateRecord
        The untouched input record.
    doi_key : str | None
        Canonical DOI.
    url_key : str | None
        Canonical URL.
    title_key : str
        Casefolded, trimmed title (exact title rule).
    title_norm : str
        Fully normalized title (similarity scoring).
    author_keys : tuple[tuple[str, ...], ...]
        Sorted token tuple per non-blank author, in source order.
    """

    index: int
    record: CandidateRecord
    doi_key: str | None
    url_key: str | None
    title_key: str
    title_norm: str
    author_keys: tuple[tuple[str, ...], ...]


def prepare_record(record: CandidateRecord, index: int = 0) -> PreparedRecord:
    """Compute the matching keys of a single record.

    Parameters
    ----------
    record : CandidateRecord
        Record to prepare.
    index : int, optional
        Batch position.

    Returns
    -------
    PreparedRecord
        Record with keys.
    """
    author_keys = tuple(key for key in (author_name_key(a) for a in record.authors) if key)
    return PreparedRecord(
        index=index,
        record=record,
        doi_key=normalize_doi(record.doi),
        url_key=normalize_url(record.url),
        title_key=title_key(record.title),
        title_norm=normalize_title(record.title),
        author_keys=author_keys,
    )


def prepare_records(records: Sequence[CandidateRecord]) -> list[PreparedRecord]:
    """Prepare a batch, preserving input order."""
    return [prepare_record(record, i) for i, record in enumerate(records)]
