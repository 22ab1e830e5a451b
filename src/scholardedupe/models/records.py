"""Candidate record data models for scholardedupe.

This module defines the record types exchanged with the upstream search
client and the downstream ranking/persistence collaborators. Records are
immutable; every engine operation builds new instances instead of mutating
its inputs.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any


def _coerce_int(value: Any) -> int | None:
    """Coerce a JSON value to int, degrading to None when impossible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    return None


def _coerce_float(value: Any, default: float = 0.0) -> float:
    """Coerce a JSON value to float, falling back to *default*."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _coerce_str(value: Any) -> str | None:
    """Return *value* as a string, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _coerce_str_tuple(value: Any) -> tuple[str, ...]:
    """Convert a list-like JSON value into a tuple of non-blank strings."""
    if not value:
        return ()
    if isinstance(value, str):
        value = [value]
    return tuple(str(item) for item in value if item is not None and str(item).strip())


@dataclass(frozen=True)
class CandidateRecord:
    """One bibliographic entry as returned by an academic-search client.

    Attributes
    ----------
    title : str
        Publication title.
    authors : tuple[str, ...]
        Author display names in source order.
    journal : str | None
        Journal or venue name.
    year : int | None
        Publication year.
    citations : int | None
        Citation count reported by the source.
    publication_date : str | None
        Free-form publication date string.
    doi : str | None
        DOI in any surface form (bare, ``doi:`` or resolver URL).
    url : str | None
        Landing page URL in any surface form.
    abstract : str | None
        Abstract text.
    keywords : tuple[str, ...]
        Keywords or topics.
    confidence : float
        Upstream extraction confidence (0.0-1.0).
    relevance_score : float
        Upstream relevance score (0.0-1.0).
    """

    title: str
    authors: tuple[str, ...] = ()
    journal: str | None = None
    year: int | None = None
    citations: int | None = None
    publication_date: str | None = None
    doi: str | None = None
    url: str | None = None
    abstract: str | None = None
    keywords: tuple[str, ...] = ()
    confidence: float = 0.0
    relevance_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Dictionary with tuples rendered as lists.
        """
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CandidateRecord":
        """Build a record from a dictionary (e.g. parsed JSON).

        Unknown keys are ignored. Numeric fields that cannot be parsed
        degrade to None rather than raising, so one malformed value never
        rejects the whole record.

        Parameters
        ----------
        data : dict[str, Any]
            Record fields.

        Returns
        -------
        CandidateRecord
            Reconstructed record.
        """
        citations = _coerce_int(data.get("citations"))
        if citations is None:
            citations = _coerce_int(data.get("citation_count"))

        return cls(
            title=str(data.get("title") or ""),
            authors=_coerce_str_tuple(data.get("authors")),
            journal=_coerce_str(data.get("journal")),
            year=_coerce_int(data.get("year")),
            citations=citations,
            publication_date=_coerce_str(data.get("publication_date")),
            doi=_coerce_str(data.get("doi")),
            url=_coerce_str(data.get("url")),
            abstract=_coerce_str(data.get("abstract")),
            keywords=_coerce_str_tuple(data.get("keywords")),
            confidence=_coerce_float(data.get("confidence")),
            relevance_score=_coerce_float(data.get("relevance_score")),
        )


@dataclass(frozen=True)
class MergedRecord(CandidateRecord):
    """Candidate record produced by collapsing a duplicate group.

    Attributes
    ----------
    merged_from : int
        Number of source records folded into this one.
    merge_confidence : float
        Confidence of the originating duplicate group.
    conflicting_fields : tuple[str, ...]
        Fields whose values disagreed across the group members.
    """

    merged_from: int = 1
    merge_confidence: float = 1.0
    conflicting_fields: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MergedRecord":
        """Build a merged record from a dictionary.

        Parameters
        ----------
        data : dict[str, Any]
            Record fields including merge metadata.

        Returns
        -------
        MergedRecord
            Reconstructed record.
        """
        base = CandidateRecord.from_dict(data)
        merged_from = _coerce_int(data.get("merged_from"))
        return cls(
            **{f.name: getattr(base, f.name) for f in fields(CandidateRecord)},
            merged_from=merged_from if merged_from and merged_from > 0 else 1,
            merge_confidence=_coerce_float(data.get("merge_confidence"), 1.0),
            conflicting_fields=_coerce_str_tuple(data.get("conflicting_fields")),
        )


def record_from_dict(data: dict[str, Any]) -> CandidateRecord:
    """Build a CandidateRecord or MergedRecord depending on *data* keys.

    Parameters
    ----------
    data : dict[str, Any]
        Record fields.

    Returns
    -------
    CandidateRecord
        A MergedRecord when merge metadata is present, else a CandidateRecord.
    """
    if "merged_from" in data:
        return MergedRecord.from_dict(data)
    return CandidateRecord.from_dict(data)
