"""Field-level merge rules for duplicate groups."""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from scholardedupe.models.records import CandidateRecord
from scholardedupe.normalize.text import author_name_key, keyword_key

# Scalar fields filled from the strategy ranking
RANKED_FIELDS: tuple[str, ...] = (
    "citations",
    "year",
    "journal",
    "abstract",
    "publication_date",
)


def merge_authors(author_lists: Iterable[Sequence[str]]) -> tuple[str, ...]:
    """Union author lists, de-duplicated by normalized name.

    The first-seen surface form and order are kept, so ``"Smith, J."``
    and ``"J. Smith"`` collapse into whichever appeared first, while
    ``"Smith, John"`` stays distinct from ``"Smith, J."``.

    Parameters
    ----------
    author_lists : Iterable[Sequence[str]]
        Author lists, primary first.

    Returns
    -------
    tuple[str, ...]
        Merged author list.
    """
    return _union(author_lists, author_name_key)


def merge_keywords(keyword_lists: Iterable[Sequence[str]]) -> tuple[str, ...]:
    """Union keyword lists case-insensitively, keeping first-seen forms."""
    return _union(keyword_lists, keyword_key)


def _union(lists: Iterable[Sequence[str]], key: Callable[[str], Any]) -> tuple[str, ...]:
    seen: set[Any] = set()
    merged: list[str] = []
    for values in lists:
        for value in values:
            k = key(value)
            if not k or k in seen:
                continue
            seen.add(k)
            merged.append(value)
    return tuple(merged)


def pick_identifier(
    values: Iterable[str | None],
    normalizer: Callable[[str | None], str | None],
) -> str | None:
    """First value that normalizes validly, in its original surface form."""
    for value in values:
        if normalizer(value) is not None:
            return value
    return None


def pick_ranked_value(ranked: Sequence[CandidateRecord], field_name: str) -> Any:
    """First non-missing value of *field_name* in ranking order.

    Parameters
    ----------
    ranked : Sequence[CandidateRecord]
        Members ordered by preference.
    field_name : str
        Record attribute.

    Returns
    -------
    Any
        The value, or None when no member has one.
    """
    for record in ranked:
        value = getattr(record, field_name)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)
