"""Detection of disagreeing field values inside a duplicate group."""

from collections.abc import Callable, Hashable
from typing import Any

from scholardedupe.clustering.models import DuplicateGroup
from scholardedupe.merge.field_merge import merge_authors
from scholardedupe.merge.models import ConflictValue, FieldConflict, ResolutionRule
from scholardedupe.normalize.identifiers import normalize_doi, normalize_url
from scholardedupe.normalize.text import author_name_key, normalize_title


def _text_key(value: str) -> str:
    return " ".join(value.casefold().split())


def _authors_key(value: tuple[str, ...]) -> tuple[tuple[str, ...], ...]:
    return tuple(sorted({k for k in (author_name_key(a) for a in value) if k}))


def _identifier_key(normalizer: Callable[[str | None], str | None]) -> Callable[[str], str]:
    def key(value: str) -> str:
        return normalizer(value) or _text_key(value)

    return key


# Field name → comparison key; values sharing a key are one distinct value
CONFLICT_KEYS: dict[str, Callable[[Any], Hashable]] = {
    "title": normalize_title,
    "authors": _authors_key,
    "journal": _text_key,
    "year": int,
    "doi": _identifier_key(normalize_doi),
    "url": _identifier_key(normalize_url),
    "abstract": _text_key,
    "citations": int,
}


def find_conflicts(group: DuplicateGroup) -> list[FieldConflict]:
    """List fields whose values disagree across *group*.

    Parameters
    ----------
    group : DuplicateGroup
        Duplicate group.

    Returns
    -------
    list[FieldConflict]
        One entry per conflicting field, in a fixed field order. Members
        with a missing value do not take part.

    Notes
    -----
    For each distinct value only the most confident source is kept.
    Suggested resolutions: the maximum for citations, the union for
    authors, otherwise the value of the most confident source.
    """
    members = group.members
    positions = group.member_indices or tuple(range(len(members)))

    conflicts: list[FieldConflict] = []
    for field_name, key_fn in CONFLICT_KEYS.items():
        distinct: dict[Hashable, ConflictValue] = {}
        for position, record in zip(positions, members, strict=True):
            value = getattr(record, field_name)
            if _is_missing(value):
                continue
            key = key_fn(value)
            current = distinct.get(key)
            if current is None or record.confidence > current.confidence:
                distinct[key] = ConflictValue(value, position, record.confidence)

        if len(distinct) < 2:
            continue

        values = tuple(distinct.values())
        resolution, rule = _suggest_resolution(field_name, values, group)
        conflicts.append(FieldConflict(field_name, values, resolution, rule))

    return conflicts


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, tuple):
        return not value
    return False


def _suggest_resolution(
    field_name: str,
    values: tuple[ConflictValue, ...],
    group: DuplicateGroup,
) -> tuple[Any, ResolutionRule]:
    if field_name == "citations":
        return max(v.value for v in values), ResolutionRule.MAX
    if field_name == "authors":
        return merge_authors(r.authors for r in group.members), ResolutionRule.UNION

    best = values[0]
    for candidate in values[1:]:
        if candidate.confidence > best.confidence:
            best = candidate
    return best.value, ResolutionRule.HIGHEST_CONFIDENCE
