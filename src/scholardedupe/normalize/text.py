"""Text normalization for author names, titles and keywords."""

from ._helpers import casefold_key, normalize_text_for_matching


def normalize_author_name(raw: str | None) -> str:
    """Normalize an author name for comparison.

    Applies NFKC, casefold, accent stripping, punctuation-to-space and
    whitespace collapsing. Token order is preserved, so ``"Smith, J."``
    and ``"J. Smith"`` normalize to ``"smith j"`` and ``"j smith"``; both
    share the same token set (see :func:`author_name_key`).

    Parameters
    ----------
    raw : str | None
        Author display name.

    Returns
    -------
    str
        Normalized name; empty string for blank input.
    """
    return normalize_text_for_matching(raw)


def author_name_key(raw: str | None) -> tuple[str, ...]:
    """Order-insensitive identity key of an author name.

    Parameters
    ----------
    raw : str | None
        Author display name.

    Returns
    -------
    tuple[str, ...]
        Sorted name tokens; empty tuple for blank input.
    """
    return tuple(sorted(normalize_author_name(raw).split()))


def normalize_title(raw: str | None) -> str:
    """Normalize a title for similarity scoring."""
    return normalize_text_for_matching(raw)


def title_key(raw: str | None) -> str:
    """Casefolded, trimmed title used for exact title equality."""
    return casefold_key(raw)


def keyword_key(raw: str | None) -> str:
    """Case-insensitive identity of a keyword."""
    return " ".join(casefold_key(raw).split())
