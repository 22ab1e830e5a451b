"""String and author-list similarity for duplicate matching.

This module provides pure, deterministic similarity functions built on the
Jaro-Winkler scorer from rapidfuzz. All scores are in [0, 1], reflexive
and commutative.
"""

from collections.abc import Sequence
from functools import lru_cache

from rapidfuzz.distance import JaroWinkler

from scholardedupe.normalize.text import author_name_key, normalize_title

# An initial ("j") matching the first letter of a full token ("john")
INITIAL_MATCH_SCORE = 0.9

# Token scores below this floor count as disagreement
TOKEN_AGREEMENT_FLOOR = 0.8

NameTokens = tuple[str, ...]


def jaro_winkler(a: str, b: str) -> float:
    """Jaro-Winkler similarity of two already-normalized strings.

    Arguments are ordered before scoring so the result never depends on
    call order.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    float
        Similarity in [0, 1]; 1.0 for equal strings.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    first, second = (a, b) if a <= b else (b, a)
    return JaroWinkler.normalized_similarity(first, second)


def string_similarity(a: str | None, b: str | None) -> float:
    """Jaro-Winkler similarity of two free-text values.

    Both inputs go through title normalization (case, accents,
    punctuation, whitespace) before scoring.

    Parameters
    ----------
    a : str | None
        First value.
    b : str | None
        Second value.

    Returns
    -------
    float
        Similarity in [0, 1].

    Examples
    --------
    >>> string_similarity("Machine Learning", "machine learning")
    1.0
    """
    return jaro_winkler(normalize_title(a), normalize_title(b))


# ---------------------------------------------------------------------------
# Author names
# ---------------------------------------------------------------------------


def _token_similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if a.isdigit() or b.isdigit():
        return 0.0
    if len(a) == 1 or len(b) == 1:
        short, full = (a, b) if len(a) <= len(b) else (b, a)
        return INITIAL_MATCH_SCORE if len(short) == 1 and full[0] == short else 0.0
    score = jaro_winkler(a, b)
    return score if score >= TOKEN_AGREEMENT_FLOOR else 0.0


def _directional_token_score(source: NameTokens, target: NameTokens) -> float:
    total = 0.0
    for token in source:
        total += max(_token_similarity(token, other) for other in target)
    return total / len(source)


@lru_cache(maxsize=1 << 16)
def name_tokens_similarity(tokens_a: NameTokens, tokens_b: NameTokens) -> float:
    """Similarity of two author names given as sorted token tuples.

    Parameters
    ----------
    tokens_a : tuple[str, ...]
        Key of the first name (see ``author_name_key``).
    tokens_b : tuple[str, ...]
        Key of the second name.

    Returns
    -------
    float
        Mean of the best token matches, averaged over both directions.

    Notes
    -----
    Results are memoized per pair of name keys.
    """
    if not tokens_a or not tokens_b:
        return 0.0
    if tokens_a == tokens_b:
        return 1.0
    forward = _directional_token_score(tokens_a, tokens_b)
    backward = _directional_token_score(tokens_b, tokens_a)
    return (forward + backward) / 2


def author_name_similarity(a: str | None, b: str | None) -> float:
    """Name-aware similarity of two author display names.

    Names are compared token by token regardless of order, so
    ``"Smith, John"`` and ``"John Smith"`` score 1.0.

    Parameters
    ----------
    a : str | None
        First author name.
    b : str | None
        Second author name.

    Returns
    -------
    float
        Similarity in [0, 1].

    Notes
    -----
    Token agreement rules:

    - equal tokens score 1.0;
    - an initial matches a token that starts with it at 0.9;
    - numeric tokens only match when equal;
    - otherwise Jaro-Winkler, counted as 0 below 0.8.

    Examples
    --------
    >>> author_name_similarity("Smith, John", "Smith, J.")
    0.95
    """
    return name_tokens_similarity(author_name_key(a), author_name_key(b))


def _best_match_mean(source: Sequence[NameTokens], target: Sequence[NameTokens]) -> float:
    total = 0.0
    for name in source:
        total += max(name_tokens_similarity(name, other) for other in target)
    return total / len(source)


def author_keys_similarity(
    keys_a: Sequence[NameTokens],
    keys_b: Sequence[NameTokens],
) -> float:
    """Author-list similarity over pre-computed name keys.

    Parameters
    ----------
    keys_a : Sequence[tuple[str, ...]]
        Non-empty name keys of the first list.
    keys_b : Sequence[tuple[str, ...]]
        Non-empty name keys of the second list.

    Returns
    -------
    float
        0.0 when either list is empty, otherwise the mean best match of
        the shorter list against the longer one.
    """
    if not keys_a or not keys_b:
        return 0.0
    if len(keys_a) < len(keys_b):
        return _best_match_mean(keys_a, keys_b)
    if len(keys_b) < len(keys_a):
        return _best_match_mean(keys_b, keys_a)
    return (_best_match_mean(keys_a, keys_b) + _best_match_mean(keys_b, keys_a)) / 2


def author_list_similarity(list_a: Sequence[str], list_b: Sequence[str]) -> float:
    """Similarity of two author lists.

    Each name of the shorter list is matched to its best counterpart in
    the longer list and the scores are averaged, so a list contained in
    the other scores 1.0. Lists of equal length are averaged in both
    directions. Blank names are ignored.

    Parameters
    ----------
    list_a : Sequence[str]
        First author list.
    list_b : Sequence[str]
        Second author list.

    Returns
    -------
    float
        Similarity in [0, 1]; 0.0 if either list is empty.
    """
    keys_a = [key for key in (author_name_key(name) for name in list_a) if key]
    keys_b = [key for key in (author_name_key(name) for name in list_b) if key]
    return author_keys_similarity(keys_a, keys_b)
