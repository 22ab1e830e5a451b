"""Layered duplicate classification of record pairs.

Rules are evaluated in order and the first one that fires wins:

1. canonical DOI equality (confidence 1.0);
2. canonical URL equality (0.95);
3. exact title with fully agreeing authors (1.0);
4. fuzzy title and author similarity, when enabled.
"""

from typing import TYPE_CHECKING

from scholardedupe.models.records import CandidateRecord
from scholardedupe.normalize.keys import PreparedRecord, prepare_record
from scholardedupe.scoring.similarity import author_keys_similarity, jaro_winkler

from .models import (
    DOI_MATCH_CONFIDENCE,
    FUZZY_AUTHOR_WEIGHT,
    FUZZY_TITLE_WEIGHT,
    TITLE_AUTHOR_MATCH_CONFIDENCE,
    URL_MATCH_CONFIDENCE,
    MatchStrategy,
    PairDecision,
)

if TYPE_CHECKING:
    from scholardedupe.engine.config import DuplicateDetectionOptions


def classify_pair(
    record_a: CandidateRecord,
    record_b: CandidateRecord,
    options: "DuplicateDetectionOptions",
) -> PairDecision | None:
    """Decide whether two records describe the same publication.

    Parameters
    ----------
    record_a : CandidateRecord
        First record.
    record_b : CandidateRecord
        Second record.
    options : DuplicateDetectionOptions
        Matching thresholds and switches.

    Returns
    -------
    PairDecision | None
        The decision of the first rule that fires, or None when the pair
        is not a duplicate.
    """
    return classify_prepared(prepare_record(record_a, 0), prepare_record(record_b, 1), options)


def classify_prepared(
    a: PreparedRecord,
    b: PreparedRecord,
    options: "DuplicateDetectionOptions",
) -> PairDecision | None:
    """Classify a pair of records whose matching keys are already computed.

    Parameters
    ----------
    a : PreparedRecord
        First prepared record.
    b : PreparedRecord
        Second prepared record.
    options : DuplicateDetectionOptions
        Matching thresholds and switches.

    Returns
    -------
    PairDecision | None
        Decision, or None for a non-duplicate.

    Notes
    -----
    Missing or malformed identifiers only disable their own rule. With
    ``strict_doi_matching`` off, a DOI match must also clear the title
    sanity bound; when it does not, evaluation continues with the URL rule.
    """
    title_score: float | None = None

    if a.doi_key and a.doi_key == b.doi_key:
        if options.strict_doi_matching:
            return PairDecision(True, DOI_MATCH_CONFIDENCE, MatchStrategy.DOI)
        title_score = jaro_winkler(a.title_norm, b.title_norm)
        if title_score >= options.doi_title_sanity_threshold:
            return PairDecision(True, DOI_MATCH_CONFIDENCE, MatchStrategy.DOI, title_score=title_score)

    if a.url_key and a.url_key == b.url_key:
        return PairDecision(True, URL_MATCH_CONFIDENCE, MatchStrategy.URL)

    if a.title_key and a.title_key == b.title_key and _authors_agree(a, b):
        return PairDecision(
            True,
            TITLE_AUTHOR_MATCH_CONFIDENCE,
            MatchStrategy.TITLE_AUTHOR,
            title_score=1.0,
            author_score=1.0,
        )

    if not options.enable_fuzzy_matching or not a.title_norm or not b.title_norm:
        return None

    if title_score is None:
        title_score = jaro_winkler(a.title_norm, b.title_norm)
    if title_score < options.title_similarity_threshold:
        return None

    author_score = author_keys_similarity(a.author_keys, b.author_keys)
    if author_score < options.author_similarity_threshold:
        return None

    confidence = min(1.0, FUZZY_TITLE_WEIGHT * title_score + FUZZY_AUTHOR_WEIGHT * author_score)
    return PairDecision(
        True,
        confidence,
        MatchStrategy.FUZZY_MATCH,
        title_score=title_score,
        author_score=author_score,
    )


def _authors_agree(a: PreparedRecord, b: PreparedRecord) -> bool:
    """Full author agreement; two author-less records agree."""
    if not a.author_keys and not b.author_keys:
        return True
    return author_keys_similarity(a.author_keys, b.author_keys) == 1.0
