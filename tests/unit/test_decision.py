"""Tests for layered pair classification."""

import dataclasses

import pytest

from scholardedupe.decision import MatchStrategy, PairDecision, classify_pair
from scholardedupe.engine.config import DuplicateDetectionOptions

# ---------------------------------------------------------------------------
# Identifier rules
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_doi_match_ignores_titles(make_record, default_options) -> None:
    """Test equal canonical DOIs make a duplicate even with unrelated titles."""
    a = make_record("Cats", doi="10.1234/test")
    b = make_record("Bird", doi="https://doi.org/10.1234/TEST")

    decision = classify_pair(a, b, default_options)

    assert decision is not None
    assert decision.is_duplicate is True
    assert decision.strategy == MatchStrategy.DOI
    assert decision.confidence == 1.0


@pytest.mark.unit
def test_loose_doi_requires_similar_titles(make_record) -> None:
    """Test non-strict DOI matching rejects pairs whose titles disagree."""
    options = DuplicateDetectionOptions(strict_doi_matching=False)
    same_doi_other_title = (
        make_record("Cats", doi="10.1234/test"),
        make_record("Bird", doi="10.1234/test"),
    )
    same_doi_same_title = (
        make_record("Deep Learning", doi="10.1234/test"),
        make_record("Deep learning.", doi="10.1234/test"),
    )

    assert classify_pair(*same_doi_other_title, options) is None

    decision = classify_pair(*same_doi_same_title, options)
    assert decision is not None
    assert decision.strategy == MatchStrategy.DOI


@pytest.mark.unit
def test_loose_doi_falls_through_to_url(make_record) -> None:
    """Test a DOI pair failing the title bound can still match by URL."""
    options = DuplicateDetectionOptions(strict_doi_matching=False)
    a = make_record("Cats", doi="10.1234/test", url="https://example.com/p")
    b = make_record("Bird", doi="10.1234/test", url="http://www.example.com/p/")

    decision = classify_pair(a, b, options)

    assert decision is not None
    assert decision.strategy == MatchStrategy.URL


@pytest.mark.unit
def test_url_match(make_record, default_options) -> None:
    """Test equal canonical URLs make a duplicate at 0.95."""
    a = make_record("Cats", url="https://www.example.com/paper1/")
    b = make_record("Bird", url="http://example.com/paper1")

    decision = classify_pair(a, b, default_options)

    assert decision is not None
    assert decision.strategy == MatchStrategy.URL
    assert decision.confidence == 0.95


@pytest.mark.unit
def test_conflicting_dois_do_not_block_url_rule(make_record, default_options) -> None:
    """Test differing DOIs only disable the DOI rule."""
    a = make_record("Cats", doi="10.1234/a", url="https://example.com/p")
    b = make_record("Bird", doi="10.1234/b", url="https://example.com/p")

    decision = classify_pair(a, b, default_options)

    assert decision is not None
    assert decision.strategy == MatchStrategy.URL


@pytest.mark.unit
def test_malformed_identifiers_are_ignored(make_record, default_options) -> None:
    """Test invalid DOIs and URLs never match each other."""
    a = make_record("Cats", doi="invalid-doi", url="invalid-url")
    b = make_record("Bird", doi="invalid-doi", url="invalid-url")

    assert classify_pair(a, b, default_options) is None


# ---------------------------------------------------------------------------
# Title rules
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_exact_title_with_agreeing_authors(make_record, default_options) -> None:
    """Test casefolded title equality with full author agreement."""
    a = make_record(" Deep Learning ", authors=["Smith, John", "Doe, Alice"])
    b = make_record("deep learning", authors=["Alice Doe", "John Smith"])

    decision = classify_pair(a, b, default_options)

    assert decision is not None
    assert decision.strategy == MatchStrategy.TITLE_AUTHOR
    assert decision.confidence == 1.0


@pytest.mark.unit
def test_exact_title_without_authors(make_record, default_options) -> None:
    """Test two author-less records with equal titles agree."""
    a = make_record("Deep Learning")
    b = make_record("DEEP LEARNING")

    decision = classify_pair(a, b, default_options)

    assert decision is not None
    assert decision.strategy == MatchStrategy.TITLE_AUTHOR


@pytest.mark.unit
def test_exact_title_one_side_missing_authors(make_record, default_options) -> None:
    """Test a missing author list on one side prevents a title match."""
    a = make_record("Deep Learning", authors=["Smith, John"])
    b = make_record("Deep Learning")

    assert classify_pair(a, b, default_options) is None


@pytest.mark.unit
def test_fuzzy_match(make_record, default_options) -> None:
    """Test near-identical titles and initialed authors match fuzzily."""
    a = make_record("Machine Learning for Healthcare", authors=["Smith, John"])
    b = make_record("Machine learning for health care", authors=["Smith, J."])

    decision = classify_pair(a, b, default_options)

    assert decision is not None
    assert decision.strategy == MatchStrategy.FUZZY_MATCH
    assert 0.9 <= decision.confidence <= 1.0
    assert decision.author_score == pytest.approx(0.95)
    assert decision.confidence == pytest.approx(
        0.6 * decision.title_score + 0.4 * decision.author_score
    )


@pytest.mark.unit
def test_fuzzy_match_accented_title(make_record, default_options) -> None:
    """Test accent differences are absorbed by title normalization."""
    a = make_record("Études sur la Lumière", authors=["Dupont, Marie"])
    b = make_record("Etudes sur la lumiere", authors=["Dupont, Marie"])

    decision = classify_pair(a, b, default_options)

    assert decision is not None
    assert decision.strategy == MatchStrategy.FUZZY_MATCH
    assert decision.confidence == 1.0


@pytest.mark.unit
def test_fuzzy_disabled(make_record) -> None:
    """Test disabling fuzzy matching removes the fuzzy rule only."""
    options = DuplicateDetectionOptions(enable_fuzzy_matching=False)
    a = make_record("Machine Learning for Healthcare", authors=["Smith, John"])
    b = make_record("Machine learning for health care", authors=["Smith, J."])

    assert classify_pair(a, b, options) is None


@pytest.mark.unit
def test_empty_titles_never_match_fuzzily(make_record, default_options) -> None:
    """Test empty titles are skipped by the title rules."""
    a = make_record("", authors=["Smith, John"])
    b = make_record("", authors=["Smith, John"])

    assert classify_pair(a, b, default_options) is None


@pytest.mark.unit
def test_different_authors_block_fuzzy_match(make_record, default_options) -> None:
    """Test equal titles with unrelated authors are not duplicates."""
    a = make_record("Machine Learning for Healthcare", authors=["Smith, John"])
    b = make_record("Machine Learning for Healthcare", authors=["Brown, Bob"])

    assert classify_pair(a, b, default_options) is None


@pytest.mark.unit
def test_thresholds_are_monotone(make_record, default_options) -> None:
    """Test raising a threshold never turns a non-duplicate into a duplicate."""
    a = make_record("Machine Learning for Healthcare", authors=["Smith, John"])
    b = make_record("Machine learning for health care", authors=["Smith, J."])

    assert classify_pair(a, b, default_options) is not None

    stricter_title = dataclasses.replace(default_options, title_similarity_threshold=1.0)
    stricter_author = dataclasses.replace(default_options, author_similarity_threshold=0.99)

    assert classify_pair(a, b, stricter_title) is None
    assert classify_pair(a, b, stricter_author) is None


@pytest.mark.unit
def test_classification_is_symmetric(make_record, default_options) -> None:
    """Test argument order does not change the decision."""
    a = make_record("Machine Learning for Healthcare", authors=["Smith, John", "Doe, A."])
    b = make_record("Machine learning for health care", authors=["Smith, J."])

    assert classify_pair(a, b, default_options) == classify_pair(b, a, default_options)


@pytest.mark.unit
def test_pair_decision_to_dict() -> None:
    """Test decision serialization uses the strategy value."""
    decision = PairDecision(True, 0.95, MatchStrategy.URL)

    assert decision.to_dict() == {
        "is_duplicate": True,
        "confidence": 0.95,
        "strategy": "url",
        "title_score": None,
        "author_score": None,
    }
