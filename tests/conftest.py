"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from scholardedupe.engine.config import DuplicateDetectionOptions  # noqa: E402
from scholardedupe.models import CandidateRecord  # noqa: E402


@pytest.fixture
def make_record() -> Callable[..., CandidateRecord]:
    """Factory for test records with minimal boilerplate.

    Lists are accepted for ``authors``/``keywords`` and converted to tuples.
    """

    def _factory(
        title: str = "A Study of Things",
        *,
        authors: list[str] | tuple[str, ...] = (),
        journal: str | None = None,
        year: int | None = None,
        citations: int | None = None,
        publication_date: str | None = None,
        doi: str | None = None,
        url: str | None = None,
        abstract: str | None = None,
        keywords: list[str] | tuple[str, ...] = (),
        confidence: float = 0.0,
        relevance_score: float = 0.0,
    ) -> CandidateRecord:
        return CandidateRecord(
            title=title,
            authors=tuple(authors),
            journal=journal,
            year=year,
            citations=citations,
            publication_date=publication_date,
            doi=doi,
            url=url,
            abstract=abstract,
            keywords=tuple(keywords),
            confidence=confidence,
            relevance_score=relevance_score,
        )

    return _factory


@pytest.fixture
def default_options() -> DuplicateDetectionOptions:
    """Options with every default value."""
    return DuplicateDetectionOptions()
