"""Tests for group merging, member ranking and conflict detection."""

import dataclasses

import pytest

from scholardedupe.clustering import detect_duplicates
from scholardedupe.merge import (
    FieldConflict,
    MergeStrategy,
    ResolutionRule,
    find_conflicts,
    merge_authors,
    merge_duplicates,
    merge_keywords,
    rank_members,
    remove_duplicates,
)
from scholardedupe.models import MergedRecord

DOI = "10.1234/shared"


def _single_group(records, options):
    groups = detect_duplicates(records, options)
    assert len(groups) == 1
    return groups[0]


# ---------------------------------------------------------------------------
# Field unions
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_merge_authors_dedupes_by_name_key() -> None:
    """Test reordered names collapse while initialed variants stay distinct."""
    merged = merge_authors([["Smith, J.", "Doe, A."], ["Smith, John", "Brown, B.", "J. Smith"]])

    assert merged == ("Smith, J.", "Doe, A.", "Smith, John", "Brown, B.")


@pytest.mark.unit
def test_merge_keywords_case_insensitive() -> None:
    """Test keyword union keeps first-seen forms."""
    assert merge_keywords([["AI", "ML"], ["ml", "Data", " "]]) == ("AI", "ML", "Data")


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("strategy", "expected_titles"),
    [
        pytest.param(MergeStrategy.KEEP_MOST_CITATIONS, ["B", "A", "C"], id="citations"),
        pytest.param(MergeStrategy.KEEP_MOST_RECENT, ["C", "A", "B"], id="recent"),
        pytest.param(MergeStrategy.KEEP_HIGHEST_QUALITY, ["A", "C", "B"], id="quality"),
    ],
)
def test_rank_members(make_record, strategy, expected_titles: list[str]) -> None:
    """Test each strategy orders members and puts missing keys last."""
    records = [
        make_record("A", citations=10, year=2020, confidence=0.9, relevance_score=0.1),
        make_record("B", citations=50, confidence=0.5),
        make_record("C", year=2023, confidence=0.9, relevance_score=0.05),
    ]

    ranked = rank_members(records, strategy)

    assert [r.title for r in ranked] == expected_titles


@pytest.mark.unit
def test_rank_members_stable_on_ties(make_record) -> None:
    """Test equal ranking values keep member order."""
    records = [make_record("first", year=2020), make_record("second", year=2020)]

    ranked = rank_members(records, MergeStrategy.KEEP_MOST_RECENT)

    assert [r.title for r in ranked] == ["first", "second"]


# ---------------------------------------------------------------------------
# merge_duplicates
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_merge_duplicates_unions_lists(make_record, default_options) -> None:
    """Test merged authors and keywords are de-duplicated unions."""
    group = _single_group(
        [
            make_record("Paper", authors=["Smith, J.", "Doe, A."], keywords=["AI", "ML"], doi=DOI),
            make_record(
                "Paper (v2)", authors=["Smith, John", "Brown, B."], keywords=["ml", "Data"], doi=DOI
            ),
        ],
        default_options,
    )

    merged = merge_duplicates(group, default_options)

    assert isinstance(merged, MergedRecord)
    assert merged.title == "Paper"
    assert len(merged.authors) == 4
    assert merged.keywords == ("AI", "ML", "Data")
    assert merged.merged_from == 2
    assert merged.merge_confidence == 1.0


@pytest.mark.unit
def test_merge_duplicates_keep_most_citations(make_record, default_options) -> None:
    """Test the most cited member supplies citations and venue."""
    options = dataclasses.replace(default_options, merge_strategy=MergeStrategy.KEEP_MOST_CITATIONS)
    group = _single_group(
        [
            make_record("Paper", citations=3, journal="Preprint Server", doi=DOI),
            make_record("Paper", citations=40, journal="Journal of Things", doi=DOI),
        ],
        options,
    )

    merged = merge_duplicates(group, options)

    assert merged.citations == 40
    assert merged.journal == "Journal of Things"


@pytest.mark.unit
def test_merge_duplicates_keep_most_recent_skips_missing(make_record, default_options) -> None:
    """Test members without a year rank last but still fill other fields."""
    options = dataclasses.replace(default_options, merge_strategy=MergeStrategy.KEEP_MOST_RECENT)
    group = _single_group(
        [
            make_record("Paper", abstract="Only here.", doi=DOI),
            make_record("Paper", year=2019, doi=DOI),
            make_record("Paper", year=2021, doi=DOI),
        ],
        options,
    )

    merged = merge_duplicates(group, options)

    assert merged.year == 2021
    assert merged.abstract == "Only here."
    assert merged.merged_from == 3


@pytest.mark.unit
def test_merge_duplicates_keep_highest_quality(make_record, default_options) -> None:
    """Test the most confident member wins even with fewer citations."""
    group = _single_group(
        [
            make_record("Paper", citations=100, confidence=0.4, relevance_score=0.2, doi=DOI),
            make_record("Paper", citations=5, confidence=0.8, relevance_score=0.6, doi=DOI),
        ],
        default_options,
    )

    merged = merge_duplicates(group, default_options)

    assert merged.citations == 5
    assert merged.confidence == pytest.approx(0.6)
    assert merged.relevance_score == pytest.approx(0.4)


@pytest.mark.unit
def test_merge_duplicates_identifier_first_valid(make_record, default_options) -> None:
    """Test DOI and URL come from the first member with a valid value."""
    group = _single_group(
        [
            make_record("Paper", doi="not-a-doi", url="https://x.org/p"),
            make_record("Paper", doi="https://doi.org/10.5555/ABC", url="https://x.org/p"),
        ],
        default_options,
    )

    merged = merge_duplicates(group, default_options)

    assert merged.doi == "https://doi.org/10.5555/ABC"
    assert merged.url == "https://x.org/p"


@pytest.mark.unit
def test_merge_duplicates_counts_previous_merges(make_record, default_options) -> None:
    """Test merged_from sums across already merged members."""
    first = MergedRecord(title="Paper", doi=DOI, merged_from=3)
    group = _single_group([first, make_record("Paper", doi=DOI)], default_options)

    assert merge_duplicates(group, default_options).merged_from == 4


@pytest.mark.unit
def test_merge_duplicates_does_not_modify_group(make_record, default_options) -> None:
    """Test merging leaves the member records untouched."""
    records = [
        make_record("Paper", authors=["Smith, J."], doi=DOI),
        make_record("Paper", authors=["Brown, B."], doi=DOI),
    ]
    group = _single_group(records, default_options)

    merge_duplicates(group, default_options)

    assert group.primary.authors == ("Smith, J.",)
    assert group.duplicates[0].authors == ("Brown, B.",)


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_find_conflicts_reports_disagreements(make_record, default_options) -> None:
    """Test conflicting fields and their suggested resolutions."""
    group = _single_group(
        [
            make_record("Paper", year=2020, citations=5, authors=["Smith, J."], doi=DOI),
            make_record(
                "Paper",
                year=2021,
                citations=12,
                authors=["Doe, A."],
                confidence=0.9,
                doi=DOI,
            ),
        ],
        default_options,
    )

    conflicts = {c.field: c for c in find_conflicts(group)}

    assert set(conflicts) == {"authors", "year", "citations"}
    assert conflicts["citations"].suggested_resolution == 12
    assert conflicts["citations"].resolution_rule == ResolutionRule.MAX
    assert conflicts["authors"].suggested_resolution == ("Smith, J.", "Doe, A.")
    assert conflicts["authors"].resolution_rule == ResolutionRule.UNION
    assert conflicts["year"].suggested_resolution == 2021
    assert conflicts["year"].resolution_rule == ResolutionRule.HIGHEST_CONFIDENCE
    assert [v.source_index for v in conflicts["year"].values] == [0, 1]


@pytest.mark.unit
def test_find_conflicts_ignores_equivalent_forms(make_record, default_options) -> None:
    """Test values equal after normalization and missing values do not conflict."""
    group = _single_group(
        [
            make_record("Deep Learning", journal="Nature", doi="10.1234/ABC", year=2020),
            make_record("deep learning!", journal="  nature ", doi="doi:10.1234/abc"),
        ],
        default_options,
    )

    assert find_conflicts(group) == []


@pytest.mark.unit
def test_merged_record_lists_conflicting_fields(make_record, default_options) -> None:
    """Test the merged record names the fields that disagreed."""
    group = _single_group(
        [make_record("Paper", year=2020, doi=DOI), make_record("Paper", year=2021, doi=DOI)],
        default_options,
    )

    assert merge_duplicates(group, default_options).conflicting_fields == ("year",)


@pytest.mark.unit
def test_field_conflict_to_dict() -> None:
    """Test conflict serialization renders tuples as lists."""
    conflict = FieldConflict("authors", (), ("A", "B"), ResolutionRule.UNION)

    assert conflict.to_dict() == {
        "field": "authors",
        "values": [],
        "suggested_resolution": ["A", "B"],
        "resolution_rule": "union",
    }


# ---------------------------------------------------------------------------
# remove_duplicates
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_remove_duplicates_places_merged_at_primary(make_record, default_options) -> None:
    """Test merged records take the primary's slot and others keep order."""
    records = [
        make_record("Alpha", doi="10.1000/x"),
        make_record("Beta"),
        make_record("Alpha again", doi="10.1000/x"),
        make_record("Gamma"),
    ]

    result = remove_duplicates(records, default_options)

    assert [r.title for r in result] == ["Alpha", "Beta", "Gamma"]
    assert isinstance(result[0], MergedRecord)
    assert result[1] is records[1]


@pytest.mark.unit
def test_remove_duplicates_without_duplicates(make_record, default_options) -> None:
    """Test an input without duplicates comes back unchanged."""
    records = [make_record("Alpha"), make_record("Beta")]

    assert remove_duplicates(records, default_options) == records
    assert remove_duplicates([], default_options) == []


@pytest.mark.unit
def test_remove_duplicates_idempotent(make_record, default_options) -> None:
    """Test a second pass over deduplicated output changes nothing."""
    records = [
        make_record("Alpha", doi="10.1000/x"),
        make_record("Alpha", doi="10.1000/x"),
        make_record("Beta", url="https://b.org/1"),
        make_record("Beta v2", url="b.org/1"),
    ]

    once = remove_duplicates(records, default_options)

    assert len(once) == 2
    assert remove_duplicates(once, default_options) == once
