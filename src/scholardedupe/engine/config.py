"""Detection options, their validation and run result types."""

from dataclasses import dataclass, field, fields
from typing import Any

import jsonschema

from scholardedupe.clustering.models import DuplicateGroup
from scholardedupe.merge.models import MergeStrategy
from scholardedupe.models.records import CandidateRecord

THRESHOLD_FIELDS: tuple[str, ...] = (
    "title_similarity_threshold",
    "author_similarity_threshold",
    "doi_title_sanity_threshold",
)
FLAG_FIELDS: tuple[str, ...] = ("enable_fuzzy_matching", "strict_doi_matching")

# Keys used by settings UIs that serialize options in camelCase
CAMEL_CASE_ALIASES: dict[str, str] = {
    "titleSimilarityThreshold": "title_similarity_threshold",
    "authorSimilarityThreshold": "author_similarity_threshold",
    "enableFuzzyMatching": "enable_fuzzy_matching",
    "strictDOIMatching": "strict_doi_matching",
    "strictDoiMatching": "strict_doi_matching",
    "mergeStrategy": "merge_strategy",
    "doiTitleSanityThreshold": "doi_title_sanity_threshold",
}

_THRESHOLD_SCHEMA: dict[str, Any] = {"type": "number", "minimum": 0, "maximum": 1}

OPTIONS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "DuplicateDetectionOptions",
    "type": "object",
    "properties": {
        "title_similarity_threshold": _THRESHOLD_SCHEMA,
        "author_similarity_threshold": _THRESHOLD_SCHEMA,
        "doi_title_sanity_threshold": _THRESHOLD_SCHEMA,
        "enable_fuzzy_matching": {"type": "boolean"},
        "strict_doi_matching": {"type": "boolean"},
        "merge_strategy": {"enum": [s.value for s in MergeStrategy]},
    },
    "additionalProperties": False,
}


class ConfigurationError(ValueError):
    """Raised when detection options are invalid."""


@dataclass(frozen=True)
class DuplicateDetectionOptions:
    """Options controlling duplicate detection and merging.

    Attributes
    ----------
    title_similarity_threshold : float
        Minimum title similarity for a fuzzy match (default: 0.85).
    author_similarity_threshold : float
        Minimum author-list similarity for a fuzzy match (default: 0.8).
    enable_fuzzy_matching : bool
        Whether the fuzzy rule runs at all (default: True).
    strict_doi_matching : bool
        When True an equal DOI alone makes a duplicate. When False the
        titles must also reach ``doi_title_sanity_threshold``.
    merge_strategy : MergeStrategy
        Policy for scalar fields when merging (default: keep_highest_quality).
    doi_title_sanity_threshold : float
        Title similarity required for a DOI match with non-strict DOI
        matching (default: 0.5).

    Raises
    ------
    ConfigurationError
        From ``__post_init__`` when a threshold is outside [0, 1], a flag
        is not a bool or the merge strategy is unknown. Values are never
        clamped.
    """

    title_similarity_threshold: float = 0.85
    author_similarity_threshold: float = 0.8
    enable_fuzzy_matching: bool = True
    strict_doi_matching: bool = True
    merge_strategy: MergeStrategy = MergeStrategy.KEEP_HIGHEST_QUALITY
    doi_title_sanity_threshold: float = 0.5

    def __post_init__(self) -> None:
        """Validate all fields."""
        for name in THRESHOLD_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")

        for name in FLAG_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigurationError(f"{name} must be a bool, got {value!r}")

        try:
            strategy = MergeStrategy(self.merge_strategy)
        except ValueError:
            allowed = ", ".join(s.value for s in MergeStrategy)
            raise ConfigurationError(
                f"merge_strategy must be one of {allowed}, got {self.merge_strategy!r}"
            ) from None
        # Accept plain strings but store the enum
        object.__setattr__(self, "merge_strategy", strategy)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["merge_strategy"] = self.merge_strategy.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DuplicateDetectionOptions":
        """Build options from a JSON payload.

        Parameters
        ----------
        data : dict[str, Any]
            Options using snake_case or camelCase keys; missing keys take
            their defaults.

        Returns
        -------
        DuplicateDetectionOptions
            Validated options.

        Raises
        ------
        ConfigurationError
            If the payload does not match ``OPTIONS_SCHEMA``.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"options must be a JSON object, got {type(data).__name__}")

        payload = {CAMEL_CASE_ALIASES.get(key, key): value for key, value in data.items()}

        try:
            jsonschema.validate(instance=payload, schema=OPTIONS_SCHEMA)
        except jsonschema.ValidationError as exc:
            location = ".".join(str(p) for p in exc.absolute_path) or "options"
            raise ConfigurationError(f"{location}: {exc.message}") from exc

        return cls(**payload)


@dataclass
class DeduplicationResult:
    """Results from a deduplication run.

    Attributes
    ----------
    success : bool
        Whether the run completed.
    records : list[CandidateRecord]
        Deduplicated records; the unchanged input when the run failed.
    groups : list[DuplicateGroup]
        Groups found in the input batch (first merge pass).
    total_records : int
        Records in the input batch.
    total_groups : int
        Number of groups in ``groups``.
    duplicates_removed : int
        Input records minus output records.
    dedup_rate : float
        Fraction of input records removed (0.0-1.0).
    strategy_counts : dict[str, int]
        Groups per match strategy of their weakest link.
    error_message : str | None
        Error message if failed.
    """

    success: bool
    records: list[CandidateRecord]
    groups: list[DuplicateGroup]
    total_records: int
    total_groups: int
    duplicates_removed: int
    dedup_rate: float
    strategy_counts: dict[str, int] = field(default_factory=dict)
    error_message: str | None = None

    def summary(self) -> dict[str, Any]:
        """Counters without the record payloads."""
        return {
            "success": self.success,
            "total_records": self.total_records,
            "total_groups": self.total_groups,
            "duplicates_removed": self.duplicates_removed,
            "dedup_rate": self.dedup_rate,
            "strategy_counts": dict(self.strategy_counts),
            "error_message": self.error_message,
        }
