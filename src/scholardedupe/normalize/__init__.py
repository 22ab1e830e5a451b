"""Normalization of identifiers and free text for duplicate matching."""

from scholardedupe.normalize.identifiers import is_valid_doi, normalize_doi, normalize_url
from scholardedupe.normalize.keys import PreparedRecord, prepare_record, prepare_records
from scholardedupe.normalize.text import (
    author_name_key,
    keyword_key,
    normalize_author_name,
    normalize_title,
    title_key,
)

__all__ = [
    "normalize_doi",
    "normalize_url",
    "is_valid_doi",
    "normalize_author_name",
    "author_name_key",
    "normalize_title",
    "title_key",
    "keyword_key",
    "PreparedRecord",
    "prepare_record",
    "prepare_records",
]
