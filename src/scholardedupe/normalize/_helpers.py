"""Helper functions and compiled regex patterns for normalization.

This module provides reusable utilities to eliminate boilerplate
and improve performance through pre-compiled regex patterns.
"""

import re
import unicodedata

# Pre-compiled regex patterns
DOI_PREFIX_RE = re.compile(
    r"^(?:https?://(?:dx\.|www\.)?doi\.org/|doi:\s*)",
    re.IGNORECASE,
)
DOI_RE = re.compile(r"^10\.\d{4,}/\S+$")
URL_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
URL_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)
NON_WORD_RE = re.compile(r"[^\w\s]+")
UNDERSCORE_RE = re.compile(r"_+")


# ---------------------------------------------------------------------------
# Text normalization functions
# ---------------------------------------------------------------------------


def strip_accents(text: str) -> str:
    """Remove diacritical marks for cross-locale matching.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Text with diacritical marks removed.
    """
    nfd = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in nfd if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def normalize_text_for_matching(text: str | None) -> str:
    """Full text normalization for dedup matching.

    Applies NFKC, casefold, accent stripping, punctuation removal,
    and whitespace collapsing. Used for titles and author names where
    maximum recall is needed.

    Parameters
    ----------
    text : str | None
        Raw text to normalize.

    Returns
    -------
    str
        Normalized text ready for matching.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.casefold()
    text = strip_accents(text)
    text = NON_WORD_RE.sub(" ", text)
    text = UNDERSCORE_RE.sub(" ", text)
    return " ".join(text.split())


def casefold_key(text: str | None) -> str:
    """Casefolded, trimmed form used for exact string equality."""
    if not text:
        return ""
    return unicodedata.normalize("NFKC", text).casefold().strip()
