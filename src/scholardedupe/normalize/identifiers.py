"""Canonical forms for record identifiers (DOI and URL).

Both normalizers are total: malformed input yields None, never an
exception, so a bad identifier simply disables the matching rule that
depends on it.
"""

from urllib.parse import unquote, urlsplit

from ._helpers import DOI_PREFIX_RE, DOI_RE, URL_SCHEME_RE, URL_WWW_RE

LOCALHOST = "localhost"


def normalize_doi(raw: str | None) -> str | None:
    """Return the canonical form of a DOI, or None.

    Leading resolver prefixes (``https://doi.org/``, ``http://dx.doi.org/``)
    and the ``doi:`` scheme are stripped case-insensitively, percent
    escapes are decoded and the result is lower-cased.

    Parameters
    ----------
    raw : str | None
        DOI in any surface form.

    Returns
    -------
    str | None
        Canonical DOI matching ``10.<registrant>/<suffix>``, or None when
        the input is empty or malformed.

    Examples
    --------
    >>> normalize_doi("https://doi.org/10.1234/Test.2023.001")
    '10.1234/test.2023.001'
    >>> normalize_doi("invalid-doi") is None
    True
    """
    if not isinstance(raw, str):
        return None

    doi = raw.strip()
    if not doi:
        return None

    doi = DOI_PREFIX_RE.sub("", doi, count=1)
    doi = unquote(doi)

    # Trailing citation punctuation is not part of the identifier
    doi = doi.rstrip(".,;").strip().lower()

    if not DOI_RE.match(doi):
        return None
    return doi


def is_valid_doi(raw: str | None) -> bool:
    """Check whether *raw* normalizes to a well-formed DOI."""
    return normalize_doi(raw) is not None


def normalize_url(raw: str | None) -> str | None:
    """Return the canonical form of a URL, or None.

    The scheme, a leading ``www.`` and one trailing slash are removed and
    the host is lower-cased. Path, query and fragment keep their case.

    Parameters
    ----------
    raw : str | None
        URL in any surface form.

    Returns
    -------
    str | None
        Canonical URL, or None when the input is empty or cannot be
        parsed into a usable host.

    Examples
    --------
    >>> normalize_url("https://www.Example.com/paper1/")
    'example.com/paper1'
    >>> normalize_url("invalid-url") is None
    True
    """
    if not isinstance(raw, str):
        return None

    url = raw.strip()
    if not url or any(ch.isspace() for ch in url):
        return None

    url = URL_SCHEME_RE.sub("", url, count=1)
    url = URL_WWW_RE.sub("", url, count=1)
    if url.endswith("/"):
        url = url[:-1]

    try:
        parts = urlsplit(f"//{url}")
        hostname = parts.hostname
    except ValueError:
        return None

    if not hostname or not _is_plausible_host(hostname):
        return None

    netloc = parts.netloc.lower()
    rest = url[len(parts.netloc) :]
    return f"{netloc}{rest}"


def _is_plausible_host(hostname: str) -> bool:
    """Hosts need a dot (or be localhost) and no empty labels."""
    if hostname == LOCALHOST:
        return True
    if "." not in hostname:
        return False
    return all(label for label in hostname.split("."))
