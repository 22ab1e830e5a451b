"""Hashing utilities for scholardedupe artifacts."""

import hashlib
from pathlib import Path

__all__ = ["format_sha256", "calculate_file_sha256"]

CHUNK_SIZE = 8192


def format_sha256(hex_digest: str) -> str:
    """Prefix a hex digest with ``sha256:``."""
    return f"sha256:{hex_digest}"


def calculate_file_sha256(path: Path) -> str:
    """Calculate SHA256 hash of file contents.

    Parameters
    ----------
    path : Path
        Path to file.

    Returns
    -------
    str
        SHA256 hash with "sha256:" prefix.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256_hash = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            sha256_hash.update(chunk)

    return format_sha256(sha256_hash.hexdigest())
