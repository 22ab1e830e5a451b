"""Public API for reading and writing candidate-record batches.

This module provides the file-level conveniences of scholardedupe:
- Reading JSONL files into CandidateRecord objects
- Exporting records to JSONL format
- Deduplicating a JSONL file end to end
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from scholardedupe.models import CandidateRecord, record_from_dict

if TYPE_CHECKING:
    from scholardedupe.audit.logger import AuditLogger
    from scholardedupe.engine.config import DeduplicationResult, DuplicateDetectionOptions

__all__ = [
    "read_jsonl",
    "write_jsonl",
    "dedupe_file",
    "RecordParseError",
]


class RecordParseError(Exception):
    """Raised when a record file cannot be parsed."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize parse error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        line : int | None, optional
            1-based line number of the offending record.
        """
        super().__init__(message)
        self.file = file
        self.line = line


def read_jsonl(path: str | Path) -> list[CandidateRecord]:
    """Read candidate records from a JSONL file.

    Blank lines are skipped. Lines carrying merge metadata
    (``merged_from``) are loaded as MergedRecord.

    Parameters
    ----------
    path : str | Path
        Path to JSONL file.

    Returns
    -------
    list[CandidateRecord]
        Records in file order.

    Raises
    ------
    FileNotFoundError
        If file does not exist.
    RecordParseError
        If a line is not a JSON object.

    Examples
    --------
        >>> from scholardedupe import read_jsonl
        >>> records = read_jsonl("search_results.jsonl")
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    records: list[CandidateRecord] = []
    with file_path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise RecordParseError(
                    f"Failed to parse {file_path.name} line {line_no}: {e.msg}",
                    file=str(file_path),
                    line=line_no,
                ) from e
            if not isinstance(data, dict):
                raise RecordParseError(
                    f"Failed to parse {file_path.name} line {line_no}: expected a JSON object",
                    file=str(file_path),
                    line=line_no,
                )
            records.append(record_from_dict(data))

    return records


def write_jsonl(
    records: Iterable[CandidateRecord],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> None:
    """Write records to JSONL file (one JSON object per line).

    Output is deterministic with consistent field ordering and UTF-8 encoding.

    Parameters
    ----------
    records : Iterable[CandidateRecord]
        Records to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            json_str = json.dumps(
                record.to_dict(),
                ensure_ascii=False,
                sort_keys=sort_keys,
            )
            f.write(json_str + "\n")


def dedupe_file(
    input_path: str | Path,
    output_path: str | Path,
    *,
    options: DuplicateDetectionOptions | None = None,
    logger: AuditLogger | None = None,
) -> DeduplicationResult:
    """Deduplicate a JSONL file of candidate records.

    Parameters
    ----------
    input_path : str | Path
        JSONL file of candidate records.
    output_path : str | Path
        Destination JSONL file; written only when the run succeeds.
    options : DuplicateDetectionOptions | None, optional
        Detection options; defaults when omitted.
    logger : AuditLogger | None, optional
        Audit logger for observability events.

    Returns
    -------
    DeduplicationResult
        Run result with summary counters.

    Raises
    ------
    FileNotFoundError
        If input file does not exist.
    RecordParseError
        If the input is malformed.
    """
    from scholardedupe.engine import run_deduplication
    from scholardedupe.utils import calculate_file_sha256

    records = read_jsonl(input_path)
    result = run_deduplication(records, options, logger=logger)

    if result.success:
        out_path = Path(output_path)
        write_jsonl(result.records, out_path)
        if logger:
            logger.artifact_written(
                path=out_path.name,
                sha256=calculate_file_sha256(out_path),
                bytes_written=out_path.stat().st_size,
                record_count=len(result.records),
            )

    return result
