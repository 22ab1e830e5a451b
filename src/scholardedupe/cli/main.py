"""Command-line interface for scholardedupe.

Provides CLI commands for duplicate detection and deduplication of
candidate-record JSONL files.
"""

import dataclasses
import importlib.metadata
import json
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from scholardedupe.merge.models import MergeStrategy

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("scholardedupe")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development


def detection_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every detection command."""
    decorators = [
        click.option(
            "--title-threshold",
            type=float,
            default=None,
            help="Minimum title similarity for fuzzy matches (default: 0.85)",
        ),
        click.option(
            "--author-threshold",
            type=float,
            default=None,
            help="Minimum author-list similarity for fuzzy matches (default: 0.8)",
        ),
        click.option(
            "--no-fuzzy",
            is_flag=True,
            help="Disable fuzzy title/author matching",
        ),
        click.option(
            "--loose-doi",
            is_flag=True,
            help="Require similar titles in addition to equal DOIs",
        ),
        click.option(
            "--merge-strategy",
            type=click.Choice([s.value for s in MergeStrategy]),
            default=None,
            help="Field selection policy when merging (default: keep_highest_quality)",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="JSON file with detection options",
        ),
        click.option(
            "--audit-log",
            type=click.Path(dir_okay=False),
            default=None,
            help="Append structured JSONL audit events to this file",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable verbose output",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def build_options(
    config_path: str | None,
    title_threshold: float | None,
    author_threshold: float | None,
    no_fuzzy: bool,
    loose_doi: bool,
    merge_strategy: str | None,
) -> Any:
    """Load options from *config_path* and apply command-line overrides.

    Raises
    ------
    ConfigurationError
        If the file or an override is invalid.
    """
    from scholardedupe.engine.config import ConfigurationError, DuplicateDetectionOptions

    options = DuplicateDetectionOptions()
    if config_path:
        try:
            with Path(config_path).open("r", encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{config_path}: invalid JSON ({e.msg})") from e
        options = DuplicateDetectionOptions.from_dict(payload)

    overrides: dict[str, Any] = {}
    if title_threshold is not None:
        overrides["title_similarity_threshold"] = title_threshold
    if author_threshold is not None:
        overrides["author_similarity_threshold"] = author_threshold
    if no_fuzzy:
        overrides["enable_fuzzy_matching"] = False
    if loose_doi:
        overrides["strict_doi_matching"] = False
    if merge_strategy is not None:
        overrides["merge_strategy"] = MergeStrategy(merge_strategy)

    # replace() re-runs __post_init__ validation
    return dataclasses.replace(options, **overrides) if overrides else options


def open_audit_logger(audit_log: str | None, verbose: bool) -> Any:
    """Create an AuditLogger for *audit_log*, or None."""
    if not audit_log:
        return None
    from scholardedupe.audit import AuditLogger, generate_run_id

    return AuditLogger(generate_run_id(), Path(audit_log), min_level="DEBUG" if verbose else "INFO")


@click.group()
@click.version_option(version=__version__, prog_name="scholardedupe")
def cli() -> None:
    """Duplicate detection and merging for academic search results.

    Use 'scholardedupe COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@detection_options
def detect(
    input_path: str,
    title_threshold: float | None,
    author_threshold: float | None,
    no_fuzzy: bool,
    loose_doi: bool,
    merge_strategy: str | None,
    config_path: str | None,
    audit_log: str | None,
    verbose: bool,
) -> None:
    """Print duplicate groups found in INPUT_PATH as JSON lines.

    INPUT_PATH is a JSONL file with one candidate record per line.

    Examples
    --------
        scholardedupe detect results.jsonl
        scholardedupe detect results.jsonl --title-threshold 0.9 --no-fuzzy
    """
    from scholardedupe.api import read_jsonl
    from scholardedupe.clustering import detect_duplicates

    logger = None
    start = time.perf_counter()
    try:
        options = build_options(
            config_path, title_threshold, author_threshold, no_fuzzy, loose_doi, merge_strategy
        )
        logger = open_audit_logger(audit_log, verbose)
        if logger:
            logger.run_started(command=sys.argv, parameters=options.to_dict())

        records = read_jsonl(input_path)
        if verbose:
            click.echo(f"Read {len(records)} records from {input_path}", err=True)

        groups = detect_duplicates(records, options, logger=logger)
        for group in groups:
            click.echo(json.dumps(group.to_dict(), ensure_ascii=False, sort_keys=True))

        if verbose:
            click.echo(f"Found {len(groups)} duplicate groups", err=True)
        if logger:
            logger.run_finished("success", time.perf_counter() - start, len(records))

    except Exception as e:
        if logger:
            logger.error(type(e).__name__, str(e))
            logger.run_finished("failed", time.perf_counter() - start)
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        if logger:
            logger.close()


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    required=True,
    help="Output JSONL file path",
)
@detection_options
def deduplicate(
    input_path: str,
    output: str,
    title_threshold: float | None,
    author_threshold: float | None,
    no_fuzzy: bool,
    loose_doi: bool,
    merge_strategy: str | None,
    config_path: str | None,
    audit_log: str | None,
    verbose: bool,
) -> None:
    """Merge duplicate records of INPUT_PATH and write the result.

    Each duplicate group is replaced by one merged record placed at the
    position of its first member; other records keep their order.

    Examples
    --------
        scholardedupe deduplicate results.jsonl -o unique.jsonl
        scholardedupe deduplicate results.jsonl -o unique.jsonl --merge-strategy keep_most_citations
    """
    from scholardedupe.api import dedupe_file

    logger = None
    start = time.perf_counter()
    try:
        options = build_options(
            config_path, title_threshold, author_threshold, no_fuzzy, loose_doi, merge_strategy
        )
        logger = open_audit_logger(audit_log, verbose)
        if logger:
            logger.run_started(command=sys.argv, parameters=options.to_dict())

        if verbose:
            click.echo("Starting deduplication...", err=True)
            click.echo(f"  Input: {input_path}", err=True)
            click.echo(f"  Output: {output}", err=True)
            for key, value in options.to_dict().items():
                click.echo(f"  {key}: {value}", err=True)

        result = dedupe_file(input_path, output, options=options, logger=logger)

        if not result.success:
            if logger:
                logger.run_finished("failed", time.perf_counter() - start, result.total_records)
            click.secho(f"✗ Deduplication failed: {result.error_message}", fg="red", err=True)
            sys.exit(1)

        if logger:
            logger.run_finished("success", time.perf_counter() - start, result.total_records)

        if verbose:
            click.echo("\nResults:", err=True)
            click.echo(f"  Total records: {result.total_records}", err=True)
            click.echo(f"  Duplicate groups: {result.total_groups}", err=True)
            click.echo(f"  Records removed: {result.duplicates_removed}", err=True)
            for strategy, count in sorted(result.strategy_counts.items()):
                click.echo(f"  Groups via {strategy}: {count}", err=True)

        click.secho(
            f"✓ Deduplicated {result.total_records} records into {len(result.records)} "
            f"({result.total_groups} groups merged)",
            fg="green",
        )

    except Exception as e:
        if logger:
            logger.error(type(e).__name__, str(e))
            logger.run_finished("failed", time.perf_counter() - start)
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)
    finally:
        if logger:
            logger.close()


if __name__ == "__main__":
    cli()
