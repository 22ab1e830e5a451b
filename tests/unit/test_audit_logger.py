"""Tests for audit logger module."""

import json
from datetime import datetime
from pathlib import Path

import jsonschema
import pytest

from scholardedupe.audit import AuditLogger, generate_run_id
from scholardedupe.clustering import detect_duplicates
from scholardedupe.merge import remove_duplicates

# Envelope every JSONL line must satisfy
EVENT_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["ts", "run_id", "level", "event", "data", "stage", "index"],
    "properties": {
        "ts": {"type": "string", "pattern": "Z$"},
        "run_id": {"type": "string", "minLength": 1},
        "level": {"enum": ["DEBUG", "INFO", "WARN", "ERROR"]},
        "event": {"type": "string", "minLength": 1},
        "data": {"type": "object"},
        "stage": {"type": ["string", "null"]},
        "index": {"type": ["integer", "null"]},
    },
    "additionalProperties": False,
}


@pytest.fixture
def logger(tmp_path: Path) -> AuditLogger:
    """Create a logger that auto-closes after test."""
    lg = AuditLogger(run_id="test_run", log_path=tmp_path / "events.jsonl")
    yield lg
    lg.close()


def _read_events(path: Path) -> list[dict]:
    """Read all JSONL events from file."""
    with path.open() as f:
        return [json.loads(line) for line in f if line.strip()]


@pytest.mark.unit
def test_logger_init_creates_file(logger: AuditLogger) -> None:
    """Test logger creates the log file and sets initial state."""
    assert logger.log_path.exists()
    assert logger.current_stage is None
    assert logger.run_id == "test_run"
    assert logger.min_level == "INFO"


@pytest.mark.unit
def test_logger_rejects_unknown_level(tmp_path: Path) -> None:
    """Test an unknown minimum level is refused."""
    with pytest.raises(ValueError, match="min_level"):
        AuditLogger(run_id="r", log_path=tmp_path / "e.jsonl", min_level="TRACE")


@pytest.mark.unit
def test_logger_event_writes_valid_jsonl(logger: AuditLogger) -> None:
    """Test event() writes a valid JSONL line with correct envelope."""
    logger.event("test_event", data={"key": "value"}, level="INFO", index=4)

    events = _read_events(logger.log_path)

    assert len(events) == 1
    evt = events[0]
    jsonschema.validate(evt, EVENT_SCHEMA)
    assert evt["run_id"] == "test_run"
    assert evt["event"] == "test_event"
    assert evt["data"] == {"key": "value"}
    assert evt["index"] == 4
    assert datetime.fromisoformat(evt["ts"].replace("Z", "+00:00")).tzinfo is not None


@pytest.mark.unit
def test_logger_drops_events_below_min_level(tmp_path: Path) -> None:
    """Test DEBUG events are only written when enabled."""
    path = tmp_path / "events.jsonl"
    with AuditLogger(run_id="r", log_path=path) as lg:
        lg.event("hidden", level="DEBUG")
        lg.event("shown", level="WARN")
    with AuditLogger(run_id="r", log_path=path, min_level="DEBUG") as lg:
        lg.event("debug_shown", level="DEBUG")

    assert [e["event"] for e in _read_events(path)] == ["shown", "debug_shown"]


@pytest.mark.unit
def test_logger_stage_context_inheritance(logger: AuditLogger) -> None:
    """Test stage set via stage_started propagates until stage_finished."""
    logger.stage_started("stage1", record_count=3)
    logger.event("ev1")
    logger.event("ev2", stage="override")
    logger.stage_finished("stage1", duration_seconds=0.1)
    logger.event("ev3")

    events = _read_events(logger.log_path)

    assert events[0]["data"] == {"record_count": 3}
    assert events[1]["stage"] == "stage1"
    assert events[2]["stage"] == "override"
    assert events[3]["stage"] == "stage1"
    assert events[4]["stage"] is None


@pytest.mark.unit
@pytest.mark.parametrize(
    ("method", "kwargs", "expected_event", "expected_level"),
    [
        (
            "run_started",
            {"command": ["scholardedupe"], "parameters": {"k": 1}},
            "run_started",
            "INFO",
        ),
        ("run_finished", {"status": "success", "duration_seconds": 1.5}, "run_finished", "INFO"),
        ("stage_started", {"stage": "s1", "record_count": 10}, "stage_started", "INFO"),
        (
            "stage_finished",
            {"stage": "s1", "duration_seconds": 2.0, "counters": {"n": 5}},
            "stage_finished",
            "INFO",
        ),
        (
            "group_merged",
            {
                "primary_index": 0,
                "merged_from": 2,
                "confidence": 0.95,
                "strategy": "url",
                "conflicting_fields": ["year"],
            },
            "group_merged",
            "INFO",
        ),
        (
            "artifact_written",
            {"path": "a.jsonl", "sha256": "sha256:abc"},
            "artifact_written",
            "INFO",
        ),
        ("error", {"exception_class": "ValueError", "message": "bad"}, "error", "ERROR"),
    ],
)
def test_logger_convenience_methods(
    logger: AuditLogger,
    method: str,
    kwargs: dict,
    expected_event: str,
    expected_level: str,
) -> None:
    """Test all convenience methods produce correct event type and level."""
    getattr(logger, method)(**kwargs)

    events = _read_events(logger.log_path)

    assert len(events) == 1
    jsonschema.validate(events[0], EVENT_SCHEMA)
    assert events[0]["event"] == expected_event
    assert events[0]["level"] == expected_level


@pytest.mark.unit
def test_run_started_records_version(logger: AuditLogger) -> None:
    """Test run_started stamps the package version."""
    logger.run_started(command=["scholardedupe", "detect"], parameters={})

    [evt] = _read_events(logger.log_path)

    assert evt["data"]["command"] == ["scholardedupe", "detect"]
    assert isinstance(evt["data"]["version"], str)
    assert evt["data"]["version"]


@pytest.mark.unit
def test_logger_close_and_context_manager(tmp_path: Path) -> None:
    """Test close() flushes and context manager auto-closes."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="r1", log_path=log_path) as lg:
        lg.event("inside")

    # Second logger appends to the same file
    with AuditLogger(run_id="r2", log_path=log_path) as lg2:
        lg2.event("second")

    events = _read_events(log_path)
    assert [e["run_id"] for e in events] == ["r1", "r2"]


@pytest.mark.unit
def test_logger_creates_parent_directories(tmp_path: Path) -> None:
    """Test logger creates nested parent directories."""
    nested = tmp_path / "a" / "b" / "events.jsonl"
    lg = AuditLogger(run_id="test", log_path=nested)
    lg.event("test")
    lg.close()

    assert len(_read_events(nested)) == 1


@pytest.mark.unit
def test_generate_run_id_unique() -> None:
    """Test run ids carry a timestamp and differ between calls."""
    first, second = generate_run_id(), generate_run_id()

    assert first != second
    assert "__" in first


# ---------------------------------------------------------------------------
# Engine events
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_detection_and_merge_events(tmp_path: Path, make_record, default_options) -> None:
    """Test engine stages emit schema-valid stage, pair and merge events."""
    records = [
        make_record("Alpha", doi="10.1000/a"),
        make_record("Alpha", doi="10.1000/a", year=2020),
        make_record("Beta"),
    ]
    path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="r", log_path=path, min_level="DEBUG") as lg:
        groups = detect_duplicates(records, default_options, logger=lg)
        remove_duplicates(records, default_options, logger=lg)

    events = _read_events(path)
    for evt in events:
        jsonschema.validate(evt, EVENT_SCHEMA)

    assert len(groups) == 1
    names = [e["event"] for e in events]
    assert names[:3] == ["stage_started", "duplicate_pair", "stage_finished"]

    finished = events[2]
    assert finished["stage"] == "duplicate_detection"
    assert finished["data"]["counters"]["groups"] == 1
    assert finished["data"]["counters"]["duplicate_edges"] == 1

    [merged] = [e for e in events if e["event"] == "group_merged"]
    assert merged["index"] == 0
    assert merged["stage"] == "merge"
    assert merged["data"]["merged_from"] == 2
    assert merged["data"]["strategy"] == "doi"
