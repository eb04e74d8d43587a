"""Tests for parsing host lesson records."""

import json
from datetime import UTC, datetime

import pytest

from coachcal.calendar.errors import LessonLoadError
from coachcal.calendar.loader import load_events, parse_events
from coachcal.calendar.models import EventKind, LessonStatus


def _record(**overrides):
    record = {
        "id": 17,
        "title": "Private lesson - Sam",
        "start_time": "2024-01-15T09:00:00Z",
        "end_time": "2024-01-15T09:45:00Z",
        "status": "Scheduled",
    }
    record.update(overrides)
    return record


class TestParseEvents:
    """Tests for record validation."""

    def test_store_field_names_are_accepted(self):
        """Test store field names are accepted."""
        [event] = parse_events([_record(color_hint="#22C55E", isRecurring=True)])
        assert event.id == "17"
        assert event.start == datetime(2024, 1, 15, 9, 0, tzinfo=UTC)
        assert event.end == datetime(2024, 1, 15, 9, 45, tzinfo=UTC)
        assert event.color == "#22C55E"
        assert event.is_recurring is True
        assert event.kind == EventKind.LESSON

    def test_offsets_are_normalized_to_utc(self):
        """Test offsets are normalized to utc."""
        [event] = parse_events([_record(start_time="2024-01-15T09:00:00-05:00", end_time="2024-01-15T10:00:00-05:00")])
        assert event.start == datetime(2024, 1, 15, 14, 0, tzinfo=UTC)
        assert event.start.utcoffset().total_seconds() == 0

    def test_naive_timestamps_are_utc(self):
        """Test naive timestamps are utc."""
        [event] = parse_events([_record(start_time="2024-01-15T09:00:00", end_time="2024-01-15T10:00:00")])
        assert event.start.tzinfo is not None
        assert event.start == datetime(2024, 1, 15, 9, 0, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("raw", "status"),
        [
            ("Completed", LessonStatus.COMPLETED),
            ("no_show", LessonStatus.NO_SHOW),
            ("No Show", LessonStatus.NO_SHOW),
            ("canceled", LessonStatus.CANCELLED),
        ],
    )
    def test_status_spellings(self, raw, status):
        """Test status spellings."""
        [event] = parse_events([_record(status=raw)])
        assert event.status == status

    def test_resource_is_the_raw_record(self):
        """Test resource is the raw record."""
        record = _record(notes="bring racket")
        [event] = parse_events([record])
        assert event.resource == record

    def test_lessons_and_blocks_object(self):
        """Test lessons and blocks object."""
        payload = {
            "lessons": [_record(id="a")],
            "blocks": [_record(id="b", title="Lunch", status="Scheduled")],
        }
        events = parse_events(payload)
        assert [(e.id, e.kind) for e in events] == [("a", EventKind.LESSON), ("b", EventKind.BLOCK)]

    def test_invalid_record_reports_index(self):
        """Test invalid record reports index."""
        with pytest.raises(LessonLoadError) as exc_info:
            parse_events([_record(), _record(start_time="not a date")])
        assert exc_info.value.code == "INVALID_RECORD"
        assert exc_info.value.index == 1
        assert any("start" in detail for detail in exc_info.value.details)

    def test_non_object_record(self):
        """Test non object record."""
        with pytest.raises(LessonLoadError) as exc_info:
            parse_events(["lesson"])
        assert exc_info.value.index == 0

    def test_unsupported_payload(self):
        """Test a scalar payload is rejected."""
        with pytest.raises(LessonLoadError):
            parse_events("lessons")

    def test_end_before_start_is_accepted(self):
        """Test end before start is accepted."""
        [event] = parse_events([_record(end_time="2024-01-15T08:00:00Z")])
        assert event.duration.total_seconds() < 0


class TestLoadEvents:
    def test_load_from_file(self, tmp_path):
        """Test load from file."""
        path = tmp_path / "lessons.json"
        path.write_text(json.dumps([_record()]), encoding="utf-8")
        events = load_events(path)
        assert [e.id for e in events] == ["17"]

    def test_invalid_json(self, tmp_path):
        """Test undecodable JSON raises INVALID_JSON."""
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(LessonLoadError) as exc_info:
            load_events(path)
        assert exc_info.value.code == "INVALID_JSON"
