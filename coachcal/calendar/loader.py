"""Parse host lesson/block records into ``LessonEvent`` values.

Accepts either a bare list of records or an object with ``lessons`` and
``blocks`` lists, as exported by the host's lesson store. Records keep the
store's field names (``start_time``, ``end_time``, ``color``...).
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from coachcal.calendar.errors import LessonLoadError
from coachcal.calendar.models import EventKind, LessonEvent


def _parse_record(record: Any, index: int, kind: EventKind | None) -> LessonEvent:
    if not isinstance(record, dict):
        raise LessonLoadError("INVALID_RECORD", [f"expected an object, got {type(record).__name__}"], index)
    data = dict(record)
    if kind is not None:
        data.setdefault("kind", kind)
    data["resource"] = record
    try:
        return LessonEvent.model_validate(data)
    except ValidationError as e:
        details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise LessonLoadError("INVALID_RECORD", details, index) from e


def parse_events(payload: Any) -> list[LessonEvent]:
    """Validate decoded JSON into events.

    Raises:
        LessonLoadError: If the payload shape or any record is invalid
    """
    if isinstance(payload, list):
        events = [_parse_record(record, i, None) for i, record in enumerate(payload)]
    elif isinstance(payload, dict):
        lessons = payload.get("lessons") or []
        blocks = payload.get("blocks") or []
        events = [_parse_record(record, i, EventKind.LESSON) for i, record in enumerate(lessons)]
        offset = len(events)
        events.extend(_parse_record(record, offset + i, EventKind.BLOCK) for i, record in enumerate(blocks))
    else:
        raise LessonLoadError("INVALID_RECORD", [f"expected a list or object, got {type(payload).__name__}"])

    logger.debug(f"[LOADER] Parsed {len(events)} events")
    return events


def load_events(path: str | Path) -> list[LessonEvent]:
    """Read and validate a JSON file of lesson/block records."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise LessonLoadError("INVALID_JSON", [f"{path}: {e.msg} at line {e.lineno}"]) from e
    return parse_events(payload)
