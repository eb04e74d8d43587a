"""Side-by-side layout for overlapping events.

Events are split into overlap groups (maximal chains of transitively
overlapping events) and each group is greedily colored into the minimum
number of columns. Every event in a group shares the group's column count;
separate groups are independent and may each use the full column width.

Pure and deterministic: the same input in the same order always yields the
same assignment.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger

from coachcal.calendar.models import RenderedEvent


def _sort_key(ev: RenderedEvent) -> tuple[datetime, float]:
    # Longer events first among equal starts so they anchor column 0
    return ev.clipped_start, -ev.clipped_minutes


def group_overlapping(events: list[RenderedEvent]) -> list[list[int]]:
    """Partition event indices into overlap groups.

    Args:
        events: Placed events, in any order

    Returns:
        Groups of indices into ``events``, each group in sorted order
    """
    order = sorted(range(len(events)), key=lambda i: _sort_key(events[i]))

    groups: list[list[int]] = []
    group_end: datetime | None = None
    for i in order:
        ev = events[i]
        if group_end is None or ev.clipped_start >= group_end:
            groups.append([i])
            group_end = ev.clipped_end
        else:
            groups[-1].append(i)
            group_end = max(group_end, ev.clipped_end)
    return groups


def _color_group(events: list[RenderedEvent], group: list[int]) -> dict[int, int]:
    """Greedy first-fit column assignment within one group."""
    column_ends: list[datetime] = []
    columns: dict[int, int] = {}
    for i in group:
        ev = events[i]
        column = None
        for candidate, column_end in enumerate(column_ends):
            if column_end <= ev.clipped_start:
                column = candidate
                break
        if column is None:
            column = len(column_ends)
            column_ends.append(ev.clipped_end)
        else:
            column_ends[column] = ev.clipped_end
        columns[i] = column
    return columns


def assign_columns(events: list[RenderedEvent]) -> list[RenderedEvent]:
    """Assign ``column_index``/``column_count`` to every event.

    Timing fields are untouched and the result keeps the input order.
    """
    assigned: list[RenderedEvent | None] = [None] * len(events)
    groups = group_overlapping(events)
    for group in groups:
        columns = _color_group(events, group)
        column_count = max(columns.values()) + 1
        for i, column in columns.items():
            assigned[i] = events[i].with_columns(column, column_count)

    if groups:
        logger.debug(
            f"[OVERLAP] {len(events)} events in {len(groups)} groups",
            widest=max(ev.column_count for ev in assigned if ev is not None),
        )
    return [ev for ev in assigned if ev is not None]
