"""Pointer and touch interaction controller.

Turns raw pointer input on the time grid into at most one intent per
gesture: select an empty slot, select an existing event, or move an event.

States::

    IDLE -> ARMED_CLICK (mouse press on an event)
         -> PENDING_LONG_PRESS (touch press anywhere)
    ARMED_CLICK -> DRAGGING (moved past threshold, moving enabled)
    PENDING_LONG_PRESS -> DRAGGING (long-press timer fired)
                       -> IDLE (moved past threshold first; gesture void)
    any -> IDLE (release, or cancel)

Mouse presses on empty space never enter a gesture; creation happens on the
following click. Touch creation requires the long-press path so scrolling
never books a lesson.

Timing is driven by the host: every input carries ``at_ms`` and the host's
long-press timer calls ``tick``. All points are grid-relative (see
``coordinates.GridSurface``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum

from loguru import logger

from coachcal.config.settings import GridSettings, settings
from coachcal.calendar.callbacks import CalendarCallbacks
from coachcal.calendar.coordinates import GhostPosition, GridPoint, day_index_at, snap_point
from coachcal.calendar.models import (
    EventMove,
    EventSelection,
    GridLayout,
    Intent,
    LessonEvent,
    RenderedEvent,
    SlotSelection,
    VisibleWindow,
)


class Modality(StrEnum):
    MOUSE = "mouse"
    TOUCH = "touch"


class GestureState(StrEnum):
    IDLE = "idle"
    ARMED_CLICK = "armed_click"
    PENDING_LONG_PRESS = "pending_long_press"
    DRAGGING = "dragging"


class DragMode(StrEnum):
    PLACE = "place"  # long-press on empty space creates a slot
    MOVE = "move"  # relocate an existing event


@dataclass
class DragIntent:
    """Live state of an active drag.

    ``windows`` and ``column_width`` are captured when the drag starts so a
    re-render mid-drag cannot change where the drop lands.
    """

    mode: DragMode
    pointer_offset_px: float
    ghost: GhostPosition
    windows: tuple[VisibleWindow, ...]
    column_width: float
    source_event: RenderedEvent | None = None


@dataclass
class _Gesture:
    pointer_id: int
    modality: Modality
    origin: GridPoint
    pressed_at_ms: int
    target: RenderedEvent | None = None
    long_press_deadline_ms: int | None = None
    drag: DragIntent | None = None


def _resource_of(event: LessonEvent) -> object:
    return event.resource if event.resource is not None else event


def _selection_for(event: LessonEvent) -> EventSelection:
    return EventSelection(id=event.id, resource=_resource_of(event), kind=event.kind)


class InteractionController:
    """Gesture state machine for one time grid.

    Only one gesture is tracked at a time; input from any other pointer is
    ignored until the active gesture ends.
    """

    def __init__(
        self,
        layout: GridLayout | None = None,
        callbacks: CalendarCallbacks | None = None,
        *,
        column_width: float = 120.0,
        config: GridSettings | None = None,
    ):
        self.config = config or settings
        self.callbacks = callbacks or CalendarCallbacks()
        self.layout = layout or GridLayout()
        self.column_width = column_width
        self._state = GestureState.IDLE
        self._gesture: _Gesture | None = None
        self._suppress_clicks_until_ms: int | None = None

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def drag(self) -> DragIntent | None:
        if self._gesture is None:
            return None
        return self._gesture.drag

    @property
    def ghost(self) -> GhostPosition | None:
        drag = self.drag
        return drag.ghost if drag is not None else None

    @property
    def dragged_event_id(self) -> str | None:
        """Id of the event whose original box should render dimmed."""
        drag = self.drag
        if drag is None or drag.source_event is None:
            return None
        return drag.source_event.id

    @property
    def long_press_deadline_ms(self) -> int | None:
        if self._state != GestureState.PENDING_LONG_PRESS or self._gesture is None:
            return None
        return self._gesture.long_press_deadline_ms

    def rebind(self, layout: GridLayout) -> None:
        """Use a freshly rendered layout for future gestures."""
        self.layout = layout

    def resize(self, column_width: float) -> None:
        self.column_width = column_width

    def press(
        self,
        point: GridPoint,
        *,
        at_ms: int,
        modality: Modality = Modality.MOUSE,
        pointer_id: int = 0,
        event_id: str | None = None,
    ) -> GestureState:
        """Pointer down on the grid.

        Args:
            point: Grid-relative press position
            at_ms: Event timestamp in milliseconds
            modality: Mouse or touch
            pointer_id: Identifier of the pointer/touch
            event_id: Event under the pointer if the host already knows it;
                otherwise the layout is hit-tested

        Returns:
            The controller state after the press
        """
        if self._gesture is not None:
            logger.debug(f"[GESTURE] Ignoring pointer {pointer_id}; pointer {self._gesture.pointer_id} is active")
            return self._state
        if not self.layout.windows:
            return self._state
        if modality == Modality.MOUSE and self._suppressing(at_ms):
            # Compatibility mouse events trailing a touch drag
            logger.debug("[GESTURE] Ignoring mouse press that trails a drag")
            return self._state

        if event_id is not None:
            day = day_index_at(point.x, self.column_width, self.layout.day_count)
            target = self.layout.find(event_id, day=day) or self.layout.find(event_id)
        else:
            target = self.layout.hit_test(point.x, point.y, self.column_width)

        gesture = _Gesture(
            pointer_id=pointer_id,
            modality=modality,
            origin=point,
            pressed_at_ms=at_ms,
            target=target,
        )

        if modality == Modality.MOUSE:
            if target is None:
                # Desktop creation happens on click, not on press
                return self._state
            self._begin(GestureState.ARMED_CLICK, gesture)
            return self._state

        if target is None or self.callbacks.can_move(target.kind):
            gesture.long_press_deadline_ms = at_ms + self.config.long_press_ms
        self._begin(GestureState.PENDING_LONG_PRESS, gesture)
        return self._state

    def tick(self, at_ms: int) -> bool:
        """Fire the long-press timer if its deadline has passed.

        Returns:
            True if this call started a drag
        """
        gesture = self._gesture
        if self._state != GestureState.PENDING_LONG_PRESS or gesture is None:
            return False
        deadline = gesture.long_press_deadline_ms
        if deadline is None or at_ms < deadline:
            return False

        mode = DragMode.MOVE if gesture.target is not None else DragMode.PLACE
        self._start_drag(mode)
        self.callbacks.haptic()
        return True

    def move(self, point: GridPoint, *, at_ms: int, pointer_id: int = 0) -> GhostPosition | None:
        """Pointer moved; returns the ghost position while dragging."""
        gesture = self._active(pointer_id)
        if gesture is None:
            return None
        self.tick(at_ms)

        if self._state == GestureState.DRAGGING:
            return self._update_ghost(point)

        if not self._exceeds_threshold(gesture.origin, point):
            return None

        if self._state == GestureState.ARMED_CLICK:
            if gesture.target is not None and self.callbacks.can_move(gesture.target.kind):
                self._start_drag(DragMode.MOVE)
                return self._update_ghost(point)
            return None

        logger.debug("[GESTURE] Touch moved before long-press fired; treating as scroll")
        self._reset()
        return None

    def release(self, point: GridPoint, *, at_ms: int, pointer_id: int = 0) -> Intent | None:
        """Pointer up; emits and returns the gesture's intent, if any."""
        gesture = self._active(pointer_id)
        if gesture is None:
            return None
        self.tick(at_ms)

        intent: Intent | None = None
        if self._state == GestureState.DRAGGING and gesture.drag is not None:
            ghost = self._update_ghost(point)
            if ghost.clamped:
                logger.warning("[GESTURE] Drag released outside the grid; committing nearest in-bounds slot")
            intent = self._commit(gesture.drag)
            self._suppress_clicks_until_ms = at_ms + self.config.click_suppress_ms
        elif gesture.target is not None:
            intent = _selection_for(gesture.target.event)

        self._reset()
        if intent is not None:
            self.callbacks.dispatch(intent)
        return intent

    def click(self, point: GridPoint, *, at_ms: int, modality: Modality = Modality.MOUSE) -> SlotSelection | None:
        """Click on the grid background; creates a slot for mouse input only."""
        if self._suppressing(at_ms):
            logger.debug("[GESTURE] Suppressing click that trails a drag")
            return None

        if modality != Modality.MOUSE or self._gesture is not None or not self.layout.windows:
            return None
        if self.layout.hit_test(point.x, point.y, self.column_width) is not None:
            return None

        ghost = snap_point(
            point,
            column_width=self.column_width,
            day_count=self.layout.day_count,
            config=self.config,
        )
        intent = self._slot_at(self.layout.windows[ghost.day_index], ghost)
        self.callbacks.dispatch(intent)
        return intent

    def cancel(self, pointer_id: int | None = None) -> bool:
        """Abort the active gesture (Escape, pointercancel) without an intent."""
        if self._gesture is None:
            return False
        if pointer_id is not None and pointer_id != self._gesture.pointer_id:
            return False
        logger.info(f"[GESTURE] Cancelled gesture in state {self._state}")
        self._reset()
        return True

    def _suppressing(self, at_ms: int) -> bool:
        until = self._suppress_clicks_until_ms
        if until is None:
            return False
        if at_ms < until:
            return True
        self._suppress_clicks_until_ms = None
        return False

    def _active(self, pointer_id: int) -> _Gesture | None:
        gesture = self._gesture
        if gesture is None or gesture.pointer_id != pointer_id:
            return None
        return gesture

    def _begin(self, state: GestureState, gesture: _Gesture) -> None:
        self._gesture = gesture
        self._state = state
        target = gesture.target.id if gesture.target is not None else None
        logger.debug(f"[GESTURE] {gesture.modality} press -> {state} (target={target})")

    def _reset(self) -> None:
        self._gesture = None
        self._state = GestureState.IDLE

    def _exceeds_threshold(self, origin: GridPoint, point: GridPoint) -> bool:
        threshold = self.config.movement_threshold_px
        return abs(point.x - origin.x) > threshold or abs(point.y - origin.y) > threshold

    def _start_drag(self, mode: DragMode) -> None:
        gesture = self._gesture
        if gesture is None:
            return
        source = gesture.target if mode == DragMode.MOVE else None
        offset = gesture.origin.y - source.top_offset_px if source is not None else 0.0
        windows = self.layout.windows
        ghost = snap_point(
            gesture.origin,
            column_width=self.column_width,
            day_count=len(windows),
            pointer_offset_px=offset,
            config=self.config,
        )
        gesture.drag = DragIntent(
            mode=mode,
            pointer_offset_px=offset,
            ghost=ghost,
            windows=windows,
            column_width=self.column_width,
            source_event=source,
        )
        self._state = GestureState.DRAGGING
        logger.debug(f"[GESTURE] Drag started: mode={mode}, source={source.id if source else None}")

    def _update_ghost(self, point: GridPoint) -> GhostPosition:
        drag = self._gesture.drag
        drag.ghost = snap_point(
            point,
            column_width=drag.column_width,
            day_count=len(drag.windows),
            pointer_offset_px=drag.pointer_offset_px,
            config=self.config,
        )
        return drag.ghost

    def _slot_at(self, window: VisibleWindow, ghost: GhostPosition) -> SlotSelection:
        return SlotSelection(
            start=window.at_minutes(ghost.minutes),
            end=window.at_minutes(ghost.minutes + self.config.default_slot_minutes),
            day_index=ghost.day_index,
        )

    def _commit(self, drag: DragIntent) -> Intent:
        window = drag.windows[drag.ghost.day_index]
        if drag.mode == DragMode.PLACE or drag.source_event is None:
            return self._slot_at(window, drag.ghost)

        source = drag.source_event.event
        # Elapsed-time offsets keep the duration exact across DST
        duration_minutes = source.duration / timedelta(minutes=1)
        return EventMove(
            id=source.id,
            resource=_resource_of(source),
            new_start=window.at_minutes(drag.ghost.minutes),
            new_end=window.at_minutes(drag.ghost.minutes + duration_minutes),
            kind=source.kind,
        )
