"""Host callbacks and intent dispatch.

Every callback is optional; a missing callback turns the matching intent
into a no-op. Exceptions raised by a host callback propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from coachcal.calendar.models import EventKind, EventMove, EventSelection, Intent, SlotSelection


@dataclass
class CalendarCallbacks:
    """Callbacks supplied by the host page.

    Attributes:
        on_select_slot: Empty slot chosen (book a new lesson)
        on_select_event: Existing lesson chosen (view/edit)
        on_move_event: Lesson dragged to a new time; dragging lessons is
            disabled when absent
        on_select_block: Calendar block chosen
        on_move_block: Calendar block dragged; dragging blocks is disabled
            when absent
        on_haptic: Fired when a touch long-press turns into a drag
    """

    on_select_slot: Callable[[SlotSelection], object] | None = None
    on_select_event: Callable[[EventSelection], object] | None = None
    on_move_event: Callable[[EventMove], object] | None = None
    on_select_block: Callable[[EventSelection], object] | None = None
    on_move_block: Callable[[EventMove], object] | None = None
    on_haptic: Callable[[], object] | None = None

    def can_move(self, kind: EventKind) -> bool:
        if kind == EventKind.BLOCK:
            return self.on_move_block is not None
        return self.on_move_event is not None

    def haptic(self) -> None:
        if self.on_haptic is not None:
            self.on_haptic()

    def _target_for(self, intent: Intent) -> Callable[..., object] | None:
        if isinstance(intent, SlotSelection):
            return self.on_select_slot
        if isinstance(intent, EventSelection):
            return self.on_select_block if intent.kind == EventKind.BLOCK else self.on_select_event
        return self.on_move_block if intent.kind == EventKind.BLOCK else self.on_move_event

    def dispatch(self, intent: Intent) -> bool:
        """Deliver an intent to its callback.

        Returns:
            True if a callback was invoked, False if none was registered
        """
        callback = self._target_for(intent)
        if callback is None:
            logger.debug(f"[GESTURE] No callback registered for {type(intent).__name__}; ignoring")
            return False
        logger.info(f"[GESTURE] Emitting {type(intent).__name__}")
        callback(intent)
        return True
