"""Drag and touch reordering as a state machine.

The controller turns a stream of abstract gesture events into reorder
intents.  Mouse and touch front ends feed the same four event kinds
(``press``, ``move``, ``release``, ``cancel``) so there is exactly one
implementation of the drag semantics, and it can be exercised without a
browser or GUI toolkit.

States (built with the ``transitions`` library)::

    idle --press--> pressed --move beyond threshold--> dragging
      ^                |                                  |
      |             release                            release
      |                v                                  v
      +------------- idle <-------- finish -------- resolved

* ``press`` arms the controller when it lands on a draggable element or
  one of its descendants, and only while the session is not busy with
  another action.
* A ``move`` further than the threshold (10 px by default, in either
  axis) starts the drag and captures the source index in the local
  list.  The session stays busy until the gesture ends so a background
  refresh cannot replace the list under the user's finger.
* While dragging, the element under the pointer is reported through
  ``on_target_change`` for visual feedback only.
* ``release`` resolves the drop target (the event target, or a hit test
  of the final point when the source cannot supply one, as with touch).
  A valid target other than the source produces a candidate order by
  removing the source and re‑inserting it at the target's index; the id
  sequence is handed to ``on_reorder``.  Anything else is a no‑op.

Usage::

    controller = InteractionController(session, actions.submit_reorder)
    controller.handle(GestureEvent("press", 5, 5, target=row_a))
    controller.handle(GestureEvent("move", 5, 40, target=row_c))
    controller.handle(GestureEvent("release", 5, 40, target=row_c))
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from transitions import Machine

from request_board.client.session import ListSession


logger = logging.getLogger(__name__)

DEFAULT_DRAG_THRESHOLD = 10

STATES = ["idle", "pressed", "dragging", "resolved"]

# ``dest: None`` marks an internal transition (no exit/enter callbacks).
TRANSITIONS = [
    {"trigger": "press", "source": "idle", "dest": "pressed",
     "conditions": "_can_press", "after": "_arm"},
    {"trigger": "move", "source": "pressed", "dest": "dragging",
     "conditions": "_beyond_threshold", "after": "_start_drag"},
    {"trigger": "move", "source": "dragging", "dest": None, "after": "_track_target"},
    {"trigger": "release", "source": "pressed", "dest": "idle", "after": "_reset"},
    {"trigger": "release", "source": "dragging", "dest": "resolved", "after": "_resolve"},
    {"trigger": "finish", "source": "resolved", "dest": "idle", "after": "_reset"},
    {"trigger": "cancel", "source": ["pressed", "dragging", "resolved"], "dest": "idle",
     "after": "_reset"},
]


class InputSource(str, Enum):
    POINTER = "pointer"
    TOUCH = "touch"


@dataclass(eq=False)
class Element:
    """A node of the rendered list.

    Rows carry the id of the request they show; handles, labels and
    buttons inside a row have no id and point at their parent.
    """

    request_id: Optional[int] = None
    parent: Optional["Element"] = None

    @property
    def draggable(self) -> bool:
        return self.request_id is not None


def closest_draggable(element: Optional[Element]) -> Optional[Element]:
    """Return ``element`` or its nearest draggable ancestor."""
    while element is not None and not element.draggable:
        element = element.parent
    return element


@dataclass(frozen=True)
class GestureEvent:
    """One input event, already normalised from mouse or touch."""

    kind: str  # press / move / release / cancel
    x: float = 0.0
    y: float = 0.0
    target: Optional[Element] = None
    source: InputSource = InputSource.POINTER


HitTest = Callable[[float, float], Optional[Element]]


def move_item(ids: List[int], source_index: int, target_index: int) -> List[int]:
    """Remove the id at ``source_index`` and insert it at ``target_index``."""
    order = list(ids)
    moved = order.pop(source_index)
    order.insert(target_index, moved)
    return order


class InteractionController:
    """Finite state machine coordinating drag gestures into reorders."""

    def __init__(
        self,
        session: ListSession,
        on_reorder: Callable[[List[int]], Any],
        *,
        hit_test: Optional[HitTest] = None,
        threshold: int = DEFAULT_DRAG_THRESHOLD,
        on_target_change: Optional[Callable[[Optional[int]], None]] = None,
    ) -> None:
        self.session = session
        self.on_reorder = on_reorder
        self.hit_test = hit_test
        self.threshold = threshold
        self.on_target_change = on_target_change

        self.source_id: Optional[int] = None
        self.source_index: Optional[int] = None
        self.drop_target_id: Optional[int] = None
        self.last_candidate: Optional[List[int]] = None
        self._origin = (0.0, 0.0)
        self._busy = ExitStack()

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            ignore_invalid_triggers=True,
            send_event=True,
        )

    def handle(self, event: GestureEvent) -> None:
        """Feed one gesture event to the state machine."""
        if event.kind not in ("press", "move", "release", "cancel"):
            raise ValueError(f"Unknown gesture event: {event.kind!r}")
        try:
            self.trigger(event.kind, gesture=event)
        finally:
            # A drop always ends the gesture, even if on_reorder raised.
            if self.state == "resolved":
                self.finish()

    # ------------------------------------------------------------------
    # Target resolution
    # ------------------------------------------------------------------
    def _element_at(self, gesture: GestureEvent) -> Optional[Element]:
        element = gesture.target
        if element is None and self.hit_test is not None:
            element = self.hit_test(gesture.x, gesture.y)
        return closest_draggable(element)

    def _set_drop_target(self, request_id: Optional[int]) -> None:
        if request_id == self.drop_target_id:
            return
        self.drop_target_id = request_id
        if self.on_target_change is not None:
            self.on_target_change(request_id)

    # ------------------------------------------------------------------
    # Conditions and callbacks
    # ------------------------------------------------------------------
    def _can_press(self, event) -> bool:
        if self.session.is_busy:
            return False
        return self._element_at(event.kwargs["gesture"]) is not None

    def _arm(self, event) -> None:
        gesture: GestureEvent = event.kwargs["gesture"]
        self.source_id = self._element_at(gesture).request_id
        self._origin = (gesture.x, gesture.y)

    def _beyond_threshold(self, event) -> bool:
        gesture: GestureEvent = event.kwargs["gesture"]
        dx = abs(gesture.x - self._origin[0])
        dy = abs(gesture.y - self._origin[1])
        return dx > self.threshold or dy > self.threshold

    def _start_drag(self, event) -> None:
        self._busy.enter_context(self.session.busy())
        self.source_index = self.session.index_of(self.source_id)
        logger.debug("Drag started on request %s (index %s)", self.source_id, self.source_index)
        self._track_target(event)

    def _track_target(self, event) -> None:
        element = self._element_at(event.kwargs["gesture"])
        if element is None or element.request_id == self.source_id:
            self._set_drop_target(None)
        else:
            self._set_drop_target(element.request_id)

    def _resolve(self, event) -> None:
        element = self._element_at(event.kwargs["gesture"])
        if element is None or element.request_id == self.source_id:
            logger.debug("Drop ignored: no valid target")
            return
        # Indexes are taken from the list as it is now; a reload during the
        # drag may have shifted or removed rows.
        ids = self.session.ids()
        if self.source_id not in ids or element.request_id not in ids:
            logger.debug("Drop ignored: source or target no longer listed")
            return
        source_index = ids.index(self.source_id)
        target_index = ids.index(element.request_id)
        candidate = move_item(ids, source_index, target_index)
        self.last_candidate = candidate
        logger.info(
            "Moving request %s from index %s to %s", self.source_id, source_index, target_index
        )
        self.on_reorder(candidate)

    def _reset(self, event) -> None:
        self._set_drop_target(None)
        self.source_id = None
        self.source_index = None
        self._origin = (0.0, 0.0)
        self._busy.close()
