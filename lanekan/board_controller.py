# board_controller.py

import itertools
import logging
import threading
from typing import Optional, Set, Dict, Any

from lanekan.board_core import BoardSession, BoardError
from lanekan.board_events import DropReconciler, DroppedCardData, ReconcileResult
from lanekan.board_init import init_session
from lanekan.config import Settings
from lanekan.drag_state import DragCoordinator, DraggedCard

# Set up logging
logger = logging.getLogger(__name__)


class BoardController:
    """
    Entry point for the UI layer. Card and lane surfaces report pointer
    events here; the controller drives the DragCoordinator and the
    DropReconciler and exposes the creation and edit actions.

    Creation and edit failures are logged and reported through the return
    value; they never propagate to the caller.
    """

    def __init__(
        self,
        session: Optional[BoardSession] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        if session is None:
            session = init_session(
                self.settings.seed_file,
                name=None if self.settings.seed_file else self.settings.board_name,
                activity_log=self.settings.activity_log,
            )
        self.session = session
        self.coordinator = DragCoordinator()
        self.reconciler = DropReconciler(
            session,
            self.coordinator,
            history_size=self.settings.history_size,
        )
        self.highlighted: Set[str] = set()
        self._lane_names = itertools.count(len(session.lanes) + 1)
        self._card_names = itertools.count(sum(len(l.cards) for l in session.lanes) + 1)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read access for rendering
    # ------------------------------------------------------------------

    @property
    def dragged(self) -> Optional[DraggedCard]:
        return self.coordinator.peek()

    @property
    def signal(self) -> Optional[DroppedCardData]:
        return self.reconciler.signal

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            data = self.session.snapshot()
            dragged = self.coordinator.peek()
            data["dragging"] = dragged.to_dict() if dragged else None
            data["highlighted"] = sorted(self.highlighted)
            return data

    # ------------------------------------------------------------------
    # Card surface events
    # ------------------------------------------------------------------

    def on_drag_start(self, card_id: str, lane_id: str) -> None:
        with self._lock:
            self.coordinator.start_drag(card_id, lane_id)

    def on_drag_continue(self) -> None:
        logger.debug("Dragging card")

    # ------------------------------------------------------------------
    # Lane surface events
    # ------------------------------------------------------------------

    def on_pointer_enter(self, lane_id: str) -> Optional[ReconcileResult]:
        """
        The pointer entered a lane. During a drag this emits a crossing from
        the card's current lane to this one and returns its result.
        """
        with self._lock:
            dragged = self.coordinator.peek()
            if dragged is None:
                return None
            self.highlighted.add(lane_id)
            crossing = DroppedCardData(
                card_id=dragged.card_id,
                from_lane_id=dragged.from_lane_id,
                to_lane_id=lane_id,
            )
            return self.reconciler.emit(crossing)

    def on_pointer_leave(self, lane_id: str) -> None:
        with self._lock:
            self.highlighted.discard(lane_id)

    def on_drop(self, lane_id: str) -> Optional[DraggedCard]:
        """Pointer released over a lane: the drag is finished."""
        with self._lock:
            self.highlighted.discard(lane_id)
            dropped = self.coordinator.end_drag()
            if dropped is not None:
                logger.info(f"Dropped card {dropped.card_id} on lane {lane_id}")
            return dropped

    def on_drag_end(self) -> Optional[DraggedCard]:
        """
        The drag gesture ended, with or without a drop. Always clears the
        coordinator and every highlight.
        """
        with self._lock:
            self.highlighted.clear()
            ended = self.coordinator.end_drag()
            if ended is not None:
                logger.info(f"Drag of card {ended.card_id} ended outside any lane")
            return ended

    # ------------------------------------------------------------------
    # Creation and edits
    # ------------------------------------------------------------------

    def add_lane(self, name: Optional[str] = None, lane_id: Optional[str] = None) -> Optional[str]:
        with self._lock:
            if name is None:
                name = f"Lane {next(self._lane_names)}"
            try:
                return self.session.add_lane(name, lane_id=lane_id)
            except BoardError as e:
                logger.warning(f"Could not add lane: {e}")
                return None

    def add_card(
        self,
        lane_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        card_id: Optional[str] = None,
    ) -> Optional[str]:
        with self._lock:
            if name is None:
                number = next(self._card_names)
                name = f"Card {number}"
                if description is None:
                    description = f"Description for Card {number}"
            try:
                return self.session.add_card(lane_id, name, description or "", card_id=card_id)
            except BoardError as e:
                logger.warning(f"Could not add card: {e}")
                return None

    def rename_lane(self, lane_id: str, name: str) -> bool:
        return self._edit(self.session.commit_lane_edit, lane_id, name)

    def update_card(self, card_id: str, name: str, description: str) -> bool:
        return self._edit(self.session.commit_card_edit, card_id, name, description)

    def begin_lane_edit(self, lane_id: str) -> bool:
        return self._edit(self.session.begin_lane_edit, lane_id)

    def cancel_lane_edit(self, lane_id: str) -> bool:
        return self._edit(self.session.cancel_lane_edit, lane_id)

    def begin_card_edit(self, card_id: str) -> bool:
        return self._edit(self.session.begin_card_edit, card_id)

    def cancel_card_edit(self, card_id: str) -> bool:
        return self._edit(self.session.cancel_card_edit, card_id)

    def _edit(self, action, *args) -> bool:
        with self._lock:
            try:
                result = action(*args)
            except BoardError as e:
                logger.warning(f"{action.__name__} failed: {e}")
                return False
            return result is not False

    # ------------------------------------------------------------------
    # Event dispatch (UI component batches and replay scripts)
    # ------------------------------------------------------------------

    def dispatch(self, event: Dict[str, Any]):
        """
        Route one event dict to its handler and return the handler's result.

        Raises:
            BoardError: Unknown event type or a missing required field
        """
        event_type = event.get("type")
        handler = _DISPATCH.get(event_type)
        if handler is None:
            raise BoardError(f"Unknown event type {event_type!r}")
        try:
            return handler(self, event)
        except KeyError as e:
            raise BoardError(f"Event {event_type!r} is missing field {e}") from e


_DISPATCH = {
    "drag_start": lambda c, e: c.on_drag_start(e["card_id"], e["lane_id"]),
    "drag_continue": lambda c, e: c.on_drag_continue(),
    "pointer_enter": lambda c, e: c.on_pointer_enter(e["lane_id"]),
    "pointer_leave": lambda c, e: c.on_pointer_leave(e["lane_id"]),
    "drop": lambda c, e: c.on_drop(e["lane_id"]),
    "drag_end": lambda c, e: c.on_drag_end(),
    "add_lane": lambda c, e: c.add_lane(e.get("name"), lane_id=e.get("lane_id")),
    "add_card": lambda c, e: c.add_card(
        e["lane_id"], e.get("name"), e.get("description"), card_id=e.get("card_id")
    ),
    "rename_lane": lambda c, e: c.rename_lane(e["lane_id"], e["name"]),
    "update_card": lambda c, e: c.update_card(e["card_id"], e["name"], e.get("description", "")),
}
