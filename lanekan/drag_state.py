# drag_state.py

"""
Drag state for one board.

A DragCoordinator is a single slot holding the card currently being dragged
and the lane it currently lives in. Card surfaces write it when a drag
starts, lane surfaces read it when the pointer enters them, and the
DropReconciler rewrites the lane after every relocation so that a drag
which keeps going is measured from the card's new lane.

Each BoardController owns its own coordinator; there is no module-level
instance.
"""

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraggedCard:
    card_id: str
    from_lane_id: str

    def to_dict(self) -> dict:
        return {"card_id": self.card_id, "from_lane_id": self.from_lane_id}


class DragCoordinator:
    """Single-writer, multi-reader cell for the in-progress drag."""

    def __init__(self) -> None:
        self._current: Optional[DraggedCard] = None

    @property
    def is_dragging(self) -> bool:
        return self._current is not None

    def peek(self) -> Optional[DraggedCard]:
        return self._current

    def start_drag(self, card_id: str, from_lane_id: str) -> DraggedCard:
        if self._current is not None and self._current.card_id != card_id:
            logger.debug(f"Replacing stale drag of card {self._current.card_id}")
        self._current = DraggedCard(card_id=card_id, from_lane_id=from_lane_id)
        logger.debug(f"Drag started: card {card_id} from lane {from_lane_id}")
        return self._current

    def update_drag_location(self, card_id: str, new_lane_id: str) -> DraggedCard:
        """
        Point the drag at the card's new lane after a relocation.

        The reconciler has just moved card_id, so its view wins even when
        the slot is empty or names another card.
        """
        if self._current is None:
            logger.warning(f"Drag location update for card {card_id} with no drag in progress")
        elif self._current.card_id != card_id:
            logger.warning(
                f"Drag location update for card {card_id} while dragging card {self._current.card_id}"
            )
        self._current = DraggedCard(card_id=card_id, from_lane_id=new_lane_id)
        return self._current

    def end_drag(self) -> Optional[DraggedCard]:
        """Clear the slot, returning what was being dragged (if anything)."""
        previous, self._current = self._current, None
        if previous is not None:
            logger.debug(f"Drag ended: card {previous.card_id} in lane {previous.from_lane_id}")
        return previous
