# board_events.py

"""
Crossing events and the drop reconciler for LaneKan.

A drag across lanes is a sequence of crossing events, each reconciled on
its own. When the pointer of an in-progress drag enters a lane, the lane
emits a crossing:

{
    "card_id": "0b6e...",
    "from_lane_id": "todo",        # lane the card was last known to be in
    "to_lane_id": "inprogress",    # lane now under the pointer
}

DropReconciler.emit() pushes the crossing onto a FIFO queue and drains it
synchronously. Each pass relocates the card (if it is still where the
crossing says), points the DragCoordinator at the new lane, and clears the
signal before the next queued crossing is taken. A crossing emitted while a
pass is running is queued, never merged with the current one.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Dict, Any

from lanekan.board_core import BoardSession, BoardError
from lanekan.drag_state import DragCoordinator

# Set up logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DroppedCardData:
    card_id: str
    from_lane_id: str
    to_lane_id: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "card_id": self.card_id,
            "from_lane_id": self.from_lane_id,
            "to_lane_id": self.to_lane_id,
        }


class CrossingError(BoardError):
    """A crossing that cannot be applied. Aborts only its own pass."""

    def __init__(self, message: str, crossing: DroppedCardData) -> None:
        super().__init__(message)
        self.crossing = crossing


class SourceLaneNotFound(CrossingError):
    def __init__(self, crossing: DroppedCardData) -> None:
        super().__init__(f"Source lane '{crossing.from_lane_id}' not found", crossing)


class TargetLaneNotFound(CrossingError):
    def __init__(self, crossing: DroppedCardData) -> None:
        super().__init__(f"Target lane '{crossing.to_lane_id}' not found", crossing)


class CardNotFoundInSourceLane(CrossingError):
    def __init__(self, crossing: DroppedCardData) -> None:
        super().__init__(
            f"Card '{crossing.card_id}' not found in source lane '{crossing.from_lane_id}'",
            crossing,
        )


class ReconcileStatus(str, Enum):
    MOVED = "moved"
    SAME_LANE = "same_lane"
    SOURCE_LANE_NOT_FOUND = "source_lane_not_found"
    TARGET_LANE_NOT_FOUND = "target_lane_not_found"
    CARD_NOT_IN_SOURCE = "card_not_in_source"


_ERROR_STATUS = {
    SourceLaneNotFound: ReconcileStatus.SOURCE_LANE_NOT_FOUND,
    TargetLaneNotFound: ReconcileStatus.TARGET_LANE_NOT_FOUND,
    CardNotFoundInSourceLane: ReconcileStatus.CARD_NOT_IN_SOURCE,
}


@dataclass(frozen=True)
class ReconcileResult:
    crossing: DroppedCardData
    status: ReconcileStatus
    error: Optional[str] = None

    @property
    def moved(self) -> bool:
        return self.status is ReconcileStatus.MOVED

    def to_dict(self) -> Dict[str, Any]:
        data = {"status": self.status.value, **self.crossing.to_dict()}
        if self.error:
            data["error"] = self.error
        return data


class DropReconciler:
    """
    Applies crossing events to a BoardSession.

    Args:
        session: Board whose lanes are mutated
        coordinator: Drag slot updated after every relocation
        history_size: Number of recent results kept in `history`
    """

    def __init__(
        self,
        session: BoardSession,
        coordinator: DragCoordinator,
        history_size: int = 50,
    ) -> None:
        self.session = session
        self.coordinator = coordinator
        self.history: deque = deque(maxlen=history_size)
        self._queue: deque = deque()
        self._signal: Optional[DroppedCardData] = None
        self._draining = False

    @property
    def signal(self) -> Optional[DroppedCardData]:
        """The crossing currently being processed, or None once cleared."""
        return self._signal

    @property
    def pending(self) -> int:
        return len(self._queue)

    def emit(self, crossing: DroppedCardData) -> Optional[ReconcileResult]:
        """
        Record a crossing and process every queued crossing in order.

        Returns the result for this crossing, or None when called from
        inside a pass (the outer drain will process it).
        """
        self._queue.append(crossing)
        logger.debug(f"Crossing queued: {crossing}")
        if self._draining:
            return None

        results = self.drain()
        for result in results:
            if result.crossing is crossing:
                return result
        return results[-1] if results else None

    def drain(self) -> List[ReconcileResult]:
        """Process queued crossings one at a time until the queue is empty."""
        results = []
        self._draining = True
        try:
            while self._queue:
                crossing = self._queue.popleft()
                self._signal = crossing
                try:
                    results.append(self.reconcile(crossing))
                finally:
                    # Clearing re-arms the trigger for the next crossing.
                    self._signal = None
        finally:
            if self._queue:
                logger.error(f"Discarding {len(self._queue)} queued crossing(s) after a failed pass")
                self._queue.clear()
            self._draining = False
        return results

    def reconcile(self, crossing: DroppedCardData) -> ReconcileResult:
        """
        Run one reconciliation pass. Taxonomy errors are logged and turned
        into a result; board state is untouched in that case.
        """
        try:
            status = self._apply(crossing)
            result = ReconcileResult(crossing=crossing, status=status)
        except CrossingError as e:
            status = _ERROR_STATUS[type(e)]
            if status is ReconcileStatus.CARD_NOT_IN_SOURCE:
                # Late crossing for a card already relocated in this drag.
                logger.info(f"Ignoring stale crossing: {e}")
            else:
                logger.warning(f"Dropping crossing: {e}")
            result = ReconcileResult(crossing=crossing, status=status, error=str(e))

        self.history.append(result)

        problems = self.session.verify_partition()
        for problem in problems:
            logger.error(f"Partition violated after {crossing}: {problem}")

        return result

    def _apply(self, crossing: DroppedCardData) -> ReconcileStatus:
        session = self.session

        source_lane = session.find_lane(crossing.from_lane_id)
        if source_lane is None:
            raise SourceLaneNotFound(crossing)

        target_lane = session.find_lane(crossing.to_lane_id)
        if target_lane is None:
            raise TargetLaneNotFound(crossing)

        card = source_lane.find_card(crossing.card_id)
        if card is None:
            raise CardNotFoundInSourceLane(crossing)

        logger.debug(f"Source lane: {source_lane.id} ({len(source_lane.cards)} cards)")
        logger.debug(f"Target lane: {target_lane.id} ({len(target_lane.cards)} cards)")

        if source_lane.id == target_lane.id:
            return ReconcileStatus.SAME_LANE

        # The drag is repointed before the insert, so a crossing computed from
        # the coordinator right after this pass starts from the new lane.
        session.move_card(
            card.id,
            source_lane.id,
            target_lane.id,
            before_insert=lambda moved: self.coordinator.update_drag_location(moved.id, moved.lane_id),
        )
        logger.info(f"Moved card {card.id} from lane {source_lane.id} to lane {target_lane.id}")
        return ReconcileStatus.MOVED
