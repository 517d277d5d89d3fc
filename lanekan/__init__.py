"""
LaneKan: an in-memory kanban board whose cards move between lanes by
drag and drop.
"""

from lanekan.board_core import (
    BoardSession,
    Lane,
    Card,
    BoardError,
    LaneNotFound,
    CardNotFound,
    DuplicateId,
)
from lanekan.drag_state import DragCoordinator, DraggedCard
from lanekan.board_events import (
    DropReconciler,
    DroppedCardData,
    ReconcileResult,
    ReconcileStatus,
    SourceLaneNotFound,
    TargetLaneNotFound,
    CardNotFoundInSourceLane,
)
from lanekan.board_controller import BoardController

__version__ = "0.1.0"
